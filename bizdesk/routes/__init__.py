"""
FastAPI routers for all API endpoints.

One module per resource (categories, products, inventories, orders,
dashboard, toga rentals) plus health and the current-user endpoint.
Routers carry their own prefix; bizdesk.main includes them in the API app.
"""
