"""
Quick demo script to run the BizDesk backend locally.

Starts uvicorn with reload and prints the main entry points.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting BizDesk Backend Demo")
    print("=" * 60)
    print()
    print("📌 Pages:")
    print("   - Dashboard:     http://localhost:8000/dashboard")
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/api/health")
    print("   - Departments:   GET  http://localhost:8000/api/toga-rentals/departments")
    print("   - Products:      GET  http://localhost:8000/api/products")
    print("   - Orders:        GET  http://localhost:8000/api/orders")
    print("   - Dashboard:     GET  http://localhost:8000/api/dashboard")
    print("   - Sales:         GET  http://localhost:8000/api/sales-analytics/overview")
    print("   - API Docs:           http://localhost:8000/api/docs")
    print()
    print("🔐 Authentication:")
    print("   GET /api/user requires:")
    print("   Authorization: Bearer <token>")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/api/inventories/1/restock" \\')
    print('     -H "Content-Type: application/json" \\')
    print("     -d '{\"quantity\": 25}'")
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "bizdesk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
