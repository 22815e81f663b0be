"""
FastAPI application entry point for the BizDesk backend.

Layout:
    /api/*     api_app  - JSON endpoints (gzip + cache headers)
    /static/*  static assets
    /*         web_app  - HTML pages (cookie encryption, appearance,
                          shared context, preload links)

Each group has its own app so its middleware only wraps its own routes.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from bizdesk.config import settings
from bizdesk.middleware import api_middleware, apply_middleware, web_middleware
from bizdesk.routes.auth import router as auth_router
from bizdesk.routes.categories import router as categories_router
from bizdesk.routes.dashboard import router as dashboard_router
from bizdesk.routes.health import router as health_router
from bizdesk.routes.inventories import router as inventories_router
from bizdesk.routes.orders import router as orders_router
from bizdesk.routes.product_transactions import router as product_transactions_router
from bizdesk.routes.products import router as products_router
from bizdesk.routes.sales_analytics import router as sales_analytics_router
from bizdesk.routes.toga_rentals import router as toga_rentals_router
from bizdesk.utils.logging import configure_logging
from bizdesk.web.routes import STATIC_DIR, router as web_router

configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: CORS_ORIGINS, comma separated
    - anything else: all origins, for local development

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = [origin.strip() for origin in settings.CORS_ORIGINS if origin.strip()]
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning("CORS_ORIGINS not set in production. No web origins allowed.")
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Log detailed validation errors for debugging.

    This helps diagnose 422 errors from the frontend.
    """
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "details": jsonable_encoder(exc.errors()),
        }
    )


def create_api_app() -> FastAPI:
    api = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="REST API for products, inventory, orders and toga rentals",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    api.add_exception_handler(RequestValidationError, validation_exception_handler)

    apply_middleware(api, api_middleware())

    api.include_router(health_router)
    api.include_router(auth_router)
    api.include_router(dashboard_router)
    api.include_router(categories_router)
    api.include_router(products_router)
    api.include_router(inventories_router)
    api.include_router(orders_router)
    api.include_router(product_transactions_router)
    api.include_router(sales_analytics_router)
    api.include_router(toga_rentals_router)

    return api


def create_web_app() -> FastAPI:
    web = FastAPI(title=settings.APP_NAME, docs_url=None, redoc_url=None, openapi_url=None)

    apply_middleware(web, web_middleware(settings))

    web.include_router(health_router)
    web.include_router(web_router)

    return web


api_app = create_api_app()
web_app = create_web_app()

app = FastAPI(title=settings.APP_NAME, docs_url=None, redoc_url=None, openapi_url=None)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/api", api_app)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.mount("/", web_app)

logger.info("FastAPI app initialized successfully")
