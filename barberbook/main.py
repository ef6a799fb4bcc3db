"""
FastAPI application for barbershop booking

Booking and availability over HTTP; notifications and calendar sync run in workers
"""
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from contextlib import asynccontextmanager
import logging

from barberbook.api.v1.router import api_v1_router
from barberbook.config.settings import get_settings
from barberbook.core.exceptions import register_exception_handlers
from barberbook.core.middleware import correlation_id_middleware, request_logging_middleware
from barberbook.core.monitoring import health_router
from barberbook.utils.my_logging import setup_logging
from barberbook.webhooks.router import webhook_router

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    logger.info(f"{settings.APP_NAME} API starting up ({settings.BUSINESS_TIMEZONE}, "
                f"availability from {settings.AVAILABILITY_SOURCE})")

    routes = sorted(
        (route.path, method)
        for route in app.routes if isinstance(route, APIRoute)
        for method in route.methods
    )
    for path, method in routes:
        logger.debug(f"  {method:8} {path}")
    logger.info(f"Total routes registered: {len(routes)}")

    yield

    # Shutdown
    logger.info(f"{settings.APP_NAME} API shutting down...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Barbershop appointment booking with availability, SMS and calendar sync",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")
    app.include_router(webhook_router, prefix="/webhooks", tags=["webhooks"])

    @app.get("/")
    async def root():
        return {
            "service": f"{settings.APP_NAME} API",
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1",
                "health": "/health",
                "webhooks": "/webhooks/",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "barberbook.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
