"""HRMS — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from hrms.common.exceptions import register_exception_handlers
from hrms.common.logging_config import RequestLoggingMiddleware, setup_logging
from hrms.common.rate_limit import limiter
from hrms.config import settings
from hrms.database import engine
from hrms.employees.router import router as employees_router
from hrms.jurisdictions.router import router as jurisdictions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info(
        "HRMS starting (environment=%s, prefix=%s, idgen=%s, boundary validation=%s)",
        settings.ENVIRONMENT,
        settings.api_prefix,
        "on" if settings.IDGEN_ENABLED else "off",
        "on" if settings.BOUNDARY_VALIDATION_ENABLED else "off",
    )
    yield
    await engine.dispose()
    logger.info("HRMS stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="HRMS",
        description="Multi-tenant employee and jurisdiction registry",
        version="3.0.0",
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Access log
    app.add_middleware(RequestLoggingMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no tenant header)
    @app.get("/health", tags=["system"])
    async def health_check():
        return {"status": "UP"}

    # Register routers; jurisdictions first so "/jurisdictions" never matches "/{id}"
    app.include_router(jurisdictions_router, prefix=settings.api_prefix)
    app.include_router(employees_router, prefix=settings.api_prefix)

    return app


app = create_app()
