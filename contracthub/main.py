"""
FastAPI application factory.

Assembles the app: logging, middleware, exception handlers, routers and
the health probe.  The database schema is created by
`python -m contracthub.scripts.create_admin`, not at startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from contracthub.controllers.admin_controller import router as admin_router
from contracthub.controllers.auth_controller import router as auth_router
from contracthub.controllers.contract_controller import router as contract_router
from contracthub.controllers.customer_controller import router as customer_router
from contracthub.controllers.portal_controller import router as portal_router
from contracthub.controllers.product_controller import router as product_router
from contracthub.controllers.reseller_controller import router as reseller_router
from contracthub.controllers.staff_controller import router as staff_router
from contracthub.core.config import settings
from contracthub.core.database import check_database_connection, engine
from contracthub.core.errors import register_exception_handlers
from contracthub.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from contracthub.core.rate_limit import limiter, rate_limit_exceeded_handler
from contracthub.models import Base  # noqa: F401 (registers every model)
from contracthub.schemas import ApiResponse, HealthOut

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s v%s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    if settings.DEBUG:
        logger.warning("DEBUG is enabled; do not use in production")
    yield
    await engine.dispose()
    logger.info("Database engine disposed.")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── Middleware (last added runs first) ───────────────────────────
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    # ── Error handling ───────────────────────────────────────────────
    register_exception_handlers(app)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # ── Register routers ─────────────────────────────────────────────
    app.include_router(auth_router)
    app.include_router(customer_router)
    app.include_router(product_router)
    app.include_router(reseller_router)
    app.include_router(contract_router)
    app.include_router(staff_router)
    app.include_router(admin_router)
    app.include_router(portal_router)

    # ── Health check ─────────────────────────────────────────────────
    @app.get("/health", tags=["Health"], response_model=ApiResponse[HealthOut])
    async def health():
        database_ok = await check_database_connection()
        return ApiResponse(
            data=HealthOut(
                status="ok" if database_ok else "degraded",
                database="connected" if database_ok else "unavailable",
                version=settings.APP_VERSION,
            )
        )

    return app


app = create_app()
