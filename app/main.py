"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.api.routes import api_router
from app.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import RequestLoggingMiddleware
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.core.startup_checks import check_configuration
from app.db.mongo import MongoDB

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


def init_sentry() -> None:
    """Initialize Sentry for error tracking (only if DSN is properly configured)."""
    if not (settings.SENTRY_DSN and settings.SENTRY_DSN.startswith("https://")):
        logger.info("Sentry DSN not configured - error tracking disabled")
        return

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=None,  # Capture all logs
                event_level="ERROR",  # Only send ERROR and above as events
            ),
        ],
        release=settings.APP_VERSION,
        attach_stacktrace=True,
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    check_configuration(settings)
    mongo = MongoDB(
        settings.MONGODB_URI,
        settings.MONGODB_DATABASE,
        max_pool_size=settings.MONGODB_MAX_POOL_SIZE,
        server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    )
    await mongo.connect()
    app.state.mongo = mongo
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    yield
    # Shutdown
    await mongo.close()
    logger.info("%s stopped", settings.APP_NAME)


def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Build the application.

    Tests pass ``use_lifespan=False`` and attach their own ``app.state.mongo``.
    """
    init_sentry()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Job and internship application tracker",
        lifespan=lifespan if use_lifespan else None,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        swagger_ui_parameters={
            "persistAuthorization": True,  # Persist authorization after page refresh
        },
    )

    # Rate limiting (no-op unless production)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    if settings.TRUST_PROXY:
        app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router)

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint."""
        return {
            "message": f"{settings.APP_NAME} is running",
            "version": settings.APP_VERSION,
            "status": "operational",
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    # Local development server; production runs under gunicorn (gunicorn.conf.py)
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        proxy_headers=settings.TRUST_PROXY,
    )
