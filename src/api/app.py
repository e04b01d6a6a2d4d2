import logging
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api.error import register_error_handlers
from src.api.routes import recurring_invoices

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        config: ApplicationConfig-like object

    Returns:
        Configured FastAPI app
    """
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        import sentry_sdk

        sentry_sdk.init(dsn=config.DSN_SENTRY, environment=config.SENTRY_ENVIRONMENT)
        logger.info(f"Sentry enabled for environment {config.SENTRY_ENVIRONMENT}")

    app = FastAPI(
        title="Recurring Invoice Service",
        description="Schedules recurring invoice series and drives their generation",
        version="1.0.0",
    )

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start_time = time.time()
            response = await call_next(request)
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)"
            )
            return response

    register_error_handlers(app)
    app.include_router(recurring_invoices.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
