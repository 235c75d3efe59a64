"""
FastAPI application entry point.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from api.routes import media as media_routes
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from core.config import settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.logging_config import get_logger, configure_logging
from infrastructure.media_sync import MediaSyncRuntime, bootstrap_media_sync


# Configure logging at the entry point, not as an import side effect
configure_logging()
logger = get_logger(__name__)


def create_app(runtime: Optional[MediaSyncRuntime] = None) -> FastAPI:
    """Build the application.

    With ``runtime`` given (tests, embedding), the lifespan skips bootstrap
    and serves that runtime instead.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if runtime is not None:
            app.state.media_sync = runtime
        else:
            try:
                app.state.media_sync = await bootstrap_media_sync(settings)
            except Exception as exc:
                # No silent half-configured start: report and abort
                logger.error("media_sync_init_failed", error=str(exc), error_type=type(exc).__name__)
                raise
        yield
        app.state.media_sync = None
        logger.info("application_shutdown", message="Application shutdown")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        description="Offloads the media library to S3 and rewrites attachment URLs to the CDN",
    )
    if runtime is not None:
        app.state.media_sync = runtime

    # Middleware runs bottom-up: request id first, then logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(media_routes.router, prefix="/api/v1")

    @app.get("/", tags=["Root"])
    async def root():
        return success_response(
            data={
                "name": settings.PROJECT_NAME,
                "version": settings.VERSION,
                "docs": "/docs",
            },
        )

    @app.get("/health", tags=["Health"])
    async def health_check():
        return success_response(data={"status": "healthy"})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
