"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from postguard.api.middleware import LoggingMiddleware, RequestContextMiddleware
from postguard.api.routes import router as api_router
from postguard.core.auth.exceptions import AuthError, AuthenticationFailure
from postguard.core.config import Settings, get_settings
from postguard.core.container import Container
from postguard.services.seed import seed_demo_data
from postguard.utils.context import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    container: Container = app.state.container

    if container.settings.seed_demo_data:
        await seed_demo_data(container.users, container.posts, container.auth_service)

    logger.info(
        "Server started",
        app=container.settings.app_name,
        environment=container.settings.environment,
    )

    yield

    logger.info("Server stopped")


def create_app(
    settings: Settings | None = None,
    container: Container | None = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    container = container or Container.build(settings)

    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.container = container

    # Middleware (last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID", "X-Correlation-ID"],
    )

    # Routes
    app.include_router(api_router, prefix="/api")

    # Exception handlers
    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        """Map the authorization error taxonomy to HTTP status codes."""
        headers = None
        if isinstance(exc, AuthenticationFailure):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.exception("Unhandled error", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    @app.get("/health")
    async def health_check():
        """Quick health check endpoint (for load balancers)."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "postguard.main:app",
        host=get_settings().host,
        port=get_settings().port,
        reload=get_settings().reload,
    )
