"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (configuration composed once at startup)
- Route registration
- Middleware configuration
- Error handling
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import health_router, payments_router
from core.bootstrap import build_configuration
from core.config import Settings, get_settings
from core.logging import configure_logging, get_logger


logger = get_logger(__name__)


def _cors_origins(settings: Settings) -> list[str]:
    return [origin.strip() for origin in (settings.store_cors or "").split(",") if origin.strip()]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. The backend
    configuration is composed in the lifespan, before any request is
    served; a composition error aborts startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(settings)
        logger.info(
            "Starting commerce backend...",
            environment=settings.environment,
            boot_mode=settings.effective_boot_mode,
        )

        # Raises ConfigurationError on bad input, which aborts the boot
        app.state.configuration = build_configuration(settings)

        logger.info(
            "Commerce backend started",
            host=settings.server_host,
            port=settings.server_port,
            modules=app.state.configuration.module_keys,
        )

        yield

        logger.info("Commerce backend stopped")

    app = FastAPI(
        title="Commerce Backend",
        description=(
            "Commerce backend host.\n\n"
            "Storage, event bus, workflow engine, notification, payment and search "
            "integrations are composed at startup from the credentials present."
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    origins = _cors_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Register routes
    app.include_router(health_router)
    app.include_router(payments_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.server:app",
        host=get_settings().server_host,
        port=get_settings().server_port,
        reload=get_settings().debug,
    )
