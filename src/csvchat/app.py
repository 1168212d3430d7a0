"""FastAPI application entry point."""

from fastapi import FastAPI

from csvchat import __version__
from csvchat.api.chat import health_router
from csvchat.api.chat import router as chat_router
from csvchat.api.exceptions import register_exception_handlers
from csvchat.configs.config import get_app_config
from csvchat.core.service.metrics import setup_metrics
from csvchat.infra.lifespan import lifespan
from csvchat.infra.logging import setup_logging
from csvchat.infra.telemetry import init_telemetry


def get_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Middleware (metrics, tracing) and exception handlers are attached
    here, before the app starts; the API key is checked in ``lifespan``.
    """
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="csvchat",
        description="Ask natural-language questions about a CSV file",
        version=__version__,
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    setup_metrics(app, config.metrics, config.tracing)
    init_telemetry(app, config.tracing)

    app.include_router(chat_router)
    app.include_router(health_router)

    return app


app = get_app()


def run() -> None:
    """Console entry point: serve ``csvchat.app:app`` with uvicorn."""
    import uvicorn

    config = get_app_config()
    uvicorn.run("csvchat.app:app", host=config.api.host, port=config.api.port)
