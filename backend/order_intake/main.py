"""Punto de entrada principal para la aplicación FastAPI."""

import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from order_intake.api.routes.health import router as health_router
from order_intake.channels.vapi.router import router as vapi_router
from order_intake.core.config import settings
from order_intake.core.logging import configure_logging, get_logger, resolve_log_level
from order_intake.core.middleware import RequestLoggingMiddleware


def create_app() -> FastAPI:
    """Crea y configura la instancia de FastAPI."""
    default_log_level = logging.DEBUG if settings.environment != "production" else logging.INFO
    log_level = resolve_log_level(settings.log_level, default=default_log_level)
    per_logger_files: dict[str, str] | None = None
    if settings.log_file_path:
        log_dir = Path(settings.log_file_path).parent
        per_logger_files = {
            "order_intake.request": str(log_dir / "request.log"),
            "order_intake.channels.vapi": str(log_dir / "vapi.log"),
        }

    configure_logging(
        level=log_level,
        log_file=settings.log_file_path,
        per_logger_files=per_logger_files,
    )

    app = FastAPI(title="Order Intake API", version="0.1.0")

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router)
    app.include_router(vapi_router)

    @app.get("/", response_class=PlainTextResponse, tags=["info"])
    def root() -> str:
        return "Webhook listener is running"

    get_logger("order_intake").info(
        "app.created", extra={"environment": settings.environment}
    )
    return app


app = create_app()


def run() -> None:
    """Levanta el servidor HTTP en el host/puerto configurados."""
    get_logger("order_intake").info(
        "app.listening", extra={"host": settings.host, "port": settings.port}
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
