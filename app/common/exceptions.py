"""
Manejo global de excepciones.

Todas las respuestas de error comparten el mismo cuerpo JSON:

    {
        "statusCode": 404,
        "timestamp": "2025-01-01T12:00:00+00:00",
        "path": "/api/products/...",
        "message": "Producto con ID ... no encontrado"
    }
"""
from datetime import datetime, timezone
from typing import Any, List
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_body(status_code: int, path: str, message: Any) -> dict:
    return {
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": path,
        "message": message,
    }


def format_validation_errors(errors: List[dict]) -> List[str]:
    """Convierte los errores de pydantic en mensajes legibles `campo: mensaje`."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return messages


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"Exception at {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"{exc.status_code} at {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, request.url.path, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = format_validation_errors(exc.errors())
    logger.warning(f"Validation error at {request.url.path}: {messages}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(status.HTTP_400_BAD_REQUEST, request.url.path, messages),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Exception at {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            request.url.path,
            "Error interno del servidor",
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
