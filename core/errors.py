# core/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Operational error raised by services; carries the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def _format_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid request"))
    return ", ".join(messages) or "Invalid request"


def is_duplicate_key_error(exc: IntegrityError) -> bool:
    text = str(exc.orig) if exc.orig is not None else str(exc)
    return "duplicate key" in text or "UNIQUE constraint" in text


# ========================================
# 🧯 Exception handlers
# ========================================
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return error_response(exc.status_code, "Route not found")
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, _format_validation_error(exc))


async def integrity_error_handler(request: Request, exc: IntegrityError):
    if is_duplicate_key_error(exc):
        return error_response(status.HTTP_409_CONFLICT, "Resource already exists")
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(status.HTTP_400_BAD_REQUEST, "A database constraint was violated.")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("❌ Unhandled error on %s %s", request.method, request.url.path)
    message = "Internal server error" if settings.IS_PRODUCTION else str(exc) or "Internal server error"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
