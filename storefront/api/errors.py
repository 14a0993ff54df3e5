"""Response helpers shared by route handlers and app-level exception handlers."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from storefront.schemas.messages import first_validation_message

INTERNAL_ERROR_MESSAGE = "Internal server error..."


def validation_failed(message: str) -> JSONResponse:
    """400 whose body is the bare validation message."""
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=message)


def error_message(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": True, "msg": msg})


def internal_error() -> PlainTextResponse:
    """Generic 500; the cause is reported to operators, never to the caller."""
    return PlainTextResponse(
        INTERNAL_ERROR_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Turn FastAPI parameter validation failures into 400 responses."""
    return validation_failed(first_validation_message(exc.errors()))


__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "error_message",
    "internal_error",
    "request_validation_exception_handler",
    "validation_failed",
]
