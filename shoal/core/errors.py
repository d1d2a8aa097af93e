"""Domain errors and structured error responses: consistent JSON format for all errors."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("shoal")


class ShoalError(Exception):
    """Base class for errors that map onto a client-facing HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"

    def __str__(self) -> str:
        return self.detail


class NotFoundError(ShoalError):
    """Requested entity doesn't exist in the caller's scope."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, detail: str = "Not found"):
        super().__init__(detail)
        self.detail = detail

    @classmethod
    def fish(cls, fish_id: int) -> "NotFoundError":
        return cls(f"No fish with ID {fish_id}")


class SessionNotFoundError(ShoalError):
    """Session token is unreadable, unknown or expired.

    The token comes from a header value which may not be UTF-8, so the raw
    bytes are kept and decoded lossily for display.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, session_id: bytes):
        self.session_id = session_id
        self.detail = (
            f"Session `{session_id.decode('utf-8', errors='replace')}` not found"
        )
        super().__init__(self.detail)


class NotPermittedError(ShoalError):
    """Mutation attempted without a session."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "A session is required for this operation"):
        super().__init__(detail)
        self.detail = detail


def _error_response(request: Request, status_code: int, detail, **extra) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "status_code": status_code,
            "detail": detail,
            **extra,
            "request_id": request_id,
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(ShoalError)
    async def shoal_exception_handler(request: Request, exc: ShoalError):
        return _error_response(request, exc.status_code, exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(request, exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation error",
            errors=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        # Full detail stays server-side
        logger.exception("Internal server error: %s", exc)
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
        )
