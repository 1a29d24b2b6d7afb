"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    AuthenticationRequiredException,
    AuthorizationException,
    DomainException,
    InvalidStateException,
    NotFoundException,
    StorageException,
    ValidationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_body(code: str, message: str, details: list | None = None) -> dict:
    body = {
        "error": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details is not None:
        body["details"] = details
    return body


def _request_field(loc) -> str:
    # ("body", "amount") -> "amount"; ("query", "start_date") -> "start_date"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(ValidationException)
    async def validation_handler(
        request: Request,
        exc: ValidationException,
    ) -> JSONResponse:
        """Handle field-level validation errors."""
        logger.info(
            "validation_failed",
            request_id=get_request_id(),
            fields=[e.field for e in exc.errors],
        )
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message, [e.to_dict() for e in exc.errors]),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report malformed request bodies and parameters like domain validation errors."""
        details = [
            {"field": _request_field(err.get("loc", ())), "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.info(
            "request_validation_failed",
            request_id=get_request_id(),
            fields=[d["field"] for d in details],
        )
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "VALIDATION_ERROR",
                "; ".join(f"{d['field']}: {d['message']}" for d in details),
                details,
            ),
        )

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle missing transactions, accounts and reference rows."""
        return JSONResponse(
            status_code=404,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(InvalidStateException)
    async def invalid_state_handler(
        request: Request,
        exc: InvalidStateException,
    ) -> JSONResponse:
        """Handle operations on a transaction that is no longer pending."""
        return JSONResponse(
            status_code=409,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(AuthenticationRequiredException)
    async def authentication_handler(
        request: Request,
        exc: AuthenticationRequiredException,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(AuthorizationException)
    async def authorization_handler(
        request: Request,
        exc: AuthorizationException,
    ) -> JSONResponse:
        """Handle role and ownership violations."""
        logger.warning(
            "forbidden",
            request_id=get_request_id(),
            message=exc.message,
        )
        return JSONResponse(
            status_code=403,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(StorageException)
    async def storage_error_handler(
        request: Request,
        exc: StorageException,
    ) -> JSONResponse:
        """Handle database failures."""
        logger.error(
            "storage_error",
            request_id=get_request_id(),
            message=exc.message,
        )
        return JSONResponse(
            status_code=503,
            content=_error_body(exc.code, "Storage temporarily unavailable. Please try again."),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred."),
        )
