"""Error Handlers — global exception handlers translating failures to the uniform envelope.

Invariants:
    - Every error response is {success: false, message} (validation adds `errors`)
    - TaskVaultError → its own http_status and message
    - RequestValidationError → 400, field messages joined with ". "
    - Unmatched routes → 404 "Route <path> not found"
    - Exception (catch-all) → 500, never leaks internal details; stack trace logged only

Design Decisions:
    - Four-layer handler: domain (TaskVaultError), validation (Pydantic), HTTP (Starlette), catch-all
    - Registered from main.py via register_error_handlers (ADR: keep main.py import fan-out small)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    TaskVaultError, RateLimitExceededError, ValidationFailedError,
)

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(TaskVaultError)
    async def taskvault_error_handler(request: Request, exc: TaskVaultError):
        """Handle all TaskVault domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"TaskVaultError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
                "status_code": exc.http_status,
                "user_id": getattr(request.state, "user_id", None),
            },
        )
        headers = None
        if isinstance(exc, RateLimitExceededError) and exc.context.retry_after_seconds:
            headers = {"Retry-After": str(exc.context.retry_after_seconds)}
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        response = build_validation_error_response(exc.errors())
        logger.warning(
            f"Validation error on {request.url.path}: {response['message']}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=response,
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Framework-raised HTTP errors: unmatched routes, wrong methods."""
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Internal server error"},
        )


# ─── Validation messages ────────────────────────────────────────

def _field_path(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(parts)


def _human_message(error: dict) -> str:
    field = _field_path(tuple(error.get("loc", ())))
    kind = error.get("type", "")
    if kind == "missing":
        if not field:
            return "Request body is required"
        return f"{field.split('.')[-1].capitalize()} is required"
    if kind == "json_invalid":
        return "Malformed JSON body"
    msg = str(error.get("msg", "Invalid value"))
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX):]
    return f"{field}: {msg}" if field else msg


def build_validation_error_response(errors: list[dict]) -> dict:
    """Uniform 400 body: joined human messages plus per-field details."""
    messages = [_human_message(e) for e in errors]
    response = ValidationFailedError(messages).to_response()
    response["errors"] = [
        {"field": _field_path(tuple(e.get("loc", ()))), "message": m}
        for e, m in zip(errors, messages)
    ]
    return response
