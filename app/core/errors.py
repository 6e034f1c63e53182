"""Exception hierarchy and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

log = logging.getLogger("errors")


class FarmApiError(Exception):
    """Base exception carrying the HTTP status code to answer with."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(FarmApiError):
    status_code = 400


class SessionError(FarmApiError):
    status_code = 401

    def __init__(self, message: str = "Invalid or expired session"):
        super().__init__(message)


class NotFoundError(FarmApiError):
    status_code = 404


class UpstreamError(FarmApiError):
    """An external NASA call failed. Normally caught and replaced with fallback data."""

    status_code = 502


def _error_body(message: str, **extra) -> dict:
    return {"success": False, "error": message, **extra}


def _validation_details(errors: list[dict]) -> list[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors]


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(FarmApiError)
    async def handle_farm_error(_request: Request, exc: FarmApiError):
        return JSONResponse(_error_body(str(exc)), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_request: Request, exc: RequestValidationError):
        return JSONResponse(
            _error_body("Invalid request parameters", details=_validation_details(exc.errors())),
            status_code=400,
        )

    @app.exception_handler(ValidationError)
    async def handle_body_validation(_request: Request, exc: ValidationError):
        return JSONResponse(
            _error_body("Invalid request body", details=_validation_details(exc.errors())),
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        log.exception("Unhandled error: %s", exc)
        return JSONResponse(
            _error_body("Internal server error", details=str(exc)),
            status_code=500,
        )
