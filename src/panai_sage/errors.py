"""Error types and their HTTP mapping."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BotError(Exception):
    """Base class for errors returned to the caller as JSON."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> dict:
        return {"success": False, "error": self.error, "message": self.message, **self.extra}


class ValidationError(BotError):
    """Malformed, missing or oversized chat message."""

    status_code = 400
    error = "Validation Error"


class NotFoundError(BotError):
    """Unknown session or task id."""

    status_code = 404

    def __init__(self, message: str, error: str = "Not found", **extra: Any):
        super().__init__(message, **extra)
        self.error = error


def register_exception_handlers(app: FastAPI, expose_details: bool) -> None:
    """Attach JSON handlers for domain errors, 404s and unexpected failures."""

    @app.exception_handler(BotError)
    async def bot_error_handler(request: Request, exc: BotError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Unparseable bodies are reported like any other invalid message
        err = ValidationError("Request body must be a JSON object")
        return JSONResponse(status_code=err.status_code, content=err.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Wrong method on a known path is reported like an unknown path
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Endpoint not found",
                    "message": "The requested endpoint does not exist.",
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"error": "Something went wrong!"}
        if expose_details:
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)
