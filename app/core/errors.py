"""
Error types raised by the services and their HTTP rendering.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SocialStoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SocialStoreError):
    status_code = 400


class NotFoundError(SocialStoreError):
    status_code = 404


class ForbiddenError(SocialStoreError):
    status_code = 403


class StorageError(SocialStoreError):
    status_code = 500


def _error_body(message: str) -> dict:
    return {"success": False, "error": message}


async def _social_store_error_handler(request: Request, exc: SocialStoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields.append(".".join(loc) or "body")
    message = "Invalid request: " + ", ".join(fields) if fields else "Invalid request"
    return JSONResponse(status_code=400, content=_error_body(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SocialStoreError, _social_store_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
