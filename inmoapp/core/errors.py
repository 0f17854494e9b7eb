"""
Error taxonomy and the JSON error contract.

Every error response has the same body:

    {"error": {"code", "message", "request_id", ...extra}, "detail": message}

and echoes x-request-id. Permission checks never raise; these exceptions come
from mutation handlers and the tier manager.
"""

import builtins
import logging
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.requests import Request

from inmoapp.core.logging import LOGGER_NAME, get_request_id

logger = logging.getLogger(LOGGER_NAME)


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code

    def extra(self) -> Dict[str, Any]:
        """Additional fields for the `error` object."""
        return {}


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class NotFoundError(AppError, LookupError):
    code = "not_found"
    status_code = 404


class PermissionError(AppError, builtins.PermissionError):
    """Acting on a listing the caller doesn't own."""
    code = "forbidden"
    status_code = 403


class LimitExceededError(AppError):
    """A tier permission check denied the write. Carries the evaluated limit."""
    code = "limit_exceeded"
    status_code = 403

    def __init__(self, message: str, *, limit: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.limit = limit

    def extra(self) -> Dict[str, Any]:
        return {"limit": self.limit}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id() or str(uuid4())


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    rid = _request_id(request)
    error: Dict[str, Any] = {"code": code, "message": message, "request_id": rid}
    error.update(extra or {})
    response = JSONResponse(status_code=status_code, content={"error": error, "detail": message})
    response.headers["x-request-id"] = rid
    return response


async def app_error_handler(request: Request, exc: AppError):
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "app.error",
        extra={"error_code": exc.code, "status": exc.status_code, "error_message": exc.message, **exc.extra()},
    )
    return error_response(request, exc.status_code, exc.code, exc.message, exc.extra())


async def http_error_handler(request: Request, exc: HTTPException):
    code = {401: "unauthorized", 404: "not_found"}.get(exc.status_code, "http_error")
    message = str(exc.detail) if exc.detail else "HTTP error"
    logger.warning("http.error", extra={"error_code": code, "status": exc.status_code})
    return error_response(request, exc.status_code, code, message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    logger.warning("request.invalid", extra={"error_code": "invalid_request", "fields": fields})
    return error_response(request, 422, "invalid_request", "Datos de la solicitud inválidos", {"fields": fields})


async def unhandled_exception_handler(request: Request, exc: Exception):
    # Storage and other unexpected failures: logged with traceback, body stays generic
    logger.error("unhandled.exception", exc_info=exc, extra={"error_code": "internal_error"})
    return error_response(request, 500, "internal_error", "Unexpected error")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
