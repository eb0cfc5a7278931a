"""
Exception handlers. Every failure is rendered as

    {"success": false, "errors": [{"msg": ..., "code": ..., "details"?: ...}]}
"""
import logging
from typing import Any, Dict, List, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException

logger = logging.getLogger(__name__)


def error_response(status_code: int, errors: List[Dict[str, Any]]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "errors": errors})


async def on_validation_error(request: Request, exc: RequestValidationError):
    # loc is usually ('body', 'field_name') or ('query', 'name')
    errors = [
        {"field": str(err["loc"][-1]) if err["loc"] else "unknown", "msg": err["msg"], "code": "VALIDATION_ERROR"}
        for err in exc.errors()
    ]
    logger.warning(f"Validation failed on {request.url.path}: {errors}")
    return error_response(422, errors)


async def on_app_exception(request: Request, exc: AppException):
    logger.warning(f"{exc.error_code}: {exc.message}", extra={"code": exc.error_code, "path": request.url.path})
    error = {"msg": exc.message, "code": exc.error_code}
    if exc.details:
        error["details"] = exc.details
    return error_response(exc.status_code, [error])


async def on_http_exception(request: Request, exc: Union[HTTPException, StarletteHTTPException]):
    msg = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, [{"msg": msg, "code": f"HTTP_{exc.status_code}"}])


async def on_unhandled(request: Request, exc: Exception):
    logger.exception("Unhandled server error", extra={"path": request.url.path})
    return error_response(500, [{"msg": "An unexpected server error occurred.", "code": "INTERNAL_ERROR"}])


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, on_validation_error)
    app.add_exception_handler(AppException, on_app_exception)
    app.add_exception_handler(StarletteHTTPException, on_http_exception)
    app.add_exception_handler(HTTPException, on_http_exception)
    app.add_exception_handler(Exception, on_unhandled)
