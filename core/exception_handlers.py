import logging
import uuid

from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import UserAPIError
from .response import error as resp_error, message as resp_message

logger = logging.getLogger(__name__)


def _trace_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or uuid.uuid4().hex[:8]


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(UserAPIError)
    async def user_api_error_handler(request: Request, exc: UserAPIError):
        if exc.status_code < 500:
            return JSONResponse(status_code=exc.status_code, content=resp_message(exc.message))
        trace_id = _trace_id(request)
        # full driver detail stays server-side
        logger.error(
            "%s %s failed [%s] trace_id=%s: %s",
            request.method, request.url.path, exc.code, trace_id, exc.__cause__ or exc,
            exc_info=exc.__cause__,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=resp_error(exc.message, code=exc.code, trace_id=trace_id),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=resp_message(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content=resp_message("Invalid request body"))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        trace_id = _trace_id(request)
        logger.error("Unhandled exception on %s trace_id=%s", request.url.path, trace_id, exc_info=exc)
        return JSONResponse(status_code=500, content=resp_error(code="internal_error", trace_id=trace_id))
