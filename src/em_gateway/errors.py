"""Exception handlers: every failure leaves as an ApiResponse envelope.

    AppError                -> its own code / HTTP status
    RequestValidationError  -> 400, code 1001, field-level message
    anything else           -> 500, code 9002, generic message (details logged only)
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.em_common.errors import AppError, InternalError, InvalidRequestError
from src.em_common.response import error_response

logger = logging.getLogger("em.gateway")


def _render(request: Request, exc: AppError) -> JSONResponse:
    request.state.error_code = exc.code
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


def _describe(errors: list[dict[str, Any]]) -> str:
    """'price: Input should be greater than 0; body: Producer ID is required ...'"""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        msg = str(err.get("msg", "invalid"))
        # model-level validators report "Value error, <text>"
        msg = msg.removeprefix("Value error, ")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "malformed request"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.warning("%s %s failed: [%d] %s", request.method, request.url.path, exc.code, exc.message)
    return _render(request, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _render(request, InvalidRequestError(_describe(list(exc.errors()))))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _render(request, InternalError("Operation failed"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
