"""Request logging and correlation ids.

Every HTTP request gets a request id: the caller's ``X-Request-ID`` when it is
a short token, otherwise a fresh ``req_<hex>``. It is put on request.state for
acknowledgements and error envelopes, and echoed back in the response header.

One log line per request; failed requests also carry the error code the
exception handler stamped on request.state:

    INFO    [POST] /api/placeOrder → 200 (41ms) req_a1b2c3d4e5f6
    WARNING [POST] /api/placeOrder → 504 (30012ms) req_a1b2c3d4e5f6 code=3002
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("em.request")

REQUEST_ID_HEADER = "X-Request-ID"
_CALLER_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def _request_id(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _CALLER_ID.fullmatch(supplied):
        return supplied
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        error_code = getattr(request.state, "error_code", None)
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
            f" code={error_code}" if error_code is not None else "",
        )
        return response
