"""Unified API response envelope.

Acknowledgements and errors use this format:
{
    "code": 0,           // 0=success, non-0=error code
    "message": "Order placed successfully",
    "data": null,
    "timestamp": "...",
    "request_id": "..."
}

Read endpoints return their own JSON bodies.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def ack_response(message: str, request_id: str | None = None) -> ApiResponse:
    """Plain acknowledgement for a mutating ledger call that succeeded."""
    resp = ApiResponse(code=0, message=message, data=None)
    if request_id:
        resp.request_id = request_id
    return resp


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)
