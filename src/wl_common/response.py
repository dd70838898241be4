"""Unified API response envelope.

{
    "code": 0,           // 0=success, non-0=AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field

from src.wl_common.datetime_utils import utc_now
from src.wl_common.errors import AppError


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None, request_id: str | None = None) -> ApiResponse:
    if request_id is None:
        return ApiResponse(data=data)
    return ApiResponse(data=data, request_id=request_id)


def error_response(exc: AppError, request_id: str | None = None) -> ApiResponse:
    """Envelope for an AppError. Infrastructure details never leak to the client."""
    message = exc.message if exc.is_business else "Internal server error"
    if request_id is None:
        return ApiResponse(code=exc.code, message=message)
    return ApiResponse(code=exc.code, message=message, request_id=request_id)
