"""
Marknote Backend — Shared Response Schemas
==========================================

What:  The error envelope, the empty acknowledgment, the health payload, and
       the helper that turns pydantic validation errors into one message.
Who:   Used by every router and by the global exception handlers.

Every response body is an envelope:
    {"success": true,  "data": ..., "count": ...}
    {"success": false, "error": "...", "message": "...", "request_id": "..."}
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

# Path segments FastAPI prepends to request validation error locations
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "success": false,
            "error": "forbidden",
            "message": "Not authorized to update this note",
            "request_id": "1f2e3d4c"
        }
    """
    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class AckResponse(BaseModel):
    """Empty success acknowledgment, e.g. after DELETE or logout."""
    success: bool = Field(default=True)
    data: Dict[str, Any] = Field(default_factory=dict)
    message: Optional[str] = Field(default=None)


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


def describe_validation_errors(errors: Sequence[Dict[str, Any]]) -> Tuple[str, Optional[str]]:
    """
    Reduce a list of pydantic error dicts to (message, field) for the first error.

    Missing fields read "Title is required"; custom validator messages are
    returned without pydantic's "Value error, " prefix.
    """
    if not errors:
        return "Validation failed", None

    first = errors[0]
    loc: Iterable[Any] = first.get("loc", ())
    parts = [str(p) for p in loc if p not in _LOCATION_PREFIXES]
    field = ".".join(parts) or None

    if first.get("type") == "missing" and field:
        return f"{parts[0].capitalize()} is required", field

    message = str(first.get("msg", "Validation failed"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    elif field:
        message = f"{field}: {message}"
    return message, field


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite returns timestamps without tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
