"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict


class ErrorItem(BaseModel):
    """Single validation or request error.

    Rule-specific details (``max_length``, ``allowed_values``) are kept as extra
    fields so they serialize next to ``code`` and ``message``.
    """

    model_config = ConfigDict(extra="allow")

    code: int
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    errors: list[ErrorItem]
