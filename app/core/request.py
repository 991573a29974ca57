"""Framework-independent request/response objects handed to wrapped handlers."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any


@dataclass
class ApiRequest:
    """Parsed incoming request. ``body`` is the decoded JSON document."""

    method: str
    url: str
    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass
class ApiResponse:
    """Response settings a handler may adjust before the wrapper writes JSON."""

    status_code: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
