from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CheckResult:
    """Outcome of one smoke check against a running deployment."""

    name: str
    ok: bool
    status_code: int | None = None
    elapsed_ms: float = 0.0
    detail: dict[str, Any] = field(default_factory=dict)


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""


class CheckError(SmokeError):
    """Raised when a single check keeps failing after retries."""
