"""
Receipt model — what a provisioning task reports back.

Tasks raise on failure (every failure is fatal), so a receipt only ever
records a task that completed or was skipped. The CLI renders receipts
as the run summary.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Outcome of one task."""

    task: str
    status: Literal["ok", "skipped"] = "ok"

    started_at: str = Field(default_factory=now_iso)
    ended_at: str = Field(default_factory=now_iso)
    duration_ms: int = 0

    output: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the task did its work."""
        return self.status == "ok"

    @classmethod
    def success(cls, task: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(task=task, status="ok", output=output, **kwargs)

    @classmethod
    def skip(cls, task: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt."""
        return cls(task=task, status="skipped", output=reason, **kwargs)
