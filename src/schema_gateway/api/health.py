"""Startup check tracking for the health endpoint.

The database probe at startup never blocks the server. Its outcome is kept
here so ``GET /health`` can report whether the database was reachable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class CheckStatus(Enum):
    PENDING = "pending"
    OK = "ok"
    FAILED = "failed"


@dataclass
class CheckResult:
    """Outcome of one startup check."""

    name: str
    status: CheckStatus = CheckStatus.PENDING
    detail: Optional[str] = None
    error_type: Optional[str] = None
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "status": self.status.value}
        if self.detail:
            result["detail"] = self.detail
        if self.error_type:
            result["error_type"] = self.error_type
        if self.timestamp:
            result["timestamp"] = self.timestamp.isoformat()
        return result


@dataclass
class StartupState:
    """Checks recorded while the application lifespan starts up."""

    checks: Dict[str, CheckResult] = field(default_factory=dict)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def start(self) -> None:
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        self.completed_at = datetime.now(timezone.utc)

    def record_success(self, name: str, detail: Optional[str] = None) -> None:
        self.checks[name] = CheckResult(
            name=name,
            status=CheckStatus.OK,
            detail=detail,
            timestamp=datetime.now(timezone.utc),
        )

    def record_failure(self, name: str, exc: BaseException) -> None:
        self.checks[name] = CheckResult(
            name=name,
            status=CheckStatus.FAILED,
            detail=str(exc),
            error_type=type(exc).__name__,
            timestamp=datetime.now(timezone.utc),
        )

    @property
    def is_ready(self) -> bool:
        """True when at least one check ran and none failed or is pending."""
        if not self.checks:
            return False
        return all(check.status == CheckStatus.OK for check in self.checks.values())

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ready": self.is_ready,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
