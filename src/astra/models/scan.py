# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scan state, progress and result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .finding import Finding
from .report import RiskScore, ScanHistoryEntry, ScanSummary


class ScanState(str, Enum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    FILTERING = "filtering"
    CLASSIFYING = "classifying"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanProgress:
    """Progress event emitted by the scan engine."""

    state: ScanState
    message: str
    detail: str = ""
    current: int = 0
    total: int = 0


@dataclass
class ScanResult:
    """Outcome of a completed (terminal-success) scan."""

    target_url: str
    domain: str
    findings: list[Finding] = field(default_factory=list)
    risk_score: RiskScore | None = None
    top_issues: list[Finding] = field(default_factory=list)
    summary: ScanSummary = field(default_factory=ScanSummary)
    scripts_count: int = 0
    fragments_count: int = 0
    failed_count: int = 0
    duration_seconds: float = 0.0
    history_entry: ScanHistoryEntry | None = None

    @property
    def is_clean(self) -> bool:
        return not self.findings

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_url": self.target_url,
            "domain": self.domain,
            "findings": [f.to_dict() for f in self.findings],
            "risk_score": self.risk_score.to_dict() if self.risk_score else None,
            "top_issues": [f.fingerprint for f in self.top_issues],
            "summary": self.summary.to_dict(),
            "scripts_count": self.scripts_count,
            "fragments_count": self.fragments_count,
            "failed_count": self.failed_count,
            "duration_seconds": round(self.duration_seconds, 3),
        }


__all__ = ["ScanProgress", "ScanResult", "ScanState"]
