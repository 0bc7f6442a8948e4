# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for risk scores, summaries and persisted records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Literal

Grade = Literal["A", "B", "C", "D", "F"]
RiskLevel = Literal["Excellent", "Good", "Fair", "Poor", "Critical"]


@dataclass(frozen=True)
class RiskScore:
    """Aggregate 0-100 risk score; lower is better."""

    score: int
    grade: Grade
    level: RiskLevel
    color: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScanSummary:
    """Headline statistics over a finding set."""

    total: int = 0
    severity_counts: dict[str, int] = field(default_factory=dict)
    vulnerability_types: dict[str, int] = field(default_factory=dict)
    avg_confidence: str = "0.0"
    avg_cvss: str = "0.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "severity_counts": dict(self.severity_counts),
            "vulnerability_types": dict(self.vulnerability_types),
            "avg_confidence": self.avg_confidence,
            "avg_cvss": self.avg_cvss,
        }


@dataclass(frozen=True)
class ScanHistoryEntry:
    """One completed scan as recorded in the history store."""

    domain: str
    timestamp: float
    findings_count: int
    duration_seconds: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ScanHistoryEntry:
        return cls(
            domain=str(data.get("domain") or ""),
            timestamp=float(data.get("timestamp") or 0.0),
            findings_count=int(data.get("findings_count", data.get("vulnerabilitiesFound", 0)) or 0),
            duration_seconds=int(data.get("duration_seconds", data.get("scanDuration", 0)) or 0),
        )


@dataclass
class ReviewAnnotation:
    """Analyst review state for one finding."""

    reviewed: bool = False
    flagged: bool = False
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ReviewAnnotation:
        return cls(
            reviewed=bool(data.get("reviewed", False)),
            flagged=bool(data.get("flagged", False)),
            notes=str(data.get("notes") or ""),
        )


__all__ = [
    "Grade",
    "ReviewAnnotation",
    "RiskLevel",
    "RiskScore",
    "ScanHistoryEntry",
    "ScanSummary",
]
