# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Risk scoring over a finding set.

Scores are a pure function of the findings: each contributes
``severity weight x confidence``, the total is normalized against five
full-confidence Critical findings, and the 0-100 result is banded into a grade.
Lower is better.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Final

from ..models import Finding, RiskScore, ScanSummary, Severity

SEVERITY_WEIGHTS: Final[dict[Severity, int]] = {
    Severity.CRITICAL: 10,
    Severity.HIGH: 7,
    Severity.MEDIUM: 4,
    Severity.LOW: 1,
}

# Five Critical findings at full confidence.
MAX_TOTAL_RISK: Final[float] = 50.0

# (upper bound inclusive, grade, level, color)
GRADE_BANDS: Final[tuple[tuple[int, str, str, str], ...]] = (
    (20, "A", "Excellent", "#3fb950"),
    (40, "B", "Good", "#58a6ff"),
    (60, "C", "Fair", "#d29922"),
    (80, "D", "Poor", "#fb923c"),
    (100, "F", "Critical", "#f85149"),
)

DEFAULT_TOP_ISSUES: Final[int] = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def total_risk(findings: Iterable[Finding]) -> float:
    """Sum of ``severity weight x confidence``, identical for any ordering of ``findings``."""
    # Summing in a canonical order keeps float results identical across permutations.
    contributions = sorted(SEVERITY_WEIGHTS[f.severity] * f.confidence for f in findings)
    return math.fsum(contributions)


def grade_for_score(score: int) -> RiskScore:
    for upper, grade, level, color in GRADE_BANDS:
        if score <= upper:
            return RiskScore(score=score, grade=grade, level=level, color=color)  # type: ignore[arg-type]
    _, grade, level, color = GRADE_BANDS[-1]
    return RiskScore(score=score, grade=grade, level=level, color=color)  # type: ignore[arg-type]


def calculate_risk_score(findings: Sequence[Finding]) -> RiskScore:
    """Aggregate score, grade, level and color for ``findings``; empty input grades A."""
    if not findings:
        return grade_for_score(0)
    score = min(100.0, total_risk(findings) / MAX_TOTAL_RISK * 100.0)
    return grade_for_score(max(0, min(100, _round_half_up(score))))


def top_issues(findings: Iterable[Finding], count: int = DEFAULT_TOP_ISSUES) -> list[Finding]:
    """Most urgent findings: severity, then CVSS, then confidence, all descending."""
    ranked = sorted(
        findings,
        key=lambda f: (f.severity.rank, f.cvss_score, f.confidence),
        reverse=True,
    )
    return ranked[: max(0, count)]


def summarize(findings: Sequence[Finding]) -> ScanSummary:
    """Severity counts, category counts and averages for export and display."""
    severity_counts = {severity.value: 0 for severity in (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)}
    vulnerability_types: dict[str, int] = {}
    for finding in findings:
        severity_counts[finding.severity.value] += 1
        label = finding.label.lower()
        vulnerability_types[label] = vulnerability_types.get(label, 0) + 1

    if not findings:
        return ScanSummary(total=0, severity_counts=severity_counts, vulnerability_types={})

    avg_confidence = sum(f.confidence for f in findings) / len(findings)
    avg_cvss = sum(f.cvss_score for f in findings) / len(findings)
    return ScanSummary(
        total=len(findings),
        severity_counts=severity_counts,
        vulnerability_types=vulnerability_types,
        avg_confidence=f"{avg_confidence * 100:.1f}",
        avg_cvss=f"{avg_cvss:.1f}",
    )


__all__ = [
    "DEFAULT_TOP_ISSUES",
    "GRADE_BANDS",
    "MAX_TOTAL_RISK",
    "SEVERITY_WEIGHTS",
    "calculate_risk_score",
    "grade_for_score",
    "summarize",
    "top_issues",
    "total_risk",
]
