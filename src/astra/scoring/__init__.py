# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Risk scoring exports."""

from .risk import (
    DEFAULT_TOP_ISSUES,
    MAX_TOTAL_RISK,
    SEVERITY_WEIGHTS,
    calculate_risk_score,
    grade_for_score,
    summarize,
    top_issues,
    total_risk,
)

__all__ = [
    "DEFAULT_TOP_ISSUES",
    "MAX_TOTAL_RISK",
    "SEVERITY_WEIGHTS",
    "calculate_risk_score",
    "grade_for_score",
    "summarize",
    "top_issues",
    "total_risk",
]
