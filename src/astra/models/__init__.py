# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for ASTRA."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .finding import SEVERITY_RANK, Finding, Severity, VulnerabilityCategory
from .report import ReviewAnnotation, RiskScore, ScanHistoryEntry, ScanSummary
from .resources import AcquiredResource, Fragment
from .scan import ScanProgress, ScanResult, ScanState

__all__ = [
    "AcquiredResource",
    "Finding",
    "Fragment",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ReviewAnnotation",
    "RiskScore",
    "SEVERITY_RANK",
    "ScanHistoryEntry",
    "ScanProgress",
    "ScanResult",
    "ScanState",
    "ScanSummary",
    "Severity",
    "VulnerabilityCategory",
]
