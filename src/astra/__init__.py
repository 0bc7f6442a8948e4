# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
ASTRA package entrypoint.

ASTRA collects the scripts a web page ships to the browser, narrows them to
fragments that touch dangerous sinks, asks an LLM classifier to judge each
fragment, and grades the target with an aggregate risk score. HTTP and the
classifier are abstracted behind injectable interfaces, and domain objects are
modeled with typed dataclasses.
"""

from .acquisition import ProxyChain, ScriptAcquirer
from .classifier import Classifier, GeminiClassifier
from .config import HttpSettings, ScanSettings, load_http_settings, load_scan_settings
from .errors import (
    AcquisitionError,
    AstraError,
    ClassificationError,
    InvalidTargetError,
    TotalClassificationError,
)
from .http import HttpClient, HttpRequest, HttpResponse, HttpxClient, create_default_http_client
from .log import setup_logging
from .models import Finding, Fragment, RiskScore, ScanResult, ScanState, Severity
from .prefilter import heuristic_filter
from .runtime import Astra
from .scan import ScanEngine
from .scoring import calculate_risk_score, top_issues
from .version import __version__

__all__ = [
    "AcquisitionError",
    "Astra",
    "AstraError",
    "ClassificationError",
    "Classifier",
    "Finding",
    "Fragment",
    "GeminiClassifier",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "InvalidTargetError",
    "ProxyChain",
    "RiskScore",
    "ScanEngine",
    "ScanResult",
    "ScanSettings",
    "ScanState",
    "ScriptAcquirer",
    "Severity",
    "TotalClassificationError",
    "calculate_risk_score",
    "create_default_http_client",
    "heuristic_filter",
    "load_http_settings",
    "load_scan_settings",
    "setup_logging",
    "top_issues",
    "__version__",
]
