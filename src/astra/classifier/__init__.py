# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Classifier boundary: protocol, Gemini backend and judgment normalization."""

from .base import Classifier
from .gemini import GeminiClassifier, extract_candidate_text
from .normalize import (
    estimate_cvss,
    extract_json_text,
    infer_severity,
    normalize_confidence,
    normalize_judgment,
    parse_judgment,
)
from .prompt import RESPONSE_SCHEMA, build_analysis_prompt

__all__ = [
    "Classifier",
    "GeminiClassifier",
    "RESPONSE_SCHEMA",
    "build_analysis_prompt",
    "estimate_cvss",
    "extract_candidate_text",
    "extract_json_text",
    "infer_severity",
    "normalize_confidence",
    "normalize_judgment",
    "parse_judgment",
]
