# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Keyword and pattern tables for the heuristic pre-filter."""

from __future__ import annotations

import re
from typing import Final

CHUNK_SIZE_LINES: Final[int] = 50
BENIGN_THRESHOLD: Final[int] = 2

# DOM injection, dynamic code execution, encoding primitives, storage,
# cross-frame messaging and dynamic element construction.
SUSPICIOUS_KEYWORDS: Final[tuple[str, ...]] = (
    "innerHTML",
    "outerHTML",
    "insertAdjacentHTML",
    "document.write",
    "dangerouslySetInnerHTML",
    "eval",
    "Function(",
    "setTimeout(",
    "atob",
    "btoa",
    "encodeURI",
    "decodeURI",
    "unescape",
    "escape",
    "window.location",
    "document.cookie",
    "localStorage",
    "sessionStorage",
    "postMessage",
    "createElement",
    "appendChild",
)

BENIGN_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"copyright", re.IGNORECASE),
    re.compile(r"license", re.IGNORECASE),
    re.compile(r"jquery", re.IGNORECASE),
    re.compile(r"react", re.IGNORECASE),
    re.compile(r"vue", re.IGNORECASE),
    re.compile(r"angular", re.IGNORECASE),
    re.compile(r"@author", re.IGNORECASE),
    re.compile(r"/\*"),
    re.compile(r"\*/"),
)

__all__ = ["BENIGN_PATTERNS", "BENIGN_THRESHOLD", "CHUNK_SIZE_LINES", "SUSPICIOUS_KEYWORDS"]
