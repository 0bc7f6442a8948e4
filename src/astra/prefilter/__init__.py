# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Heuristic pre-filter exports."""

from .constants import BENIGN_PATTERNS, BENIGN_THRESHOLD, CHUNK_SIZE_LINES, SUSPICIOUS_KEYWORDS
from .filter import benign_signal_count, heuristic_filter, is_suspicious, iter_chunks, matched_sinks

__all__ = [
    "BENIGN_PATTERNS",
    "BENIGN_THRESHOLD",
    "CHUNK_SIZE_LINES",
    "SUSPICIOUS_KEYWORDS",
    "benign_signal_count",
    "heuristic_filter",
    "is_suspicious",
    "iter_chunks",
    "matched_sinks",
]
