# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Heuristic pre-filter: shrink acquired code to classifier-worthy fragments."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..models import AcquiredResource, Fragment
from .constants import BENIGN_PATTERNS, BENIGN_THRESHOLD, CHUNK_SIZE_LINES, SUSPICIOUS_KEYWORDS


def iter_chunks(code: str, chunk_size: int = CHUNK_SIZE_LINES) -> Iterator[str]:
    """Yield ``chunk_size``-line windows of ``code``; the last window may be shorter."""
    lines = code.split("\n")
    for start in range(0, len(lines), chunk_size):
        yield "\n".join(lines[start : start + chunk_size])


def benign_signal_count(chunk: str) -> int:
    """Number of distinct boilerplate patterns present; repeats of one pattern count once."""
    return sum(1 for pattern in BENIGN_PATTERNS if pattern.search(chunk))


def matched_sinks(chunk: str) -> list[str]:
    return [keyword for keyword in SUSPICIOUS_KEYWORDS if keyword in chunk]


def is_suspicious(chunk: str) -> bool:
    return any(keyword in chunk for keyword in SUSPICIOUS_KEYWORDS)


def heuristic_filter(
    resources: Iterable[AcquiredResource | Fragment],
    *,
    chunk_size: int = CHUNK_SIZE_LINES,
    benign_threshold: int = BENIGN_THRESHOLD,
) -> list[Fragment]:
    """
    Return the chunks of ``resources`` that contain a suspicious sink.

    Chunks matching more than ``benign_threshold`` boilerplate patterns are skipped
    before the sink check. Running the filter over its own output returns the
    same fragments.
    """
    fragments: list[Fragment] = []
    for resource in resources:
        if not resource.code.strip():
            continue
        for chunk in iter_chunks(resource.code, chunk_size):
            if not chunk.strip():
                continue
            if benign_signal_count(chunk) > benign_threshold:
                continue
            if is_suspicious(chunk):
                fragments.append(Fragment(code=chunk, source_url=resource.source_url))
    return fragments


__all__ = ["benign_signal_count", "heuristic_filter", "is_suspicious", "iter_chunks", "matched_sinks"]
