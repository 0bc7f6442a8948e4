# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bounded scan-history store (newest first)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import ScanHistoryEntry
from ._jsonfile import read_json, write_json

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


@dataclass(frozen=True)
class DomainStats:
    total_scans: int
    last_scan: float | None


class ScanHistoryStore:
    """JSON-file history capped at ``limit`` entries; the oldest are evicted first."""

    def __init__(self, path: str, *, limit: int = MAX_HISTORY):
        self.path = path
        self.limit = max(1, int(limit))

    def load(self) -> list[ScanHistoryEntry]:
        raw = read_json(self.path, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed scan history at %s", self.path)
            return []
        entries: list[ScanHistoryEntry] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                entries.append(ScanHistoryEntry.from_mapping(item))
            except (TypeError, ValueError):
                logger.debug("Skipping malformed history entry %r", item)
        return entries

    def append(self, entry: ScanHistoryEntry) -> list[ScanHistoryEntry]:
        """Insert ``entry`` at the front, truncate to the cap, and persist."""
        history = [entry, *self.load()][: self.limit]
        try:
            write_json(self.path, [item.to_dict() for item in history])
        except OSError as exc:
            logger.warning("Failed to save scan history: %s", exc)
        return history

    def domain_stats(self, domain: str) -> DomainStats:
        scans = [entry for entry in self.load() if entry.domain == domain]
        return DomainStats(total_scans=len(scans), last_scan=scans[0].timestamp if scans else None)

    def clear(self) -> None:
        write_json(self.path, [])


__all__ = ["DomainStats", "MAX_HISTORY", "ScanHistoryStore"]
