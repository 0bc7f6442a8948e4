# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Persistence: scan history and review annotations."""

from .annotations import AnnotationStore
from .history import MAX_HISTORY, DomainStats, ScanHistoryStore

__all__ = ["AnnotationStore", "DomainStats", "MAX_HISTORY", "ScanHistoryStore"]
