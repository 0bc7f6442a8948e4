# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for ASTRA."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "ASTRA_LOG_LEVEL"
FALLBACK_LOG_LEVEL = "WARNING"

# httpx/httpcore log every request at INFO; scans issue dozens of them.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(level: str | None = None) -> int:
    """An explicit ``level`` (e.g. ``--log-level``) wins over ``ASTRA_LOG_LEVEL``; unknown names fall back to WARNING."""
    name = (level or os.getenv(LOG_LEVEL_ENV) or FALLBACK_LOG_LEVEL).strip().upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> int:
    """Configure standard logging for CLI/library use and return the effective level."""
    effective_level = resolve_log_level(level)
    logging.basicConfig(
        level=effective_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("astra").setLevel(effective_level)
    transport_level = effective_level if effective_level <= logging.DEBUG else max(effective_level, logging.WARNING)
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
    return effective_level


__all__ = ["resolve_log_level", "setup_logging"]
