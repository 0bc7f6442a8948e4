# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization: responses expose lowercase header names."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def _pairs(headers: Any) -> Iterable[tuple[object, object]]:
    # httpx.Headers and plain dicts both expose items(); anything else is ignored.
    if isinstance(headers, Mapping) or callable(getattr(headers, "items", None)):
        return headers.items()
    return ()


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    if not headers:
        return {}
    out: dict[str, str] = {}
    for key, value in _pairs(headers):
        name = str(key).strip().lower() if key is not None else ""
        if name:
            out[name] = "" if value is None else str(value)
    return out


__all__ = ["normalize_headers"]
