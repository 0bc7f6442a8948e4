# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Acquired script bodies and the fragments cut from them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AcquiredResource:
    """One script body (inline or external) and the URL it was loaded from."""

    code: str
    source_url: str

    @property
    def is_blank(self) -> bool:
        return not self.code.strip()


@dataclass(frozen=True)
class Fragment:
    """A bounded line window of an AcquiredResource selected for classification."""

    code: str
    source_url: str

    @property
    def line_count(self) -> int:
        return len(self.code.split("\n"))


__all__ = ["AcquiredResource", "Fragment"]
