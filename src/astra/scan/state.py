# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pipeline state machine."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..models import ScanState

logger = logging.getLogger(__name__)

TRANSITIONS: Mapping[ScanState, frozenset[ScanState]] = {
    ScanState.IDLE: frozenset({ScanState.ACQUIRING}),
    ScanState.ACQUIRING: frozenset({ScanState.FILTERING, ScanState.DONE, ScanState.FAILED}),
    ScanState.FILTERING: frozenset({ScanState.CLASSIFYING, ScanState.DONE, ScanState.FAILED}),
    ScanState.CLASSIFYING: frozenset({ScanState.DONE, ScanState.FAILED}),
    ScanState.DONE: frozenset(),
    ScanState.FAILED: frozenset(),
}

TERMINAL_STATES = frozenset({ScanState.DONE, ScanState.FAILED})


class ScanStateMachine:
    """Tracks the current pipeline stage and rejects out-of-order transitions."""

    def __init__(self) -> None:
        self.state = ScanState.IDLE

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def is_running(self) -> bool:
        return self.state not in TERMINAL_STATES and self.state is not ScanState.IDLE

    def advance(self, target: ScanState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal scan transition {self.state.value} -> {target.value}")
        logger.debug("Scan state %s -> %s", self.state.value, target.value)
        self.state = target

    def reset(self) -> None:
        self.state = ScanState.IDLE


__all__ = ["TERMINAL_STATES", "TRANSITIONS", "ScanStateMachine"]
