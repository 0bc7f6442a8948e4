# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scan orchestration exports."""

from .engine import ProgressCallback, ScanEngine
from .state import TERMINAL_STATES, TRANSITIONS, ScanStateMachine

__all__ = ["ProgressCallback", "ScanEngine", "ScanStateMachine", "TERMINAL_STATES", "TRANSITIONS"]
