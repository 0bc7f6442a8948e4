# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Utility exports."""

from .fallback import Outcome, first_success, run_sequentially

__all__ = ["Outcome", "first_success", "run_sequentially"]
