# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Ordered sequencing over unreliable asynchronous operations.

Two shapes share one loop discipline: options are awaited strictly one at a
time, in order, and every failure is captured rather than raised.

- ``first_success`` short-circuits on the first option that succeeds (proxy chain).
- ``run_sequentially`` visits every item and records each outcome (classification loop).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..errors import AllAttemptsFailedError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Outcome(Generic[T, R]):
    """Result of one sequenced step: either ``value`` or ``error`` is set."""

    index: int
    item: T
    value: R | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _attempt(operation: Callable[[T], Awaitable[R]], option: T, timeout: float | None) -> R:
    if timeout is not None and timeout > 0:
        return await asyncio.wait_for(operation(option), timeout)
    return await operation(option)


async def first_success(
    options: Iterable[T],
    operation: Callable[[T], Awaitable[R]],
    *,
    timeout: float | None = None,
    label: str = "operation",
) -> R:
    """
    Await ``operation(option)`` for each option in order and return the first success.

    Each attempt is bounded by ``timeout`` (cancelled on expiry). Later options are
    never touched once one succeeds. Raises AllAttemptsFailedError with every
    attempt's error when all options fail (or when there are no options).
    """
    errors: list[BaseException] = []
    candidates = list(options)
    for position, option in enumerate(candidates, start=1):
        try:
            return await _attempt(operation, option, timeout)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)
            logger.debug("%s attempt %d/%d failed: %s", label, position, len(candidates), exc or type(exc).__name__)
    raise AllAttemptsFailedError(f"all {len(candidates)} {label} attempt(s) failed", errors)


async def run_sequentially(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[R]],
    *,
    on_outcome: Callable[[Outcome[T, R]], None] | None = None,
    before_each: Callable[[int, T], None] | None = None,
) -> list[Outcome[T, R]]:
    """
    Await ``operation(item)`` for every item, one at a time, without aborting on failure.

    The Nth call is not issued until the (N-1)th has resolved.
    """
    outcomes: list[Outcome[T, R]] = []
    for index, item in enumerate(items):
        if before_each is not None:
            before_each(index, item)
        try:
            value = await operation(item)
            outcome: Outcome[T, R] = Outcome(index=index, item=item, value=value)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            outcome = Outcome(index=index, item=item, error=exc)
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
    return outcomes


__all__ = ["Outcome", "first_success", "run_sequentially"]
