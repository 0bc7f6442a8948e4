# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level ASTRA facade for scan workflows."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from .acquisition import ScriptAcquirer
from .classifier import Classifier, GeminiClassifier
from .config import HttpSettings, ScanSettings, load_http_settings, load_scan_settings
from .http.client import HttpClient, create_default_http_client
from .http.url import validate_target_url
from .models import ScanResult, ScanState
from .scan import ProgressCallback, ScanEngine
from .scoring import DEFAULT_TOP_ISSUES
from .storage import AnnotationStore, ScanHistoryStore

logger = logging.getLogger(__name__)


class Astra:
    """
    Convenience wrapper that wires a shared HTTP client across acquisition and classification.

    Each ``analyze`` call runs as its own asyncio Task. Starting a new scan, or
    calling ``clear``, cancels whichever scan is still in flight and returns the
    engine to idle.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        classifier: Classifier | None = None,
        http_settings: HttpSettings | None = None,
        scan_settings: ScanSettings | None = None,
        record_history: bool = True,
        on_progress: ProgressCallback | None = None,
        top_count: int = DEFAULT_TOP_ISSUES,
    ):
        self.http_settings = http_settings or load_http_settings()
        self.scan_settings = scan_settings or load_scan_settings()
        self.http_client = http_client or create_default_http_client(self.http_settings)
        self.classifier = classifier or GeminiClassifier(self.http_client, self.scan_settings)
        self.history = ScanHistoryStore(self.scan_settings.history_path, limit=self.scan_settings.history_limit)
        self.annotations = AnnotationStore(self.scan_settings.annotations_path)
        self.acquirer = ScriptAcquirer(self.http_client, settings=self.http_settings)
        self.engine = ScanEngine(
            self.acquirer,
            self.classifier,
            settings=self.scan_settings,
            history_store=self.history if record_history else None,
            on_progress=on_progress,
            top_count=top_count,
        )
        self._task: asyncio.Task[ScanResult] | None = None

    @property
    def state(self) -> ScanState:
        return self.engine.state

    @property
    def is_scanning(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _cancel_inflight(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            logger.info("Cancelling in-flight scan")
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self.engine.reset()

    async def analyze(self, url: str, *, on_progress: ProgressCallback | None = None) -> ScanResult:
        """
        Scan ``url`` and return its report.

        The URL is validated before any in-flight scan is touched, so a rejected
        URL leaves the current scan running. A per-call ``on_progress`` applies
        to this scan only.
        """
        validate_target_url(url)
        await self._cancel_inflight()
        task = asyncio.ensure_future(self.engine.run(url, on_progress=on_progress))
        self._task = task
        try:
            return await task
        finally:
            if self._task is task:
                self._task = None

    async def clear(self) -> None:
        """Abandon any in-flight scan and return to idle."""
        await self._cancel_inflight()

    async def aclose(self) -> None:
        await self._cancel_inflight()
        with suppress(Exception):
            await self.http_client.aclose()

    async def __aenter__(self) -> Astra:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()


__all__ = ["Astra"]
