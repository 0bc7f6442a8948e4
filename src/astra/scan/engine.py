# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Run a full scan: acquisition, pre-filter, classification and scoring."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..acquisition import ScriptAcquirer
from ..classifier import Classifier, normalize_judgment
from ..config import ScanSettings, load_scan_settings
from ..errors import TotalClassificationError
from ..http.url import hostname_of, validate_target_url
from ..models import (
    AcquiredResource,
    Finding,
    Fragment,
    ScanHistoryEntry,
    ScanProgress,
    ScanResult,
    ScanState,
)
from ..prefilter import heuristic_filter
from ..scoring import DEFAULT_TOP_ISSUES, calculate_risk_score, summarize, top_issues
from ..storage import ScanHistoryStore
from ..utils.fallback import Outcome, run_sequentially
from .state import ScanStateMachine

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanProgress], None]


class ScanEngine:
    """
    Drives one target through ``idle -> acquiring -> filtering -> classifying -> done``.

    Any stage may end in ``failed``; the failure is re-raised to the caller and no
    partial report is produced. Empty acquisition or an empty fragment set ends in
    ``done`` with an empty report and leaves the scan history untouched.
    """

    def __init__(
        self,
        acquirer: ScriptAcquirer,
        classifier: Classifier,
        *,
        settings: ScanSettings | None = None,
        history_store: ScanHistoryStore | None = None,
        on_progress: ProgressCallback | None = None,
        top_count: int = DEFAULT_TOP_ISSUES,
    ):
        self.acquirer = acquirer
        self.classifier = classifier
        self.settings = settings or load_scan_settings()
        self.history_store = history_store
        self.on_progress = on_progress
        self.top_count = top_count
        self._machine = ScanStateMachine()
        self._run_progress: ProgressCallback | None = None

    @property
    def state(self) -> ScanState:
        return self._machine.state

    def reset(self) -> None:
        self._machine.reset()

    def _emit(self, message: str, *, detail: str = "", current: int = 0, total: int = 0) -> None:
        progress = ScanProgress(state=self.state, message=message, detail=detail, current=current, total=total)
        logger.info("[%s] %s%s", progress.state.value, message, f" ({detail})" if detail else "")
        callback = self._run_progress or self.on_progress
        if callback is not None:
            callback(progress)

    def _enter(self, state: ScanState, message: str, **kwargs) -> None:
        self._machine.advance(state)
        self._emit(message, **kwargs)

    async def run(self, target_url: str, *, on_progress: ProgressCallback | None = None) -> ScanResult:
        """
        Scan ``target_url`` and return the report.

        ``on_progress`` replaces the engine-wide callback for this run only.

        Raises InvalidTargetError before any state change, AcquisitionError when
        the page cannot be fetched, and TotalClassificationError when every
        fragment failed to classify.
        """
        url = validate_target_url(target_url)
        if self._machine.is_running:
            raise RuntimeError(f"Scan already in progress ({self.state.value})")
        if self._machine.is_terminal:
            self._machine.reset()

        self._run_progress = on_progress
        try:
            self._enter(ScanState.ACQUIRING, "Acquiring scripts", detail=url)
            return await self._pipeline(url)
        except Exception as exc:
            if not self._machine.is_terminal:
                self._enter(ScanState.FAILED, f"Scan failed: {type(exc).__name__}", detail=str(exc))
            raise
        finally:
            self._run_progress = None

    async def _pipeline(self, url: str) -> ScanResult:
        started = time.monotonic()
        domain = hostname_of(url)

        resources = await self.acquirer.acquire(url)
        if all(resource.is_blank for resource in resources):
            self._enter(ScanState.DONE, "No scripts found")
            return self._finish(
                url, domain, started, findings=[], resources=resources, fragments=[], failed=0, record=False
            )

        self._enter(ScanState.FILTERING, "Filtering code", detail=f"{len(resources)} script(s)")
        fragments = heuristic_filter(
            resources,
            chunk_size=self.settings.chunk_size,
            benign_threshold=self.settings.benign_threshold,
        )
        if not fragments:
            self._enter(ScanState.DONE, "No suspicious code found")
            return self._finish(
                url, domain, started, findings=[], resources=resources, fragments=[], failed=0, record=False
            )

        self._enter(ScanState.CLASSIFYING, "Classifying fragments", current=0, total=len(fragments))
        outcomes = await self._classify(fragments)

        failures = [outcome for outcome in outcomes if not outcome.ok]
        if len(failures) == len(fragments):
            raise TotalClassificationError(len(fragments), failures[-1].error)

        findings = [outcome.value for outcome in outcomes if outcome.ok and not outcome.value.is_none]
        # Stable: equal confidences keep classification order.
        findings.sort(key=lambda finding: finding.confidence, reverse=True)

        self._enter(ScanState.DONE, "Scan complete", detail=f"{len(findings)} finding(s)")
        return self._finish(
            url, domain, started, findings=findings, resources=resources, fragments=fragments, failed=len(failures)
        )

    async def _classify_one(self, fragment: Fragment) -> Finding:
        raw = await self.classifier.classify(fragment)
        return normalize_judgment(raw, fragment)

    async def _classify(self, fragments: list[Fragment]) -> list[Outcome[Fragment, Finding]]:
        total = len(fragments)

        def before_each(index: int, fragment: Fragment) -> None:
            self._emit("Analyzing fragment", detail=fragment.source_url, current=index + 1, total=total)

        def on_outcome(outcome: Outcome[Fragment, Finding]) -> None:
            if not outcome.ok:
                logger.warning(
                    "Classification of fragment %d/%d (%s) failed: %s",
                    outcome.index + 1,
                    total,
                    outcome.item.source_url,
                    outcome.error,
                )
                return
            finding = outcome.value
            if finding is not None and not finding.is_none:
                self._emit(
                    "Finding",
                    detail=f"{finding.label} ({finding.confidence * 100:.0f}% confidence)",
                    current=outcome.index + 1,
                    total=total,
                )

        return await run_sequentially(
            fragments, self._classify_one, before_each=before_each, on_outcome=on_outcome
        )

    def _finish(
        self,
        url: str,
        domain: str,
        started: float,
        *,
        findings: list[Finding],
        resources: list[AcquiredResource],
        fragments: list[Fragment],
        failed: int,
        record: bool = True,
    ) -> ScanResult:
        duration = time.monotonic() - started
        entry = None
        # Only scans that reached classification are recorded.
        if record:
            entry = ScanHistoryEntry(
                domain=domain,
                timestamp=time.time(),
                findings_count=len(findings),
                duration_seconds=int(round(duration)),
            )
            if self.history_store is not None:
                self.history_store.append(entry)

        return ScanResult(
            target_url=url,
            domain=domain,
            findings=findings,
            risk_score=calculate_risk_score(findings),
            top_issues=top_issues(findings, self.top_count),
            summary=summarize(findings),
            scripts_count=len(resources),
            fragments_count=len(fragments),
            failed_count=failed,
            duration_seconds=duration,
            history_entry=entry,
        )


__all__ = ["ProgressCallback", "ScanEngine"]
