# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Per-domain review annotations.

Annotations are keyed by Finding.fingerprint (a content hash), so re-sorting or
re-filtering a finding list never moves a note onto a different finding.
"""

from __future__ import annotations

from ..models import Finding, ReviewAnnotation
from ._jsonfile import read_json, write_json


class AnnotationStore:
    """JSON-file store: ``{domain: {fingerprint: {reviewed, flagged, notes}}}``."""

    def __init__(self, path: str):
        self.path = path

    def _load_all(self) -> dict[str, dict[str, dict]]:
        raw = read_json(self.path, {})
        return raw if isinstance(raw, dict) else {}

    def for_domain(self, domain: str) -> dict[str, ReviewAnnotation]:
        bucket = self._load_all().get(domain)
        if not isinstance(bucket, dict):
            return {}
        return {key: ReviewAnnotation.from_mapping(value) for key, value in bucket.items() if isinstance(value, dict)}

    def get(self, domain: str, finding: Finding) -> ReviewAnnotation:
        return self.for_domain(domain).get(finding.fingerprint, ReviewAnnotation())

    def _update(self, domain: str, finding: Finding, **changes: object) -> ReviewAnnotation:
        data = self._load_all()
        bucket = data.get(domain)
        if not isinstance(bucket, dict):
            bucket = {}
            data[domain] = bucket
        current = bucket.get(finding.fingerprint)
        annotation = ReviewAnnotation.from_mapping(current) if isinstance(current, dict) else ReviewAnnotation()
        for key, value in changes.items():
            setattr(annotation, key, value)
        bucket[finding.fingerprint] = annotation.to_dict()
        write_json(self.path, data)
        return annotation

    def toggle_reviewed(self, domain: str, finding: Finding) -> ReviewAnnotation:
        return self._update(domain, finding, reviewed=not self.get(domain, finding).reviewed)

    def toggle_flagged(self, domain: str, finding: Finding) -> ReviewAnnotation:
        return self._update(domain, finding, flagged=not self.get(domain, finding).flagged)

    def set_notes(self, domain: str, finding: Finding, notes: str) -> ReviewAnnotation:
        return self._update(domain, finding, notes=notes)


__all__ = ["AnnotationStore"]
