# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Normalized vulnerability findings."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .resources import Fragment


class VulnerabilityCategory(str, Enum):
    XSS = "xss"
    SSRF = "ssrf"
    SSTI = "ssti"
    SQL_INJECTION = "sql_injection"
    RCE = "rce"
    IDOR = "idor"
    AUTH_BYPASS = "auth_bypass"
    PROTOTYPE_POLLUTION = "prototype_pollution"
    INSECURE_CORS = "insecure_cors"
    UNSAFE_EVAL = "unsafe_eval"
    OTHER = "other"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> VulnerabilityCategory:
        """Map a raw classifier label onto the enum; unknown labels become OTHER."""
        raw = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if raw == member.value:
                return member
        return cls.OTHER


class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: Any) -> Severity | None:
        raw = str(value or "").strip().lower()
        for member in cls:
            if raw == member.value.lower():
                return member
        return None


SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Finding:
    """One normalized vulnerability judgment for a Fragment."""

    category: VulnerabilityCategory
    severity: Severity
    confidence: float
    cvss_score: float
    short_explanation: str
    reproduction_steps: str
    remediation_code: str
    remediation_explanation: str
    impact_description: str
    vulnerable_code: str
    resource_url: str
    label: str = ""
    vulnerable_sink: str | None = None
    exploit_payload: str | None = None
    fragment: Fragment | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # Bounds hold for every instance, whatever the producer handed in.
        object.__setattr__(self, "confidence", _clamp(float(self.confidence), 0.0, 1.0))
        object.__setattr__(self, "cvss_score", _clamp(float(self.cvss_score), 0.0, 10.0))
        if not self.label:
            object.__setattr__(self, "label", self.category.value)

    @property
    def is_none(self) -> bool:
        return self.category == VulnerabilityCategory.NONE

    @property
    def fingerprint(self) -> str:
        """Stable content hash (category + resource URL + code) used to key annotations."""
        digest = hashlib.sha256()
        for part in (self.category.value, self.resource_url, self.vulnerable_code):
            digest.update(part.encode("utf-8"))
            digest.update(b"\x00")
        return digest.hexdigest()

    def to_dict(self) -> dict[str, Any]:
        return {
            "vulnerability_type": self.label,
            "category": self.category.value,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "cvss_score": self.cvss_score,
            "short_explanation": self.short_explanation,
            "reproduction_steps": self.reproduction_steps,
            "remediation_code": self.remediation_code,
            "remediation_explanation": self.remediation_explanation,
            "impact_description": self.impact_description,
            "vulnerable_code": self.vulnerable_code,
            "resource_url": self.resource_url,
            "vulnerable_sink": self.vulnerable_sink,
            "exploit_payload": self.exploit_payload,
            "fingerprint": self.fingerprint,
        }


__all__ = ["Finding", "SEVERITY_RANK", "Severity", "VulnerabilityCategory"]
