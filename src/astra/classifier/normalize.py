# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Validating adapter between raw classifier judgments and Finding.

LLM output follows its schema only loosely: keys show up under alternate
spellings, numbers arrive as strings or percentages, and optional sections are
missing. Everything is normalized here so the rest of the pipeline can rely on
the strict Finding shape.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from ..errors import MalformedJudgmentError
from ..models import Finding, Fragment, Severity, VulnerabilityCategory

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_PLACEHOLDERS = {"", "n/a", "na", "none", "null"}

CATEGORY_KEYS = ("vulnerability_type", "vulnerabilityType", "type", "category")
CONFIDENCE_KEYS = ("confidence", "confidence_score", "confidenceScore")
CVSS_KEYS = ("impact_cvss", "cvssScore", "cvss_score", "cvss")
SEVERITY_KEYS = ("severity",)
WHAT_KEYS = ("what_we_found", "shortExplanation", "short_explanation", "explanation")
HOW_KEYS = ("how_we_found",)
URL_KEYS = ("where_found_url", "resourceUrl", "resource_url")
CODE_KEYS = ("where_found_code", "vulnerableCode", "vulnerable_code", "evidence_snippet")
SINK_KEYS = ("where_found_sink", "vulnerableSink", "vulnerable_sink")
STEPS_KEYS = ("reproduce_steps", "reproductionSteps")
PAYLOAD_KEYS = ("reproduce_payloads", "payload_example", "exploitPayloadHypothesis")
FIX_OPTIONS_KEYS = ("fix_options", "remediationExplanation", "recommendation")
FIX_CODE_KEYS = ("fix_code_examples", "remediationCode")
EXPLOITATION_KEYS = ("impact_exploitation",)
BUSINESS_KEYS = ("impact_business", "impactDescription")

_CRITICAL_TYPES = ("rce", "sql_injection", "ssti")
_HIGH_TYPES = ("xss", "ssrf", "auth_bypass", "idor", "prototype_pollution")
_MEDIUM_TYPES = ("insecure_cors", "unsafe_eval")

_CVSS_BASE: tuple[tuple[tuple[str, ...], float], ...] = (
    (("rce", "sql_injection"), 9.5),
    (("ssti",), 9.0),
    (("xss", "ssrf"), 7.5),
    (("auth_bypass", "idor"), 8.0),
    (("prototype_pollution",), 7.0),
    (("insecure_cors",), 6.0),
    (("unsafe_eval",), 6.5),
)


def extract_json_text(text: str) -> str:
    """Strip a Markdown code fence (```json ... ```) if present."""
    raw = text or ""
    match = _CODE_FENCE_RE.search(raw)
    if match:
        return match.group(1).strip()
    return raw.strip()


def parse_judgment(text: str) -> dict[str, Any]:
    """Parse classifier text into a JSON object or raise MalformedJudgmentError."""
    payload = extract_json_text(text)
    if not payload:
        raise MalformedJudgmentError("classifier returned an empty response")
    try:
        data = json.loads(payload)
    except ValueError as exc:
        raise MalformedJudgmentError(f"classifier returned invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedJudgmentError(f"classifier returned {type(data).__name__}, expected an object")
    return data


def _first(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _text(raw: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    value = _first(raw, keys)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        text = "\n".join(f"- {item}" for item in value if item is not None)
    else:
        text = str(value)
    text = text.strip()
    if text.lower() in _PLACEHOLDERS:
        return None
    return text


def _number(raw: Mapping[str, Any], keys: tuple[str, ...]) -> float | None:
    value = _first(raw, keys)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:  # NaN
        return None
    return number


def normalize_confidence(value: float | None) -> float:
    """Coerce to [0, 1]; values in (1, 100] are read as percentages."""
    if value is None:
        return 0.0
    if 1.0 < value <= 100.0:
        value = value / 100.0
    return max(0.0, min(1.0, value))


def infer_severity(category: str, confidence: float) -> Severity:
    """Severity tier from category family and confidence."""
    label = category.lower()
    if any(token in label for token in _CRITICAL_TYPES):
        return Severity.CRITICAL if confidence >= 0.7 else Severity.HIGH
    if any(token in label for token in _HIGH_TYPES):
        return Severity.HIGH if confidence >= 0.7 else Severity.MEDIUM
    if any(token in label for token in _MEDIUM_TYPES):
        return Severity.MEDIUM if confidence >= 0.6 else Severity.LOW
    return Severity.MEDIUM


def estimate_cvss(category: str, confidence: float) -> float:
    """Base CVSS for the category family scaled by confidence."""
    label = category.lower()
    base = 5.0
    for tokens, score in _CVSS_BASE:
        if any(token in label for token in tokens):
            base = score
            break
    return min(10.0, base * confidence)


def _sections(*parts: tuple[str, str | None]) -> str:
    return "\n\n".join(f"**{title}:**\n{body}" for title, body in parts if body)


def normalize_judgment(raw: Mapping[str, Any], fragment: Fragment) -> Finding:
    """
    Build a Finding from one classifier judgment.

    Raises MalformedJudgmentError when the judgment carries no vulnerability category.
    """
    if not isinstance(raw, Mapping):
        raise MalformedJudgmentError(f"judgment must be a mapping, got {type(raw).__name__}")

    label_value = _first(raw, CATEGORY_KEYS)
    label = str(label_value).strip() if label_value is not None else ""
    if not label:
        raise MalformedJudgmentError("judgment has no vulnerability category")
    category = VulnerabilityCategory.parse(label)

    confidence = normalize_confidence(_number(raw, CONFIDENCE_KEYS))
    severity = Severity.parse(_first(raw, SEVERITY_KEYS)) or infer_severity(label, confidence)

    cvss = _number(raw, CVSS_KEYS)
    if cvss is None or cvss <= 0:
        cvss = estimate_cvss(label, confidence)
    cvss = max(0.0, min(10.0, cvss))

    resource_url = _text(raw, URL_KEYS) or fragment.source_url
    vulnerable_code = _text(raw, CODE_KEYS) or fragment.code
    sink = _text(raw, SINK_KEYS)
    payloads = _text(raw, PAYLOAD_KEYS)
    fix_code = _text(raw, FIX_CODE_KEYS)

    how = _text(raw, HOW_KEYS) or (
        "- Heuristic Filter: Suspicious patterns detected in code\n"
        "- LLM Analysis: Deep semantic analysis performed\n"
        f"- Confidence: {confidence * 100:.0f}%"
    )
    where_parts = [f"**Resource URL:** {resource_url}"]
    if sink:
        where_parts.append(f"**Vulnerable Sink:** {sink}")
    if vulnerable_code:
        where_parts.append(f"**Code:**\n```javascript\n{vulnerable_code}\n```")
    reproduce = _sections(("Steps", _text(raw, STEPS_KEYS)), ("Payloads", payloads)) or "No reproduction steps provided"

    where = "\n\n".join(where_parts)
    reproduction_steps = f"## How We Found\n{how}\n\n## Where We Found\n{where}\n\n## How to Reproduce\n{reproduce}"
    remediation = (
        _sections(("Remediation Options", _text(raw, FIX_OPTIONS_KEYS)), ("Code Examples", fix_code))
        or "No remediation guidance provided"
    )
    impact = "\n\n".join(
        part
        for part in (
            f"**CVSS Score:** {cvss:.1f}/10.0",
            _sections(("Exploitation Scenarios", _text(raw, EXPLOITATION_KEYS))),
            _sections(("Business Impact", _text(raw, BUSINESS_KEYS))),
        )
        if part
    )

    return Finding(
        category=category,
        label=label,
        severity=severity,
        confidence=confidence,
        cvss_score=cvss,
        short_explanation=_text(raw, WHAT_KEYS) or "No description provided",
        reproduction_steps=reproduction_steps,
        remediation_code=fix_code or "// See remediation explanation for fix guidance",
        remediation_explanation=remediation,
        impact_description=impact,
        vulnerable_code=vulnerable_code,
        resource_url=resource_url,
        vulnerable_sink=sink,
        exploit_payload=payloads,
        fragment=fragment,
    )


__all__ = [
    "estimate_cvss",
    "extract_json_text",
    "infer_severity",
    "normalize_confidence",
    "normalize_judgment",
    "parse_judgment",
]
