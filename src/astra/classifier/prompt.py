# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Prompt and response schema for the LLM classifier."""

from __future__ import annotations

import json
from typing import Any

from ..models import Fragment, VulnerabilityCategory
from ..prefilter import matched_sinks

CATEGORY_CHOICES = "|".join(member.value for member in VulnerabilityCategory)

SYSTEM_PROMPT = """You are ASTRA, a red-team security analyst reviewing client-side JavaScript.
Treat all provided code as hostile and untrusted. NEVER execute code.
Trace source -> transform -> sink flows, expand partial indicators into exploit
hypotheses, and prioritize impact: remote code execution > account takeover >
data exposure > defacement. Output exactly one JSON object and nothing else."""

_STRING = {"type": "STRING"}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "vulnerability_type": {"type": "STRING", "description": CATEGORY_CHOICES},
        "confidence": {"type": "NUMBER", "description": "0.0 to 1.0"},
        "what_we_found": _STRING,
        "how_we_found": _STRING,
        "where_found_url": _STRING,
        "where_found_code": _STRING,
        "where_found_sink": _STRING,
        "reproduce_steps": _STRING,
        "reproduce_payloads": _STRING,
        "fix_options": _STRING,
        "fix_code_examples": _STRING,
        "impact_cvss": {"type": "NUMBER", "description": "CVSS score 0-10"},
        "impact_exploitation": _STRING,
        "impact_business": _STRING,
    },
    "required": [
        "vulnerability_type",
        "confidence",
        "what_we_found",
        "how_we_found",
        "where_found_url",
        "where_found_code",
        "where_found_sink",
        "reproduce_steps",
        "reproduce_payloads",
        "fix_options",
        "fix_code_examples",
        "impact_cvss",
        "impact_exploitation",
        "impact_business",
    ],
}


def build_analysis_prompt(fragment: Fragment) -> str:
    """Render the per-fragment analysis prompt; the code is embedded as a JSON string."""
    sinks = ", ".join(matched_sinks(fragment.code)) or "none"
    context = fragment.source_url or "Unknown source"
    return f"""{SYSTEM_PROMPT}

Analyze this JavaScript code for security vulnerabilities:

{json.dumps(fragment.code)}

CONTEXT: {context}
HEURISTIC SINKS: {sinks}

Answer in six sections:
1. what_we_found: concise description, bullet points.
2. how_we_found: heuristic patterns and reasoning applied, bullet points.
3. where_found_url / where_found_code / where_found_sink: location and exact sink.
4. reproduce_steps (numbered) and reproduce_payloads (2-3 variants, bullet list).
5. fix_options (descriptions only) and fix_code_examples (code for each option).
6. impact_cvss (0.0-10.0), impact_exploitation and impact_business (bullet points).

vulnerability_type must be one of: {CATEGORY_CHOICES}.
If no vulnerability is found, set "vulnerability_type": "none", "confidence": 0.0 and other string fields to "N/A".
Output must be valid JSON. No extra fields. No markdown wrapper."""


__all__ = ["CATEGORY_CHOICES", "RESPONSE_SCHEMA", "SYSTEM_PROMPT", "build_analysis_prompt"]
