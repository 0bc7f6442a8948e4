# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Gemini ``generateContent`` classifier over the shared HttpClient."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from ..config import ScanSettings, load_scan_settings
from ..errors import ClassificationError
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse
from ..models import Fragment
from .normalize import parse_judgment
from .prompt import RESPONSE_SCHEMA, build_analysis_prompt

logger = logging.getLogger(__name__)


def _response_error(response: HttpResponse) -> str:
    if not response.ok:
        return response.error_message or "transport error"
    message = ""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("error"):
        error = payload["error"]
        message = error.get("message", "") if isinstance(error, dict) else str(error)
    return f"HTTP {response.status_code}{': ' + message if message else ''}"


def extract_candidate_text(payload: Any) -> str:
    """Concatenate the text parts of the first candidate of a generateContent response."""
    if not isinstance(payload, dict):
        raise ClassificationError("Gemini response is not an object")
    candidates = payload.get("candidates")
    if not candidates:
        raise ClassificationError("Gemini response missing candidates")
    candidate = candidates[0] if isinstance(candidates[0], dict) else {}
    content = candidate.get("content") or {}
    parts = content.get("parts") or []
    chunks: list[str] = []
    for part in parts:
        if isinstance(part, dict) and part.get("text"):
            chunks.append(str(part["text"]))
        elif isinstance(part, str):
            chunks.append(part)
    if not chunks:
        raise ClassificationError("Gemini response missing content")
    return "\n".join(chunks).strip()


class GeminiClassifier:
    """Classifies fragments with a Gemini model using JSON-schema constrained output."""

    def __init__(self, http_client: HttpClient, settings: ScanSettings | None = None):
        self.http_client = http_client
        self.settings = settings or load_scan_settings()

    @property
    def endpoint(self) -> str:
        base = self.settings.gemini_base_url.rstrip("/")
        return f"{base}/models/{self.settings.gemini_model}:generateContent"

    def build_payload(self, fragment: Fragment) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_analysis_prompt(fragment)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    async def classify(self, fragment: Fragment) -> Mapping[str, Any]:
        if not self.settings.api_key:
            raise ClassificationError("No Gemini API key configured (set GEMINI_API_KEY)")

        response = await self.http_client.request(
            HttpRequest(
                url=self.endpoint,
                method="POST",
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.settings.api_key,
                },
                body=json.dumps(self.build_payload(fragment)),
                timeout=self.settings.classifier_timeout,
            )
        )
        if not response.is_success:
            raise ClassificationError(f"Gemini request failed: {_response_error(response)}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ClassificationError(f"Gemini returned non-JSON body: {exc}") from exc

        judgment = parse_judgment(extract_candidate_text(payload))
        logger.debug("Gemini judged %s as %s", fragment.source_url, judgment.get("vulnerability_type"))
        return judgment


__all__ = ["GeminiClassifier", "extract_candidate_text"]
