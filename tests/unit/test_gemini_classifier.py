# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import json

import pytest

from astra.classifier import RESPONSE_SCHEMA, GeminiClassifier, build_analysis_prompt, extract_candidate_text
from astra.config import ScanSettings
from astra.errors import ClassificationError, MalformedJudgmentError
from astra.http import StubHttpClient
from astra.http.models import HttpResponse
from astra.models import Fragment

FRAGMENT = Fragment(code='el.innerHTML = "<b>" + name;', source_url="https://example.com/app.js")
ENDPOINT = "https://gemini.test/v1beta/models/gemini-test:generateContent"


def _settings(api_key="test-key") -> ScanSettings:
    return ScanSettings(api_key=api_key, gemini_model="gemini-test", gemini_base_url="https://gemini.test/v1beta/")


def _candidate(text: str) -> HttpResponse:
    body = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return HttpResponse(ok=True, status_code=200, text=json.dumps(body))


def test_prompt_embeds_code_context_and_sinks():
    prompt = build_analysis_prompt(FRAGMENT)
    assert json.dumps(FRAGMENT.code) in prompt
    assert "CONTEXT: https://example.com/app.js" in prompt
    assert "HEURISTIC SINKS: innerHTML" in prompt


def test_endpoint_and_payload_shape():
    classifier = GeminiClassifier(StubHttpClient(), _settings())
    assert classifier.endpoint == ENDPOINT
    payload = classifier.build_payload(FRAGMENT)
    assert payload["generationConfig"]["responseMimeType"] == "application/json"
    assert payload["generationConfig"]["responseSchema"] is RESPONSE_SCHEMA
    assert "innerHTML" in payload["contents"][0]["parts"][0]["text"]


def test_classify_returns_parsed_judgment():
    stub = StubHttpClient()
    stub.add(ENDPOINT, _candidate('```json\n{"vulnerability_type": "xss", "confidence": 0.8}\n```'))

    judgment = asyncio.run(GeminiClassifier(stub, _settings()).classify(FRAGMENT))

    assert judgment == {"vulnerability_type": "xss", "confidence": 0.8}
    sent = stub.requests[0]
    assert sent.method == "POST"
    assert sent.headers["x-goog-api-key"] == "test-key"
    assert sent.headers["Content-Type"] == "application/json"
    assert json.loads(sent.body)["contents"][0]["parts"][0]["text"].startswith("You are ASTRA")


def test_classify_without_api_key_fails_before_network():
    stub = StubHttpClient()
    with pytest.raises(ClassificationError):
        asyncio.run(GeminiClassifier(stub, _settings(api_key=None)).classify(FRAGMENT))
    assert stub.requests == []


def test_classify_http_error_includes_api_message():
    stub = StubHttpClient()
    stub.add(ENDPOINT, HttpResponse(ok=True, status_code=429, text='{"error": {"message": "quota exceeded"}}'))
    with pytest.raises(ClassificationError) as excinfo:
        asyncio.run(GeminiClassifier(stub, _settings()).classify(FRAGMENT))
    assert "HTTP 429: quota exceeded" in str(excinfo.value)


def test_classify_transport_error():
    stub = StubHttpClient()
    with pytest.raises(ClassificationError) as excinfo:
        asyncio.run(GeminiClassifier(stub, _settings()).classify(FRAGMENT))
    assert "No stubbed response configured" in str(excinfo.value)


def test_classify_malformed_output():
    stub = StubHttpClient()
    stub.add(ENDPOINT, _candidate("not json at all"))
    with pytest.raises(MalformedJudgmentError):
        asyncio.run(GeminiClassifier(stub, _settings()).classify(FRAGMENT))


def test_extract_candidate_text_variants():
    assert extract_candidate_text({"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}) == "a\nb"
    with pytest.raises(ClassificationError):
        extract_candidate_text({"candidates": []})
    with pytest.raises(ClassificationError):
        extract_candidate_text({"candidates": [{"finishReason": "SAFETY"}]})
    with pytest.raises(ClassificationError):
        extract_candidate_text(["not", "an", "object"])
