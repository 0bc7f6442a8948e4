# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import logging
import socket
import ssl

import httpx

from astra import config
from astra.config import DEFAULT_PROXY_CHAIN, DEFAULT_USER_AGENT, DIRECT_INTERMEDIARY
from astra.errors import (
    AcquisitionError,
    AllAttemptsFailedError,
    ErrorCategory,
    FetchError,
    InvalidTargetError,
    TotalClassificationError,
    categorize_exception,
    error_category_to_reason,
)
from astra.log import resolve_log_level, setup_logging


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("ASTRA_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("ASTRA_ATTEMPT_TIMEOUT", "3")
    monkeypatch.setenv("ASTRA_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("ASTRA_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("ASTRA_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("ASTRA_MAX_SCRIPTS", "7")
    monkeypatch.setenv("ASTRA_PROXY_CHAIN", "direct, https://relay.test/?url= ,")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.attempt_timeout == 3.0
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.max_scripts == 7
    assert settings.proxy_chain == ("direct", "https://relay.test/?url=")


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("ASTRA_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("ASTRA_HTTP_MAX_BODY_BYTES", "-5")
    monkeypatch.setenv("ASTRA_MAX_SCRIPTS", "ten")
    monkeypatch.setenv("ASTRA_PROXY_CHAIN", " , ")

    settings = config.load_http_settings()

    assert settings.timeout == config.HttpSettings.timeout
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes
    assert settings.max_scripts == config.HttpSettings.max_scripts
    assert settings.proxy_chain == DEFAULT_PROXY_CHAIN
    assert DEFAULT_USER_AGENT in settings.user_agent


def test_default_proxy_chain_starts_direct():
    assert DEFAULT_PROXY_CHAIN[0] == DIRECT_INTERMEDIARY
    assert len(DEFAULT_PROXY_CHAIN) == 4


def test_scan_settings_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ASTRA_CHUNK_SIZE", "20")
    monkeypatch.setenv("ASTRA_BENIGN_THRESHOLD", "4")
    monkeypatch.setenv("ASTRA_HISTORY_LIMIT", "0")
    monkeypatch.setenv("ASTRA_HOME", str(tmp_path))
    monkeypatch.setenv("ASTRA_GEMINI_MODEL", "gemini-test")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "fallback-key")

    settings = config.load_scan_settings()

    assert settings.chunk_size == 20
    assert settings.benign_threshold == 4
    assert settings.history_limit == config.ScanSettings.history_limit
    assert settings.gemini_model == "gemini-test"
    assert settings.api_key == "fallback-key"
    assert settings.history_path == str(tmp_path / "scan_history.json")
    assert settings.annotations_path == str(tmp_path / "reviews.json")


def test_scan_settings_prefers_gemini_api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    monkeypatch.setenv("API_KEY", "secondary")
    assert config.load_scan_settings().api_key == "primary"


def test_bool_env_truthy_variants(monkeypatch):
    for value in ("1", "true", "YES", "on"):
        monkeypatch.setenv("ASTRA_HTTP_REDIRECTS", value)
        assert config.load_http_settings().allow_redirects is True
    monkeypatch.setenv("ASTRA_HTTP_REDIRECTS", "nope")
    assert config.load_http_settings().allow_redirects is False


def test_categorize_exception_variants():
    assert categorize_exception(None) == ErrorCategory.NONE
    assert categorize_exception(httpx.ReadTimeout("slow")) == ErrorCategory.TIMEOUT
    assert categorize_exception(asyncio.TimeoutError()) == ErrorCategory.TIMEOUT
    assert categorize_exception(ssl.SSLError("bad cert")) == ErrorCategory.SSL_ERROR
    assert categorize_exception(socket.gaierror("no such host")) == ErrorCategory.DNS_ERROR
    assert categorize_exception(httpx.ConnectError("refused")) == ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ConnectionResetError()) == ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ValueError("other")) == ErrorCategory.UNKNOWN_ERROR


def test_error_reasons():
    assert "valid URL" in error_category_to_reason(ErrorCategory.VALIDATION)
    assert error_category_to_reason(ErrorCategory.NONE) == ""
    assert error_category_to_reason(None) == ""


def test_invalid_target_error_carries_validation_reason():
    err = InvalidTargetError("bad")
    assert err.category == ErrorCategory.VALIDATION
    assert err.reason == error_category_to_reason(ErrorCategory.VALIDATION)
    custom = InvalidTargetError("empty", reason="Please enter a URL to analyze.")
    assert custom.reason == "Please enter a URL to analyze."


def test_acquisition_error_guidance_and_timeout_category():
    generic = AcquisitionError("https://example.com", FetchError("HTTP 503"))
    assert generic.category == ErrorCategory.ACQUISITION
    assert "Try:" in generic.reason
    assert "HTTP 503" in str(generic)

    timed_out = AcquisitionError("https://example.com", FetchError("slow", cause_category=ErrorCategory.TIMEOUT))
    assert timed_out.category == ErrorCategory.TIMEOUT
    assert "timed out" in timed_out.reason

    wait_for_timeout = AcquisitionError("https://example.com", asyncio.TimeoutError())
    assert wait_for_timeout.category == ErrorCategory.TIMEOUT


def test_all_attempts_failed_keeps_every_error():
    errors = [RuntimeError("a"), RuntimeError("b")]
    err = AllAttemptsFailedError("failed", errors)
    assert err.errors == errors
    assert err.last_error is errors[-1]
    assert AllAttemptsFailedError("none", []).last_error is None


def test_total_classification_error_message():
    err = TotalClassificationError(3, RuntimeError("quota"))
    assert err.fragment_count == 3
    assert err.category == ErrorCategory.CLASSIFICATION
    assert "3" in str(err) and "quota" in str(err)


def test_log_level_argument_overrides_env(monkeypatch):
    monkeypatch.setenv("ASTRA_LOG_LEVEL", "error")
    assert resolve_log_level() == logging.ERROR
    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level("nonsense") == logging.WARNING
    monkeypatch.delenv("ASTRA_LOG_LEVEL")
    assert resolve_log_level() == logging.WARNING


def test_setup_logging_keeps_transport_loggers_quiet(monkeypatch):
    monkeypatch.delenv("ASTRA_LOG_LEVEL", raising=False)
    astra_logger = logging.getLogger("astra")
    httpx_logger = logging.getLogger("httpx")
    saved = (astra_logger.level, httpx_logger.level)
    try:
        assert setup_logging("info") == logging.INFO
        assert astra_logger.level == logging.INFO
        assert httpx_logger.level == logging.WARNING
        setup_logging("debug")
        assert httpx_logger.level == logging.DEBUG
    finally:
        astra_logger.setLevel(saved[0])
        httpx_logger.setLevel(saved[1])
