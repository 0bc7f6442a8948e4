# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import asyncio
import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    VALIDATION = "VALIDATION"
    ACQUISITION = "ACQUISITION"
    CLASSIFICATION = "CLASSIFICATION"
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


ACQUISITION_GUIDANCE = (
    "Unable to access the target URL. This could be due to:\n"
    "- The website blocking automated access\n"
    "- Proxy rate limits\n"
    "- Network connectivity issues\n"
    "- Invalid URL or website down\n\n"
    "Try:\n"
    "- Using a different URL\n"
    "- Waiting a few minutes and trying again\n"
    "- Testing with a smaller, public website first"
)


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.VALIDATION: "Please enter a valid URL (e.g., https://example.com).",
        ErrorCategory.ACQUISITION: ACQUISITION_GUIDANCE,
        ErrorCategory.CLASSIFICATION: (
            "The vulnerability classifier could not analyze any code fragment. "
            "Check the API key and connectivity, then try again."
        ),
        ErrorCategory.TIMEOUT: (
            "Request timed out. The target website is taking too long to respond. "
            "Try a faster website or try again later."
        ),
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "An error occurred during analysis.",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "An error occurred during analysis.")


class AstraError(Exception):
    """Base class for ASTRA errors carrying a category and a user-facing reason."""

    category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR

    def __init__(self, message: str, *, reason: str | None = None):
        super().__init__(message)
        self.reason = reason if reason is not None else error_category_to_reason(self.category)


class InvalidTargetError(AstraError):
    """Target URL is empty, malformed, or not http(s)."""

    category = ErrorCategory.VALIDATION


class AllAttemptsFailedError(AstraError):
    """Every option of an ordered fallback failed."""

    def __init__(self, message: str, errors: list[BaseException]):
        super().__init__(message)
        self.errors = list(errors)

    @property
    def last_error(self) -> BaseException | None:
        return self.errors[-1] if self.errors else None


class FetchError(AstraError):
    """A single intermediary attempt failed (bad status, transport error, proxy error body)."""

    def __init__(self, message: str, *, cause_category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR):
        super().__init__(message)
        self.cause_category = cause_category


class AcquisitionError(AstraError):
    """All proxy-chain intermediaries failed for a URL."""

    category = ErrorCategory.ACQUISITION

    def __init__(self, url: str, last_error: BaseException | None = None):
        detail = str(last_error) if last_error is not None else "Unknown error"
        super().__init__(f"Failed to fetch {url}. All intermediaries failed. Last error: {detail}")
        self.url = url
        self.last_error = last_error
        if _is_timeout(last_error):
            self.category = ErrorCategory.TIMEOUT
            self.reason = error_category_to_reason(ErrorCategory.TIMEOUT)


class ClassificationError(AstraError):
    """A single fragment could not be classified."""

    category = ErrorCategory.CLASSIFICATION


class MalformedJudgmentError(ClassificationError):
    """Classifier output could not be normalized into a Finding."""


class TotalClassificationError(AstraError):
    """Fragments were found, but every classification call failed."""

    category = ErrorCategory.CLASSIFICATION

    def __init__(self, fragment_count: int, last_error: BaseException | None = None):
        super().__init__(f"All {fragment_count} fragment classification(s) failed; last error: {last_error}")
        self.fragment_count = fragment_count
        self.last_error = last_error


def _is_timeout(exc: BaseException | None) -> bool:
    if exc is None:
        return False
    if isinstance(exc, FetchError):
        return exc.cause_category == ErrorCategory.TIMEOUT
    return categorize_exception(exc) == ErrorCategory.TIMEOUT


__all__ = [
    "ACQUISITION_GUIDANCE",
    "AcquisitionError",
    "AllAttemptsFailedError",
    "AstraError",
    "ClassificationError",
    "ErrorCategory",
    "FetchError",
    "InvalidTargetError",
    "MalformedJudgmentError",
    "TotalClassificationError",
    "categorize_exception",
    "error_category_to_reason",
]
