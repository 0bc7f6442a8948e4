# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Proxy-chain fetching: ordered, sequential fallback across intermediaries."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from ..config import HttpSettings, load_http_settings
from ..errors import AcquisitionError, AllAttemptsFailedError, ErrorCategory, FetchError
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse
from ..http.url import build_intermediary_url
from ..utils.fallback import first_success

logger = logging.getLogger(__name__)

_TIMEOUT_ERROR_TYPES = {"TimeoutException", "ConnectTimeout", "ReadTimeout", "WriteTimeout", "PoolTimeout", "TimeoutError"}


def proxy_error_message(body: str) -> str | None:
    """
    Return the error reported by a proxy that answered 200 with a JSON error envelope.

    Recognized shapes: ``{"error": ...}`` and ``{"contents": null, "status": {...}}``.
    Anything that is not a JSON object is treated as real content.
    """
    text = (body or "").lstrip()
    if not text.startswith("{"):
        return None
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    if data.get("error"):
        return str(data["error"])
    if "contents" in data and data.get("contents") is None and data.get("status"):
        return "Invalid response"
    return None


def _response_failure(response: HttpResponse) -> FetchError:
    if not response.ok:
        category = ErrorCategory.TIMEOUT if response.error_type in _TIMEOUT_ERROR_TYPES else ErrorCategory.CONNECTION_ERROR
        return FetchError(response.error_message or "transport error", cause_category=category)
    return FetchError(f"HTTP {response.status_code}")


class ProxyChain:
    """Fetch text through an ordered list of intermediaries, first success wins."""

    def __init__(
        self,
        http_client: HttpClient,
        intermediaries: Sequence[str] | None = None,
        *,
        settings: HttpSettings | None = None,
    ):
        self.settings = settings or load_http_settings()
        self.http_client = http_client
        self.intermediaries = tuple(intermediaries if intermediaries is not None else self.settings.proxy_chain)

    async def _fetch_via(self, url: str, intermediary: str) -> str:
        request_url = build_intermediary_url(intermediary, url)
        response = await self.http_client.request(
            HttpRequest(
                url=request_url,
                timeout=self.settings.attempt_timeout,
                allow_redirects=self.settings.allow_redirects,
            )
        )
        if not response.is_success:
            raise _response_failure(response)
        message = proxy_error_message(response.text)
        if message is not None:
            raise FetchError(f"Proxy returned error: {message}")
        return response.text

    async def fetch_text(self, url: str) -> str:
        """Return the body of ``url`` or raise AcquisitionError once every intermediary failed."""

        async def attempt(intermediary: str) -> str:
            return await self._fetch_via(url, intermediary)

        try:
            text = await first_success(
                self.intermediaries,
                attempt,
                timeout=self.settings.attempt_timeout,
                label=f"fetch {url}",
            )
        except AllAttemptsFailedError as exc:
            logger.warning("All %d intermediaries failed for %s", len(self.intermediaries), url)
            raise AcquisitionError(url, exc.last_error) from exc
        logger.debug("Fetched %s (%d chars)", url, len(text))
        return text


__all__ = ["ProxyChain", "proxy_error_message"]
