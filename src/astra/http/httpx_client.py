# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import httpx

from ..config import HttpSettings, load_http_settings
from .client import HttpClient
from .headers import normalize_headers
from .models import HttpRequest, HttpResponse

DEFAULT_BODY_LIMIT = 16 * 1024 * 1024


async def _read_capped(resp: httpx.Response, limit: int) -> tuple[bytes, bool]:
    """Read at most ``limit`` bytes of a streamed body; the flag reports truncation."""
    buffer = bytearray()
    async for chunk in resp.aiter_bytes():
        room = limit - len(buffer)
        if len(chunk) > room:
            buffer.extend(chunk[:room])
            return bytes(buffer), True
        buffer.extend(chunk)
    return bytes(buffer), False


def _decode(content: bytes, encoding: str | None) -> str:
    try:
        return content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


class HttpxClient(HttpClient):
    """Asynchronous httpx client wrapper; transport failures come back as ``ok=False`` responses."""

    def __init__(self, settings: HttpSettings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    @property
    def body_limit(self) -> int:
        return self.settings.max_body_bytes if self.settings.max_body_bytes > 0 else DEFAULT_BODY_LIMIT

    async def request(self, request: HttpRequest) -> HttpResponse:
        headers = {"User-Agent": self.settings.user_agent, **(request.headers or {})}
        limit = self.body_limit
        try:
            async with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=request.timeout if request.timeout is not None else self.settings.timeout,
                follow_redirects=request.allow_redirects,
            ) as resp:
                content, truncated = await _read_capped(resp, limit)
                text = _decode(content, resp.encoding)
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(
                ok=False,
                url=request.url,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )

        return HttpResponse(
            ok=True,
            status_code=resp.status_code,
            headers=normalize_headers(resp.headers),
            text=text,
            content=content,
            url=str(resp.url),
            meta={"body_truncated": truncated, "body_bytes_read": len(content), "body_bytes_limit": limit},
        )

    async def aclose(self) -> None:
        await self._client.aclose()
