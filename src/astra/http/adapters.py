# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable HttpClient implementations."""

from __future__ import annotations

import asyncio

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests and offline runs.

    Responses are matched on the exact request URL. A configured delay makes
    the stub suspend like a slow network call.
    """

    def __init__(
        self,
        responses: dict[str, HttpResponse] | None = None,
        *,
        delays: dict[str, float] | None = None,
    ):
        self._responses = responses or {}
        self._delays = delays or {}
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse, *, delay: float | None = None) -> None:
        self._responses[url] = response
        if delay is not None:
            self._delays[url] = delay

    @property
    def requested_urls(self) -> list[str]:
        return [r.url for r in self.requests]

    async def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        delay = self._delays.get(request.url)
        if delay:
            await asyncio.sleep(delay)
        if request.url in self._responses:
            return self._responses[request.url]
        return HttpResponse(ok=False, status_code=None, url=request.url, error_message="No stubbed response configured")

    async def aclose(self) -> None:
        self.closed = True
