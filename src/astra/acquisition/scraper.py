# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Collect a page's inline scripts and same-site external scripts."""

from __future__ import annotations

import asyncio
import logging

from ..config import HttpSettings, load_http_settings
from ..errors import AcquisitionError
from ..http.client import HttpClient
from ..http.url import is_same_site, resolve_script_url
from ..models import AcquiredResource
from .parser import extract_scripts
from .proxy import ProxyChain

logger = logging.getLogger(__name__)


def scope_script_urls(sources: list[str], target_url: str, *, max_scripts: int | None = None) -> list[str]:
    """
    Resolve raw ``src`` values and keep the ones on the target's host or base domain.

    Unresolvable and duplicate URLs are dropped; discovery order is preserved.
    """
    scoped: list[str] = []
    seen: set[str] = set()
    for src in sources:
        absolute = resolve_script_url(src, target_url)
        if absolute is None:
            logger.debug("Skipping unresolvable script src %r", src)
            continue
        if absolute in seen:
            continue
        seen.add(absolute)
        if not is_same_site(absolute, target_url):
            logger.debug("Skipping cross-domain script %s", absolute)
            continue
        scoped.append(absolute)
        if max_scripts and len(scoped) >= max_scripts:
            break
    return scoped


class ScriptAcquirer:
    """Fetches a target page through the proxy chain and gathers its scripts."""

    def __init__(
        self,
        http_client: HttpClient,
        *,
        settings: HttpSettings | None = None,
        proxy_chain: ProxyChain | None = None,
    ):
        self.settings = settings or load_http_settings()
        self.proxy_chain = proxy_chain or ProxyChain(http_client, settings=self.settings)

    async def _fetch_external(self, url: str) -> AcquiredResource | None:
        try:
            code = await self.proxy_chain.fetch_text(url)
        except AcquisitionError as exc:
            logger.warning("Could not fetch script %s: %s", url, exc)
            return None
        return AcquiredResource(code=code, source_url=url)

    async def acquire(self, target_url: str) -> list[AcquiredResource]:
        """
        Return inline scripts followed by successfully fetched external scripts.

        Raises AcquisitionError when the page itself cannot be fetched. External
        script failures are logged and dropped.
        """
        html = await self.proxy_chain.fetch_text(target_url)
        scripts = extract_scripts(html)

        resources = [AcquiredResource(code=body, source_url=target_url) for body in scripts.inline]

        external_urls = scope_script_urls(scripts.external, target_url, max_scripts=self.settings.max_scripts or None)
        logger.info("Found %d external scripts from same domain/subdomains", len(external_urls))

        fetched = await asyncio.gather(*(self._fetch_external(url) for url in external_urls))
        externals = [resource for resource in fetched if resource is not None]
        logger.info("Successfully fetched %d/%d external scripts", len(externals), len(external_urls))

        return resources + externals


__all__ = ["ScriptAcquirer", "scope_script_urls"]
