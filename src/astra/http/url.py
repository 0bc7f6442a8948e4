# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by acquisition and reporting."""

from __future__ import annotations

from urllib.parse import quote, urljoin, urlparse

from ..config import DIRECT_INTERMEDIARY
from ..errors import InvalidTargetError

_ALLOWED_SCHEMES = {"http", "https"}


def validate_target_url(url: str | None) -> str:
    """Return the stripped target URL or raise InvalidTargetError."""
    raw = str(url or "").strip()
    if not raw:
        raise InvalidTargetError("empty target URL", reason="Please enter a URL to analyze.")
    try:
        parsed = urlparse(raw)
        hostname = parsed.hostname
    except ValueError as exc:
        raise InvalidTargetError(f"malformed target URL: {raw!r}") from exc
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not hostname:
        raise InvalidTargetError(f"unsupported target URL: {raw!r}")
    return raw


def hostname_of(url: str) -> str:
    """Lowercased hostname of a URL, or an empty string when it cannot be parsed."""
    try:
        return (urlparse(str(url or "")).hostname or "").lower()
    except ValueError:
        return ""


def base_domain(hostname: str) -> str:
    """Last two DNS labels of a hostname (``api.example.com`` -> ``example.com``)."""
    return ".".join(hostname.split(".")[-2:])


def is_same_site(script_url: str, target_url: str) -> bool:
    """
    Return True when ``script_url`` is on the target's host or shares its base domain.

    Example:
      https://a.example.com/x.js vs https://example.com -> True
      https://evil.com/x.js vs https://example.com -> False
    """
    script_host = hostname_of(script_url)
    target_host = hostname_of(target_url)
    if not script_host or not target_host:
        return False
    if script_host == target_host:
        return True
    return base_domain(script_host) == base_domain(target_host)


def resolve_script_url(src: str, base_url: str) -> str | None:
    """Resolve a ``<script src>`` value against the page URL; None for non-http(s) results."""
    raw = str(src or "").strip()
    if not raw:
        return None
    try:
        absolute = urljoin(base_url, raw)
        parsed = urlparse(absolute)
        hostname = parsed.hostname
    except ValueError:
        return None
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not hostname:
        return None
    return parsed._replace(fragment="").geturl()


def build_intermediary_url(intermediary: str, url: str) -> str:
    """Build the URL to request through one proxy-chain intermediary."""
    if intermediary == DIRECT_INTERMEDIARY:
        return url
    return f"{intermediary}{quote(url, safe='')}"


__all__ = [
    "base_domain",
    "build_intermediary_url",
    "hostname_of",
    "is_same_site",
    "resolve_script_url",
    "validate_target_url",
]
