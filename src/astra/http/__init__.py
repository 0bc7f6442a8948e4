# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .headers import normalize_headers
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse
from .url import (
    base_domain,
    build_intermediary_url,
    hostname_of,
    is_same_site,
    resolve_script_url,
    validate_target_url,
)

__all__ = [
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "StubHttpClient",
    "base_domain",
    "build_intermediary_url",
    "create_default_http_client",
    "hostname_of",
    "is_same_site",
    "normalize_headers",
    "resolve_script_url",
    "validate_target_url",
]
