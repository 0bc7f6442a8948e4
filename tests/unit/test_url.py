# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from astra.errors import InvalidTargetError
from astra.http.url import (
    base_domain,
    build_intermediary_url,
    hostname_of,
    is_same_site,
    resolve_script_url,
    validate_target_url,
)


def test_validate_target_url_accepts_http_and_https():
    assert validate_target_url("  https://example.com/path  ") == "https://example.com/path"
    assert validate_target_url("http://localhost:8080") == "http://localhost:8080"


@pytest.mark.parametrize("url", ["", "   ", None])
def test_validate_target_url_rejects_empty(url):
    with pytest.raises(InvalidTargetError) as excinfo:
        validate_target_url(url)
    assert excinfo.value.reason == "Please enter a URL to analyze."


@pytest.mark.parametrize("url", ["example.com", "ftp://example.com/file", "javascript:alert(1)", "https://", "http://[::1"])
def test_validate_target_url_rejects_malformed(url):
    with pytest.raises(InvalidTargetError):
        validate_target_url(url)


def test_hostname_and_base_domain():
    assert hostname_of("https://API.Example.com:443/x") == "api.example.com"
    assert hostname_of("not a url") == ""
    assert base_domain("cdn.assets.example.com") == "example.com"
    assert base_domain("localhost") == "localhost"


def test_is_same_site():
    assert is_same_site("https://a.example.com/x.js", "https://example.com") is True
    assert is_same_site("https://example.com/app.js", "https://example.com/") is True
    assert is_same_site("https://static.example.com/x.js", "https://www.example.com") is True
    assert is_same_site("https://evil.com/x.js", "https://example.com") is False
    assert is_same_site("https://cdn.jsdelivr.net/npm/lib.js", "https://example.com") is False
    assert is_same_site("/relative.js", "https://example.com") is False


def test_resolve_script_url():
    base = "https://example.com/app/index.html"
    assert resolve_script_url("/static/main.js", base) == "https://example.com/static/main.js"
    assert resolve_script_url("vendor.js", base) == "https://example.com/app/vendor.js"
    assert resolve_script_url("//cdn.example.com/x.js", base) == "https://cdn.example.com/x.js"
    assert resolve_script_url("data:text/javascript,alert(1)", base) is None


def test_build_intermediary_url():
    target = "https://example.com/a?b=c&d=e"
    assert build_intermediary_url("direct", target) == target
    assert (
        build_intermediary_url("https://api.allorigins.win/raw?url=", target)
        == "https://api.allorigins.win/raw?url=https%3A%2F%2Fexample.com%2Fa%3Fb%3Dc%26d%3De"
    )
