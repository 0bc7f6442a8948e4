# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Content acquisition: proxy-chain fetching and script collection."""

from .parser import ExtractedScripts, extract_scripts
from .proxy import ProxyChain, proxy_error_message
from .scraper import ScriptAcquirer, scope_script_urls

__all__ = [
    "ExtractedScripts",
    "ProxyChain",
    "ScriptAcquirer",
    "extract_scripts",
    "proxy_error_message",
    "scope_script_urls",
]
