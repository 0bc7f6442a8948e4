# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTML script extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser


@dataclass
class ExtractedScripts:
    inline: list[str] = field(default_factory=list)
    external: list[str] = field(default_factory=list)


class _ScriptParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.scripts = ExtractedScripts()
        self._in_inline = False
        self._buffer: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag.lower() != "script":
            return
        src = None
        for key, value in attrs:
            if key.lower() == "src":
                src = value
                break
        if src is not None and src.strip():
            self.scripts.external.append(src.strip())
            self._in_inline = False
            return
        self._in_inline = True
        self._buffer = []

    def handle_data(self, data: str) -> None:
        if self._in_inline:
            self._buffer.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag.lower() != "script" or not self._in_inline:
            return
        self._flush()

    def close(self) -> None:
        super().close()
        if self._in_inline:
            self._flush()

    def _flush(self) -> None:
        body = "".join(self._buffer)
        if body.strip():
            self.scripts.inline.append(body)
        self._in_inline = False
        self._buffer = []


def extract_scripts(html: str) -> ExtractedScripts:
    """Split a page's ``<script>`` elements into inline bodies and raw ``src`` values."""
    parser = _ScriptParser()
    parser.feed(html or "")
    parser.close()
    return parser.scripts


__all__ = ["ExtractedScripts", "extract_scripts"]
