# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from astra.models import AcquiredResource, Fragment
from astra.prefilter import (
    benign_signal_count,
    heuristic_filter,
    is_suspicious,
    iter_chunks,
    matched_sinks,
)

PAGE = "https://example.com/"


def test_iter_chunks_splits_on_line_windows():
    code = "\n".join(f"line{i}" for i in range(120))
    chunks = list(iter_chunks(code, 50))
    assert len(chunks) == 3
    assert chunks[0].split("\n")[0] == "line0"
    assert chunks[1].split("\n")[0] == "line50"
    assert len(chunks[2].split("\n")) == 20


def test_matched_sinks_and_suspicion():
    chunk = "const html = atob(data);\nnode.innerHTML = html;"
    assert matched_sinks(chunk) == ["innerHTML", "atob"]
    assert is_suspicious(chunk) is True
    assert is_suspicious("const total = a + b;") is False


def test_benign_signal_count_counts_distinct_patterns():
    chunk = "/* Copyright 2024 ACME, MIT License */"
    # copyright, license, "/*" and "*/"
    assert benign_signal_count(chunk) == 4
    assert benign_signal_count("/* a */ /* b */ /* c */") == 2
    assert benign_signal_count("license LICENSE License") == 1
    assert benign_signal_count("let x = 1;") == 0


def test_commented_chunk_with_sink_is_kept():
    code = "/* init */\nconst el = document.getElementById('out');\n/* render */\nel.innerHTML = userInput;"
    resources = [AcquiredResource(code=code, source_url="https://example.com/app.js")]
    fragments = heuristic_filter(resources)
    assert fragments == [Fragment(code=code, source_url="https://example.com/app.js")]


def test_inline_inner_html_sink_is_flagged():
    resources = [AcquiredResource(code="element.innerHTML = userInput;", source_url=PAGE)]
    fragments = heuristic_filter(resources)
    assert fragments == [Fragment(code="element.innerHTML = userInput;", source_url=PAGE)]


def test_boilerplate_heavy_chunk_is_skipped():
    code = "/*! jQuery v3.7 | (c) OpenJS Foundation | jquery.org/license */\neval(payload);"
    resources = [AcquiredResource(code=code, source_url="https://example.com/jquery.js")]
    assert heuristic_filter(resources) == []
    # A looser threshold lets the same chunk through.
    assert len(heuristic_filter(resources, benign_threshold=10)) == 1


def test_blank_resources_and_chunks_are_skipped():
    resources = [
        AcquiredResource(code="   \n\t", source_url=PAGE),
        AcquiredResource(code="\n" * 60 + "document.cookie = token;", source_url="https://example.com/a.js"),
    ]
    fragments = heuristic_filter(resources, chunk_size=50)
    assert len(fragments) == 1
    assert fragments[0].source_url == "https://example.com/a.js"
    assert "document.cookie" in fragments[0].code


def test_only_suspicious_chunks_survive_and_keep_attribution():
    safe = "\n".join("let x = 1;" for _ in range(50))
    risky = "window.location = target;"
    resources = [AcquiredResource(code=safe + "\n" + risky, source_url="https://example.com/app.js")]
    fragments = heuristic_filter(resources, chunk_size=50)
    assert fragments == [Fragment(code=risky, source_url="https://example.com/app.js")]
    assert fragments[0].line_count == 1


def test_filter_is_idempotent():
    resources = [
        AcquiredResource(code="element.innerHTML = userInput;\nlet y = 2;", source_url=PAGE),
        AcquiredResource(code="\n".join(f"sessionStorage.setItem('k{i}', v);" for i in range(70)), source_url=PAGE),
        AcquiredResource(code="const a = 1;", source_url=PAGE),
    ]
    once = heuristic_filter(resources)
    twice = heuristic_filter(once)
    assert once
    assert twice == once
