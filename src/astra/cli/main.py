# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""ASTRA CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from ..config import HttpSettings, ScanSettings, load_http_settings, load_scan_settings
from ..errors import AstraError, ErrorCategory
from ..export import export_html, export_json
from ..log import setup_logging
from ..models import ScanProgress, ScanResult
from ..runtime import Astra
from ..scoring import DEFAULT_TOP_ISSUES, top_issues

CLI_TEXT_TRUNCATION_BYTES = 4096
EXIT_FAILURE = 1
EXIT_INVALID_TARGET = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ASTRA client-side script reconnaissance scanner")
    parser.add_argument("url", help="Target URL to scan")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument("--export-json", metavar="PATH", help="Write a JSON report to PATH")
    parser.add_argument("--export-html", metavar="PATH", help="Write an HTML report to PATH")
    parser.add_argument(
        "--top",
        type=int,
        default=DEFAULT_TOP_ISSUES,
        metavar="N",
        help=f"Number of top issues to list (default: {DEFAULT_TOP_ISSUES})",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Do not record this scan in the local history",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", metavar="LEVEL", help="Logging level (default: ASTRA_LOG_LEVEL or WARNING)")
    return parser


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _truncate_for_cli(value: Any, *, max_bytes: int) -> Any:
    if isinstance(value, str):
        return _truncate_text_bytes(value, max_bytes)
    if isinstance(value, dict):
        return {k: _truncate_for_cli(v, max_bytes=max_bytes) for k, v in value.items()}
    if isinstance(value, list):
        return [_truncate_for_cli(v, max_bytes=max_bytes) for v in value]
    return value


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(_truncate_for_cli(payload, max_bytes=CLI_TEXT_TRUNCATION_BYTES), sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(result: ScanResult, *, top: int = DEFAULT_TOP_ISSUES) -> None:
    risk = result.risk_score
    print(f"[ASTRA] Target: {result.target_url}")
    if risk is not None:
        print(f"Risk score: {risk.score}/100 (Grade {risk.grade}, {risk.level})")
    print(
        f"Scripts: {result.scripts_count}  Fragments: {result.fragments_count}  "
        f"Failed: {result.failed_count}  Duration: {result.duration_seconds:.1f}s"
    )
    if result.is_clean:
        print("Scan Complete: No high-confidence vulnerabilities found.")
        return

    counts = result.summary.severity_counts
    print("Severity: " + ", ".join(f"{name}={count}" for name, count in counts.items()))
    print("Top issues:")
    for finding in top_issues(result.findings, top):
        print(
            f"- [{finding.severity.value}] {finding.label} "
            f"(CVSS {finding.cvss_score:.1f}, {finding.confidence * 100:.0f}% confidence): {finding.short_explanation}"
        )
        print(f"  {finding.resource_url}")


def _print_progress(progress: ScanProgress) -> None:
    counter = f" [{progress.current}/{progress.total}]" if progress.total else ""
    detail = f": {progress.detail}" if progress.detail else ""
    print(f"... {progress.message}{counter}{detail}", file=sys.stderr)


async def _run(
    args: argparse.Namespace,
    http_settings: HttpSettings,
    scan_settings: ScanSettings,
) -> ScanResult:
    on_progress = None if args.json else _print_progress
    async with Astra(
        http_settings=http_settings,
        scan_settings=scan_settings,
        record_history=not args.no_history,
        on_progress=on_progress,
        top_count=args.top,
    ) as astra:
        return await astra.analyze(args.url)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    http_settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        http_settings.verify_ssl = False
    scan_settings: ScanSettings = load_scan_settings()

    try:
        result = asyncio.run(_run(args, http_settings, scan_settings))
    except AstraError as exc:
        print(f"[ASTRA] Scan failed: {exc.reason}", file=sys.stderr)
        return EXIT_INVALID_TARGET if exc.category == ErrorCategory.VALIDATION else EXIT_FAILURE

    if args.export_json:
        export_json(result, args.export_json)
    if args.export_html:
        export_html(result, args.export_html)

    if args.json:
        _print_json(result)
    else:
        _pretty_print(result, top=args.top)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
