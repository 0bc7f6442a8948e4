# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
JSON and HTML report export.

Finding text originates from scraped code relayed through the classifier, so
every value rendered into HTML goes through ``html.escape`` and the document
forbids scripts via its Content-Security-Policy.
"""

from __future__ import annotations

import html
import json
import re
import time
from datetime import datetime, timezone
from typing import Any

from ..models import Finding, ScanResult
from ..scoring import calculate_risk_score, summarize

_FILENAME_UNSAFE_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def _esc(value: Any) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def build_export_payload(result: ScanResult, *, scan_date: str | None = None) -> dict[str, Any]:
    """Machine-readable snapshot: domain, scan date, findings, summary and risk score."""
    risk = result.risk_score or calculate_risk_score(result.findings)
    summary = result.summary if result.summary.total == len(result.findings) else summarize(result.findings)
    return {
        "domain": result.domain,
        "target_url": result.target_url,
        "scan_date": scan_date or datetime.now(timezone.utc).isoformat(),
        "vulnerabilities": [finding.to_dict() for finding in result.findings],
        "summary": summary.to_dict(),
        "risk_score": risk.to_dict(),
    }


def default_filename(domain: str, extension: str) -> str:
    safe = _FILENAME_UNSAFE_RE.sub("-", domain or "report")
    return f"astra-report-{safe}-{int(time.time() * 1000)}.{extension}"


def export_json(result: ScanResult, path: str, *, scan_date: str | None = None) -> str:
    payload = build_export_payload(result, scan_date=scan_date)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
    return path


def _render_finding(index: int, finding: Finding) -> str:
    severity = finding.severity.value
    remediation_code = (
        f"<pre><code>{_esc(finding.remediation_code)}</code></pre>" if finding.remediation_code else ""
    )
    return f"""
        <div class="vulnerability">
            <h3>{index}. {_esc(finding.label)}</h3>
            <div class="badges">
                <span class="severity severity-{_esc(severity.lower())}">{_esc(severity)}</span>
                <span class="badge">CVSS {finding.cvss_score:.1f}</span>
                <span class="badge">{round(finding.confidence * 100)}% Confidence</span>
            </div>
            <div class="section"><h4>What We Found</h4><p>{_esc(finding.short_explanation)}</p></div>
            <div class="section"><h4>Reproduction Steps</h4><pre><code>{_esc(finding.reproduction_steps)}</code></pre></div>
            <div class="section"><h4>Remediation</h4><p>{_esc(finding.remediation_explanation)}</p>{remediation_code}</div>
            <div class="section"><h4>Impact</h4><p>{_esc(finding.impact_description)}</p></div>
            <div class="section"><h4>Resource URL</h4><p class="url">{_esc(finding.resource_url)}</p></div>
        </div>"""


_STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; background: #0d1117; color: #c9d1d9; padding: 2rem; }
        .container { max-width: 1200px; margin: 0 auto; }
        .header, .stat-card, .vulnerability { background: #161b22; border: 1px solid #30363d; border-radius: 8px; padding: 1.5rem; margin-bottom: 1.5rem; }
        .header h1 { color: #58a6ff; }
        .warning { border: 1px solid #f85149; border-radius: 8px; padding: 1rem; margin-bottom: 2rem; color: #f85149; }
        .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 1rem; }
        .stat-value { font-size: 2rem; font-weight: bold; color: #58a6ff; }
        .severity, .badge { display: inline-block; padding: 0.25rem 0.75rem; border-radius: 4px; font-size: 0.75rem; border: 1px solid #30363d; }
        .severity-critical { color: #f85149; border-color: #f85149; }
        .severity-high { color: #fb923c; border-color: #fb923c; }
        .severity-medium { color: #d29922; border-color: #d29922; }
        .severity-low { color: #58a6ff; border-color: #58a6ff; }
        .section { margin: 1rem 0; }
        .section h4 { color: #8b949e; font-size: 0.875rem; text-transform: uppercase; margin-bottom: 0.5rem; }
        p { white-space: pre-wrap; }
        .url { word-break: break-all; color: #58a6ff; }
        pre { background: #0d1117; border: 1px solid #30363d; border-radius: 4px; padding: 1rem; white-space: pre-wrap; word-wrap: break-word; }
        .footer { text-align: center; color: #8b949e; margin-top: 3rem; }
"""


def render_html(result: ScanResult, *, scan_date: str | None = None) -> str:
    """Human-readable, script-free HTML report."""
    payload = build_export_payload(result, scan_date=scan_date)
    summary = payload["summary"]
    risk = payload["risk_score"]
    findings_html = "".join(_render_finding(i, finding) for i, finding in enumerate(result.findings, start=1))
    if not findings_html:
        findings_html = '<p class="clean">Scan Complete: No high-confidence vulnerabilities found.</p>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta http-equiv="Content-Security-Policy" content="default-src 'self'; style-src 'unsafe-inline'; script-src 'none';">
    <title>ASTRA Security Report - {_esc(payload["domain"])}</title>
    <style>{_STYLE}</style>
</head>
<body>
    <div class="container">
        <div class="warning">
            <strong>SECURITY NOTICE</strong>
            This report contains vulnerability details and exploit payloads displayed as text for documentation purposes only.
            Do not copy-paste payloads into live systems.
        </div>
        <div class="header">
            <h1>ASTRA Security Report</h1>
            <p><strong>Domain:</strong> {_esc(payload["domain"])}</p>
            <p><strong>Scan Date:</strong> {_esc(payload["scan_date"])}</p>
            <p><strong>Risk:</strong> {_esc(risk["score"])}/100 (Grade {_esc(risk["grade"])}, {_esc(risk["level"])})</p>
        </div>
        <div class="stats">
            <div class="stat-card"><div class="stat-value">{_esc(summary["total"])}</div><div>Total Vulnerabilities</div></div>
            <div class="stat-card"><div class="stat-value">{_esc(summary["avg_confidence"])}%</div><div>Average Confidence</div></div>
            <div class="stat-card"><div class="stat-value">{_esc(summary["avg_cvss"])}</div><div>Average CVSS Score</div></div>
            <div class="stat-card"><div class="stat-value">{len(summary["vulnerability_types"])}</div><div>Unique Vulnerability Types</div></div>
        </div>
        <h2>Detailed Findings</h2>
        {findings_html}
        <div class="footer">
            <p>Generated by ASTRA - client-side script reconnaissance</p>
            <p>This report is for informational purposes only. Please verify all findings before taking action.</p>
        </div>
    </div>
</body>
</html>
"""


def export_html(result: ScanResult, path: str, *, scan_date: str | None = None) -> str:
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(render_html(result, scan_date=scan_date))
    return path


__all__ = [
    "build_export_payload",
    "default_filename",
    "export_html",
    "export_json",
    "render_html",
]
