# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Report export exports."""

from .report import build_export_payload, default_filename, export_html, export_json, render_html

__all__ = ["build_export_payload", "default_filename", "export_html", "export_json", "render_html"]
