# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for ASTRA."""

import os
from dataclasses import dataclass, field

from .version import __version__

DEFAULT_USER_AGENT = f"ASTRA/{__version__} (client-side script reconnaissance)"

DIRECT_INTERMEDIARY = "direct"
DEFAULT_PROXY_CHAIN: tuple[str, ...] = (
    DIRECT_INTERMEDIARY,
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?",
    "https://api.codetabs.com/v1/proxy?quest=",
)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or default


def _default_home() -> str:
    return os.path.join(os.path.expanduser("~"), ".astra")


@dataclass
class HttpSettings:
    """HTTP client and acquisition defaults."""

    timeout: float = 10.0
    attempt_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 16 * 1024 * 1024
    max_scripts: int = 50
    proxy_chain: tuple[str, ...] = DEFAULT_PROXY_CHAIN

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("ASTRA_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        max_scripts = _int_env("ASTRA_MAX_SCRIPTS", cls.max_scripts)
        if max_scripts < 0:
            max_scripts = cls.max_scripts
        return cls(
            timeout=_float_env("ASTRA_HTTP_TIMEOUT", cls.timeout),
            attempt_timeout=_float_env("ASTRA_ATTEMPT_TIMEOUT", cls.attempt_timeout),
            user_agent=os.getenv("ASTRA_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("ASTRA_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("ASTRA_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
            max_scripts=max_scripts,
            proxy_chain=_list_env("ASTRA_PROXY_CHAIN", DEFAULT_PROXY_CHAIN),
        )


@dataclass
class ScanSettings:
    """Pre-filter, classifier and storage defaults."""

    chunk_size: int = 50
    benign_threshold: int = 2
    history_limit: int = 50
    home_dir: str = field(default_factory=_default_home)
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    classifier_timeout: float = 60.0
    api_key: str | None = None

    @property
    def history_path(self) -> str:
        return os.path.join(self.home_dir, "scan_history.json")

    @property
    def annotations_path(self) -> str:
        return os.path.join(self.home_dir, "reviews.json")

    @classmethod
    def from_env(cls) -> "ScanSettings":
        """Create settings from environment variables (evaluated at call time)."""
        chunk_size = _int_env("ASTRA_CHUNK_SIZE", cls.chunk_size)
        if chunk_size <= 0:
            chunk_size = cls.chunk_size
        history_limit = _int_env("ASTRA_HISTORY_LIMIT", cls.history_limit)
        if history_limit <= 0:
            history_limit = cls.history_limit
        return cls(
            chunk_size=chunk_size,
            benign_threshold=_int_env("ASTRA_BENIGN_THRESHOLD", cls.benign_threshold),
            history_limit=history_limit,
            home_dir=os.getenv("ASTRA_HOME") or _default_home(),
            gemini_model=os.getenv("ASTRA_GEMINI_MODEL", cls.gemini_model),
            gemini_base_url=os.getenv("ASTRA_GEMINI_BASE_URL", cls.gemini_base_url),
            classifier_timeout=_float_env("ASTRA_CLASSIFIER_TIMEOUT", cls.classifier_timeout),
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_scan_settings() -> ScanSettings:
    """Load scan settings from environment with sensible defaults."""
    return ScanSettings.from_env()
