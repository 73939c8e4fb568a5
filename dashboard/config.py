from __future__ import annotations

import os
import json
import sys
from dataclasses import dataclass
from typing import Optional


# Debug flag: default off. Enable via CLI arg "--dashboard-debug" or env DASHBOARD_DEBUG=1.
DEBUG = "--dashboard-debug" in sys.argv or os.environ.get("DASHBOARD_DEBUG") == "1"


def _printable(data) -> str:
    try:
        return data if isinstance(data, str) else json.dumps(data, indent=2, ensure_ascii=False)
    except Exception:
        return str(data)


def dlog(label: str, data):
    if not DEBUG:
        return
    print(f"[dashboard-debug] {label}: {_printable(data)}")


def elog(label: str, data):
    """Always-on variant of dlog for failures the page also reports."""
    print(f"[dashboard-error] {label}: {_printable(data)}", file=sys.stderr)


DEFAULT_API_BASE = "https://api.mapleai.de"
TOKEN_SLOT = "mapleai_token"


@dataclass(frozen=True)
class DashboardSettings:
    api_base: str = DEFAULT_API_BASE
    token_file: Optional[str] = None
    status_poll_interval: float = 60.0
    usage_refresh_interval: float = 30.0
    error_banner_seconds: float = 5.0
    request_timeout: float = 10.0
    host: str = "127.0.0.1"
    port: int = 18080


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        dlog("settings_invalid_value", {"key": key, "value": raw, "default": default})
        return default
    if value <= 0:
        dlog("settings_invalid_value", {"key": key, "value": raw, "default": default})
        return default
    return value


def load_settings() -> DashboardSettings:
    """Read dashboard settings from env."""
    api_base = (os.environ.get("MAPLE_API_BASE") or DEFAULT_API_BASE).strip().rstrip("/") or DEFAULT_API_BASE
    token_file = os.environ.get("DASHBOARD_TOKEN_FILE") or None
    try:
        port = int(os.environ.get("PORT", "18080"))
    except ValueError:
        dlog("settings_invalid_value", {"key": "PORT", "value": os.environ.get("PORT"), "default": 18080})
        port = 18080

    settings = DashboardSettings(
        api_base=api_base,
        token_file=token_file,
        status_poll_interval=_env_float("STATUS_POLL_INTERVAL", 60.0),
        usage_refresh_interval=_env_float("USAGE_REFRESH_INTERVAL", 30.0),
        error_banner_seconds=_env_float("ERROR_BANNER_SECONDS", 5.0),
        request_timeout=_env_float("REQUEST_TIMEOUT", 10.0),
        host=os.environ.get("HOST", "127.0.0.1"),
        port=port,
    )
    dlog(
        "dashboard_settings",
        {
            "api_base": settings.api_base,
            "token_file": settings.token_file,
            "status_poll_interval": settings.status_poll_interval,
            "usage_refresh_interval": settings.usage_refresh_interval,
        },
    )
    return settings
