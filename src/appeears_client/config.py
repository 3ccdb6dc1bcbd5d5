"""Environment-driven settings for the AppEEARS client."""

import os
from dataclasses import dataclass

from appeears_client.schemas import Credentials
from appeears_client.startup import load_environment

DEFAULT_BASE_URL = "https://appeears.earthdatacloud.nasa.gov/api"
DEFAULT_HTTP_TIMEOUT_SECONDS = 60.0
DEFAULT_POLL_INTERVAL_SECONDS = 60.0
DEFAULT_MAX_WAIT_SECONDS = 6 * 60 * 60.0
MIN_POLL_INTERVAL_SECONDS = 30.0


@dataclass(frozen=True)
class AppEEARSSettings:
    base_url: str = DEFAULT_BASE_URL
    bundle_base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_wait_seconds: float | None = DEFAULT_MAX_WAIT_SECONDS


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _max_wait_seconds() -> float | None:
    raw = os.getenv("APPEEARS_MAX_WAIT_SECONDS", "").strip().lower()
    if not raw:
        return DEFAULT_MAX_WAIT_SECONDS
    if raw in {"0", "none", "off", "unbounded"}:
        return None
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_MAX_WAIT_SECONDS
    return value if value > 0 else DEFAULT_MAX_WAIT_SECONDS


def load_settings() -> AppEEARSSettings:
    """Build settings from APPEEARS_* environment variables (and .env)."""
    load_environment()

    base_url = os.getenv("APPEEARS_BASE_URL", "").strip().rstrip("/") or DEFAULT_BASE_URL
    bundle_base_url = os.getenv("APPEEARS_BUNDLE_BASE_URL", "").strip().rstrip("/") or base_url

    return AppEEARSSettings(
        base_url=base_url,
        bundle_base_url=bundle_base_url,
        timeout_seconds=_positive_float("APPEEARS_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS),
        poll_interval_seconds=_positive_float("APPEEARS_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS),
        max_wait_seconds=_max_wait_seconds(),
    )


def credentials_from_env() -> Credentials:
    """Read Earthdata credentials from APPEEARS_USERNAME and APPEEARS_PASSWORD."""
    load_environment()

    username = os.environ.get("APPEEARS_USERNAME")
    password = os.environ.get("APPEEARS_PASSWORD")
    if not username or not password:
        raise ValueError("APPEEARS_USERNAME and APPEEARS_PASSWORD must be set")
    return Credentials(username=username, password=password)
