"""Application configuration helpers.

Credentials and output locations come from the environment (optionally via a
`.env` file). `CHIPOTLE_API_KEY` may be left unset, in which case the jobs
pull the public key out of the web-ordering bundle.
"""

import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_URL = "https://orderweb-cdn.chipotle.com/js/app.js"
DEFAULT_SERVICES_URL = "https://services.chipotle.com"


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    api_key_url: str = DEFAULT_API_KEY_URL
    services_url: str = DEFAULT_SERVICES_URL
    menu_channel: str = "web"
    include_unavailable: bool = True
    request_timeout: float = 10.0
    zip_code: Optional[str] = None
    locations_path: Optional[str] = None
    menus_path: Optional[str] = None


def _get_float(name: str, default: str) -> float:
    raw = (os.getenv(name) or "").strip() or default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a positive finite number, got {raw!r}")
    return value


def _get_optional(name: str) -> Optional[str]:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    api_key = os.getenv("CHIPOTLE_API_KEY", "").strip()
    api_key_url = os.getenv("CHIPOTLE_API_KEY_URL") or DEFAULT_API_KEY_URL
    services_url = (os.getenv("CHIPOTLE_SERVICES_URL") or DEFAULT_SERVICES_URL).rstrip("/")
    menu_channel = os.getenv("CHIPOTLE_MENU_CHANNEL") or "web"
    include_unavailable = os.getenv("CHIPOTLE_INCLUDE_UNAVAILABLE", "true").lower() in {"1", "true", "yes"}
    request_timeout = _get_float("REQUEST_TIMEOUT", "10")

    if not api_key:
        logger.warning("CHIPOTLE_API_KEY is not configured; the key will be discovered from %s.", api_key_url)

    return Settings(
        api_key=api_key,
        api_key_url=api_key_url,
        services_url=services_url,
        menu_channel=menu_channel,
        include_unavailable=include_unavailable,
        request_timeout=request_timeout,
        zip_code=_get_optional("ZIP_CODE"),
        locations_path=_get_optional("LOCATIONS_PATH"),
        menus_path=_get_optional("MENUS_PATH"),
    )


def get_required_zip_code(settings: Settings) -> str:
    if not settings.zip_code:
        raise ConfigError("ZIP_CODE must be set in the environment for the menu job to run.")
    return settings.zip_code
