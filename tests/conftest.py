import sys
from pathlib import Path

import pytest

# Ensure `chipotle_worker` is importable when running pytest from the repository root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chipotle_worker.core import config  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in (
        "CHIPOTLE_API_KEY",
        "CHIPOTLE_API_KEY_URL",
        "CHIPOTLE_SERVICES_URL",
        "CHIPOTLE_MENU_CHANNEL",
        "CHIPOTLE_INCLUDE_UNAVAILABLE",
        "REQUEST_TIMEOUT",
        "ZIP_CODE",
        "LOCATIONS_PATH",
        "MENUS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
