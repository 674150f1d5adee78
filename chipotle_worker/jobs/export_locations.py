"""Job that snapshots every US Chipotle location and its ZIP code."""

import logging
from typing import List, Optional

from chipotle_worker.core.config import ConfigError, Settings, get_settings
from chipotle_worker.core.errors import ChipotleError
from chipotle_worker.core.storage import save_locations
from chipotle_worker.etl.transform import to_us_locations
from chipotle_worker.models import Location, RestaurantSearchParams
from chipotle_worker.vendors import chipotle

logger = logging.getLogger(__name__)


def resolve_api_key(settings: Settings) -> str:
    """Use the configured subscription key, or discover it from the web bundle."""
    if settings.api_key:
        return settings.api_key
    return chipotle.fetch_api_key(settings.api_key_url, timeout=settings.request_timeout)


def fetch_us_locations(settings: Settings, api_key: str) -> List[Location]:
    payload = chipotle.fetch_restaurants(
        RestaurantSearchParams(),
        api_key,
        base_url=settings.services_url,
        timeout=settings.request_timeout,
    )
    return to_us_locations(payload)


def run_export_locations(output_path: Optional[str] = None) -> List[Location]:
    settings = get_settings()
    api_key = resolve_api_key(settings)
    locations = fetch_us_locations(settings, api_key)

    target = output_path or settings.locations_path
    if target:
        save_locations(locations, target)
    else:
        logger.info("LOCATIONS_PATH is not set; fetched %d locations without saving.", len(locations))
    return locations


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    try:
        locations = run_export_locations()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except ChipotleError as exc:
        logger.error("Location export failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc
    logger.info("Exported %d US locations.", len(locations))


if __name__ == "__main__":
    main()
