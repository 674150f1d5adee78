"""Job that fetches bowl prices for every restaurant in a ZIP code."""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from chipotle_worker.core.config import ConfigError, Settings, get_required_zip_code, get_settings
from chipotle_worker.core.errors import ChipotleError
from chipotle_worker.core.storage import load_locations, write_json
from chipotle_worker.etl.transform import summarize_menu
from chipotle_worker.jobs.export_locations import fetch_us_locations, resolve_api_key
from chipotle_worker.models import Location
from chipotle_worker.vendors import chipotle

logger = logging.getLogger(__name__)


def _known_locations(settings: Settings, api_key: str) -> List[Location]:
    if settings.locations_path and Path(settings.locations_path).is_file():
        logger.info("Loading locations from %s", settings.locations_path)
        return load_locations(settings.locations_path)
    return fetch_us_locations(settings, api_key)


def run_fetch_menus(zip_code: Optional[str] = None, output_path: Optional[str] = None) -> List[Dict[str, Any]]:
    """Summarize the menu of each location in `zip_code`.

    A restaurant whose menu cannot be fetched or summarized is logged and
    left out; failures before the per-restaurant loop propagate.
    """
    settings = get_settings()
    zip_code = zip_code or get_required_zip_code(settings)
    api_key = resolve_api_key(settings)

    matches = [location for location in _known_locations(settings, api_key) if location.zip_code == zip_code]
    logger.info("Found %d locations in ZIP code %s", len(matches), zip_code)

    results: List[Dict[str, Any]] = []
    for location in matches:
        try:
            payload = chipotle.fetch_menu(
                location.id,
                api_key,
                channel_id=settings.menu_channel,
                include_unavailable=settings.include_unavailable,
                base_url=settings.services_url,
                timeout=settings.request_timeout,
            )
            summary = summarize_menu(payload)
        except ChipotleError as exc:
            logger.warning("Skipping menu for restaurant %s: %s", location.id, exc)
            continue
        results.append({"location": asdict(location), "menu": asdict(summary)})

    target = output_path or settings.menus_path
    if target:
        write_json(results, target)
    else:
        logger.info("MENUS_PATH is not set; summarized %d menus without saving.", len(results))
    return results


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    try:
        results = run_fetch_menus()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except ChipotleError as exc:
        logger.error("Menu job failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc
    logger.info("Summarized %d menus.", len(results))


if __name__ == "__main__":
    main()
