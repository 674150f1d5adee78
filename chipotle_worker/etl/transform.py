"""Utilities for turning Chipotle service responses into locations and menu summaries."""

import logging
from typing import Any, Dict, List, Optional

from chipotle_worker.core.errors import DecodeError, MenuSummaryError
from chipotle_worker.models import Location, MenuSummary, Price

logger = logging.getLogger(__name__)

# Restaurants whose published postal code is wrong.
ZIP_CODE_OVERRIDES = {3065: "75235"}

_BOWL_FIELDS = {
    "veggie": "veggie_bowl_price",
    "chicken": "chicken_bowl_price",
    "steak": "steak_bowl_price",
}


def _restaurant_id(record: Dict[str, Any]) -> Optional[int]:
    raw = record.get("restaurantNumber", record.get("id"))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def get_zip_code(location_id: int, address: Dict[str, Any]) -> Optional[str]:
    zip_code = ZIP_CODE_OVERRIDES.get(location_id) or address.get("postalCode")
    if not zip_code:
        return None
    return str(zip_code)[:5]


def to_us_locations(payload: Dict[str, Any]) -> List[Location]:
    data = payload.get("data")
    if not isinstance(data, list):
        raise DecodeError("restaurant search response is missing the data list")

    locations: List[Location] = []
    for record in data:
        if not isinstance(record, dict):
            continue
        addresses = record.get("addresses") or []
        address = addresses[0] if addresses and isinstance(addresses[0], dict) else None
        if address is None or address.get("countryCode") != "US":
            continue

        location_id = _restaurant_id(record)
        if location_id is None:
            logger.debug("Skipping record without restaurant number: %s", record)
            continue

        zip_code = get_zip_code(location_id, address)
        if zip_code is None:
            logger.warning("Skipping restaurant %s without postal code", location_id)
            continue
        locations.append(Location(id=location_id, zip_code=zip_code))

    logger.info("Extracted %d US locations from %d records", len(locations), len(data))
    return locations


def summarize_menu(payload: Dict[str, Any]) -> MenuSummary:
    """Collect the veggie, chicken and steak bowl prices from an online menu.

    A repeated bowl replaces the earlier price until all three are found.
    """
    restaurant_id = _restaurant_id({"id": payload.get("restaurantId")})
    if restaurant_id is None:
        raise DecodeError("menu response is missing restaurantId")

    prices: Dict[str, Price] = {}
    for item in payload.get("entrees") or []:
        if len(prices) == len(_BOWL_FIELDS):
            break
        if not isinstance(item, dict):
            continue
        if str(item.get("itemType", "")).lower() != "bowl":
            continue
        name = str(item.get("itemName", "")).lower().replace("bowl", "").strip()
        field_name = _BOWL_FIELDS.get(name)
        if field_name is None:
            continue
        try:
            prices[field_name] = Price(
                normal_price=float(item["unitPrice"]),
                delivery_price=float(item["unitDeliveryPrice"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"menu item {item.get('itemName')!r} has no usable price") from exc

    missing = [field_name for field_name in _BOWL_FIELDS.values() if field_name not in prices]
    if missing:
        raise MenuSummaryError(missing)
    return MenuSummary(restaurant_id=restaurant_id, **prices)
