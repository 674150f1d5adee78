"""Client utilities for the Chipotle restaurant and menu services."""

import json
import logging
import re
from typing import Any, Dict
from urllib.parse import quote

import requests

from chipotle_worker.core.config import DEFAULT_API_KEY_URL, DEFAULT_SERVICES_URL
from chipotle_worker.core.errors import (
    ApiKeyNotFoundError,
    DecodeError,
    NetworkError,
    UpstreamError,
)
from chipotle_worker.models import MenuRequest, RestaurantSearchParams

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

API_KEY_HEADER = "Ocp-Apim-Subscription-Key"
RESTAURANT_SEARCH_PATH = "/restaurant/v3/restaurant"
MENU_PATH_FORMAT = "/menuinnovation/v1/restaurants/{restaurant_id}/onlinemenu"
DEFAULT_TIMEOUT = 10

API_KEY_REGEX = re.compile(r'gatewaySubscriptionKey:Q\("([a-zA-Z0-9-]+)"\)')


def build_search_body(params: RestaurantSearchParams) -> str:
    """Serialize a restaurant search to its JSON request body."""
    return json.dumps(params.to_payload())


def build_menu_path(request: MenuRequest) -> str:
    """Path and query string of the online menu for one restaurant."""
    path = MENU_PATH_FORMAT.format(restaurant_id=int(request.restaurant_id))
    flag = "true" if request.include_unavailable else "false"
    return f"{path}?channelId={quote(request.channel_id, safe='')}&includeUnavailableItems={flag}"


def fetch_restaurants(
    params: RestaurantSearchParams,
    api_key: str,
    base_url: str = DEFAULT_SERVICES_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """POST a restaurant search and return the decoded response document."""
    url = f"{base_url.rstrip('/')}{RESTAURANT_SEARCH_PATH}"
    headers = {"Content-Type": "application/json", API_KEY_HEADER: api_key}
    logger.info(
        "Searching restaurants near (%s, %s) page=%s size=%s",
        params.latitude,
        params.longitude,
        params.page_index,
        params.page_size,
    )
    response = _send("POST", url, headers=headers, data=build_search_body(params), timeout=timeout)
    return _decode_json(response, url)


def fetch_menu(
    restaurant_id: int,
    api_key: str,
    channel_id: str = "web",
    include_unavailable: bool = True,
    base_url: str = DEFAULT_SERVICES_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """GET the online menu of a restaurant and return the decoded response document."""
    request = MenuRequest(restaurant_id, channel_id=channel_id, include_unavailable=include_unavailable)
    url = f"{base_url.rstrip('/')}{build_menu_path(request)}"
    logger.info("Fetching online menu for restaurant=%s channel=%s", restaurant_id, channel_id)
    response = _send("GET", url, headers={API_KEY_HEADER: api_key}, timeout=timeout)
    return _decode_json(response, url)


def fetch_api_key(bundle_url: str = DEFAULT_API_KEY_URL, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Pull the public subscription key out of the web-ordering JS bundle."""
    logger.info("Discovering subscription key from %s", bundle_url)
    response = _send("GET", bundle_url, timeout=timeout)
    match = API_KEY_REGEX.search(response.text or "")
    if not match:
        logger.error("No subscription key found in bundle %s", bundle_url)
        raise ApiKeyNotFoundError(f"the API key could not be found in {bundle_url}")
    return match.group(1)


def _send(method: str, url: str, timeout: float, **kwargs: Any) -> requests.Response:
    try:
        response = _SESSION.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as exc:
        logger.error("%s %s failed: %s", method, url, exc)
        raise NetworkError(f"{method} {url} failed: {exc}") from exc

    if not 200 <= response.status_code < 300:
        logger.error("%s %s returned status=%s body=%s", method, url, response.status_code, response.text[:500])
        raise UpstreamError(response.status_code, response.text, url)
    return response


def _decode_json(response: requests.Response, url: str) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("Response from %s is not valid JSON: %s", url, response.text[:200])
        raise DecodeError(f"unable to parse the response body from {url}: {exc}") from exc
    if not isinstance(payload, dict):
        raise DecodeError(f"expected a JSON object from {url}, got {type(payload).__name__}")
    return payload
