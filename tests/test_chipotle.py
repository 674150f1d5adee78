import json

import pytest
import requests

from chipotle_worker.core.errors import (
    ApiKeyNotFoundError,
    DecodeError,
    NetworkError,
    UpstreamError,
)
from chipotle_worker.models import Embeds, MenuRequest, RestaurantSearchParams
from chipotle_worker.vendors import chipotle

REFERENCE_SEARCH_BODY = """
{
    "latitude": 0,
    "longitude": 0,
    "radius": 999999999,
    "restaurantStatuses": ["OPEN", "LAB"],
    "conceptIds": ["CMG"],
    "orderBy": "distance",
    "orderByDescending": false,
    "pageSize": 4000,
    "pageIndex": 0,
    "embeds": {
        "addressTypes": ["MAIN"],
        "realHours": false,
        "directions": false,
        "catering": false,
        "onlineOrdering": true,
        "timezone": false,
        "marketing": false,
        "chipotlane": false,
        "sustainability": false,
        "experience": false
    }
}
"""


class DummyResponse:
    def __init__(self, status_code=200, text="{}"):
        self.status_code = status_code
        self.text = text

    def json(self):
        return json.loads(self.text)


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse()
        self.error = None

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, timeout, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(chipotle, "_SESSION", session)
    return session


def test_search_body_matches_reference_document():
    body = chipotle.build_search_body(RestaurantSearchParams(page_size=4000, page_index=0))
    assert json.loads(body) == json.loads(REFERENCE_SEARCH_BODY)


@pytest.mark.parametrize(
    "latitude, longitude",
    [(0, 0), (37.514844400000015, -121.91317609999999)],
)
def test_search_body_keeps_full_coordinate_precision(latitude, longitude):
    body = chipotle.build_search_body(RestaurantSearchParams(latitude=latitude, longitude=longitude))
    decoded = json.loads(body)
    assert decoded["latitude"] == latitude
    assert decoded["longitude"] == longitude
    assert json.loads(json.dumps(decoded)) == decoded


def test_search_body_embeds_are_camel_cased():
    params = RestaurantSearchParams(embeds=Embeds(real_hours=True, chipotlane=True, address_types=[]))
    embeds = json.loads(chipotle.build_search_body(params))["embeds"]
    assert embeds["realHours"] is True
    assert embeds["chipotlane"] is True
    assert embeds["addressTypes"] == []


def test_menu_path_for_reference_restaurant():
    assert (
        chipotle.build_menu_path(MenuRequest(restaurant_id=3065, channel_id="web", include_unavailable=True))
        == "/menuinnovation/v1/restaurants/3065/onlinemenu?channelId=web&includeUnavailableItems=true"
    )


def test_menu_path_renders_false_lowercase():
    path = chipotle.build_menu_path(MenuRequest(12, channel_id="kiosk app", include_unavailable=False))
    assert path.endswith("?channelId=kiosk%20app&includeUnavailableItems=false")


def test_menu_request_defaults_to_web_with_unavailable_items():
    path = chipotle.build_menu_path(MenuRequest(3065))
    assert path.endswith("?channelId=web&includeUnavailableItems=true")


def test_fetch_restaurants_posts_body_with_key_header(patch_session):
    patch_session.response = DummyResponse(text='{"data": []}')

    payload = chipotle.fetch_restaurants(RestaurantSearchParams(), "secret", base_url="https://example.test/")

    assert payload == {"data": []}
    method, url, timeout, kwargs = patch_session.calls[0]
    assert method == "POST"
    assert url == "https://example.test/restaurant/v3/restaurant"
    assert timeout == 10
    assert kwargs["headers"]["Ocp-Apim-Subscription-Key"] == "secret"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert json.loads(kwargs["data"]) == json.loads(REFERENCE_SEARCH_BODY)


def test_fetch_menu_requests_expected_url(patch_session):
    patch_session.response = DummyResponse(text='{"restaurantId": 3065}')

    payload = chipotle.fetch_menu(3065, "secret", base_url="https://example.test", timeout=3)

    assert payload["restaurantId"] == 3065
    method, url, timeout, kwargs = patch_session.calls[0]
    assert method == "GET"
    assert url == (
        "https://example.test/menuinnovation/v1/restaurants/3065/onlinemenu"
        "?channelId=web&includeUnavailableItems=true"
    )
    assert timeout == 3
    assert kwargs["headers"] == {"Ocp-Apim-Subscription-Key": "secret"}


@pytest.mark.parametrize(
    "call",
    [
        lambda: chipotle.fetch_restaurants(RestaurantSearchParams(), "key"),
        lambda: chipotle.fetch_menu(3065, "key"),
    ],
)
def test_non_2xx_raises_upstream_error(patch_session, call):
    patch_session.response = DummyResponse(status_code=403, text="forbidden")

    with pytest.raises(UpstreamError) as excinfo:
        call()

    assert excinfo.value.status_code == 403
    assert excinfo.value.body == "forbidden"


@pytest.mark.parametrize(
    "call",
    [
        lambda: chipotle.fetch_restaurants(RestaurantSearchParams(), "key"),
        lambda: chipotle.fetch_menu(3065, "key"),
    ],
)
def test_malformed_body_raises_decode_error(patch_session, call):
    patch_session.response = DummyResponse(text="<html>oops</html>")

    with pytest.raises(DecodeError):
        call()


def test_non_object_body_raises_decode_error(patch_session):
    patch_session.response = DummyResponse(text="[1, 2]")

    with pytest.raises(DecodeError):
        chipotle.fetch_menu(3065, "key")


def test_transport_failure_raises_network_error(patch_session):
    patch_session.error = requests.ConnectionError("dns failure")

    with pytest.raises(NetworkError):
        chipotle.fetch_restaurants(RestaurantSearchParams(), "key")


def test_timeout_raises_network_error(patch_session):
    patch_session.error = requests.Timeout("slow")

    with pytest.raises(NetworkError):
        chipotle.fetch_menu(3065, "key")


def test_fetch_api_key_extracts_key_from_bundle(patch_session):
    patch_session.response = DummyResponse(text='thingthing;gatewaySubscriptionKey:Q("fake-api-key");3fjhkasfd78r3')

    assert chipotle.fetch_api_key("https://cdn.example.test/app.js") == "fake-api-key"
    method, url, _, _ = patch_session.calls[0]
    assert (method, url) == ("GET", "https://cdn.example.test/app.js")


def test_fetch_api_key_missing_key(patch_session):
    patch_session.response = DummyResponse(text="thingthing;3fjhkasfd78r3")

    with pytest.raises(ApiKeyNotFoundError):
        chipotle.fetch_api_key()


def test_fetch_api_key_bad_status(patch_session):
    patch_session.response = DummyResponse(status_code=404, text="")

    with pytest.raises(UpstreamError):
        chipotle.fetch_api_key()
