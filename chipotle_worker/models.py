"""Core data models shared by the Chipotle restaurant and menu worker."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class Embeds:
    """Related sub-resources the restaurant service inlines into each result."""

    address_types: List[str] = field(default_factory=lambda: ["MAIN"])
    real_hours: bool = False
    directions: bool = False
    catering: bool = False
    online_ordering: bool = True
    timezone: bool = False
    marketing: bool = False
    chipotlane: bool = False
    sustainability: bool = False
    experience: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "addressTypes": list(self.address_types),
            "realHours": self.real_hours,
            "directions": self.directions,
            "catering": self.catering,
            "onlineOrdering": self.online_ordering,
            "timezone": self.timezone,
            "marketing": self.marketing,
            "chipotlane": self.chipotlane,
            "sustainability": self.sustainability,
            "experience": self.experience,
        }


@dataclass(slots=True)
class RestaurantSearchParams:
    """Body of a restaurant search.

    The defaults describe a single page holding every open or lab location of
    the CMG concept, ordered by distance from (0, 0). 4000 is a comfortable
    upper bound on the number of locations.
    """

    latitude: float = 0
    longitude: float = 0
    radius: float = 999999999
    restaurant_statuses: List[str] = field(default_factory=lambda: ["OPEN", "LAB"])
    concept_ids: List[str] = field(default_factory=lambda: ["CMG"])
    order_by: str = "distance"
    order_by_descending: bool = False
    page_size: int = 4000
    page_index: int = 0
    embeds: Embeds = field(default_factory=Embeds)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius": self.radius,
            "restaurantStatuses": list(self.restaurant_statuses),
            "conceptIds": list(self.concept_ids),
            "orderBy": self.order_by,
            "orderByDescending": self.order_by_descending,
            "pageSize": self.page_size,
            "pageIndex": self.page_index,
            "embeds": self.embeds.to_payload(),
        }


@dataclass(slots=True)
class MenuRequest:
    restaurant_id: int
    channel_id: str = "web"
    include_unavailable: bool = True


@dataclass(slots=True)
class Location:
    """Key identifying information for a US restaurant."""

    id: int
    zip_code: str


@dataclass(slots=True, eq=False)
class Price:
    normal_price: float
    delivery_price: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Price):
            return NotImplemented
        return math.isclose(self.normal_price, other.normal_price, abs_tol=1e-6) and math.isclose(
            self.delivery_price, other.delivery_price, abs_tol=1e-6
        )


@dataclass(slots=True)
class MenuSummary:
    """Bowl prices pulled out of a restaurant's online menu."""

    restaurant_id: int
    veggie_bowl_price: Price
    chicken_bowl_price: Price
    steak_bowl_price: Price
