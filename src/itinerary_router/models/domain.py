"""Domain models for itinerary activities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(slots=True, frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


@dataclass(slots=True, frozen=True)
class Activity:
    """A single itinerary entry as received from the planner UI.

    Coordinates are optional. Everything the optimizer does not look at is
    carried in ``extra`` so it can be handed back unchanged.
    """

    title: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    id: Optional[Union[str, int]] = None
    extra: dict = field(default_factory=dict, compare=False)

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(lat=self.latitude, lng=self.longitude)
