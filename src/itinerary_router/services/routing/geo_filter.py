"""Selection of activities that can be placed on the map."""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...models.domain import Activity
from ..geospatial import is_valid_coordinate
from .models import Location


def has_usable_coordinates(activity: Activity, zero_is_unset: bool | None = None) -> bool:
    coordinate = activity.coordinate
    if coordinate is None:
        return False
    if not is_valid_coordinate(coordinate.lat, coordinate.lng):
        return False
    if zero_is_unset is None:
        zero_is_unset = settings.zero_coordinates_are_unset
    if zero_is_unset and coordinate.lat == 0 and coordinate.lng == 0:
        return False
    return True


def extract_locations(
    activities: Sequence[Activity],
    zero_is_unset: bool | None = None,
) -> tuple[list[Location], list[Activity]]:
    """Split activities into routable locations and the ones left as-is.

    Both lists keep the caller's relative order.
    """
    locations: list[Location] = []
    unrouted: list[Activity] = []
    for index, activity in enumerate(activities):
        if has_usable_coordinates(activity, zero_is_unset):
            locations.append(
                Location(
                    lat=float(activity.latitude),
                    lng=float(activity.longitude),
                    source_index=index,
                    activity=activity,
                )
            )
        else:
            unrouted.append(activity)
    return locations, unrouted
