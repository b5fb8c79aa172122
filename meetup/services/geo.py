"""Distance helpers for restaurant cards."""

import math

EARTH_RADIUS_MILES = 3958.8
WALKING_SPEED_MPH = 3
METERS_PER_MILE = 1609.34


def calculate_distance(origin_lat, origin_lng, dest_lat, dest_lng) -> float:
    """Great-circle distance between two points, in miles."""
    d_lat = math.radians(dest_lat - origin_lat)
    d_lng = math.radians(dest_lng - origin_lng)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin_lat))
        * math.cos(math.radians(dest_lat))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def calculate_walking_time(distance_miles: float) -> int:
    """Approximate walking time in whole minutes at 3 mph."""
    return int(round(distance_miles / WALKING_SPEED_MPH * 60))


def miles_to_meters(miles: float) -> float:
    return miles * METERS_PER_MILE
