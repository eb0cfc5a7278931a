"""
GPS geofence check (Haversine great-circle distance, mean Earth radius).
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_M = 6_371_000


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class GeoFence:
    lat: float
    lng: float
    radius_meters: float


@dataclass(frozen=True)
class GeofenceResult:
    in_radius: bool
    distance_meters: int


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Distance in metres between two points given in decimal degrees."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_meters(a: GeoPoint, b: GeoPoint) -> int:
    # Half-up to whole metres
    return int(math.floor(haversine_distance(a, b) + 0.5))


def check_radius(current: GeoPoint, target: GeoFence) -> GeofenceResult:
    distance = distance_meters(current, GeoPoint(target.lat, target.lng))
    return GeofenceResult(in_radius=distance <= target.radius_meters, distance_meters=distance)


def format_distance(meters: int) -> str:
    if meters < 1000:
        return f"{meters} m"
    return f"{meters / 1000:.1f} km"
