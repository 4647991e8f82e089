"""Great-circle distance and geofence checks."""

import math
from dataclasses import dataclass

EARTH_RADIUS_METERS = 6_371_000.0


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Return the haversine distance between two points in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    h = min(h, 1.0)
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def is_within_fence(
    point: Coordinate, target: Coordinate, threshold_meters: float
) -> bool:
    """Return True when the point lies within the threshold of the target."""
    return distance_meters(point, target) <= threshold_meters


@dataclass(frozen=True)
class Geofence:
    """Circular boundary around a fixed target."""

    target: Coordinate
    radius_meters: float

    def distance_to(self, point: Coordinate) -> float:
        return distance_meters(point, self.target)

    def contains(self, point: Coordinate) -> bool:
        return is_within_fence(point, self.target, self.radius_meters)
