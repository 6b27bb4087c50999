"""Nearest-aircraft search and close/audible alert decision — pure functions."""

from dataclasses import dataclass, field
from math import asin, cos, hypot, radians, sin, sqrt
from typing import Callable, Iterable

from geopy.distance import geodesic

from adsb_data import Aircraft, Altitude, AltitudeKind

FEET_PER_MILE = 5280.0

# ── Types ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ObserverPosition:
    latitude: float
    longitude: float
    altitude_ft: float = 0.0


@dataclass(frozen=True)
class AlertThresholds:
    min_altitude_ft: float
    max_altitude_ft: float
    max_distance_mi: float


@dataclass(frozen=True)
class CategoryOverride:
    """Per-category thresholds; 0 leaves the default in place."""
    min_altitude_ft: float = 0
    max_altitude_ft: float = 0
    max_distance_mi: float = 0


@dataclass(frozen=True)
class AlertPolicy:
    default: AlertThresholds
    overrides: dict[str, CategoryOverride] = field(default_factory=dict)

    def resolve(self, category: str) -> AlertThresholds:
        """Thresholds for *category*: set override fields, else the default."""
        override = self.overrides.get(category) if category else None
        if override is None:
            return self.default
        return AlertThresholds(
            min_altitude_ft=override.min_altitude_ft or self.default.min_altitude_ft,
            max_altitude_ft=override.max_altitude_ft or self.default.max_altitude_ft,
            max_distance_mi=override.max_distance_mi or self.default.max_distance_mi,
        )


@dataclass(frozen=True)
class ProximityResult:
    aircraft: Aircraft | None = None
    distance_mi: float = 0.0
    audible: bool = False
    thresholds: AlertThresholds | None = None


# ── Distance ─────────────────────────────────────────────────────────

_EARTH_RADIUS_MI = 3958.7613


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance on a sphere in miles (up to ~0.5% off)."""
    lat1, lon1, lat2, lon2 = map(radians, (lat1, lon1, lat2, lon2))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * _EARTH_RADIUS_MI * asin(sqrt(a))


def geodesic_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """WGS-84 ellipsoidal distance in miles."""
    return geodesic((lat1, lon1), (lat2, lon2)).miles


DistanceFn = Callable[[float, float, float, float], float]

DISTANCE_METHODS: dict[str, DistanceFn] = {
    "geodesic": geodesic_distance,
    "haversine": haversine,
}


def slant_distance(horizontal_mi: float, observer_alt_ft: float, altitude: Altitude) -> float:
    """Combine surface distance with vertical separation (straight line)."""
    if altitude.kind is AltitudeKind.UNKNOWN:
        return horizontal_mi
    object_ft = altitude.feet if altitude.kind is AltitudeKind.NUMERIC else 0.0
    vertical_mi = abs(observer_alt_ft - object_ft) / FEET_PER_MILE
    return hypot(horizontal_mi, vertical_mi)


def usable_position(aircraft: Aircraft) -> tuple[float, float] | None:
    """Live position, else last known position; zero means unset."""
    for lat, lon in (
        (aircraft.latitude, aircraft.longitude),
        (aircraft.last_latitude, aircraft.last_longitude),
    ):
        if lat and lon:
            return lat, lon
    return None


def count_positioned(aircraft: Iterable[Aircraft]) -> int:
    return sum(1 for a in aircraft if usable_position(a) is not None)


# ── Alert engine ─────────────────────────────────────────────────────


def find_closest(
    aircraft: Iterable[Aircraft],
    observer: ObserverPosition,
    distance_fn: DistanceFn = geodesic_distance,
) -> tuple[Aircraft | None, float]:
    """Nearest aircraft by 3-D distance; (None, 0.0) when nothing is usable."""
    closest = None
    closest_dist = float("inf")
    for a in aircraft:
        pos = usable_position(a)
        if pos is None:
            continue
        horizontal = distance_fn(observer.latitude, observer.longitude, pos[0], pos[1])
        dist = slant_distance(horizontal, observer.altitude_ft, a.altitude)
        if dist < closest_dist:
            closest, closest_dist = a, dist
    if closest is None:
        return None, 0.0
    return closest, closest_dist


def is_audible(aircraft: Aircraft, distance_mi: float, thresholds: AlertThresholds) -> bool:
    alt = aircraft.altitude
    if not alt.is_numeric:
        return False
    return (
        thresholds.min_altitude_ft <= alt.feet <= thresholds.max_altitude_ft
        and distance_mi < thresholds.max_distance_mi
    )


def evaluate(
    aircraft: Iterable[Aircraft],
    observer: ObserverPosition,
    policy: AlertPolicy,
    distance_fn: DistanceFn = geodesic_distance,
) -> ProximityResult:
    closest, dist = find_closest(aircraft, observer, distance_fn)
    if closest is None:
        return ProximityResult()
    thresholds = policy.resolve(closest.category)
    return ProximityResult(
        aircraft=closest,
        distance_mi=dist,
        audible=is_audible(closest, dist, thresholds),
        thresholds=thresholds,
    )


if __name__ == "__main__":
    # JFK to LHR ≈ 3,451 mi
    jfk_lat, jfk_lon = 40.6413, -73.7781
    lhr_lat, lhr_lon = 51.4700, -0.4543
    print(f"JFK → LHR geodesic: {geodesic_distance(jfk_lat, jfk_lon, lhr_lat, lhr_lon):.1f} mi")
    print(f"JFK → LHR haversine: {haversine(jfk_lat, jfk_lon, lhr_lat, lhr_lon):.1f} mi")
