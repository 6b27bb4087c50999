from __future__ import annotations

import pytest

from adsb_data import Aircraft, Altitude, AltitudeKind
from proximity import (
    FEET_PER_MILE,
    AlertPolicy,
    AlertThresholds,
    CategoryOverride,
    ObserverPosition,
    evaluate,
    find_closest,
    geodesic_distance,
    haversine,
    slant_distance,
    usable_position,
)

OBSERVER = ObserverPosition(40.0, -75.0, 0.0)
POLICY = AlertPolicy(default=AlertThresholds(0, 10000, 2.0))


def _plane(hex_: str, lat: float | None, lon: float | None, alt=None, **kw) -> Aircraft:
    return Aircraft(hex=hex_, latitude=lat, longitude=lon, altitude=Altitude.from_json(alt), **kw)


def test_empty_list_reports_no_object_with_zero_distance() -> None:
    result = evaluate([], OBSERVER, POLICY)
    assert result.aircraft is None
    assert result.distance_mi == 0.0
    assert result.audible is False


def test_all_zero_positions_are_excluded() -> None:
    planes = [_plane("a1", 0.0, 0.0, 1000), _plane("a2", None, None, 500), _plane("a3", 0.0, -75.0, 0)]
    closest, dist = find_closest(planes, OBSERVER)
    assert closest is None
    assert dist == 0.0


def test_last_known_position_used_when_live_position_missing() -> None:
    plane = Aircraft(hex="abc123", last_latitude=40.1, last_longitude=-75.1)
    assert usable_position(plane) == (40.1, -75.1)
    closest, dist = find_closest([plane], OBSERVER)
    assert closest is plane
    assert dist > 0


@pytest.mark.parametrize("distance_fn", [geodesic_distance, haversine])
def test_coincident_positions_have_zero_horizontal_distance(distance_fn) -> None:
    assert distance_fn(40.0, -75.0, 40.0, -75.0) == pytest.approx(0.0, abs=1e-9)


def test_geodesic_and_haversine_agree_within_half_percent() -> None:
    g = geodesic_distance(40.6413, -73.7781, 51.47, -0.4543)
    h = haversine(40.6413, -73.7781, 51.47, -0.4543)
    assert h == pytest.approx(g, rel=0.005)


def test_slant_distance_non_decreasing_in_vertical_separation() -> None:
    distances = [
        slant_distance(1.5, 0.0, Altitude(AltitudeKind.NUMERIC, feet))
        for feet in (0, 100, 1000, 5000, 20000, 40000)
    ]
    assert distances == sorted(distances)
    assert distances[0] == pytest.approx(1.5)


def test_slant_distance_unknown_altitude_is_horizontal_only() -> None:
    assert slant_distance(2.0, 5000.0, Altitude()) == 2.0


def test_slant_distance_ground_is_altitude_zero() -> None:
    ground = Altitude.from_json("ground")
    assert ground.kind is AltitudeKind.GROUND
    assert slant_distance(1.0, 5280.0, ground) == pytest.approx(2 ** 0.5)


def test_observer_and_object_coincide_flagged_close() -> None:
    plane = _plane("a1b2c3", 40.0, -75.0, 0)
    result = evaluate([plane], OBSERVER, POLICY)
    assert result.aircraft is plane
    assert result.distance_mi == pytest.approx(0.0, abs=1e-9)
    assert result.audible is True


def test_ground_altitude_string_treated_as_zero_but_never_audible() -> None:
    plane = _plane("a1b2c3", 40.0, -75.0, "ground")
    result = evaluate([plane], ObserverPosition(40.0, -75.0, 0.0), POLICY)
    assert result.distance_mi == pytest.approx(0.0, abs=1e-9)
    assert result.audible is False


def test_lower_of_two_horizontally_equidistant_objects_wins() -> None:
    high = _plane("high01", 40.01, -75.0, 10000)
    low = _plane("low001", 40.01, -75.0, 0)
    closest, dist = find_closest([high, low], OBSERVER)
    assert closest is low
    assert dist < 10000 / FEET_PER_MILE


def test_ties_keep_first_encountered() -> None:
    first = _plane("first1", 40.01, -75.0, 1000)
    second = _plane("secnd2", 40.01, -75.0, 1000)
    closest, _ = find_closest([first, second], OBSERVER)
    assert closest is first


@pytest.mark.parametrize("alt", [None, "ground", "bogus"])
def test_non_numeric_altitude_never_audible(alt) -> None:
    plane = _plane("a1b2c3", 40.0001, -75.0, alt)
    result = evaluate([plane], OBSERVER, POLICY)
    assert result.aircraft is plane
    assert result.audible is False


def test_altitude_bounds_inclusive_distance_bound_strict() -> None:
    plane = _plane("a1b2c3", 40.0, -75.0, 10000)
    observer = ObserverPosition(40.0, -75.0, 10000.0)
    assert evaluate([plane], observer, POLICY).audible is True

    # distance exactly at the maximum is not close
    policy = AlertPolicy(default=AlertThresholds(0, 10000, 0.0))
    assert evaluate([plane], observer, policy).audible is False


def test_override_zero_never_replaces_default() -> None:
    policy = AlertPolicy(
        default=AlertThresholds(500, 10000, 2.0),
        overrides={"A7": CategoryOverride()},
    )
    assert policy.resolve("A7") == policy.default


def test_override_non_zero_replaces_only_its_field() -> None:
    policy = AlertPolicy(
        default=AlertThresholds(500, 10000, 2.0),
        overrides={"A7": CategoryOverride(max_altitude_ft=2000)},
    )
    resolved = policy.resolve("A7")
    assert resolved.min_altitude_ft == 500
    assert resolved.max_altitude_ft == 2000
    assert resolved.max_distance_mi == 2.0
    assert policy.resolve("A3") == policy.default
    assert policy.resolve("") == policy.default


def test_category_override_applies_to_winner() -> None:
    heli = _plane("heli01", 40.0, -75.0, 3000, category="A7")
    policy = AlertPolicy(
        default=AlertThresholds(0, 10000, 2.0),
        overrides={"A7": CategoryOverride(max_altitude_ft=2000)},
    )
    result = evaluate([heli], OBSERVER, policy)
    assert result.thresholds.max_altitude_ft == 2000
    assert result.audible is False
