from __future__ import annotations

from datetime import datetime

from adsb_data import Aircraft, Altitude, FeederHealth, SystemStats
from display_lines import LineFormatter, feeder_summary, format_callsign, truncate_lines
from proximity import ProximityResult
from state import FeedSnapshot

COLS, ROWS = 21, 5


def _clock() -> datetime:
    return datetime(2026, 1, 1, 12, 34, 56)


def _formatter(rows: int = ROWS) -> LineFormatter:
    return LineFormatter(COLS, rows, clock=_clock)


PLANE = Aircraft(
    hex="a1b2c3", callsign="UAL123  ", latitude=40.01, longitude=-75.0,
    altitude=Altitude.from_json(2500), category="A3",
)


def _snapshot(**kw) -> FeedSnapshot:
    base = dict(
        aircraft=(PLANE, Aircraft(hex="ffffff")),
        stats=SystemStats(mps=123.4, uptime=7 * 3600 + 5, planes=9),
        feeders={
            "adsblol": FeederHealth(True, "good", "good"),
            "adsbfi": FeederHealth(True, "bad", "disabled"),
        },
        update_available=True,
        cpu_temp_c=52,
    )
    base.update(kw)
    return FeedSnapshot(**base)


def test_no_nearest_object_renders_only_status_line() -> None:
    lines = _formatter().format(FeedSnapshot(), ProximityResult())
    assert lines == ["12:34:56 P:  0/  0"]


def test_total_falls_back_to_stats_when_list_empty() -> None:
    snap = FeedSnapshot(stats=SystemStats(planes=7))
    assert _formatter().format(snap, ProximityResult()) == ["12:34:56 P:  7/  0"]


def test_full_layout() -> None:
    result = ProximityResult(aircraft=PLANE, distance_mi=0.69, audible=True)
    lines = _formatter().format(_snapshot(), result)
    assert lines == [
        "12:34:56 P:  2/  1",
        "C: UAL123 (a1b2c3)",
        "D:  0.69!A3 T: 52C",
        "A:  2500 F: 2/ 1 U",
        "M: 123.4 U:7h",
    ]
    assert all(len(line) <= COLS for line in lines)


def test_blank_callsign_unknown_category_and_temperature() -> None:
    plane = Aircraft(hex="abcdef", callsign="   ", latitude=40.0, longitude=-75.0,
                     altitude=Altitude.from_json("ground"))
    snap = _snapshot(aircraft=(plane,), cpu_temp_c=None, update_available=False, stats=None)
    lines = _formatter().format(snap, ProximityResult(aircraft=plane, distance_mi=12.5))
    assert lines[1] == "C: none (abcdef)"
    assert lines[2] == "D: 12.50    T:---C"
    assert lines[3] == "A:   GND F: 2/ 1"
    assert len(lines) == 4


def test_unknown_altitude_placeholder() -> None:
    plane = Aircraft(hex="abcdef", latitude=40.0, longitude=-75.0)
    lines = _formatter().format(_snapshot(aircraft=(plane,)), ProximityResult(aircraft=plane))
    assert lines[3].startswith("A:   ---")


def test_line_count_never_exceeds_capacity() -> None:
    many = tuple(
        Aircraft(hex=f"{i:06x}", latitude=40.0 + i / 100, longitude=-75.0) for i in range(1, 500)
    )
    result = ProximityResult(aircraft=many[0], distance_mi=0.5)
    for rows in range(1, 7):
        lines = _formatter(rows).format(_snapshot(aircraft=many), result)
        assert len(lines) <= rows


def test_truncate_stops_at_first_empty_line() -> None:
    assert truncate_lines(["a", "b", "", "c"], 5) == ["a", "b"]
    assert truncate_lines(["a", "b", "c"], 2) == ["a", "b"]
    assert truncate_lines([], 3) == []


def test_feeder_summary_counts_enabled_feeders_only() -> None:
    feeders = {
        "a": FeederHealth(True, "good", "good"),
        "b": FeederHealth(True, "unknown", "disabled"),
        "c": FeederHealth(True, "bad", "warning"),
        "d": FeederHealth(False, "bad", "bad"),
        "e": FeederHealth(True, "", ""),
    }
    assert feeder_summary(feeders) == (2, 4)


def test_format_callsign() -> None:
    assert format_callsign(" DAL9  ") == "DAL9"
    assert format_callsign("") == "none"


def test_empty_link_status_counts_as_bad() -> None:
    assert feeder_summary({"x": FeederHealth(True, "", "")}) == (0, 2)
    assert feeder_summary({"x": FeederHealth(True, "unknown", "")}) == (0, 1)
    assert feeder_summary({"x": FeederHealth(True, "", "disabled")}) == (0, 1)
