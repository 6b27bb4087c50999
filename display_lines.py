"""Text layout for the OLED: snapshot + proximity result → bounded lines.

Field widths are fixed so columns line up on the monospaced panel.
"""

from datetime import datetime
from typing import Callable, Mapping

from adsb_data import AltitudeKind, FeederHealth
from proximity import ProximityResult, count_positioned
from state import FeedSnapshot

# ── Formatting helpers ───────────────────────────────────────────────


def format_callsign(callsign: str) -> str:
    return callsign.strip() or "none"


def format_distance(miles: float) -> str:
    return f"{miles:6.2f}"


def format_temperature(celsius: int | None) -> str:
    if celsius is None:
        return "---"
    return f"{celsius:3d}"


def format_altitude(result: ProximityResult) -> str:
    alt = result.aircraft.altitude
    if alt.kind is AltitudeKind.NUMERIC:
        return f"{int(round(alt.feet)):6d}"
    if alt.kind is AltitudeKind.GROUND:
        return f"{'GND':>6}"
    return f"{'---':>6}"


def feeder_summary(feeders: Mapping[str, FeederHealth]) -> tuple[int, int]:
    """(good, bad) link counts across enabled feeders.

    Each feeder has two links: the beast uplink ("unknown" is neutral) and
    mlat ("disabled" is neutral). Any other status, empty included, is bad.
    """
    good = bad = 0
    for health in feeders.values():
        if not health.enabled:
            continue
        for status, neutral in ((health.beast, "unknown"), (health.mlat, "disabled")):
            if status == "good":
                good += 1
            elif status != neutral:
                bad += 1
    return good, bad


def truncate_lines(lines: list[str], max_lines: int) -> list[str]:
    """Stop at *max_lines* or at the first empty line, whichever comes first."""
    out = []
    for line in lines:
        if not line or len(out) >= max_lines:
            break
        out.append(line)
    return out


# ── Formatter ────────────────────────────────────────────────────────


class LineFormatter:
    """Formatting context for one display, built once at startup."""

    def __init__(self, cols: int, rows: int, clock: Callable[[], datetime] = datetime.now):
        self.cols = cols
        self.rows = rows
        self._clock = clock

    def format(self, snapshot: FeedSnapshot, result: ProximityResult) -> list[str]:
        total = len(snapshot.aircraft)
        if not total and snapshot.stats is not None:
            total = snapshot.stats.planes
        positioned = count_positioned(snapshot.aircraft)
        lines = [f"{self._clock():%H:%M:%S} P:{total:3d}/{positioned:3d}"]

        if result.aircraft is not None:
            a = result.aircraft
            lines.append(f"C: {format_callsign(a.callsign)} ({a.hex})")

            marker = "!" if result.audible else " "
            lines.append(
                f"D:{format_distance(result.distance_mi)}{marker}{a.category:<2} "
                f"T:{format_temperature(snapshot.cpu_temp_c)}C"
            )

            good, bad = feeder_summary(snapshot.feeders)
            update = " U" if snapshot.update_available else ""
            lines.append(f"A:{format_altitude(result)} F:{good:2d}/{bad:2d}{update}")

            if snapshot.stats is not None:
                hours = snapshot.stats.uptime // 3600
                lines.append(f"M:{snapshot.stats.mps:6.1f} U:{hours}h")

        return truncate_lines([line[:self.cols] for line in lines], self.rows)
