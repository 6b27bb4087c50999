"""User-tunable configuration for adsb-oled.

Values come from the environment (``ADSBFEED_*``); anything here can also be
overridden in an uncommitted ``config_local.py``.
"""

import os
import re

# ── Receiver / location ─────────────────────────────────────────────
ADSBFEED_HOST = os.environ.get("ADSBFEED_HOST", "")  # e.g. "adsb-feeder.local"
ADSBFEED_LAT = os.environ.get("ADSBFEED_LAT", "")  # decimal degrees, required
ADSBFEED_LON = os.environ.get("ADSBFEED_LON", "")  # decimal degrees, required
ADSBFEED_ALT = os.environ.get("ADSBFEED_ALT", "")  # feet, defaults to 0
AIRCRAFT_PORT = 8080  # readsb/tar1090 json port
USER_AGENT = "adsb-oled/1.0"

# ── Alert thresholds (feet / statute miles) ─────────────────────────
DEFAULT_MIN_ALTITUDE_FT = 0
DEFAULT_MAX_ALTITUDE_FT = 10000
DEFAULT_MAX_DISTANCE_MI = 2.0
ADSBFEED_MIN_ALT = os.environ.get("ADSBFEED_MIN_ALT", "")
ADSBFEED_MAX_ALT = os.environ.get("ADSBFEED_MAX_ALT", "")
ADSBFEED_MAX_DIST = os.environ.get("ADSBFEED_MAX_DIST", "")

# Per-category overrides: ADSBFEED_CAT_A7_MAX_ALT=2000 etc. 0/unset = use default
_CATEGORY_RE = re.compile(r"^ADSBFEED_CAT_([A-Z0-9]+)_(MIN_ALT|MAX_ALT|MAX_DIST)$")
CATEGORY_OVERRIDES: dict[str, dict[str, str]] = {}
for _key, _value in os.environ.items():
    _match = _CATEGORY_RE.match(_key)
    if _match:
        CATEGORY_OVERRIDES.setdefault(_match.group(1), {})[_match.group(2)] = _value

# "geodesic" (WGS-84 ellipsoid) or "haversine" (spherical, ~0.5% error)
DISTANCE_METHOD = os.environ.get("ADSBFEED_DISTANCE_METHOD", "geodesic")

# ── Polling (seconds) ───────────────────────────────────────────────
AIRCRAFT_POLL_INTERVAL = 1.0
STATS_POLL_INTERVAL = 1.0
FEEDERS_POLL_INTERVAL = 60.0
UPDATE_POLL_INTERVAL = 3600.0
TEMP_POLL_INTERVAL = 10.0
AIRCRAFT_TIMEOUT = 0.5
STATS_TIMEOUT = 0.5
FEEDERS_TIMEOUT = 10.0
UPDATE_TIMEOUT = 5.0
TEMP_TIMEOUT = 2.0

# Feeders known to the adsb.im micro settings
FEEDERS = (
    "adsbfi", "adsbhub", "adsblol", "adsbx", "alive", "avdelphi",
    "flightaware", "flightradar", "opensky", "planefinder",
    "planespotters", "planewatch", "radarbox", "tat",
)

# ── OLED display ─────────────────────────────────────────────────────
DISPLAY_WIDTH = 128
DISPLAY_HEIGHT = 64
DISPLAY_LINES = 5  # text rows that fit on the panel
DISPLAY_COLS = 21  # characters per row with a 6px wide font
ROW_HEIGHT = 12  # pixels per text row
I2C_PORT = 1
I2C_ADDRESS = 0x3C
RENDER_INTERVAL = 0.5  # faster than ~300ms garbles the panel
MIN_RENDER_INTERVAL = 0.3

# ── Shutdown ─────────────────────────────────────────────────────────
SHUTDOWN_RENDER_WAIT = 2.0  # max wait for an in-flight render
SHUTDOWN_FEED_WAIT = 1.0

LOG_LEVEL = os.environ.get("ADSBFEED_LOG_LEVEL", "INFO")

# ── Local overrides (not checked into git) ───────────────────────────
try:
    from config_local import *  # noqa: F401,F403
except ImportError:
    pass
