"""Feeder API client for aircraft, stats, feeder health, updates and CPU temp."""

import logging
import time
from dataclasses import dataclass
from enum import Enum

import requests

import config

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """A feed could not be refreshed (transport, status, timeout or payload)."""


class AltitudeKind(Enum):
    NUMERIC = "numeric"
    GROUND = "ground"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Altitude:
    """Barometric altitude as reported by readsb: feet, "ground", or absent."""
    kind: AltitudeKind = AltitudeKind.UNKNOWN
    feet: float = 0.0

    @classmethod
    def from_json(cls, raw) -> "Altitude":
        if isinstance(raw, bool):
            return cls()
        if isinstance(raw, (int, float)):
            return cls(AltitudeKind.NUMERIC, float(raw))
        if isinstance(raw, str) and raw.strip().lower() == "ground":
            return cls(AltitudeKind.GROUND, 0.0)
        return cls()

    @property
    def is_numeric(self) -> bool:
        return self.kind is AltitudeKind.NUMERIC


@dataclass(frozen=True)
class Aircraft:
    """Single entry of aircraft.json."""
    hex: str = ""
    callsign: str = ""
    latitude: float | None = None
    longitude: float | None = None
    altitude: Altitude = Altitude()
    last_latitude: float | None = None  # lastPosition, used when live position is gone
    last_longitude: float | None = None
    category: str = ""

    @classmethod
    def from_json(cls, item: dict) -> "Aircraft":
        last = item.get("lastPosition") or {}
        return cls(
            hex=str(item.get("hex") or ""),
            callsign=str(item.get("flight") or ""),
            latitude=_as_float(item.get("lat")),
            longitude=_as_float(item.get("lon")),
            altitude=Altitude.from_json(item.get("alt_baro")),
            last_latitude=_as_float(last.get("lat")),
            last_longitude=_as_float(last.get("lon")),
            category=str(item.get("category") or ""),
        )


@dataclass(frozen=True)
class SystemStats:
    """First element of /api/stage2_stats."""
    mps: float = 0.0  # messages per second
    pps: float = 0.0  # position packets per second
    uptime: int = 0  # seconds
    planes: int = 0
    total_planes: int = 0

    @classmethod
    def from_json(cls, item: dict) -> "SystemStats":
        return cls(
            mps=float(item.get("mps") or 0),
            pps=float(item.get("pps") or 0),
            uptime=int(item.get("uptime") or 0),
            planes=int(item.get("planes") or 0),
            total_planes=int(item.get("tplanes") or 0),
        )


@dataclass(frozen=True)
class FeederHealth:
    enabled: bool = False
    beast: str = ""  # primary uplink status
    mlat: str = ""


def _as_float(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class FeederClient:
    """Thin wrapper around the adsb.im feeder web API.

    Every ``fetch_*`` method takes a timeout in seconds and either returns a
    complete value or raises FeedError.
    """

    def __init__(self, host: str | None = None, session: requests.Session | None = None):
        self._host = host if host is not None else config.ADSBFEED_HOST
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = config.USER_AGENT

    def _get_json(self, url: str, timeout: float):
        try:
            resp = self._session.get(url, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FeedError(f"GET {url} failed: {e}") from e
        try:
            return resp.json()
        except ValueError as e:
            raise FeedError(f"GET {url} returned malformed json: {e}") from e

    def _api_url(self, path: str) -> str:
        return f"http://{self._host}{path}"

    def fetch_aircraft(self, timeout: float) -> list[Aircraft]:
        url = f"http://{self._host}:{config.AIRCRAFT_PORT}/data/aircraft.json"
        data = self._get_json(url, timeout)
        if not isinstance(data, dict) or not isinstance(data.get("aircraft", []), list):
            raise FeedError("aircraft.json has no aircraft list")
        try:
            return [Aircraft.from_json(item) for item in data.get("aircraft") or []]
        except AttributeError as e:
            raise FeedError(f"malformed aircraft entry: {e}") from e

    def fetch_stats(self, timeout: float) -> SystemStats:
        data = self._get_json(self._api_url("/api/stage2_stats"), timeout)
        if not isinstance(data, list):
            raise FeedError("stage2_stats is not a list")
        if not data:
            raise FeedError("no stats available")
        try:
            return SystemStats.from_json(data[0])
        except (AttributeError, TypeError, ValueError) as e:
            raise FeedError(f"malformed stats: {e}") from e

    def fetch_feeder_config(self, timeout: float) -> dict[str, bool]:
        """Enabled flag of each known feeder from the micro settings."""
        data = self._get_json(self._api_url("/api/micro_settings"), timeout)
        if not isinstance(data, dict):
            raise FeedError("micro_settings is not an object")
        return {name: bool(data.get(f"{name}--is_enabled")) for name in config.FEEDERS}

    def fetch_feeder_status(self, timeout: float, feeder: str) -> FeederHealth:
        data = self._get_json(self._api_url(f"/api/status/{feeder}"), timeout)
        status = data.get("0") if isinstance(data, dict) else None
        if not isinstance(status, dict):
            raise FeedError(f"malformed status for {feeder}")
        return FeederHealth(
            enabled=True,
            beast=str(status.get("beast") or ""),
            mlat=str(status.get("mlat") or ""),
        )

    def fetch_feeder_health(self, timeout: float) -> dict[str, FeederHealth]:
        """Config plus one status call per enabled feeder, within one deadline.

        A feeder whose status call fails is logged and left out of the result.
        """
        deadline = time.monotonic() + timeout
        enabled = self.fetch_feeder_config(timeout)
        result = {}
        for name, is_enabled in enabled.items():
            if not is_enabled:
                result[name] = FeederHealth(enabled=False)
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise FeedError("timed out fetching feeder status")
            try:
                result[name] = self.fetch_feeder_status(remaining, name)
            except FeedError as e:
                logger.warning("Failed to fetch status for feeder %s: %s", name, e)
        return result

    def fetch_update_available(self, timeout: float) -> bool:
        data = self._get_json(self._api_url("/api/status/im"), timeout)
        if not isinstance(data, dict):
            raise FeedError("update status is not an object")
        return str(data.get("show_update", "")) == "1"

    def fetch_cpu_temp(self, timeout: float) -> int:
        data = self._get_json(self._api_url("/api/get_temperatures.json"), timeout)
        if not isinstance(data, dict):
            raise FeedError("temperatures is not an object")
        try:
            return int(str(data.get("cpu")).strip())
        except ValueError as e:
            raise FeedError(f"unparseable cpu temperature {data.get('cpu')!r}") from e


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    client = FeederClient()
    planes = client.fetch_aircraft(timeout=2)
    print(f"Got {len(planes)} aircraft")
    for a in planes[:5]:
        print(f"  {a.callsign.strip() or a.hex}: alt={a.altitude} cat={a.category}")
    print(f"Stats: {client.fetch_stats(timeout=2)}")
    print(f"CPU: {client.fetch_cpu_temp(timeout=2)}C")
