"""Validated startup settings built from config.py."""

import logging
from dataclasses import dataclass

import config
from proximity import (
    DISTANCE_METHODS,
    AlertPolicy,
    AlertThresholds,
    CategoryOverride,
    DistanceFn,
    ObserverPosition,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Missing or unparseable configuration; the process must not start."""


@dataclass(frozen=True)
class Settings:
    host: str
    observer: ObserverPosition
    policy: AlertPolicy
    distance_fn: DistanceFn


def _required_float(name: str, raw: str) -> float:
    if not str(raw).strip():
        raise ConfigError(f"{name} not set")
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"error parsing {name}: {raw!r}") from None


def _optional_float(name: str, raw, default: float) -> float:
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"error parsing {name}: {raw!r}") from None


def load_settings() -> Settings:
    """Collect every configuration problem, then raise one ConfigError."""
    errors = []

    host = config.ADSBFEED_HOST.strip()
    if not host:
        errors.append("ADSBFEED_HOST not set (probably your feeder's hostname)")

    position = {}
    for name in ("ADSBFEED_LAT", "ADSBFEED_LON"):
        try:
            position[name] = _required_float(name, getattr(config, name))
        except ConfigError as e:
            errors.append(str(e))

    optional = {}
    for name, default_value in (
        ("ADSBFEED_ALT", 0.0),
        ("ADSBFEED_MIN_ALT", config.DEFAULT_MIN_ALTITUDE_FT),
        ("ADSBFEED_MAX_ALT", config.DEFAULT_MAX_ALTITUDE_FT),
        ("ADSBFEED_MAX_DIST", config.DEFAULT_MAX_DISTANCE_MI),
    ):
        try:
            optional[name] = _optional_float(name, getattr(config, name), default_value)
        except ConfigError as e:
            errors.append(str(e))

    overrides = _category_overrides(config.CATEGORY_OVERRIDES, errors)

    distance_fn = DISTANCE_METHODS.get(config.DISTANCE_METHOD)
    if distance_fn is None:
        errors.append(
            f"unknown ADSBFEED_DISTANCE_METHOD {config.DISTANCE_METHOD!r} "
            f"(expected one of {', '.join(DISTANCE_METHODS)})"
        )

    if errors:
        raise ConfigError("; ".join(errors))

    default = AlertThresholds(
        min_altitude_ft=optional["ADSBFEED_MIN_ALT"],
        max_altitude_ft=optional["ADSBFEED_MAX_ALT"],
        max_distance_mi=optional["ADSBFEED_MAX_DIST"],
    )
    return Settings(
        host=host,
        observer=ObserverPosition(
            position["ADSBFEED_LAT"], position["ADSBFEED_LON"], optional["ADSBFEED_ALT"]),
        policy=AlertPolicy(default=default, overrides=overrides),
        distance_fn=distance_fn,
    )


def _category_overrides(
    raw: dict[str, dict[str, str]], errors: list[str]
) -> dict[str, CategoryOverride]:
    """Parse ADSBFEED_CAT_<code>_* values; parse problems are appended to *errors*."""
    overrides = {}
    for category, values in raw.items():
        parsed = {}
        for key in ("MIN_ALT", "MAX_ALT", "MAX_DIST"):
            name = f"ADSBFEED_CAT_{category}_{key}"
            try:
                parsed[key] = _optional_float(name, values.get(key), 0)
            except ConfigError as e:
                errors.append(str(e))
                parsed[key] = 0
        overrides[category] = CategoryOverride(
            min_altitude_ft=parsed["MIN_ALT"],
            max_altitude_ft=parsed["MAX_ALT"],
            max_distance_mi=parsed["MAX_DIST"],
        )
        logger.debug("Category %s override: %s", category, overrides[category])
    return overrides
