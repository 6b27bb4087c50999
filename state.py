"""Latest-value store shared by the feed threads and the render thread."""

import dataclasses
import threading
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from adsb_data import Aircraft, FeederHealth, SystemStats


class Feed(str, Enum):
    AIRCRAFT = "aircraft"
    STATS = "stats"
    FEEDERS = "feeders"
    UPDATE_AVAILABLE = "update_available"
    CPU_TEMP = "cpu_temp_c"


@dataclass(frozen=True)
class FeedSnapshot:
    """Most recent successful value of every feed. Never mutated in place."""
    aircraft: tuple[Aircraft, ...] = ()
    stats: SystemStats | None = None
    feeders: Mapping[str, FeederHealth] = field(default_factory=lambda: MappingProxyType({}))
    update_available: bool = False
    cpu_temp_c: int | None = None


def _freeze(feed: Feed, value):
    if feed is Feed.AIRCRAFT:
        return tuple(value)
    if feed is Feed.FEEDERS:
        return MappingProxyType(dict(value))
    return value


class StateStore:
    """Holds the single FeedSnapshot.

    Writers replace one field at a time; readers get the whole frozen snapshot,
    so a reader never sees a half-applied write.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = FeedSnapshot()

    def set(self, feed: Feed | str, value) -> None:
        try:
            feed = Feed(feed)
        except ValueError:
            raise KeyError(feed) from None
        frozen = _freeze(feed, value)
        with self._lock:
            self._snapshot = dataclasses.replace(self._snapshot, **{feed.value: frozen})

    def read(self) -> FeedSnapshot:
        with self._lock:
            return self._snapshot
