"""Main entry point — feed threads + render thread with graceful shutdown."""

import logging
import signal
import sys
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

import config
from adsb_data import FeedError, FeederClient
from display import OledDisplay
from display_lines import LineFormatter
from proximity import ProximityResult, evaluate
from settings import ConfigError, Settings, load_settings
from state import Feed, StateStore

logger = logging.getLogger(__name__)


@dataclass
class FeedTask:
    """One periodically refreshed feed."""
    feed: Feed
    fetch: Callable[[float], Any]
    interval: float
    # Passed to requests as timeout=: bounds each connect and each socket read,
    # not the whole transfer. A server trickling bytes can outlast the interval.
    timeout: float

    def __post_init__(self):
        if self.timeout >= self.interval:
            clamped = self.interval * 0.9
            logger.warning(
                "%s timeout %.2fs is not below its %.2fs interval, using %.2fs",
                self.feed.value, self.timeout, self.interval, clamped,
            )
            self.timeout = clamped


def build_feed_tasks(client: FeederClient) -> list[FeedTask]:
    return [
        FeedTask(Feed.AIRCRAFT, client.fetch_aircraft,
                 config.AIRCRAFT_POLL_INTERVAL, config.AIRCRAFT_TIMEOUT),
        FeedTask(Feed.STATS, client.fetch_stats,
                 config.STATS_POLL_INTERVAL, config.STATS_TIMEOUT),
        FeedTask(Feed.FEEDERS, client.fetch_feeder_health,
                 config.FEEDERS_POLL_INTERVAL, config.FEEDERS_TIMEOUT),
        FeedTask(Feed.UPDATE_AVAILABLE, client.fetch_update_available,
                 config.UPDATE_POLL_INTERVAL, config.UPDATE_TIMEOUT),
        FeedTask(Feed.CPU_TEMP, client.fetch_cpu_temp,
                 config.TEMP_POLL_INTERVAL, config.TEMP_TIMEOUT),
    ]


class AdsbStatusTracker:
    def __init__(
        self,
        settings: Settings,
        tasks: list[FeedTask],
        display: OledDisplay,
        formatter: LineFormatter,
        store: StateStore | None = None,
        render_interval: float | None = None,
    ):
        self._settings = settings
        self._tasks = tasks
        self._display = display
        self._formatter = formatter
        self._store = store or StateStore()
        self._shutdown = threading.Event()
        self._threads: list[threading.Thread] = []
        self._render_thread: threading.Thread | None = None
        self._alerting: str | None = None  # hex of the aircraft currently flagged close

        if render_interval is None:
            render_interval = config.RENDER_INTERVAL
        if render_interval < config.MIN_RENDER_INTERVAL:
            logger.warning(
                "Render interval %.2fs is below the %.2fs display floor, clamping",
                render_interval, config.MIN_RENDER_INTERVAL,
            )
            render_interval = config.MIN_RENDER_INTERVAL
        self._render_interval = render_interval
        for task in tasks:
            if task.interval <= render_interval:
                logger.warning(
                    "%s interval %.2fs is not slower than the %.2fs render interval",
                    task.feed.value, task.interval, render_interval,
                )

    @property
    def store(self) -> StateStore:
        return self._store

    # ── Feed threads ─────────────────────────────────────────────────

    def refresh(self, task: FeedTask) -> bool:
        """Run one fetch; store the value on success, keep the old one on failure."""
        try:
            value = task.fetch(task.timeout)
        except FeedError as e:
            logger.warning("Failed to refresh %s: %s", task.feed.value, e)
            return False
        except Exception:
            logger.exception("Error refreshing %s", task.feed.value)
            return False
        self._store.set(task.feed, value)
        return True

    def _run_periodic(self, name: str, interval: float, step: Callable[[], Any]) -> None:
        """Call *step* on a fixed cadence until shutdown; missed slots are skipped."""
        logger.info("%s thread started (every %.1fs)", name, interval)
        next_run = time.monotonic()
        while not self._shutdown.is_set():
            step()
            next_run += interval
            now = time.monotonic()
            if next_run < now:
                next_run = now
            if self._shutdown.wait(next_run - now):
                break
        logger.debug("%s thread stopped", name)

    # ── Render thread ────────────────────────────────────────────────

    def compute(self) -> tuple[list[str], ProximityResult]:
        """Snapshot → proximity result → display lines. No I/O."""
        snapshot = self._store.read()
        result = evaluate(
            snapshot.aircraft,
            self._settings.observer,
            self._settings.policy,
            self._settings.distance_fn,
        )
        return self._formatter.format(snapshot, result), result

    def render(self) -> None:
        try:
            lines, result = self.compute()
            self._log_alert(result)
            self._display.show_lines(lines)
        except Exception:
            logger.exception("Error updating display")

    def _log_alert(self, result: ProximityResult) -> None:
        current = result.aircraft.hex if result.audible else None
        if current == self._alerting:
            return
        if current is not None:
            a = result.aircraft
            logger.info(
                "Close aircraft %s (%s) at %.2f mi, %.0f ft",
                a.callsign.strip() or "none", a.hex, result.distance_mi, a.altitude.feet,
            )
        else:
            logger.info("Close aircraft %s cleared", self._alerting)
        self._alerting = current

    # ── Lifecycle ────────────────────────────────────────────────────

    def _handle_signal(self, signum: int, frame) -> None:
        logger.info("Received signal %d, shutting down...", signum)
        self._shutdown.set()

    def start(self) -> None:
        """Start one thread per feed plus the render thread."""
        for task in self._tasks:
            t = threading.Thread(
                target=self._run_periodic,
                args=(task.feed.value, task.interval, lambda task=task: self.refresh(task)),
                daemon=True,
                name=task.feed.value,
            )
            t.start()
            self._threads.append(t)

        self._render_thread = threading.Thread(
            target=self._run_periodic,
            args=("render", self._render_interval, self.render),
            daemon=True,
            name="render",
        )
        self._render_thread.start()

    def stop(self) -> None:
        """Stop all tasks, wait (bounded) for the render, then blank the panel."""
        self._shutdown.set()
        if self._render_thread is not None:
            self._render_thread.join(timeout=config.SHUTDOWN_RENDER_WAIT)
            if self._render_thread.is_alive():
                logger.warning("Render still running after %.1fs, clearing anyway",
                               config.SHUTDOWN_RENDER_WAIT)
        self._display.shutdown()
        deadline = time.monotonic() + config.SHUTDOWN_FEED_WAIT
        for t in self._threads:
            t.join(timeout=max(0.0, deadline - time.monotonic()))
        logger.info("Shutdown complete")

    def run(self) -> None:
        """Install signal handlers, start threads and block until shutdown."""
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

        obs = self._settings.observer
        logger.info(
            "adsb-oled starting (%.4f, %.4f, %.0fft) host=%s",
            obs.latitude, obs.longitude, obs.altitude_ft, self._settings.host,
        )
        self._display.show_status("Scanning...")
        self.start()
        try:
            while not self._shutdown.wait(1.0):
                pass
        finally:
            self.stop()


def main(display: OledDisplay | None = None) -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    client = FeederClient(settings.host)
    tracker = AdsbStatusTracker(
        settings,
        build_feed_tasks(client),
        display or OledDisplay(),
        LineFormatter(config.DISPLAY_COLS, config.DISPLAY_LINES),
    )
    tracker.run()


if __name__ == "__main__":
    main()
