"""
Background monitoring and auto-clean scheduling for SymbolSweep.

One worker thread polls the cache on a fixed cadence, publishes status,
runs auto-clean when a trigger is due and fires tier notifications once per
entry into a tier. The policy lock is only held while copying or updating
the policy, never across a measurement or a clean.
"""

import logging
import threading
import time
from collections.abc import Callable

from symbolsweep import events
from symbolsweep.cleaner import CacheCleaner
from symbolsweep.errors import CleanError, SettingsError
from symbolsweep.events import Event, EventSink
from symbolsweep.monitor.status import CacheMonitor, CacheState, CacheStatus
from symbolsweep.settings import Policy, PolicyStore

logger = logging.getLogger(__name__)

MIN_POLL_INTERVAL = 1
DEFAULT_POLL_INTERVAL = 60


def threshold_due(policy: Policy, status: CacheStatus) -> bool:
    """Auto-clean on size: enabled and size at or above the configured threshold."""
    return policy.auto_clean_on_threshold and status.size_bytes >= policy.auto_clean_threshold


def schedule_due(policy: Policy, now: float) -> bool:
    """Auto-clean on interval: enabled and at least one interval since the last clean."""
    if not policy.auto_clean_scheduled:
        return False
    elapsed = max(0, int(now) - policy.last_clean_timestamp)
    return elapsed >= policy.auto_clean_interval_secs


class NotificationEdgeTracker:
    """
    Edge detection for tier notifications.

    A tier fires at most once while the cache stays in it; both latches are
    cleared only when the cache is observed back at Normal.
    """

    def __init__(self):
        self.warning_fired = False
        self.critical_fired = False

    def observe(self, state: CacheState) -> CacheState | None:
        """Feed one measured tier; returns the tier to notify about, if any."""
        if state is CacheState.NORMAL:
            self.warning_fired = False
            self.critical_fired = False
            return None

        if state is CacheState.WARNING and not self.warning_fired:
            self.warning_fired = True
            return CacheState.WARNING

        if state is CacheState.CRITICAL and not self.critical_fired:
            self.critical_fired = True
            return CacheState.CRITICAL

        return None


class Scheduler:
    """
    Runs the poll loop in a background thread.

    The first measurement happens one interval after start(). Safe to
    start/stop multiple times.

    Example:
        scheduler = Scheduler(store, sink=bus)
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        store: PolicyStore,
        monitor: CacheMonitor | None = None,
        cleaner: CacheCleaner | None = None,
        sink: EventSink | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.monitor = monitor or CacheMonitor()
        self.cleaner = cleaner or CacheCleaner()
        self.sink = sink
        self.clock = clock
        self.tracker = NotificationEdgeTracker()

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the background poll thread."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        # Tier latches are scoped to one run of the loop
        self.tracker = NotificationEdgeTracker()
        self._stop_event.clear()
        self._running = True

        self._thread = threading.Thread(target=self._poll_loop, name="symbolsweep-monitor", daemon=True)
        self._thread.start()
        logger.debug("Scheduler started")

    def stop(self, timeout: float = 2.0) -> None:
        """Signal the loop to exit; a clean already in progress runs to completion."""
        if not self._running:
            return

        self._stop_event.set()
        self._running = False

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

        self._thread = None
        logger.debug("Scheduler stopped")

    def _interval(self) -> int:
        """Seconds to wait before the next poll, never less than one."""
        interval = self.store.snapshot().monitor_interval_secs
        try:
            return max(MIN_POLL_INTERVAL, int(interval))
        except (TypeError, ValueError):
            logger.warning(f"Invalid monitor interval {interval!r}, using {DEFAULT_POLL_INTERVAL}s")
            return DEFAULT_POLL_INTERVAL

    def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            # Sleep first so nothing is measured the instant the app starts
            if self._stop_event.wait(timeout=self._interval()):
                break

            try:
                self.poll()
            except Exception as e:
                logger.error(f"Monitor poll failed: {e}", exc_info=True)

    def poll(self) -> CacheStatus:
        """Run one measurement/trigger/notification cycle."""
        policy = self.store.snapshot()
        status = self.monitor.current(policy)
        self._emit(events.CACHE_STATUS_UPDATE, status)

        now = self.clock()
        if threshold_due(policy, status) or schedule_due(policy, now):
            self._auto_clean(policy, status, now)

        edge = self.tracker.observe(status.state)
        if edge is CacheState.WARNING:
            self._emit(events.WARNING_THRESHOLD_REACHED, status)
        elif edge is CacheState.CRITICAL:
            self._emit(events.CRITICAL_THRESHOLD_REACHED, status)

        return status

    def _auto_clean(self, policy: Policy, status: CacheStatus, now: float) -> None:
        logger.info(f"Auto-clean triggered at {status.size_display}")
        self._emit(events.AUTO_CLEAN_TRIGGERED, status)

        try:
            outcome = self.cleaner.clean(dry_run=False)
        except CleanError as e:
            logger.error(f"Auto-clean failed: {e}")
            self._emit(events.AUTO_CLEAN_FAILED, str(e))
            return

        if not outcome.success:
            logger.error(f"Auto-clean removed nothing: {outcome.message}")
            self._emit(events.AUTO_CLEAN_FAILED, outcome.message)
            return

        try:
            self.store.record_clean(now)
            if policy.debug_mode:
                # Otherwise the simulated size re-triggers on the next poll
                self.store.update(debug_simulated_size=0)
        except SettingsError as e:
            logger.error(f"Could not persist auto-clean result: {e}")

        self._emit(events.AUTO_CLEAN_COMPLETED, outcome)

    def _emit(self, name: str, payload) -> None:
        if not self.sink:
            return
        try:
            self.sink(Event(name, payload))
        except Exception as e:
            logger.warning(f"Event sink error on {name}: {e}")


def _plural(value: int, unit: str) -> str:
    return f"1 {unit}" if value == 1 else f"{value} {unit}s"


def format_duration(secs: int) -> str:
    """Render a duration in its largest whole unit ("1 minute", "3 hours")."""
    if secs < 60:
        return _plural(secs, "second")
    elif secs < 3600:
        return _plural(secs // 60, "minute")
    elif secs < 86400:
        return _plural(secs // 3600, "hour")
    return _plural(secs // 86400, "day")


def time_since_last_clean(policy: Policy, now: float | None = None) -> str:
    """Human string for the time since the last clean, or "Never"."""
    if policy.last_clean_timestamp == 0:
        return "Never"

    now = time.time() if now is None else now
    elapsed = max(0, int(now) - policy.last_clean_timestamp)
    return f"{format_duration(elapsed)} ago"
