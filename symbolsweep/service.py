"""
Command surface of SymbolSweep.

Front ends (the CLI, a menu bar shell) call into the core only through
SymbolSweepService and subscribe to its EventBus for pushed updates.
"""

import logging

from symbolsweep import events
from symbolsweep.audit import AuditLog
from symbolsweep.autostart import AutostartCapability
from symbolsweep.cleaner import CacheCleaner, CleanOutcome, DeletionItem, reindex_spotlight
from symbolsweep.daemon import DaemonController
from symbolsweep.errors import SettingsError
from symbolsweep.events import Event, EventBus
from symbolsweep.monitor.status import CacheMonitor, CacheStatus
from symbolsweep.scheduler import Scheduler, time_since_last_clean
from symbolsweep.settings import Policy, PolicyStore

logger = logging.getLogger(__name__)


class SymbolSweepService:
    """
    Wires the core components around one shared PolicyStore.

    Example:
        service = SymbolSweepService(PolicyStore.load())
        service.bus.subscribe(print)
        service.start_monitoring()
    """

    def __init__(
        self,
        store: PolicyStore,
        audit: AuditLog | None = None,
        daemon: DaemonController | None = None,
        cleaner: CacheCleaner | None = None,
        monitor: CacheMonitor | None = None,
        autostart: AutostartCapability | None = None,
        bus: EventBus | None = None,
    ):
        self.store = store
        self.audit = audit or AuditLog()
        self.daemon = daemon or DaemonController(self.audit)
        self.cleaner = cleaner or CacheCleaner(self.audit, self.daemon)
        self.monitor = monitor or CacheMonitor()
        self.autostart = autostart
        self.bus = bus or EventBus()
        self.scheduler = Scheduler(store, self.monitor, self.cleaner, sink=self.bus)

    # -- monitoring ---------------------------------------------------------

    def get_status(self) -> CacheStatus:
        """Current status; simulated when debug mode is on."""
        return self.monitor.current(self.store.snapshot())

    def get_combined_status(self) -> CacheStatus:
        return self.monitor.measure_combined()

    def get_daemon_running(self) -> bool:
        return self.daemon.is_running()

    def start_monitoring(self) -> None:
        self.scheduler.start()

    def stop_monitoring(self) -> None:
        self.scheduler.stop()

    # -- cleaning -----------------------------------------------------------

    def clean(self, dry_run: bool) -> CleanOutcome:
        """
        Run a clean; a successful real run updates the last-clean time.

        Raises:
            CleanError: safety or directory-read failure
        """
        outcome = self.cleaner.clean(dry_run)
        if not dry_run and outcome.success:
            try:
                self.store.record_clean(outcome.timestamp)
            except SettingsError as e:
                logger.error(f"Could not record clean time: {e}")
        return outcome

    def analyze(self) -> list[DeletionItem]:
        return self.cleaner.analyze()

    def get_log_path(self) -> str:
        return str(self.audit.path)

    def reindex_search_index(self) -> None:
        """
        Raises:
            PermissionDenied: the user cancelled the password prompt
        """
        reindex_spotlight(self.audit)

    # -- settings -----------------------------------------------------------

    def get_settings(self) -> Policy:
        return self.store.snapshot()

    def update_settings(self, policy: Policy) -> None:
        """
        Replace and persist the policy, then publish it.

        Raises:
            ValueError: the policy failed validation
            SettingsError: the policy could not be written
        """
        previous = self.store.snapshot()
        stored = self.store.replace(policy)

        if self.autostart and stored.launch_at_login != previous.launch_at_login:
            if stored.launch_at_login:
                self.autostart.enable()
            else:
                self.autostart.disable()

        self.bus.publish(Event(events.SETTINGS_UPDATED, stored))

    def time_since_last_clean(self) -> str:
        return time_since_last_clean(self.store.snapshot())
