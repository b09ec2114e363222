"""Command-line entry point for SymbolSweep."""

import argparse
import json
import logging
import os
import sys
import time

from dotenv import load_dotenv
from rich.logging import RichHandler

from symbolsweep import VERSION, events
from symbolsweep.autostart import LaunchAgentAutostart
from symbolsweep.errors import CleanError, PermissionDenied, SettingsError
from symbolsweep.events import Event
from symbolsweep.notify import Notifier
from symbolsweep.safety import get_cache_path
from symbolsweep.settings import PolicyStore
from symbolsweep.service import SymbolSweepService
from symbolsweep.ui import (
    analysis_panel,
    confirm,
    console,
    format_tray_title,
    outcome_panel,
    settings_table,
    show_clean_error,
    show_error,
    status_panel,
)

LOG_LEVEL_ENV = "SYMBOLSWEEP_LOG_LEVEL"


def configure_logging(verbose: bool = False) -> None:
    """Route diagnostic logging through the rich console."""
    level_name = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console.rich, rich_tracebacks=verbose, show_path=verbose)],
        force=True,
    )


def build_service() -> SymbolSweepService:
    autostart = LaunchAgentAutostart() if sys.platform == "darwin" else None
    return SymbolSweepService(PolicyStore.load(), autostart=autostart)


class SymbolSweepCLI:
    def __init__(self, service: SymbolSweepService, verbose: bool = False):
        self.service = service
        self.verbose = verbose

    def status(self, args: argparse.Namespace) -> int:
        """Show cache size, tier and daemon state."""
        status = self.service.get_combined_status() if args.combined else self.service.get_status()

        if args.json:
            console.print_json(json.dumps(status.to_dict()))
            return 0

        policy = self.service.get_settings()
        if not policy.first_run_completed:
            console.info(
                "SymbolSweep watches the coresymbolicationd cache and can empty it safely. "
                "Run 'symbolsweep clean --dry-run' to preview a clean."
            )
            self.service.store.update(first_run_completed=True)

        details = {
            "Daemon": "running" if self.service.get_daemon_running() else "not running",
            "Last clean": self.service.time_since_last_clean(),
        }
        if args.combined:
            details["Includes"] = "user and system caches"
        status_panel(status, details)
        return 0

    def analyze(self, args: argparse.Namespace) -> int:
        """Preview what a clean would remove."""
        analysis_panel(self.service.analyze())
        return 0

    def clean(self, args: argparse.Namespace) -> int:
        """Empty the cache (or preview with --dry-run)."""
        if not args.dry_run and not args.yes and not self._confirm_clean():
            console.info("Clean cancelled.")
            return 0

        outcome = self.service.clean(dry_run=args.dry_run)
        outcome_panel(outcome)
        if not args.dry_run:
            console.secondary(f"Audit log: {self.service.get_log_path()}")
        return 0 if outcome.success else 1

    def _confirm_clean(self) -> bool:
        if self.service.get_settings().first_clean_confirmed:
            return True

        confirmed, dont_ask = confirm(
            f"Empty {get_cache_path()}?",
            details=[
                "Only this one directory is touched",
                "coresymbolicationd is stopped first and rebuilds the cache on demand",
                "You may be asked for your administrator password",
            ],
        )
        if confirmed and dont_ask:
            self.service.store.update(first_clean_confirmed=True)
        return confirmed

    def watch(self, args: argparse.Namespace) -> int:
        """Run the monitor loop in the foreground until interrupted."""
        self.service.bus.subscribe(Notifier(self.service.store))
        self.service.bus.subscribe(self._print_event)

        policy = self.service.get_settings()
        console.info(
            f"Watching {get_cache_path()} every {policy.monitor_interval_secs}s (Ctrl-C to stop)"
        )

        if args.once:
            self.service.scheduler.poll()
            return 0

        self.service.start_monitoring()
        try:
            while self.service.scheduler.is_running:
                time.sleep(1)
        finally:
            self.service.stop_monitoring()
        return 0

    def _print_event(self, event: Event) -> None:
        if event.name == events.CACHE_STATUS_UPDATE:
            console.print(f"[muted]{time.strftime('%H:%M:%S')}[/] {format_tray_title(event.payload)}")
        elif event.name == events.AUTO_CLEAN_TRIGGERED:
            console.info(f"Auto-clean triggered at {event.payload.size_display}")
        elif event.name == events.AUTO_CLEAN_COMPLETED:
            outcome_panel(event.payload)
        elif event.name == events.AUTO_CLEAN_FAILED:
            console.error("Auto-clean failed", details=event.payload)
        elif event.name == events.WARNING_THRESHOLD_REACHED:
            console.warning(f"Cache reached {event.payload.size_display}")
        elif event.name == events.CRITICAL_THRESHOLD_REACHED:
            console.error(f"Cache reached {event.payload.size_display} - cleaning recommended")

    def daemon(self, args: argparse.Namespace) -> int:
        if self.service.get_daemon_running():
            console.info("coresymbolicationd is running")
        else:
            console.secondary("coresymbolicationd is not running")
        return 0

    def log_path(self, args: argparse.Namespace) -> int:
        console.print(self.service.get_log_path(), soft_wrap=True)
        if args.tail:
            for line in self.service.audit.tail(args.tail):
                console.secondary(line)
        return 0

    def reindex(self, args: argparse.Namespace) -> int:
        try:
            self.service.reindex_search_index()
        except PermissionDenied as e:
            console.warning(str(e))
            return 1
        console.success("Spotlight reindex requested")
        return 0

    def last_clean(self, args: argparse.Namespace) -> int:
        console.print(self.service.time_since_last_clean())
        return 0

    def settings(self, args: argparse.Namespace) -> int:
        """Show or change persisted settings."""
        if args.settings_action == "set":
            policy = self.service.get_settings()
            try:
                updated = policy.with_value(args.key, args.value)
            except KeyError:
                keys = ", ".join(policy.to_dict())
                show_error("Unknown setting", args.key, hint=f"Available settings: {keys}")
                return 1
            self.service.update_settings(updated)
            console.success(f"{args.key} = {args.value}")
            return 0

        console.print(settings_table(self.service.get_settings()))
        console.secondary(f"Stored in {self.service.store.path}")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symbolsweep",
        description="Monitor and safely clean the coresymbolicationd cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  symbolsweep status                     # Size, tier and daemon state
  symbolsweep clean --dry-run            # Preview what would be removed
  symbolsweep clean                      # Stop the daemon and empty the cache
  symbolsweep watch                      # Monitor and auto-clean per settings
  symbolsweep settings set auto_clean_on_threshold true

Environment Variables:
  SYMBOLSWEEP_CONFIG_DIR   Directory holding settings.json
  SYMBOLSWEEP_LOG_LEVEL    Diagnostic log level (default: WARNING)
        """,
    )

    parser.add_argument("--version", "-V", action="version", version=f"symbolsweep {VERSION}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    status_parser = subparsers.add_parser("status", help="Show cache status")
    status_parser.add_argument("--combined", action="store_true", help="Include the system-level cache")
    status_parser.add_argument("--json", action="store_true", help="Print the status as JSON")

    subparsers.add_parser("analyze", help="List what a clean would remove")

    clean_parser = subparsers.add_parser("clean", help="Empty the cache")
    clean_parser.add_argument("--dry-run", action="store_true", help="Only report what would be removed")
    clean_parser.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")

    watch_parser = subparsers.add_parser("watch", help="Monitor in the foreground")
    watch_parser.add_argument("--once", action="store_true", help="Run a single poll immediately and exit")

    subparsers.add_parser("daemon", help="Check whether coresymbolicationd is running")

    log_parser = subparsers.add_parser("log-path", help="Show the deletion audit log location")
    log_parser.add_argument("--tail", type=int, default=0, metavar="N", help="Also print the last N lines")

    subparsers.add_parser("reindex", help="Rebuild the Spotlight index (needs administrator password)")
    subparsers.add_parser("last-clean", help="Show time since the last clean")

    settings_parser = subparsers.add_parser("settings", help="Show or change settings")
    settings_subs = settings_parser.add_subparsers(dest="settings_action")
    settings_subs.add_parser("show", help="Show all settings")
    set_parser = settings_subs.add_parser("set", help="Change one setting")
    set_parser.add_argument("key", help="Setting name")
    set_parser.add_argument("value", help="New value")

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv(override=False)

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    commands = {
        "status": SymbolSweepCLI.status,
        "analyze": SymbolSweepCLI.analyze,
        "clean": SymbolSweepCLI.clean,
        "watch": SymbolSweepCLI.watch,
        "daemon": SymbolSweepCLI.daemon,
        "log-path": SymbolSweepCLI.log_path,
        "reindex": SymbolSweepCLI.reindex,
        "last-clean": SymbolSweepCLI.last_clean,
        "settings": SymbolSweepCLI.settings,
    }

    try:
        cli = SymbolSweepCLI(build_service(), verbose=args.verbose)
        return commands[args.command](cli, args)
    except KeyboardInterrupt:
        console.print("\n[muted]Stopped[/]")
        return 130
    except CleanError as e:
        show_clean_error(args.command, e)
        return 1
    except (ValueError, SettingsError, OSError) as e:
        show_error(args.command, str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
