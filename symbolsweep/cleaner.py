"""
Cache cleaning for SymbolSweep.

Safety guarantees:
    - Only ever deletes direct children of
      ~/Library/Caches/com.apple.coresymbolicationd
    - The path is built from fixed components, never from input
    - The directory is verified before any step, every entry is re-checked
      right before it is removed
    - A directory entry is removed with a recursive delete scoped to that
      one child; the cache directory itself is never removed
    - Every step is written to the audit log
"""

import logging
import os
import shutil
import subprocess
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path

from symbolsweep.audit import AuditLog
from symbolsweep.daemon import USER_CANCELED_MARKER, DaemonController, run_privileged
from symbolsweep.errors import CleanError, PermissionDenied, RemovalFailed, SafetyViolation
from symbolsweep.monitor.scanner import SizeScanner, format_size
from symbolsweep.safety import PathGuard, get_cache_path

logger = logging.getLogger(__name__)

# Time for launchd to notice the daemon is gone before files are removed
GRACE_PERIOD_SECONDS = 1.0


@dataclass(frozen=True)
class DeletionItem:
    """One direct child of the cache directory."""

    path: str
    size: int
    size_display: str
    is_directory: bool


@dataclass(frozen=True)
class CleanOutcome:
    """Result of one clean invocation."""

    success: bool
    bytes_freed: int
    bytes_freed_display: str
    files_removed: int
    timestamp: int
    message: str
    requires_password: bool = False
    was_dry_run: bool = False
    items_found: tuple[DeletionItem, ...] = ()
    # True when at least one entry could not be removed
    partial: bool = False
    failed_items: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return asdict(self)


class CacheCleaner:
    """
    Analyzes and empties the cache directory.

    Example:
        cleaner = CacheCleaner()
        preview = cleaner.clean(dry_run=True)
        result = cleaner.clean(dry_run=False)
    """

    def __init__(
        self,
        audit: AuditLog | None = None,
        daemon: DaemonController | None = None,
        guard: PathGuard | None = None,
        grace_period: float = GRACE_PERIOD_SECONDS,
    ):
        self.audit = audit or AuditLog()
        self.daemon = daemon or DaemonController(self.audit)
        self.guard = guard or PathGuard()
        self.grace_period = grace_period

    def analyze(self) -> list[DeletionItem]:
        """
        List what a clean would delete.

        Returns:
            One DeletionItem per direct child, empty if the cache is missing

        Raises:
            SafetyViolation: the cache path failed verification
            RemovalFailed: the cache directory could not be read
        """
        cache_path = get_cache_path()
        self._verify_target(cache_path)

        if not cache_path.exists():
            return []

        scanner = SizeScanner(cache_path)
        items = []
        for entry in self._list_entries(cache_path):
            try:
                self.guard.check_entry(entry.path, cache_path)
            except SafetyViolation as e:
                self.audit.record(f"SAFETY: Skipped suspicious path: {e.message}")
                continue

            is_directory = entry.is_dir(follow_symlinks=False)
            size = self._entry_size(entry, scanner)
            items.append(
                DeletionItem(
                    path=entry.name,
                    size=size,
                    size_display=format_size(size),
                    is_directory=is_directory,
                )
            )

        return items

    def clean(self, dry_run: bool) -> CleanOutcome:
        """
        Empty the cache, or report what would be emptied.

        Per-entry failures do not abort the run; they are audited and
        reported through ``partial`` and ``failed_items``.

        Raises:
            SafetyViolation: the cache path failed verification
            RemovalFailed: the cache directory could not be read
        """
        cache_path = get_cache_path()
        self._verify_target(cache_path)

        self.audit.record(f"=== {'DRY RUN' if dry_run else 'CLEAN OPERATION'} STARTED ===")
        self.audit.record(f"Target path: {cache_path}")

        if not cache_path.exists():
            message = "Cache directory does not exist - nothing to clean"
            self.audit.record(message)
            return CleanOutcome(
                success=True,
                bytes_freed=0,
                bytes_freed_display=format_size(0),
                files_removed=0,
                timestamp=int(time.time()),
                message=message,
                was_dry_run=dry_run,
            )

        items = tuple(self.analyze())
        total_size = sum(item.size for item in items)
        total_count = len(items)
        self.audit.record(f"Found {total_count} items totaling {format_size(total_size)}")

        if dry_run:
            self.audit.record("DRY RUN - No files were deleted")
            self.audit.record("=== DRY RUN COMPLETE ===")
            return CleanOutcome(
                success=True,
                bytes_freed=total_size,
                bytes_freed_display=format_size(total_size),
                files_removed=total_count,
                timestamp=int(time.time()),
                message=f"Dry run: would delete {format_size(total_size)} ({total_count} items)",
                was_dry_run=True,
                items_found=items,
            )

        requires_password = self._stop_daemon()
        time.sleep(self.grace_period)

        bytes_freed, files_removed, failed = self._remove_entries(cache_path)

        self.audit.record(
            f"Clean complete: freed {format_size(bytes_freed)} ({files_removed} items removed)"
        )
        if failed:
            self.audit.record(f"{len(failed)} items could not be removed")
        self.audit.record("=== CLEAN OPERATION COMPLETE ===")

        message = f"Cleaned {format_size(bytes_freed)} ({files_removed} items)"
        if failed:
            message += f", {len(failed)} items could not be removed"

        return CleanOutcome(
            success=files_removed > 0 or not failed,
            bytes_freed=bytes_freed,
            bytes_freed_display=format_size(bytes_freed),
            files_removed=files_removed,
            timestamp=int(time.time()),
            message=message,
            requires_password=requires_password,
            was_dry_run=False,
            items_found=items,
            partial=bool(failed),
            failed_items=tuple(failed),
        )

    def _verify_target(self, cache_path: Path) -> None:
        try:
            self.guard.verify(cache_path)
        except SafetyViolation as e:
            logger.error(str(e))
            self.audit.record(str(e))
            raise

    def _stop_daemon(self) -> bool:
        """Stop the daemon; failures are audited and cleaning goes on."""
        try:
            return self.daemon.stop()
        except CleanError as e:
            logger.warning(f"Could not stop daemon: {e}")
            self.audit.record(f"Warning: Could not stop daemon: {e}")
            return isinstance(e, PermissionDenied)

    def _list_entries(self, cache_path: Path) -> list[os.DirEntry]:
        try:
            with os.scandir(cache_path) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            self.audit.record(f"FAILED to read {cache_path}: {e}")
            raise RemovalFailed(f"Cannot read directory: {e}") from e

    def _entry_size(self, entry: os.DirEntry, scanner: SizeScanner) -> int:
        try:
            if entry.is_dir(follow_symlinks=False):
                size, _ = scanner.size_of(entry.path)
                return size
            return entry.stat(follow_symlinks=False).st_size
        except OSError as e:
            logger.debug(f"Could not size {entry.path}: {e}")
            return 0

    def _remove_entries(self, cache_path: Path) -> tuple[int, int, list[str]]:
        scanner = SizeScanner(cache_path)
        bytes_freed = 0
        files_removed = 0
        failed: list[str] = []

        for entry in self._list_entries(cache_path):
            try:
                self.guard.check_entry(entry.path, cache_path)
            except SafetyViolation as e:
                self.audit.record(f"SAFETY: Refused to delete: {e.message}")
                continue

            is_directory = entry.is_dir(follow_symlinks=False)
            size = self._entry_size(entry, scanner)

            try:
                if is_directory:
                    shutil.rmtree(entry.path)
                else:
                    os.remove(entry.path)
            except OSError as e:
                failed.append(entry.name)
                logger.warning(f"Failed to delete {entry.path}: {e}")
                self.audit.record(f"FAILED to delete {entry.path}: {e}")
                continue

            bytes_freed += size
            files_removed += 1
            self.audit.record(
                f"DELETED: {entry.name} ({format_size(size)}, "
                f"{'directory' if is_directory else 'file'})"
            )

        return bytes_freed, files_removed, failed


def reindex_spotlight(audit: AuditLog | None = None) -> None:
    """
    Ask Spotlight to rebuild its index (helps clear orphaned document IDs).

    Optional: only a cancelled password prompt is reported.

    Raises:
        PermissionDenied: the user cancelled the prompt
    """
    audit = audit or AuditLog()
    audit.record("Requesting Spotlight reindex")

    try:
        result = run_privileged("mdutil -E /")
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning(f"Spotlight reindex could not be started: {e}")
        return

    if result.returncode == 0:
        audit.record("Spotlight reindex initiated")
        return

    stderr = result.stderr or ""
    if USER_CANCELED_MARKER in stderr:
        raise PermissionDenied("User cancelled authentication")
    logger.warning(f"Spotlight reindex failed: {stderr.strip()}")
