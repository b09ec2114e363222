"""
Error types for SymbolSweep.

Safety and directory-read failures propagate to the caller; per-item
deletion failures never surface here (they land in the audit log and the
CleanOutcome counters instead).
"""


class CleanError(Exception):
    """Base class for every cache cleaning failure."""

    prefix = "Unknown error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class SafetyViolation(CleanError):
    """A path check failed. Fatal; must never be retried automatically."""

    prefix = "SAFETY VIOLATION"


class PermissionDenied(CleanError):
    """The user declined the administrator privilege prompt."""

    prefix = "Permission denied"


class DaemonKillFailed(CleanError):
    prefix = "Failed to stop daemon"


class CacheNotFound(CleanError):
    prefix = "Cache not found"


class RemovalFailed(CleanError):
    """The cache directory could not be read."""

    prefix = "Failed to remove cache"


class SettingsError(Exception):
    """Settings could not be persisted."""
