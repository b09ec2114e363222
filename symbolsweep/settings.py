"""
Persisted user policy for SymbolSweep.

A single Policy lives inside a PolicyStore. The store's lock guards only the
in-memory value; the JSON file is written from a snapshot after the lock is
released so a slow disk never stalls the monitor loop.
"""

import json
import logging
import os
import threading
import time
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from symbolsweep.errors import SettingsError
from symbolsweep.monitor.status import WARNING_THRESHOLD

logger = logging.getLogger(__name__)

APP_IDENTIFIER = "com.mvarley07.symbolsweep"
CONFIG_DIR_ENV = "SYMBOLSWEEP_CONFIG_DIR"
SETTINGS_FILE_NAME = "settings.json"


def get_settings_path() -> Path:
    """Settings file location; the directory can be overridden from the environment."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser() / SETTINGS_FILE_NAME
    return Path.home() / "Library" / "Application Support" / APP_IDENTIFIER / SETTINGS_FILE_NAME


@dataclass
class Policy:
    """User policy for monitoring and auto-clean."""

    auto_clean_on_threshold: bool = False
    auto_clean_threshold: int = WARNING_THRESHOLD
    auto_clean_scheduled: bool = False
    auto_clean_interval_secs: int = 6 * 60 * 60
    show_notifications: bool = True
    launch_at_login: bool = False
    last_clean_timestamp: int = 0
    monitor_interval_secs: int = 60
    # Debug mode replaces real measurements with debug_simulated_size
    debug_mode: bool = False
    debug_simulated_size: int = 0
    first_run_completed: bool = False
    first_clean_confirmed: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Policy":
        """
        Build from stored data; unknown keys are dropped, missing keys defaulted.

        Raises:
            ValueError: data is not a mapping or a known key has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            # bool is a subclass of int, so it is excluded from int fields
            if f.type is bool:
                valid = isinstance(value, bool)
            else:
                valid = isinstance(value, int) and not isinstance(value, bool)
            if not valid:
                raise ValueError(f"{f.name} must be {f.type.__name__}, got {value!r}")
            values[f.name] = value
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)

    def validate(self) -> None:
        """
        Raises:
            ValueError: if an interval is below one second or a size is negative
        """
        if self.monitor_interval_secs < 1:
            raise ValueError("monitor_interval_secs must be at least 1")
        if self.auto_clean_interval_secs < 1:
            raise ValueError("auto_clean_interval_secs must be at least 1")
        if self.auto_clean_threshold < 0:
            raise ValueError("auto_clean_threshold must be non-negative")
        if self.debug_simulated_size < 0:
            raise ValueError("debug_simulated_size must be non-negative")

    def with_value(self, key: str, raw: str) -> "Policy":
        """
        Return a copy with one field parsed from text (CLI ``settings set``).

        Raises:
            KeyError: unknown field
            ValueError: value does not parse as the field's type
        """
        field_types = {f.name: f.type for f in fields(self)}
        if key not in field_types:
            raise KeyError(key)

        if field_types[key] is bool:
            lowered = raw.strip().lower()
            if lowered in ("1", "true", "yes", "on"):
                value = True
            elif lowered in ("0", "false", "no", "off"):
                value = False
            else:
                raise ValueError(f"Expected true/false for {key}, got '{raw}'")
        else:
            value = int(raw)

        return replace(self, **{key: value})


class PolicyStore:
    """
    Shared, lock-guarded Policy handle.

    Example:
        store = PolicyStore.load()
        policy = store.snapshot()
        store.update(show_notifications=False)
    """

    def __init__(self, policy: Policy | None = None, path: Path | None = None):
        self.path = path or get_settings_path()
        self._policy = policy or Policy()
        self._lock = threading.Lock()
        # Serializes file writes; never taken while holding _lock
        self._write_lock = threading.Lock()

    @classmethod
    def load(cls, path: Path | None = None) -> "PolicyStore":
        """Load from disk, falling back to defaults when missing, corrupt or invalid."""
        path = path or get_settings_path()
        policy = Policy()

        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    policy = Policy.from_dict(json.load(f))
                policy.validate()
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable settings file {path}: {e}")
                policy = Policy()

        return cls(policy, path)

    def snapshot(self) -> Policy:
        """Return a copy of the current policy."""
        with self._lock:
            return replace(self._policy)

    def replace(self, policy: Policy) -> Policy:
        """
        Swap in a new policy and persist it.

        ``last_clean_timestamp`` never moves backwards: the larger of the
        stored and incoming values is kept.

        Returns:
            The policy as stored
        """
        policy.validate()
        with self._lock:
            last_clean = max(self._policy.last_clean_timestamp, policy.last_clean_timestamp)
            self._policy = replace(policy, last_clean_timestamp=last_clean)
            stored = replace(self._policy)
        self.save()
        return stored

    def update(self, **changes) -> Policy:
        """Change individual fields and persist."""
        return self.replace(replace(self.snapshot(), **changes))

    def record_clean(self, now: float | None = None) -> int:
        """Mark a completed clean; returns the stored timestamp."""
        timestamp = int(time.time() if now is None else now)
        with self._lock:
            timestamp = max(self._policy.last_clean_timestamp, timestamp)
            self._policy.last_clean_timestamp = timestamp
        self.save()
        return timestamp

    def save(self) -> None:
        """
        Write the current policy to disk.

        Raises:
            SettingsError: the file could not be written
        """
        with self._write_lock:
            data = self.snapshot().to_dict()
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.path.with_suffix(".tmp")
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_path, self.path)
            except OSError as e:
                raise SettingsError(f"Failed to write settings: {e}") from e
        logger.debug(f"Saved settings to {self.path}")
