"""
Append-only audit log of safety checks and deletions.

Separate from diagnostic logging: this file is meant to be read by the user
to see exactly what was removed and when.
"""

import logging
import threading
from collections import deque
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_path() -> Path:
    return Path.home() / "Library" / "Logs" / "SymbolSweep" / "deletions.log"


class AuditLog:
    """
    Writes ``[YYYY-MM-DD HH:MM:SS] message`` lines.

    A failed write is reported through ``logging`` and never raises, so an
    unwritable log cannot block a clean.
    """

    def __init__(self, path: Path | None = None):
        self.path = path or get_log_path()
        self._lock = threading.Lock()

    def record(self, message: str) -> None:
        line = f"[{datetime.now().strftime(TIMESTAMP_FORMAT)}] {message}\n"
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line)
            except OSError as e:
                logger.warning(f"Could not write audit log {self.path}: {e}")

    def tail(self, count: int = 20) -> list[str]:
        """Return the last ``count`` lines (empty if the log does not exist yet)."""
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8", errors="replace") as f:
            return [line.rstrip("\n") for line in deque(f, maxlen=count)]
