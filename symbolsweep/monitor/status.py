"""
Cache measurement and tier classification for SymbolSweep.

Every call produces a fresh CacheStatus; nothing here keeps state between
measurements.

Author: SymbolSweep Team
SPDX-License-Identifier: MIT
"""

import logging
import time
from dataclasses import asdict, dataclass, replace
from enum import Enum
from pathlib import Path

from symbolsweep.monitor.scanner import GB, MB, SizeScanner, format_size
from symbolsweep.safety import SYSTEM_CACHE_PATH, get_cache_path

logger = logging.getLogger(__name__)

WARNING_THRESHOLD = 5 * GB
CRITICAL_THRESHOLD = 10 * GB

DEBUG_PATH_LABEL = "[Debug Mode]"


class CacheState(Enum):
    """Health tier of the cache."""

    NORMAL = "Normal"
    WARNING = "Warning"
    CRITICAL = "Critical"

    @classmethod
    def from_size(cls, size_bytes: int) -> "CacheState":
        """Classify a size; a size equal to a threshold maps to the higher tier."""
        if size_bytes >= CRITICAL_THRESHOLD:
            return cls.CRITICAL
        elif size_bytes >= WARNING_THRESHOLD:
            return cls.WARNING
        return cls.NORMAL


@dataclass(frozen=True)
class CacheStatus:
    """A single snapshot of the cache."""

    size_bytes: int
    size_display: str
    state: CacheState
    path: str
    exists: bool
    file_count: int
    last_checked: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["state"] = self.state.value
        return data


def _now() -> int:
    return int(time.time())


def build_status(
    size_bytes: int,
    path: str,
    exists: bool,
    file_count: int,
) -> CacheStatus:
    return CacheStatus(
        size_bytes=size_bytes,
        size_display=format_size(size_bytes),
        state=CacheState.from_size(size_bytes),
        path=path,
        exists=exists,
        file_count=file_count,
        last_checked=_now(),
    )


class CacheMonitor:
    """Measures the user cache, the combined user+system caches, or a simulated size."""

    def __init__(self, system_cache_path: Path = SYSTEM_CACHE_PATH):
        self.system_cache_path = system_cache_path

    def measure(self) -> CacheStatus:
        """Measure the user-level cache directory."""
        cache_path = get_cache_path()

        if not cache_path.exists():
            return build_status(0, str(cache_path), exists=False, file_count=0)

        size_bytes, file_count = SizeScanner(cache_path).size_of()
        logger.debug(f"Measured {cache_path}: {size_bytes} bytes in {file_count} files")
        return build_status(size_bytes, str(cache_path), exists=True, file_count=file_count)

    def measure_combined(self) -> CacheStatus:
        """
        Measure user and system caches together.

        The tier is computed on the summed size; path and file count stay
        those of the user cache. An unreadable system cache counts as 0.
        """
        user_status = self.measure()

        system_size = 0
        if self.system_cache_path.exists():
            system_size, _ = SizeScanner(self.system_cache_path).size_of()

        total_size = user_status.size_bytes + system_size
        return replace(
            user_status,
            size_bytes=total_size,
            size_display=format_size(total_size),
            state=CacheState.from_size(total_size),
        )

    def simulated(self, size_bytes: int) -> CacheStatus:
        """Build a fake status for debug mode (about one file per MB)."""
        return build_status(
            size_bytes,
            DEBUG_PATH_LABEL,
            exists=True,
            file_count=size_bytes // MB,
        )

    def current(self, policy) -> CacheStatus:
        """Measure according to policy: simulated in debug mode, real otherwise."""
        if policy.debug_mode:
            return self.simulated(policy.debug_simulated_size)
        return self.measure()
