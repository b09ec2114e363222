"""
SymbolSweep Monitor Module

Size scanning and tier classification of the coresymbolicationd cache.
"""

from symbolsweep.monitor.scanner import SizeScanner, format_count, format_size
from symbolsweep.monitor.status import (
    CRITICAL_THRESHOLD,
    WARNING_THRESHOLD,
    CacheMonitor,
    CacheState,
    CacheStatus,
)

__all__ = [
    "CRITICAL_THRESHOLD",
    "WARNING_THRESHOLD",
    "CacheMonitor",
    "CacheState",
    "CacheStatus",
    "SizeScanner",
    "format_count",
    "format_size",
]
