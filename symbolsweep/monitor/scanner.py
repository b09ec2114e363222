"""
Directory size scanning for SymbolSweep.

Read-only recursive walk producing a byte total and file count. Every
directory is re-checked against the allowed root right before it is opened,
and symlinks are never followed.

Author: SymbolSweep Team
SPDX-License-Identifier: MIT
"""

import logging
import os
from pathlib import Path

from symbolsweep.safety import is_within

logger = logging.getLogger(__name__)

KB = 1024
MB = KB * 1024
GB = MB * 1024

# Sizes switch to GB at 1000 MB so the display never reads "1010 MB".
GB_DISPLAY_THRESHOLD = 1000 * MB


def format_size(size_bytes: int) -> str:
    """
    Format a byte count for display.

    GB values keep one decimal unless they are whole ("1.5 GB", "5 GB");
    MB and KB values are truncated to whole units.
    """
    if size_bytes >= GB_DISPLAY_THRESHOLD:
        rounded = round(size_bytes / GB, 1)
        if abs(rounded - int(rounded)) < 0.01:
            return f"{rounded:.0f} GB"
        return f"{rounded:.1f} GB"
    elif size_bytes >= MB:
        return f"{size_bytes // MB} MB"
    elif size_bytes >= KB:
        return f"{size_bytes // KB} KB"
    elif size_bytes > 0:
        return f"{size_bytes} B"
    return "0 B"


def format_count(count: int) -> str:
    """Add thousands separators (1250 -> "1,250")."""
    return f"{count:,}"


class SizeScanner:
    """
    Computes aggregate size and file count below an allowed root.

    Example:
        scanner = SizeScanner(get_cache_path())
        size_bytes, file_count = scanner.size_of()
    """

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)

    def size_of(self, path: str | os.PathLike | None = None) -> tuple[int, int]:
        """
        Return ``(bytes, file_count)`` for ``path`` (default: the root).

        Unreadable directories count as empty; a partial total is fine for
        a monitoring read.
        """
        start = self.root if path is None else Path(path)

        # Re-checked on every descent in case an entry was swapped for a
        # symlink between listing and opening.
        if not is_within(start, self.root):
            logger.warning(f"Refusing to scan outside {self.root}: {start}")
            return 0, 0

        total_size = 0
        file_count = 0

        try:
            with os.scandir(start) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            sub_size, sub_count = self.size_of(entry.path)
                            total_size += sub_size
                            file_count += sub_count
                        else:
                            total_size += entry.stat(follow_symlinks=False).st_size
                            file_count += 1
                    except OSError as e:
                        logger.debug(f"Skipping unreadable entry {entry.path}: {e}")
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {start}: {e}")

        return total_size, file_count
