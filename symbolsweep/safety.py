"""
Path safety checks for SymbolSweep.

The only directory SymbolSweep may ever inspect or delete from is built here
from fixed components. Nothing in this module accepts a path from the user;
the checks exist so that every destructive step can re-confirm it is still
pointed at that one directory.
"""

import logging
import os
from pathlib import Path

from symbolsweep.errors import SafetyViolation

logger = logging.getLogger(__name__)

CACHE_FOLDER_NAME = "com.apple.coresymbolicationd"

# Root-owned twin of the user cache; read for the combined status only.
SYSTEM_CACHE_PATH = Path("/System/Library/Caches") / CACHE_FOLDER_NAME


def get_cache_path() -> Path:
    """Return the one cache directory SymbolSweep is allowed to touch."""
    return Path.home() / "Library" / "Caches" / CACHE_FOLDER_NAME


def is_within(path: str | os.PathLike, root: str | os.PathLike) -> bool:
    """Component-wise prefix test (``/a/bc`` is not within ``/a/b``)."""
    path_parts = Path(path).parts
    root_parts = Path(root).parts
    return path_parts[: len(root_parts)] == root_parts


def contains_folder_name(path: str | os.PathLike) -> bool:
    return CACHE_FOLDER_NAME in str(path)


class PathGuard:
    """
    Verifies paths against the fixed cache location.

    All methods are pure: they only read filesystem metadata (to resolve
    symlinks) and raise SafetyViolation on failure.
    """

    def verify(self, path: str | os.PathLike) -> None:
        """
        Check that ``path`` is exactly the allowed cache directory.

        Both the canonical forms must match and the raw path must contain the
        cache folder name. The second check still holds when the directory
        does not exist yet and canonicalization has nothing to resolve.

        Raises:
            SafetyViolation: if either check fails
        """
        expected = get_cache_path()

        canonical_expected = os.path.realpath(expected)
        canonical_path = os.path.realpath(path)

        if canonical_path != canonical_expected:
            raise SafetyViolation(
                f"Path '{path}' does not match expected cache location '{expected}'"
            )

        if not contains_folder_name(path):
            raise SafetyViolation(
                f"Path does not contain expected folder name '{CACHE_FOLDER_NAME}'"
            )

    def check_entry(self, entry: str | os.PathLike, root: str | os.PathLike) -> None:
        """
        Check a direct child of the cache directory before it is touched.

        Raises:
            SafetyViolation: if the entry lies outside ``root``, lost the
                cache folder name, or resolves (through a symlink) to a
                location that is not strictly inside ``root``
        """
        if not is_within(entry, root):
            raise SafetyViolation(f"Path outside cache: {entry}")

        if not contains_folder_name(entry):
            raise SafetyViolation(f"Path missing expected folder: {entry}")

        resolved = Path(os.path.realpath(entry))
        resolved_root = Path(os.path.realpath(root))
        if resolved == resolved_root or not is_within(resolved, resolved_root):
            raise SafetyViolation(f"Path resolves outside cache: {entry} -> {resolved}")
