"""
Tests for size scanning and display formatting.
"""

from pathlib import Path

import pytest

from symbolsweep.monitor.scanner import GB, KB, MB, SizeScanner, format_count, format_size

# =============================================================================
# Formatting
# =============================================================================


class TestFormatSize:
    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (KB, "1 KB"),
            (1536, "1 KB"),
            (MB, "1 MB"),
            (MB + 512 * KB, "1 MB"),
            (999 * MB, "999 MB"),
            (1000 * MB, "1 GB"),
            (GB, "1 GB"),
            (GB + GB // 2, "1.5 GB"),
            (5 * GB, "5 GB"),
            (int(2.37 * GB), "2.4 GB"),
            (10 * GB, "10 GB"),
        ],
    )
    def test_format_size(self, size: int, expected: str) -> None:
        assert format_size(size) == expected

    def test_never_shows_four_digit_megabytes(self) -> None:
        assert "MB" not in format_size(1010 * MB)

    def test_format_count(self) -> None:
        assert format_count(0) == "0"
        assert format_count(1250) == "1,250"
        assert format_count(1234567) == "1,234,567"


# =============================================================================
# SizeScanner
# =============================================================================


class TestSizeScanner:
    def test_counts_nested_files(self, populated_cache: Path) -> None:
        size, count = SizeScanner(populated_cache).size_of()

        assert size == 8192
        assert count == 4

    def test_subdirectory(self, populated_cache: Path) -> None:
        size, count = SizeScanner(populated_cache).size_of(populated_cache / "symbols")

        assert size == 5120
        assert count == 2

    def test_empty_directory(self, cache_dir: Path) -> None:
        assert SizeScanner(cache_dir).size_of() == (0, 0)

    def test_refuses_path_outside_root(self, cache_dir: Path, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"z" * 4096)

        assert SizeScanner(cache_dir).size_of(outside) == (0, 0)

    def test_does_not_follow_symlinks(self, cache_dir: Path, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"z" * 100_000)
        (cache_dir / "link").symlink_to(outside)

        size, count = SizeScanner(cache_dir).size_of()

        assert size < 100_000
        assert count == 1

    def test_missing_directory_counts_as_empty(self, fake_home: Path) -> None:
        missing = fake_home / "nope"
        assert SizeScanner(missing).size_of() == (0, 0)
