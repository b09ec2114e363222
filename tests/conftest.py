"""Shared fixtures: every test runs against a throwaway home directory."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from symbolsweep.audit import AuditLog
from symbolsweep.safety import CACHE_FOLDER_NAME


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and the settings directory into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("SYMBOLSWEEP_CONFIG_DIR", str(home / "config"))
    return home


@pytest.fixture
def cache_dir(fake_home: Path) -> Path:
    path = fake_home / "Library" / "Caches" / CACHE_FOLDER_NAME
    path.mkdir(parents=True)
    return path


@pytest.fixture
def populated_cache(cache_dir: Path) -> Path:
    """Cache with two files and one nested directory, 8192 bytes in total."""
    (cache_dir / "a.cache").write_bytes(b"a" * 2048)
    (cache_dir / "b.cache").write_bytes(b"b" * 1024)
    symbols = cache_dir / "symbols"
    (symbols / "nested").mkdir(parents=True)
    (symbols / "x.bin").write_bytes(b"x" * 4096)
    (symbols / "nested" / "y.bin").write_bytes(b"y" * 1024)
    return cache_dir


@pytest.fixture
def audit(tmp_path: Path) -> AuditLog:
    return AuditLog(tmp_path / "logs" / "deletions.log")


@pytest.fixture
def mock_daemon() -> MagicMock:
    daemon = MagicMock()
    daemon.stop.return_value = False
    daemon.is_running.return_value = False
    return daemon
