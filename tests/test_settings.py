"""
Tests for the persisted policy and its store.
"""

import json
import threading
from pathlib import Path

import pytest

from symbolsweep.errors import SettingsError
from symbolsweep.monitor.scanner import GB
from symbolsweep.settings import APP_IDENTIFIER, Policy, PolicyStore, get_settings_path


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "settings.json"


# =============================================================================
# Policy
# =============================================================================


class TestPolicy:
    def test_defaults(self) -> None:
        policy = Policy()

        assert policy.auto_clean_on_threshold is False
        assert policy.auto_clean_threshold == 5 * GB
        assert policy.auto_clean_scheduled is False
        assert policy.auto_clean_interval_secs == 21600
        assert policy.show_notifications is True
        assert policy.launch_at_login is False
        assert policy.last_clean_timestamp == 0
        assert policy.monitor_interval_secs == 60
        assert policy.debug_mode is False
        assert policy.debug_simulated_size == 0
        assert policy.first_run_completed is False
        assert policy.first_clean_confirmed is False

    def test_from_dict_tolerates_unknown_and_missing(self) -> None:
        policy = Policy.from_dict({"show_notifications": False, "removed_in_old_version": 1})

        assert policy.show_notifications is False
        assert policy.monitor_interval_secs == 60

    @pytest.mark.parametrize(
        "data",
        [
            {"auto_clean_on_threshold": "false"},
            {"show_notifications": 0},
            {"monitor_interval_secs": True},
            {"auto_clean_threshold": "5368709120"},
            {"last_clean_timestamp": None},
        ],
    )
    def test_from_dict_rejects_wrong_types(self, data: dict) -> None:
        with pytest.raises(ValueError):
            Policy.from_dict(data)

    @pytest.mark.parametrize("data", [[], None, 5, "settings"])
    def test_from_dict_rejects_non_mapping(self, data) -> None:
        with pytest.raises(ValueError):
            Policy.from_dict(data)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("monitor_interval_secs", 0),
            ("auto_clean_interval_secs", 0),
            ("auto_clean_threshold", -1),
            ("debug_simulated_size", -1),
        ],
    )
    def test_validate_rejects(self, field: str, value: int) -> None:
        with pytest.raises(ValueError):
            Policy(**{field: value}).validate()

    def test_with_value_bool(self) -> None:
        assert Policy().with_value("auto_clean_on_threshold", "true").auto_clean_on_threshold is True
        assert Policy().with_value("show_notifications", "off").show_notifications is False

    def test_with_value_int(self) -> None:
        assert Policy().with_value("monitor_interval_secs", "30").monitor_interval_secs == 30

    def test_with_value_unknown_key(self) -> None:
        with pytest.raises(KeyError):
            Policy().with_value("nope", "1")

    def test_with_value_bad_value(self) -> None:
        with pytest.raises(ValueError):
            Policy().with_value("debug_mode", "maybe")
        with pytest.raises(ValueError):
            Policy().with_value("monitor_interval_secs", "soon")


# =============================================================================
# PolicyStore
# =============================================================================


class TestPolicyStore:
    def test_default_path(self, fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SYMBOLSWEEP_CONFIG_DIR")
        expected = fake_home / "Library" / "Application Support" / APP_IDENTIFIER / "settings.json"
        assert get_settings_path() == expected

    def test_path_override(self, fake_home: Path) -> None:
        assert get_settings_path() == fake_home / "config" / "settings.json"

    def test_load_missing(self, settings_path: Path) -> None:
        store = PolicyStore.load(settings_path)

        assert store.snapshot() == Policy()
        assert store.path == settings_path

    def test_load_corrupt(self, settings_path: Path) -> None:
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("{not json")

        assert PolicyStore.load(settings_path).snapshot() == Policy()

    @pytest.mark.parametrize("content", ["[]", "null", "5", '"settings"'])
    def test_load_non_object(self, settings_path: Path, content: str) -> None:
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(content)

        assert PolicyStore.load(settings_path).snapshot() == Policy()

    @pytest.mark.parametrize(
        "stored",
        [
            {"auto_clean_on_threshold": "false", "auto_clean_scheduled": True},
            {"monitor_interval_secs": 0},
            {"monitor_interval_secs": "60"},
            {"auto_clean_threshold": 1.5},
            {"debug_mode": 1},
        ],
    )
    def test_load_invalid_values(self, settings_path: Path, stored: dict) -> None:
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(json.dumps(stored))

        policy = PolicyStore.load(settings_path).snapshot()

        assert policy == Policy()
        assert policy.auto_clean_on_threshold is False
        assert policy.monitor_interval_secs == 60

    def test_update_persists(self, settings_path: Path) -> None:
        store = PolicyStore.load(settings_path)
        store.update(auto_clean_scheduled=True, monitor_interval_secs=15)

        data = json.loads(settings_path.read_text())
        assert data["auto_clean_scheduled"] is True
        assert data["monitor_interval_secs"] == 15

        reloaded = PolicyStore.load(settings_path).snapshot()
        assert reloaded.auto_clean_scheduled is True
        assert reloaded.monitor_interval_secs == 15

    def test_snapshot_is_a_copy(self, settings_path: Path) -> None:
        store = PolicyStore(path=settings_path)
        snapshot = store.snapshot()
        snapshot.debug_mode = True

        assert store.snapshot().debug_mode is False

    def test_replace_validates(self, settings_path: Path) -> None:
        store = PolicyStore(path=settings_path)

        with pytest.raises(ValueError):
            store.replace(Policy(monitor_interval_secs=0))
        assert store.snapshot().monitor_interval_secs == 60
        assert not settings_path.exists()

    def test_last_clean_never_moves_backwards(self, settings_path: Path) -> None:
        store = PolicyStore(path=settings_path)

        assert store.record_clean(1000) == 1000
        assert store.record_clean(900) == 1000

        stored = store.replace(Policy(last_clean_timestamp=500))
        assert stored.last_clean_timestamp == 1000

        stored = store.replace(Policy(last_clean_timestamp=2000))
        assert stored.last_clean_timestamp == 2000

    def test_record_clean_persists(self, settings_path: Path) -> None:
        PolicyStore(path=settings_path).record_clean(1234)
        assert PolicyStore.load(settings_path).snapshot().last_clean_timestamp == 1234

    def test_save_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = PolicyStore(path=blocker / "settings.json")

        with pytest.raises(SettingsError):
            store.save()

    def test_concurrent_updates(self, settings_path: Path) -> None:
        store = PolicyStore(path=settings_path)

        def worker(start: int) -> None:
            for i in range(20):
                store.record_clean(start + i)

        threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.snapshot().last_clean_timestamp == 419
        assert PolicyStore.load(settings_path).snapshot().last_clean_timestamp == 419
