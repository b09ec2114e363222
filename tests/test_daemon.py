"""
Tests for stopping and detecting coresymbolicationd.
"""

import subprocess
from unittest.mock import MagicMock, patch

import psutil
import pytest

from symbolsweep.audit import AuditLog
from symbolsweep.daemon import DaemonController
from symbolsweep.errors import DaemonKillFailed, PermissionDenied


def _completed(returncode: int, stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stderr = stderr
    return result


@pytest.fixture
def controller(audit: AuditLog) -> DaemonController:
    return DaemonController(audit)


# =============================================================================
# stop()
# =============================================================================


class TestStop:
    @patch("symbolsweep.daemon.subprocess.run")
    def test_killed_without_privileges(self, mock_run: MagicMock, controller: DaemonController) -> None:
        mock_run.return_value = _completed(0)

        assert controller.stop() is False
        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == ["killall", "-9", "coresymbolicationd"]
        assert "Stopped coresymbolicationd daemon" in controller.audit.path.read_text()

    @patch("symbolsweep.daemon.subprocess.run")
    def test_not_running_counts_as_success(self, mock_run: MagicMock, controller: DaemonController) -> None:
        mock_run.return_value = _completed(1)

        assert controller.stop() is False
        mock_run.assert_called_once()

    @patch("symbolsweep.daemon.subprocess.run")
    def test_escalates_to_privileges(self, mock_run: MagicMock, controller: DaemonController) -> None:
        mock_run.side_effect = [_completed(2, "Operation not permitted"), _completed(0)]

        assert controller.stop() is True
        assert mock_run.call_count == 2
        privileged_cmd = mock_run.call_args_list[1][0][0]
        assert privileged_cmd[0] == "osascript"
        assert "with administrator privileges" in privileged_cmd[2]
        assert "(with privileges)" in controller.audit.path.read_text()

    @patch("symbolsweep.daemon.subprocess.run")
    def test_cancelled_prompt(self, mock_run: MagicMock, controller: DaemonController) -> None:
        mock_run.side_effect = [
            _completed(2),
            _completed(1, "execution error: User canceled. (-128)"),
        ]

        with pytest.raises(PermissionDenied):
            controller.stop()

    @patch("symbolsweep.daemon.subprocess.run")
    def test_privileged_failure(self, mock_run: MagicMock, controller: DaemonController) -> None:
        mock_run.side_effect = [_completed(2), _completed(1, "something broke")]

        with pytest.raises(DaemonKillFailed) as exc_info:
            controller.stop()
        assert "something broke" in str(exc_info.value)

    @patch("symbolsweep.daemon.subprocess.run")
    def test_spawn_failure(self, mock_run: MagicMock, controller: DaemonController) -> None:
        mock_run.side_effect = FileNotFoundError("killall")

        with pytest.raises(DaemonKillFailed):
            controller.stop()

    @patch("symbolsweep.daemon.subprocess.run")
    def test_timeout(self, mock_run: MagicMock, controller: DaemonController) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired("killall", 30)

        with pytest.raises(DaemonKillFailed):
            controller.stop()


# =============================================================================
# is_running()
# =============================================================================


class TestIsRunning:
    @patch("symbolsweep.daemon.psutil.process_iter")
    def test_running(self, mock_iter: MagicMock, controller: DaemonController) -> None:
        mock_iter.return_value = [
            MagicMock(info={"name": "launchd"}),
            MagicMock(info={"name": "coresymbolicationd"}),
        ]
        assert controller.is_running() is True

    @patch("symbolsweep.daemon.psutil.process_iter")
    def test_name_must_match_exactly(self, mock_iter: MagicMock, controller: DaemonController) -> None:
        mock_iter.return_value = [MagicMock(info={"name": "coresymbolicationd-helper"})]
        assert controller.is_running() is False

    @patch("symbolsweep.daemon.psutil.process_iter")
    def test_lookup_error(self, mock_iter: MagicMock, controller: DaemonController) -> None:
        mock_iter.side_effect = psutil.AccessDenied()
        assert controller.is_running() is False
