"""
Control of the coresymbolicationd daemon.

The daemon rebuilds its cache when restarted by launchd, so it has to be
stopped before the cache is emptied. Failures here are recoverable: the
daemon may simply not be running.
"""

import logging
import subprocess

import psutil

from symbolsweep.audit import AuditLog
from symbolsweep.errors import DaemonKillFailed, PermissionDenied

logger = logging.getLogger(__name__)

DAEMON_NAME = "coresymbolicationd"

# osascript stderr when the password dialog is dismissed
USER_CANCELED_MARKER = "User canceled"

# killall exit code when no process matched
KILLALL_NO_MATCH = 1

COMMAND_TIMEOUT = 30
# The privilege prompt waits on the user
PROMPT_TIMEOUT = 300


def run_privileged(shell_command: str) -> subprocess.CompletedProcess:
    """Run a shell command behind the macOS administrator password prompt."""
    script = f'do shell script "{shell_command}" with administrator privileges'
    return subprocess.run(
        ["osascript", "-e", script],
        capture_output=True,
        text=True,
        timeout=PROMPT_TIMEOUT,
    )


class DaemonController:
    """Stops the daemon and reports whether it is running."""

    def __init__(self, audit: AuditLog | None = None, name: str = DAEMON_NAME):
        self.audit = audit or AuditLog()
        self.name = name

    def stop(self) -> bool:
        """
        Stop the daemon, escalating to an administrator prompt if needed.

        Returns:
            True if the privileged path was used, False otherwise

        Raises:
            PermissionDenied: the user cancelled the prompt
            DaemonKillFailed: any other failure
        """
        try:
            result = subprocess.run(
                ["killall", "-9", self.name],
                capture_output=True,
                text=True,
                timeout=COMMAND_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise DaemonKillFailed(str(e)) from e

        if result.returncode in (0, KILLALL_NO_MATCH):
            self.audit.record(f"Stopped {self.name} daemon")
            return False

        logger.debug(f"killall exited {result.returncode}, retrying with privileges")
        self._stop_with_privileges()
        return True

    def _stop_with_privileges(self) -> None:
        try:
            result = run_privileged(f"killall -9 {self.name} 2>/dev/null || true")
        except (OSError, subprocess.SubprocessError) as e:
            raise DaemonKillFailed(str(e)) from e

        if result.returncode == 0:
            self.audit.record(f"Stopped {self.name} daemon (with privileges)")
            return

        stderr = result.stderr or ""
        if USER_CANCELED_MARKER in stderr:
            raise PermissionDenied("User cancelled authentication")
        raise DaemonKillFailed(stderr.strip())

    def is_running(self) -> bool:
        """Check for a process with exactly the daemon's name."""
        try:
            for proc in psutil.process_iter(["name"]):
                if proc.info.get("name") == self.name:
                    return True
        except psutil.Error as e:
            logger.debug(f"Process lookup failed: {e}")
        return False
