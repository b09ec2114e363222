"""
SymbolSweep Desktop Notification Module.

Turns core events into macOS notifications. Delivery honors the
``show_notifications`` policy flag, read fresh for every event.
"""

import logging
import shutil
import subprocess

from symbolsweep import events
from symbolsweep.events import Event
from symbolsweep.settings import PolicyStore

logger = logging.getLogger(__name__)

APP_TITLE = "SymbolSweep"


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class Notifier:
    """Event subscriber that delivers notifications through osascript."""

    def __init__(self, store: PolicyStore):
        self.store = store

    def __call__(self, event: Event) -> None:
        self.handle(event)

    def handle(self, event: Event) -> bool:
        """Deliver a notification for ``event`` if it warrants one."""
        message = self._message_for(event)
        if message is None:
            return False

        if not self.store.snapshot().show_notifications:
            logger.debug(f"Notifications disabled, dropping {event.name}")
            return False

        title, body, sound = message
        return self.send(title, body, sound)

    def _message_for(self, event: Event) -> tuple[str, str, str] | None:
        payload = event.payload

        if event.name == events.AUTO_CLEAN_TRIGGERED:
            return APP_TITLE, f"Auto-cleaning cache ({payload.size_display})...", "Purr"
        if event.name == events.AUTO_CLEAN_COMPLETED:
            return APP_TITLE, f"Freed {payload.bytes_freed_display}", "Glass"
        if event.name == events.AUTO_CLEAN_FAILED:
            return f"{APP_TITLE} - Auto-clean failed", str(payload), "Basso"
        if event.name == events.WARNING_THRESHOLD_REACHED:
            return (
                f"{APP_TITLE} - Warning",
                f"Cache at {payload.size_display} - consider cleaning",
                "Tink",
            )
        if event.name == events.CRITICAL_THRESHOLD_REACHED:
            return (
                f"{APP_TITLE} - Critical",
                f"Cache at {payload.size_display} - cleaning recommended!",
                "Sosumi",
            )
        return None

    def send(self, title: str, body: str, sound: str = "default") -> bool:
        """
        Show a notification with sound.
        Returns True if shown (or printed as a fallback), False on failure.
        """
        osascript = shutil.which("osascript")
        if not osascript:
            # Not on macOS, print to the console instead
            print(f"[{title}] {body}")
            return True

        script = (
            f'display notification "{_escape(body)}" '
            f'with title "{_escape(title)}" sound name "{_escape(sound)}"'
        )
        try:
            subprocess.run(
                [osascript, "-e", script],
                check=True,
                capture_output=True,
                timeout=10,
            )
            return True
        except (subprocess.SubprocessError, OSError) as e:
            logger.warning(f"Notification failed: {e}")
            return False
