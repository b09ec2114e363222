"""
Launch-at-login support.

The core only knows the AutostartCapability interface and calls it when the
``launch_at_login`` policy flag changes. LaunchAgentAutostart is the
implementation the command-line host plugs in on macOS.
"""

import logging
import plistlib
import shutil
import sys
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

AGENT_LABEL = "com.mvarley07.symbolsweep"


class AutostartCapability(Protocol):
    def enable(self) -> None: ...

    def disable(self) -> None: ...


def default_program_arguments() -> list[str]:
    executable = shutil.which("symbolsweep")
    if executable:
        return [executable, "watch"]
    return [sys.executable, "-m", "symbolsweep", "watch"]


class LaunchAgentAutostart:
    """Registers ``symbolsweep watch`` as a per-user LaunchAgent."""

    def __init__(
        self,
        agents_dir: Path | None = None,
        label: str = AGENT_LABEL,
        program_arguments: list[str] | None = None,
    ):
        self.agents_dir = agents_dir or Path.home() / "Library" / "LaunchAgents"
        self.label = label
        self.program_arguments = program_arguments or default_program_arguments()

    @property
    def plist_path(self) -> Path:
        return self.agents_dir / f"{self.label}.plist"

    def enable(self) -> None:
        self.agents_dir.mkdir(parents=True, exist_ok=True)
        agent = {
            "Label": self.label,
            "ProgramArguments": self.program_arguments,
            "RunAtLoad": True,
            "ProcessType": "Interactive",
        }
        with open(self.plist_path, "wb") as f:
            plistlib.dump(agent, f)
        logger.info(f"Launch agent written to {self.plist_path}")

    def disable(self) -> None:
        if self.plist_path.exists():
            self.plist_path.unlink()
            logger.info(f"Launch agent removed from {self.plist_path}")

    def is_enabled(self) -> bool:
        return self.plist_path.exists()
