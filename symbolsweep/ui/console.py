"""SymbolSweep Console - Themed console singleton with semantic message methods."""

from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel

from .theme import PANEL_STYLES, SWEEP_THEME, SYMBOLS


class SweepConsole:
    """Themed console with semantic message methods."""

    _instance: Optional["SweepConsole"] = None

    def __new__(cls) -> "SweepConsole":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._console = RichConsole(theme=SWEEP_THEME)
        return cls._instance

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        self._console.print(*args, **kwargs)

    def print_json(self, data: str) -> None:
        self._console.print_json(data)

    def success(self, message: str) -> None:
        self._console.print(f"[success_symbol]{SYMBOLS['success']}[/] [success]{message}[/]")

    def error(self, message: str, details: Optional[str] = None) -> None:
        self._console.print(f"[error_symbol]{SYMBOLS['error']}[/] [error]{message}[/]")
        if details:
            self._console.print(f"  [secondary]{details}[/]")

    def warning(self, message: str) -> None:
        self._console.print(f"[warning_symbol]{SYMBOLS['warning']}[/]  [warning]{message}[/]")

    def info(self, message: str) -> None:
        self._console.print(f"[info_symbol]{SYMBOLS['info']}[/] [info]{message}[/]")

    def secondary(self, message: str) -> None:
        self._console.print(f"  [secondary]{message}[/]")

    def blank(self) -> None:
        self._console.print()

    def panel(self, content, title: str = "", style: str = "default") -> None:
        panel_style = PANEL_STYLES.get(style, PANEL_STYLES["default"])
        panel = Panel(content, title=f"─ {title} " if title else None, **panel_style)
        self._console.print(panel)


console = SweepConsole()
