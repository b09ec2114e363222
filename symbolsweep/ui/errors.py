"""SymbolSweep Errors - Structured error display with context and hints."""

from typing import Dict, Optional

from rich.panel import Panel

from symbolsweep.errors import CleanError, PermissionDenied, SafetyViolation

from .console import console
from .theme import SYMBOLS

ERROR_HINTS = {
    SafetyViolation: "No files were touched. Check that the cache path is not a symlink to another location.",
    PermissionDenied: "The administrator prompt was cancelled. Cleaning can still run without stopping the daemon.",
}


def show_error(title: str, message: str, context: Optional[Dict[str, str]] = None, hint: Optional[str] = None) -> None:
    lines = [f"[error]{SYMBOLS['error']} FAILED:[/] [primary]{title}[/]", "", f"  [error]Error:[/] {message}"]
    if context:
        lines.append("")
        for key, value in context.items():
            display_value = value if len(value) < 60 else value[:57] + "..."
            lines.append(f"  [secondary]{key}:[/] {display_value}")
    if hint:
        lines.append("")
        lines.append(f"  [muted]{hint}[/]")
    console.print(Panel("\n".join(lines), border_style="error", padding=(1, 2)))


def show_clean_error(title: str, error: CleanError, context: Optional[Dict[str, str]] = None) -> None:
    hint = next((text for kind, text in ERROR_HINTS.items() if isinstance(error, kind)), None)
    show_error(title, str(error), context=context, hint=hint)
