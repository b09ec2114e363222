"""SymbolSweep Prompts - Confirmation before destructive actions."""

from typing import List, Optional

from rich.panel import Panel

from .console import console


def confirm(message: str, details: Optional[List[str]] = None, default: bool = False, allow_dont_ask: bool = True) -> tuple:
    """
    Ask a yes/no question.

    Returns:
        (confirmed, dont_ask_again)
    """
    content_lines = [f"[primary]{message}[/]"]
    if details:
        content_lines.append("")
        for detail in details:
            content_lines.append(f"  [muted]•[/] {detail}")
    content_lines.append("")
    options = ["[highlight][Y][/] [primary]Yes[/]" if default else "[muted][y][/] [muted]Yes[/]"]
    options.append("[muted][n][/] [muted]No[/]" if default else "[highlight][N][/] [primary]No[/]")
    if allow_dont_ask:
        options.append("[muted][a][/] [muted]Yes, don't ask again[/]")
    content_lines.append("  " + "  ".join(options))
    console.print(Panel("\n".join(content_lines), title="[highlight]─ ACTION REQUIRED [/]", border_style="highlight", padding=(1, 2)))

    while True:
        response = input("  > ").strip().lower()
        if response in ("y", "yes"):
            return (True, False)
        elif response in ("n", "no"):
            return (False, False)
        elif response == "a" and allow_dont_ask:
            return (True, True)
        elif response == "":
            return (default, False)
        console.warning("Please enter y, n" + (" or a" if allow_dont_ask else ""))
