"""SymbolSweep Panels - Status, analysis and clean result rendering."""

from typing import Dict, List, Optional

from rich.table import Table

from symbolsweep.cleaner import CleanOutcome, DeletionItem
from symbolsweep.monitor.scanner import format_count, format_size
from symbolsweep.monitor.status import CacheState, CacheStatus
from symbolsweep.settings import Policy

from .console import console
from .theme import TIER_INDICATORS, TIER_STYLES

TIER_LABELS = {
    CacheState.NORMAL: "Normal",
    CacheState.WARNING: "Warning (5GB+)",
    CacheState.CRITICAL: "Critical (10GB+)",
}


def format_tray_title(status: CacheStatus) -> str:
    return f"{TIER_INDICATORS[status.state]} {status.size_display}"


def format_tooltip(status: CacheStatus) -> str:
    return (
        f"SymbolSweep\n"
        f"{status.size_display} - {format_count(status.file_count)} files\n"
        f"Status: {TIER_LABELS[status.state]}"
    )


def status_panel(status: CacheStatus, details: Optional[Dict[str, str]] = None) -> None:
    style = TIER_STYLES[status.state]
    lines = [
        f"[{style}]{format_tray_title(status)}[/]  [muted]{TIER_LABELS[status.state]}[/]",
        "",
        f"[muted]Path:[/] {status.path}",
        f"[muted]Files:[/] {format_count(status.file_count)}",
    ]
    if not status.exists:
        lines.append("[muted]The cache directory does not exist yet.[/]")
    if details:
        for key, value in details.items():
            lines.append(f"[muted]{key}:[/] {value}")
    console.panel("\n".join(lines), title="CACHE STATUS", style="brand")


def items_table(items: List[DeletionItem]) -> Table:
    table = Table(show_header=True, header_style="brand", box=None, padding=(0, 2))
    table.add_column("Item")
    table.add_column("Type", style="muted")
    table.add_column("Size", justify="right")
    for item in sorted(items, key=lambda i: i.size, reverse=True):
        table.add_row(item.path, "directory" if item.is_directory else "file", item.size_display)
    return table


def analysis_panel(items: List[DeletionItem]) -> None:
    if not items:
        console.info("Nothing to clean.")
        return
    total = sum(item.size for item in items)
    console.print(items_table(items))
    console.blank()
    console.info(f"{len(items)} items, {format_size(total)} total")


def outcome_panel(outcome: CleanOutcome) -> None:
    if outcome.was_dry_run:
        console.info(outcome.message)
        if outcome.items_found:
            console.print(items_table(list(outcome.items_found)))
        return

    if outcome.success and not outcome.partial:
        console.success(outcome.message)
    elif outcome.success:
        console.warning(outcome.message)
    else:
        console.error(outcome.message)

    for name in outcome.failed_items:
        console.secondary(f"not removed: {name}")
    if outcome.requires_password:
        console.secondary("Administrator password was requested to stop the daemon.")


def settings_table(policy: Policy) -> Table:
    table = Table(show_header=True, header_style="brand", box=None, padding=(0, 2))
    table.add_column("Setting")
    table.add_column("Value", justify="right")
    for key, value in policy.to_dict().items():
        display = str(value).lower() if isinstance(value, bool) else str(value)
        table.add_row(key, display)
    return table
