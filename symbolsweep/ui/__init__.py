"""SymbolSweep UI - Terminal rendering components."""

from .console import console, SweepConsole
from .theme import COLORS, SYMBOLS, SWEEP_THEME, PANEL_STYLES, TIER_INDICATORS
from .prompts import confirm
from .errors import show_error, show_clean_error
from .panels import (
    analysis_panel,
    format_tooltip,
    format_tray_title,
    items_table,
    outcome_panel,
    settings_table,
    status_panel,
)

__all__ = [
    "console", "SweepConsole", "COLORS", "SYMBOLS", "SWEEP_THEME", "PANEL_STYLES", "TIER_INDICATORS",
    "confirm",
    "show_error", "show_clean_error",
    "analysis_panel", "format_tooltip", "format_tray_title", "items_table", "outcome_panel", "settings_table", "status_panel",
]
