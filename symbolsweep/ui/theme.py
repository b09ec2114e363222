"""
SymbolSweep UI Theme - Color constants and styling definitions.
"""

from rich.style import Style
from rich.theme import Theme

from symbolsweep.monitor.status import CacheState

COLORS = {
    "success": "#22c55e",
    "error": "#ef4444",
    "warning": "#f97316",
    "info": "#3b82f6",
    "secondary": "#6b7280",
    "primary": "#ffffff",
    "brand": "#8b5cf6",
    "panel_border": "#4b5563",
    "highlight": "#fbbf24",
    "muted": "#9ca3af",
}

SYMBOLS = {
    "success": "✓",
    "error": "✗",
    "warning": "⚠",
    "info": "●",
}

# Tray-style indicator per tier
TIER_INDICATORS = {
    CacheState.NORMAL: "🟢",
    CacheState.WARNING: "🟠",
    CacheState.CRITICAL: "🔴",
}

TIER_STYLES = {
    CacheState.NORMAL: "success",
    CacheState.WARNING: "warning",
    CacheState.CRITICAL: "error",
}

SWEEP_THEME = Theme({
    "success": Style(color=COLORS["success"], bold=True),
    "error": Style(color=COLORS["error"], bold=True),
    "warning": Style(color=COLORS["warning"], bold=True),
    "info": Style(color=COLORS["info"]),
    "secondary": Style(color=COLORS["secondary"], dim=True),
    "primary": Style(color=COLORS["primary"]),
    "brand": Style(color=COLORS["brand"], bold=True),
    "highlight": Style(color=COLORS["highlight"], bold=True),
    "muted": Style(color=COLORS["muted"]),
    "panel_border": Style(color=COLORS["panel_border"]),
    "success_symbol": Style(color=COLORS["success"]),
    "error_symbol": Style(color=COLORS["error"]),
    "warning_symbol": Style(color=COLORS["warning"]),
    "info_symbol": Style(color=COLORS["info"]),
})

PANEL_STYLES = {
    "default": {"border_style": "panel_border", "title_align": "left", "padding": (1, 2)},
    "brand": {"border_style": "brand", "title_align": "left", "padding": (1, 2)},
}
