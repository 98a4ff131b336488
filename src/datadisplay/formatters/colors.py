"""Colour resolution for swatches and badges."""

import re

# Tailwind palette, 500 shade
TAILWIND_COLORS: dict[str, str] = {
    "slate": "#64748b",
    "gray": "#6b7280",
    "zinc": "#71717a",
    "neutral": "#737373",
    "stone": "#78716c",
    "red": "#ef4444",
    "orange": "#f97316",
    "amber": "#f59e0b",
    "yellow": "#eab308",
    "lime": "#84cc16",
    "green": "#22c55e",
    "emerald": "#10b981",
    "teal": "#14b8a6",
    "cyan": "#06b6d4",
    "sky": "#0ea5e9",
    "blue": "#3b82f6",
    "indigo": "#6366f1",
    "violet": "#8b5cf6",
    "purple": "#a855f7",
    "fuchsia": "#d946ef",
    "pink": "#ec4899",
    "rose": "#f43f5e",
}

NEUTRAL_GRAY = "#808080"
DEFAULT_BADGE_COLOR = "default"

HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


def resolve_swatch(value: str) -> tuple[str, str]:
    """Return (hex, label) for a hex string or Tailwind colour name.

    Unknown strings degrade to a neutral gray swatch labelled with the input.
    """
    color = (value or "").strip()
    if HEX_COLOR.match(color):
        return color, color
    named = TAILWIND_COLORS.get(color.lower())
    if named:
        return named, color[:1].upper() + color[1:]
    return NEUTRAL_GRAY, color or "Unknown"
