"""Color palette for the host console supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the host console."""

    TEXT_PRIMARY = ThemeColors(light="#1B1B1B", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#5F6368", dark="#AAAAAA")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BACKGROUND_SECONDARY = ThemeColors(light="#F4F6F8", dark="#2D2D2D")

    BORDER_PRIMARY = ThemeColors(light="#D1D5DB", dark="#555555")

    BUTTON_PRIMARY_BG = ThemeColors(light="#2563EB", dark="#4A9EFF")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F4F6F8", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E5E7EB", dark="#505050")

    # Countdown states
    TIMER_RUNNING = ThemeColors(light="#107C10", dark="#6FCF6F")
    TIMER_PAUSED = ThemeColors(light="#B45309", dark="#FFC83D")
    TIMER_COMPLETE = ThemeColors(light="#D13438", dark="#FF6B6B")

    READY = ThemeColors(light="#107C10", dark="#6FCF6F")
    NOT_READY = ThemeColors(light="#5F6368", dark="#AAAAAA")
