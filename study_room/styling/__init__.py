"""Styling module for the Study Room host console."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
