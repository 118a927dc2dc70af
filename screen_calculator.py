"""
Resistor Calculator - Calculator Screen

Pick band colours or type a resistance; both views stay in sync through a
shared ResistorCalculator.

Layout (480 × 320, content area 480 × 272 above the nav bar):

  TOP         (y   8– 72)  Resistor illustration with 4/5/6 bands + names
  LEFT PANEL  (x  10–220)  Band-count buttons, input box, result card,
                           advisory suggestion
  RIGHT PANEL (x 234–470)  3 × 5 on-screen keypad

Tapping a band cycles it through the colours allowed for that position.

Construction modes:
  ScreenCalculator(surface)     test mode, plain Surface or MagicMock
  ScreenCalculator(ui_manager)  app mode, UIManager instance passed as 'surface'
"""

from __future__ import annotations

import logging
import textwrap

import pygame

import config
from calculator import ResistorCalculator
from resistor_constants import BAND_COUNTS
from ui_manager import BG_COLOR, TEXT_COLOR, ACCENT, draw_resistor

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------------

_RES_X, _RES_Y, _RES_W, _RES_H = 20, 8, 440, 46
_BAND_LABEL_Y = _RES_Y + _RES_H + 4

_LEFT_X  = 10
_LEFT_W  = 210
_LEFT_CX = _LEFT_X + _LEFT_W // 2

_COUNT_Y     = 80
_COUNT_BTN_W = 66
_COUNT_BTN_H = 28
_COUNT_GAP   = 6

_INPUT_BOX_Y = 114
_INPUT_BOX_H = 34

_RESULT_BOX_Y = 154
_RESULT_BOX_H = 58

_SUGGEST_Y     = 218
_SUGGEST_LINES = 3
_SUGGEST_CHARS = 34

_KP_LEFT  = 234
_KP_TOP   = 80
_KP_BTN_W = 74
_KP_BTN_H = 34
_KP_GAP   = 4

# ---------------------------------------------------------------------------
# Colour palette  (mirrors ui_manager.py)
# ---------------------------------------------------------------------------

CARD_BG    = (22,  33,  62)
TEXT_MUTED = (150, 160, 180)
GREEN      = (52,  211, 153)
RED        = (248, 113, 113)

_KP_DIGIT_BG = (30, 45, 75)
_KP_DEL_BG   = (60, 30, 30)

_KEYPAD_LAYOUT = [
    ["1", "2", "3"],
    ["4", "5", "6"],
    ["7", "8", "9"],
    [".", "0", "DEL"],
    ["k", "M", "C"],
]

_KEYPAD_STYLE: dict[str, tuple] = {
    "DEL": (_KP_DEL_BG, RED),
    "C":   (_KP_DEL_BG, RED),
}
_KEYPAD_DEFAULT_STYLE = (_KP_DIGIT_BG, TEXT_COLOR)

# Characters accepted from a hardware keyboard.
_TYPED_CHARS = set("0123456789.kKmMgGrR")


# ---------------------------------------------------------------------------
# Font helpers  (module-level cache, safe to call multiple times)
# ---------------------------------------------------------------------------

_FONT_CACHE: dict[str, pygame.font.Font] | None = None


def _load_font(family: str, size: int, bold: bool = False) -> pygame.font.Font:
    """Load a font by family name with a fallback to the default font."""
    try:
        font = pygame.font.SysFont(family, size, bold=bold)
        if font is None:
            raise RuntimeError("SysFont returned None")
        return font
    except Exception:
        return pygame.font.SysFont(None, size, bold=bold)


def _fonts() -> dict[str, pygame.font.Font]:
    """Return cached font dict, initialising on first call."""
    global _FONT_CACHE
    if _FONT_CACHE is None:
        pygame.font.init()
        _FONT_CACHE = {
            "heading": _load_font("dejavusans", 20, bold=True),
            "body":    _load_font("dejavusans", 16),
            "small":   _load_font("dejavusans", 13),
            "band":    _load_font("dejavusans", 11),
        }
    return _FONT_CACHE


def _draw_text(surface, text, font, color, x, y, anchor="topleft") -> pygame.Rect:
    surf = font.render(text, True, color)
    rect = surf.get_rect()
    setattr(rect, anchor, (x, y))
    surface.blit(surf, rect)
    return rect


def suggestion_status(calc: ResistorCalculator) -> tuple[str, tuple[int, int, int]]:
    """Text and colour for the advisory area: in-flight, failed, or the advice."""
    if calc.suggestion_pending:
        return "Generating suggestion...", ACCENT
    if calc.suggestion_error:
        return f"Suggestion failed: {calc.suggestion_error}", RED
    return calc.suggestion, TEXT_MUTED


# ---------------------------------------------------------------------------
# ScreenCalculator
# ---------------------------------------------------------------------------

class ScreenCalculator:
    """Colour-band ↔ resistance calculator screen.

    Args:
        surface:    pygame.Surface to render onto, OR a UIManager instance
                    (detected via ``hasattr(surface, '_surface')``).
        calculator: Shared ResistorCalculator; a fresh one is made if omitted.
    """

    def __init__(self, surface, calculator: ResistorCalculator | None = None) -> None:
        if hasattr(surface, "_surface"):
            self._ui      = surface
            self._surface = surface._surface
        else:
            self._ui      = None
            self._surface = surface

        self.calculator = calculator if calculator is not None else ResistorCalculator()
        self.input_buffer: str = self.calculator.resistance_input

        # Hit-rects rebuilt on every draw.
        self.band_rects: list[pygame.Rect] = []
        self._count_rects: list[tuple[int, pygame.Rect]] = []
        self._keypad_rects: list[tuple[str, pygame.Rect]] = []

        self._pressed_key: str | None = None

        if not pygame.font.get_init():
            pygame.font.init()

    # ------------------------------------------------------------------
    # Screen interface: update / draw / event handling
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        """No-op: band highlighting is driven by the calculator's clock."""
        pass

    def draw(self, surface: pygame.Surface | None = None) -> None:
        target = surface if surface is not None else self._surface
        target.fill(BG_COLOR)

        try:
            fnt = _fonts()
            self._draw_resistor(target, fnt)
            self._draw_left_panel(target, fnt)
            self._draw_keypad(target, fnt)
        except TypeError:
            # pygame.draw.* rejects MagicMock surfaces in tests; the fill()
            # above has already drawn something.
            pass

    def handle_event(self, event) -> None:
        """Process keyboard input.

        K_BACKSPACE drops the last character; digits, '.', and the SI
        letters k/M/G/R are appended.  Every change is pushed to the
        calculator immediately.
        """
        if event.type != pygame.KEYDOWN:
            return

        if event.key == pygame.K_BACKSPACE:
            self._set_buffer(self.input_buffer[:-1])
            return

        ch = event.unicode
        if ch and ch in _TYPED_CHARS:
            self._append(ch)

    def handle_touch(self, x: int, y: int) -> None:
        """Process an on-screen tap at pixel coordinates (*x*, *y*)."""
        for index, rect in enumerate(self.band_rects):
            # Bands are thin; accept taps a few pixels either side.
            if rect.inflate(8, 0).collidepoint(x, y):
                entry = self.calculator.cycle_band(index)
                log.debug("Band %d → %s", index, entry.name)
                self.input_buffer = self.calculator.resistance_input
                return

        for count, rect in self._count_rects:
            if rect.collidepoint(x, y):
                self.set_band_count(count)
                return

        for label, rect in self._keypad_rects:
            if rect.collidepoint(x, y):
                self._pressed_key = label
                self._handle_keypad_label(label)
                return
        self._pressed_key = None

    def set_band_count(self, count: int) -> None:
        self.calculator.set_band_count(count)
        self.input_buffer = self.calculator.resistance_input

    # ------------------------------------------------------------------
    # Private: input handling
    # ------------------------------------------------------------------

    def _handle_keypad_label(self, label: str) -> None:
        if label == "DEL":
            self._set_buffer(self.input_buffer[:-1])
        elif label == "C":
            self._set_buffer("")
        else:
            self._append(label)

    def _append(self, ch: str) -> None:
        if len(self.input_buffer) >= config.INPUT_MAX_CHARS:
            return
        if ch == "." and "." in self.input_buffer:
            return
        self._set_buffer(self.input_buffer + ch)

    def _set_buffer(self, text: str) -> None:
        self.input_buffer = text
        self.calculator.set_resistance_input(text)

    # ------------------------------------------------------------------
    # Private: drawing
    # ------------------------------------------------------------------

    def _draw_resistor(self, surface, fnt) -> None:
        calc = self.calculator
        self.band_rects = draw_resistor(
            surface, _RES_X, _RES_Y, _RES_W, _RES_H,
            calc.display_colors(),
            highlight=calc.highlighted_index(),
        )
        for rect, band in zip(self.band_rects, calc.bands):
            _draw_text(surface, band.name, fnt["band"], TEXT_MUTED,
                       rect.centerx, _BAND_LABEL_Y, anchor="midtop")

    def _draw_left_panel(self, surface, fnt) -> None:
        calc = self.calculator

        # ---- Band-count selector ----------------------------------------
        self._count_rects = []
        for i, count in enumerate(BAND_COUNTS):
            rect = pygame.Rect(_LEFT_X + i * (_COUNT_BTN_W + _COUNT_GAP),
                               _COUNT_Y, _COUNT_BTN_W, _COUNT_BTN_H)
            self._count_rects.append((count, rect))
            active = count == calc.band_count
            pygame.draw.rect(surface, ACCENT if active else CARD_BG, rect, border_radius=6)
            _draw_text(surface, f"{count} bands", fnt["small"],
                       BG_COLOR if active else TEXT_COLOR,
                       rect.centerx, rect.centery, anchor="center")

        # ---- Input box --------------------------------------------------
        input_box = pygame.Rect(_LEFT_X, _INPUT_BOX_Y, _LEFT_W, _INPUT_BOX_H)
        pygame.draw.rect(surface, CARD_BG, input_box, border_radius=8)
        pygame.draw.line(surface, ACCENT,
                         (_LEFT_X + 4, _INPUT_BOX_Y + 1),
                         (_LEFT_X + _LEFT_W - 5, _INPUT_BOX_Y + 1), 2)
        if self.input_buffer:
            _draw_text(surface, self.input_buffer + " Ω", fnt["heading"], TEXT_COLOR,
                       _LEFT_X + _LEFT_W - 8, input_box.centery, anchor="midright")
        else:
            _draw_text(surface, "e.g. 4.7k", fnt["body"], TEXT_MUTED,
                       _LEFT_CX, input_box.centery, anchor="center")

        # ---- Result card ------------------------------------------------
        result_box = pygame.Rect(_LEFT_X, _RESULT_BOX_Y, _LEFT_W, _RESULT_BOX_H)
        pygame.draw.rect(surface, CARD_BG, result_box, border_radius=8)

        result = calc.result
        if result is not None and result.is_valid:
            _draw_text(surface, result.resistance_string, fnt["heading"], GREEN,
                       _LEFT_X + 8, _RESULT_BOX_Y + 4)
            details = []
            if result.tolerance is not None:
                details.append(f"±{result.tolerance:g}%")
            if result.tcr is not None:
                details.append(f"{result.tcr:g} ppm/°C")
            _draw_text(surface, "  ".join(details), fnt["small"], TEXT_MUTED,
                       _LEFT_X + 8, _RESULT_BOX_Y + 34)
        else:
            text = result.resistance_string if result is not None else "—"
            _draw_text(surface, text, fnt["heading"], RED,
                       _LEFT_CX, result_box.centery, anchor="center")

        # ---- Advisory suggestion ----------------------------------------
        text, color = suggestion_status(calc)
        lines = textwrap.wrap(text, _SUGGEST_CHARS)[:_SUGGEST_LINES]
        for i, line in enumerate(lines):
            _draw_text(surface, line, fnt["band"], color,
                       _LEFT_X, _SUGGEST_Y + i * 16)

    def _draw_keypad(self, surface, fnt) -> None:
        self._keypad_rects = []
        for row_idx, row in enumerate(_KEYPAD_LAYOUT):
            for col_idx, label in enumerate(row):
                x = _KP_LEFT + col_idx * (_KP_BTN_W + _KP_GAP)
                y = _KP_TOP  + row_idx * (_KP_BTN_H + _KP_GAP)
                rect = pygame.Rect(x, y, _KP_BTN_W, _KP_BTN_H)
                self._keypad_rects.append((label, rect))

                bg_col, fg_col = _KEYPAD_STYLE.get(label, _KEYPAD_DEFAULT_STYLE)
                if self._pressed_key == label:
                    bg_col = tuple(max(0, int(c * 0.65)) for c in bg_col)

                pygame.draw.rect(surface, bg_col, rect, border_radius=6)
                _draw_text(surface, label, fnt["body"], fg_col,
                           rect.centerx, rect.centery, anchor="center")

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------

    def on_enter(self) -> None:
        self.input_buffer = self.calculator.resistance_input

    def on_exit(self) -> None:
        self._pressed_key = None
