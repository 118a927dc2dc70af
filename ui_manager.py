from __future__ import annotations

"""
Resistor Calculator - Pygame Display Manager

Manages pygame initialisation, screen transitions, the nav bar, and the main
render loop for a 480×320 touchscreen.

The UIManager can be constructed in two modes:

  1. Hardware mode (no surface argument):
       mgr = UIManager()
     pygame.init() is called, a 480×320 display is created, and the clock
     and fonts are set up.

  2. Headless / test mode (surface provided):
       mgr = UIManager(surface)
     pygame is NOT re-initialised.  The supplied surface is used directly.
     Clock and display-flip calls are skipped so the class works with a
     MagicMock surface under SDL dummy mode.
"""

import logging

import pygame

import config

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------------

SCREEN_W  = config.SCREEN_W
SCREEN_H  = config.SCREEN_H
NAV_H     = 48                  # nav bar height, pinned to bottom
CONTENT_H = SCREEN_H - NAV_H   # 272 px available for screen content

# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------

BG_COLOR     = (15,  23,  42)   # dark blue-gray, main background
TEXT_COLOR   = (226, 232, 240)  # near-white, primary text
ACCENT       = (56,  189, 248)  # cyan, active nav
YELLOW       = (251, 191, 36)   # band highlight
NAV_BG       = (8,   15,  30)   # nav bar background, darker than BG_COLOR
NAV_BORDER   = (30,  41,  59)   # 1-px top border on the nav bar
RESISTOR_TAN = (210, 180, 140)  # resistor body colour

# ---------------------------------------------------------------------------
# Nav bar configuration
# ---------------------------------------------------------------------------

_NAV_LABELS = ["Calculator", "Colour Chart"]
_NAV_KEYS   = ["calculator", "chart"]
_NAV_BTN_W  = SCREEN_W // len(_NAV_KEYS)


def band_centres(count: int) -> list[float]:
    """Band centre positions as fractions of the body width.

    Bands are evenly spaced, except the last one which sits apart from the
    rest, the way the tolerance band does on a real resistor.
    """
    if count <= 1:
        return [0.5] * count
    inner = [0.15 + i * (0.45 / (count - 2)) for i in range(count - 1)]
    return inner + [0.85]


def draw_resistor(
    surface: pygame.Surface,
    x: int,
    y: int,
    w: int,
    h: int,
    colors: list,
    highlight: int | None = None,
) -> list[pygame.Rect]:
    """Draw a resistor with one stripe per entry in *colors*.

    The body is a tan rounded rectangle across the middle 70 % of *w*, with
    wire leads either side.  ``None`` entries in *colors* are drawn as an
    empty slot outline.  The band at *highlight* gets a yellow frame.

    Args:
        surface:   Target surface.
        x, y:      Top-left of the bounding box (includes leads).
        w, h:      Size of the bounding box.
        colors:    RGB tuples (or None) from ResistorCalculator.display_colors().
        highlight: Index of the band to frame, or None.

    Returns:
        The hit-rect of each band, in order.
    """
    lead_w = int(w * 0.15)
    body_x = x + lead_w
    body_w = int(w * 0.70)
    cy     = y + h // 2

    pygame.draw.line(surface, TEXT_COLOR, (x, cy), (body_x, cy), 2)
    pygame.draw.line(surface, TEXT_COLOR, (body_x + body_w, cy), (x + w, cy), 2)

    body_rect = pygame.Rect(body_x, y, body_w, h)
    radius = max(2, h // 3)
    pygame.draw.rect(surface, RESISTOR_TAN, body_rect, border_radius=radius)

    band_w = max(4, int(body_w * 0.07))
    rects: list[pygame.Rect] = []
    for i, (pct, rgb) in enumerate(zip(band_centres(len(colors)), colors)):
        bx = int(body_x + pct * body_w) - band_w // 2
        bx = max(body_x, min(bx, body_x + body_w - band_w))
        band_rect = pygame.Rect(bx, y, band_w, h).clip(body_rect)
        rects.append(band_rect)
        if band_rect.width <= 0 or band_rect.height <= 0:
            continue
        if rgb is None:
            pygame.draw.rect(surface, BG_COLOR, band_rect, width=1)
        else:
            pygame.draw.rect(surface, rgb, band_rect)
        if i == highlight:
            pygame.draw.rect(surface, YELLOW, band_rect.inflate(4, 6), width=2)

    # Re-draw the body outline to crisp up the rounded corners over bands
    pygame.draw.rect(surface, RESISTOR_TAN, body_rect, width=2, border_radius=radius)
    return rects


# ---------------------------------------------------------------------------
# UIManager
# ---------------------------------------------------------------------------

class UIManager:
    """Manages registered screens and dispatches events, updates, and draws.

    Screens are registered by name and activated via switch_to().  Only the
    active screen receives update() and draw() calls.  handle_event() is
    also forwarded exclusively to the active screen.

    Args:
        surface: Optional pygame.Surface for headless / test mode.
    """

    def __init__(self, surface=None) -> None:
        self._test_mode = surface is not None

        if self._test_mode:
            # Headless path: use the supplied mock/real surface as-is.
            pygame.font.init()
            self._surface = surface
            self.screen   = surface
            self.clock    = None
        else:
            pygame.init()
            self.screen = pygame.display.set_mode((SCREEN_W, SCREEN_H))
            pygame.display.set_caption("Resistor Calculator")
            self._surface = self.screen
            self.clock = pygame.time.Clock()
        self._init_fonts_safe()

        self._screens: dict[str, object] = {}
        self._active: str | None = None

        # Nav hit-rects are built in draw_nav_bar(); empty until first draw.
        self._nav_rects: list[pygame.Rect] = []

        self.current_screen: str | None = None

    def _init_fonts_safe(self) -> None:
        """Load DejaVu Sans at each needed size, falling back to the default font."""
        def _load(family: str, size: int, bold: bool = False) -> pygame.font.Font:
            try:
                font = pygame.font.SysFont(family, size, bold=bold)
                # SysFont can return None in dummy SDL environments
                if font is None:
                    raise RuntimeError("SysFont returned None")
                return font
            except Exception:
                return pygame.font.SysFont(None, size, bold=bold)

        self.heading_font = _load("dejavusans", 22, bold=True)
        self.body_font    = _load("dejavusans", 16)

    # ------------------------------------------------------------------
    # Screen registry
    # ------------------------------------------------------------------

    def register_screen(self, name: str, screen_obj) -> None:
        """Add a screen to the registry under the given name.

        Args:
            name:       Unique string key (e.g. ``'calculator'``).
            screen_obj: Object implementing update, draw, handle_event and
                        optionally handle_touch / on_enter / on_exit.
        """
        self._screens[name] = screen_obj

    def switch_to(self, name: str) -> None:
        """Activate the named screen.

        Raises:
            KeyError: If *name* has not been registered.
        """
        if name not in self._screens:
            raise KeyError(f"Unknown screen: {name!r}")
        if self._active is not None and self._active != name:
            old = self._screens[self._active]
            if hasattr(old, "on_exit"):
                old.on_exit()
        self._active = name
        self.current_screen = name
        new = self._screens[name]
        if hasattr(new, "on_enter"):
            new.on_enter()
        log.debug("Switched to screen %r", name)

    # ------------------------------------------------------------------
    # Main-loop hooks
    # ------------------------------------------------------------------

    def handle_event(self, event) -> None:
        """Forward a single pygame event to the active screen (if any)."""
        if self._active is not None:
            self._screens[self._active].handle_event(event)

    def handle_events(self) -> bool:
        """Drain the pygame event queue, handle nav taps, and dispatch to the active screen.

        Returns:
            ``False`` if the application should quit (QUIT or Escape pressed),
            ``True`` otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._nav_hit(event.pos) is None and self._active is not None:
                    screen = self._screens[self._active]
                    if hasattr(screen, "handle_touch"):
                        screen.handle_touch(event.pos[0], event.pos[1])
                continue
            self.handle_event(event)
        return True

    def update(self, dt: float) -> None:
        if self._active is not None:
            self._screens[self._active].update(dt)

    def draw(self) -> None:
        """Render the active screen onto the surface, then overlay the nav bar."""
        if self._active is not None:
            self._screens[self._active].draw(self._surface)

        if not self._test_mode:
            self.draw_nav_bar()
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(config.FPS)

    # ------------------------------------------------------------------
    # Nav bar
    # ------------------------------------------------------------------

    def draw_nav_bar(self) -> None:
        """Draw the bottom nav bar and rebuild ``self._nav_rects``."""
        nav_y = SCREEN_H - NAV_H
        pygame.draw.line(self._surface, NAV_BORDER, (0, nav_y), (SCREEN_W - 1, nav_y), 1)

        self._nav_rects = []
        for i, (label, key) in enumerate(zip(_NAV_LABELS, _NAV_KEYS)):
            rect = pygame.Rect(i * _NAV_BTN_W, nav_y + 1, _NAV_BTN_W, NAV_H - 1)
            self._nav_rects.append(rect)

            is_active = key == self._active
            pygame.draw.rect(self._surface, ACCENT if is_active else NAV_BG, rect)
            self.draw_text(label, self.body_font,
                           BG_COLOR if is_active else TEXT_COLOR,
                           rect.centerx, rect.centery, anchor="center")

    def _nav_hit(self, pos) -> str | None:
        """Return the nav key under *pos* (switching to it), else ``None``."""
        for rect, key in zip(self._nav_rects, _NAV_KEYS):
            if rect.collidepoint(pos):
                if key in self._screens:
                    self.switch_to(key)
                return key
        return None

    def draw_text(
        self,
        text: str,
        font: pygame.font.Font,
        color: tuple,
        x: int,
        y: int,
        anchor: str = "topleft",
    ) -> pygame.Rect:
        """Render *text* onto ``self.screen`` at the given anchor position."""
        surf = font.render(text, True, color)
        rect = surf.get_rect()
        setattr(rect, anchor, (x, y))
        self.screen.blit(surf, rect)
        return rect
