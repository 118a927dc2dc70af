"""
Resistor Calculator - Calculator Session State

Holds what the user is currently looking at: the band count, one colour per
band, the typed resistance, the computed result and the latest advisory
suggestion.  The pygame screens only read from and write to this object;
all arithmetic is delegated to color_code.

Two edit paths keep each other in sync:

  bands → value   set_band_color() / cycle_band() re-encode the bands and
                  refresh ``resistance_input`` from the computed value.
  value → bands   set_resistance_input() decodes the typed value into digit
                  and multiplier bands, keeping the chosen tolerance / TCR.
"""

from __future__ import annotations

import logging
import math
import time
from decimal import Decimal, DecimalException
from typing import Callable

import config
from advisory import SuggestionDispatcher
from color_code import (
    CalculationResult,
    calculate_resistor_values,
    get_colors_from_value,
)
from resistor_constants import (
    NONE,
    RESISTOR_COLORS,
    BandRole,
    ColorEntry,
    band_roles,
    colors_for_role,
    find_color,
)

log = logging.getLogger(__name__)

_C = RESISTOR_COLORS

# Band colours shown when a band count is first selected.
DEFAULT_BANDS: dict[int, tuple[ColorEntry, ...]] = {
    4: (_C["Brown"], _C["Black"], _C["Red"], _C["Gold"]),
    5: (_C["Brown"], _C["Black"], _C["Black"], _C["Red"], _C["Brown"]),
    6: (_C["Brown"], _C["Black"], _C["Black"], _C["Red"], _C["Brown"], _C["Brown"]),
}

# SI letters accepted in typed values, as powers of ten.  "R" marks the
# decimal point in the usual "4R7" notation.
_SUFFIX_EXPONENTS = {"r": 0, "k": 3, "m": 6, "g": 9}


def parse_resistance(text: str) -> float | None:
    """Parse a typed resistance such as ``'4700'``, ``'4.7k'``, ``'4k7'`` or ``'1M'``.

    Returns ``None`` for empty or unparseable text.  The result may be
    negative or NaN; callers decide what to do with those.
    """
    s = text.strip().replace("Ω", "").replace(" ", "").lower()
    if s.endswith("ohms"):
        s = s[:-4]
    elif s.endswith("ohm"):
        s = s[:-3]
    if not s:
        return None

    exponent = 0
    for letter, exp in _SUFFIX_EXPONENTS.items():
        if letter in s:
            head, _, tail = s.partition(letter)
            if tail:
                if "." in head or not tail.isdigit():
                    return None
                s = f"{head or '0'}.{tail}"
            else:
                s = head
            exponent = exp
            break

    try:
        return float(Decimal(s).scaleb(exponent))
    except (DecimalException, ValueError):
        return None


def _input_text(resistance: float) -> str:
    """Render a computed resistance for the input field: 1000.0 → '1000'."""
    if resistance.is_integer():
        return str(int(resistance))
    return repr(resistance)


class ResistorCalculator:
    """Live resistor calculator state.

    Args:
        band_count: Initial band count (4, 5 or 6).
        advisor:    Optional advisor (see advisory.py).  When given, every
                    positive typed value triggers a background suggestion.
        clock:      Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        band_count: int = config.DEFAULT_BAND_COUNT,
        advisor=None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._dispatcher = (
            SuggestionDispatcher(advisor, self._set_suggestion,
                                 on_error=self._set_suggestion_error)
            if advisor is not None else None
        )

        self.band_count: int = band_count
        self.bands: list[ColorEntry] = []
        self.resistance_input: str = ""
        self.result: CalculationResult | None = None
        self.suggestion: str = ""
        self.suggestion_pending: bool = False
        self.suggestion_error: str = ""

        self._changed_index: int | None = None
        self._changed_at: float = 0.0

        self.set_band_count(band_count)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def roles(self) -> tuple[BandRole, ...]:
        return band_roles(self.band_count)

    def options(self, index: int) -> tuple[ColorEntry, ...]:
        """Colours selectable for band *index*."""
        return colors_for_role(self._role_at(index))

    def display_colors(self) -> list[tuple[int, int, int] | None]:
        """Display tokens for the renderer, one per band."""
        return [band.rgb for band in self.bands]

    def highlighted_index(self, now: float | None = None) -> int | None:
        """Index of the band changed within the last HIGHLIGHT_SECONDS, else None."""
        if self._changed_index is None:
            return None
        now = self._clock() if now is None else now
        if now - self._changed_at > config.HIGHLIGHT_SECONDS:
            return None
        return self._changed_index

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_band_count(self, band_count: int) -> None:
        """Switch to *band_count* bands and reset them to the defaults.

        Raises:
            ValueError: If *band_count* is not 4, 5 or 6.
        """
        band_roles(band_count)
        self.band_count = band_count
        self.bands = list(DEFAULT_BANDS[band_count])
        self._changed_index = None
        self._clear_suggestion()
        self._recompute(refresh_input=True)
        log.debug("Band count set to %d", band_count)

    def set_band_color(self, index: int, color: str | ColorEntry) -> None:
        """Set band *index* to *color* (a ColorEntry or a colour name).

        Raises:
            IndexError: If *index* is not a band position.
            KeyError:   If *color* is an unknown colour name.
            ValueError: If the colour cannot be used in that band.
        """
        role = self._role_at(index)
        entry = find_color(color) if isinstance(color, str) else color
        if entry not in colors_for_role(role):
            raise ValueError(f"{entry.name} cannot be used as {role.value} band")

        self.bands[index] = entry
        self._changed_index = index
        self._changed_at = self._clock()
        self._recompute(refresh_input=True)

    def cycle_band(self, index: int, step: int = 1) -> ColorEntry:
        """Move band *index* *step* places through its colour options; returns the new colour."""
        options = self.options(index)
        current = self.bands[index]
        pos = options.index(current) if current in options else -1
        entry = options[(pos + step) % len(options)]
        self.set_band_color(index, entry)
        return entry

    def set_resistance_input(self, text: str) -> None:
        """Take a typed resistance and update the digit and multiplier bands.

        Empty text clears the suggestion.  Unparseable, negative or
        non-finite values leave the bands untouched, as does a value whose
        digits or multiplier have no colour.
        """
        self.resistance_input = text
        value = parse_resistance(text)

        if value is None:
            if not text.strip():
                self._clear_suggestion()
            return
        if not math.isfinite(value) or value < 0:
            return

        decoded = get_colors_from_value(value, self.band_count)
        merged = list(self.bands)
        for i, role in enumerate(self.roles):
            if role.is_digit or role is BandRole.MULTIPLIER:
                if decoded[i] is NONE:
                    log.debug("No band colours for %r Ω on %d bands", value, self.band_count)
                    break
                merged[i] = decoded[i]
        else:
            self.bands = merged
            self._recompute(refresh_input=False)

        if value > 0:
            self._request_suggestion(value)
        else:
            self._clear_suggestion()

    def wait_for_suggestion(self, timeout: float | None = None) -> None:
        """Block until the newest suggestion request finishes (tests / shutdown)."""
        if self._dispatcher is not None:
            self._dispatcher.wait(timeout)

    def close(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _role_at(self, index: int) -> BandRole:
        roles = self.roles
        if not 0 <= index < len(roles):
            raise IndexError(f"Band index {index} out of range for {self.band_count} bands")
        return roles[index]

    def _recompute(self, refresh_input: bool) -> None:
        self.result = calculate_resistor_values(self.band_count, self.bands)
        if refresh_input:
            if self.result.resistance is not None:
                self.resistance_input = _input_text(self.result.resistance)
            else:
                self.resistance_input = ""

    def _request_suggestion(self, value: float) -> None:
        if self._dispatcher is None:
            return
        self.suggestion = ""
        self.suggestion_error = ""
        self.suggestion_pending = True
        self._dispatcher.request(value)

    def _clear_suggestion(self) -> None:
        self.suggestion = ""
        self.suggestion_error = ""
        self.suggestion_pending = False
        if self._dispatcher is not None:
            self._dispatcher.discard_pending()

    def _set_suggestion(self, text: str) -> None:
        self.suggestion = text
        self.suggestion_error = ""
        self.suggestion_pending = False

    def _set_suggestion_error(self, message: str) -> None:
        self.suggestion = ""
        self.suggestion_error = message
        self.suggestion_pending = False
