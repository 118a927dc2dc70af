"""
Resistor Calculator - Shared Colour Table

The fixed registry of band colours used by the encoder, the decoder and the
pygame front end.  Every colour carries the subset of roles it can play on a
resistor body (significant digit, multiplier, tolerance, temperature
coefficient) as an explicit capability set, so "digit 0" is never confused
with "no digit".

Exports:
    BandRole          – the six band positions a colour can occupy
    ColorEntry        – immutable colour record
    RESISTOR_COLORS   – name → ColorEntry, in table order
    NONE              – the "unset band" sentinel
    band_roles        – band count → role sequence
    colors_for_role   – role → ordered tuple of permitted colours
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class BandRole(enum.Enum):
    DIGIT1 = "digit1"
    DIGIT2 = "digit2"
    DIGIT3 = "digit3"
    MULTIPLIER = "multiplier"
    TOLERANCE = "tolerance"
    TCR = "tcr"

    @property
    def is_digit(self) -> bool:
        return self in _DIGIT_ROLES


_DIGIT_ROLES = frozenset({BandRole.DIGIT1, BandRole.DIGIT2, BandRole.DIGIT3})

# Human-readable band labels, indexed by role.
BAND_LABELS: dict[BandRole, str] = {
    BandRole.DIGIT1:     "1st Digit",
    BandRole.DIGIT2:     "2nd Digit",
    BandRole.DIGIT3:     "3rd Digit",
    BandRole.MULTIPLIER: "Multiplier",
    BandRole.TOLERANCE:  "Tolerance",
    BandRole.TCR:        "TCR",
}

_ROLE_SEQUENCES: dict[int, tuple[BandRole, ...]] = {
    4: (BandRole.DIGIT1, BandRole.DIGIT2,
        BandRole.MULTIPLIER, BandRole.TOLERANCE),
    5: (BandRole.DIGIT1, BandRole.DIGIT2, BandRole.DIGIT3,
        BandRole.MULTIPLIER, BandRole.TOLERANCE),
    6: (BandRole.DIGIT1, BandRole.DIGIT2, BandRole.DIGIT3,
        BandRole.MULTIPLIER, BandRole.TOLERANCE, BandRole.TCR),
}

BAND_COUNTS: tuple[int, ...] = tuple(_ROLE_SEQUENCES)


# ---------------------------------------------------------------------------
# ColorEntry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColorEntry:
    """One band colour and the values it encodes in each role it supports.

    ``multiplier_power`` is stored as an integer exponent so that multiplier
    lookups never compare floats; ``multiplier`` is derived from it.
    ``rgb`` is the display token handed to the renderer (``None`` means
    transparent / no band drawn).
    """

    name: str
    rgb: tuple[int, int, int] | None
    digit: int | None = None
    multiplier_power: int | None = None
    tolerance: float | None = None
    tcr: float | None = None
    roles: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        roles = set()
        if self.digit is not None:
            roles |= _DIGIT_ROLES
        if self.multiplier_power is not None:
            roles.add(BandRole.MULTIPLIER)
        if self.tolerance is not None:
            roles.add(BandRole.TOLERANCE)
        if self.tcr is not None:
            roles.add(BandRole.TCR)
        object.__setattr__(self, "roles", frozenset(roles))

    @property
    def multiplier(self) -> float | None:
        if self.multiplier_power is None:
            return None
        return multiplier_value(self.multiplier_power)

    def has_role(self, role: BandRole) -> bool:
        return role in self.roles

    @property
    def is_unset(self) -> bool:
        return self is NONE


def multiplier_value(power: int) -> float:
    """Return ``10 ** power`` without binary drift for negative powers."""
    if power >= 0:
        return float(10 ** power)
    return 1.0 / (10 ** -power)


# ---------------------------------------------------------------------------
# Colour table
# ---------------------------------------------------------------------------

# The placeholder band: no colour drawn, ±20 % when used as a tolerance band.
NONE = ColorEntry("None", None, tolerance=20.0)

_TABLE: tuple[ColorEntry, ...] = (
    NONE,
    ColorEntry("Black",  (0,   0,   0  ), digit=0, multiplier_power=0, tcr=250.0),
    ColorEntry("Brown",  (139, 69,  19 ), digit=1, multiplier_power=1, tolerance=1.0,  tcr=100.0),
    ColorEntry("Red",    (220, 20,  20 ), digit=2, multiplier_power=2, tolerance=2.0,  tcr=50.0),
    ColorEntry("Orange", (255, 140, 0  ), digit=3, multiplier_power=3, tcr=15.0),
    ColorEntry("Yellow", (255, 220, 0  ), digit=4, multiplier_power=4, tcr=25.0),
    ColorEntry("Green",  (0,   160, 0  ), digit=5, multiplier_power=5, tolerance=0.5,  tcr=20.0),
    ColorEntry("Blue",   (0,   80,  200), digit=6, multiplier_power=6, tolerance=0.25, tcr=10.0),
    ColorEntry("Violet", (148, 0,   211), digit=7, multiplier_power=7, tolerance=0.1,  tcr=5.0),
    ColorEntry("Grey",   (160, 160, 160), digit=8, multiplier_power=8, tolerance=0.05, tcr=1.0),
    ColorEntry("White",  (255, 255, 255), digit=9, multiplier_power=9),
    ColorEntry("Gold",   (212, 175, 55 ), multiplier_power=-1, tolerance=5.0),
    ColorEntry("Silver", (192, 192, 192), multiplier_power=-2, tolerance=10.0),
)

# name -> entry, preserving table order.
RESISTOR_COLORS: dict[str, ColorEntry] = {c.name: c for c in _TABLE}

_ALIASES = {"gray": "Grey"}
_BY_LOWER = {c.name.lower(): c for c in _TABLE}

_DIGIT_INDEX: dict[int, ColorEntry] = {
    c.digit: c for c in _TABLE if c.digit is not None
}
_POWER_INDEX: dict[int, ColorEntry] = {
    c.multiplier_power: c for c in _TABLE if c.multiplier_power is not None
}

MIN_MULTIPLIER_POWER = min(_POWER_INDEX)
MAX_MULTIPLIER_POWER = max(_POWER_INDEX)

# E24 series standard resistor values (1-decade, multiply by power of 10)
E24_VALUES = (
    1.0, 1.1, 1.2, 1.3, 1.5, 1.6, 1.8, 2.0, 2.2, 2.4, 2.7, 3.0,
    3.3, 3.6, 3.9, 4.3, 4.7, 5.1, 5.6, 6.2, 6.8, 7.5, 8.2, 9.1,
)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def band_roles(band_count: int) -> tuple[BandRole, ...]:
    """Return the role of each band position for a 4-, 5- or 6-band resistor.

    Raises:
        ValueError: If *band_count* is not 4, 5 or 6.
    """
    try:
        return _ROLE_SEQUENCES[band_count]
    except KeyError:
        raise ValueError(f"Unsupported band count: {band_count!r}") from None


def colors_for_role(role: BandRole) -> tuple[ColorEntry, ...]:
    """Return the colours selectable for *role*, in table order.

    The first significant digit never uses Black.
    """
    colors = tuple(c for c in _TABLE if c.has_role(role))
    if role is BandRole.DIGIT1:
        colors = tuple(c for c in colors if c.digit != 0)
    return colors


def find_color(name: str) -> ColorEntry:
    """Look up a colour by name, case-insensitively ("Gray" is accepted).

    Raises:
        KeyError: If no colour has that name.
    """
    key = name.strip().lower()
    key = _ALIASES.get(key, key).lower()
    try:
        return _BY_LOWER[key]
    except KeyError:
        raise KeyError(f"Unknown colour: {name!r}") from None


def digit_color(digit: int) -> ColorEntry | None:
    """Return the colour encoding *digit*, or ``None`` if there is none."""
    return _DIGIT_INDEX.get(digit)


def multiplier_color(power: int) -> ColorEntry | None:
    """Return the colour whose multiplier is ``10 ** power``, or ``None``."""
    return _POWER_INDEX.get(power)
