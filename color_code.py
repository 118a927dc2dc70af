from __future__ import annotations

"""
Resistor Calculator - Colour Band Encoding and Decoding

Converts an ordered list of band colours into resistance / tolerance / TCR,
and a numeric resistance back into the best-fitting digit and multiplier
bands.  Nothing here raises on bad user input: incomplete band lists, negative
or non-finite values and table misses come back as sentinel data so the
functions can be called on every keystroke.

Exports:
    calculate_resistor_values – bands → CalculationResult
    get_colors_from_value     – resistance → list of ColorEntry
    normalize_multiplier      – resistance → (residual, power of ten)
    significant_digits        – residual → fixed-width digit string
    format_resistance         – ohms → "4.7 kΩ"
    describe_bands            – bands → "Yellow-Violet-Red-Gold (4.7 kΩ ±5%)"
    snap_to_e24               – nearest E24 value by log-ratio distance
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from resistor_constants import (
    E24_VALUES,
    MAX_MULTIPLIER_POWER,
    MIN_MULTIPLIER_POWER,
    NONE,
    BandRole,
    ColorEntry,
    band_roles,
    digit_color,
    multiplier_color,
    multiplier_value,
)

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

# resistance_string for an incomplete band assignment.
INVALID_BANDS = "Invalid bands"

# format_resistance() output for a missing or non-finite value.
PLACEHOLDER = "-"

_UNITS = ("Ω", "kΩ", "MΩ", "GΩ")


@dataclass(frozen=True)
class CalculationResult:
    """Outcome of decoding a band assignment.

    ``resistance`` is ``None`` when a required band is unset; in that case
    ``resistance_string`` is :data:`INVALID_BANDS`.
    """

    resistance: float | None
    tolerance: float | None
    tcr: float | None
    resistance_string: str

    @property
    def is_valid(self) -> bool:
        return self.resistance is not None


def digit_band_count(band_count: int) -> int:
    """Number of significant-digit bands: 2 on a 4-band resistor, else 3."""
    band_roles(band_count)
    return 2 if band_count == 4 else 3


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

def format_resistance(value: float | None) -> str:
    """Format *value* ohms with an SI suffix, e.g. ``4700`` → ``'4.7 kΩ'``.

    The scaled value is rounded to three significant digits.  Values below
    1 Ω are shown as-is in Ω; anything beyond the GΩ range stays in GΩ.
    ``None``, NaN and infinities give :data:`PLACEHOLDER`.
    """
    if value is None or math.isnan(value) or math.isinf(value):
        return PLACEHOLDER
    if value == 0:
        return f"0 {_UNITS[0]}"

    unit = 0
    scaled = float(value)
    while scaled >= 1000 and unit < len(_UNITS) - 1:
        scaled /= 1000
        unit += 1

    rounded = float(f"{scaled:.3g}")
    if rounded.is_integer():
        text = str(int(rounded))
    else:
        text = format(Decimal(repr(rounded)), "f")
    return f"{text} {_UNITS[unit]}"


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------

def calculate_resistor_values(
    band_count: int,
    bands: Sequence[ColorEntry | None],
) -> CalculationResult:
    """Compute resistance, tolerance and TCR from *bands*.

    Args:
        band_count: 4, 5 or 6.
        bands:      One colour per band position, in order.  ``None`` (or a
                    missing trailing entry) means the band is unset.

    Returns:
        A :class:`CalculationResult`.  When any digit band or the multiplier
        band lacks the required value the result carries no resistance and
        ``resistance_string == INVALID_BANDS``.

    Raises:
        ValueError: If *band_count* is not 4, 5 or 6.
    """
    roles = band_roles(band_count)
    padded = list(bands[:band_count]) + [None] * (band_count - len(bands))

    mantissa = 0
    power = None
    tolerance = None
    tcr = None

    for role, band in zip(roles, padded):
        has_role = band is not None and band.has_role(role)
        if role.is_digit:
            if not has_role:
                return _invalid()
            mantissa = mantissa * 10 + band.digit
        elif role is BandRole.MULTIPLIER:
            if not has_role:
                return _invalid()
            power = band.multiplier_power
        elif role is BandRole.TOLERANCE:
            tolerance = band.tolerance if has_role else None
        elif role is BandRole.TCR:
            tcr = band.tcr if has_role else None

    if power >= 0:
        resistance = float(mantissa * 10 ** power)
    else:
        resistance = mantissa / 10 ** -power

    return CalculationResult(
        resistance=resistance,
        tolerance=tolerance,
        tcr=tcr,
        resistance_string=format_resistance(resistance),
    )


def _invalid() -> CalculationResult:
    return CalculationResult(None, None, None, INVALID_BANDS)


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------

def normalize_multiplier(resistance: float, digit_count: int) -> tuple[float, int]:
    """Split *resistance* into ``(residual, power)`` with ``residual * 10**power ≈ resistance``.

    The residual is brought into the ``digit_count``-digit window in two
    stages when it is too large:

    1. Exact trailing zeros are stripped first, so round values use as few
       significant digits as possible (1 MΩ on 4 bands → 10 × 10^5).
    2. Any remaining excess is shifted into the multiplier until the largest
       tabulated power (10^9, White) is reached.

    A residual below ``10 ** (digit_count - 1)`` is scaled up instead, down to
    the smallest tabulated power (10^-2, Silver).  The residual may still
    fall outside the window once a bound is hit.
    """
    upper = 10 ** digit_count
    lower = 10 ** (digit_count - 1)
    residual = float(resistance)
    power = 0

    if residual >= upper:
        while residual >= upper and residual % 10 == 0:
            residual /= 10
            power += 1
        while residual >= upper and power < MAX_MULTIPLIER_POWER:
            residual /= 10
            power += 1
    else:
        while residual < lower and power > MIN_MULTIPLIER_POWER:
            residual *= 10
            power -= 1

    return residual, power


def significant_digits(residual: float, digit_count: int) -> str:
    """Round *residual* half-up and render exactly *digit_count* digits.

    Longer results keep their leftmost digits; shorter ones are zero-padded
    on the left.
    """
    text = str(int(math.floor(residual + 0.5)))
    if len(text) > digit_count:
        return text[:digit_count]
    return text.rjust(digit_count, "0")


def get_colors_from_value(resistance: float, band_count: int) -> list[ColorEntry]:
    """Return the digit and multiplier bands that best represent *resistance*.

    Tolerance and TCR positions are always :data:`NONE`; callers merge in
    their own choices.  Negative or non-finite input gives :data:`NONE` in
    every position, and a digit or multiplier with no matching colour gives
    :data:`NONE` in that position only.

    Raises:
        ValueError: If *band_count* is not 4, 5 or 6.
    """
    roles = band_roles(band_count)
    bands: list[ColorEntry] = [NONE] * band_count

    if resistance is None or not math.isfinite(resistance) or resistance < 0:
        log.debug("Cannot decode resistance %r", resistance)
        return bands

    digit_count = digit_band_count(band_count)
    multiplier_idx = roles.index(BandRole.MULTIPLIER)

    if resistance == 0:
        for i in range(digit_count):
            bands[i] = digit_color(0)
        bands[multiplier_idx] = multiplier_color(0)
        return bands

    residual, power = normalize_multiplier(resistance, digit_count)
    digits = significant_digits(residual, digit_count)

    for i, ch in enumerate(digits):
        bands[i] = digit_color(int(ch)) or NONE

    multiplier = multiplier_color(power)
    if multiplier is None:
        log.debug("No multiplier colour for 10^%d (resistance %r)", power, resistance)
        multiplier = NONE
    bands[multiplier_idx] = multiplier

    return bands


# ---------------------------------------------------------------------------
# E24 helpers
# ---------------------------------------------------------------------------

def snap_to_e24(ohms: float) -> float:
    """Return the nearest E24 standard resistance for *ohms* using log-ratio distance.

    Uses logarithmic (ratio-based) distance so that matching is proportionally
    correct across all decades.

    Edge cases:
        ohms <= 0 → 1.0
    """
    if ohms <= 0:
        return 1.0

    exponent = math.floor(math.log10(ohms))
    mantissa = ohms / multiplier_value(exponent)

    # The next decade's 1.0 is a candidate for mantissas just under 10.
    candidates = E24_VALUES + (10.0,)
    best = min(candidates, key=lambda c: abs(math.log(mantissa / c)))

    return round(best * multiplier_value(exponent), 12 - exponent)


def is_e24_value(ohms: float) -> bool:
    """Return True if *ohms* is an E24 value times a power of ten."""
    if ohms <= 0 or not math.isfinite(ohms):
        return False
    return math.isclose(snap_to_e24(ohms), ohms, rel_tol=1e-9)


def describe_bands(bands: Sequence[ColorEntry | None], band_count: int | None = None) -> str:
    """Return e.g. ``'Yellow-Violet-Red-Gold (4.7 kΩ ±5%)'`` for *bands*."""
    count = band_count if band_count is not None else len(bands)
    name_str = "-".join(b.name if b is not None else NONE.name for b in bands[:count])

    result = calculate_resistor_values(count, bands)
    parts = [result.resistance_string]
    if result.tolerance is not None:
        parts.append(f"±{result.tolerance:g}%")
    if result.tcr is not None:
        parts.append(f"{result.tcr:g} ppm/°C")

    return f"{name_str} ({' '.join(parts)})"
