"""Weight and height unit conversion."""

import math
from enum import Enum

LBS_PER_KG = 2.20462
KG_PER_LB = 0.453592  # Not the exact reciprocal of LBS_PER_KG
CM_PER_INCH = 2.54
M_PER_INCH = 0.0254
INCHES_PER_FOOT = 12


class WeightUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


class HeightUnit(str, Enum):
    CM = "cm"
    FT = "ft"  # Feet and inches


def parse_number(text: str | None) -> float:
    """Parse a numeric input field. Anything unparsable counts as zero.

    Accepts whatever float() accepts, including "1e3" and "1_000", and
    rejects trailing junk such as "70kg" outright rather than reading
    the leading number.
    """
    if text is None:
        return 0.0
    try:
        value = float(str(text).strip())
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def format_decimal(value: float) -> str:
    """Format a converted value for an input field."""
    return f"{value:.1f}"


def kg_to_lbs(kg: float) -> float | None:
    """Convert kilograms to pounds, or None when there is nothing to convert."""
    if kg <= 0:
        return None
    return round(kg * LBS_PER_KG, 1)


def lbs_to_kg(lbs: float) -> float | None:
    """Convert pounds to kilograms, or None when there is nothing to convert."""
    if lbs <= 0:
        return None
    return round(lbs * KG_PER_LB, 1)


def cm_to_ft_in(cm: float) -> tuple[int, int] | None:
    """Convert centimeters to whole feet and inches.

    Inches are rounded half-up after taking the remainder, so a height just
    under a whole foot comes out as e.g. (5, 12) rather than (6, 0).
    """
    if cm <= 0:
        return None
    total_inches = cm / CM_PER_INCH
    feet = math.floor(total_inches / INCHES_PER_FOOT)
    inches = math.floor(total_inches % INCHES_PER_FOOT + 0.5)
    return feet, inches


def ft_in_to_cm(feet: float, inches: float) -> float | None:
    """Convert feet and inches to centimeters, or None when both are empty."""
    if feet <= 0 and inches <= 0:
        return None
    total_inches = feet * INCHES_PER_FOOT + inches
    return round(total_inches * CM_PER_INCH, 1)


def weight_to_kg(value: float, unit: WeightUnit) -> float:
    """Normalize a weight in the given unit to kilograms."""
    match unit:
        case WeightUnit.KG:
            return value
        case WeightUnit.LBS:
            return value * KG_PER_LB
    raise ValueError(f"Unknown weight unit: {unit!r}")


def height_to_m(
    unit: HeightUnit,
    cm: float = 0.0,
    feet: float = 0.0,
    inches: float = 0.0,
) -> float:
    """Normalize a height in the given unit to meters."""
    match unit:
        case HeightUnit.CM:
            return cm / 100
        case HeightUnit.FT:
            return (feet * INCHES_PER_FOOT + inches) * M_PER_INCH
    raise ValueError(f"Unknown height unit: {unit!r}")
