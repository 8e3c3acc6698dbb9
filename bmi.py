"""BMI calculation and classification."""

import math
from dataclasses import dataclass
from enum import Enum


class BmiCategory(str, Enum):
    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal Weight"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


@dataclass(frozen=True)
class CategoryBoundary:
    """One row of the category table. upper_bound is exclusive."""
    label: BmiCategory
    upper_bound: float
    color: str
    display_max: float | None

    @property
    def range_label(self) -> str:
        if self.display_max is None:
            return "> 30.0"
        return f"< {self.display_max}"


# Ordered lightest to heaviest; this is also the display order.
BMI_CATEGORIES = (
    CategoryBoundary(BmiCategory.UNDERWEIGHT, 18.5, "#3b82f6", 18.5),  # Blue
    CategoryBoundary(BmiCategory.NORMAL, 25.0, "#10b981", 24.9),  # Green
    CategoryBoundary(BmiCategory.OVERWEIGHT, 30.0, "#f59e0b", 29.9),  # Orange
    CategoryBoundary(BmiCategory.OBESE, math.inf, "#ef4444", None),  # Red
)


@dataclass(frozen=True)
class BmiResult:
    """A computed BMI, rounded for display."""
    bmi: float
    category: BmiCategory
    color: str

    def as_dict(self) -> dict:
        return {"bmi": self.bmi, "category": self.category.value, "color": self.color}


def classify(bmi: float) -> CategoryBoundary:
    """Return the first category whose upper bound exceeds bmi."""
    for boundary in BMI_CATEGORIES:
        if bmi < boundary.upper_bound:
            return boundary
    return BMI_CATEGORIES[-1]


def compute_bmi(weight_kg: float, height_m: float) -> BmiResult | None:
    """Compute BMI from canonical units.

    Returns None for incomplete input (either value missing, zero or
    negative) and for values so extreme the BMI is not a finite number.
    The category is matched against the unrounded value, so a raw 24.96
    displays as 25.0 but is still Normal Weight.
    """
    if not (math.isfinite(weight_kg) and math.isfinite(height_m)):
        return None
    if weight_kg <= 0 or height_m <= 0:
        return None

    denominator = height_m * height_m
    if denominator <= 0:
        return None
    bmi_raw = weight_kg / denominator
    if not math.isfinite(bmi_raw):
        return None
    boundary = classify(bmi_raw)

    return BmiResult(
        bmi=round(bmi_raw, 1),
        category=boundary.label,
        color=boundary.color,
    )


def category_table() -> list[dict]:
    """Category table as plain dicts for templates and the JSON API."""
    return [
        {
            "label": boundary.label.value,
            "upper_bound": boundary.upper_bound if math.isfinite(boundary.upper_bound) else None,
            "display_max": boundary.display_max,
            "color": boundary.color,
            "range_label": boundary.range_label,
        }
        for boundary in BMI_CATEGORIES
    ]
