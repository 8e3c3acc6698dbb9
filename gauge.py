"""Geometry for the semicircular BMI gauge.

Angles use the arc convention: 0 degrees points right, 180 points left, and
the scale sweeps through the top of the circle. Low BMI sits on the left.

The needle is drawn pointing straight up and rotated into place, so its
rotation uses a different convention: 0 is up, negative turns toward the
left (low BMI) and positive toward the right (high BMI).
"""

import math
from dataclasses import dataclass

from bmi import BMI_CATEGORIES

MIN_BMI = 10
MAX_BMI = 40
DEGREES_PER_BMI = 180 / (MAX_BMI - MIN_BMI)  # 6

# SVG viewport
VIEW_WIDTH = 200
VIEW_HEIGHT = 110
CENTER_X = VIEW_WIDTH / 2
CENTER_Y = 100
RADIUS = 80
STROKE_WIDTH = 20
NEEDLE_LENGTH = 75


@dataclass(frozen=True)
class GaugeSegment:
    """Colored band for one category."""
    color: str
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class NeedleState:
    """Rotation of the upward-drawn needle and the point it ends at."""
    rotation: float
    tip: tuple[float, float]


@dataclass(frozen=True)
class Gauge:
    """Everything needed to draw the gauge for one BMI value."""
    bmi: float
    clamped_bmi: float
    needle: NeedleState
    segments: tuple[GaugeSegment, ...]
    paths: tuple[str, ...]

    def as_dict(self) -> dict:
        return {
            "bmi": self.bmi,
            "clamped_bmi": self.clamped_bmi,
            "needle_rotation": self.needle.rotation,
            "needle_tip": list(self.needle.tip),
            "segments": [
                {
                    "color": segment.color,
                    "start_angle": segment.start_angle,
                    "end_angle": segment.end_angle,
                    "path": path,
                }
                for segment, path in zip(self.segments, self.paths)
            ],
        }


def bmi_to_angle(bmi: float) -> float:
    """Map a BMI onto the arc: 10 -> 180 (left), 40 -> 0 (right)."""
    return 180 - (bmi - MIN_BMI) * DEGREES_PER_BMI


def clamp(bmi: float) -> float:
    """Pin a BMI to the visible range of the gauge."""
    return min(max(bmi, MIN_BMI), MAX_BMI)


def needle_rotation(bmi: float) -> float:
    """Rotation of an upward-pointing needle for the given BMI."""
    return 90 - bmi_to_angle(clamp(bmi))


def gauge_segments() -> tuple[GaugeSegment, ...]:
    """One fixed band per category, from its lower to its upper bound.

    The open-ended last category is drawn up to MAX_BMI.
    """
    segments = []
    lower = MIN_BMI
    for boundary in BMI_CATEGORIES:
        upper = min(boundary.upper_bound, MAX_BMI)
        segments.append(
            GaugeSegment(
                color=boundary.color,
                start_angle=bmi_to_angle(lower),
                end_angle=bmi_to_angle(upper),
            )
        )
        lower = upper
    return tuple(segments)


def polar_to_cartesian(cx: float, cy: float, r: float, angle: float) -> tuple[float, float]:
    """Point at angle on a circle in a y-down viewport."""
    radians = math.radians(angle)
    return cx + r * math.cos(radians), cy - r * math.sin(radians)


def describe_arc(cx: float, cy: float, r: float, start_angle: float, end_angle: float) -> str:
    """SVG path data for the arc from start_angle to end_angle through the top.

    Going from a larger to a smaller angle moves left to right, which is
    clockwise on screen (sweep flag 1).
    """
    start_x, start_y = polar_to_cartesian(cx, cy, r, start_angle)
    end_x, end_y = polar_to_cartesian(cx, cy, r, end_angle)
    large_arc = 0 if abs(start_angle - end_angle) <= 180 else 1
    sweep = 1 if start_angle > end_angle else 0
    return (
        f"M {start_x:.2f} {start_y:.2f} "
        f"A {r:g} {r:g} 0 {large_arc} {sweep} {end_x:.2f} {end_y:.2f}"
    )


def needle_tip(
    bmi: float,
    cx: float = CENTER_X,
    cy: float = CENTER_Y,
    length: float = NEEDLE_LENGTH,
) -> tuple[float, float]:
    """Where the needle points for the given BMI."""
    return polar_to_cartesian(cx, cy, length, bmi_to_angle(clamp(bmi)))


def build_gauge(bmi: float) -> Gauge:
    """Build the render model for the gauge at the standard viewport size."""
    segments = gauge_segments()
    paths = tuple(
        describe_arc(CENTER_X, CENTER_Y, RADIUS, segment.start_angle, segment.end_angle)
        for segment in segments
    )
    return Gauge(
        bmi=bmi,
        clamped_bmi=clamp(bmi),
        needle=NeedleState(rotation=needle_rotation(bmi), tip=needle_tip(bmi)),
        segments=segments,
        paths=paths,
    )
