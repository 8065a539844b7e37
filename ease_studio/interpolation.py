"""Pure functions for Bézier evaluation and sampling.

This module contains stateless, pure mathematical functions used by the
path model, the normalizer and the evaluator. No side effects or I/O.
"""

from collections.abc import Sequence

from ease_studio.types import Point, Segment


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two values."""
    return a + (b - a) * t


def lerp_point(p1: Point, p2: Point, t: float) -> Point:
    """Linearly interpolate between two points."""
    return Point(x=lerp(p1.x, p2.x, t), y=lerp(p1.y, p2.y, t))


def cubic_bezier_xy(
    p0: Point, p1: Point, p2: Point, p3: Point, t: float
) -> tuple[float, float]:
    """Evaluate cubic bezier at t, returning a bare (x, y) tuple."""
    one_minus_t = 1 - t
    a = one_minus_t**3
    b = 3 * one_minus_t**2 * t
    c = 3 * one_minus_t * t**2
    d = t**3
    return (
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def line_to_cubic(start: Point, end: Point) -> tuple[Point, Point]:
    """Control points that make a cubic trace the straight line start-end."""
    return lerp_point(start, end, 1 / 3), lerp_point(start, end, 2 / 3)


def quadratic_to_cubic(start: Point, control: Point, end: Point) -> tuple[Point, Point]:
    """Degree-elevate a quadratic bezier to an equivalent cubic."""
    return lerp_point(start, control, 2 / 3), lerp_point(end, control, 2 / 3)


def segments_from_points(points: Sequence[Point]) -> list[Segment]:
    """Split a flat ``[A0, C, C, A1, ...]`` list into segments."""
    return [
        Segment(
            start=points[i],
            control1=points[i + 1],
            control2=points[i + 2],
            end=points[i + 3],
        )
        for i in range(0, len(points) - 1, 3)
    ]


def sample_segment(segment: Segment, num_steps: int) -> list[tuple[float, float]]:
    """Sample a segment at num_steps + 1 evenly spaced parameters."""
    return [
        cubic_bezier_xy(segment.start, segment.control1, segment.control2, segment.end, i / num_steps)
        for i in range(num_steps + 1)
    ]


def sample_points(points: Sequence[Point], steps_per_segment: int) -> list[tuple[float, float]]:
    """Sample a whole piecewise cubic, skipping duplicated joints."""
    samples: list[tuple[float, float]] = []
    for seg_idx, segment in enumerate(segments_from_points(points)):
        seg_samples = sample_segment(segment, steps_per_segment)
        samples.extend(seg_samples if seg_idx == 0 else seg_samples[1:])
    return samples


def first_time_reversal(
    samples: Sequence[tuple[float, float]], tolerance: float = 1e-9
) -> int | None:
    """Index of the first sample whose x is behind its predecessor, if any."""
    for i in range(1, len(samples)):
        if samples[i][0] < samples[i - 1][0] - tolerance:
            return i
    return None
