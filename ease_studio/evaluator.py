"""Easing evaluator built from a normalized curve.

The curve is sampled once into a lookup table ordered by time; evaluation
is a binary search plus linear interpolation between neighbouring samples.
This relies on the curve having passed validation, so sample times are
non-decreasing.
"""

from bisect import bisect_left
from collections.abc import Callable

from ease_studio.config import settings
from ease_studio.interpolation import lerp, sample_points
from ease_studio.types import NormalizedCurve, clamp_value

Evaluator = Callable[[float], float]


class CurveEvaluator:
    """Callable easing function: elapsed fraction in, progress out."""

    def __init__(self, curve: NormalizedCurve, samples_per_segment: int | None = None) -> None:
        steps = samples_per_segment or settings.samples_per_segment
        samples = sample_points(curve.points, steps)

        # Guard the table against float noise so bisect sees sorted keys
        xs: list[float] = []
        ys: list[float] = []
        running_max = 0.0
        for x, y in samples:
            running_max = max(running_max, x)
            xs.append(running_max)
            ys.append(y)

        self.curve = curve
        self._xs = xs
        self._ys = ys

    @property
    def start_value(self) -> float:
        return self._ys[0]

    @property
    def end_value(self) -> float:
        return self._ys[-1]

    def __call__(self, t: float) -> float:
        t = clamp_value(t, 0.0, 1.0)
        xs, ys = self._xs, self._ys

        if t <= xs[0]:
            return ys[0]
        if t >= xs[-1]:
            return ys[-1]

        hi = bisect_left(xs, t)
        lo = hi - 1
        span = xs[hi] - xs[lo]
        if span <= 0:
            return ys[hi]
        return lerp(ys[lo], ys[hi], (t - xs[lo]) / span)


def build_evaluator(
    curve: NormalizedCurve, samples_per_segment: int | None = None
) -> CurveEvaluator:
    """Build a callable easing function from a normalized curve."""
    return CurveEvaluator(curve, samples_per_segment)


def linear(t: float) -> float:
    """Identity easing, used before any curve is available."""
    return clamp_value(t, 0.0, 1.0)
