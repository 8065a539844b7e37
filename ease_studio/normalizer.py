"""Normalization of editable paths into canonical easing curves.

The normalizer maps a grid-space path into unit space, rounds it to the
canonical precision and checks that time never runs backward along the
sampled curve. It is pure and never raises: any failure becomes an invalid
result.
"""

import logging

from pydantic import BaseModel

from ease_studio.config import settings
from ease_studio.coords import CoordinateMapper
from ease_studio.interpolation import first_time_reversal, sample_points
from ease_studio.path_model import CurvePath, PathParseError, parse_cubic_points
from ease_studio.types import InvalidReason, NormalizedCurve, Point, ValidationResult

logger = logging.getLogger(__name__)


class NormalizationResult(BaseModel):
    """Result of one normalization attempt.

    `curve_string` is set whenever mapping succeeded, even for invalid
    curves, so the view can show what the user drew. `curve` is only set
    when the curve is valid.
    """

    validation: ValidationResult
    curve: NormalizedCurve | None = None
    curve_string: str | None = None

    @property
    def valid(self) -> bool:
        return self.validation.valid


def validate_curve(curve: NormalizedCurve, samples_per_segment: int | None = None) -> ValidationResult:
    """Check that a unit-space curve never moves backward in time."""
    steps = samples_per_segment or settings.samples_per_segment
    samples = sample_points(curve.points, steps)
    reversal = first_time_reversal(samples)
    if reversal is not None:
        logger.debug(
            f"Time reverses at sample {reversal} of {len(samples)}",
            extra={"sample_index": reversal},
        )
        return ValidationResult(valid=False, reason=InvalidReason.NON_MONOTONIC_TIME)
    return ValidationResult(valid=True)


def normalize_path(
    path: CurvePath,
    mapper: CoordinateMapper | None = None,
    samples_per_segment: int | None = None,
    precision: int | None = None,
) -> NormalizationResult:
    """Convert a grid-space path into a validated unit-space curve."""
    precision = precision if precision is not None else settings.precision
    try:
        mapper = mapper or path.mapper
        unit_points = [mapper.to_unit(p) for p in path.points]
        rounded = tuple(
            Point(x=round(p.x, precision), y=round(p.y, precision)) for p in unit_points
        )
        curve = NormalizedCurve(points=rounded, precision=precision)
        curve_string = curve.to_string()
        validation = validate_curve(curve, samples_per_segment)
    except Exception as e:
        logger.warning(f"Normalization failed: {e}")
        return NormalizationResult(
            validation=ValidationResult(valid=False, reason=InvalidReason.MALFORMED_PATH)
        )

    if not validation.valid:
        return NormalizationResult(validation=validation, curve_string=curve_string)
    return NormalizationResult(validation=validation, curve=curve, curve_string=curve_string)


def parse_normalized_curve(text: str, precision: int | None = None) -> NormalizedCurve:
    """Parse a unit-space curve string such as ``M0,0,C0.126,0.382,...``.

    Raises:
        PathParseError: If the string is not a connected piecewise cubic.
    """
    points = parse_cubic_points(text)
    try:
        return NormalizedCurve(
            points=tuple(points),
            precision=precision if precision is not None else settings.precision,
        )
    except ValueError as e:
        raise PathParseError(f"Invalid curve {text!r}: {e}") from e


class CurveNormalizer:
    """Normalizes edits while keeping the last valid curve active.

    An invalid edit never replaces the active curve; it only updates
    `last_result` and `last_string` so the view can flag it.
    """

    def __init__(
        self,
        initial: NormalizedCurve,
        mapper: CoordinateMapper | None = None,
        samples_per_segment: int | None = None,
        precision: int | None = None,
    ) -> None:
        self.mapper = mapper
        self.samples_per_segment = samples_per_segment
        self.precision = precision
        self._active = initial
        self._last_result = NormalizationResult(
            validation=ValidationResult(valid=True),
            curve=initial,
            curve_string=initial.to_string(),
        )

    @property
    def active_curve(self) -> NormalizedCurve:
        """Last curve that passed validation."""
        return self._active

    @property
    def last_result(self) -> NormalizationResult:
        return self._last_result

    @property
    def last_string(self) -> str:
        """Most recent curve string, valid or not."""
        return self._last_result.curve_string or self._active.to_string()

    @property
    def is_invalid(self) -> bool:
        return not self._last_result.valid

    def update(self, path: CurvePath) -> NormalizationResult:
        """Normalize a new edit; promote it to active only if valid."""
        result = normalize_path(
            path,
            mapper=self.mapper,
            samples_per_segment=self.samples_per_segment,
            precision=self.precision,
        )
        self._last_result = result
        if result.curve is not None:
            self._active = result.curve
        else:
            reason = result.validation.reason
            logger.info(
                f"Rejected curve ({reason}); keeping last valid curve",
                extra={"reason": reason.value if reason else None},
            )
        return result
