"""Curve, handle, validation and animation state models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from ease_studio.types.geometry import Point, format_number


class HandleRole(str, Enum):
    """What kind of point a handle refers to."""

    ANCHOR = "anchor"
    CONTROL = "control"


class EditableHandle(BaseModel):
    """Reference to one draggable point of a path.

    `index` addresses the flat point list ``[A0, C, C, A1, C, C, A2, ...]``.
    Controls carry the index of the anchor they hang from.
    """

    model_config = ConfigDict(frozen=True)

    index: int
    role: HandleRole
    anchor_index: int
    is_endpoint: bool = False

    @property
    def is_anchor(self) -> bool:
        return self.role == HandleRole.ANCHOR


class Segment(BaseModel):
    """One cubic Bézier piece."""

    model_config = ConfigDict(frozen=True)

    start: Point
    control1: Point
    control2: Point
    end: Point

    @property
    def is_degenerate(self) -> bool:
        """True when the segment starts and ends on the same point."""
        return self.start == self.end


class InvalidReason(str, Enum):
    """Why a normalization attempt was rejected."""

    NON_MONOTONIC_TIME = "NonMonotonicTime"
    MALFORMED_PATH = "MalformedPath"


class ValidationResult(BaseModel):
    """Outcome of one normalization attempt."""

    valid: bool
    reason: InvalidReason | None = None


class NormalizedCurve(BaseModel):
    """Canonical unit-space easing curve.

    Points follow the same flat layout as the editable path: a start anchor,
    then (control1, control2, end) triples.
    """

    model_config = ConfigDict(frozen=True)

    points: tuple[Point, ...]
    precision: int = 3

    @field_validator("points")
    @classmethod
    def _check_layout(cls, points: tuple[Point, ...]) -> tuple[Point, ...]:
        if len(points) < 4 or (len(points) - 1) % 3 != 0:
            raise ValueError(f"Curve needs 3n+1 points (n >= 1), got {len(points)}")
        return points

    @property
    def segment_count(self) -> int:
        return (len(self.points) - 1) // 3

    def to_string(self) -> str:
        """Serialize as ``M0,0,C x1,y1,...`` with comma separators."""
        first, rest = self.points[0], self.points[1:]
        head = f"M{format_number(first.x, self.precision)},{format_number(first.y, self.precision)}"
        body = ",".join(
            f"{format_number(p.x, self.precision)},{format_number(p.y, self.precision)}"
            for p in rest
        )
        return f"{head},C{body}"

    def __str__(self) -> str:
        return self.to_string()


class AnimationState(BaseModel):
    """Per-frame preview state reported by the animation driver."""

    progress: float = 0.0
    value: float = 0.0
    running: bool = False
    cycle: int = 0  # completed repeats since the last restart


class DragState(str, Enum):
    """Interactive editor states."""

    IDLE = "idle"
    DRAGGING = "dragging"
