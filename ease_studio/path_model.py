"""Editable piecewise cubic Bézier path in grid space.

Points are stored as one flat list:

    [A0, C0a, C0b, A1, C1a, C1b, A2, ...]

Every third point is an anchor; the two points after an anchor are the
controls of the segment leaving it. Segment i is points[3i : 3i + 4], so
neighbouring segments share their joint anchor.
"""

import logging
import math
from collections.abc import Sequence

from svgpathtools import CubicBezier, Line, QuadraticBezier, parse_path

from ease_studio.config import settings
from ease_studio.coords import CoordinateMapper
from ease_studio.interpolation import line_to_cubic, quadratic_to_cubic, segments_from_points
from ease_studio.presets import DEFAULT_GRID_PATH, get_preset
from ease_studio.types import (
    EditableHandle,
    HandleRole,
    NormalizedCurve,
    Point,
    Segment,
    clamp_value,
    format_number,
)

logger = logging.getLogger(__name__)

PRESET_GRID_SIZE = 500.0  # presets are authored on a 500 unit grid
_TIME_TOLERANCE = 1e-6
_JOINT_TOLERANCE = 1e-9


class PathError(ValueError):
    """Base error for paths that cannot be built."""


class PathParseError(PathError):
    """Raised when a path string cannot be turned into cubic segments."""


class DegenerateSegmentError(PathError):
    """Raised when a segment starts and ends on the same point."""


class InvalidPathError(PathError):
    """Raised when anchors break the time ordering invariant."""


def _point(z: complex) -> Point:
    return Point(x=z.real, y=z.imag)


def _is_finite(point: Point) -> bool:
    return math.isfinite(point.x) and math.isfinite(point.y)


def parse_cubic_points(d: str) -> list[Point]:
    """Parse a path string into the flat cubic point layout.

    Lines and quadratic segments are elevated to cubics. Arcs and
    disconnected subpaths are rejected.
    """
    if not d or not d.strip():
        raise PathParseError("Empty path string")

    try:
        svg_path = parse_path(d)
    except Exception as e:
        raise PathParseError(f"Could not parse path {d!r}: {e}") from e

    points: list[Point] = []
    for segment in svg_path:
        start = _point(segment.start)
        end = _point(segment.end)

        if isinstance(segment, CubicBezier):
            c1, c2 = _point(segment.control1), _point(segment.control2)
        elif isinstance(segment, QuadraticBezier):
            c1, c2 = quadratic_to_cubic(start, _point(segment.control), end)
        elif isinstance(segment, Line):
            c1, c2 = line_to_cubic(start, end)
        else:
            raise PathParseError(f"Unsupported segment type {type(segment).__name__}")

        if not points:
            points.append(start)
        elif abs(segment.start.real - points[-1].x) > _JOINT_TOLERANCE or abs(
            segment.start.imag - points[-1].y
        ) > _JOINT_TOLERANCE:
            raise PathParseError("Path has disconnected subpaths")

        points.extend([c1, c2, end])

    if not points:
        raise PathParseError(f"Path {d!r} has no segments")
    if not all(_is_finite(p) for p in points):
        raise PathParseError(f"Path {d!r} has non-finite coordinates")
    return points


class CurvePath:
    """Ordered cubic segments with anchors strictly increasing in time.

    The path owns its geometry; callers change it only through move_point,
    which keeps anchor ordering and global bounds intact.
    """

    def __init__(
        self,
        points: Sequence[Point],
        mapper: CoordinateMapper | None = None,
        anchor_epsilon: float | None = None,
    ) -> None:
        self.mapper = mapper or CoordinateMapper()
        self.anchor_epsilon = (
            anchor_epsilon if anchor_epsilon is not None else settings.anchor_epsilon
        )
        self._points: list[Point] = list(points)
        self._validate()

    def _validate(self) -> None:
        count = len(self._points)
        if count < 4 or (count - 1) % 3 != 0:
            raise InvalidPathError(f"Path needs 3n+1 points (n >= 1), got {count}")
        if not all(_is_finite(p) for p in self._points):
            raise InvalidPathError("Path has non-finite coordinates")

        for i, segment in enumerate(self.segments):
            if segment.is_degenerate:
                raise DegenerateSegmentError(f"Segment {i} has zero length")

        anchors = self.anchors
        if abs(anchors[0].x) > _TIME_TOLERANCE:
            raise InvalidPathError(f"First anchor must start at time 0, got x={anchors[0].x}")
        if abs(anchors[-1].x - self.mapper.grid_size) > _TIME_TOLERANCE:
            raise InvalidPathError(
                f"Last anchor must end at x={self.mapper.grid_size}, got x={anchors[-1].x}"
            )
        for prev, curr in zip(anchors[:-1], anchors[1:], strict=True):
            if curr.x <= prev.x:
                raise InvalidPathError(
                    f"Anchors must increase in time ({prev.x} then {curr.x})"
                )

        # Pin endpoints exactly once the tolerance check passed
        self._points[0] = Point(x=0.0, y=self._points[0].y)
        self._points[-1] = Point(x=self.mapper.grid_size, y=self._points[-1].y)

    # --- Construction ---

    @classmethod
    def from_path_string(
        cls,
        d: str,
        mapper: CoordinateMapper | None = None,
        scale: float = 1.0,
    ) -> "CurvePath":
        """Build a path from a grid-space path string.

        Raises:
            PathError: If the string is malformed or breaks the path invariants.
        """
        points = parse_cubic_points(d)
        if scale != 1.0:
            points = [Point(x=p.x * scale, y=p.y * scale) for p in points]
        return cls(points, mapper=mapper)

    @classmethod
    def from_normalized(
        cls, curve: NormalizedCurve, mapper: CoordinateMapper | None = None
    ) -> "CurvePath":
        """Build a grid-space path from a unit-space curve."""
        mapper = mapper or CoordinateMapper()
        return cls([mapper.to_grid(p) for p in curve.points], mapper=mapper)

    @classmethod
    def create_default(
        cls, preset_id: str | None = None, mapper: CoordinateMapper | None = None
    ) -> "CurvePath":
        """Build a path from a preset, falling back to the default curve."""
        mapper = mapper or CoordinateMapper()
        scale = mapper.grid_size / PRESET_GRID_SIZE
        try:
            return cls.from_path_string(get_preset(preset_id), mapper=mapper, scale=scale)
        except PathError as e:
            logger.warning(f"Preset {preset_id!r} is unusable, using default curve: {e}")
            return cls.from_path_string(DEFAULT_GRID_PATH, mapper=mapper, scale=scale)

    def copy(self) -> "CurvePath":
        return CurvePath(self._points, mapper=self.mapper, anchor_epsilon=self.anchor_epsilon)

    # --- Queries ---

    @property
    def points(self) -> tuple[Point, ...]:
        return tuple(self._points)

    @property
    def anchors(self) -> list[Point]:
        return self._points[::3]

    @property
    def segments(self) -> list[Segment]:
        return segments_from_points(self._points)

    @property
    def last_index(self) -> int:
        return len(self._points) - 1

    def get_handles(self) -> list[EditableHandle]:
        """All draggable points in path order."""
        handles: list[EditableHandle] = []
        for index in range(len(self._points)):
            handles.append(self._handle_for(index))
        return handles

    def _handle_for(self, index: int) -> EditableHandle:
        offset = index % 3
        if offset == 0:
            return EditableHandle(
                index=index,
                role=HandleRole.ANCHOR,
                anchor_index=index,
                is_endpoint=index in (0, self.last_index),
            )
        # First control after an anchor leaves it; the second arrives at the next one
        anchor_index = index - 1 if offset == 1 else index + 1
        return EditableHandle(index=index, role=HandleRole.CONTROL, anchor_index=anchor_index)

    def point_at(self, handle: EditableHandle) -> Point:
        return self._points[handle.index]

    # --- Editing ---

    def constrain(self, handle: EditableHandle, proposed: Point) -> Point:
        """Apply role constraints and global bounds to a proposed position."""
        self._check_handle(handle)
        if not handle.is_anchor:
            return self.mapper.clamp_grid(proposed)

        index = handle.index
        if index == 0:
            x = 0.0
        elif index == self.last_index:
            x = self.mapper.grid_size
        else:
            prev_x = self._points[index - 3].x
            next_x = self._points[index + 3].x
            low = prev_x + self.anchor_epsilon
            high = next_x - self.anchor_epsilon
            x = clamp_value(proposed.x, low, high) if low <= high else (prev_x + next_x) / 2

        y = clamp_value(proposed.y, self.mapper.min_y, self.mapper.max_y)
        return Point(x=x, y=y)

    def move_point(self, handle: EditableHandle, position: Point) -> "CurvePath":
        """Move one point, keeping anchor order and global bounds.

        Anchors drag their adjacent controls along by the applied delta.
        Returns self for chaining.
        """
        target = self.constrain(handle, position)
        index = handle.index

        if handle.is_anchor:
            old = self._points[index]
            dx, dy = target.x - old.x, target.y - old.y
            self._points[index] = target
            for control_index in (index - 1, index + 1):
                if 0 <= control_index <= self.last_index:
                    moved = self._points[control_index].offset(dx, dy)
                    self._points[control_index] = self.mapper.clamp_grid(moved)
        else:
            self._points[index] = target

        return self

    def _check_handle(self, handle: EditableHandle) -> None:
        if not 0 <= handle.index <= self.last_index:
            raise IndexError(f"Handle index {handle.index} outside path of {len(self._points)}")
        if handle.is_anchor != (handle.index % 3 == 0):
            raise ValueError(f"Handle role {handle.role.value} does not match index {handle.index}")

    # --- Serialization ---

    def to_path_string(self, precision: int | None = None) -> str:
        """Serialize as ``M x,y C x,y x,y x,y ...`` in grid space."""
        precision = precision if precision is not None else settings.precision

        def fmt(p: Point) -> str:
            return f"{format_number(p.x, precision)},{format_number(p.y, precision)}"

        first, rest = self._points[0], self._points[1:]
        return f"M{fmt(first)} C" + " ".join(fmt(p) for p in rest)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurvePath):
            return NotImplemented
        return self._points == other._points

    def __repr__(self) -> str:
        return f"CurvePath({self.to_path_string()!r})"
