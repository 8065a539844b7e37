"""Grid <-> unit space coordinate mapping.

Grid space is the editor's pixel square with y growing downward. Unit space
is the easing domain: x is elapsed time in [0, 1], y is progress with 0 at
the bottom of the grid and 1 at the top. Time is always clamped, progress is
not (overshoot eases go above 1 or below 0).
"""

from dataclasses import dataclass

from ease_studio.config import settings
from ease_studio.types import Point, clamp_value


@dataclass(frozen=True)
class CoordinateMapper:
    """Stateless bidirectional transform between grid and unit space."""

    grid_size: float = settings.grid_size
    overshoot: float = settings.overshoot

    def __post_init__(self) -> None:
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.overshoot < 0:
            raise ValueError(f"overshoot must be non-negative, got {self.overshoot}")

    @property
    def min_y(self) -> float:
        return -self.overshoot

    @property
    def max_y(self) -> float:
        return self.grid_size + self.overshoot

    def to_unit(self, point: Point) -> Point:
        """Map a grid point to unit space."""
        x = clamp_value(point.x, 0.0, self.grid_size)
        return Point(x=x / self.grid_size, y=(self.grid_size - point.y) / self.grid_size)

    def to_grid(self, point: Point) -> Point:
        """Map a unit point to grid space."""
        x = clamp_value(point.x, 0.0, 1.0)
        return Point(x=x * self.grid_size, y=self.grid_size - point.y * self.grid_size)

    def clamp_grid(self, point: Point) -> Point:
        """Clamp a grid point to the editor's global bounds."""
        return Point(
            x=clamp_value(point.x, 0.0, self.grid_size),
            y=clamp_value(point.y, self.min_y, self.max_y),
        )

    @property
    def start_corner(self) -> Point:
        """Grid position of unit (0, 0)."""
        return Point(x=0.0, y=self.grid_size)

    @property
    def end_corner(self) -> Point:
        """Grid position of unit (1, 1)."""
        return Point(x=self.grid_size, y=0.0)
