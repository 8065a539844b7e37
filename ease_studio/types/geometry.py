"""Core geometry types."""

from pydantic import BaseModel, ConfigDict


class Point(BaseModel):
    """A 2D point.

    Used both in grid space (editor pixels) and unit easing space.
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Point":
        """Return a copy shifted by (dx, dy)."""
        return Point(x=self.x + dx, y=self.y + dy)

    def distance_sq(self, other: "Point") -> float:
        """Squared Euclidean distance to another point."""
        dx = other.x - self.x
        dy = other.y - self.y
        return dx * dx + dy * dy


def clamp_value(value: float, low: float, high: float) -> float:
    """Clamp a value to a range [low, high]."""
    return max(low, min(high, value))


def format_number(value: float, precision: int = 3) -> str:
    """Format a coordinate compactly: rounded, no trailing zeros, no "-0"."""
    rounded = round(value, precision)
    if rounded == 0:
        return "0"
    text = f"{rounded:.{precision}f}".rstrip("0").rstrip(".")
    return text
