"""Type definitions for the easing editor.

This package contains all type definitions organized into focused modules:
- geometry: Core geometry types (Point, clamp_value)
- curves: Segments, handles, normalized curves, validation and animation state
"""

from ease_studio.types.curves import (
    AnimationState,
    DragState,
    EditableHandle,
    HandleRole,
    InvalidReason,
    NormalizedCurve,
    Segment,
    ValidationResult,
)
from ease_studio.types.geometry import (
    Point,
    clamp_value,
    format_number,
)

__all__ = [
    # Geometry
    "Point",
    "clamp_value",
    "format_number",
    # Curves
    "AnimationState",
    "DragState",
    "EditableHandle",
    "HandleRole",
    "InvalidReason",
    "NormalizedCurve",
    "Segment",
    "ValidationResult",
]
