"""Pointer-driven editing of a curve path.

The editor is a two-state machine:

- idle: pointer_down on a handle within the hit radius starts a drag and
  fires the press hooks.
- dragging: pointer_move runs the proposed position through role
  constraints, endpoint snapping and global clamping, moves the point and
  fires the update hooks with the new path string. pointer_up ends the drag
  and fires the release hooks.

Events that make no sense for the current state are ignored.
"""

import contextlib
import logging
from collections.abc import Callable
from typing import TypeVar

from ease_studio.config import settings
from ease_studio.path_model import CurvePath
from ease_studio.types import DragState, EditableHandle, Point

logger = logging.getLogger(__name__)

HandleListener = Callable[[EditableHandle], None]
PathListener = Callable[[str], None]

T = TypeVar("T")


class CurveEditor:
    """Interactive editor bound to one path."""

    def __init__(
        self,
        path: CurvePath,
        hit_radius: float | None = None,
        snap_radius_sq: float | None = None,
    ) -> None:
        self._path = path
        self.hit_radius = hit_radius if hit_radius is not None else settings.handle_size / 2
        self.snap_radius_sq = (
            snap_radius_sq if snap_radius_sq is not None else settings.snap_radius_sq
        )
        self._state = DragState.IDLE
        self._active: EditableHandle | None = None
        self._closed = False
        self._press_hooks: list[HandleListener] = []
        self._release_hooks: list[HandleListener] = []
        self._update_hooks: list[PathListener] = []

    # --- Properties ---

    @property
    def path(self) -> CurvePath:
        return self._path

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def active_handle(self) -> EditableHandle | None:
        return self._active

    @property
    def is_dragging(self) -> bool:
        return self._state == DragState.DRAGGING

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Hooks ---

    def on_press(self, listener: HandleListener) -> Callable[[], None]:
        """Called when a drag starts."""
        return self._register(self._press_hooks, listener)

    def on_release(self, listener: HandleListener) -> Callable[[], None]:
        """Called when a drag ends."""
        return self._register(self._release_hooks, listener)

    def on_update(self, listener: PathListener) -> Callable[[], None]:
        """Called with the grid path string after every accepted change."""
        return self._register(self._update_hooks, listener)

    def _register(self, hooks: list[T], listener: T) -> Callable[[], None]:
        hooks.append(listener)

        def remove() -> None:
            with contextlib.suppress(ValueError):
                hooks.remove(listener)

        return remove

    def _fire(self, hooks: list[Callable[[T], None]], arg: T) -> None:
        for hook in list(hooks):
            try:
                hook(arg)
            except Exception:
                logger.exception("Editor hook failed")

    # --- Hit testing ---

    def hit_test(self, point: Point) -> EditableHandle | None:
        """Closest handle within the hit radius.

        Equal distances prefer anchors over controls, then path order.
        """
        radius_sq = self.hit_radius * self.hit_radius
        best: tuple[float, int, int] | None = None
        best_handle: EditableHandle | None = None
        for handle in self._path.get_handles():
            dist_sq = self._path.point_at(handle).distance_sq(point)
            if dist_sq > radius_sq:
                continue
            key = (dist_sq, 0 if handle.is_anchor else 1, handle.index)
            if best is None or key < best:
                best, best_handle = key, handle
        return best_handle

    # --- Pointer events ---

    def pointer_down(self, point: Point) -> EditableHandle | None:
        """Start dragging the handle under the pointer, if any."""
        if self._closed or self.is_dragging:
            return None

        handle = self.hit_test(point)
        if handle is None:
            return None

        self._state = DragState.DRAGGING
        self._active = handle
        logger.debug(
            f"Drag start: {handle.role.value} #{handle.index}",
            extra={"handle_index": handle.index, "handle_role": handle.role.value},
        )
        self._fire(self._press_hooks, handle)
        return handle

    def pointer_move(self, point: Point) -> bool:
        """Move the active handle. Returns False when nothing is being dragged."""
        if self._closed or self._active is None:
            return False

        target = self.resolve_position(self._active, point)
        self._path.move_point(self._active, target)
        self._fire(self._update_hooks, self._path.to_path_string())
        return True

    def pointer_up(self) -> EditableHandle | None:
        """End the current drag."""
        if self._closed or self._active is None:
            return None

        handle = self._active
        self._state = DragState.IDLE
        self._active = None
        logger.debug(
            f"Drag end: {handle.role.value} #{handle.index}",
            extra={"handle_index": handle.index, "handle_role": handle.role.value},
        )
        self._fire(self._release_hooks, handle)
        return handle

    # --- Constraints ---

    def resolve_position(self, handle: EditableHandle, proposed: Point) -> Point:
        """Role constraints, then endpoint snapping, then global bounds."""
        constrained = self._path.constrain(handle, proposed)
        snapped = self._snap(handle, constrained)
        return self._path.mapper.clamp_grid(snapped)

    def _snap(self, handle: EditableHandle, point: Point) -> Point:
        if not (handle.is_anchor and handle.is_endpoint):
            return point
        mapper = self._path.mapper
        corner = mapper.start_corner if handle.index == 0 else mapper.end_corner
        if point.distance_sq(corner) < self.snap_radius_sq:
            return corner
        return point

    # --- Lifecycle ---

    def load_path(self, path: CurvePath) -> None:
        """Replace the path wholesale (preset selection, reload)."""
        if self._closed:
            return
        if self.is_dragging:
            self.pointer_up()
        self._path = path
        self._fire(self._update_hooks, path.to_path_string())

    def close(self) -> None:
        """End any drag and release all hooks. Later events are ignored."""
        if self._closed:
            return
        self._closed = True
        self._state = DragState.IDLE
        self._active = None
        self._press_hooks.clear()
        self._release_hooks.clear()
        self._update_hooks.clear()
