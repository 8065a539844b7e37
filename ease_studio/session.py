"""Editing session for one (component, property) easing curve.

A session owns one editor, one normalizer and one preview driver and wires
them together:

    pointer events -> CurveEditor -> CurveNormalizer -> evaluator -> AnimationDriver

Drag start pauses the preview, drag end resumes it. Valid edits replace the
driver's evaluator; invalid edits leave the last valid curve playing. Use the
session as a context manager so the driver and editor hooks are released on
every exit path.
"""

import logging
import time
from types import TracebackType

from ease_studio.config import settings
from ease_studio.coords import CoordinateMapper
from ease_studio.driver import AnimationDriver, Clock
from ease_studio.editor import CurveEditor
from ease_studio.evaluator import build_evaluator
from ease_studio.normalizer import (
    CurveNormalizer,
    NormalizationResult,
    normalize_path,
    parse_normalized_curve,
)
from ease_studio.path_model import CurvePath, PathError
from ease_studio.presets import preset_for_component
from ease_studio.store import CurveStore, InMemoryCurveStore
from ease_studio.types import AnimationState, EditableHandle, NormalizedCurve, Point

logger = logging.getLogger(__name__)


class EaseSession:
    """Editor, normalizer, preview driver and store for one curve."""

    def __init__(
        self,
        component: str,
        prop: str,
        store: CurveStore | None = None,
        mapper: CoordinateMapper | None = None,
        clock: Clock = time.monotonic,
        duration: float | None = None,
        autosave: bool | None = None,
    ) -> None:
        self.component = component
        self.prop = prop
        self.store: CurveStore = store if store is not None else InMemoryCurveStore()
        self.mapper = mapper or CoordinateMapper()
        self.autosave = autosave if autosave is not None else settings.autosave
        self._closed = False

        path, curve = self._initial_curve()
        self.normalizer = CurveNormalizer(curve, mapper=self.mapper)
        self.editor = CurveEditor(path)
        self.driver = AnimationDriver(build_evaluator(curve), duration=duration, clock=clock)

        self._unsubscribe = [
            self.editor.on_press(self._handle_press),
            self.editor.on_release(self._handle_release),
            self.editor.on_update(self._handle_update),
        ]
        logger.info(
            f"Session opened for {component}.{prop}: {curve.to_string()}",
            extra={"component": component, "prop": prop},
        )

    # --- Loading ---

    def _default_path(self) -> CurvePath:
        return CurvePath.create_default(preset_for_component(self.component), self.mapper)

    def _initial_curve(self) -> tuple[CurvePath, NormalizedCurve]:
        """Stored curve if usable, otherwise the component's default preset."""
        path: CurvePath | None = None
        try:
            stored = self.store.get(self.component, self.prop)
            if stored is not None:
                path = CurvePath.from_normalized(stored, self.mapper)
        except PathError as e:
            logger.warning(f"Stored curve for {self.component}.{self.prop} unusable: {e}")

        if path is not None:
            result = normalize_path(path, self.mapper)
            if result.curve is not None:
                return path, result.curve
            logger.warning(
                f"Stored curve for {self.component}.{self.prop} is invalid "
                f"({result.validation.reason}), using default"
            )

        path = self._default_path()
        result = normalize_path(path, self.mapper)
        if result.curve is None:
            raise RuntimeError(f"Default curve for {self.component} does not normalize")
        return path, result.curve

    def select_preset(self, name: str) -> NormalizationResult:
        """Replace the current path with a preset and re-derive everything."""
        self.editor.load_path(CurvePath.create_default(name, self.mapper))
        return self.normalizer.last_result

    def load_curve_string(self, text: str) -> NormalizationResult:
        """Load a unit-space curve string, falling back to the default curve."""
        try:
            path = CurvePath.from_normalized(parse_normalized_curve(text), self.mapper)
        except PathError as e:
            logger.warning(f"Could not load curve {text!r}, using default: {e}")
            path = self._default_path()
        self.editor.load_path(path)
        return self.normalizer.last_result

    # --- Editor hooks ---

    def _handle_press(self, handle: EditableHandle) -> None:
        self.driver.pause()

    def _handle_release(self, handle: EditableHandle) -> None:
        self.driver.resume()

    def _handle_update(self, path_string: str) -> None:
        result = self.normalizer.update(self.editor.path)
        if result.curve is None:
            return
        self.driver.set_evaluator(build_evaluator(result.curve))
        if self.autosave:
            self.save()

    # --- Pointer input ---

    def pointer_down(self, point: Point) -> EditableHandle | None:
        if self.driver.in_tick:
            logger.debug("Ignoring pointer down during animation tick")
            return None
        return self.editor.pointer_down(point)

    def pointer_move(self, point: Point) -> bool:
        return self.editor.pointer_move(point)

    def pointer_up(self) -> EditableHandle | None:
        return self.editor.pointer_up()

    # --- View state ---

    @property
    def path_string(self) -> str:
        """Grid path as currently drawn, valid or not."""
        return self.editor.path.to_path_string()

    @property
    def ease_string(self) -> str:
        """Latest normalized string, shown even when invalid."""
        return self.normalizer.last_string

    @property
    def active_curve(self) -> NormalizedCurve:
        return self.normalizer.active_curve

    @property
    def is_invalid(self) -> bool:
        return self.normalizer.is_invalid

    @property
    def animation(self) -> AnimationState:
        return self.driver.state

    def tick(self, now: float | None = None) -> AnimationState:
        return self.driver.tick(now)

    def save(self) -> NormalizedCurve:
        """Persist the active (last valid) curve."""
        curve = self.normalizer.active_curve
        self.store.set(self.component, self.prop, curve)
        return curve

    # --- Lifecycle ---

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release editor hooks and stop the preview. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()
        self.editor.close()
        self.driver.stop()
        logger.info(
            f"Session closed for {self.component}.{self.prop}",
            extra={"component": self.component, "prop": self.prop},
        )

    async def aclose(self) -> None:
        self.close()
        await self.driver.aclose()

    def __enter__(self) -> "EaseSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> "EaseSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
