"""Persistence of normalized curves per (component, property).

Structure of the JSON store:

    {
      "chat_list": {"opacity": "M0,0,C0.126,0.382,..."},
      "modal": {"translate_y": "M0,0,C..."}
    }
"""

import json
import logging
from pathlib import Path
from typing import Protocol

from ease_studio.config import settings
from ease_studio.normalizer import parse_normalized_curve
from ease_studio.path_model import PathError
from ease_studio.types import NormalizedCurve

logger = logging.getLogger(__name__)


class CurveStore(Protocol):
    """Narrow persistence contract used by the editing session."""

    def get(self, component: str, prop: str) -> NormalizedCurve | None: ...

    def set(self, component: str, prop: str, curve: NormalizedCurve) -> None: ...


class InMemoryCurveStore:
    """Dictionary-backed store, mostly for previews and tests."""

    def __init__(self) -> None:
        self._curves: dict[tuple[str, str], NormalizedCurve] = {}

    def get(self, component: str, prop: str) -> NormalizedCurve | None:
        return self._curves.get((component, prop))

    def set(self, component: str, prop: str, curve: NormalizedCurve) -> None:
        self._curves[(component, prop)] = curve

    def delete(self, component: str, prop: str) -> bool:
        return self._curves.pop((component, prop), None) is not None


class JsonCurveStore:
    """Stores curve strings in a single JSON file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or settings.store_path)

    def _load(self) -> dict[str, dict[str, str]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable curve store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring curve store {self.path}: expected an object")
            return {}
        return {
            component: {k: v for k, v in props.items() if isinstance(v, str)}
            for component, props in data.items()
            if isinstance(props, dict)
        }

    def _save(self, data: dict[str, dict[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True))

    def get(self, component: str, prop: str) -> NormalizedCurve | None:
        text = self._load().get(component, {}).get(prop)
        if text is None:
            return None
        try:
            return parse_normalized_curve(text)
        except PathError as e:
            logger.warning(f"Stored curve for {component}.{prop} is malformed: {e}")
            return None

    def set(self, component: str, prop: str, curve: NormalizedCurve) -> None:
        data = self._load()
        data.setdefault(component, {})[prop] = curve.to_string()
        self._save(data)
        logger.info(
            f"Saved curve for {component}.{prop}",
            extra={"component": component, "prop": prop, "store_path": str(self.path)},
        )

    def delete(self, component: str, prop: str) -> bool:
        data = self._load()
        props = data.get(component, {})
        if prop not in props:
            return False
        del props[prop]
        if not props:
            data.pop(component, None)
        self._save(data)
        return True

    def items(self) -> list[tuple[str, str, str]]:
        """All stored (component, prop, curve_string) entries, sorted."""
        data = self._load()
        return [
            (component, prop, text)
            for component in sorted(data)
            for prop, text in sorted(data[component].items())
        ]
