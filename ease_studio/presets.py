"""Preset easing catalog.

Presets are grid-space path strings on the default 500 unit grid. The
catalog and the per-component defaults are read-only mappings built once at
import time.
"""

from collections.abc import Mapping
from types import MappingProxyType

from ease_studio.config import settings

DEFAULT_GRID_PATH = "M0,500 C63,309 141,163 220,89 316,-1 409,-0.499 500,0"

PRESETS: Mapping[str, str] = MappingProxyType(
    {
        "linear": "M0,500 C166.667,333.333 333.333,166.667 500,0",
        "ease": "M0,500 C125,450 125,0 500,0",
        "ease-in": "M0,500 C210,500 500,0 500,0",
        "ease-out": "M0,500 C0,500 290,0 500,0",
        "ease-in-out": "M0,500 C210,500 290,0 500,0",
        "power2.in": "M0,500 C91,500.499 184,501 280,411 359,337 437,191 500,0",
        "power2.out": DEFAULT_GRID_PATH,
        "expo.out": "M0,500 C80,0 150,0 500,0",
        "back.in": "M0,500 C300,640 367.5,477.5 500,0",
        "back.out": "M0,500 C87.5,57.5 160,-137.5 500,0",
        "gentle.out": "M0,500 C63,309 153,248.5 232,174.5 328,84.5 408.5,43 500,43.5",
    }
)

# Preset used when nothing is stored for a component
DEFAULT_COMPONENT_PRESETS: Mapping[str, str] = MappingProxyType(
    {
        "chat_list": "power2.out",
        "message_bubble": "back.out",
        "sidebar": "ease-in-out",
        "modal": "expo.out",
    }
)


def get_preset(name: str | None) -> str:
    """Get a preset path string, falling back to the configured default."""
    if name and name in PRESETS:
        return PRESETS[name]
    return PRESETS.get(settings.default_preset, DEFAULT_GRID_PATH)


def preset_for_component(component: str) -> str:
    """Name of the preset a component starts with."""
    return DEFAULT_COMPONENT_PRESETS.get(component, settings.default_preset)


def list_presets() -> list[str]:
    """All preset names in catalog order."""
    return list(PRESETS)
