"""Shared fixtures for ease_studio tests."""

import pytest

from ease_studio.coords import CoordinateMapper
from ease_studio.path_model import CurvePath
from ease_studio.presets import DEFAULT_GRID_PATH

# Canonical unit-space form of DEFAULT_GRID_PATH
DEFAULT_EASE_STRING = "M0,0,C0.126,0.382,0.282,0.674,0.44,0.822,0.632,1.002,0.818,1.001,1,1"

# Second segment's incoming control sits behind the joint anchor, so time runs backward
NON_MONOTONIC_GRID_PATH = "M0,500 C100,400 400,300 250,250 300,200 400,100 500,0"


class FakeClock:
    """Manually advanced clock for driver tests."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mapper() -> CoordinateMapper:
    return CoordinateMapper(grid_size=500.0, overshoot=200.0)


@pytest.fixture
def default_path(mapper: CoordinateMapper) -> CurvePath:
    return CurvePath.from_path_string(DEFAULT_GRID_PATH, mapper=mapper)
