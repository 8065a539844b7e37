"""Tests for the editable path model."""

import random

import pytest

from ease_studio.coords import CoordinateMapper
from ease_studio.path_model import (
    CurvePath,
    DegenerateSegmentError,
    InvalidPathError,
    PathError,
    PathParseError,
)
from ease_studio.presets import DEFAULT_GRID_PATH, PRESETS
from ease_studio.types import HandleRole, Point

THREE_SEGMENT_PATH = (
    "M0,500 C50,450 100,400 150,350 200,300 250,250 300,200 350,150 400,100 500,0"
)


class TestFromPathString:
    def test_parse_default(self) -> None:
        path = CurvePath.from_path_string(DEFAULT_GRID_PATH)
        assert len(path.segments) == 2
        assert path.anchors == [Point(x=0, y=500), Point(x=220, y=89), Point(x=500, y=0)]

    def test_round_trip_string(self) -> None:
        path = CurvePath.from_path_string(DEFAULT_GRID_PATH)
        assert path.to_path_string() == DEFAULT_GRID_PATH

    def test_line_is_elevated(self) -> None:
        path = CurvePath.from_path_string("M0,500 L500,0")
        assert len(path.segments) == 1
        segment = path.segments[0]
        assert segment.control1.x == pytest.approx(500 / 3)
        assert segment.control1.y == pytest.approx(500 - 500 / 3)

    def test_quadratic_is_elevated(self) -> None:
        path = CurvePath.from_path_string("M0,500 Q0,0 500,0")
        segment = path.segments[0]
        assert segment.control1.x == pytest.approx(0)
        assert segment.control1.y == pytest.approx(500 / 3)
        assert segment.control2.x == pytest.approx(500 / 3)
        assert segment.control2.y == pytest.approx(0)

    def test_empty_string(self) -> None:
        with pytest.raises(PathParseError):
            CurvePath.from_path_string("   ")

    def test_move_only(self) -> None:
        with pytest.raises(PathParseError):
            CurvePath.from_path_string("M0,500")

    def test_arc_rejected(self) -> None:
        with pytest.raises(PathParseError):
            CurvePath.from_path_string("M0,500 A250,250 0 0 1 500,0")

    def test_disconnected_rejected(self) -> None:
        d = "M0,500 C100,400 200,300 250,250 M300,200 C350,150 400,100 500,0"
        with pytest.raises(PathParseError):
            CurvePath.from_path_string(d)

    @pytest.mark.parametrize(
        "d",
        [
            "M0,500 C100,1e999 200,300 500,0",
            "M0,500 C100,400 -1e999,300 500,0",
        ],
    )
    def test_non_finite_coordinates_rejected(self, d: str) -> None:
        with pytest.raises(PathParseError):
            CurvePath.from_path_string(d)

    def test_errors_are_value_errors(self) -> None:
        assert issubclass(PathError, ValueError)
        assert issubclass(PathParseError, PathError)


class TestConstruction:
    def test_degenerate_segment(self) -> None:
        with pytest.raises(DegenerateSegmentError):
            CurvePath.from_path_string("M0,500 C100,400 200,300 0,500")

    def test_anchors_must_increase(self) -> None:
        d = "M0,500 C100,400 200,300 300,200 310,150 320,100 250,50 350,40 450,10 500,0"
        with pytest.raises(InvalidPathError):
            CurvePath.from_path_string(d)

    def test_must_end_at_grid_edge(self) -> None:
        with pytest.raises(InvalidPathError):
            CurvePath.from_path_string("M0,500 C100,400 200,300 400,0")

    def test_must_start_at_zero(self) -> None:
        with pytest.raises(InvalidPathError):
            CurvePath.from_path_string("M20,500 C100,400 200,300 500,0")

    def test_nan_point_rejected(self) -> None:
        points = [
            Point(x=0, y=500),
            Point(x=float("nan"), y=400),
            Point(x=200, y=300),
            Point(x=500, y=0),
        ]
        with pytest.raises(InvalidPathError):
            CurvePath(points)

    def test_wrong_point_count(self) -> None:
        with pytest.raises(InvalidPathError):
            CurvePath([Point(x=0, y=500), Point(x=500, y=0)])

    def test_create_default(self) -> None:
        path = CurvePath.create_default()
        assert path.to_path_string() == DEFAULT_GRID_PATH

    def test_create_default_unknown_preset_falls_back(self) -> None:
        path = CurvePath.create_default("no-such-preset")
        assert path.to_path_string() == DEFAULT_GRID_PATH

    def test_create_default_scales_to_grid(self) -> None:
        path = CurvePath.create_default("linear", CoordinateMapper(grid_size=250))
        assert path.anchors[0] == Point(x=0, y=250)
        assert path.anchors[-1] == Point(x=250, y=0)

    def test_all_presets_build(self) -> None:
        for name in PRESETS:
            path = CurvePath.create_default(name)
            assert path.anchors[0].x == 0
            assert path.anchors[-1].x == 500


class TestHandles:
    def test_handle_roles(self, default_path: CurvePath) -> None:
        handles = default_path.get_handles()
        assert [h.index for h in handles] == list(range(7))
        roles = [h.role for h in handles]
        assert roles == [
            HandleRole.ANCHOR,
            HandleRole.CONTROL,
            HandleRole.CONTROL,
            HandleRole.ANCHOR,
            HandleRole.CONTROL,
            HandleRole.CONTROL,
            HandleRole.ANCHOR,
        ]

    def test_endpoints_flagged(self, default_path: CurvePath) -> None:
        handles = default_path.get_handles()
        assert handles[0].is_endpoint
        assert handles[6].is_endpoint
        assert not handles[3].is_endpoint

    def test_controls_know_their_anchor(self, default_path: CurvePath) -> None:
        handles = default_path.get_handles()
        assert handles[1].anchor_index == 0
        assert handles[2].anchor_index == 3
        assert handles[4].anchor_index == 3
        assert handles[5].anchor_index == 6


class TestMovePoint:
    def test_control_moves_freely(self, default_path: CurvePath) -> None:
        handle = default_path.get_handles()[1]
        default_path.move_point(handle, Point(x=300, y=-150))
        assert default_path.points[1] == Point(x=300, y=-150)

    def test_control_clamped_to_bounds(self, default_path: CurvePath) -> None:
        handle = default_path.get_handles()[4]
        default_path.move_point(handle, Point(x=600, y=900))
        assert default_path.points[4] == Point(x=500, y=700)

    def test_anchor_drags_controls(self, default_path: CurvePath) -> None:
        handle = default_path.get_handles()[3]
        default_path.move_point(handle, Point(x=230, y=99))
        assert default_path.points[3] == Point(x=230, y=99)
        assert default_path.points[2] == Point(x=151, y=173)
        assert default_path.points[4] == Point(x=326, y=9)

    def test_endpoint_keeps_time(self, default_path: CurvePath) -> None:
        start = default_path.get_handles()[0]
        default_path.move_point(start, Point(x=50, y=450))
        assert default_path.points[0] == Point(x=0, y=450)

        end = default_path.get_handles()[6]
        default_path.move_point(end, Point(x=420, y=30))
        assert default_path.points[6] == Point(x=500, y=30)

    def test_anchor_clamped_before_previous(self) -> None:
        """Dragging across the previous anchor stops just short of it."""
        path = CurvePath.from_path_string(THREE_SEGMENT_PATH)
        handle = path.get_handles()[6]
        path.move_point(handle, Point(x=100, y=200))
        anchors = path.anchors
        assert anchors[2].x == pytest.approx(150 + path.anchor_epsilon)
        assert anchors[1].x < anchors[2].x

    def test_anchor_clamped_before_next(self) -> None:
        path = CurvePath.from_path_string(THREE_SEGMENT_PATH)
        handle = path.get_handles()[3]
        path.move_point(handle, Point(x=480, y=350))
        assert path.anchors[1].x == pytest.approx(300 - path.anchor_epsilon)

    def test_anchor_ordering_holds_for_random_moves(self) -> None:
        path = CurvePath.from_path_string(THREE_SEGMENT_PATH)
        rng = random.Random(1234)
        anchor_handles = [h for h in path.get_handles() if h.is_anchor]
        for _ in range(500):
            handle = rng.choice(anchor_handles)
            path.move_point(handle, Point(x=rng.uniform(-100, 600), y=rng.uniform(-300, 800)))
            xs = [a.x for a in path.anchors]
            assert all(a < b for a, b in zip(xs, xs[1:]))
            assert xs[0] == 0
            assert xs[-1] == 500

    def test_unknown_handle(self, default_path: CurvePath) -> None:
        handle = default_path.get_handles()[0].model_copy(update={"index": 99})
        with pytest.raises(IndexError):
            default_path.move_point(handle, Point(x=0, y=0))

    def test_returns_self(self, default_path: CurvePath) -> None:
        handle = default_path.get_handles()[1]
        assert default_path.move_point(handle, Point(x=10, y=10)) is default_path


class TestCopy:
    def test_copy_is_independent(self, default_path: CurvePath) -> None:
        clone = default_path.copy()
        assert clone == default_path
        clone.move_point(clone.get_handles()[1], Point(x=10, y=10))
        assert clone != default_path
