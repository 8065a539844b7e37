"""Ease Studio - visual editing and preview of custom easing curves."""

from ease_studio.coords import CoordinateMapper
from ease_studio.driver import AnimationDriver
from ease_studio.editor import CurveEditor
from ease_studio.evaluator import build_evaluator
from ease_studio.normalizer import CurveNormalizer, normalize_path, parse_normalized_curve
from ease_studio.path_model import CurvePath, PathError
from ease_studio.session import EaseSession

__all__ = [
    "AnimationDriver",
    "CoordinateMapper",
    "CurveEditor",
    "CurveNormalizer",
    "CurvePath",
    "EaseSession",
    "PathError",
    "build_evaluator",
    "normalize_path",
    "parse_normalized_curve",
]
