"""Evaluation, splitting and offsetting of quadratic and cubic Bézier curves."""

from __future__ import annotations

from collections.abc import Callable

from .geometry import Vec2

_EPSILON = 1e-6


def eval_quadratic(p0: Vec2, p1: Vec2, p2: Vec2, t: float) -> Vec2:
    """Point on a quadratic curve at parameter ``t``."""
    mt = 1.0 - t
    return p0 * (mt * mt) + p1 * (2.0 * mt * t) + p2 * (t * t)


def eval_cubic(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """Point on a cubic curve at parameter ``t``."""
    mt = 1.0 - t
    mt2 = mt * mt
    t2 = t * t
    return p0 * (mt2 * mt) + p1 * (3.0 * mt2 * t) + p2 * (3.0 * mt * t2) + p3 * (t2 * t)


def quadratic_derivative(p0: Vec2, p1: Vec2, p2: Vec2, t: float) -> Vec2:
    """First derivative of a quadratic curve at ``t``."""
    return (p1 - p0) * (2.0 * (1.0 - t)) + (p2 - p1) * (2.0 * t)


def cubic_derivative(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """First derivative of a cubic curve at ``t``."""
    mt = 1.0 - t
    return (p1 - p0) * (3.0 * mt * mt) + (p2 - p1) * (6.0 * mt * t) + (p3 - p2) * (3.0 * t * t)


def _lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    return a + (b - a) * t


def split_quadratic(
    p0: Vec2, p1: Vec2, p2: Vec2, t: float = 0.5
) -> tuple[tuple[Vec2, Vec2, Vec2], tuple[Vec2, Vec2, Vec2]]:
    """Split a quadratic curve at ``t`` into left and right control polygons."""
    p01 = _lerp(p0, p1, t)
    p12 = _lerp(p1, p2, t)
    p012 = _lerp(p01, p12, t)
    return (p0, p01, p012), (p012, p12, p2)


def split_cubic(
    p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float = 0.5
) -> tuple[tuple[Vec2, Vec2, Vec2, Vec2], tuple[Vec2, Vec2, Vec2, Vec2]]:
    """Split a cubic curve at ``t`` into left and right control polygons."""
    p01 = _lerp(p0, p1, t)
    p12 = _lerp(p1, p2, t)
    p23 = _lerp(p2, p3, t)
    p012 = _lerp(p01, p12, t)
    p123 = _lerp(p12, p23, t)
    p0123 = _lerp(p012, p123, t)
    return (p0, p01, p012, p0123), (p0123, p123, p23, p3)


def _offset_samples(
    point_at: Callable[[float], Vec2],
    derivative_at: Callable[[float], Vec2],
    distance: float,
    quality: int,
) -> list[Vec2]:
    samples = []
    for i in range(quality + 1):
        t = i / quality
        normal = derivative_at(t).perpendicular().normalize()
        samples.append(point_at(t) + normal * distance)
    return samples


def offset_quadratic(
    p0: Vec2, p1: Vec2, p2: Vec2, distance: float, quality: int = 2
) -> tuple[Vec2, Vec2, Vec2]:
    """Approximate the curve offset by ``distance`` along its normal with a quadratic."""
    quality = max(1, quality)
    points = _offset_samples(
        lambda t: eval_quadratic(p0, p1, p2, t),
        lambda t: quadratic_derivative(p0, p1, p2, t),
        distance,
        quality,
    )
    start, end = points[0], points[-1]
    tangent = (points[1] - start).normalize() + (end - points[-2]).normalize()
    tangent_length = tangent.length()
    if tangent_length > _EPSILON:
        tangent = tangent * (1.0 / tangent_length)
        control = start + tangent * ((end - start).length() / 3.0)
    else:
        control = (start + end) * 0.5
    return start, control, end


def offset_cubic(
    p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, distance: float, quality: int = 3
) -> tuple[Vec2, Vec2, Vec2, Vec2]:
    """Approximate the curve offset by ``distance`` along its normal with a cubic."""
    quality = max(1, quality)
    points = _offset_samples(
        lambda t: eval_cubic(p0, p1, p2, p3, t),
        lambda t: cubic_derivative(p0, p1, p2, p3, t),
        distance,
        quality,
    )
    start, end = points[0], points[-1]
    tangent0 = (points[1] - start).normalize()
    tangent1 = (end - points[-2]).normalize()
    third = (end - start).length() / 3.0
    return start, start + tangent0 * third, end - tangent1 * third, end