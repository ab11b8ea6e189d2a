"""Basic 2D value types: vectors and RGBA colours."""

from __future__ import annotations

import math
from dataclasses import dataclass

_EPSILON = 1e-6


@dataclass(frozen=True)
class Vec2:
    """An immutable two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> Vec2:
        return Vec2(self.x * s, self.y * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> Vec2:
        return Vec2(self.x / s, self.y / s)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vec2:
        """Unit vector in the same direction; near-zero vectors are returned unchanged."""
        length = self.length()
        if length > _EPSILON:
            return Vec2(self.x / length, self.y / length)
        return self

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def perpendicular(self) -> Vec2:
        """The vector rotated a quarter turn: (-y, x)."""
        return Vec2(-self.y, self.x)

    def cross(self, other: Vec2) -> float:
        """The z component of the 2D cross product."""
        return self.x * other.y - self.y * other.x


def _to_channel(value: float) -> int:
    return max(0, min(255, int(value)))


@dataclass(frozen=True)
class Color:
    """An 8-bit-per-channel RGBA colour."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"colour channel {name} must be an int in 0..255, got {value!r}")

    @staticmethod
    def lerp(a: Color, b: Color, t: float) -> Color:
        """Linear interpolation between two colours, truncating each channel."""
        u = 1.0 - t
        return Color(
            _to_channel(a.r * u + b.r * t),
            _to_channel(a.g * u + b.g * t),
            _to_channel(a.b * u + b.b * t),
            _to_channel(a.a * u + b.a * t),
        )

    def to_rgba(self) -> int:
        """Pack as a 32-bit integer with red in the lowest byte and alpha in the highest."""
        return (self.a << 24) | (self.b << 16) | (self.g << 8) | self.r

    def with_alpha(self, new_alpha: int) -> Color:
        return Color(self.r, self.g, self.b, new_alpha)

    def scale_alpha(self, factor: float) -> Color:
        """Multiply alpha by ``factor``, clamped to 0..255."""
        new_alpha = int(min(255.0, max(0.0, self.a * factor)))
        return Color(self.r, self.g, self.b, new_alpha)