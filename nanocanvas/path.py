"""Vector paths built from move, line and Bézier commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from . import bezier
from .geometry import Vec2

# Control-point distance for approximating a quarter circle with a cubic.
_KAPPA = 0.5522847


class CommandType(enum.Enum):
    MOVE_TO = "move_to"
    LINE_TO = "line_to"
    QUADRATIC_TO = "quadratic_to"
    CUBIC_TO = "cubic_to"


@dataclass(frozen=True)
class Command:
    """One path command with its points (the end point always last)."""

    type: CommandType
    points: tuple[Vec2, ...]


@dataclass
class Path:
    """A sequence of drawing commands, optionally closed."""

    commands: list[Command] = field(default_factory=list)
    closed: bool = False

    def move_to(self, x: float, y: float) -> None:
        self.commands.append(Command(CommandType.MOVE_TO, (Vec2(x, y),)))

    def line_to(self, x: float, y: float) -> None:
        self.commands.append(Command(CommandType.LINE_TO, (Vec2(x, y),)))

    def quadratic_to(self, cx: float, cy: float, x: float, y: float) -> None:
        self.commands.append(Command(CommandType.QUADRATIC_TO, (Vec2(cx, cy), Vec2(x, y))))

    def cubic_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> None:
        self.commands.append(
            Command(CommandType.CUBIC_TO, (Vec2(c1x, c1y), Vec2(c2x, c2y), Vec2(x, y)))
        )

    def close(self) -> None:
        self.closed = True

    def reset(self) -> None:
        self.commands.clear()
        self.closed = False

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        """Append a closed axis-aligned rectangle."""
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close()

    def rounded_rect(self, x: float, y: float, w: float, h: float, r: float) -> None:
        """Append a closed rectangle with quarter-circle corners of radius ``r``."""
        rr = min(r, min(w, h) * 0.5)
        k = rr * (1 - _KAPPA)
        self.move_to(x + rr, y)
        self.line_to(x + w - rr, y)
        self.cubic_to(x + w - k, y, x + w, y + k, x + w, y + rr)
        self.line_to(x + w, y + h - rr)
        self.cubic_to(x + w, y + h - k, x + w - k, y + h, x + w - rr, y + h)
        self.line_to(x + rr, y + h)
        self.cubic_to(x + k, y + h, x, y + h - k, x, y + h - rr)
        self.line_to(x, y + rr)
        self.cubic_to(x, y + k, x + k, y, x + rr, y)
        self.close()

    def offset_path(self, distance: float, quality: int = 3) -> Path:
        """Return a path whose segments are offset by ``distance`` along their normals.

        Move-to points are kept where they are; each following segment is offset
        relative to the original current point.
        """
        result = Path()
        if not self.commands:
            return result
        current = Vec2()
        for command in self.commands:
            kind = command.type
            if kind is CommandType.MOVE_TO:
                current = command.points[0]
                result.move_to(current.x, current.y)
            elif kind is CommandType.LINE_TO:
                end = command.points[0]
                normal = (end - current).normalize().perpendicular()
                shifted = end + normal * distance
                result.line_to(shifted.x, shifted.y)
                current = end
            elif kind is CommandType.QUADRATIC_TO:
                control, end = command.points
                _, c, e = bezier.offset_quadratic(current, control, end, distance, quality)
                result.quadratic_to(c.x, c.y, e.x, e.y)
                current = end
            elif kind is CommandType.CUBIC_TO:
                control1, control2, end = command.points
                _, c1, c2, e = bezier.offset_cubic(
                    current, control1, control2, end, distance, quality
                )
                result.cubic_to(c1.x, c1.y, c2.x, c2.y, e.x, e.y)
                current = end
        if self.closed:
            result.close()
        return result