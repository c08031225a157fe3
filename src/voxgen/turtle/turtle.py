"""LOGO-style turtle graphics over an RGBA voxel buffer."""

import math
from dataclasses import dataclass, replace
from typing import List, Sequence

from ..buffer import Rgba, VoxelBuffer
from .raster import Point, bresenham

DEFAULT_COLOR = Rgba(0, 0, 0, 255)


def as_rgba(color: Sequence[int]) -> Rgba:
    """Coerce an ``(r, g, b, a)`` sequence to an Rgba voxel."""
    if isinstance(color, Rgba):
        return color
    if len(color) != 4:
        raise ValueError(f"Expected an (r, g, b, a) color, got {color!r}")
    return Rgba(*(int(c) for c in color))


@dataclass
class TurtleState:
    """Position, heading (radians, 0 faces east) and drawing color."""

    x: int = 0
    y: int = 0
    heading: float = 0.0
    color: Rgba = DEFAULT_COLOR


class TurtleGraphics:
    """Draw on a voxel buffer with turtle graphics commands.

    The turtle moves in the ``z = 0`` plane of an RGBA buffer. It starts at
    ``(0, 0)`` facing east with the drawing color opaque black. Lines are
    rasterized with Bresenham's algorithm and include both endpoints.

    Example:
        >>> turtle = TurtleGraphics(3, 3, 3)
        >>> turtle.step(1.0)
        >>> turtle.left(math.pi / 2)
        >>> turtle.draw(2.0)
        >>> turtle.buffer.save("mid_y_line.vox")
    """

    def __init__(self, size_x: int, size_y: int, size_z: int):
        self._buffer = VoxelBuffer(size_x, size_y, size_z, voxel_type=Rgba)
        self._state = TurtleState()

    @property
    def buffer(self) -> VoxelBuffer:
        return self._buffer

    @property
    def state(self) -> TurtleState:
        """A copy of the current turtle state."""
        return replace(self._state)

    @property
    def position(self) -> Point:
        return (self._state.x, self._state.y)

    def set_color(self, color: Sequence[int]) -> None:
        """Set the color used by ``draw``."""
        self._state.color = as_rgba(color)

    def _destination(self, distance: float) -> Point:
        heading = self._state.heading
        return (
            self._state.x + int(distance * math.cos(heading)),
            self._state.y + int(distance * math.sin(heading)),
        )

    def step(self, distance: float) -> None:
        """Move ``distance`` along the heading without drawing.

        Each axis offset is truncated toward zero.
        """
        self._state.x, self._state.y = self._destination(distance)

    def _trace(self, distance: float) -> List[Point]:
        start = self.position
        end = self._destination(distance)
        return list(bresenham(start, end))

    def _paint(self, points: Sequence[Point], colors: Sequence[Rgba]) -> None:
        self._state.x, self._state.y = points[-1]
        for (x, y), color in zip(points, colors):
            self._buffer.view(x, y, 0)[:] = color.to_bytes()

    def draw(self, distance: float) -> None:
        """Move ``distance`` and draw the path in the current color."""
        self.draw_color(distance, self._state.color)

    def draw_color(self, distance: float, color: Sequence[int]) -> None:
        """Move ``distance`` and draw the path in ``color``."""
        points = self._trace(distance)
        self._paint(points, [as_rgba(color)] * len(points))

    def draw_gradient(self, distance: float, colors: Sequence[Sequence[int]]) -> None:
        """Move ``distance`` and color each rasterized point from ``colors`` in order.

        Raises:
            ValueError: If ``colors`` has fewer entries than the line has
                points. The turtle does not move in that case.
        """
        points = self._trace(distance)
        if len(colors) < len(points):
            raise ValueError(
                f"Gradient has {len(colors)} colors but the line has {len(points)} points"
            )
        self._paint(points, [as_rgba(c) for c in colors[:len(points)]])

    def left(self, angle: float) -> None:
        """Rotate ``angle`` radians counter-clockwise."""
        self._state.heading += angle

    def right(self, angle: float) -> None:
        """Rotate ``angle`` radians clockwise."""
        self._state.heading -= angle
