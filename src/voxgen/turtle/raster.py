"""Integer line rasterization."""

from typing import Iterator, Tuple

Point = Tuple[int, int]


def bresenham(start: Point, end: Point) -> Iterator[Point]:
    """Yield every lattice point on the line from ``start`` to ``end``.

    Both endpoints are included and points come out in order from ``start``.
    Works in all octants using integer arithmetic only.
    """
    x, y = start
    x1, y1 = end
    dx = abs(x1 - x)
    dy = -abs(y1 - y)
    sx = 1 if x < x1 else -1
    sy = 1 if y < y1 else -1
    err = dx + dy

    while True:
        yield x, y
        if x == x1 and y == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
