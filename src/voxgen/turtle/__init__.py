"""Turtle graphics module."""

from .raster import bresenham
from .turtle import DEFAULT_COLOR, TurtleGraphics, TurtleState, as_rgba

__all__ = ["TurtleGraphics", "TurtleState", "DEFAULT_COLOR", "as_rgba", "bresenham"]
