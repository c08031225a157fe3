"""Procedural voxel model generation from L-Systems."""

__version__ = "0.1.0"

from .buffer import Indexed, Rgba, Voxel, VoxelBuffer
from .formats import VoxModel, encode_vox, read_vox, save_vox
from .grammar import Command, LSystem, PRESETS, get_preset
from .turtle import TurtleGraphics
from .pipeline import Renderer, RenderResult, render
from .utils.config import RenderConfig

__all__ = [
    "Indexed",
    "Rgba",
    "Voxel",
    "VoxelBuffer",
    "VoxModel",
    "encode_vox",
    "read_vox",
    "save_vox",
    "Command",
    "LSystem",
    "PRESETS",
    "get_preset",
    "TurtleGraphics",
    "Renderer",
    "RenderResult",
    "render",
    "RenderConfig",
]
