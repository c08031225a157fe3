"""Voxel buffer module."""

from .voxel import Voxel, Rgba, Indexed, CHANNEL_COUNT_RGBA, MAX_VOXEL_SIZE
from .voxel_buffer import VoxelBuffer

__all__ = ["Voxel", "Rgba", "Indexed", "VoxelBuffer", "CHANNEL_COUNT_RGBA", "MAX_VOXEL_SIZE"]
