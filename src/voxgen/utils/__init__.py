"""Utilities module."""

from .config import RenderConfig
from .colors import gradient, linear_to_srgb, rainbow, srgb_to_linear
from .metadata import MetadataWriter

__all__ = [
    "RenderConfig",
    "MetadataWriter",
    "gradient",
    "linear_to_srgb",
    "rainbow",
    "srgb_to_linear",
]
