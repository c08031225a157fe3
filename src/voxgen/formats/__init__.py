"""Voxel file formats."""

from .vox import (
    VoxEncoder,
    VoxModel,
    decode_vox,
    encode_model,
    encode_vox,
    model_from_buffer,
    read_vox,
    save_vox,
    write_model,
)

__all__ = [
    "VoxEncoder",
    "VoxModel",
    "decode_vox",
    "encode_model",
    "encode_vox",
    "model_from_buffer",
    "read_vox",
    "save_vox",
    "write_model",
]
