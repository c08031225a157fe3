"""MagicaVoxel .vox reading and writing.

Only the chunks needed for a single model are handled:

    "VOX " <version>
    MAIN
      SIZE  width, depth, height
      XYZI  count, count * (x, y, z, palette_index)
      RGBA  256 * (r, g, b, a)

All integers are little-endian u32 and every chunk is
``id(4) + content_size(4) + children_size(4) + content + children``.
Format reference:
https://github.com/ephtracy/voxel-model/blob/master/MagicaVoxel-file-format-vox.txt
"""

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

import numpy as np

from ..buffer import Rgba, VoxelBuffer
from ..errors import VoxEncodeError, VoxFormatError

SIGNATURE = b"VOX "
VERSION = 150

INT_SIZE = 4
CHUNK_HEADER_SIZE = INT_SIZE * 3
PALETTE_COUNT = 256
# Palette index 0 is reserved for "no voxel".
MAX_COLORS = PALETTE_COUNT - 1
MAX_COORDINATE = 255
U32_MAX = 0xFFFFFFFF


def _empty_palette() -> np.ndarray:
    return np.zeros((PALETTE_COUNT, 4), dtype=np.uint8)


@dataclass
class VoxModel:
    """A single .vox model.

    Attributes:
        size: Model dimensions ``(width, depth, height)``
        voxels: ``(N, 4)`` uint8 array of ``(x, y, z, palette_index)`` records
        palette: ``(256, 4)`` uint8 RGBA array; row ``i`` is palette index ``i + 1``
        version: File format version
    """

    size: Tuple[int, int, int]
    voxels: np.ndarray = field(default_factory=lambda: np.zeros((0, 4), dtype=np.uint8))
    palette: np.ndarray = field(default_factory=_empty_palette)
    version: int = VERSION

    @property
    def num_voxels(self) -> int:
        return int(self.voxels.shape[0])

    @property
    def num_colors(self) -> int:
        """Number of distinct palette indices referenced by voxels."""
        return int(np.unique(self.voxels[:, 3]).size)

    def color(self, palette_index: int) -> Rgba:
        """Look up the RGBA color of a 1-based palette index."""
        if not 1 <= palette_index <= PALETTE_COUNT:
            raise VoxFormatError(f"Palette index {palette_index} out of range 1..{PALETTE_COUNT}")
        return Rgba(*(int(c) for c in self.palette[palette_index - 1]))

    def to_buffer(self) -> VoxelBuffer:
        """Rebuild an RGBA voxel buffer from this model."""
        buffer = VoxelBuffer(*self.size, voxel_type=Rgba)
        for x, y, z, i in self.voxels.tolist():
            if not (x < self.size[0] and y < self.size[1] and z < self.size[2]):
                raise VoxFormatError(f"Voxel {(x, y, z)} outside model size {self.size}")
            buffer.set(x, y, z, self.color(i))
        return buffer


# Writing

def vox_chunk(chunk_id: bytes, content: bytes = b"", children: bytes = b"") -> bytes:
    """Pack a chunk header followed by its content and child chunks."""
    if len(chunk_id) != 4:
        raise ValueError(f"Chunk id must be 4 bytes, got {chunk_id!r}")
    return chunk_id + struct.pack("<II", len(content), len(children)) + content + children


def model_from_buffer(buffer: VoxelBuffer) -> VoxModel:
    """Scan an RGBA buffer into voxel records and a palette.

    Voxels are visited in ascending linear index order. Voxels with alpha 0
    are skipped. Every other distinct color gets the next free palette slot
    the first time it is seen, starting at 1.

    Raises:
        TypeError: If the buffer does not hold Rgba voxels
        VoxEncodeError: If the contents exceed what the format can store
    """
    if buffer.voxel_type is not Rgba:
        raise TypeError(
            f"Only Rgba buffers can be encoded, got {buffer.voxel_type.__name__}"
        )

    width, depth, height = buffer.dimensions
    if max(buffer.dimensions) > U32_MAX:
        raise VoxEncodeError(f"Dimensions {buffer.dimensions} exceed u32 range")

    records = buffer.as_array().reshape(-1, 4)
    ids = np.flatnonzero(records[:, 3])
    colors = np.ascontiguousarray(records[ids])

    # Pack each color into one u32 key so np.unique can deduplicate rows.
    keys = colors.view(np.uint32).ravel()
    unique_keys, first_seen, inverse = np.unique(keys, return_index=True, return_inverse=True)
    if unique_keys.size > MAX_COLORS:
        raise VoxEncodeError(
            f"{unique_keys.size} distinct colors exceed the {MAX_COLORS}-color palette"
        )

    order = np.argsort(first_seen)
    slot = np.empty_like(order)
    slot[order] = np.arange(order.size)

    palette = _empty_palette()
    palette[:order.size] = colors[first_seen[order]]

    if ids.size:
        z, plane = np.divmod(ids, width * depth)
        y, x = np.divmod(plane, width)
    else:
        x = y = z = ids
    if ids.size and max(int(x.max()), int(y.max()), int(z.max())) > MAX_COORDINATE:
        raise VoxEncodeError(
            f"Voxel coordinates above {MAX_COORDINATE} cannot be stored in XYZI records"
        )

    voxels = np.stack([x, y, z, slot[inverse.ravel()] + 1], axis=1).astype(np.uint8)
    return VoxModel(size=(width, depth, height), voxels=voxels, palette=palette)


def encode_model(model: VoxModel) -> bytes:
    """Serialize a model to .vox bytes."""
    count = model.num_voxels
    size_chunk = vox_chunk(b"SIZE", struct.pack("<III", *model.size))
    xyzi_chunk = vox_chunk(
        b"XYZI",
        struct.pack("<I", count) + np.ascontiguousarray(model.voxels, dtype=np.uint8).tobytes(),
    )
    rgba_chunk = vox_chunk(
        b"RGBA", np.ascontiguousarray(model.palette, dtype=np.uint8).tobytes()
    )

    children = size_chunk + xyzi_chunk + rgba_chunk
    if len(children) > U32_MAX:
        raise VoxEncodeError(f"{count} voxels exceed the u32 chunk size limit")

    return SIGNATURE + struct.pack("<I", model.version) + vox_chunk(b"MAIN", b"", children)


def write_model(model: VoxModel, path: Path | str) -> Path:
    """Serialize ``model`` and write it to ``path`` in a single write.

    I/O errors propagate unchanged and no partial file is cleaned up.
    """
    path = Path(path)
    path.write_bytes(encode_model(model))
    return path


class VoxEncoder:
    """Encode RGBA voxel buffers as .vox files.

    Args:
        version: Format version written after the signature (default: 150)

    Example:
        >>> encoder = VoxEncoder()
        >>> encoder.save(buffer, "dragon_8.vox")
    """

    def __init__(self, version: int = VERSION):
        if not 0 <= version <= U32_MAX:
            raise ValueError(f"Version {version} does not fit in a u32")
        self.version = version

    def to_model(self, buffer: VoxelBuffer) -> VoxModel:
        """Scan ``buffer`` into records and palette tagged with this version."""
        model = model_from_buffer(buffer)
        model.version = self.version
        return model

    def encode(self, buffer: VoxelBuffer) -> bytes:
        return encode_model(self.to_model(buffer))

    def save(self, buffer: VoxelBuffer, path: Path | str) -> Path:
        return write_model(self.to_model(buffer), path)


def encode_vox(buffer: VoxelBuffer) -> bytes:
    """Encode an RGBA voxel buffer as .vox bytes."""
    return VoxEncoder().encode(buffer)


def save_vox(buffer: VoxelBuffer, path: Path | str) -> Path:
    """Encode ``buffer`` and write it to ``path``."""
    return VoxEncoder().save(buffer, path)


# Reading

def _unpack(fmt: str, data: bytes, offset: int) -> tuple:
    try:
        return struct.unpack_from(fmt, data, offset)
    except struct.error as e:
        raise VoxFormatError(f"Truncated .vox data at byte {offset}: {e}")


def _iter_chunks(data: bytes, start: int, end: int):
    offset = start
    while offset < end:
        chunk_id = data[offset:offset + 4]
        content_size, children_size = _unpack("<II", data, offset + 4)
        content_start = offset + CHUNK_HEADER_SIZE
        children_start = content_start + content_size
        chunk_end = children_start + children_size
        if chunk_end > end:
            raise VoxFormatError(
                f"Chunk {chunk_id!r} at byte {offset} runs past its parent"
            )
        yield chunk_id, content_start, children_start, chunk_end
        offset = chunk_end


def decode_vox(data: bytes) -> VoxModel:
    """Parse .vox bytes holding a single model.

    Unknown chunks are skipped.

    Raises:
        VoxFormatError: If the data is not a well-formed single-model file
    """
    if data[:4] != SIGNATURE:
        raise VoxFormatError(f"Bad signature {data[:4]!r}, expected {SIGNATURE!r}")
    (version,) = _unpack("<I", data, 4)

    chunks = list(_iter_chunks(data, 8, len(data)))
    if not chunks or chunks[0][0] != b"MAIN":
        raise VoxFormatError("Missing MAIN chunk")
    _, _, children_start, main_end = chunks[0]

    size = voxels = palette = None
    for chunk_id, content_start, _, _ in _iter_chunks(data, children_start, main_end):
        if chunk_id == b"SIZE":
            if size is not None:
                raise VoxFormatError("Multiple models are not supported")
            size = _unpack("<III", data, content_start)
        elif chunk_id == b"XYZI":
            (count,) = _unpack("<I", data, content_start)
            start = content_start + INT_SIZE
            raw = data[start:start + count * 4]
            if len(raw) != count * 4:
                raise VoxFormatError(f"XYZI declares {count} voxels but data is truncated")
            voxels = np.frombuffer(raw, dtype=np.uint8).reshape(count, 4).copy()
        elif chunk_id == b"RGBA":
            raw = data[content_start:content_start + PALETTE_COUNT * 4]
            if len(raw) != PALETTE_COUNT * 4:
                raise VoxFormatError("RGBA chunk is truncated")
            palette = np.frombuffer(raw, dtype=np.uint8).reshape(PALETTE_COUNT, 4).copy()

    if size is None or voxels is None:
        raise VoxFormatError("Missing SIZE or XYZI chunk")
    if palette is None:
        raise VoxFormatError("Missing RGBA chunk; the default palette is not supported")

    return VoxModel(size=tuple(size), voxels=voxels, palette=palette, version=version)


def read_vox(path: Path | str) -> VoxModel:
    """Read a single-model .vox file."""
    return decode_vox(Path(path).read_bytes())
