"""Dense array-based voxel buffer."""

import operator
from typing import Generic, Iterator, Optional, Tuple, Type, TypeVar

import numpy as np

from ..errors import BufferOverflowError, VoxelIndexError
from .voxel import Rgba, check_voxel_type

T = TypeVar("T")


class VoxelBuffer(Generic[T]):
    """A generic dense voxel buffer.

    Every voxel in the volume has data stored for it, whether it is empty or
    not, in one contiguous ``uint8`` array of
    ``width * depth * height * voxel_type.SIZE`` bytes. This trades memory for
    fast updates, so it is not meant for very large volumes.

    Coordinates follow MagicaVoxel conventions: ``(0, 0, 0)`` is the bottom
    left corner closest to the camera, increasing ``x`` moves right,
    increasing ``y`` moves away from the camera and increasing ``z`` moves up.
    Voxels are laid out row-major with linear index
    ``x + y * width + z * width * depth``.
    """

    def __init__(
        self,
        width: int,
        depth: int,
        height: int,
        voxel_type: Type[T] = Rgba,
    ):
        """Allocate a zero-filled buffer.

        Args:
            width: Size along x
            depth: Size along y
            height: Size along z
            voxel_type: Voxel record class (default: Rgba)

        Raises:
            ValueError: If a dimension is negative
            BufferOverflowError: If the byte size overflows the addressable range
        """
        dims = tuple(operator.index(d) for d in (width, depth, height))
        if any(d < 0 for d in dims):
            raise ValueError(f"Buffer dimensions must be non-negative, got {dims}")

        self.voxel_type = voxel_type
        self.voxel_size = check_voxel_type(voxel_type)

        length = self.byte_length(*dims, voxel_size=self.voxel_size)
        if length is None:
            raise BufferOverflowError(
                f"VoxelBuffer of {dims} with {self.voxel_size}-byte voxels "
                f"overflows the addressable size"
            )

        self._width, self._depth, self._height = dims
        self._data = np.zeros(length, dtype=np.uint8)

    @staticmethod
    def byte_length(
        width: int, depth: int, height: int, voxel_size: int = Rgba.SIZE
    ) -> Optional[int]:
        """Return the storage size in bytes, or None if it overflows ``intp``."""
        limit = np.iinfo(np.intp).max
        size = voxel_size
        for d in (width, depth, height):
            size *= d
            if size > limit:
                return None
        return size

    @property
    def width(self) -> int:
        return self._width

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def height(self) -> int:
        return self._height

    @property
    def dimensions(self) -> Tuple[int, int, int]:
        """Buffer dimensions as ``(width, depth, height)``."""
        return (self._width, self._depth, self._height)

    @property
    def voxel_count(self) -> int:
        return self._width * self._depth * self._height

    def __len__(self) -> int:
        return self.voxel_count

    def __repr__(self) -> str:
        return (
            f"VoxelBuffer(width={self._width}, depth={self._depth}, "
            f"height={self._height}, voxel_type={self.voxel_type.__name__})"
        )

    # Addressing

    def index(self, x: int, y: int, z: int) -> int:
        """Map a coordinate to its linear index.

        Raises:
            VoxelIndexError: If any coordinate is outside the buffer
        """
        x, y, z = operator.index(x), operator.index(y), operator.index(z)
        if not (0 <= x < self._width and 0 <= y < self._depth and 0 <= z < self._height):
            raise VoxelIndexError(
                f"VoxelBuffer index {(x, y, z)} out of bounds {self.dimensions}"
            )
        return x + y * self._width + z * self._width * self._depth

    def coordinate(self, index: int) -> Tuple[int, int, int]:
        """Map a linear index back to its ``(x, y, z)`` coordinate.

        Raises:
            VoxelIndexError: If the index is outside the buffer
        """
        index = self._check_index(index)
        plane_size = self._width * self._depth
        z, plane = divmod(index, plane_size)
        y, x = divmod(plane, self._width)
        return (x, y, z)

    def _check_index(self, index: int) -> int:
        index = operator.index(index)
        if not 0 <= index < self.voxel_count:
            raise VoxelIndexError(
                f"VoxelBuffer id {index} out of bounds {self.voxel_count}"
            )
        return index

    def _window(self, index: int) -> slice:
        start = index * self.voxel_size
        return slice(start, start + self.voxel_size)

    # Access

    def get(self, x: int, y: int, z: int) -> T:
        """Get the voxel at ``(x, y, z)``."""
        return self._decode(self.index(x, y, z))

    def set(self, x: int, y: int, z: int, voxel: T) -> None:
        """Overwrite the voxel at ``(x, y, z)``."""
        self._encode(self.index(x, y, z), voxel)

    def get_by_index(self, index: int) -> T:
        """Get the voxel at a linear index."""
        return self._decode(self._check_index(index))

    def set_by_index(self, index: int, voxel: T) -> None:
        """Overwrite the voxel at a linear index."""
        self._encode(self._check_index(index), voxel)

    def view(self, x: int, y: int, z: int) -> memoryview:
        """Return a writable byte view over the record at ``(x, y, z)``."""
        return memoryview(self._data)[self._window(self.index(x, y, z))]

    def _decode(self, index: int) -> T:
        return self.voxel_type.from_bytes(self._data[self._window(index)].tobytes())

    def _encode(self, index: int, voxel: T) -> None:
        raw = voxel.to_bytes()
        if len(raw) != self.voxel_size:
            raise ValueError(
                f"Voxel encodes to {len(raw)} bytes, buffer expects {self.voxel_size}"
            )
        self._data[self._window(index)] = np.frombuffer(raw, dtype=np.uint8)

    # Iteration

    def enumerate_voxels(self) -> Iterator[Tuple[int, int, int, T]]:
        """Yield ``(x, y, z, voxel)`` in ascending linear index order.

        ``x`` varies fastest, then ``y``, then ``z``. Each call starts a new
        pass over the buffer.
        """
        data = memoryview(self._data)
        size = self.voxel_size
        decode = self.voxel_type.from_bytes
        offset = 0
        for z in range(self._height):
            for y in range(self._depth):
                for x in range(self._width):
                    yield x, y, z, decode(data[offset:offset + size])
                    offset += size

    def __iter__(self) -> Iterator[T]:
        for _, _, _, voxel in self.enumerate_voxels():
            yield voxel

    # Bulk views

    def as_array(self) -> np.ndarray:
        """Return a view of the storage shaped ``(height, depth, width, voxel_size)``."""
        return self._data.reshape(self._height, self._depth, self._width, self.voxel_size)

    def tobytes(self) -> bytes:
        return self._data.tobytes()

    def save(self, path):
        """Save an Rgba buffer as a MagicaVoxel .vox file.

        Set the alpha channel of a voxel to 0 to leave it out of the file.
        """
        from ..formats.vox import save_vox
        return save_vox(self, path)

    def count_nonempty(self, channel: Optional[int] = None) -> int:
        """Count voxels with a non-zero byte.

        Args:
            channel: Only look at this byte of each record (e.g. 3 for RGBA
                alpha). If None, any non-zero byte counts.
        """
        records = self._data.reshape(-1, self.voxel_size)
        if channel is not None:
            return int(np.count_nonzero(records[:, channel]))
        return int(np.count_nonzero(records.any(axis=1)))
