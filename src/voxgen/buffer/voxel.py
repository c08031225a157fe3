"""Voxel record types stored in a VoxelBuffer."""

from typing import ClassVar, NamedTuple, Protocol, Sequence, Type, TypeVar, runtime_checkable

# Per-voxel record size of the .vox XYZI chunk.
MAX_VOXEL_SIZE = 4

# An RGBA voxel channel count.
CHANNEL_COUNT_RGBA = 4

V = TypeVar("V", bound="Voxel")


@runtime_checkable
class Voxel(Protocol):
    """A fixed-width voxel record.

    Voxel data is stored densely in a buffer as a byte stream, so every voxel
    kind declares its byte width and converts to and from a window of exactly
    that many bytes.
    """

    SIZE: ClassVar[int]

    def to_bytes(self) -> bytes:
        ...

    @classmethod
    def from_bytes(cls: Type[V], data: Sequence[int]) -> V:
        ...


def _check_window(cls, data: Sequence[int]) -> None:
    if len(data) != cls.SIZE:
        raise ValueError(
            f"{cls.__name__} expects {cls.SIZE} bytes, got {len(data)}"
        )


class Rgba(NamedTuple):
    """An RGBA voxel.

    This is the voxel type encoded to MagicaVoxel files. MagicaVoxel does not
    render the alpha channel, so an alpha of 0 marks the voxel as empty and
    removes it from the output entirely.
    """

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    SIZE = CHANNEL_COUNT_RGBA

    def to_bytes(self) -> bytes:
        return bytes(self)

    @classmethod
    def from_bytes(cls, data: Sequence[int]) -> "Rgba":
        _check_window(cls, data)
        return cls(*(int(c) for c in data))

    @property
    def is_transparent(self) -> bool:
        return self.a == 0


class Indexed(NamedTuple):
    """A palette-indexed voxel holding a single color slot, 0 meaning empty."""

    index: int = 0

    SIZE = 1

    def to_bytes(self) -> bytes:
        return bytes((self.index,))

    @classmethod
    def from_bytes(cls, data: Sequence[int]) -> "Indexed":
        _check_window(cls, data)
        return cls(int(data[0]))


def check_voxel_type(voxel_type: type) -> int:
    """Validate a voxel class and return its byte width."""
    size = getattr(voxel_type, "SIZE", None)
    if not isinstance(size, int) or isinstance(size, bool):
        raise TypeError(f"{voxel_type!r} does not declare an integer SIZE")
    if not 0 < size <= MAX_VOXEL_SIZE:
        raise ValueError(
            f"Voxel size must be between 1 and {MAX_VOXEL_SIZE} bytes, got {size}"
        )
    if not callable(getattr(voxel_type, "from_bytes", None)):
        raise TypeError(f"{voxel_type!r} does not implement from_bytes")
    return size
