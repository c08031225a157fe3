"""Tests for the voxel buffer module."""

import numpy as np
import pytest

from voxgen.buffer import Indexed, Rgba, Voxel, VoxelBuffer
from voxgen.errors import BufferOverflowError, VoxelIndexError


class TestVoxelTypes:
    """Tests for voxel record types."""

    def test_rgba_bytes(self):
        """Rgba converts to and from a 4-byte window."""
        red = Rgba(255, 0, 0, 255)
        assert red.to_bytes() == bytes([255, 0, 0, 255])
        assert Rgba.from_bytes(bytes([255, 0, 0, 255])) == red
        assert Rgba.SIZE == 4

    def test_rgba_wrong_window(self):
        """A window of the wrong width is rejected."""
        with pytest.raises(ValueError):
            Rgba.from_bytes(bytes([1, 2, 3]))

    def test_indexed_bytes(self):
        """Indexed voxels are one byte wide."""
        assert Indexed.SIZE == 1
        assert Indexed(7).to_bytes() == b"\x07"
        assert Indexed.from_bytes(b"\x07") == Indexed(7)

    def test_protocol(self):
        """Both voxel kinds satisfy the Voxel protocol."""
        assert isinstance(Rgba(), Voxel)
        assert isinstance(Indexed(), Voxel)

    def test_transparency(self):
        assert Rgba(10, 20, 30, 0).is_transparent
        assert not Rgba(0, 0, 0, 1).is_transparent


class TestConstruction:
    """Tests for buffer allocation."""

    def test_zero_filled(self):
        """A new buffer holds only zero voxels."""
        buffer = VoxelBuffer(4, 3, 2)
        assert buffer.dimensions == (4, 3, 2)
        assert len(buffer) == 24
        assert buffer.tobytes() == bytes(24 * 4)
        assert all(v == Rgba(0, 0, 0, 0) for v in buffer)

    def test_overflow(self):
        """Dimensions whose byte size overflows are rejected at construction."""
        with pytest.raises(BufferOverflowError):
            VoxelBuffer(2**40, 2**40, 2**40)

        assert issubclass(BufferOverflowError, OverflowError)
        assert VoxelBuffer.byte_length(2**40, 2**40, 2**40) is None
        assert VoxelBuffer.byte_length(2, 3, 4) == 96

    def test_negative_dimension(self):
        with pytest.raises(ValueError):
            VoxelBuffer(-1, 2, 2)

    def test_oversized_voxel_type(self):
        """Voxel kinds wider than a .vox record are rejected."""

        class Wide:
            SIZE = 5

            @classmethod
            def from_bytes(cls, data):
                return cls()

        with pytest.raises(ValueError):
            VoxelBuffer(1, 1, 1, voxel_type=Wide)

    def test_empty_volume(self):
        """Zero-sized dimensions give an empty buffer."""
        buffer = VoxelBuffer(0, 4, 4)
        assert len(buffer) == 0
        assert list(buffer.enumerate_voxels()) == []


class TestAddressing:
    """Tests for coordinate and index mapping."""

    def test_row_major_index(self):
        """Linear index is x + y * width + z * width * depth."""
        buffer = VoxelBuffer(5, 4, 3)
        assert buffer.index(0, 0, 0) == 0
        assert buffer.index(1, 0, 0) == 1
        assert buffer.index(0, 1, 0) == 5
        assert buffer.index(0, 0, 1) == 20
        assert buffer.index(1, 2, 1) == 31

    def test_round_trip(self):
        """coordinate() exactly inverts index() for every voxel."""
        buffer = VoxelBuffer(5, 4, 3)
        for z in range(3):
            for y in range(4):
                for x in range(5):
                    assert buffer.coordinate(buffer.index(x, y, z)) == (x, y, z)

        indices = [buffer.index(*buffer.coordinate(i)) for i in range(len(buffer))]
        assert indices == list(range(len(buffer)))

    @pytest.mark.parametrize("coord", [(5, 0, 0), (0, 4, 0), (0, 0, 3), (-1, 0, 0), (0, -1, 2)])
    def test_out_of_bounds_coordinate(self, coord):
        """Coordinate access outside the dimensions raises."""
        buffer = VoxelBuffer(5, 4, 3)
        with pytest.raises(VoxelIndexError):
            buffer.get(*coord)
        with pytest.raises(VoxelIndexError):
            buffer.set(*coord, Rgba(1, 1, 1, 1))
        with pytest.raises(IndexError):
            buffer.index(*coord)

    @pytest.mark.parametrize("index", [60, 100, -1])
    def test_out_of_bounds_index(self, index):
        """Linear index access outside the buffer raises the same error."""
        buffer = VoxelBuffer(5, 4, 3)
        with pytest.raises(VoxelIndexError):
            buffer.get_by_index(index)
        with pytest.raises(VoxelIndexError):
            buffer.set_by_index(index, Rgba())
        with pytest.raises(VoxelIndexError):
            buffer.coordinate(index)


class TestAccess:
    """Tests for reading and writing voxels."""

    def test_set_get(self):
        buffer = VoxelBuffer(4, 4, 4)
        color = Rgba(1, 2, 3, 4)
        buffer.set(1, 2, 3, color)

        assert buffer.get(1, 2, 3) == color
        assert buffer.get_by_index(buffer.index(1, 2, 3)) == color
        assert buffer.get(2, 1, 3) == Rgba()

        offset = buffer.index(1, 2, 3) * 4
        assert buffer.tobytes()[offset:offset + 4] == bytes([1, 2, 3, 4])

    def test_set_by_index(self):
        buffer = VoxelBuffer(3, 3, 3)
        buffer.set_by_index(13, Rgba(9, 9, 9, 9))
        assert buffer.get(1, 1, 1) == Rgba(9, 9, 9, 9)

    def test_view_is_writable(self):
        """Writes through a view change the stored voxel."""
        buffer = VoxelBuffer(2, 2, 2)
        view = buffer.view(1, 1, 0)
        view[0] = 200
        view[3] = 255
        assert buffer.get(1, 1, 0) == Rgba(200, 0, 0, 255)

    def test_indexed_buffer(self):
        """Generic buffers store other voxel kinds."""
        buffer = VoxelBuffer(2, 2, 2, voxel_type=Indexed)
        buffer.set(1, 0, 1, Indexed(42))
        assert buffer.get(1, 0, 1) == Indexed(42)
        assert len(buffer.tobytes()) == 8
        assert buffer.count_nonempty() == 1

    def test_count_nonempty(self):
        """Counting can look at any byte or only at one channel."""
        buffer = VoxelBuffer(3, 2, 2)
        for i in range(len(buffer)):
            buffer.set_by_index(i, Rgba(5, 5, 5, 0))
        assert buffer.count_nonempty() == 12
        assert buffer.count_nonempty(channel=3) == 0

        buffer.set(0, 0, 0, Rgba(5, 5, 5, 255))
        assert buffer.count_nonempty(channel=3) == 1

    def test_as_array_layout(self):
        """The array view is indexed [z, y, x, channel]."""
        buffer = VoxelBuffer(4, 3, 2)
        buffer.set(3, 1, 1, Rgba(7, 8, 9, 10))

        array = buffer.as_array()
        assert array.shape == (2, 3, 4, 4)
        assert array.dtype == np.uint8
        assert array[1, 1, 3].tolist() == [7, 8, 9, 10]


class TestEnumeration:
    """Tests for voxel enumeration."""

    def test_count_and_order(self):
        """Every voxel is yielded once, in ascending linear order."""
        buffer = VoxelBuffer(3, 2, 4)
        items = list(buffer.enumerate_voxels())

        assert len(items) == 3 * 2 * 4
        indices = [buffer.index(x, y, z) for x, y, z, _ in items]
        assert indices == list(range(len(buffer)))

    def test_x_fastest(self):
        buffer = VoxelBuffer(2, 2, 2)
        coords = [(x, y, z) for x, y, z, _ in buffer.enumerate_voxels()]
        assert coords[:4] == [(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)]
        assert coords[4] == (0, 0, 1)

    def test_restartable(self):
        """Each call starts a fresh pass that sees current contents."""
        buffer = VoxelBuffer(2, 2, 1)
        first = list(buffer.enumerate_voxels())
        buffer.set(1, 1, 0, Rgba(1, 1, 1, 1))
        second = list(buffer.enumerate_voxels())

        assert len(first) == len(second) == 4
        assert first[3][3] == Rgba()
        assert second[3] == (1, 1, 0, Rgba(1, 1, 1, 1))
