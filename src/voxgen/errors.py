"""Exception types raised by voxgen."""


class VoxgenError(Exception):
    """Base class for all voxgen errors."""


class BufferOverflowError(VoxgenError, OverflowError):
    """Requested buffer dimensions exceed the addressable byte size."""


class VoxelIndexError(VoxgenError, IndexError):
    """A coordinate or linear index lies outside the buffer dimensions."""


class GrammarParseError(VoxgenError, ValueError):
    """Grammar text could not be parsed into commands."""


class VoxEncodeError(VoxgenError, ValueError):
    """Buffer contents cannot be represented in a .vox file."""


class VoxFormatError(VoxgenError, ValueError):
    """Input bytes are not a well-formed .vox file."""


class ConfigError(VoxgenError, ValueError):
    """Render settings are invalid."""


class UnknownPresetError(VoxgenError, KeyError):
    """No built-in L-System has the requested name."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""


class AmbiguousProductionWarning(UserWarning):
    """A production rule has more than one symbol on its left side."""
