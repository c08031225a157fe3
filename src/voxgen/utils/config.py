"""Configuration management for L-System rendering."""

import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

from ..errors import ConfigError


@dataclass
class RenderConfig:
    """Configuration for rendering an L-System to a .vox file.

    Attributes:
        derivation_length: Number of rewriting generations (default: 2)
        step_size: Voxels moved per draw/step command (default: 2.0)
        angle_increment: Radians turned per left/right command (default: pi/2)
        size_x: Canvas width in voxels (default: 64)
        size_y: Canvas depth in voxels (default: 64)
        size_z: Canvas height in voxels (default: 64)
        offset_x: Start offset from the canvas center along x (default: 0.0)
        offset_y: Start offset from the canvas center along y (default: 0.0)
        rainbow: Draw with a rainbow gradient instead of a constant color
        output_dir: Directory for rendered files (default: "volumes")
        write_metadata: Write a JSON sidecar next to each .vox file
        show_progress: Show a progress bar while interpreting commands
    """

    derivation_length: int = 2
    step_size: float = 2.0
    angle_increment: float = math.pi / 2
    size_x: int = 64
    size_y: int = 64
    size_z: int = 64
    offset_x: float = 0.0
    offset_y: float = 0.0
    rainbow: bool = False
    output_dir: Path = Path("volumes")
    write_metadata: bool = True
    show_progress: bool = False

    def __post_init__(self):
        """Validate configuration.

        Raises:
            ConfigError: If a setting is out of range
        """
        if isinstance(self.derivation_length, bool) or not isinstance(self.derivation_length, int):
            raise ConfigError(
                f"derivation_length must be an integer, got {self.derivation_length!r}"
            )
        if self.derivation_length < 0:
            raise ConfigError(
                f"derivation_length must be non-negative, got {self.derivation_length}"
            )

        for name in ("size_x", "size_y", "size_z"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        for name in ("step_size", "angle_increment", "offset_x", "offset_y"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value}")

        self.output_dir = Path(self.output_dir)

    @property
    def size(self) -> tuple[int, int, int]:
        return (self.size_x, self.size_y, self.size_z)

    def with_overrides(self, overrides: Mapping[str, Any]) -> "RenderConfig":
        """Return a copy with some fields replaced.

        Raises:
            ConfigError: If an override names an unknown field or a value is invalid
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        values = asdict(self)
        values.update(overrides)
        return RenderConfig(**values)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view of the render settings."""
        values = asdict(self)
        values["output_dir"] = str(self.output_dir)
        return values

    def get_output_path(self, name: str) -> Path:
        """Get the .vox path for an L-System name, creating ``output_dir``."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / f"{name}_{self.derivation_length}.vox"

    def get_metadata_path(self, name: str) -> Path:
        """Get the metadata sidecar path for an L-System name."""
        return self.get_output_path(name).with_suffix(".json")
