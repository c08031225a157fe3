"""Main pipeline for rendering L-Systems to voxel models."""

import logging
import math
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from tqdm import tqdm

from .buffer import VoxelBuffer
from .formats.vox import VoxModel, model_from_buffer, write_model
from .grammar import Command, LSystem
from .turtle import TurtleGraphics
from .utils.colors import Color, rainbow
from .utils.config import RenderConfig
from .utils.metadata import MetadataWriter

logger = logging.getLogger(__name__)

# Number of rainbow colors cycled through by drawing commands.
RAINBOW_LENGTH = 250

# Byte of an RGBA record holding alpha.
ALPHA_CHANNEL = 3

# Commands that only move or turn the turtle.
_NON_DRAWING = frozenset({Command.STEP, Command.LEFT, Command.RIGHT})


@dataclass
class RenderResult:
    """Outcome of a single render.

    Attributes:
        name: L-System name
        buffer: Rendered RGBA voxel buffer
        num_commands: Length of the derived command sequence
        final_position: Turtle position after the last command
        vox_path: Written .vox file, if any
        metadata_path: Written metadata sidecar, if any
    """

    name: str
    buffer: VoxelBuffer
    num_commands: int
    final_position: tuple
    vox_path: Optional[Path] = None
    metadata_path: Optional[Path] = None

    @cached_property
    def model(self) -> VoxModel:
        """The buffer scanned into .vox records and palette.

        Built on first access, so renders too large for the file format
        still return their buffer.

        Raises:
            VoxEncodeError: If the buffer cannot be stored in a .vox file
        """
        return model_from_buffer(self.buffer)

    @property
    def num_voxels(self) -> int:
        """Number of opaque voxels."""
        return self.buffer.count_nonempty(channel=ALPHA_CHANNEL)

    @property
    def num_colors(self) -> int:
        """Number of distinct opaque colors."""
        records = self.buffer.as_array().reshape(-1, self.buffer.voxel_size)
        opaque = np.ascontiguousarray(records[records[:, ALPHA_CHANNEL] != 0])
        return int(np.unique(opaque.view(np.uint32)).size)

    @property
    def occupancy_ratio(self) -> float:
        total = self.buffer.voxel_count
        return self.num_voxels / total if total else 0.0

    def stats(self) -> dict:
        return {
            "num_commands": self.num_commands,
            "num_voxels": self.num_voxels,
            "num_colors": self.num_colors,
            "occupancy_ratio": self.occupancy_ratio,
            "final_position": list(self.final_position),
        }


class Renderer:
    """Render an L-System with its turtle interpretation.

    This class orchestrates the whole process:
    1. Derivation of the command sequence from the grammar
    2. Turtle interpretation onto a voxel canvas
    3. Encoding to MagicaVoxel .vox
    4. Metadata generation
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        """Initialize the renderer.

        Args:
            config: Render configuration (uses defaults if not provided)
        """
        self.config = config or RenderConfig()
        self._palette: Sequence[Color] = rainbow(RAINBOW_LENGTH) if self.config.rainbow else ()

    def create_turtle(self) -> TurtleGraphics:
        """Create a turtle at the canvas center, shifted by the configured offset, facing north."""
        cfg = self.config
        turtle = TurtleGraphics(cfg.size_x, cfg.size_y, cfg.size_z)
        turtle.step(cfg.size_x / 2.0)
        turtle.left(math.pi / 2)
        turtle.step(cfg.size_y / 2.0)
        turtle.step(cfg.offset_y)
        turtle.right(math.pi / 2)
        turtle.step(cfg.offset_x)
        turtle.left(math.pi / 2)
        return turtle

    def interpret(self, turtle: TurtleGraphics, command: Command, color: Optional[Color] = None):
        """Apply one command to the turtle.

        Args:
            turtle: Turtle to drive
            command: Command to apply
            color: Drawing color; the turtle's own color if None
        """
        d = self.config.step_size
        delta = self.config.angle_increment

        def draw():
            if color is None:
                turtle.draw(d)
            else:
                turtle.draw_color(d, color)

        if command is Command.STEP:
            turtle.step(d)
        elif command is Command.DRAW:
            draw()
        elif command is Command.LEFT:
            turtle.left(delta)
        elif command is Command.RIGHT:
            turtle.right(delta)
        elif command is Command.DRAW_LEFT:
            draw()
            turtle.left(delta)
            draw()
        elif command is Command.DRAW_RIGHT:
            draw()
            turtle.right(delta)
            draw()
        # Subfigure placeholders have no turtle action.

    def render(self, l_system: LSystem) -> RenderResult:
        """Derive and draw an L-System without writing any files.

        Args:
            l_system: L-System to render

        Returns:
            RenderResult holding the populated buffer
        """
        cfg = self.config
        commands = l_system.commands(cfg.derivation_length)
        logger.info(
            "Rendering %s: %d commands after %d generations",
            l_system.name, len(commands), cfg.derivation_length,
        )

        turtle = self.create_turtle()
        logger.debug("Turtle starts at %s", turtle.position)

        iterator = tqdm(commands, desc=f"Drawing {l_system.name}") if cfg.show_progress else commands

        color_index = 0
        for command in iterator:
            color = None
            if self._palette:
                if command not in _NON_DRAWING and color_index < RAINBOW_LENGTH - 1:
                    color_index += 1
                color = self._palette[color_index]
            self.interpret(turtle, command, color)

        result = RenderResult(
            name=l_system.name,
            buffer=turtle.buffer,
            num_commands=len(commands),
            final_position=turtle.position,
        )
        logger.info(
            "Rendered %s: %d voxels, %d colors",
            l_system.name, result.num_voxels, result.num_colors,
        )
        return result

    def render_to_file(self, l_system: LSystem, output_path: Optional[Path] = None) -> RenderResult:
        """Render an L-System and save it as a .vox file.

        Args:
            l_system: L-System to render
            output_path: Destination file (default: ``{name}_{n}.vox`` in output_dir)

        Returns:
            RenderResult with the written paths filled in
        """
        result = self.render(l_system)

        vox_path = Path(output_path) if output_path else self.config.get_output_path(l_system.name)
        vox_path.parent.mkdir(parents=True, exist_ok=True)
        write_model(result.model, vox_path)
        result.vox_path = vox_path
        logger.info("Saved %s", vox_path)

        if self.config.write_metadata:
            metadata_path = vox_path.with_suffix(".json")
            MetadataWriter.write_render_metadata(
                output_path=metadata_path,
                grammar=l_system.to_dict(),
                config=self.config.to_dict(),
                stats=result.stats(),
                vox_file=vox_path.name,
            )
            result.metadata_path = metadata_path

        return result


def render(l_system: LSystem, config: Optional[RenderConfig] = None, **overrides) -> RenderResult:
    """Render and save an L-System in one call.

    Keyword overrides replace fields of ``config``.

    Example:
        >>> dragon = LSystem.from_strings("dragon", "L", ["L→L+R+", "R→-L-R"])
        >>> render(dragon, derivation_length=8, offset_x=10.0, offset_y=-15.0, rainbow=True)
    """
    config = config or RenderConfig()
    if overrides:
        config = config.with_overrides(overrides)
    return Renderer(config).render_to_file(l_system)
