"""Basic usage examples for voxgen."""

import math
from pathlib import Path

from voxgen import LSystem, RenderConfig, Renderer, TurtleGraphics, get_preset
from voxgen.utils.colors import rainbow


def example_dragon():
    """Render an order 8 dragon curve with a rainbow gradient."""
    l_system = LSystem.from_strings(
        "dragon",
        "L",
        [
            "L→L+R+",
            "R→-L-R",
        ]
    )

    config = RenderConfig(
        derivation_length=8,
        offset_x=10.0,
        offset_y=-15.0,
        rainbow=True,
        output_dir=Path("output/volumes")
    )

    result = Renderer(config).render_to_file(l_system)
    print(f"Rendered {result.name}: {result.num_voxels} voxels -> {result.vox_path}")


def example_preset():
    """Render a built-in preset with its tuned settings."""
    preset = get_preset("sierpinski-gasket")
    config = RenderConfig(output_dir=Path("output/volumes")).with_overrides(preset.options)

    result = Renderer(config).render_to_file(preset.l_system)
    print(f"Rendered {result.name}: {result.num_voxels} voxels -> {result.vox_path}")


def example_gradient_line():
    """Draw a single gradient line with the turtle directly."""
    turtle = TurtleGraphics(8, 32, 3)

    step_size = 31.0
    colors = rainbow(int(step_size) + 1)

    turtle.step(8.0 / 2.0)
    turtle.left(math.pi / 2)
    turtle.draw_gradient(step_size, colors)

    output_path = Path("output/volumes/gradient_line.vox")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    turtle.buffer.save(output_path)
    print(f"Saved {output_path}")


if __name__ == "__main__":
    print("voxgen Examples")
    print("=" * 50)

    example_dragon()
    example_preset()
    example_gradient_line()
