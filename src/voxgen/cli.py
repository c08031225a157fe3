"""Command-line interface for voxgen."""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from .errors import VoxgenError
from .formats.vox import read_vox
from .grammar import LSystem, get_preset, load_grammar, to_string, PRESETS
from .pipeline import Renderer
from .utils.config import RenderConfig
from .utils.metadata import MetadataWriter

logger = logging.getLogger(__name__)

# Render options that map one-to-one onto RenderConfig fields.
_CONFIG_ARGS = (
    "derivation_length",
    "step_size",
    "size_x",
    "size_y",
    "size_z",
    "offset_x",
    "offset_y",
)


def _add_grammar_args(parser: argparse.ArgumentParser):
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--preset", help="Name of a built-in L-System")
    source.add_argument("--grammar", type=Path, help="JSON grammar file")
    source.add_argument("--axiom", help="Axiom string, used with --rule")
    parser.add_argument(
        "--rule",
        action="append",
        default=[],
        help="Production rule such as 'F→F+F'; repeat for several rules",
    )
    parser.add_argument("--name", help="L-System name (default: preset/grammar name or 'lsystem')")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voxgen",
        description="Render L-Systems as MagicaVoxel .vox models"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render an L-System to a .vox file")
    _add_grammar_args(render)
    render.add_argument("-n", "--derivation-length", type=int, help="Number of generations")
    render.add_argument("--step-size", type=float, help="Voxels per step")
    render.add_argument("--angle", type=float, help="Turn angle in degrees")
    render.add_argument("--size-x", type=int, help="Canvas width")
    render.add_argument("--size-y", type=int, help="Canvas depth")
    render.add_argument("--size-z", type=int, help="Canvas height")
    render.add_argument("--offset-x", type=float, help="Start offset from center along x")
    render.add_argument("--offset-y", type=float, help="Start offset from center along y")
    render.add_argument(
        "--rainbow",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Draw with a rainbow gradient"
    )
    render.add_argument("--output-dir", type=Path, default=Path("volumes"), help="Output directory")
    render.add_argument("-o", "--output", type=Path, help="Output .vox path (overrides --output-dir naming)")
    render.add_argument("--no-metadata", action="store_true", help="Do not write the JSON sidecar")
    render.add_argument("--progress", action="store_true", help="Show a progress bar")

    derive = subparsers.add_parser("derive", help="Print the derived command string")
    _add_grammar_args(derive)
    derive.add_argument("-n", "--derivation-length", type=int, default=2, help="Number of generations")

    subparsers.add_parser("presets", help="List built-in L-Systems")

    inspect = subparsers.add_parser("inspect", help="Summarize a .vox file")
    inspect.add_argument("path", type=Path, help=".vox file to read")

    return parser


def resolve_l_system(args: argparse.Namespace) -> tuple[LSystem, dict]:
    """Build the L-System selected on the command line.

    Returns:
        Tuple of (l_system, preset render overrides)
    """
    if args.rule and not args.axiom:
        raise VoxgenError("--rule can only be used together with --axiom")

    overrides = {}
    if args.preset:
        preset = get_preset(args.preset)
        l_system, overrides = preset.l_system, dict(preset.options)
    elif args.grammar:
        l_system = load_grammar(args.grammar)
    else:
        l_system = LSystem.from_strings(args.name or "lsystem", args.axiom, args.rule)

    if args.name and args.name != l_system.name:
        l_system = LSystem(args.name, l_system.axiom, l_system.productions)
    return l_system, overrides


def config_from_args(args: argparse.Namespace, overrides: dict) -> RenderConfig:
    """Merge preset overrides and explicit command-line options into a RenderConfig."""
    values = dict(overrides)
    for name in _CONFIG_ARGS:
        value = getattr(args, name)
        if value is not None:
            values[name] = value
    if args.angle is not None:
        values["angle_increment"] = math.radians(args.angle)
    if args.rainbow is not None:
        values["rainbow"] = args.rainbow
    values["output_dir"] = args.output_dir
    values["write_metadata"] = not args.no_metadata
    values["show_progress"] = args.progress
    return RenderConfig().with_overrides(values)


def cmd_render(args: argparse.Namespace) -> int:
    l_system, overrides = resolve_l_system(args)
    config = config_from_args(args, overrides)
    logger.debug("Render config: %s", config)
    result = Renderer(config).render_to_file(l_system, args.output)

    print(f"Wrote {result.vox_path}")
    print(f"  Commands: {result.num_commands:,}")
    print(f"  Voxels: {result.num_voxels:,} ({result.occupancy_ratio:.2%} occupancy)")
    print(f"  Colors: {result.num_colors}")
    if result.metadata_path:
        print(f"  Metadata: {result.metadata_path}")
    return 0


def cmd_derive(args: argparse.Namespace) -> int:
    l_system, _ = resolve_l_system(args)
    if args.derivation_length < 0:
        raise VoxgenError(f"Derivation length must be non-negative, got {args.derivation_length}")
    print(to_string(l_system.iter_commands(args.derivation_length)))
    return 0


def cmd_presets(args: argparse.Namespace) -> int:
    for name in sorted(PRESETS):
        preset = PRESETS[name]
        print(f"{name}: {preset.description}")
        print(f"  axiom: {to_string(preset.l_system.axiom)}")
        for rule in preset.l_system.rules():
            print(f"  rule:  {rule}")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    model = read_vox(args.path)
    print(f"{args.path}")
    print(f"  Version: {model.version}")
    print(f"  Size: {model.size[0]} x {model.size[1]} x {model.size[2]}")
    print(f"  Voxels: {model.num_voxels:,}")
    print(f"  Colors: {model.num_colors}")

    metadata_path = args.path.with_suffix(".json")
    if metadata_path.exists():
        try:
            metadata = MetadataWriter.read_render_metadata(metadata_path)
        except ValueError as e:
            logger.warning("Ignoring unreadable metadata %s: %s", metadata_path, e)
            return 0
        grammar = metadata.get("grammar", {})
        print(f"  Grammar: {grammar.get('name')} (axiom {grammar.get('axiom')})")
        print(f"  Generations: {metadata.get('render', {}).get('derivation_length')}")
    return 0


_COMMANDS = {
    "render": cmd_render,
    "derive": cmd_derive,
    "presets": cmd_presets,
    "inspect": cmd_inspect,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return a process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return _COMMANDS[args.command](args)
    except VoxgenError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
