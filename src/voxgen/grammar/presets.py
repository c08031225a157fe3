"""Named L-Systems with render settings that fit the default canvas."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict

from ..errors import UnknownPresetError
from .l_system import LSystem


@dataclass(frozen=True)
class Preset:
    """An L-System plus the RenderConfig overrides it was tuned with."""
    l_system: LSystem
    options: Dict[str, Any] = field(default_factory=dict, hash=False)
    description: str = ""


PRESETS: Dict[str, Preset] = {
    "dragon": Preset(
        LSystem.from_strings("dragon", "L", ["L→L+R+", "R→-L-R"]),
        {"derivation_length": 8, "offset_x": 10.0, "offset_y": -15.0, "rainbow": True},
        "Dragon curve with a rainbow gradient",
    ),
    "sierpinski-gasket": Preset(
        LSystem.from_strings("sierpinski-gasket", "R", ["L→R+L+R", "R→L-R-L"]),
        {
            "derivation_length": 3,
            "step_size": 4.0,
            "angle_increment": math.pi / 3,
            "offset_y": -20.0,
        },
        "Sierpinski gasket built from draw-turn-draw symbols",
    ),
    "hilbert": Preset(
        LSystem.from_strings("hilbert", "A", ["A→+BF-AFA-FB+", "B→-AF+BFB+FA-"]),
        {
            "derivation_length": 6,
            "size_x": 127,
            "size_y": 127,
            "offset_x": 63.0,
            "offset_y": -63.0,
        },
        "Space-filling Hilbert curve",
    ),
    "koch-quadratic": Preset(
        LSystem.from_strings("koch-quadratic", "F-F-F-F", ["F→F-F+F+FF-F-F+F"]),
        {"derivation_length": 2, "step_size": 1.0},
        "Quadratic Koch island",
    ),
}


def get_preset(name: str) -> Preset:
    """Look up a preset by name.

    Raises:
        UnknownPresetError: If no preset has that name (a KeyError)
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise UnknownPresetError(
            f"Unknown preset {name!r}; choose from {', '.join(sorted(PRESETS))}"
        ) from None
