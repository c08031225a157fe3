"""L-System grammar module."""

from .l_system import (
    ARROW,
    Command,
    LSystem,
    Sentence,
    load_grammar,
    parse_production,
    parse_productions,
    parse_sentence,
    save_grammar,
    to_string,
)
from .presets import PRESETS, Preset, get_preset

__all__ = [
    "ARROW",
    "Command",
    "LSystem",
    "Sentence",
    "load_grammar",
    "parse_production",
    "parse_productions",
    "parse_sentence",
    "save_grammar",
    "to_string",
    "PRESETS",
    "Preset",
    "get_preset",
]
