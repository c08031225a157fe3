"""L-System parsing and derivation.

Sentences are written with one character per command:

    F  draw          f  step (no draw)
    +  turn left     -  turn right
    L  draw, turn left, draw
    R  draw, turn right, draw
    A  subfigure A   B  subfigure B   (no turtle action)

Production rules have the form ``<symbols>→<symbols>``, e.g. ``"L→L+R+"``.
"""

import itertools
import json
import warnings
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple

from ..errors import AmbiguousProductionWarning, GrammarParseError

ARROW = "→"


class Command(str, Enum):
    """L-System alphabet."""
    DRAW = "F"
    STEP = "f"
    LEFT = "+"
    RIGHT = "-"
    DRAW_LEFT = "L"
    DRAW_RIGHT = "R"
    SUBFIGURE_A = "A"
    SUBFIGURE_B = "B"


Sentence = Tuple[Command, ...]


def parse_sentence(text: str) -> Sentence:
    """Parse a string of command characters.

    Raises:
        GrammarParseError: On any character outside the alphabet
    """
    sentence = []
    for pos, char in enumerate(text):
        try:
            sentence.append(Command(char))
        except ValueError:
            raise GrammarParseError(
                f"Unrecognized symbol {char!r} at position {pos} in {text!r}"
            ) from None
    return tuple(sentence)


def parse_production(rule: str) -> Tuple[Command, Sentence]:
    """Parse one ``<symbols>→<symbols>`` rule into ``(symbol, replacement)``.

    A left side longer than one symbol is accepted, but only its first symbol
    is used as the key and an AmbiguousProductionWarning is issued.

    Raises:
        GrammarParseError: If the arrow is missing, the left side is empty or
            either side holds an unknown symbol
    """
    if rule.count(ARROW) != 1:
        raise GrammarParseError(
            f"Production {rule!r} must contain exactly one {ARROW!r}"
        )
    lhs, _, rhs = rule.partition(ARROW)
    left = parse_sentence(lhs)
    right = parse_sentence(rhs)
    if not left:
        raise GrammarParseError(f"Production {rule!r} has an empty left side")
    if len(left) > 1:
        warnings.warn(
            f"Production {rule!r} has {len(left)} symbols on its left side; "
            f"only {left[0].value!r} is used",
            AmbiguousProductionWarning,
            stacklevel=2,
        )
    return left[0], right


def parse_productions(rules: Iterable[str]) -> Dict[Command, Sentence]:
    """Parse rules into a production table. Later rules replace earlier ones."""
    productions = {}
    for rule in rules:
        symbol, replacement = parse_production(rule)
        productions[symbol] = replacement
    return productions


def to_string(sentence: Iterable[Command]) -> str:
    return "".join(c.value for c in sentence)


@dataclass(frozen=True)
class LSystem:
    """An immutable L-System: a name, an axiom and production rules.

    Symbols without a production are terminal and rewrite to themselves.

    Attributes:
        name: Name used for output files
        axiom: Initial sentence
        productions: Mapping from a symbol to its replacement sentence
    """

    name: str
    axiom: Sentence
    productions: Mapping[Command, Sentence] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "axiom", tuple(Command(c) for c in self.axiom))
        object.__setattr__(
            self,
            "productions",
            MappingProxyType({
                Command(k): tuple(Command(c) for c in v)
                for k, v in dict(self.productions).items()
            }),
        )

    @classmethod
    def from_strings(cls, name: str, axiom: str, productions: Iterable[str]) -> "LSystem":
        """Build an L-System from its text form.

        Example:
            >>> LSystem.from_strings("dragon", "L", ["L→L+R+", "R→-L-R"])
        """
        return cls(
            name=name,
            axiom=parse_sentence(axiom),
            productions=parse_productions(productions),
        )

    def derive(self, sentence: Iterable[Command], n: int) -> Sentence:
        """Rewrite every symbol of ``sentence`` ``n`` times.

        ``n = 0`` returns the sentence unchanged. Output length can grow
        exponentially with ``n``; callers are responsible for bounding it.
        """
        if n < 0:
            raise ValueError(f"Derivation length must be non-negative, got {n}")
        current = tuple(sentence)
        for _ in range(n):
            current = tuple(itertools.chain.from_iterable(
                self.productions.get(c, (c,)) for c in current
            ))
        return current

    def commands(self, n: int) -> Sentence:
        """Derive the axiom ``n`` times."""
        return self.derive(self.axiom, n)

    def iter_commands(self, n: int) -> Iterator[Command]:
        """Yield the symbols of ``commands(n)`` without building the sentence.

        Uses an explicit stack of (sentence, position, depth) frames.
        """
        if n < 0:
            raise ValueError(f"Derivation length must be non-negative, got {n}")
        stack: List[Tuple[Sentence, int, int]] = [(self.axiom, 0, 0)]
        while stack:
            sentence, i, depth = stack.pop()
            if i >= len(sentence):
                continue
            symbol = sentence[i]
            stack.append((sentence, i + 1, depth))
            if depth < n and symbol in self.productions:
                stack.append((self.productions[symbol], 0, depth + 1))
            else:
                yield symbol

    def rules(self) -> List[str]:
        """Production rules in their text form."""
        return [f"{k.value}{ARROW}{to_string(v)}" for k, v in self.productions.items()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "axiom": to_string(self.axiom),
            "productions": self.rules(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LSystem":
        """Build an L-System from ``{"name", "axiom", "productions"}``."""
        if not isinstance(data, Mapping):
            raise GrammarParseError(f"Grammar must be an object, got {type(data).__name__}")
        for key, kind in (("name", str), ("axiom", str), ("productions", list)):
            if not isinstance(data.get(key), kind):
                raise GrammarParseError(f"Grammar field {key!r} must be a {kind.__name__}")
        if not all(isinstance(r, str) for r in data["productions"]):
            raise GrammarParseError("Grammar productions must be strings")
        return cls.from_strings(data["name"], data["axiom"], data["productions"])


def load_grammar(path: Path | str) -> LSystem:
    """Load an L-System from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GrammarParseError(f"Invalid grammar JSON in {path}: {e}") from e
    return LSystem.from_dict(data)


def save_grammar(l_system: LSystem, path: Path | str) -> None:
    """Write an L-System to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(l_system.to_dict(), f, indent=2, ensure_ascii=False)
