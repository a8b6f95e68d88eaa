# cost_parser.py - Mana cost parsing and color classification

import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


# ----------------
# Mana symbols
# ----------------
class Color(str, Enum):
    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"
    COLORLESS = "C"  # strict colorless, only pays {C}


COLORED = ("W", "U", "B", "R", "G")
VARIABLE_SYMBOLS = {"X", "Y", "Z"}

SYMBOL_PATTERN = re.compile(r"\{([^}]+)\}")
GENERIC_PATTERN = re.compile(r"[0-9]+")


class ColorIdentity(str, Enum):
    LAND = "land"
    COLORLESS = "colorless"
    WHITE = "white"
    BLUE = "blue"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    MULTICOLOR = "multicolor"


_MONO_IDENTITY = {
    "W": ColorIdentity.WHITE,
    "U": ColorIdentity.BLUE,
    "B": ColorIdentity.BLACK,
    "R": ColorIdentity.RED,
    "G": ColorIdentity.GREEN,
}


class ManaCostRequirement(BaseModel):
    """Structured requirement derived from a printed cost like ``{2}{U}{U}``."""
    model_config = ConfigDict(frozen=True)

    generic: int = 0
    W: int = 0
    U: int = 0
    B: int = 0
    R: int = 0
    G: int = 0
    C: int = 0  # strict colorless

    @property
    def total(self) -> int:
        return self.generic + self.W + self.U + self.B + self.R + self.G + self.C

    def colored(self, color: str) -> int:
        return getattr(self, color)


ZERO_COST = ManaCostRequirement()


def cost_symbols(cost: Optional[str]) -> List[str]:
    """Return the contents of every ``{...}`` group, in order."""
    if not cost:
        return []
    return SYMBOL_PATTERN.findall(cost)


def parse_cost(cost: Optional[str]) -> ManaCostRequirement:
    """
    Parse a printed mana cost into a requirement.

    Hybrid and Phyrexian groups are approximated as one generic mana.
    Variable symbols and anything unrecognized contribute nothing.
    """
    counts = {"generic": 0, "W": 0, "U": 0, "B": 0, "R": 0, "G": 0, "C": 0}

    for symbol in cost_symbols(cost):
        if GENERIC_PATTERN.fullmatch(symbol):
            counts["generic"] += int(symbol)
        elif symbol in VARIABLE_SYMBOLS:
            continue
        elif symbol == "C":
            counts["C"] += 1
        elif "/" in symbol:
            counts["generic"] += 1
        elif symbol in COLORED:
            counts[symbol] += 1

    return ManaCostRequirement(**counts)


def mana_value(cost: Optional[str]) -> int:
    """Mana value (CMC) of a printed cost. ``{2/W}`` counts 2, ``{U/P}`` counts 1."""
    total = 0

    for symbol in cost_symbols(cost):
        if GENERIC_PATTERN.fullmatch(symbol):
            total += int(symbol)
        elif symbol in VARIABLE_SYMBOLS:
            continue
        elif "/" in symbol:
            first = symbol.split("/")[0]
            total += 2 if first == "2" else 1
        elif symbol == "C" or symbol in COLORED:
            total += 1

    return total


def color_identity(cost: Optional[str], type_line: Optional[str]) -> ColorIdentity:
    """Classify a card for display grouping: land, colorless, mono or multicolor."""
    if "land" in (type_line or "").lower():
        return ColorIdentity.LAND

    pips = {symbol for symbol in cost_symbols(cost) if symbol in COLORED}

    if not pips:
        return ColorIdentity.COLORLESS
    if len(pips) > 1:
        return ColorIdentity.MULTICOLOR
    return _MONO_IDENTITY[pips.pop()]


def normalize_mana_input(raw: Optional[str]) -> str:
    """
    Convert shorthand typed by a user into brace notation.

    "10UU" -> "{10}{U}{U}", "1u" -> "{1}{U}". Input that already uses braces
    is returned stripped but otherwise untouched. Unknown characters are dropped.
    """
    s = (raw or "").strip()
    if not s:
        return ""
    if "{" in s:
        return s

    out: List[str] = []
    for digits, letter in re.findall(r"([0-9]+)|([A-Za-z])", s):
        if digits:
            out.append(f"{{{digits}}}")
            continue
        up = letter.upper()
        if up in "WUBRGXC":
            out.append(f"{{{up}}}")

    return "".join(out)
