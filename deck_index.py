# deck_index.py - Deck configuration, lookup index and sample hands

import json
import logging
import random
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from cost_parser import ColorIdentity
from game_state import Card, CardCategory

logger = logging.getLogger(__name__)

OPENING_HAND_SIZE = 7


class DeckLoadError(ValueError):
    """Raised when a deck file cannot be read or does not match the deck schema."""


class DeckEntry(BaseModel):
    card: Card
    count: int = Field(1, ge=1)
    locked: bool = False


class Deck(BaseModel):
    deck_name: str = "Deck"
    mainboard: List[DeckEntry] = []
    sideboard: List[DeckEntry] = []

    @property
    def main_count(self) -> int:
        return sum(e.count for e in self.mainboard)

    @property
    def side_count(self) -> int:
        return sum(e.count for e in self.sideboard)


class DeckIndex:
    """Read-only membership lookups over a 75 (main + side)."""

    def __init__(self, mainboard: Iterable[DeckEntry] = (), sideboard: Iterable[DeckEntry] = ()):
        self._main: Dict[str, DeckEntry] = {}
        self._side: Dict[str, DeckEntry] = {}
        for entry in mainboard:
            self._main[entry.card.name] = entry
        for entry in sideboard:
            self._side[entry.card.name] = entry

    def has_in_main(self, name: str) -> bool:
        return name in self._main

    def has_in_side(self, name: str) -> bool:
        return name in self._side

    def main_entries(self) -> List[DeckEntry]:
        return list(self._main.values())

    def side_entries(self) -> List[DeckEntry]:
        return list(self._side.values())

    def card(self, name: str) -> Optional[Card]:
        entry = self._main.get(name) or self._side.get(name)
        return entry.card if entry else None

    @classmethod
    def from_names(cls, main: Iterable[str] = (), side: Iterable[str] = ()) -> "DeckIndex":
        """Index built from bare names; used when only membership matters."""
        return cls(
            [DeckEntry(card=Card(name=n)) for n in main],
            [DeckEntry(card=Card(name=n)) for n in side],
        )


EMPTY_DECK_INDEX = DeckIndex()


def build_deck_index(deck: Deck) -> DeckIndex:
    return DeckIndex(deck.mainboard, deck.sideboard)


def load_deck(path: Path) -> Deck:
    """Load a deck JSON file (``deck_name``, ``mainboard``, ``sideboard``)."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise DeckLoadError(f"Could not read deck file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DeckLoadError(f"Deck file {path} is not valid JSON: {e}") from e

    try:
        deck = Deck.model_validate(raw)
    except ValidationError as e:
        raise DeckLoadError(f"Deck file {path} does not match the deck schema: {e}") from e

    logger.info(f"Loaded deck '{deck.deck_name}': {deck.main_count} main, {deck.side_count} side")
    return deck


def expand_mainboard(deck: Deck) -> List[Card]:
    """One Card per physical copy in the mainboard."""
    cards: List[Card] = []
    for entry in deck.mainboard:
        cards.extend([entry.card] * entry.count)
    return cards


def draw_sample_hand(
    deck: Deck,
    rng: Optional[random.Random] = None,
    size: int = OPENING_HAND_SIZE,
) -> List[Card]:
    """Shuffle the mainboard and draw an opening hand."""
    rng = rng or random.Random()
    library = expand_mainboard(deck)
    rng.shuffle(library)
    return library[:size]


def format_deck_as_text(deck: Deck) -> str:
    """MTGO-style export: ``<count> <name>`` lines, a blank line, then the sideboard."""
    lines = [f"{e.count} {e.card.name}" for e in deck.mainboard]
    lines.append("")
    lines.extend(f"{e.count} {e.card.name}" for e in deck.sideboard)
    return "\n".join(lines) + "\n"


class DeckColumn(BaseModel):
    key: str
    label: str
    cards: List[str]


def mana_value_columns(deck: Deck) -> List[DeckColumn]:
    """
    Group the mainboard into columns: lands first, then one column per mana value.
    Cards inside a column are sorted by name, one entry per copy.
    """
    columns: Dict[int, DeckColumn] = {}

    for entry in deck.mainboard:
        card = entry.card
        order = -1 if card.is_land else card.mana_value
        if order not in columns:
            columns[order] = DeckColumn(
                key="lands" if card.is_land else f"cmc-{order}",
                label="LANDS" if card.is_land else f"CMC {order}",
                cards=[],
            )
        columns[order].cards.extend([card.name] * entry.count)

    result = [columns[k] for k in sorted(columns)]
    for column in result:
        column.cards.sort()
    return result


class DeckSummary(BaseModel):
    by_color: Dict[ColorIdentity, int]
    by_category: Dict[CardCategory, int]


def deck_summary(deck: Deck) -> DeckSummary:
    """Mainboard copies per color identity and per card category. Empty groups are left out."""
    by_color = {identity: 0 for identity in ColorIdentity}
    by_category = {category: 0 for category in CardCategory}

    for entry in deck.mainboard:
        by_color[entry.card.color_identity] += entry.count
        by_category[entry.card.category] += entry.count

    return DeckSummary(
        by_color={k: v for k, v in by_color.items() if v},
        by_category={k: v for k, v in by_category.items() if v},
    )
