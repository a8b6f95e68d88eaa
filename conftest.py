from pathlib import Path
from typing import Dict, List

import pytest

from deck_index import Deck, build_deck_index, load_deck
from game_state import Card

DECK_PATH = Path(__file__).resolve().parent / "data" / "grixis_tinker.json"


@pytest.fixture(scope="session")
def deck() -> Deck:
    return load_deck(DECK_PATH)


@pytest.fixture(scope="session")
def deck_index(deck):
    return build_deck_index(deck)


@pytest.fixture(scope="session")
def cards(deck) -> Dict[str, Card]:
    """Every card in the 75, by name."""
    return {e.card.name: e.card for e in deck.mainboard + deck.sideboard}


@pytest.fixture
def hand_of(cards):
    def build(*names: str) -> List[Card]:
        return [cards[n] for n in names]
    return build
