# game_state.py - Cards, permanents and the turn-one search state

import itertools
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from cost_parser import Color, ColorIdentity, color_identity, mana_value
from mana_pool import EMPTY_POOL, ManaPool


# ----------------
# Card categories
# ----------------
class CardCategory(str, Enum):
    LAND = "land"
    ARTIFACT = "artifact"
    CREATURE = "creature"
    SPELL = "spell"


# ----------------
# Cards
# ----------------
class Card(BaseModel):
    """
    Static card data: name, printed cost and type line.

    ``produced_mana`` lists the colors a land can tap for. Lands without it
    tap for colorless unless the mana source catalog knows them by name.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    mana_cost: str = ""
    type_line: str = ""
    produced_mana: Tuple[Color, ...] = ()

    @property
    def is_land(self) -> bool:
        return "land" in self.type_line.lower()

    @property
    def is_artifact(self) -> bool:
        return "artifact" in self.type_line.lower()

    @property
    def is_creature(self) -> bool:
        return "creature" in self.type_line.lower()

    @property
    def is_planeswalker(self) -> bool:
        return "planeswalker" in self.type_line.lower()

    @property
    def mana_value(self) -> int:
        return 0 if self.is_land else mana_value(self.mana_cost)

    @property
    def color_identity(self) -> ColorIdentity:
        return color_identity(self.mana_cost, self.type_line)

    @property
    def category(self) -> CardCategory:
        if self.is_land:
            return CardCategory.LAND
        if self.is_artifact:
            return CardCategory.ARTIFACT
        if self.is_creature:
            return CardCategory.CREATURE
        return CardCategory.SPELL

    @property
    def is_free_artifact(self) -> bool:
        return self.is_artifact and not self.is_land and self.mana_value == 0

    def __str__(self) -> str:
        return self.name


# ----------------
# Battlefield
# ----------------
_permanent_ids = itertools.count(1)


class Permanent(BaseModel):
    """
    A card on the battlefield. ``id`` tells copies of the same card apart.

    ``from_hand`` marks permanents that left the opening hand without being
    cast (pre-played free artifacts and the land drop).
    """
    model_config = ConfigDict(frozen=True)

    card: Card
    id: int
    tapped: bool = False
    from_hand: bool = False

    @property
    def name(self) -> str:
        return self.card.name

    def tap(self) -> "Permanent":
        return self.model_copy(update={"tapped": True})


def new_permanent(card: Card, from_hand: bool = False) -> Permanent:
    return Permanent(card=card, id=next(_permanent_ids), from_hand=from_hand)


# ----------------
# Search state
# ----------------
class SearchState(BaseModel):
    """
    One node of the turn-one search. Every transition builds a new state;
    nothing here is mutated in place.
    """
    model_config = ConfigDict(frozen=True)

    hand: Tuple[Card, ...] = ()
    battlefield: Tuple[Permanent, ...] = ()
    pool: ManaPool = EMPTY_POOL
    cast_history: Tuple[str, ...] = ()
    chosen_land: Optional[Card] = None
    trace: Tuple[str, ...] = ()
    graveyard: Tuple[Permanent, ...] = ()
    assumptions: Tuple[str, ...] = ()

    @property
    def hand_names(self) -> List[str]:
        return [c.name for c in self.hand]

    @property
    def battlefield_names(self) -> List[str]:
        return [p.name for p in self.battlefield]

    @property
    def artifact_count(self) -> int:
        return sum(1 for p in self.battlefield if p.card.is_artifact)

    def canonical_key(self) -> Tuple:
        """Key used to skip states already explored from the same root."""
        return (
            self.chosen_land.name if self.chosen_land else None,
            tuple(sorted(self.hand_names)),
            tuple(sorted(f"{p.name}:{1 if p.tapped else 0}" for p in self.battlefield)),
            self.pool.as_key(),
        )

    def cards_accounted(self) -> int:
        """Opening-hand cards tracked across hand, battlefield, casts and graveyard."""
        return (
            len(self.hand)
            + sum(1 for p in self.battlefield if p.from_hand)
            + len(self.cast_history)
            + sum(1 for p in self.graveyard if p.from_hand)
        )

    def with_note(self, note: str, **update) -> "SearchState":
        update["trace"] = self.trace + (note,)
        return self.model_copy(update=update)


def remove_one(cards: Tuple[Card, ...], card: Card) -> Tuple[Card, ...]:
    """Remove a single copy of ``card`` from a hand tuple."""
    cards_list = list(cards)
    cards_list.remove(card)
    return tuple(cards_list)
