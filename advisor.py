# Turn-one mulligan advisor
# advisor.py

from typing import Callable, List, Optional, Sequence

from card_db import CardRecord, get_card
from card_roles import DEFAULT_ROLE_TABLE, RoleTable
from deck_index import DeckIndex
from game_state import Card
from logger_config import (
    advisor_logger,
    log_hand_evaluation,
    log_advisor_decision,
)
from advisor_models import MulliganAdvice
from mulligan_advisor import analyze_mulligan
from search_engine import SearchConfig


class UnknownCardError(ValueError):
    """Raised when a requested card name is neither in the deck nor in the catalog."""

    def __init__(self, names: List[str]):
        self.names = names
        super().__init__(f"Unknown card(s): {', '.join(names)}")


def resolve_hand(
    names: Sequence[str],
    deck_index: DeckIndex,
    catalog_lookup: Callable[[str], Optional[CardRecord]] = get_card,
) -> List[Card]:
    """Turn card names into Cards: the loaded deck first, then the sqlite catalog."""
    cards: List[Card] = []
    missing: List[str] = []

    for name in names:
        card = deck_index.card(name)
        if card is None:
            record = catalog_lookup(name)
            card = record.to_card() if record else None
        if card is None:
            missing.append(name)
        else:
            cards.append(card)

    if missing:
        raise UnknownCardError(missing)
    return cards


def get_mulligan_advice(
    hand: Sequence[Card],
    deck_index: DeckIndex,
    roles: RoleTable = DEFAULT_ROLE_TABLE,
    config: Optional[SearchConfig] = None,
    source: str = "request",
) -> MulliganAdvice:
    """Evaluate an opener and log both the hand and the resulting decision."""
    advisor_logger.info(f"Evaluating {len(hand)}-card opener ({source})")
    log_hand_evaluation(advisor_logger, hand, source)

    advice = analyze_mulligan(hand, deck_index, roles, config)

    advisor_logger.info(f"Decision {advice.decision.value} at tier {advice.stats.tier}")
    log_advisor_decision(advisor_logger, hand, advice, source=source)
    return advice
