# search_engine.py - Bounded depth-first search for the best turn-one line

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from pydantic import BaseModel, Field

from action_generator import SearchContext, legal_actions
from card_roles import DEFAULT_ROLE_TABLE, RoleTable
from deck_index import EMPTY_DECK_INDEX, DeckIndex
from game_state import Card, SearchState, new_permanent, remove_one
from logger_config import log_search_result
from scoring import ScoringWeights, StateScore, evaluate_state

logger = logging.getLogger(__name__)


class SearchConfig(BaseModel):
    depth_limit: int = Field(18, ge=0)
    line_length: int = Field(12, ge=1)


@dataclass
class SearchResult:
    best_state: Optional[SearchState] = None
    score: int = 0
    tier: int = 0
    fired: List[str] = field(default_factory=list)
    visited: int = 0

    @property
    def line(self) -> List[str]:
        return list(self.best_state.trace) if self.best_state else []

    def improves_on(self, scored: StateScore) -> bool:
        """True when ``scored`` should replace the current best."""
        if self.best_state is None:
            return True
        return scored.score > self.score or (scored.score == self.score and scored.tier > self.tier)


def build_root_states(hand: Sequence[Card]) -> List[SearchState]:
    """
    One root per distinct land name in hand (or a single landless root).
    Free artifacts go straight to the battlefield in every root.
    """
    free = [c for c in hand if c.is_free_artifact]
    rest = tuple(c for c in hand if not c.is_free_artifact)

    base = tuple(new_permanent(c, from_hand=True) for c in free)
    start = f"Start (0-cost artifacts played: {', '.join(c.name for c in free) or 'none'})"

    roots: List[SearchState] = []
    seen_lands: Set[str] = set()
    for land in rest:
        if not land.is_land or land.name in seen_lands:
            continue
        seen_lands.add(land.name)
        roots.append(SearchState(
            hand=remove_one(rest, land),
            battlefield=base + (new_permanent(land, from_hand=True),),
            chosen_land=land,
            trace=(start, f"Play land: {land.name}"),
        ))

    if not roots:
        roots.append(SearchState(hand=rest, battlefield=base, trace=(start, "No land in hand")))

    return roots


def _explore(
    root: SearchState,
    context: SearchContext,
    config: SearchConfig,
    weights: ScoringWeights,
    best: SearchResult,
) -> int:
    """DFS from one root with its own visited set. Returns the number of states scored."""
    seen: Set[Tuple] = set()
    stack: List[Tuple[SearchState, int]] = [(root, 0)]

    while stack:
        state, depth = stack.pop()
        key = state.canonical_key()
        if key in seen:
            continue
        seen.add(key)

        scored = evaluate_state(state, weights, context.roles)
        if best.improves_on(scored):
            best.best_state = state
            best.score = scored.score
            best.tier = scored.tier
            best.fired = scored.fired

        if depth >= config.depth_limit:
            continue

        # Reversed so casts are popped (explored) before taps.
        for action in reversed(legal_actions(state, context)):
            stack.append((action.apply(state), depth + 1))

    return len(seen)


def search_best_line(
    hand: Sequence[Card],
    deck_index: Optional[DeckIndex] = None,
    roles: Optional[RoleTable] = None,
    config: Optional[SearchConfig] = None,
    weights: Optional[ScoringWeights] = None,
) -> SearchResult:
    """Search every land choice and keep the globally best scored state."""
    context = SearchContext(
        deck_index=EMPTY_DECK_INDEX if deck_index is None else deck_index,
        roles=DEFAULT_ROLE_TABLE if roles is None else roles,
    )
    config = config or SearchConfig()
    weights = weights or ScoringWeights()

    best = SearchResult()
    for root in build_root_states(hand):
        visited = _explore(root, context, config, weights, best)
        best.visited += visited
        logger.debug(f"Root '{root.trace[-1]}' visited {visited} states")

    log_search_result(logger, best)
    return best
