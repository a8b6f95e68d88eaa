# mulligan_advisor.py

from typing import List, Optional, Sequence
from game_state import Card
from card_roles import DEFAULT_ROLE_TABLE, CardRole, RoleTable
from deck_index import DeckIndex
from mana_sources import is_fast_mana
from scoring import DETECTORS_BY_KEY, DetectorCategory, ScoringWeights
from search_engine import SearchConfig, SearchResult, search_best_line
from advisor_models import Decision, HandStats, MulliganAdvice

TIER_HEADLINES = {
    3: "Virtual win / hard lock line found (or Tinker → Blightsteel). Keep.",
    2: "Strong T1 line found (payoff/lock/draw engine). Keep.",
    1: "Functional T1 line found (mana + selection / development). Usually keep.",
    0: "No coherent T1 line found in this hand.",
}


def count_hand_stats(hand: Sequence[Card], roles: RoleTable = DEFAULT_ROLE_TABLE, tier: int = 0) -> HandStats:
    """Count the opener against the land, role and fast-mana categories."""
    return HandStats(
        lands=sum(1 for c in hand if c.is_land),
        interaction=sum(1 for c in hand if roles.has(c.name, CardRole.INTERACTION)),
        selection=sum(1 for c in hand if roles.has(c.name, CardRole.SELECTION)),
        payoff=sum(1 for c in hand if roles.has(c.name, CardRole.PAYOFF)),
        fast_mana=sum(1 for c in hand if is_fast_mana(c)),
        tier=tier,
    )


def decide(stats: HandStats) -> Decision:
    """
    Keep/mulligan rule:
    - Tier 3/2: always keep.
    - Tier 1: keep with a land or two selection spells.
    - Tier 0: keep a fair hand (2+ lands, interaction, selection) or a
      zero-land fast mana hand (3+ fast mana, a payoff, selection).
    """
    if stats.tier >= 2:
        return Decision.KEEP

    if stats.tier == 1:
        if stats.lands >= 1 or stats.selection >= 2:
            return Decision.KEEP
        return Decision.MULLIGAN

    if stats.lands >= 2 and stats.interaction >= 1 and stats.selection >= 1:
        return Decision.KEEP
    if stats.fast_mana >= 3 and stats.payoff >= 1 and stats.selection >= 1:
        return Decision.KEEP
    return Decision.MULLIGAN


def build_reasons(result: SearchResult, stats: HandStats) -> List[str]:
    reasons = [TIER_HEADLINES[result.tier]]

    for key in result.fired:
        detector = DETECTORS_BY_KEY.get(key)
        if detector and detector.category in (DetectorCategory.WIN, DetectorCategory.STRONG):
            reasons.append(f"Detected: {detector.label}")

    # Basic sanity checks
    if stats.lands == 0:
        reasons.append("0 lands (needs real action from fast mana + selection).")
    if stats.lands >= 5:
        reasons.append(f"{stats.lands} lands (flood risk).")
    if stats.selection == 0:
        reasons.append("No card selection/tutors in opener.")
    if stats.payoff == 0:
        reasons.append("No payoff/pressure piece in opener (may still be fine if selection is strong).")
    if stats.interaction >= 1:
        reasons.append(f"Interaction present ({stats.interaction}).")

    return reasons


def analyze_mulligan(
    hand: Sequence[Card],
    deck_index: Optional[DeckIndex] = None,
    roles: Optional[RoleTable] = None,
    config: Optional[SearchConfig] = None,
    weights: Optional[ScoringWeights] = None,
) -> MulliganAdvice:
    """
    Search the opener's best turn-one line and turn it into a keep/mulligan call.

    Works for any hand, including degenerate ones (no lands, no spells):
    the search always has at least one root to score.
    """
    roles = DEFAULT_ROLE_TABLE if roles is None else roles
    config = config or SearchConfig()

    result = search_best_line(hand, deck_index, roles, config, weights)
    stats = count_hand_stats(hand, roles, tier=result.tier)

    return MulliganAdvice(
        decision=decide(stats),
        reasons=build_reasons(result, stats),
        line=result.line[:config.line_length],
        stats=stats,
        score=result.score,
        fired=result.fired,
    )
