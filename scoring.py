# scoring.py - Heuristic scoring of turn-one search states

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel

from card_roles import DEFAULT_ROLE_TABLE, CardRole, RoleTable
from game_state import Card, Permanent, SearchState
from mana_pool import ManaPool
from mana_sources import is_mana_permanent, is_mana_rock

KEY_NAMES = ("Voltaic Key", "Manifold Key")

# Pool size that makes a hand "functional" even without a selection spell.
FUNCTIONAL_POOL_TOTAL = 2


class ScoringWeights(BaseModel):
    win: int = 1000
    strong: int = 200
    ancestral_with_force: int = 150
    tutor_for_tinker: int = 120
    cast_selection: int = 60
    pool_per_mana: int = 10
    pool_cap: int = 60
    source_per_permanent: int = 4
    source_cap: int = 30

    def bonus_for(self, key: str, default: int) -> int:
        return getattr(self, key, default)


class DetectorCategory(str, Enum):
    WIN = "win"        # virtual win / hard lock, tier 3
    STRONG = "strong"  # strong single-card payoff, tier 2
    BONUS = "bonus"    # secondary pattern, adds score only


@dataclass(frozen=True)
class ScoringContext:
    """Everything a detector is allowed to look at, precomputed once per state."""
    battlefield: Tuple[Permanent, ...]
    battlefield_names: FrozenSet[str]
    hand: Tuple[Card, ...]
    hand_names: FrozenSet[str]
    pool: ManaPool
    pool_total: int
    cast_history: Tuple[str, ...]
    artifact_count: int
    assumptions: Tuple[str, ...]
    roles: RoleTable = field(default=DEFAULT_ROLE_TABLE, compare=False)

    @classmethod
    def from_state(cls, state: SearchState, roles: Optional[RoleTable] = None) -> "ScoringContext":
        return cls(
            battlefield=state.battlefield,
            battlefield_names=frozenset(state.battlefield_names),
            hand=state.hand,
            hand_names=frozenset(state.hand_names),
            pool=state.pool,
            pool_total=state.pool.total,
            cast_history=state.cast_history,
            artifact_count=state.artifact_count,
            assumptions=state.assumptions,
            roles=DEFAULT_ROLE_TABLE if roles is None else roles,
        )

    def in_hand(self, *names: str) -> bool:
        return any(n in self.hand_names for n in names)

    def in_play(self, *names: str) -> bool:
        return any(n in self.battlefield_names for n in names)


@dataclass(frozen=True)
class PatternDetector:
    key: str
    label: str
    category: DetectorCategory
    predicate: Callable[[ScoringContext], bool] = field(compare=False, repr=False)
    bonus: int = 0

    def fires(self, ctx: ScoringContext) -> bool:
        return bool(self.predicate(ctx))


@dataclass
class StateScore:
    score: int
    tier: int
    fired: List[str]


# ----------------
# WIN patterns
# ----------------
def _infinite_turns(ctx: ScoringContext) -> bool:
    # Vault untapped each turn by Tezzeret, or by a Key with {1} to spare.
    if not ctx.in_play("Time Vault"):
        return False
    if ctx.in_play("Tezzeret, Cruel Captain", "Tezzeret the Seeker"):
        return True
    return ctx.in_play(*KEY_NAMES) and ctx.pool_total >= 1


def _tinker_line(ctx: ScoringContext) -> bool:
    return any(tag.startswith("tinker_") for tag in ctx.assumptions)


def _trinket_vault(ctx: ScoringContext) -> bool:
    # Trinket Mage (3) for a Key (1), cast Vault (2), untap (1)
    return (
        ctx.in_hand("Trinket Mage")
        and ctx.in_hand("Time Vault")
        and not ctx.in_play("Trinket Mage", "Time Vault")
        and ctx.pool_total >= 7
    )


def _demonic_vault(ctx: ScoringContext) -> bool:
    # Demonic Tutor (1B) for a Key (1), cast Vault (2), untap (1)
    return (
        ctx.in_hand("Demonic Tutor")
        and ctx.in_hand("Time Vault")
        and not ctx.in_play("Time Vault")
        and not ctx.in_hand(*KEY_NAMES)
        and ctx.pool_total >= 5
        and ctx.pool.B >= 1
    )


def _vault_key_force_backup(ctx: ScoringContext) -> bool:
    has_vault = ctx.in_hand("Time Vault") or ctx.in_play("Time Vault")
    has_key = ctx.in_hand(*KEY_NAMES) or ctx.in_play(*KEY_NAMES)
    pitch_card = any("{U}" in c.mana_cost and c.name != "Demonic Tutor" for c in ctx.hand)
    return (
        has_vault
        and has_key
        and ctx.in_hand("Demonic Tutor")
        and not ctx.in_hand("Force of Will")
        and pitch_card
        and ctx.pool_total >= 5
        and ctx.pool.B >= 1
    )


def _tezzeret_time_walk(ctx: ScoringContext) -> bool:
    # Tezzeret (3UU) untaps two rocks for Time Walk, then ultimates next turn
    mana_rocks = sum(1 for p in ctx.battlefield if is_mana_rock(p.card))
    return (
        (ctx.in_hand("Tezzeret the Seeker") or ctx.in_play("Tezzeret the Seeker"))
        and ctx.in_hand("Time Walk")
        and ctx.pool.U >= 2
        and ctx.pool_total >= 5
        and ctx.artifact_count >= 4
        and mana_rocks >= 2
    )


# ----------------
# STRONG patterns
# ----------------
def _on_battlefield(name: str) -> Callable[[ScoringContext], bool]:
    return lambda ctx: ctx.in_play(name)


def _was_cast(name: str) -> Callable[[ScoringContext], bool]:
    return lambda ctx: name in ctx.cast_history


def _balance(ctx: ScoringContext) -> bool:
    nonland_in_hand = sum(1 for c in ctx.hand if not c.is_land)
    return (
        ctx.in_hand("Balance")
        and len(ctx.cast_history) >= 4
        and nonland_in_hand <= 3
        and ctx.pool_total >= 2
        and ctx.pool.W >= 1
    )


def _trinket_bauble(ctx: ScoringContext) -> bool:
    return (
        ctx.in_hand("Trinket Mage")
        and not ctx.in_play("Trinket Mage", "Vexing Bauble")
        and not ctx.in_hand("Vexing Bauble")
        and ctx.pool_total >= 4
        and ctx.pool.U >= 1
    )


def _tezzeret_bauble(ctx: ScoringContext) -> bool:
    return (
        ctx.in_hand("Tezzeret, Cruel Captain")
        and not ctx.in_play("Tezzeret, Cruel Captain", "Vexing Bauble")
        and not ctx.in_hand("Vexing Bauble")
        and ctx.pool_total >= 4
    )


# ----------------
# BONUS patterns
# ----------------
def _ancestral_with_force(ctx: ScoringContext) -> bool:
    return ctx.in_hand("Ancestral Recall") and ctx.in_hand("Force of Will") and ctx.pool.U >= 1


def _tutor_for_tinker(ctx: ScoringContext) -> bool:
    if ctx.in_hand("Tinker") or ctx.artifact_count < 3:
        return False
    mystical = ctx.in_hand("Mystical Tutor") and ctx.pool.U >= 1 and ctx.pool_total >= 4
    vampiric = ctx.in_hand("Vampiric Tutor") and ctx.pool.B >= 1 and ctx.pool_total >= 3
    return mystical or vampiric


def _cast_selection(ctx: ScoringContext) -> bool:
    return any(ctx.roles.has(name, CardRole.SELECTION) for name in ctx.cast_history)


DETECTORS: List[PatternDetector] = [
    PatternDetector("infinite_turns", "Time Vault infinite turns", DetectorCategory.WIN, _infinite_turns),
    PatternDetector("tinker_line", "Tinker line", DetectorCategory.WIN, _tinker_line),
    PatternDetector("trinket_vault", "Trinket Mage + Time Vault", DetectorCategory.WIN, _trinket_vault),
    PatternDetector("demonic_vault", "Demonic Tutor + Time Vault", DetectorCategory.WIN, _demonic_vault),
    PatternDetector(
        "vault_key_force_backup",
        "Vault + Key with Demonic Tutor for Force backup",
        DetectorCategory.WIN,
        _vault_key_force_backup,
    ),
    PatternDetector(
        "tezzeret_time_walk", "Tezzeret the Seeker + Time Walk", DetectorCategory.WIN, _tezzeret_time_walk
    ),
    PatternDetector("karn", "Karn, the Great Creator in play", DetectorCategory.STRONG,
                    _on_battlefield("Karn, the Great Creator")),
    PatternDetector("narset", "Narset, Parter of Veils in play", DetectorCategory.STRONG,
                    _on_battlefield("Narset, Parter of Veils")),
    PatternDetector("tezzeret_cruel", "Tezzeret, Cruel Captain in play", DetectorCategory.STRONG,
                    _on_battlefield("Tezzeret, Cruel Captain")),
    PatternDetector("trinisphere", "Trinisphere in play", DetectorCategory.STRONG,
                    _on_battlefield("Trinisphere")),
    PatternDetector("vexing_bauble", "Vexing Bauble in play", DetectorCategory.STRONG,
                    _on_battlefield("Vexing Bauble")),
    PatternDetector("paradoxical_outcome", "Paradoxical Outcome cast", DetectorCategory.STRONG,
                    _was_cast("Paradoxical Outcome")),
    PatternDetector("timetwister", "Timetwister cast", DetectorCategory.STRONG, _was_cast("Timetwister")),
    PatternDetector("balance", "Balance after a big turn", DetectorCategory.STRONG, _balance),
    PatternDetector("trinket_bauble", "Trinket Mage for Vexing Bauble", DetectorCategory.STRONG, _trinket_bauble),
    PatternDetector(
        "tezzeret_bauble", "Tezzeret, Cruel Captain for Vexing Bauble", DetectorCategory.STRONG, _tezzeret_bauble
    ),
    PatternDetector("ancestral_with_force", "Ancestral Recall held with Force of Will backup",
                    DetectorCategory.BONUS, _ancestral_with_force, bonus=150),
    PatternDetector("tutor_for_tinker", "Instant tutor for Tinker next turn",
                    DetectorCategory.BONUS, _tutor_for_tinker, bonus=120),
    PatternDetector("cast_selection", "Selection spell cast",
                    DetectorCategory.BONUS, _cast_selection, bonus=60),
]

DETECTORS_BY_KEY: Dict[str, PatternDetector] = {d.key: d for d in DETECTORS}


def permanent_mana_sources(state: SearchState) -> int:
    """Lands and mana artifacts in play, tapped or not (uncracked Lotus counts)."""
    return sum(1 for p in state.battlefield if is_mana_permanent(p.card))


def evaluate_state(
    state: SearchState,
    weights: Optional[ScoringWeights] = None,
    roles: Optional[RoleTable] = None,
    detectors: Optional[List[PatternDetector]] = None,
) -> StateScore:
    """Run every detector in order and turn the results into a score and tier."""
    weights = weights or ScoringWeights()
    detectors = DETECTORS if detectors is None else detectors
    ctx = ScoringContext.from_state(state, roles)

    fired = [d for d in detectors if d.fires(ctx)]
    categories = {d.category for d in fired}

    score = 0
    if DetectorCategory.WIN in categories:
        score += weights.win
    if DetectorCategory.STRONG in categories:
        score += weights.strong
    for d in fired:
        if d.category == DetectorCategory.BONUS:
            score += weights.bonus_for(d.key, d.bonus)
    score += min(weights.pool_cap, weights.pool_per_mana * ctx.pool_total)
    score += min(weights.source_cap, weights.source_per_permanent * permanent_mana_sources(state))

    if DetectorCategory.WIN in categories:
        tier = 3
    elif DetectorCategory.STRONG in categories:
        tier = 2
    elif any(d.key == "cast_selection" for d in fired) or ctx.pool_total >= FUNCTIONAL_POOL_TOTAL:
        tier = 1
    else:
        tier = 0

    return StateScore(score=score, tier=tier, fired=[d.key for d in fired])
