# action_generator.py - Legal turn-one actions (casts and mana taps) for a search state

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List

from card_roles import DEFAULT_ROLE_TABLE, CardRole, RoleTable
from deck_index import EMPTY_DECK_INDEX, DeckIndex
from game_state import Card, Permanent, SearchState, new_permanent, remove_one
from mana_sources import METALCRAFT_THRESHOLD, ManaSourceKind, classify

KEY_NAMES = ("Voltaic Key", "Manifold Key")
TOLARIAN_ACADEMY = Card(name="Tolarian Academy", type_line="Legendary Land")


class ActionKind(str, Enum):
    CAST = "cast"
    TAP = "tap"


@dataclass(frozen=True)
class Action:
    """A labelled, pure transition: ``apply(state)`` returns a new state."""
    label: str
    kind: ActionKind
    apply: Callable[[SearchState], SearchState] = field(compare=False, repr=False)


@dataclass(frozen=True)
class SearchContext:
    """Read-only inputs the generator consults besides the state itself."""
    deck_index: DeckIndex = EMPTY_DECK_INDEX
    roles: RoleTable = DEFAULT_ROLE_TABLE


# ----------------
# Tap actions
# ----------------
def _tap(perm_id: int, note: str, **mana: int) -> Callable[[SearchState], SearchState]:
    def apply(state: SearchState) -> SearchState:
        battlefield = tuple(p.tap() if p.id == perm_id else p for p in state.battlefield)
        return state.with_note(note, battlefield=battlefield, pool=state.pool.add(**mana))
    return apply


def _tap_academy(perm_id: int) -> Callable[[SearchState], SearchState]:
    def apply(state: SearchState) -> SearchState:
        n = state.artifact_count
        battlefield = tuple(p.tap() if p.id == perm_id else p for p in state.battlefield)
        return state.with_note(
            f"Tap Academy for {n}U (artifacts: {n})",
            battlefield=battlefield,
            pool=state.pool.add(U=n),
        )
    return apply


def _sacrifice_for_mana(perm_id: int, name: str, amount: int) -> Callable[[SearchState], SearchState]:
    def apply(state: SearchState) -> SearchState:
        sacrificed = [p for p in state.battlefield if p.id == perm_id]
        battlefield = tuple(p for p in state.battlefield if p.id != perm_id)
        return state.with_note(
            f"Sac {name} for {amount} mana",
            battlefield=battlefield,
            graveyard=state.graveyard + tuple(sacrificed),
            pool=state.pool.add(flex=amount),
        )
    return apply


def tap_actions(perm: Permanent, state: SearchState) -> List[Action]:
    """Mana abilities of one untapped permanent. Inert permanents yield nothing."""
    if perm.tapped:
        return []

    source = classify(perm.card)
    if source is None:
        return []

    name = perm.name
    kind = source.kind

    if kind == ManaSourceKind.COLORED_ROCK:
        note = f"Tap {name} for {source.color}"
        return [Action(note, ActionKind.TAP, _tap(perm.id, note, **{source.color: 1}))]

    if kind == ManaSourceKind.FIXED_COLORLESS:
        note = f"Tap {name} for {'C' * source.amount}"
        return [Action(note, ActionKind.TAP, _tap(perm.id, note, C=source.amount))]

    if kind == ManaSourceKind.METALCRAFT:
        if state.artifact_count < METALCRAFT_THRESHOLD:
            return []
        note = f"Tap {name} for any color (metalcraft)"
        return [Action(note, ActionKind.TAP, _tap(perm.id, note, flex=1))]

    if kind == ManaSourceKind.ONE_SHOT:
        return [Action(
            f"Sac {name} for {source.amount} mana (any colors)",
            ActionKind.TAP,
            _sacrifice_for_mana(perm.id, name, source.amount),
        )]

    if kind == ManaSourceKind.SCALING_LAND:
        return [Action(f"Tap {name}", ActionKind.TAP, _tap_academy(perm.id))]

    if kind == ManaSourceKind.ANY_COLOR_LAND:
        note = f"Tap {name} for any color (pay 1 life)"
        return [Action(f"Tap {name} (pay 1 life) for any color", ActionKind.TAP, _tap(perm.id, note, flex=1))]

    if kind == ManaSourceKind.DUAL_MODE_LAND:
        colorless = f"Tap {name} for C"
        any_color = f"Tap {name} for any color (pay 1 life)"
        return [
            Action(colorless, ActionKind.TAP, _tap(perm.id, colorless, C=1)),
            Action(f"Tap {name} (pay 1 life) for any color", ActionKind.TAP, _tap(perm.id, any_color, flex=1)),
        ]

    if kind in (ManaSourceKind.COLORED_LAND, ManaSourceKind.DECLARED_ROCK):
        actions = []
        for color in perm.card.produced_mana:
            note = f"Tap {name} for {color.value}"
            actions.append(Action(note, ActionKind.TAP, _tap(perm.id, note, **{color.value: 1})))
        return actions

    note = f"Tap {name} for C"
    return [Action(note, ActionKind.TAP, _tap(perm.id, note, C=1))]


# ----------------
# Resolution effects
# ----------------
def _resolve_paradoxical_outcome(state: SearchState, context: SearchContext) -> SearchState:
    """Bounce every artifact to hand, then replay the ones that cost 0."""
    bounced = [p for p in state.battlefield if p.card.is_artifact]
    if not bounced:
        return state

    battlefield = [p for p in state.battlefield if not p.card.is_artifact]
    hand = list(state.hand) + [p.card for p in bounced]

    replayed = [c for c in hand if c.is_free_artifact]
    for card in replayed:
        hand.remove(card)
        battlefield.append(new_permanent(card, from_hand=True))

    n = len(bounced)
    return state.with_note(
        f"PO → bounce {n} artifacts, draw {n}, replay {len(replayed)} free artifacts",
        hand=tuple(hand),
        battlefield=tuple(battlefield),
    )


def _resolve_crop_rotation(state: SearchState, context: SearchContext) -> SearchState:
    """Sacrifice a land to put Tolarian Academy onto the battlefield."""
    land = next((p for p in state.battlefield if p.card.is_land), None)
    artifacts = state.artifact_count

    if land is None or artifacts < 2 or not context.deck_index.has_in_main(TOLARIAN_ACADEMY.name):
        return state

    academy = context.deck_index.card(TOLARIAN_ACADEMY.name)
    if academy is None or not academy.is_land:
        academy = TOLARIAN_ACADEMY

    battlefield = tuple(p for p in state.battlefield if p.id != land.id) + (new_permanent(academy),)
    return state.with_note(
        f"Crop Rotation → sacrifice {land.name}, fetch Tolarian Academy ({artifacts} artifacts)",
        battlefield=battlefield,
        graveyard=state.graveyard + (land,),
    )


def _resolve_tinker(state: SearchState, context: SearchContext) -> SearchState:
    """
    Record which artifact Tinker is assumed to find. The artifact to
    sacrifice is assumed, not removed.
    """
    has_sac_artifact = any(
        p.card.is_artifact and p.name != "Blightsteel Colossus" for p in state.battlefield
    )
    if not has_sac_artifact:
        return state

    deck = context.deck_index
    hand = set(state.hand_names)
    vault_in_hand = "Time Vault" in hand
    key_in_hand = any(k in hand for k in KEY_NAMES)

    if deck.has_in_main("Blightsteel Colossus") and "Blightsteel Colossus" not in hand:
        state = state.with_note(
            "Tinker → Blightsteel Colossus (artifact to sacrifice assumed)",
            assumptions=state.assumptions + ("tinker_blightsteel",),
        )

    # Vault comes into play; the Key still needs {1} to untap it.
    if key_in_hand and not vault_in_hand and deck.has_in_main("Time Vault") and state.pool.can_pay("{1}"):
        state = state.with_note(
            "Tinker → Time Vault (into play), activate Key combo (infinite turns)",
            assumptions=state.assumptions + ("tinker_time_vault",),
        )

    # Key comes into play; Vault still costs {2} plus {1} to activate.
    if vault_in_hand and not key_in_hand and state.pool.can_pay("{3}"):
        key_name = next((k for k in KEY_NAMES if deck.has_in_main(k)), None)
        if key_name:
            state = state.with_note(
                f"Tinker → {key_name} (into play), cast Vault, activate combo (infinite turns)",
                assumptions=state.assumptions + ("tinker_key",),
            )

    return state


RESOLUTION_EFFECTS: Dict[str, Callable[[SearchState, SearchContext], SearchState]] = {
    "Paradoxical Outcome": _resolve_paradoxical_outcome,
    "Crop Rotation": _resolve_crop_rotation,
    "Tinker": _resolve_tinker,
}


# ----------------
# Cast actions
# ----------------
def can_cast(card: Card, state: SearchState, context: SearchContext) -> bool:
    roles = context.roles
    if card.is_land or not roles.has(card.name, CardRole.IMPORTANT_CAST):
        return False
    if card.is_free_artifact or roles.has(card.name, CardRole.FORCED_FREE):
        return True
    return state.pool.can_pay(card.mana_cost)


def cast_card(state: SearchState, card: Card, context: SearchContext) -> SearchState:
    """Cast ``card`` from hand and run its resolution effect, if it has one."""
    pool = state.pool
    forced_free = context.roles.has(card.name, CardRole.FORCED_FREE)
    if not forced_free and card.mana_value > 0:
        pool = pool.pay(card.mana_cost)

    battlefield = state.battlefield
    if card.is_artifact or card.is_planeswalker:
        battlefield = battlefield + (new_permanent(card),)

    state = state.with_note(
        f"Cast {card.name}",
        pool=pool,
        hand=remove_one(state.hand, card),
        cast_history=state.cast_history + (card.name,),
        battlefield=battlefield,
    )

    effect = RESOLUTION_EFFECTS.get(card.name)
    if effect is not None:
        state = effect(state, context)
    return state


def _cast(card: Card, context: SearchContext) -> Callable[[SearchState], SearchState]:
    def apply(state: SearchState) -> SearchState:
        return cast_card(state, card, context)
    return apply


# ----------------
# Entry point
# ----------------
def legal_actions(state: SearchState, context: SearchContext = SearchContext()) -> List[Action]:
    """Every cast (hand order) followed by every tap ability (battlefield order)."""
    actions: List[Action] = [
        Action(f"Cast {card.name}", ActionKind.CAST, _cast(card, context))
        for card in state.hand
        if can_cast(card, state, context)
    ]
    for perm in state.battlefield:
        actions.extend(tap_actions(perm, state))
    return actions
