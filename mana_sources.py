# mana_sources.py - Catalog of what each mana-producing permanent does

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from game_state import Card


class ManaSourceKind(str, Enum):
    COLORED_ROCK = "colored_rock"          # Moxen: one mana of a fixed color
    FIXED_COLORLESS = "fixed_colorless"    # Sol Ring, Mana Crypt, Mana Vault
    ANY_COLOR_LAND = "any_color_land"      # City of Brass, Mana Confluence (pay life)
    DUAL_MODE_LAND = "dual_mode_land"      # {C}, or any color for 1 life
    SCALING_LAND = "scaling_land"          # Tolarian Academy
    METALCRAFT = "metalcraft"              # Mox Opal
    ONE_SHOT = "one_shot"                  # Black Lotus, Lotus Petal
    COLORED_LAND = "colored_land"          # lands with declared produced_mana
    DECLARED_ROCK = "declared_rock"        # catalog artifacts with declared produced_mana
    COLORLESS_LAND = "colorless_land"      # everything else that is a land


@dataclass(frozen=True)
class ManaSource:
    kind: ManaSourceKind
    color: Optional[str] = None
    amount: int = 1


METALCRAFT_THRESHOLD = 3
MOX_PREFIX = "Mox "

MANA_SOURCE_CATALOG: Dict[str, ManaSource] = {
    # Moxen
    "Mox Pearl": ManaSource(ManaSourceKind.COLORED_ROCK, "W"),
    "Mox Sapphire": ManaSource(ManaSourceKind.COLORED_ROCK, "U"),
    "Mox Jet": ManaSource(ManaSourceKind.COLORED_ROCK, "B"),
    "Mox Ruby": ManaSource(ManaSourceKind.COLORED_ROCK, "R"),
    "Mox Emerald": ManaSource(ManaSourceKind.COLORED_ROCK, "G"),
    "Mox Opal": ManaSource(ManaSourceKind.METALCRAFT, amount=1),
    # Colorless rocks
    "Sol Ring": ManaSource(ManaSourceKind.FIXED_COLORLESS, "C", 2),
    "Mana Crypt": ManaSource(ManaSourceKind.FIXED_COLORLESS, "C", 2),
    "Mana Vault": ManaSource(ManaSourceKind.FIXED_COLORLESS, "C", 3),
    # Sacrifice for mana
    "Black Lotus": ManaSource(ManaSourceKind.ONE_SHOT, amount=3),
    "Lotus Petal": ManaSource(ManaSourceKind.ONE_SHOT, amount=1),
    # Lands
    "City of Brass": ManaSource(ManaSourceKind.ANY_COLOR_LAND),
    "Mana Confluence": ManaSource(ManaSourceKind.ANY_COLOR_LAND),
    "Starting Town": ManaSource(ManaSourceKind.DUAL_MODE_LAND),
    "Tolarian Academy": ManaSource(ManaSourceKind.SCALING_LAND, "U"),
}

# Kinds that stay on the battlefield and keep producing.
PERMANENT_ROCK_KINDS = {
    ManaSourceKind.COLORED_ROCK,
    ManaSourceKind.FIXED_COLORLESS,
    ManaSourceKind.METALCRAFT,
    ManaSourceKind.DECLARED_ROCK,
}


def classify(card: Card) -> Optional[ManaSource]:
    """
    Look up how a permanent makes mana.

    Named entries win; other lands fall back to their declared colors, then
    to a single colorless. Artifacts outside the catalog tap for their
    declared colors, if any. Other unknown nonland permanents return None (inert).
    """
    source = MANA_SOURCE_CATALOG.get(card.name)
    if source is not None:
        return source

    if not card.is_land:
        if card.is_artifact and card.produced_mana:
            return ManaSource(ManaSourceKind.DECLARED_ROCK)
        return None

    if card.produced_mana:
        return ManaSource(ManaSourceKind.COLORED_LAND)

    return ManaSource(ManaSourceKind.COLORLESS_LAND, "C")


def _is_unknown_mox(card: Card) -> bool:
    # Any "Mox ..." artifact counts as a rock, even without catalog data.
    return card.is_artifact and card.name.startswith(MOX_PREFIX)


def is_mana_permanent(card: Card) -> bool:
    """Lands, mana rocks and uncracked one-shot sources all count as mana in play."""
    if card.is_land:
        return True
    return card.is_artifact and (classify(card) is not None or _is_unknown_mox(card))


def is_mana_rock(card: Card) -> bool:
    """Artifacts that tap for mana and stay on the battlefield."""
    if not card.is_artifact:
        return False
    source = classify(card)
    if source is None:
        return _is_unknown_mox(card)
    return source.kind in PERMANENT_ROCK_KINDS


def is_fast_mana(card: Card) -> bool:
    """Cheap (0-1) artifact rocks that keep producing mana every turn."""
    return is_mana_rock(card) and card.mana_value <= 1
