# card_roles.py - Role tags for deck cards (what the search casts, what the advisor counts)

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Mapping, Set


class CardRole(str, Enum):
    IMPORTANT_CAST = "important_cast"  # the search is allowed to cast it
    INTERACTION = "interaction"
    SELECTION = "selection"            # cantrips, draw and tutors
    PAYOFF = "payoff"
    FORCED_FREE = "forced_free"        # castable for 0 (Phyrexian mana)


class RoleTable:
    """Card name -> set of roles. Unknown names have no roles."""

    def __init__(self, roles: Mapping[str, Iterable[CardRole]]):
        self._roles: Dict[str, FrozenSet[CardRole]] = {
            name: frozenset(tags) for name, tags in roles.items()
        }

    def roles(self, name: str) -> FrozenSet[CardRole]:
        return self._roles.get(name, frozenset())

    def has(self, name: str, role: CardRole) -> bool:
        return role in self.roles(name)

    def names(self) -> Set[str]:
        return set(self._roles)

    def names_with(self, role: CardRole) -> Set[str]:
        return {name for name, tags in self._roles.items() if role in tags}

    def merged(self, extra: Mapping[str, Iterable[CardRole]]) -> "RoleTable":
        """Return a new table with ``extra`` roles added to (not replacing) existing ones."""
        combined: Dict[str, Set[CardRole]] = {name: set(tags) for name, tags in self._roles.items()}
        for name, tags in extra.items():
            combined.setdefault(name, set()).update(tags)
        return RoleTable(combined)

    @classmethod
    def from_tag_lists(cls, mapping: Mapping[str, Iterable[str]]) -> "RoleTable":
        """
        Build a table from free-form tag lists (as stored in the card catalog).
        Tags that are not role names are ignored.
        """
        known = {role.value for role in CardRole}
        return cls({
            name: [CardRole(tag.strip().lower()) for tag in tags if tag.strip().lower() in known]
            for name, tags in mapping.items()
        })

    def __len__(self) -> int:
        return len(self._roles)


IMPORTANT_CASTS = {
    # Mana development
    "Sol Ring",
    "Mana Vault",
    "Sensei's Divining Top",
    "Vexing Bauble",
    "Voltaic Key",
    "Manifold Key",
    "Time Vault",
    "Crop Rotation",
    # Payoffs / engines
    "Tinker",
    "Karn, the Great Creator",
    "Narset, Parter of Veils",
    "Trinisphere",
    "Paradoxical Outcome",
    "Tezzeret the Seeker",
    "Tezzeret, Cruel Captain",
    "Trinket Mage",
    "Balance",
    "Timetwister",
    # Selection / tutors
    "Ancestral Recall",
    "Brainstorm",
    "Ponder",
    "Gitaxian Probe",
    "Mystical Tutor",
    "Vampiric Tutor",
    "Demonic Tutor",
}

INTERACTION = {
    "Force of Will",
    "Force of Negation",
    "Flusterstorm",
    "Mental Misstep",
    "Pyroblast",
    "Veil of Summer",
    "Cabal Therapy",
}

SELECTION = {
    "Ancestral Recall",
    "Brainstorm",
    "Ponder",
    "Gitaxian Probe",
    "Mystical Tutor",
    "Vampiric Tutor",
    "Demonic Tutor",
    "Sensei's Divining Top",
    "Paradoxical Outcome",
}

PAYOFF = {
    "Tinker",
    "Karn, the Great Creator",
    "Narset, Parter of Veils",
    "Trinisphere",
    "Time Vault",
    "Tezzeret the Seeker",
    "Tezzeret, Cruel Captain",
    "Paradoxical Outcome",
}

FORCED_FREE = {
    "Gitaxian Probe",
    "Mental Misstep",
}


def _build_default_roles() -> Dict[str, Set[CardRole]]:
    table: Dict[str, Set[CardRole]] = {}
    for names, role in (
        (IMPORTANT_CASTS, CardRole.IMPORTANT_CAST),
        (INTERACTION, CardRole.INTERACTION),
        (SELECTION, CardRole.SELECTION),
        (PAYOFF, CardRole.PAYOFF),
        (FORCED_FREE, CardRole.FORCED_FREE),
    ):
        for name in names:
            table.setdefault(name, set()).add(role)
    return table


DEFAULT_ROLE_TABLE = RoleTable(_build_default_roles())
