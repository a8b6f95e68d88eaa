# mana_pool.py - Typed mana pool with a deterministic payment order

from typing import Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from cost_parser import COLORED, ManaCostRequirement, parse_cost

CostLike = Union[str, ManaCostRequirement, None]

# Generic costs are paid from whatever is left, in this order.
GENERIC_PAYMENT_ORDER = ("C", "flex", "W", "U", "B", "R", "G")
POOL_FIELDS = ("W", "U", "B", "R", "G", "C", "flex")


class InsufficientManaError(ValueError):
    """Raised when pay() is asked to spend mana the pool does not have."""


def _requirement(cost: CostLike) -> ManaCostRequirement:
    if isinstance(cost, ManaCostRequirement):
        return cost
    return parse_cost(cost)


class ManaPool(BaseModel):
    """
    Mana available during the simulated turn.

    - W/U/B/R/G: colored mana
    - C: strictly colorless (the only thing that pays {C})
    - flex: "any color" mana, pays colored or generic but never {C}
    """
    model_config = ConfigDict(frozen=True)

    W: int = Field(0, ge=0)
    U: int = Field(0, ge=0)
    B: int = Field(0, ge=0)
    R: int = Field(0, ge=0)
    G: int = Field(0, ge=0)
    C: int = Field(0, ge=0)
    flex: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.W + self.U + self.B + self.R + self.G + self.C + self.flex

    def amount(self, kind: str) -> int:
        return getattr(self, kind)

    def add(self, **amounts: int) -> "ManaPool":
        """Return a new pool with the given amounts added (e.g. ``add(U=2)``)."""
        current = self.model_dump()
        for kind, n in amounts.items():
            current[kind] += n
        return ManaPool(**current)

    def _spend(self, req: ManaCostRequirement) -> Tuple[bool, Dict[str, int]]:
        """Walk the payment order on a scratch copy. Returns (ok, remaining)."""
        p = self.model_dump()

        # 1) Strict colorless only from C.
        if p["C"] < req.C:
            return False, p
        p["C"] -= req.C

        # 2) Colored from its own color, shortfall from flex.
        for color in COLORED:
            need = req.colored(color)
            if not need:
                continue
            from_color = min(p[color], need)
            p[color] -= from_color
            remain = need - from_color
            if remain > 0:
                if p["flex"] < remain:
                    return False, p
                p["flex"] -= remain

        # 3) Generic from whatever is left.
        generic = req.generic
        for kind in GENERIC_PAYMENT_ORDER:
            if generic <= 0:
                break
            taken = min(p[kind], generic)
            p[kind] -= taken
            generic -= taken

        return generic <= 0, p

    def can_pay(self, cost: CostLike) -> bool:
        ok, _ = self._spend(_requirement(cost))
        return ok

    def pay(self, cost: CostLike) -> "ManaPool":
        ok, remaining = self._spend(_requirement(cost))
        if not ok:
            raise InsufficientManaError(f"Cannot pay {cost!r} from pool {self.describe()}")
        return ManaPool(**remaining)

    def describe(self) -> str:
        parts = [f"{self.amount(k)}{k}" for k in ("W", "U", "B", "R", "G", "C") if self.amount(k)]
        if self.flex:
            parts.append(f"{self.flex}flex")
        return " ".join(parts) if parts else "0"

    def as_key(self) -> Tuple[int, ...]:
        return tuple(self.amount(k) for k in POOL_FIELDS)


EMPTY_POOL = ManaPool()
