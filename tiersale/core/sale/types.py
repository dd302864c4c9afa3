"""Data types for the tiered-rate sale kernel.

All types are frozen dataclasses (immutable).

Units/conventions:
- `amount` / `raised` / `goal` are integer currency units.
- `*_rate` values are token units per currency unit.
- `cap` / `total_issued` / `minted` are integer token units.
- ticks are non-negative ordinals (block heights, epochs, ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class Phase(Enum):
    PENDING = "pending"
    ACTIVE = "active"
    ENDED = "ended"
    FINALIZED = "finalized"


@unique
class Action(Enum):
    """One member per kernel command."""
    CONTRIBUTE = "contribute"
    FINALIZE = "finalize"


@unique
class Event(Enum):
    """Notification emitted by an accepted step."""
    TOKEN_PURCHASE = "TokenPurchase"
    FINALIZED = "Finalized"


@dataclass(frozen=True)
class TierRate:
    """Special-rate window covering ticks in ``[start, end)``."""

    start: int
    end: int
    rate: int
    name: str = ""

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("tier start must be non-negative")
        if self.start >= self.end:
            raise ValueError(f"tier window must be non-empty: [{self.start}, {self.end})")
        if self.rate <= 0:
            raise ValueError("tier rate must be positive")

    def contains(self, tick: int) -> bool:
        return self.start <= tick < self.end


@dataclass(frozen=True)
class SaleConfig:
    """Immutable sale parameters, fixed at construction.

    Tier windows are not checked for overlap: lookup is first-match in declared
    order, so overlapping windows are well defined.
    """

    start_tick: int
    end_tick: int
    base_rate: int
    cap: int
    goal: int
    beneficiary_wallet: str
    initial_ledger_balance: int = 0
    tier_rates: tuple[TierRate, ...] = ()

    def __post_init__(self) -> None:
        if self.start_tick < 0:
            raise ValueError("start_tick must be non-negative")
        if self.start_tick >= self.end_tick:
            raise ValueError("start_tick must be < end_tick")
        if self.base_rate <= 0:
            raise ValueError("base_rate must be positive")
        if self.goal < 0:
            raise ValueError("goal must be non-negative")
        if self.initial_ledger_balance < 0:
            raise ValueError("initial_ledger_balance must be non-negative")
        if self.cap < self.initial_ledger_balance:
            raise ValueError("cap must be >= initial_ledger_balance")
        if not self.beneficiary_wallet:
            raise ValueError("beneficiary_wallet must be set")
        # Accept any iterable of tiers but store a tuple so the config stays hashable.
        if not isinstance(self.tier_rates, tuple):
            object.__setattr__(self, "tier_rates", tuple(self.tier_rates))
        for tier in self.tier_rates:
            if not isinstance(tier, TierRate):
                raise TypeError(f"tier_rates entries must be TierRate, got {type(tier).__name__}")
            if tier.end > self.end_tick:
                raise ValueError(f"tier window [{tier.start}, {tier.end}) extends past end_tick")


@dataclass(frozen=True)
class SaleState:
    """Mutable part of the sale, replaced wholesale on every accepted step."""

    total_issued: int = 0
    raised: int = 0
    finalized: bool = False
    contributions: int = 0


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0/False."""

    action: Action
    tick: int = 0
    amount: int = 0        # contribute
    auth_ok: bool = False  # finalize


@dataclass(frozen=True)
class Effect:
    """Post-state observables emitted after a successful step."""

    event: Event
    tick: int
    rate: int = 0
    amount: int = 0
    minted: int = 0
    total_issued_after: int = 0
    raised_after: int = 0
    finalized: bool = False


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step."""

    accepted: bool
    state: SaleState | None = None
    effect: Effect | None = None
    rejection: str | None = None
