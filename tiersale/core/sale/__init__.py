"""`sale`: pure-Python kernel of the tiered-rate token sale.

- deterministic, integer-only transitions,
- immutable config and state (frozen dataclasses),
- fail-closed guards and invariant checks.

Public API:
- `initial_state(config) -> SaleState`
- `step(config, state, params) -> StepResult`
- `step_or_raise(config, state, params) -> StepResult` (raises on rejection)
- `rate_at(config, tick)` / `phase_at(config, tick, finalized)`
"""

from .engine import step, step_or_raise
from .errors import (
    AlreadyFinalizedError,
    AuthorizationError,
    CapExceededError,
    LedgerError,
    PhaseError,
    SaleError,
    SaleInvariantError,
    SaleParamError,
)
from .rates import phase_at, rate_at, tier_index_at, tokens_for
from .state import initial_state, state_from_dict, state_to_dict
from .types import (
    Action,
    ActionParams,
    Effect,
    Event,
    Phase,
    SaleConfig,
    SaleState,
    StepResult,
    TierRate,
)
from .updates import unsold_units

__all__ = [
    "step",
    "step_or_raise",
    "initial_state",
    "state_from_dict",
    "state_to_dict",
    "rate_at",
    "phase_at",
    "tier_index_at",
    "tokens_for",
    "unsold_units",
    "Action",
    "ActionParams",
    "Effect",
    "Event",
    "Phase",
    "SaleConfig",
    "SaleState",
    "StepResult",
    "TierRate",
    "SaleError",
    "PhaseError",
    "CapExceededError",
    "AuthorizationError",
    "AlreadyFinalizedError",
    "SaleParamError",
    "SaleInvariantError",
    "LedgerError",
]
