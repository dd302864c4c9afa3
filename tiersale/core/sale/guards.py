"""Guard functions for the sale kernel.

One pure function per action. Each returns ``None`` when the action is allowed
in the given PRE-state, or the rejection code naming the failed precondition.
Codes map onto exception classes in ``engine.step_or_raise()``.
"""

from __future__ import annotations

from .rates import phase_at, tokens_for
from .types import ActionParams, Phase, SaleConfig, SaleState

REJECT_PHASE = "phase"
REJECT_CAP = "cap"
REJECT_AUTH = "auth"
REJECT_FINALIZED = "already_finalized"


def guard_contribute(config: SaleConfig, state: SaleState, params: ActionParams) -> str | None:
    if phase_at(config, params.tick, state.finalized) is not Phase.ACTIVE:
        return REJECT_PHASE
    units = tokens_for(config, params.amount, params.tick)
    if state.total_issued + units > config.cap:
        return REJECT_CAP
    return None


def guard_finalize(config: SaleConfig, state: SaleState, params: ActionParams) -> str | None:
    # Order matters: a non-owner is rejected regardless of tick, and a second
    # finalize reports the flag rather than the FINALIZED phase.
    if not params.auth_ok:
        return REJECT_AUTH
    if state.finalized:
        return REJECT_FINALIZED
    if phase_at(config, params.tick, state.finalized) is not Phase.ENDED:
        return REJECT_PHASE
    return None
