"""State transition functions for the sale kernel.

One pure function per action, evaluated against the PRE-state and returning a
new ``SaleState`` via ``dataclasses.replace()``.
"""

from __future__ import annotations

from dataclasses import replace

from .rates import tokens_for
from .types import ActionParams, SaleConfig, SaleState


def unsold_units(config: SaleConfig, state: SaleState) -> int:
    """Token units still issuable under the cap (zero once finalized)."""
    return config.cap - state.total_issued


def apply_contribute(config: SaleConfig, state: SaleState, params: ActionParams) -> SaleState:
    return replace(
        state,
        total_issued=state.total_issued + tokens_for(config, params.amount, params.tick),
        raised=state.raised + params.amount,
        contributions=state.contributions + 1,
    )


def apply_finalize(config: SaleConfig, state: SaleState, params: ActionParams) -> SaleState:
    return replace(
        state,
        total_issued=state.total_issued + unsold_units(config, state),
        finalized=True,
    )
