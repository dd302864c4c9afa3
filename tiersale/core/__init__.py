"""
Core sale algorithms
"""

from .sale import (
    Action,
    ActionParams,
    Effect,
    Event,
    Phase,
    SaleConfig,
    SaleState,
    StepResult,
    TierRate,
    initial_state,
    phase_at,
    rate_at,
    step,
    step_or_raise,
)

__all__ = [
    "Action",
    "ActionParams",
    "Effect",
    "Event",
    "Phase",
    "SaleConfig",
    "SaleState",
    "StepResult",
    "TierRate",
    "initial_state",
    "phase_at",
    "rate_at",
    "step",
    "step_or_raise",
]
