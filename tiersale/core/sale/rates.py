"""Tiered rate calculator and phase derivation.

Pure functions of ``(config, tick)`` (plus the ``finalized`` flag for phases).
Tier windows are half-open; lookup is a linear scan so first match in declared
order wins when windows overlap.
"""

from __future__ import annotations

from .types import Phase, SaleConfig


def tier_index_at(config: SaleConfig, tick: int) -> int | None:
    """Index of the first tier containing ``tick``, or None."""
    for i, tier in enumerate(config.tier_rates):
        if tier.contains(tick):
            return i
    return None


def rate_at(config: SaleConfig, tick: int) -> int:
    """Rate in effect at ``tick``; ``base_rate`` outside every tier."""
    idx = tier_index_at(config, tick)
    if idx is None:
        return config.base_rate
    return config.tier_rates[idx].rate


def tokens_for(config: SaleConfig, amount: int, tick: int) -> int:
    return amount * rate_at(config, tick)


def phase_at(config: SaleConfig, tick: int, finalized: bool) -> Phase:
    if finalized:
        return Phase.FINALIZED
    if tick < config.start_tick:
        return Phase.PENDING
    if tick < config.end_tick:
        return Phase.ACTIVE
    return Phase.ENDED
