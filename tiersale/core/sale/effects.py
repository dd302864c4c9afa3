"""Effect functions for the sale kernel.

Each computes the ``Effect`` from the PRE-state and POST-state of an accepted
step; ``minted`` is the issuance delta the host must apply to the ledger.
"""

from __future__ import annotations

from .rates import rate_at
from .types import ActionParams, Effect, Event, SaleConfig, SaleState


def effect_contribute(
    config: SaleConfig, pre: SaleState, post: SaleState, params: ActionParams,
) -> Effect:
    return Effect(
        event=Event.TOKEN_PURCHASE,
        tick=params.tick,
        rate=rate_at(config, params.tick),
        amount=params.amount,
        minted=post.total_issued - pre.total_issued,
        total_issued_after=post.total_issued,
        raised_after=post.raised,
    )


def effect_finalize(
    config: SaleConfig, pre: SaleState, post: SaleState, params: ActionParams,
) -> Effect:
    return Effect(
        event=Event.FINALIZED,
        tick=params.tick,
        minted=post.total_issued - pre.total_issued,
        total_issued_after=post.total_issued,
        raised_after=post.raised,
        finalized=True,
    )
