"""Invariant checkers for the sale kernel.

Each function returns True when the invariant holds, and ``check_all()``
returns the list of violated invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import Callable

from .types import SaleConfig, SaleState


def inv_issued_within_cap(c: SaleConfig, s: SaleState) -> bool:
    return s.total_issued <= c.cap


def inv_issued_covers_initial(c: SaleConfig, s: SaleState) -> bool:
    return s.total_issued >= c.initial_ledger_balance


def inv_raised_nonneg(c: SaleConfig, s: SaleState) -> bool:
    return s.raised >= 0


def inv_finalized_fills_cap(c: SaleConfig, s: SaleState) -> bool:
    if not s.finalized:
        return True
    return s.total_issued == c.cap


def inv_no_contributions_no_sales(c: SaleConfig, s: SaleState) -> bool:
    if s.contributions > 0 or s.finalized:
        return True
    return s.raised == 0 and s.total_issued == c.initial_ledger_balance


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[SaleConfig, SaleState], bool]] = {
    "inv_issued_within_cap": inv_issued_within_cap,
    "inv_issued_covers_initial": inv_issued_covers_initial,
    "inv_raised_nonneg": inv_raised_nonneg,
    "inv_finalized_fills_cap": inv_finalized_fills_cap,
    "inv_no_contributions_no_sales": inv_no_contributions_no_sales,
}


def check_all(config: SaleConfig, state: SaleState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(config, state)
    ]
