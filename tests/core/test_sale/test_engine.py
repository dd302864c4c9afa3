"""Tests for tiersale/core/sale/engine.py: dispatch table + step function.

Tests cover known action sequences end-to-end through the engine.
"""

import pytest
from dataclasses import replace

from tiersale.core.sale import (
    Action,
    ActionParams,
    AlreadyFinalizedError,
    AuthorizationError,
    CapExceededError,
    Event,
    PhaseError,
    SaleConfig,
    SaleInvariantError,
    SaleParamError,
    SaleState,
    TierRate,
    initial_state,
    step,
    step_or_raise,
)
from tiersale.core.sale.engine import MAX_TICK


def _config(**overrides) -> SaleConfig:
    """Helper: the reference sale (rate 2000, 250M pre-credited, 500M cap)."""
    kwargs = dict(
        start_tick=10,
        end_tick=20,
        base_rate=2000,
        cap=500_000_000,
        goal=50_000,
        beneficiary_wallet="wallet",
        initial_ledger_balance=250_000_000,
        tier_rates=(TierRate(10, 12, 2400, name="week1"),),
    )
    kwargs.update(overrides)
    return SaleConfig(**kwargs)


def _contribute(amount: int, tick: int) -> ActionParams:
    return ActionParams(action=Action.CONTRIBUTE, tick=tick, amount=amount)


def _finalize(tick: int, auth_ok: bool = True) -> ActionParams:
    return ActionParams(action=Action.FINALIZE, tick=tick, auth_ok=auth_ok)


# ---------------------------------------------------------------------------
# contribute
# ---------------------------------------------------------------------------

class TestContribute:
    def test_base_rate(self):
        c = _config()
        r = step(c, initial_state(c), _contribute(100_000, 15))
        assert r.accepted
        assert r.state.total_issued == 450_000_000
        assert r.state.raised == 100_000
        assert r.state.contributions == 1
        assert r.effect.event == Event.TOKEN_PURCHASE
        assert r.effect.rate == 2000
        assert r.effect.minted == 200_000_000
        assert r.effect.total_issued_after == 450_000_000

    def test_tier_rate(self):
        c = _config()
        r = step(c, initial_state(c), _contribute(100_000, 11))
        assert r.accepted
        assert r.effect.rate == 2400
        assert r.effect.minted == 240_000_000

    def test_at_start_tick_accepted(self):
        c = _config()
        assert step(c, initial_state(c), _contribute(1, 10)).accepted

    def test_before_start_rejected(self):
        c = _config()
        r = step(c, initial_state(c), _contribute(1, 9))
        assert not r.accepted
        assert r.rejection == "phase"

    def test_at_end_tick_rejected(self):
        c = _config()
        r = step(c, initial_state(c), _contribute(1, 20))
        assert not r.accepted
        assert r.rejection == "phase"

    def test_after_finalize_rejected(self):
        c = _config()
        s = replace(initial_state(c), finalized=True, total_issued=c.cap)
        r = step(c, s, _contribute(1, 15))
        assert r.rejection == "phase"

    def test_exactly_cap_accepted(self):
        c = _config()
        r = step(c, initial_state(c), _contribute(125_000, 15))
        assert r.accepted
        assert r.state.total_issued == c.cap

    def test_over_cap_rejected_whole(self):
        c = _config()
        s = initial_state(c)
        r = step(c, s, _contribute(125_001, 15))
        assert not r.accepted
        assert r.rejection == "cap"
        assert s.total_issued == 250_000_000

    @pytest.mark.parametrize("amount", [0, -5, True])
    def test_amount_domain(self, amount):
        c = _config()
        r = step(c, initial_state(c), _contribute(amount, 15))
        assert not r.accepted
        assert r.rejection == "param_domain:amount"

    def test_negative_tick_rejected(self):
        c = _config()
        r = step(c, initial_state(c), _contribute(1, -1))
        assert r.rejection == "param_domain:tick"


# ---------------------------------------------------------------------------
# finalize
# ---------------------------------------------------------------------------

class TestFinalize:
    def test_credits_remaining(self):
        c = _config()
        s = step(c, initial_state(c), _contribute(100_000, 15)).state
        r = step(c, s, _finalize(20))
        assert r.accepted
        assert r.effect.event == Event.FINALIZED
        assert r.effect.minted == 50_000_000
        assert r.state.total_issued == c.cap
        assert r.state.finalized is True

    def test_no_contributions_credits_cap_minus_initial(self):
        c = _config()
        r = step(c, initial_state(c), _finalize(20))
        assert r.accepted
        assert r.effect.minted == 250_000_000

    def test_nothing_remaining_mints_zero(self):
        c = _config(cap=250_000_000)
        r = step(c, initial_state(c), _finalize(20))
        assert r.accepted
        assert r.effect.minted == 0
        assert r.state.finalized is True

    def test_one_past_end_accepted(self):
        c = _config()
        assert step(c, initial_state(c), _finalize(21)).accepted

    @pytest.mark.parametrize("tick", [0, 10, 19])
    def test_before_end_rejected(self, tick):
        c = _config()
        r = step(c, initial_state(c), _finalize(tick))
        assert r.rejection == "phase"

    @pytest.mark.parametrize("tick", [0, 15, 20, 99])
    def test_non_owner_rejected_at_any_tick(self, tick):
        c = _config()
        r = step(c, initial_state(c), _finalize(tick, auth_ok=False))
        assert r.rejection == "auth"

    @pytest.mark.parametrize("tick", [-1, True, MAX_TICK + 1])
    def test_non_owner_rejected_before_tick_domain(self, tick):
        c = _config()
        r = step(c, initial_state(c), _finalize(tick, auth_ok=False))
        assert r.rejection == "auth"

    def test_owner_with_bad_tick_is_domain_error(self):
        c = _config()
        r = step(c, initial_state(c), _finalize(-1))
        assert r.rejection == "param_domain:tick"

    def test_second_finalize_rejected(self):
        c = _config()
        s = step(c, initial_state(c), _finalize(21)).state
        r = step(c, s, _finalize(22))
        assert not r.accepted
        assert r.rejection == "already_finalized"

    def test_goal_not_consulted(self):
        c = _config(goal=10**12)
        r = step(c, initial_state(c), _finalize(20))
        assert r.accepted


# ---------------------------------------------------------------------------
# step_or_raise
# ---------------------------------------------------------------------------

class TestStepOrRaise:
    def test_accepted_returns_result(self):
        c = _config()
        r = step_or_raise(c, initial_state(c), _contribute(1, 10))
        assert r.accepted

    @pytest.mark.parametrize(
        "state_kw,params,exc",
        [
            ({}, _contribute(1, 5), PhaseError),
            ({}, _contribute(10**9, 15), CapExceededError),
            ({}, _contribute(0, 15), SaleParamError),
            ({}, _finalize(20, auth_ok=False), AuthorizationError),
            ({}, _finalize(15), PhaseError),
            ({"finalized": True, "total_issued": 500_000_000}, _finalize(25), AlreadyFinalizedError),
        ],
    )
    def test_rejections_map_to_errors(self, state_kw, params, exc):
        c = _config()
        s = replace(initial_state(c), **state_kw)
        with pytest.raises(exc):
            step_or_raise(c, s, params)

    def test_invariant_violation_raises(self):
        c = _config()
        # Corrupt pre-state: issuance below the pre-credited balance.
        s = SaleState(total_issued=0)
        with pytest.raises(SaleInvariantError) as ei:
            step_or_raise(c, s, _contribute(1, 15))
        assert "inv_issued_covers_initial" in ei.value.violations
