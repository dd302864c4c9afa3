"""Dispatch-table engine for the sale kernel.

``step(config, state, params)`` is the single entry point. It:

1. Refuses an unauthorized finalize before anything else.
2. Validates parameter domains.
3. Dispatches to the correct guard / update / effect functions.
4. Checks all invariants on the post-state.
5. Returns a ``StepResult`` (accepted or rejected with reason).

Nothing here mutates its inputs, so a rejected step leaves no trace.
"""

from __future__ import annotations

from typing import Callable

from .effects import effect_contribute, effect_finalize
from .errors import (
    AlreadyFinalizedError,
    AuthorizationError,
    CapExceededError,
    PhaseError,
    SaleError,
    SaleInvariantError,
    SaleParamError,
)
from .guards import (
    REJECT_AUTH,
    REJECT_CAP,
    REJECT_FINALIZED,
    REJECT_PHASE,
    guard_contribute,
    guard_finalize,
)
from .invariants import check_all
from .types import Action, ActionParams, Effect, SaleConfig, SaleState, StepResult
from .updates import apply_contribute, apply_finalize

GuardFn = Callable[[SaleConfig, SaleState, ActionParams], "str | None"]
UpdateFn = Callable[[SaleConfig, SaleState, ActionParams], SaleState]
EffectFn = Callable[[SaleConfig, SaleState, SaleState, ActionParams], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.CONTRIBUTE: (guard_contribute, apply_contribute, effect_contribute),
    Action.FINALIZE: (guard_finalize, apply_finalize, effect_finalize),
}

# -- Parameter domain bounds --------------------------------------------------

MAX_AMOUNT: int = 10**30
MAX_TICK: int = 2**63 - 1

# Per-action bounds: list of (field_name, min_val, max_val).
_PARAM_BOUNDS: dict[Action, list[tuple[str, int, int]]] = {
    Action.CONTRIBUTE: [
        ("tick", 0, MAX_TICK),
        ("amount", 1, MAX_AMOUNT),
    ],
    Action.FINALIZE: [
        ("tick", 0, MAX_TICK),
    ],
}

_REJECTION_ERRORS: dict[str, type[SaleError]] = {
    REJECT_PHASE: PhaseError,
    REJECT_CAP: CapExceededError,
    REJECT_AUTH: AuthorizationError,
    REJECT_FINALIZED: AlreadyFinalizedError,
}


def _validate_params(params: ActionParams) -> str | None:
    """Check parameter domain bounds. Returns rejection reason or None."""
    bounds = _PARAM_BOUNDS.get(params.action)
    if bounds is None:
        return None
    for field, lo, hi in bounds:
        val = getattr(params, field)
        if not isinstance(val, int) or isinstance(val, bool):
            return f"param_domain:{field}"
        if val < lo or val > hi:
            return f"param_domain:{field}"
    return None


def step(config: SaleConfig, state: SaleState, params: ActionParams) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with a ``rejection`` reason string.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return StepResult(accepted=False, rejection=f"unknown_action:{params.action}")

    if params.action is Action.FINALIZE and not params.auth_ok:
        return StepResult(accepted=False, rejection=REJECT_AUTH)

    domain_err = _validate_params(params)
    if domain_err is not None:
        return StepResult(accepted=False, rejection=domain_err)

    guard_fn, update_fn, effect_fn = entry

    reason = guard_fn(config, state, params)
    if reason is not None:
        return StepResult(accepted=False, rejection=reason)

    new_state = update_fn(config, state, params)

    violations = check_all(config, new_state)
    if violations:
        return StepResult(
            accepted=False,
            rejection=f"invariant:{','.join(violations)}",
        )

    effect = effect_fn(config, state, new_state, params)
    return StepResult(accepted=True, state=new_state, effect=effect)


def raise_for_rejection(reason: str) -> None:
    """Raise the ``SaleError`` subclass matching a rejection code."""
    if reason.startswith("param_domain:") or reason.startswith("unknown_action:"):
        raise SaleParamError(reason)
    if reason.startswith("invariant:"):
        violations = reason.removeprefix("invariant:").split(",")
        raise SaleInvariantError(violations)
    raise _REJECTION_ERRORS.get(reason, SaleError)(reason)


def step_or_raise(config: SaleConfig, state: SaleState, params: ActionParams) -> StepResult:
    """Like ``step()`` but raises on rejection instead of returning a result.

    Raises:
        SaleParamError: Parameter outside its domain bounds.
        PhaseError: Operation outside its phase window.
        CapExceededError: Contribution would exceed the cap.
        AuthorizationError: Finalize by a non-owner.
        AlreadyFinalizedError: Second finalize.
        SaleInvariantError: Post-state violates one or more invariants.
    """
    result = step(config, state, params)
    if result.accepted:
        return result
    raise_for_rejection(result.rejection or "")
    return result  # pragma: no cover
