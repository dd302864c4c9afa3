"""
Crowdsale host: the sale kernel behind a transactional boundary.

`Crowdsale` owns the live `SaleState` and applies accepted kernel steps to an
external token ledger. It is conservative:
- Every command and query runs under one re-entrant lock, so the cap check,
  the ledger mint and the state commit are a single critical section.
- The kernel is consulted first; the ledger is only touched for an accepted
  step, and the new state is committed only after the ledger calls succeed.
- Finalize is owner-only; the `finalized` flag is re-read inside the lock.
  If the ledger refuses the minting lock after the remainder mint, the sale
  stays unfinalized and a later finalize completes it without minting again.

Ticks are explicit arguments. When a `Clock` is configured, omitted ticks are
read from it.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from ..core.sale import (
    Action,
    ActionParams,
    Effect,
    Event,
    Phase,
    SaleConfig,
    SaleState,
    initial_state,
    phase_at,
    rate_at,
    state_to_dict,
    step,
    unsold_units,
)
from ..core.sale.engine import raise_for_rejection
from ..core.sale.errors import LedgerError, SaleInvariantError, SaleParamError
from ..state.issuance import IssuanceLedger
from ..state.ledger import Address, Ledger, TokenLedger
from .clock import Clock
from .config import sale_config_to_dict

logger = logging.getLogger(__name__)

Listener = Callable[[Effect], None]


class Crowdsale:
    """
    Tiered-rate token sale with one-shot finalization.

    Example:
        sale = Crowdsale(config, owner="owner", ledger=TokenLedger())
        sale.contribute(100_000, tick=config.start_tick, sender="alice")
        sale.finalize(tick=config.end_tick, sender="owner")
    """

    def __init__(
        self,
        config: SaleConfig,
        *,
        owner: Address,
        ledger: Optional[Ledger] = None,
        clock: Optional[Clock] = None,
        is_owner: Optional[Callable[[Address], bool]] = None,
        preallocate: bool = True,
    ) -> None:
        """
        Args:
            config: Immutable sale parameters
            owner: Identity allowed to finalize
            ledger: Token ledger primitives (defaults to an in-memory `TokenLedger`)
            clock: Tick source used when a call omits its tick
            is_owner: Authorization check (defaults to equality with `owner`)
            preallocate: Mint `initial_ledger_balance` to the beneficiary now;
                pass False when the ledger already holds it

        Raises:
            LedgerError: If the initial allocation is refused
        """
        self._config = config
        self._owner = owner
        self._is_owner = is_owner if is_owner is not None else (lambda sender: sender == owner)
        self._clock = clock
        self._ledger: Ledger = ledger if ledger is not None else TokenLedger()
        self._lock = threading.RLock()
        self._state = initial_state(config)
        self._events: List[Effect] = []
        self._listeners: Dict[Event, List[Listener]] = {event: [] for event in Event}

        if preallocate and config.initial_ledger_balance > 0:
            if not self._ledger.mint(config.beneficiary_wallet, config.initial_ledger_balance):
                raise LedgerError("ledger refused the initial beneficiary allocation")
        self._issuance = IssuanceLedger(self._ledger, config.cap, issued=config.initial_ledger_balance)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def contribute(
        self,
        amount: int,
        tick: Optional[int] = None,
        sender: Optional[Address] = None,
        *,
        recipient: Optional[Address] = None,
    ) -> int:
        """
        Accept `amount` currency units and mint the tokens they buy.

        Tokens go to the beneficiary wallet unless `recipient` is given.

        Returns:
            Token units minted

        Raises:
            PhaseError: Outside the active window
            CapExceededError: The purchase would exceed the cap
            SaleParamError: Non-positive amount or bad tick
            LedgerError: The ledger refused the mint
        """
        with self._lock:
            t = self._resolve_tick(tick)
            params = ActionParams(action=Action.CONTRIBUTE, tick=t, amount=amount)
            result = step(self._config, self._state, params)
            if not result.accepted:
                logger.warning(
                    "contribution rejected: amount=%s tick=%s sender=%s reason=%s",
                    amount, t, sender, result.rejection,
                )
                raise_for_rejection(result.rejection or "")
            assert result.state is not None and result.effect is not None

            target = recipient if recipient is not None else self._config.beneficiary_wallet
            self._issuance.issue(target, result.effect.minted)
            self._commit(result.state, result.effect)
            logger.info(
                "contribution accepted: amount=%s rate=%s minted=%s to=%s sender=%s tick=%s",
                amount, result.effect.rate, result.effect.minted, target, sender, t,
            )
            return result.effect.minted

    def finalize(self, tick: Optional[int] = None, sender: Optional[Address] = None) -> Effect:
        """
        Settle the sale: mint the unsold remainder to the beneficiary wallet,
        lock minting and mark the sale finalized.

        The funding goal is never consulted.

        Returns:
            The `Finalized` effect record

        Raises:
            AuthorizationError: `sender` is not the owner
            AlreadyFinalizedError: The sale was finalized before
            PhaseError: `tick` is before the end of the sale
            LedgerError: The ledger refused the mint or the minting lock
        """
        with self._lock:
            t = self._resolve_tick(tick)
            params = ActionParams(action=Action.FINALIZE, tick=t, auth_ok=bool(self._is_owner(sender)))
            result = step(self._config, self._state, params)
            if not result.accepted:
                logger.warning(
                    "finalize rejected: tick=%s sender=%s reason=%s", t, sender, result.rejection,
                )
                raise_for_rejection(result.rejection or "")
            assert result.state is not None and result.effect is not None

            # A retry after a refused finish_minting finds the remainder
            # already issued and only re-runs the minting lock.
            outstanding = result.state.total_issued - self._issuance.issued
            if outstanding > 0:
                self._issuance.issue(self._config.beneficiary_wallet, outstanding)
            self._issuance.finish()
            self._commit(result.state, result.effect)
            logger.info(
                "sale finalized: unsold=%s credited to %s, total_issued=%s tick=%s",
                result.effect.minted, self._config.beneficiary_wallet, result.state.total_issued, t,
            )
            return result.effect

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def phase(self, tick: Optional[int] = None) -> Phase:
        with self._lock:
            return phase_at(self._config, self._resolve_tick(tick), self._state.finalized)

    def rate_at(self, tick: Optional[int] = None) -> int:
        return rate_at(self._config, self._resolve_tick(tick))

    def goal_reached(self, tick: Optional[int] = None) -> bool:
        """Whether the currency raised meets the goal.

        `tick` is accepted for interface symmetry; the answer depends only on
        the contributions accepted so far and is unaffected by finalization.
        """
        with self._lock:
            return self._state.raised >= self._config.goal

    @property
    def config(self) -> SaleConfig:
        return self._config

    @property
    def owner(self) -> Address:
        return self._owner

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def state(self) -> SaleState:
        with self._lock:
            return self._state

    @property
    def cap(self) -> int:
        return self._config.cap

    @property
    def total_issued(self) -> int:
        with self._lock:
            return self._state.total_issued

    @property
    def raised(self) -> int:
        with self._lock:
            return self._state.raised

    @property
    def finalized(self) -> bool:
        with self._lock:
            return self._state.finalized

    @property
    def remaining(self) -> int:
        with self._lock:
            return unsold_units(self._config, self._state)

    @property
    def cap_reached(self) -> bool:
        with self._lock:
            return self._state.total_issued >= self._config.cap

    @property
    def events(self) -> tuple[Effect, ...]:
        with self._lock:
            return tuple(self._events)

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of config, state and ledger totals."""
        with self._lock:
            snap: Dict[str, Any] = {
                "config": sale_config_to_dict(self._config),
                "state": state_to_dict(self._state),
                "beneficiary_balance": self._ledger.balance_of(self._config.beneficiary_wallet),
                "total_supply": self._ledger.total_supply(),
                "minting_finished": self._issuance.finished,
            }
            if self._clock is not None:
                snap["tick"] = self._clock.now()
                snap["phase"] = self.phase().value
            return snap

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, event: Event, handler: Optional[Listener] = None):
        """
        Register `handler` for `event`. Usable as a decorator:

            @sale.subscribe(Event.FINALIZED)
            def on_finalized(effect): ...
        """
        def register(fn: Listener) -> Listener:
            with self._lock:
                self._listeners[event].append(fn)
            return fn

        if handler is None:
            return register
        return register(handler)

    def unsubscribe(self, event: Event, handler: Listener) -> None:
        with self._lock:
            if handler in self._listeners[event]:
                self._listeners[event].remove(handler)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_tick(self, tick: Optional[int]) -> int:
        if tick is not None:
            return tick
        if self._clock is None:
            raise SaleParamError("tick is required when no clock is configured")
        return self._clock.now()

    def _commit(self, new_state: SaleState, effect: Effect) -> None:
        if self._issuance.issued != new_state.total_issued:
            raise SaleInvariantError(["inv_ledger_mirrors_state"])
        self._state = new_state
        self._events.append(effect)
        for listener in list(self._listeners[effect.event]):
            try:
                listener(effect)
            except Exception:
                # The step is committed; a listener cannot roll it back.
                logger.exception("listener %r failed for %s", listener, effect.event.value)
