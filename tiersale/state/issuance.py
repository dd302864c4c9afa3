"""
Issuance ledger: cap enforcement over the external mint primitives.

The sale kernel decides *what* to mint; this wrapper performs the calls against
a `Ledger`, keeps a running issued total, and refuses anything that would push
that total above the immutable cap.
"""

from __future__ import annotations

from ..core.sale.errors import CapExceededError, LedgerError
from .ledger import Address, Amount, Ledger


class IssuanceLedger:
    """
    Running issued total against an immutable cap.

    `issued` starts at the amount already credited before the sale (the
    initial beneficiary balance) and only grows.
    """

    def __init__(self, ledger: Ledger, cap: Amount, issued: Amount = 0):
        if issued < 0:
            raise ValueError(f"issued must be non-negative: {issued}")
        if issued > cap:
            raise ValueError(f"issued {issued} exceeds cap {cap}")
        self._ledger = ledger
        self._cap = cap
        self._issued = issued
        self._finished = False

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def cap(self) -> Amount:
        return self._cap

    @property
    def issued(self) -> Amount:
        return self._issued

    @property
    def remaining(self) -> Amount:
        return self._cap - self._issued

    @property
    def finished(self) -> bool:
        return self._finished

    def issue(self, address: Address, amount: Amount) -> None:
        """
        Mint `amount` to `address` under the cap.

        Raises:
            CapExceededError: If the mint would exceed the cap
            LedgerError: If minting is finished or the primitive refuses
        """
        if amount <= 0:
            raise ValueError(f"issue amount must be positive: {amount}")
        if self._finished:
            raise LedgerError("minting already finished")
        if self._issued + amount > self._cap:
            raise CapExceededError(
                f"issuing {amount} would exceed cap: {self._issued} + {amount} > {self._cap}"
            )
        if not self._ledger.mint(address, amount):
            raise LedgerError(f"ledger refused mint of {amount} to {address}")
        self._issued += amount

    def finish(self) -> None:
        """Call the ledger's finish-minting primitive (once)."""
        if self._finished:
            raise LedgerError("minting already finished")
        if not self._ledger.finish_minting():
            raise LedgerError("ledger refused finish_minting")
        self._finished = True

    def __repr__(self) -> str:
        return f"IssuanceLedger(issued={self._issued}, cap={self._cap}, finished={self._finished})"
