"""
Token ledger primitives consumed by the sale.

`Ledger` is the interface the sale needs from a token contract: mint,
finish minting, and balance queries. `TokenLedger` is an in-memory
implementation backed by a sparse balance table.
"""

from typing import Dict, Protocol


# Type aliases
Address = str
Amount = int  # Non-negative integer (arbitrary precision)


class Ledger(Protocol):
    def mint(self, address: Address, amount: Amount) -> bool: ...

    def finish_minting(self) -> bool: ...

    def balance_of(self, address: Address) -> Amount: ...

    def total_supply(self) -> Amount: ...


class TokenLedger:
    """
    Mintable token balances: address -> amount.

    Primitives report failure by returning False rather than raising, so the
    caller decides how a refused mint is surfaced. Once `finish_minting()` has
    succeeded every later mint is refused.
    """

    def __init__(self):
        """Initialize an empty, mintable ledger."""
        self._balances: Dict[Address, Amount] = {}
        self._total_supply: Amount = 0
        self._minting_finished = False

    @property
    def minting_finished(self) -> bool:
        return self._minting_finished

    def balance_of(self, address: Address) -> Amount:
        """Get balance for address. Returns 0 if not found."""
        return self._balances.get(address, 0)

    def total_supply(self) -> Amount:
        return self._total_supply

    def mint(self, address: Address, amount: Amount) -> bool:
        """
        Credit `amount` new tokens to `address`.

        Args:
            address: Recipient
            amount: Positive amount

        Returns:
            False if minting is finished, True otherwise

        Raises:
            ValueError: If amount is not positive
        """
        if amount <= 0:
            raise ValueError(f"Mint amount must be positive: {amount}")
        if self._minting_finished:
            return False
        self._balances[address] = self.balance_of(address) + amount
        self._total_supply += amount
        return True

    def finish_minting(self) -> bool:
        """Disable minting for good. Returns False if it was already disabled."""
        if self._minting_finished:
            return False
        self._minting_finished = True
        return True

    def get_all_balances(self) -> Dict[Address, Amount]:
        """
        Get all balances as a dictionary.

        Returns:
            Dictionary mapping address -> amount
        """
        return dict(self._balances)

    def verify_supply(self) -> bool:
        """
        Verify the recorded total supply equals the sum of balances.

        Returns:
            True if supply and balances agree
        """
        return sum(self._balances.values()) == self._total_supply

    def __repr__(self) -> str:
        return f"TokenLedger({len(self._balances)} holders, supply={self._total_supply})"
