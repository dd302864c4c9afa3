"""
Ledger state for the token sale
"""

from .issuance import IssuanceLedger
from .ledger import Address, Amount, Ledger, TokenLedger

__all__ = [
    "Address",
    "Amount",
    "IssuanceLedger",
    "Ledger",
    "TokenLedger",
]
