"""Exception types for the sale kernel.

Used by ``step_or_raise()`` in ``engine.py`` and by the ``Crowdsale`` host for
callers that prefer exceptions over ``StepResult`` inspection.
"""

from __future__ import annotations


class SaleError(Exception):
    """Base class for every rejected sale operation."""


class PhaseError(SaleError):
    """Raised when an operation is attempted outside its phase window."""


class CapExceededError(SaleError):
    """Raised when a contribution would push issuance above the cap."""


class AuthorizationError(SaleError):
    """Raised when finalize is attempted by someone other than the owner."""


class AlreadyFinalizedError(SaleError):
    """Raised when finalize is attempted on a finalized sale."""


class SaleParamError(SaleError):
    """Raised when a parameter falls outside its domain (e.g. a zero amount)."""


class SaleInvariantError(SaleError):
    """Raised when a post-state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class LedgerError(SaleError):
    """Raised when a ledger primitive reports failure."""
