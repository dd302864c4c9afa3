"""State construction and serialization for the sale kernel.

`initial_state(config)` returns the state a freshly constructed sale starts in.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import SaleConfig, SaleState

# Auto-derived from SaleState field definitions (single source of truth).
STATE_VAR_NAMES: tuple[str, ...] = tuple(SaleState.__dataclass_fields__)


def initial_state(config: SaleConfig) -> SaleState:
    """Issuance starts at the pre-credited beneficiary balance."""
    return SaleState(total_issued=config.initial_ledger_balance)


def state_to_dict(state: SaleState) -> dict[str, bool | int]:
    """Serialize a SaleState to a plain dict."""
    return {name: getattr(state, name) for name in STATE_VAR_NAMES}


def state_from_dict(d: Mapping[str, Any]) -> SaleState:
    """Deserialize a dict to a SaleState. Raises KeyError on missing fields."""
    kwargs: dict[str, Any] = {}
    for name in STATE_VAR_NAMES:
        val = d[name]
        if isinstance(val, bool):
            kwargs[name] = val
        elif isinstance(val, int):
            kwargs[name] = int(val)  # normalize int subclasses
        else:
            raise TypeError(f"state var {name!r} must be bool|int, got {type(val).__name__}")
    return SaleState(**kwargs)
