"""
Sale configuration loading.

Configs are plain mappings, usually read from YAML:

    start_tick: 100
    end_tick: 200
    base_rate: 2000
    cap: 500000000
    goal: 50000
    beneficiary_wallet: alis-fund
    initial_ledger_balance: 250000000
    tier_rates:
      - {name: week1, start: 100, end: 120, rate: 2400}

A file may also wrap the config in a top-level `sale:` section (the replay
scenario format).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.sale.types import SaleConfig, TierRate

_INT_FIELDS = ("start_tick", "end_tick", "base_rate", "cap", "goal")
_OPTIONAL_INT_FIELDS = ("initial_ledger_balance",)
_ALLOWED_KEYS = frozenset(_INT_FIELDS + _OPTIONAL_INT_FIELDS + ("beneficiary_wallet", "tier_rates"))
_TIER_KEYS = frozenset({"name", "start", "end", "rate"})


def _require_int(obj: Mapping[str, Any], key: str, *, where: str = "sale") -> int:
    val = obj[key]
    if not isinstance(val, int) or isinstance(val, bool):
        raise TypeError(f"{where}.{key} must be an int, got {type(val).__name__}")
    return int(val)


def tier_rate_from_dict(obj: Mapping[str, Any], *, index: int = 0) -> TierRate:
    if not isinstance(obj, Mapping):
        raise TypeError(f"tier_rates[{index}] must be a mapping")
    unknown = set(obj) - _TIER_KEYS
    if unknown:
        raise ValueError(f"tier_rates[{index}]: unknown keys {sorted(unknown)}")
    where = f"tier_rates[{index}]"
    name = obj.get("name", "")
    if not isinstance(name, str):
        raise TypeError(f"{where}.name must be a string")
    return TierRate(
        start=_require_int(obj, "start", where=where),
        end=_require_int(obj, "end", where=where),
        rate=_require_int(obj, "rate", where=where),
        name=name,
    )


def sale_config_from_dict(obj: Mapping[str, Any]) -> SaleConfig:
    """Build a validated `SaleConfig`. Unknown keys are rejected."""
    if not isinstance(obj, Mapping):
        raise TypeError("sale config must be a mapping")
    unknown = set(obj) - _ALLOWED_KEYS
    if unknown:
        raise ValueError(f"unknown sale config keys: {sorted(unknown)}")
    missing = [k for k in _INT_FIELDS + ("beneficiary_wallet",) if k not in obj]
    if missing:
        raise KeyError(f"missing sale config keys: {missing}")

    wallet = obj["beneficiary_wallet"]
    if not isinstance(wallet, str):
        raise TypeError("sale.beneficiary_wallet must be a string")

    tiers_raw = obj.get("tier_rates") or []
    if not isinstance(tiers_raw, list):
        raise TypeError("sale.tier_rates must be a list")

    kwargs: dict[str, Any] = {k: _require_int(obj, k) for k in _INT_FIELDS}
    for k in _OPTIONAL_INT_FIELDS:
        if k in obj:
            kwargs[k] = _require_int(obj, k)
    return SaleConfig(
        beneficiary_wallet=wallet,
        tier_rates=tuple(tier_rate_from_dict(t, index=i) for i, t in enumerate(tiers_raw)),
        **kwargs,
    )


def sale_config_to_dict(config: SaleConfig) -> dict[str, Any]:
    return {
        "start_tick": config.start_tick,
        "end_tick": config.end_tick,
        "base_rate": config.base_rate,
        "cap": config.cap,
        "goal": config.goal,
        "beneficiary_wallet": config.beneficiary_wallet,
        "initial_ledger_balance": config.initial_ledger_balance,
        "tier_rates": [
            {"name": t.name, "start": t.start, "end": t.end, "rate": t.rate}
            for t in config.tier_rates
        ],
    }


def load_yaml_mapping(path: Path) -> dict[str, Any]:
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(obj, dict):
        raise TypeError(f"{path}: YAML document must be a mapping")
    return obj


def load_sale_config(path: Path) -> SaleConfig:
    obj = load_yaml_mapping(path)
    if "sale" in obj:
        obj = obj["sale"]
    return sale_config_from_dict(obj)
