#!/usr/bin/env python3
"""Replay a YAML sale scenario against an in-memory ledger.

Scenario format:

    sale: {start_tick: 10, end_tick: 20, base_rate: 2000, ...}
    owner: owner
    actions:
      - {op: contribute, tick: 10, amount: 100000, sender: alice}
      - {op: finalize, tick: 20, sender: owner}

Prints one JSON object per action, then a final snapshot line.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tiersale.core.sale.errors import SaleError
from tiersale.integration import Crowdsale, sale_config_from_dict
from tiersale.integration.config import load_yaml_mapping
from tiersale.state import TokenLedger

_OPS = ("contribute", "finalize", "goal_reached", "phase")


def _apply(sale: Crowdsale, action: Mapping[str, Any]) -> dict[str, Any]:
    op = action.get("op")
    tick = action.get("tick")
    sender = action.get("sender")
    out: dict[str, Any] = {"op": op, "tick": tick}
    if op == "contribute":
        out["minted"] = sale.contribute(
            int(action["amount"]), tick, sender, recipient=action.get("recipient"),
        )
    elif op == "finalize":
        out["minted"] = sale.finalize(tick, sender).minted
    elif op == "goal_reached":
        out["goal_reached"] = sale.goal_reached(tick)
    elif op == "phase":
        out["phase"] = sale.phase(tick).value
    else:
        raise ValueError(f"unknown op {op!r} (expected one of {', '.join(_OPS)})")
    out["ok"] = True
    out["total_issued"] = sale.total_issued
    return out


def replay(scenario: Mapping[str, Any], *, fail_fast: bool = False) -> list[dict[str, Any]]:
    """Run every action of `scenario`; rejected actions are reported, not raised."""
    config = sale_config_from_dict(scenario["sale"])
    ledger = TokenLedger()
    sale = Crowdsale(config, owner=scenario.get("owner", "owner"), ledger=ledger)

    rows: list[dict[str, Any]] = []
    for action in scenario.get("actions") or []:
        try:
            rows.append(_apply(sale, action))
        except SaleError as exc:
            rows.append({
                "op": action.get("op"),
                "tick": action.get("tick"),
                "ok": False,
                "error": type(exc).__name__,
                "message": str(exc),
            })
            if fail_fast:
                break
    rows.append({
        "op": "snapshot",
        **sale.snapshot(),
        "balances": ledger.get_all_balances(),
        "supply_consistent": ledger.verify_supply(),
    })
    return rows


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Replay a tiered-rate sale scenario (YAML) and print JSON lines.")
    p.add_argument("scenario", type=Path, help="Path to scenario YAML")
    p.add_argument("--fail-fast", action="store_true", help="Stop at the first rejected action")
    p.add_argument("-v", "--verbose", action="store_true", help="Log sale activity to stderr")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rows = replay(load_yaml_mapping(args.scenario), fail_fast=args.fail_fast)
    for row in rows:
        print(json.dumps(row, sort_keys=True))
    return 0 if all(r.get("ok", True) for r in rows) else 1


if __name__ == "__main__":
    raise SystemExit(main())
