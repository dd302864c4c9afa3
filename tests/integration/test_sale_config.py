from __future__ import annotations

from pathlib import Path

import pytest

from tiersale.core.sale import TierRate
from tiersale.integration import load_sale_config, sale_config_from_dict, sale_config_to_dict

CONFIG_YAML = """\
start_tick: 10
end_tick: 20
base_rate: 2000
cap: 500000000
goal: 50000
beneficiary_wallet: alis-fund
initial_ledger_balance: 250000000
tier_rates:
  - {name: pre_sale, start: 0, end: 10, rate: 2600}
  - {name: week1, start: 10, end: 12, rate: 2400}
"""


def test_load_plain_config(tmp_path: Path) -> None:
    path = tmp_path / "sale.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")

    cfg = load_sale_config(path)

    assert cfg.start_tick == 10
    assert cfg.end_tick == 20
    assert cfg.cap == 500_000_000
    assert cfg.initial_ledger_balance == 250_000_000
    assert cfg.tier_rates == (
        TierRate(0, 10, 2600, name="pre_sale"),
        TierRate(10, 12, 2400, name="week1"),
    )


def test_load_wrapped_config(tmp_path: Path) -> None:
    path = tmp_path / "scenario.yaml"
    body = "sale:\n" + "".join(f"  {line}\n" for line in CONFIG_YAML.splitlines())
    path.write_text(body + "actions: []\n", encoding="utf-8")

    assert load_sale_config(path).beneficiary_wallet == "alis-fund"


def test_round_trip_through_dict() -> None:
    cfg = sale_config_from_dict({
        "start_tick": 1,
        "end_tick": 2,
        "base_rate": 3,
        "cap": 4,
        "goal": 5,
        "beneficiary_wallet": "w",
    })
    assert cfg.initial_ledger_balance == 0
    assert cfg.tier_rates == ()
    assert sale_config_from_dict(sale_config_to_dict(cfg)) == cfg


@pytest.mark.parametrize(
    "patch,exc",
    [
        ({"surprise": 1}, ValueError),
        ({"cap": "500"}, TypeError),
        ({"cap": True}, TypeError),
        ({"tier_rates": {"start": 0}}, TypeError),
        ({"tier_rates": [{"start": 0, "end": 1, "rate": 1, "bonus": 2}]}, ValueError),
        ({"start_tick": 30}, ValueError),
    ],
)
def test_invalid_configs(patch, exc) -> None:
    obj = {
        "start_tick": 10,
        "end_tick": 20,
        "base_rate": 2000,
        "cap": 500,
        "goal": 5,
        "beneficiary_wallet": "w",
    }
    obj.update(patch)
    with pytest.raises(exc):
        sale_config_from_dict(obj)


def test_missing_key() -> None:
    with pytest.raises(KeyError):
        sale_config_from_dict({"start_tick": 1})


def test_non_mapping_document(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_sale_config(path)
