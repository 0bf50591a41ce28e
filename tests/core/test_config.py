# [TESTER] v1

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from puckswap.core.config import (
    CoreConfig,
    CostTable,
    DeadlinePolicy,
    DepositPolicy,
    SafetyConfig,
    config_from_dict,
    load_config,
)
from puckswap.state.pool import Side


def test_defaults() -> None:
    cfg = CoreConfig()
    assert cfg.safety.min_trade_amount == 1_000
    assert cfg.safety.max_trade_fraction_bps == 5_000
    assert cfg.safety.default_max_ratio_deviation_bps == 100
    assert cfg.safety.nonce_window == 1_000
    assert cfg.safety.deadline_policy is DeadlinePolicy.WITHIN_WINDOW
    assert cfg.cost_table.pool_base == 3_000_000
    assert cfg.cost_table.max_payload_bytes == 16_384
    assert cfg.deposit_policy is DepositPolicy.ABSORB_FULL
    assert cfg.min_balance_gate is None


def test_config_from_dict_parses_sections() -> None:
    cfg = config_from_dict(
        {
            "safety": {"min_trade_amount": 5, "deadline_policy": "window_ends_by_deadline"},
            "cost_table": {"per_byte": 1},
            "deposit_policy": "clamp_to_ratio",
            "min_balance_gate": {"base_side": "B", "asset_count": 2},
        }
    )
    assert cfg.safety.min_trade_amount == 5
    assert cfg.safety.nonce_window == 1_000
    assert cfg.safety.deadline_policy is DeadlinePolicy.WINDOW_ENDS_BY_DEADLINE
    assert cfg.cost_table.per_byte == 1
    assert cfg.deposit_policy is DepositPolicy.CLAMP_TO_RATIO
    assert cfg.min_balance_gate is not None
    assert cfg.min_balance_gate.base_side is Side.B
    assert cfg.min_balance_gate.asset_count == 2


@pytest.mark.parametrize(
    ("raw", "match"),
    [
        ({"bogus": 1}, "unknown config keys"),
        ({"safety": {"min_trade": 1}}, "unknown safety keys"),
        ({"safety": {"deadline_policy": "sometime"}}, "invalid safety.deadline_policy"),
        ({"deposit_policy": "keep_everything"}, "invalid deposit_policy"),
        ({"cost_table": []}, "cost_table must be a mapping"),
    ],
)
def test_config_from_dict_rejects_bad_input(raw: dict, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        config_from_dict(raw)


def test_config_values_are_type_checked() -> None:
    with pytest.raises(TypeError):
        config_from_dict({"safety": {"min_trade_amount": "1000"}})


def test_dataclass_validation() -> None:
    with pytest.raises(ValueError, match="nonce_window"):
        SafetyConfig(nonce_window=0)
    with pytest.raises(ValueError):
        CostTable(pool_buffer_bps=10_001)
    with pytest.raises(ValueError):
        SafetyConfig(max_trade_fraction_bps=-1)


def test_load_config_from_yaml(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text(
        "safety:\n"
        "  min_trade_amount: 250\n"
        "  min_lp_remaining: 1000\n"
        "deposit_policy: clamp_to_ratio\n",
        encoding="utf-8",
    )
    caplog.set_level(logging.INFO, logger="puckswap.core.config")

    cfg = load_config(path)

    assert cfg.safety.min_trade_amount == 250
    assert cfg.safety.min_lp_remaining == 1_000
    assert cfg.deposit_policy is DepositPolicy.CLAMP_TO_RATIO
    assert "loaded pool core config" in caplog.text


def test_load_config_empty_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == CoreConfig()


def test_example_config_matches_defaults() -> None:
    path = Path(__file__).resolve().parents[2] / "config" / "pool.example.yaml"
    cfg = load_config(path)
    assert cfg.safety == SafetyConfig()
    assert cfg.cost_table == CostTable()
    assert cfg.min_balance_gate is not None
    assert cfg.min_balance_gate.base_side is Side.A
