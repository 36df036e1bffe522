import json

import pytest

from tokenvm.genesis import (
    CustomAllocation,
    Genesis,
    InvalidTargetError,
    Rules,
    load_genesis,
)


def test_default_values():
    g = Genesis.default()
    assert g.max_block_txs == 20_000
    assert g.max_block_units == 1_800_000
    assert g.base_units == 48
    assert g.validity_window == 60
    assert g.min_unit_price == 1
    assert g.window_target_units == 20_000_000
    assert g.window_target_blocks == 20
    assert g.warp_base_fee == 1_024
    assert g.warp_fee_per_signer == 128
    assert g.custom_allocation == []


@pytest.mark.parametrize("data", [b"", None, ""])
def test_empty_input_gives_defaults(data):
    assert load_genesis(data, None) == Genesis.default()


def test_partial_override_keeps_other_defaults():
    g = load_genesis(json.dumps({"baseUnits": 7, "minBlockCost": 3}).encode(), None)
    assert g.base_units == 7
    assert g.min_block_cost == 3
    assert g.max_block_units == Genesis.default().max_block_units


def test_keys_match_case_insensitively():
    g = load_genesis(b'{"MAXBLOCKTXS": 5}', None)
    assert g.max_block_txs == 5


def test_unknown_keys_ignored():
    g = load_genesis(b'{"whatever": 1}', None)
    assert g == Genesis.default()


def test_zero_window_target_units_rejected():
    with pytest.raises(InvalidTargetError):
        load_genesis(b'{"windowTargetUnits": 0}', None)


def test_zero_window_target_blocks_rejected():
    with pytest.raises(InvalidTargetError, match="invalid target"):
        load_genesis(b'{"windowTargetBlocks": 0}', None)


def test_malformed_json_rejected():
    with pytest.raises(ValueError, match="failed to unmarshal config"):
        load_genesis(b"{not json", None)


@pytest.mark.parametrize(
    "payload",
    ['{"baseUnits": -1}', '{"baseUnits": 1.5}', '{"hrp": 3}', '{"baseUnits": true}', "[]"],
)
def test_bad_types_rejected(payload):
    with pytest.raises(ValueError):
        load_genesis(payload, None)


def test_custom_allocation_parsed():
    payload = {"customAllocation": [{"address": "addr-one", "balance": 10}]}
    g = load_genesis(json.dumps(payload), None)
    assert g.custom_allocation == [CustomAllocation("addr-one", 10)]


def test_round_trip_through_dict():
    g = Genesis.default()
    g.custom_allocation = [CustomAllocation("addr-one", 5)]
    g.validity_window = 30
    assert Genesis.from_dict(g.to_dict()) == g
    assert Genesis.from_dict(json.loads(json.dumps(g.to_dict()))) == g


def test_to_dict_uses_json_keys():
    d = Genesis.default().to_dict()
    assert d["maxBlockUnits"] == 1_800_000
    assert d["warpBaseFee"] == 1_024
    assert d["customAllocation"] == []


def test_rules_reflect_genesis():
    g = load_genesis(b'{"warpBaseFee": 9, "maxBlockTxs": 4}', None)
    rules = g.rules(0)
    assert isinstance(rules, Rules)
    assert rules.warp_base_fee == 9
    assert rules.max_block_txs == 4
    assert rules.window_target_units == g.window_target_units
    assert rules.block_cost_change_denominator == g.block_cost_change_denominator


def test_warp_config_requires_four_fifths():
    cfg = Genesis.default().rules(0).warp_config("any-chain")
    assert tuple(cfg) == (True, 4, 5)


def test_fetch_custom_finds_nothing():
    assert Genesis.default().rules(0).fetch_custom("key") == (None, False)