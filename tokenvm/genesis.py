"""Chain genesis parameters and the rules derived from them."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, NamedTuple

STATE_LOCKUP_FIELD = "state_lockup"
DEFAULT_HRP = "token"

_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# Custom rule values exposed through Rules.fetch_custom; this chain defines none.
_CUSTOM_RULES: Mapping[str, Any] = MappingProxyType({})


class InvalidTargetError(ValueError):
    """A window target in the genesis is zero."""

    def __init__(self) -> None:
        super().__init__("invalid target")


class StateLockupMissingError(ValueError):
    """The state lockup parameter is missing."""

    def __init__(self) -> None:
        super().__init__("state lockup parameter missing")


def _check_value(name: str, kind: str, value: Any) -> Any:
    if kind == "str":
        if not isinstance(value, str):
            raise ValueError(f"field {name!r} must be a string, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {name!r} must be an integer, got {value!r}")
    low, high = (0, _UINT64_MAX) if kind == "uint64" else (_INT64_MIN, _INT64_MAX)
    if not low <= value <= high:
        raise ValueError(f"field {name!r} out of range: {value}")
    return value


def _json_field(default: Any, key: str, kind: str) -> Any:
    return field(default=default, metadata={"json": key, "kind": kind})


@dataclass
class CustomAllocation:
    """An initial balance of the native asset for one address."""

    address: str = ""
    balance: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> CustomAllocation:
        if not isinstance(data, dict):
            raise ValueError(f"allocation must be an object, got {data!r}")
        alloc = cls()
        for key, value in data.items():
            lowered = key.lower()
            if value is None:
                continue
            if lowered == "address":
                alloc.address = _check_value("address", "str", value)
            elif lowered == "balance":
                alloc.balance = _check_value("balance", "uint64", value)
        return alloc

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "balance": self.balance}


class WarpConfig(NamedTuple):
    """Whether inbound warp messages are allowed and the stake quorum required."""

    allowed: bool
    quorum_numerator: int
    quorum_denominator: int


@dataclass
class Genesis:
    """Parameters fixed at chain creation."""

    hrp: str = _json_field(DEFAULT_HRP, "hrp", "str")

    max_block_txs: int = _json_field(20_000, "maxBlockTxs", "int64")
    max_block_units: int = _json_field(1_800_000, "maxBlockUnits", "uint64")

    base_units: int = _json_field(48, "baseUnits", "uint64")
    validity_window: int = _json_field(60, "validityWindow", "int64")

    min_unit_price: int = _json_field(1, "minUnitPrice", "uint64")
    unit_price_change_denominator: int = _json_field(
        48, "unitPriceChangeDenominator", "uint64"
    )
    window_target_units: int = _json_field(20_000_000, "windowTargetUnits", "uint64")

    min_block_cost: int = _json_field(0, "minBlockCost", "uint64")
    block_cost_change_denominator: int = _json_field(
        48, "blockCostChangeDenominator", "uint64"
    )
    window_target_blocks: int = _json_field(20, "windowTargetBlocks", "uint64")

    warp_base_fee: int = _json_field(1_024, "warpBaseFee", "uint64")
    warp_fee_per_signer: int = _json_field(128, "warpFeePerSigner", "uint64")

    custom_allocation: list[CustomAllocation] = field(default_factory=list)

    @classmethod
    def default(cls) -> Genesis:
        return cls()

    @classmethod
    def from_dict(cls, data: Any) -> Genesis:
        """Overlay the keys of ``data`` on the defaults; key case is ignored."""
        genesis = cls.default()
        if data is None:
            return genesis
        if not isinstance(data, dict):
            raise ValueError(f"genesis must be an object, got {type(data).__name__}")
        by_key = {f.metadata["json"].lower(): f for f in fields(cls) if f.metadata}
        for key, value in data.items():
            lowered = key.lower()
            if lowered == "customallocation":
                if value is None:
                    genesis.custom_allocation = []
                elif isinstance(value, list):
                    genesis.custom_allocation = [
                        CustomAllocation.from_dict(item) for item in value
                    ]
                else:
                    raise ValueError("field 'customAllocation' must be a list")
                continue
            spec = by_key.get(lowered)
            if spec is None or value is None:
                continue
            checked = _check_value(spec.metadata["json"], spec.metadata["kind"], value)
            setattr(genesis, spec.name, checked)
        return genesis

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            f.metadata["json"]: getattr(self, f.name)
            for f in fields(self)
            if f.metadata
        }
        out["customAllocation"] = [a.to_dict() for a in self.custom_allocation]
        return out

    def rules(self, timestamp: int) -> Rules:
        return Rules(self)


@dataclass(frozen=True)
class Rules:
    """Chain rules in force, read from a genesis."""

    genesis: Genesis

    def warp_config(self, source_chain_id: Any) -> WarpConfig:
        # Inbound transfers are accepted from every source once 80% of stake
        # has signed, since assets are scoped by their source chain.
        return WarpConfig(True, 4, 5)

    def fetch_custom(self, key: str) -> tuple[Any, bool]:
        """Return a custom rule value and whether it exists."""
        if key in _CUSTOM_RULES:
            return _CUSTOM_RULES[key], True
        return None, False

    @property
    def warp_base_fee(self) -> int:
        return self.genesis.warp_base_fee

    @property
    def warp_fee_per_signer(self) -> int:
        return self.genesis.warp_fee_per_signer

    @property
    def max_block_txs(self) -> int:
        return self.genesis.max_block_txs

    @property
    def validity_window(self) -> int:
        return self.genesis.validity_window

    @property
    def max_block_units(self) -> int:
        return self.genesis.max_block_units

    @property
    def base_units(self) -> int:
        return self.genesis.base_units

    @property
    def min_unit_price(self) -> int:
        return self.genesis.min_unit_price

    @property
    def unit_price_change_denominator(self) -> int:
        return self.genesis.unit_price_change_denominator

    @property
    def window_target_units(self) -> int:
        return self.genesis.window_target_units

    @property
    def min_block_cost(self) -> int:
        return self.genesis.min_block_cost

    @property
    def block_cost_change_denominator(self) -> int:
        return self.genesis.block_cost_change_denominator

    @property
    def window_target_blocks(self) -> int:
        return self.genesis.window_target_blocks


def load_genesis(data: bytes | str | None, upgrade_data: bytes | None = None) -> Genesis:
    """Parse genesis JSON over the defaults and validate the window targets."""
    if data:
        text = data.decode("utf-8", "replace") if isinstance(data, bytes) else data
        try:
            genesis = Genesis.from_dict(json.loads(data))
        except (ValueError, UnicodeDecodeError) as err:
            raise ValueError(f"failed to unmarshal config {text}: {err}") from err
    else:
        genesis = Genesis.default()
    if genesis.window_target_units == 0:
        raise InvalidTargetError()
    if genesis.window_target_blocks == 0:
        raise InvalidTargetError()
    return genesis