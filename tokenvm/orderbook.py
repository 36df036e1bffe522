"""In-memory book of open orders, grouped by trading pair."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, Hashable, Iterable

ALL_PAIRS = "*"

_log = logging.getLogger(__name__)


@dataclass
class Order:
    """An open order: ``in_tick`` units in for every ``out_tick`` units out."""

    id: Any
    owner: str
    in_tick: int
    out_tick: int
    remaining: int

    def rate(self) -> float:
        if self.out_tick == 0:
            return math.inf if self.in_tick else math.nan
        return self.in_tick / self.out_tick

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "inTick": self.in_tick,
            "outTick": self.out_tick,
            "remaining": self.remaining,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Order:
        return cls(
            id=data["id"],
            owner=data["owner"],
            in_tick=data["inTick"],
            out_tick=data["outTick"],
            remaining=data["remaining"],
        )


class OrderBook:
    """Tracks open orders for selected pairs, or for every pair given ``"*"``."""

    def __init__(
        self, tracked_pairs: Iterable[str], logger: logging.Logger | None = None
    ) -> None:
        self._log = logger or _log
        pairs = list(tracked_pairs)
        self._orders: dict[str, dict[Hashable, Order]] = {}
        self._order_to_pair: dict[Hashable, str] = {}
        self._lock = threading.Lock()
        self._track_all = pairs == [ALL_PAIRS]
        if self._track_all:
            self._log.info("tracking all order books")
        else:
            for pair in pairs:
                self._orders[pair] = {}
                self._log.info("tracking order book pair=%s", pair)

    def add(
        self,
        order_id: Hashable,
        owner: str,
        pair: str,
        in_tick: int,
        out_tick: int,
        supply: int,
    ) -> None:
        """Record a new order if its pair is tracked."""
        order = Order(order_id, owner, in_tick, out_tick, supply)
        with self._lock:
            book = self._orders.get(pair)
            if book is None:
                if not self._track_all:
                    return
                self._log.info("tracking order book pair=%s", pair)
                book = self._orders[pair] = {}
            book[order_id] = order
            self._order_to_pair[order_id] = pair

    def remove(self, order_id: Hashable) -> None:
        """Drop an order; unknown ids are ignored."""
        with self._lock:
            pair = self._order_to_pair.pop(order_id, None)
            if pair is None:
                return
            book = self._orders.get(pair)
            if book is not None:
                book.pop(order_id, None)

    def update_remaining(self, order_id: Hashable, remaining: int) -> None:
        """Set how much of an order is left; unknown ids are ignored."""
        with self._lock:
            pair = self._order_to_pair.get(order_id)
            if pair is None:
                return
            order = self._orders.get(pair, {}).get(order_id)
            if order is not None:
                order.remaining = remaining

    def orders(self, pair: str, limit: int) -> list[Order]:
        """Return up to ``limit`` orders for ``pair``, best rate first."""
        if limit < 0:
            raise ValueError(f"limit must not be negative: {limit}")
        with self._lock:
            book = self._orders.get(pair)
            if book is None:
                return []
            ranked = sorted(book.values(), key=Order.rate, reverse=True)
            return ranked[:limit]