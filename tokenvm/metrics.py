"""Counters of accepted actions by kind."""

from __future__ import annotations

import threading
from enum import Enum

NAMESPACE = "actions"


class ActionKind(str, Enum):
    """The action kinds that are counted."""

    CREATE_ASSET = "create_asset"
    MINT_ASSET = "mint_asset"
    BURN_ASSET = "burn_asset"
    MODIFY_ASSET = "modify_asset"
    TRANSFER = "transfer"
    CREATE_ORDER = "create_order"
    FILL_ORDER = "fill_order"
    CLOSE_ORDER = "close_order"
    IMPORT_ASSET = "import_asset"
    EXPORT_ASSET = "export_asset"

    @property
    def metric_name(self) -> str:
        return f"{NAMESPACE}_{self.value}"

    @property
    def help(self) -> str:
        return f"number of {self.value.replace('_', ' ')} actions"


class ActionMetrics:
    """Thread-safe counters, one per action kind."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts = dict.fromkeys(ActionKind, 0)

    def increment(self, kind: ActionKind | str) -> None:
        key = ActionKind(kind)
        with self._lock:
            self._counts[key] += 1

    def count(self, kind: ActionKind | str) -> int:
        key = ActionKind(kind)
        with self._lock:
            return self._counts[key]

    def snapshot(self) -> dict[ActionKind, int]:
        with self._lock:
            return dict(self._counts)