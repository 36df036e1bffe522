"""JSON-RPC service exposing token chain state."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable, Protocol

from .genesis import Genesis
from .orderbook import Order

JSON_RPC_ENDPOINT = "/tokenapi"
ORDERS_TO_SEND = 128
DEFAULT_NAME = "tokenvm"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
SERVER_ERROR = -32000


class TxNotFoundError(LookupError):
    """The requested transaction is not known."""

    message = "tx not found"

    def __init__(self) -> None:
        super().__init__(self.message)


class AssetNotFoundError(LookupError):
    """The requested asset does not exist."""

    message = "asset not found"

    def __init__(self) -> None:
        super().__init__(self.message)


class Controller(Protocol):
    """What the service needs from the running chain."""

    def genesis(self) -> Genesis:
        ...

    def get_transaction(self, tx_id: Any) -> tuple[bool, int, bool, int]:
        """Return ``(found, timestamp, success, units)``."""
        ...

    def get_asset_from_state(
        self, asset: Any
    ) -> tuple[bool, bytes | None, int, str, bool]:
        """Return ``(exists, metadata, supply, owner_address, warp)``."""
        ...

    def get_balance_from_state(self, address: str, asset: Any) -> int:
        """Return the balance of ``asset`` held by ``address``.

        Raises ``ValueError`` when the address cannot be parsed.
        """
        ...

    def orders(self, pair: str, limit: int) -> list[Order]:
        ...

    def get_loan_from_state(self, asset: Any, destination: Any) -> int:
        ...


class _InvalidParams(Exception):
    pass


def _param(params: dict[str, Any], key: str) -> Any:
    wanted = key.lower()
    for name, value in params.items():
        if name.lower() == wanted:
            return value
    raise _InvalidParams(f"missing parameter {key!r}")


def _error(req_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "error": {"code": code, "message": message},
        "id": req_id,
    }


class JSONRPCServer:
    """Answers the token API methods from a controller."""

    def __init__(self, controller: Controller, name: str = DEFAULT_NAME) -> None:
        self._controller = controller
        self.name = name
        self._methods: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "genesis": lambda p: self.genesis(),
            "tx": lambda p: self.tx(_param(p, "txId")),
            "asset": lambda p: self.asset(_param(p, "asset")),
            "balance": lambda p: self.balance(
                _param(p, "address"), _param(p, "asset")
            ),
            "orders": lambda p: self.orders(_param(p, "pair")),
            "loan": lambda p: self.loan(_param(p, "asset"), _param(p, "destination")),
        }

    def genesis(self) -> dict[str, Any]:
        return {"genesis": self._controller.genesis().to_dict()}

    def tx(self, tx_id: Any) -> dict[str, Any]:
        found, timestamp, success, units = self._controller.get_transaction(tx_id)
        if not found:
            raise TxNotFoundError()
        return {"timestamp": timestamp, "success": success, "units": units}

    def asset(self, asset: Any) -> dict[str, Any]:
        exists, metadata, supply, owner, warp = self._controller.get_asset_from_state(
            asset
        )
        if not exists:
            raise AssetNotFoundError()
        encoded = None if metadata is None else base64.b64encode(metadata).decode()
        return {"metadata": encoded, "supply": supply, "owner": owner, "warp": warp}

    def balance(self, address: str, asset: Any) -> dict[str, Any]:
        return {"amount": self._controller.get_balance_from_state(address, asset)}

    def orders(self, pair: str) -> dict[str, Any]:
        found = self._controller.orders(pair, ORDERS_TO_SEND)
        return {"orders": [order.to_dict() for order in found]}

    def loan(self, asset: Any, destination: Any) -> dict[str, Any]:
        return {"amount": self._controller.get_loan_from_state(asset, destination)}

    def handle(self, request: bytes | str | dict[str, Any]) -> dict[str, Any]:
        """Answer one JSON-RPC 2.0 request, returning the response object."""
        if isinstance(request, (bytes, str)):
            try:
                request = json.loads(request)
            except ValueError as err:
                return _error(None, PARSE_ERROR, f"invalid JSON: {err}")
        if not isinstance(request, dict):
            return _error(None, INVALID_REQUEST, "request must be an object")
        req_id = request.get("id")
        method = request.get("method")
        if not isinstance(method, str):
            return _error(req_id, INVALID_REQUEST, "method must be a string")

        prefix = f"{self.name}."
        handler = None
        if method.startswith(prefix):
            short = method[len(prefix):]
            handler = self._methods.get(short[:1].lower() + short[1:])
        if handler is None:
            return _error(req_id, METHOD_NOT_FOUND, f"method not found: {method}")

        params = request.get("params")
        if isinstance(params, list) and len(params) == 1:
            params = params[0]
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return _error(req_id, INVALID_PARAMS, "params must be an object")

        try:
            result = handler(params)
        except _InvalidParams as err:
            return _error(req_id, INVALID_PARAMS, str(err))
        except Exception as err:  # any controller failure becomes a server error
            return _error(req_id, SERVER_ERROR, str(err))
        return {"jsonrpc": "2.0", "result": result, "id": req_id}