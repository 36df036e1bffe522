"""Client for the token JSON-RPC service."""

from __future__ import annotations

import base64
import itertools
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from .genesis import Genesis, Rules
from .orderbook import Order
from .rpc_server import (
    DEFAULT_NAME,
    JSON_RPC_ENDPOINT,
    AssetNotFoundError,
    TxNotFoundError,
)

_log = logging.getLogger(__name__)


class RPCError(Exception):
    """The service answered with an error or an unusable response."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class TxStatus:
    found: bool
    success: bool
    timestamp: int


@dataclass(frozen=True)
class AssetInfo:
    found: bool
    metadata: bytes | None
    supply: int
    owner: str
    warp: bool


@dataclass(frozen=True)
class Parser:
    """Chain identity and genesis needed to interpret chain data."""

    chain_id: Any
    genesis: Genesis

    def rules(self, timestamp: int) -> Rules:
        return self.genesis.rules(timestamp)


class JSONRPCClient:
    """Calls the token API on one node."""

    def __init__(
        self,
        uri: str,
        chain_id: Any,
        *,
        name: str = DEFAULT_NAME,
        client: httpx.Client | None = None,
        poll_interval: float = 0.5,
        wait_timeout: float | None = None,
    ) -> None:
        self.endpoint = uri.removesuffix("/") + JSON_RPC_ENDPOINT
        self.chain_id = chain_id
        self.name = name
        self.poll_interval = poll_interval
        self.wait_timeout = wait_timeout
        self._owns_http = client is None
        self._http = client if client is not None else httpx.Client()
        self._ids = itertools.count(1)
        self._genesis: Genesis | None = None

    def __enter__(self) -> JSONRPCClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the HTTP client if this object created it."""
        if self._owns_http:
            self._http.close()

    def _send(self, method: str, params: dict[str, Any] | None) -> dict[str, Any]:
        payload = {
            "jsonrpc": "2.0",
            "method": f"{self.name}.{method}",
            "params": params if params is not None else {},
            "id": next(self._ids),
        }
        response = self._http.post(self.endpoint, json=payload)
        if response.status_code != 200:
            raise RPCError(
                f"unexpected status {response.status_code}: {response.text}",
                response.status_code,
            )
        try:
            body = response.json()
        except ValueError as err:
            raise RPCError(f"invalid response body: {err}") from err
        if not isinstance(body, dict):
            raise RPCError("response must be an object")
        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise RPCError(str(error.get("message", "")), error.get("code"))
            raise RPCError(str(error))
        result = body.get("result")
        return result if isinstance(result, dict) else {}

    def genesis(self) -> Genesis:
        """Fetch the chain genesis; it is fetched once and then remembered."""
        if self._genesis is None:
            self._genesis = Genesis.from_dict(self._send("genesis", None).get("genesis"))
        return self._genesis

    def tx(self, tx_id: Any) -> TxStatus:
        try:
            reply = self._send("tx", {"txId": tx_id})
        except RPCError as err:
            if TxNotFoundError.message in str(err):
                return TxStatus(False, False, -1)
            raise
        return TxStatus(True, bool(reply.get("success")), int(reply.get("timestamp", 0)))

    def asset(self, asset: Any) -> AssetInfo:
        try:
            reply = self._send("asset", {"asset": asset})
        except RPCError as err:
            if AssetNotFoundError.message in str(err):
                return AssetInfo(False, None, 0, "", False)
            raise
        encoded = reply.get("metadata")
        metadata = None if encoded is None else base64.b64decode(encoded)
        return AssetInfo(
            True,
            metadata,
            int(reply.get("supply", 0)),
            str(reply.get("owner", "")),
            bool(reply.get("warp")),
        )

    def balance(self, address: str, asset: Any) -> int:
        reply = self._send("balance", {"address": address, "asset": asset})
        return int(reply.get("amount", 0))

    def orders(self, pair: str) -> list[Order]:
        reply = self._send("orders", {"pair": pair})
        return [Order.from_dict(item) for item in reply.get("orders") or []]

    def loan(self, asset: Any, destination: Any) -> int:
        reply = self._send("loan", {"asset": asset, "destination": destination})
        return int(reply.get("amount", 0))

    def _wait(self, done: Callable[[], bool]) -> None:
        deadline = (
            None if self.wait_timeout is None else time.monotonic() + self.wait_timeout
        )
        while not done():
            if deadline is not None and time.monotonic() >= deadline:
                raise TimeoutError("condition not reached before timeout")
            time.sleep(self.poll_interval)

    def wait_for_balance(self, address: str, asset: Any, minimum: int) -> None:
        """Poll until ``address`` holds at least ``minimum`` of ``asset``."""

        def reached() -> bool:
            if self.balance(address, asset) >= minimum:
                return True
            _log.info("waiting for %d balance: %s", minimum, address)
            return False

        self._wait(reached)

    def wait_for_transaction(self, tx_id: Any) -> bool:
        """Poll until the transaction is known; return whether it succeeded."""
        outcome: list[bool] = []

        def found() -> bool:
            status = self.tx(tx_id)
            outcome[:] = [status.success]
            return status.found

        self._wait(found)
        return outcome[0]

    def parser(self) -> Parser:
        return Parser(self.chain_id, self.genesis())