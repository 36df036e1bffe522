# tokenvm

Building blocks for the node-side services of a token virtual machine:

- **Genesis** (`tokenvm.genesis`): chain parameters with defaults, loaded
  from JSON, and the `Rules` view derived from them.
- **Order book** (`tokenvm.orderbook`): tracks open orders per trading pair
  and lists them best rate first.
- **Metrics** (`tokenvm.metrics`): thread-safe counters for each kind of
  accepted action.
- **JSON-RPC server** (`tokenvm.rpc_server`): answers `genesis`, `tx`,
  `asset`, `balance`, `orders` and `loan` requests from a controller you
  supply.
- **JSON-RPC client** (`tokenvm.rpc_client`): calls that service over HTTP
  (with `httpx`) and can poll for balances and transactions.

## Installation

```
pip install tokenvm
```

For running the tests:

```
pip install "tokenvm[test]"
pytest
```

## Genesis

```python
from tokenvm.genesis import Genesis, load_genesis

genesis = load_genesis(b'{"maxBlockTxs": 1000}', b"")
print(genesis.max_block_txs)        # 1000
rules = genesis.rules(0)
print(rules.max_block_units)        # 1800000 (the default)
print(rules.warp_config(b"\x00" * 32))
# WarpConfig(allowed=True, quorum_numerator=4, quorum_denominator=5)
```

- Empty or missing data gives `Genesis.default()`.
- JSON keys are matched without regard to case; unknown keys are ignored
  and `null` values leave the default in place.
- Malformed JSON, or a value of the wrong type or out of its integer range,
  raises `ValueError`.
- A `windowTargetUnits` or `windowTargetBlocks` of zero raises
  `InvalidTargetError` (a `ValueError`).
- `Genesis.to_dict()` and `Genesis.from_dict()` convert to and from the JSON
  field names; `customAllocation` holds `CustomAllocation` entries with an
  `address` and a `balance`.
- `Rules.fetch_custom(key)` returns `(value, found)`; this chain defines no
  custom rules, so it is always `(None, False)`.

## Order book

```python
from tokenvm.orderbook import OrderBook

book = OrderBook(["*"])  # "*" tracks every pair; otherwise list the pairs
book.add("order-1", "owner-address", "in-out", in_tick=2, out_tick=1, supply=100)
book.update_remaining("order-1", 40)
for order in book.orders("in-out", 10):
    print(order.rate(), order.to_dict())
book.remove("order-1")
```

Orders for pairs that are not tracked are dropped. `orders(pair, limit)`
returns at most `limit` orders sorted by `in_tick / out_tick`, highest
first, and an empty list for an untracked pair; a negative limit raises
`ValueError`. Removing or updating an unknown order does nothing.

## Metrics

```python
from tokenvm.metrics import ActionKind, ActionMetrics

metrics = ActionMetrics()
metrics.increment(ActionKind.TRANSFER)
metrics.increment("fill_order")          # plain names are accepted too
print(metrics.count(ActionKind.TRANSFER))  # 1
print(metrics.snapshot())
print(ActionKind.TRANSFER.metric_name, ActionKind.TRANSFER.help)
# actions_transfer number of transfer actions
```

An unknown kind raises `ValueError`.

## JSON-RPC server

Implement the `Controller` protocol (`genesis`, `get_transaction`,
`get_asset_from_state`, `get_balance_from_state`, `orders`,
`get_loan_from_state`), wrap it in a `JSONRPCServer` and pass each request
to `handle`:

```python
from tokenvm.rpc_server import JSONRPCServer

server = JSONRPCServer(controller)
response = server.handle(
    b'{"jsonrpc": "2.0", "id": 1, "method": "tokenvm.tx", "params": {"txId": "abc"}}'
)
```

`handle` takes bytes, a string or an already decoded object and returns the
JSON-RPC 2.0 response object. Methods are named `tokenvm.<method>` (the
prefix is the server's `name`). Errors use the standard codes: `-32700`
bad JSON, `-32600` bad request, `-32601` unknown method, `-32602` missing
or malformed parameters, and `-32000` for anything the controller raises,
including "tx not found" and "asset not found". Asset metadata is sent
base64-encoded; `orders` returns at most 128 orders.

## JSON-RPC client

```python
from tokenvm.rpc_client import JSONRPCClient

with JSONRPCClient("http://localhost:9650/ext/bc/chain", chain_id, wait_timeout=30) as client:
    genesis = client.genesis()       # fetched once, then remembered
    status = client.tx(tx_id)        # TxStatus(found, success, timestamp)
    info = client.asset(asset_id)    # AssetInfo(found, metadata, supply, owner, warp)
    amount = client.balance(address, asset_id)
    succeeded = client.wait_for_transaction(tx_id)
```

The client posts to the URI with `/tokenapi` appended. A missing
transaction comes back as `TxStatus(found=False, success=False,
timestamp=-1)` and a missing asset as `AssetInfo(found=False, ...)`; any
other failure raises `RPCError`, which carries the error `code` when there
is one. `wait_for_balance` and `wait_for_transaction` poll every
`poll_interval` seconds and raise `TimeoutError` once `wait_timeout` passes
(no timeout by default). `parser()` returns a `Parser` holding the chain id
and genesis. You may pass your own `httpx.Client`; the client closes only
one it created itself.

## What this package does not do

- It does not listen on a socket: `JSONRPCServer.handle` answers request
  objects, and serving them over HTTP is left to you.
- It keeps no chain state. Transactions, assets, balances and loans come
  from the `Controller` you provide; there is no block processing or
  storage here.
- It does not build, sign or submit transactions, and does not parse or
  encode addresses.
- Metrics are kept in memory only; nothing exports them.