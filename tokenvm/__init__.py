"""Genesis rules, order book, action counters and a JSON-RPC server and client for a token virtual machine."""

__version__ = "0.1.0"
__all__ = ["genesis", "orderbook", "metrics", "rpc_server", "rpc_client"]