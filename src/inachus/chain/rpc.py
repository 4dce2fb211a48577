"""
JSON-RPC Client for EVM chains.

Lightweight alternative to web3.py: uses httpx for HTTP.  ABI encoding
and decoding happen in the engine; this client only moves hex over the
wire and parses receipts.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Any, Optional

import httpx

from ..errors import RpcError, TransportError
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_TIMEOUT = 30.0


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return int(value, 16)


def _to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def _from_hex(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


@dataclass(frozen=True)
class Receipt:
    """Summary of a mined transaction's receipt."""

    tx_hash: str
    status: Optional[int] = None  # None before Byzantium (no status field)
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    contract_address: Optional[str] = None
    log_count: int = 0

    @property
    def succeeded(self) -> bool:
        # A mined receipt without a status field is counted as success
        return self.status != 0

    @classmethod
    def from_rpc(cls, payload: dict[str, Any]) -> "Receipt":
        return cls(
            tx_hash=payload["transactionHash"],
            status=_to_int(payload.get("status")),
            block_number=_to_int(payload.get("blockNumber")),
            gas_used=_to_int(payload.get("gasUsed")),
            contract_address=payload.get("contractAddress"),
            log_count=len(payload.get("logs") or []),
        )


class RpcChainClient:
    """
    Chain client over HTTP JSON-RPC.

    Network failures and non-2xx responses raise ``TransportError``;
    JSON-RPC error objects raise ``RpcError`` with the node's code and
    revert data when present.
    """

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._ids = count(1)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RpcChainClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _rpc_call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            TransportError: If the request could not be completed
            RpcError: If the node returned an error object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }

        try:
            response = self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise TransportError(f"RPC transport error ({method}): {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"Malformed RPC response ({method}): {exc}") from exc

        if "error" in data:
            error = data["error"] or {}
            raise RpcError(
                f"RPC error: {error.get('message', error)}",
                code=error.get("code"),
                data=error.get("data") if isinstance(error.get("data"), str) else None,
            )

        logger.debug("RPC call", method=method)
        return data.get("result")

    # ---- read path ----

    def call(
        self,
        address: str,
        data: bytes,
        block: str = "latest",
        sender: Optional[str] = None,
        value: int = 0,
    ) -> bytes:
        """Execute a stateless eth_call and return the raw return data."""
        request: dict[str, Any] = {"to": address, "data": _to_hex(data)}
        if sender:
            request["from"] = sender
        if value:
            request["value"] = hex(value)
        result = self._rpc_call("eth_call", [request, block])
        return _from_hex(result or "0x")

    def chain_id(self) -> int:
        return int(self._rpc_call("eth_chainId", []), 16)

    # ---- write path ----

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return int(self._rpc_call("eth_getTransactionCount", [address, block]), 16)

    def gas_price(self) -> int:
        return int(self._rpc_call("eth_gasPrice", []), 16)

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        request = {k: (hex(v) if isinstance(v, int) else v) for k, v in tx.items()}
        return int(self._rpc_call("eth_estimateGas", [request]), 16)

    def submit(self, raw_tx: bytes) -> str:
        """Broadcast a signed transaction; returns the transaction hash."""
        return self._rpc_call("eth_sendRawTransaction", [_to_hex(raw_tx)])

    def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        """Return the receipt, or None while the transaction is pending."""
        payload = self._rpc_call("eth_getTransactionReceipt", [tx_hash])
        if payload is None:
            return None
        return Receipt.from_rpc(payload)
