"""Shared fixtures and deterministic test doubles (no network, no sleeps)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pytest

from inachus.abi.types import Contract
from inachus.chain.rpc import Receipt

TOKEN_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
HOLDER = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
TX_HASH = "0x" + "ab" * 32

TOKEN_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "getReserves",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "deposit",
        "inputs": [],
        "outputs": [],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "fillOrder",
        "inputs": [
            {
                "name": "order",
                "type": "tuple",
                "components": [
                    {"name": "maker", "type": "address"},
                    {"name": "amounts", "type": "uint256[]"},
                    {"name": "salt", "type": "bytes32"},
                ],
            },
            {"name": "signature", "type": "bytes"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "Transfer",
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]


class FakeChain:
    """
    Scripted chain client.

    ``receipts`` is consumed one item per poll: None (pending), a Receipt,
    or an exception to raise.  When exhausted, ``default_receipt`` is used.
    """

    def __init__(
        self,
        call_result: Union[bytes, Exception] = b"",
        receipts: Optional[Iterable[Union[None, Receipt, Exception]]] = None,
        default_receipt: Union[None, Receipt, Exception] = None,
        submit_error: Optional[Exception] = None,
        replay_error: Optional[Exception] = None,
        node_chain_id: int = 1,
    ) -> None:
        self.call_result = call_result
        self.receipts = list(receipts or [])
        self.default_receipt = default_receipt
        self.submit_error = submit_error
        self.replay_error = replay_error
        self.node_chain_id = node_chain_id
        self.calls: list[tuple[str, bytes, str, Optional[str]]] = []
        self.call_values: list[int] = []
        self.submitted: list[bytes] = []
        self.estimates: list[dict[str, Any]] = []
        self.receipt_polls = 0
        self.closed = False

    def call(
        self,
        address: str,
        data: bytes,
        block: str = "latest",
        sender: Optional[str] = None,
        value: int = 0,
    ) -> bytes:
        self.calls.append((address, data, block, sender))
        self.call_values.append(value)
        if block != "latest" and self.replay_error is not None:
            raise self.replay_error
        if isinstance(self.call_result, Exception):
            raise self.call_result
        return self.call_result

    def submit(self, raw_tx: bytes) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(raw_tx)
        return TX_HASH

    def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        self.receipt_polls += 1
        item = self.receipts.pop(0) if self.receipts else self.default_receipt
        if isinstance(item, Exception):
            raise item
        return item

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return 7

    def gas_price(self) -> int:
        return 1_000_000_000

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        self.estimates.append(dict(tx))
        return 55_000

    def chain_id(self) -> int:
        return self.node_chain_id

    def close(self) -> None:
        self.closed = True


class FakeSigner:
    address = "0x1111111111111111111111111111111111111111"

    def __init__(self) -> None:
        self.signed: list[dict[str, Any]] = []

    def sign(self, tx_request: dict[str, Any]) -> bytes:
        self.signed.append(dict(tx_request))
        return b"\x02signed"


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedInput:
    def __init__(self, answers: Iterable[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def request_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answers.pop(0)


def ok_receipt(status: int = 1) -> Receipt:
    return Receipt(tx_hash=TX_HASH, status=status, block_number=100, gas_used=51_234, log_count=1)


@pytest.fixture()
def token() -> Contract:
    return Contract.from_abi("Token", TOKEN_ABI, address=TOKEN_ADDRESS)


@pytest.fixture()
def abi_dir(tmp_path: Path) -> Path:
    """ABI directory with a bare ABI file and a compiler artifact."""
    directory = tmp_path / "abis"
    directory.mkdir()
    (directory / "Token.abi").write_text(json.dumps(TOKEN_ABI), encoding="utf-8")
    artifact = {"contractName": "Vault", "abi": TOKEN_ABI[:2], "bytecode": "0x00"}
    (directory / "Vault.json").write_text(json.dumps(artifact), encoding="utf-8")
    (directory / "notes.txt").write_text("not an abi", encoding="utf-8")
    return directory
