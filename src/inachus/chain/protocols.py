from __future__ import annotations

import time
from typing import Any, Optional, Protocol

from .rpc import Receipt


class ChainClient(Protocol):
    def call(
        self,
        address: str,
        data: bytes,
        block: str = "latest",
        sender: Optional[str] = None,
        value: int = 0,
    ) -> bytes:
        ...

    def submit(self, raw_tx: bytes) -> str:
        ...

    def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        ...

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        ...

    def gas_price(self) -> int:
        ...

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        ...


class Signer(Protocol):
    @property
    def address(self) -> str:
        ...

    def sign(self, tx_request: dict[str, Any]) -> bytes:
        ...


class InputSource(Protocol):
    def request_text(self, prompt: str) -> str:
        ...


class Clock(Protocol):
    def monotonic(self) -> float:
        ...

    def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
