from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..chain.rpc import Receipt
from ..errors import InachusError


@dataclass(frozen=True)
class ReadResult:
    """Decoded return values as ``(name, canonical type, value)`` triples."""

    function: str
    values: tuple[tuple[str, str, Any], ...]

    @property
    def value(self) -> Any:
        """The single return value, or a tuple of all of them."""
        if len(self.values) == 1:
            return self.values[0][2]
        return tuple(v for _, _, v in self.values)


@dataclass(frozen=True)
class WriteSubmitted:
    tx_hash: str


@dataclass(frozen=True)
class WriteConfirmed:
    tx_hash: str
    receipt: Receipt


@dataclass(frozen=True)
class WriteTimedOut:
    """No receipt within the wait budget; the transaction may still land."""

    tx_hash: str
    waited: float


@dataclass(frozen=True)
class Failed:
    error: InachusError

    @property
    def exit_code(self) -> int:
        return self.error.exit_code


InvocationOutcome = Union[ReadResult, WriteSubmitted, WriteConfirmed, WriteTimedOut, Failed]
