"""
Error taxonomy for Inachus.

Every error carries an ``exit_code`` used by the CLI.  Operator input
errors (coercion / collection) are raised to the interactive layer,
which reports them and asks again.  Chain-side failures are wrapped in
``Failed`` outcomes by the engine rather than raised.
"""

from __future__ import annotations

from typing import Optional


class InachusError(RuntimeError):
    exit_code: int = 1


class ConfigError(InachusError):
    exit_code = 2


class AbiError(InachusError):
    exit_code = 3


# ============ Operator input ============


class CoercionError(InachusError, ValueError):
    """Text could not be converted into a value of the requested ABI type."""

    exit_code = 4

    def __init__(self, message: str, raw: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw = raw


class InvalidAddress(CoercionError):
    pass


class InvalidInteger(CoercionError):
    pass


class IntegerOutOfRange(CoercionError):
    pass


class InvalidBool(CoercionError):
    pass


class InvalidHex(CoercionError):
    pass


class InvalidBytesLength(CoercionError):
    pass


class ArrayLengthMismatch(CoercionError):
    def __init__(self, expected: int, actual: int, raw: Optional[str] = None) -> None:
        super().__init__(
            f"Array length mismatch: expected {expected} elements, got {actual}",
            raw=raw,
        )
        self.expected = expected
        self.actual = actual


class UnsupportedType(CoercionError):
    pass


class CollectionError(InachusError):
    """A parameter failed to coerce; records which one."""

    exit_code = 4

    def __init__(self, index: int, name: str, type_name: str, cause: CoercionError) -> None:
        super().__init__(f"Parameter #{index} '{name}' ({type_name}): {cause}")
        self.index = index
        self.name = name
        self.type_name = type_name
        self.cause = cause


class ArgumentShapeError(InachusError):
    exit_code = 4


# ============ Chain ============


class TransportError(InachusError):
    """Network or HTTP failure talking to the RPC node (transient)."""

    exit_code = 5


class RpcError(InachusError):
    """The node answered with a JSON-RPC error object."""

    exit_code = 5

    def __init__(self, message: str, code: Optional[int] = None, data: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code
        self.data = data


class CallError(InachusError):
    exit_code = 5


class SubmissionError(InachusError):
    """Signing or broadcasting failed before the transaction existed on-chain."""

    exit_code = 6


class WriteReverted(InachusError):
    exit_code = 7

    def __init__(self, tx_hash: str, reason: Optional[str] = None) -> None:
        if reason:
            message = f"Transaction {tx_hash} reverted: {reason}"
        else:
            message = f"Transaction {tx_hash} reverted"
        super().__init__(message)
        self.tx_hash = tx_hash
        self.reason = reason
