"""
Write Confirmer - polls for a transaction receipt under a deadline.

State machine: Submitted -> Confirmed | Reverted | TimedOut | Errored.

The wait budget is a wall-clock deadline measured with an injected
clock, so tests drive the loop without real sleeps.  Transport errors
while polling are retried within the same budget; the loop never polls
again once it has reported an outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError

from ..chain.protocols import ChainClient, Clock, SystemClock
from ..chain.rpc import Receipt
from ..errors import RpcError, TransportError, WriteReverted
from ..logging import get_logger
from .outcome import Failed, InvocationOutcome, WriteConfirmed, WriteTimedOut

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_MAX_WAIT = 30.0

ERROR_SELECTOR = bytes.fromhex("08c379a0")  # Error(string)
PANIC_SELECTOR = bytes.fromhex("4e487b71")  # Panic(uint256)

PANIC_CODES = {
    0x00: "generic compiler panic",
    0x01: "assertion failed",
    0x11: "arithmetic overflow or underflow",
    0x12: "division or modulo by zero",
    0x21: "invalid enum value",
    0x22: "invalid storage byte array encoding",
    0x31: "pop on empty array",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "call to uninitialized function",
}


def decode_revert_reason(data: bytes) -> Optional[str]:
    """Decode ``Error(string)`` / ``Panic(uint256)`` revert data, if possible."""
    try:
        if data[:4] == ERROR_SELECTOR:
            return decode(["string"], data[4:])[0]
        if data[:4] == PANIC_SELECTOR:
            code = decode(["uint256"], data[4:])[0]
            return f"panic 0x{code:02x}: {PANIC_CODES.get(code, 'unknown panic code')}"
    except (DecodingError, UnicodeDecodeError):
        return None
    return None


@dataclass(frozen=True)
class ReplayCall:
    """The original call, replayed at the receipt's block to recover a revert reason."""

    to: str
    data: bytes
    sender: Optional[str] = None
    value: int = 0


class WriteConfirmer:
    def __init__(self, chain: ChainClient, clock: Optional[Clock] = None) -> None:
        self.chain = chain
        self.clock = clock or SystemClock()

    def confirm(
        self,
        tx_hash: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait: float = DEFAULT_MAX_WAIT,
        replay: Optional[ReplayCall] = None,
    ) -> InvocationOutcome:
        """
        Wait for a transaction to be mined.

        Args:
            tx_hash: Submitted transaction hash
            poll_interval: Seconds between receipt queries
            max_wait: Seconds after which the wait is abandoned
            replay: Original call, used to recover a revert reason

        Returns:
            WriteConfirmed, Failed(WriteReverted), WriteTimedOut, or
            Failed(TransportError) if the node stayed unreachable
        """
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        start = self.clock.monotonic()
        deadline = start + max_wait
        polls = 0
        last_error: Optional[TransportError] = None

        while True:
            polls += 1
            receipt: Optional[Receipt] = None
            try:
                receipt = self.chain.get_receipt(tx_hash)
                last_error = None
            except TransportError as exc:
                last_error = exc
                logger.warning("Receipt poll failed, retrying", tx_hash=tx_hash, poll=polls, error=str(exc))
            except RpcError as exc:
                logger.error("Receipt query rejected", tx_hash=tx_hash, error=str(exc))
                return Failed(exc)

            if receipt is not None:
                return self._settle(receipt, replay)

            logger.debug("Receipt pending", tx_hash=tx_hash, poll=polls)
            now = self.clock.monotonic()
            if now >= deadline:
                break
            self.clock.sleep(min(poll_interval, deadline - now))

        waited = self.clock.monotonic() - start
        if last_error is not None:
            logger.error("Receipt polling gave up", tx_hash=tx_hash, polls=polls, error=str(last_error))
            return Failed(last_error)

        logger.warning("Confirmation timed out", tx_hash=tx_hash, polls=polls, waited=waited)
        return WriteTimedOut(tx_hash=tx_hash, waited=waited)

    def _settle(self, receipt: Receipt, replay: Optional[ReplayCall]) -> InvocationOutcome:
        if receipt.succeeded:
            logger.info(
                "Transaction confirmed",
                tx_hash=receipt.tx_hash,
                block=receipt.block_number,
                gas_used=receipt.gas_used,
            )
            return WriteConfirmed(tx_hash=receipt.tx_hash, receipt=receipt)

        reason = self._revert_reason(receipt, replay) if replay else None
        logger.warning("Transaction reverted", tx_hash=receipt.tx_hash, reason=reason)
        return Failed(WriteReverted(receipt.tx_hash, reason))

    def _revert_reason(self, receipt: Receipt, replay: ReplayCall) -> Optional[str]:
        block = hex(receipt.block_number) if receipt.block_number is not None else "latest"
        try:
            self.chain.call(
                replay.to, replay.data, block=block, sender=replay.sender, value=replay.value
            )
        except RpcError as exc:
            if exc.data:
                data = exc.data[2:] if exc.data.startswith("0x") else exc.data
                try:
                    return decode_revert_reason(bytes.fromhex(data))
                except ValueError:
                    return None
            message = str(exc)
            marker = "execution reverted:"
            if marker in message:
                return message.split(marker, 1)[1].strip() or None
            return None
        except TransportError:
            return None
        # Replay succeeded; state changed since the transaction ran
        return None
