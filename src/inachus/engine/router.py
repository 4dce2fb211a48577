"""
Invocation Router - sends a call down the read or write path.

Read functions (view / pure) are executed with ``eth_call`` and their
return data decoded against the declared outputs.  Write functions are
encoded, signed, broadcast, and handed to the Write Confirmer.
Submission failures are reported, never retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError

from ..abi.types import Contract, FunctionSignature
from ..abi.values import ArgumentValue, check_arguments, to_abi_args
from ..chain.protocols import ChainClient, Signer
from ..errors import (
    ArgumentShapeError,
    CallError,
    InachusError,
    RpcError,
    SubmissionError,
    TransportError,
)
from ..logging import get_logger
from ..utils import to_checksum_address
from .confirm import DEFAULT_MAX_WAIT, DEFAULT_POLL_INTERVAL, ReplayCall, WriteConfirmer
from .outcome import Failed, InvocationOutcome, ReadResult, WriteSubmitted

logger = get_logger(__name__)


@dataclass(frozen=True)
class WriteOptions:
    value: int = 0
    gas_limit: Optional[int] = None
    wait: bool = True
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_wait: float = DEFAULT_MAX_WAIT


def encode_call(signature: FunctionSignature, args: Sequence[ArgumentValue]) -> bytes:
    """
    ABI-encode a function call (selector + arguments).

    Raises:
        ArgumentShapeError: If the arguments do not match the inputs
    """
    check_arguments(signature, args)
    if not args:
        return signature.selector
    try:
        return signature.selector + encode(signature.input_types, to_abi_args(args))
    except EncodingError as exc:
        raise ArgumentShapeError(f"Cannot encode arguments for {signature.canonical}: {exc}") from exc


def decode_result(signature: FunctionSignature, data: bytes) -> ReadResult:
    """
    Decode return data against the function's declared outputs.

    Raises:
        CallError: If the data does not decode to the declared outputs
    """
    if not signature.outputs:
        return ReadResult(function=signature.canonical, values=())
    if not data:
        raise CallError(f"{signature.canonical} returned no data (is the address a contract?)")
    try:
        decoded = decode(signature.output_types, data)
    except (DecodingError, UnicodeDecodeError) as exc:
        raise CallError(f"Cannot decode result of {signature.canonical}: {exc}") from exc
    return ReadResult(
        function=signature.canonical,
        values=tuple(
            (param.name, param.type.canonical, value)
            for param, value in zip(signature.outputs, decoded)
        ),
    )


def _require_address(contract: Contract) -> str:
    if not contract.address:
        raise CallError(f"No address registered for contract {contract.name}")
    return contract.address


def invoke_read(
    contract: Contract,
    signature: FunctionSignature,
    args: Sequence[ArgumentValue],
    chain: ChainClient,
    sender: Optional[str] = None,
) -> InvocationOutcome:
    try:
        address = _require_address(contract)
        calldata = encode_call(signature, args)
        logger.info("Calling read function", contract=contract.name, function=signature.canonical)
        data = chain.call(address, calldata, sender=sender)
        return decode_result(signature, data)
    except (ArgumentShapeError, CallError) as exc:
        return Failed(exc)
    except (TransportError, RpcError) as exc:
        return Failed(CallError(f"Call to {signature.canonical} failed: {exc}"))


def _build_transaction(
    address: str,
    calldata: bytes,
    signer: Signer,
    chain: ChainClient,
    options: WriteOptions,
) -> dict[str, Any]:
    tx: dict[str, Any] = {
        "from": signer.address,
        "to": to_checksum_address(address),
        "data": "0x" + calldata.hex(),
        "value": options.value,
    }
    gas = options.gas_limit or chain.estimate_gas(tx)
    tx.pop("from")
    tx.update(
        {
            "nonce": chain.get_transaction_count(signer.address, "pending"),
            "gas": gas,
            "gasPrice": chain.gas_price(),
        }
    )
    return tx


def invoke_write(
    contract: Contract,
    signature: FunctionSignature,
    args: Sequence[ArgumentValue],
    chain: ChainClient,
    signer: Optional[Signer],
    options: Optional[WriteOptions] = None,
    confirmer: Optional[WriteConfirmer] = None,
) -> InvocationOutcome:
    options = options or WriteOptions()
    try:
        address = _require_address(contract)
        calldata = encode_call(signature, args)
    except (ArgumentShapeError, CallError) as exc:
        return Failed(exc)

    if signer is None:
        return Failed(SubmissionError("No private key configured; cannot send transactions"))
    if options.value and not signature.is_payable:
        return Failed(SubmissionError(f"{signature.canonical} is not payable; value must be 0"))

    try:
        tx = _build_transaction(address, calldata, signer, chain, options)
        raw_tx = signer.sign(tx)
        tx_hash = chain.submit(raw_tx)
    except SubmissionError as exc:
        return Failed(exc)
    except (TransportError, RpcError) as exc:
        logger.error("Submission failed", function=signature.canonical, error=str(exc))
        return Failed(SubmissionError(f"Submission of {signature.canonical} failed: {exc}"))

    logger.info(
        "Transaction submitted",
        contract=contract.name,
        function=signature.canonical,
        tx_hash=tx_hash,
        nonce=tx["nonce"],
    )
    if not options.wait:
        return WriteSubmitted(tx_hash=tx_hash)

    confirmer = confirmer or WriteConfirmer(chain)
    return confirmer.confirm(
        tx_hash,
        poll_interval=options.poll_interval,
        max_wait=options.max_wait,
        replay=ReplayCall(to=address, data=calldata, sender=signer.address, value=options.value),
    )


def invoke(
    contract: Contract,
    signature: FunctionSignature,
    args: Sequence[ArgumentValue],
    chain: ChainClient,
    signer: Optional[Signer] = None,
    options: Optional[WriteOptions] = None,
    confirmer: Optional[WriteConfirmer] = None,
) -> InvocationOutcome:
    """
    Invoke a contract function on the path its mutability requires.

    Args:
        contract: Target contract (must have an address)
        signature: Function to invoke
        args: Coerced arguments, matching ``signature.inputs``
        chain: Chain client capability
        signer: Signer capability (write path only)
        options: Value, gas and confirmation settings (write path only)
        confirmer: Confirmer to use instead of a default one

    Returns:
        ReadResult for reads; WriteConfirmed / WriteSubmitted /
        WriteTimedOut for writes; Failed on any error
    """
    if signature.is_read:
        sender = signer.address if signer is not None else None
        return invoke_read(contract, signature, args, chain, sender=sender)
    try:
        return invoke_write(contract, signature, args, chain, signer, options, confirmer)
    except InachusError as exc:
        return Failed(exc)
