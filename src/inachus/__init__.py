__all__ = [
    # ABI model
    "Contract",
    "FunctionSignature",
    "MethodType",
    "Mutability",
    "ParameterType",
    "parse_type",
    # Engine
    "coerce",
    "collect",
    "invoke",
    "WriteConfirmer",
    "WriteOptions",
    # Outcomes
    "Failed",
    "InvocationOutcome",
    "ReadResult",
    "WriteConfirmed",
    "WriteSubmitted",
    "WriteTimedOut",
    # Chain
    "LocalSigner",
    "Receipt",
    "RpcChainClient",
    # Config
    "Settings",
    "load_settings",
    "AddressRegistry",
    # Errors
    "InachusError",
    "CoercionError",
    "CollectionError",
    "SubmissionError",
    "WriteReverted",
]

from .abi.types import Contract, FunctionSignature, MethodType, Mutability, ParameterType, parse_type
from .chain.rpc import Receipt, RpcChainClient
from .chain.signer import LocalSigner
from .config import Settings, load_settings
from .engine import (
    Failed,
    InvocationOutcome,
    ReadResult,
    WriteConfirmed,
    WriteConfirmer,
    WriteOptions,
    WriteSubmitted,
    WriteTimedOut,
    coerce,
    collect,
    invoke,
)
from .errors import CoercionError, CollectionError, InachusError, SubmissionError, WriteReverted
from .registry import AddressRegistry
