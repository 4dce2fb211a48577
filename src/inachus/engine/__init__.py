"""
Engine - ABI-driven parameter coercion and invocation.

Type Coercer -> Parameter Collector -> Invocation Router -> Write Confirmer.
"""

from .coerce import coerce, split_list
from .collect import collect
from .confirm import ReplayCall, WriteConfirmer, decode_revert_reason
from .outcome import (
    Failed,
    InvocationOutcome,
    ReadResult,
    WriteConfirmed,
    WriteSubmitted,
    WriteTimedOut,
)
from .router import WriteOptions, decode_result, encode_call, invoke

__all__ = [
    "Failed",
    "InvocationOutcome",
    "ReadResult",
    "ReplayCall",
    "WriteConfirmed",
    "WriteConfirmer",
    "WriteOptions",
    "WriteSubmitted",
    "WriteTimedOut",
    "coerce",
    "collect",
    "decode_result",
    "decode_revert_reason",
    "encode_call",
    "invoke",
    "split_list",
]
