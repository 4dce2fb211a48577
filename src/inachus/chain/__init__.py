"""
Chain - On-chain interaction layer for Inachus.

Provides the JSON-RPC chain client, the local transaction signer, and
the capability protocols the engine is written against.

Uses httpx + eth-account instead of the heavyweight web3.py.
"""

from .protocols import ChainClient, Clock, InputSource, Signer, SystemClock
from .rpc import Receipt, RpcChainClient
from .signer import LocalSigner

__all__ = [
    "ChainClient",
    "Clock",
    "InputSource",
    "LocalSigner",
    "Receipt",
    "RpcChainClient",
    "Signer",
    "SystemClock",
]
