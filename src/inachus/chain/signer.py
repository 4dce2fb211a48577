"""
Transaction signing with a local private key.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import SubmissionError


class LocalSigner:
    """Signs legacy transactions for one chain with a local key."""

    def __init__(self, private_key: str, chain_id: int) -> None:
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        self._account: LocalAccount = Account.from_key(private_key)
        self.chain_id = chain_id

    @property
    def address(self) -> str:
        """0x-prefixed checksummed address of the signing key."""
        return self._account.address

    def sign(self, tx_request: dict[str, Any]) -> bytes:
        """
        Sign a transaction request.

        The configured chain id is applied unless the request sets one.

        Returns:
            Raw signed transaction bytes, ready for broadcast

        Raises:
            SubmissionError: If the request cannot be signed
        """
        tx = dict(tx_request)
        tx.setdefault("chainId", self.chain_id)
        try:
            signed = self._account.sign_transaction(tx)
        except (TypeError, ValueError) as exc:
            raise SubmissionError(f"Failed to sign transaction: {exc}") from exc
        return bytes(signed.raw_transaction)
