"""
Address registry - deployed addresses for named contracts.

Stored as a JSON list of ``{"name": ..., "address": ...}`` objects,
validated against ``contracts.schema.json``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from .abi.schemas import CONTRACTS_SCHEMA, SchemaRegistry, SchemaValidationError
from .errors import ConfigError, InvalidAddress
from .engine.coerce import coerce_address
from .logging import get_logger

logger = get_logger(__name__)


class AddressRegistry:
    def __init__(self, path: Path, addresses: Optional[dict[str, str]] = None) -> None:
        self.path = path
        self._addresses: dict[str, str] = dict(addresses or {})

    @classmethod
    def load(cls, path: Path) -> "AddressRegistry":
        """
        Load the registry; a missing file is an empty registry.

        Raises:
            ConfigError: If the file is not a valid registry
        """
        if not path.exists():
            return cls(path)

        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Failed to read contract registry {path}: {exc}") from exc

        try:
            SchemaRegistry.default().validate_instance(payload, CONTRACTS_SCHEMA)
        except SchemaValidationError as exc:
            raise ConfigError(f"Invalid contract registry {path}: {'; '.join(exc.errors)}") from exc

        return cls(path, {entry["name"]: entry["address"] for entry in payload})

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [{"name": name, "address": addr} for name, addr in sorted(self._addresses.items())]
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")

    def get(self, name: str) -> Optional[str]:
        return self._addresses.get(name)

    def set(self, name: str, address: str) -> str:
        """
        Record a contract address (checksummed).

        Raises:
            InvalidAddress: If the address is malformed
            ConfigError: If the name is not alphanumeric/underscore
        """
        if not name or not all(c.isalnum() or c == "_" for c in name):
            raise ConfigError(f"Invalid contract name: {name!r} (alphanumeric or underscore only)")
        text = address.strip()
        if not text.startswith(("0x", "0X")):
            raise InvalidAddress("Address must start with 0x", raw=address)
        checksummed = coerce_address(text).address
        self._addresses[name] = checksummed
        logger.info("Contract address set", contract=name, address=checksummed)
        return checksummed

    def names(self) -> list[str]:
        return sorted(self._addresses)

    def __contains__(self, name: object) -> bool:
        return name in self._addresses

    def __len__(self) -> int:
        return len(self._addresses)
