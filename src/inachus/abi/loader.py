"""
ABI Loader - Loads contract ABIs from a directory of ABI files.

A file holds either a bare ABI list or a compiler artifact (Foundry,
Hardhat) with the ABI under an ``abi`` key.  The contract name is the
file stem, so ``abis/Token.abi`` and ``abis/Token.json`` both load as
``Token``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from ..errors import AbiError
from ..logging import get_logger
from .schemas import ABI_SCHEMA, SchemaRegistry, SchemaValidationError
from .types import Contract

ABI_SUFFIXES = (".abi", ".json")

logger = get_logger(__name__)


def discover_abi_files(abi_dir: Path) -> dict[str, Path]:
    """
    Map contract names to ABI files in a directory.

    Raises:
        AbiError: If the directory does not exist
    """
    if not abi_dir.is_dir():
        raise AbiError(f"ABI directory not found: {abi_dir}")

    found: dict[str, Path] = {}
    for path in sorted(abi_dir.iterdir()):
        if path.is_file() and path.suffix in ABI_SUFFIXES:
            if path.stem in found:
                logger.warning("Duplicate ABI name, keeping first", name=path.stem, ignored=str(path))
                continue
            found[path.stem] = path
    return found


@lru_cache(maxsize=64)
def load_abi(path: Path) -> tuple[dict[str, Any], ...]:
    """
    Load and validate the ABI in one file.

    Args:
        path: ABI file (bare list or artifact with an ``abi`` key)

    Returns:
        ABI entries as a tuple of dicts

    Raises:
        AbiError: If the file is unreadable or not a valid ABI
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise AbiError(f"Failed to read ABI {path}: {exc}") from exc

    abi = payload.get("abi") if isinstance(payload, dict) else payload

    try:
        SchemaRegistry.default().validate_instance(abi, ABI_SCHEMA)
    except SchemaValidationError as exc:
        details = "; ".join(exc.errors[:3])
        raise AbiError(f"Invalid ABI in {path}: {details}") from exc

    logger.debug("Loaded ABI", path=str(path), entries=len(abi))
    return tuple(abi)


def load_contract(name: str, abi_dir: Path) -> Contract:
    """Load one contract's function signatures by name."""
    files = discover_abi_files(abi_dir)
    if name not in files:
        raise AbiError(f"No ABI for contract {name} in {abi_dir}")
    return Contract.from_abi(name, list(load_abi(files[name])))


def load_contracts(abi_dir: Path) -> dict[str, Contract]:
    """Load every contract in an ABI directory, keyed by name."""
    return {
        name: Contract.from_abi(name, list(load_abi(path)))
        for name, path in discover_abi_files(abi_dir).items()
    }
