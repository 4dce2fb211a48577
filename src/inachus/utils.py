from __future__ import annotations

import re

from eth_hash.auto import keccak


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def to_checksum_address(address: str) -> str:
    """Convert a 40-hex-digit address to EIP-55 checksummed format."""
    addr = address.lower()
    if addr.startswith("0x"):
        addr = addr[2:]
    addr_hash = keccak256(addr.encode("ascii")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def strip_hex_prefix(value: str) -> str:
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h|d)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, "d": 86400.0}


def parse_duration(text: str) -> float:
    """
    Parse a human duration into seconds.

    Accepts compound forms such as ``30s``, ``1m30s``, ``500ms``, ``2h``
    and a bare number of seconds.

    Raises:
        ValueError: If the text is not a duration
    """
    value = text.strip().lower().replace(" ", "")
    if not value:
        raise ValueError("Empty duration")

    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise ValueError(f"Negative duration: {text}")
        return seconds

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(value):
        if match.start() != pos:
            raise ValueError(f"Invalid duration: {text}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(value):
        raise ValueError(f"Invalid duration: {text}")
    return total
