"""
Type Coercer - converts operator text into ABI-typed argument values.

Scalars take one token.  Arrays take a comma-separated list, optionally
wrapped in ``[...]``; nested arrays are bracketed (``[1,2],[3]``), tuples
inside arrays are parenthesised (``(0xabc...,5)``), and string elements
may be double-quoted to contain commas.

Coercion is pure: no defaults are invented, every failure raises a
``CoercionError`` subclass.
"""

from __future__ import annotations

import re

from ..abi.types import (
    AddressType,
    ArrayType,
    BoolType,
    BytesType,
    IntegerType,
    ParameterType,
    StringType,
    TupleType,
)
from ..abi.values import (
    AddressValue,
    ArgumentValue,
    ArrayValue,
    BoolValue,
    BytesValue,
    IntegerValue,
    StringValue,
    TupleValue,
)
from ..errors import (
    ArrayLengthMismatch,
    CoercionError,
    IntegerOutOfRange,
    InvalidAddress,
    InvalidBool,
    InvalidBytesLength,
    InvalidHex,
    InvalidInteger,
    UnsupportedType,
)
from ..utils import strip_hex_prefix, to_checksum_address

_ADDRESS = re.compile(r"(0[xX])?[0-9a-fA-F]{40}")
_DECIMAL = re.compile(r"[-+]?[0-9]+")
_HEXADECIMAL = re.compile(r"[-+]?0[xX][0-9a-fA-F]+")
_HEX_BODY = re.compile(r"(?:[0-9a-fA-F]{2})*")

_TRUE = {"true", "1"}
_FALSE = {"false", "0"}

_OPENERS = {"[": "]", "(": ")"}


def coerce_address(raw: str) -> AddressValue:
    text = raw.strip()
    if not _ADDRESS.fullmatch(text):
        raise InvalidAddress(f"Invalid address: {raw!r} (expected 40 hex digits)", raw=raw)
    body = strip_hex_prefix(text)
    checksummed = to_checksum_address(body)
    # Mixed case means the operator supplied an EIP-55 checksum; verify it
    if body != body.lower() and body != body.upper() and "0x" + body != checksummed:
        raise InvalidAddress(f"Invalid address checksum: {raw!r}", raw=raw)
    return AddressValue(checksummed)


def coerce_integer(raw: str, type_: IntegerType) -> IntegerValue:
    text = raw.strip()
    if _DECIMAL.fullmatch(text):
        value = int(text, 10)
    elif _HEXADECIMAL.fullmatch(text):
        value = int(text, 16)
    else:
        raise InvalidInteger(f"Invalid integer: {raw!r}", raw=raw)

    if not type_.min_value <= value <= type_.max_value:
        raise IntegerOutOfRange(
            f"{value} is out of range for {type_.canonical} "
            f"[{type_.min_value}, {type_.max_value}]",
            raw=raw,
        )
    return IntegerValue(value, type_)


def coerce_bool(raw: str) -> BoolValue:
    text = raw.strip().lower()
    if text in _TRUE:
        return BoolValue(True)
    if text in _FALSE:
        return BoolValue(False)
    raise InvalidBool(f"Invalid boolean: {raw!r} (expected true/false or 1/0)", raw=raw)


def coerce_bytes(raw: str, type_: BytesType) -> BytesValue:
    body = strip_hex_prefix(raw.strip())
    if not _HEX_BODY.fullmatch(body):
        raise InvalidHex(f"Invalid hex: {raw!r}", raw=raw)
    data = bytes.fromhex(body)
    if type_.size is not None and len(data) != type_.size:
        raise InvalidBytesLength(
            f"{type_.canonical} needs exactly {type_.size} bytes, got {len(data)}",
            raw=raw,
        )
    return BytesValue(data, type_)


def split_list(raw: str, nested: bool = False) -> list[str]:
    """
    Split list text into top-level element tokens.

    Commas inside ``[]``, ``()`` or double quotes do not split.  A single
    pair of outer brackets is removed first.  Empty text is an empty list.

    With ``nested`` (elements are arrays themselves) the outer brackets
    are only removed when every element inside them is bracketed, so
    ``[1,2]`` is one element rather than two.

    Raises:
        CoercionError: On unbalanced brackets or quotes
    """
    text = raw.strip()
    if text.startswith("[") and _closing_index(text, 0) == len(text) - 1:
        inner = _split_top_level(text[1:-1].strip(), raw)
        if nested and not all(token.startswith("[") for token in inner):
            return [text]
        return inner
    return _split_top_level(text, raw)


def _split_top_level(text: str, raw: str) -> list[str]:
    if not text:
        return []

    tokens: list[str] = []
    stack: list[str] = []
    in_quotes = False
    start = 0
    for i, ch in enumerate(text):
        if in_quotes:
            if ch == '"':
                in_quotes = False
        elif ch == '"':
            in_quotes = True
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in ")]":
            if not stack or stack.pop() != ch:
                raise CoercionError(f"Unbalanced '{ch}' in {raw!r}", raw=raw)
        elif ch == "," and not stack:
            tokens.append(text[start:i].strip())
            start = i + 1
    if stack or in_quotes:
        raise CoercionError(f"Unterminated list element in {raw!r}", raw=raw)
    tokens.append(text[start:].strip())
    return tokens


def _closing_index(text: str, open_at: int) -> int:
    depth = 0
    in_quotes = False
    for i in range(open_at, len(text)):
        ch = text[i]
        if in_quotes:
            if ch == '"':
                in_quotes = False
        elif ch == '"':
            in_quotes = True
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _unquote(token: str) -> str:
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        return token[1:-1]
    return token


def coerce_array(raw: str, type_: ArrayType) -> ArrayValue:
    nested = isinstance(type_.element, ArrayType)
    tokens = split_list(raw, nested=nested)
    if type_.length is not None and len(tokens) != type_.length:
        raise ArrayLengthMismatch(type_.length, len(tokens), raw=raw)

    items = []
    for token in tokens:
        if nested and not token.startswith("["):
            raise CoercionError(
                f"{type_.element.canonical} element must be bracketed, got {token!r}",
                raw=raw,
            )
        if isinstance(type_.element, StringType):
            token = _unquote(token)
        items.append(coerce(token, type_.element))
    return ArrayValue(tuple(items), type_)


def coerce_tuple(raw: str, type_: TupleType) -> TupleValue:
    """Coerce parenthesised tuple text, used for tuples nested in arrays."""
    text = raw.strip()
    if text.startswith("(") and _closing_index(text, 0) == len(text) - 1:
        text = "[" + text[1:-1] + "]"
    tokens = split_list(text)
    if len(tokens) != len(type_.components):
        raise CoercionError(
            f"{type_.canonical} needs {len(type_.components)} components, got {len(tokens)}",
            raw=raw,
        )

    fields = []
    for token, component in zip(tokens, type_.components):
        if isinstance(component.type, StringType):
            token = _unquote(token)
        fields.append((component.name, coerce(token, component.type)))
    return TupleValue(tuple(fields), type_)


def coerce(raw: str, type_: ParameterType) -> ArgumentValue:
    """
    Convert one raw text token into a value of the given ABI type.

    Args:
        raw: Operator-supplied text
        type_: Target parameter type

    Returns:
        ArgumentValue whose shape matches ``type_``

    Raises:
        CoercionError: If the text does not represent a valid value
    """
    if isinstance(type_, AddressType):
        return coerce_address(raw)
    if isinstance(type_, IntegerType):
        return coerce_integer(raw, type_)
    if isinstance(type_, BoolType):
        return coerce_bool(raw)
    if isinstance(type_, BytesType):
        return coerce_bytes(raw, type_)
    if isinstance(type_, StringType):
        return StringValue(raw)
    if isinstance(type_, ArrayType):
        return coerce_array(raw, type_)
    if isinstance(type_, TupleType):
        return coerce_tuple(raw, type_)
    raise UnsupportedType(f"Unsupported parameter type: {type_!r}", raw=raw)
