"""
Argument values produced by coercion.

Each value mirrors the ParameterType it was coerced against and can be
converted to the native Python form the ``eth-abi`` codec encodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from ..errors import ArgumentShapeError
from .types import (
    AddressType,
    ArrayType,
    BoolType,
    BytesType,
    FunctionSignature,
    IntegerType,
    ParameterType,
    StringType,
    TupleType,
)


@dataclass(frozen=True)
class AddressValue:
    address: str  # EIP-55 checksummed
    type: AddressType = AddressType()

    def to_abi(self) -> str:
        return self.address


@dataclass(frozen=True)
class BoolValue:
    value: bool
    type: BoolType = BoolType()

    def to_abi(self) -> bool:
        return self.value


@dataclass(frozen=True)
class IntegerValue:
    value: int
    type: IntegerType

    def to_abi(self) -> int:
        return self.value


@dataclass(frozen=True)
class BytesValue:
    data: bytes
    type: BytesType

    def to_abi(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class StringValue:
    value: str
    type: StringType = StringType()

    def to_abi(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArrayValue:
    items: tuple["ArgumentValue", ...]
    type: ArrayType

    def to_abi(self) -> list[Any]:
        return [item.to_abi() for item in self.items]


@dataclass(frozen=True)
class TupleValue:
    fields: tuple[tuple[str, "ArgumentValue"], ...]
    type: TupleType

    def to_abi(self) -> tuple[Any, ...]:
        return tuple(value.to_abi() for _, value in self.fields)


ArgumentValue = Union[AddressValue, BoolValue, IntegerValue, BytesValue, StringValue, ArrayValue, TupleValue]

_VALUE_FOR_TYPE = {
    AddressType: AddressValue,
    BoolType: BoolValue,
    IntegerType: IntegerValue,
    BytesType: BytesValue,
    StringType: StringValue,
    ArrayType: ArrayValue,
    TupleType: TupleValue,
}


def check_shape(value: ArgumentValue, expected: ParameterType, path: str = "") -> None:
    """
    Verify a value tree matches a type tree exactly.

    Raises:
        ArgumentShapeError: On the first mismatch, naming its path
    """
    where = path or "<root>"
    value_cls = _VALUE_FOR_TYPE.get(type(expected))
    if value_cls is None:
        raise ArgumentShapeError(f"{where}: unsupported type {expected!r}")
    if not isinstance(value, value_cls):
        raise ArgumentShapeError(
            f"{where}: expected {expected.canonical}, got {type(value).__name__}"
        )
    if value.type != expected:
        raise ArgumentShapeError(
            f"{where}: expected {expected.canonical}, got {value.type.canonical}"
        )

    if isinstance(value, IntegerValue):
        if not expected.min_value <= value.value <= expected.max_value:
            raise ArgumentShapeError(f"{where}: {value.value} does not fit {expected.canonical}")
    elif isinstance(value, BytesValue):
        if expected.size is not None and len(value.data) != expected.size:
            raise ArgumentShapeError(
                f"{where}: expected {expected.size} bytes, got {len(value.data)}"
            )
    elif isinstance(value, ArrayValue):
        if expected.length is not None and len(value.items) != expected.length:
            raise ArgumentShapeError(
                f"{where}: expected {expected.length} elements, got {len(value.items)}"
            )
        for i, item in enumerate(value.items):
            check_shape(item, expected.element, f"{path}[{i}]")
    elif isinstance(value, TupleValue):
        if len(value.fields) != len(expected.components):
            raise ArgumentShapeError(
                f"{where}: expected {len(expected.components)} fields, got {len(value.fields)}"
            )
        for (name, item), component in zip(value.fields, expected.components):
            if name != component.name:
                raise ArgumentShapeError(f"{where}: expected field '{component.name}', got '{name}'")
            check_shape(item, component.type, f"{path}.{name}" if path else name)


def check_arguments(signature: FunctionSignature, args: Sequence[ArgumentValue]) -> None:
    """Verify an argument vector matches a function's inputs in count and shape."""
    if len(args) != len(signature.inputs):
        raise ArgumentShapeError(
            f"{signature.canonical} takes {len(signature.inputs)} arguments, got {len(args)}"
        )
    for param, value in zip(signature.inputs, args):
        check_shape(value, param.type, param.display_name)


def to_abi_args(args: Sequence[ArgumentValue]) -> list[Any]:
    return [arg.to_abi() for arg in args]
