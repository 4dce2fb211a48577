"""
ABI type model.

Parameter types form a recursive tree built from the JSON ABI entries
(``type`` plus ``components`` for tuples).  Each node knows its canonical
type string, which is what the selector hash and the ``eth-abi`` codec
expect.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from ..errors import AbiError
from ..utils import keccak256


# ============ Parameter types ============


@dataclass(frozen=True)
class AddressType:
    @property
    def canonical(self) -> str:
        return "address"


@dataclass(frozen=True)
class BoolType:
    @property
    def canonical(self) -> str:
        return "bool"


@dataclass(frozen=True)
class IntegerType:
    bits: int = 256
    signed: bool = False

    @property
    def canonical(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.bits}"

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True)
class BytesType:
    size: Optional[int] = None  # None = dynamic ``bytes``

    @property
    def canonical(self) -> str:
        return "bytes" if self.size is None else f"bytes{self.size}"


@dataclass(frozen=True)
class StringType:
    @property
    def canonical(self) -> str:
        return "string"


@dataclass(frozen=True)
class ArrayType:
    element: "ParameterType"
    length: Optional[int] = None  # None = dynamic ``T[]``

    @property
    def canonical(self) -> str:
        suffix = "[]" if self.length is None else f"[{self.length}]"
        return self.element.canonical + suffix


@dataclass(frozen=True)
class TupleComponent:
    name: str
    type: "ParameterType"


@dataclass(frozen=True)
class TupleType:
    components: tuple[TupleComponent, ...] = ()

    @property
    def canonical(self) -> str:
        return "(" + ",".join(c.type.canonical for c in self.components) + ")"


ParameterType = Union[AddressType, BoolType, IntegerType, BytesType, StringType, ArrayType, TupleType]


_ARRAY_SUFFIX = re.compile(r"\[(\d*)\]$")
_INT_TYPE = re.compile(r"(u?)int(\d*)")
_FIXED_BYTES = re.compile(r"bytes(\d+)")


def _parse_base(base: str, components: Optional[list[dict[str, Any]]]) -> ParameterType:
    if base == "address":
        return AddressType()
    if base == "bool":
        return BoolType()
    if base == "string":
        return StringType()
    if base == "bytes":
        return BytesType()
    if base == "tuple":
        if components is None:
            raise AbiError("Tuple parameter without components")
        return TupleType(
            tuple(
                TupleComponent(name=c.get("name", ""), type=parse_parameter(c))
                for c in components
            )
        )

    match = _INT_TYPE.fullmatch(base)
    if match:
        bits = int(match.group(2)) if match.group(2) else 256
        if bits % 8 != 0 or not 8 <= bits <= 256:
            raise AbiError(f"Invalid integer width: {base}")
        return IntegerType(bits=bits, signed=match.group(1) != "u")

    match = _FIXED_BYTES.fullmatch(base)
    if match:
        size = int(match.group(1))
        if not 1 <= size <= 32:
            raise AbiError(f"Invalid fixed bytes size: {base}")
        return BytesType(size=size)

    raise AbiError(f"Unsupported ABI type: {base}")


def parse_type(type_str: str, components: Optional[list[dict[str, Any]]] = None) -> ParameterType:
    """
    Parse an ABI type string (e.g. ``uint256[3][]``) into a ParameterType.

    Array suffixes are read right to left: ``uint8[2][]`` is a dynamic
    array whose elements are ``uint8[2]``.
    """
    type_str = type_str.strip()
    match = _ARRAY_SUFFIX.search(type_str)
    if match:
        inner = parse_type(type_str[: match.start()], components)
        length = int(match.group(1)) if match.group(1) else None
        return ArrayType(element=inner, length=length)
    return _parse_base(type_str, components)


def parse_parameter(entry: dict[str, Any]) -> ParameterType:
    """Build a ParameterType from one JSON ABI parameter entry."""
    try:
        type_str = entry["type"]
    except KeyError:
        raise AbiError(f"ABI parameter has no type: {entry}") from None
    return parse_type(type_str, entry.get("components"))


# ============ Functions ============


class Mutability(Enum):
    PURE = "pure"
    VIEW = "view"
    NONPAYABLE = "nonpayable"
    PAYABLE = "payable"

    @classmethod
    def from_entry(cls, entry: dict[str, Any]) -> "Mutability":
        state = entry.get("stateMutability")
        if state is None:
            # Pre-0.4.16 ABIs only carry the constant / payable flags
            if entry.get("constant"):
                return cls.VIEW
            return cls.PAYABLE if entry.get("payable") else cls.NONPAYABLE
        try:
            return cls(state)
        except ValueError:
            raise AbiError(f"Unknown state mutability: {state}") from None

    @property
    def is_read(self) -> bool:
        return self in (Mutability.PURE, Mutability.VIEW)


class MethodType(Enum):
    READ = "read"
    WRITE = "write"
    ALL = "all"

    def __str__(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Parameter:
    name: str
    type: ParameterType

    @property
    def display_name(self) -> str:
        return self.name or "unnamed"


@dataclass(frozen=True)
class FunctionSignature:
    name: str
    inputs: tuple[Parameter, ...] = ()
    outputs: tuple[Parameter, ...] = ()
    mutability: Mutability = Mutability.NONPAYABLE

    @classmethod
    def from_entry(cls, entry: dict[str, Any]) -> "FunctionSignature":
        if entry.get("type", "function") != "function":
            raise AbiError(f"Not a function entry: {entry.get('type')}")
        return cls(
            name=entry["name"],
            inputs=tuple(
                Parameter(p.get("name", ""), parse_parameter(p)) for p in entry.get("inputs", [])
            ),
            outputs=tuple(
                Parameter(p.get("name", ""), parse_parameter(p)) for p in entry.get("outputs", [])
            ),
            mutability=Mutability.from_entry(entry),
        )

    @property
    def canonical(self) -> str:
        return f"{self.name}({','.join(p.type.canonical for p in self.inputs)})"

    @property
    def selector(self) -> bytes:
        return keccak256(self.canonical.encode("utf-8"))[:4]

    @property
    def input_types(self) -> list[str]:
        return [p.type.canonical for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.type.canonical for p in self.outputs]

    @property
    def is_read(self) -> bool:
        return self.mutability.is_read

    @property
    def is_payable(self) -> bool:
        return self.mutability is Mutability.PAYABLE

    def matches(self, method_type: MethodType) -> bool:
        if method_type is MethodType.ALL:
            return True
        return self.is_read == (method_type is MethodType.READ)

    def __str__(self) -> str:
        outputs = ",".join(p.type.canonical for p in self.outputs)
        text = f"{self.canonical} {self.mutability.value}"
        return f"{text} returns ({outputs})" if self.outputs else text


# ============ Contracts ============


@dataclass(frozen=True)
class Contract:
    name: str
    address: Optional[str]
    functions: tuple[FunctionSignature, ...] = field(default_factory=tuple)

    @classmethod
    def from_abi(cls, name: str, abi: list[dict[str, Any]], address: Optional[str] = None) -> "Contract":
        # Entries without a type are functions
        functions = tuple(
            FunctionSignature.from_entry(entry)
            for entry in abi
            if entry.get("type", "function") == "function"
        )
        return cls(name=name, address=address, functions=functions)

    def with_address(self, address: str) -> "Contract":
        return Contract(name=self.name, address=address, functions=self.functions)

    def methods(self, method_type: MethodType = MethodType.ALL) -> list[FunctionSignature]:
        return [f for f in self.functions if f.matches(method_type)]

    def function(self, name: str) -> FunctionSignature:
        """
        Find a function by name or by full canonical signature.

        Raises:
            AbiError: If the function is missing, or the name is overloaded
                      and no full signature was given
        """
        if "(" in name:
            for func in self.functions:
                if func.canonical == name.replace(" ", ""):
                    return func
            raise AbiError(f"Function {name} not found in {self.name}")

        candidates = [f for f in self.functions if f.name == name]
        if not candidates:
            raise AbiError(f"Function {name} not found in {self.name}")
        if len(candidates) > 1:
            options = ", ".join(f.canonical for f in candidates)
            raise AbiError(f"Function {name} is overloaded; use one of: {options}")
        return candidates[0]
