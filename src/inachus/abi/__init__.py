"""
ABI - contract, function and parameter type model plus ABI file loading.
"""

from .types import (
    AddressType,
    ArrayType,
    BoolType,
    BytesType,
    Contract,
    FunctionSignature,
    IntegerType,
    MethodType,
    Mutability,
    Parameter,
    ParameterType,
    StringType,
    TupleComponent,
    TupleType,
    parse_parameter,
    parse_type,
)

__all__ = [
    "AddressType",
    "ArrayType",
    "BoolType",
    "BytesType",
    "Contract",
    "FunctionSignature",
    "IntegerType",
    "MethodType",
    "Mutability",
    "Parameter",
    "ParameterType",
    "StringType",
    "TupleComponent",
    "TupleType",
    "parse_parameter",
    "parse_type",
]
