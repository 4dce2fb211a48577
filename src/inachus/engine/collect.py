"""
Parameter Collector - gathers one argument per function input.

Scalars and arrays are requested as a single token; tuples are
requested one component at a time, recursively, so each field gets its
own prompt.  The first coercion failure aborts collection.
"""

from __future__ import annotations

from ..abi.types import FunctionSignature, ParameterType, TupleType
from ..abi.values import ArgumentValue, TupleValue
from ..chain.protocols import InputSource
from ..errors import CoercionError, CollectionError
from ..logging import get_logger
from .coerce import coerce

logger = get_logger(__name__)


def _prompt_for(label: str, type_: ParameterType) -> str:
    return f"Enter {label} ({type_.canonical}):"


def _collect_value(label: str, type_: ParameterType, source: InputSource) -> ArgumentValue:
    if isinstance(type_, TupleType):
        fields = []
        for i, component in enumerate(type_.components):
            name = component.name or f"_{i}"
            fields.append(
                (component.name, _collect_value(f"{label}.{name}", component.type, source))
            )
        return TupleValue(tuple(fields), type_)
    return coerce(source.request_text(_prompt_for(label, type_)), type_)


def collect(signature: FunctionSignature, source: InputSource) -> tuple[ArgumentValue, ...]:
    """
    Collect and coerce every input of a function, in declared order.

    Args:
        signature: Function whose inputs are collected
        source: Capability supplying one text token per request

    Returns:
        Ordered argument vector matching ``signature.inputs``

    Raises:
        CollectionError: Wrapping the first coercion failure, with the
                         parameter's index and name
    """
    args: list[ArgumentValue] = []
    for index, param in enumerate(signature.inputs):
        try:
            args.append(_collect_value(param.display_name, param.type, source))
        except CoercionError as exc:
            logger.info(
                "Parameter rejected",
                function=signature.canonical,
                index=index,
                parameter=param.display_name,
                error=str(exc),
            )
            raise CollectionError(index, param.display_name, param.type.canonical, exc) from exc
    return tuple(args)
