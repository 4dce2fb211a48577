"""Unit tests for the type coercer."""

from __future__ import annotations

import pytest

from inachus.abi.types import (
    AddressType,
    ArrayType,
    BoolType,
    BytesType,
    IntegerType,
    StringType,
    TupleComponent,
    TupleType,
    parse_type,
)
from inachus.abi.values import AddressValue, ArrayValue, IntegerValue, StringValue, TupleValue
from inachus.engine.coerce import coerce, split_list
from inachus.errors import (
    ArrayLengthMismatch,
    CoercionError,
    IntegerOutOfRange,
    InvalidAddress,
    InvalidBool,
    InvalidBytesLength,
    InvalidHex,
    InvalidInteger,
)

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestAddress:
    def test_lowercase_is_checksummed(self) -> None:
        value = coerce(CHECKSUMMED.lower(), AddressType())
        assert value == AddressValue(CHECKSUMMED)

    def test_correct_checksum_accepted(self) -> None:
        assert coerce(CHECKSUMMED, AddressType()).address == CHECKSUMMED

    def test_prefix_optional(self) -> None:
        assert coerce(CHECKSUMMED[2:].lower(), AddressType()).address == CHECKSUMMED

    def test_wrong_checksum_rejected(self) -> None:
        bad = "0x5aaeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        with pytest.raises(InvalidAddress, match="checksum"):
            coerce(bad, AddressType())

    def test_41_hex_digits_rejected(self) -> None:
        with pytest.raises(InvalidAddress):
            coerce("0x" + "a" * 41, AddressType())

    def test_non_hex_rejected(self) -> None:
        with pytest.raises(InvalidAddress):
            coerce("0x" + "g" * 40, AddressType())


class TestInteger:
    @pytest.mark.parametrize(
        "bits,signed,low,high",
        [
            (8, False, 0, 255),
            (8, True, -128, 127),
            (256, False, 0, 2**256 - 1),
            (256, True, -(2**255), 2**255 - 1),
        ],
    )
    def test_boundaries(self, bits: int, signed: bool, low: int, high: int) -> None:
        type_ = IntegerType(bits, signed)
        assert coerce(str(low), type_).value == low
        assert coerce(str(high), type_).value == high
        with pytest.raises(IntegerOutOfRange):
            coerce(str(low - 1), type_)
        with pytest.raises(IntegerOutOfRange):
            coerce(str(high + 1), type_)

    def test_hex_input(self) -> None:
        assert coerce("0xff", IntegerType(16)).value == 255

    def test_whitespace_trimmed(self) -> None:
        assert coerce("  42 ", IntegerType()).value == 42

    @pytest.mark.parametrize("text", ["", "1.5", "1e18", "abc", "1_000", "0x"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidInteger):
            coerce(text, IntegerType())


class TestBool:
    @pytest.mark.parametrize("text,expected", [("true", True), ("FALSE", False), ("1", True), ("0", False)])
    def test_accepted(self, text: str, expected: bool) -> None:
        assert coerce(text, BoolType()).value is expected

    @pytest.mark.parametrize("text", ["yes", "2", ""])
    def test_rejected(self, text: str) -> None:
        with pytest.raises(InvalidBool):
            coerce(text, BoolType())


class TestBytes:
    def test_fixed_exact_length(self) -> None:
        assert coerce("0x" + "00" * 31 + "01", BytesType(32)).data == bytes(31) + b"\x01"

    def test_fixed_wrong_length(self) -> None:
        with pytest.raises(InvalidBytesLength):
            coerce("0x1234", BytesType(4))

    def test_dynamic_any_length(self) -> None:
        assert coerce("0xdeadbeef", BytesType()).data == bytes.fromhex("deadbeef")
        assert coerce("0x", BytesType()).data == b""

    @pytest.mark.parametrize("text", ["0xabc", "0xzz", "12 34"])
    def test_invalid_hex(self, text: str) -> None:
        with pytest.raises(InvalidHex):
            coerce(text, BytesType())


class TestString:
    def test_passed_through_unchanged(self) -> None:
        assert coerce("  hello, world ", StringType()) == StringValue("  hello, world ")


class TestArray:
    def test_dynamic_uint_array(self) -> None:
        value = coerce("1,2,3", ArrayType(IntegerType(256, False)))
        assert isinstance(value, ArrayValue)
        assert [item.value for item in value.items] == [1, 2, 3]

    def test_fixed_length_mismatch(self) -> None:
        with pytest.raises(ArrayLengthMismatch) as exc_info:
            coerce("1,2", ArrayType(IntegerType(256, False), length=3))
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2

    def test_fixed_length_never_pads_or_truncates(self) -> None:
        with pytest.raises(ArrayLengthMismatch):
            coerce("1,2,3,4", ArrayType(IntegerType(), length=3))

    def test_brackets_and_whitespace(self) -> None:
        value = coerce(" [ 1 ,  2 ] ", ArrayType(IntegerType(8)))
        assert [item.value for item in value.items] == [1, 2]

    @pytest.mark.parametrize("text", ["", "[]", "  "])
    def test_empty_dynamic(self, text: str) -> None:
        assert coerce(text, ArrayType(IntegerType())).items == ()

    def test_nested_arrays(self) -> None:
        value = coerce("[1,2],[3]", parse_type("uint8[][]"))
        assert [[i.value for i in inner.items] for inner in value.items] == [[1, 2], [3]]

    def test_single_bracketed_inner_array(self) -> None:
        value = coerce("[1,2]", parse_type("uint8[][]"))
        assert [[i.value for i in inner.items] for inner in value.items] == [[1, 2]]

    def test_fully_bracketed_nested_arrays(self) -> None:
        value = coerce("[[1,2],[3]]", parse_type("uint8[][]"))
        assert [[i.value for i in inner.items] for inner in value.items] == [[1, 2], [3]]

    def test_nested_elements_must_be_bracketed(self) -> None:
        with pytest.raises(CoercionError, match="must be bracketed"):
            coerce("1,2", parse_type("uint8[][]"))

    def test_nested_fixed_length_counts_inner_arrays(self) -> None:
        with pytest.raises(ArrayLengthMismatch):
            coerce("[1,2]", parse_type("uint8[][2]"))

    def test_element_error_propagates(self) -> None:
        with pytest.raises(IntegerOutOfRange):
            coerce("1,256", ArrayType(IntegerType(8)))

    def test_quoted_strings_keep_commas(self) -> None:
        value = coerce('"a,b", c', ArrayType(StringType()))
        assert [item.value for item in value.items] == ["a,b", "c"]

    def test_tuples_inside_array(self) -> None:
        type_ = ArrayType(
            TupleType((TupleComponent("who", AddressType()), TupleComponent("amount", IntegerType())))
        )
        value = coerce(f"({CHECKSUMMED.lower()}, 5), ({CHECKSUMMED}, 6)", type_)
        assert len(value.items) == 2
        first = value.items[0]
        assert isinstance(first, TupleValue)
        assert first.fields == (("who", AddressValue(CHECKSUMMED)), ("amount", IntegerValue(5, IntegerType())))

    def test_unbalanced_brackets(self) -> None:
        with pytest.raises(CoercionError):
            coerce("[1,2],[3", parse_type("uint8[][]"))


class TestSplitList:
    def test_top_level_only(self) -> None:
        assert split_list("[1,2],(3,4),5") == ["[1,2]", "(3,4)", "5"]

    def test_outer_brackets_removed_once(self) -> None:
        assert split_list("[[1],[2]]") == ["[1]", "[2]"]

    def test_nested_keeps_single_inner_list(self) -> None:
        assert split_list("[1,2]", nested=True) == ["[1,2]"]
        assert split_list("[[1,2],[3]]", nested=True) == ["[1,2]", "[3]"]
