from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from conftest import TX_HASH, ok_receipt
from inachus.engine.outcome import Failed, ReadResult, WriteConfirmed, WriteTimedOut
from inachus.errors import CallError, ConfigError, WriteReverted
from inachus.prompt import TokenInputSource, display_outcome, format_value


def _render(outcome) -> str:
    @click.command()
    def show() -> None:
        display_outcome(outcome)

    return CliRunner().invoke(show).output


class TestTokenInputSource:
    def test_answers_in_order(self) -> None:
        source = TokenInputSource(["a", "b", "c"])
        assert source.request_text("first") == "a"
        assert source.request_text("second") == "b"
        assert source.remaining == 1

    def test_runs_out(self) -> None:
        source = TokenInputSource([])
        with pytest.raises(ConfigError, match="Enter to"):
            source.request_text("Enter to (address):")


class TestDisplay:
    def test_format_nested_values(self) -> None:
        assert format_value((1, [b"\x01", "x"])) == "[1, [0x01, x]]"

    def test_read_result(self) -> None:
        output = _render(ReadResult("getReserves()", (("reserve0", "uint112", 5), ("", "uint32", 9))))
        assert "reserve0 (uint112): 5" in output
        assert "[1] (uint32): 9" in output

    def test_confirmed(self) -> None:
        output = _render(WriteConfirmed(TX_HASH, ok_receipt()))
        assert "SUCCESS" in output
        assert "Gas used: 51234" in output

    def test_timed_out(self) -> None:
        output = _render(WriteTimedOut(TX_HASH, waited=30.0))
        assert "PENDING: No receipt after 30s" in output
        assert TX_HASH in output

    def test_reverted_with_reason(self) -> None:
        output = _render(Failed(WriteReverted(TX_HASH, "paused")))
        assert "FAILED: Transaction reverted" in output
        assert "Reason: paused" in output

    def test_other_failure(self) -> None:
        assert "ERROR: boom" in _render(Failed(CallError("boom")))
