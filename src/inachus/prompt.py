"""
Operator-facing input sources and result display.

``ClickInputSource`` prompts interactively; ``TokenInputSource`` feeds
pre-supplied ``--arg`` tokens in order, for scripted use.
"""

from __future__ import annotations

from typing import Any, Iterable

import click

from .chain.rpc import Receipt
from .engine.outcome import (
    Failed,
    InvocationOutcome,
    ReadResult,
    WriteConfirmed,
    WriteSubmitted,
    WriteTimedOut,
)
from .errors import ConfigError, WriteReverted


class ClickInputSource:
    def request_text(self, prompt: str) -> str:
        # Empty input is meaningful (empty string, empty array)
        return click.prompt(prompt, default="", show_default=False, prompt_suffix=" ")


class TokenInputSource:
    """Answers each request with the next pre-supplied token."""

    def __init__(self, tokens: Iterable[str]) -> None:
        self._tokens = list(tokens)
        self._position = 0

    def request_text(self, prompt: str) -> str:
        if self._position >= len(self._tokens):
            raise ConfigError(f"Not enough --arg values: no value for '{prompt}'")
        token = self._tokens[self._position]
        self._position += 1
        return token

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._position


def confirm_transaction() -> bool:
    click.secho(
        "Warning: This is a write operation that will modify the blockchain state.",
        fg="yellow",
    )
    return click.confirm("Do you want to proceed?", default=False)


def format_value(value: Any) -> str:
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return str(value)


def _display_receipt(receipt: Receipt) -> None:
    click.echo(f"  TX:       {receipt.tx_hash}")
    if receipt.block_number is not None:
        click.echo(f"  Block:    {receipt.block_number}")
    if receipt.gas_used is not None:
        click.echo(f"  Gas used: {receipt.gas_used}")
    if receipt.contract_address:
        click.echo(f"  Created:  {receipt.contract_address}")
    click.echo(f"  Logs:     {receipt.log_count}")


def display_outcome(outcome: InvocationOutcome) -> None:
    """Print an invocation outcome for the operator."""
    click.echo("")
    if isinstance(outcome, ReadResult):
        click.secho("Result:", fg="green")
        if not outcome.values:
            click.echo("  (no return values)")
        for i, (name, type_name, value) in enumerate(outcome.values):
            label = name or f"[{i}]"
            click.echo(f"  {label} ({type_name}): {format_value(value)}")
    elif isinstance(outcome, WriteConfirmed):
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
        _display_receipt(outcome.receipt)
    elif isinstance(outcome, WriteSubmitted):
        click.secho("Transaction sent (not waiting for confirmation).", fg="cyan")
        click.echo(f"  TX: {outcome.tx_hash}")
    elif isinstance(outcome, WriteTimedOut):
        click.secho(
            f"PENDING: No receipt after {outcome.waited:.0f}s; the transaction may still confirm.",
            fg="yellow",
        )
        click.echo(f"  TX: {outcome.tx_hash}")
    elif isinstance(outcome, Failed):
        if isinstance(outcome.error, WriteReverted):
            click.secho("FAILED: Transaction reverted", fg="red")
            click.echo(f"  TX: {outcome.error.tx_hash}")
            if outcome.error.reason:
                click.echo(f"  Reason: {outcome.error.reason}")
        else:
            click.secho(f"ERROR: {outcome.error}", fg="red")
