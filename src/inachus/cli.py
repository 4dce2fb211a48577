"""
Inachus CLI

Command-line interface for calling arbitrary smart-contract functions
on an EVM chain from their ABI.

Commands:
  contracts    - List contracts in the ABI directory
  set-address  - Record a contract's deployed address
  methods      - List a contract's functions
  call         - Call one function (read or write)
  shell        - Interactive contract / method selection loop
  whoami       - Show the signing address
  info         - Show configuration and node status
  config       - Save settings to the env file
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from .abi.loader import discover_abi_files, load_contract
from .abi.types import Contract, FunctionSignature, MethodType
from .chain.rpc import RpcChainClient
from .chain.signer import LocalSigner
from .config import (
    INACHUS_ENV,
    Settings,
    load_settings,
    save_setting,
    validate_chain_id,
    validate_duration,
    validate_private_key,
    validate_rpc_url,
)
from .engine.collect import collect
from .engine.outcome import Failed, InvocationOutcome
from .engine.router import WriteOptions, invoke
from .errors import CollectionError, InachusError
from .logging import configure_logging, get_logger
from .prompt import ClickInputSource, TokenInputSource, confirm_transaction, display_outcome
from .registry import AddressRegistry


# ============ Constants ============

VERSION = "0.1.0"

logger = get_logger(__name__)


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo(
        click.style("        I N A C H U S", fg="bright_white", bold=True)
        + click.style(f"        v{VERSION}", dim=True)
    )
    click.secho("        ─── ABI-driven contract caller ───", fg="cyan")
    click.echo(border)
    click.echo()


# ============ Factories ============


def make_chain(settings: Settings) -> RpcChainClient:
    return RpcChainClient(settings.rpc_url)


def make_signer(settings: Settings) -> Optional[LocalSigner]:
    if not settings.private_key:
        return None
    return LocalSigner(settings.private_key, settings.chain_id)


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _fail(exc: InachusError) -> None:
    click.secho(f"ERROR: {exc}", fg="red")
    sys.exit(exc.exit_code)


def _load_contract(settings: Settings, name: str) -> Contract:
    contract = load_contract(name, settings.abi_dir)
    registry = AddressRegistry.load(settings.contracts_file)
    address = registry.get(name)
    return contract.with_address(address) if address else contract


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="inachus")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Settings file (default: {INACHUS_ENV})",
)
@click.option(
    "--log-level",
    envvar="INACHUS_LOG_LEVEL",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log verbosity (logs go to stderr)",
)
@click.option("--log-json", is_flag=True, envvar="INACHUS_LOG_JSON", help="Write logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[Path], log_level: str, log_json: bool) -> None:
    """Inachus: call any contract function from its ABI."""
    configure_logging(level=log_level, format_json=log_json)
    try:
        settings = load_settings(env_file)
    except InachusError as exc:
        _fail(exc)
    ctx.obj = {"settings": settings, "env_file": env_file or INACHUS_ENV}
    logger.debug("Settings loaded", settings=repr(settings))

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Contracts ============


@cli.command()
@click.pass_context
def contracts(ctx: click.Context) -> None:
    """List contracts in the ABI directory."""
    settings = _settings(ctx)
    try:
        files = discover_abi_files(settings.abi_dir)
        registry = AddressRegistry.load(settings.contracts_file)
    except InachusError as exc:
        _fail(exc)

    if not files:
        click.echo(f"No ABI files in {settings.abi_dir}")
        return

    for name in files:
        address = registry.get(name)
        shown = address or click.style("(no address)", dim=True)
        click.echo(f"  {name:<24} {shown}")


@cli.command("set-address")
@click.argument("name")
@click.argument("address")
@click.pass_context
def set_address(ctx: click.Context, name: str, address: str) -> None:
    """Record the deployed ADDRESS of contract NAME."""
    settings = _settings(ctx)
    try:
        registry = AddressRegistry.load(settings.contracts_file)
        checksummed = registry.set(name, address)
        registry.save()
    except InachusError as exc:
        _fail(exc)
    click.echo(f"{name} -> {checksummed}")


@cli.command()
@click.argument("name")
@click.option(
    "--type",
    "method_type",
    type=click.Choice(["read", "write", "all"], case_sensitive=False),
    default="all",
    help="Filter by mutability",
)
@click.pass_context
def methods(ctx: click.Context, name: str, method_type: str) -> None:
    """List the functions of contract NAME."""
    settings = _settings(ctx)
    try:
        contract = load_contract(name, settings.abi_dir)
    except InachusError as exc:
        _fail(exc)

    found = contract.methods(MethodType(method_type.lower()))
    if not found:
        click.echo("No matching functions.")
        return
    for func in found:
        tag = click.style("read ", fg="green") if func.is_read else click.style("write", fg="yellow")
        click.echo(f"  {tag}  {func}")


# ============ Call ============


def run_invocation(
    settings: Settings,
    contract: Contract,
    signature: FunctionSignature,
    tokens: Optional[list[str]] = None,
    options: Optional[WriteOptions] = None,
    assume_yes: bool = False,
) -> Optional[InvocationOutcome]:
    """
    Collect arguments, confirm writes, invoke, and display the outcome.

    With ``tokens`` the arguments come from them in order and a bad value
    is fatal; interactively the operator is asked to re-enter.

    Returns:
        The outcome, or None if the operator cancelled
    """
    while True:
        source = TokenInputSource(tokens) if tokens is not None else ClickInputSource()
        try:
            args = collect(signature, source)
        except CollectionError as exc:
            click.secho(f"Invalid input: {exc}", fg="red")
            if tokens is not None or not click.confirm("Re-enter parameters?", default=True):
                raise
            continue
        if isinstance(source, TokenInputSource) and source.remaining:
            click.secho(f"Warning: {source.remaining} unused --arg value(s)", fg="yellow")
        break

    if not signature.is_read and not assume_yes and not confirm_transaction():
        click.echo("Transaction cancelled.")
        return None

    options = options or WriteOptions()
    options = WriteOptions(
        value=options.value,
        gas_limit=options.gas_limit,
        wait=options.wait,
        poll_interval=settings.poll_interval,
        max_wait=settings.wait_time,
    )
    chain = make_chain(settings)
    try:
        outcome = invoke(contract, signature, args, chain, make_signer(settings), options)
    finally:
        chain.close()
    display_outcome(outcome)
    return outcome


@cli.command()
@click.argument("name")
@click.argument("function")
@click.option("--arg", "args", multiple=True, help="Argument value, in parameter order (repeatable)")
@click.option("--value", default=0, type=int, help="ETH value in wei (payable functions)")
@click.option("--gas-limit", default=None, type=int, help="Gas limit (default: estimate)")
@click.option("--no-wait", is_flag=True, help="Do not wait for the receipt")
@click.option("--yes", "-y", is_flag=True, help="Skip the write confirmation prompt")
@click.pass_context
def call(
    ctx: click.Context,
    name: str,
    function: str,
    args: tuple[str, ...],
    value: int,
    gas_limit: Optional[int],
    no_wait: bool,
    yes: bool,
) -> None:
    """
    Call FUNCTION on contract NAME.

    Arguments are prompted for unless given with --arg.  A tuple parameter
    takes one --arg per component.
    """
    settings = _settings(ctx)
    try:
        contract = _load_contract(settings, name)
        signature = contract.function(function)
        tokens = list(args) if args or not signature.inputs else None
        outcome = run_invocation(
            settings,
            contract,
            signature,
            tokens=tokens,
            options=WriteOptions(value=value, gas_limit=gas_limit, wait=not no_wait),
            assume_yes=yes,
        )
    except CollectionError as exc:
        sys.exit(exc.exit_code)
    except InachusError as exc:
        _fail(exc)

    if isinstance(outcome, Failed):
        sys.exit(outcome.exit_code)


# ============ Shell ============

_STEPS = ["Change contract", "Change contract address", "Select method", "Exit"]


def _choose(title: str, options: list[str]) -> int:
    click.echo(title)
    for i, option in enumerate(options, 1):
        click.echo(f"  {i}) {option}")
    return click.prompt("Choice", type=click.IntRange(1, len(options))) - 1


@cli.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive loop: pick a contract, then call its methods."""
    settings = _settings(ctx)
    _print_banner()
    try:
        names = list(discover_abi_files(settings.abi_dir))
    except InachusError as exc:
        _fail(exc)
    if not names:
        click.echo(f"No ABI files in {settings.abi_dir}")
        return

    contract: Optional[Contract] = None
    while True:
        if contract is not None:
            click.secho(f"Current: {contract.name} @ {contract.address or '(no address)'}", dim=True)
        step = _STEPS[_choose("Select an action:", _STEPS)]
        try:
            if step == "Change contract":
                contract = _load_contract(settings, names[_choose("Select a contract:", names)])
            elif step == "Change contract address":
                if contract is None:
                    click.secho("Select a contract first.", fg="yellow")
                    continue
                registry = AddressRegistry.load(settings.contracts_file)
                address = registry.set(contract.name, click.prompt("Enter contract address"))
                registry.save()
                contract = contract.with_address(address)
            elif step == "Select method":
                if contract is None:
                    click.secho("Select a contract first.", fg="yellow")
                    continue
                method_types = list(MethodType)
                method_type = method_types[_choose("Select method type:", [str(m) for m in method_types])]
                found = contract.methods(method_type)
                if not found:
                    click.echo("No matching functions.")
                    continue
                signature = found[_choose("Select a method:", [f.canonical for f in found])]
                run_invocation(settings, contract, signature)
            else:
                break
        except InachusError as exc:
            click.secho(f"ERROR: {exc}", fg="red")


# ============ Config ============


@cli.command("config")
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint")
@click.option("--private-key", default=None, help="Signing key (32 bytes hex)")
@click.option("--chain-id", default=None, help="Chain ID used for signing")
@click.option("--wait-time", default=None, help="Confirmation budget, e.g. 30s or 1m30s")
@click.option("--abi-dir", default=None, help="Directory of ABI files")
@click.pass_context
def configure(
    ctx: click.Context,
    rpc_url: Optional[str],
    private_key: Optional[str],
    chain_id: Optional[str],
    wait_time: Optional[str],
    abi_dir: Optional[str],
) -> None:
    """
    Save settings to the env file.

    With no options every setting is prompted for, defaulting to its
    current value.  An empty private key keeps the stored one.
    """
    settings = _settings(ctx)
    env_path: Path = ctx.obj["env_file"]

    if all(v is None for v in (rpc_url, private_key, chain_id, wait_time, abi_dir)):
        rpc_url = click.prompt("Enter the Ethereum RPC URL", default=settings.rpc_url)
        private_key = click.prompt(
            "Enter your private key (empty to keep)",
            default="",
            show_default=False,
            hide_input=True,
        )
        chain_id = click.prompt("Enter the chain ID", default=str(settings.chain_id))
        wait_time = click.prompt("Enter the confirmation wait time", default=f"{settings.wait_time:g}s")
        abi_dir = click.prompt("Enter the path to the ABI directory", default=str(settings.abi_dir))

    updates: dict[str, str] = {}
    try:
        if rpc_url is not None:
            updates["INACHUS_RPC_URL"] = validate_rpc_url(rpc_url.strip())
        if private_key:
            updates["PRIVATE_KEY"] = validate_private_key(private_key.strip())
        if chain_id is not None:
            updates["CHAIN_ID"] = str(validate_chain_id(chain_id.strip()))
        if wait_time is not None:
            validate_duration("wait time", wait_time)
            updates["WAIT_TIME"] = wait_time.strip()
        if abi_dir is not None:
            updates["ABI_DIR"] = abi_dir.strip()
    except InachusError as exc:
        _fail(exc)

    for key, value in updates.items():
        save_setting(key, value, env_path)
        shown = "<hidden>" if key == "PRIVATE_KEY" else value
        click.echo(f"  {key}={shown}")
    click.secho(f"Settings saved to {env_path}", fg="green")


# ============ Identity / Info ============


@cli.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the signing address."""
    signer = make_signer(_settings(ctx))
    if signer is None:
        click.echo("No private key configured.")
        click.echo(f"Set PRIVATE_KEY in {INACHUS_ENV} or the environment.")
        sys.exit(1)
    click.echo(f"Address: {signer.address}")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show configuration and node status."""
    settings = _settings(ctx)
    _print_banner()

    def row(label: str, value: str) -> None:
        click.echo(click.style(f"  {label:<13}", dim=True) + value)

    signer = make_signer(settings)
    row("Address:", signer.address if signer else click.style("not configured", fg="yellow"))
    row("RPC URL:", settings.rpc_url)
    row("Chain ID:", str(settings.chain_id))
    row("Wait time:", f"{settings.wait_time:g}s (poll every {settings.poll_interval:g}s)")
    row("ABI dir:", str(settings.abi_dir))

    chain = make_chain(settings)
    try:
        node_chain_id = chain.chain_id()
    except InachusError as exc:
        row("Node:", click.style(f"unreachable ({exc})", fg="yellow"))
    else:
        if node_chain_id == settings.chain_id:
            row("Node:", click.style(f"connected (chain {node_chain_id})", fg="green"))
        else:
            row(
                "Node:",
                click.style(
                    f"chain {node_chain_id} does not match CHAIN_ID {settings.chain_id}",
                    fg="red",
                ),
            )
    finally:
        chain.close()
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """Inachus CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
