"""Typer-based CLI for proposing OCR2 payees."""
from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

import typer
from rich.console import Console
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from .builder import ProposePayeesBuilder
from .chain.client import AccountReader, SolanaAccountReader
from .chain.program import Ocr2Program, ProgramBinding
from .chain.sender import SolanaTransactionSender, TransactionSender, load_keypair
from .command import ConfirmFn, ProposePayeesCommand, prompt
from .config import NetworkConfig, load_config, resolve_token_mint
from .errors import ConfigurationError, ProposePayeesError
from .logging_utils import configure_logging
from .rdd import load_rdd
from .resolver import make_input

app = typer.Typer(help="Governance commands for OCR2 aggregators on Solana")
console = Console()
logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Runtime:
    reader: AccountReader
    program: ProgramBinding
    sender: TransactionSender


@contextlib.asynccontextmanager
async def open_runtime(config: NetworkConfig) -> AsyncIterator[Runtime]:
    commitment = Commitment(config.commitment)
    keypair = load_keypair(config.keypair_path)
    client = AsyncClient(config.rpc_url, commitment=commitment)
    try:
        yield Runtime(
            reader=SolanaAccountReader(client, commitment),
            program=Ocr2Program(config.ocr2_program_id),
            sender=SolanaTransactionSender(client, keypair, commitment),
        )
    finally:
        await client.close()


def _read_input(raw: Optional[str]) -> Optional[str]:
    if raw and raw.startswith("@"):
        path = Path(raw[1:]).expanduser()
        if not path.exists():
            raise ConfigurationError(f"Input file '{path}' not found")
        return path.read_text(encoding="utf-8")
    return raw


def _require(value: Optional[str], message: str) -> str:
    if not value:
        raise ConfigurationError(message)
    return value


def _parse_address(value: str, name: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except ValueError as exc:
        raise ConfigurationError(f"Provide a valid {name} address") from exc


async def run_propose_payees(
    config: NetworkConfig,
    *,
    state: Optional[str],
    proposal_id: Optional[str],
    user_input: Optional[str] = None,
    link: Optional[str] = None,
    rdd_path: Optional[str] = None,
    allow_unfunded_payee: bool = False,
    confirm: ConfirmFn = prompt,
) -> Dict[str, Any]:
    state = _require(state, "Provide a valid state address")
    proposal = _parse_address(_require(proposal_id, "Provide a valid proposal address"), "proposal")
    token_mint = resolve_token_mint(link, config)

    rdd = None if user_input else load_rdd(rdd_path or config.rdd_path)
    resolved = make_input(user_input, state, rdd)
    if allow_unfunded_payee:
        resolved.allow_unfunded_payee = True

    async with open_runtime(config) as runtime:
        builder = ProposePayeesBuilder(runtime.reader, runtime.program, proposal, token_mint)
        command = ProposePayeesCommand(builder, runtime.sender, resolved, state, confirm=confirm)
        return await command.execute()


@app.callback()
def main_callback() -> None:
    """Build and submit OCR2 governance transactions."""


@app.command("propose-payees")
def propose_payees(
    state: Optional[str] = typer.Option(None, "--state", help="Aggregator state address"),
    proposal_id: Optional[str] = typer.Option(None, "--proposal-id", "--proposalId", help="Proposal account address"),
    input_: Optional[str] = typer.Option(None, "--input", help="Operators JSON, or @path to a JSON file"),
    link: Optional[str] = typer.Option(None, "--link", help="Reward token mint (defaults to $LINK)"),
    rdd: Optional[str] = typer.Option(None, "--rdd", help="Reference data descriptor used when --input is omitted"),
    allow_unfunded_payee: bool = typer.Option(
        False, "--allow-unfunded-payee", help="Accept payees without an initialized token account"
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Network configuration file"),
    keypair: Optional[str] = typer.Option(None, "--keypair", help="Solana CLI keypair file of the signer"),
    rpc_url: Optional[str] = typer.Option(None, "--rpc-url", help="Overrides the configured RPC endpoint"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    log_level: str = typer.Option("INFO", "--log-level"),
    log_dir: Optional[str] = typer.Option(None, "--log-dir", help="Also write JSON logs to this directory"),
) -> None:
    """Propose a payee for every oracle of an OCR2 proposal."""

    configure_logging(log_level, log_dir)
    try:
        config = load_config(config_path)
        overrides: Dict[str, Any] = {}
        if rpc_url or os.environ.get("RPC_URL"):
            overrides["rpc_url"] = rpc_url or os.environ["RPC_URL"]
        if keypair:
            overrides["keypair_path"] = keypair
        if overrides:
            config = config.model_copy(update=overrides)

        result = asyncio.run(
            run_propose_payees(
                config,
                state=state,
                proposal_id=proposal_id,
                user_input=_read_input(input_),
                link=link,
                rdd_path=rdd,
                allow_unfunded_payee=allow_unfunded_payee,
                confirm=(lambda _message: True) if yes else prompt,
            )
        )
    except ProposePayeesError as exc:
        logger.error("%s", exc, extra={"context": {"error": type(exc).__name__}})
        console.print(f"Error: {exc}", style="red", markup=False)
        raise typer.Exit(code=1) from exc

    console.print_json(data=result)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
