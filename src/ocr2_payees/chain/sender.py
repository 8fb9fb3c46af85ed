"""Signing and broadcasting of raw transactions."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from ..errors import ConfigurationError, SubmissionError
from ..models import RawTransaction

logger = logging.getLogger(__name__)


class TransactionSender(Protocol):
    @property
    def public_key(self) -> Pubkey:
        ...

    async def sign_and_send(self, raw_txs: Sequence[RawTransaction]) -> str:
        ...


def load_keypair(path: str) -> Keypair:
    """Load a Solana CLI keypair file (JSON array of 64 secret key bytes)."""

    keypair_path = Path(path).expanduser()
    if not keypair_path.exists():
        raise ConfigurationError(f"Keypair file '{keypair_path}' not found")
    with keypair_path.open("r", encoding="utf-8") as handle:
        try:
            secret = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Keypair file '{keypair_path}' is not valid JSON") from exc
    if not isinstance(secret, list) or len(secret) != 64:
        raise ConfigurationError(f"Keypair file '{keypair_path}' is not a valid Solana keypair")
    try:
        return Keypair.from_bytes(bytes(secret))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Keypair file '{keypair_path}' is not a valid Solana keypair") from exc


class SolanaTransactionSender:
    """Sign raw instructions with a local keypair and submit them as one transaction."""

    def __init__(
        self,
        client: AsyncClient,
        keypair: Keypair,
        commitment: Optional[Commitment] = None,
    ) -> None:
        self._client = client
        self._keypair = keypair
        self._commitment = commitment

    @property
    def public_key(self) -> Pubkey:
        return self._keypair.pubkey()

    async def sign_and_send(self, raw_txs: Sequence[RawTransaction]) -> str:
        instructions = [raw_tx.to_instruction() for raw_tx in raw_txs]
        try:
            blockhash = (await self._client.get_latest_blockhash(self._commitment)).value.blockhash
            message = Message.new_with_blockhash(instructions, self.public_key, blockhash)
            transaction = Transaction([self._keypair], message, blockhash)
            response = await self._client.send_raw_transaction(
                bytes(transaction),
                opts=TxOpts(preflight_commitment=self._commitment) if self._commitment else None,
            )
            signature = response.value
            await self._client.confirm_transaction(signature, self._commitment)
        except (RPCException, SolanaRpcException) as exc:
            logger.error("Transaction submission failed", extra={"context": {"error": str(exc)}})
            raise SubmissionError(f"Failed to submit transaction: {exc}") from exc
        logger.info("Transaction confirmed", extra={"tx_hash": str(signature)})
        return str(signature)


__all__ = ["SolanaTransactionSender", "TransactionSender", "load_keypair"]
