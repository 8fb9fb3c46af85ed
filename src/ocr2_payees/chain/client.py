"""Account reads against a Solana RPC node."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException
from solders.pubkey import Pubkey

from ..errors import ChainReadError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AccountData:
    owner: Pubkey
    data: bytes
    lamports: int = 0


class AccountReader(Protocol):
    async def get_account(self, address: Pubkey) -> Optional[AccountData]:
        """Return the account stored at ``address`` or ``None`` when it does not exist."""


class SolanaAccountReader:
    """A thin wrapper around :class:`AsyncClient` returning raw account data."""

    def __init__(self, client: AsyncClient, commitment: Optional[Commitment] = None) -> None:
        self._client = client
        self._commitment = commitment

    async def get_account(self, address: Pubkey) -> Optional[AccountData]:
        try:
            response = await self._client.get_account_info(address, commitment=self._commitment)
        except (RPCException, SolanaRpcException) as exc:
            raise ChainReadError(f"Failed to read account {address}: {exc}") from exc
        account = response.value
        if account is None:
            LOGGER.debug("Account %s not found", address)
            return None
        return AccountData(owner=account.owner, data=bytes(account.data), lamports=account.lamports)


class InMemoryAccountReader:
    """A deterministic, in-memory account store used for tests and dry runs."""

    def __init__(self, accounts: Optional[Dict[Pubkey, AccountData]] = None) -> None:
        self.accounts: Dict[Pubkey, AccountData] = dict(accounts or {})
        self.reads: list[Pubkey] = []

    def set_account(self, address: Pubkey, account: AccountData) -> None:
        self.accounts[address] = account

    async def get_account(self, address: Pubkey) -> Optional[AccountData]:
        self.reads.append(address)
        return self.accounts.get(address)


__all__ = ["AccountData", "AccountReader", "InMemoryAccountReader", "SolanaAccountReader"]
