"""SPL token account lookups used to check payee eligibility."""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from solders.pubkey import Pubkey

from .client import AccountReader

logger = logging.getLogger(__name__)

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_ACCOUNT_SIZE = 165

# mint, owner, amount; the remaining fields are not needed here.
_ACCOUNT_HEAD = struct.Struct("<32s32sQ")
_STATE_OFFSET = 108
_STATE_UNINITIALIZED = 0


class TokenAccountError(LookupError):
    """Raised when an address is not a usable token account for the mint."""


@dataclass(slots=True, frozen=True)
class TokenAccountInfo:
    address: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: int


class TokenAccountChecker:
    """Validate that addresses are initialized token accounts of one mint."""

    def __init__(self, reader: AccountReader, mint: Pubkey) -> None:
        self._reader = reader
        self.mint = mint

    async def get_account_info(self, address: str) -> TokenAccountInfo:
        pubkey = Pubkey.from_string(address)
        account = await self._reader.get_account(pubkey)
        if account is None:
            raise TokenAccountError("Failed to find account")
        if account.owner != TOKEN_PROGRAM_ID:
            raise TokenAccountError("Invalid account owner")
        if len(account.data) != TOKEN_ACCOUNT_SIZE:
            raise TokenAccountError("Invalid account size")
        mint, owner, amount = _ACCOUNT_HEAD.unpack_from(account.data)
        if Pubkey(mint) != self.mint:
            raise TokenAccountError("Invalid account mint")
        if account.data[_STATE_OFFSET] == _STATE_UNINITIALIZED:
            raise TokenAccountError("Account is not initialized")
        return TokenAccountInfo(address=pubkey, mint=Pubkey(mint), owner=Pubkey(owner), amount=amount)

    async def is_valid_recipient(self, address: str) -> bool:
        """Lookup failures of any kind count as an ineligible payee."""

        try:
            await self.get_account_info(address)
        except Exception as exc:
            logger.error(
                "Payee with address %s does not have a valid Token recipient address",
                address,
                extra={"context": {"payee": address, "reason": str(exc)}},
            )
            return False
        return True


__all__ = ["TOKEN_ACCOUNT_SIZE", "TOKEN_PROGRAM_ID", "TokenAccountChecker", "TokenAccountError", "TokenAccountInfo"]
