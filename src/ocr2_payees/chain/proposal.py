"""Decoding of the OCR2 ``Proposal`` account.

Zero-copy layout after the 8-byte Anchor discriminator::

    version u8 | owner [32] | state u8 | f u8 | pad u8 | pad u32 | token_mint [32]
    oracles.xs [ProposedOracle; MAX_ORACLES] | oracles.len u64 | ...

    ProposedOracle = transmitter [32] | signer [20] | pad u32 | payee [32]

Trailing fields (offchain config) are not needed and are not decoded.
"""
from __future__ import annotations

import hashlib
import logging
import struct

from solders.pubkey import Pubkey

from ..errors import ProposalDecodeError
from ..models import ProposalState, ProposedOracle
from .client import AccountReader

logger = logging.getLogger(__name__)

MAX_ORACLES = 19
PROPOSAL_DISCRIMINATOR = hashlib.sha256(b"account:Proposal").digest()[:8]

HEADER = struct.Struct("<8sB32sBBBI32s")
PROPOSED_ORACLE = struct.Struct("<32s20sI32s")
ORACLES_LEN = struct.Struct("<Q")


def proposal_size(max_oracles: int = MAX_ORACLES) -> int:
    """Minimum number of bytes needed to decode the oracle list."""

    return HEADER.size + PROPOSED_ORACLE.size * max_oracles + ORACLES_LEN.size


def decode_proposal(data: bytes, max_oracles: int = MAX_ORACLES) -> ProposalState:
    if len(data) < proposal_size(max_oracles):
        raise ProposalDecodeError(
            f"Proposal account too small: {len(data)} bytes, expected at least {proposal_size(max_oracles)}"
        )
    discriminator, version, owner, state, f, _, _, token_mint = HEADER.unpack_from(data, 0)
    if discriminator != PROPOSAL_DISCRIMINATOR:
        raise ProposalDecodeError("Account is not an OCR2 proposal")

    offset = HEADER.size
    oracles = []
    for _ in range(max_oracles):
        transmitter, signer, _, payee = PROPOSED_ORACLE.unpack_from(data, offset)
        oracles.append(ProposedOracle(transmitter=Pubkey(transmitter), signer=signer, payee=Pubkey(payee)))
        offset += PROPOSED_ORACLE.size
    (length,) = ORACLES_LEN.unpack_from(data, offset)
    if length > max_oracles:
        raise ProposalDecodeError(f"Proposal declares {length} oracles but holds at most {max_oracles}")

    return ProposalState(
        oracles=tuple(oracles),
        length=length,
        version=version,
        owner=Pubkey(owner),
        state=state,
        f=f,
        token_mint=Pubkey(token_mint),
    )


async def fetch_proposal(reader: AccountReader, address: Pubkey) -> ProposalState:
    account = await reader.get_account(address)
    if account is None:
        raise ProposalDecodeError(f"Proposal account {address} not found")
    proposal = decode_proposal(account.data)
    logger.debug(
        "Fetched proposal",
        extra={"context": {"proposal": str(address), "oracles": proposal.length}},
    )
    return proposal


__all__ = ["MAX_ORACLES", "PROPOSAL_DISCRIMINATOR", "decode_proposal", "fetch_proposal", "proposal_size"]
