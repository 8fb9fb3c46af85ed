"""Instruction encoding for the OCR2 aggregator program."""
from __future__ import annotations

import hashlib
import struct
from typing import Protocol, Sequence

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from ..models import RawTransaction

OCR2_PROGRAM_ID = "cjg3oHmg9uuPsP8D6g29NWvhySJkdYdAo9D25PRbKXJ"


def instruction_discriminator(name: str) -> bytes:
    """Anchor selector: first 8 bytes of ``sha256("global:<name>")``."""

    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


PROPOSE_PAYEES_DISCRIMINATOR = instruction_discriminator("propose_payees")


class ProgramBinding(Protocol):
    def propose_payees(
        self,
        token_mint: Pubkey,
        payees: Sequence[Pubkey],
        proposal: Pubkey,
        authority: Pubkey,
    ) -> RawTransaction:
        ...


class Ocr2Program:
    def __init__(self, program_id: Pubkey | str = OCR2_PROGRAM_ID) -> None:
        if isinstance(program_id, str):
            program_id = Pubkey.from_string(program_id)
        self.program_id = program_id

    def propose_payees(
        self,
        token_mint: Pubkey,
        payees: Sequence[Pubkey],
        proposal: Pubkey,
        authority: Pubkey,
    ) -> RawTransaction:
        # Borsh args: token_mint Pubkey, payees Vec<Pubkey> (u32 length prefix).
        data = b"".join(
            [
                PROPOSE_PAYEES_DISCRIMINATOR,
                bytes(token_mint),
                struct.pack("<I", len(payees)),
                *(bytes(payee) for payee in payees),
            ]
        )
        accounts = [
            AccountMeta(pubkey=proposal, is_signer=False, is_writable=True),
            AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        ]
        return RawTransaction.from_instruction(Instruction(self.program_id, data, accounts))


__all__ = [
    "OCR2_PROGRAM_ID",
    "Ocr2Program",
    "PROPOSE_PAYEES_DISCRIMINATOR",
    "ProgramBinding",
    "instruction_discriminator",
]
