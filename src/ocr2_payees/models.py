"""Value types shared by the resolver, the builder and the command driver."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey


@dataclass(slots=True, frozen=True)
class OperatorAssignment:
    """The reward recipient an oracle operator wants for its transmitter."""

    transmitter: str
    payee: str

    def as_dict(self) -> Dict[str, str]:
        return {"transmitter": self.transmitter, "payee": self.payee}


@dataclass(slots=True)
class ResolvedInput:
    operators: List[OperatorAssignment]
    # Accepts payees without an initialized token account; they get funded later.
    allow_unfunded_payee: bool = False

    @property
    def payees(self) -> List[str]:
        return [operator.payee for operator in self.operators]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "operators": [operator.as_dict() for operator in self.operators],
            "allow_unfunded_payee": self.allow_unfunded_payee,
        }


@dataclass(slots=True, frozen=True)
class ProposedOracle:
    transmitter: Pubkey
    signer: bytes = b""
    payee: Pubkey = field(default_factory=Pubkey.default)


@dataclass(slots=True, frozen=True)
class ProposalState:
    """Decoded proposal account.

    ``oracles`` is the full fixed-capacity slot array as stored on chain; only
    the first ``length`` entries are meaningful.
    """

    oracles: Tuple[ProposedOracle, ...]
    length: int
    version: int = 0
    owner: Optional[Pubkey] = None
    state: int = 0
    f: int = 0
    token_mint: Optional[Pubkey] = None

    @property
    def active_oracles(self) -> Tuple[ProposedOracle, ...]:
        return self.oracles[: self.length]

    @property
    def transmitters(self) -> List[Pubkey]:
        return [oracle.transmitter for oracle in self.active_oracles]


@dataclass(slots=True, frozen=True)
class RawTransaction:
    """Instruction envelope handed to the signer."""

    program_id: Pubkey
    accounts: Tuple[AccountMeta, ...]
    data: bytes

    @classmethod
    def from_instruction(cls, instruction: Instruction) -> "RawTransaction":
        return cls(
            program_id=instruction.program_id,
            accounts=tuple(instruction.accounts),
            data=bytes(instruction.data),
        )

    def to_instruction(self) -> Instruction:
        return Instruction(self.program_id, self.data, list(self.accounts))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "program_id": str(self.program_id),
            "accounts": [
                {
                    "pubkey": str(meta.pubkey),
                    "is_signer": meta.is_signer,
                    "is_writable": meta.is_writable,
                }
                for meta in self.accounts
            ],
            "data": self.data.hex(),
        }


@dataclass(slots=True, frozen=True)
class TransactionResponse:
    hash: str
    address: str

    def as_dict(self) -> Dict[str, str]:
        return {"hash": self.hash, "address": self.address}


__all__ = [
    "OperatorAssignment",
    "ProposalState",
    "ProposedOracle",
    "RawTransaction",
    "ResolvedInput",
    "TransactionResponse",
]
