"""Build the ``propose_payees`` instruction for an OCR2 proposal."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Sequence

from solders.pubkey import Pubkey

from .chain.client import AccountReader
from .chain.program import ProgramBinding
from .chain.proposal import fetch_proposal
from .chain.token import TokenAccountChecker
from .errors import UnmappedTransmitterError, ValidationError
from .models import OperatorAssignment, ProposalState, RawTransaction, ResolvedInput

logger = logging.getLogger(__name__)


def _pubkey(value: str, role: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {role} address: {value}", payees=[value] if role == "payee" else ()) from exc


def payee_by_transmitter(operators: Sequence[OperatorAssignment]) -> Dict[Pubkey, Pubkey]:
    lookup: Dict[Pubkey, Pubkey] = {}
    for operator in operators:
        transmitter = _pubkey(operator.transmitter, "transmitter")
        if transmitter in lookup:
            raise ValidationError(f"Transmitter {transmitter} is assigned more than once")
        lookup[transmitter] = _pubkey(operator.payee, "payee")
    return lookup


def order_payees(proposal: ProposalState, lookup: Dict[Pubkey, Pubkey]) -> List[Pubkey]:
    """Payees in the order the oracles are stored in the proposal."""

    missing = [str(transmitter) for transmitter in proposal.transmitters if transmitter not in lookup]
    if missing:
        raise UnmappedTransmitterError(missing)
    return [lookup[transmitter] for transmitter in proposal.transmitters]


class ProposePayeesBuilder:
    """Validate payees and produce the raw transaction proposing them.

    The builder reads chain state through ``reader`` and never mutates it; the
    returned envelope takes effect only once the caller signs and submits it.
    """

    def __init__(
        self,
        reader: AccountReader,
        program: ProgramBinding,
        proposal: Pubkey,
        token_mint: Pubkey,
    ) -> None:
        self._reader = reader
        self._program = program
        self.proposal = proposal
        self.token_mint = token_mint
        self._token = TokenAccountChecker(reader, token_mint)

    async def ineligible_payees(self, payees: Sequence[str]) -> List[str]:
        """Check every payee concurrently and return those without a valid token account."""

        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(self._token.is_valid_recipient(payee)) for payee in payees]
        return [payee for payee, task in zip(payees, tasks) if not task.result()]

    async def make_raw_transaction(self, signer: Pubkey, user_input: ResolvedInput) -> List[RawTransaction]:
        invalid = await self.ineligible_payees(user_input.payees)
        if invalid and not user_input.allow_unfunded_payee:
            raise ValidationError("Every payee needs to have a valid token recipient address", payees=invalid)
        if invalid:
            logger.warning(
                "Proposing payees without a token account",
                extra={"context": {"payees": invalid}},
            )

        proposal_info = await fetch_proposal(self._reader, self.proposal)
        payees = order_payees(proposal_info, payee_by_transmitter(user_input.operators))

        raw_tx = self._program.propose_payees(self.token_mint, payees, self.proposal, signer)
        logger.info("Payees information", extra={"context": user_input.as_dict()})
        logger.info("Setting the following payees", extra={"context": {"payees": [str(p) for p in payees]}})
        return [raw_tx]


__all__ = ["ProposePayeesBuilder", "order_payees", "payee_by_transmitter"]
