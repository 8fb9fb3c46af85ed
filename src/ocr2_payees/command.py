"""Submission driver: build, confirm, sign and report."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from rich.prompt import Confirm

from .builder import ProposePayeesBuilder
from .chain.sender import TransactionSender
from .errors import AbortedByOperator
from .models import RawTransaction, ResolvedInput, TransactionResponse

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]


def prompt(message: str) -> bool:
    return Confirm.ask(message, default=False)


class ProposePayeesCommand:
    def __init__(
        self,
        builder: ProposePayeesBuilder,
        sender: TransactionSender,
        user_input: ResolvedInput,
        state_address: str,
        confirm: ConfirmFn = prompt,
    ) -> None:
        self._builder = builder
        self._sender = sender
        self._input = user_input
        self.state_address = state_address
        self._confirm = confirm

    async def make_raw_transaction(self) -> List[RawTransaction]:
        return await self._builder.make_raw_transaction(self._sender.public_key, self._input)

    async def execute(self) -> Dict[str, Any]:
        raw_txs = await self.make_raw_transaction()
        if not self._confirm("Continue setting payees proposal?"):
            logger.warning("Payees proposal aborted by operator")
            raise AbortedByOperator("Payees proposal was not confirmed")

        tx_hash = await self._sender.sign_and_send(raw_txs)
        logger.info("Payees proposal set on tx hash: %s", tx_hash, extra={"tx_hash": tx_hash})

        response = TransactionResponse(hash=tx_hash, address=self.state_address)
        return {"responses": [{"tx": response.as_dict(), "contract": self.state_address}]}


__all__ = ["ConfirmFn", "ProposePayeesCommand", "prompt"]
