"""Build and submit ``propose_payees`` proposals for OCR2 aggregators on Solana.

The package exposes the :class:`~ocr2_payees.builder.ProposePayeesBuilder`,
which turns operator assignments into the payee list ordered the way the
on-chain proposal stores its oracles, and the
:class:`~ocr2_payees.command.ProposePayeesCommand` driving confirmation and
submission.
"""

from .builder import ProposePayeesBuilder
from .command import ProposePayeesCommand
from .errors import (
    AbortedByOperator,
    ChainReadError,
    ConfigurationError,
    ProposalDecodeError,
    ProposePayeesError,
    ResolutionError,
    SubmissionError,
    UnmappedTransmitterError,
    ValidationError,
)
from .models import OperatorAssignment, ProposalState, ProposedOracle, RawTransaction, ResolvedInput
from .resolver import make_input

__all__ = [
    "AbortedByOperator",
    "ChainReadError",
    "ConfigurationError",
    "OperatorAssignment",
    "ProposalDecodeError",
    "ProposalState",
    "ProposePayeesBuilder",
    "ProposePayeesCommand",
    "ProposePayeesError",
    "ProposedOracle",
    "RawTransaction",
    "ResolutionError",
    "ResolvedInput",
    "SubmissionError",
    "UnmappedTransmitterError",
    "ValidationError",
    "make_input",
]
