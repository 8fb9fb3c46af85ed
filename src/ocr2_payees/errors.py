"""Error taxonomy for the propose-payees workflow."""
from __future__ import annotations

from typing import Iterable, List


class ProposePayeesError(RuntimeError):
    """Base class for every fatal error raised by this package."""


class ConfigurationError(ProposePayeesError):
    """Raised when a required parameter or configuration value is missing."""


class ResolutionError(ProposePayeesError):
    """Raised when the reference data does not describe the requested aggregator."""


class ValidationError(ProposePayeesError):
    """Raised when the operator assignments cannot be turned into a proposal."""

    def __init__(self, message: str, *, payees: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.payees: List[str] = list(payees)


class UnmappedTransmitterError(ValidationError):
    """Raised when a proposal oracle has no payee in the assignment list."""

    def __init__(self, transmitters: Iterable[str]) -> None:
        self.transmitters: List[str] = list(transmitters)
        super().__init__(
            "No payee was provided for proposal transmitter(s): " + ", ".join(self.transmitters)
        )


class ProposalDecodeError(ProposePayeesError):
    """Raised when the proposal account is missing or cannot be decoded."""


class ChainReadError(ProposePayeesError):
    """Raised when an account cannot be read from the RPC node."""


class SubmissionError(ProposePayeesError):
    """Raised by transaction senders when signing or broadcasting fails."""


class AbortedByOperator(ProposePayeesError):
    """Raised when the operator declines the confirmation prompt."""


__all__ = [
    "AbortedByOperator",
    "ChainReadError",
    "ConfigurationError",
    "ProposalDecodeError",
    "ProposePayeesError",
    "ResolutionError",
    "SubmissionError",
    "UnmappedTransmitterError",
    "ValidationError",
]
