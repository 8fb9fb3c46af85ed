"""Turn user input or RDD data into the operator assignments to propose."""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

from .errors import ConfigurationError
from .models import OperatorAssignment, ResolvedInput
from .rdd import Rdd, get_aggregator, get_operator, transmitter_of

logger = logging.getLogger(__name__)

UserInput = Union[str, Mapping[str, Any], ResolvedInput]


def parse_user_input(user_input: UserInput) -> ResolvedInput:
    """Reshape explicit input into a :class:`ResolvedInput` without validating addresses."""

    if isinstance(user_input, ResolvedInput):
        return user_input
    if isinstance(user_input, str):
        try:
            user_input = json.loads(user_input)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Input is not valid JSON: {exc}") from exc
    if not isinstance(user_input, Mapping):
        raise ConfigurationError("Input must be an object with an 'operators' list")

    try:
        operators = [
            OperatorAssignment(transmitter=str(entry["transmitter"]), payee=str(entry["payee"]))
            for entry in user_input.get("operators", [])
        ]
    except (KeyError, TypeError) as exc:
        raise ConfigurationError("Every operator needs a 'transmitter' and a 'payee'") from exc

    allow = user_input.get("allow_unfunded_payee", user_input.get("allowFundRecipient", False))
    if not isinstance(allow, bool):
        raise ConfigurationError("allowFundRecipient must be true or false")
    return ResolvedInput(operators=operators, allow_unfunded_payee=allow)


def input_from_rdd(rdd: Rdd, state_address: str) -> ResolvedInput:
    """Derive one assignment per aggregator oracle: its node transmitter paid to its admin."""

    aggregator = get_aggregator(rdd, state_address)
    operators = []
    for oracle in aggregator.oracles:
        operator = get_operator(rdd, oracle.operator)
        operators.append(
            OperatorAssignment(
                transmitter=transmitter_of(oracle.operator, operator),
                payee=operator.admin_address,
            )
        )
    logger.info(
        "Derived payees from RDD",
        extra={"context": {"state": state_address, "operators": len(operators)}},
    )
    return ResolvedInput(operators=operators, allow_unfunded_payee=True)


def make_input(
    user_input: Optional[UserInput],
    state_address: str,
    rdd: Optional[Rdd] = None,
) -> ResolvedInput:
    if user_input:
        return parse_user_input(user_input)
    if rdd is None:
        raise ConfigurationError("No input provided and no RDD available to derive it from")
    return input_from_rdd(rdd, state_address)


__all__ = ["UserInput", "input_from_rdd", "make_input", "parse_user_input"]
