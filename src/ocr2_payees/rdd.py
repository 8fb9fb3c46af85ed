"""Reference data descriptor (RDD) loading and typed lookups.

The RDD is the deployment descriptor shared by operators: it lists every
aggregator keyed by state address and every node operator keyed by name.
Only the fields needed to derive payee assignments are modelled; everything
else in the document is ignored.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from .errors import ConfigurationError, ResolutionError

logger = logging.getLogger(__name__)


class RddOracle(BaseModel):
    model_config = ConfigDict(extra="ignore")

    operator: str


class RddAggregator(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    oracles: List[RddOracle] = Field(default_factory=list)


class RddOperator(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    ocr_node_address: List[str] = Field(default_factory=list, alias="ocrNodeAddress")
    admin_address: str = Field(..., alias="adminAddress")


class Rdd(BaseModel):
    model_config = ConfigDict(extra="ignore")

    contracts: Dict[str, RddAggregator] = Field(default_factory=dict)
    operators: Dict[str, RddOperator] = Field(default_factory=dict)


def load_rdd(path: Optional[str] = None) -> Rdd:
    """Load the RDD from ``path`` or the ``RDD`` environment variable."""

    raw_path = path or os.environ.get("RDD")
    if not raw_path:
        raise ConfigurationError("Provide an RDD path with --rdd or the RDD environment variable")
    rdd_path = Path(raw_path).expanduser()
    if not rdd_path.exists():
        raise ConfigurationError(f"RDD file '{rdd_path}' not found")

    # JSON documents parse as YAML too.
    with rdd_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    try:
        rdd = Rdd.model_validate(data)
    except PydanticValidationError as exc:
        raise ResolutionError(f"RDD file '{rdd_path}' is malformed: {exc}") from exc
    logger.debug(
        "Loaded RDD",
        extra={"context": {"path": str(rdd_path), "contracts": len(rdd.contracts), "operators": len(rdd.operators)}},
    )
    return rdd


def get_aggregator(rdd: Rdd, state_address: str) -> RddAggregator:
    try:
        return rdd.contracts[state_address]
    except KeyError:
        raise ResolutionError(f"Aggregator {state_address} not found in RDD") from None


def get_operator(rdd: Rdd, name: str) -> RddOperator:
    try:
        return rdd.operators[name]
    except KeyError:
        raise ResolutionError(f"Operator {name} not found in RDD") from None


def transmitter_of(operator_name: str, operator: RddOperator) -> str:
    if not operator.ocr_node_address:
        raise ResolutionError(f"Operator {operator_name} has no OCR node address in RDD")
    return operator.ocr_node_address[0]


__all__ = [
    "Rdd",
    "RddAggregator",
    "RddOperator",
    "RddOracle",
    "get_aggregator",
    "get_operator",
    "load_rdd",
    "transmitter_of",
]
