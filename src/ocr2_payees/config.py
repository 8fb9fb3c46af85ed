"""Network configuration loading and validation."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator
from solders.pubkey import Pubkey

from .chain.program import OCR2_PROGRAM_ID
from .errors import ConfigurationError

CONFIG_ENV = "OCR2_PAYEES_CONFIG"
DEFAULT_CONFIG_PATH = "config/network.yml"


def _check_pubkey(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        Pubkey.from_string(value)
    except ValueError as exc:
        raise ValueError(f"'{value}' is not a base58 encoded public key") from exc
    return value


class NetworkConfig(BaseModel):
    """Settings for one Solana cluster."""

    model_config = ConfigDict(extra="forbid")

    rpc_url: str = Field("http://127.0.0.1:8899", description="Solana JSON-RPC endpoint")
    commitment: str = Field("confirmed", description="Commitment used for reads and confirmation")
    ocr2_program_id: str = Field(OCR2_PROGRAM_ID, description="OCR2 aggregator program")
    link: Optional[str] = Field(None, description="Reward token mint")
    keypair_path: str = Field("~/.config/solana/id.json", description="Solana CLI keypair file")
    rdd_path: Optional[str] = Field(None, description="Reference data descriptor")

    @field_validator("ocr2_program_id", "link")
    @classmethod
    def validate_pubkeys(cls, value: Optional[str]) -> Optional[str]:
        return _check_pubkey(value)

    @field_validator("commitment")
    @classmethod
    def validate_commitment(cls, value: str) -> str:
        if value not in {"processed", "confirmed", "finalized"}:
            raise ValueError("Commitment must be one of processed, confirmed or finalized")
        return value


def load_config(path: Optional[str] = None) -> NetworkConfig:
    """Load configuration from YAML, falling back to defaults when no file is configured."""

    explicit = path or os.environ.get(CONFIG_ENV)
    config_path = Path(explicit or DEFAULT_CONFIG_PATH).expanduser()
    if not config_path.exists():
        if explicit:
            raise ConfigurationError(f"Configuration file '{config_path}' not found")
        return NetworkConfig()

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{config_path}' must contain a mapping")
    try:
        return NetworkConfig(**data)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in '{config_path}': {exc}") from exc


def resolve_token_mint(flag: Optional[str], config: NetworkConfig) -> Pubkey:
    """Pick the reward token mint: command-line flag, then ``LINK``, then configuration."""

    value = flag or os.environ.get("LINK") or config.link
    if not value:
        raise ConfigurationError("Provide a token mint with --link, the LINK environment variable or the config file")
    try:
        return Pubkey.from_string(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid token mint address: {value}") from exc


__all__ = ["CONFIG_ENV", "NetworkConfig", "load_config", "resolve_token_mint"]
