from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from chain_fixtures import LINK, key
from ocr2_payees.config import NetworkConfig, load_config, resolve_token_mint
from ocr2_payees.errors import ConfigurationError
from ocr2_payees.logging_utils import configure_logging


def test_load_config_from_yaml(tmp_path: Path):
    path = tmp_path / "network.yml"
    path.write_text(
        "rpc_url: https://api.devnet.solana.com\ncommitment: finalized\n"
        f"link: {LINK}\nrdd_path: rdd.json\n",
        encoding="utf-8",
    )
    config = load_config(str(path))
    assert config.rpc_url == "https://api.devnet.solana.com"
    assert config.commitment == "finalized"
    assert config.link == str(LINK)
    assert config.rdd_path == "rdd.json"


def test_load_config_from_environment(tmp_path: Path, monkeypatch):
    path = tmp_path / "network.yml"
    path.write_text("rpc_url: http://env.example\n", encoding="utf-8")
    monkeypatch.setenv("OCR2_PAYEES_CONFIG", str(path))
    assert load_config().rpc_url == "http://env.example"


def test_defaults_without_config_file(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config() == NetworkConfig()


def test_explicit_missing_config_is_an_error(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_config(str(tmp_path / "missing.yml"))


@pytest.mark.parametrize(
    "body",
    ["link: not-a-key\n", "commitment: eventually\n", "unknown_field: 1\n", "ocr2_program_id: 0x1234\n"],
)
def test_invalid_config_values(tmp_path: Path, body: str):
    path = tmp_path / "network.yml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_config(str(path))


def test_token_mint_precedence(monkeypatch):
    config = NetworkConfig(link=str(key(7)))
    assert resolve_token_mint(None, config) == key(7)
    monkeypatch.setenv("LINK", str(key(8)))
    assert resolve_token_mint(None, config) == key(8)
    assert resolve_token_mint(str(key(9)), config) == key(9)


def test_token_mint_required_and_valid():
    with pytest.raises(ConfigurationError, match="Provide a token mint"):
        resolve_token_mint(None, NetworkConfig())
    with pytest.raises(ConfigurationError, match="Invalid token mint"):
        resolve_token_mint("LINK", NetworkConfig())


def test_json_log_file_carries_context(tmp_path: Path):
    configure_logging("DEBUG", str(tmp_path))
    logging.getLogger("ocr2_payees.test").info("Payees proposal set", extra={"tx_hash": "abc", "context": {"n": 1}})
    for handler in logging.getLogger().handlers:
        handler.flush()

    record = json.loads((tmp_path / "ocr2_payees.log").read_text(encoding="utf-8").strip().splitlines()[-1])
    assert record["message"] == "Payees proposal set"
    assert record["tx_hash"] == "abc"
    assert record["context"] == {"n": 1}
    assert record["level"] == "INFO"


@pytest.mark.parametrize("body", ["- a\n- b\n", "just a string\n", "42\n"])
def test_config_must_be_a_mapping(tmp_path: Path, body: str):
    path = tmp_path / "network.yml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigurationError, match="must contain a mapping"):
        load_config(str(path))
