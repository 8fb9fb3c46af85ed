from __future__ import annotations

import json
from pathlib import Path

import pytest

from ocr2_payees.errors import ConfigurationError, ResolutionError
from ocr2_payees.models import OperatorAssignment, ResolvedInput
from ocr2_payees.rdd import Rdd, load_rdd
from ocr2_payees.resolver import make_input, parse_user_input

STATE = "EPRYwrb1Dwi8VT5SutS4vYNdF8HqvE7QwvqeCCwHdVLC"

RDD_DATA = {
    "contracts": {
        STATE: {"name": "LINK / USD", "oracles": [{"operator": "A", "api": ["x"]}, {"operator": "B"}]},
        "Other": {"oracles": [{"operator": "ghost"}]},
        "NoNode": {"oracles": [{"operator": "C"}]},
    },
    "operators": {
        "A": {"ocrNodeAddress": ["T1", "T1-old"], "adminAddress": "P1", "website": "a.example"},
        "B": {"ocrNodeAddress": ["T2"], "adminAddress": "P2"},
        "C": {"ocrNodeAddress": [], "adminAddress": "P3"},
    },
}


def _write_rdd(tmp_path: Path) -> Path:
    path = tmp_path / "rdd.json"
    path.write_text(json.dumps(RDD_DATA), encoding="utf-8")
    return path


def test_resolution_defaults_from_rdd():
    rdd = Rdd.model_validate({"contracts": {"S": {"oracles": [{"operator": "A"}]}}, "operators": RDD_DATA["operators"]})
    resolved = make_input(None, "S", rdd)
    assert resolved.operators == [OperatorAssignment(transmitter="T1", payee="P1")]
    assert resolved.allow_unfunded_payee is True


def test_rdd_preserves_oracle_order(tmp_path):
    rdd = load_rdd(str(_write_rdd(tmp_path)))
    resolved = make_input(None, STATE, rdd)
    assert [op.as_dict() for op in resolved.operators] == [
        {"transmitter": "T1", "payee": "P1"},
        {"transmitter": "T2", "payee": "P2"},
    ]


@pytest.mark.parametrize(
    "state, message",
    [("Missing", "Aggregator Missing not found"), ("Other", "Operator ghost not found"), ("NoNode", "no OCR node address")],
)
def test_resolution_errors(tmp_path, state, message):
    rdd = load_rdd(str(_write_rdd(tmp_path)))
    with pytest.raises(ResolutionError, match=message):
        make_input(None, state, rdd)


def test_explicit_input_passes_through_unvalidated():
    raw = {"operators": [{"transmitter": "not-a-key", "payee": "nope"}], "allowFundRecipient": True}
    resolved = make_input(raw, STATE, None)
    assert resolved.operators == [OperatorAssignment(transmitter="not-a-key", payee="nope")]
    assert resolved.allow_unfunded_payee is True


def test_explicit_input_defaults_to_funded_payees():
    resolved = parse_user_input(json.dumps({"operators": [{"transmitter": "T", "payee": "P"}]}))
    assert resolved.allow_unfunded_payee is False


def test_resolved_input_is_returned_as_is():
    resolved = ResolvedInput([OperatorAssignment("T", "P")], True)
    assert make_input(resolved, STATE) is resolved


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", {"operators": [{"transmitter": "T"}]}])
def test_malformed_explicit_input(raw):
    with pytest.raises(ConfigurationError):
        parse_user_input(raw)


def test_missing_input_and_rdd():
    with pytest.raises(ConfigurationError):
        make_input(None, STATE, None)


def test_load_rdd_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("RDD", str(_write_rdd(tmp_path)))
    assert STATE in load_rdd().contracts


def test_load_rdd_requires_path(tmp_path):
    with pytest.raises(ConfigurationError):
        load_rdd()
    with pytest.raises(ConfigurationError, match="not found"):
        load_rdd(str(tmp_path / "missing.json"))


def test_load_rdd_rejects_malformed_operator(tmp_path):
    path = tmp_path / "rdd.yml"
    path.write_text("operators:\n  A:\n    ocrNodeAddress: [T1]\n", encoding="utf-8")
    with pytest.raises(ResolutionError, match="malformed"):
        load_rdd(str(path))


@pytest.mark.parametrize("flag", ["false", "true", 0, 1, None])
def test_allow_flag_must_be_boolean(flag):
    with pytest.raises(ConfigurationError, match="true or false"):
        parse_user_input({"operators": [], "allowFundRecipient": flag})


def test_allow_flag_false_keeps_gate():
    assert parse_user_input({"operators": [], "allow_unfunded_payee": False}).allow_unfunded_payee is False
