"""Tests for the command line interface."""

import io
import json

import pytest

from pii_shield.cli import main

CONTACT = "Contact John Smith at john.smith@example.com or 555-123-4567."


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PII_SHIELD_NO_PRESIDIO", "PII_SHIELD_THRESHOLD", "PII_SHIELD_STRATEGY"):
        monkeypatch.delenv(name, raising=False)


def _stdin(monkeypatch, text):
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


def test_redact_json(monkeypatch, capsys):
    _stdin(monkeypatch, CONTACT)
    assert main(["--no-presidio", "redact"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["redactedText"] == "Contact [NAME_1] at [EMAIL_1] or [PHONE_1]."
    assert out["totalEntities"] == 3


def test_redact_text_only_with_label(monkeypatch, capsys):
    _stdin(monkeypatch, CONTACT)
    assert main(["--no-presidio", "--strategy", "Complete Removal", "redact", "--text-only"]) == 0
    assert capsys.readouterr().out == "Contact  at  or ."


def test_detect(monkeypatch, capsys):
    _stdin(monkeypatch, CONTACT)
    assert main(["--no-presidio", "--skip-types", "phone", "detect"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert [e["type"] for e in out["entities"]] == ["NAME", "EMAIL"]
    assert out["stats"]["totalEntities"] == 2


def test_env_disables_presidio(monkeypatch, capsys):
    monkeypatch.setenv("PII_SHIELD_NO_PRESIDIO", "1")
    _stdin(monkeypatch, "mail alice@example.com")
    assert main(["redact", "--text-only"]) == 0
    assert capsys.readouterr().out == "mail [EMAIL_1]"


def test_config_file(monkeypatch, capsys, tmp_path):
    path = tmp_path / "pii.yaml"
    path.write_text("use_presidio: false\nstrategy: masking\n", encoding="utf-8")
    _stdin(monkeypatch, "mail alice@example.com")
    assert main(["--config", str(path), "redact", "--text-only"]) == 0
    assert capsys.readouterr().out == "mail ********"


def test_strategies(capsys):
    assert main(["strategies"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["contextual_masking"] == "Contextual Masking"
    assert len(out) == 8


def test_unknown_strategy_exit_code(monkeypatch, capsys):
    _stdin(monkeypatch, CONTACT)
    assert main(["--no-presidio", "--strategy", "shred", "redact"]) == 2
    assert "unknown redaction strategy" in capsys.readouterr().err
