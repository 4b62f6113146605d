"""Unit tests for the rhodium-webhook command."""

from __future__ import annotations

import typing as typ

import msgspec
import pytest

from rhodium.adapters.signature import signature_header_value
from rhodium.cli import main
from tests.helpers.github_payloads import WEBHOOK_SECRET, encode, push_payload

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def payload_file(tmp_path: Path) -> Path:
    """Write a push payload to disk."""
    path = tmp_path / "push.json"
    path.write_bytes(encode(push_payload()))
    return path


@pytest.fixture(autouse=True)
def _no_env_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RHODIUM_GITHUB_WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("RHODIUM_GITHUB_TIMEOUT_S", raising=False)


def test_sign_prints_header_value(
    payload_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """sign prints the sha256= header value for the body."""
    code = main(["sign", str(payload_file), "--secret", WEBHOOK_SECRET])

    expected = signature_header_value(WEBHOOK_SECRET, payload_file.read_bytes())
    assert code == 0, "expected success"
    assert capsys.readouterr().out.strip() == expected, "wrong signature"
    assert expected.startswith("sha256="), "expected the sha256 prefix"


def test_verify_accepts_matching_signature(
    payload_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """verify exits 0 for a matching signature."""
    signature = signature_header_value(WEBHOOK_SECRET, payload_file.read_bytes())

    code = main(
        [
            "verify",
            str(payload_file),
            "--signature",
            signature,
            "--secret",
            WEBHOOK_SECRET,
        ]
    )

    assert code == 0, "expected success"
    assert "signature valid" in capsys.readouterr().out, "expected confirmation"


def test_verify_reads_secret_from_environment(
    payload_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without --secret the environment secret is used."""
    monkeypatch.setenv("RHODIUM_GITHUB_WEBHOOK_SECRET", WEBHOOK_SECRET)
    signature = signature_header_value(WEBHOOK_SECRET, payload_file.read_bytes())

    code = main(["verify", str(payload_file), "--signature", signature])

    assert code == 0, "expected the environment secret to verify"


def test_verify_rejects_mismatch(
    payload_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """verify exits 1 when the signature does not match."""
    signature = signature_header_value("another secret", payload_file.read_bytes())

    code = main(
        [
            "verify",
            str(payload_file),
            "--signature",
            signature,
            "--secret",
            WEBHOOK_SECRET,
        ]
    )

    assert code == 1, "expected failure"
    assert "does not match" in capsys.readouterr().out, "expected mismatch note"


def test_verify_without_secret_fails(
    payload_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """verify refuses to pass without any secret."""
    code = main(["verify", str(payload_file), "--signature", "sha256=00"])

    assert code == 1, "expected failure"
    assert "no webhook secret" in capsys.readouterr().out, "expected guidance"


def test_parse_prints_canonical_event(
    payload_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """parse prints the canonical event as JSON."""
    code = main(["parse", str(payload_file), "--event", "push"])

    event = msgspec.json.decode(capsys.readouterr().out)
    assert code == 0, "expected success"
    assert event["kind"] == "push", "wrong kind"
    assert event["repo_owner"] == "octo", "wrong owner"


def test_parse_unsupported_event_fails(
    payload_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Unsupported event types are reported and exit 1."""
    code = main(["parse", str(payload_file), "--event", "deployment"])

    assert code == 1, "expected failure"
    assert capsys.readouterr().out.startswith("parse failed:"), "expected error"
