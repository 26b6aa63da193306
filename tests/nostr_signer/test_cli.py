"""Tests for the command-line interface."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from nostr_signer.__main__ import (
    DEFAULT_DB_PATH,
    ColoredFormatter,
    build_parser,
    load_config,
    main,
)
from nostr_signer.event import verify_event
from tests.nostr_signer.helpers import make_event


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Remove handlers installed by main() after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def db(tmp_path: Path) -> Path:
    """Key database path inside the test directory."""
    return tmp_path / "keys.db"


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str]:
    """Run the CLI and return (exit status, stdout)."""
    status = main(list(argv))
    return status, capsys.readouterr().out


class TestPubkey:
    """Tests for the pubkey command."""

    def test_stable_across_runs(self, capsys: pytest.CaptureFixture[str], db: Path) -> None:
        """The same database yields the same public key."""
        status, first = _run(capsys, "--db", str(db), "pubkey")
        assert status == 0
        assert len(first.strip()) == 64

        _, second = _run(capsys, "--db", str(db), "pubkey")
        assert second == first


class TestSignAndVerify:
    """Tests for the sign and verify commands."""

    def test_sign_file_then_verify(
        self, capsys: pytest.CaptureFixture[str], db: Path, tmp_path: Path
    ) -> None:
        """A signed event written by sign passes verify."""
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(make_event()), encoding="utf-8")

        status, out = _run(capsys, "--db", str(db), "sign", str(event_path))
        assert status == 0
        signed = json.loads(out)
        assert verify_event(signed)

        _, pubkey = _run(capsys, "--db", str(db), "pubkey")
        assert signed["pubkey"] == pubkey.strip()

        signed_path = tmp_path / "signed.json"
        signed_path.write_text(out, encoding="utf-8")
        status, out = _run(capsys, "--db", str(db), "verify", str(signed_path))
        assert status == 0
        assert out.strip() == "valid"

    def test_sign_from_stdin(
        self, capsys: pytest.CaptureFixture[str], db: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without a file, the event is read from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(make_event(content="é"))))
        status, out = _run(capsys, "--db", str(db), "sign")
        assert status == 0
        assert json.loads(out)["content"] == "é"

    def test_verify_tampered(
        self, capsys: pytest.CaptureFixture[str], db: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A modified event fails verification with exit status 1."""
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(make_event())))
        _, out = _run(capsys, "--db", str(db), "sign")
        signed = json.loads(out)
        signed["content"] = "tampered"

        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(signed)))
        status, out = _run(capsys, "--db", str(db), "verify", "-")
        assert status == 1
        assert out == ""

    def test_invalid_event(
        self, capsys: pytest.CaptureFixture[str], db: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A malformed event exits with status 1."""
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"kind": 1})))
        status, out = _run(capsys, "--db", str(db), "sign")
        assert status == 1
        assert out == ""

    def test_invalid_json(
        self, capsys: pytest.CaptureFixture[str], db: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Unparseable input exits with status 1."""
        monkeypatch.setattr("sys.stdin", io.StringIO("{not json"))
        status, _ = _run(capsys, "--db", str(db), "sign")
        assert status == 1

    def test_non_utf8_file(
        self, capsys: pytest.CaptureFixture[str], db: Path, tmp_path: Path
    ) -> None:
        """An event file that is not UTF-8 exits with status 1."""
        event_path = tmp_path / "event.json"
        event_path.write_bytes(b'{"kind":1,"created_at":1700000000,"tags":[],"content":"\xff"}')
        status, out = _run(capsys, "--db", str(db), "sign", str(event_path))
        assert status == 1
        assert out == ""


class TestEncryptDecrypt:
    """Tests for the encrypt and decrypt commands."""

    def test_exchange_between_databases(
        self, capsys: pytest.CaptureFixture[str], tmp_path: Path
    ) -> None:
        """Two identities exchange a message through the CLI."""
        alice_db = str(tmp_path / "alice.db")
        bob_db = str(tmp_path / "bob.db")
        _, alice_pub = _run(capsys, "--db", alice_db, "pubkey")
        _, bob_pub = _run(capsys, "--db", bob_db, "pubkey")

        status, payload = _run(capsys, "--db", alice_db, "encrypt", bob_pub.strip(), "secret")
        assert status == 0

        status, plaintext = _run(capsys, "--db", bob_db, "decrypt", alice_pub.strip(), payload)
        assert status == 0
        assert plaintext == "secret\n"

    def test_bad_peer_key(self, capsys: pytest.CaptureFixture[str], db: Path) -> None:
        """An invalid peer key exits with status 1."""
        status, _ = _run(capsys, "--db", str(db), "encrypt", "nothex", "secret")
        assert status == 1

    def test_unencodable_plaintext(self, capsys: pytest.CaptureFixture[str], db: Path) -> None:
        """Plaintext with a lone surrogate exits with status 1."""
        _, pub = _run(capsys, "--db", str(db), "pubkey")
        status, out = _run(capsys, "--db", str(db), "encrypt", pub.strip(), "\udcff")
        assert status == 1
        assert out == ""

    def test_bad_payload(self, capsys: pytest.CaptureFixture[str], db: Path) -> None:
        """An undecryptable payload exits with status 1."""
        _, pub = _run(capsys, "--db", str(db), "pubkey")
        status, out = _run(capsys, "--db", str(db), "decrypt", pub.strip(), "garbage")
        assert status == 1
        assert out == ""


class TestRelays:
    """Tests for the relays command."""

    def test_default(self, capsys: pytest.CaptureFixture[str], db: Path) -> None:
        """Without a config, the default relay is listed."""
        status, out = _run(capsys, "--db", str(db), "relays")
        assert status == 0
        assert json.loads(out) == {"wss://example-relay.com": {"read": True, "write": True}}

    def test_from_config(self, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
        """Relays come from the YAML config."""
        config = tmp_path / "signer.yaml"
        config.write_text(
            f"storage_path: {tmp_path / 'keys.db'}\n"
            "relays:\n"
            "  wss://relay.example.com: {read: false, write: true}\n",
            encoding="utf-8",
        )
        status, out = _run(capsys, "--config", str(config), "relays")
        assert status == 0
        assert json.loads(out) == {"wss://relay.example.com": {"read": False, "write": True}}

    def test_invalid_config(self, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
        """A config that fails validation exits with status 1."""
        config = tmp_path / "signer.yaml"
        config.write_text("relays:\n  https://wrong.example: {}\n", encoding="utf-8")
        status, _ = _run(capsys, "--config", str(config), "relays")
        assert status == 1

    def test_missing_config(self, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
        """A missing config file exits with status 1."""
        status, _ = _run(capsys, "--config", str(tmp_path / "absent.yaml"), "relays")
        assert status == 1


class TestLoadConfig:
    """Tests for CLI configuration resolution."""

    def test_default_database(self) -> None:
        """Without --db or a config, the key goes to the default database."""
        assert load_config(None, None).storage_path == DEFAULT_DB_PATH.expanduser()

    def test_db_flag_wins(self, tmp_path: Path) -> None:
        """--db overrides the configured storage path."""
        config = tmp_path / "signer.yaml"
        config.write_text(f"storage_path: {tmp_path / 'from-config.db'}\n", encoding="utf-8")
        resolved = load_config(config, tmp_path / "flag.db")
        assert resolved.storage_path == tmp_path / "flag.db"


class TestParser:
    """Tests for argument parsing and logging setup."""

    def test_command_required(self) -> None:
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_global_flags(self) -> None:
        """Global flags are parsed before the subcommand."""
        args = build_parser().parse_args(["-v", "--no-color", "--db", "x.db", "pubkey"])
        assert args.verbose
        assert args.no_color
        assert args.db == Path("x.db")
        assert args.command == "pubkey"

    def test_colored_formatter(self) -> None:
        """Colored output contains the level, logger name and message."""
        record = logging.LogRecord("nostr_signer", logging.ERROR, __file__, 1, "boom", None, None)
        formatted = ColoredFormatter().format(record)
        assert "ERROR" in formatted
        assert "nostr_signer" in formatted
        assert formatted.endswith("boom")
