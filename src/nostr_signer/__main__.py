"""
Nostr signer CLI entry point.

Sign events and exchange encrypted messages with the identity stored in a
local key database. The key is generated on first use.

Usage::

    python -m nostr_signer pubkey
    python -m nostr_signer sign event.json
    echo '{"kind": 1, "created_at": 1700000000, "tags": [], "content": "hi"}' \\
        | python -m nostr_signer sign
    python -m nostr_signer verify signed.json
    python -m nostr_signer encrypt <peer-pubkey-hex> "secret"
    python -m nostr_signer decrypt <peer-pubkey-hex> "<payload>"
    python -m nostr_signer relays

Options:
    --db          SQLite key database (default: ~/.nostr_signer/keys.db)
    --config      Path to provider YAML configuration
    -v/--verbose  Enable debug logging
    --no-color    Disable colored logging output
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from nostr_signer.config import ProviderConfig
from nostr_signer.event import verify_event
from nostr_signer.provider import SigningProvider
from nostr_signer.types import SignerError

DEFAULT_DB_PATH = Path("~/.nostr_signer/keys.db")
"""Key database used when neither --db nor the config names one."""

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the CLI with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def load_config(config_path: Path | None, db_path: Path | None) -> ProviderConfig:
    """
    Resolve the provider configuration from CLI arguments.

    Precedence for the key database: --db, then the config file, then
    DEFAULT_DB_PATH. A CLI invocation always persists its key.
    """
    config = ProviderConfig() if config_path is None else ProviderConfig.from_yaml_file(config_path)

    storage_path = db_path or config.storage_path or DEFAULT_DB_PATH
    return config.copy(storage_path=storage_path.expanduser())


def read_input(source: str | None) -> str:
    """Read an argument value, or stdin when it is absent or "-"."""
    if source is None or source == "-":
        return sys.stdin.read()
    return source


def read_event(path: str | None) -> object:
    """Load a JSON event from a file, or stdin when the path is absent or "-"."""
    if path is None or path == "-":
        return json.load(sys.stdin)
    with Path(path).open(encoding="utf-8") as f:
        return json.load(f)


def run_command(args: argparse.Namespace, provider: SigningProvider) -> int:
    """Execute one subcommand and print its result. Returns the exit status."""
    match args.command:
        case "pubkey":
            print(provider.get_public_key())

        case "sign":
            signed = provider.sign_event(read_event(args.event))
            print(json.dumps(signed, ensure_ascii=False))

        case "verify":
            if not verify_event(read_event(args.event)):
                logger.error("Event signature is invalid")
                return 1
            print("valid")

        case "encrypt":
            print(provider.nip04.encrypt(args.peer, read_input(args.text)))

        case "decrypt":
            payload = read_input(args.payload).strip()
            print(provider.nip04.decrypt(args.peer, payload))

        case "relays":
            print(json.dumps(provider.get_relays(), indent=2))

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="nostr-signer",
        description="Nostr signing provider",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to SQLite key database (default: ~/.nostr_signer/keys.db)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to provider YAML configuration",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("pubkey", help="Print the identity public key")

    sign = commands.add_parser("sign", help="Sign an event read as JSON")
    sign.add_argument("event", nargs="?", help="Event JSON file (default: stdin)")

    verify = commands.add_parser("verify", help="Verify a signed event read as JSON")
    verify.add_argument("event", nargs="?", help="Signed event JSON file (default: stdin)")

    encrypt = commands.add_parser("encrypt", help="Encrypt a message for a peer")
    encrypt.add_argument("peer", help="Peer public key (hex)")
    encrypt.add_argument("text", nargs="?", help="Plaintext (default: stdin)")

    decrypt = commands.add_parser("decrypt", help="Decrypt a message from a peer")
    decrypt.add_argument("peer", help="Peer public key (hex)")
    decrypt.add_argument("payload", nargs="?", help="Encrypted payload (default: stdin)")

    commands.add_parser("relays", help="Print the configured relay directory")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        config = load_config(args.config, args.db)
        with SigningProvider.from_config(config) as provider:
            return run_command(args, provider)
    except SignerError as exc:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    except (PydanticValidationError, yaml.YAMLError) as exc:
        logger.error("Invalid configuration: %s", exc)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Invalid event JSON: %s", exc)
    except OSError as exc:
        logger.error("%s", exc)
    return 1


if __name__ == "__main__":
    sys.exit(main())
