"""
Canonical event serialization (NIP-01).

The event id is the SHA-256 of this exact byte sequence:

    [0,"<pubkey hex>",<created_at>,<kind>,<tags>,"<content>"]

Rules:
- UTF-8 encoding, no whitespace, no line breaks
- Only ',' and ':' as separators
- Integers in plain decimal
- Inside strings, exactly these characters are escaped:

    | Character        | Escape |
    |------------------|--------|
    | line break 0x0A  | \\n    |
    | double quote     | \\"    |
    | backslash        | \\\\   |
    | carriage return  | \\r    |
    | tab 0x09         | \\t    |
    | backspace 0x08   | \\b    |
    | form feed 0x0C   | \\f    |

  Every other character, including non-ASCII and other control characters,
  is written verbatim.

`json.dumps` is not used: it escapes the remaining control characters as
`\\uXXXX`, which would change the id of events carrying them.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from typing import Final

from nostr_signer.types import Bytes32, ValidationError

_ESCAPES: Final = {
    "\n": "\\n",
    '"': '\\"',
    "\\": "\\\\",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}

_ESCAPE_TABLE: Final = str.maketrans(_ESCAPES)


def encode_string(value: str) -> str:
    """Encode a string as a NIP-01 JSON string literal."""
    return '"' + value.translate(_ESCAPE_TABLE) + '"'


def encode_tags(tags: Sequence[Sequence[str]]) -> str:
    """Encode the tag list as a compact JSON array of string arrays."""
    return "[" + ",".join("[" + ",".join(encode_string(v) for v in tag) + "]" for tag in tags) + "]"


def serialize_event(
    pubkey: Bytes32,
    created_at: int,
    kind: int,
    tags: Sequence[Sequence[str]],
    content: str,
) -> bytes:
    """
    Produce the canonical bytes hashed into the event id.

    Raises:
        ValidationError: If a string cannot be encoded as UTF-8 (lone surrogates).
    """
    text = (
        f'[0,"{pubkey.hex()}",{created_at:d},{kind:d},'
        f"{encode_tags(tags)},{encode_string(content)}]"
    )
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError("Event strings must be valid Unicode") from exc


def compute_event_id(
    pubkey: Bytes32,
    created_at: int,
    kind: int,
    tags: Sequence[Sequence[str]],
    content: str,
) -> Bytes32:
    """Compute the event id: SHA-256 of the canonical serialization."""
    return Bytes32(hashlib.sha256(serialize_event(pubkey, created_at, kind, tags, content)).digest())
