"""
Nostr events: models, canonical serialization, signing.

References:
- https://github.com/nostr-protocol/nips/blob/master/01.md
"""

from .model import Event, UnsignedEvent
from .serialize import compute_event_id, serialize_event
from .signer import sign_event, verify_event

__all__ = [
    "Event",
    "UnsignedEvent",
    "compute_event_id",
    "serialize_event",
    "sign_event",
    "verify_event",
]
