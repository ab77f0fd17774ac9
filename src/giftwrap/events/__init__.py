"""Events and the gift wrap protocol built on them."""

from giftwrap.events.event import (
    Event,
    EventBuilder,
    Kind,
    Tag,
    build_signed,
    compute_id,
    tweaked,
)
from giftwrap.events.seal import ENVELOPE_KIND, PAYLOAD_VERSION, unwrap, wrap

__all__ = [
    "ENVELOPE_KIND",
    "PAYLOAD_VERSION",
    "Event",
    "EventBuilder",
    "Kind",
    "Tag",
    "build_signed",
    "compute_id",
    "tweaked",
    "unwrap",
    "wrap",
]
