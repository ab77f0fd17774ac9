"""Signed events: the inner statement and the outer envelope share this shape.

An event's id is the SHA-256 of its canonical serialization::

    [0, <pubkey hex>, <created_at>, <kind>, <tags>, <content>]

encoded as compact JSON (no whitespace, UTF-8, not ASCII-escaped). The
signature covers the id, so it binds every other field.
"""

from __future__ import annotations

import enum
import hashlib
import json
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..core.exceptions import InvalidKeyError, MalformedPlaintextError, SignatureInvalidError, SigningError
from ..crypto import signing
from ..crypto.keys import Keys, PublicKey
from ..crypto.random import RandomSource, resolve

Clock = Callable[[], float]


class Kind(enum.IntEnum):
    """Event kinds used by the protocol."""

    TEXT_NOTE = 1
    GIFT_WRAP = 1059


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def now(clock: Clock = time.time) -> int:
    """Current UNIX time in whole seconds."""
    return int(clock())


def tweaked(window: int, rng: RandomSource | None = None, clock: Clock = time.time) -> int:
    """A timestamp in ``(now - window, now]``, uniformly at random."""
    if window <= 0:
        raise ValueError("window must be positive")
    return now(clock) - resolve(rng).randbelow(window)


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Tag:
    """An ordered list of strings; the first is the tag name.

    Example::

        Tag.public_key(bob.public_key)   # ["p", "<hex>"]
        Tag.of("t", "dispute")           # ["t", "dispute"]
    """

    fields: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.fields or not all(isinstance(f, str) for f in self.fields):
            raise ValueError("tag must be a non-empty sequence of strings")

    @classmethod
    def of(cls, name: str, *values: str) -> Tag:
        return cls((name, *values))

    @classmethod
    def public_key(cls, public_key: PublicKey) -> Tag:
        return cls(("p", public_key.to_hex()))

    @classmethod
    def from_list(cls, data: Sequence[str]) -> Tag:
        return cls(tuple(data))

    @property
    def name(self) -> str:
        return self.fields[0]

    @property
    def value(self) -> str | None:
        return self.fields[1] if len(self.fields) > 1 else None

    def to_list(self) -> list[str]:
        return list(self.fields)


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------


def serialize_for_id(
    pubkey: PublicKey,
    created_at: int,
    kind: int,
    tags: Iterable[Tag],
    content: str,
) -> bytes:
    """Canonical bytes hashed into the event id."""
    return json.dumps(
        [0, pubkey.to_hex(), created_at, int(kind), [t.to_list() for t in tags], content],
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def compute_id(pubkey: PublicKey, created_at: int, kind: int, tags: Iterable[Tag], content: str) -> bytes:
    return hashlib.sha256(serialize_for_id(pubkey, created_at, kind, tags, content)).digest()


def _encodable(text: str) -> bool:
    # Lone surrogates survive json.loads but cannot be hashed as UTF-8
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


@dataclass(frozen=True)
class Event:
    """A signed event.

    Attributes:
        id: Hex SHA-256 of the canonical serialization.
        pubkey: Author (for an envelope: the ephemeral sender).
        created_at: UNIX timestamp in seconds.
        kind: Event kind.
        tags: Ordered tags.
        content: Text content (for an envelope: the encrypted payload).
        sig: Hex 64-byte signature over ``id``.
    """

    id: str
    pubkey: PublicKey
    created_at: int
    kind: int
    tags: tuple[Tag, ...]
    content: str
    sig: str = field(repr=False)

    # -- verification --

    def verify_id(self) -> bool:
        try:
            digest = compute_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)
        except UnicodeEncodeError:
            return False
        return digest.hex() == self.id

    def verify_signature(self) -> bool:
        try:
            digest = bytes.fromhex(self.id)
            signature = bytes.fromhex(self.sig)
        except ValueError:
            return False
        return signing.verify(self.pubkey, digest, signature)

    def verify(self) -> None:
        """Check the id and the signature.

        Raises:
            SignatureInvalidError: If either check fails.
        """
        if not self.verify_id():
            raise SignatureInvalidError("event id does not match its content", event_id=self.id)
        if not self.verify_signature():
            raise SignatureInvalidError("event signature is invalid", event_id=self.id)

    # -- tags --

    def public_keys(self) -> list[PublicKey]:
        """Public keys referenced by ``p`` tags, in order."""
        return [PublicKey.from_hex(t.value) for t in self.tags if t.name == "p" and t.value]

    # -- serialization --

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pubkey": self.pubkey.to_hex(),
            "created_at": self.created_at,
            "kind": int(self.kind),
            "tags": [t.to_list() for t in self.tags],
            "content": self.content,
            "sig": self.sig,
        }

    def as_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Any) -> Event:
        """Parse and type-check an event mapping.

        Raises:
            MalformedPlaintextError: On a missing or mistyped field.
        """
        if not isinstance(data, dict):
            raise MalformedPlaintextError("event must be a JSON object")

        def _get(name: str, typ: type | tuple[type, ...]) -> Any:
            if name not in data:
                raise MalformedPlaintextError(f"missing field '{name}'", field=name)
            value = data[name]
            # bool is an int subclass; never a valid timestamp or kind
            if not isinstance(value, typ) or isinstance(value, bool):
                raise MalformedPlaintextError(f"field '{name}' has the wrong type", field=name)
            return value

        raw_tags = _get("tags", list)
        if not all(isinstance(t, list) for t in raw_tags):
            raise MalformedPlaintextError("each tag must be a list", field="tags")
        try:
            tags = tuple(Tag.from_list(t) for t in raw_tags)
        except ValueError as e:
            raise MalformedPlaintextError(f"invalid tag: {e}", field="tags") from e
        if not all(_encodable(value) for tag in tags for value in tag.fields):
            raise MalformedPlaintextError("tag is not valid UTF-8", field="tags")

        content = _get("content", str)
        if not _encodable(content):
            raise MalformedPlaintextError("content is not valid UTF-8", field="content")

        pubkey_hex = _get("pubkey", str)
        try:
            pubkey = PublicKey.from_hex(pubkey_hex)
        except InvalidKeyError as e:
            raise MalformedPlaintextError("invalid pubkey", field="pubkey") from e

        return cls(
            id=_get("id", str),
            pubkey=pubkey,
            created_at=_get("created_at", int),
            kind=_get("kind", int),
            tags=tags,
            content=content,
            sig=_get("sig", str),
        )

    @classmethod
    def from_json(cls, text: str) -> Event:
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            raise MalformedPlaintextError(f"event is not valid JSON: {e}") from e
        return cls.from_dict(data)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


@dataclass
class EventBuilder:
    """Collects event fields, then signs them into an :class:`Event`.

    Example::

        event = (
            EventBuilder(Kind.GIFT_WRAP, payload)
            .add_tags([Tag.public_key(receiver)])
            .custom_created_at(tweaked(172800))
            .sign_with_keys(ephemeral)
        )
    """

    kind: int
    content: str
    tags: list[Tag] = field(default_factory=list)
    created_at: int | None = None

    @classmethod
    def text_note(cls, content: str) -> EventBuilder:
        return cls(Kind.TEXT_NOTE, content)

    def add_tags(self, tags: Iterable[Tag]) -> EventBuilder:
        self.tags.extend(tags)
        return self

    def custom_created_at(self, created_at: int) -> EventBuilder:
        self.created_at = created_at
        return self

    def sign_with_keys(self, keys: Keys, clock: Clock = time.time, rng: RandomSource | None = None) -> Event:
        """Compute the id and sign it with ``keys``.

        Raises:
            SigningError: If the fields cannot be serialized, or the
                signature cannot be produced or does not verify against
                ``keys.public_key``.
        """
        created_at = self.created_at if self.created_at is not None else now(clock)
        tags = tuple(self.tags)
        try:
            digest = compute_id(keys.public_key, created_at, self.kind, tags, self.content)
        except UnicodeEncodeError as e:
            raise SigningError("event fields are not valid UTF-8") from e
        signature = signing.sign(keys.secret_key, digest, rng=rng)
        if not signing.verify(keys.public_key, digest, signature):
            raise SigningError("produced signature does not verify")
        return Event(
            id=digest.hex(),
            pubkey=keys.public_key,
            created_at=created_at,
            kind=self.kind,
            tags=tags,
            content=self.content,
            sig=signature.hex(),
        )


def build_signed(author: Keys, text: str, clock: Clock = time.time) -> Event:
    """Build and sign a text note authored by ``author``."""
    return EventBuilder.text_note(text).sign_with_keys(author, clock=clock)
