"""Wrap and unwrap a signed note in a non-standard, simplified gift wrap.

The inner event is signed by the real author and encrypted to the receiver
with a single-use ephemeral key. The outer event is signed by that ephemeral
key, carries the receiver in a ``p`` tag, and has a randomized
``created_at`` so it does not reveal the exact time of wrapping.

Two independent checks guard :func:`unwrap`:

1. the payload MAC, proving the ciphertext was made for the receiver key
   and not altered;
2. the inner event's own signature, proving who wrote it.

Wrapping to the *shared* key of two parties (see
:func:`giftwrap.crypto.ecdh.shared_keys`) lets either party disclose that
key to an arbiter later, who can then read and verify the conversation
without learning either party's own secret key.

Example:
    >>> alice, bob = Keys.generate(), Keys.generate()
    >>> shared = shared_keys(alice.secret_key, bob.public_key)
    >>> envelope = wrap(alice, shared.public_key, "hello")
    >>> unwrap(shared, envelope).content
    'hello'
"""

from __future__ import annotations

import time
from collections.abc import Sequence

from ..core.config import get_config
from ..core.exceptions import ConfigException, GiftWrapException
from ..core.logging import operation_logger
from ..crypto import nip44
from ..crypto.keys import Keys, PublicKey
from ..crypto.random import RandomSource, resolve
from .event import Clock, Event, EventBuilder, Kind, Tag, build_signed, tweaked

# Protocol constants
ENVELOPE_KIND = Kind.GIFT_WRAP
PAYLOAD_VERSION = nip44.Version.V2


def wrap(
    sender: Keys,
    receiver: PublicKey,
    message: str,
    extra_tags: Sequence[Tag] = (),
    *,
    rng: RandomSource | None = None,
    timestamp_window: int | None = None,
    clock: Clock = time.time,
) -> Event:
    """Wrap ``message`` from ``sender`` so only ``receiver`` can read it.

    Args:
        sender: Keys signing the inner event (the real author).
        receiver: Public key the payload is encrypted to.
        message: Text of the inner note.
        extra_tags: Tags appended after the receiver's ``p`` tag, in order.
        rng: Randomness for the ephemeral key, timestamp and envelope
            signature. The payload nonce always comes from the OS.
        timestamp_window: Decorrelation window in seconds; defaults to
            the configured ``timestamp_tweak_seconds``.
        clock: Wall clock, for tests.

    Returns:
        The signed envelope. Its ``pubkey`` is the ephemeral key, never
        the sender's.

    Raises:
        ConfigException: If the timestamp window is not positive.
        SigningError: If an event cannot be signed.
        EncryptionError: If the payload cannot be encrypted to ``receiver``.
    """
    rng = resolve(rng)

    try:
        window = timestamp_window if timestamp_window is not None else get_config().timestamp_tweak_seconds
        if window <= 0:
            raise ConfigException(f"timestamp window must be positive, got {window}", setting="timestamp_window")

        inner = build_signed(sender, message, clock=clock)

        ephemeral = Keys.generate(rng)
        while ephemeral.public_key == sender.public_key:
            ephemeral = Keys.generate(rng)

        payload = nip44.encrypt(ephemeral.secret_key, receiver, inner.as_json(), PAYLOAD_VERSION)

        tags = [Tag.public_key(receiver), *extra_tags]
        envelope = (
            EventBuilder(ENVELOPE_KIND, payload)
            .add_tags(tags)
            .custom_created_at(tweaked(window, rng, clock))
            .sign_with_keys(ephemeral, clock=clock, rng=rng)
        )
    except GiftWrapException as e:
        operation_logger.log_failure("wrap", e)
        raise

    operation_logger.log_operation(
        "wrap",
        {
            "envelope_id": envelope.id,
            "receiver": receiver.to_hex(),
            "tag_count": len(tags),
        },
    )
    return envelope


def unwrap(receiver: Keys, envelope: Event, *, verify_envelope: bool = False) -> Event:
    """Open an envelope made by :func:`wrap` and return the verified inner event.

    Args:
        receiver: Keys whose public key the envelope was encrypted to.
        envelope: The outer event.
        verify_envelope: Also check the outer event's id and ephemeral
            signature before decrypting.

    Raises:
        SignatureInvalidError: If ``verify_envelope`` is set and the outer
            event does not verify, or if the inner event does not verify.
        DecryptionError: On a wrong key or tampered payload.
        MalformedPlaintextError: If the plaintext is not an event.
    """
    try:
        if verify_envelope:
            envelope.verify()
        plaintext = nip44.decrypt(receiver.secret_key, envelope.pubkey, envelope.content)
        inner = Event.from_json(plaintext)
        inner.verify()
    except GiftWrapException as e:
        operation_logger.log_failure("unwrap", e)
        raise

    operation_logger.log_operation(
        "unwrap",
        {
            "envelope_id": envelope.id,
            "inner_id": inner.id,
            "author": inner.pubkey.to_hex(),
        },
    )
    return inner
