# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""giftwrap - seal signed notes to a (shared) key.

A message is signed by its author, encrypted with a single-use ephemeral key
to a receiver public key, and placed in an envelope signed by the ephemeral
key with a randomized timestamp. When the receiver key is the ECDH shared key
of two parties, either of them can later disclose it to an arbiter, who can
then read the message and verify its author.

Example::

    from giftwrap import Keys, shared_keys, unwrap, wrap

    alice, bob = Keys.generate(), Keys.generate()
    shared = shared_keys(alice.secret_key, bob.public_key)
    envelope = wrap(alice, shared.public_key, "hello")
    note = unwrap(shared, envelope)
    assert note.pubkey == alice.public_key
"""

__version__ = "0.1.0"

from .core.exceptions import (
    DecryptionError,
    EncryptionError,
    GiftWrapException,
    InvalidKeyError,
    MalformedPlaintextError,
    SignatureInvalidError,
    SigningError,
)
from .crypto import Keys, PublicKey, SecretKey, derive_shared, shared_keys
from .events import Event, Kind, Tag, build_signed, unwrap, wrap

__all__ = [
    "DecryptionError",
    "EncryptionError",
    "Event",
    "GiftWrapException",
    "InvalidKeyError",
    "Keys",
    "Kind",
    "MalformedPlaintextError",
    "PublicKey",
    "SecretKey",
    "SignatureInvalidError",
    "SigningError",
    "Tag",
    "build_signed",
    "derive_shared",
    "shared_keys",
    "unwrap",
    "wrap",
]
