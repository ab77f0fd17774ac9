"""Shared key derivation (ECDH over secp256k1).

``derive_shared(a.secret_key, b.public_key)`` equals
``derive_shared(b.secret_key, a.public_key)`` for any two keypairs. The
32-byte result is the x coordinate of the shared point, which is also a
valid secret key, so both parties can build the same :class:`Keys` from it
and later hand that key to an arbiter without revealing their own.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives.asymmetric import ec

from ..core.exceptions import InvalidKeyError
from .keys import CURVE_ORDER, KEY_SIZE, Keys, PublicKey, SecretKey

logger = logging.getLogger(__name__)


def derive_shared(secret: SecretKey, peer_public: PublicKey) -> bytes:
    """Compute the ECDH shared secret of ``secret`` and ``peer_public``.

    The peer key is lifted to its even-``y`` point. The x coordinate of
    ``d·P`` is the same for ``P`` and ``-P``, so the result does not depend on
    the parity the peer's real point has.

    Raises:
        InvalidKeyError: If a key is invalid or the agreement is degenerate.
    """
    private = secret.to_crypto()
    public = peer_public.to_crypto()
    try:
        shared = private.exchange(ec.ECDH(), public)
    except ValueError as e:
        raise InvalidKeyError("key agreement failed", key_type="public", value=peer_public.to_hex()) from e

    if len(shared) != KEY_SIZE or not any(shared):
        raise InvalidKeyError("key agreement produced a degenerate secret", key_type="shared")
    return shared


def shared_keys(secret: SecretKey, peer_public: PublicKey) -> Keys:
    """Build the shared :class:`Keys` both parties can derive.

    Raises:
        InvalidKeyError: If the shared secret is not a usable scalar (an x
            coordinate at or above the group order; astronomically unlikely).
    """
    shared = derive_shared(secret, peer_public)
    if int.from_bytes(shared, "big") >= CURVE_ORDER:
        raise InvalidKeyError("shared secret is not a valid secret key", key_type="shared")
    keys = Keys(SecretKey(shared))
    logger.debug("Derived shared keys %s", keys.public_key.to_hex())
    return keys
