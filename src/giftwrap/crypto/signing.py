"""BIP-340 Schnorr signatures over 32-byte event ids.

The primitive is libsecp256k1 through :mod:`coincurve`. Signatures are 64
bytes and verify against x-only public keys, so events signed here are
ordinary nostr events and notes signed elsewhere verify here.
"""

from __future__ import annotations

from coincurve import PrivateKey, PublicKeyXOnly

from ..core.exceptions import SigningError
from .keys import PublicKey, SecretKey
from .random import RandomSource, resolve

SIGNATURE_SIZE = 64
DIGEST_SIZE = 32
AUX_RANDOM_SIZE = 32


def sign(secret: SecretKey, digest: bytes, rng: RandomSource | None = None) -> bytes:
    """Sign a 32-byte digest.

    ``rng`` supplies the BIP-340 auxiliary randomness.

    Raises:
        SigningError: If the digest has the wrong size or the primitive fails.
    """
    if len(digest) != DIGEST_SIZE:
        raise SigningError(f"digest must be {DIGEST_SIZE} bytes, got {len(digest)}")
    aux = resolve(rng).token_bytes(AUX_RANDOM_SIZE)
    try:
        return PrivateKey(secret.data).sign_schnorr(digest, aux)
    except ValueError as e:
        raise SigningError(f"signing failed: {e}") from e


def verify(public: PublicKey, digest: bytes, signature: bytes) -> bool:
    """Check a signature. Returns False for any malformed input."""
    if len(digest) != DIGEST_SIZE or len(signature) != SIGNATURE_SIZE:
        return False
    try:
        return PublicKeyXOnly(public.data).verify(signature, digest)
    except ValueError:
        return False
