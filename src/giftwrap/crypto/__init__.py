"""Cryptographic building blocks for giftwrap.

This package provides:
- secp256k1 keys with hex / bech32 encodings
- ECDH shared key derivation
- Signatures over event digests
- Versioned authenticated encryption between two keys
- Injectable randomness sources
"""

from giftwrap.crypto.ecdh import derive_shared, shared_keys
from giftwrap.crypto.keys import (
    CURVE_ORDER,
    Keys,
    PublicKey,
    SecretKey,
)
from giftwrap.crypto.nip44 import Version, decrypt, encrypt
from giftwrap.crypto.random import (
    RandomSource,
    SeededRandomSource,
    SystemRandomSource,
    default_random,
)
from giftwrap.crypto.signing import SIGNATURE_SIZE, sign, verify

__all__ = [
    # Keys
    "CURVE_ORDER",
    "Keys",
    "PublicKey",
    "SecretKey",
    # Key agreement
    "derive_shared",
    "shared_keys",
    # Encryption
    "Version",
    "decrypt",
    "encrypt",
    # Randomness
    "RandomSource",
    "SeededRandomSource",
    "SystemRandomSource",
    "default_random",
    # Signatures
    "SIGNATURE_SIZE",
    "sign",
    "verify",
]
