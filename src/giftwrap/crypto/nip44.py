"""Versioned authenticated encryption between two secp256k1 keys (NIP-44).

The cipher is the nostr library's NIP-44 implementation. This module maps
giftwrap keys onto it and its failures onto the giftwrap error taxonomy.

Payload layout (version 2)::

    base64( version(1) || nonce(32) || ciphertext(padded) || mac(32) )

The MAC is checked before any decryption, so a tampered or misaddressed
payload never yields plaintext.
"""

from __future__ import annotations

import enum

import nostr_sdk

from ..core.exceptions import DecryptionError, EncryptionError
from .keys import PublicKey, SecretKey


class Version(enum.IntEnum):
    """Payload format versions."""

    V2 = 0x02


_LIBRARY_VERSIONS = {Version.V2: nostr_sdk.Nip44Version.V2}


def _secret(secret: SecretKey) -> nostr_sdk.SecretKey:
    return nostr_sdk.SecretKey.parse(secret.to_secret_hex())


def _public(public: PublicKey) -> nostr_sdk.PublicKey:
    return nostr_sdk.PublicKey.parse(public.to_hex())


def encrypt(
    secret: SecretKey,
    peer_public: PublicKey,
    plaintext: str,
    version: Version = Version.V2,
) -> str:
    """Encrypt ``plaintext`` from ``secret`` to ``peer_public``.

    Raises:
        EncryptionError: On an unsupported version, a plaintext the format
            cannot carry (empty, over 65535 bytes or not encodable as UTF-8)
            or a failure inside the cipher.
    """
    if version not in _LIBRARY_VERSIONS:
        raise EncryptionError(f"unsupported payload version: {version!r}")
    try:
        plaintext.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncryptionError("plaintext is not encodable as UTF-8") from e
    try:
        return nostr_sdk.nip44_encrypt(_secret(secret), _public(peer_public), plaintext, _LIBRARY_VERSIONS[version])
    except nostr_sdk.NostrSdkError as e:
        raise EncryptionError(f"encryption failed: {e}") from e


def decrypt(secret: SecretKey, peer_public: PublicKey, payload: str) -> str:
    """Decrypt a payload produced by :func:`encrypt`.

    Raises:
        DecryptionError: On a bad encoding, unknown version, MAC mismatch
            (tampering or wrong key) or inconsistent padding.
    """
    if not payload or payload[0] == "#":
        raise DecryptionError("unknown payload version")
    if not payload.isascii():
        raise DecryptionError("payload is not valid base64")
    try:
        return nostr_sdk.nip44_decrypt(_secret(secret), _public(peer_public), payload)
    except nostr_sdk.NostrSdkError as e:
        raise DecryptionError(f"decryption failed: {e}") from e
