# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Exception hierarchy for giftwrap.

Every failure of a wrap or unwrap call surfaces as one of these types so a
caller can branch on *why* it failed. None of them carry key material.
"""

from __future__ import annotations

from typing import Any


class GiftWrapException(Exception):  # noqa: N818
    """Base exception for all giftwrap errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigException(GiftWrapException):
    """Exception for configuration errors.

    Raised when:
    - A setting is out of range
    - The environment supplies a value that cannot be used
    """

    def __init__(self, message: str, setting: str | None = None):
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)
        self.setting = setting


class InvalidKeyError(GiftWrapException):
    """Malformed or out-of-range key material.

    Raised when:
    - A secret key is not a scalar in ``[1, n-1]``
    - A public key is not the x coordinate of a curve point
    - A hex / bech32 string does not decode to a key
    - Key agreement would yield a degenerate shared secret
    """

    def __init__(self, message: str, key_type: str | None = None, value: Any = None):
        details = {}
        if key_type:
            details["key_type"] = key_type
        if value is not None:
            # Public material only; callers never pass secrets here
            details["value"] = str(value)
        super().__init__(message, details)
        self.key_type = key_type


class SigningError(GiftWrapException):
    """The signature primitive rejected its input."""


class EncryptionError(GiftWrapException):
    """Sealing a payload failed (invalid peer key, oversize plaintext, cipher error)."""


class DecryptionError(GiftWrapException):
    """Opening a payload failed.

    Raised when:
    - The MAC does not match (tampered ciphertext or wrong key)
    - The payload is not valid base64 or has the wrong length
    - The payload version is unknown
    - The padding is inconsistent
    """


class MalformedPlaintextError(GiftWrapException):
    """Decrypted bytes do not parse as an event."""

    def __init__(self, message: str, field: str | None = None):
        details = {}
        if field:
            details["field"] = field
        super().__init__(message, details)
        self.field = field


class SignatureInvalidError(GiftWrapException):
    """An event's id or signature does not verify against its declared author."""

    def __init__(self, message: str, event_id: str | None = None):
        details = {}
        if event_id:
            details["event_id"] = event_id
        super().__init__(message, details)
        self.event_id = event_id
