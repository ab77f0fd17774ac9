"""secp256k1 key material: secret keys, x-only public keys and keypairs.

Public keys are 32-byte x coordinates. Whenever a full curve point is needed
the x coordinate is lifted to the point with even ``y``; this is what makes
x-only keys usable for both key agreement and signature verification.

Encodings (display only, not part of the protocol):
- hex (64 lowercase characters)
- bech32 with ``npub`` / ``nsec`` human-readable parts
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bech32 import bech32_decode, bech32_encode, convertbits
from cryptography.hazmat.primitives.asymmetric import ec

from ..core.exceptions import InvalidKeyError
from .random import RandomSource, resolve

CURVE = ec.SECP256K1()

# Group order and field prime of secp256k1
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
FIELD_PRIME = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F

KEY_SIZE = 32

HRP_PUBLIC = "npub"
HRP_SECRET = "nsec"


# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------


def _from_hex(value: str, key_type: str) -> bytes:
    try:
        data = bytes.fromhex(value)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid hex {key_type} key", key_type=key_type) from e
    if len(data) != KEY_SIZE:
        raise InvalidKeyError(
            f"{key_type} key must be {KEY_SIZE} bytes, got {len(data)}",
            key_type=key_type,
        )
    return data


def _to_bech32(hrp: str, data: bytes) -> str:
    words = convertbits(data, 8, 5, True)
    return bech32_encode(hrp, words)


def _from_bech32(value: str, hrp: str, key_type: str) -> bytes:
    found_hrp, words = bech32_decode(value)
    if found_hrp is None or words is None:
        raise InvalidKeyError(f"Invalid bech32 {key_type} key", key_type=key_type)
    if found_hrp != hrp:
        raise InvalidKeyError(
            f"Expected '{hrp}' prefix, got '{found_hrp}'",
            key_type=key_type,
        )
    data = convertbits(words, 5, 8, False)
    if data is None or len(data) != KEY_SIZE:
        raise InvalidKeyError(f"bech32 {key_type} key has wrong length", key_type=key_type)
    return bytes(data)


def _x_only(public: ec.EllipticCurvePublicKey) -> bytes:
    return public.public_numbers().x.to_bytes(KEY_SIZE, "big")


# ---------------------------------------------------------------------------
# PublicKey
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PublicKey:
    """An x-only secp256k1 public key.

    Attributes:
        data: The 32-byte big-endian x coordinate.
    """

    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes) or len(self.data) != KEY_SIZE:
            raise InvalidKeyError(f"public key must be {KEY_SIZE} bytes", key_type="public")
        # Validates the point; raises on an x with no curve point
        self.to_crypto()

    @classmethod
    def from_hex(cls, value: str) -> PublicKey:
        return cls(_from_hex(value, "public"))

    @classmethod
    def from_bech32(cls, value: str) -> PublicKey:
        return cls(_from_bech32(value, HRP_PUBLIC, "public"))

    @classmethod
    def parse(cls, value: str) -> PublicKey:
        """Parse a hex or ``npub`` encoded public key."""
        value = value.strip()
        if value.startswith(HRP_PUBLIC + "1"):
            return cls.from_bech32(value)
        return cls.from_hex(value)

    def to_hex(self) -> str:
        return self.data.hex()

    def to_bech32(self) -> str:
        return _to_bech32(HRP_PUBLIC, self.data)

    def to_crypto(self) -> ec.EllipticCurvePublicKey:
        """Lift to the even-``y`` curve point."""
        if int.from_bytes(self.data, "big") >= FIELD_PRIME:
            raise InvalidKeyError("public key x coordinate out of range", key_type="public", value=self.to_hex())
        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(CURVE, b"\x02" + self.data)
        except ValueError as e:
            raise InvalidKeyError("public key is not on secp256k1", key_type="public", value=self.to_hex()) from e

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"PublicKey({self.to_hex()})"


# ---------------------------------------------------------------------------
# SecretKey
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SecretKey:
    """A secp256k1 secret scalar in ``[1, n-1]``.

    ``repr`` and ``str`` never show the scalar; use :meth:`to_secret_hex`.
    """

    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes) or len(self.data) != KEY_SIZE:
            raise InvalidKeyError(f"secret key must be {KEY_SIZE} bytes", key_type="secret")
        scalar = int.from_bytes(self.data, "big")
        if not 0 < scalar < CURVE_ORDER:
            raise InvalidKeyError("secret key out of range", key_type="secret")

    @classmethod
    def from_hex(cls, value: str) -> SecretKey:
        return cls(_from_hex(value, "secret"))

    @classmethod
    def from_bech32(cls, value: str) -> SecretKey:
        return cls(_from_bech32(value, HRP_SECRET, "secret"))

    @classmethod
    def parse(cls, value: str) -> SecretKey:
        """Parse a hex or ``nsec`` encoded secret key."""
        value = value.strip()
        if value.startswith(HRP_SECRET + "1"):
            return cls.from_bech32(value)
        return cls.from_hex(value)

    @classmethod
    def generate(cls, rng: RandomSource | None = None) -> SecretKey:
        """Draw a uniformly random valid scalar."""
        rng = resolve(rng)
        while True:
            candidate = rng.token_bytes(KEY_SIZE)
            if 0 < int.from_bytes(candidate, "big") < CURVE_ORDER:
                return cls(candidate)

    @property
    def scalar(self) -> int:
        return int.from_bytes(self.data, "big")

    def to_secret_hex(self) -> str:
        return self.data.hex()

    def to_bech32(self) -> str:
        return _to_bech32(HRP_SECRET, self.data)

    def to_crypto(self) -> ec.EllipticCurvePrivateKey:
        return ec.derive_private_key(self.scalar, CURVE)

    def public_key(self) -> PublicKey:
        return PublicKey(_x_only(self.to_crypto().public_key()))

    def __str__(self) -> str:
        return "SecretKey(<redacted>)"


# ---------------------------------------------------------------------------
# Keys (Identity)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Keys:
    """A keypair used to sign events and to take part in key agreement.

    The public key is always derived from the secret key, never supplied.

    Example::

        alice = Keys.parse("nsec1...")
        bob = Keys.generate()
        print(alice.public_key.to_bech32())
    """

    secret_key: SecretKey = field(repr=False)
    public_key: PublicKey = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "public_key", self.secret_key.public_key())

    @classmethod
    def generate(cls, rng: RandomSource | None = None) -> Keys:
        return cls(SecretKey.generate(rng))

    @classmethod
    def parse(cls, secret: str) -> Keys:
        """Build keys from a hex or ``nsec`` secret key."""
        return cls(SecretKey.parse(secret))
