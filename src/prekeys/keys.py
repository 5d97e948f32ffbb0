"""Key material for offline key exchange.

Secret and public keys carry an Ed25519 signing component and an X25519
key-agreement component. The key-agreement component is always computed
from the signing component when the object is constructed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from nacl.bindings import (
    crypto_sign_ed25519_pk_to_curve25519,
    crypto_sign_ed25519_sk_to_curve25519,
)
from nacl.exceptions import CryptoError

from . import signature
from .types import (
    SECRET_KEY_SIZE,
    PUBLIC_KEY_SIZE,
    MAX_PREKEY_ID,
    U16_MAX,
    InvalidPublicKeyError,
)

logger = logging.getLogger(__name__)


class Version(Enum):
    """Key format versions understood by this package."""
    V1 = 1


def from_ed25519_sk(sec_edward: bytes) -> bytes:
    """Convert a 64-byte Ed25519 secret key to its X25519 scalar."""
    return crypto_sign_ed25519_sk_to_curve25519(sec_edward)


def from_ed25519_pk(pub_edward: bytes) -> bytes:
    """
    Convert a 32-byte Ed25519 public key to its X25519 group element.

    Raises:
        InvalidPublicKeyError: If the bytes are not a usable Ed25519 point
    """
    try:
        return crypto_sign_ed25519_pk_to_curve25519(pub_edward)
    except CryptoError as e:
        raise InvalidPublicKeyError(f"Invalid Ed25519 public key: {e}") from e


@dataclass(frozen=True)
class SecretKey:
    """Ed25519 secret key (seed || public key) and its X25519 scalar."""
    sec_edward: bytes = field(repr=False)
    sec_curve: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.sec_edward) != SECRET_KEY_SIZE:
            raise ValueError(
                f"Secret key must be {SECRET_KEY_SIZE} bytes, got {len(self.sec_edward)}"
            )
        object.__setattr__(self, "sec_edward", bytes(self.sec_edward))
        object.__setattr__(self, "sec_curve", from_ed25519_sk(self.sec_edward))

    def sign(self, message: bytes) -> bytes:
        """Sign a message, returning the 64-byte signature."""
        return signature.sign(self.sec_edward, message)

    def shared_secret(self, public_key: "PublicKey") -> bytes:
        """X25519 shared secret with another party's public key."""
        return signature.shared_secret(self.sec_curve, public_key.pub_curve)


@dataclass(frozen=True)
class PublicKey:
    """Ed25519 public key and its X25519 group element."""
    pub_edward: bytes
    pub_curve: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.pub_edward) != PUBLIC_KEY_SIZE:
            raise ValueError(
                f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(self.pub_edward)}"
            )
        object.__setattr__(self, "pub_edward", bytes(self.pub_edward))
        object.__setattr__(self, "pub_curve", from_ed25519_pk(self.pub_edward))

    def verify(self, sig: bytes, message: bytes) -> bool:
        """Check an Ed25519 signature made by the matching secret key."""
        return signature.verify(self.pub_edward, sig, message)

    def fingerprint(self) -> str:
        return signature.fingerprint(self.pub_edward)


@dataclass(frozen=True)
class IdentityKey:
    """A public key used as a long-term identity."""
    public_key: PublicKey

    def fingerprint(self) -> str:
        return self.public_key.fingerprint()


@dataclass(frozen=True)
class KeyPair:
    """A secret key and its public key.

    The codec does not check that the two halves belong together.
    """
    secret_key: SecretKey
    public_key: PublicKey

    @classmethod
    def new(cls) -> "KeyPair":
        """Generate a random Ed25519 key pair."""
        signing_key = Ed25519PrivateKey.generate()
        pub_edward = signing_key.public_key().public_bytes_raw()
        sec_edward = signing_key.private_bytes_raw() + pub_edward
        return cls(secret_key=SecretKey(sec_edward), public_key=PublicKey(pub_edward))


@dataclass(frozen=True)
class IdentityKeyPair:
    """Long-term identity secret key and identity key."""
    secret_key: SecretKey
    public_key: IdentityKey
    version: Version = Version.V1

    @classmethod
    def new(cls) -> "IdentityKeyPair":
        """Generate a fresh identity key pair."""
        kp = KeyPair.new()
        logger.debug("Generated identity key pair %s", kp.public_key.fingerprint())
        return cls(secret_key=kp.secret_key, public_key=IdentityKey(kp.public_key))


@dataclass(frozen=True)
class PreKeyId:
    """Unsigned 16-bit prekey identifier."""
    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass and would encode as a CBOR simple value
        if type(self.value) is not int:
            raise TypeError(f"Prekey id must be an int, got {type(self.value).__name__}")
        if not 0 <= self.value <= U16_MAX:
            raise ValueError(f"Prekey id must fit in 16 bits, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PreKey:
    """A prekey: id plus key pair."""
    key_id: PreKeyId
    key_pair: KeyPair
    version: Version = Version.V1

    @classmethod
    def new(cls, key_id: PreKeyId) -> "PreKey":
        """Generate a prekey with the given id."""
        return cls(key_id=key_id, key_pair=KeyPair.new())

    @classmethod
    def last_resort(cls) -> "PreKey":
        """Generate the reusable last-resort prekey."""
        return cls.new(PreKeyId(MAX_PREKEY_ID))


@dataclass(frozen=True)
class PreKeyBundle:
    """The published part of a prekey together with the owner's identity key."""
    prekey_id: PreKeyId
    public_key: PublicKey
    identity_key: IdentityKey
    version: Version = Version.V1

    @classmethod
    def new(cls, identity_key: IdentityKey, prekey: PreKey) -> "PreKeyBundle":
        """Build the bundle to publish for a prekey."""
        return cls(
            prekey_id=prekey.key_id,
            public_key=prekey.key_pair.public_key,
            identity_key=identity_key,
        )


def gen_prekeys(start: PreKeyId, size: int) -> List[PreKey]:
    """
    Generate a batch of prekeys with consecutive ids.

    Ids wrap around before MAX_PREKEY_ID, which is reserved for the
    last-resort prekey.

    Args:
        start: Id of the first prekey
        size: Number of prekeys to generate

    Returns:
        List of new prekeys
    """
    if size < 0:
        raise ValueError(f"Size must not be negative, got {size}")

    prekeys = [
        PreKey.new(PreKeyId(i % MAX_PREKEY_ID))
        for i in range(start.value, start.value + size)
    ]
    logger.debug("Generated %d prekeys starting at id %s", size, start)
    return prekeys
