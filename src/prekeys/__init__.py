"""
prekeys - Key material for offline key exchange

Identity keys, prekeys and prekey bundles with a versioned CBOR wire format.
"""

from .keys import (
    Version,
    SecretKey,
    PublicKey,
    IdentityKey,
    KeyPair,
    IdentityKeyPair,
    PreKeyId,
    PreKey,
    PreKeyBundle,
    gen_prekeys,
)
from .types import (
    MAX_PREKEY_ID,
    PreKeysError,
    DecodeError,
    InvalidVersionError,
    InvalidArrayLenError,
    InvalidByteLengthError,
    InvalidPublicKeyError,
    MalformedInputError,
    EncodeError,
)
from .binary import (
    encode_secret_key,
    decode_secret_key,
    encode_public_key,
    decode_public_key,
    encode_identity_key,
    decode_identity_key,
    encode_keypair,
    decode_keypair,
    encode_prekey_id,
    decode_prekey_id,
    encode_identity_keypair,
    decode_identity_keypair,
    encode_prekey,
    decode_prekey,
    encode_prekey_bundle,
    decode_prekey_bundle,
)

__version__ = "0.1.0"

__all__ = [
    # Keys
    "Version",
    "SecretKey",
    "PublicKey",
    "IdentityKey",
    "KeyPair",
    "IdentityKeyPair",
    "PreKeyId",
    "PreKey",
    "PreKeyBundle",
    "gen_prekeys",
    # Constants
    "MAX_PREKEY_ID",
    # Errors
    "PreKeysError",
    "DecodeError",
    "InvalidVersionError",
    "InvalidArrayLenError",
    "InvalidByteLengthError",
    "InvalidPublicKeyError",
    "MalformedInputError",
    "EncodeError",
    # Binary
    "encode_secret_key",
    "decode_secret_key",
    "encode_public_key",
    "decode_public_key",
    "encode_identity_key",
    "decode_identity_key",
    "encode_keypair",
    "decode_keypair",
    "encode_prekey_id",
    "decode_prekey_id",
    "encode_identity_keypair",
    "decode_identity_keypair",
    "encode_prekey",
    "decode_prekey",
    "encode_prekey_bundle",
    "decode_prekey_bundle",
]
