"""
Versioned CBOR encoding and decoding of key material.

Wire layouts (version 1):
    SecretKey        bytes(64)
    PublicKey        bytes(32)
    IdentityKey      bytes(32)
    KeyPair          SecretKey, PublicKey (no wrapper)
    PreKeyId         uint16
    IdentityKeyPair  array(3): uint16(1), SecretKey, IdentityKey
    PreKey           array(3): uint16(1), PreKeyId, KeyPair
    PreKeyBundle     array(4): uint16(1), PreKeyId, PublicKey, IdentityKey

The declared array length counts the version tag and fields, with a KeyPair
counted as one field. It is validated only after the version tag has been
read, since the expected length depends on the version.

``write_*`` / ``read_*`` work on a cbor2 encoder or decoder so structures can
be embedded in a larger stream. ``encode_*`` / ``decode_*`` work on bytes.
"""

from io import BytesIO
from typing import Any, Callable, Dict, TypeVar

from cbor2 import CBORDecodeEOF, CBORDecodeError, CBORDecoder, CBOREncodeError, CBOREncoder

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
)
from .types import (
    SECRET_KEY_SIZE,
    PUBLIC_KEY_SIZE,
    VERSION_1_TAG,
    CBOR_MAJOR_UINT,
    CBOR_MAJOR_BYTES,
    CBOR_MAJOR_ARRAY,
    IDENTITY_KEYPAIR_V1_LEN,
    PREKEY_V1_LEN,
    PREKEY_BUNDLE_V1_LEN,
    EncodeError,
    InvalidArrayLenError,
    InvalidByteLengthError,
    InvalidVersionError,
    MalformedInputError,
)

T = TypeVar("T")

# Declared array length of each composite, per version
IDENTITY_KEYPAIR_LEN: Dict[Version, int] = {Version.V1: IDENTITY_KEYPAIR_V1_LEN}
PREKEY_LEN: Dict[Version, int] = {Version.V1: PREKEY_V1_LEN}
PREKEY_BUNDLE_LEN: Dict[Version, int] = {Version.V1: PREKEY_BUNDLE_V1_LEN}


# Primitives ///////////////////////////////////////////////////////////////

def _write(encoder: CBOREncoder, value: Any) -> None:
    try:
        encoder.encode(value)
    except (CBOREncodeError, OSError) as e:
        raise EncodeError(f"Failed to write {type(value).__name__}: {e}") from e


def _write_array_len(encoder: CBOREncoder, length: int) -> None:
    try:
        encoder.encode_length(CBOR_MAJOR_ARRAY, length)
    except (CBOREncodeError, OSError) as e:
        raise EncodeError(f"Failed to write array header: {e}") from e


def _read_raw(decoder: CBORDecoder, amount: int) -> bytes:
    try:
        return decoder.read(amount)
    except (CBORDecodeError, OSError) as e:
        raise MalformedInputError(str(e)) from e


def _read_head(decoder: CBORDecoder, major_type: int, max_info: int) -> int:
    """
    Read the initial byte and argument of a CBOR data item.

    Args:
        decoder: Stream to read from
        major_type: Required CBOR major type
        max_info: Largest additional-info value allowed (25 = 16-bit, 27 = 64-bit)

    Returns:
        The item's argument (value, length or count)

    Raises:
        MalformedInputError: On a different major type, an indefinite length,
            a wider argument than allowed, or premature end of input
    """
    initial = _read_raw(decoder, 1)[0]
    actual_type, info = initial >> 5, initial & 0x1F

    if actual_type != major_type:
        raise MalformedInputError(f"Expected major type {major_type}, got {actual_type}")

    if info < 24:
        return info
    if info <= max_info:
        return int.from_bytes(_read_raw(decoder, 1 << (info - 24)), byteorder="big")

    raise MalformedInputError(
        f"Unsupported additional info {info} for major type {major_type}"
    )


def _read_array_len(decoder: CBORDecoder) -> int:
    """Read a definite-length array header and return the declared count."""
    return _read_head(decoder, CBOR_MAJOR_ARRAY, 27)


def _read_u16(decoder: CBORDecoder) -> int:
    # An unsigned integer head no wider than 16 bits; tags and bignums are rejected
    return _read_head(decoder, CBOR_MAJOR_UINT, 25)


def _read_fixed_bytes(decoder: CBORDecoder, size: int) -> bytes:
    """Read a definite-length byte string that must be exactly ``size`` bytes long."""
    length = _read_head(decoder, CBOR_MAJOR_BYTES, 27)
    if length != size:
        raise InvalidByteLengthError(size, length)
    return _read_raw(decoder, size)


def _check_array_len(length: int, expected: int) -> None:
    if length != expected:
        raise InvalidArrayLenError(length, expected)


# Version //////////////////////////////////////////////////////////////////

def write_version(encoder: CBOREncoder, version: Version) -> None:
    if version is Version.V1:
        _write(encoder, VERSION_1_TAG)
    else:
        raise ValueError(f"No wire tag for {version!r}")


def read_version(decoder: CBORDecoder) -> Version:
    """
    Read a version tag.

    Raises:
        InvalidVersionError: If the tag is not a known version
    """
    tag = _read_u16(decoder)
    if tag == VERSION_1_TAG:
        return Version.V1
    raise InvalidVersionError(tag)


# Keys /////////////////////////////////////////////////////////////////////

def write_secret_key(encoder: CBOREncoder, key: SecretKey) -> None:
    _write(encoder, key.sec_edward)


def read_secret_key(decoder: CBORDecoder) -> SecretKey:
    return SecretKey(_read_fixed_bytes(decoder, SECRET_KEY_SIZE))


def write_public_key(encoder: CBOREncoder, key: PublicKey) -> None:
    _write(encoder, key.pub_edward)


def read_public_key(decoder: CBORDecoder) -> PublicKey:
    return PublicKey(_read_fixed_bytes(decoder, PUBLIC_KEY_SIZE))


def write_identity_key(encoder: CBOREncoder, key: IdentityKey) -> None:
    write_public_key(encoder, key.public_key)


def read_identity_key(decoder: CBORDecoder) -> IdentityKey:
    return IdentityKey(read_public_key(decoder))


def write_keypair(encoder: CBOREncoder, key_pair: KeyPair) -> None:
    write_secret_key(encoder, key_pair.secret_key)
    write_public_key(encoder, key_pair.public_key)


def read_keypair(decoder: CBORDecoder) -> KeyPair:
    secret_key = read_secret_key(decoder)
    public_key = read_public_key(decoder)
    return KeyPair(secret_key=secret_key, public_key=public_key)


def write_prekey_id(encoder: CBOREncoder, key_id: PreKeyId) -> None:
    _write(encoder, key_id.value)


def read_prekey_id(decoder: CBORDecoder) -> PreKeyId:
    return PreKeyId(_read_u16(decoder))


# Composites ///////////////////////////////////////////////////////////////

def write_identity_keypair(encoder: CBOREncoder, key: IdentityKeyPair) -> None:
    if key.version is Version.V1:
        _write_array_len(encoder, IDENTITY_KEYPAIR_LEN[key.version])
        write_version(encoder, key.version)
        write_secret_key(encoder, key.secret_key)
        write_identity_key(encoder, key.public_key)
    else:
        raise ValueError(f"Unsupported version {key.version!r}")


def read_identity_keypair(decoder: CBORDecoder) -> IdentityKeyPair:
    length = _read_array_len(decoder)
    version = read_version(decoder)
    if version is Version.V1:
        _check_array_len(length, IDENTITY_KEYPAIR_LEN[version])
        secret_key = read_secret_key(decoder)
        public_key = read_identity_key(decoder)
        return IdentityKeyPair(secret_key=secret_key, public_key=public_key, version=version)
    raise InvalidVersionError(version.value)


def write_prekey(encoder: CBOREncoder, prekey: PreKey) -> None:
    if prekey.version is Version.V1:
        _write_array_len(encoder, PREKEY_LEN[prekey.version])
        write_version(encoder, prekey.version)
        write_prekey_id(encoder, prekey.key_id)
        write_keypair(encoder, prekey.key_pair)
    else:
        raise ValueError(f"Unsupported version {prekey.version!r}")


def read_prekey(decoder: CBORDecoder) -> PreKey:
    length = _read_array_len(decoder)
    version = read_version(decoder)
    if version is Version.V1:
        _check_array_len(length, PREKEY_LEN[version])
        key_id = read_prekey_id(decoder)
        key_pair = read_keypair(decoder)
        return PreKey(key_id=key_id, key_pair=key_pair, version=version)
    raise InvalidVersionError(version.value)


def write_prekey_bundle(encoder: CBOREncoder, bundle: PreKeyBundle) -> None:
    if bundle.version is Version.V1:
        _write_array_len(encoder, PREKEY_BUNDLE_LEN[bundle.version])
        write_version(encoder, bundle.version)
        write_prekey_id(encoder, bundle.prekey_id)
        write_public_key(encoder, bundle.public_key)
        write_identity_key(encoder, bundle.identity_key)
    else:
        raise ValueError(f"Unsupported version {bundle.version!r}")


def read_prekey_bundle(decoder: CBORDecoder) -> PreKeyBundle:
    length = _read_array_len(decoder)
    version = read_version(decoder)
    if version is Version.V1:
        _check_array_len(length, PREKEY_BUNDLE_LEN[version])
        prekey_id = read_prekey_id(decoder)
        public_key = read_public_key(decoder)
        identity_key = read_identity_key(decoder)
        return PreKeyBundle(
            prekey_id=prekey_id,
            public_key=public_key,
            identity_key=identity_key,
            version=version,
        )
    raise InvalidVersionError(version.value)


# Bytes ////////////////////////////////////////////////////////////////////

def _encode(write: Callable[[CBOREncoder, T], None], value: T) -> bytes:
    fp = BytesIO()
    write(CBOREncoder(fp), value)
    return fp.getvalue()


def _decode(read: Callable[[CBORDecoder], T], data: bytes) -> T:
    """Decode one structure from ``data``, rejecting trailing bytes."""
    decoder = CBORDecoder(BytesIO(data))
    value = read(decoder)
    try:
        decoder.read(1)
    except CBORDecodeEOF:
        return value
    raise MalformedInputError("Trailing bytes after encoded value")


def encode_secret_key(key: SecretKey) -> bytes:
    return _encode(write_secret_key, key)


def decode_secret_key(data: bytes) -> SecretKey:
    return _decode(read_secret_key, data)


def encode_public_key(key: PublicKey) -> bytes:
    return _encode(write_public_key, key)


def decode_public_key(data: bytes) -> PublicKey:
    return _decode(read_public_key, data)


def encode_identity_key(key: IdentityKey) -> bytes:
    return _encode(write_identity_key, key)


def decode_identity_key(data: bytes) -> IdentityKey:
    return _decode(read_identity_key, data)


def encode_keypair(key_pair: KeyPair) -> bytes:
    return _encode(write_keypair, key_pair)


def decode_keypair(data: bytes) -> KeyPair:
    return _decode(read_keypair, data)


def encode_prekey_id(key_id: PreKeyId) -> bytes:
    return _encode(write_prekey_id, key_id)


def decode_prekey_id(data: bytes) -> PreKeyId:
    return _decode(read_prekey_id, data)


def encode_identity_keypair(key: IdentityKeyPair) -> bytes:
    """
    Encode an identity key pair to bytes.

    Args:
        key: IdentityKeyPair to encode

    Returns:
        Encoded bytes
    """
    return _encode(write_identity_keypair, key)


def decode_identity_keypair(data: bytes) -> IdentityKeyPair:
    """
    Decode bytes into an identity key pair.

    Args:
        data: Encoded identity key pair

    Returns:
        Decoded IdentityKeyPair

    Raises:
        DecodeError: If data is invalid
    """
    return _decode(read_identity_keypair, data)


def encode_prekey(prekey: PreKey) -> bytes:
    """Encode a prekey, including its secret key."""
    return _encode(write_prekey, prekey)


def decode_prekey(data: bytes) -> PreKey:
    return _decode(read_prekey, data)


def encode_prekey_bundle(bundle: PreKeyBundle) -> bytes:
    """Encode a prekey bundle for publishing."""
    return _encode(write_prekey_bundle, bundle)


def decode_prekey_bundle(data: bytes) -> PreKeyBundle:
    """
    Decode a published prekey bundle.

    Raises:
        InvalidVersionError: If the version tag is unknown
        InvalidArrayLenError: If the declared length does not fit the version
        InvalidByteLengthError: If a key has the wrong width
        InvalidPublicKeyError: If a key is not a valid Ed25519 point
        MalformedInputError: If the CBOR data is malformed or truncated
    """
    return _decode(read_prekey_bundle, data)
