"""Constants and exception types for prekeys."""

from typing import Optional


# Key widths
SECRET_KEY_SIZE = 64  # Ed25519 seed + public key
PUBLIC_KEY_SIZE = 32
CURVE_KEY_SIZE = 32
SIGNATURE_SIZE = 64

# Wire constants
VERSION_1_TAG = 1
CBOR_MAJOR_UINT = 0
CBOR_MAJOR_BYTES = 2
CBOR_MAJOR_ARRAY = 4

# Declared array lengths for version 1 composites (version tag included)
IDENTITY_KEYPAIR_V1_LEN = 3
PREKEY_V1_LEN = 3
PREKEY_BUNDLE_V1_LEN = 4

# Prekey ids
MAX_PREKEY_ID = 0xFFFF
U16_MAX = 0xFFFF


# Exception types
class PreKeysError(Exception):
    """Base exception for prekeys errors."""
    pass


class DecodeError(PreKeysError):
    """Input bytes could not be decoded."""
    pass


class InvalidVersionError(DecodeError):
    """Version tag is not one this codec implements."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Unknown key version {version}")


class InvalidArrayLenError(DecodeError):
    """Declared array length does not match the layout of the decoded version."""

    def __init__(self, length: int, expected: Optional[int] = None) -> None:
        self.length = length
        self.expected = expected
        message = f"Invalid array length {length}"
        if expected is not None:
            message += f" (expected {expected})"
        super().__init__(message)


class InvalidByteLengthError(DecodeError):
    """Fixed-width byte string has the wrong length."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} bytes, got {actual}")


class InvalidPublicKeyError(DecodeError):
    """Public key bytes are not a valid Ed25519 point."""
    pass


class MalformedInputError(DecodeError):
    """Underlying CBOR data is malformed or of the wrong type."""
    pass


class EncodeError(PreKeysError):
    """Writing to the output stream failed."""
    pass
