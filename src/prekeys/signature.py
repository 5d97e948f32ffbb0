"""
Signing, verification and key agreement over raw key material.

Signatures use Ed25519; key agreement uses X25519 on the key-agreement
components derived from the Ed25519 keys.
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey

from .types import SECRET_KEY_SIZE, PUBLIC_KEY_SIZE, CURVE_KEY_SIZE, SIGNATURE_SIZE


def sign(sec_edward: bytes, message: bytes) -> bytes:
    """
    Sign a message with a 64-byte Ed25519 secret key.

    Args:
        sec_edward: Secret key in seed || public key layout (64 bytes)
        message: Bytes to sign

    Returns:
        The Ed25519 signature (64 bytes)

    Raises:
        ValueError: If the secret key length is invalid
    """
    if len(sec_edward) != SECRET_KEY_SIZE:
        raise ValueError(
            f"Secret key must be {SECRET_KEY_SIZE} bytes, got {len(sec_edward)}"
        )

    signing_key = Ed25519PrivateKey.from_private_bytes(sec_edward[:32])
    return signing_key.sign(message)


def verify(pub_edward: bytes, signature: bytes, message: bytes) -> bool:
    """
    Verify an Ed25519 signature.

    Args:
        pub_edward: Ed25519 public key (32 bytes)
        signature: The signature to check (64 bytes)
        message: The signed bytes

    Returns:
        True if the signature is valid, False otherwise

    Raises:
        ValueError: If the key or signature lengths are invalid
    """
    if len(pub_edward) != PUBLIC_KEY_SIZE:
        raise ValueError(
            f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(pub_edward)}"
        )

    if len(signature) != SIGNATURE_SIZE:
        raise ValueError(
            f"Signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}"
        )

    verifying_key = Ed25519PublicKey.from_public_bytes(pub_edward)
    try:
        verifying_key.verify(signature, message)
        return True
    except InvalidSignature:
        return False


def shared_secret(sec_curve: bytes, pub_curve: bytes) -> bytes:
    """
    Perform X25519 between a key-agreement scalar and group element.

    Returns:
        32-byte shared secret
    """
    if len(sec_curve) != CURVE_KEY_SIZE or len(pub_curve) != CURVE_KEY_SIZE:
        raise ValueError(f"Key-agreement keys must be {CURVE_KEY_SIZE} bytes")

    private_key = X25519PrivateKey.from_private_bytes(sec_curve)
    return private_key.exchange(X25519PublicKey.from_public_bytes(pub_curve))


def fingerprint(pub_edward: bytes) -> str:
    """Lowercase hex of an Ed25519 public key."""
    return pub_edward.hex()
