"""P-256 key generation, import and export for Web Push."""

from typing import Tuple

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .types import (
    DecodeError,
    PUBLIC_KEY_SIZE,
    PRIVATE_KEY_SIZE,
    COORDINATE_SIZE,
    UNCOMPRESSED_POINT_PREFIX,
)

# Order of the P-256 base point
P256_ORDER = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551

_VALIDATION_PROBE = b"\x01\x02\x03"


def generate_keypair() -> Tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey]:
    """
    Generate a random P-256 key pair.

    Returns:
        Tuple of (private_key, public_key)
    """
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key, private_key.public_key()


def public_key_from_bytes(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Create a P-256 public key from an uncompressed point.

    Args:
        data: 65 bytes, 0x04 || X || Y

    Raises:
        DecodeError: If the length, prefix or point is invalid
    """
    if len(data) != PUBLIC_KEY_SIZE:
        raise DecodeError(f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(data)}")

    if data[0] != UNCOMPRESSED_POINT_PREFIX:
        raise DecodeError(f"Public key must be an uncompressed point, got prefix 0x{data[0]:02x}")

    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), bytes(data))
    except ValueError as e:
        raise DecodeError(f"Public key is not a valid P-256 point: {e}") from e


def public_key_to_bytes(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """
    Encode a P-256 public key as a 65-byte uncompressed point.

    X and Y are always written as fixed 32-byte big-endian integers.
    """
    numbers = public_key.public_numbers()
    return (
        bytes([UNCOMPRESSED_POINT_PREFIX])
        + numbers.x.to_bytes(COORDINATE_SIZE, "big")
        + numbers.y.to_bytes(COORDINATE_SIZE, "big")
    )


def private_key_from_bytes(data: bytes) -> ec.EllipticCurvePrivateKey:
    """
    Create a P-256 private key from a raw 32-byte scalar.

    Raises:
        DecodeError: If the length is wrong or the scalar is out of range
    """
    if len(data) != PRIVATE_KEY_SIZE:
        raise DecodeError(f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(data)}")

    value = int.from_bytes(data, "big")
    if not 0 < value < P256_ORDER:
        raise DecodeError("Private key scalar is out of range for P-256")

    return ec.derive_private_key(value, ec.SECP256R1())


def private_key_to_bytes(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Encode a P-256 private key as a raw 32-byte big-endian scalar."""
    return private_key.private_numbers().private_value.to_bytes(PRIVATE_KEY_SIZE, "big")


def public_key_from_der(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Load a P-256 public key from X.509 SubjectPublicKeyInfo DER.

    Raises:
        DecodeError: If the DER is malformed or not a P-256 key
    """
    try:
        key = serialization.load_der_public_key(bytes(data))
    except ValueError as e:
        raise DecodeError(f"Invalid SubjectPublicKeyInfo: {e}") from e

    if not isinstance(key, ec.EllipticCurvePublicKey) or not isinstance(key.curve, ec.SECP256R1):
        raise DecodeError("SubjectPublicKeyInfo does not hold a P-256 key")

    return key


def public_key_to_der(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """Encode a public key as X.509 SubjectPublicKeyInfo DER."""
    return public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def private_key_from_der(data: bytes) -> ec.EllipticCurvePrivateKey:
    """
    Load an unencrypted P-256 private key from PKCS8 DER.

    Raises:
        DecodeError: If the DER is malformed, encrypted or not a P-256 key
    """
    try:
        key = serialization.load_der_private_key(bytes(data), password=None)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Invalid PKCS8 private key: {e}") from e

    if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(key.curve, ec.SECP256R1):
        raise DecodeError("PKCS8 data does not hold a P-256 key")

    return key


def private_key_to_der(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Encode a private key as unencrypted PKCS8 DER."""
    return private_key.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def validate_key_pair(
    public_key: ec.EllipticCurvePublicKey,
    private_key: ec.EllipticCurvePrivateKey,
) -> bool:
    """
    Check that a public and private key belong together.

    Signs a short probe with the private key and verifies it with the
    public key. Any failure counts as a mismatch.

    Returns:
        True if the keys form a pair, False otherwise
    """
    try:
        signature = private_key.sign(_VALIDATION_PROBE, ec.ECDSA(hashes.SHA256()))
        public_key.verify(signature, _VALIDATION_PROBE, ec.ECDSA(hashes.SHA256()))
        return True
    except Exception:
        return False
