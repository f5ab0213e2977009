"""ECDH key agreement and HKDF-SHA256 key derivation."""

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

# One HKDF-Expand block
MAX_OUTPUT_LENGTH = 32


def ecdh(private_key: ec.EllipticCurvePrivateKey, public_key: ec.EllipticCurvePublicKey) -> bytes:
    """
    Perform P-256 ECDH key exchange.

    Args:
        private_key: Our private key
        public_key: Their public key

    Returns:
        32-byte shared secret (the X coordinate of the shared point)
    """
    return private_key.exchange(ec.ECDH(), public_key)


def hkdf_sha256(input_key_material: bytes, salt: bytes, info: bytes, length: int) -> bytes:
    """
    Derive key material with HKDF-SHA256.

    Only a single expansion block is produced, which is
    HMAC-SHA256(HMAC-SHA256(salt, ikm), info || 0x01) truncated to ``length``.

    Args:
        input_key_material: Secret input
        salt: Extract salt
        info: Context string for the expand step
        length: Output size, 1 to 32 bytes

    Returns:
        Derived bytes of the requested length
    """
    if not 0 < length <= MAX_OUTPUT_LENGTH:
        raise ValueError(f"HKDF output length must be 1..{MAX_OUTPUT_LENGTH} bytes, got {length}")

    hkdf = HKDF(algorithm=SHA256(), length=length, salt=salt, info=info)
    return hkdf.derive(input_key_material)
