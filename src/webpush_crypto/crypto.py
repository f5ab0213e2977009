"""Encryption and decryption of Web Push message bodies (aes128gcm)."""

import os
from typing import Callable, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .encoding import concat_bytes
from .kdf import ecdh, hkdf_sha256
from .keys import generate_keypair, public_key_from_bytes, public_key_to_bytes
from .record import ContentHeader, encode_header, decode_body
from .types import (
    AuthError,
    DecodeError,
    EncryptionError,
    AUTH_SECRET_SIZE,
    SALT_SIZE,
    KEY_SIZE,
    NONCE_SIZE,
    RECORD_SIZE,
    RECORD_DELIMITER,
    MAX_PAYLOAD_SIZE,
    WEBPUSH_INFO,
    KEY_INFO,
    NONCE_INFO,
)


def encrypt_body(
    payload: bytes,
    p256dh: bytes,
    auth_secret: bytes,
    random_bytes: Callable[[int], bytes] = os.urandom,
) -> bytes:
    """
    Encrypt a push message payload for a subscriber.

    A fresh ephemeral key pair and salt are used for every call. The payload
    is sent as a single record followed by the 0x02 delimiter.

    Args:
        payload: Message bytes
        p256dh: Subscriber public key, 65-byte uncompressed point
        auth_secret: Subscriber auth secret, 16 bytes
        random_bytes: Source of the salt (must be cryptographically secure)

    Returns:
        Header (86 bytes) followed by ciphertext and tag

    Raises:
        DecodeError: If the subscriber key or auth secret is invalid
        EncryptionError: If the payload does not fit in one record
    """
    _check_auth_secret(auth_secret)
    subscriber_key = public_key_from_bytes(p256dh)

    if len(payload) > MAX_PAYLOAD_SIZE:
        raise EncryptionError(f"Payload too large: {len(payload)} bytes (max {MAX_PAYLOAD_SIZE})")

    ephemeral_private, ephemeral_public = generate_keypair()
    ephemeral_bytes = public_key_to_bytes(ephemeral_public)

    salt = random_bytes(SALT_SIZE)
    if len(salt) != SALT_SIZE:
        raise EncryptionError(f"Random source returned {len(salt)} bytes, expected {SALT_SIZE}")

    shared_secret = ecdh(ephemeral_private, subscriber_key)
    key, nonce = _derive_key_and_nonce(shared_secret, auth_secret, p256dh, ephemeral_bytes, salt)

    ciphertext = AESGCM(key).encrypt(nonce, payload + RECORD_DELIMITER, None)

    header = ContentHeader(salt=salt, key_id=ephemeral_bytes, record_size=RECORD_SIZE)
    return concat_bytes(encode_header(header), ciphertext)


def decrypt_body(
    body: bytes,
    private_key: ec.EllipticCurvePrivateKey,
    auth_secret: bytes,
    unpad: bool = True,
) -> bytes:
    """
    Decrypt an aes128gcm body as the subscriber.

    Args:
        body: Encrypted body produced by :func:`encrypt_body`
        private_key: Subscriber private key
        auth_secret: Subscriber auth secret, 16 bytes
        unpad: Strip the delimiter and padding (default: True)

    Returns:
        The payload, or the raw record plaintext when ``unpad`` is False

    Raises:
        DecodeError: If the body is malformed or has no delimiter
        AuthError: If the authentication tag does not verify
    """
    _check_auth_secret(auth_secret)
    header, ciphertext = decode_body(body)

    if len(ciphertext) > header.record_size:
        raise DecodeError(
            f"Record of {len(ciphertext)} bytes exceeds record size {header.record_size}"
        )

    ephemeral_key = public_key_from_bytes(header.key_id)
    receiver_bytes = public_key_to_bytes(private_key.public_key())

    shared_secret = ecdh(private_key, ephemeral_key)
    key, nonce = _derive_key_and_nonce(
        shared_secret, auth_secret, receiver_bytes, header.key_id, header.salt
    )

    try:
        plaintext = AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise AuthError("Authentication tag mismatch") from e

    if not unpad:
        return plaintext

    return _unpad(plaintext)


def _derive_key_and_nonce(
    shared_secret: bytes,
    auth_secret: bytes,
    receiver_key: bytes,
    sender_key: bytes,
    salt: bytes,
) -> Tuple[bytes, bytes]:
    """Derive the content-encryption key and nonce for one message."""
    info = concat_bytes(WEBPUSH_INFO, receiver_key, sender_key)
    derived_secret = hkdf_sha256(shared_secret, auth_secret, info, 32)

    key = hkdf_sha256(derived_secret, salt, KEY_INFO, KEY_SIZE)
    nonce = hkdf_sha256(derived_secret, salt, NONCE_INFO, NONCE_SIZE)
    return key, nonce


def _check_auth_secret(auth_secret: bytes) -> None:
    if len(auth_secret) != AUTH_SECRET_SIZE:
        raise DecodeError(f"Auth secret must be {AUTH_SECRET_SIZE} bytes, got {len(auth_secret)}")


def _unpad(plaintext: bytes) -> bytes:
    """Strip trailing zero padding and the last-record delimiter."""
    stripped = plaintext.rstrip(b"\x00")
    if not stripped.endswith(RECORD_DELIMITER):
        raise DecodeError("Record is missing the 0x02 delimiter")
    return stripped[:-1]
