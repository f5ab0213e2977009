"""Header framing for the aes128gcm content encoding."""

import struct
from dataclasses import dataclass
from typing import Tuple

from .types import (
    DecodeError,
    SALT_SIZE,
    RECORD_SIZE,
    PUBLIC_KEY_SIZE,
    TAG_SIZE,
)

_RECORD_SIZE_FORMAT = ">I"


@dataclass
class ContentHeader:
    """aes128gcm header preceding the encrypted record."""
    salt: bytes  # 16 bytes
    key_id: bytes  # ephemeral public key, 65 bytes
    record_size: int = RECORD_SIZE


def encode_header(header: ContentHeader) -> bytes:
    """
    Encode a content header to bytes.

    Format:
        [0-15]   salt (16 bytes)
        [16-19]  record size (uint32, big-endian)
        [20]     key id length
        [21+]    key id

    Raises:
        ValueError: If the salt or key id has an invalid size
    """
    if len(header.salt) != SALT_SIZE:
        raise ValueError(f"Salt must be {SALT_SIZE} bytes, got {len(header.salt)}")

    if len(header.key_id) > 255:
        raise ValueError(f"Key id too long: {len(header.key_id)} bytes")

    return (
        header.salt
        + struct.pack(_RECORD_SIZE_FORMAT, header.record_size)
        + bytes([len(header.key_id)])
        + header.key_id
    )


def decode_body(data: bytes) -> Tuple[ContentHeader, bytes]:
    """
    Split an encrypted body into its header and ciphertext.

    Returns:
        Tuple of (header, ciphertext including tag)

    Raises:
        DecodeError: If the body is truncated or the key id is not a P-256 point
    """
    minimum = SALT_SIZE + 4 + 1
    if len(data) < minimum:
        raise DecodeError(f"Body too short: {len(data)} bytes (minimum {minimum})")

    salt = data[:SALT_SIZE]
    (record_size,) = struct.unpack(_RECORD_SIZE_FORMAT, data[SALT_SIZE : SALT_SIZE + 4])
    key_id_length = data[SALT_SIZE + 4]

    if key_id_length != PUBLIC_KEY_SIZE:
        raise DecodeError(f"Key id must be {PUBLIC_KEY_SIZE} bytes, got {key_id_length}")

    offset = minimum
    key_id = data[offset : offset + key_id_length]
    offset += key_id_length

    ciphertext = data[offset:]
    if len(ciphertext) < TAG_SIZE + 1:
        raise DecodeError(f"Ciphertext too short: {len(ciphertext)} bytes")

    return ContentHeader(salt=salt, key_id=key_id, record_size=record_size), ciphertext
