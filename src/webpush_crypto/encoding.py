"""Base64url and byte helpers."""

import base64
import binascii

from .types import DecodeError


def encode_base64url(data: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_base64url(data: str) -> bytes:
    """
    Decode URL-safe base64, with or without padding.

    Standard-alphabet input (``+`` and ``/``) is accepted as well, since
    browsers and key generators disagree on which one they emit.

    Raises:
        DecodeError: If the input is not valid base64
    """
    if isinstance(data, bytes):
        data = data.decode("ascii", errors="replace")

    cleaned = data.strip().rstrip("=").replace("+", "-").replace("/", "_")
    if len(cleaned) % 4 == 1:
        raise DecodeError(f"Invalid base64url length: {len(cleaned)}")

    try:
        return base64.b64decode(
            cleaned + "=" * (-len(cleaned) % 4),
            altchars=b"-_",
            validate=True,
        )
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64url data: {e}") from e


def concat_bytes(*parts: bytes) -> bytes:
    """Concatenate byte sequences."""
    return b"".join(parts)
