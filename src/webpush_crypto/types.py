"""Type definitions and constants for Web Push encryption."""

from enum import Enum


# Curve constants (P-256)
PUBLIC_KEY_SIZE = 65  # 0x04 || X(32) || Y(32)
PRIVATE_KEY_SIZE = 32
COORDINATE_SIZE = 32
UNCOMPRESSED_POINT_PREFIX = 0x04

# aes128gcm content encoding constants
AUTH_SECRET_SIZE = 16
SALT_SIZE = 16
KEY_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16
RECORD_SIZE = 4096
RECORD_DELIMITER = b"\x02"
HEADER_SIZE = SALT_SIZE + 4 + 1 + PUBLIC_KEY_SIZE  # 86
MAX_PAYLOAD_SIZE = RECORD_SIZE - TAG_SIZE - len(RECORD_DELIMITER)  # single record

# HKDF info strings
WEBPUSH_INFO = b"WebPush: info\x00"
KEY_INFO = b"Content-Encoding: aes128gcm\x00"
NONCE_INFO = b"Content-Encoding: nonce\x00"

# VAPID constants
JOSE_SIGNATURE_SIZE = 64
DEFAULT_TOKEN_EXPIRATION = 12 * 60 * 60
DEFAULT_TTL = 28 * 24 * 60 * 60
CONTENT_ENCODING = "aes128gcm"
CONTENT_TYPE = "application/octet-stream"
BODY_EXCERPT_LENGTH = 200


class PushErrorKind(Enum):
    """Classification of a non-success push service response."""
    AUTHENTICATION_FAILED = "authentication_failed"
    SERVICE_UNAVAILABLE = "service_unavailable"
    UNEXPECTED_STATUS = "unexpected_status"


# Exception types
class WebPushError(Exception):
    """Base exception for Web Push errors."""
    pass


class DecodeError(WebPushError, ValueError):
    """Malformed base64, key, point, secret, signature or body."""
    pass


class AuthError(DecodeError):
    """Authenticated decryption failed (tag mismatch)."""
    pass


class EncryptionError(WebPushError):
    """Payload could not be encrypted."""
    pass


class InvalidKeyPairError(WebPushError):
    """Public and private key do not belong together."""
    pass


class PushServiceError(WebPushError):
    """The push service answered with a non-success status."""

    def __init__(self, kind: PushErrorKind, status_code: int, body_excerpt: str = "") -> None:
        self.kind = kind
        self.status_code = status_code
        self.body_excerpt = body_excerpt
        super().__init__(f"{kind.value} ({status_code}): {body_excerpt}")
