"""
webpush-crypto - Web Push message encryption and VAPID tokens

Builds the two artifacts a push service needs: an ``aes128gcm`` encrypted
body (P-256 ECDH + HKDF-SHA256 + AES-128-GCM) and an ES256-signed VAPID token.
"""

from .encoding import encode_base64url, decode_base64url, concat_bytes
from .keys import (
    generate_keypair,
    public_key_from_bytes,
    public_key_to_bytes,
    private_key_from_bytes,
    private_key_to_bytes,
    public_key_from_der,
    public_key_to_der,
    private_key_from_der,
    private_key_to_der,
    validate_key_pair,
)
from .kdf import ecdh, hkdf_sha256
from .jose import der_to_jose, jose_to_der
from .vapid import VapidKeys, build_token, parse_token, verify_token, validate_subject
from .record import ContentHeader, encode_header, decode_body
from .crypto import encrypt_body, decrypt_body
from .models import Urgency, SubscriptionState, Subscription, Notification
from .provider import (
    VapidKeysProvider,
    StaticVapidKeysProvider,
    Base64VapidKeysProvider,
    CallableVapidKeysProvider,
    AsyncOnceCell,
)
from .client import (
    WebPush,
    WebPushConfig,
    PushRequest,
    audience_from_endpoint,
    get_subscription_state,
)
from .types import (
    WebPushError,
    DecodeError,
    AuthError,
    EncryptionError,
    InvalidKeyPairError,
    PushServiceError,
    PushErrorKind,
    PUBLIC_KEY_SIZE,
    PRIVATE_KEY_SIZE,
    AUTH_SECRET_SIZE,
    HEADER_SIZE,
    RECORD_SIZE,
    MAX_PAYLOAD_SIZE,
    DEFAULT_TTL,
    DEFAULT_TOKEN_EXPIRATION,
)

__version__ = "0.1.0"

__all__ = [
    # Encoding
    "encode_base64url",
    "decode_base64url",
    "concat_bytes",
    # Keys
    "generate_keypair",
    "public_key_from_bytes",
    "public_key_to_bytes",
    "private_key_from_bytes",
    "private_key_to_bytes",
    "public_key_from_der",
    "public_key_to_der",
    "private_key_from_der",
    "private_key_to_der",
    "validate_key_pair",
    # Key derivation
    "ecdh",
    "hkdf_sha256",
    # Signatures
    "der_to_jose",
    "jose_to_der",
    # VAPID
    "VapidKeys",
    "build_token",
    "parse_token",
    "verify_token",
    "validate_subject",
    # Record framing
    "ContentHeader",
    "encode_header",
    "decode_body",
    # Crypto
    "encrypt_body",
    "decrypt_body",
    # Models
    "Urgency",
    "SubscriptionState",
    "Subscription",
    "Notification",
    # Providers
    "VapidKeysProvider",
    "StaticVapidKeysProvider",
    "Base64VapidKeysProvider",
    "CallableVapidKeysProvider",
    "AsyncOnceCell",
    # Client
    "WebPush",
    "WebPushConfig",
    "PushRequest",
    "audience_from_endpoint",
    "get_subscription_state",
    # Errors
    "WebPushError",
    "DecodeError",
    "AuthError",
    "EncryptionError",
    "InvalidKeyPairError",
    "PushServiceError",
    "PushErrorKind",
    # Constants
    "PUBLIC_KEY_SIZE",
    "PRIVATE_KEY_SIZE",
    "AUTH_SECRET_SIZE",
    "HEADER_SIZE",
    "RECORD_SIZE",
    "MAX_PAYLOAD_SIZE",
    "DEFAULT_TTL",
    "DEFAULT_TOKEN_EXPIRATION",
]
