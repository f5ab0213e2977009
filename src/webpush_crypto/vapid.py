"""
VAPID key pairs and ES256 bearer tokens.

The push service authenticates the sender with a short-lived JWT signed by
the application server's P-256 key. The matching public key travels next to
the token in the ``Authorization`` header and must equal the
``applicationServerKey`` the browser subscribed with.
"""

import json
import math
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from .encoding import encode_base64url, decode_base64url
from .jose import der_to_jose, jose_to_der
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
from .types import DecodeError, InvalidKeyPairError

JWT_HEADER = {"alg": "ES256", "typ": "JWT"}
SUBJECT_PREFIXES = ("mailto:", "https://")


@dataclass(frozen=True, eq=False)
class VapidKeys:
    """Application server key pair used to sign VAPID tokens."""
    public_key: ec.EllipticCurvePublicKey
    private_key: ec.EllipticCurvePrivateKey

    @property
    def application_server_key(self) -> bytes:
        """The public key as a 65-byte uncompressed point."""
        return public_key_to_bytes(self.public_key)

    @classmethod
    def generate(cls) -> "VapidKeys":
        """Generate a fresh random key pair."""
        private_key, public_key = generate_keypair()
        return cls(public_key, private_key)

    @classmethod
    def from_bytes(cls, public_key: bytes, private_key: bytes, validate: bool = True) -> "VapidKeys":
        """
        Create keys from a 65-byte uncompressed point and a 32-byte scalar.

        Raises:
            DecodeError: If either key is malformed
            InvalidKeyPairError: If ``validate`` is set and the keys don't match
        """
        keys = cls(public_key_from_bytes(public_key), private_key_from_bytes(private_key))
        if validate:
            keys._check_pair()
        return keys

    @classmethod
    def from_base64(cls, public_key: str, private_key: str, validate: bool = True) -> "VapidKeys":
        """Create keys from their base64url encodings."""
        return cls.from_bytes(decode_base64url(public_key), decode_base64url(private_key), validate)

    @classmethod
    def from_der(cls, public_key: bytes, private_key: bytes, validate: bool = True) -> "VapidKeys":
        """Create keys from SubjectPublicKeyInfo and PKCS8 DER."""
        keys = cls(public_key_from_der(public_key), private_key_from_der(private_key))
        if validate:
            keys._check_pair()
        return keys

    def public_key_bytes(self) -> bytes:
        return self.application_server_key

    def private_key_bytes(self) -> bytes:
        return private_key_to_bytes(self.private_key)

    def public_key_base64(self) -> str:
        return encode_base64url(self.public_key_bytes())

    def private_key_base64(self) -> str:
        return encode_base64url(self.private_key_bytes())

    def public_key_der(self) -> bytes:
        return public_key_to_der(self.public_key)

    def private_key_der(self) -> bytes:
        return private_key_to_der(self.private_key)

    def _check_pair(self) -> None:
        if not validate_key_pair(self.public_key, self.private_key):
            raise InvalidKeyPairError("Public key does not match private key")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VapidKeys):
            return NotImplemented
        return (
            self.public_key_bytes() == other.public_key_bytes()
            and self.private_key_bytes() == other.private_key_bytes()
        )

    def __hash__(self) -> int:
        return hash(self.public_key_bytes())

    def __repr__(self) -> str:
        return f"VapidKeys(public_key={self.public_key_base64()!r})"


def validate_subject(subject: str) -> str:
    """
    Check a VAPID subject is a ``mailto:`` or ``https://`` URI.

    Raises:
        ValueError: If the subject has another form
    """
    if not subject.startswith(SUBJECT_PREFIXES):
        raise ValueError("Subject must start with 'mailto:' or 'https://'")
    return subject


def build_token(
    subject: str,
    audience: str,
    expiration: int,
    private_key: ec.EllipticCurvePrivateKey,
    now: Optional[float] = None,
) -> str:
    """
    Build a signed VAPID JWT.

    Args:
        subject: Contact URI of the sender
        audience: Origin of the push service, e.g. ``https://push.example.com``
        expiration: Token lifetime in seconds
        private_key: Application server private key
        now: Current time in Unix seconds (default: system clock)

    Returns:
        Compact JWT ``header.payload.signature``
    """
    if now is None:
        now = time.time()

    payload = {"sub": subject, "aud": audience, "exp": math.floor(now) + expiration}

    signing_input = _encode_segment(JWT_HEADER) + "." + _encode_segment(payload)
    der_signature = private_key.sign(signing_input.encode("ascii"), ec.ECDSA(hashes.SHA256()))

    return signing_input + "." + encode_base64url(der_to_jose(der_signature))


def parse_token(token: str) -> Tuple[dict, dict, bytes]:
    """
    Split a JWT into its decoded header, payload and signature.

    The signature is not checked; see :func:`verify_token`.

    Raises:
        DecodeError: If the token is not three valid segments
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise DecodeError(f"JWT must have 3 segments, got {len(parts)}")

    try:
        header = json.loads(decode_base64url(parts[0]))
        payload = json.loads(decode_base64url(parts[1]))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Invalid JWT segment: {e}") from e

    return header, payload, decode_base64url(parts[2])


def verify_token(token: str, public_key: ec.EllipticCurvePublicKey) -> bool:
    """
    Verify the ES256 signature of a JWT.

    Returns:
        True if the signature is valid, False otherwise

    Raises:
        DecodeError: If the token is malformed
    """
    header, _, signature = parse_token(token)
    if header.get("alg") != JWT_HEADER["alg"]:
        return False

    signing_input = token.rsplit(".", 1)[0].encode("ascii")
    try:
        public_key.verify(jose_to_der(signature), signing_input, ec.ECDSA(hashes.SHA256()))
        return True
    except InvalidSignature:
        return False


def _encode_segment(value: dict) -> str:
    return encode_base64url(json.dumps(value, separators=(",", ":")).encode("utf-8"))
