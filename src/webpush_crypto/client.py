"""
Web Push client.

The WebPush client turns a subscription and a payload into everything an HTTP
transport needs to deliver a push message:

- The encrypted ``aes128gcm`` body
- The ``Authorization`` header carrying a signed VAPID token
- Delivery headers (``TTL``, ``Urgency``, ``Topic``)

and classifies the push service's response status afterwards.

Example usage:
    ```python
    push = WebPush("mailto:ops@example.com", VapidKeys.from_base64(pub, priv))

    request = await push.prepare(
        Subscription.from_dict(subscription_json),
        Notification.from_text("Hello!", urgency=Urgency.HIGH),
    )
    response = await http.post(request.endpoint, headers=request.headers, content=request.body)

    state = get_subscription_state(response.status_code, response.text)
    ```
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Union
from urllib.parse import urlsplit

from .crypto import encrypt_body
from .encoding import encode_base64url
from .models import Notification, Subscription, SubscriptionState, Urgency
from .provider import LazyVapidKeys, StaticVapidKeysProvider, VapidKeysProvider
from .types import (
    DecodeError,
    PushErrorKind,
    PushServiceError,
    DEFAULT_TTL,
    DEFAULT_TOKEN_EXPIRATION,
    CONTENT_ENCODING,
    CONTENT_TYPE,
    BODY_EXCERPT_LENGTH,
)
from .vapid import VapidKeys, build_token, validate_subject

logger = logging.getLogger(__name__)

_ACTIVE_STATUSES = frozenset({200, 201, 202})
_EXPIRED_STATUSES = frozenset({404, 410})
_AUTH_FAILED_STATUSES = frozenset({401, 403})
_UNAVAILABLE_STATUSES = frozenset({502, 503})

_DEFAULT_PORTS = {"https": 443, "http": 80}


@dataclass
class WebPushConfig:
    """Configuration for the Web Push client."""
    default_ttl: int = DEFAULT_TTL
    token_expiration: int = DEFAULT_TOKEN_EXPIRATION
    random_bytes: Callable[[int], bytes] = field(default=os.urandom)
    clock: Callable[[], float] = field(default=time.time)


@dataclass
class PushRequest:
    """A ready-to-send push message."""
    endpoint: str
    headers: dict[str, str]
    body: bytes


def audience_from_endpoint(endpoint: str) -> str:
    """
    Return the origin of a push endpoint.

    Userinfo is dropped, the host is lowercased and the port is kept only
    when it is not the default for the scheme.

    Raises:
        DecodeError: If the endpoint is not an absolute URL or has an invalid port
    """
    parts = urlsplit(endpoint)
    if not parts.scheme or not parts.hostname:
        raise DecodeError(f"Endpoint is not an absolute URL: {endpoint!r}")

    try:
        port = parts.port
    except ValueError as e:
        raise DecodeError(f"Endpoint has an invalid port: {endpoint!r}") from e

    scheme = parts.scheme.lower()
    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"

    if port is None or port == _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def get_subscription_state(
    status_code: int,
    body: Optional[Union[str, bytes]] = None,
) -> SubscriptionState:
    """
    Classify a push service response.

    Args:
        status_code: HTTP status of the push request
        body: Response body, used for error diagnostics

    Returns:
        ACTIVE for 200/201/202, EXPIRED for 404/410

    Raises:
        PushServiceError: For any other status
    """
    if status_code in _ACTIVE_STATUSES:
        return SubscriptionState.ACTIVE

    if status_code in _EXPIRED_STATUSES:
        return SubscriptionState.EXPIRED

    if status_code in _AUTH_FAILED_STATUSES:
        kind = PushErrorKind.AUTHENTICATION_FAILED
    elif status_code in _UNAVAILABLE_STATUSES:
        kind = PushErrorKind.SERVICE_UNAVAILABLE
    else:
        kind = PushErrorKind.UNEXPECTED_STATUS

    excerpt = _excerpt(body)
    logger.warning("Push service returned %d (%s)", status_code, kind.value)
    raise PushServiceError(kind, status_code, excerpt)


class WebPush:
    """
    Builds encrypted, VAPID-authenticated push messages.

    Keys may be given directly or through a provider; a provider is
    consulted once, on first use, and the result is shared by all
    concurrent callers.
    """

    def __init__(
        self,
        subject: str,
        keys: Union[VapidKeys, VapidKeysProvider],
        config: Optional[WebPushConfig] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            subject: Sender contact, ``mailto:`` or ``https://`` URI
            keys: VAPID keys, or a provider resolving them lazily
            config: Optional configuration (default: WebPushConfig())

        Raises:
            ValueError: If the subject is not a mailto: or https: URI
        """
        self.subject = validate_subject(subject)
        self.config = config or WebPushConfig()

        if isinstance(keys, VapidKeys):
            keys = StaticVapidKeysProvider(keys)
        self._keys = LazyVapidKeys(keys)

    @classmethod
    def from_base64(
        cls,
        subject: str,
        public_key: str,
        private_key: str,
        config: Optional[WebPushConfig] = None,
    ) -> "WebPush":
        """Create a client from base64url-encoded VAPID keys."""
        return cls(subject, VapidKeys.from_base64(public_key, private_key), config)

    async def vapid_keys(self) -> VapidKeys:
        """The resolved VAPID key pair."""
        return await self._keys.get()

    async def get_application_server_key(self) -> bytes:
        """The 65-byte public key browsers subscribe with."""
        return (await self.vapid_keys()).application_server_key

    async def get_headers(
        self,
        endpoint: str,
        ttl: Optional[int] = None,
        topic: Optional[str] = None,
        urgency: Optional[Union[Urgency, str]] = None,
    ) -> dict[str, str]:
        """
        Build the HTTP headers for a push request.

        Args:
            endpoint: Subscription endpoint URL
            ttl: Seconds the push service should hold the message (default: 28 days)
            topic: Replaces pending messages with the same topic
            urgency: Delivery urgency

        Returns:
            Header name to value mapping
        """
        keys = await self.vapid_keys()
        token = build_token(
            subject=self.subject,
            audience=audience_from_endpoint(endpoint),
            expiration=self.config.token_expiration,
            private_key=keys.private_key,
            now=self.config.clock(),
        )

        headers = {
            "Authorization": f"vapid t={token}, k={encode_base64url(keys.application_server_key)}",
            "Content-Encoding": CONTENT_ENCODING,
            "Content-Type": CONTENT_TYPE,
            "TTL": str(self.config.default_ttl if ttl is None else ttl),
        }

        if urgency is not None:
            headers["Urgency"] = Urgency(urgency).value

        if topic is not None:
            headers["Topic"] = topic

        return headers

    def get_body(self, payload: bytes, p256dh: bytes, auth: bytes) -> bytes:
        """Encrypt a payload for a subscriber."""
        body = encrypt_body(payload, p256dh, auth, random_bytes=self.config.random_bytes)
        logger.debug("Encrypted %d byte payload into %d byte body", len(payload), len(body))
        return body

    async def prepare(self, subscription: Subscription, notification: Notification) -> PushRequest:
        """
        Build the complete request for one notification.

        Raises:
            DecodeError: If the subscription keys or endpoint are malformed
        """
        headers = await self.get_headers(
            subscription.endpoint,
            ttl=notification.ttl,
            topic=notification.topic,
            urgency=notification.urgency,
        )
        body = self.get_body(notification.payload, subscription.p256dh, subscription.auth)

        logger.debug("Prepared push request for %s", audience_from_endpoint(subscription.endpoint))
        return PushRequest(endpoint=subscription.endpoint, headers=headers, body=body)

    @staticmethod
    def get_subscription_state(
        status_code: int,
        body: Optional[Union[str, bytes]] = None,
    ) -> SubscriptionState:
        """See :func:`get_subscription_state`."""
        return get_subscription_state(status_code, body)


def _excerpt(body: Optional[Union[str, bytes]]) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return body[:BODY_EXCERPT_LENGTH]
