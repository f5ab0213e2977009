"""Subscriptions, notifications and push outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .encoding import decode_base64url
from .types import DecodeError


class Urgency(Enum):
    """Delivery urgency requested from the push service."""
    VERY_LOW = "very-low"
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class SubscriptionState(Enum):
    """State of a subscription after a push attempt."""
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Subscription:
    """A browser push subscription with raw key material."""
    endpoint: str
    p256dh: bytes  # 65-byte uncompressed point
    auth: bytes  # 16 bytes

    @classmethod
    def from_base64(cls, endpoint: str, p256dh: str, auth: str) -> "Subscription":
        """Create a subscription from base64url-encoded keys."""
        return cls(endpoint=endpoint, p256dh=decode_base64url(p256dh), auth=decode_base64url(auth))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Subscription":
        """
        Create a subscription from the browser's ``PushSubscription.toJSON()``.

        Expects ``{"endpoint": ..., "keys": {"p256dh": ..., "auth": ...}}``.

        Raises:
            DecodeError: If a field is missing or not base64url
        """
        try:
            keys = data["keys"]
            return cls.from_base64(data["endpoint"], keys["p256dh"], keys["auth"])
        except (KeyError, TypeError) as e:
            raise DecodeError(f"Invalid subscription data: missing {e}") from e


@dataclass(frozen=True)
class Notification:
    """A message to deliver, with optional delivery hints."""
    payload: bytes
    ttl: Optional[int] = None
    topic: Optional[str] = None
    urgency: Optional[Urgency] = None

    @classmethod
    def from_text(
        cls,
        text: str,
        ttl: Optional[int] = None,
        topic: Optional[str] = None,
        urgency: Optional[Urgency] = None,
    ) -> "Notification":
        """Create a notification with a UTF-8 encoded payload."""
        return cls(payload=text.encode("utf-8"), ttl=ttl, topic=topic, urgency=urgency)
