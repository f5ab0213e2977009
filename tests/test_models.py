"""Tests for subscription and notification models."""

import pytest

from webpush_crypto.encoding import encode_base64url
from webpush_crypto.models import Notification, Subscription, Urgency
from webpush_crypto.types import DecodeError
from .test_vectors import ENDPOINT, GENERATOR_PUBLIC_HEX

P256DH = bytes.fromhex(GENERATOR_PUBLIC_HEX)
AUTH = bytes(range(16))


class TestSubscription:
    """Test subscription construction."""

    def test_from_base64(self) -> None:
        subscription = Subscription.from_base64(ENDPOINT, encode_base64url(P256DH), encode_base64url(AUTH))
        assert subscription == Subscription(ENDPOINT, P256DH, AUTH)

    def test_from_dict(self) -> None:
        data = {
            "endpoint": ENDPOINT,
            "expirationTime": None,
            "keys": {"p256dh": encode_base64url(P256DH), "auth": encode_base64url(AUTH)},
        }
        assert Subscription.from_dict(data) == Subscription(ENDPOINT, P256DH, AUTH)

    def test_from_dict_missing_keys(self) -> None:
        with pytest.raises(DecodeError, match="missing"):
            Subscription.from_dict({"endpoint": ENDPOINT})

    def test_from_base64_invalid(self) -> None:
        with pytest.raises(DecodeError):
            Subscription.from_base64(ENDPOINT, "!!!", "AAAA")


class TestNotification:
    """Test notification equality and construction."""

    def test_from_text(self) -> None:
        notification = Notification.from_text("Café")
        assert notification.payload == "Café".encode("utf-8")
        assert notification.ttl is None

    def test_equal_when_all_fields_equal(self) -> None:
        first = Notification(b"hi", ttl=60, topic="t", urgency=Urgency.LOW)
        second = Notification(b"hi", ttl=60, topic="t", urgency=Urgency.LOW)

        assert first == second
        assert hash(first) == hash(second)

    @pytest.mark.parametrize(
        "other",
        [
            Notification(b"ho", ttl=60, topic="t", urgency=Urgency.LOW),
            Notification(b"hi", ttl=61, topic="t", urgency=Urgency.LOW),
            Notification(b"hi", ttl=60, topic="u", urgency=Urgency.LOW),
            Notification(b"hi", ttl=60, topic="t", urgency=Urgency.HIGH),
            Notification(b"hi", ttl=None, topic="t", urgency=Urgency.LOW),
        ],
    )
    def test_differs_on_any_field(self, other: Notification) -> None:
        assert Notification(b"hi", ttl=60, topic="t", urgency=Urgency.LOW) != other

    def test_urgency_values(self) -> None:
        assert [u.value for u in Urgency] == ["very-low", "low", "normal", "high"]
