"""Fixed test data for Web Push tests."""

# P-256 private scalar 1; its public key is the curve generator G
GENERATOR_PRIVATE_HEX = "00" * 31 + "01"
GENERATOR_PUBLIC_HEX = (
    "04"
    "6b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296"
    "4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5"
)

# Order of the P-256 base point
P256_ORDER_HEX = "ffffffff00000000ffffffffffffffffbce6faada7179e84f3b9cac2fc632551"

# Subscriber private scalar used by encryption tests
SUBSCRIBER_PRIVATE_HEX = "ab5757a70dd4a53e553a6bbf71ffefea2874ec07a6b379e3c48f895a02dc33de"
AUTH_SECRET_HEX = "05305932a1c7eabe13b6cec9fda48882"

FIXED_SALT_HEX = "0c6bfaadad67958803092d454676f397"
FIXED_NOW = 1_700_000_000

ENDPOINT = "https://push.example.com/wpush/v2/gAAAAABkXYZ"
ENDPOINT_ORIGIN = "https://push.example.com"

TEST_PAYLOADS = {
    "empty": b"",
    "short": b"Test",
    "json": b'{"title": "Hello", "body": "World"}',
    "utf8": "Café ☕ 你好".encode("utf-8"),
    "binary": bytes(range(256)),
    "max": b"A" * 4079,
}
