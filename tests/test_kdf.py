"""Tests for ECDH and HKDF."""

import hashlib
import hmac

import pytest

from webpush_crypto.kdf import ecdh, hkdf_sha256
from webpush_crypto.keys import generate_keypair


def _reference_hkdf(ikm: bytes, salt: bytes, info: bytes, length: int) -> bytes:
    prk = hmac.new(salt, ikm, hashlib.sha256).digest()
    return hmac.new(prk, info + b"\x01", hashlib.sha256).digest()[:length]


class TestEcdh:
    """Test P-256 key agreement."""

    def test_shared_secret_agrees(self) -> None:
        """Both sides compute the same 32-byte secret."""
        alice_private, alice_public = generate_keypair()
        bob_private, bob_public = generate_keypair()

        alice_secret = ecdh(alice_private, bob_public)
        bob_secret = ecdh(bob_private, alice_public)

        assert alice_secret == bob_secret
        assert len(alice_secret) == 32

    def test_different_peers_different_secrets(self) -> None:
        private_key, _ = generate_keypair()
        _, peer1 = generate_keypair()
        _, peer2 = generate_keypair()

        assert ecdh(private_key, peer1) != ecdh(private_key, peer2)


class TestHkdf:
    """Test single-block HKDF-SHA256."""

    IKM = bytes(range(32))
    SALT = bytes(range(100, 116))
    INFO = b"Content-Encoding: aes128gcm\x00"

    @pytest.mark.parametrize("length", [1, 12, 16, 32])
    def test_matches_hmac_construction(self, length: int) -> None:
        """Output equals HMAC(HMAC(salt, ikm), info || 0x01)."""
        expected = _reference_hkdf(self.IKM, self.SALT, self.INFO, length)
        assert hkdf_sha256(self.IKM, self.SALT, self.INFO, length) == expected

    def test_deterministic(self) -> None:
        first = hkdf_sha256(self.IKM, self.SALT, self.INFO, 32)
        second = hkdf_sha256(self.IKM, self.SALT, self.INFO, 32)

        assert first == second

    def test_every_input_matters(self) -> None:
        """Flipping one byte of any input changes the output."""
        baseline = hkdf_sha256(self.IKM, self.SALT, self.INFO, 32)

        def flip(data: bytes) -> bytes:
            return bytes([data[0] ^ 0x01]) + data[1:]

        assert hkdf_sha256(flip(self.IKM), self.SALT, self.INFO, 32) != baseline
        assert hkdf_sha256(self.IKM, flip(self.SALT), self.INFO, 32) != baseline
        assert hkdf_sha256(self.IKM, self.SALT, flip(self.INFO), 32) != baseline

    def test_shorter_output_is_prefix(self) -> None:
        full = hkdf_sha256(self.IKM, self.SALT, self.INFO, 32)
        assert hkdf_sha256(self.IKM, self.SALT, self.INFO, 12) == full[:12]

    @pytest.mark.parametrize("length", [0, 33, 64])
    def test_rejects_multi_block_lengths(self, length: int) -> None:
        with pytest.raises(ValueError, match="1..32"):
            hkdf_sha256(self.IKM, self.SALT, self.INFO, length)
