"""
Conversion between DER and JOSE encodings of ECDSA P-256 signatures.

``cryptography`` produces ECDSA signatures as DER ``SEQUENCE { INTEGER r,
INTEGER s }``. JWTs signed with ES256 carry the same two integers as a fixed
64-byte ``r || s`` string instead.
"""

from typing import Tuple

from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from .types import DecodeError, COORDINATE_SIZE, JOSE_SIGNATURE_SIZE

_SEQUENCE_TAG = 0x30
_INTEGER_TAG = 0x02
_LONG_FORM_ONE_BYTE = 0x81


def der_to_jose(der: bytes) -> bytes:
    """
    Convert a DER ECDSA signature to the 64-byte JOSE form.

    Integers shorter than 32 bytes are left-padded with zeros. The sign byte
    DER prepends to integers with the high bit set is dropped.

    Args:
        der: DER-encoded signature

    Returns:
        64 bytes, r || s

    Raises:
        DecodeError: If the DER structure is malformed or uses a length form
            longer than a single extended byte
    """
    if len(der) < 8 or der[0] != _SEQUENCE_TAG:
        raise DecodeError("Signature is not a DER SEQUENCE")

    if der[1] == _LONG_FORM_ONE_BYTE:
        sequence_length = der[2]
        offset = 3
    elif der[1] & 0x80:
        raise DecodeError(f"Unsupported DER length form: 0x{der[1]:02x}")
    else:
        sequence_length = der[1]
        offset = 2

    if sequence_length != len(der) - offset:
        raise DecodeError(
            f"DER sequence length {sequence_length} does not match "
            f"remaining {len(der) - offset} bytes"
        )

    r, offset = _read_integer(der, offset)
    s, offset = _read_integer(der, offset)

    if offset != len(der):
        raise DecodeError("Trailing bytes after DER signature")

    return _fit(r) + _fit(s)


def jose_to_der(jose: bytes) -> bytes:
    """
    Convert a 64-byte JOSE signature back to DER.

    Raises:
        DecodeError: If the signature is not 64 bytes
    """
    if len(jose) != JOSE_SIGNATURE_SIZE:
        raise DecodeError(f"JOSE signature must be {JOSE_SIGNATURE_SIZE} bytes, got {len(jose)}")

    r = int.from_bytes(jose[:COORDINATE_SIZE], "big")
    s = int.from_bytes(jose[COORDINATE_SIZE:], "big")
    return encode_dss_signature(r, s)


def _read_integer(der: bytes, offset: int) -> Tuple[bytes, int]:
    """Read one DER INTEGER, returning its value bytes and the next offset."""
    if offset + 2 > len(der) or der[offset] != _INTEGER_TAG:
        raise DecodeError(f"Expected DER INTEGER at offset {offset}")

    length = der[offset + 1]
    if length == 0 or length & 0x80:
        raise DecodeError(f"Invalid DER INTEGER length: 0x{length:02x}")

    start = offset + 2
    end = start + length
    if end > len(der):
        raise DecodeError("DER INTEGER runs past end of signature")

    return der[start:end], end


def _fit(value: bytes) -> bytes:
    """Right-align an integer's bytes in a 32-byte slot."""
    if len(value) > COORDINATE_SIZE:
        excess = value[: len(value) - COORDINATE_SIZE]
        if any(excess):
            raise DecodeError(f"DER INTEGER too large for P-256: {len(value)} bytes")
        return value[len(value) - COORDINATE_SIZE :]

    return value.rjust(COORDINATE_SIZE, b"\x00")
