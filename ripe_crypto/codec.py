"""
Codec — hex and base64 conversion
=================================
Binary <-> text helpers used by every other module, plus the length
formula callers use to size base64 output ahead of time.

Hex is always lowercase and unseparated unless it went through
normalize_hex(), which groups it into space-separated byte pairs:

    normalize_hex("67e56fee")  ->  "67 e5 6f ee"
"""

import base64
import binascii
import string
from typing import Union

from .exceptions import InvalidEncodingError

BytesLike = Union[bytes, bytearray, memoryview]

_HEX_DIGITS = frozenset(string.hexdigits)
_HEX_SEPARATORS = " :"


def hex_encode(data: BytesLike) -> str:
    return bytes(data).hex()


def hex_decode(text: str) -> bytes:
    """Decode unseparated hex. Raises InvalidEncodingError on odd length or bad digits."""
    if len(text) % 2:
        raise InvalidEncodingError(f"Hex input has odd length ({len(text)}).")
    if not _HEX_DIGITS.issuperset(text):
        raise InvalidEncodingError("Hex input contains non-hex characters.")
    return bytes.fromhex(text)


def compact_hex(text: str) -> str:
    """Strip the byte-pair separators normalize_hex() may have added."""
    for sep in _HEX_SEPARATORS:
        text = text.replace(sep, "")
    return text


def normalize_hex(text: str) -> str:
    """
    Rewrite hex as lowercase byte pairs separated by single spaces.

    Compact ("67e56fee") and already grouped ("67 e5 6f ee", "67:e5:6f:ee")
    input give the same result, so IVs typed either way are accepted.
    """
    digits = compact_hex(text.strip()).lower()
    if len(digits) % 2:
        raise InvalidEncodingError(f"Hex input has odd length ({len(digits)}).")
    if not _HEX_DIGITS.issuperset(digits):
        raise InvalidEncodingError("Hex input contains non-hex characters.")
    return " ".join(digits[i:i + 2] for i in range(0, len(digits), 2))


def base64_encode(data: BytesLike) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_decode(text: Union[str, bytes]) -> bytes:
    """Strict standard-alphabet decode. Raises InvalidEncodingError on malformed input."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Invalid base64 encoding: {e}") from e


def expected_base64_length(n: int) -> int:
    """Exact length of base64_encode() output for n input bytes."""
    return ((4 * n // 3) + 3) & ~0x03


def string_to_hex(raw: str) -> str:
    """'khn' -> '6b686e'. Each character is treated as one byte (latin-1)."""
    return hex_encode(raw.encode("latin-1"))


def hex_to_string(text: str) -> str:
    """Inverse of string_to_hex()."""
    return hex_decode(text).decode("latin-1")
