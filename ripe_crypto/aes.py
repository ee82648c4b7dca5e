"""
AES-CBC — symmetric block encryption
====================================
AES-128/192/256 in Cipher Block Chaining mode with PKCS#7 padding.

CBC needs a fresh, unpredictable 16-byte IV for every message under the
same key. The IV is not secret and travels with the ciphertext (see
transport.prepare_data for the envelope that carries it).

Padding always appends between 1 and 16 bytes, so block-aligned input
still grows by one full block:

    len(ciphertext) == (len(plaintext) // 16 + 1) * 16

Key sizes: 16, 24 or 32 bytes.
IV:        16 bytes.

Dependencies: cryptography >= 41.0
"""

import logging
from typing import Optional, Tuple, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from . import codec
from .constants import AES_BSIZE, AES_KEY_SIZES
from .exceptions import (
    DecryptionError,
    InvalidIVSizeError,
    InvalidKeySizeError,
    ParseError,
)
from .memory import random_bytes, wiped, zeroize

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


def expected_aes_cipher_length(plain_size: int) -> int:
    """Ciphertext length for plain_size bytes of input."""
    return (plain_size // AES_BSIZE + 1) * AES_BSIZE


def _to_bytes(data: Union[str, BytesLike]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class AESCipher:
    """Stateless AES-CBC operations."""

    BLOCK_SIZE = AES_BSIZE
    IV_SIZE    = AES_BSIZE
    KEY_SIZES  = AES_KEY_SIZES

    @classmethod
    def _check(cls, key: BytesLike, iv: BytesLike) -> None:
        if len(key) not in cls.KEY_SIZES:
            raise InvalidKeySizeError(
                f"AES key must be 16, 24 or 32 bytes, got {len(key)} bytes."
            )
        if len(iv) != cls.IV_SIZE:
            raise InvalidIVSizeError(
                f"IV must be {cls.IV_SIZE} bytes, got {len(iv)} bytes."
            )

    @staticmethod
    def generate_key(length: int = 32) -> str:
        """Random key of `length` bytes, returned hex-encoded."""
        if length not in AES_KEY_SIZES:
            raise InvalidKeySizeError(
                f"Key length must be 16, 24 or 32, got {length}."
            )
        with wiped(random_bytes(length)) as key:
            return codec.hex_encode(key)

    @classmethod
    def generate_iv(cls) -> bytes:
        return random_bytes(cls.IV_SIZE)

    @classmethod
    def encrypt(cls, data: Union[str, BytesLike], key: BytesLike,
                iv: BytesLike) -> bytes:
        """
        Pad and encrypt data.
        Returns raw ciphertext of expected_aes_cipher_length(len(data)) bytes.
        """
        cls._check(key, iv)
        with wiped(key) as k, wiped(_to_bytes(data)) as plain:
            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            padded = bytearray(padder.update(plain) + padder.finalize())
            try:
                encryptor = Cipher(algorithms.AES(k), modes.CBC(bytes(iv))).encryptor()
                ct = encryptor.update(padded) + encryptor.finalize()
            finally:
                zeroize(padded)
        logger.debug("AES-%d encrypted %d bytes -> %d bytes",
                     len(key) * 8, len(plain), len(ct))
        return ct

    @classmethod
    def decrypt(cls, ciphertext: BytesLike, key: BytesLike,
                iv: BytesLike) -> bytes:
        """
        Decrypt and strip padding.
        Any alignment or padding problem raises the same DecryptionError.
        """
        cls._check(key, iv)
        with wiped(key) as k:
            try:
                decryptor = Cipher(algorithms.AES(k), modes.CBC(bytes(iv))).decryptor()
                with wiped(decryptor.update(bytes(ciphertext)) + decryptor.finalize()) as padded:
                    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
                    return unpadder.update(padded) + unpadder.finalize()
            except ValueError as e:
                raise DecryptionError("AES decryption failed.") from e

    # ── hex-key helpers ──────────────────────────────────────────────────────

    @classmethod
    def encrypt_text(cls, data: Union[str, BytesLike], hex_key: str,
                     iv: Optional[BytesLike] = None) -> Tuple[bytes, bytes]:
        """
        Encrypt with a hex-encoded key.
        A fresh IV is generated when none is passed.
        Returns (ciphertext, iv).
        """
        if iv is None:
            iv = cls.generate_iv()
        with wiped(codec.hex_decode(hex_key)) as key:
            return cls.encrypt(data, key, iv), bytes(iv)

    @classmethod
    def decrypt_text(cls, data: Union[str, bytes], hex_key: str, iv: str = "",
                     is_base64: bool = False, is_hex: bool = False) -> bytes:
        """
        Decrypt with a hex-encoded key.

        iv         hex IV, compact or grouped. If empty, data is taken to be a
                   prepared envelope and the IV is read from it.
        is_base64  base64-decode data first.
        is_hex     hex-decode data (after base64 decoding when both are set).
        """
        if not iv:
            from .transport import decrypt_envelope
            if isinstance(data, bytes):
                try:
                    data = data.decode("ascii")
                except UnicodeDecodeError as e:
                    raise ParseError("Envelope text must be ASCII.") from e
            return decrypt_envelope(data, hex_key)

        payload = data.encode("latin-1") if isinstance(data, str) else bytes(data)
        if is_base64:
            payload = codec.base64_decode(payload)
        if is_hex:
            payload = codec.hex_decode(payload.decode("latin-1"))
        iv_bytes = codec.hex_decode(codec.compact_hex(iv))
        with wiped(codec.hex_decode(hex_key)) as key:
            return cls.decrypt(payload, key, iv_bytes)
