"""
RSA — public-key encryption with block chunking
===============================================
RSA with PKCS#1 v1.5 encryption padding.

A single RSA operation can only carry a bounded amount of plaintext. The
per-block limit used here is

    max_rsa_block_size(bits) = (bits - 384) // 8 + 7

which leaves 41 bytes of every block unused; PKCS#1 v1.5 needs 11.
2048-bit keys therefore take 215 bytes per block.

Longer messages are split into ordered blocks of at most that size. Each
block is encrypted on its own to exactly one modulus length of output, and
the blocks are joined with RSA_BLOCK_DELIMITER:

    block_0 || ":" || block_1 || ":" || ... || block_n

Because every ciphertext block has the same width, reassembly walks the
buffer in fixed strides and checks the delimiter at each boundary.

PKCS#1 v1.5 gives no integrity guarantee. OpenSSL builds with implicit
rejection return a deterministic pseudo-random plaintext for a ciphertext
that does not unpad, instead of failing, so decrypting with the wrong
private key may return garbage rather than raise DecryptionError. Callers
that need tamper or wrong-key detection must authenticate the plaintext
themselves (for example by wrapping it in an AES envelope).

Keys travel as PEM text: SubjectPublicKeyInfo for public keys, PKCS#8
(optionally passphrase-encrypted) for private keys.

Dependencies: cryptography >= 41.0
"""

import logging
from dataclasses import dataclass
from typing import List, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from . import codec
from .constants import (
    BITS_PER_BYTE,
    DEFAULT_RSA_LENGTH,
    RSA_BLOCK_DELIMITER,
    RSA_BLOCK_OVERHEAD_BITS,
    RSA_PUBLIC_EXPONENT,
)
from .exceptions import (
    DecryptionError,
    InvalidKeyError,
    KeyGenerationError,
    WrongPassphraseError,
)
from .memory import wiped, zeroize

logger = logging.getLogger(__name__)

MIN_RSA_LENGTH = 1024

PemLike = Union[str, bytes]


@dataclass(frozen=True)
class KeyPair:
    """PEM-encoded RSA key pair. The caller owns storage and disposal."""
    private_key: str
    public_key: str


def max_rsa_block_size(key_bits: int) -> int:
    """Largest plaintext chunk encrypted as one RSA block for a key_bits modulus."""
    return (key_bits - RSA_BLOCK_OVERHEAD_BITS) // BITS_PER_BYTE + 7


def _pem_bytes(pem: PemLike) -> bytes:
    return pem.encode("ascii") if isinstance(pem, str) else bytes(pem)


def load_public_key(pem: PemLike) -> rsa.RSAPublicKey:
    try:
        key = serialization.load_pem_public_key(_pem_bytes(pem))
    except (ValueError, UnicodeEncodeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyError("Not a valid PEM public key.") from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKeyError(f"Expected an RSA public key, got {type(key).__name__}.")
    return key


def load_private_key(pem: PemLike, secret: str = "") -> rsa.RSAPrivateKey:
    """
    Load a PEM private key, unlocking it with secret when it is encrypted.
    A secret passed for an unencrypted key is ignored.
    """
    try:
        data = _pem_bytes(pem)
    except UnicodeEncodeError as e:
        raise InvalidKeyError("Not a valid PEM private key.") from e
    encrypted = b"ENCRYPTED" in data
    password = secret.encode("utf-8") if encrypted and secret else None
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except TypeError as e:
        raise WrongPassphraseError("Private key is encrypted; a passphrase is required.") from e
    except ValueError as e:
        if encrypted:
            raise WrongPassphraseError("Could not unlock private key; wrong passphrase?") from e
        raise InvalidKeyError("Not a valid PEM private key.") from e
    except UnsupportedAlgorithm as e:
        raise InvalidKeyError("Unsupported private key algorithm.") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKeyError(f"Expected an RSA private key, got {type(key).__name__}.")
    return key


def _split(data: bytes, size: int) -> List[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)] or [b""]


class RSACipher:
    """Stateless RSA operations on PEM keys."""

    DEFAULT_KEY_SIZE = DEFAULT_RSA_LENGTH

    @staticmethod
    def _padding():
        return padding.PKCS1v15()

    @classmethod
    def generate_key_pair(cls, bits: int = DEFAULT_RSA_LENGTH,
                          secret: str = "") -> KeyPair:
        """
        Generate a fresh key pair of `bits` modulus size.
        A non-empty secret encrypts the private key PEM.
        """
        if bits < MIN_RSA_LENGTH:
            raise KeyGenerationError(
                f"RSA key size must be at least {MIN_RSA_LENGTH} bits, got {bits}."
            )
        try:
            private_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=bits,
            )
        except ValueError as e:
            raise KeyGenerationError(f"Unsupported RSA key size {bits}: {e}") from e

        if secret:
            encryption = serialization.BestAvailableEncryption(secret.encode("utf-8"))
        else:
            encryption = serialization.NoEncryption()
        private_pem = private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            encryption,
        )
        public_pem = private_key.public_key().public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        logger.debug("Generated RSA-%d key pair (encrypted=%s)", bits, bool(secret))
        return KeyPair(private_key=private_pem.decode("ascii"),
                       public_key=public_pem.decode("ascii"))

    @classmethod
    def encrypt(cls, data: Union[str, bytes], public_key_pem: PemLike) -> bytes:
        """
        Encrypt with the recipient's public key.
        Data longer than max_rsa_block_size() is chunked into several blocks.
        """
        key = load_public_key(public_key_pem)
        block_size = max_rsa_block_size(key.key_size)
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        with wiped(raw) as plain:
            blocks = [key.encrypt(bytes(chunk), cls._padding())
                      for chunk in _split(bytes(plain), block_size)]
        logger.debug("RSA-%d encrypted %d bytes in %d block(s)",
                     key.key_size, len(raw), len(blocks))
        return RSA_BLOCK_DELIMITER.join(blocks)

    @classmethod
    def decrypt(cls, data: bytes, private_key_pem: PemLike,
                secret: str = "") -> bytes:
        """Decrypt output of encrypt(), reassembling blocks in order."""
        key = load_private_key(private_key_pem, secret)
        width = (key.key_size + BITS_PER_BYTE - 1) // BITS_PER_BYTE
        stride = width + len(RSA_BLOCK_DELIMITER)
        data = bytes(data)
        if not data or (len(data) + len(RSA_BLOCK_DELIMITER)) % stride:
            raise DecryptionError(
                f"Ciphertext length {len(data)} does not match RSA-{key.key_size} blocks."
            )

        count = (len(data) + len(RSA_BLOCK_DELIMITER)) // stride
        out = bytearray()
        try:
            for i in range(count):
                start = i * stride
                if i and data[start - len(RSA_BLOCK_DELIMITER):start] != RSA_BLOCK_DELIMITER:
                    raise DecryptionError(f"Missing delimiter before RSA block {i}.")
                try:
                    out += key.decrypt(data[start:start + width], cls._padding())
                except ValueError as e:
                    raise DecryptionError("RSA decryption failed.") from e
            logger.debug("RSA-%d decrypted %d block(s)", key.key_size, count)
            return bytes(out)
        finally:
            zeroize(out)

    # ── text helpers ─────────────────────────────────────────────────────────

    @classmethod
    def encrypt_text(cls, data: Union[str, bytes], public_key_pem: PemLike,
                     raw: bool = False) -> Union[str, bytes]:
        """Encrypt and return base64 text, or the raw ciphertext when raw=True."""
        ct = cls.encrypt(data, public_key_pem)
        return ct if raw else codec.base64_encode(ct)

    @classmethod
    def decrypt_text(cls, data: Union[str, bytes], private_key_pem: PemLike,
                     is_base64: bool = True, is_hex: bool = False,
                     secret: str = "") -> bytes:
        """
        Decrypt encoded ciphertext.
        Base64 decoding runs before hex decoding when both flags are set.
        """
        payload = data.encode("latin-1") if isinstance(data, str) else bytes(data)
        if is_base64:
            payload = codec.base64_decode(payload)
        if is_hex:
            payload = codec.hex_decode(payload.decode("latin-1"))
        return cls.decrypt(payload, private_key_pem, secret)
