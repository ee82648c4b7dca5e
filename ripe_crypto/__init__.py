"""
ripe_crypto
===========
AES-CBC and RSA helpers plus a self-describing text envelope for moving
encrypted payloads through text-only pipelines.

Modules:
    codec       hex / base64 conversion and length formulas
    aes         AES-CBC (128/192/256) with PKCS#7 padding
    rsa         RSA PKCS#1 v1.5 with block chunking, key-pair generation
    transport   <length>:<iv>:[<client id>:]<base64> envelopes
    keys        PEM key files and transportable key strings

Quick start:

    key  = AESCipher.generate_key(32)
    text = prepare_data(b"log line", key, "client1")
    assert decrypt_envelope(text, key) == b"log line"

License: Apache 2.0
"""

__version__  = "4.0.0"
__project__  = "ripe_crypto"

from .aes        import AESCipher, expected_aes_cipher_length
from .rsa        import KeyPair, RSACipher, max_rsa_block_size
from .transport  import Envelope, prepare_data, expected_data_size, parse_envelope, decrypt_envelope
from .keys       import write_rsa_key_pair, read_key, generate_rsa_key_pair_base64, split_key_pair_base64
from .codec      import (hex_encode, hex_decode, normalize_hex, base64_encode,
                         base64_decode, expected_base64_length)
from .exceptions import (
    RipeError,
    InvalidKeySizeError,
    InvalidIVSizeError,
    InvalidEncodingError,
    DecryptionError,
    KeyGenerationError,
    InvalidKeyError,
    WrongPassphraseError,
    KeyFileError,
    ParseError,
)


def version() -> str:
    return __version__


__all__ = [
    "AESCipher",
    "RSACipher",
    "KeyPair",
    "Envelope",
    "expected_aes_cipher_length",
    "max_rsa_block_size",
    "prepare_data",
    "expected_data_size",
    "parse_envelope",
    "decrypt_envelope",
    "write_rsa_key_pair",
    "read_key",
    "generate_rsa_key_pair_base64",
    "split_key_pair_base64",
    "hex_encode",
    "hex_decode",
    "normalize_hex",
    "base64_encode",
    "base64_decode",
    "expected_base64_length",
    "RipeError",
    "InvalidKeySizeError",
    "InvalidIVSizeError",
    "InvalidEncodingError",
    "DecryptionError",
    "KeyGenerationError",
    "InvalidKeyError",
    "WrongPassphraseError",
    "KeyFileError",
    "ParseError",
    "version",
]
