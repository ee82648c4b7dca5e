"""
ripe_crypto — AES-CBC tests
Run with:  python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from ripe_crypto import codec
from ripe_crypto.aes import AESCipher, expected_aes_cipher_length
from ripe_crypto.exceptions import (
    DecryptionError,
    InvalidEncodingError,
    InvalidIVSizeError,
    InvalidKeySizeError,
    ParseError,
)

ZERO_KEY = b"\x00" * 16
ZERO_IV  = b"\x00" * 16
MSG      = b"Ripe - encrypted payloads for plain-text pipelines."

# ── primitive ─────────────────────────────────────────────────────────────────
@pytest.mark.parametrize("key_size", [16, 24, 32])
def test_aes_roundtrip(key_size):
    key = os.urandom(key_size)
    iv  = os.urandom(16)
    ct  = AESCipher.encrypt(MSG, key, iv)
    assert ct != MSG
    assert AESCipher.decrypt(ct, key, iv) == MSG

def test_aes_hello_zero_key():
    ct = AESCipher.encrypt(b"hello", ZERO_KEY, ZERO_IV)
    assert len(ct) == 16
    assert AESCipher.decrypt(ct, ZERO_KEY, ZERO_IV) == b"hello"

def test_aes_known_answer_first_block():
    # AES-128 of an all-zero block under an all-zero key
    ct = AESCipher.encrypt(b"\x00" * 16, ZERO_KEY, ZERO_IV)
    assert ct[:16].hex() == "66e94bd4ef8a2c3b884cfa59ca342b2e"

def test_aes_str_input_is_utf8():
    ct = AESCipher.encrypt("héllo", ZERO_KEY, ZERO_IV)
    assert AESCipher.decrypt(ct, ZERO_KEY, ZERO_IV) == "héllo".encode("utf-8")

def test_aes_ciphertext_length_formula():
    for n in range(0, 70):
        ct = AESCipher.encrypt(b"a" * n, ZERO_KEY, ZERO_IV)
        assert len(ct) == expected_aes_cipher_length(n)

def test_aes_block_aligned_input_gets_full_pad_block():
    assert expected_aes_cipher_length(16) == 32
    assert len(AESCipher.encrypt(b"b" * 32, ZERO_KEY, ZERO_IV)) == 48

def test_aes_empty_input():
    ct = AESCipher.encrypt(b"", ZERO_KEY, ZERO_IV)
    assert len(ct) == 16
    assert AESCipher.decrypt(ct, ZERO_KEY, ZERO_IV) == b""

@pytest.mark.parametrize("key_size", [0, 8, 15, 17, 64])
def test_aes_rejects_bad_key_size(key_size):
    with pytest.raises(InvalidKeySizeError):
        AESCipher.encrypt(MSG, b"k" * key_size, ZERO_IV)

@pytest.mark.parametrize("iv_size", [0, 12, 17])
def test_aes_rejects_bad_iv_size(iv_size):
    with pytest.raises(InvalidIVSizeError):
        AESCipher.encrypt(MSG, ZERO_KEY, b"i" * iv_size)

def test_aes_bad_padding_detected():
    ct = AESCipher.encrypt(b"hello", ZERO_KEY, ZERO_IV)
    # Flipping IV byte 15 turns the 0x0b pad byte into 0x00
    iv = bytearray(ZERO_IV)
    iv[15] ^= 0x0b
    with pytest.raises(DecryptionError):
        AESCipher.decrypt(ct, ZERO_KEY, bytes(iv))

def test_aes_unaligned_ciphertext_rejected():
    ct = AESCipher.encrypt(MSG, ZERO_KEY, ZERO_IV)
    with pytest.raises(DecryptionError):
        AESCipher.decrypt(ct[:-1], ZERO_KEY, ZERO_IV)

def test_aes_empty_ciphertext_rejected():
    with pytest.raises(DecryptionError):
        AESCipher.decrypt(b"", ZERO_KEY, ZERO_IV)

# ── key generation ────────────────────────────────────────────────────────────
@pytest.mark.parametrize("length", [16, 24, 32])
def test_generate_key(length):
    hex_key = AESCipher.generate_key(length)
    assert len(hex_key) == length * 2
    assert hex_key == hex_key.lower()
    assert len(codec.hex_decode(hex_key)) == length

def test_generate_key_is_fresh():
    assert AESCipher.generate_key(32) != AESCipher.generate_key(32)

@pytest.mark.parametrize("length", [0, 8, 20, 64])
def test_generate_key_rejects_bad_length(length):
    with pytest.raises(InvalidKeySizeError):
        AESCipher.generate_key(length)

# ── hex-key helpers ───────────────────────────────────────────────────────────
def test_text_helpers_match_primitive():
    hex_key = "00" * 16
    ct, iv = AESCipher.encrypt_text(b"hello", hex_key, ZERO_IV)
    assert iv == ZERO_IV
    assert ct == AESCipher.encrypt(b"hello", ZERO_KEY, ZERO_IV)

def test_encrypt_text_generates_iv():
    hex_key = AESCipher.generate_key(16)
    _, iv1 = AESCipher.encrypt_text(MSG, hex_key)
    _, iv2 = AESCipher.encrypt_text(MSG, hex_key)
    assert len(iv1) == 16
    assert iv1 != iv2

def test_decrypt_text_base64_with_grouped_iv():
    hex_key = AESCipher.generate_key(24)
    ct, iv = AESCipher.encrypt_text(MSG, hex_key)
    grouped_iv = codec.normalize_hex(codec.hex_encode(iv))
    pt = AESCipher.decrypt_text(codec.base64_encode(ct), hex_key, grouped_iv, is_base64=True)
    assert pt == MSG

def test_decrypt_text_base64_then_hex():
    hex_key = AESCipher.generate_key(32)
    ct, iv = AESCipher.encrypt_text(MSG, hex_key)
    data = codec.base64_encode(codec.hex_encode(ct).encode("ascii"))
    pt = AESCipher.decrypt_text(data, hex_key, codec.hex_encode(iv),
                                is_base64=True, is_hex=True)
    assert pt == MSG

def test_decrypt_text_raw_bytes():
    hex_key = AESCipher.generate_key(16)
    ct, iv = AESCipher.encrypt_text(MSG, hex_key)
    assert AESCipher.decrypt_text(ct, hex_key, codec.hex_encode(iv)) == MSG

def test_decrypt_text_without_iv_reads_envelope():
    from ripe_crypto.transport import prepare_data
    hex_key = AESCipher.generate_key(32)
    envelope = prepare_data(MSG, hex_key, "client1")
    assert AESCipher.decrypt_text(envelope, hex_key) == MSG

def test_decrypt_text_rejects_bad_hex_key():
    with pytest.raises(InvalidEncodingError):
        AESCipher.decrypt_text("AAAA", "xyz", "00" * 16, is_base64=True)

def test_decrypt_text_non_ascii_envelope_bytes():
    hex_key = AESCipher.generate_key(16)
    with pytest.raises(ParseError):
        AESCipher.decrypt_text(b"\xff:\xff:\xff", hex_key)
