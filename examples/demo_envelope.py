"""
ripe_crypto — Live Demo
=======================
Run:  python examples/demo_envelope.py

Walks through AES-CBC, RSA with chunking, key files, and the transport
envelope, printing sizes and timings for each step.
"""

import sys, os, time, logging, tempfile
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ripe_crypto import (
    AESCipher,
    RSACipher,
    codec,
    expected_aes_cipher_length,
    max_rsa_block_size,
    prepare_data,
    expected_data_size,
    parse_envelope,
    decrypt_envelope,
    write_rsa_key_pair,
    read_key,
    generate_rsa_key_pair_base64,
    version,
)

logging.basicConfig(level=logging.INFO, format=' %(message)s')

LINE = "═" * 70
MSG  = b"2026-10-16 12:00:01 INFO payment accepted id=42"

def header(step, name):
    print(f"\n{LINE}")
    print(f"  {step} — {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

# ─────────────────────────────────────────────────────────────────────────────
print(f"\n{LINE}")
print(f"  ripe_crypto {version()} — Demo")
print(LINE)
print(f"  Message: {MSG.decode()}\n")

# ── AES ──────────────────────────────────────────────────────────────────────
header(1, "SYMMETRIC — AES-256-CBC")
t0      = time.perf_counter()
hex_key = AESCipher.generate_key(32)
ct, iv  = AESCipher.encrypt_text(MSG, hex_key)
pt      = AESCipher.decrypt_text(ct, hex_key, codec.hex_encode(iv))
elapsed = time.perf_counter() - t0
ok("Key",        hex_key[:16] + "...")
ok("IV",         codec.normalize_hex(codec.hex_encode(iv)))
ok("Ciphertext", f"{len(ct)} bytes (expected {expected_aes_cipher_length(len(MSG))})")
ok("Round-trip", f"{elapsed*1000:.2f} ms")
ok("Decrypted",  pt.decode())

# ── Envelope ─────────────────────────────────────────────────────────────────
header(2, "TRANSPORT — Envelope")
t0       = time.perf_counter()
envelope = prepare_data(MSG, hex_key, "client1")
parsed   = parse_envelope(envelope)
pt       = decrypt_envelope(envelope, hex_key)
elapsed  = time.perf_counter() - t0
ok("Envelope",   envelope)
ok("Length",     f"{len(envelope)} chars (predicted {expected_data_size(len(MSG), 7)})")
ok("Client id",  parsed.client_id)
ok("Round-trip", f"{elapsed*1000:.2f} ms")
ok("Decrypted",  pt.decode())

# ── RSA ──────────────────────────────────────────────────────────────────────
header(3, "ASYMMETRIC — RSA-2048 PKCS#1 v1.5")
t0      = time.perf_counter()
pair    = RSACipher.generate_key_pair(2048)
big     = MSG * 10
ct      = RSACipher.encrypt(big, pair.public_key)
pt      = RSACipher.decrypt(ct, pair.private_key)
elapsed = time.perf_counter() - t0
ok("Block size", f"{max_rsa_block_size(2048)} bytes per block")
ok("Plaintext",  f"{len(big)} bytes")
ok("Ciphertext", f"{len(ct)} bytes")
ok("Round-trip", f"{elapsed*1000:.0f} ms")
ok("Match",      str(pt == big))

# ── Key files ────────────────────────────────────────────────────────────────
header(4, "KEYS — PEM files and base64 pair")
with tempfile.TemporaryDirectory() as tmp:
    pub  = os.path.join(tmp, "public.pem")
    priv = os.path.join(tmp, "private.pem")
    write_rsa_key_pair(pub, priv, 2048, secret="demo")
    ct = RSACipher.encrypt_text(MSG, read_key(pub))
    pt = RSACipher.decrypt_text(ct, read_key(priv), secret="demo")
    ok("Written",   f"{pub}, {priv}")
    ok("Decrypted", pt.decode())
ok("Base64 pair", generate_rsa_key_pair_base64(2048)[:48] + "...")

print(f"\n{LINE}\n")
