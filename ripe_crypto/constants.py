"""
Shared constants for ripe_crypto.

Every size here is in bytes unless the name says otherwise.
"""

# Separates the fields of a prepared envelope:
#   <cipher length>:<iv hex>:[<client id>:]<base64 payload>
DATA_DELIMITER = ":"

BITS_PER_BYTE = 8

DEFAULT_RSA_LENGTH = 2048
RSA_PUBLIC_EXPONENT = 65537

# Overhead the chunking formula reserves per RSA block (384 bits).
RSA_BLOCK_OVERHEAD_BITS = 384

# Joins fixed-width ciphertext blocks when a message spans several RSA blocks.
RSA_BLOCK_DELIMITER = b":"

AES_BSIZE = 16
AES_KEY_SIZES = (16, 24, 32)
IV_HEX_LENGTH = AES_BSIZE * 2
