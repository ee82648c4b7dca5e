"""
RSA key files and transportable key strings.
"""

import logging
import os
import stat

from . import codec
from .constants import DATA_DELIMITER, DEFAULT_RSA_LENGTH
from .exceptions import InvalidEncodingError, InvalidKeyError, KeyFileError
from .rsa import KeyPair, RSACipher

logger = logging.getLogger(__name__)


def _write_pem(path: str, pem: str, private: bool) -> None:
    if private:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
                     stat.S_IRUSR | stat.S_IWUSR)
        with os.fdopen(fd, "w", encoding="ascii") as f:
            f.write(pem)
    else:
        with open(path, "w", encoding="ascii") as f:
            f.write(pem)


def write_rsa_key_pair(public_path: str, private_path: str,
                       bits: int = DEFAULT_RSA_LENGTH, secret: str = "") -> KeyPair:
    """
    Generate a key pair and write each PEM to its path.

    The public key is written first. If either write fails a KeyFileError
    is raised whose `written` lists the files already on disk; they are not
    removed, so callers should treat the pair as unusable and retry both.
    """
    pair = RSACipher.generate_key_pair(bits, secret)
    written = []
    for path, pem, private in ((public_path, pair.public_key, False),
                               (private_path, pair.private_key, True)):
        try:
            _write_pem(path, pem, private)
        except OSError as e:
            if written:
                logger.warning("Partial key pair write: %s written, %s failed",
                               ", ".join(written), path)
            raise KeyFileError(f"Could not write key file {path}: {e}", written) from e
        written.append(path)
    logger.debug("Wrote RSA-%d key pair to %s and %s", bits, public_path, private_path)
    return pair


def read_key(path: str) -> str:
    """Whole-file PEM text."""
    try:
        with open(path, "r", encoding="ascii") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise KeyFileError(f"Could not read key file {path}: {e}") from e


def generate_rsa_key_pair_base64(bits: int = DEFAULT_RSA_LENGTH) -> str:
    """Fresh key pair as "<base64 private PEM>:<base64 public PEM>"."""
    pair = RSACipher.generate_key_pair(bits)
    return DATA_DELIMITER.join((
        codec.base64_encode(pair.private_key.encode("ascii")),
        codec.base64_encode(pair.public_key.encode("ascii")),
    ))


def split_key_pair_base64(text: str) -> KeyPair:
    """Inverse of generate_rsa_key_pair_base64()."""
    parts = text.strip().split(DATA_DELIMITER)
    if len(parts) != 2:
        raise InvalidKeyError("Expected '<base64 private>:<base64 public>'.")
    try:
        private_pem, public_pem = (codec.base64_decode(p).decode("ascii") for p in parts)
    except (InvalidEncodingError, UnicodeDecodeError) as e:
        raise InvalidKeyError(f"Malformed key pair string: {e}") from e
    return KeyPair(private_key=private_pem, public_key=public_pem)
