"""Exceptions raised by ripe_crypto."""


class RipeError(Exception):
    """Base exception for ripe_crypto errors."""
    pass


class InvalidKeySizeError(RipeError, ValueError):
    """Symmetric key is not 16, 24 or 32 bytes."""
    pass


class InvalidIVSizeError(RipeError, ValueError):
    """Initialization vector is not one AES block long."""
    pass


class InvalidEncodingError(RipeError, ValueError):
    """Malformed hex or base64 input."""
    pass


class DecryptionError(RipeError):
    """
    Ciphertext could not be decrypted.

    Padding and integrity failures deliberately share this one type.
    """
    pass


class KeyGenerationError(RipeError):
    """Key pair could not be generated."""
    pass


class InvalidKeyError(RipeError):
    """PEM data is malformed or does not hold an RSA key."""
    pass


class WrongPassphraseError(InvalidKeyError):
    """Encrypted private key could not be unlocked."""
    pass


class KeyFileError(RipeError, OSError):
    """Reading or writing a key file failed."""

    def __init__(self, message: str, written=()):
        super().__init__(message)
        self.written = tuple(written)


class ParseError(RipeError):
    """Envelope text does not have the expected structure."""
    pass
