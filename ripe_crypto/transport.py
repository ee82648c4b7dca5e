"""
Transport envelope
==================
Wraps AES-CBC ciphertext into a single line of ASCII that can be pushed
through pipelines that only move text (log shippers, queues, stdin).

Envelope format (fields separated by DATA_DELIMITER):

    <cipher length>:<iv hex>:[<client id>:]<base64 payload>

    cipher length  decimal byte length of the ciphertext before base64
    iv hex         32 lowercase hex characters (16-byte IV)
    client id      optional opaque tag, omitted together with its delimiter
    payload        base64 of the AES-CBC ciphertext

Example:

    16:6e1ef0c9e6f7b22d2d3c1a0f7e4b8a11:client1:qk6mUo2Cv0T7cX6Q9n2VGw==
"""

import enum
import logging
from dataclasses import dataclass
from typing import Union

from . import codec
from .aes import AESCipher, expected_aes_cipher_length
from .constants import DATA_DELIMITER, IV_HEX_LENGTH
from .exceptions import InvalidEncodingError, ParseError
from .memory import wiped

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Envelope:
    length: int
    iv: bytes
    client_id: str
    payload: bytes

    @property
    def iv_hex(self) -> str:
        return codec.hex_encode(self.iv)

    def to_text(self) -> str:
        fields = [str(self.length), self.iv_hex]
        if self.client_id:
            fields.append(self.client_id)
        fields.append(codec.base64_encode(self.payload))
        return DATA_DELIMITER.join(fields)


def prepare_data(data: Union[str, bytes], hex_key: str, client_id: str = "") -> str:
    """
    Encrypt data under hex_key with a fresh IV and return envelope text.
    client_id, when given, becomes its own field just before the payload.
    """
    if DATA_DELIMITER in client_id:
        raise InvalidEncodingError(
            f"Client id may not contain {DATA_DELIMITER!r}."
        )
    if not client_id.isascii():
        raise InvalidEncodingError("Client id must be ASCII.")
    ciphertext, iv = AESCipher.encrypt_text(data, hex_key)
    envelope = Envelope(length=len(ciphertext), iv=iv,
                        client_id=client_id, payload=ciphertext)
    text = envelope.to_text()
    logger.debug("Prepared envelope: %d cipher bytes, %d chars", len(ciphertext), len(text))
    return text


def expected_data_size(plain_size: int, client_id_size: int = 16) -> int:
    """Exact length of prepare_data() output for plain_size bytes of data."""
    cipher_length = expected_aes_cipher_length(plain_size)
    size = len(str(cipher_length)) + len(DATA_DELIMITER)
    size += IV_HEX_LENGTH + len(DATA_DELIMITER)
    if client_id_size > 0:
        size += client_id_size + len(DATA_DELIMITER)
    size += codec.expected_base64_length(cipher_length)
    return size


class _State(enum.Enum):
    EXPECT_LENGTH = 1
    EXPECT_IV = 2
    EXPECT_CLIENT_ID_OR_PAYLOAD = 3
    EXPECT_PAYLOAD = 4
    DONE = 5


def parse_envelope(text: str) -> Envelope:
    """
    Split envelope text into its fields and decode them.

    Walks the text once, moving to the next state on each delimiter:

        EXPECT_LENGTH -> EXPECT_IV -> EXPECT_CLIENT_ID_OR_PAYLOAD
                      -> EXPECT_PAYLOAD -> DONE

    The third field is only known to be a client id once a fourth one
    follows it.
    """
    state = _State.EXPECT_LENGTH
    length_field = iv_field = client_id = ""
    current = []

    for ch in text.strip():
        if ch != DATA_DELIMITER:
            current.append(ch)
            continue
        field, current = "".join(current), []
        if state is _State.EXPECT_LENGTH:
            length_field, state = field, _State.EXPECT_IV
        elif state is _State.EXPECT_IV:
            iv_field, state = field, _State.EXPECT_CLIENT_ID_OR_PAYLOAD
        elif state is _State.EXPECT_CLIENT_ID_OR_PAYLOAD:
            client_id, state = field, _State.EXPECT_PAYLOAD
        else:
            raise ParseError("Envelope has too many fields.")

    if state not in (_State.EXPECT_CLIENT_ID_OR_PAYLOAD, _State.EXPECT_PAYLOAD):
        raise ParseError("Envelope has too few fields.")
    payload_field = "".join(current)
    state = _State.DONE

    if not length_field.isdigit() or not length_field.isascii():
        raise ParseError(f"Envelope length {length_field!r} is not a number.")
    if len(iv_field) != IV_HEX_LENGTH:
        raise ParseError(f"Envelope IV must be {IV_HEX_LENGTH} hex characters.")
    try:
        iv = codec.hex_decode(iv_field)
        payload = codec.base64_decode(payload_field)
    except InvalidEncodingError as e:
        raise ParseError(f"Malformed envelope field: {e}") from e

    length = int(length_field)
    if length != len(payload):
        raise ParseError(
            f"Envelope declares {length} cipher bytes but carries {len(payload)}."
        )
    return Envelope(length=length, iv=iv, client_id=client_id, payload=payload)


def decrypt_envelope(text: str, hex_key: str) -> bytes:
    """Parse envelope text and decrypt its payload with hex_key."""
    envelope = parse_envelope(text)
    with wiped(codec.hex_decode(hex_key)) as key:
        return AESCipher.decrypt(envelope.payload, key, envelope.iv)
