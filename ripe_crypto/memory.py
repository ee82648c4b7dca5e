"""
Scoped handling of sensitive buffers.

Python cannot scrub immutable bytes, so working copies of keys, IVs and
plaintext are held in bytearrays that wiped() zeroes on every exit path.
"""

import os
from contextlib import contextmanager
from typing import Iterator, Union

BytesLike = Union[bytes, bytearray, memoryview]


def zeroize(buf: bytearray) -> None:
    buf[:] = bytes(len(buf))


@contextmanager
def wiped(data: BytesLike) -> Iterator[bytearray]:
    """
    Yield a mutable copy of data and zero it when the block exits,
    whether it returns normally or raises.
    """
    buf = bytearray(data)
    try:
        yield buf
    finally:
        zeroize(buf)


def random_bytes(n: int) -> bytes:
    """Key/IV material from the OS CSPRNG (os.urandom is thread-safe)."""
    return os.urandom(n)
