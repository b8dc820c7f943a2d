"""SHA-1 message digest."""

from __future__ import annotations

import struct

_INITIAL = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)
_K = (0x5A827999, 0x6ED9EBA1, 0x8F1BBCDC, 0xCA62C1D6)
_MASK = 0xFFFFFFFF
_BLOCK = 64
_LENGTH_OFFSET = 56


def _rol(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (32 - bits))) & _MASK


def _compress(state: tuple, block: bytes, offset: int = 0) -> tuple:
    """Fold one 64-byte block into the hash state."""
    w = list(struct.unpack_from(">16I", block, offset))
    for i in range(16, 80):
        w.append(_rol(w[i - 3] ^ w[i - 8] ^ w[i - 14] ^ w[i - 16], 1))

    a, b, c, d, e = state
    for i, word in enumerate(w):
        if i < 20:
            f = (b & c) | (~b & d)
        elif i < 40 or i >= 60:
            f = b ^ c ^ d
        else:
            f = (b & c) | (b & d) | (c & d)
        temp = (_rol(a, 5) + f + e + _K[i // 20] + word) & _MASK
        e, d, c, b, a = d, c, _rol(b, 30), a, temp

    return tuple((x + y) & _MASK for x, y in zip(state, (a, b, c, d, e)))


class Sha1:
    """Incremental SHA-1 hash."""

    digest_size = 20
    block_size = _BLOCK

    def __init__(self, data: bytes = b"") -> None:
        self._state = _INITIAL
        self._buffer = bytearray()
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more data into the hash."""
        chunk = memoryview(data).cast("B")
        self._buffer += chunk
        self._length += len(chunk)
        whole = len(self._buffer) - len(self._buffer) % _BLOCK
        for offset in range(0, whole, _BLOCK):
            self._state = _compress(self._state, self._buffer, offset)
        del self._buffer[:whole]

    def digest(self) -> bytes:
        """Return the digest of the data so far, leaving the hash usable."""
        tail = bytearray(self._buffer)
        tail.append(0x80)
        tail += b"\0" * ((_LENGTH_OFFSET - len(tail)) % _BLOCK)
        tail += struct.pack(">Q", (self._length * 8) & ((1 << 64) - 1))
        state = self._state
        for offset in range(0, len(tail), _BLOCK):
            state = _compress(state, tail, offset)
        return struct.pack(">5I", *state)

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.digest().hex()


def sha1(data: bytes) -> bytes:
    """Return the SHA-1 digest of ``data``."""
    return Sha1(data).digest()