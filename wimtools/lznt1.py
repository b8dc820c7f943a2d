"""LZNT1 decompression."""

from __future__ import annotations


class Lznt1Error(ValueError):
    """Raised for malformed LZNT1 data."""


def _copy_back(out: bytearray, distance: int, count: int) -> None:
    src = len(out) - distance
    if src < 0:
        raise Lznt1Error(
            f"LZNT1 back-reference {distance:#x} before start of output"
        )
    if distance >= count:
        out += out[src:src + count]
    else:
        for i in range(count):
            out.append(out[src + i])


def _block(buf: bytes, offset: int, limit: int, out: bytearray | None) -> int:
    """Decompress one compressed block, returning the bytes it produces."""
    produced = 0
    split = 12
    threshold = 16
    tag_bit = 0
    tag = 0

    while offset != limit:
        if tag_bit == 0:
            tag = buf[offset]
            offset += 1
            if offset == limit:
                break

        if tag & 1:
            if offset + 2 > limit:
                raise Lznt1Error(f"LZNT1 compressed value overrun at {offset:#x}")
            value = int.from_bytes(buf[offset:offset + 2], "little")
            offset += 2
            count = (value & ((1 << split) - 1)) + 3
            produced += count
            if out is not None:
                _copy_back(out, (value >> split) + 1, count)
        else:
            if out is not None:
                out.append(buf[offset])
            offset += 1
            produced += 1

        while produced > threshold:
            split -= 1
            threshold <<= 1
            if split < 0:
                raise Lznt1Error("LZNT1 block output too long")

        tag >>= 1
        tag_bit = (tag_bit + 1) % 8

    return produced


def _decompress(data: bytes, out: bytearray | None) -> int:
    buf = bytes(data)
    length = len(buf)
    offset = 0
    total = 0

    while offset != length:
        if offset + 1 == length and buf[offset] == 0:
            break

        if offset + 2 > length:
            raise Lznt1Error(f"LZNT1 block header overrun at {offset:#x}")
        header = int.from_bytes(buf[offset:offset + 2], "little")
        offset += 2

        block_len = (header & 0x0FFF) + 1
        if offset + block_len > length:
            kind = "compressed" if header & 0x8000 else "uncompressed"
            raise Lznt1Error(
                f"LZNT1 {kind} block overrun at {offset:#x}+{block_len:#x}"
            )
        if header & 0x8000:
            total += _block(buf, offset, offset + block_len, out)
        else:
            if out is not None:
                out += buf[offset:offset + block_len]
            total += block_len
        offset += block_len

    return total


def lznt1_decompressed_length(data: bytes) -> int:
    """Return the length LZNT1 data decompresses to, without producing it."""
    return _decompress(data, None)


def lznt1_decompress(data: bytes) -> bytes:
    """Decompress LZNT1 data."""
    out = bytearray()
    _decompress(data, out)
    return bytes(out)