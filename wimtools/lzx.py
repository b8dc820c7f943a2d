"""LZX decompression, in the variant used for WIM resources."""

from __future__ import annotations

import struct
from enum import IntEnum

from .huffman import HUFFMAN_BITS, HuffmanAlphabet, HuffmanError, HuffmanSymbols

ALIGNOFFSET_CODES = 8
ALIGNOFFSET_BITS = 3
PRETREE_CODES = 20
PRETREE_BITS = 4
MAIN_LIT_CODES = 256
POSITION_SLOTS = 30
MAIN_CODES = MAIN_LIT_CODES + 8 * POSITION_SLOTS
LENGTH_CODES = 249
BLOCK_TYPE_BITS = 3
DEFAULT_BLOCK_LEN = 32768
REPEATED_OFFSETS = 3
WIM_MAGIC_FILESIZE = 12000000

_MASK32 = 0xFFFFFFFF
_REPEATED = struct.Struct("<3I")


class BlockType(IntEnum):
    """LZX block types."""

    VERBATIM = 1
    ALIGNOFFSET = 2
    UNCOMPRESSED = 3


class LzxError(ValueError):
    """Raised for malformed LZX data."""


def footer_bits(position_slot: int) -> int:
    """Return the number of footer bits for a position slot."""
    if position_slot < 2:
        return 0
    if position_slot < 38:
        return position_slot // 2 - 1
    return 17


def _position_bases() -> tuple[int, ...]:
    bases = [0]
    for slot in range(1, POSITION_SLOTS):
        bases.append(bases[-1] + (1 << footer_bits(slot - 1)))
    return tuple(bases)


_POSITION_BASE = _position_bases()


def _alphabet(lengths: list[int], what: str) -> HuffmanAlphabet:
    try:
        return HuffmanAlphabet(lengths)
    except HuffmanError as exc:
        raise LzxError(f"Could not generate {what} alphabet: {exc}") from exc


class _Decoder:
    """State of one decompression run."""

    def __init__(self, data: bytes, produce: bool) -> None:
        self.data = bytes(data)
        self.in_len = len(self.data)
        self.in_offset = 0
        self.buf: bytearray | None = bytearray() if produce else None
        self.out_offset = 0
        self.threshold = 0
        self.accumulator = 0
        self.bits = 0
        self.block_type = 0
        self.repeated = [1] * REPEATED_OFFSETS
        self.main_literals = [0] * MAIN_LIT_CODES
        self.main_remainder = [0] * (MAIN_CODES - MAIN_LIT_CODES)
        self.length_lengths = [0] * LENGTH_CODES
        self.pretree: HuffmanAlphabet | None = None
        self.alignoffset: HuffmanAlphabet | None = None
        self.main: HuffmanAlphabet | None = None
        self.length: HuffmanAlphabet | None = None

    # Bitstream access

    def _overrun(self) -> LzxError:
        return LzxError(
            f"LZX input overrun in {self.in_offset:#x}/{self.in_len:#x} "
            f"out {self.out_offset:#x}"
        )

    def _accumulate(self, bits: int) -> int:
        if self.bits < bits and self.in_offset < self.in_len:
            word = int.from_bytes(
                self.data[self.in_offset:self.in_offset + 2], "little"
            )
            self.in_offset += 2
            self.accumulator |= (word << (16 - self.bits)) & _MASK32
            self.bits += 16
        return self.accumulator >> 16

    def _consume(self, bits: int) -> None:
        if self.bits < bits:
            raise self._overrun()
        self.accumulator = (self.accumulator << bits) & _MASK32
        self.bits -= bits

    def _getbits(self, bits: int) -> int:
        value = self._accumulate(bits)
        self._consume(bits)
        return value >> (16 - bits)

    def _align(self, bits: int) -> None:
        self._getbits(bits)
        self._consume(self.bits)

    def _getbytes(self, length: int) -> bytes:
        if self.in_offset + length > self.in_len:
            raise self._overrun()
        chunk = self.data[self.in_offset:self.in_offset + length]
        self.in_offset += length
        return chunk

    def _decode(self, alphabet: HuffmanAlphabet) -> int:
        huf = self._accumulate(HUFFMAN_BITS)
        sym: HuffmanSymbols = alphabet.symbols(huf)
        self._consume(sym.bits)
        try:
            return sym.raw_symbol(huf)
        except HuffmanError as exc:
            raise LzxError(str(exc)) from exc

    # Output buffer

    def _reserve(self, end: int) -> None:
        if self.buf is not None and end > len(self.buf):
            self.buf.extend(bytes(end - len(self.buf)))

    def _write(self, offset: int, chunk: bytes) -> None:
        if self.buf is None:
            return
        end = offset + len(chunk)
        self._reserve(end)
        self.buf[offset:end] = chunk

    # Alphabets

    def _raw_alphabet(self, count: int, bits: int, what: str) -> HuffmanAlphabet:
        lengths = [self._getbits(bits) for _ in range(count)]
        return _alphabet(lengths, what)

    def _read_pretree(self, lengths: list[int]) -> None:
        """Update a code length table using a freshly read pretree."""
        self.pretree = self._raw_alphabet(PRETREE_CODES, PRETREE_BITS, "pretree")
        dup = 0
        for i in range(len(lengths)):
            if dup:
                lengths[i] = lengths[i - 1]
                dup -= 1
                continue
            code = self._decode(self.pretree)
            if code <= 16:
                length = (lengths[i] - code + 17) % 17
            elif code == 17:
                length = 0
                dup = self._getbits(4) + 3
            elif code == 18:
                length = 0
                dup = self._getbits(5) + 19
            elif code == 19:
                dup = self._getbits(1) + 3
                code = self._decode(self.pretree)
                length = (lengths[i] - code + 17) % 17
            else:
                raise LzxError(f"Unrecognised pretree code {code}")
            lengths[i] = length
        if dup:
            raise LzxError("Pretree duplicate overrun")

    def _main_alphabet(self) -> None:
        self._read_pretree(self.main_literals)
        self._read_pretree(self.main_remainder)
        self.main = _alphabet(self.main_literals + self.main_remainder, "main")

    def _length_alphabet(self) -> None:
        self._read_pretree(self.length_lengths)
        self.length = _alphabet(self.length_lengths, "length")

    # Blocks

    def _block_header(self) -> None:
        block_type = self._getbits(BLOCK_TYPE_BITS)
        self.block_type = block_type
        if self._getbits(1):
            block_len = DEFAULT_BLOCK_LEN
        else:
            high = self._getbits(8)
            low = self._getbits(8)
            block_len = (high << 8) | low
        self.threshold = self.out_offset + block_len

        if block_type == BlockType.ALIGNOFFSET:
            self.alignoffset = self._raw_alphabet(
                ALIGNOFFSET_CODES, ALIGNOFFSET_BITS, "aligned offset"
            )
        if block_type in (BlockType.ALIGNOFFSET, BlockType.VERBATIM):
            self._main_alphabet()
            self._length_alphabet()
        elif block_type == BlockType.UNCOMPRESSED:
            self._align(1)
            self.repeated = list(_REPEATED.unpack(self._getbytes(_REPEATED.size)))
        else:
            raise LzxError(f"Unrecognised block type {block_type}")

    def _uncompressed(self) -> None:
        # The bytes land in the buffer at the current output position,
        # but the output position itself is left where it was.
        length = self.threshold - self.out_offset
        self._write(self.out_offset, self._getbytes(length))
        if length % 2:
            self.in_offset += 1

    def _token(self) -> None:
        main = self._decode(self.main)
        if main < MAIN_LIT_CODES:
            self._write(self.out_offset, bytes((main,)))
            self.out_offset += 1
            return
        main -= MAIN_LIT_CODES

        length_header = main & 7
        length = self._decode(self.length) if length_header == 7 else 0
        match_length = length_header + 2 + length

        position_slot = main >> 3
        if position_slot < REPEATED_OFFSETS:
            match_offset = self.repeated[position_slot]
            self.repeated[position_slot] = self.repeated[0]
            self.repeated[0] = match_offset
        else:
            if position_slot >= POSITION_SLOTS:
                raise LzxError(f"Invalid position slot {position_slot}")
            offset_bits = footer_bits(position_slot)
            if self.block_type == BlockType.ALIGNOFFSET and offset_bits >= 3:
                verbatim_bits = self._getbits(offset_bits - 3) << 3
                aligned_bits = self._decode(self.alignoffset)
            else:
                verbatim_bits = self._getbits(offset_bits)
                aligned_bits = 0
            match_offset = (_POSITION_BASE[position_slot] + verbatim_bits
                            + aligned_bits - 2)
            self.repeated = [match_offset] + self.repeated[:-1]

        if match_offset > self.out_offset:
            raise LzxError(
                f"LZX match underrun out {self.out_offset:#x} "
                f"offset {match_offset:#x} len {match_length:#x}"
            )
        self._copy_match(match_offset, match_length)
        self.out_offset += match_length

    def _copy_match(self, distance: int, count: int) -> None:
        if self.buf is None:
            return
        start = self.out_offset
        self._reserve(start + count)
        if distance == 0:
            return
        src = start - distance
        if distance >= count:
            chunk = bytes(self.buf[src:src + count])
        else:
            pattern = bytes(self.buf[src:start])
            chunk = (pattern * (count // distance + 1))[:count]
        self.buf[start:start + count] = chunk

    def _translate_jumps(self) -> None:
        buf = self.buf
        limit = self.out_offset
        if buf is None or limit < 10:
            return
        offset = 0
        while offset < limit - 10:
            if buf[offset] != 0xE8:
                offset += 1
                continue
            target = int.from_bytes(buf[offset + 1:offset + 5], "little",
                                    signed=True)
            if target >= 0:
                if target < WIM_MAGIC_FILESIZE:
                    target -= offset
            elif target >= -offset:
                target += WIM_MAGIC_FILESIZE
            buf[offset + 1:offset + 5] = (target & _MASK32).to_bytes(4, "little")
            offset += 5

    def run(self) -> int:
        if self.in_len % 2:
            raise LzxError("LZX cannot handle odd-length input data")
        while self.in_offset < self.in_len:
            self._block_header()
            if self.block_type == BlockType.UNCOMPRESSED:
                self._uncompressed()
            else:
                while self.out_offset < self.threshold:
                    self._token()
        self._translate_jumps()
        return self.out_offset


def lzx_decompressed_length(data: bytes) -> int:
    """Return the length LZX data decompresses to, without producing it."""
    return _Decoder(data, produce=False).run()


def lzx_decompress(data: bytes) -> bytes:
    """Decompress LZX data, undoing the E8 jump translation."""
    decoder = _Decoder(data, produce=True)
    length = decoder.run()
    return bytes(decoder.buf[:length])