"""Canonical Huffman alphabets with a quick-lookup decode table."""

from __future__ import annotations

from collections.abc import Iterable

HUFFMAN_BITS = 16
HUFFMAN_QL_BITS = 7
HUFFMAN_QL_SHIFT = HUFFMAN_BITS - HUFFMAN_QL_BITS
_HUF_LIMIT = 1 << HUFFMAN_BITS


class HuffmanError(ValueError):
    """Raised for an alphabet that cannot be built or a code that cannot be decoded."""


class HuffmanSymbols:
    """The set of Huffman codes sharing one code length."""

    __slots__ = ("bits", "shift", "freq", "start", "_raw", "_offset")

    def __init__(self, bits: int, freq: int, start: int,
                 raw: tuple[int, ...], offset: int) -> None:
        self.bits = bits
        self.shift = HUFFMAN_BITS - bits
        self.freq = freq
        self.start = start
        self._raw = raw
        self._offset = offset

    def raw_symbol(self, huf: int) -> int:
        """Return the raw symbol for an input value normalised to 16 bits."""
        index = self._offset + (huf >> self.shift)
        if not 0 <= index < len(self._raw):
            raise HuffmanError(f"no raw symbol for Huffman code {huf:#06x}")
        return self._raw[index]

    def __repr__(self) -> str:
        return (f"HuffmanSymbols(bits={self.bits}, freq={self.freq}, "
                f"start={self.start:#x})")


class HuffmanAlphabet:
    """A canonical Huffman alphabet built from a table of code lengths."""

    def __init__(self, lengths: Iterable[int]) -> None:
        lengths = list(lengths)
        freq = [0] * HUFFMAN_BITS
        for bits in lengths:
            if not 0 <= bits <= HUFFMAN_BITS:
                raise HuffmanError(f"invalid Huffman code length {bits}")
            if bits:
                freq[bits - 1] += 1

        # An unused alphabet becomes two single-bit codes so that
        # callers need not treat it as a special case.
        if not any(freq):
            freq[0] = 2

        self.raw: tuple[int, ...] = tuple(
            symbol for _, symbol in sorted(
                (bits, symbol) for symbol, bits in enumerate(lengths) if bits
            )
        )

        sets = []
        huf = 0
        cumulative = 0
        for bits in range(1, HUFFMAN_BITS + 1):
            count = freq[bits - 1]
            start = huf << (HUFFMAN_BITS - bits)
            sets.append(HuffmanSymbols(bits, count, start, self.raw,
                                       cumulative - huf))
            huf += count
            if huf > (1 << bits):
                raise HuffmanError(
                    f"Huffman alphabet has too many symbols with lengths <={bits}"
                )
            huf <<= 1
            cumulative += count
        complete = huf == (1 << (HUFFMAN_BITS + 1))

        lookup = [0] * (1 << HUFFMAN_QL_BITS)
        for index, sym in enumerate(sets):
            for prefix in range(sym.start >> HUFFMAN_QL_SHIFT, len(lookup)):
                lookup[prefix] = index

        self.symbol_sets: tuple[HuffmanSymbols, ...] = tuple(sets)
        self.lookup: tuple[int, ...] = tuple(lookup)

        if not complete:
            raise HuffmanError("Huffman alphabet is incomplete")

    def symbols(self, huf: int) -> HuffmanSymbols:
        """Return the symbol set whose codes include a 16-bit input value."""
        if not 0 <= huf < _HUF_LIMIT:
            raise HuffmanError(f"Huffman input {huf:#x} out of range")
        index = self.lookup[huf >> HUFFMAN_QL_SHIFT]
        while huf < self.symbol_sets[index].start:
            index -= 1
        return self.symbol_sets[index]