"""Loading of PE executable images into a memory image."""

from __future__ import annotations

import struct
from dataclasses import dataclass

MZ_HEADER_MAGIC = 0x5A4D
PE_HEADER_MAGIC = 0x00004550

_MZ_LFANEW_OFFSET = 0x3C
_MZ_HEADER_LEN = 64
_PE_HEADER = struct.Struct("<IHHIIIHH")
_OPT_HEADER = struct.Struct("<HBBIIIIIIIIIHHHHHHIII")
_SECTION = struct.Struct("<8sIIIIIIHHI")


class PeError(ValueError):
    """Raised for a PE image that cannot be loaded."""


@dataclass(frozen=True)
class PeSection:
    """A section of a PE image."""

    name: str
    virtual_address: int
    virtual_size: int
    raw_offset: int
    raw_size: int


@dataclass(frozen=True)
class LoadedPe:
    """A PE image laid out as it appears in memory from its base address.

    The memory image holds the headers and sections, padded to the
    section alignment, followed by a copy of the raw file.
    """

    base: int
    entry: int
    image: bytes
    raw_offset: int
    sections: tuple[PeSection, ...]

    @property
    def len(self) -> int:
        return len(self.image)


def _place(memory: bytearray, offset: int, chunk: bytes) -> None:
    end = offset + len(chunk)
    if end > len(memory):
        memory.extend(bytes(end - len(memory)))
    memory[offset:end] = chunk


def load_pe(data: bytes) -> LoadedPe:
    """Lay out a PE image in memory as the loader would."""
    raw = bytes(data)
    length = len(raw)

    if length < 2 or int.from_bytes(raw[:2], "little") != MZ_HEADER_MAGIC:
        magic = int.from_bytes(raw[:2], "little")
        raise PeError(f"Bad MZ magic {magic:04x}")
    if length < _MZ_HEADER_LEN:
        raise PeError("MZ header outside file")
    pehdr_offset = int.from_bytes(raw[_MZ_LFANEW_OFFSET:_MZ_LFANEW_OFFSET + 4],
                                  "little")
    if pehdr_offset > length:
        raise PeError("PE header outside file")
    if pehdr_offset + _PE_HEADER.size + _OPT_HEADER.size > length:
        raise PeError("PE header truncated")

    (pe_magic, _, num_sections, _, _, _, opthdr_len, _) = \
        _PE_HEADER.unpack_from(raw, pehdr_offset)
    if pe_magic != PE_HEADER_MAGIC:
        raise PeError(f"Bad PE magic {pe_magic:08x}")

    opthdr_offset = pehdr_offset + _PE_HEADER.size
    fields = _OPT_HEADER.unpack_from(raw, opthdr_offset)
    entry = fields[6]
    base = fields[9]
    section_align = fields[10]
    header_len = fields[20]
    if section_align == 0:
        raise PeError("PE section alignment is zero")
    if header_len > length:
        raise PeError("PE headers outside file")

    memory = bytearray(raw[:header_len])
    end = header_len

    section_offset = opthdr_offset + opthdr_len
    sections = []
    for i in range(num_sections):
        offset = section_offset + i * _SECTION.size
        if offset + _SECTION.size > length:
            raise PeError("PE section table outside file")
        (name, virtual_len, virtual, raw_len, raw_ptr,
         _, _, _, _, _) = _SECTION.unpack_from(raw, offset)
        if raw_ptr + raw_len > length:
            raise PeError(f"PE section {i} data outside file")
        section = PeSection(
            name=name.split(b"\0", 1)[0].decode("latin-1"),
            virtual_address=virtual,
            virtual_size=virtual_len,
            raw_offset=raw_ptr,
            raw_size=raw_len,
        )
        sections.append(section)
        _place(memory, virtual, bytes(virtual_len))
        _place(memory, virtual, raw[raw_ptr:raw_ptr + raw_len])
        end = max(end, virtual + virtual_len)

    aligned = (end + section_align - 1) & ~(section_align - 1)
    if len(memory) < aligned:
        memory.extend(bytes(aligned - len(memory)))
    del memory[aligned:]
    memory += raw

    return LoadedPe(
        base=base,
        entry=base + entry,
        image=bytes(memory),
        raw_offset=aligned,
        sections=tuple(sections),
    )