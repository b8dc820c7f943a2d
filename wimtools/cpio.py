"""Reading of "newc" CPIO archives."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

CPIO_MAGIC = b"070701"
CPIO_TRAILER = b"TRAILER!!!"
HEADER_LEN = 110

_FILESIZE = slice(54, 62)
_NAMESIZE = slice(94, 102)
_PAD = b"\0\0\0\0"
_HEX_FIELD = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")


class CpioError(ValueError):
    """Raised for a malformed CPIO archive."""


@dataclass(frozen=True)
class CpioEntry:
    """A file held in a CPIO archive."""

    name: str
    data: bytes


def _align(length: int) -> int:
    return (length + 3) & ~3


def _field_value(raw: bytes) -> int:
    """Parse an ASCII hexadecimal header field."""
    text = raw.split(b"\0", 1)[0].decode("latin-1")
    match = _HEX_FIELD.match(text)
    sign, digits = match.groups()
    if not digits:
        return 0
    value = int(digits, 16)
    return -value % (1 << 64) if sign == "-" else value


def iter_cpio(data: bytes) -> Iterator[CpioEntry]:
    """Yield the files of a CPIO archive, stopping at the trailer or end."""
    buf = bytes(data)
    end = len(buf)
    pos = 0
    while True:
        while end - pos >= len(_PAD) and buf[pos:pos + len(_PAD)] == _PAD:
            pos += len(_PAD)

        remaining = end - pos
        if not remaining:
            return
        if remaining < HEADER_LEN:
            raise CpioError("Truncated CPIO header")

        header = buf[pos:pos + HEADER_LEN]
        if header[:len(CPIO_MAGIC)] != CPIO_MAGIC:
            raise CpioError("Bad CPIO magic")

        name_len = _field_value(header[_NAMESIZE])
        file_len = _field_value(header[_FILESIZE])
        data_offset = _align(HEADER_LEN + name_len)
        entry_len = data_offset + file_len
        if entry_len < remaining:
            entry_len = _align(entry_len)
        if entry_len > remaining:
            raise CpioError("Truncated CPIO file")

        name_start = pos + HEADER_LEN
        name_end = buf.find(b"\0", name_start)
        raw_name = buf[name_start:] if name_end < 0 else buf[name_start:name_end]
        if raw_name == CPIO_TRAILER:
            return

        start = pos + data_offset
        yield CpioEntry(
            raw_name.decode("utf-8", errors="surrogateescape"),
            buf[start:start + file_len],
        )
        pos += entry_len


def cpio_extract(data: bytes, handler: Callable[[str, bytes], Any]) -> Any:
    """Call ``handler(name, data)`` for each file in the archive.

    Stops early and returns the handler's result as soon as it is truthy;
    otherwise returns None once the archive is exhausted.
    """
    for entry in iter_cpio(data):
        result = handler(entry.name, entry.data)
        if result:
            return result
    return None