"""printf-style formatting with the boot loader's subset of conversions.

Supported are the flags ``#`` (``0x`` prefix) and ``0`` (zero padding), a
field width, the length modifiers ``hh``, ``h``, ``l``, ``ll`` and ``z``,
and the conversions ``d``, ``i``, ``x``, ``X``, ``c``, ``s`` and ``p``.
Any other conversion character is written out as itself, so ``%%`` gives
``%``.  Field widths apply to numbers only, and the ``0x`` prefix is not
counted in the width.
"""

from __future__ import annotations

import operator
import re
from collections.abc import Iterator
from typing import Any

_CHAR_LEN = 0
_SHORT_LEN = 1
_INT_LEN = 2
_LONG_LEN = 3
_LONGLONG_LEN = 4
_SIZE_T_LEN = 5

# Sizes in bytes of char, short, int, long, long long and size_t.
_TYPE_SIZES = (1, 2, 4, 8, 8, 8)

_LCASE = 0x20
_ALT_FORM = 0x02
_ZPAD = 0x10

_CONVERSION = re.compile(r"%([#0]*)([0-9]*)([hlz]*)(.?)", re.DOTALL)


def _format_hex(num: int, width: int, flags: int) -> str:
    """Format an unsigned number in hexadecimal."""
    digits = f"{num:X}"
    if flags & _LCASE:
        digits = digits.lower()
    pad = "0" if flags & _ZPAD else " "
    text = digits.rjust(width, pad)
    if flags & _ALT_FORM:
        text = ("0x" if flags & _LCASE else "0X") + text
    return text


def _format_decimal(num: int, width: int, flags: int) -> str:
    """Format a signed number in decimal.

    With zero padding the sign replaces the first character of the
    padded field.
    """
    zpad = bool(flags & _ZPAD)
    negative = num < 0
    text = str(-num if negative else num)
    if negative and not zpad:
        text = "-" + text
    text = text.rjust(width, "0" if zpad else " ")
    if negative and zpad:
        text = "-" + text[1:]
    return text


def _as_unsigned(value: Any, size: int) -> int:
    return operator.index(value) & ((1 << (8 * size)) - 1)


def _as_signed(value: Any, size: int) -> int:
    bits = 8 * size
    number = operator.index(value) & ((1 << bits) - 1)
    if number >> (bits - 1):
        number -= 1 << bits
    return number


def _as_char(value: Any, wide: bool) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("%c requires a single character")
        return value if wide else chr(ord(value) & 0xFF)
    code = operator.index(value)
    return chr(code) if wide else chr(code & 0xFF)


def _as_string(value: Any) -> str:
    if value is None:
        return "<NULL>"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).split(b"\0", 1)[0].decode("latin-1")
    if isinstance(value, str):
        return value.split("\0", 1)[0]
    raise TypeError(f"%s requires a string, not {type(value).__name__}")


def _next_arg(args: Iterator[Any]) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def cformat(fmt: str, *args: Any) -> str:
    """Format ``args`` according to the printf-style ``fmt``."""
    arg_iter = iter(args)

    def convert(match: re.Match) -> str:
        flag_chars, width_text, modifiers, conversion = match.groups()
        flags = 0
        if "#" in flag_chars:
            flags |= _ALT_FORM
        if "0" in flag_chars:
            flags |= _ZPAD
        width = int(width_text) if width_text else 0

        length = _INT_LEN
        for modifier in modifiers:
            if modifier == "h":
                length -= 1
            elif modifier == "l":
                length += 1
            else:
                length = _SIZE_T_LEN
        length = min(max(length, _CHAR_LEN), _SIZE_T_LEN)
        size = _TYPE_SIZES[length]

        if conversion == "c":
            return _as_char(_next_arg(arg_iter), length >= _LONG_LEN)
        if conversion == "s":
            return _as_string(_next_arg(arg_iter))
        if conversion == "p":
            pointer = _as_unsigned(_next_arg(arg_iter), 8)
            return _format_hex(pointer, width, _ALT_FORM | _LCASE)
        if conversion in ("x", "X"):
            flags |= ord(conversion) & _LCASE
            value = _as_unsigned(_next_arg(arg_iter), 8 if size >= 8 else 4)
            return _format_hex(value, width, flags)
        if conversion in ("d", "i"):
            value = _as_signed(_next_arg(arg_iter), 8 if size >= 8 else 4)
            return _format_decimal(value, width, flags)
        return conversion

    return _CONVERSION.sub(convert, fmt)


def snprintf(size: int, fmt: str, *args: Any) -> tuple[str, int]:
    """Format into a buffer of ``size`` characters including the terminator.

    Returns the text that fits (at most ``size - 1`` characters) and the
    full length the formatted text would have had.  A negative size is
    treated as zero.
    """
    text = cformat(fmt, *args)
    size = max(size, 0)
    if size == 0:
        return "", len(text)
    return text[:size - 1], len(text)