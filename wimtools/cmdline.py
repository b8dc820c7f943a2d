"""Parsing of the boot loader command line."""

from __future__ import annotations

import re
from dataclasses import dataclass

_WHITESPACE = " \t\n\v\f\r"
_ARGUMENT_PATTERN = re.compile(f"[^{re.escape(_WHITESPACE)}]+")
_DIGITS = {
    16: re.compile(r"[0-9a-fA-F]+"),
    10: re.compile(r"[0-9]+"),
    8: re.compile(r"[0-7]+"),
}
_ULONG_MAX = (1 << 64) - 1
_UINT_MASK = 0xFFFFFFFF


class CommandLineError(ValueError):
    """Raised for a command line argument that cannot be accepted."""


@dataclass
class BootOptions:
    """Options selected on the command line."""

    rawbcd: bool = False
    rawwim: bool = False
    gui: bool = False
    pause: bool = False
    pause_quiet: bool = False
    index: int = 0


def _parse_index(value: str) -> int:
    """Parse an index value the way strtoul() does with base 0."""
    text = value.lstrip(_WHITESPACE)
    negative = text.startswith("-")
    if text[:1] in ("+", "-"):
        text = text[1:]
    if text[:2] in ("0x", "0X") and _DIGITS[16].match(text, 2):
        base, digits = 16, text[2:]
    elif text.startswith("0"):
        base, digits = 8, text
    else:
        base, digits = 10, text
    match = _DIGITS[base].match(digits)
    if match is None or match.end() != len(digits):
        raise CommandLineError(f'Invalid index "{value}"')
    number = int(match.group(), base)
    if number > _ULONG_MAX:
        number = _ULONG_MAX
    elif negative:
        number = -number % (_ULONG_MAX + 1)
    return number & _UINT_MASK


def parse_cmdline(cmdline: str | None) -> BootOptions:
    """Parse a whitespace-separated command line into boot options.

    An unrecognised argument at the very start of the command line is
    ignored, since it may be the program name.
    """
    options = BootOptions()
    if not cmdline:
        return options

    for match in _ARGUMENT_PATTERN.finditer(cmdline):
        key, sep, rest = match.group().partition("=")
        value = rest.rpartition("=")[2] if sep else None

        if key == "rawbcd":
            options.rawbcd = True
        elif key == "rawwim":
            options.rawwim = True
        elif key == "gui":
            options.gui = True
        elif key == "pause":
            options.pause = True
            if value == "quiet":
                options.pause_quiet = True
        elif key == "index":
            if not value:
                raise CommandLineError('Argument "index" needs a value')
            options.index = _parse_index(value)
        elif key == "initrdfile":
            pass
        elif match.start() == 0:
            pass
        else:
            shown = key if value is None else f"{key}={value}"
            raise CommandLineError(f'Unrecognised argument "{shown}"')

    return options