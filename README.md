# wimtools

Pure-Python pieces for working with the files involved in booting Windows
Imaging Format (WIM) images over the network. The package uses only the
standard library.

## What is inside

| Module | Purpose |
| --- | --- |
| `wimtools.cmdline` | `parse_cmdline()` turns a boot command line (`rawbcd`, `rawwim`, `gui`, `pause[=quiet]`, `index=N`, `initrdfile`) into a `BootOptions` dataclass |
| `wimtools.cpio` | `iter_cpio()` and `cpio_extract()` walk "newc" (`070701`) CPIO archives such as initrd images |
| `wimtools.sha1` | `Sha1`, a streaming SHA-1 hash, and the one-shot `sha1()` |
| `wimtools.devpath` | `make_node()`, `end_node()` and `devpath_end()` build EFI device path nodes and find where a path ends |
| `wimtools.huffman` | `HuffmanAlphabet`, a canonical Huffman alphabet built from code lengths, with a quick-lookup decode table |
| `wimtools.lznt1` | `lznt1_decompress()` and `lznt1_decompressed_length()` |
| `wimtools.lzx` | `lzx_decompress()` and `lzx_decompressed_length()` for the WIM variant of LZX, undoing E8 jump translation |
| `wimtools.peloader` | `load_pe()` lays out a PE image's headers and sections as they would appear in memory, returning a `LoadedPe` |
| `wimtools.printf` | `cformat()` and `snprintf()`, a small printf-style formatter |

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Parsing a command line. An unknown word at the very start is ignored, since
it may be the program name; any other unknown argument raises
`CommandLineError`:

```python
from wimtools.cmdline import parse_cmdline

options = parse_cmdline("wimboot pause=quiet index=2")
assert options.pause and options.pause_quiet
assert options.index == 2
```

`index` accepts decimal, octal (leading `0`) and hexadecimal (`0x`) values.

Listing the files in a CPIO archive. Iteration stops at the
`TRAILER!!!` entry or at the end of the data; zero padding between entries
is skipped:

```python
from wimtools.cpio import iter_cpio

with open("initrd.cpio", "rb") as f:
    for entry in iter_cpio(f.read()):
        print(entry.name, len(entry.data))
```

`cpio_extract(data, handler)` calls `handler(name, data)` for each file and
returns the first truthy value the handler gives back, or `None`.

Decompressing data:

```python
from wimtools.lznt1 import lznt1_decompress, lznt1_decompressed_length
from wimtools.lzx import lzx_decompress

plain = lznt1_decompress(compressed_lznt1)
size = lznt1_decompressed_length(compressed_lznt1)
plain = lzx_decompress(compressed_lzx)
```

Hashing. `digest()` can be called at any point and leaves the hash usable:

```python
from wimtools.sha1 import Sha1, sha1

assert sha1(b"abc").hex() == "a9993e364706816aba3e25717850c26c9cd0d89d"

h = Sha1()
h.update(b"a")
h.update(b"bc")
print(h.hexdigest())
```

Device paths:

```python
from wimtools.devpath import make_node, end_node, devpath_end

path = make_node(0x01, 0x04, bytes(16)) + end_node()
assert devpath_end(path) == 20
```

Loading a PE image. The resulting `LoadedPe` holds `base`, `entry`
(base plus entry point), `image` (headers and sections padded to the section
alignment, followed by a copy of the raw file), `raw_offset` (where that copy
starts), `sections` and `len`:

```python
from wimtools.peloader import load_pe

with open("bootmgr.exe", "rb") as f:
    pe = load_pe(f.read())
print(hex(pe.base), hex(pe.entry), [s.name for s in pe.sections])
```

Formatting. The flags `#` and `0`, a field width, the length modifiers
`hh`, `h`, `l`, `ll` and `z`, and the conversions `d`, `i`, `x`, `X`, `c`,
`s` and `p` are understood; any other conversion character is written out as
itself. `snprintf(size, fmt, *args)` returns the text that fits in a buffer
of `size` characters including the terminator, together with the full
length:

```python
from wimtools.printf import cformat, snprintf

assert cformat("%#08x", 0x1234) == "0x00001234"
assert snprintf(4, "%d", 12345) == ("123", 5)
```

## Errors

Corrupt or truncated input raises a module-specific exception, each a
subclass of `ValueError`: `CommandLineError`, `CpioError`, `DevicePathError`,
`HuffmanError`, `Lznt1Error`, `LzxError` or `PeError`.

## What this package does not do

It provides the parsing, decompression and layout pieces only. It does not
boot anything: there is no command-line tool, no BIOS or UEFI environment,
no virtual disk, no reading of files out of WIM images and no XCA
decompression.