"""Boot command line parsing, CPIO, LZNT1/LZX, PE layout, SHA-1, device paths and printf formatting."""

__version__ = "0.1.0"