"""Building and walking UEFI device paths."""

from __future__ import annotations

END_DEVICE_PATH_TYPE = 0x7F
END_ENTIRE_DEVICE_PATH_SUBTYPE = 0xFF
NODE_HEADER_LEN = 4
_MAX_NODE_LEN = 0xFFFF


class DevicePathError(ValueError):
    """Raised for a malformed device path."""


def make_node(node_type: int, subtype: int, payload: bytes = b"") -> bytes:
    """Build one device path node: type, subtype, 16-bit length, payload."""
    if not 0 <= node_type <= 0xFF or not 0 <= subtype <= 0xFF:
        raise ValueError("node type and subtype must fit in a byte")
    length = NODE_HEADER_LEN + len(payload)
    if length > _MAX_NODE_LEN:
        raise ValueError(f"device path node too long: {length} bytes")
    return bytes((node_type, subtype)) + length.to_bytes(2, "little") + bytes(payload)


def end_node() -> bytes:
    """Build the node that ends an entire device path."""
    return make_node(END_DEVICE_PATH_TYPE, END_ENTIRE_DEVICE_PATH_SUBTYPE)


def devpath_end(path: bytes) -> int:
    """Return the byte offset of the end node within a device path."""
    buf = bytes(path)
    offset = 0
    while True:
        if offset + NODE_HEADER_LEN > len(buf):
            raise DevicePathError(f"device path truncated at offset {offset}")
        if buf[offset] == END_DEVICE_PATH_TYPE:
            return offset
        length = int.from_bytes(buf[offset + 2:offset + 4], "little")
        if length < NODE_HEADER_LEN:
            raise DevicePathError(f"invalid node length {length} at offset {offset}")
        offset += length