import pytest
from hypothesis import given
from hypothesis import strategies as st

from wimtools.devpath import DevicePathError, devpath_end, end_node, make_node


def test_end_node_bytes():
    assert end_node() == b"\x7f\xff\x04\x00"


def test_make_node_layout():
    node = make_node(1, 4, b"payload")
    assert node[:2] == bytes([1, 4])
    assert node[4:] == b"payload"
    assert int.from_bytes(node[2:4], "little") == len(node)


def test_end_of_bare_end_node():
    assert devpath_end(end_node()) == 0


def test_end_after_nodes():
    first = make_node(1, 4, b"\x00" * 16)
    second = make_node(3, 1, b"\x01\x02\x03\x04")
    path = first + second + end_node()
    assert devpath_end(path) == len(first) + len(second)


def test_trailing_data_ignored():
    first = make_node(4, 1, b"abc")
    path = first + end_node() + make_node(1, 1, b"zz")
    assert devpath_end(path) == len(first)


@given(st.lists(st.tuples(st.integers(0, 0x7E), st.binary(max_size=40)), max_size=6))
def test_end_offset_property(nodes):
    built = [make_node(node_type, 0, payload) for node_type, payload in nodes]
    path = b"".join(built) + end_node()
    assert devpath_end(path) == len(path) - len(end_node())


def test_missing_end_raises():
    with pytest.raises(DevicePathError):
        devpath_end(make_node(1, 4, b"abc"))


def test_zero_length_node_raises():
    with pytest.raises(DevicePathError):
        devpath_end(b"\x01\x04\x00\x00" + end_node())


def test_empty_path_raises():
    with pytest.raises(DevicePathError):
        devpath_end(b"")


def test_payload_too_long():
    with pytest.raises(ValueError):
        make_node(1, 1, b"\0" * 0x10000)


@pytest.mark.parametrize("node_type, subtype", [(256, 0), (0, -1)])
def test_type_out_of_range(node_type, subtype):
    with pytest.raises(ValueError):
        make_node(node_type, subtype, b"")