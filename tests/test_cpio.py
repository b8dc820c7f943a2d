import pytest
from hypothesis import given
from hypothesis import strategies as st

from wimtools.cpio import CpioEntry, CpioError, cpio_extract, iter_cpio


def _pad4(blob):
    return blob + b"\0" * (-len(blob) % 4)


def _header(name, size, magic=b"070701"):
    fields = [1, 0o100644, 0, 0, 1, 0, size, 0, 0, 0, 0, len(name) + 1, 0]
    return magic + b"".join(b"%08x" % value for value in fields)


def _entry(name, data, pad_data=True):
    raw_name = name.encode()
    head = _pad4(_header(raw_name, len(data)) + raw_name + b"\0")
    return head + (_pad4(data) if pad_data else data)


def _archive(files):
    body = b"".join(_entry(name, data) for name, data in files)
    return body + _entry("TRAILER!!!", b"")


def test_round_trip():
    files = [("bootmgr", b"hello world"), ("BCD", b"\x01\x02\x03"), ("boot.wim", b"")]
    entries = list(iter_cpio(_archive(files)))
    assert entries == [CpioEntry(name, data) for name, data in files]


@given(
    st.lists(
        st.tuples(
            st.text(alphabet="abcdefghijklmnopqrstuvwxyz._", min_size=1, max_size=20),
            st.binary(max_size=64),
        ),
        max_size=5,
    )
)
def test_round_trip_property(files):
    assert list(iter_cpio(_archive(files))) == [CpioEntry(n, d) for n, d in files]


def test_empty_archive():
    assert list(iter_cpio(b"")) == []


def test_only_padding():
    assert list(iter_cpio(b"\0" * 64)) == []


def test_stops_at_trailer():
    data = _archive([("a", b"1")]) + _entry("b", b"2")
    assert [entry.name for entry in iter_cpio(data)] == ["a"]


def test_padding_between_archives():
    data = _archive([("a", b"1")])[:-len(_entry("TRAILER!!!", b""))]
    data += b"\0" * 16 + _archive([("b", b"22")])
    assert list(iter_cpio(data)) == [CpioEntry("a", b"1"), CpioEntry("b", b"22")]


def test_unpadded_final_entry():
    data = _entry("x", b"abc", pad_data=False)
    assert list(iter_cpio(data)) == [CpioEntry("x", b"abc")]


def test_bad_magic():
    with pytest.raises(CpioError, match="magic"):
        list(iter_cpio(b"070702" + _entry("x", b"abc")[6:]))


def test_truncated_header():
    with pytest.raises(CpioError, match="header"):
        list(iter_cpio(b"070701" + b"0" * 10))


def test_truncated_file():
    data = _entry("x", b"abcdefgh")[:-4]
    with pytest.raises(CpioError, match="file"):
        list(iter_cpio(data))


def test_stray_trailing_zero_bytes():
    data = _entry("x", b"abcd") + b"\0\0"
    with pytest.raises(CpioError, match="header"):
        list(iter_cpio(data))


def test_extract_calls_handler_for_each_file():
    seen = []
    result = cpio_extract(_archive([("a", b"1"), ("b", b"2")]), lambda n, d: seen.append((n, d)))
    assert result is None
    assert seen == [("a", b"1"), ("b", b"2")]


def test_extract_stops_on_handler_result():
    seen = []

    def handler(name, data):
        seen.append(name)
        return "stop"

    assert cpio_extract(_archive([("a", b"1"), ("b", b"2")]), handler) == "stop"
    assert seen == ["a"]


def test_extract_reports_archive_error():
    with pytest.raises(CpioError):
        cpio_extract(b"garbage" * 20, lambda n, d: None)