import hashlib

import pytest
from hypothesis import given
from hypothesis import strategies as st

from wimtools.sha1 import Sha1, sha1


def test_abc_vector():
    assert Sha1(b"abc").hexdigest() == "a9993e364706816aba3e25717850c26c9cd0d89d"


def test_empty_matches_reference():
    assert sha1(b"") == hashlib.sha1(b"").digest()


@pytest.mark.parametrize("size", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 128, 1000])
def test_block_boundaries(size):
    data = bytes(range(256)) * 4
    assert sha1(data[:size]) == hashlib.sha1(data[:size]).digest()


@given(st.binary(max_size=300))
def test_matches_reference(data):
    assert sha1(data) == hashlib.sha1(data).digest()


@given(st.lists(st.binary(max_size=100), max_size=6))
def test_incremental_equals_one_shot(chunks):
    hasher = Sha1()
    for chunk in chunks:
        hasher.update(chunk)
    assert hasher.digest() == sha1(b"".join(chunks))


def test_digest_does_not_finalise():
    hasher = Sha1(b"hello ")
    first = hasher.digest()
    assert hasher.digest() == first
    hasher.update(b"world")
    assert hasher.digest() == sha1(b"hello world")


def test_hexdigest_matches_digest():
    hasher = Sha1(b"some data")
    assert hasher.hexdigest() == hasher.digest().hex()
    assert len(hasher.digest()) == Sha1.digest_size


def test_accepts_bytearray_and_memoryview():
    assert sha1(bytearray(b"xyz")) == sha1(memoryview(b"xyz")) == hashlib.sha1(b"xyz").digest()