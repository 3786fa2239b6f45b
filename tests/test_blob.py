import pytest

from pwstore.blob import decode_blob, encode_blob
from pwstore.errors import CorruptData


def test_encode_is_concatenation():
    assert encode_blob(b"s" * 16, b"n" * 12, b"ct") == b"s" * 16 + b"n" * 12 + b"ct"


def test_decode_splits_fields():
    data = bytes(range(16)) + bytes(range(100, 112)) + b"ciphertext"
    salt, iv, ct = decode_blob(data)
    assert salt == bytes(range(16))
    assert iv == bytes(range(100, 112))
    assert ct == b"ciphertext"


def test_decode_minimum_length():
    salt, iv, ct = decode_blob(b"\x00" * 28)
    assert len(salt) == 16 and len(iv) == 12
    assert ct == b""


@pytest.mark.parametrize("size", [0, 1, 16, 27])
def test_decode_too_short(size):
    with pytest.raises(CorruptData):
        decode_blob(b"\x00" * size)
