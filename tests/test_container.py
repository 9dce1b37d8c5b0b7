import io
import struct

import pytest

from container import HEADER_SIZE, MAGIC, read_header, write_header
from errors import BadMagicError, FormatError, HeaderOverflowError, HuffmanError, TruncatedHeaderError


def _header(original_size, frequency):
    out = io.BytesIO()
    write_header(out, original_size, frequency)
    return out.getvalue()


def test_header_layout():
    frequency = [0] * 256
    frequency[ord("A")] = 3
    frequency[255] = 0xFFFFFFFF
    blob = _header(3 + 0xFFFFFFFF, frequency)

    assert len(blob) == HEADER_SIZE == 1036
    assert blob[:4] == b"HUF1" == MAGIC
    assert blob[4:12] == struct.pack("<Q", 3 + 0xFFFFFFFF)
    assert blob[12 + 4 * ord("A"):16 + 4 * ord("A")] == b"\x03\x00\x00\x00"
    assert blob[-4:] == b"\xff\xff\xff\xff"


def test_read_header_round_trips_and_stops_at_payload():
    frequency = list(range(256))
    src = io.BytesIO(_header(sum(frequency), frequency) + b"PAYLOAD")
    original_size, read_freq = read_header(src)
    assert original_size == sum(frequency)
    assert read_freq == frequency
    assert src.read() == b"PAYLOAD"


def test_empty_input_header_is_all_zero():
    blob = _header(0, [0] * 256)
    assert blob[4:] == bytes(HEADER_SIZE - 4)


def test_bad_magic():
    with pytest.raises(BadMagicError):
        read_header(io.BytesIO(b"PK\x03\x04" + bytes(2000)))


@pytest.mark.parametrize("blob, field", [
    (b"", "magic"),
    (b"HU", "magic"),
    (b"HUF1", "size"),
    (b"HUF1" + bytes(7), "size"),
    (b"HUF1" + bytes(8), "freq"),
    (b"HUF1" + bytes(8 + 1023), "freq"),
])
def test_truncated_header(blob, field):
    with pytest.raises(TruncatedHeaderError) as excinfo:
        read_header(io.BytesIO(blob))
    assert excinfo.value.field == field
    assert not isinstance(excinfo.value, BadMagicError)
    assert isinstance(excinfo.value, FormatError)


def test_write_header_rejects_counts_over_32_bits():
    frequency = [0] * 256
    frequency[0] = 1 << 32
    with pytest.raises(ValueError) as excinfo:
        _header(1 << 32, frequency)
    assert isinstance(excinfo.value, HeaderOverflowError)
    assert isinstance(excinfo.value, HuffmanError)


def test_write_header_rejects_short_table():
    with pytest.raises(ValueError):
        _header(0, [0] * 255)
