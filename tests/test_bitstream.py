import io

import bitstream
from bitstream import BitReader, BitWriter


def _write(pairs):
    sink = io.BytesIO()
    writer = BitWriter(sink)
    for pattern, length in pairs:
        writer.write_bits(pattern, length)
    writer.flush()
    return sink.getvalue(), writer


def test_partial_byte_is_padded_with_zeros():
    out, writer = _write([(0b101, 3)])
    assert out == b"\xa0"
    assert writer.bits_written == 3


def test_byte_boundary_emits_no_padding_byte():
    out, _ = _write([(0b1111, 4), (0b0001, 4)])
    assert out == b"\xf1"


def test_bits_are_packed_msb_first_across_bytes():
    out, _ = _write([(0b1, 1), (0xFF, 8), (0b01, 2)])
    # 1 11111111 01 -> 11111111 10100000
    assert out == b"\xff\xa0"


def test_only_low_bits_of_pattern_are_written():
    out, _ = _write([(0b111010, 3)])
    assert out == b"\x40"


def test_flush_with_nothing_pending_writes_nothing():
    out, writer = _write([])
    assert out == b""
    assert writer.bits_written == 0


def test_writer_hands_full_batches_to_sink(monkeypatch):
    monkeypatch.setattr(bitstream, "WRITE_BATCH_SIZE", 4)
    sink = io.BytesIO()
    writer = BitWriter(sink)
    for value in range(10):
        writer.write_bits(value, 8)
    assert sink.getvalue() == bytes(range(8))
    writer.flush()
    assert sink.getvalue() == bytes(range(10))


def test_reader_returns_bits_msb_first_then_none():
    reader = BitReader(io.BytesIO(b"\x81"))
    bits = [reader.read_bit() for _ in range(8)]
    assert bits == [1, 0, 0, 0, 0, 0, 0, 1]
    assert reader.read_bit() is None
    assert reader.read_bit() is None


def test_reader_on_empty_source():
    reader = BitReader(io.BytesIO(b""))
    assert reader.read_bit() is None


def test_reader_refills_across_chunks():
    data = bytes([0b10101010, 0b11110000, 0b00001111])
    reader = BitReader(io.BytesIO(data), chunk_size=1)
    bits = []
    while True:
        bit = reader.read_bit()
        if bit is None:
            break
        bits.append(bit)
    assert "".join(map(str, bits)) == "101010101111000000001111"


def test_reader_reads_back_what_writer_wrote():
    pairs = [(0b0, 1), (0b10, 2), (0b110, 3), (0b1110, 4), (0b11110, 5)]
    out, writer = _write(pairs)
    reader = BitReader(io.BytesIO(out))
    bits = [reader.read_bit() for _ in range(writer.bits_written)]
    assert "".join(map(str, bits)) == "010110111011110"
    # padding bits are zeros
    assert reader.read_bit() == 0
