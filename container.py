import struct

from errors import BadMagicError, HeaderOverflowError, TruncatedHeaderError

# --- CONSTANTS ---
# HEADER STRUCTURE (little-endian):
#   4 bytes    magic
#   8 bytes    original file size (u64)
#   256 * 4    frequency count of each byte value (u32)
MAGIC = b"HUF1"
SIZE_FORMAT = struct.Struct("<Q")
FREQ_FORMAT = struct.Struct("<256I")
HEADER_SIZE = len(MAGIC) + SIZE_FORMAT.size + FREQ_FORMAT.size
MAX_COUNT = 0xFFFFFFFF


def write_header(out, original_size, frequency):
    """Writes magic, original size and the full 256-entry frequency table."""
    if len(frequency) != 256:
        raise ValueError(f"frequency table must have 256 entries, got {len(frequency)}")
    for byte_val, freq in enumerate(frequency):
        if not 0 <= freq <= MAX_COUNT:
            raise HeaderOverflowError(f"frequency of byte {byte_val} ({freq}) does not fit in 32 bits")

    out.write(MAGIC)
    out.write(SIZE_FORMAT.pack(original_size))
    out.write(FREQ_FORMAT.pack(*frequency))


def read_header(src):
    """
    Reads and validates the header at the current position of src.
    Returns (original_size, frequency). Raises BadMagicError or
    TruncatedHeaderError.
    """
    magic = src.read(len(MAGIC))
    if len(magic) < len(MAGIC):
        raise TruncatedHeaderError("magic")
    if magic != MAGIC:
        raise BadMagicError(f"Not a {MAGIC.decode()} file (bad magic {magic!r}).")

    size_bytes = src.read(SIZE_FORMAT.size)
    if len(size_bytes) < SIZE_FORMAT.size:
        raise TruncatedHeaderError("size")
    (original_size,) = SIZE_FORMAT.unpack(size_bytes)

    freq_bytes = src.read(FREQ_FORMAT.size)
    if len(freq_bytes) < FREQ_FORMAT.size:
        raise TruncatedHeaderError("freq")
    frequency = list(FREQ_FORMAT.unpack(freq_bytes))

    return original_size, frequency
