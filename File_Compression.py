import io
import os
import sys
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass

from bitstream import BitReader, BitWriter
from container import HEADER_SIZE, read_header, write_header
from errors import CorruptDataError, HuffmanError, InternalError, UnexpectedEndOfDataError
from huffman import CHUNK_SIZE, build_code_table, build_huffman_tree, count_frequencies

HUFF_EXTENSION = ".huff"


@dataclass
class CompressionStats:
    original_size: int
    compressed_size: int
    distinct_symbols: int
    payload_bits: int

    @property
    def ratio(self):
        if not self.compressed_size:
            return 0
        return self.original_size / self.compressed_size

    @property
    def saved_percent(self):
        # Negative when the header outweighs the savings (tiny files)
        if not self.original_size:
            return 0
        return 100 * (1 - self.compressed_size / self.original_size)

    def as_dict(self):
        return {
            "original_size": self.original_size,
            "compressed_size": self.compressed_size,
            "distinct_symbols": self.distinct_symbols,
            "payload_bits": self.payload_bits,
            "ratio": round(self.ratio, 3),
            "saved_percent": round(self.saved_percent, 2),
        }


### COMPRESSION ###

def compress_stream(src, dst):
    """
    Compresses a seekable binary stream into dst.

    The input is read twice from its current position: once to count
    frequencies and, after seeking back, once more to encode it.
    """
    # 1) Count frequencies from the current position onwards
    start = src.tell()
    frequency, original_size = count_frequencies(src)

    # 2) Build tree and code table
    root = build_huffman_tree(frequency)
    table = build_code_table(root)

    # 3) Write header
    write_header(dst, original_size, frequency)

    # 4) Encode data
    writer = BitWriter(dst)
    if original_size > 0:
        src.seek(start)
        chunk = src.read(CHUNK_SIZE)
        while chunk:
            for byte_int in chunk:
                pattern, length = table[byte_int]
                if length == 0:
                    raise InternalError(f"Internal error: missing code for byte {byte_int}.")
                writer.write_bits(pattern, length)
            chunk = src.read(CHUNK_SIZE)
    writer.flush()

    return CompressionStats(
        original_size=original_size,
        compressed_size=HEADER_SIZE + (writer.bits_written + 7) // 8,
        distinct_symbols=sum(1 for freq in frequency if freq > 0),
        payload_bits=writer.bits_written,
    )


def compress_bytes(data):
    out = io.BytesIO()
    compress_stream(io.BytesIO(data), out)
    return out.getvalue()


def compress_file(input_path, output_path=None):
    """
    Compresses input_path into a .huff container.
    Returns the CompressionStats of the run.
    """
    if output_path is None:
        output_path = input_path + HUFF_EXTENSION

    with open(input_path, 'rb') as input_file:
        with _atomic_output(output_path) as output_file:
            return compress_stream(input_file, output_file)


### DECOMPRESSION ###

def decompress_stream(src, dst):
    """
    Decodes a .huff container from src into dst.
    Returns the number of bytes written.
    """
    # --- PHASE 1: Read header and rebuild the Huffman tree ---
    original_size, frequency = read_header(src)
    root = build_huffman_tree(frequency)

    if original_size == 0:
        return 0
    if root is None:
        raise CorruptDataError("Corrupt file: missing Huffman tree.")

    # --- PHASE 2: Walk the tree bit by bit ---
    reader = BitReader(src)
    output_buffer = bytearray()
    written = 0
    current_node = root

    while written < original_size:
        if current_node.is_leaf:
            output_buffer.append(current_node.byte)
            written += 1
            current_node = root
            if len(output_buffer) >= CHUNK_SIZE:
                dst.write(output_buffer)
                output_buffer = bytearray()
            continue

        bit = reader.read_bit()
        if bit is None:
            raise UnexpectedEndOfDataError(original_size, written)

        current_node = current_node.left if bit == 0 else current_node.right
        if current_node is None:
            raise CorruptDataError("Corrupt Huffman tree or data.")

    if output_buffer:
        dst.write(output_buffer)
    return written


def decompress_bytes(blob):
    out = io.BytesIO()
    decompress_stream(io.BytesIO(blob), out)
    return out.getvalue()


def default_decompressed_path(compressed_path):
    if compressed_path.endswith(HUFF_EXTENSION):
        return compressed_path[:-len(HUFF_EXTENSION)]
    return compressed_path + ".out"


def decompress_file(compressed_path, output_path=None):
    """
    Decompresses a .huff container. Returns the number of bytes written.
    """
    if output_path is None:
        output_path = default_decompressed_path(compressed_path)

    with open(compressed_path, 'rb') as input_file:
        with _atomic_output(output_path) as output_file:
            return decompress_stream(input_file, output_file)


@contextmanager
def _atomic_output(path):
    """
    Yields a temporary file next to path and moves it into place on a clean
    exit. On an exception the temporary file is deleted, so a failed run
    never leaves a half-written output behind.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".huffpack-", dir=directory)
    try:
        with os.fdopen(fd, 'wb') as tmp_file:
            yield tmp_file
    except BaseException:
        os.remove(tmp_path)
        raise
    # mkstemp creates the file 0600; give it the mode a plain open() would
    os.chmod(tmp_path, 0o666 & ~_current_umask())
    os.replace(tmp_path, path)


def _current_umask():
    mask = os.umask(0)
    os.umask(mask)
    return mask


### COMMAND LINE ###

USAGE = (
    "Usage:\n"
    "  huffpack c <input> [output.huff]   Compress\n"
    "  huffpack d <input.huff> [output]   Decompress"
)


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    if len(argv) not in (2, 3):
        print(USAGE, file=sys.stderr)
        return 2

    mode = argv[0].lstrip("-")
    inp = argv[1]
    outp = argv[2] if len(argv) == 3 else None

    if mode not in ("c", "d"):
        print("Invalid mode. Use 'c' for compression, 'd' for decompression.", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2

    try:
        if mode == "c":
            outp = outp or inp + HUFF_EXTENSION
            stats = compress_file(inp, outp)
            print(f"✅ Compressed '{inp}' → '{outp}'")
            print(f"Original Size: {stats.original_size} bytes")
            print(f"Compressed Size: {stats.compressed_size} bytes")
            if stats.original_size > 0:
                print(f"Compression achieved: {stats.saved_percent:.2f}% reduction.")
        else:
            outp = outp or default_decompressed_path(inp)
            written = decompress_file(inp, outp)
            print(f"✅ Decompressed '{inp}' → '{outp}' ({written} bytes)")
    except HuffmanError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"❌ {e.filename or inp}: {e.strerror or e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
