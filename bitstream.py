# --- CONSTANTS ---
# Packed bytes are handed to the sink in batches of this size
WRITE_BATCH_SIZE = 1 << 15
READ_CHUNK_SIZE = 1 << 15


# --- BIT WRITER ---

class BitWriter:
    """
    Packs bits MSB-first into bytes and writes them to a binary sink.

    Up to 7 bits are held back between calls; flush() pads them with zeros
    and writes the final byte.
    """

    def __init__(self, sink):
        self.sink = sink
        self.buffer = 0        # partial byte being built
        self.bit_count = 0     # bits currently held in buffer (0..7)
        self.bits_written = 0  # total payload bits accepted
        self._packed = bytearray()

    def write_bit(self, bit):
        self.buffer = (self.buffer << 1) | (1 if bit else 0)
        self.bit_count += 1
        self.bits_written += 1

        if self.bit_count == 8:
            self._emit(self.buffer)
            self.buffer = 0
            self.bit_count = 0

    def write_bits(self, pattern, length):
        """Writes the low `length` bits of pattern, most significant first."""
        for i in range(length - 1, -1, -1):
            self.write_bit((pattern >> i) & 1)

    def flush(self):
        # Handle final padding: shift pending bits to the top of the byte
        if self.bit_count > 0:
            padding_bits = 8 - self.bit_count
            self._emit(self.buffer << padding_bits)
            self.buffer = 0
            self.bit_count = 0
        if self._packed:
            self.sink.write(self._packed)
            self._packed = bytearray()

    def _emit(self, byte):
        self._packed.append(byte)
        if len(self._packed) >= WRITE_BATCH_SIZE:
            self.sink.write(self._packed)
            self._packed = bytearray()


# --- BIT READER ---

class BitReader:
    """Reads bits MSB-first from a binary source. read_bit() returns None once the source runs dry."""

    def __init__(self, source, chunk_size=READ_CHUNK_SIZE):
        self.source = source
        self.chunk_size = chunk_size
        self.byte_value = 0
        self.bits_left = 0     # unread bits remaining in byte_value (0..8)
        self._chunk = b""
        self._pos = 0

    def read_bit(self):
        if self.bits_left == 0:
            if not self._next_byte():
                return None

        self.bits_left -= 1
        return (self.byte_value >> self.bits_left) & 1

    def _next_byte(self):
        if self._pos >= len(self._chunk):
            self._chunk = self.source.read(self.chunk_size)
            self._pos = 0
            if not self._chunk:
                return False
        self.byte_value = self._chunk[self._pos]
        self._pos += 1
        self.bits_left = 8
        return True
