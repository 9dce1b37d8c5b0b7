### ERROR TYPES ###
# Everything the compressor can complain about. I/O problems are left as the
# OSError Python already raises for them.


class HuffmanError(Exception):
    """Base class for every compressor/decompressor failure."""


class FormatError(HuffmanError):
    """The input is not a valid .huff container."""


class BadMagicError(FormatError):
    pass


class TruncatedHeaderError(FormatError):
    def __init__(self, field):
        self.field = field
        super().__init__(f"Truncated header ({field}).")


class CorruptDataError(HuffmanError):
    """The header was fine but the payload does not decode."""


class UnexpectedEndOfDataError(CorruptDataError):
    def __init__(self, expected, decoded):
        self.expected = expected
        self.decoded = decoded
        super().__init__(
            f"Unexpected end of encoded data: expected {expected} bytes, decoded {decoded}."
        )


class InternalError(HuffmanError):
    """A broken invariant inside the encoder (a bug, not bad input)."""


class HeaderOverflowError(HuffmanError, ValueError):
    """A value does not fit the fixed-width header fields (32-bit counts)."""
