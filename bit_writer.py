from typing import BinaryIO

from bitarray import bitarray
from bitarray.util import int2ba


class BitWriter:
    """
    A class for writing bits to a binary stream with byte alignment on close.
    Complete bytes are drained to the stream once DRAIN_BITS are buffered.
    """

    DRAIN_BITS = 1 << 16

    def __init__(self, out_stream: BinaryIO) -> None:
        """
        Initialize a new BitWriter on top of a binary stream.

        Args:
            out_stream: Binary stream opened for writing
        """
        self.out_stream = out_stream
        self.bits = bitarray(endian="big")
        self.bits_written = 0
        self.closed = False

    def write_bits_msb(self, value: int, length: int) -> None:
        """
        Write the low `length` bits of value in MSB-first order.
        Used for the magic number, the tree header and Huffman codes.

        Args:
            value: Unsigned integer value to write
            length: Number of bits to write

        Raises:
            ValueError: If length is negative or the writer is closed
        """
        if self.closed:
            raise ValueError("Write to a closed BitWriter")
        if length < 0:
            raise ValueError("Length cannot be negative")
        if length == 0:
            return
        value &= (1 << length) - 1
        self.bits.extend(int2ba(value, length=length, endian="big"))
        self.bits_written += length
        if len(self.bits) >= self.DRAIN_BITS:
            self._drain()

    def _drain(self) -> None:
        full = len(self.bits) - len(self.bits) % 8
        self.out_stream.write(self.bits[:full].tobytes())
        del self.bits[:full]

    def byte_align(self) -> None:
        """Add padding bits to achieve byte alignment."""
        while len(self.bits) % 8 != 0:
            self.bits.append(0)

    def close(self) -> None:
        """
        Pad the last partial byte with zeros and write everything out.
        The underlying stream is flushed but left open for its owner.
        """
        if self.closed:
            return
        self.closed = True
        self.byte_align()
        self._drain()
        self.out_stream.flush()
