from typing import BinaryIO

from bitarray import bitarray
from bitarray.util import ba2int

# Returned by reads that run past the last available bit.
END_OF_STREAM = -1


class BitReader:
    """
    A class for reading bits from a binary stream.
    The whole stream is loaded into a bitarray, so the reader can be
    rewound to the first bit for a second pass over the same data.
    """

    def __init__(self, in_stream: BinaryIO) -> None:
        """
        Initialize BitReader by reading the entire stream into a bitarray.

        Args:
            in_stream: Binary stream opened for reading
        """
        self.bits = bitarray(endian="big")
        self.bits.frombytes(in_stream.read())
        self.pos = 0

    @property
    def bits_read(self) -> int:
        """Number of bits consumed since construction or the last reset."""
        return self.pos

    def __len__(self) -> int:
        return len(self.bits)

    def read_bit(self) -> int:
        """
        Read one bit from the stream.

        Returns:
            The bit value (0 or 1), or END_OF_STREAM if the stream is exhausted
        """
        return self.read_bits_msb(1)

    def read_bits_msb(self, n: int) -> int:
        """
        Read n bits in MSB-first order and return as an integer.
        Nothing is consumed when fewer than n bits remain.

        Args:
            n: Number of bits to read

        Returns:
            The value as an unsigned integer, or END_OF_STREAM

        Raises:
            ValueError: If n is negative
        """
        if n < 0:
            raise ValueError("Length cannot be negative")
        if n == 0:
            return 0
        if self.pos + n > len(self.bits):
            return END_OF_STREAM
        val = ba2int(self.bits[self.pos : self.pos + n])
        self.pos += n
        return val

    def reset(self) -> None:
        """Move the position back to the first bit of the stream."""
        self.pos = 0
