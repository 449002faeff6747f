"""
Huffman file compressor.
The compressed stream holds a magic number, the Huffman tree
and the encoded data ended by a PSEUDO_EOF code.
"""

from typing import BinaryIO

from bit_reader import END_OF_STREAM, BitReader
from bit_writer import BitWriter
from compressor_ABC import Compressor
from huff_exception import BadMagicHeader, MalformedBody
from huffman_coding import (
    BITS_PER_WORD,
    PSEUDO_EOF,
    HuffmanTree,
    char_frequency,
)

BITS_PER_INT = 32
HUFF_NUMBER = 0xFACE8200
HUFF_TREE = HUFF_NUMBER | 1

DEBUG_LOW = 1
DEBUG_HIGH = 4


class HuffProcessor(Compressor):
    """
    Compresses and decompresses streams with a static Huffman code.
    Compression is lossless: decompress(compress(data)) == data.
    """

    def __init__(self, debug: int = 0) -> None:
        """
        :param debug: int, print progress when >= DEBUG_LOW and the
            code table when >= DEBUG_HIGH
        """
        super().__init__()
        self.debug = debug

    def _debug(self, level: int, message: str) -> None:
        if self.debug >= level:
            print(message)

    def compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Compresses input_stream into output_stream.
        Returns log information.
        """
        self.log.clear()
        reader = BitReader(input_stream)
        writer = BitWriter(output_stream)
        try:
            counts = char_frequency(reader)
            tree = HuffmanTree.build_from_freq(counts)
            self._debug(
                DEBUG_LOW,
                f"Read {reader.bits_read} bits, "
                f"{sum(1 for c in counts if c)} distinct symbols",
            )
            for sym, code in sorted(tree.res_codes.items()):
                self._debug(DEBUG_HIGH, f"{sym}\t{counts[sym]}\t{code}")

            writer.write_bits_msb(HUFF_TREE, BITS_PER_INT)
            tree.write_header(writer)
            self._debug(DEBUG_LOW, f"Wrote {tree.header_bit_count()} header bits")

            reader.reset()
            self.write_compressed_bits(tree.res_codes, reader, writer)
        finally:
            writer.close()

        original_size = len(reader) // 8
        final_size = (writer.bits_written + 7) // 8
        self.log.append(f"Read {original_size} bytes, wrote {writer.bits_written} bits")
        self.log_size_change(original_size, final_size)
        return "\n".join(self.log)

    @staticmethod
    def write_compressed_bits(
        codes: dict[int, str], reader: BitReader, writer: BitWriter
    ) -> None:
        """
        Writes the code of every 8-bit word left in reader,
        then the PSEUDO_EOF code.
        """
        while True:
            val = reader.read_bits_msb(BITS_PER_WORD)
            if val == END_OF_STREAM:
                break
            code = codes[val]
            writer.write_bits_msb(int(code, 2), len(code))

        code = codes[PSEUDO_EOF]
        writer.write_bits_msb(int(code, 2), len(code))

    def decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Decompresses input_stream into output_stream.
        Returns log information.

        :raises BadMagicHeader: if the stream does not start with HUFF_TREE
        :raises MalformedHeader: if the stream ends inside the tree header
        :raises MalformedBody: if the stream ends before PSEUDO_EOF
        """
        self.log.clear()
        reader = BitReader(input_stream)
        writer = BitWriter(output_stream)
        try:
            magic = reader.read_bits_msb(BITS_PER_INT)
            if magic != HUFF_TREE:
                raise BadMagicHeader(f"Illegal header starts with {magic:#x}")

            tree = HuffmanTree.read_header(reader)
            self._debug(DEBUG_LOW, f"Read {reader.bits_read} bits of magic and header")

            self.read_compressed_bits(tree, reader, writer)
        finally:
            writer.close()

        compressed_size = len(reader) // 8
        final_size = writer.bits_written // 8
        self.log.append(f"Read {reader.bits_read} bits, wrote {final_size} bytes")
        self.log_size_change(compressed_size, final_size)
        return "\n".join(self.log)

    @staticmethod
    def read_compressed_bits(
        tree: HuffmanTree, reader: BitReader, writer: BitWriter
    ) -> None:
        """
        Walks the tree one bit at a time, writing the symbol of every
        leaf reached until the PSEUDO_EOF leaf.
        """
        current = tree.root
        while True:
            bit = reader.read_bit()
            if bit == END_OF_STREAM:
                raise MalformedBody(
                    f"Bad input, no PSEUDO_EOF after {reader.bits_read} bits"
                )

            current = current.left if bit == 0 else current.right
            if current is None:
                raise MalformedBody("Code walks off the Huffman tree")

            if current.is_leaf():
                if current.value == PSEUDO_EOF:
                    break
                writer.write_bits_msb(current.value, BITS_PER_WORD)
                # start back at the root after a leaf
                current = tree.root
