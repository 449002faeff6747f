from abc import ABC, abstractmethod
import io
from typing import BinaryIO, Tuple


class Compressor(ABC):
    """
    Interface for compressing and decompressing binary streams.
    Implementations collect log lines in self.log and return them
    joined from compress() and decompress().
    """

    def __init__(self) -> None:
        self.log: list[str] = []

    @abstractmethod
    def compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Read every byte of the input stream and write the compressed
        form to the output stream.

        Args:
            input_stream: Input stream with the data
            output_stream: Output stream for the compressed data

        Returns:
            Log information
        """

    @abstractmethod
    def decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Read a compressed stream and write the restored bytes to the
        output stream.

        Args:
            input_stream: Input stream with the compressed data
            output_stream: Output stream for the restored data

        Returns:
            Log information
        """

    def log_size_change(self, before: int, after: int) -> None:
        """Append a line describing how the size changed."""
        diff = before - after
        if diff > 0:
            ratio = diff / before * 100
            self.log.append(f"Size reduced by {diff} bytes ({ratio:.1f}% total saving)")
        else:
            self.log.append(f"Size increased by {-diff} bytes")

    @classmethod
    def compress_file(cls, input_file: str, output_file: str, **kwargs) -> str:
        """
        Helper for compressing a file.

        Args:
            input_file: Path to the input file
            output_file: Path to the output file
            **kwargs: Passed to the compressor constructor

        Returns:
            Log information
        """
        compressor = cls(**kwargs)
        with open(input_file, "rb") as in_file, open(output_file, "wb") as out_file:
            return compressor.compress(in_file, out_file)

    @classmethod
    def decompress_file(cls, input_file: str, output_file: str, **kwargs) -> str:
        """
        Helper for decompressing a file.

        Args:
            input_file: Path to the compressed file
            output_file: Path to the output file
            **kwargs: Passed to the compressor constructor

        Returns:
            Log information
        """
        compressor = cls(**kwargs)
        with open(input_file, "rb") as in_file, open(output_file, "wb") as out_file:
            return compressor.decompress(in_file, out_file)

    @classmethod
    def compress_bytes(cls, data: bytes, **kwargs) -> Tuple[bytes, str]:
        """
        Helper for compressing bytes in memory.

        Args:
            data: Data to compress

        Returns:
            Tuple (compressed data, log information)
        """
        compressor = cls(**kwargs)
        out_buffer = io.BytesIO()
        log_info = compressor.compress(io.BytesIO(data), out_buffer)
        return out_buffer.getvalue(), log_info

    @classmethod
    def decompress_bytes(cls, data: bytes, **kwargs) -> Tuple[bytes, str]:
        """
        Helper for decompressing bytes in memory.

        Args:
            data: Compressed data

        Returns:
            Tuple (restored data, log information)
        """
        compressor = cls(**kwargs)
        out_buffer = io.BytesIO()
        log_info = compressor.decompress(io.BytesIO(data), out_buffer)
        return out_buffer.getvalue(), log_info
