"""
Errors raised while decoding a Huffman-compressed stream
"""


class HuffException(ValueError):
    """Base class for every failure to decode a compressed stream."""


class BadMagicHeader(HuffException):
    """The leading 32-bit value does not match the format magic."""


class MalformedHeader(HuffException):
    """The tree header ends before the tree is complete."""


class MalformedBody(HuffException):
    """The encoded body ends before the end-of-stream symbol."""


MissingTerminator = MalformedBody
