"""
Huffman coding algorithm -
frequency counting, tree construction, code
generation and the tree header format
"""

import heapq
from itertools import count

from bit_reader import END_OF_STREAM, BitReader
from bit_writer import BitWriter
from huff_exception import MalformedHeader

BITS_PER_WORD = 8
ALPH_SIZE = 1 << BITS_PER_WORD
PSEUDO_EOF = ALPH_SIZE
# leaf values in the header need room for PSEUDO_EOF
SYMBOL_BITS = BITS_PER_WORD + 1


class Node:
    """
    Class object for Node in Huffman's Tree
    """

    def __init__(self, value: int, val_freq: int, left=None, right=None, order=0):
        """
        Function initializes the structure of a node.

        :param value: symbol held by a leaf, 0 for internal nodes
        :param val_freq: int, the frequency in our data for this value
        :param left: left subtree, None for leaves
        :param right: right subtree, None for leaves
        :param order: int, arrival number used to break weight ties
        """
        self.left = left
        self.right = right
        self.value = value
        self.val_freq = val_freq
        self.order = order

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __lt__(self, val):
        return (self.val_freq, self.order) < (val.val_freq, val.order)

    def __repr__(self):
        if self.is_leaf():
            return f"Node({self.value}, {self.val_freq})"
        return f"Node(weight={self.val_freq}, {self.left!r}, {self.right!r})"


def char_frequency(reader: BitReader) -> list[int]:
    """
    Function counts every 8-bit word of the stream.
    The PSEUDO_EOF count is always 1.

    :param reader: BitReader positioned at the start of the data
    :return: list of ALPH_SIZE + 1 counts indexed by symbol
    """
    counts = [0] * (ALPH_SIZE + 1)
    while True:
        val = reader.read_bits_msb(BITS_PER_WORD)
        if val == END_OF_STREAM:
            break
        counts[val] += 1
    counts[PSEUDO_EOF] = 1
    return counts


class HuffmanTree:
    """
    Class object for Huffman Tree - main structure used
    in Huffman coding algorithm. Object includes the code
    table and the header reader/writer.
    """

    def __init__(self, root: Node | None = None):
        self.root = root
        self.res_codes: dict[int, str] = {}

    @classmethod
    def build_from_freq(cls, counts: list[int]) -> "HuffmanTree":
        """
        Builds a Huffman tree from a table of symbol counts and
        generates the prefix codes.

        Ties between equal weights go to the node that entered the
        heap first, so identical counts always give the same tree.

        :param counts: list of counts indexed by symbol
        :return: HuffmanTree with filled res_codes
        """
        arrival = count()
        nodes = [
            Node(sym, freq, order=next(arrival))
            for sym, freq in enumerate(counts)
            if freq
        ]
        if len(nodes) < 2:
            # only PSEUDO_EOF: pair it with an empty leaf for byte 0
            # so every code is at least one bit long
            nodes.insert(0, Node(0, 0, order=next(arrival)))

        heapq.heapify(nodes)
        while len(nodes) > 1:
            # left smallest node
            l = heapq.heappop(nodes)
            # right smallest node
            r = heapq.heappop(nodes)
            heapq.heappush(
                nodes, Node(0, l.val_freq + r.val_freq, l, r, order=next(arrival))
            )

        tree = cls(nodes[0])
        tree.codes_generation()
        return tree

    def codes_generation(self, node=None, curr_code=""):
        """
        Recursive function that generates
        code for each symbol, preorder traversal of Huffman's tree

        :param node: node to start traversal from
        :param curr_code: str, current code of a symbol
        """
        # if node is not passed, we start traversal from the root
        if node is None:
            node = self.root
            self.res_codes = {}

        if node.is_leaf():
            self.res_codes[node.value] = curr_code
            return

        self.codes_generation(node.left, curr_code + "0")
        self.codes_generation(node.right, curr_code + "1")

    def leaves(self) -> list[Node]:
        """Leaves of the tree from left to right."""
        result, stack = [], [self.root]
        while stack:
            node = stack.pop()
            if node.is_leaf():
                result.append(node)
            else:
                stack.append(node.right)
                stack.append(node.left)
        return result

    def header_bit_count(self) -> int:
        """Exact size of write_header output in bits."""
        n_leaves = len(self.leaves())
        return n_leaves * (1 + SYMBOL_BITS) + (n_leaves - 1)

    def write_header(self, writer: BitWriter, node=None):
        """
        Writes the tree in preorder: 0 for an internal node followed
        by its left and right subtrees, 1 and a SYMBOL_BITS value for
        a leaf.

        :param writer: BitWriter to write the header to
        :param node: node to start from, root by default
        """
        if node is None:
            node = self.root

        if node.is_leaf():
            writer.write_bits_msb(1, 1)
            writer.write_bits_msb(node.value, SYMBOL_BITS)
            return

        writer.write_bits_msb(0, 1)
        self.write_header(writer, node.left)
        self.write_header(writer, node.right)

    @classmethod
    def read_header(cls, reader: BitReader) -> "HuffmanTree":
        """
        Rebuilds a tree written by write_header, consuming exactly
        the bits that were written for it.

        Uses an explicit stack of internal nodes that still miss a
        child, so header depth is not limited by recursion.

        :param reader: BitReader positioned at the start of the header
        :return: HuffmanTree, res_codes are left empty
        :raises MalformedHeader: if the stream ends inside the header
        """
        root = None
        pending: list[Node] = []
        while True:
            bit = reader.read_bit()
            if bit == END_OF_STREAM:
                raise MalformedHeader(
                    f"Header ended after {reader.bits_read} bits"
                )
            if bit == 0:
                node = Node(0, 0)
            else:
                value = reader.read_bits_msb(SYMBOL_BITS)
                if value == END_OF_STREAM:
                    raise MalformedHeader(
                        f"Header ended inside a leaf value after {reader.bits_read} bits"
                    )
                if value > PSEUDO_EOF:
                    raise MalformedHeader(f"Leaf value {value} is not a symbol")
                node = Node(value, 0)

            if pending:
                parent = pending[-1]
                if parent.left is None:
                    parent.left = node
                else:
                    parent.right = node
                    pending.pop()
            else:
                root = node

            if bit == 0:
                pending.append(node)
            if not pending:
                break

        return cls(root)
