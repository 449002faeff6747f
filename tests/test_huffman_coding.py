import io
from itertools import combinations

import pytest

from bit_reader import BitReader
from bit_writer import BitWriter
from huff_exception import MalformedHeader
from huffman_coding import (
    ALPH_SIZE,
    PSEUDO_EOF,
    HuffmanTree,
    Node,
    char_frequency,
)


def counts_of(data: bytes) -> list[int]:
    return char_frequency(BitReader(io.BytesIO(data)))


def header_bits(tree: HuffmanTree) -> tuple[bytes, int]:
    out = io.BytesIO()
    writer = BitWriter(out)
    tree.write_header(writer)
    writer.close()
    return out.getvalue(), writer.bits_written


def test_char_frequency():
    counts = counts_of(b"abracadabra")
    assert len(counts) == ALPH_SIZE + 1
    assert counts[ord("a")] == 5
    assert counts[ord("b")] == 2
    assert counts[ord("r")] == 2
    assert counts[ord("c")] == 1
    assert counts[ord("d")] == 1
    assert counts[PSEUDO_EOF] == 1
    assert sum(counts) == 12


def test_char_frequency_empty_input():
    counts = counts_of(b"")
    assert counts[PSEUDO_EOF] == 1
    assert sum(counts) == 1


def test_pseudo_eof_count_is_forced_to_one():
    counts = counts_of(bytes(range(256)) * 3)
    assert counts[PSEUDO_EOF] == 1
    assert all(c == 3 for c in counts[:ALPH_SIZE])


def test_node_order_breaks_weight_ties():
    first = Node(7, 3, order=0)
    second = Node(1, 3, order=1)
    assert first < second
    assert not second < first
    assert Node(9, 2, order=5) < first


def test_single_symbol_gives_two_one_bit_codes():
    tree = HuffmanTree.build_from_freq(counts_of(b"A" * 1000))
    assert tree.res_codes == {PSEUDO_EOF: "0", ord("A"): "1"}
    assert [leaf.value for leaf in tree.leaves()] == [PSEUDO_EOF, ord("A")]
    assert tree.root.val_freq == 1001


def test_empty_input_gives_two_leaf_tree():
    tree = HuffmanTree.build_from_freq(counts_of(b""))
    assert not tree.root.is_leaf()
    assert tree.res_codes == {0: "0", PSEUDO_EOF: "1"}


def test_tree_shape_for_known_counts():
    # a:5 b:2 r:2 c:1 d:1 EOF:1
    tree = HuffmanTree.build_from_freq(counts_of(b"abracadabra"))
    assert tree.root.val_freq == 12
    codes = tree.res_codes
    assert set(codes) == {ord(c) for c in "abrcd"} | {PSEUDO_EOF}
    assert len(codes[ord("a")]) == 1
    # equal weights keep symbol order: c (99) before d (100) before EOF
    assert codes[ord("c")] < codes[ord("d")]


def test_build_is_deterministic():
    counts = counts_of(b"the quick brown fox jumps over the lazy dog")
    first = HuffmanTree.build_from_freq(counts)
    second = HuffmanTree.build_from_freq(counts)
    assert first.res_codes == second.res_codes
    assert header_bits(first) == header_bits(second)


@pytest.mark.parametrize(
    "data",
    [b"", b"A", b"abracadabra", bytes(range(256)), b"\x00\x00\xff" * 50],
)
def test_codes_are_prefix_free(data):
    codes = HuffmanTree.build_from_freq(counts_of(data)).res_codes
    for a, b in combinations(codes.values(), 2):
        assert not a.startswith(b)
        assert not b.startswith(a)


def test_uniform_counts_give_balanced_codes():
    counts = [1] * ALPH_SIZE + [1]
    codes = HuffmanTree.build_from_freq(counts).res_codes
    assert len(codes) == 257
    assert {len(code) for code in codes.values()} == {8, 9}


def test_write_header_layout():
    tree = HuffmanTree.build_from_freq(counts_of(b"AAAA"))
    data, n_bits = header_bits(tree)
    # 0, 1 + 100000000 (EOF), 1 + 001000001 ('A')
    assert n_bits == 21 == tree.header_bit_count()
    expected = "0" + "1" + format(PSEUDO_EOF, "09b") + "1" + format(ord("A"), "09b")
    as_bits = "".join(format(b, "08b") for b in data)
    assert as_bits.startswith(expected)
    assert as_bits[21:] == "000"


@pytest.mark.parametrize("data", [b"", b"z", b"abracadabra", bytes(range(256)) * 2])
def test_read_header_consumes_exactly_written_bits(data):
    tree = HuffmanTree.build_from_freq(counts_of(data))
    out = io.BytesIO()
    writer = BitWriter(out)
    tree.write_header(writer)
    writer.write_bits_msb(0b1011, 4)
    writer.close()

    reader = BitReader(io.BytesIO(out.getvalue()))
    restored = HuffmanTree.read_header(reader)
    assert reader.bits_read == tree.header_bit_count()
    assert reader.read_bits_msb(4) == 0b1011

    restored.codes_generation()
    assert restored.res_codes == tree.res_codes


def test_read_header_single_leaf():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_bits_msb(1, 1)
    writer.write_bits_msb(65, 9)
    writer.close()
    tree = HuffmanTree.read_header(BitReader(io.BytesIO(out.getvalue())))
    assert tree.root.is_leaf()
    assert tree.root.value == 65


def test_read_header_empty_stream():
    with pytest.raises(MalformedHeader):
        HuffmanTree.read_header(BitReader(io.BytesIO(b"")))


def test_read_header_truncated_shape():
    # eight internal-node bits and nothing else
    with pytest.raises(MalformedHeader):
        HuffmanTree.read_header(BitReader(io.BytesIO(b"\x00")))


def test_read_header_truncated_leaf_value():
    # leaf marker followed by only 7 bits
    with pytest.raises(MalformedHeader):
        HuffmanTree.read_header(BitReader(io.BytesIO(b"\x80")))


def test_read_header_rejects_unknown_symbol():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_bits_msb(1, 1)
    writer.write_bits_msb(300, 9)
    writer.close()
    with pytest.raises(MalformedHeader):
        HuffmanTree.read_header(BitReader(io.BytesIO(out.getvalue())))
