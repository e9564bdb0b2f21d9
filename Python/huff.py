#Brad Arrington
import heapq
import io
import sys
from typing import BinaryIO, Optional

from bitio import CompressorBitio

BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
END_OF_STREAM = ALPH_SIZE
SYMBOL_BITS = BITS_PER_WORD + 1
HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1

DEBUG_LOW = 1
DEBUG_HIGH = 4

COMPRESSION_NAME = "static order 0 model with Huffman coding and a tree header"
USAGE = "infile outfile [-d]\n\nSpecifying -d will dump the modeling data\n"


class FormatError(Exception):
    """Compressed input is not a valid tree-header Huffman stream."""


class Node:
    def __init__(self, value: int = 0, count: int = 0,
                 child_0: Optional['Node'] = None, child_1: Optional['Node'] = None):
        self.value = value
        self.count = count
        self.child_0 = child_0
        self.child_1 = child_1

    def is_leaf(self) -> bool:
        return self.child_0 is None and self.child_1 is None


class Code:
    def __init__(self, code: int = 0, code_bits: int = 0):
        self.code = code
        self.code_bits = code_bits


def compress_file(input_file: BinaryIO, output_bit_file: CompressorBitio.BitFile, debug: int = 0):
    counts = count_bytes(input_file)
    root_node = build_tree(counts)
    codes = convert_tree_to_code(root_node)

    if debug >= DEBUG_HIGH:
        print_model(root_node, codes)

    output_bit_file.output_bits(HUFF_TREE, BITS_PER_INT)
    write_tree_header(root_node, output_bit_file)
    compress_data(input_file, output_bit_file, codes)
    output_bit_file.close_bit_file()

    if debug >= DEBUG_LOW:
        print(f"wrote {output_bit_file.bits_written} bits")


def expand_file(input_bit_file: CompressorBitio.BitFile, output_file: BinaryIO, debug: int = 0):
    try:
        bits = input_bit_file.input_bits(BITS_PER_INT)
    except EOFError:
        raise FormatError("illegal header, stream shorter than the magic number") from None
    except OSError as e:
        raise FormatError(f"illegal header, magic number unreadable: {e}") from e
    if bits != HUFF_TREE:
        raise FormatError(f"illegal header starts with {bits:#010x}")

    root_node = read_tree_header(input_bit_file)

    if debug >= DEBUG_HIGH:
        print_model(root_node, None)

    expand_data(input_bit_file, output_file, root_node)
    output_file.flush()

    if debug >= DEBUG_LOW:
        print(f"read {input_bit_file.bits_read} bits")


def compress_bytes(data: bytes, debug: int = 0) -> bytes:
    output = io.BytesIO()
    compress_file(io.BytesIO(data), CompressorBitio.BitFile.from_stream(output, False), debug)
    return output.getvalue()


def expand_bytes(data: bytes, debug: int = 0) -> bytes:
    output = io.BytesIO()
    expand_file(CompressorBitio.BitFile.from_stream(io.BytesIO(data), True), output, debug)
    return output.getvalue()


def count_bytes(input_file: BinaryIO) -> list[int]:
    counts = [0] * (ALPH_SIZE + 1)

    input_file.seek(0) # Count from the start of the stream
    while True:
        chunk = input_file.read(4096)
        if not chunk:
            break # EOF
        for c_val in chunk:
            counts[c_val] += 1

    counts[END_OF_STREAM] = 1
    return counts


def build_tree(counts: list[int]) -> Node:
    # (count, insertion order, node); the order keeps ties stable and stops
    # heapq from ever comparing two nodes
    heap = []
    for value, count in enumerate(counts):
        if count > 0:
            heap.append((count, len(heap), Node(value, count)))

    if len(heap) < 2:
        # a lone leaf would get an empty code, so pair it with an unused byte
        filler = next(value for value in range(ALPH_SIZE) if counts[value] == 0)
        heap.append((0, len(heap), Node(filler, 0)))

    heapq.heapify(heap)
    next_order = len(heap)

    while len(heap) > 1:
        count_1, _, min_1 = heapq.heappop(heap)
        count_2, _, min_2 = heapq.heappop(heap)
        parent = Node(0, count_1 + count_2, min_1, min_2)
        heapq.heappush(heap, (parent.count, next_order, parent))
        next_order += 1

    return heap[0][2]


def convert_tree_to_code(root_node: Node) -> list[Optional[Code]]:
    if root_node.is_leaf():
        raise ValueError("a tree with a single leaf has no codes")

    codes: list[Optional[Code]] = [None] * (ALPH_SIZE + 1)

    def walk(node, code_so_far, bits):
        if node.is_leaf():
            codes[node.value] = Code(code_so_far, bits)
            return

        code_so_far <<= 1
        bits = bits + 1
        walk(node.child_0, code_so_far, bits)
        walk(node.child_1, code_so_far | 1, bits)

    walk(root_node, 0, 0)
    return codes


def write_tree_header(node: Node, output_bit_file: CompressorBitio.BitFile):
    if node.is_leaf():
        output_bit_file.output_bit(1)
        output_bit_file.output_bits(node.value, SYMBOL_BITS)
        return

    output_bit_file.output_bit(0)
    write_tree_header(node.child_0, output_bit_file)
    write_tree_header(node.child_1, output_bit_file)


def read_tree_header(input_bit_file: CompressorBitio.BitFile, depth: int = 0) -> Node:
    # 257 leaves never need more than 256 levels
    if depth > ALPH_SIZE:
        raise FormatError(f"tree header nested deeper than {ALPH_SIZE} levels")

    try:
        bit = input_bit_file.input_bit()
        if bit == 1:
            value = input_bit_file.input_bits(SYMBOL_BITS)
    except EOFError:
        raise FormatError("tree header truncated") from None
    except OSError as e:
        raise FormatError(f"tree header unreadable: {e}") from e

    if bit == 0:
        child_0 = read_tree_header(input_bit_file, depth + 1)
        child_1 = read_tree_header(input_bit_file, depth + 1)
        return Node(0, 0, child_0, child_1)

    if value > END_OF_STREAM:
        raise FormatError(f"tree header leaf value {value} out of range")
    return Node(value)


def compress_data(input_file: BinaryIO, output_bit_file: CompressorBitio.BitFile, codes: list[Optional[Code]]):
    input_file.seek(0)

    while True:
        chunk = input_file.read(4096)
        if not chunk:
            break # EOF
        for c_val in chunk:
            output_bit_file.output_bits(codes[c_val].code, codes[c_val].code_bits)

    output_bit_file.output_bits(codes[END_OF_STREAM].code, codes[END_OF_STREAM].code_bits)


def expand_data(input_bit_file: CompressorBitio.BitFile, output_file: BinaryIO, root_node: Node):
    node = root_node
    pending = bytearray()

    while True:
        try:
            bit = input_bit_file.input_bit()
        except EOFError:
            raise FormatError("bad input, no PSEUDO_EOF") from None
        except OSError as e:
            raise FormatError(f"compressed data unreadable: {e}") from e

        node = node.child_1 if bit else node.child_0

        if node.is_leaf():
            if node.value == END_OF_STREAM:
                break # Done
            pending.append(node.value)
            if len(pending) >= 4096:
                output_file.write(pending)
                pending.clear()
            node = root_node

    output_file.write(pending)


def print_char(c: int):
    if c == END_OF_STREAM:
        print("EOF", end="")
    elif 0x20 <= c < 127:
        print(f"'{chr(c)}'", end="")
    else:
        print(f"{c:3d}", end="")


def print_model(root_node: Node, codes: Optional[list[Optional[Code]]]):
    def walk(node, path):
        if not node.is_leaf():
            walk(node.child_0, path + "0")
            walk(node.child_1, path + "1")
            return

        print("node=", end="")
        print_char(node.value)
        print(f"  count={node.count:3d}", end="")
        if codes is not None and codes[node.value] is not None:
            code = codes[node.value]
            print(f"  Huffman code=<{code.code:0{code.code_bits}b}>", end="")
        else:
            print(f"  path=<{path}>", end="")
        print() # Newline

    walk(root_node, "")
    sys.stdout.flush()
