import heapq
from itertools import count

import numpy as np

# Read size used when scanning input files
CHUNK_SIZE = 1 << 15
NUM_SYMBOLS = 256


### HUFFMAN NODE CLASS ###
class HuffmanNode:
    """Leaf (byte set) or internal node (byte None) of a Huffman tree."""
    def __init__(self, byte=None, freq=0, left=None, right=None):
        self.byte = byte
        # leaf: occurrences of byte; internal: sum over the leaves below
        self.freq = freq
        # 0 edge and 1 edge. The single-symbol root has no right child.
        self.left = left
        self.right = right

    @property
    def is_leaf(self):
        return self.byte is not None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(byte={self.byte}, freq={self.freq})"
        return f"HuffmanNode(freq={self.freq})"


### PRIORITY QUEUE ###
class PriorityQueue:
    """
    Ascending-by-weight queue of partial trees.

    Entries with equal weight come out in the order they went in. heapq
    alone would compare the trees on a tie, so every entry carries an
    insertion number that settles it instead.
    """
    def __init__(self):
        self._heap = []
        self._counter = count()

    def insert(self, tree, weight):
        heapq.heappush(self._heap, (weight, next(self._counter), tree))

    def pop_minimum(self):
        """Removes and returns (tree, weight) for the lightest entry, or None if empty."""
        if not self._heap:
            return None
        weight, _, tree = heapq.heappop(self._heap)
        return tree, weight

    def __len__(self):
        return len(self._heap)


### FREQUENCY COUNTING ###
def count_frequencies(stream, chunk_size=CHUNK_SIZE):
    """
    Counts how often each byte value occurs in a binary stream.

    Returns (frequency, total) where frequency is a list of 256 ints indexed
    by byte value and total is the number of bytes read.
    """
    counts = np.zeros(NUM_SYMBOLS, dtype=np.uint64)
    total = 0

    chunk = stream.read(chunk_size)
    while chunk:
        total += len(chunk)
        counts += np.bincount(np.frombuffer(chunk, dtype=np.uint8), minlength=NUM_SYMBOLS).astype(np.uint64)
        chunk = stream.read(chunk_size)

    return [int(c) for c in counts], total


### TREE AND CODE GENERATION ###
def build_huffman_tree(frequency):
    """
    Builds the Huffman tree for a 256-entry frequency table.
    Returns the root node, or None when every count is zero.
    """
    # 1. Leaves go in by ascending byte value, so ties are broken by symbol
    queue = PriorityQueue()
    for byte, freq in enumerate(frequency):
        if freq > 0:
            queue.insert(HuffmanNode(byte=byte, freq=freq), freq)

    # Handle edge cases: empty file or file with only one unique byte
    if len(queue) == 0:
        return None
    if len(queue) == 1:
        # Wrap the lone leaf so it still gets a 1-bit code
        only, weight = queue.pop_minimum()
        return HuffmanNode(freq=weight, left=only)

    # 2. Build the tree by repeatedly merging the two lowest frequency nodes
    while len(queue) > 1:
        left, left_weight = queue.pop_minimum()
        right, right_weight = queue.pop_minimum()
        merged_weight = left_weight + right_weight
        queue.insert(HuffmanNode(freq=merged_weight, left=left, right=right), merged_weight)

    root, _ = queue.pop_minimum()
    return root


def build_code_table(root):
    """
    Walks the tree and returns a list of 256 (pattern, length) pairs.
    Left edges are 0 bits, right edges are 1 bits. Length 0 means the byte
    never occurred and has no code.
    """
    table = [(0, 0)] * NUM_SYMBOLS

    def generate_codes_recursive(node, path, depth):
        if node is None:
            return
        # Stop at a leaf node (a byte)
        if node.is_leaf:
            if depth == 0:
                table[node.byte] = (0, 1)
            else:
                table[node.byte] = (path, depth)
            return

        generate_codes_recursive(node.left, path << 1, depth + 1)
        generate_codes_recursive(node.right, (path << 1) | 1, depth + 1)

    generate_codes_recursive(root, 0, 0)
    return table
