import heapq
import logging
import struct
import time
from collections import Counter
from typing import Optional, Dict, List, Tuple

logger = logging.getLogger(__name__)

MAGIC = b'HUFF'  # file signature, only used by the file container

# header layout: symbol count, then (byte, freq) per symbol, then pad count
COUNT_FMT = ">H"
ENTRY_FMT = ">BI"
PAD_FMT = "B"
COUNT_SIZE = struct.calcsize(COUNT_FMT)
ENTRY_SIZE = struct.calcsize(ENTRY_FMT)
PAD_SIZE = struct.calcsize(PAD_FMT)

MAX_SYMBOLS = 256
LEAF_RANKS = 256  # internal nodes rank after every possible leaf
DOT_MAX_DEPTH = 3

ALREADY_COMPRESSED_EXTS = (
    ".zip", ".gz", ".7z", ".rar", ".jpeg", ".jpg", ".png", ".gif",
    ".mp3", ".mp4", ".avi", ".mov", ".odt", ".docx", ".xlsx"
)


class FormatError(ValueError):
    """Raised when an archive's header or payload cannot be decoded."""


# ---------------------------------
# Basic tree node
# ---------------------------------
class Node:
    def __init__(self, sym: Optional[int], freq: int, rank: int,
                 left: Optional['Node'] = None, right: Optional['Node'] = None):
        # sym: None for internal nodes, 0..255 for leaf nodes
        self.sym = sym
        self.freq = freq
        # rank: byte value for leaves, 256 + merge index for internal nodes
        self.rank = rank
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.sym is not None

    def __lt__(self, other: 'Node'):
        # equal weights fall back to rank, so heap insertion order never matters
        return (self.freq, self.rank) < (other.freq, other.rank)

    def __repr__(self):
        if self.is_leaf():
            return f"Node(sym={self.sym}, freq={self.freq})"
        return f"Node(freq={self.freq}, rank={self.rank})"


# ------------------------------------
# 1) Count bytes (freq)
# ------------------------------------
def read_file_bytes(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()

def build_freq_map(data: bytes) -> Dict[int, int]:
    return dict(Counter(data))


# -------------------------------------
# 2) Make heap and build Huffman tree
# -------------------------------------
def heap_from_freq(freq_map: Dict[int, int]) -> List[Node]:
    h = []
    for sym, fr in freq_map.items():
        heapq.heappush(h, Node(sym, fr, sym))
    return h

def build_tree(h: List[Node]) -> Optional[Node]:
    """
    Consumes the heap and returns the root. The first node popped in each
    merge becomes the left child. A single symbol leaves the lone leaf as
    the root; an empty heap gives None.
    """
    if not h:
        return None
    merges = 0
    while len(h) > 1:
        a = heapq.heappop(h)
        b = heapq.heappop(h)
        p = Node(None, a.freq + b.freq, LEAF_RANKS + merges, a, b)
        merges += 1
        heapq.heappush(h, p)
    return heapq.heappop(h)


# ---------------------------
# 3) Walk tree -> code map
# ---------------------------
def make_codes(root: Optional[Node]) -> Dict[int, str]:
    codes: Dict[int, str] = {}
    if root is None:
        return codes

    def walk(node: Node, prefix: str):
        if node.is_leaf():
            # single-symbol edge-case -> "0"
            codes[node.sym] = prefix if prefix != "" else "0"
            return
        assert node.left is not None and node.right is not None, \
            f"internal node {node!r} does not have two children"
        walk(node.left, prefix + "0")
        walk(node.right, prefix + "1")

    walk(root, "")
    return codes


# ---------------------------------------------
# 4) Header: symbol count, (byte, freq)*, pad
# ---------------------------------------------
def write_header(freq_map: Dict[int, int], pad_count: int) -> bytes:
    out = bytearray(struct.pack(COUNT_FMT, len(freq_map)))
    for sym in sorted(freq_map):
        out += struct.pack(ENTRY_FMT, sym, freq_map[sym])
    out += struct.pack(PAD_FMT, pad_count)
    return bytes(out)

def read_header(blob: bytes) -> Tuple[Dict[int, int], int, int]:
    """
    Parses the header at the start of blob.
    Returns (freq_map, pad_count, payload_offset); raises FormatError on bad data.
    """
    if len(blob) < COUNT_SIZE + PAD_SIZE:
        raise FormatError("Header too small")

    count = struct.unpack_from(COUNT_FMT, blob, 0)[0]
    if count > MAX_SYMBOLS:
        raise FormatError(f"Header declares {count} symbols (max {MAX_SYMBOLS})")

    cursor = COUNT_SIZE
    needed = cursor + count * ENTRY_SIZE + PAD_SIZE
    if needed > len(blob):
        raise FormatError(f"Header declares {count} symbols but only {len(blob)} bytes are available")

    freq_map: Dict[int, int] = {}
    prev = -1
    for _ in range(count):
        sym, fr = struct.unpack_from(ENTRY_FMT, blob, cursor)
        if sym <= prev:
            raise FormatError(f"Symbol {sym} out of order at offset {cursor}")
        if fr == 0:
            raise FormatError(f"Symbol {sym} has zero frequency")
        freq_map[sym] = fr
        prev = sym
        cursor += ENTRY_SIZE

    pad_count = struct.unpack_from(PAD_FMT, blob, cursor)[0]
    cursor += PAD_SIZE
    if pad_count > 7:
        raise FormatError(f"Bad pad count {pad_count}")
    return freq_map, pad_count, cursor


# ----------------------------------------------
# 5) Encode bytes using codes -> big bitstring
# ----------------------------------------------
def encode_bytes(data: bytes, codes: Dict[int, str]) -> str:
    pieces = []
    for b in data:
        pieces.append(codes[b])
    return "".join(pieces)

def pad_bits(bits: str) -> Tuple[str, int]:
    # pad to full bytes; return padded string + pad count (0..7)
    if len(bits) == 0:
        return "", 0
    extra = (8 - (len(bits) % 8)) % 8
    return bits + ("0" * extra), extra

def bits_to_bytes(bits: str) -> bytes:
    # MSB first
    arr = bytearray()
    for i in range(0, len(bits), 8):
        byte = bits[i:i+8]
        arr.append(int(byte, 2))
    return bytes(arr)

def bytes_to_bits(bts: bytes) -> str:
    return "".join(f"{x:08b}" for x in bts)

def payload_bits(payload: bytes, pad_count: int) -> str:
    bitstr = bytes_to_bits(payload) if payload else ""
    if pad_count > 0:
        if pad_count > len(bitstr):
            raise FormatError("Padding bigger than stream")
        bitstr = bitstr[:-pad_count]
    return bitstr


# ---------------------------------
# 6) Decode bitstring by tree walk
# ---------------------------------
def decode_bits(bitstr: str, root: Node, freq_map: Dict[int, int]) -> bytes:
    total = sum(freq_map.values())
    codes = make_codes(root)
    expected = sum(fr * len(codes[sym]) for sym, fr in freq_map.items())
    if len(bitstr) != expected:
        raise FormatError(f"Payload holds {len(bitstr)} bits, header implies {expected}")

    if root.is_leaf():
        # no branching: every bit is one copy of the lone symbol
        if "1" in bitstr:
            raise FormatError("Corrupt bitstream (set bit in single-symbol payload)")
        return bytes([root.sym]) * total

    out = bytearray()
    node = root
    for bit in bitstr:
        node = node.left if bit == '0' else node.right
        if node.is_leaf():
            out.append(node.sym)
            node = root
    if node is not root:
        raise FormatError("Corrupt bitstream (ran out mid-code)")
    if len(out) != total:
        raise FormatError(f"Decoded {len(out)} bytes, header promises {total}")
    return bytes(out)


# -------------------------
# 7) In-memory codec
# -------------------------
def pack(data: bytes, freq_map: Dict[int, int], codes: Dict[int, str]) -> Tuple[bytes, int]:
    """Returns (header + payload, pad_count)."""
    bitstr = encode_bytes(data, codes)
    padded, pad_count = pad_bits(bitstr)
    logger.debug("Packed %d symbols: %d payload bits, %d pad bits",
                 len(freq_map), len(bitstr), pad_count)
    return write_header(freq_map, pad_count) + bits_to_bytes(padded), pad_count

def compress(data: bytes) -> bytes:
    if not data:
        return b""
    freq = build_freq_map(data)
    root = build_tree(heap_from_freq(freq))
    codes = make_codes(root)
    blob, _ = pack(data, freq, codes)
    return blob

def decompress(blob: bytes) -> bytes:
    if not blob:
        return b""
    freq, pad_count, cursor = read_header(blob)
    bitstr = payload_bits(blob[cursor:], pad_count)
    if not freq:
        if bitstr:
            raise FormatError("Payload present for an empty alphabet")
        return b""
    root = build_tree(heap_from_freq(freq))
    return decode_bits(bitstr, root, freq)


# --------------------------------
# 8) Inspection helpers
# --------------------------------
def printable(sym: int) -> str:
    return chr(sym) if 32 <= sym < 127 else f"\\x{sym:02x}"

def code_table_rows(freq_map: Dict[int, int], codes: Dict[int, str]) -> List[Tuple[int, str, int, str, int]]:
    # (byte, char, freq, code, code length) in ascending byte order
    return [(sym, printable(sym), freq_map[sym], codes[sym], len(codes[sym]))
            for sym in sorted(freq_map)]

def tree_to_dot(node: Optional[Node], max_depth: int = DOT_MAX_DEPTH) -> str:
    dot = "digraph G {\n"
    dot += "node [shape=circle, style=filled, color=lightblue];\n"
    names: Dict[int, str] = {}

    def name(n: Node) -> str:
        nonlocal dot
        if id(n) not in names:
            names[id(n)] = f"n{len(names)}"
            label = f"{n.freq}\\n{printable(n.sym)}" if n.is_leaf() else f"{n.freq}"
            label = label.replace('"', '\\"')
            dot += f'{names[id(n)]} [label="{label}"];\n'
        return names[id(n)]

    def traverse(n: Node, depth: int = 0):
        nonlocal dot
        src = name(n)
        if n.is_leaf() or depth >= max_depth:
            return
        for bit, child in (("0", n.left), ("1", n.right)):
            dst = name(child)
            dot += f'{src} -> {dst} [label="{bit}"];\n'
            traverse(child, depth + 1)

    if node is not None:
        traverse(node)
    dot += "}"
    return dot


# -------------------------
# 9) File compressor
# -------------------------
def compress_file(src: str, dst: str) -> Tuple[Optional[Node], Dict[str, object]]:
    """
    Returns (root, stats). If compression is skipped (already compressed type
    or .huff), nothing is written, root is None, stats['skipped'] is True and
    stats['note'] explains why.
    """
    src_str = str(src).strip().lower()

    t0 = time.perf_counter()
    raw = read_file_bytes(src)
    t_read = time.perf_counter()

    original_bytes = len(raw)

    def skipped(note: str) -> Tuple[None, Dict[str, object]]:
        logger.info("Skipping %s: %s", src, note)
        return None, {
            "input": src,
            "output": dst,
            "original_bytes": original_bytes,
            "compressed_bytes": original_bytes,
            "unique_symbols": 0,
            "pad_count": None,
            "compression_ratio": 1.0,
            "space_saved_percent": 0.0,
            "skipped": True,
            "note": note,
            "time_read": t_read - t0,
            "time_total": time.perf_counter() - t0,
        }

    if raw.startswith(MAGIC) or src_str.endswith(".huff"):
        return skipped("Input file is already in .huff format (double-compression prevented).")

    if any(src_str.endswith(ext) for ext in ALREADY_COMPRESSED_EXTS):
        return skipped("This file type is likely already compressed (skipped compression).")

    freq = build_freq_map(raw)
    root = build_tree(heap_from_freq(freq))
    t_tree = time.perf_counter()

    codes = make_codes(root)
    t_codes = time.perf_counter()

    blob, pad_count = pack(raw, freq, codes) if root is not None else (b"", 0)
    t_pack = time.perf_counter()

    with open(dst, 'wb') as out:
        out.write(MAGIC)
        out.write(blob)
    t_write = time.perf_counter()

    compressed_bytes_total = len(MAGIC) + len(blob)

    note = None
    if compressed_bytes_total >= original_bytes:
        note = "Compression did not reduce the file size."

    if original_bytes > 0:
        compression_ratio = compressed_bytes_total / original_bytes
        space_saved_percent = ((original_bytes - compressed_bytes_total) / original_bytes) * 100.0
    else:
        compression_ratio = None
        space_saved_percent = None

    logger.info("Compressed %s (%dB) -> %s (%dB)", src, original_bytes, dst, compressed_bytes_total)

    stats = {
        "input": src,
        "output": dst,
        "original_bytes": original_bytes,
        "compressed_bytes": compressed_bytes_total,
        "unique_symbols": len(freq),
        "pad_count": pad_count,
        "compression_ratio": compression_ratio,
        "space_saved_percent": space_saved_percent,
        "skipped": False,
        "note": note,
        "time_read": t_read - t0,
        "time_tree_build": t_tree - t_read,
        "time_codes": t_codes - t_tree,
        "time_pack": t_pack - t_codes,
        "time_write": t_write - t_pack,
        "time_total": t_write - t0,
    }
    return root, stats


# -------------------------
# 10) File decompressor
# -------------------------
def decompress_file(src: str, dst: str) -> Dict[str, object]:
    t0 = time.perf_counter()
    raw = read_file_bytes(src)
    t_read = time.perf_counter()

    if len(raw) < len(MAGIC):
        raise FormatError("Not a valid .huff (too small)")
    if raw[:len(MAGIC)] != MAGIC:
        raise FormatError("Not a .huff file (magic mismatch)")

    blob = raw[len(MAGIC):]
    if blob:
        freq, pad_count, cursor = read_header(blob)
        bitstr = payload_bits(blob[cursor:], pad_count)
    else:
        freq, pad_count, bitstr = {}, 0, ""
    t_unpad = time.perf_counter()

    root = build_tree(heap_from_freq(freq))
    t_tree = time.perf_counter()

    if root is None:
        if bitstr:
            raise FormatError("Payload present for an empty alphabet")
        decoded = b""
    else:
        decoded = decode_bits(bitstr, root, freq)
    t_decode = time.perf_counter()

    with open(dst, 'wb') as f:
        f.write(decoded)
    t_write = time.perf_counter()

    logger.info("Decompressed %s (%dB) -> %s (%dB)", src, len(raw), dst, len(decoded))

    return {
        "input_huff": src,
        "output": dst,
        "compressed_size": len(raw),
        "restored_size": len(decoded),
        "pad_count": pad_count,
        "time_read": t_read - t0,
        "time_unpad": t_unpad - t_read,
        "time_tree": t_tree - t_unpad,
        "time_decode": t_decode - t_tree,
        "time_write": t_write - t_decode,
        "time_total": t_write - t0,
    }
