import argparse
import logging
import sys
from typing import List, Optional

from huffpress.huffman import (FormatError, build_freq_map, build_tree, code_table_rows, compress_file,
                               decompress_file, encode_bytes, heap_from_freq, make_codes, read_file_bytes)

logger = logging.getLogger(__name__)


def default_output(src: str, decompress: bool) -> str:
    if not decompress:
        return src + ".huff"
    if src.lower().endswith(".huff"):
        return src[:-len(".huff")]
    return src + ".out"


def cmd_compress(args) -> int:
    dst = args.output or default_output(args.src, decompress=False)
    _, stats = compress_file(args.src, dst)
    if stats["skipped"]:
        print(f"Skipped: {stats['note']}")
        return 0
    print(f"{args.src} ({stats['original_bytes']}B) -> {dst} ({stats['compressed_bytes']}B)")
    if stats["space_saved_percent"] is not None:
        print(f"Space saved: {stats['space_saved_percent']:.2f}%")
    if stats["note"]:
        print(stats["note"])
    return 0


def cmd_decompress(args) -> int:
    dst = args.output or default_output(args.src, decompress=True)
    stats = decompress_file(args.src, dst)
    print(f"{args.src} ({stats['compressed_size']}B) -> {dst} ({stats['restored_size']}B)")
    return 0


def cmd_inspect(args) -> int:
    data = read_file_bytes(args.src)
    if not data:
        print("File is empty. Nothing to do.")
        return 0
    freq = build_freq_map(data)
    codes = make_codes(build_tree(heap_from_freq(freq)))

    print("## Generated Codes ##")
    for sym, char, fr, code, _ in code_table_rows(freq, codes):
        print(f"{sym:3d} '{char}' {fr:>8d} : {code}")
    if args.bits:
        print("## Encoded Bits ##")
        print(encode_bytes(data, codes))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="huffpress", description="Huffman coding based compressor")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compress", help="compress a file into a .huff archive")
    p.add_argument("src")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_compress)

    p = sub.add_parser("decompress", help="restore a file from a .huff archive")
    p.add_argument("src")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_decompress)

    p = sub.add_parser("inspect", help="print the Huffman code table of a file")
    p.add_argument("src")
    p.add_argument("--bits", action="store_true", help="also print the encoded bit string")
    p.set_defaults(func=cmd_inspect)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(message)s'
    )
    try:
        return args.func(args)
    except FormatError as e:
        logger.error("Decode error: %s", e)
    except OSError as e:
        logger.error("I/O error: %s", e)
    return 1


if __name__ == "__main__":
    sys.exit(main())
