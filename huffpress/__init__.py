from huffpress.huffman import FormatError, compress, decompress, compress_file, decompress_file

__all__ = ["FormatError", "compress", "decompress", "compress_file", "decompress_file"]
