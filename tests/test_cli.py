import logging

from huffpress.cli import default_output, main

TEXT = b"huffman coding is simple\n" * 40


def test_default_output():
    assert default_output("notes.txt", decompress=False) == "notes.txt.huff"
    assert default_output("notes.txt.huff", decompress=True) == "notes.txt"
    assert default_output("notes.bin", decompress=True) == "notes.bin.out"


def test_compress_and_decompress(tmp_path, capsys):
    src = tmp_path / "notes.txt"
    src.write_bytes(TEXT)

    assert main(["compress", str(src)]) == 0
    archive = tmp_path / "notes.txt.huff"
    assert archive.exists()
    assert "Space saved" in capsys.readouterr().out

    restored = tmp_path / "restored.txt"
    assert main(["decompress", str(archive), "-o", str(restored)]) == 0
    assert restored.read_bytes() == TEXT


def test_compress_skipped(tmp_path, capsys):
    src = tmp_path / "pack.zip"
    src.write_bytes(TEXT)
    assert main(["compress", str(src)]) == 0
    assert "Skipped" in capsys.readouterr().out


def test_inspect(tmp_path, capsys):
    src = tmp_path / "aaaa.txt"
    src.write_bytes(b"aaaa")
    assert main(["inspect", str(src), "--bits"]) == 0
    out = capsys.readouterr().out
    assert "## Generated Codes ##" in out
    assert " 97 'a'        4 : 0" in out
    assert out.rstrip().endswith("0000")


def test_inspect_empty(tmp_path, capsys):
    src = tmp_path / "empty.txt"
    src.write_bytes(b"")
    assert main(["inspect", str(src)]) == 0
    assert "Nothing to do" in capsys.readouterr().out


def test_decompress_bad_archive_fails(tmp_path, caplog):
    src = tmp_path / "bad.huff"
    src.write_bytes(b"not an archive")
    with caplog.at_level(logging.ERROR):
        assert main(["decompress", str(src)]) == 1
    assert "magic mismatch" in caplog.text


def test_missing_file_fails(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["compress", str(tmp_path / "missing.txt")]) == 1
    assert "I/O error" in caplog.text
