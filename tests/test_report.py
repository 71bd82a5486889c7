from huffpress.huffman import build_freq_map, build_tree, heap_from_freq, make_codes
from huffpress.report import (code_table_frame, compression_timings, decompression_timings, format_percent,
                              format_ratio)


def test_compression_timings():
    stats = {"time_read": 0.1, "time_tree_build": 0.2, "time_total": 0.5}
    df = compression_timings(stats)
    assert list(df.columns) == ["Step", "Time (s)"]
    assert list(df["Step"]) == ["Read File", "Build Tree", "Make Codes", "Encode & Pack", "Write File", "Total"]
    assert df.set_index("Step").loc["Total", "Time (s)"] == 0.5
    # missing stages show as zero
    assert df.set_index("Step").loc["Make Codes", "Time (s)"] == 0


def test_decompression_timings():
    df = decompression_timings({"time_decode": 0.25})
    assert len(df) == 6
    assert df.set_index("Step").loc["Make Decode", "Time (s)"] == 0.25


def test_code_table_frame():
    freq = build_freq_map(b"abracadabra")
    codes = make_codes(build_tree(heap_from_freq(freq)))
    df = code_table_frame(freq, codes)
    assert list(df.columns) == ["Byte", "Char", "Frequency", "Code", "Length"]
    assert list(df["Byte"]) == sorted(freq)
    assert df["Frequency"].sum() == 11
    row = df[df["Char"] == "a"].iloc[0]
    assert row["Length"] == 1


def test_formatting():
    assert format_percent(None) == "N/A"
    assert format_percent(50.0) == "50.00%"
    assert format_ratio(None) == "N/A"
    assert format_ratio(0.5) == "0.5000"
