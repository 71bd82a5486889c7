from typing import Dict, Optional

import pandas as pd

from huffpress.huffman import code_table_rows

TIME_COLUMNS = ["Step", "Time (s)"]
CODE_COLUMNS = ["Byte", "Char", "Frequency", "Code", "Length"]


def _timings_frame(stats: Dict[str, object], steps: Dict[str, str]) -> pd.DataFrame:
    timings = {label: stats.get(key, 0) for label, key in steps.items()}
    return pd.DataFrame(list(timings.items()), columns=TIME_COLUMNS)

def compression_timings(stats: Dict[str, object]) -> pd.DataFrame:
    return _timings_frame(stats, {
        "Read File": "time_read",
        "Build Tree": "time_tree_build",
        "Make Codes": "time_codes",
        "Encode & Pack": "time_pack",
        "Write File": "time_write",
        "Total": "time_total",
    })

def decompression_timings(stats: Dict[str, object]) -> pd.DataFrame:
    return _timings_frame(stats, {
        "Read File": "time_read",
        "Remove Padding": "time_unpad",
        "Rebuild Tree": "time_tree",
        "Make Decode": "time_decode",
        "Rewrite file": "time_write",
        "Total": "time_total",
    })

def code_table_frame(freq_map: Dict[int, int], codes: Dict[int, str]) -> pd.DataFrame:
    """Code table sorted by byte value, one row per symbol."""
    return pd.DataFrame(code_table_rows(freq_map, codes), columns=CODE_COLUMNS)

def format_percent(value: Optional[float]) -> str:
    return "N/A" if value is None else f"{value:.2f}%"

def format_ratio(value: Optional[float]) -> str:
    return "N/A" if value is None else f"{value:.4f}"
