# ----------------
# Importations
# ----------------
import os
import tempfile

import streamlit as st

from huffpress.huffman import (compress_file, decompress_file, tree_to_dot, build_freq_map,
                               make_codes, read_file_bytes)
from huffpress.report import (compression_timings, decompression_timings, code_table_frame,
                              format_percent, format_ratio)

# ------------------------
#   Streamlit App
# ------------------------
st.set_page_config(page_title="File Compressor", layout="centered")
st.title("File Compression Studio 🗃")

# ---------------------
#    Instructions
# ---------------------
st.subheader("1) Instructions")

st.markdown("""
*How to Use This File Compression Tool*

1. Upload a file using the button below.
2. Choose *Compress* or *Decompress* (.huff files).
3. Click *Process File to start.*
4. Download your file after processing.
""")
st.divider()

# -------------------
# file Uploading
# -------------------
st.subheader("2) File Uploader")
uploaded_file = st.file_uploader("Upload a file", type=None)
if uploaded_file:
    suffix = os.path.splitext(uploaded_file.name)[1]
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(uploaded_file.read())
        tmp_path = tmp.name
    st.success(f"Uploaded file: {uploaded_file.name} ({os.path.getsize(tmp_path)} bytes)")

    action = st.radio("**Choose Action**", ["Compress", "Decompress"])

    if st.button("Process File"):
        st.divider()
        out_suffix = ".huff" if action == "Compress" else "_restored"
        out_path = tmp_path + out_suffix
        try:
            with st.spinner(f"{action}ing file..."):

                # ------------------
                #  File Compression
                # ------------------
                if action == "Compress":
                    root, stats = compress_file(tmp_path, out_path)

                    st.subheader("3) Compression Summary")
                    col1, col2, col3 = st.columns(3)

                    if stats.get("skipped", False):
                        st.warning(stats.get("note", "Compression skipped."))
                        col1.metric("Original Size", f"{stats.get('original_bytes', 0)} bytes")
                        col2.metric("Compressed Size", f"{stats.get('compressed_bytes', 0)} bytes")
                        col3.metric("Space Saved", "N/A")
                        st.markdown(
                            f"**Time (read)**: {stats.get('time_read', 0):.4f}s, **Total**: {stats.get('time_total', 0):.4f}s")
                    else:
                        if stats.get("note"):
                            st.info(stats["note"])
                        col1.metric("**Original Size**", f"{stats.get('original_bytes', 0)} bytes")
                        col2.metric("**Compressed Size**", f"{stats.get('compressed_bytes', 0)} bytes")
                        col3.metric("Space Saved", format_percent(stats.get('space_saved_percent')))

                        st.markdown(f"*Compression ratio: {format_ratio(stats.get('compression_ratio'))}*")
                        st.markdown(f"*Unique symbols: {stats.get('unique_symbols', 0)}*")
                        st.markdown(f"*Padding bits: {stats.get('pad_count')}*")

                        st.divider()
                        st.subheader("4) Processing Timings")
                        st.table(compression_timings(stats))
                        st.divider()
                        st.subheader("5) Huffman Tree")
                        if root is not None:
                            st.graphviz_chart(tree_to_dot(root))
                            freq = build_freq_map(read_file_bytes(tmp_path))
                            st.dataframe(code_table_frame(freq, make_codes(root)))
                        else:
                            st.info("No Huffman tree (empty file).")

                # ----------------------
                # File Decompression
                # ---------------------
                else:
                    stats = decompress_file(tmp_path, out_path)
                    st.subheader("3) Decompression Report")
                    col1, col2, col3 = st.columns(3)
                    col1.metric("Compressed file size", f"{stats['compressed_size']} bytes")
                    col2.metric("Restored file size", f"{stats['restored_size']} bytes")
                    col3.metric("Padding bits", f"{stats['pad_count']}")
                    st.divider()
                    st.subheader("4) Processing Timings")
                    st.table(decompression_timings(stats))

            if os.path.exists(out_path):
                with open(out_path, 'rb') as f:
                    # ------------------------
                    #   File Downloading
                    # ------------------------
                    st.divider()
                    st.subheader("Download Button")
                    st.info(f" Download your {action}ed file here.")
                    st.download_button(
                        label=f"{os.path.basename(out_path)}",
                        data=f.read(),
                        file_name=os.path.basename(out_path),
                        mime="application/octet-stream"
                    )
            else:
                st.info("No output file was produced (compression may have been skipped). Check the message above.")

        except ValueError as e:
            # bad archive: magic mismatch, corrupt header or payload
            st.error(f"Error: {str(e)}")
        finally:
            for path in (tmp_path, out_path):
                if os.path.exists(path):
                    os.remove(path)
