"""
RAB Report - Streamlit Web App

A web interface for building cost estimate reports (Rencana Anggaran
Biaya) and downloading them as Excel or Word files.
"""

from datetime import date
from typing import Any, Dict, List

import streamlit as st

from rab_report import (
    ExportError,
    ExportFormat,
    Report,
    ReportExporter,
    ReportHistory,
    ReportMetadata,
)
from rab_report.utils import format_currency, format_percentage

# Page configuration
st.set_page_config(
    page_title="RAB & Laporan Keuangan",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

ROW_KEYS = ["no", "kategori", "keterangan", "jumlah", "satuan", "harga"]


def empty_row() -> Dict[str, Any]:
    """A blank table row."""
    return {"no": "", "kategori": "", "keterangan": "", "jumlah": None, "satuan": "", "harga": None}


@st.cache_resource
def get_history() -> ReportHistory:
    """History repository shared across reruns."""
    return ReportHistory()


def init_session_state(history: ReportHistory):
    """Seed the form from the saved draft on first load."""
    if 'meta' in st.session_state:
        return
    draft = history.load_draft()
    if draft is not None:
        st.session_state['meta'] = draft.metadata.to_dict()
        st.session_state['rows'] = [row_from_item(item) for item in draft.items] or [empty_row()]
    else:
        st.session_state['meta'] = {"title": "Laporan RAB", "date": date.today().isoformat()}
        st.session_state['rows'] = [empty_row()]


def row_from_item(item) -> Dict[str, Any]:
    return {
        "no": item.sequence_label,
        "kategori": item.category,
        "keterangan": item.description,
        "jumlah": item.quantity,
        "satuan": item.unit,
        "harga": item.unit_price,
    }


def normalize_rows(edited) -> List[Dict[str, Any]]:
    """Turn the data editor's return value into a list of row dicts."""
    if hasattr(edited, "to_dict"):
        edited = edited.to_dict("records")
    rows = []
    for row in edited or []:
        # Blank cells come back from pandas as NaN
        rows.append({
            key: None if isinstance(row.get(key), float) and row.get(key) != row.get(key) else row.get(key)
            for key in ROW_KEYS
        })
    return rows


def create_header():
    """Create the main header."""
    st.markdown("## 📊 RAB & Laporan Keuangan")
    st.caption("Pembuatan otomatis • Export Word & Excel")


def display_totals(report: Report):
    """Show the grand total and per-category percentages."""
    col1, col2 = st.columns(2)
    
    with col1:
        st.metric("Grand Total", format_currency(report.grand_total))
        st.caption(f"{len(report.items)} baris")
    
    with col2:
        st.markdown("#### Persentase per Kategori")
        breakdown = report.category_breakdown()
        if not breakdown:
            st.info("Belum ada data.")
        for category, total, share in breakdown:
            st.write(f"**{category}** · {format_percentage(share)} ({format_currency(total)})")
            st.progress(min(max(share, 0.0), 1.0))


def display_downloads(report: Report):
    """Offer both export formats for download."""
    st.markdown("### 📥 Export")
    exporter = ReportExporter()
    col1, col2 = st.columns(2)
    
    for column, fmt, label in (
        (col1, ExportFormat.SPREADSHEET, "⬇️ Export Excel"),
        (col2, ExportFormat.DOCUMENT, "⬇️ Export Word"),
    ):
        with column:
            try:
                result = exporter.build(report, fmt)
            except ExportError as e:
                st.error(f"Export gagal: {e}")
                continue
            st.download_button(
                label=label,
                data=result.data,
                file_name=result.filename,
                mime=result.mime_type,
                use_container_width=True,
            )


def display_history(history: ReportHistory):
    """List saved reports with a button to reopen each."""
    st.markdown("### 🕘 Riwayat")
    entries = history.list()
    if not entries:
        st.info("Belum ada riwayat.")
        return
    for report_id, metadata in entries:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.write(f"**{metadata.display_title}** · {metadata.date} · "
                     f"{history.item_count(report_id)} baris")
        with col2:
            if st.button("Buka", key=f"open_{report_id}"):
                report = history.load(report_id)
                st.session_state['meta'] = report.metadata.to_dict()
                st.session_state['rows'] = [row_from_item(item) for item in report.items] or [empty_row()]
                st.session_state.pop("rows_editor", None)
                st.rerun()


def main():
    """Main application entry point."""
    history = get_history()
    init_session_state(history)
    create_header()
    
    meta = st.session_state['meta']
    
    with st.sidebar:
        st.markdown("## ⚙️ Laporan")
        meta['title'] = st.text_input("Nama Laporan", value=meta.get('title', ''),
                                      placeholder="Contoh: Proyek Renovasi")
        meta['date'] = st.text_input("Tanggal", value=meta.get('date', ''),
                                     help="Format bebas, mis. 2025-01-31")
        
        st.markdown("---")
        save_btn = st.button("💾 Simpan ke Riwayat", type="primary", use_container_width=True)
        
        if st.button("🗑️ Kosongkan Form", use_container_width=True):
            st.session_state['meta'] = {"title": "", "date": date.today().isoformat()}
            st.session_state['rows'] = [empty_row()]
            st.session_state.pop("rows_editor", None)
            st.rerun()
    
    edited = st.data_editor(
        st.session_state['rows'],
        num_rows="dynamic",
        use_container_width=True,
        key="rows_editor",
        column_config={
            "no": st.column_config.TextColumn("No", help="Kosongkan untuk nomor otomatis"),
            "kategori": st.column_config.TextColumn("Kategori"),
            "keterangan": st.column_config.TextColumn("Keterangan"),
            "jumlah": st.column_config.NumberColumn("Jumlah", min_value=0),
            "satuan": st.column_config.TextColumn("Satuan"),
            "harga": st.column_config.NumberColumn("Harga Satuan", min_value=0),
        },
    )
    
    report = Report(
        metadata=ReportMetadata.from_dict(meta),
        items=Report.from_dict({"rows": normalize_rows(edited)}).items,
    )
    history.save_draft(report)
    
    if save_btn:
        report_id = history.save(report)
        st.success(f"Laporan disimpan ke Riwayat (id {report_id}).")
    
    st.markdown("---")
    display_totals(report)
    st.markdown("---")
    display_downloads(report)
    st.markdown("---")
    display_history(history)


if __name__ == "__main__":
    main()
