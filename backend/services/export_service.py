"""Export service - generates Excel and CSV files in memory"""

import io

import pandas as pd
import openpyxl
from openpyxl.styles import Font, Alignment, PatternFill

from core.exporter import FieldBookExporter


HEADER_FILLS = {
    "Field Book": "4CAF50",
    "Field Map": "2196F3",
    "Summary": "FF9800",
}


def _write_sheet(ws, df: pd.DataFrame, header_color: str) -> None:
    """Write a DataFrame to a worksheet with a styled header row"""
    headers = list(df.columns)
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
        cell.fill = PatternFill(start_color=header_color, end_color=header_color, fill_type="solid")

    for row_idx, row in enumerate(df.itertuples(index=False), 2):
        for col_idx, value in enumerate(row, 1):
            if pd.isna(value):
                value = None
            elif hasattr(value, "item"):
                # numpy scalar -> Python scalar for openpyxl
                value = value.item()
            ws.cell(row=row_idx, column=col_idx, value=value)

    # Auto-adjust column widths
    for col in ws.columns:
        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in col)
        ws.column_dimensions[col[0].column_letter].width = min(max_length + 2, 50)


def generate_excel_bytes(exporter: FieldBookExporter) -> bytes:
    """Generate Excel file as bytes.

    Creates:
    - Sheet 1: 'Field Book' - one row per plot
    - Sheet 2: 'Field Map' - one row per incomplete block
    - Sheet 3: 'Summary' - design parameters and efficiencies
    """
    output = io.BytesIO()

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Field Book"
    _write_sheet(ws, exporter.field_book_frame(), HEADER_FILLS["Field Book"])

    map_ws = wb.create_sheet(title="Field Map")
    _write_sheet(map_ws, exporter.field_map_frame(), HEADER_FILLS["Field Map"])

    summary_ws = wb.create_sheet(title="Summary")
    _write_sheet(summary_ws, exporter.summary_frame(), HEADER_FILLS["Summary"])

    wb.save(output)
    return output.getvalue()


def generate_csv_bytes(exporter: FieldBookExporter) -> bytes:
    """Generate field book CSV as bytes"""
    output = io.StringIO()
    exporter.field_book_frame().to_csv(output, index=False)
    return output.getvalue().encode("utf-8")
