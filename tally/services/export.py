"""
Export service for ledger data.

Provides functionality to export ledger entries as raw JSON, CSV, and XLSX.
"""

import csv
import io
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union, cast

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from tally.config import EXPORT_DIR, MAX_EXPORT_ENTRIES
from tally.db import Entry, LedgerRepository, TransactionFilter
from tally.errors import ValidationError
from tally.models import TimestampInput

from .aggregation import summarize

logger = logging.getLogger(__name__)

HEADERS = ["ID", "Date", "Time", "Type", "Amount", "Category", "Description"]
COLUMN_WIDTHS = [8, 12, 10, 10, 15, 20, 40]
AMOUNT_FORMAT = "#,##0.00"
HEADER_FONT = Font(bold=True, color="FFFFFF")


def _solid_fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _entry_row(entry: Entry) -> list:
    """Cell values for one entry, in HEADERS order."""
    return [
        entry.id,
        entry.occurred_at.strftime("%Y-%m-%d"),
        entry.occurred_at.strftime("%H:%M:%S"),
        entry.kind.value,
        entry.amount,
        entry.category,
        entry.description or "",
    ]


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"


def parse_export_format(value: Union[str, ExportFormat]) -> ExportFormat:
    try:
        return ExportFormat(value)
    except ValueError:
        raise ValidationError(
            f"Invalid export format: {value!r} (expected 'csv' or 'xlsx')"
        ) from None


class ExportService:
    """Service for exporting ledger data to various formats."""

    def __init__(self, repository: LedgerRepository, export_dir: Optional[Path] = None):
        """
        Initialize the export service.

        Args:
            repository: Repository for ledger entries
            export_dir: Directory for written export files. Defaults to data/exports
        """
        self.repository = repository
        self.export_dir = Path(export_dir) if export_dir else EXPORT_DIR

    def raw_export(self) -> dict[str, Any]:
        """
        Every entry (newest first) plus derived metadata.

        Returns:
            Dictionary with ``metadata`` and ``transactions`` keys
        """
        entries = self.repository.list_entries()
        summary = summarize(entries)

        categories: list[str] = []
        for entry in entries:
            if entry.category not in categories:
                categories.append(entry.category)

        return {
            "metadata": {
                "total_transactions": summary.count,
                "total_income": summary.total_income,
                "total_expense": summary.total_expense,
                "categories": categories,
                "date_range": {
                    "earliest": entries[-1].timestamp if entries else None,
                    "latest": entries[0].timestamp if entries else None,
                },
            },
            "transactions": [entry.to_dict() for entry in entries],
        }

    def export_to_csv(
        self,
        start_date: Optional[TimestampInput] = None,
        end_date: Optional[TimestampInput] = None,
    ) -> io.BytesIO:
        """
        Export ledger entries to CSV format.

        Args:
            start_date: Optional inclusive start filter
            end_date: Optional inclusive end filter

        Returns:
            BytesIO buffer containing the CSV data
        """
        entries = self._get_entries(start_date, end_date)

        buffer = io.BytesIO()
        text_buffer = io.StringIO()

        writer = csv.writer(text_buffer)
        writer.writerow(HEADERS)

        writer.writerows(_entry_row(entry) for entry in entries)

        # BOM so spreadsheet apps detect UTF-8
        buffer.write(text_buffer.getvalue().encode("utf-8-sig"))
        buffer.seek(0)

        logger.info(f"Exported {len(entries)} entries to CSV")
        return buffer

    def export_to_xlsx(
        self,
        start_date: Optional[TimestampInput] = None,
        end_date: Optional[TimestampInput] = None,
    ) -> io.BytesIO:
        """
        Export ledger entries to an XLSX workbook.

        The first sheet holds one row per entry, shaded by kind; the second
        holds income/expense totals.

        Args:
            start_date: Optional inclusive start filter
            end_date: Optional inclusive end filter

        Returns:
            BytesIO buffer containing the XLSX data
        """
        entries = self._get_entries(start_date, end_date)

        wb = Workbook()
        ws = cast(Worksheet, wb.active)
        ws.title = "Transactions"

        ws.append(HEADERS)
        for cell in ws[1]:
            cell.font = HEADER_FONT
            cell.fill = _solid_fill("4472C4")
            cell.alignment = Alignment(horizontal="center")

        for entry in entries:
            ws.append(_entry_row(entry))
            row_fill = _solid_fill("C6EFCE" if entry.is_income else "FFC7CE")
            for cell in ws[ws.max_row]:
                cell.fill = row_fill
            ws.cell(row=ws.max_row, column=5).number_format = AMOUNT_FORMAT

        for index, width in enumerate(COLUMN_WIDTHS, start=1):
            ws.column_dimensions[get_column_letter(index)].width = width
        ws.freeze_panes = "A2"

        self._add_summary_sheet(wb, entries)

        buffer = io.BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        logger.info(f"Exported {len(entries)} entries to XLSX")
        return buffer

    def _add_summary_sheet(self, wb: Workbook, entries: list[Entry]):
        """Append a sheet with per-kind counts and totals."""
        ws = wb.create_sheet(title="Summary")
        summary = summarize(entries)
        income_count = sum(1 for e in entries if e.is_income)

        ws["A1"] = "Ledger Summary"
        ws["A1"].font = Font(bold=True, size=14)
        ws["A2"] = f"Generated: {datetime.now():%Y-%m-%d %H:%M}"

        rows = [
            (4, ("Type", "Count", "Total")),
            (5, ("Income", income_count, summary.total_income)),
            (6, ("Expense", len(entries) - income_count, summary.total_expense)),
            (8, ("Net Balance", None, summary.balance)),
        ]
        for row, values in rows:
            for column, value in enumerate(values, start=1):
                ws.cell(row=row, column=column, value=value)
            if row > 4:
                ws.cell(row=row, column=3).number_format = AMOUNT_FORMAT

        bold = Font(bold=True)
        for cell in ws[4]:
            cell.font = bold
        ws["A8"].font = bold

        for letter, width in zip("ABC", (15, 10, 18)):
            ws.column_dimensions[letter].width = width

    def write_xlsx(
        self,
        start_date: Optional[TimestampInput] = None,
        end_date: Optional[TimestampInput] = None,
    ) -> Path:
        """
        Export to XLSX and write the workbook under the export directory.

        Returns:
            Path of the written file
        """
        buffer = self.export_to_xlsx(start_date, end_date)
        self.export_dir.mkdir(parents=True, exist_ok=True)
        path = self.export_dir / self.get_filename(ExportFormat.XLSX, start_date, end_date)
        path.write_bytes(buffer.getvalue())
        logger.info(f"Wrote XLSX export to {path}")
        return path

    def _get_entries(
        self,
        start_date: Optional[TimestampInput] = None,
        end_date: Optional[TimestampInput] = None,
    ) -> list[Entry]:
        """
        Get entries oldest first with optional inclusive date bounds.

        At most MAX_EXPORT_ENTRIES of the most recent matches are kept.
        """
        entry_filter = TransactionFilter.create(date_from=start_date, date_to=end_date)

        total = self.repository.count_entries(entry_filter)
        if total > MAX_EXPORT_ENTRIES:
            logger.warning(
                f"Export matches {total} entries; keeping the newest {MAX_EXPORT_ENTRIES}"
            )

        entries = self.repository.list_entries(entry_filter, limit=MAX_EXPORT_ENTRIES)
        entries.reverse()
        return entries

    def get_filename(
        self,
        format: ExportFormat,
        start_date: Optional[TimestampInput] = None,
        end_date: Optional[TimestampInput] = None,
    ) -> str:
        """
        Generate a filename for the export.

        Args:
            format: Export format
            start_date: Optional start date
            end_date: Optional end date

        Returns:
            Suggested filename
        """
        date_str = datetime.now().strftime("%Y%m%d")

        if start_date or end_date:
            bounds = TransactionFilter.create(date_from=start_date, date_to=end_date)
            start = bounds.date_from[:10].replace("-", "") if bounds.date_from else ""
            end = bounds.date_to[:10].replace("-", "") if bounds.date_to else ""
            date_range = f"_{start}-{end}"
        else:
            date_range = ""

        return f"tally_transactions_{date_str}{date_range}.{format.value}"
