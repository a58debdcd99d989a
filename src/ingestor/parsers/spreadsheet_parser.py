"""
Parser for binary spreadsheet uploads.

Reads the first worksheet of an ``.xlsx`` workbook (openpyxl) or an
``.xls`` workbook (xlrd) as a grid of values. Formulas are never
evaluated: the cached result is used and a formula without one reads as
blank. Dates become ISO strings so both formats produce the same values.
"""

import io
import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Optional

import openpyxl
import xlrd

from ingestor.enums import FileFormat
from ingestor.errors import ParseError
from ingestor.models import CellValue, ParsedTable
from ingestor.workflow.assembler import assemble_table

from .channel import CancelToken
from .values import is_blank_row

logger = logging.getLogger(__name__)

XLSX = "xlsx"
XLS = "xls"

# Container signatures: OOXML is a zip archive, BIFF lives in an OLE2 file
MAGIC = {
    b"PK\x03\x04": XLSX,
    b"\xd0\xcf\x11\xe0": XLS,
}

ProgressCallback = Callable[[float], None]


def detect_flavor(data: bytes, name: Optional[str] = None) -> str:
    """
    Decide between the xlsx and xls readers.

    The content signature wins over the extension, since ``.xls`` files
    are often OOXML workbooks renamed by export tools.
    """
    for signature, flavor in MAGIC.items():
        if data.startswith(signature):
            return flavor
    if name and Path(name).suffix.lower() == ".xls":
        return XLS
    return XLSX


def normalize_cell(value: Any) -> CellValue:
    """Convert a spreadsheet value to a table cell value."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        if value.time() == time(0):
            return value.date().isoformat()
        return value.isoformat(timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, (int, float, str)):
        return value
    return str(value)


class SpreadsheetParser:
    """
    Parser for ``.xlsx`` and ``.xls`` workbooks.

    Only the first sheet (by position) is read. Row 0 of the grid becomes
    the header, padded with placeholder names up to the widest row; fully
    blank rows are skipped.

    Usage:
        parser = SpreadsheetParser()
        table = parser.parse(Path("budget.xlsx").read_bytes(), name="budget.xlsx")

        print(f"Sheet {table.sheet_name}: {table.row_count} rows")
    """

    def parse(
        self,
        data: bytes,
        name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
    ) -> ParsedTable:
        """
        Parse a workbook held in memory.

        Args:
            data: Workbook bytes
            name: Filename, used for messages and as a format hint
            on_progress: Called with 0.25, 0.5, 0.75 and 1.0
            cancel: Token checked between stages

        Returns:
            ParsedTable; an empty workbook gives a table with no rows

        Raises:
            ParseError: If the workbook is corrupt or unreadable
        """
        cancel = cancel or CancelToken()
        report = on_progress or (lambda fraction: None)

        cancel.raise_if_cancelled(name)
        sheet_name, grid = self.read_grid(data, name=name, on_loaded=lambda: report(0.25))
        report(0.5)

        cancel.raise_if_cancelled(name)
        # The table spans the sheet's used width, even below a narrow title row
        width = max((len(row) for row in grid), default=0)
        headers = list(grid[0]) + [None] * (width - len(grid[0])) if grid else []
        report(0.75)

        table = assemble_table(
            headers,
            grid[1:],
            source_name=name,
            source_format=FileFormat.SPREADSHEET,
            sheet_name=sheet_name,
        )
        report(1.0)
        logger.info(f"Parsed sheet {sheet_name!r}: {table.row_count} rows, {len(table.headers)} columns")
        return table

    def read_grid(
        self,
        data: bytes,
        name: Optional[str] = None,
        limit: Optional[int] = None,
        on_loaded: Optional[Callable[[], None]] = None,
    ) -> tuple[Optional[str], list[list[CellValue]]]:
        """
        Read the first sheet as rows of cell values.

        Args:
            data: Workbook bytes
            name: Filename, used as a format hint
            limit: Stop after this many non-blank rows
            on_loaded: Called once the workbook has been opened

        Returns:
            Tuple of (sheet name or None, non-blank rows)
        """
        flavor = detect_flavor(data, name)
        logger.debug(f"Reading {name or 'workbook'} as {flavor}")
        if flavor == XLS:
            return self._read_xls(data, name, limit, on_loaded)
        return self._read_xlsx(data, name, limit, on_loaded)

    def _read_xlsx(
        self,
        data: bytes,
        name: Optional[str],
        limit: Optional[int],
        on_loaded: Optional[Callable[[], None]],
    ) -> tuple[Optional[str], list[list[CellValue]]]:
        try:
            workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except Exception as e:
            raise ParseError(f"Cannot open workbook: {e}", filename=name) from e

        try:
            if on_loaded:
                on_loaded()
            if not workbook.worksheets:
                return None, []

            sheet = workbook.worksheets[0]
            # Dimensions recorded by some writers are wrong; read what is there
            sheet.reset_dimensions()

            rows: list[list[CellValue]] = []
            for values in sheet.iter_rows(values_only=True):
                cells = [normalize_cell(value) for value in values]
                if is_blank_row(cells):
                    continue
                rows.append(cells)
                if limit is not None and len(rows) >= limit:
                    break
            return sheet.title, rows
        except Exception as e:
            raise ParseError(f"Cannot read worksheet: {e}", filename=name) from e
        finally:
            workbook.close()

    def _read_xls(
        self,
        data: bytes,
        name: Optional[str],
        limit: Optional[int],
        on_loaded: Optional[Callable[[], None]],
    ) -> tuple[Optional[str], list[list[CellValue]]]:
        try:
            book = xlrd.open_workbook(file_contents=data, on_demand=True)
        except Exception as e:
            raise ParseError(f"Cannot open workbook: {e}", filename=name) from e

        try:
            if on_loaded:
                on_loaded()
            if book.nsheets == 0:
                return None, []

            sheet = book.sheet_by_index(0)
            rows: list[list[CellValue]] = []
            for r in range(sheet.nrows):
                cells = [self._xls_cell(sheet.cell(r, c), book.datemode) for c in range(sheet.ncols)]
                if is_blank_row(cells):
                    continue
                rows.append(cells)
                if limit is not None and len(rows) >= limit:
                    break
            return sheet.name, rows
        except Exception as e:
            raise ParseError(f"Cannot read worksheet: {e}", filename=name) from e
        finally:
            book.release_resources()

    @staticmethod
    def _xls_cell(cell: Any, datemode: int) -> CellValue:
        ctype = cell.ctype
        if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            return None
        if ctype == xlrd.XL_CELL_NUMBER:
            value = cell.value
            return int(value) if float(value).is_integer() else value
        if ctype == xlrd.XL_CELL_DATE:
            try:
                return normalize_cell(xlrd.xldate_as_datetime(cell.value, datemode))
            except (ValueError, OverflowError):
                return cell.value
        if ctype == xlrd.XL_CELL_BOOLEAN:
            return normalize_cell(bool(cell.value))
        if ctype == xlrd.XL_CELL_ERROR:
            return xlrd.error_text_from_code.get(cell.value, "#ERR")
        return normalize_cell(cell.value)
