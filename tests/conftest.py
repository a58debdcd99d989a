"""
Shared fixtures for the test suite.
"""

import io

import openpyxl
import pytest


@pytest.fixture
def make_xlsx():
    """Factory building .xlsx bytes from rows (first sheet)."""

    def build(rows, title="Sheet1", extra_sheets=()):
        workbook = openpyxl.Workbook()
        sheet = workbook.active
        sheet.title = title
        for row in rows:
            sheet.append(list(row))
        for name in extra_sheets:
            workbook.create_sheet(name).append(["other", "sheet"])
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return build
