"""
Tests for file parsers.
"""

import codecs
import io
import threading
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
import xlrd
from xlrd.sheet import Cell

from ingestor.enums import FileFormat
from ingestor.errors import FileReadError, ParseCancelled, ParseError
from ingestor.parsers import (
    CancelToken,
    CSVParser,
    RawLineReader,
    RowChannel,
    SpreadsheetParser,
    coerce_cell,
    detect_delimiter,
    detect_encoding,
    detect_flavor,
    is_numeric,
    normalize_cell,
    parse_number,
)
from ingestor.tools import SourceFile


def numbered_csv(rows: int) -> bytes:
    """A CSV body with a header and ``rows`` numbered data rows."""
    lines = ["id,label,value"] + [f"{i},item {i},{i * 1.5}" for i in range(1, rows + 1)]
    return ("\n".join(lines) + "\n").encode("utf-8")


class TestParseNumber:
    """Tests for the shared numeric rule."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("42", 42),
            (" 42 ", 42),
            ("-5", -5),
            ("0", 0),
            ("3.14", 3.14),
            ("0.5", 0.5),
            (".5", 0.5),
            ("5.", 5.0),
            ("1e3", 1000.0),
            ("-2.5E-2", -0.025),
            (str(2**53 - 1), 2**53 - 1),
        ],
    )
    def test_numbers(self, text, expected):
        """Test values accepted as numbers."""
        assert parse_number(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "abc", "12abc", "1,000", "Infinity", "-Infinity", "NaN", "inf", "007", "-007",
         "1e400", str(2**53), "0x1F", "--1", "1.2.3"],
    )
    def test_not_numbers(self, text):
        """Test values that stay text."""
        assert parse_number(text) is None

    def test_integer_type(self):
        """Test that integer literals stay integers."""
        assert isinstance(parse_number("12"), int)
        assert isinstance(parse_number("12.0"), float)

    def test_coerce_cell(self):
        """Test dynamic typing of CSV cells."""
        assert coerce_cell("30") == 30
        assert coerce_cell("Alice") == "Alice"
        assert coerce_cell("") == ""
        assert coerce_cell("007") == "007"

    def test_is_numeric(self):
        """Test numeric detection across cell types."""
        assert is_numeric(3)
        assert is_numeric(2.5)
        assert is_numeric("10")
        assert not is_numeric(True)
        assert not is_numeric(float("nan"))
        assert not is_numeric(float("inf"))
        assert not is_numeric(None)
        assert not is_numeric("n/a")
        assert not is_numeric(datetime(2024, 1, 1))


class TestDetectEncoding:
    """Tests for best-effort encoding detection."""

    def test_utf8(self):
        """Test plain UTF-8 content."""
        assert detect_encoding("name\nZürich\n".encode("utf-8")) == "utf-8"

    def test_empty(self):
        """Test that empty content falls back to UTF-8."""
        assert detect_encoding(b"") == "utf-8"

    def test_utf8_bom(self):
        """Test that a UTF-8 BOM selects the BOM-stripping codec."""
        assert detect_encoding(codecs.BOM_UTF8 + b"a,b\n") == "utf-8-sig"

    def test_utf16_bom(self):
        """Test UTF-16 with a byte order mark."""
        assert detect_encoding("a,b\n1,2\n".encode("utf-16")) == "utf-16"

    def test_truncated_multibyte_sequence(self):
        """Test a sample cut inside a multi-byte character."""
        data = "abc é".encode("utf-8")[:-1]
        assert detect_encoding(data) == "utf-8"

    def test_chardet_guess(self):
        """Test that a confident chardet guess is used."""
        with patch("ingestor.parsers.encoding.chardet.detect") as detect:
            detect.return_value = {"encoding": "ISO-8859-1", "confidence": 0.73}
            assert detect_encoding("Café au lait".encode("latin-1")) == "iso8859-1"

    def test_low_confidence_falls_back(self):
        """Test that an unsure guess falls back to UTF-8."""
        with patch("ingestor.parsers.encoding.chardet.detect") as detect:
            detect.return_value = {"encoding": "Windows-1252", "confidence": 0.2}
            assert detect_encoding(b"abc\xff\xfd") == "utf-8"


class TestDetectDelimiter:
    """Tests for delimiter auto-detection."""

    @pytest.mark.parametrize(
        "sample,expected",
        [
            ("a,b,c\n1,2,3\n", ","),
            ("a;b;c\n1;2;3", ";"),
            ("a\tb\tc\n1\t2\t3\n", "\t"),
            ("a|b|c\n1|2|3\n", "|"),
        ],
    )
    def test_candidates(self, sample, expected):
        """Test each candidate delimiter."""
        assert detect_delimiter(sample) == expected

    def test_single_column_defaults_to_comma(self):
        """Test that a one-column file gets the default delimiter."""
        assert detect_delimiter("name\nAlice\nBob\n") == ","

    def test_empty_sample(self):
        """Test an empty sample."""
        assert detect_delimiter("") == ","


class TestRowChannel:
    """Tests for the bounded row hand-off."""

    def test_put_and_get(self):
        """Test batches come out in order."""
        channel = RowChannel(10)
        assert channel.put([1, 2])
        assert channel.put([3])
        assert channel.buffered == 3
        assert channel.get() == [1, 2]
        assert channel.get() == [3]
        channel.close()
        assert channel.get() is None

    def test_full_channel_blocks_producer(self):
        """Test that the producer waits until the consumer takes rows."""
        channel = RowChannel(2)
        channel.put([1, 2])

        producer = threading.Thread(target=channel.put, args=([3],), daemon=True)
        producer.start()
        producer.join(timeout=0.2)
        assert producer.is_alive()
        assert channel.buffered == 2

        assert channel.get() == [1, 2]
        producer.join(timeout=5)
        assert not producer.is_alive()
        assert channel.get() == [3]
        assert channel.waits == 1

    def test_abandon_releases_producer(self):
        """Test that abandoning unblocks a waiting producer."""
        channel = RowChannel(1)
        channel.put(["a"])
        results = []

        producer = threading.Thread(target=lambda: results.append(channel.put(["b"])), daemon=True)
        producer.start()
        producer.join(timeout=0.2)
        channel.abandon()
        producer.join(timeout=5)

        assert results == [False]
        assert channel.abandoned
        assert channel.buffered == 0

    def test_producer_error_reaches_consumer(self):
        """Test that a producer failure is raised by get."""
        channel = RowChannel(5)
        channel.close(ParseError("bad row"))
        with pytest.raises(ParseError):
            channel.get()

    def test_invalid_capacity(self):
        """Test capacity validation."""
        with pytest.raises(ValueError):
            RowChannel(0)


class TestCSVParser:
    """Tests for the CSV parser."""

    def test_semicolon_example(self):
        """Test delimiter detection with numeric coercion."""
        table = CSVParser().parse_text("a;b;c\n1;2;3")
        assert table.headers == ("a", "b", "c")
        assert table.row_count == 1
        assert table.rows[0] == {"a": 1, "b": 2, "c": 3}
        assert table.delimiter == ";"
        assert table.source_format == FileFormat.CSV

    def test_missing_and_extra_cells(self):
        """Test that rows are aligned to the headers."""
        table = CSVParser().parse_text("a,b,c\n1\n1,2,3,4\n")
        assert table.rows[0].values_tuple == (1, None, None)
        assert table.rows[1].values_tuple == (1, 2, 3)
        assert all(len(row) == 3 for row in table.rows)

    def test_text_and_numbers(self):
        """Test that only unambiguous numbers are typed."""
        table = CSVParser().parse_text("name,age,code\nAlice,30,007\nBob,,1e2\n")
        assert table.rows[0] == {"name": "Alice", "age": 30, "code": "007"}
        assert table.rows[1] == {"name": "Bob", "age": "", "code": 100.0}

    def test_blank_rows_skipped(self):
        """Test that rows with no values are ignored."""
        table = CSVParser().parse_text("a,b\n\n1,2\n,\n  ,  \n3,4\n")
        assert [row.values_tuple for row in table.rows] == [(1, 2), (3, 4)]

    def test_header_only(self):
        """Test a file with a header and no data."""
        table = CSVParser().parse_text("a,b\n")
        assert table.headers == ("a", "b")
        assert table.row_count == 0

    def test_empty_file(self):
        """Test that an empty file gives an empty table."""
        table = CSVParser().parse_text("")
        assert table.headers == ()
        assert table.row_count == 0

    def test_blank_header_cells(self):
        """Test placeholder names for blank header cells."""
        table = CSVParser().parse_text("a,,c\n1,2,3\n")
        assert table.headers == ("a", "Column 2", "c")

    def test_duplicate_headers(self):
        """Test that duplicate names keep both columns."""
        table = CSVParser().parse_text("x,x\n1,2\n")
        assert table.headers == ("x", "x")
        assert table.rows[0]["x"] == 1
        assert table.rows[0].values_tuple == (1, 2)

    def test_quoted_fields(self):
        """Test quoted delimiters and embedded newlines."""
        text = 'name,notes\n"Smith, J","line one\nline two"\n'
        table = CSVParser(delimiter=",").parse_text(text)
        assert table.rows[0] == {"name": "Smith, J", "notes": "line one\nline two"}

    def test_crlf_across_chunks(self):
        """Test \\r\\n line endings split by chunk boundaries."""
        data = b"a,b\r\n1,2\r\n3,4\r\n"
        for chunk_size in (1, 2, 3, 4, 5):
            table = CSVParser(chunk_size=chunk_size).parse(io.BytesIO(data), streaming=False)
            assert table.headers == ("a", "b")
            assert [row.values_tuple for row in table.rows] == [(1, 2), (3, 4)]

    def test_multibyte_across_chunks(self):
        """Test characters split by chunk boundaries."""
        data = "city,temp\nZürich,3\nMünchen,5\n".encode("utf-8")
        table = CSVParser(chunk_size=3).parse(io.BytesIO(data), streaming=False)
        assert table.column("city") == ["Zürich", "München"]
        assert table.encoding == "utf-8"

    def test_utf8_bom_stripped(self):
        """Test that a BOM does not end up in the first header."""
        data = codecs.BOM_UTF8 + b"name,qty\nA,1\n"
        table = CSVParser().parse(io.BytesIO(data))
        assert table.headers == ("name", "qty")
        assert table.encoding == "utf-8-sig"

    def test_utf16(self):
        """Test UTF-16 content."""
        data = "a,b\n1,2\n".encode("utf-16")
        table = CSVParser(chunk_size=3).parse(io.BytesIO(data))
        assert table.headers == ("a", "b")
        assert table.rows[0] == {"a": 1, "b": 2}

    def test_forced_encoding(self):
        """Test an explicitly configured encoding."""
        data = "name\nCafé\n".encode("latin-1")
        table = CSVParser(encoding="latin-1").parse(io.BytesIO(data))
        assert table.column("name") == ["Café"]

    def test_unknown_encoding(self):
        """Test that an unknown codec is a parse error."""
        with pytest.raises(ParseError):
            CSVParser(encoding="no-such-codec").parse(io.BytesIO(b"a\n1\n"))

    def test_undecodable_content(self):
        """Test invalid bytes after the detection sample."""
        data = b"a,b\n1,2\n" + b"3,4\n" * 3 + b"\xff\xfe,x\n"
        with pytest.raises(ParseError):
            CSVParser(chunk_size=16).parse(io.BytesIO(data), streaming=True)

    def test_read_failure(self):
        """Test that an I/O error is reported as a read error."""

        class BrokenStream:
            def read(self, size=-1):
                raise OSError("device not ready")

        with pytest.raises(FileReadError) as exc_info:
            CSVParser().parse(BrokenStream(), name="broken.csv")
        assert exc_info.value.filename == "broken.csv"

    def test_streaming_matches_whole_file(self):
        """Test that both modes produce the same table."""
        data = numbered_csv(500)
        whole = CSVParser().parse(io.BytesIO(data), streaming=False)
        streamed = CSVParser(chunk_size=64, high_water_mark=7).parse(io.BytesIO(data), streaming=True)

        assert streamed.headers == whole.headers
        assert streamed.row_count == whole.row_count == 500
        assert [r.values_tuple for r in streamed.rows] == [r.values_tuple for r in whole.rows]
        assert streamed.rows[-1] == {"id": 500, "label": "item 500", "value": 750.0}

    def test_streaming_bounds_buffered_rows(self):
        """Test that no more than the high-water mark is ever in flight."""
        data = numbered_csv(300)
        parser = CSVParser(chunk_size=32, high_water_mark=10)
        peak = 0
        with parser.stream(io.BytesIO(data)) as rows:
            for _ in rows:
                peak = max(peak, rows.channel.buffered)
        assert peak <= 10

    def test_stream_headers(self):
        """Test iterating records without collecting them."""
        with CSVParser().stream(io.BytesIO(b"a,b\n1,2\n3,4\n")) as rows:
            total = sum(record["b"] for record in rows)
        assert total == 6
        assert rows.headers == ("a", "b")
        assert rows.delimiter == ","

    def test_stream_iterates_once(self):
        """Test that a row stream cannot be restarted."""
        rows = CSVParser().stream(io.BytesIO(b"a\n1\n"), streaming=False)
        list(rows)
        with pytest.raises(RuntimeError):
            list(rows)

    def test_early_close_stops_tokenizer(self):
        """Test that leaving the stream early releases the worker thread."""
        parser = CSVParser(chunk_size=32, high_water_mark=5)
        with parser.stream(io.BytesIO(numbered_csv(1000))) as rows:
            first = next(iter(rows))
        assert first["id"] == 1
        assert rows.channel.abandoned
        assert not any(t.name == "csv-tokenizer" and t.is_alive() for t in threading.enumerate())

    @pytest.mark.parametrize("streaming", [False, True])
    def test_progress_is_monotonic(self, streaming):
        """Test progress fractions increase and end at 1.0."""
        data = numbered_csv(200)
        seen = []
        CSVParser(chunk_size=100, high_water_mark=20).parse(
            io.BytesIO(data), size=len(data), on_progress=seen.append, streaming=streaming
        )
        assert seen
        assert seen == sorted(seen)
        assert len(set(seen)) == len(seen)
        assert all(0 < fraction <= 1 for fraction in seen)
        assert seen[-1] == 1.0

    def test_cancel_before_start(self):
        """Test that a cancelled token stops the parse immediately."""
        token = CancelToken()
        token.cancel()
        with pytest.raises(ParseCancelled):
            CSVParser().parse(io.BytesIO(b"a\n1\n"), cancel=token)

    @pytest.mark.parametrize("streaming", [False, True])
    def test_cancel_mid_parse(self, streaming):
        """Test cancelling from the progress callback."""
        data = numbered_csv(500)
        token = CancelToken()
        with pytest.raises(ParseCancelled):
            CSVParser(chunk_size=64, high_water_mark=10).parse(
                io.BytesIO(data),
                size=len(data),
                on_progress=lambda fraction: token.cancel(),
                cancel=token,
                streaming=streaming,
            )

    def test_invalid_chunk_size(self):
        """Test chunk size validation."""
        with pytest.raises(ValueError):
            CSVParser(chunk_size=0)


class TestSpreadsheetParser:
    """Tests for the .xlsx/.xls parser."""

    def test_parse_xlsx(self, make_xlsx):
        """Test reading the first sheet of a workbook."""
        data = make_xlsx(
            [
                ["name", "joined", "score", "active", "visits"],
                ["Ann", datetime(2024, 1, 15), 9.5, True, 3],
                ["Ben", datetime(2024, 2, 1, 13, 30), 7.25, False, 12],
            ],
            title="People",
        )
        table = SpreadsheetParser().parse(data, name="people.xlsx")

        assert table.headers == ("name", "joined", "score", "active", "visits")
        assert table.sheet_name == "People"
        assert table.source_format == FileFormat.SPREADSHEET
        assert table.rows[0] == {
            "name": "Ann",
            "joined": "2024-01-15",
            "score": 9.5,
            "active": "TRUE",
            "visits": 3,
        }
        assert table.rows[1]["joined"] == "2024-02-01T13:30:00"
        assert table.rows[1]["active"] == "FALSE"

    def test_only_first_sheet(self, make_xlsx):
        """Test that later sheets are ignored."""
        data = make_xlsx([["a"], [1]], extra_sheets=["Second"])
        table = SpreadsheetParser().parse(data)
        assert table.headers == ("a",)
        assert table.rows[0] == {"a": 1}

    def test_numeric_and_blank_headers(self, make_xlsx):
        """Test header labels for non-text header cells."""
        data = make_xlsx([["region", 2024, None], ["North", 10, 20]])
        table = SpreadsheetParser().parse(data)
        assert table.headers == ("region", "2024", "Column 3")

    def test_narrow_title_row(self, make_xlsx):
        """Test that a one-cell title row does not narrow the table."""
        data = make_xlsx([["Inventory"], ["sku", "count"], ["A-1", 4]])
        table = SpreadsheetParser().parse(data)
        assert table.headers == ("Inventory", "Column 2")
        assert table.rows[0].values_tuple == ("sku", "count")
        assert table.rows[1].values_tuple == ("A-1", 4)

    def test_blank_rows_and_short_rows(self, make_xlsx):
        """Test that blank rows are skipped and short rows padded."""
        data = make_xlsx([["a", "b", "c"], [None, None, None], [1], [2, 3, 4]])
        table = SpreadsheetParser().parse(data)
        assert [row.values_tuple for row in table.rows] == [(1, None, None), (2, 3, 4)]

    def test_empty_workbook(self, make_xlsx):
        """Test that an empty workbook succeeds with no rows."""
        table = SpreadsheetParser().parse(make_xlsx([]))
        assert table.row_count == 0
        assert table.headers == ()

    def test_progress_stages(self, make_xlsx):
        """Test coarse progress reporting."""
        seen = []
        SpreadsheetParser().parse(make_xlsx([["a"], [1]]), on_progress=seen.append)
        assert seen == [0.25, 0.5, 0.75, 1.0]

    def test_cancelled(self, make_xlsx):
        """Test that a cancelled token stops the parse."""
        token = CancelToken()
        token.cancel()
        with pytest.raises(ParseCancelled):
            SpreadsheetParser().parse(make_xlsx([["a"]]), cancel=token)

    @pytest.mark.parametrize("data", [b"PK\x03\x04not really a zip", b"plain text, not a workbook"])
    def test_corrupt_xlsx(self, data):
        """Test that unreadable workbooks raise ParseError."""
        with pytest.raises(ParseError):
            SpreadsheetParser().parse(data, name="broken.xlsx")

    def test_corrupt_xls(self):
        """Test that an unreadable legacy workbook raises ParseError."""
        with pytest.raises(ParseError):
            SpreadsheetParser().parse(b"\xd0\xcf\x11\xe0" + b"\x00" * 64, name="broken.xls")

    def test_read_grid_limit(self, make_xlsx):
        """Test reading only the first rows."""
        data = make_xlsx([["h"]] + [[i] for i in range(50)])
        sheet_name, grid = SpreadsheetParser().read_grid(data, limit=5)
        assert sheet_name == "Sheet1"
        assert len(grid) == 5


class FakeSheet:
    """Minimal stand-in for an xlrd sheet."""

    def __init__(self, name, grid):
        self.name = name
        self.grid = grid
        self.nrows = len(grid)
        self.ncols = max((len(row) for row in grid), default=0)

    def cell(self, r, c):
        row = self.grid[r]
        return row[c] if c < len(row) else Cell(xlrd.XL_CELL_EMPTY, "")


class TestLegacyXls:
    """Tests for the .xls path with a mocked xlrd workbook."""

    @pytest.fixture
    def book(self):
        """A one-sheet workbook covering every cell type."""
        sheet = FakeSheet(
            "Data",
            [
                [Cell(xlrd.XL_CELL_TEXT, "item"), Cell(xlrd.XL_CELL_TEXT, "qty"),
                 Cell(xlrd.XL_CELL_TEXT, "price"), Cell(xlrd.XL_CELL_TEXT, "date"),
                 Cell(xlrd.XL_CELL_TEXT, "ok"), Cell(xlrd.XL_CELL_TEXT, "ratio")],
                [Cell(xlrd.XL_CELL_EMPTY, ""), Cell(xlrd.XL_CELL_BLANK, "")],
                [Cell(xlrd.XL_CELL_TEXT, "bolt"), Cell(xlrd.XL_CELL_NUMBER, 3.0),
                 Cell(xlrd.XL_CELL_NUMBER, 2.5), Cell(xlrd.XL_CELL_DATE, 45306.0),
                 Cell(xlrd.XL_CELL_BOOLEAN, 1), Cell(xlrd.XL_CELL_ERROR, 0x07)],
            ],
        )
        book = MagicMock()
        book.nsheets = 1
        book.datemode = 0
        book.sheet_by_index.return_value = sheet
        return book

    def test_parse_xls(self, book):
        """Test cell conversion for legacy workbooks."""
        data = b"\xd0\xcf\x11\xe0" + b"\x00" * 32
        with patch("ingestor.parsers.spreadsheet_parser.xlrd.open_workbook", return_value=book) as open_workbook:
            table = SpreadsheetParser().parse(data, name="orders.xls")

        open_workbook.assert_called_once()
        book.release_resources.assert_called_once()
        assert table.sheet_name == "Data"
        assert table.headers == ("item", "qty", "price", "date", "ok", "ratio")
        assert table.row_count == 1
        assert table.rows[0] == {
            "item": "bolt",
            "qty": 3,
            "price": 2.5,
            "date": "2024-01-15",
            "ok": "TRUE",
            "ratio": "#DIV/0!",
        }
        assert isinstance(table.rows[0]["qty"], int)

    def test_extension_fallback(self, book):
        """Test that an .xls name selects xlrd when the signature is unknown."""
        with patch("ingestor.parsers.spreadsheet_parser.xlrd.open_workbook", return_value=book) as open_workbook:
            SpreadsheetParser().parse(b"????", name="ORDERS.XLS")
        open_workbook.assert_called_once()


class TestSpreadsheetHelpers:
    """Tests for flavor detection and cell normalization."""

    def test_detect_flavor(self):
        """Test that the content signature wins over the extension."""
        assert detect_flavor(b"PK\x03\x04rest", "renamed.xls") == "xlsx"
        assert detect_flavor(b"\xd0\xcf\x11\xe0rest", "renamed.xlsx") == "xls"
        assert detect_flavor(b"????", "legacy.xls") == "xls"
        assert detect_flavor(b"????", "book.xlsx") == "xlsx"

    def test_normalize_cell(self):
        """Test spreadsheet value conversion."""
        assert normalize_cell(None) is None
        assert normalize_cell(True) == "TRUE"
        assert normalize_cell(datetime(2024, 3, 1)) == "2024-03-01"
        assert normalize_cell(datetime(2024, 3, 1, 8, 5, 9)) == "2024-03-01T08:05:09"
        assert normalize_cell(4) == 4
        assert normalize_cell("x") == "x"


class TestRawLineReader:
    """Tests for raw previews."""

    def test_preview_csv(self):
        """Test a CSV with a title block above the header."""
        content = b"Quarterly Report\nGenerated 2024\n\nname,qty\nA,1\nB,2\n"
        raw = RawLineReader().preview(SourceFile.from_bytes("report.csv", content))

        assert raw.rows == (
            ("Quarterly Report",),
            ("Generated 2024",),
            ("name", "qty"),
            ("A", "1"),
            ("B", "2"),
        )
        assert raw.encoding == "utf-8"
        assert raw.total_lines == 5
        assert not raw.truncated

    def test_blank_cell_rows_skipped(self):
        """Test that delimiter-only lines are not preview rows."""
        content = b"Sales Report,,\n,,\n,  ,\nname,qty,price\nA,1,2.5\n"
        raw = RawLineReader().preview(SourceFile.from_bytes("s.csv", content))
        assert raw.rows == (
            ("Sales Report", "", ""),
            ("name", "qty", "price"),
            ("A", "1", "2.5"),
        )
        assert raw.total_lines == 3

    def test_max_lines(self):
        """Test limiting the number of preview rows."""
        raw = RawLineReader().preview(SourceFile.from_bytes("n.csv", numbered_csv(50)), max_lines=3)
        assert len(raw.rows) == 3
        assert raw.total_lines == 51

    def test_truncated_prefix(self):
        """Test that a partial last line is dropped from a prefix."""
        source = SourceFile.from_bytes("big.csv", b"a,b\n1,2\n3,4\n5,6\n")
        raw = RawLineReader(max_bytes=10).preview(source)
        assert raw.truncated
        assert raw.rows == (("a", "b"), ("1", "2"))

    def test_read_text(self):
        """Test reading decoded text with replacement characters."""
        content = RawLineReader().read(SourceFile.from_bytes("x.csv", b"ok\r\nbad \xff\n"))
        assert content.lines()[0] == "ok"
        assert content.size == 10

    def test_preview_spreadsheet(self, make_xlsx):
        """Test previewing a workbook as text cells."""
        data = make_xlsx([["Title"], ["name", "score"], ["Ann", 9.5], ["Ben", None]])
        raw = RawLineReader().preview(SourceFile.from_bytes("s.xlsx", data), max_lines=3)
        assert raw.rows == (("Title",), ("name", "score"), ("Ann", "9.5"))
        assert raw.encoding is None
