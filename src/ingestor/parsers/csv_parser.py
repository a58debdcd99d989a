"""
Streaming parser for delimited text files.

Reads CSV, TSV, pipe- and semicolon-delimited uploads in fixed-size byte
chunks, detects the delimiter from the first chunk, and turns every row
after the first non-empty one into a Record with numeric cells typed.

Large files are tokenized on a worker thread that hands rows to the
consumer through a bounded RowChannel, so at most ``high_water_mark`` rows
are in flight between the two.
"""

import codecs
import csv
import io
import logging
import threading
from collections.abc import Callable, Iterator
from typing import BinaryIO, Optional

from ingestor.config import DEFAULT_CHUNK_SIZE, HIGH_WATER_MARK
from ingestor.enums import FileFormat
from ingestor.errors import FileReadError, IngestError, ParseError
from ingestor.models import ParsedTable, Record, header_index
from ingestor.workflow.assembler import assemble_records, make_record, normalize_headers

from .channel import CancelToken, RowChannel
from .encoding import detect_encoding
from .values import coerce_cell, is_blank_row

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = (",", "\t", "|", ";")
DEFAULT_DELIMITER = ","

# Lines examined when guessing the delimiter
SNIFF_LINES = 10
SNIFF_CHARS = 64 * 1024

# Rows handed over per channel put
BATCH_SIZE = 1000

ProgressCallback = Callable[[float], None]


def split_lines(text: str) -> list[str]:
    """Split on \\n, \\r and \\r\\n only, keeping line endings."""
    return io.StringIO(text, newline="").readlines()


def _score_delimiters(lines: list[str], candidates: tuple[str, ...]) -> str:
    # Most consistent field count wins; rows must average at least two fields.
    best = DEFAULT_DELIMITER
    best_key = None
    for order, delimiter in enumerate(candidates):
        counts = [len(row) for row in csv.reader(lines, delimiter=delimiter)]
        if not counts:
            continue
        average = sum(counts) / len(counts)
        if average < 2:
            continue
        delta = sum(abs(a - b) for a, b in zip(counts, counts[1:]))
        key = (delta, -average, order)
        if best_key is None or key < best_key:
            best, best_key = delimiter, key
    return best


def detect_delimiter(
    sample: str,
    candidates: tuple[str, ...] = CANDIDATE_DELIMITERS,
) -> str:
    """
    Guess the delimiter of a text sample.

    Tries ``csv.Sniffer`` restricted to the candidates first, then scores
    each candidate by how consistent the field count is from line to line.

    Args:
        sample: Leading text of the file
        candidates: Allowed delimiters, in tie-break order

    Returns:
        The chosen delimiter (comma when nothing fits)

    Example:
        >>> detect_delimiter("a;b;c\\n1;2;3")
        ';'
    """
    lines = [line for line in split_lines(sample) if line.strip()][:SNIFF_LINES]
    if not lines:
        return DEFAULT_DELIMITER

    try:
        dialect = csv.Sniffer().sniff("".join(lines), delimiters="".join(candidates))
        if dialect.delimiter in candidates:
            return dialect.delimiter
    except csv.Error:
        logger.debug("Sniffer could not decide, scoring candidates by field counts")

    return _score_delimiters(lines, candidates)


class _Progress:
    """Monotonic progress reporting in [0, 1]."""

    def __init__(self, total: Optional[int], callback: Optional[ProgressCallback]):
        self.total = total
        self.callback = callback
        self.last = 0.0

    def update(self, consumed: int) -> None:
        if self.callback is None or not self.total:
            return
        fraction = min(consumed / self.total, 1.0)
        if fraction > self.last:
            self.last = fraction
            self.callback(fraction)

    def finish(self) -> None:
        if self.callback is not None and self.last < 1.0:
            self.last = 1.0
            self.callback(1.0)


class CSVRowStream:
    """
    Pull iterator of Records read from a CSV byte stream.

    ``headers``, ``delimiter`` and ``encoding`` are known once iteration
    has started. Closing the stream (or leaving the ``with`` block) stops
    the tokenizer thread.

    Usage:
        with CSVParser().stream(f, size=size) as rows:
            for record in rows:
                handle(record)
        print(rows.headers)
    """

    def __init__(
        self,
        parser: "CSVParser",
        stream: BinaryIO,
        size: Optional[int] = None,
        name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
        streaming: bool = True,
    ):
        self.name = name
        self.headers: tuple[str, ...] = ()
        self.delimiter: Optional[str] = parser.delimiter
        self.encoding: Optional[str] = parser.encoding
        self.channel: Optional[RowChannel] = None

        self._parser = parser
        self._stream = stream
        self._streaming = streaming
        self._progress = _Progress(size, on_progress)
        self._cancel = cancel or CancelToken()
        self._stop = threading.Event()
        self._consumed = 0
        self._started = False
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "CSVRowStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Stop reading and release the tokenizer thread."""
        self._stop.set()
        if self.channel is not None:
            self.channel.abandon()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join()

    def __iter__(self) -> Iterator[Record]:
        if self._started:
            raise RuntimeError("A CSV row stream can only be iterated once")
        self._started = True

        index = None
        for raw in self._raw_rows():
            if index is None:
                self.headers = normalize_headers(raw)
                index = header_index(self.headers)
                continue
            yield make_record(self.headers, [coerce_cell(cell) for cell in raw], index)

        self._progress.finish()

    # Reading

    def _read_chunk(self) -> bytes:
        try:
            return self._stream.read(self._parser.chunk_size)
        except OSError as e:
            raise FileReadError(f"I/O error while reading: {e}", filename=self.name) from e

    def _decode(self, decoder: codecs.IncrementalDecoder, chunk: bytes, final: bool) -> str:
        try:
            return decoder.decode(chunk, final=final)
        except UnicodeDecodeError as e:
            raise ParseError(
                f"Cannot decode content as {self.encoding}: {e}", filename=self.name
            ) from e

    def _on_bytes(self, consumed: int) -> None:
        if self._streaming:
            # Reported by the consumer, on the caller's thread
            self._consumed = consumed
        else:
            self._progress.update(consumed)

    def _open_lines(self) -> Iterator[str]:
        self._cancel.raise_if_cancelled(self.name)
        first = self._read_chunk()
        if self.encoding is None:
            self.encoding = detect_encoding(first)
        try:
            decoder = codecs.getincrementaldecoder(self.encoding)(errors="strict")
        except LookupError as e:
            raise ParseError(f"Unknown encoding: {self.encoding}", filename=self.name) from e

        final = not first
        text = self._decode(decoder, first, final)
        if self.delimiter is None:
            self.delimiter = detect_delimiter(text[:SNIFF_CHARS])

        logger.info(f"Parsing CSV {self.name or ''}: encoding={self.encoding}, delimiter={self.delimiter!r}")
        return self._iter_lines(decoder, text, len(first), final)

    def _iter_lines(
        self,
        decoder: codecs.IncrementalDecoder,
        text: str,
        consumed: int,
        final: bool,
    ) -> Iterator[str]:
        pending = ""
        while True:
            lines = split_lines(pending + text)
            pending = ""
            # Hold back an unterminated last line, and a lone \r that may be half of \r\n
            if not final and lines and (lines[-1][-1] not in "\r\n" or lines[-1].endswith("\r")):
                pending = lines.pop()
            yield from lines
            self._on_bytes(consumed)

            if final or self._stop.is_set():
                return
            self._cancel.raise_if_cancelled(self.name)

            chunk = self._read_chunk()
            consumed += len(chunk)
            final = not chunk
            text = self._decode(decoder, chunk, final)

    # Tokenizing

    def _tokenize(self, lines: Iterator[str]) -> Iterator[list[str]]:
        reader = csv.reader(lines, delimiter=self.delimiter)
        try:
            for row in reader:
                if is_blank_row(row):
                    continue
                yield row
        except csv.Error as e:
            raise ParseError(
                f"CSV tokenizer error at line {reader.line_num}: {e}", filename=self.name
            ) from e

    def _raw_rows(self) -> Iterator[list[str]]:
        lines = self._open_lines()
        if self._streaming:
            yield from self._from_channel(lines)
        else:
            yield from self._tokenize(lines)

    def _produce(self, lines: Iterator[str], batch_size: int) -> None:
        error: Optional[IngestError] = None
        batch: list[list[str]] = []
        try:
            for row in self._tokenize(lines):
                batch.append(row)
                if len(batch) >= batch_size:
                    if not self.channel.put(batch):
                        return
                    batch = []
            if batch:
                self.channel.put(batch)
        except IngestError as e:
            error = e
        except Exception as e:
            error = ParseError(f"Tokenizer failed: {e}", filename=self.name)
            error.__cause__ = e
        self.channel.close(error)

    def _from_channel(self, lines: Iterator[str]) -> Iterator[list[str]]:
        self.channel = RowChannel(self._parser.high_water_mark)
        batch_size = min(BATCH_SIZE, self.channel.capacity)
        self._thread = threading.Thread(
            target=self._produce,
            args=(lines, batch_size),
            name="csv-tokenizer",
            daemon=True,
        )
        self._thread.start()
        try:
            while True:
                batch = self.channel.get()
                if batch is None:
                    break
                self._cancel.raise_if_cancelled(self.name)
                self._progress.update(self._consumed)
                yield from batch
        finally:
            self.close()
        logger.debug(f"Tokenizer waited on a full channel {self.channel.waits} time(s)")


class CSVParser:
    """
    Parser for delimited text uploads.

    The first non-empty row is always the header; use the header row
    selector afterwards to move it. Numeric cells become int or float,
    everything else stays text. Rows with too few cells are padded with
    None and extra cells are dropped.

    Usage:
        parser = CSVParser()
        with open("sales.csv", "rb") as f:
            table = parser.parse(f, size=os.path.getsize("sales.csv"))

        print(f"{table.row_count} rows, columns: {table.headers}")
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        high_water_mark: int = HIGH_WATER_MARK,
        encoding: Optional[str] = None,
        delimiter: Optional[str] = None,
    ):
        """
        Initialize the parser.

        Args:
            chunk_size: Bytes read per chunk
            high_water_mark: Rows buffered before the tokenizer waits
            encoding: Text encoding; detected from the first chunk when None
            delimiter: Field delimiter; detected from the first chunk when None
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.high_water_mark = high_water_mark
        self.encoding = encoding
        self.delimiter = delimiter

    def stream(
        self,
        stream: BinaryIO,
        size: Optional[int] = None,
        name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
        streaming: bool = True,
    ) -> CSVRowStream:
        """
        Iterate over the records of a CSV stream without collecting them.

        Args:
            stream: Binary file object
            size: Total size in bytes, used for progress fractions
            name: Filename for messages
            on_progress: Called with a fraction in [0, 1] as bytes are consumed
            cancel: Token checked between chunks
            streaming: Tokenize on a worker thread behind a bounded channel

        Returns:
            A CSVRowStream
        """
        return CSVRowStream(
            self,
            stream,
            size=size,
            name=name,
            on_progress=on_progress,
            cancel=cancel,
            streaming=streaming,
        )

    def parse(
        self,
        stream: BinaryIO,
        size: Optional[int] = None,
        name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
        streaming: bool = True,
    ) -> ParsedTable:
        """
        Parse a CSV stream into a ParsedTable.

        Args:
            stream: Binary file object
            size: Total size in bytes, used for progress fractions
            name: Filename for messages and provenance
            on_progress: Called with a fraction in [0, 1] as bytes are consumed
            cancel: Token checked between chunks
            streaming: Tokenize on a worker thread behind a bounded channel

        Returns:
            ParsedTable with typed records

        Raises:
            FileReadError: If reading the stream fails
            ParseError: If the content cannot be decoded or tokenized
            ParseCancelled: If ``cancel`` was triggered
        """
        with self.stream(
            stream,
            size=size,
            name=name,
            on_progress=on_progress,
            cancel=cancel,
            streaming=streaming,
        ) as rows:
            records = list(rows)

        return assemble_records(
            rows.headers,
            records,
            source_name=name,
            source_format=FileFormat.CSV,
            delimiter=rows.delimiter,
            encoding=rows.encoding,
        )

    def parse_text(self, text: str, name: Optional[str] = None) -> ParsedTable:
        """Parse CSV content held as a string."""
        data = text.encode("utf-8")
        parser = CSVParser(
            chunk_size=self.chunk_size,
            high_water_mark=self.high_water_mark,
            encoding="utf-8",
            delimiter=self.delimiter,
        )
        return parser.parse(io.BytesIO(data), size=len(data), name=name, streaming=False)
