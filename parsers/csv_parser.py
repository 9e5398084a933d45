"""
CSV parser for bulk imports.

Turns raw upload text into ImportRow dicts keyed by lower-cased header.
Tokenizing is done by the csv module (excel dialect, strict mode).

Format rules:
    - Uploads must be UTF-8; an optional byte-order mark is dropped
    - Comma separates fields; LF, CRLF or CR ends a record
    - Double quote at the start of a field (after spaces) quotes it;
      "" inside quotes is a literal quote, elsewhere a quote is literal
    - Line breaks inside quotes are kept
    - Every field is trimmed, quoted or not
    - Records whose fields are all empty are discarded
    - An unterminated quote, or text after a closing quote, is a
      CSVParseError (whole import aborts)
"""

import csv
import io
from dataclasses import dataclass, field
from typing import Iterable, Union
import structlog

from exceptions import CSVParseError
from models.imports import ImportRow

logger = structlog.get_logger(__name__)

BOM = "\ufeff"


@dataclass
class CSVTable:
    """Parsed CSV: header plus data rows and the line each row starts on."""
    header: list[str] = field(default_factory=list)
    rows: list[ImportRow] = field(default_factory=list)
    row_lines: list[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.header

    def numbered_rows(self) -> list[tuple[int, ImportRow]]:
        return list(zip(self.row_lines, self.rows))


def decode_upload(raw: Union[str, bytes]) -> str:
    """
    Decode upload bytes as UTF-8, dropping a BOM in either form.

    Raises:
        CSVParseError: If the bytes are not valid UTF-8
    """
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CSVParseError(
                "File is not valid UTF-8",
                details={"position": e.start}
            )
    if raw.startswith(BOM):
        return raw[1:]
    return raw


def _read_records(text: str) -> Iterable[tuple[int, list[str]]]:
    """
    Yield (starting line, raw fields) for every record, blank ones included.

    Raises:
        CSVParseError: On malformed quoting
    """
    reader = csv.reader(io.StringIO(text, newline=""), skipinitialspace=True, strict=True)
    while True:
        start = reader.line_num + 1
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise CSVParseError(
                f"Malformed CSV in record starting on line {start}: {e}",
                details={"line": start}
            )
        yield start, fields


def read_csv(raw: Union[str, bytes]) -> CSVTable:
    """
    Parse CSV text into a CSVTable.

    The first non-blank record is the header. Data records shorter than
    the header get empty strings for the missing columns; extra cells
    are ignored.

    Args:
        raw: Upload content (str, or UTF-8 bytes)

    Returns:
        CSVTable (empty for empty or whitespace-only input)

    Raises:
        CSVParseError: On undecodable bytes or malformed quoting
    """
    text = decode_upload(raw)
    if not text.strip():
        return CSVTable()

    table = CSVTable()
    discarded = 0

    for line, fields in _read_records(text):
        values = [v.strip() for v in fields]
        if not any(values):
            discarded += 1
            continue

        if not table.header:
            table.header = [v.lower() for v in values]
            continue

        padded = values + [""] * (len(table.header) - len(values))
        table.rows.append(dict(zip(table.header, padded)))
        table.row_lines.append(line)

    logger.debug(
        "csv_parsed",
        columns=len(table.header),
        rows=len(table.rows),
        blank_records=discarded
    )
    return table


def parse_csv(raw: Union[str, bytes]) -> list[ImportRow]:
    """Parse CSV text into ImportRow dicts in input order."""
    return read_csv(raw).rows


def serialize_csv(header: list[str], rows: Iterable[ImportRow]) -> str:
    """
    Write rows back as CSV text that parse_csv reads identically.

    Missing keys are written as empty fields.
    """
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(header)
    for row in rows:
        writer.writerow([row.get(h, "") for h in header])
    return out.getvalue()
