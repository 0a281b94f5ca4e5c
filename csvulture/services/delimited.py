"""Delimited-text parsing.

Reads a source fully, streams it through csv.reader in strict mode and turns
the records into a table, either one row per record (row mode) or one row
per column (column mode).

Strict mode makes the reader reject records such as `"a"b,c` instead of
guessing. A rejected record whose raw text starts with a double quote is
recovered by dropping the outer quotes and splitting on `","`, which rescues
fully-quoted lines carrying stray inner quotes. Any other rejected record is
fatal.

With trimming on, blanks between a closing quote and the next delimiter are
dropped before parsing so `"name" , "age"` reads as two fields.
"""

import csv
import io
import logging
from typing import Iterable, Iterator, Optional, Union

from csvulture.errors import InvalidDelimiterError, MalformedLineError, SourceReadError
from csvulture.models.sources import FilePath, InlineText

logger = logging.getLogger(__name__)

Table = list[list[str]]

QUOTED_FIELD_SEPARATOR = '","'


def normalize_delimiter(delimiter: Optional[str], default: str = ",") -> str:
    """Empty means default, a literal `\\t` means tab, anything else must be one character."""
    if not delimiter:
        return default
    if delimiter == "\\t":
        return "\t"
    if len(delimiter) != 1:
        raise InvalidDelimiterError(delimiter)
    return delimiter


def recover_quoted_line(line: str) -> Optional[list[str]]:
    """Split a rejected, fully-quoted line by hand. None if it doesn't start with a quote."""
    if not line.startswith('"'):
        return None
    return line[1:-1].split(QUOTED_FIELD_SEPARATOR)


class _RecordLines:
    """Feeds lines to csv.reader and keeps the raw lines of the record being read."""

    def __init__(self, text: str) -> None:
        self._lines = iter(io.StringIO(text, newline=""))
        self._current: list[str] = []
        self.line_number = 0
        self.record_start = 1

    def __iter__(self) -> "_RecordLines":
        return self

    def __next__(self) -> str:
        line = next(self._lines)
        self.line_number += 1
        self._current.append(line)
        return line

    def start_record(self) -> None:
        self._current = []
        self.record_start = self.line_number + 1

    @property
    def raw_record(self) -> str:
        return "".join(self._current).rstrip("\r\n")


# Scanner states for strip_blanks_after_quotes()
_FIELD_START = "field_start"
_UNQUOTED    = "unquoted"
_QUOTED      = "quoted"
_AFTER_QUOTE = "after_quote"


def strip_blanks_after_quotes(text: str, delimiter: str = ",") -> str:
    """Drop spaces and tabs between a closing quote and the next delimiter or line end.

    Strict csv.reader rejects `"name" , "age"`; trimming parsers accept it.
    Quoted content, escaped quotes and unquoted fields pass through untouched.
    """
    blanks = "".join(c for c in " \t" if c != delimiter)
    out: list[str] = []
    pending: list[str] = []
    state = _FIELD_START

    for ch in text:
        if state == _QUOTED:
            if ch == '"':
                state = _AFTER_QUOTE
            out.append(ch)
            continue

        if state == _AFTER_QUOTE:
            if ch in blanks:
                pending.append(ch)
                continue
            escaped = ch == '"' and not pending
            if ch != delimiter and ch not in "\r\n":
                out.extend(pending)
            pending = []
            if escaped:
                state = _QUOTED
                out.append(ch)
                continue
            state = _UNQUOTED

        if ch == delimiter or ch in "\r\n":
            state = _FIELD_START
        elif state == _FIELD_START and ch == '"':
            state = _QUOTED
        elif not (state == _FIELD_START and ch == " "):
            state = _UNQUOTED
        out.append(ch)

    return "".join(out)


def parse_records(text: str, delimiter: str = ",", trim_whitespace: bool = True) -> Iterator[list[str]]:
    """Yield the fields of every non-blank record in text."""
    if trim_whitespace:
        text = strip_blanks_after_quotes(text, delimiter)
    lines = _RecordLines(text)
    reader = csv.reader(
        lines,
        delimiter=delimiter,
        quotechar='"',
        doublequote=True,
        skipinitialspace=trim_whitespace,
        strict=True,
    )

    while True:
        lines.start_record()
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            raw = lines.raw_record
            fields = recover_quoted_line(raw)
            if fields is None:
                raise MalformedLineError(lines.record_start, raw, raw_error=exc) from exc
            logger.debug(f"[delimited] recovered quoted line {lines.record_start}: {raw[:80]!r}")

        if trim_whitespace:
            fields = [f.strip() for f in fields]
        if not fields or (len(fields) == 1 and not fields[0].strip()):
            continue
        yield fields


def orient(records: Iterable[list[str]], row_mode: bool = False) -> Table:
    """Row mode keeps records as rows; column mode makes table row i hold field i of every record."""
    table: Table = []
    for fields in records:
        if row_mode:
            table.append(list(fields))
            continue
        for i, field in enumerate(fields):
            if len(table) == i:
                table.append([])
            table[i].append(field)
    return table


def parse_table(
    text: str,
    delimiter: str = ",",
    row_mode: bool = False,
    trim_whitespace: bool = True,
) -> Table:
    return orient(parse_records(text, delimiter, trim_whitespace), row_mode)


def read_source(source: Union[FilePath, InlineText], encoding: str = "utf-8-sig") -> str:
    if isinstance(source, InlineText):
        return source.text
    try:
        with open(source.path, encoding=encoding, newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(str(source.path), exc) from exc


def load_table(
    source: Union[FilePath, InlineText],
    delimiter: str = ",",
    row_mode: bool = False,
    trim_whitespace: bool = True,
    encoding: str = "utf-8-sig",
) -> Table:
    table = parse_table(read_source(source, encoding), delimiter, row_mode, trim_whitespace)
    logger.debug(
        f"[delimited] {source.kind} source → {len(table)} {'rows' if row_mode else 'columns'}"
    )
    return table


def unique_identifiers(tables: Iterable[Table]) -> list[str]:
    """First cell of every table row, across all tables, in first-seen order without repeats."""
    seen: set[str] = set()
    identifiers: list[str] = []
    for table in tables:
        for row in table:
            if not row:
                continue
            name = row[0]
            if name not in seen:
                seen.add(name)
                identifiers.append(name)
    return identifiers
