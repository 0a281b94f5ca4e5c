"""Exception hierarchy.

HTTP failures are left as httpx.HTTPError subclasses; everything raised by
our own code derives from CSVultureError.
"""

from __future__ import annotations

from typing import Optional


class CSVultureError(Exception):
    pass


class ParseError(CSVultureError):
    pass


class MalformedLineError(ParseError):
    """A record the delimited-text parser rejected and could not recover."""

    def __init__(
        self,
        line_number: int,
        line: str,
        raw_error: Optional[Exception] = None,
    ):
        self.line_number = line_number
        self.line = line
        self.raw_error = raw_error
        detail = f": {raw_error}" if raw_error else ""
        super().__init__(f"Line {line_number} cannot be parsed{detail} ({line!r})")


class InvalidDelimiterError(ParseError):
    def __init__(self, delimiter: str):
        self.delimiter = delimiter
        super().__init__(f"Delimiter must be a single character, got {delimiter!r}")


class SourceReadError(CSVultureError):
    def __init__(self, path: str, raw_error: Optional[Exception] = None):
        self.path = path
        self.raw_error = raw_error
        super().__init__(f"Cannot read {path}: {raw_error}")


class SolutionError(CSVultureError):
    """Raised by the host when a solution cannot settle."""

    def __init__(self, passes: int, dropped: int):
        self.passes = passes
        self.dropped = dropped
        super().__init__(
            f"Solution did not settle after {passes} passes ({dropped} scheduled callback(s) dropped)"
        )
