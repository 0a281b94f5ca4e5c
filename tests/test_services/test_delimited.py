"""Delimited-text parsing tests.

Pure functions — no document, no components.
"""

import pytest

from csvulture.errors import InvalidDelimiterError, MalformedLineError, SourceReadError
from csvulture.models.sources import FilePath, InlineText, classify_source
from csvulture.services.delimited import (
    load_table,
    normalize_delimiter,
    parse_records,
    parse_table,
    read_source,
    recover_quoted_line,
    strip_blanks_after_quotes,
    unique_identifiers,
)


# ──────────────────────────────────────────
#  Delimiters
# ──────────────────────────────────────────

def test_normalize_delimiter_defaults_when_empty():
    assert normalize_delimiter(None) == ","
    assert normalize_delimiter("") == ","
    assert normalize_delimiter("", default=";") == ";"


def test_normalize_delimiter_accepts_escaped_tab():
    assert normalize_delimiter("\\t") == "\t"
    assert normalize_delimiter("\t") == "\t"


def test_normalize_delimiter_rejects_multiple_characters():
    with pytest.raises(InvalidDelimiterError):
        normalize_delimiter(";;")


# ──────────────────────────────────────────
#  Orientation
# ──────────────────────────────────────────

def test_column_mode_groups_fields_by_position():
    table = parse_table("a,b\n1,3\n2,4")
    assert table == [["a", "1", "2"], ["b", "3", "4"]]


def test_row_mode_keeps_records_as_rows():
    table = parse_table("a,1,2\nb,3,4", row_mode=True)
    assert table == [["a", "1", "2"], ["b", "3", "4"]]


def test_column_mode_of_row_keyed_data_uses_first_record_as_header():
    table = parse_table("a,1,2\nb,3,4")
    assert table == [["a", "b"], ["1", "3"], ["2", "4"]]


def test_column_and_row_mode_are_transposes():
    text = "h,x,y\nr1,1,2\nr2,3,4\nr3,5,6"
    rows = parse_table(text, row_mode=True)
    columns = parse_table(text, row_mode=False)
    assert columns == [list(col) for col in zip(*rows)]


def test_column_mode_grows_for_ragged_records():
    table = parse_table("a\nb,c\nd,e,f")
    assert table == [["a", "b", "d"], ["c", "e"], ["f"]]


# ──────────────────────────────────────────
#  Record parsing
# ──────────────────────────────────────────

def test_quoted_fields_keep_embedded_delimiters_and_newlines():
    records = list(parse_records('"x,y",z\n"multi\nline",w'))
    assert records == [["x,y", "z"], ["multi\nline", "w"]]


def test_blank_lines_are_skipped():
    records = list(parse_records("a,b\n\n   \n1,2\n"))
    assert records == [["a", "b"], ["1", "2"]]


def test_whitespace_trimmed_by_default():
    assert list(parse_records("  a ,  b\n")) == [["a", "b"]]
    assert list(parse_records(" a , b", trim_whitespace=False)) == [[" a ", " b"]]


def test_custom_delimiter():
    assert parse_table("a;b\n1;2", delimiter=";", row_mode=True) == [["a", "b"], ["1", "2"]]


def test_crlf_line_endings():
    assert parse_table("a,b\r\n1,2\r\n", row_mode=True) == [["a", "b"], ["1", "2"]]


# ──────────────────────────────────────────
#  Malformed lines
# ──────────────────────────────────────────

def test_recover_quoted_line_splits_on_quote_comma_quote():
    assert recover_quoted_line('"x"y","z"') == ['x"y', "z"]
    assert recover_quoted_line('a,"b"c') is None


def test_quote_leading_malformed_line_is_recovered():
    text = 'h1,h2\n"x"y","z"\n1,2'
    assert parse_table(text, row_mode=True) == [["h1", "h2"], ['x"y', "z"], ["1", "2"]]


def test_fully_quoted_line_with_inner_quotes_is_recovered():
    records = list(parse_records('"He said "hi"","b"'))
    assert records == [['He said "hi"', "b"]]


def test_recovered_fields_are_trimmed():
    assert list(parse_records('"x"y"," z "')) == [['x"y', "z"]]
    assert list(parse_records('"x"y"," z "', trim_whitespace=False)) == [['x"y', " z "]]


# ──────────────────────────────────────────
#  Blanks after closing quotes
# ──────────────────────────────────────────

def test_blanks_between_closing_quote_and_delimiter_are_accepted():
    text = '"name" , "age"\n"bob" , "3"'
    assert parse_table(text, row_mode=True) == [["name", "age"], ["bob", "3"]]


def test_blanks_after_closing_quote_at_line_end():
    assert parse_table('"a" ,"b" \r\n"c"\t,"d"', row_mode=True) == [["a", "b"], ["c", "d"]]


def test_blank_stripping_leaves_quoted_and_unquoted_content_alone():
    assert strip_blanks_after_quotes('"a"  ,b') == '"a",b'
    assert strip_blanks_after_quotes("a  ,b") == "a  ,b"
    assert strip_blanks_after_quotes('"x "" , y" ,z') == '"x "" , y",z'
    assert strip_blanks_after_quotes('"a" \t"b"', "\t") == '"a"\t"b"'


def test_escaped_quotes_next_to_blanks_still_parse():
    assert list(parse_records('"x "" , y" , z')) == [['x " , y', "z"]]


def test_malformed_line_not_starting_with_quote_is_fatal():
    with pytest.raises(MalformedLineError) as exc_info:
        parse_table('a,b\nc,"d"e\nf,g')
    assert exc_info.value.line_number == 2
    assert exc_info.value.line == 'c,"d"e'


# ──────────────────────────────────────────
#  Identifiers
# ──────────────────────────────────────────

def test_unique_identifiers_first_seen_order_across_tables():
    tables = [
        [["b", "1"], ["a", "2"]],
        [["c", "3"], ["b", "4"], ["A", "5"]],
    ]
    assert unique_identifiers(tables) == ["b", "a", "c", "A"]


def test_unique_identifiers_of_nothing():
    assert unique_identifiers([]) == []
    assert unique_identifiers([[]]) == []


# ──────────────────────────────────────────
#  Sources
# ──────────────────────────────────────────

def test_classify_existing_file_as_path(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b\n1,2\n")
    assert classify_source(str(path)) == FilePath(path=path)


def test_classify_text_as_inline():
    assert isinstance(classify_source("a,b\n1,2"), InlineText)
    assert isinstance(classify_source(""), InlineText)
    assert isinstance(classify_source("x" * 10_000), InlineText)


def test_inline_text_that_looks_like_a_path():
    assert InlineText(text="C:\\data\\missing.csv").looks_like_path(",")
    assert not InlineText(text="a,b.csv").looks_like_path(",")
    assert not InlineText(text="a\nb.csv").looks_like_path(",")


def test_load_table_from_file_strips_bom(tmp_path):
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffname,age\nbob,3\n".encode("utf-8"))
    table = load_table(classify_source(str(path)))
    assert table == [["name", "bob"], ["age", "3"]]


def test_read_source_missing_file_raises(tmp_path):
    with pytest.raises(SourceReadError):
        read_source(FilePath(path=tmp_path / "gone.csv"))
