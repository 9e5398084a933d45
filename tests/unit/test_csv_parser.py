"""
Unit tests for the CSV import parser.

Run: pytest tests/unit/test_csv_parser.py -v
"""

import pytest

from parsers.csv_parser import read_csv, parse_csv, serialize_csv, decode_upload
from exceptions import CSVParseError


# ===================
# BASIC PARSING
# ===================

class TestParseBasics:
    """Header handling and record splitting."""

    def test_header_lowercased_and_used_as_keys(self):
        rows = parse_csv("Path,Category,Material Name\nSales,Basics,Intro\n")

        assert rows == [{"path": "Sales", "category": "Basics", "material name": "Intro"}]

    def test_rows_keep_input_order(self):
        rows = parse_csv("name\nfirst\nsecond\nthird\n")

        assert [r["name"] for r in rows] == ["first", "second", "third"]

    def test_empty_input_returns_empty_list(self):
        assert parse_csv("") == []

    def test_whitespace_only_input_returns_empty_list(self):
        assert parse_csv("  \n\t\n  ") == []

    def test_header_only_returns_no_rows(self):
        table = read_csv("branch name,region\n")

        assert table.header == ["branch name", "region"]
        assert table.rows == []

    def test_last_record_without_trailing_newline(self):
        rows = parse_csv("a,b\n1,2")

        assert rows == [{"a": "1", "b": "2"}]

    def test_crlf_line_endings(self):
        rows = parse_csv("a,b\r\n1,2\r\n3,4\r\n")

        assert rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_fields_are_trimmed(self):
        rows = parse_csv(" a , b \n  x  ,  y  \n")

        assert rows == [{"a": "x", "b": "y"}]

    def test_short_record_padded_with_empty_strings(self):
        rows = parse_csv("path,category,material name,type,url\nParts,Inventory,Guide\n")

        assert rows[0]["type"] == ""
        assert rows[0]["url"] == ""

    def test_extra_cells_ignored(self):
        rows = parse_csv("a,b\n1,2,3,4\n")

        assert rows == [{"a": "1", "b": "2"}]


# ===================
# BLANK RECORDS
# ===================

class TestBlankRecords:
    """Records where every field is empty are discarded."""

    def test_blank_lines_discarded(self):
        rows = parse_csv("name\nA\n\n\nB\n")

        assert [r["name"] for r in rows] == ["A", "B"]

    def test_all_empty_fields_discarded(self):
        rows = parse_csv("a,b,c\n1,2,3\n,,\n , , \n")

        assert len(rows) == 1

    def test_row_count_equals_non_blank_data_lines(self):
        data_lines = ["x,1", "", "y,2", ",", "z,3", "   "]
        text = "name,value\n" + "\n".join(data_lines) + "\n"

        rows = parse_csv(text)

        non_blank = [l for l in data_lines if l.replace(",", "").strip()]
        assert len(rows) == len(non_blank) == 3

    def test_row_lines_track_source_lines(self):
        table = read_csv("name\nA\n\nB\n")

        assert table.row_lines == [2, 4]


# ===================
# QUOTING
# ===================

class TestQuoting:
    """Double-quote handling."""

    def test_quoted_comma_is_one_field(self):
        rows = parse_csv('branch name,region\n"Acme, Inc",North\n')

        assert rows == [{"branch name": "Acme, Inc", "region": "North"}]

    def test_doubled_quote_is_literal(self):
        rows = parse_csv('a,b\n"Say ""hi""",x\n')

        assert rows[0]["a"] == 'Say "hi"'
        assert rows[0]["b"] == "x"

    def test_newline_inside_quotes_is_literal(self):
        table = read_csv('a,b\n"line one\nline two",x\nnext,y\n')

        assert table.rows[0]["a"] == "line one\nline two"
        assert table.rows[1]["a"] == "next"
        assert table.row_lines == [2, 4]

    def test_lone_cr_inside_quotes_is_literal(self):
        rows = parse_csv('a,b\n"left\rright",x\n')

        assert rows[0]["a"] == "left\rright"

    def test_quoted_field_is_trimmed(self):
        rows = parse_csv('a,b\n"  padded  ",x\n')

        assert rows[0]["a"] == "padded"

    def test_quote_inside_unquoted_field_is_literal(self):
        rows = parse_csv('name,size\nMonitor 27",large\n')

        assert rows[0]["name"] == 'Monitor 27"'

    def test_unterminated_quote_raises(self):
        with pytest.raises(CSVParseError) as exc_info:
            parse_csv('a,b\n1,2\n"never closed,3\n')

        assert exc_info.value.code == "CSV_PARSE_ERROR"
        assert exc_info.value.details["line"] == 3

    def test_text_after_closing_quote_raises(self):
        with pytest.raises(CSVParseError) as exc_info:
            parse_csv('branch name,region\n"Acme" Inc,North\n')

        assert exc_info.value.details["line"] == 2

    def test_quote_after_leading_spaces_opens_quoting(self):
        rows = parse_csv('a,b\n1,  "x, y"\n')

        assert rows[0]["b"] == "x, y"


# ===================
# BYTE ORDER MARK
# ===================

class TestByteOrderMark:

    def test_bom_stripped_from_text(self):
        rows = parse_csv("\ufeffname,username\nAlice,alice\n")

        assert "name" in rows[0]

    def test_bom_stripped_from_bytes(self):
        raw = "\ufeffname\nÉlodie\n".encode("utf-8")

        rows = parse_csv(raw)

        assert rows == [{"name": "Élodie"}]

    def test_decode_plain_bytes(self):
        assert decode_upload(b"a,b") == "a,b"


# ===================
# ENCODING
# ===================

class TestEncoding:

    def test_latin1_bytes_rejected(self):
        """Should refuse non-UTF-8 uploads instead of replacing characters."""
        raw = "name\nCafé Manager\n".encode("latin-1")

        with pytest.raises(CSVParseError) as exc_info:
            parse_csv(raw)

        assert exc_info.value.message == "File is not valid UTF-8"
        assert exc_info.value.details["position"] == 8

    def test_utf8_accents_kept(self):
        rows = parse_csv("name\nCafé Manager\n".encode("utf-8"))

        assert rows == [{"name": "Café Manager"}]


# ===================
# SERIALIZATION
# ===================

class TestSerialize:

    def test_reparse_of_serialized_rows_is_identical(self):
        text = (
            'branch name,region,notes\n'
            '"Acme, Inc",North,"Say ""hi"""\n'
            'Plain,South,"two\nlines"\n'
        )
        table = read_csv(text)

        again = read_csv(serialize_csv(table.header, table.rows))

        assert again.header == table.header
        assert again.rows == table.rows

    def test_serialize_quotes_only_when_needed(self):
        text = serialize_csv(["a", "b"], [{"a": "plain", "b": "x,y"}])

        assert text == 'a,b\r\nplain,"x,y"\r\n'
