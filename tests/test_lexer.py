"""Tests for the lexical primitives."""

import pytest

from plainsite_pkg.errors import InvalidEscape, TemplateSyntaxError
from plainsite_pkg.lexer import (at_line_end, decode_escape, encode_escapes,
                                 line_content_end, scan_escaped,
                                 scan_until_quote, skip_line_terminator)


class TestDecodeEscape:
    """Test cases for decode_escape."""

    @pytest.mark.parametrize("code,expected", [
        ('n', '\n'),
        ('t', '\t'),
        ('r', '\r'),
        ('\\', '\\'),
        ("'", "'"),
        ('"', '"'),
    ])
    def test_known_codes(self, code, expected):
        assert decode_escape(code) == expected

    @pytest.mark.parametrize("code", ['x', 'a', '0', ' ', 'N'])
    def test_unknown_code_fails(self, code):
        with pytest.raises(InvalidEscape) as exc_info:
            decode_escape(code)
        assert exc_info.value.code == code

    def test_invalid_escape_is_a_syntax_error(self):
        with pytest.raises(TemplateSyntaxError):
            decode_escape('q')

    def test_unknown_code_carries_offset(self):
        with pytest.raises(InvalidEscape) as exc_info:
            decode_escape('q', offset=7)
        assert exc_info.value.offset == 7
        assert decode_escape('n', offset=7) == '\n'


class TestScanUntilQuote:
    """Test cases for scan_until_quote."""

    def test_single_quoted(self):
        text = "'nav.html' rest"
        assert scan_until_quote(text, 1, "'") == (1, 9)

    def test_single_quoted_keeps_backslashes(self):
        text = r"'a\nb'"
        start, end = scan_until_quote(text, 1, "'")
        assert text[start:end] == r"a\nb"

    def test_single_quoted_stops_at_line_end(self):
        assert scan_until_quote("'abc\ndef'", 1, "'") is None

    def test_single_quoted_unterminated(self):
        assert scan_until_quote("'abc", 1, "'") is None

    def test_double_quoted_plain(self):
        text = '"nav.html"'
        start, end = scan_until_quote(text, 1, '"')
        assert text[start:end] == 'nav.html'

    def test_double_quoted_empty(self):
        assert scan_until_quote('""', 1, '"') == (1, 1)

    def test_double_quoted_fails_on_backslash(self):
        assert scan_until_quote(r'"a\"b"', 1, '"') is None

    def test_double_quoted_stops_at_crlf(self):
        assert scan_until_quote('"abc\r\n"', 1, '"') is None


class TestScanEscaped:
    """Test cases for scan_escaped."""

    def test_decodes_escapes(self):
        text = r'"a\r\".b\ntml"'
        value, end = scan_escaped(text, 1)
        assert value == 'a\r".b\ntml'
        assert text[end] == '"'

    def test_plain_text(self):
        value, end = scan_escaped('"plain"', 1)
        assert value == 'plain'
        assert end == 6

    def test_empty(self):
        assert scan_escaped('""', 1) == ('', 1)

    def test_stops_at_line_end(self):
        value, end = scan_escaped('"abc\ndef"', 1)
        assert value == 'abc'
        assert end == 4

    def test_trailing_backslash_stops(self):
        text = '"abc\\'
        value, end = scan_escaped(text, 1)
        assert value == 'abc'
        assert text[end] == '\\'

    def test_unknown_escape_reports_offset(self):
        with pytest.raises(InvalidEscape) as exc_info:
            scan_escaped(r'"ab\qc"', 1)
        assert exc_info.value.code == 'q'
        assert exc_info.value.offset == 3


class TestEncodeEscapes:
    """Test cases for encode_escapes."""

    def test_escapes_special_characters(self):
        assert encode_escapes('a"b\\c\nd\te\r') == r'a\"b\\c\nd\te\r'

    def test_decoding_reverses_encoding(self):
        original = 'dir/"odd"\tname\n.html'
        value, _ = scan_escaped('"' + encode_escapes(original) + '"', 1)
        assert value == original


class TestLineHelpers:
    """Test cases for the line terminator helpers."""

    def test_at_line_end(self):
        assert at_line_end('ab', 2)
        assert at_line_end('a\nb', 1)
        assert at_line_end('a\r\nb', 1)
        assert not at_line_end('a\rb', 1)
        assert not at_line_end('ab', 0)

    def test_line_content_end(self):
        assert line_content_end('+abc\nx', 0) == 4
        assert line_content_end('+abc\r\nx', 0) == 4
        assert line_content_end('+abc', 0) == 4
        assert line_content_end('+a\rb', 0) == 4

    def test_skip_line_terminator(self):
        assert skip_line_terminator('a\r\nb', 1) == 3
        assert skip_line_terminator('a\nb', 1) == 2
        assert skip_line_terminator('a', 1) == 1
