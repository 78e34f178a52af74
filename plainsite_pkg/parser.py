"""
Parser for the Plainsite template language.

Templates are line oriented::

    +<literal text>
    :insert "<path>"
    :insert '<path>'
    :insert $<ident>[.<ident>]*

A ``+`` line is emitted verbatim. A ``:`` line must hold a valid directive;
once the colon is seen the line is never reinterpreted as literal text.
Parsing stops at the first error and never yields a partial template.
"""

import logging
import re
from typing import List, Optional

from .errors import (InvalidEscape, MalformedCommand, TrailingInput,
                     UnrecognizedLinePrefix, UnterminatedString)
from .lexer import (at_line_end, line_content_end, scan_escaped,
                    scan_until_quote, skip_line_terminator)
from .model import (Command, Insert, InsertTarget, Line, PathOwned, PathRef,
                    Raw, Var, VariablePath)

logger = logging.getLogger(__name__)

INSERT_KEYWORD = 'insert'

_KEYWORD = re.compile(r'[A-Za-z_]\w*')
_WHITESPACE = re.compile(r'[ \t]+')
_IDENTIFIER = re.compile(r'[^. \r\n]+')


class TemplateParser:
    """Single-pass parser turning template text into a list of lines."""

    def __init__(self, text: str, filename: Optional[str] = None):
        self.text = text
        self.filename = filename
        self.pos = 0
        self.line_no = 1
        self.line_start = 0

    def parse(self) -> List[Line]:
        lines = []
        while self.pos < len(self.text):
            self.line_start = self.pos
            lines.append(self.parse_line())
            self.pos = skip_line_terminator(self.text, self.pos)
            self.line_no += 1
        logger.debug(f"Parsed {len(lines)} template lines from {self.filename or '<string>'}")
        return lines

    def parse_line(self) -> Line:
        prefix = self.text[self.pos]
        if prefix == '+':
            end = line_content_end(self.text, self.pos)
            raw = Raw(self.text[self.pos + 1:end])
            self.pos = end
            return raw
        if prefix == ':':
            self.pos += 1
            return Command(self.parse_command())
        if at_line_end(self.text, self.pos):
            raise self._error(UnrecognizedLinePrefix, "Empty line; expected '+' or ':'")
        raise self._error(UnrecognizedLinePrefix, f"Unrecognized line prefix {prefix!r}; expected '+' or ':'")

    def parse_command(self) -> Insert:
        keyword = _KEYWORD.match(self.text, self.pos)
        if not keyword or keyword.group() != INSERT_KEYWORD:
            found = keyword.group() if keyword else self.text[self.pos:line_content_end(self.text, self.pos)]
            raise self._error(MalformedCommand, f"Unknown directive {found!r}")
        self.pos = keyword.end()

        gap = _WHITESPACE.match(self.text, self.pos)
        if not gap:
            raise self._error(MalformedCommand, "Expected whitespace after 'insert'")
        self.pos = gap.end()

        target = self.parse_insert_target()
        if not at_line_end(self.text, self.pos):
            raise self._error(TrailingInput, "Unexpected text after insert target")
        return Insert(target)

    def parse_insert_target(self) -> InsertTarget:
        if self.text.startswith('$', self.pos):
            self.pos += 1
            return Var(self.parse_variable_path())
        if self.text.startswith(("'", '"'), self.pos):
            return self.parse_path()
        raise self._error(MalformedCommand, "Expected a quoted path or a $variable after 'insert'")

    def parse_variable_path(self) -> VariablePath:
        identifiers = []
        while True:
            ident = _IDENTIFIER.match(self.text, self.pos)
            if not ident:
                raise self._error(MalformedCommand, "Expected an identifier in variable path")
            identifiers.append(ident.group())
            self.pos = ident.end()
            if not self.text.startswith('.', self.pos):
                return VariablePath(tuple(identifiers))
            self.pos += 1

    def parse_path(self):
        """Try each quoted-path form in order; the first that closes wins."""
        quote = self.text[self.pos]
        for attempt in (self._single_quoted_path, self._double_quoted_path, self._escaped_path):
            target = attempt(quote)
            if target is not None:
                return target
        raise self._error(UnterminatedString, f"Unterminated {quote}-quoted path")

    def _single_quoted_path(self, quote):
        if quote != "'":
            return None
        span = scan_until_quote(self.text, self.pos + 1, "'")
        if span is None:
            return None
        self.pos = span[1] + 1
        return PathRef(self.text, *span)

    def _double_quoted_path(self, quote):
        if quote != '"':
            return None
        span = scan_until_quote(self.text, self.pos + 1, '"')
        if span is None:
            return None
        self.pos = span[1] + 1
        return PathRef(self.text, *span)

    def _escaped_path(self, quote):
        if quote != '"':
            return None
        try:
            value, end = scan_escaped(self.text, self.pos + 1)
        except InvalidEscape as exc:
            exc.line, exc.column = self._location(exc.offset)
            exc.filename = self.filename
            raise
        if not self.text.startswith('"', end):
            return None
        self.pos = end + 1
        return PathOwned(value)

    def _location(self, offset):
        line_start = self.text.rfind('\n', 0, offset) + 1
        return self.text.count('\n', 0, offset) + 1, offset - line_start + 1

    def _error(self, error_cls, message):
        return error_cls(message, self.line_no, self.pos - self.line_start + 1, self.filename)


def parse(text: str, filename: Optional[str] = None) -> List[Line]:
    """Parse template text into an ordered list of lines."""
    return TemplateParser(text, filename).parse()
