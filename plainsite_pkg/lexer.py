"""
Lexical primitives for the Plainsite template language.

Every scanner works on the full template text and an integer offset so the
parser can hand out views into the source instead of copies. A line ends at
``\\n`` or ``\\r\\n``; a lone ``\\r`` is ordinary text.
"""

import re
from typing import Optional, Tuple

from .errors import InvalidEscape

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    "'": "'",
    '"': '"',
}

# Inverse of ESCAPES for writing double-quoted paths back out
_ENCODE = {'\n': '\\n', '\t': '\\t', '\r': '\\r', '\\': '\\\\', '"': '\\"'}

_SINGLE_QUOTED_BODY = re.compile(r"[^'\n]*")
_DOUBLE_QUOTED_BODY = re.compile(r'[^"\\\n]*')
_ESCAPED_RUN = re.compile(r'[^"\\\n]+')


def decode_escape(code: str, offset: Optional[int] = None) -> str:
    """Map a single escape code character to the character it stands for."""
    try:
        return ESCAPES[code]
    except KeyError:
        raise InvalidEscape(code, offset=offset) from None


def encode_escapes(text: str) -> str:
    """Escape text so it can be written inside a double-quoted path."""
    return ''.join(_ENCODE.get(ch, ch) for ch in text)


def at_line_end(text: str, pos: int) -> bool:
    """True when pos sits on a line terminator or at the end of the text."""
    return pos >= len(text) or text[pos] == '\n' or text.startswith('\r\n', pos)


def line_content_end(text: str, pos: int) -> int:
    """Return the offset where the line starting at or containing pos ends, terminator excluded."""
    newline = text.find('\n', pos)
    if newline == -1:
        return len(text)
    if newline > pos and text[newline - 1] == '\r':
        return newline - 1
    return newline


def skip_line_terminator(text: str, pos: int) -> int:
    """Step over the terminator at pos; a no-op at the end of the text."""
    if text.startswith('\r\n', pos):
        return pos + 2
    if text.startswith('\n', pos):
        return pos + 1
    return pos


def scan_until_quote(text: str, pos: int, quote: str) -> Optional[Tuple[int, int]]:
    """
    Scan a quoted body starting just after the opening quote.

    Single quotes stop at the first ``'``; there are no escapes inside them.
    Double quotes stop at the first ``"`` or backslash, and succeed only when
    a plain ``"`` closes the body. Both stop at a line terminator.

    Returns:
        ``(start, end)`` offsets of the body, or None if no closing quote
        was reached without crossing a backslash or the end of the line.
    """
    pattern = _SINGLE_QUOTED_BODY if quote == "'" else _DOUBLE_QUOTED_BODY
    end = pattern.match(text, pos).end()
    if text.startswith(quote, end):
        return pos, end
    return None


def scan_escaped(text: str, pos: int) -> Tuple[str, int]:
    """
    Decode a double-quoted body that contains backslash escapes.

    Consumes runs of ordinary characters and ``\\x`` escapes, stopping at a
    ``"`` or the end of the line. The closing quote is left for the caller.

    Returns:
        The decoded string and the offset where scanning stopped.
    """
    parts = []
    while True:
        run = _ESCAPED_RUN.match(text, pos)
        if run:
            parts.append(run.group())
            pos = run.end()
        if text.startswith('\\', pos) and not at_line_end(text, pos + 1):
            parts.append(decode_escape(text[pos + 1], offset=pos))
            pos += 2
            continue
        return ''.join(parts), pos
