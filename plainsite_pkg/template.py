"""
The parsed template document.
"""

from typing import Callable, Iterator, Optional, TextIO, Tuple

from .evaluator import EvaluationContext, Evaluator, read_file_text
from .model import Line
from .parser import parse


class Template:
    """
    An immutable, ordered sequence of parsed template lines.

    One Template can be rendered against any number of evaluation contexts;
    rendering never modifies it.
    """

    def __init__(self, lines, filename: Optional[str] = None):
        self._lines: Tuple[Line, ...] = tuple(lines)
        self.filename = filename

    @classmethod
    def parse(cls, text: str, filename: Optional[str] = None) -> 'Template':
        return cls(parse(text, filename), filename)

    @classmethod
    def from_file(cls, path: str, read_file_text: Callable[[str], str] = read_file_text) -> 'Template':
        """Read and parse a template file."""
        return cls.parse(read_file_text(path), filename=path)

    @property
    def lines(self) -> Tuple[Line, ...]:
        return self._lines

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def __len__(self):
        return len(self._lines)

    def __eq__(self, other):
        if not isinstance(other, Template):
            return NotImplemented
        return self._lines == other._lines

    def __hash__(self):
        return hash(self._lines)

    def __repr__(self):
        return f"Template({self.filename!r}, {len(self._lines)} lines)"

    def to_source(self) -> str:
        """Canonical source form; parsing it yields equal lines."""
        return ''.join(_terminated(line.to_source()) for line in self._lines)

    def render(self, context: EvaluationContext, evaluator: Optional[Evaluator] = None) -> str:
        return (evaluator or Evaluator()).render(self._lines, context)

    def render_to(self, context: EvaluationContext, out: TextIO, evaluator: Optional[Evaluator] = None) -> None:
        (evaluator or Evaluator()).render_to(self._lines, context, out)


def _terminated(source: str) -> str:
    # A trailing lone \r would merge with a plain \n into one terminator
    if source.endswith('\r'):
        return source + '\r\n'
    return source + '\n'
