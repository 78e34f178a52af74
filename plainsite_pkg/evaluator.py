"""
Evaluator for parsed Plainsite templates.

Walks the lines of a template in order and resolves every ``insert`` against
an ``EvaluationContext``: file paths are read relative to the template's own
directory, variable paths are looked up in the context.
"""

import io
import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, TextIO, Tuple

from .errors import TemplateIOError, UnknownVariable
from .model import Command, Line, PathTarget, Raw, Var, VariablePath

logger = logging.getLogger(__name__)


def read_file_text(path) -> str:
    """Read a whole UTF-8 file, line endings untouched."""
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except OSError as e:
        raise TemplateIOError(e.errno, e.strerror or str(e), os.fspath(path)) from e
    except UnicodeDecodeError as e:
        raise TemplateIOError(None, f"not valid UTF-8 ({e.reason})", os.fspath(path)) from e
    except ValueError as e:
        raise TemplateIOError(None, str(e), os.fspath(path)) from e


@dataclass(frozen=True)
class EvaluationContext:
    """Per-content-file data a template is rendered against."""
    template_path: str
    content_path: str
    content_text: str
    title: str


VARIABLES: Dict[Tuple[str, ...], Callable[[EvaluationContext], str]] = {
    ('self', 'content'): lambda context: context.content_text,
    ('self', 'title'): lambda context: context.title,
}


class Evaluator:
    """Render template lines against an evaluation context."""

    def __init__(self, read_file_text: Callable[[str], str] = read_file_text):
        self.read_file_text = read_file_text

    def resolve_variable(self, path: VariablePath, context: EvaluationContext) -> str:
        resolver = VARIABLES.get(path.identifiers)
        if resolver is None:
            raise UnknownVariable(path)
        return resolver(context)

    def resolve_path(self, path: PathTarget, context: EvaluationContext) -> str:
        """Resolve an inserted file against the template's parent directory."""
        base_dir = os.path.dirname(context.template_path)
        return os.path.join(base_dir, path)

    def evaluate_line(self, line: Line, context: EvaluationContext) -> str:
        if isinstance(line, Raw):
            return line.text + '\n'
        if isinstance(line, Command):
            target = line.directive.target
            if isinstance(target, Var):
                return self.resolve_variable(target.path, context) + '\n'
            file_path = self.resolve_path(target, context)
            logger.debug(f"Inserting {file_path}")
            return self.read_file_text(file_path) + '\n'
        raise TypeError(f"Not a template line: {line!r}")

    def render_to(self, lines: Iterable[Line], context: EvaluationContext, out: TextIO) -> None:
        """Write each rendered line to out, in document order."""
        for line in lines:
            out.write(self.evaluate_line(line, context))

    def render(self, lines: Iterable[Line], context: EvaluationContext) -> str:
        buffer = io.StringIO()
        self.render_to(lines, context, buffer)
        return buffer.getvalue()


def render(lines: Iterable[Line], context: EvaluationContext) -> str:
    """Render lines against context with the default file reader."""
    return Evaluator().render(lines, context)
