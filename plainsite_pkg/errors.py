"""
Exceptions raised while parsing and rendering Plainsite templates.
"""

from typing import Optional


class PlainsiteError(Exception):
    """Base exception for all Plainsite errors."""


class TemplateSyntaxError(PlainsiteError):
    """Raised when a template cannot be parsed."""

    def __init__(self, message: str, line: int, column: int, filename: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(message)

    def __str__(self):
        if not self.line:
            return self.message
        location = f"line {self.line}, column {self.column}"
        if self.filename:
            location = f"{self.filename}, {location}"
        return f"{self.message} ({location})"

    def __reduce__(self):
        return self.__class__, (self.message, self.line, self.column, self.filename)


class UnrecognizedLinePrefix(TemplateSyntaxError):
    """Raised when a line starts with neither '+' nor ':'."""


class MalformedCommand(TemplateSyntaxError):
    """Raised when a ':' line does not hold a valid directive."""


class UnterminatedString(TemplateSyntaxError):
    """Raised when a quoted path is not closed on its line."""


class TrailingInput(TemplateSyntaxError):
    """Raised when text follows a complete directive."""


class InvalidEscape(TemplateSyntaxError):
    """Raised for a backslash escape with an unknown code."""

    def __init__(self, code: str, offset: Optional[int] = None, line: int = 0, column: int = 0,
                 filename: Optional[str] = None):
        self.code = code
        self.offset = offset
        super().__init__(f"Invalid escape sequence: \\{code}", line, column, filename)

    def __reduce__(self):
        return self.__class__, (self.code, self.offset, self.line, self.column, self.filename)


class UnknownVariable(PlainsiteError):
    """Raised when a variable path has no value in the evaluation context."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Unknown variable: ${path}")

    def __reduce__(self):
        return self.__class__, (self.path,)


class TemplateIOError(PlainsiteError, OSError):
    """Raised when the template or an inserted file cannot be read.

    Constructed like OSError: ``TemplateIOError(errno, strerror, filename)``.
    """

    def __str__(self):
        return f"Cannot read {self.filename}: {self.strerror}"
