"""
Parsed template structures.

A template is an ordered sequence of lines, each either ``Raw`` literal text
or a ``Command``. The only command today is ``Insert``, whose target is a
file path (``PathRef`` or ``PathOwned``) or a variable path (``Var``).
"""

import os
from dataclasses import dataclass
from typing import Tuple, Union

from .lexer import encode_escapes


class PathTarget(os.PathLike):
    """
    Common interface for the two path variants.

    ``str()`` and ``os.fspath()`` return the path text whichever variant holds
    it, and two paths compare equal when their text is equal.
    """

    def __fspath__(self) -> str:
        return str(self)

    def __eq__(self, other):
        if not isinstance(other, PathTarget):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def to_source(self) -> str:
        return f'"{encode_escapes(str(self))}"'


@dataclass(frozen=True, eq=False)
class PathRef(PathTarget):
    """A path that is a slice of the template source, kept as offsets."""
    source: str
    start: int
    end: int

    def __str__(self):
        return self.source[self.start:self.end]

    def __repr__(self):
        return f"PathRef({str(self)!r})"


@dataclass(frozen=True, eq=False)
class PathOwned(PathTarget):
    """A path decoded from escape sequences into its own string."""
    value: str

    def __str__(self):
        return self.value

    def __repr__(self):
        return f"PathOwned({self.value!r})"


@dataclass(frozen=True)
class VariablePath:
    identifiers: Tuple[str, ...]

    def __post_init__(self):
        if not self.identifiers:
            raise ValueError("A variable path needs at least one identifier")

    def __str__(self):
        return '.'.join(self.identifiers)


@dataclass(frozen=True)
class Var:
    path: VariablePath

    def to_source(self) -> str:
        return f"${self.path}"


InsertTarget = Union[PathRef, PathOwned, Var]


@dataclass(frozen=True)
class Insert:
    target: InsertTarget

    def to_source(self) -> str:
        return f"insert {self.target.to_source()}"


@dataclass(frozen=True)
class Command:
    directive: Insert

    def to_source(self) -> str:
        return f":{self.directive.to_source()}"


@dataclass(frozen=True)
class Raw:
    text: str

    def to_source(self) -> str:
        return f"+{self.text}"


Line = Union[Raw, Command]
