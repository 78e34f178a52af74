"""
Plainsite - A small static site generator.

Plainsite applies one line-oriented template to every file in a content
directory. Template lines either emit literal text (``+``) or insert a file
or a variable (``:insert``).
"""

__version__ = "1.0.0"

from .core import Plainsite, FileProcessor
from .errors import (PlainsiteError, TemplateSyntaxError, InvalidEscape,
                     UnknownVariable, TemplateIOError)
from .evaluator import EvaluationContext, Evaluator
from .template import Template

__all__ = [
    'Plainsite', 'FileProcessor', 'Template', 'EvaluationContext', 'Evaluator',
    'PlainsiteError', 'TemplateSyntaxError', 'InvalidEscape', 'UnknownVariable',
    'TemplateIOError',
]
