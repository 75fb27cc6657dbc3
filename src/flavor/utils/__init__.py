"""
Flavor Utilities Package.

Error types, source spans, and diagnostic rendering.
"""

from flavor.utils.diagnostics import (
    color_enabled,
    levenshtein_distance,
    render_error,
    suggest_similar,
)
from flavor.utils.errors import (
    ErrorPhase,
    FlavorError,
    FlavorRuntimeError,
    FlavorTypeError,
    LexerError,
    ParserError,
    Span,
    merge_spans,
)

__all__ = [
    "Span",
    "merge_spans",
    "ErrorPhase",
    "FlavorError",
    "LexerError",
    "ParserError",
    "FlavorTypeError",
    "FlavorRuntimeError",
    "render_error",
    "color_enabled",
    "levenshtein_distance",
    "suggest_similar",
]
