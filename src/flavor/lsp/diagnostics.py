"""
Diagnostic generation for the Flavor LSP.

Runs the static half of the pipeline (lexing, parsing, type checking) over
a document and converts the first ``FlavorError`` into an LSP diagnostic.
Programs are never executed by the language server.
"""

from typing import Optional

from lsprotocol import types

from flavor.pipeline import compile_source
from flavor.utils.errors import FlavorError, Span

SOURCE_NAME = "flavor"


class DiagnosticProvider:
    """
    Generates LSP diagnostics from Flavor source code.

    Usage:
        provider = DiagnosticProvider(source, uri)
        diagnostics = provider.get_diagnostics()
    """

    def __init__(self, source: str, uri: str) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The Flavor source code to analyze
            uri: The document URI the diagnostics belong to
        """
        self.source = source
        self.uri = uri
        self._diagnostics: list[types.Diagnostic] = []

    def get_diagnostics(self) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        The pipeline stops at the first error, so the list holds at most
        one entry.
        """
        self._diagnostics = []
        try:
            compile_source(self.source)
        except FlavorError as e:
            self._add_flavor_error(e)
        return self._diagnostics

    def _add_flavor_error(self, error: FlavorError) -> None:
        message = error.message
        if error.notes:
            message += "\n" + "\n".join(f"note: {note}" for note in error.notes)

        self._diagnostics.append(
            types.Diagnostic(
                range=span_to_range(error.span),
                message=message,
                severity=types.DiagnosticSeverity.Error,
                source=SOURCE_NAME,
                code=str(error.phase),
            )
        )


def span_to_range(span: Optional[Span]) -> types.Range:
    """
    Convert a 1-based inclusive span to a 0-based half-open LSP range.

    A missing span maps to the first character of the document.
    """
    if span is None:
        return types.Range(
            start=types.Position(line=0, character=0),
            end=types.Position(line=0, character=1),
        )
    return types.Range(
        start=types.Position(line=span.start_line - 1, character=span.start_column - 1),
        end=types.Position(line=span.end_line - 1, character=span.end_column),
    )


def get_diagnostics_for_document(source: str, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The Flavor source code
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    provider = DiagnosticProvider(source, uri)
    return provider.get_diagnostics()
