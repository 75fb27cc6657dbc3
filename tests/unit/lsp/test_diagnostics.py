"""Tests for the Flavor LSP diagnostics provider."""

from lsprotocol import types
from lsprotocol.types import DiagnosticSeverity

from flavor.lsp.diagnostics import DiagnosticProvider, get_diagnostics_for_document, span_to_range
from flavor.utils.errors import Span

URI = "test://test.flv"


class TestDiagnosticProvider:
    """Test suite for DiagnosticProvider."""

    def test_valid_code_no_errors(self) -> None:
        """Test that valid code produces no diagnostics."""
        source = """
let x: int = 42;
fn double(n: int) -> int { return n * 2; }
print double(x);
"""
        assert get_diagnostics_for_document(source, URI) == []

    def test_syntax_error_produces_diagnostic(self) -> None:
        diagnostics = get_diagnostics_for_document("let x = ;", URI)

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.severity == DiagnosticSeverity.Error
        assert diagnostic.source == "flavor"
        assert diagnostic.code == "Parsing"
        assert diagnostic.message == "Unexpected token in expression"

    def test_lexer_error(self) -> None:
        diagnostics = get_diagnostics_for_document('let s = "hello', URI)
        assert diagnostics[0].code == "Lexing"

    def test_type_error_with_note(self) -> None:
        """Notes are appended to the diagnostic message."""
        diagnostics = get_diagnostics_for_document("let total = 1; print totl;", URI)

        assert diagnostics[0].code == "TypeChecking"
        assert diagnostics[0].message == (
            "Undefined variable 'totl'\nnote: did you mean 'total'?"
        )

    def test_runtime_errors_are_not_reported(self) -> None:
        """The language server never executes the program."""
        source = "let z = 0; print 1 / z;"
        assert get_diagnostics_for_document(source, URI) == []

    def test_only_first_error_reported(self) -> None:
        source = "let a: int = true;\nlet b: bool = 1;"
        diagnostics = get_diagnostics_for_document(source, URI)
        assert len(diagnostics) == 1
        assert diagnostics[0].range.start.line == 0

    def test_deep_nesting(self) -> None:
        source = "print " + "(" * 2000 + "1" + ")" * 2000 + ";"
        diagnostics = get_diagnostics_for_document(source, URI)

        assert diagnostics[0].code == "Parsing"
        assert diagnostics[0].message == "Program is nested too deeply"
        assert diagnostics[0].range.start == types.Position(line=0, character=0)

    def test_diagnostic_has_range(self) -> None:
        """Test that diagnostics have proper ranges."""
        diagnostics = get_diagnostics_for_document("let x = 1;\nprint y;", URI)

        rng = diagnostics[0].range
        assert rng.start == types.Position(line=1, character=6)
        assert rng.end == types.Position(line=1, character=7)

    def test_provider_can_be_rerun(self) -> None:
        provider = DiagnosticProvider("print missing;", URI)
        assert provider.get_diagnostics() == provider.get_diagnostics()
        assert len(provider.get_diagnostics()) == 1


class TestSpanToRange:
    def test_single_line(self) -> None:
        rng = span_to_range(Span(3, 5, 3, 9))
        assert rng.start == types.Position(line=2, character=4)
        assert rng.end == types.Position(line=2, character=9)

    def test_multiline(self) -> None:
        rng = span_to_range(Span(1, 1, 4, 2))
        assert rng.start.line == 0
        assert rng.end == types.Position(line=3, character=2)

    def test_missing_span(self) -> None:
        rng = span_to_range(None)
        assert rng.start == types.Position(line=0, character=0)
        assert rng.end == types.Position(line=0, character=1)
