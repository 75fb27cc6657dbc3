"""
Pytest configuration and shared fixtures for Flavor tests.
"""

import io
from dataclasses import dataclass

import pytest

from flavor.compiler.ast_nodes import Program
from flavor.compiler.lexer import Lexer
from flavor.compiler.parser import Parser
from flavor.compiler.tokens import Token
from flavor.compiler.type_checker import TypeChecker
from flavor.pipeline import run
from flavor.runtime.values import Outcome
from flavor.utils.errors import ErrorPhase, FlavorError


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str) -> Lexer:
        return Lexer(source)

    return _create_lexer


@pytest.fixture
def parser_factory(lexer_factory):
    """Factory fixture for creating parsers from source."""

    def _create_parser(source: str) -> Parser:
        lexer = lexer_factory(source)
        tokens = lexer.tokenize()
        return Parser(tokens)

    return _create_parser


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source code."""

    def _tokenize(source: str) -> list[Token]:
        lexer = lexer_factory(source)
        return lexer.tokenize()

    return _tokenize


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source code into AST."""

    def _parse(source: str) -> Program:
        parser = parser_factory(source)
        return parser.parse()

    return _parse


@pytest.fixture
def check(parse):
    """Fixture to parse and type check source code."""

    def _check(source: str) -> Program:
        program = parse(source)
        TypeChecker().check(program)
        return program

    return _check


@pytest.fixture
def check_error(check):
    """Fixture returning the type error raised for source code."""

    def _check_error(source: str) -> FlavorError:
        with pytest.raises(FlavorError) as exc_info:
            check(source)
        assert exc_info.value.phase == ErrorPhase.TYPE_CHECKING
        return exc_info.value

    return _check_error


@dataclass
class RunResult:
    """The outcome of a program together with everything it printed."""

    outcome: Outcome
    output: str

    @property
    def lines(self) -> list[str]:
        return self.output.splitlines()


@pytest.fixture
def run_source():
    """Fixture to run source code through the whole pipeline."""

    def _run(source: str) -> RunResult:
        buffer = io.StringIO()
        outcome = run(source, output=buffer)
        return RunResult(outcome, buffer.getvalue())

    return _run


@pytest.fixture
def run_error():
    """Fixture returning the error raised while running source code."""

    def _run_error(source: str) -> FlavorError:
        with pytest.raises(FlavorError) as exc_info:
            run(source, output=io.StringIO())
        return exc_info.value

    return _run_error
