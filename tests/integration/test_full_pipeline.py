"""
Integration tests for the complete Flavor pipeline.

These tests run whole programs from source text through lexing, parsing,
type checking and evaluation, and verify that each phase reports its
errors under the right tag.
"""

import io

import pytest

import flavor
from flavor import ErrorPhase, FlavorError, compile_source
from flavor.compiler.ast_nodes import FunctionDeclaration, format_ast
from flavor.compiler.lexer import tokenize
from flavor.runtime.values import IntValue, ValueOutcome


BUBBLE_SORT = """
fn sort(xs: [int], n: int) -> [int] {
    let i = 0;
    while i < n {
        let j = 0;
        while j < n - i - 1 {
            if xs[j] > xs[j + 1] {
                let tmp = xs[j];
                xs[j] = xs[j + 1];
                xs[j + 1] = tmp;
            }
            j++;
        }
        i++;
    }
    return xs;
}

let data = [5, 3, 8, 1, 9, 2];
print sort(data, 6);
print data;
"""

FIBONACCI = """
fn fib(n: int) -> int {
    let a = 0;
    let b = 1;
    let i = 0;
    while true {
        if i == n {
            break;
        }
        let t = a + b;
        a = b;
        b = t;
        i++;
    }
    return a;
}

let k = 0;
while k < 10 {
    print fib(k);
    k++;
}
"""

COMPOSE = """
fn compose(f: (int) -> int, g: (int) -> int) -> (int) -> int {
    return <x: int> -> int { return f(g(x)); };
}

let inc = <x: int> -> int { return x + 1; };
let dbl = fn(x: int) -> int { return x * 2; };
print compose(inc, dbl)(5), " ", compose(dbl, inc)(5);
"""

CLASSIFY = """
fn classify(n: int) -> string {
    if n < 0 {
        return "negative";
    } else if n == 0 {
        return "zero";
    } else {
        return "positive";
    }
}

print classify(-3), ",", classify(0), ",", classify(7);
"""


class TestPrograms:
    """End-to-end tests with complete programs."""

    def test_bubble_sort(self, run_source):
        result = run_source(BUBBLE_SORT)
        assert result.lines == ["[1, 2, 3, 5, 8, 9]", "[5, 3, 8, 1, 9, 2]"]

    def test_fibonacci(self, run_source):
        result = run_source(FIBONACCI)
        assert result.lines == ["0", "1", "1", "2", "3", "5", "8", "13", "21", "34"]

    def test_function_composition(self, run_source):
        assert run_source(COMPOSE).lines == ["11 12"]

    def test_else_if_chain(self, run_source):
        assert run_source(CLASSIFY).lines == ["negative,zero,positive"]

    def test_identity_matrix(self, run_source):
        result = run_source(
            "let m = [[0, 0, 0], [0, 0, 0], [0, 0, 0]];\n"
            "let i = 0;\n"
            "while i < 3 { m[i][i] = 1; i++; }\n"
            "print m;"
        )
        assert result.lines == ["[[1, 0, 0], [0, 1, 0], [0, 0, 1]]"]

    def test_run_is_exported(self):
        buffer = io.StringIO()
        outcome = flavor.run("let x: int = 1; x = x + 41; x;", output=buffer)
        assert outcome == ValueOutcome(IntValue(42))
        assert buffer.getvalue() == ""


class TestPhases:
    """Each stage reports failures under its own phase."""

    @pytest.mark.parametrize(
        "source, phase",
        [
            ("let x = 1 $ 2;", ErrorPhase.LEXING),
            ("let = 1;", ErrorPhase.PARSING),
            ("let x: int = false;", ErrorPhase.TYPE_CHECKING),
            ("fn bad(n: int) -> int { if n > 0 { return n; } }", ErrorPhase.TYPE_CHECKING),
            ("let xs = [1]; xs[2];", ErrorPhase.RUNTIME),
        ],
    )
    def test_phase(self, run_error, source, phase):
        assert run_error(source).phase == phase

    def test_type_error_stops_before_evaluation(self, run_source):
        with pytest.raises(FlavorError):
            run_source('print "before"; let x: int = "nope";')

    def test_nesting_beyond_host_stack(self, run_error):
        error = run_error("let x = " + "(" * 2000 + "1" + ")" * 2000 + ";")
        assert error.phase == ErrorPhase.PARSING
        assert error.message == "Program is nested too deeply"
        assert error.span is None

    def test_compile_source_returns_program(self):
        program = compile_source("fn add(a: int, b: int) -> int { return a + b; }")
        assert isinstance(program.statements[0], FunctionDeclaration)


class TestIdempotence:
    """Running the same source twice gives identical results."""

    def test_tokens_and_ast(self):
        assert tokenize(FIBONACCI) == tokenize(FIBONACCI)
        assert format_ast(compile_source(COMPOSE)) == format_ast(compile_source(COMPOSE))

    def test_output(self, run_source):
        assert run_source(BUBBLE_SORT).output == run_source(BUBBLE_SORT).output

    def test_diagnostics(self, run_error):
        source = "let total = 1;\nprint totl;"
        first = run_error(source)
        second = run_error(source)
        assert first == second
        assert first.notes == second.notes
