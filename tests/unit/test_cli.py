"""
Unit tests for the flavor command line interface.
"""

import pytest

from flavor.cli import create_parser, main


@pytest.fixture
def write_program(tmp_path):
    """Write source to a file in a temporary directory and return its path."""

    def _write(source: str, name: str = "program.flv"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


class TestRunCommand:
    def test_run_prints_output(self, write_program, capsys):
        path = write_program('print "hello, ", 42;')
        assert main(["run", str(path)]) == 0
        assert capsys.readouterr().out == "hello, 42\n"

    def test_bare_path_runs(self, write_program, capsys):
        path = write_program("print 1 + 1;")
        assert main([str(path)]) == 0
        assert capsys.readouterr().out == "2\n"

    def test_type_error_is_rendered(self, write_program, capsys):
        path = write_program("let x = 1;\nprint y;")
        assert main(["run", str(path), "--no-color"]) == 1

        err = capsys.readouterr().err
        assert "error[TypeChecking]: Undefined variable 'y'" in err
        assert f"--> {path}:2:7" in err
        assert " 2 | print y;" in err

    def test_runtime_error_after_output(self, write_program, capsys):
        path = write_program("print 1;\nlet z = 0;\nprint 1 / z;")
        assert main(["run", str(path)]) == 1

        captured = capsys.readouterr()
        assert captured.out == "1\n"
        assert "error[Runtime]: Division by zero" in captured.err
        assert "\033[" not in captured.err


class TestInputValidation:
    def test_wrong_extension(self, write_program, capsys):
        path = write_program("print 1;", name="program.txt")
        assert main(["run", str(path)]) == 1
        assert "Error: Expected a .flv file, got:" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        path = tmp_path / "missing.flv"
        assert main(["run", str(path)]) == 1
        assert f"Error: File not found: {path}" in capsys.readouterr().err

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "bad.flv"
        path.write_bytes(b'print "\xff";')
        assert main(["run", str(path)]) == 1
        assert f"Error: Could not read {path}" in capsys.readouterr().err

    def test_deeply_nested_program(self, write_program, capsys):
        path = write_program("let x: int = " + "(" * 2000 + "1" + ")" * 2000 + ";")
        assert main(["check", str(path)]) == 1
        assert "error[Parsing]: Program is nested too deeply" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: flavor" in capsys.readouterr().out


class TestDebugCommands:
    def test_check_ok(self, write_program, capsys):
        path = write_program("fn id(x: int) -> int { return x; }")
        assert main(["check", str(path)]) == 0
        assert capsys.readouterr().out == f"{path}: OK\n"

    def test_check_does_not_execute(self, write_program, capsys):
        path = write_program('print "side effect";')
        assert main(["check", str(path)]) == 0
        assert "side effect" not in capsys.readouterr().out

    def test_check_reports_errors(self, write_program, capsys):
        path = write_program("fn f() -> int { }")
        assert main(["check", str(path)]) == 1
        assert "does not guarantee a return" in capsys.readouterr().err

    def test_tokens(self, write_program, capsys):
        path = write_program("let x = 1;")
        assert main(["tokens", str(path)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Token(LET, 'let', 1:1)"
        assert lines[-1].startswith("Token(EOF")

    def test_ast(self, write_program, capsys):
        path = write_program("print 1;")
        assert main(["ast", str(path)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Program:"
        assert lines[1] == "  Print:"

    def test_ast_parse_error(self, write_program, capsys):
        path = write_program("print ;")
        assert main(["ast", str(path)]) == 1
        assert "error[Parsing]" in capsys.readouterr().err


class TestArgumentParser:
    def test_subcommand_options(self):
        args = create_parser().parse_args(["check", "a.flv", "--no-color", "-v"])
        assert args.command == "check"
        assert args.no_color
        assert args.verbose
        assert args.input.name == "a.flv"
