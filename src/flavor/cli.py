"""
Flavor Command Line Interface.

Commands:
    flavor run program.flv     Type check and execute a program
    flavor check program.flv   Stop after type checking
    flavor tokens program.flv  Dump the token stream (debug)
    flavor ast program.flv     Dump the syntax tree (debug)

``flavor program.flv`` is shorthand for ``flavor run program.flv``.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from flavor import __version__
from flavor.compiler.ast_nodes import format_ast
from flavor.compiler.lexer import tokenize
from flavor.compiler.parser import parse
from flavor.pipeline import compile_source, run
from flavor.utils.diagnostics import color_enabled, render_error
from flavor.utils.errors import FlavorError

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".flv"
COMMANDS = ("run", "check", "tokens", "ast")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="flavor",
        description="Flavor - a small C-like scripting language",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    help_texts = {
        "run": "Type check and execute a Flavor program",
        "check": "Lex, parse and type check without executing",
        "tokens": "Print the token stream (debug)",
        "ast": "Print the syntax tree (debug)",
    }
    for name in COMMANDS:
        command_parser = subparsers.add_parser(name, help=help_texts[name])
        command_parser.add_argument(
            "input",
            type=Path,
            help=f"Input Flavor file ({SOURCE_SUFFIX})",
        )
        command_parser.add_argument(
            "--no-color",
            action="store_true",
            help="Disable ANSI colors in diagnostics",
        )
        command_parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Log pipeline progress to stderr",
        )

    return parser


def _read_source(input_path: Path) -> Optional[str]:
    """Read a source file, printing an error and returning None on failure."""
    if input_path.suffix != SOURCE_SUFFIX:
        print(
            f"Error: Expected a {SOURCE_SUFFIX} file, got: {input_path}",
            file=sys.stderr,
        )
        return None

    try:
        return input_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: File not found: {input_path}", file=sys.stderr)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Could not read {input_path}: {e}", file=sys.stderr)
    return None


def _report(error: FlavorError, source: str, args: argparse.Namespace) -> int:
    """Render a diagnostic to stderr and return the failure exit code."""
    use_color = not args.no_color and color_enabled(sys.stderr)
    print(render_error(error, source, str(args.input), use_color), file=sys.stderr)
    return 1


def cmd_run(args: argparse.Namespace, source: str) -> int:
    """Handle the run command."""
    try:
        run(source)
    except FlavorError as e:
        return _report(e, source, args)
    return 0


def cmd_check(args: argparse.Namespace, source: str) -> int:
    """Handle the check command."""
    try:
        compile_source(source)
    except FlavorError as e:
        return _report(e, source, args)
    print(f"{args.input}: OK")
    return 0


def cmd_tokens(args: argparse.Namespace, source: str) -> int:
    """Handle the tokens command (debug)."""
    try:
        tokens = tokenize(source)
    except FlavorError as e:
        return _report(e, source, args)

    for token in tokens:
        print(token)
    return 0


def cmd_ast(args: argparse.Namespace, source: str) -> int:
    """Handle the ast command (debug)."""
    try:
        program = parse(tokenize(source))
    except FlavorError as e:
        return _report(e, source, args)

    print("\n".join(format_ast(program)))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    if argv is None:
        argv = sys.argv[1:]

    # "flavor program.flv" runs the file.
    if argv and argv[0] not in COMMANDS and not argv[0].startswith("-"):
        argv = ["run", *argv]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    source = _read_source(args.input)
    if source is None:
        return 1

    command_handlers = {
        "run": cmd_run,
        "check": cmd_check,
        "tokens": cmd_tokens,
        "ast": cmd_ast,
    }

    handler = command_handlers[args.command]
    logger.debug("Running '%s' on %s", args.command, args.input)
    return handler(args, source)


if __name__ == "__main__":
    sys.exit(main())
