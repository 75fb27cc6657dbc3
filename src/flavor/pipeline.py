"""
The Flavor pipeline: lex, parse, type check, evaluate.

Each stage fails fast with a ``FlavorError`` tagged by its phase; nothing
is carried over between calls.

The interpreter recurses through the host stack, roughly a dozen Python
frames per Flavor call, so evaluation runs on a worker thread with a large
stack and a raised recursion limit.
"""

import logging
import sys
import threading
from typing import Optional, TextIO

from flavor.compiler.ast_nodes import Program
from flavor.compiler.lexer import tokenize
from flavor.compiler.parser import parse
from flavor.compiler.type_checker import check
from flavor.runtime.interpreter import Interpreter
from flavor.runtime.values import Outcome
from flavor.utils.errors import FlavorRuntimeError, FlavorTypeError, ParserError

logger = logging.getLogger(__name__)

EVAL_RECURSION_LIMIT = 50_000
EVAL_STACK_SIZE = 512 * 1024 * 1024

NESTED_TOO_DEEPLY = "Program is nested too deeply"


def compile_source(source: str) -> Program:
    """
    Run the static half of the pipeline.

    Args:
        source: Flavor source code

    Returns:
        The parsed and type-checked program

    Raises:
        FlavorError: From the lexing, parsing or type checking phase
    """
    tokens = tokenize(source)
    try:
        program = parse(tokens)
    except RecursionError:
        raise ParserError(NESTED_TOO_DEEPLY) from None
    try:
        check(program)
    except RecursionError:
        raise FlavorTypeError(NESTED_TOO_DEEPLY) from None
    logger.debug("Program accepted by the type checker")
    return program


def _evaluate(program: Program, output: Optional[TextIO]) -> Outcome:
    """Evaluate ``program`` on a thread with room for deep recursion."""
    result: dict[str, object] = {}

    def target() -> None:
        try:
            result["outcome"] = Interpreter(output).eval_program(program)
        except RecursionError:
            result["error"] = FlavorRuntimeError("Maximum recursion depth exceeded")
        except Exception as e:
            result["error"] = e

    old_limit = sys.getrecursionlimit()
    old_stack_size = threading.stack_size()
    try:
        threading.stack_size(EVAL_STACK_SIZE)
        sys.setrecursionlimit(max(old_limit, EVAL_RECURSION_LIMIT))
        worker = threading.Thread(target=target, name="flavor-eval")
        worker.start()
        worker.join()
    finally:
        threading.stack_size(old_stack_size)
        sys.setrecursionlimit(old_limit)

    if "error" in result:
        raise result["error"]
    return result["outcome"]


def run(source: str, output: Optional[TextIO] = None) -> Outcome:
    """
    Compile and evaluate a Flavor program.

    Args:
        source: Flavor source code
        output: Stream ``print`` writes to (default: sys.stdout)

    Returns:
        The outcome of the program's last top-level statement

    Raises:
        FlavorError: The first diagnostic produced by any phase
    """
    program = compile_source(source)
    return _evaluate(program, output)
