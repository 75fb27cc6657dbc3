"""
Flavor - a small C-like scripting language.

Flavor ships a lexer, a recursive descent parser, a static type checker
with return-path analysis, and a tree-walking interpreter.
"""

from flavor.compiler.lexer import Lexer
from flavor.compiler.parser import Parser
from flavor.compiler.type_checker import TypeChecker
from flavor.pipeline import compile_source, run
from flavor.runtime.interpreter import Interpreter
from flavor.utils.errors import ErrorPhase, FlavorError, Span

__version__ = "0.1.0"
__all__ = [
    "run",
    "compile_source",
    "Lexer",
    "Parser",
    "TypeChecker",
    "Interpreter",
    "FlavorError",
    "ErrorPhase",
    "Span",
]
