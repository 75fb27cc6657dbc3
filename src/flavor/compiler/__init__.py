"""
Flavor Compiler Package.

This package contains the front half of the pipeline:
- Lexer: Tokenizes Flavor source code
- Parser: Produces an Abstract Syntax Tree from tokens
- AST: Node definitions for the syntax tree
- Types: The structural type system
- TypeChecker: Type checking and return-path analysis
"""

from flavor.compiler.ast_nodes import ASTNode, ASTVisitor, Program, format_ast
from flavor.compiler.lexer import Lexer, tokenize
from flavor.compiler.parser import Parser, parse
from flavor.compiler.tokens import Token, TokenType
from flavor.compiler.type_checker import TypeChecker, check
from flavor.compiler.types import (
    BOOL_TYPE,
    FLOAT_TYPE,
    INT_TYPE,
    STRING_TYPE,
    UNIT_TYPE,
    ArrayType,
    CustomType,
    FunctionType,
    PrimitiveType,
    Type,
)

__all__ = [
    "Lexer",
    "tokenize",
    "Token",
    "TokenType",
    "Parser",
    "parse",
    "ASTNode",
    "ASTVisitor",
    "Program",
    "format_ast",
    "TypeChecker",
    "check",
    "Type",
    "PrimitiveType",
    "CustomType",
    "ArrayType",
    "FunctionType",
    "INT_TYPE",
    "BOOL_TYPE",
    "FLOAT_TYPE",
    "STRING_TYPE",
    "UNIT_TYPE",
]
