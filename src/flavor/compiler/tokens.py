"""
Token definitions for the Flavor lexer.

This module defines every token type recognized by the Flavor language
together with the ordered pattern table the lexer scans with.
"""

from dataclasses import dataclass
from enum import Enum, auto

from flavor.utils.errors import Span


class TokenType(Enum):
    """Enumeration of all token types in Flavor."""

    # Built-in statements
    PRINT = auto()

    # Keywords
    LET = auto()
    FN = auto()
    ALIAS = auto()
    RETURN = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    BREAK = auto()
    TRUE = auto()
    FALSE = auto()

    # Type keywords
    INT = auto()
    FLOAT = auto()
    BOOL = auto()
    STRING = auto()
    NOTHING = auto()
    ARRAY = auto()

    # Symbols
    DOT = auto()
    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()
    SLIM_ARROW = auto()  # ->
    BOLD_ARROW = auto()  # =>
    ASSIGN = auto()
    EQ = auto()
    NOT_EQ = auto()
    NOT = auto()
    GT = auto()
    LT = auto()
    GE = auto()
    LE = auto()
    PLUS_PLUS = auto()
    MINUS_MINUS = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    AND = auto()
    OR = auto()

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()

    # Literals
    NUMBER = auto()
    STRING_LITERAL = auto()
    IDENTIFIER = auto()

    # Utils
    UNKNOWN = auto()
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """
    Represents a single token from the source code.

    Attributes:
        type: The type of this token
        lexeme: The exact source text (string literals keep their quotes)
        span: Source range of this token
    """

    type: TokenType
    lexeme: str
    span: Span

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.span})"


KEYWORDS: dict[str, TokenType] = {
    "print": TokenType.PRINT,
    "let": TokenType.LET,
    "fn": TokenType.FN,
    "alias": TokenType.ALIAS,
    "int": TokenType.INT,
    "float": TokenType.FLOAT,
    "string": TokenType.STRING,
    "bool": TokenType.BOOL,
    "array": TokenType.ARRAY,
    "return": TokenType.RETURN,
    "break": TokenType.BREAK,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "nothing": TokenType.NOTHING,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

# Longer operators come before their single-character prefixes.
SYMBOLS: dict[str, TokenType] = {
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "->": TokenType.SLIM_ARROW,
    "=>": TokenType.BOLD_ARROW,
    "==": TokenType.EQ,
    "!=": TokenType.NOT_EQ,
    "=": TokenType.ASSIGN,
    "!": TokenType.NOT,
    ">=": TokenType.GE,
    "<=": TokenType.LE,
    ">": TokenType.GT,
    "<": TokenType.LT,
    "++": TokenType.PLUS_PLUS,
    "--": TokenType.MINUS_MINUS,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "&&": TokenType.AND,
    "||": TokenType.OR,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

EOF_LEXEME = "\0"
