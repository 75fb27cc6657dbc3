"""
Flavor Lexer (Tokenizer).

Transforms Flavor source code into a stream of tokens. Scanning tries an
ordered table of regular expressions at the current position and keeps the
first one that matches, so the order of ``TOKEN_PATTERNS`` decides between
overlapping candidates (``int`` versus ``intx``, ``->`` versus ``-``).
"""

import logging
import re
from typing import Iterator, Optional

from flavor.compiler.tokens import EOF_LEXEME, KEYWORDS, SYMBOLS, Token, TokenType
from flavor.utils.errors import LexerError, Span

logger = logging.getLogger(__name__)


TOKEN_PATTERNS: list[tuple[re.Pattern, TokenType]] = [
    *((re.compile(re.escape(word) + r"\b"), kind) for word, kind in KEYWORDS.items()),
    *((re.compile(re.escape(symbol)), kind) for symbol, kind in SYMBOLS.items()),
    (re.compile(r"[0-9]+"), TokenType.NUMBER),
    (re.compile(r'"(.*?)"'), TokenType.STRING_LITERAL),
    (re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*"), TokenType.IDENTIFIER),
    (re.compile(r"\S"), TokenType.UNKNOWN),
]


class Lexer:
    """
    Tokenizer for Flavor source code.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        # or iterate: for token in lexer: ...
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    def _skip_whitespace(self) -> None:
        while self._current_char is not None and self._current_char.isspace():
            self._advance()

    def _consume(self, length: int) -> Span:
        """Advance over ``length`` characters and return the span they cover."""
        start_line, start_column = self.line, self.column
        end_line, end_column = start_line, start_column
        for _ in range(length):
            end_line, end_column = self.line, self.column
            self._advance()
        return Span(start_line, start_column, end_line, end_column)

    def _next_token(self) -> Token:
        self._skip_whitespace()

        if self._current_char is None:
            return Token(TokenType.EOF, EOF_LEXEME, Span.point(self.line, self.column))

        for pattern, kind in TOKEN_PATTERNS:
            match = pattern.match(self.source, self.pos)
            if match is None:
                continue

            lexeme = match.group(0)
            span = self._consume(len(lexeme))
            if kind == TokenType.UNKNOWN:
                raise LexerError(f"Unknown token '{lexeme}'", span)
            return Token(kind, lexeme, span)

        # The catch-all pattern accepts any non-whitespace character.
        raise AssertionError("unreachable: no token pattern matched")

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source code.

        Returns:
            A list of all tokens including the final EOF token.

        Raises:
            LexerError: On the first piece of text no pattern accepts.
        """
        self.tokens = []
        self.pos = 0
        self.line = 1
        self.column = 1

        while True:
            token = self._next_token()
            self.tokens.append(token)
            if token.type == TokenType.EOF:
                break

        logger.debug("Lexed %d tokens", len(self.tokens))
        return self.tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens (tokenizes on first use)."""
        if not self.tokens:
            self.tokenize()
        return iter(self.tokens)


def tokenize(source: str) -> list[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: Flavor source code

    Returns:
        List of tokens
    """
    return Lexer(source).tokenize()
