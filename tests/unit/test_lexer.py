"""
Unit tests for the Flavor Lexer.
"""

import pytest

from flavor.compiler.lexer import Lexer, tokenize as lex
from flavor.compiler.tokens import EOF_LEXEME, TokenType
from flavor.utils.errors import ErrorPhase, LexerError, Span


def kinds(tokens):
    return [t.type for t in tokens]


class TestLexerBasics:
    """Basic lexer functionality tests."""

    def test_empty_source(self, tokenize):
        """Empty source should produce only EOF token."""
        tokens = tokenize("")
        assert kinds(tokens) == [TokenType.EOF]
        assert tokens[0].lexeme == EOF_LEXEME
        assert tokens[0].span == Span.point(1, 1)

    def test_whitespace_only(self, tokenize):
        """Whitespace-only source should produce only EOF token."""
        tokens = tokenize("   \t \n  ")
        assert kinds(tokens) == [TokenType.EOF]
        assert tokens[0].span == Span.point(2, 3)

    def test_let_statement(self, tokenize):
        tokens = tokenize("let x = 10;")
        assert kinds(tokens) == [
            TokenType.LET,
            TokenType.IDENTIFIER,
            TokenType.ASSIGN,
            TokenType.NUMBER,
            TokenType.SEMICOLON,
            TokenType.EOF,
        ]

    def test_lexemes_are_source_text(self, tokenize):
        tokens = tokenize("let total = 10;")
        assert [t.lexeme for t in tokens[:-1]] == ["let", "total", "=", "10", ";"]

    def test_iterating_lexer(self):
        """Iterating a lexer yields the same tokens as tokenize()."""
        source = "print 1, 2;"
        assert list(Lexer(source)) == lex(source)


class TestLexerKeywords:
    """Keyword and identifier disambiguation."""

    @pytest.mark.parametrize(
        "word, kind",
        [
            ("print", TokenType.PRINT),
            ("let", TokenType.LET),
            ("fn", TokenType.FN),
            ("alias", TokenType.ALIAS),
            ("return", TokenType.RETURN),
            ("if", TokenType.IF),
            ("else", TokenType.ELSE),
            ("while", TokenType.WHILE),
            ("break", TokenType.BREAK),
            ("true", TokenType.TRUE),
            ("false", TokenType.FALSE),
            ("nothing", TokenType.NOTHING),
            ("int", TokenType.INT),
            ("float", TokenType.FLOAT),
            ("bool", TokenType.BOOL),
            ("string", TokenType.STRING),
            ("array", TokenType.ARRAY),
        ],
    )
    def test_keyword(self, tokenize, word, kind):
        assert tokenize(word)[0].type == kind

    @pytest.mark.parametrize("word", ["intx", "int_x", "printer", "iffy", "letter", "_let"])
    def test_keyword_prefix_is_identifier(self, tokenize, word):
        """A keyword followed by more word characters is an identifier."""
        tokens = tokenize(word)
        assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.EOF]
        assert tokens[0].lexeme == word

    def test_keyword_before_punctuation(self, tokenize):
        assert kinds(tokenize("fn(")) == [TokenType.FN, TokenType.LPAREN, TokenType.EOF]


class TestLexerOperators:
    """Tests for operator tokenization."""

    def test_multi_character_operators(self, tokenize):
        tokens = tokenize("-> => == != >= <= ++ -- && ||")
        assert kinds(tokens)[:-1] == [
            TokenType.SLIM_ARROW,
            TokenType.BOLD_ARROW,
            TokenType.EQ,
            TokenType.NOT_EQ,
            TokenType.GE,
            TokenType.LE,
            TokenType.PLUS_PLUS,
            TokenType.MINUS_MINUS,
            TokenType.AND,
            TokenType.OR,
        ]

    def test_single_character_operators(self, tokenize):
        tokens = tokenize(". , : ; = ! > < + - * / % ( ) [ ] { }")
        assert kinds(tokens)[:-1] == [
            TokenType.DOT,
            TokenType.COMMA,
            TokenType.COLON,
            TokenType.SEMICOLON,
            TokenType.ASSIGN,
            TokenType.NOT,
            TokenType.GT,
            TokenType.LT,
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.STAR,
            TokenType.SLASH,
            TokenType.PERCENT,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.LBRACE,
            TokenType.RBRACE,
        ]

    def test_longest_operator_wins_without_spaces(self, tokenize):
        assert kinds(tokenize("a->b"))[:-1] == [
            TokenType.IDENTIFIER,
            TokenType.SLIM_ARROW,
            TokenType.IDENTIFIER,
        ]
        assert kinds(tokenize("x++-y"))[:-1] == [
            TokenType.IDENTIFIER,
            TokenType.PLUS_PLUS,
            TokenType.MINUS,
            TokenType.IDENTIFIER,
        ]


class TestLexerLiterals:
    """Tests for literal tokenization."""

    def test_integer_literal(self, tokenize):
        tokens = tokenize("0 42 007")
        assert [t.lexeme for t in tokens if t.type == TokenType.NUMBER] == ["0", "42", "007"]

    def test_no_float_literals(self, tokenize):
        """A decimal point lexes as a separate DOT token."""
        assert kinds(tokenize("3.14"))[:-1] == [
            TokenType.NUMBER,
            TokenType.DOT,
            TokenType.NUMBER,
        ]

    def test_string_keeps_quotes(self, tokenize):
        tokens = tokenize('"hello world"')
        assert tokens[0].type == TokenType.STRING_LITERAL
        assert tokens[0].lexeme == '"hello world"'

    def test_strings_are_non_greedy(self, tokenize):
        tokens = tokenize('"a" "b"')
        assert [t.lexeme for t in tokens[:-1]] == ['"a"', '"b"']

    def test_keyword_inside_string(self, tokenize):
        tokens = tokenize('"let"')
        assert kinds(tokens) == [TokenType.STRING_LITERAL, TokenType.EOF]


class TestLexerSpans:
    """Tests for source span tracking."""

    def test_single_line_spans(self, tokenize):
        tokens = tokenize("let x = 10;")
        assert tokens[0].span == Span(1, 1, 1, 3)
        assert tokens[1].span == Span(1, 5, 1, 5)
        assert tokens[3].span == Span(1, 9, 1, 10)
        assert tokens[4].span == Span(1, 11, 1, 11)
        assert tokens[5].span == Span.point(1, 12)

    def test_newline_resets_column(self, tokenize):
        tokens = tokenize("let\n  x")
        assert tokens[1].span == Span(2, 3, 2, 3)

    def test_string_span_includes_quotes(self, tokenize):
        tokens = tokenize('print "hi";')
        assert tokens[1].span == Span(1, 7, 1, 10)


class TestLexerErrors:
    """Tests for lexer error handling."""

    def test_unknown_character(self, tokenize):
        with pytest.raises(LexerError) as exc_info:
            tokenize("let x = 5 @ 3;")
        error = exc_info.value
        assert error.phase == ErrorPhase.LEXING
        assert "@" in error.message
        assert error.span == Span(1, 11, 1, 11)

    def test_unterminated_string(self, tokenize):
        with pytest.raises(LexerError) as exc_info:
            tokenize('let s = "hello')
        assert "'\"'" in exc_info.value.message
        assert exc_info.value.span == Span(1, 9, 1, 9)

    def test_error_on_later_line(self, tokenize):
        with pytest.raises(LexerError) as exc_info:
            tokenize("let a = 1;\nlet b = #;")
        assert exc_info.value.span.start_line == 2


class TestLexerIdempotence:
    def test_same_tokens_twice(self):
        source = 'fn f(a: int) -> int { return a * 2; }\nprint f(21), "!";'
        assert lex(source) == lex(source)

    def test_lexer_can_be_reused(self):
        lexer = Lexer("let a = 1;")
        assert lexer.tokenize() == lexer.tokenize()
