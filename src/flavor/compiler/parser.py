"""
Flavor Parser.

A recursive descent parser that transforms a token stream into an Abstract
Syntax Tree (AST). Binary operators are handled by precedence climbing;
calls, indexing and postfix increments are consumed by a postfix loop after
each term, so chains such as ``f()[0]++`` parse naturally.

The parser does not recover from errors: the first unexpected token aborts
the parse with a ``ParserError``.
"""

import dataclasses
import logging
from typing import Optional

from flavor.compiler.ast_nodes import (
    ArrayAccess,
    ArrayLiteral,
    ASTNode,
    BinaryExpression,
    BinaryOperator,
    Body,
    BoolLiteral,
    Break,
    ExpressionStatement,
    FunctionCall,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    If,
    LetDeclaration,
    NumberLiteral,
    Parameter,
    Print,
    Program,
    Return,
    StringLiteral,
    UnaryExpression,
    UnaryOperator,
    UnitLiteral,
    While,
)
from flavor.compiler.tokens import Token, TokenType
from flavor.compiler.types import (
    BOOL_TYPE,
    FLOAT_TYPE,
    INT_TYPE,
    STRING_TYPE,
    UNIT_TYPE,
    ArrayType,
    CustomType,
    FunctionType,
    Type,
)
from flavor.utils.errors import ParserError, Span

logger = logging.getLogger(__name__)


class Precedence:
    """Operator binding powers (higher binds tighter)."""

    NONE = 0
    ASSIGNMENT = 10     # =
    OR = 40             # ||
    AND = 50            # &&
    EQUALITY = 80       # == !=
    RELATIONAL = 100    # < > <= >=
    ADDITIVE = 120      # + -
    MULTIPLICATIVE = 150  # * / %


# Map token types to binary operators
BINARY_OP_MAP: dict[TokenType, BinaryOperator] = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
    TokenType.PERCENT: BinaryOperator.MOD,
    TokenType.GT: BinaryOperator.GT,
    TokenType.LT: BinaryOperator.LT,
    TokenType.GE: BinaryOperator.GE,
    TokenType.LE: BinaryOperator.LE,
    TokenType.EQ: BinaryOperator.EQ,
    TokenType.NOT_EQ: BinaryOperator.NE,
    TokenType.AND: BinaryOperator.AND,
    TokenType.OR: BinaryOperator.OR,
    TokenType.ASSIGN: BinaryOperator.ASSIGN,
}

PRECEDENCE_MAP: dict[TokenType, int] = {
    TokenType.STAR: Precedence.MULTIPLICATIVE,
    TokenType.SLASH: Precedence.MULTIPLICATIVE,
    TokenType.PERCENT: Precedence.MULTIPLICATIVE,
    TokenType.PLUS: Precedence.ADDITIVE,
    TokenType.MINUS: Precedence.ADDITIVE,
    TokenType.GT: Precedence.RELATIONAL,
    TokenType.LT: Precedence.RELATIONAL,
    TokenType.GE: Precedence.RELATIONAL,
    TokenType.LE: Precedence.RELATIONAL,
    TokenType.EQ: Precedence.EQUALITY,
    TokenType.NOT_EQ: Precedence.EQUALITY,
    TokenType.AND: Precedence.AND,
    TokenType.OR: Precedence.OR,
    TokenType.ASSIGN: Precedence.ASSIGNMENT,
}

PREFIX_OP_MAP: dict[TokenType, UnaryOperator] = {
    TokenType.MINUS: UnaryOperator.NEG,
    TokenType.NOT: UnaryOperator.NOT,
    TokenType.PLUS_PLUS: UnaryOperator.INCREMENT,
    TokenType.MINUS_MINUS: UnaryOperator.DECREMENT,
}

PRIMITIVE_TYPES: dict[TokenType, Type] = {
    TokenType.INT: INT_TYPE,
    TokenType.FLOAT: FLOAT_TYPE,
    TokenType.BOOL: BOOL_TYPE,
    TokenType.STRING: STRING_TYPE,
    TokenType.NOTHING: UNIT_TYPE,
}


class Parser:
    """
    Recursive descent parser for Flavor.

    Usage:
        parser = Parser(tokens)
        program = parser.parse()
    """

    def __init__(self, tokens: list[Token]) -> None:
        """
        Initialize the parser with a token stream.

        Args:
            tokens: Tokens produced by the lexer, ending with EOF
        """
        self.tokens = tokens
        self.pos = 0

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    @property
    def _current(self) -> Token:
        """Get the current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        """Peek at a token ahead of the current position."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def _is_at_end(self) -> bool:
        return self._current.type == TokenType.EOF

    def _check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self._current.type in types

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        if not self._is_at_end():
            self.pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Consume current token if it matches one of the given types."""
        if self._check(*types):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType) -> Token:
        """Consume current token if it matches, else raise error."""
        if self._check(token_type):
            return self._advance()
        token = self._current
        raise self._error(
            f"Expected {token_type.name}, found {token.type.name} ({_describe(token)})"
        )

    def _error(self, message: str, token: Optional[Token] = None) -> ParserError:
        """Create a parser error pointing at ``token`` (default: current)."""
        token = token or self._current
        return ParserError(message, token.span)

    # -------------------------------------------------------------------------
    # Program and statements
    # -------------------------------------------------------------------------

    def parse(self) -> Program:
        """
        Parse the token stream into a Program.

        Raises:
            ParserError: On the first syntax error.
        """
        statements: list[ASTNode] = []
        while not self._is_at_end():
            statements.append(self._parse_statement())

        logger.debug("Parsed %d top-level statements", len(statements))
        return Program(tuple(statements))

    def _parse_statement(self) -> ASTNode:
        kind = self._current.type

        if kind == TokenType.PRINT:
            return self._parse_print()
        if kind == TokenType.LET:
            return self._parse_let()
        if kind == TokenType.FN and self._peek().type != TokenType.LPAREN:
            return self._parse_function_declaration()
        if kind == TokenType.IF:
            return self._parse_if()
        if kind == TokenType.WHILE:
            return self._parse_while()
        if kind == TokenType.RETURN:
            return self._parse_return()
        if kind == TokenType.BREAK:
            keyword = self._advance()
            semicolon = self._expect(TokenType.SEMICOLON)
            return Break(keyword.span.merge(semicolon.span))
        if kind == TokenType.LBRACE:
            return self._parse_body()

        expr = self._parse_expression()
        semicolon = self._expect(TokenType.SEMICOLON)
        return ExpressionStatement(expr, expr.span.merge(semicolon.span))

    def _parse_print(self) -> Print:
        """Parse: print expr (, expr)* ;"""
        keyword = self._advance()
        exprs = [self._parse_expression()]
        while self._match(TokenType.COMMA):
            exprs.append(self._parse_expression())
        semicolon = self._expect(TokenType.SEMICOLON)
        return Print(tuple(exprs), keyword.span.merge(semicolon.span))

    def _parse_let(self) -> LetDeclaration:
        """Parse: let name [: type] = expr ;"""
        keyword = self._advance()
        name = self._expect(TokenType.IDENTIFIER)

        declared_type: Optional[Type] = None
        if self._match(TokenType.COLON):
            declared_type, _ = self._parse_type()

        self._expect(TokenType.ASSIGN)
        expr = self._parse_expression()
        semicolon = self._expect(TokenType.SEMICOLON)
        return LetDeclaration(
            name.lexeme, declared_type, expr, keyword.span.merge(semicolon.span)
        )

    def _parse_function_declaration(self) -> FunctionDeclaration:
        """Parse: fn name(p: T, ...) -> T { ... }"""
        keyword = self._advance()
        name = self._expect(TokenType.IDENTIFIER)
        self._expect(TokenType.LPAREN)
        params = self._parse_parameters(TokenType.RPAREN)
        self._expect(TokenType.SLIM_ARROW)
        return_type, _ = self._parse_type()
        body = self._parse_body()
        return FunctionDeclaration(
            name.lexeme, params, return_type, body, keyword.span.merge(body.span)
        )

    def _parse_if(self) -> If:
        """Parse: if guard { ... } [else { ... } | else if ...]"""
        keyword = self._advance()
        guard = self._parse_expression()
        then_body = self._parse_body()
        span = keyword.span.merge(then_body.span)

        else_body: Optional[Body] = None
        if self._match(TokenType.ELSE):
            if self._check(TokenType.IF):
                nested = self._parse_if()
                else_body = Body((nested,), nested.span)
            else:
                else_body = self._parse_body()
            span = span.merge(else_body.span)

        return If(guard, then_body, else_body, span)

    def _parse_while(self) -> While:
        keyword = self._advance()
        guard = self._parse_expression()
        body = self._parse_body()
        return While(guard, body, keyword.span.merge(body.span))

    def _parse_return(self) -> Return:
        """Parse: return [expr] ; (a bare return yields nothing)"""
        keyword = self._advance()
        if self._check(TokenType.SEMICOLON):
            expr: ASTNode = UnitLiteral(keyword.span)
        else:
            expr = self._parse_expression()
        semicolon = self._expect(TokenType.SEMICOLON)
        return Return(expr, keyword.span.merge(semicolon.span))

    def _parse_body(self) -> Body:
        """Parse a braced statement list."""
        lbrace = self._expect(TokenType.LBRACE)
        statements: list[ASTNode] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            statements.append(self._parse_statement())
        rbrace = self._expect(TokenType.RBRACE)
        return Body(tuple(statements), lbrace.span.merge(rbrace.span))

    def _parse_parameters(self, closing: TokenType) -> tuple[Parameter, ...]:
        """Parse ``name: type`` pairs up to and including ``closing``."""
        params: list[Parameter] = []
        if not self._check(closing):
            while True:
                name = self._expect(TokenType.IDENTIFIER)
                self._expect(TokenType.COLON)
                param_type, type_span = self._parse_type()
                params.append(Parameter(name.lexeme, param_type, name.span.merge(type_span)))
                if not self._match(TokenType.COMMA):
                    break
        self._expect(closing)
        return tuple(params)

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def _parse_type(self) -> tuple[Type, Span]:
        """
        Parse a type annotation.

        Grammar:
            int | float | bool | string | nothing | Name
            array(T) | [T] | (T, ...) -> T
        """
        token = self._current

        if token.type in PRIMITIVE_TYPES:
            self._advance()
            return PRIMITIVE_TYPES[token.type], token.span

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return CustomType(token.lexeme), token.span

        if token.type == TokenType.ARRAY:
            self._advance()
            self._expect(TokenType.LPAREN)
            element_type, _ = self._parse_type()
            rparen = self._expect(TokenType.RPAREN)
            return ArrayType(element_type), token.span.merge(rparen.span)

        if token.type == TokenType.LBRACKET:
            self._advance()
            element_type, _ = self._parse_type()
            rbracket = self._expect(TokenType.RBRACKET)
            return ArrayType(element_type), token.span.merge(rbracket.span)

        if token.type == TokenType.LPAREN:
            self._advance()
            param_types: list[Type] = []
            if not self._check(TokenType.RPAREN):
                while True:
                    param_type, _ = self._parse_type()
                    param_types.append(param_type)
                    if not self._match(TokenType.COMMA):
                        break
            self._expect(TokenType.RPAREN)
            self._expect(TokenType.SLIM_ARROW)
            return_type, return_span = self._parse_type()
            return FunctionType(tuple(param_types), return_type), token.span.merge(return_span)

        raise self._error("Expected a type")

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def _parse_expression(self, min_precedence: int = Precedence.NONE) -> ASTNode:
        """
        Parse an expression using precedence climbing.

        Operators are left-associative except assignment, whose right-hand
        side is parsed at its own precedence so ``a = b = c`` groups as
        ``a = (b = c)``.
        """
        left = self._parse_unary()

        while True:
            op_type = self._current.type
            precedence = PRECEDENCE_MAP.get(op_type)
            if precedence is None or precedence < min_precedence:
                break

            self._advance()
            operator = BINARY_OP_MAP[op_type]
            if operator == BinaryOperator.ASSIGN:
                right = self._parse_expression(precedence)
            else:
                right = self._parse_expression(precedence + 1)
            left = BinaryExpression(left, operator, right, left.span.merge(right.span))

        return left

    def _parse_unary(self) -> ASTNode:
        """Parse prefix operators, recursing so prefixes chain (``--!x``)."""
        if self._current.type in PREFIX_OP_MAP:
            op_token = self._advance()
            operand = self._parse_unary()
            return UnaryExpression(
                PREFIX_OP_MAP[op_token.type],
                operand,
                False,
                op_token.span.merge(operand.span),
            )

        return self._continue_postfix(self._parse_primary())

    def _continue_postfix(self, expr: ASTNode) -> ASTNode:
        """Greedily consume ``++``, ``--``, ``[index]`` and ``(args)``."""
        while True:
            if self._check(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
                op_token = self._advance()
                operator = (
                    UnaryOperator.INCREMENT
                    if op_token.type == TokenType.PLUS_PLUS
                    else UnaryOperator.DECREMENT
                )
                expr = UnaryExpression(operator, expr, True, expr.span.merge(op_token.span))
            elif self._match(TokenType.LBRACKET):
                index = self._parse_expression()
                rbracket = self._expect(TokenType.RBRACKET)
                expr = ArrayAccess(expr, index, expr.span.merge(rbracket.span))
            elif self._match(TokenType.LPAREN):
                args = self._parse_arguments()
                rparen = self._expect(TokenType.RPAREN)
                expr = FunctionCall(expr, args, expr.span.merge(rparen.span))
            else:
                return expr

    def _parse_arguments(self) -> tuple[ASTNode, ...]:
        args: list[ASTNode] = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())
        return tuple(args)

    def _parse_primary(self) -> ASTNode:
        token = self._current

        if token.type == TokenType.NOTHING:
            self._advance()
            return UnitLiteral(token.span)

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(token.lexeme, token.span)

        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return BoolLiteral(token.type == TokenType.TRUE, token.span)

        if token.type == TokenType.STRING_LITERAL:
            self._advance()
            return StringLiteral(token.lexeme[1:-1], token.span)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(token.lexeme, token.span)

        if token.type == TokenType.LBRACKET:
            return self._parse_array_literal()

        if token.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_expression()
            rparen = self._expect(TokenType.RPAREN)
            return dataclasses.replace(inner, span=token.span.merge(rparen.span))

        if token.type == TokenType.LT:
            # Closure: <p: T, ...> -> T { ... }
            self._advance()
            params = self._parse_parameters(TokenType.GT)
            return self._finish_function_expression(token, params)

        if token.type == TokenType.FN:
            # Keyword closure: fn(p: T, ...) -> T { ... }
            self._advance()
            self._expect(TokenType.LPAREN)
            params = self._parse_parameters(TokenType.RPAREN)
            return self._finish_function_expression(token, params)

        raise self._error("Unexpected token in expression")

    def _finish_function_expression(
        self, start: Token, params: tuple[Parameter, ...]
    ) -> FunctionExpression:
        self._expect(TokenType.SLIM_ARROW)
        return_type, _ = self._parse_type()
        body = self._parse_body()
        return FunctionExpression(params, return_type, body, start.span.merge(body.span))

    def _parse_array_literal(self) -> ArrayLiteral:
        """Parse: [expr, ...]"""
        lbracket = self._advance()
        elements: list[ASTNode] = []
        if not self._check(TokenType.RBRACKET):
            elements.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                elements.append(self._parse_expression())
        rbracket = self._expect(TokenType.RBRACKET)
        return ArrayLiteral(tuple(elements), lbracket.span.merge(rbracket.span))


def _describe(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of file"
    return f"'{token.lexeme}'"


def parse(tokens: list[Token]) -> Program:
    """
    Convenience function to parse a token stream.

    Args:
        tokens: Tokens produced by the lexer

    Returns:
        The parsed Program
    """
    return Parser(tokens).parse()
