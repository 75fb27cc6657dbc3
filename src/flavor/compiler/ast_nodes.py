"""
Abstract Syntax Tree (AST) node definitions for Flavor.

This module defines all AST node types representing the structure of
a Flavor program after parsing. Each node is immutable and carries the
span of every token it was built from.

The variant set is closed: ``ASTVisitor`` declares one abstract method per
node type, so a visitor that forgets a case cannot be instantiated.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from flavor.compiler.types import Type
from flavor.utils.errors import Span


class ASTNode(ABC):
    """Base class for all AST nodes."""

    span: Span

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


# -----------------------------------------------------------------------------
# Operators
# -----------------------------------------------------------------------------


class BinaryOperator(Enum):
    """Binary operators, valued by their source spelling."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    EQ = "=="
    NE = "!="
    AND = "&&"
    OR = "||"
    ASSIGN = "="

    @property
    def is_arithmetic(self) -> bool:
        return self in ARITHMETIC_OPERATORS

    @property
    def is_relational(self) -> bool:
        return self in RELATIONAL_OPERATORS

    @property
    def is_logical(self) -> bool:
        return self in (BinaryOperator.AND, BinaryOperator.OR)

    @property
    def is_equality(self) -> bool:
        return self in (BinaryOperator.EQ, BinaryOperator.NE)


ARITHMETIC_OPERATORS = frozenset(
    {
        BinaryOperator.ADD,
        BinaryOperator.SUB,
        BinaryOperator.MUL,
        BinaryOperator.DIV,
        BinaryOperator.MOD,
    }
)

RELATIONAL_OPERATORS = frozenset(
    {BinaryOperator.GT, BinaryOperator.LT, BinaryOperator.GE, BinaryOperator.LE}
)


class UnaryOperator(Enum):
    """Unary operators, valued by their source spelling."""

    NEG = "-"
    NOT = "!"
    INCREMENT = "++"
    DECREMENT = "--"


# -----------------------------------------------------------------------------
# Statements
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Parameter:
    """A named, typed function parameter."""

    name: str
    type: Type
    span: Span


@dataclass(frozen=True, slots=True)
class Print(ASTNode):
    """
    A print statement.

    Example:
        print "total: ", total;
    """

    exprs: tuple[ASTNode, ...]
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_print(self)


@dataclass(frozen=True, slots=True)
class Body(ASTNode):
    """A braced sequence of statements."""

    statements: tuple[ASTNode, ...]
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_body(self)


@dataclass(frozen=True, slots=True)
class If(ASTNode):
    """
    A conditional statement.

    Example:
        if n > 0 { ... } else { ... }
    """

    guard: ASTNode
    then_body: Body
    else_body: Optional[Body]
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_if(self)


@dataclass(frozen=True, slots=True)
class While(ASTNode):
    guard: ASTNode
    body: Body
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_while(self)


@dataclass(frozen=True, slots=True)
class LetDeclaration(ASTNode):
    """
    A variable binding with an optional declared type.

    Example:
        let total: int = 0;
    """

    name: str
    declared_type: Optional[Type]
    expr: ASTNode
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_let_declaration(self)


@dataclass(frozen=True, slots=True)
class FunctionDeclaration(ASTNode):
    """
    A named function definition.

    Example:
        fn add(a: int, b: int) -> int { return a + b; }
    """

    name: str
    params: tuple[Parameter, ...]
    return_type: Type
    body: Body
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_function_declaration(self)


@dataclass(frozen=True, slots=True)
class Return(ASTNode):
    expr: ASTNode
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_return(self)


@dataclass(frozen=True, slots=True)
class Break(ASTNode):
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_break(self)


@dataclass(frozen=True, slots=True)
class ExpressionStatement(ASTNode):
    """An expression evaluated for its effect, terminated by ``;``."""

    expr: ASTNode
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_expression_statement(self)


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FunctionExpression(ASTNode):
    """
    An anonymous function (closure).

    Examples:
        <x: int> -> int { return x * 2; }
        fn(x: int) -> int { return x * 2; }
    """

    params: tuple[Parameter, ...]
    return_type: Type
    body: Body
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_function_expression(self)


@dataclass(frozen=True, slots=True)
class FunctionCall(ASTNode):
    callee: ASTNode
    args: tuple[ASTNode, ...]
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_function_call(self)


@dataclass(frozen=True, slots=True)
class UnitLiteral(ASTNode):
    """The ``nothing`` value."""

    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_unit_literal(self)


@dataclass(frozen=True, slots=True)
class NumberLiteral(ASTNode):
    """An integer literal, kept as its source digits."""

    digits: str
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_number_literal(self)


@dataclass(frozen=True, slots=True)
class StringLiteral(ASTNode):
    """A string literal; ``value`` excludes the surrounding quotes."""

    value: str
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_string_literal(self)


@dataclass(frozen=True, slots=True)
class BoolLiteral(ASTNode):
    value: bool
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_bool_literal(self)


@dataclass(frozen=True, slots=True)
class Identifier(ASTNode):
    name: str
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_identifier(self)


@dataclass(frozen=True, slots=True)
class ArrayLiteral(ASTNode):
    """
    An array literal.

    Example:
        [1, 2, 3]
    """

    elements: tuple[ASTNode, ...]
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_array_literal(self)


@dataclass(frozen=True, slots=True)
class ArrayAccess(ASTNode):
    """
    An indexing expression.

    Example:
        grid[i][j]
    """

    array: ASTNode
    index: ASTNode
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_array_access(self)


@dataclass(frozen=True, slots=True)
class BinaryExpression(ASTNode):
    """
    A binary operation expression.

    Example:
        a + b, total = total * 2
    """

    left: ASTNode
    operator: BinaryOperator
    right: ASTNode
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_binary_expression(self)


@dataclass(frozen=True, slots=True)
class UnaryExpression(ASTNode):
    """
    A unary operation expression.

    Example:
        -x, !done, ++count, items[0]--
    """

    operator: UnaryOperator
    operand: ASTNode
    is_postfix: bool
    span: Span

    def accept(self, visitor: "ASTVisitor") -> Any:
        return visitor.visit_unary_expression(self)


# -----------------------------------------------------------------------------
# Program
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Program:
    """The root of a parsed source file."""

    statements: tuple[ASTNode, ...]

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self):
        return iter(self.statements)

    def __getitem__(self, index: int) -> ASTNode:
        return self.statements[index]


# -----------------------------------------------------------------------------
# Visitor
# -----------------------------------------------------------------------------


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to create AST processors (type checkers, interpreters,
    printers). Every node type has an abstract ``visit_*`` method.
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)

    @abstractmethod
    def visit_print(self, node: Print) -> Any: ...

    @abstractmethod
    def visit_body(self, node: Body) -> Any: ...

    @abstractmethod
    def visit_if(self, node: If) -> Any: ...

    @abstractmethod
    def visit_while(self, node: While) -> Any: ...

    @abstractmethod
    def visit_let_declaration(self, node: LetDeclaration) -> Any: ...

    @abstractmethod
    def visit_function_declaration(self, node: FunctionDeclaration) -> Any: ...

    @abstractmethod
    def visit_function_expression(self, node: FunctionExpression) -> Any: ...

    @abstractmethod
    def visit_return(self, node: Return) -> Any: ...

    @abstractmethod
    def visit_break(self, node: Break) -> Any: ...

    @abstractmethod
    def visit_function_call(self, node: FunctionCall) -> Any: ...

    @abstractmethod
    def visit_unit_literal(self, node: UnitLiteral) -> Any: ...

    @abstractmethod
    def visit_number_literal(self, node: NumberLiteral) -> Any: ...

    @abstractmethod
    def visit_string_literal(self, node: StringLiteral) -> Any: ...

    @abstractmethod
    def visit_bool_literal(self, node: BoolLiteral) -> Any: ...

    @abstractmethod
    def visit_identifier(self, node: Identifier) -> Any: ...

    @abstractmethod
    def visit_array_literal(self, node: ArrayLiteral) -> Any: ...

    @abstractmethod
    def visit_array_access(self, node: ArrayAccess) -> Any: ...

    @abstractmethod
    def visit_binary_expression(self, node: BinaryExpression) -> Any: ...

    @abstractmethod
    def visit_unary_expression(self, node: UnaryExpression) -> Any: ...

    @abstractmethod
    def visit_expression_statement(self, node: ExpressionStatement) -> Any: ...


# -----------------------------------------------------------------------------
# Debug printing
# -----------------------------------------------------------------------------


def format_ast(node: Any, indent: int = 0) -> list[str]:
    """Pretty print an AST node (or a Program) as indented lines."""
    prefix = "  " * indent
    node_name = type(node).__name__

    if isinstance(node, Program):
        lines = [f"{prefix}Program:"]
        for stmt in node.statements:
            lines.extend(format_ast(stmt, indent + 1))
        return lines

    fields = [name for name in node.__slots__ if name != "span"]
    if not fields:
        return [f"{prefix}{node_name}"]

    lines = [f"{prefix}{node_name}:"]
    for key in fields:
        value = getattr(node, key)
        if isinstance(value, (ASTNode, Parameter)):
            lines.append(f"{prefix}  {key}:")
            lines.extend(format_ast(value, indent + 2))
        elif isinstance(value, tuple) and value:
            lines.append(f"{prefix}  {key}: [")
            for item in value:
                lines.extend(format_ast(item, indent + 2))
            lines.append(f"{prefix}  ]")
        elif isinstance(value, Enum):
            lines.append(f"{prefix}  {key}: {value.value}")
        elif isinstance(value, Type):
            lines.append(f"{prefix}  {key}: {value}")
        else:
            lines.append(f"{prefix}  {key}: {value!r}")
    return lines
