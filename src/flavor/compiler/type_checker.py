"""
Type Checking Module for the Flavor Compiler.

The checker walks the AST once, computing for every node a pair
``(type, guaranteed_return)``. The second element drives the return-path
analysis: a body is guaranteed once any of its statements is, an ``if`` is
guaranteed only when both branches are, and a ``while`` never is. Any
function whose return type is not ``nothing`` must have a guaranteed body.

Types flow top-down through an "expected type" context. It is set only for
the node being checked directly (array literal elements, ``let``
initializers with a declared type, assignment right-hand sides, call
arguments, and ``return`` expressions) and restored afterwards.

Scopes are pushed only at function boundaries: names declared inside an
``if`` or ``while`` body remain visible for the rest of the function.

The checker fails fast, raising ``FlavorTypeError`` on the first problem.
"""

import logging
from typing import Optional

from flavor.compiler.ast_nodes import (
    ArrayAccess,
    ArrayLiteral,
    ASTNode,
    ASTVisitor,
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
from flavor.compiler.types import (
    BOOL_TYPE,
    INT_TYPE,
    STRING_TYPE,
    UNIT_TYPE,
    ArrayType,
    FunctionType,
    Type,
)
from flavor.utils.diagnostics import suggest_similar
from flavor.utils.errors import FlavorTypeError, Span

logger = logging.getLogger(__name__)

# (type, guaranteed_return)
CheckResult = tuple[Type, bool]


class TypeChecker(ASTVisitor):
    """
    Static type checker for Flavor programs.

    Usage:
        TypeChecker().check(program)
    """

    def __init__(self) -> None:
        self.scopes: list[dict[str, Type]] = [{}]
        self.current_expected_return: Optional[Type] = None
        self.current_expected_type: Optional[Type] = None

    def check(self, program: Program) -> None:
        """
        Type check a whole program.

        Raises:
            FlavorTypeError: On the first type error found.
        """
        logger.debug("Type checking %d top-level statements", len(program.statements))
        for stmt in program.statements:
            self._check(stmt)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check(self, node: ASTNode, expected: Optional[Type] = None) -> CheckResult:
        """Check ``node`` with ``expected`` as its type context."""
        previous = self.current_expected_type
        self.current_expected_type = expected
        try:
            return self.visit(node)
        finally:
            self.current_expected_type = previous

    def _type_of(self, node: ASTNode, expected: Optional[Type] = None) -> Type:
        return self._check(node, expected)[0]

    def _lookup(self, name: str) -> Optional[Type]:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def _define(self, name: str, type_: Type) -> None:
        self.scopes[-1][name] = type_

    def _visible_names(self) -> set[str]:
        names: set[str] = set()
        for scope in self.scopes:
            names.update(scope)
        return names

    def _error(self, message: str, span: Span, notes: Optional[list[str]] = None) -> FlavorTypeError:
        return FlavorTypeError(message, span, notes=notes)

    def _check_function_body(
        self,
        params: tuple[Parameter, ...],
        return_type: Type,
        body: Body,
        missing_return_message: str,
    ) -> None:
        """Check a function body in a fresh scope holding its parameters."""
        previous_return = self.current_expected_return
        self.current_expected_return = return_type
        self.scopes.append({})
        try:
            for param in params:
                self._define(param.name, param.type)
            _, guaranteed = self._check(body)
        finally:
            self.scopes.pop()
            self.current_expected_return = previous_return

        if return_type != UNIT_TYPE and not guaranteed:
            raise self._error(missing_return_message, body.span)

    @staticmethod
    def _signature(params: tuple[Parameter, ...], return_type: Type) -> FunctionType:
        return FunctionType(tuple(p.type for p in params), return_type)

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def visit_print(self, node: Print) -> CheckResult:
        for expr in node.exprs:
            self._check(expr)
        return UNIT_TYPE, False

    def visit_body(self, node: Body) -> CheckResult:
        last_type: Type = UNIT_TYPE
        for stmt in node.statements:
            last_type, returns = self._check(stmt)
            if returns:
                # Statements after a guaranteed return are dead and unchecked.
                return last_type, True
        return last_type, False

    def visit_if(self, node: If) -> CheckResult:
        guard_type = self._type_of(node.guard)
        if guard_type != BOOL_TYPE:
            raise self._error(
                f"Guard in if statement should be of type {BOOL_TYPE}, but was {guard_type}",
                node.guard.span,
            )

        then_type, then_returns = self._check(node.then_body)
        if node.else_body is None:
            return then_type, False

        _, else_returns = self._check(node.else_body)
        if then_returns and else_returns:
            return self.current_expected_return or UNIT_TYPE, True
        return then_type, False

    def visit_while(self, node: While) -> CheckResult:
        guard_type = self._type_of(node.guard)
        if guard_type != BOOL_TYPE:
            raise self._error(
                f"Guard in while statement should be of type {BOOL_TYPE}, but was {guard_type}",
                node.guard.span,
            )
        self._check(node.body)
        return UNIT_TYPE, False

    def visit_let_declaration(self, node: LetDeclaration) -> CheckResult:
        declared = node.declared_type

        if isinstance(node.expr, FunctionExpression):
            closure = node.expr
            inferred = self._signature(closure.params, closure.return_type)
            if declared is not None and declared != inferred:
                raise self._let_mismatch(node, declared, inferred)
            stored = declared or inferred

            # Visible inside its own body so the closure can recurse.
            self._define(node.name, stored)
            self._check_function_body(
                closure.params,
                closure.return_type,
                closure.body,
                f"Function assigned to '{node.name}' does not guarantee a return on all paths",
            )
            return stored, False

        expr_type = self._type_of(node.expr, declared)
        if declared is not None and expr_type != declared:
            raise self._let_mismatch(node, declared, expr_type)

        stored = declared or expr_type
        self._define(node.name, stored)
        return stored, False

    def _let_mismatch(self, node: LetDeclaration, declared: Type, actual: Type) -> FlavorTypeError:
        return self._error(
            f"Type mismatch in let declaration: variable '{node.name}' declared as "
            f"{declared} but expression has type {actual}",
            node.span,
        )

    def visit_function_declaration(self, node: FunctionDeclaration) -> CheckResult:
        signature = self._signature(node.params, node.return_type)
        self._define(node.name, signature)
        self._check_function_body(
            node.params,
            node.return_type,
            node.body,
            f"Function '{node.name}' does not guarantee a return on all paths",
        )
        return signature, False

    def visit_return(self, node: Return) -> CheckResult:
        expected = self.current_expected_return
        expr_type = self._type_of(node.expr, expected)
        if expected is not None and expr_type != expected:
            raise self._error(
                f"Return type does not match expected type: expected {expected}, found {expr_type}",
                node.span,
            )
        return expr_type, True

    def visit_break(self, node: Break) -> CheckResult:
        return UNIT_TYPE, False

    def visit_expression_statement(self, node: ExpressionStatement) -> CheckResult:
        self._check(node.expr)
        return UNIT_TYPE, False

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def visit_function_expression(self, node: FunctionExpression) -> CheckResult:
        signature = self._signature(node.params, node.return_type)
        expected = self.current_expected_type

        if isinstance(expected, FunctionType):
            if len(expected.param_types) != len(node.params):
                raise self._error(
                    "Function expression parameter count mismatch: expected "
                    f"{len(expected.param_types)}, found {len(node.params)}",
                    node.span,
                )
            for expected_param, param in zip(expected.param_types, node.params):
                if expected_param != param.type:
                    raise self._error(
                        "Function expression parameter type mismatch: expected "
                        f"{expected_param}, found {param.type}",
                        param.span,
                    )
            if expected.return_type != node.return_type:
                raise self._error(
                    "Function expression return type mismatch: expected "
                    f"{expected.return_type}, found {node.return_type}",
                    node.span,
                )

        self._check_function_body(
            node.params,
            node.return_type,
            node.body,
            "Function expression does not guarantee a return on all paths",
        )
        return signature, False

    def visit_function_call(self, node: FunctionCall) -> CheckResult:
        callee_type = self._type_of(node.callee)
        if not isinstance(callee_type, FunctionType):
            raise self._error(
                f"Attempted to call non-function type {callee_type}", node.callee.span
            )

        if len(node.args) != len(callee_type.param_types):
            raise self._error(
                "Function called with wrong number of arguments: expected "
                f"{len(callee_type.param_types)}, found {len(node.args)}",
                node.span,
            )

        for arg, param_type in zip(node.args, callee_type.param_types):
            arg_type = self._type_of(arg, param_type)
            if arg_type != param_type:
                raise self._error(
                    f"Function argument type mismatch: expected {param_type}, found {arg_type}",
                    arg.span,
                )

        return callee_type.return_type, False

    def visit_unit_literal(self, node: UnitLiteral) -> CheckResult:
        return UNIT_TYPE, False

    def visit_number_literal(self, node: NumberLiteral) -> CheckResult:
        return INT_TYPE, False

    def visit_string_literal(self, node: StringLiteral) -> CheckResult:
        return STRING_TYPE, False

    def visit_bool_literal(self, node: BoolLiteral) -> CheckResult:
        return BOOL_TYPE, False

    def visit_identifier(self, node: Identifier) -> CheckResult:
        type_ = self._lookup(node.name)
        if type_ is None:
            notes = []
            similar = suggest_similar(node.name, self._visible_names())
            if similar:
                notes.append(f"did you mean '{similar}'?")
            raise self._error(f"Undefined variable '{node.name}'", node.span, notes)
        return type_, False

    def visit_array_literal(self, node: ArrayLiteral) -> CheckResult:
        expected = self.current_expected_type
        element_expected = expected.element_type if isinstance(expected, ArrayType) else None

        if not node.elements:
            return ArrayType(element_expected or UNIT_TYPE), False

        first_type: Optional[Type] = None
        for element in node.elements:
            element_type = self._type_of(element, element_expected)
            if element_expected is not None and element_type != element_expected:
                raise self._error(
                    "Array literal element type mismatch: expected "
                    f"{element_expected}, found {element_type}",
                    element.span,
                )
            if first_type is None:
                first_type = element_type
            elif element_type != first_type:
                raise self._error(
                    "Array elements must be of the same type, found "
                    f"{first_type} and {element_type}",
                    element.span,
                )

        return ArrayType(first_type), False

    def visit_array_access(self, node: ArrayAccess) -> CheckResult:
        array_type = self._type_of(node.array)
        index_type = self._type_of(node.index)

        if index_type != INT_TYPE:
            raise self._error(
                f"Array index must be of type {INT_TYPE}, found {index_type}", node.index.span
            )
        if not isinstance(array_type, ArrayType):
            raise self._error(
                f"Cannot access elements of non-array type {array_type}", node.array.span
            )
        return array_type.element_type, False

    def visit_binary_expression(self, node: BinaryExpression) -> CheckResult:
        op = node.operator

        if op == BinaryOperator.ASSIGN:
            left_type = self._type_of(node.left)
            right_type = self._type_of(node.right, left_type)
            if left_type != right_type:
                raise self._error(
                    f"Type mismatch in assignment: left is {left_type}, right is {right_type}",
                    node.span,
                )
            return left_type, False

        left_type = self._type_of(node.left)
        right_type = self._type_of(node.right)

        if op.is_arithmetic or op.is_relational:
            if left_type != INT_TYPE or right_type != INT_TYPE:
                raise self._error(
                    f"Operator '{op.value}' requires {INT_TYPE} operands, "
                    f"found {left_type} and {right_type}",
                    node.span,
                )
            return (INT_TYPE if op.is_arithmetic else BOOL_TYPE), False

        if op.is_logical:
            if left_type != BOOL_TYPE or right_type != BOOL_TYPE:
                raise self._error(
                    f"Operator '{op.value}' requires {BOOL_TYPE} operands, "
                    f"found {left_type} and {right_type}",
                    node.span,
                )
            return BOOL_TYPE, False

        # == and !=
        if left_type != right_type:
            raise self._error(
                f"Cannot compare different types: {left_type} and {right_type}", node.span
            )
        return BOOL_TYPE, False

    def visit_unary_expression(self, node: UnaryExpression) -> CheckResult:
        operand_type = self._type_of(node.operand)

        if node.operator == UnaryOperator.NOT:
            if operand_type != BOOL_TYPE:
                raise self._error(
                    f"Operator '!' requires a {BOOL_TYPE} operand, found {operand_type}",
                    node.span,
                )
            return BOOL_TYPE, False

        if operand_type != INT_TYPE:
            raise self._error(
                f"Operator '{node.operator.value}' requires an {INT_TYPE} operand, "
                f"found {operand_type}",
                node.span,
            )
        return INT_TYPE, False


def check(program: Program) -> None:
    """
    Convenience function to type check a program.

    Raises:
        FlavorTypeError: On the first type error found.
    """
    TypeChecker().check(program)
