"""
Tree-walking interpreter for Flavor.

Every ``visit_*`` method returns an ``Outcome``. A ``BreakOutcome`` or
``ReturnOutcome`` produced deep inside an expression is handed straight
back up by each enclosing step until a loop or a call consumes it, so
control flow unwinds without Python exceptions. Errors, on the other hand,
are raised as ``FlavorRuntimeError`` and abort evaluation.

The interpreter does not rely on the type checker having run; it validates
operand shapes itself.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO, Union

from flavor.compiler.ast_nodes import (
    ArrayAccess,
    ArrayLiteral,
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
    Print,
    Program,
    Return,
    StringLiteral,
    UnaryExpression,
    UnaryOperator,
    UnitLiteral,
    While,
)
from flavor.runtime.environment import Environment
from flavor.runtime.values import (
    I64_MAX,
    I64_MIN,
    UNIT,
    ArrayValue,
    BoolValue,
    BreakOutcome,
    FunctionValue,
    IntValue,
    Outcome,
    ReturnOutcome,
    StringValue,
    Value,
    ValueOutcome,
    copy_value,
    matches_type,
    type_name,
)
from flavor.utils.errors import FlavorRuntimeError, Span

logger = logging.getLogger(__name__)


@dataclass
class Slot:
    """A resolved array element: ``elements[index]`` of the array ``name``."""

    elements: list[Value]
    index: int
    name: str


class Interpreter(ASTVisitor):
    """
    Evaluates a parsed Flavor program.

    Usage:
        interpreter = Interpreter()
        outcome = interpreter.eval_program(program)

    Args:
        output: Stream ``print`` writes to (default: sys.stdout)
    """

    def __init__(self, output: Optional[TextIO] = None) -> None:
        self.output = output
        self.env = Environment()

    def eval_program(self, program: Program) -> Outcome:
        """
        Evaluate every top-level statement in order.

        Returns:
            The outcome of the last statement, or the first ``break`` or
            ``return`` outcome that reaches the top level

        Raises:
            FlavorRuntimeError: On the first runtime error
        """
        logger.debug("Evaluating %d top-level statements", len(program.statements))
        result: Outcome = ValueOutcome(UNIT)
        for stmt in program.statements:
            result = self.visit(stmt)
            if not isinstance(result, ValueOutcome):
                return result
        return result

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _error(self, message: str, span: Optional[Span]) -> FlavorRuntimeError:
        return FlavorRuntimeError(message, span)

    def _checked_int(self, value: int, span: Span) -> IntValue:
        if not I64_MIN <= value <= I64_MAX:
            raise self._error("Integer overflow", span)
        return IntValue(value)

    def _resolve_slot(self, target: ArrayAccess) -> Union[Slot, Outcome]:
        """
        Resolve an index chain such as ``m[i][j]`` to the slot it names.

        Index expressions are evaluated outermost array first. A non-value
        outcome from an index expression is returned unchanged.
        """
        base = target.array
        if isinstance(base, Identifier):
            container = self.env.get(base.name)
            if container is None:
                raise self._error(f"Undefined variable: {base.name}", base.span)
            name = base.name
        elif isinstance(base, ArrayAccess):
            outer = self._resolve_slot(base)
            if not isinstance(outer, Slot):
                return outer
            container = outer.elements[outer.index]
            name = outer.name
        else:
            raise self._error("Invalid assignment target", target.span)

        if not isinstance(container, ArrayValue):
            raise self._error(
                f"Cannot index into non-array value of type {type_name(container)}",
                base.span,
            )

        outcome = self.visit(target.index)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        index = outcome.value
        if not isinstance(index, IntValue):
            raise self._error("Array index must be an integer", target.index.span)
        if index.value < 0:
            raise self._error("Negative array index", target.index.span)
        if index.value >= len(container.elements):
            raise self._error(
                f"Index {index.value} out of bounds for array '{name}' "
                f"of length {len(container.elements)}",
                target.span,
            )
        return Slot(container.elements, index.value, name)

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def visit_print(self, node: Print) -> Outcome:
        parts: list[str] = []
        for expr in node.exprs:
            outcome = self.visit(expr)
            if not isinstance(outcome, ValueOutcome):
                return outcome
            parts.append(str(outcome.value))

        stream = self.output or sys.stdout
        stream.write("".join(parts) + "\n")
        return ValueOutcome(UNIT)

    def visit_body(self, node: Body) -> Outcome:
        result: Outcome = ValueOutcome(UNIT)
        for stmt in node.statements:
            result = self.visit(stmt)
            if not isinstance(result, ValueOutcome):
                return result
        return result

    def visit_if(self, node: If) -> Outcome:
        outcome = self.visit(node.guard)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        guard = outcome.value
        if not isinstance(guard, BoolValue):
            raise self._error("If guard must be evaluated to boolean", node.guard.span)

        if guard.value:
            return self.visit(node.then_body)
        if node.else_body is not None:
            return self.visit(node.else_body)
        return ValueOutcome(UNIT)

    def visit_while(self, node: While) -> Outcome:
        last: Value = UNIT
        while True:
            outcome = self.visit(node.guard)
            if not isinstance(outcome, ValueOutcome):
                return outcome
            guard = outcome.value
            if not isinstance(guard, BoolValue):
                raise self._error("While guard must be evaluated to boolean", node.guard.span)
            if not guard.value:
                break

            outcome = self.visit(node.body)
            if isinstance(outcome, BreakOutcome):
                break
            if isinstance(outcome, ReturnOutcome):
                return outcome
            last = outcome.value

        return ValueOutcome(last)

    def visit_let_declaration(self, node: LetDeclaration) -> Outcome:
        outcome = self.visit(node.expr)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        value = copy_value(outcome.value)

        if node.declared_type is not None and not matches_type(value, node.declared_type):
            raise self._error(
                f"Type mismatch: variable '{node.name}' declared as {node.declared_type} "
                f"but value has runtime type {type_name(value)}",
                node.span,
            )

        if isinstance(node.expr, FunctionExpression) and isinstance(value, FunctionValue):
            value.captured[node.name] = value

        self.env.define(node.name, value)
        return ValueOutcome(UNIT)

    def visit_function_declaration(self, node: FunctionDeclaration) -> Outcome:
        function = FunctionValue(node.params, node.return_type, node.body, self.env.snapshot())
        function.captured[node.name] = function
        self.env.define(node.name, function)
        return ValueOutcome(UNIT)

    def visit_return(self, node: Return) -> Outcome:
        outcome = self.visit(node.expr)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        return ReturnOutcome(outcome.value)

    def visit_break(self, node: Break) -> Outcome:
        return BreakOutcome()

    def visit_expression_statement(self, node: ExpressionStatement) -> Outcome:
        return self.visit(node.expr)

    # -------------------------------------------------------------------------
    # Functions
    # -------------------------------------------------------------------------

    def visit_function_expression(self, node: FunctionExpression) -> Outcome:
        return ValueOutcome(
            FunctionValue(node.params, node.return_type, node.body, self.env.snapshot())
        )

    def visit_function_call(self, node: FunctionCall) -> Outcome:
        outcome = self.visit(node.callee)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        function = outcome.value
        if not isinstance(function, FunctionValue):
            raise self._error("Callee is not a function", node.callee.span)

        if len(node.args) != len(function.params):
            raise self._error(
                f"Expected {len(function.params)} arguments but got {len(node.args)}",
                node.span,
            )

        args: list[Value] = []
        for arg in node.args:
            outcome = self.visit(arg)
            if not isinstance(outcome, ValueOutcome):
                return outcome
            args.append(copy_value(outcome.value))

        frame = Environment(function.captured)
        for param, value in zip(function.params, args):
            frame.define(param.name, value)

        caller = self.env
        self.env = frame
        try:
            outcome = self.visit(function.body)
        finally:
            self.env = caller

        if isinstance(outcome, ReturnOutcome):
            return ValueOutcome(outcome.value)
        if isinstance(outcome, BreakOutcome):
            raise self._error("break outside of a loop", node.span)
        # Falling off the end yields the value of the last statement.
        return outcome

    # -------------------------------------------------------------------------
    # Literals and names
    # -------------------------------------------------------------------------

    def visit_unit_literal(self, node: UnitLiteral) -> Outcome:
        return ValueOutcome(UNIT)

    def visit_number_literal(self, node: NumberLiteral) -> Outcome:
        value = int(node.digits)
        if value > I64_MAX:
            raise self._error(f"Invalid integer literal: {node.digits}", node.span)
        return ValueOutcome(IntValue(value))

    def visit_string_literal(self, node: StringLiteral) -> Outcome:
        return ValueOutcome(StringValue(node.value))

    def visit_bool_literal(self, node: BoolLiteral) -> Outcome:
        return ValueOutcome(BoolValue(node.value))

    def visit_identifier(self, node: Identifier) -> Outcome:
        value = self.env.get(node.name)
        if value is None:
            raise self._error(f"Undefined variable: {node.name}", node.span)
        return ValueOutcome(value)

    # -------------------------------------------------------------------------
    # Arrays
    # -------------------------------------------------------------------------

    def visit_array_literal(self, node: ArrayLiteral) -> Outcome:
        elements: list[Value] = []
        for element in node.elements:
            outcome = self.visit(element)
            if not isinstance(outcome, ValueOutcome):
                return outcome
            elements.append(copy_value(outcome.value))
        return ValueOutcome(ArrayValue(elements))

    def visit_array_access(self, node: ArrayAccess) -> Outcome:
        outcome = self.visit(node.array)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        array = outcome.value

        outcome = self.visit(node.index)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        index = outcome.value

        if not isinstance(array, ArrayValue) or not isinstance(index, IntValue):
            raise self._error("Invalid array access", node.span)
        if index.value < 0:
            raise self._error("Negative array index", node.index.span)
        if index.value >= len(array.elements):
            raise self._error("Array index out of bounds", node.span)
        return ValueOutcome(array.elements[index.value])

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def visit_binary_expression(self, node: BinaryExpression) -> Outcome:
        op = node.operator

        if op == BinaryOperator.ASSIGN:
            return self._assign(node)

        outcome = self.visit(node.left)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        left = outcome.value

        # && and || short-circuit.
        if op.is_logical and isinstance(left, BoolValue):
            if (op == BinaryOperator.AND) != left.value:
                return ValueOutcome(left)

        outcome = self.visit(node.right)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        right = outcome.value

        return ValueOutcome(self._apply_binary(op, left, right, node.span))

    def _apply_binary(self, op: BinaryOperator, left: Value, right: Value, span: Span) -> Value:
        if isinstance(left, IntValue) and isinstance(right, IntValue):
            a, b = left.value, right.value
            if op == BinaryOperator.ADD:
                return self._checked_int(a + b, span)
            if op == BinaryOperator.SUB:
                return self._checked_int(a - b, span)
            if op == BinaryOperator.MUL:
                return self._checked_int(a * b, span)
            if op == BinaryOperator.DIV:
                if b == 0:
                    raise self._error("Division by zero", span)
                return self._checked_int(_truncated_div(a, b), span)
            if op == BinaryOperator.MOD:
                if b == 0:
                    raise self._error("Modulo by zero", span)
                return IntValue(a - b * _truncated_div(a, b))
            if op == BinaryOperator.GT:
                return BoolValue(a > b)
            if op == BinaryOperator.LT:
                return BoolValue(a < b)
            if op == BinaryOperator.GE:
                return BoolValue(a >= b)
            if op == BinaryOperator.LE:
                return BoolValue(a <= b)

        if isinstance(left, BoolValue) and isinstance(right, BoolValue):
            if op == BinaryOperator.AND:
                return BoolValue(left.value and right.value)
            if op == BinaryOperator.OR:
                return BoolValue(left.value or right.value)

        if op.is_equality and type(left) is type(right):
            equal = left is right if isinstance(left, FunctionValue) else left == right
            return BoolValue(equal if op == BinaryOperator.EQ else not equal)

        raise self._error(
            f"Unsupported binary operation: {type_name(left)} {op.value} {type_name(right)}",
            span,
        )

    def _assign(self, node: BinaryExpression) -> Outcome:
        target = node.left

        if isinstance(target, Identifier):
            if not self.env.contains(target.name):
                raise self._error(f"Undefined variable: {target.name}", target.span)
            outcome = self.visit(node.right)
            if not isinstance(outcome, ValueOutcome):
                return outcome
            value = copy_value(outcome.value)
            self.env.update(target.name, value)
            return ValueOutcome(value)

        if isinstance(target, ArrayAccess):
            slot = self._resolve_slot(target)
            if not isinstance(slot, Slot):
                return slot
            outcome = self.visit(node.right)
            if not isinstance(outcome, ValueOutcome):
                return outcome
            value = copy_value(outcome.value)
            slot.elements[slot.index] = value
            return ValueOutcome(value)

        raise self._error("Invalid assignment target", target.span)

    def visit_unary_expression(self, node: UnaryExpression) -> Outcome:
        if node.operator in (UnaryOperator.INCREMENT, UnaryOperator.DECREMENT):
            return self._step(node)

        outcome = self.visit(node.operand)
        if not isinstance(outcome, ValueOutcome):
            return outcome
        operand = outcome.value

        if node.operator == UnaryOperator.NOT:
            if not isinstance(operand, BoolValue):
                raise self._error("Operator '!' expects a boolean operand", node.span)
            return ValueOutcome(BoolValue(not operand.value))

        if not isinstance(operand, IntValue):
            raise self._error("Operator '-' expects an integer operand", node.span)
        return ValueOutcome(self._checked_int(-operand.value, node.span))

    def _step(self, node: UnaryExpression) -> Outcome:
        """Apply ``++`` or ``--`` to a name or array element."""
        delta = 1 if node.operator == UnaryOperator.INCREMENT else -1
        target = node.operand

        if isinstance(target, Identifier):
            current = self.env.get(target.name)
            if current is None:
                raise self._error(f"Undefined variable: {target.name}", target.span)
        elif isinstance(target, ArrayAccess):
            slot = self._resolve_slot(target)
            if not isinstance(slot, Slot):
                return slot
            current = slot.elements[slot.index]
        else:
            raise self._error(
                f"Operator '{node.operator.value}' can only be applied to a variable "
                "or an array element",
                node.span,
            )

        if not isinstance(current, IntValue):
            raise self._error(
                f"Operator '{node.operator.value}' expects an integer, found {type_name(current)}",
                node.span,
            )

        updated = self._checked_int(current.value + delta, node.span)
        if isinstance(target, Identifier):
            self.env.update(target.name, updated)
        else:
            slot.elements[slot.index] = updated

        return ValueOutcome(current if node.is_postfix else updated)


def _truncated_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def evaluate(program: Program, output: Optional[TextIO] = None) -> Outcome:
    """Convenience function to evaluate a program with a fresh interpreter."""
    return Interpreter(output).eval_program(program)
