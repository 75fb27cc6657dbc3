"""
Runtime values and evaluation outcomes for the Flavor interpreter.

Each value kind is its own small dataclass; ``str()`` gives the text
``print`` writes. Arrays behave as values: ``copy_value`` is applied
wherever a value is bound to a name, so two bindings never share one list.
Function values are the exception: every alias refers to the same
``FunctionValue`` and therefore to the same captured mapping.
"""

from dataclasses import dataclass, field
from typing import Union

from flavor.compiler.ast_nodes import Body, Parameter
from flavor.compiler.types import (
    BOOL_TYPE,
    INT_TYPE,
    STRING_TYPE,
    UNIT_TYPE,
    ArrayType,
    CustomType,
    FunctionType,
    Type,
)

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


@dataclass(frozen=True)
class IntValue:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class StringValue:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnitValue:
    def __str__(self) -> str:
        return "<unit>"


UNIT = UnitValue()


@dataclass
class ArrayValue:
    """A fixed-length, mutable sequence of values."""

    elements: list["Value"] = field(default_factory=list)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(eq=False)
class FunctionValue:
    """
    A callable closure.

    Attributes:
        params: Declared parameters
        return_type: Declared return type
        body: The function body
        captured: Snapshot of the defining environment, shared by every
            alias of this value; calls read and write through it
    """

    params: tuple[Parameter, ...]
    return_type: Type
    body: Body
    captured: dict[str, "Value"]

    @property
    def signature(self) -> FunctionType:
        return FunctionType(tuple(p.type for p in self.params), self.return_type)

    def __str__(self) -> str:
        return "<function>"

    def __repr__(self) -> str:
        return f"FunctionValue{self.signature}"


Value = Union[IntValue, BoolValue, StringValue, UnitValue, ArrayValue, FunctionValue]


def copy_value(value: Value) -> Value:
    """Copy a value for binding; arrays are copied deeply, functions shared."""
    if isinstance(value, ArrayValue):
        return ArrayValue([copy_value(e) for e in value.elements])
    return value


def type_name(value: Value) -> str:
    """Human-readable name of a value's runtime kind."""
    if isinstance(value, IntValue):
        return str(INT_TYPE)
    if isinstance(value, BoolValue):
        return str(BOOL_TYPE)
    if isinstance(value, StringValue):
        return str(STRING_TYPE)
    if isinstance(value, UnitValue):
        return str(UNIT_TYPE)
    if isinstance(value, ArrayValue):
        return "array"
    return str(value.signature)


def matches_type(value: Value, type_: Type) -> bool:
    """
    Check a runtime value against a declared type.

    ``CustomType`` accepts any value. An array matches ``[T]`` when every
    element matches ``T``, so an empty array matches any array type.
    """
    if isinstance(type_, CustomType):
        return True
    if isinstance(type_, ArrayType):
        return isinstance(value, ArrayValue) and all(
            matches_type(e, type_.element_type) for e in value.elements
        )
    if isinstance(type_, FunctionType):
        return isinstance(value, FunctionValue) and value.signature == type_
    if type_ == INT_TYPE:
        return isinstance(value, IntValue)
    if type_ == BOOL_TYPE:
        return isinstance(value, BoolValue)
    if type_ == STRING_TYPE:
        return isinstance(value, StringValue)
    if type_ == UNIT_TYPE:
        return isinstance(value, UnitValue)
    return False


# -----------------------------------------------------------------------------
# Outcomes
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ValueOutcome:
    """Normal completion with a value."""

    value: Value


@dataclass(frozen=True)
class BreakOutcome:
    """A ``break`` unwinding to the nearest loop."""


@dataclass(frozen=True)
class ReturnOutcome:
    """A ``return`` unwinding to the nearest call."""

    value: Value


Outcome = Union[ValueOutcome, BreakOutcome, ReturnOutcome]
