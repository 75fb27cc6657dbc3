"""
Flavor Runtime Package.

The tree-walking interpreter together with its value and frame model.
"""

from flavor.runtime.environment import Environment
from flavor.runtime.interpreter import Interpreter, evaluate
from flavor.runtime.values import (
    UNIT,
    ArrayValue,
    BoolValue,
    BreakOutcome,
    FunctionValue,
    IntValue,
    Outcome,
    ReturnOutcome,
    StringValue,
    UnitValue,
    Value,
    ValueOutcome,
)

__all__ = [
    "Interpreter",
    "evaluate",
    "Environment",
    "Value",
    "IntValue",
    "BoolValue",
    "StringValue",
    "UnitValue",
    "UNIT",
    "ArrayValue",
    "FunctionValue",
    "Outcome",
    "ValueOutcome",
    "BreakOutcome",
    "ReturnOutcome",
]
