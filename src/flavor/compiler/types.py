"""
The Flavor type system.

Types are immutable and compare structurally. ``CustomType`` is the one
nominal escape hatch: it names a type the language cannot resolve and is
compared by name during checking, while the interpreter lets any value
satisfy it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class Type(ABC):
    """Base class for all types in the Flavor type system."""

    @abstractmethod
    def __str__(self) -> str:
        """Return the type as it is written in source code."""
        pass

    @abstractmethod
    def __eq__(self, other: object) -> bool:
        pass

    @abstractmethod
    def __hash__(self) -> int:
        pass


@dataclass(frozen=True, eq=False)
class PrimitiveType(Type):
    """
    A built-in scalar type.

    Supported primitives: int, bool, float, string, nothing
    """

    name: str

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrimitiveType):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(("primitive", self.name))


INT_TYPE = PrimitiveType("int")
BOOL_TYPE = PrimitiveType("bool")
FLOAT_TYPE = PrimitiveType("float")
STRING_TYPE = PrimitiveType("string")
UNIT_TYPE = PrimitiveType("nothing")


@dataclass(frozen=True, eq=False)
class CustomType(Type):
    """A user-named type, matched by name only."""

    name: str

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CustomType):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(("custom", self.name))


@dataclass(frozen=True, eq=False)
class ArrayType(Type):
    """
    A homogeneous array type.

    Example: [int], array(bool)
    """

    element_type: Type

    def __str__(self) -> str:
        return f"[{self.element_type}]"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayType):
            return False
        return self.element_type == other.element_type

    def __hash__(self) -> int:
        return hash(("array", self.element_type))


@dataclass(frozen=True, eq=False)
class FunctionType(Type):
    """
    A function type representing callable signatures.

    Example: (int, int) -> int
    """

    param_types: tuple[Type, ...]
    return_type: Type

    def __str__(self) -> str:
        params_str = ", ".join(str(t) for t in self.param_types)
        return f"({params_str}) -> {self.return_type}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FunctionType):
            return False
        return (
            self.param_types == other.param_types
            and self.return_type == other.return_type
        )

    def __hash__(self) -> int:
        return hash(("function", self.param_types, self.return_type))
