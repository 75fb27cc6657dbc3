"""
Call frames for the Flavor interpreter.

A frame has two layers: its own locals (parameters and ``let`` bindings)
and the captured mapping of the function being executed. Lookups try the
locals first. Assignments update whichever layer already holds the name,
so a closure writing to a captured variable mutates the mapping shared by
every alias of that closure.
"""

from typing import Optional

from flavor.runtime.values import Value, copy_value


class Environment:
    """A single call frame."""

    def __init__(self, captured: Optional[dict[str, Value]] = None) -> None:
        self.locals: dict[str, Value] = {}
        self.captured: dict[str, Value] = captured if captured is not None else {}

    def get(self, name: str) -> Optional[Value]:
        """Look up a name, locals first."""
        if name in self.locals:
            return self.locals[name]
        return self.captured.get(name)

    def define(self, name: str, value: Value) -> None:
        """Bind a name in this frame, shadowing any earlier binding."""
        self.locals[name] = value

    def update(self, name: str, value: Value) -> bool:
        """
        Rebind an existing name in the layer that holds it.

        Returns:
            False if the name is not bound in either layer
        """
        if name in self.locals:
            self.locals[name] = value
            return True
        if name in self.captured:
            self.captured[name] = value
            return True
        return False

    def contains(self, name: str) -> bool:
        return name in self.locals or name in self.captured

    def snapshot(self) -> dict[str, Value]:
        """Flatten both layers into a fresh mapping for a new closure."""
        merged = {**self.captured, **self.locals}
        return {name: copy_value(value) for name, value in merged.items()}
