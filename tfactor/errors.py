"""
tfactor/errors.py

Error taxonomy.

Every error is a caller-side contract violation. Each one also derives from
the closest builtin exception so generic handlers keep working.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple


class FactorGraphError(Exception):
    """Base class for all tfactor errors."""


class DomainFrozenError(FactorGraphError, LookupError):
    """Unknown category looked up or interned in a frozen domain."""

    def __init__(self, category: Any, domain: Any = None):
        self.category = category
        self.domain = domain
        super().__init__(f"Domain is frozen; cannot add unknown category {category!r}")


class VariableNotBoundError(FactorGraphError, KeyError):
    """Lookup of a variable that an open assignment does not contain."""

    def __init__(self, variable: Any):
        self.variable = variable
        super().__init__(f"Variable {variable!r} is not bound in this assignment")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class NoTargetError(FactorGraphError, AttributeError):
    """Target value requested from a variable that has none."""

    def __init__(self, variable: Any):
        self.variable = variable
        super().__init__(f"Variable {variable!r} has no target value")


class ShapeMismatchError(FactorGraphError, ValueError):
    """Aggregate tensor operation between incompatibly shaped operands."""

    def __init__(self, key: Any, left: Tuple[int, ...], right: Tuple[int, ...], op: Optional[str] = None):
        self.key = key
        self.left = tuple(left)
        self.right = tuple(right)
        where = f" in {op}" if op else ""
        super().__init__(f"Shape mismatch{where} for {key!r}: {self.left} vs {self.right}")
