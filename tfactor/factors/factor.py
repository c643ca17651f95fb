"""
tfactor/factors/factor.py

Factor: a Family bound to an ordered tuple of neighbouring variables.

Factors produced by unrolling are short-lived; two independently built
factors are equal when they share the family and the neighbour tuple
(compared by variable identity).
"""

from __future__ import annotations

from typing import Any, Iterable, Tuple

from tfactor.variables.assignment import Assignment, global_assignment


class Factor:
    """
    Scoring function over a fixed tuple of neighbours.

    Attributes:
        family: Family providing score/statistics
    """

    __slots__ = ("family", "_variables")

    def __init__(self, family: Any, variables: Iterable[Any]):
        variables = tuple(variables)
        if len(variables) != family.arity:
            raise ValueError(
                f"Family {family.name!r} has arity {family.arity}, got {len(variables)} variables"
            )
        self.family = family
        self._variables: Tuple[Any, ...] = variables

    def num_variables(self) -> int:
        return len(self._variables)

    def variables(self) -> Tuple[Any, ...]:
        return self._variables

    def variable(self, i: int) -> Any:
        return self._variables[i]

    def touches(self, v: Any) -> bool:
        return any(x is v for x in self._variables)

    def values(self, assignment: Assignment = global_assignment) -> Tuple[Any, ...]:
        """Neighbour values under assignment (miss rules of the assignment apply)."""
        return tuple(assignment(v) for v in self._variables)

    def score(self, *values: Any) -> float:
        return self.family.score(*values)

    def statistics(self, *values: Any) -> Any:
        return self.family.statistics(*values)

    def current_score(self) -> float:
        return self.family.score(*(v.value() for v in self._variables))

    def assignment_score(self, assignment: Assignment) -> float:
        return self.family.score(*self.values(assignment))

    def current_statistics(self) -> Any:
        return self.family.statistics(*(v.value() for v in self._variables))

    def assignment_statistics(self, assignment: Assignment) -> Any:
        return self.family.statistics(*self.values(assignment))

    @property
    def key(self) -> Tuple[int, Tuple[int, ...]]:
        """Identity-defining key: family identity and neighbour identities."""
        return (id(self.family), tuple(id(v) for v in self._variables))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Factor):
            return NotImplemented
        return self.family is other.family and len(self._variables) == len(other._variables) and all(
            a is b for a, b in zip(self._variables, other._variables)
        )

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        names = ", ".join(repr(v) for v in self._variables)
        return f"Factor[{self.family.name}]({names})"
