"""
tfactor/variables/assignment.py

Assignments: functions from variables to values, an alternative lens
beside each variable's own current value.

What happens on lookup of a variable an assignment does not hold
depends on the kind of assignment, and the difference is deliberate:

  - GlobalAssignment: never misses; reads v.value()
  - TargetAssignment: reads v.target_value(); NoTargetError without one
  - FixedAssignment (Assignment1..4): falls back to v.value()
  - HashMapAssignment: raises VariableNotBoundError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tfactor.errors import VariableNotBoundError
from tfactor.variables.diff import DiffList

_MISSING = object()


class Assignment(ABC):
    """Function from Variable to value."""

    @abstractmethod
    def __call__(self, v: Any) -> Any:
        """Value of v under this assignment (miss behaviour per subclass)."""

    @abstractmethod
    def contains(self, v: Any) -> bool:
        """True if v is explicitly held by this assignment."""

    def variables(self) -> Optional[Iterable[Any]]:
        """Variables held explicitly; None for assignments covering every variable."""
        return None

    def get(self, v: Any, default: Any = None) -> Any:
        if self.contains(v):
            return self(v)
        return default

    def __contains__(self, v: Any) -> bool:
        return self.contains(v)


class GlobalAssignment(Assignment):
    """
    The global assignment: the variables' own current values.

    Holds no state; every instance behaves identically.
    """

    def __call__(self, v: Any) -> Any:
        return v.value()

    def contains(self, v: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "GlobalAssignment()"


class TargetAssignment(Assignment):
    """Gold-standard values; variables without a target raise NoTargetError."""

    def __call__(self, v: Any) -> Any:
        return v.target_value()

    def contains(self, v: Any) -> bool:
        return getattr(v, "has_target", False)

    def __repr__(self) -> str:
        return "TargetAssignment()"


global_assignment = GlobalAssignment()
target_assignment = TargetAssignment()


class FixedAssignment(Assignment):
    """
    Immutable assignment of 1 to 4 variables.

    Lookup of any other variable returns that variable's current global
    value.
    """

    arity: Optional[int] = None

    def __init__(self, *pairs: Tuple[Any, Any]):
        if not 1 <= len(pairs) <= 4:
            raise ValueError(f"FixedAssignment holds 1 to 4 variables, got {len(pairs)}")
        if self.arity is not None and len(pairs) != self.arity:
            raise ValueError(f"{type(self).__name__} needs {self.arity} pairs, got {len(pairs)}")
        self._vars: Tuple[Any, ...] = tuple(v for v, _ in pairs)
        self._vals: Tuple[Any, ...] = tuple(v.coerce(x) for v, x in pairs)

    def __call__(self, v: Any) -> Any:
        for var, val in zip(self._vars, self._vals):
            if var is v:
                return val
        return v.value()

    def contains(self, v: Any) -> bool:
        return any(var is v for var in self._vars)

    def variables(self) -> Tuple[Any, ...]:
        return self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        body = ", ".join(f"{v!r}={x!r}" for v, x in zip(self._vars, self._vals))
        return f"{type(self).__name__}({body})"


class Assignment1(FixedAssignment):
    arity = 1

    def __init__(self, v1: Any, x1: Any):
        super().__init__((v1, x1))


class Assignment2(FixedAssignment):
    arity = 2

    def __init__(self, v1: Any, x1: Any, v2: Any, x2: Any):
        super().__init__((v1, x1), (v2, x2))


class Assignment3(FixedAssignment):
    arity = 3

    def __init__(self, v1: Any, x1: Any, v2: Any, x2: Any, v3: Any, x3: Any):
        super().__init__((v1, x1), (v2, x2), (v3, x3))


class Assignment4(FixedAssignment):
    arity = 4

    def __init__(self, v1: Any, x1: Any, v2: Any, x2: Any, v3: Any, x3: Any, v4: Any, x4: Any):
        super().__init__((v1, x1), (v2, x2), (v3, x3), (v4, x4))


class HashMapAssignment(Assignment):
    """
    Open, mutable assignment of any number of variables.

    Lookup of an unbound variable raises VariableNotBoundError.
    """

    def __init__(self, pairs: Iterable[Tuple[Any, Any]] = ()):
        self._map: Dict[int, Tuple[Any, Any]] = {}
        for v, x in pairs:
            self.update(v, x)

    @classmethod
    def snapshot(cls, variables: Iterable[Any]) -> "HashMapAssignment":
        """Capture the current global values of variables."""
        return cls((v, v.value()) for v in variables)

    def __call__(self, v: Any) -> Any:
        entry = self._map.get(id(v), _MISSING)
        if entry is _MISSING:
            raise VariableNotBoundError(v)
        return entry[1]

    def contains(self, v: Any) -> bool:
        return id(v) in self._map

    def update(self, v: Any, value: Any) -> None:
        self._map[id(v)] = (v, v.coerce(value))

    def __setitem__(self, v: Any, value: Any) -> None:
        self.update(v, value)

    def __getitem__(self, v: Any) -> Any:
        return self(v)

    def remove(self, v: Any) -> None:
        if self._map.pop(id(v), _MISSING) is _MISSING:
            raise VariableNotBoundError(v)

    def variables(self) -> List[Any]:
        return [v for v, _ in self._map.values()]

    def set_variables(self, diff_list: Optional[DiffList] = None) -> None:
        """Write the held values into the variables, optionally recorded."""
        for v, x in self._map.values():
            v.set_value(x, diff_list)

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"HashMapAssignment({len(self._map)} variables)"
