"""
tfactor/variables/variable.py

Variables: identity-distinct mutable cells holding a current ("global")
value and, optionally, a target (gold-standard) value.

Equality and hashing of variables are by identity. Comparing the values
two variables currently hold is a separate operation: same_value().
"""

from __future__ import annotations

from typing import Any, Hashable, Optional

import numpy as np

from tfactor.config import get_config
from tfactor.errors import NoTargetError
from tfactor.values.domain import (
    BooleanDomain,
    CategoricalDomain,
    CategoricalValue,
    DiscreteDomain,
    DiscreteValue,
    Domain,
    RealDomain,
    TensorDomain,
    boolean_domain,
)
from tfactor.variables.diff import Diff, DiffList


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET = _Unset()


def values_equal(a: Any, b: Any) -> bool:
    """Value equality that also handles numpy arrays."""
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return np.array_equal(a, b)
    return a == b


class Variable:
    """
    Mutable cell with one current value and an optional target value.

    Attributes:
        domain: Domain of legal values
        name: Optional label used in repr
        chain: Chain this variable belongs to (set by Chain), or None
    """

    chain = None

    def __init__(self, value: Any = None, target: Any = UNSET, domain: Optional[Domain] = None, name: Optional[str] = None):
        self.domain = domain if domain is not None else Domain()
        self.name = name
        self._value = self.coerce(value)
        self._target = UNSET if target is UNSET else self.coerce(target)

    def coerce(self, value: Any) -> Any:
        """Convert and validate an incoming value."""
        if value is not None and not self.domain.contains(value):
            raise TypeError(f"{value!r} is not in the domain of {self!r}")
        return value

    def value(self) -> Any:
        """The current global value."""
        return self._value

    def set_value(self, value: Any, diff_list: Optional[DiffList] = None) -> None:
        """
        Change the current value.

        Args:
            value: New value (coerced by the variable type)
            diff_list: If given, a Diff is appended before the change is applied
        """
        value = self.coerce(value)
        if diff_list is not None:
            diff_list.append(Diff(self, self._value, value))
        self._value = value

    @property
    def has_target(self) -> bool:
        return self._target is not UNSET

    def target_value(self) -> Any:
        if self._target is UNSET:
            raise NoTargetError(self)
        return self._target

    def value_is_target(self) -> bool:
        return values_equal(self._value, self.target_value())

    def set_to_target(self, diff_list: Optional[DiffList] = None) -> None:
        self.set_value(self.target_value(), diff_list)

    def same_value(self, other: "Variable") -> bool:
        """True if both variables currently hold equal values (not identity)."""
        return values_equal(self.value(), other.value())

    def different_value(self, other: "Variable") -> bool:
        return not self.same_value(other)

    def tensor(self, value: Any = None) -> np.ndarray:
        """Tensor form of value (default: current value), for dot-product statistics."""
        raise TypeError(f"{type(self).__name__} values have no tensor form")

    def __repr__(self) -> str:
        label = self.name or type(self).__name__
        return f"{label}({getattr(self, '_value', None)!r})"


class DiscreteVariable(Variable):
    """Variable whose value is a DiscreteValue of a DiscreteDomain."""

    def __init__(self, domain: DiscreteDomain, value: Any = 0, target: Any = UNSET, name: Optional[str] = None):
        super().__init__(value, target, domain=domain, name=name)

    def coerce(self, value: Any) -> DiscreteValue:
        if isinstance(value, DiscreteValue):
            if value.domain is not self.domain:
                raise ValueError(f"{value!r} belongs to a different domain than {self!r}")
            return value
        return self.domain.value(value)

    @property
    def int_value(self) -> int:
        return self._value.index

    def tensor(self, value: Any = None) -> np.ndarray:
        v = self._value if value is None else self.coerce(value)
        return v.tensor()


class CategoricalVariable(DiscreteVariable):
    """
    Variable whose value is a CategoricalValue.

    Accepts categories, indices or values. An int that is not a known
    category is an index; other plain values are categories, interned
    into the domain if new. set_index always reads an int as an index.
    """

    def __init__(self, domain: CategoricalDomain, category: Any, target: Any = UNSET, name: Optional[str] = None):
        super().__init__(domain, category, target, name=name)

    def coerce(self, value: Any) -> CategoricalValue:
        if isinstance(value, DiscreteValue):
            return super().coerce(value)
        return self.domain.value(value)

    @property
    def category_value(self) -> Hashable:
        return self._value.category

    def set_index(self, index: int, diff_list: Optional[DiffList] = None) -> None:
        self.set_value(self.domain.value_at(index), diff_list)


class BooleanVariable(CategoricalVariable):
    """Categorical variable over the shared BooleanDomain."""

    def __init__(self, value: bool = False, target: Any = UNSET, domain: Optional[BooleanDomain] = None, name: Optional[str] = None):
        super().__init__(domain or boolean_domain, value, target, name=name)

    @property
    def boolean_value(self) -> bool:
        return bool(self._value.category)


class IntegerVariable(Variable):
    def __init__(self, value: int = 0, target: Any = UNSET, name: Optional[str] = None):
        super().__init__(value, target, domain=Domain((int, np.integer)), name=name)


class StringVariable(Variable):
    def __init__(self, value: str = "", target: Any = UNSET, name: Optional[str] = None):
        super().__init__(value, target, domain=Domain(str), name=name)


class RealVariable(Variable):
    """Real scalar whose tensor form is a length-1 vector."""

    def __init__(self, value: float = 0.0, target: Any = UNSET, name: Optional[str] = None):
        super().__init__(value, target, domain=RealDomain(), name=name)

    def coerce(self, value: Any) -> float:
        return float(super().coerce(value))

    def tensor(self, value: Any = None) -> np.ndarray:
        v = self._value if value is None else self.coerce(value)
        return np.array([v], dtype=get_config().dtype)


class TensorVariable(Variable):
    """Variable holding a numpy array of unrestricted shape."""

    def __init__(self, value: Any, target: Any = UNSET, name: Optional[str] = None):
        super().__init__(value, target, domain=TensorDomain(), name=name)

    def coerce(self, value: Any) -> np.ndarray:
        return super().coerce(np.asarray(value, dtype=get_config().dtype))

    def tensor(self, value: Any = None) -> np.ndarray:
        return self._value if value is None else self.coerce(value)
