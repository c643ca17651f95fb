"""
tfactor/factors/family.py

Families: scoring definitions shared by structurally identical factors.

A Family is parameterized by its arity (1 to 4) and a pluggable pair of
strategies. Either

  - score(*values) -> float, or
  - statistics(*values) -> tensor together with statistics_score(stat) -> float,

in which case score(*values) is always statistics_score(statistics(*values)).

DotFamily fixes statistics_score to the dot product of the statistics
with the family's Weights, so every factor of the family shares those
parameters.
"""

from __future__ import annotations

from functools import reduce
from typing import Any, Callable, Optional, Tuple

import numpy as np
import scipy.sparse as sp

from tfactor.config import get_config
from tfactor.errors import ShapeMismatchError
from tfactor.factors.factor import Factor
from tfactor.params.weights import Weights
from tfactor.values.domain import DiscreteValue

MAX_ARITY = 4

ScoreFn = Callable[..., float]
StatisticsFn = Callable[..., Any]
StatisticsScoreFn = Callable[[Any], float]


def value_tensor(value: Any) -> np.ndarray:
    """Tensor form of a value: one-hot for discrete, [x] for scalars, arrays as is."""
    if hasattr(value, "tensor"):
        return value.tensor()
    if isinstance(value, np.ndarray):
        return value
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        return np.array([value], dtype=get_config().dtype)
    raise TypeError(f"Value {value!r} has no tensor form")


def values_as_index(*values: Any) -> Tuple[int, ...]:
    """Index tuple of discrete values, usable to address a weights tensor."""
    out = []
    for v in values:
        if not isinstance(v, DiscreteValue):
            raise TypeError(f"Value {v!r} is not discrete")
        out.append(v.index)
    return tuple(out)


def outer_statistics(*values: Any) -> np.ndarray:
    """Outer product of the tensor forms of the values."""
    tensors = [value_tensor(v) for v in values]
    return reduce(np.multiply.outer, tensors)


class Family:
    """
    Shared scoring definition for factors of a fixed arity.

    Attributes:
        name: Family name
        arity: Number of neighbours of every factor of this family
    """

    def __init__(
        self,
        name: str,
        arity: int,
        score: Optional[ScoreFn] = None,
        statistics: Optional[StatisticsFn] = None,
        statistics_score: Optional[StatisticsScoreFn] = None,
    ):
        if not 1 <= arity <= MAX_ARITY:
            raise ValueError(f"Family arity must be 1..{MAX_ARITY}, got {arity}")
        if score is not None and statistics is not None:
            raise ValueError("Give either score or statistics, not both")
        if score is None and statistics is None:
            raise ValueError("Family needs a score or a statistics function")
        if statistics is not None and statistics_score is None:
            raise ValueError("A statistics function needs a statistics_score to go with it")
        self.name = name
        self.arity = arity
        self._score = score
        self._statistics = statistics
        self._statistics_score = statistics_score

    @property
    def has_statistics(self) -> bool:
        return self._statistics is not None

    def statistics(self, *values: Any) -> Any:
        if self._statistics is None:
            raise TypeError(f"Family {self.name!r} defines no statistics")
        return self._statistics(*values)

    def statistics_score(self, stat: Any) -> float:
        if self._statistics_score is None:
            raise TypeError(f"Family {self.name!r} defines no statistics_score")
        return float(self._statistics_score(stat))

    def score(self, *values: Any) -> float:
        """Score of the neighbours' values (in neighbour order)."""
        if len(values) != self.arity:
            raise ValueError(f"Family {self.name!r} scores {self.arity} values, got {len(values)}")
        if self._statistics is not None:
            return self.statistics_score(self.statistics(*values))
        return float(self._score(*values))

    def factor(self, *variables: Any) -> Factor:
        """A factor of this family over the given neighbours."""
        return Factor(self, variables)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, arity={self.arity})"


class DotFamily(Family):
    """
    Family scored by the dot product of statistics with shared Weights.

    The default statistics are the outer product of the neighbours'
    tensor forms.
    """

    def __init__(self, name: str, arity: int, weights: Weights, statistics: Optional[StatisticsFn] = None):
        super().__init__(name, arity, statistics=statistics or outer_statistics, statistics_score=self._dot)
        if weights.owner is not None and weights.owner is not self:
            raise ValueError(f"{weights!r} is already owned by {weights.owner!r}")
        weights.owner = self
        self._weights = weights

    def weights(self) -> Weights:
        return self._weights

    def _dot(self, stat: Any) -> float:
        w = self._weights.value()
        if stat.shape != w.shape:
            raise ShapeMismatchError(self._weights.name, stat.shape, w.shape, "statistics_score")
        if sp.issparse(stat):
            return float(stat.multiply(w).sum())
        return float(np.vdot(stat, w))
