"""
tfactor/factors/template.py

Templates: a Family plus a rule for generating ("unrolling") its factors
on demand from a single seed variable.

Unrolling is split by position. For a family of arity N a Template holds
N Unrollers; the Unroller at position i decides whether a seed can sit at
position i and, if so, lazily yields the complete neighbour tuples with
the seed at that position, found by walking relational structure (see
tfactor.factors.patterns). unroll(seed) is the de-duplicated union over
all positions.

Unrolling keeps no state between calls: it is a pure function of the
current variables and relations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from tfactor.factors.factor import Factor
from tfactor.factors.family import Family

logger = logging.getLogger(__name__)

NeighborsFn = Callable[[Any], Iterable[Tuple[Any, ...]]]


def admits(accepts: Any, variable: Any) -> bool:
    """True if variable passes accepts: None, a type, a tuple of types or a predicate."""
    if accepts is None:
        return True
    if isinstance(accepts, (type, tuple)):
        return isinstance(variable, accepts)
    return bool(accepts(variable))


@dataclass(frozen=True)
class Unroller:
    """
    Position-specific unroll rule.

    Attributes:
        neighbors: seed -> iterable of neighbour tuples containing seed at this position
        accepts: type, tuple of types, or predicate restricting seeds (None accepts all)
    """
    neighbors: NeighborsFn
    accepts: Any = None

    def admits(self, seed: Any) -> bool:
        return admits(self.accepts, seed)


class Template:
    """
    Factor source for one Family, unrolled from seed variables.

    Attributes:
        family: Family of all produced factors
        unrollers: One Unroller (or None) per neighbour position
    """

    def __init__(self, family: Family, unrollers: Sequence[Optional[Unroller]], name: Optional[str] = None):
        unrollers = tuple(unrollers)
        if len(unrollers) != family.arity:
            raise ValueError(
                f"Template for {family.name!r} needs {family.arity} unrollers, got {len(unrollers)}"
            )
        self.family = family
        self.unrollers: Tuple[Optional[Unroller], ...] = unrollers
        self.name = name or family.name

    @property
    def arity(self) -> int:
        return self.family.arity

    def score(self, *values: Any) -> float:
        return self.family.score(*values)

    def statistics(self, *values: Any) -> Any:
        return self.family.statistics(*values)

    def weights(self) -> Any:
        return self.family.weights()

    def unroll_at_position(self, position: int, seed: Any) -> List[Factor]:
        """
        Factors with seed at the given (0-based) position.

        Returns an empty list when seed cannot occupy the position.
        """
        rule = self.unrollers[position]
        if rule is None or not rule.admits(seed):
            return []
        out = []
        for neighbors in rule.neighbors(seed):
            neighbors = tuple(neighbors)
            if len(neighbors) != self.arity or neighbors[position] is not seed:
                raise ValueError(
                    f"Unroller {position} of {self.name!r} produced {neighbors!r} "
                    f"without the seed at position {position}"
                )
            out.append(Factor(self.family, neighbors))
        return out

    def unroll(self, seed: Any) -> List[Factor]:
        """All factors of this template that have seed as a neighbour."""
        seen: Dict[Tuple[int, Tuple[int, ...]], Factor] = {}
        for position in range(self.arity):
            for f in self.unroll_at_position(position, seed):
                seen.setdefault(f.key, f)
        out = list(seen.values())
        logger.debug("Template %r unrolled %d factors from %r", self.name, len(out), seed)
        return out

    def unroll_all(self, variables: Iterable[Any]) -> List[Factor]:
        """De-duplicated union of unroll(v) over variables."""
        seen: Dict[Tuple[int, Tuple[int, ...]], Factor] = {}
        for v in variables:
            for f in self.unroll(v):
                seen.setdefault(f.key, f)
        return list(seen.values())

    def __repr__(self) -> str:
        return f"Template({self.name!r}, arity={self.arity})"
