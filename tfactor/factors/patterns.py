"""
tfactor/factors/patterns.py

Relational patterns: interchangeable strategies that build the
position-specific Unrollers of a Template.

  - ChainPattern: windows over a Chain (unary, transitions, trigrams, ...)
  - AlignedPattern: pairs from an Aligned relation (label <-> observation)
  - GraphPattern: one pairwise factor per edge of a networkx graph whose
    nodes are variables (trees are directed graphs)

Each method returns a list of Unrollers, one per position, ready to pass
to Template. A pattern's filter applies to every member of a neighbour
tuple, not only the seed, so a factor is found from each of its
neighbours or from none of them.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional, Tuple

import networkx as nx

from tfactor.factors.template import Unroller, admits
from tfactor.variables.relations import Aligned


class ChainPattern:
    """
    Windows of consecutive variables in the seed's Chain.

    Attributes:
        accepts: Optional type/predicate every window member must pass
    """

    def __init__(self, accepts: Any = None):
        self.accepts = accepts

    def _member(self, v: Any) -> bool:
        return getattr(v, "chain", None) is not None and admits(self.accepts, v)

    def window(self, width: int) -> List[Unroller]:
        """
        Unrollers for factors over `width` consecutive chain members.

        Position i yields the window starting i steps before the seed, if
        it fits inside the chain and all its members are accepted.
        """
        if width < 1:
            raise ValueError("window width must be positive")

        def make(i: int) -> Unroller:
            def neighbors(seed: Any) -> Iterator[Tuple[Any, ...]]:
                chain = seed.chain
                start = chain.position(seed) - i
                if start < 0 or start + width > len(chain):
                    return
                members = tuple(chain[j] for j in range(start, start + width))
                if all(admits(self.accepts, v) for v in members):
                    yield members
            return Unroller(neighbors=neighbors, accepts=self._member)

        return [make(i) for i in range(width)]

    def local(self) -> List[Unroller]:
        """One unary factor per chain member."""
        return self.window(1)

    def transition(self) -> List[Unroller]:
        """One factor per adjacent (prev, next) pair."""
        return self.window(2)


class AlignedPattern:
    """
    Pairwise factors (left, right) over an Aligned relation.

    Attributes:
        relation: The Aligned relation walked from either side
        left: Optional type/predicate for the left member
        right: Optional type/predicate for the right member
    """

    def __init__(self, relation: Aligned, left: Any = None, right: Any = None):
        self.relation = relation
        self.left = left
        self.right = right

    def pair(self) -> List[Unroller]:
        rel = self.relation

        def from_left(seed: Any) -> Iterator[Tuple[Any, Any]]:
            other = rel.right_of(seed)
            if other is not None and admits(self.right, other):
                yield (seed, other)

        def from_right(seed: Any) -> Iterator[Tuple[Any, Any]]:
            other = rel.left_of(seed)
            if other is not None and admits(self.left, other):
                yield (other, seed)

        return [
            Unroller(neighbors=from_left, accepts=self.left),
            Unroller(neighbors=from_right, accepts=self.right),
        ]


class GraphPattern:
    """
    One pairwise factor per edge of a graph whose nodes are variables.

    Directed graphs keep edge orientation (u, v). Undirected edges are
    oriented so that key(u) < key(v); the default key is id(), which is
    stable for the life of the variables. Pass a key when the score
    function is asymmetric and the orientation matters.
    """

    def __init__(self, graph: nx.Graph, key: Optional[Callable[[Any], Any]] = None, accepts: Any = None):
        self.graph = graph
        self.key = key or id
        self.accepts = accepts

    def _member(self, v: Any) -> bool:
        return v in self.graph and admits(self.accepts, v)

    def edges(self) -> List[Unroller]:
        g = self.graph
        key = self.key
        accepts = self.accepts

        def ok(v: Any) -> bool:
            return admits(accepts, v)

        if g.is_directed():
            def as_source(seed: Any) -> Iterator[Tuple[Any, Any]]:
                for v in g.successors(seed):
                    if ok(v):
                        yield (seed, v)

            def as_target(seed: Any) -> Iterator[Tuple[Any, Any]]:
                for u in g.predecessors(seed):
                    if ok(u):
                        yield (u, seed)
        else:
            def as_source(seed: Any) -> Iterator[Tuple[Any, Any]]:
                for v in g.neighbors(seed):
                    if (v is seed or key(seed) < key(v)) and ok(v):
                        yield (seed, v)

            def as_target(seed: Any) -> Iterator[Tuple[Any, Any]]:
                for u in g.neighbors(seed):
                    if u is not seed and key(u) < key(seed) and ok(u):
                        yield (u, seed)

        return [
            Unroller(neighbors=as_source, accepts=self._member),
            Unroller(neighbors=as_target, accepts=self._member),
        ]

    def nodes(self) -> List[Unroller]:
        """One unary factor per node."""
        return [Unroller(neighbors=lambda seed: ((seed,),), accepts=self._member)]
