"""
tfactor/model.py

Models: sources of factors.

A model holds no variable values. Given some variables it answers which
factors neighbour them, collecting from explicitly listed factors
(ItemizedModel), from templates unrolled on demand (TemplateModel), or
from several sub-models (CombinedModel).

Two query modes are supported:
  - NeighborMode.ANY: factors touching at least one queried variable
  - NeighborMode.ALL: factors whose neighbours are all queried variables

Results are de-duplicated by (family, ordered neighbour identities) and
returned in discovery order.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

import networkx as nx

from tfactor.factors.factor import Factor
from tfactor.factors.template import Template
from tfactor.variables.assignment import Assignment
from tfactor.variables.diff import Diff, DiffList
from tfactor.variables.variable import Variable

logger = logging.getLogger(__name__)


class NeighborMode(Enum):
    """Which factors a query returns."""
    ANY = "any"
    ALL = "all"


def as_variables(target: Any) -> List[Any]:
    """
    Normalize a query target to a list of unique variables.

    Accepts a Variable, a Diff, a DiffList or an iterable of variables.
    """
    if isinstance(target, Variable):
        return [target]
    if isinstance(target, Diff):
        return [target.variable]
    if isinstance(target, DiffList):
        return target.variables()
    seen = set()
    out = []
    for v in target:
        if id(v) not in seen:
            seen.add(id(v))
            out.append(v)
    return out


class Model(ABC):
    """Abstract factor source."""

    @abstractmethod
    def _touching(self, variables: List[Any]) -> Iterable[Factor]:
        """Factors touching any of variables (duplicates allowed)."""

    def factors(self, variables: Any, mode: NeighborMode = NeighborMode.ANY) -> List[Factor]:
        """
        Factors neighbouring the given variables.

        Args:
            variables: Variable, Diff, DiffList or iterable of variables
            mode: NeighborMode.ANY or NeighborMode.ALL

        Returns:
            De-duplicated list of factors in discovery order
        """
        vs = as_variables(variables)
        seen: Dict[Tuple[int, Tuple[int, ...]], Factor] = {}
        for f in self._touching(vs):
            seen.setdefault(f.key, f)
        out = list(seen.values())
        if mode is NeighborMode.ALL:
            ids = {id(v) for v in vs}
            out = [f for f in out if all(id(x) in ids for x in f.variables())]
        logger.debug("%s: %d factors for %d variables (%s)", type(self).__name__, len(out), len(vs), mode.value)
        return out

    def factors_of_variable(self, v: Any) -> List[Factor]:
        return self.factors([v])

    def factors_of_family(self, variables: Any, family: Any, mode: NeighborMode = NeighborMode.ANY) -> List[Factor]:
        """Factors of one family (a Family or the Template wrapping it)."""
        fam = family.family if isinstance(family, Template) else family
        return [f for f in self.factors(variables, mode) if f.family is fam]

    def factors_of_class(self, variables: Any, cls: type, mode: NeighborMode = NeighborMode.ANY) -> List[Factor]:
        return [f for f in self.factors(variables, mode) if isinstance(f, cls)]

    def factors_of_family_class(self, variables: Any, cls: type, mode: NeighborMode = NeighborMode.ANY) -> List[Factor]:
        """Factors whose family is an instance of cls (e.g. DotFamily)."""
        return [f for f in self.factors(variables, mode) if isinstance(f.family, cls)]

    def current_score(self, variables: Any, mode: NeighborMode = NeighborMode.ANY) -> float:
        return sum(f.current_score() for f in self.factors(variables, mode))

    def assignment_score(self, variables: Any, assignment: Assignment, mode: NeighborMode = NeighborMode.ANY) -> float:
        return sum(f.assignment_score(assignment) for f in self.factors(variables, mode))

    def factor_graph(self, variables: Any, mode: NeighborMode = NeighborMode.ANY) -> nx.Graph:
        """
        Bipartite graph of the factors neighbouring variables.

        Variable nodes carry bipartite=0, factor nodes bipartite=1; each
        edge records the variable's position in the factor.
        """
        g = nx.Graph()
        for f in self.factors(variables, mode):
            g.add_node(f, bipartite=1)
            for i, v in enumerate(f.variables()):
                g.add_node(v, bipartite=0)
                g.add_edge(f, v, position=i)
        return g


class ItemizedModel(Model):
    """Model over an explicit list of factors, indexed by variable."""

    def __init__(self, factors: Iterable[Factor] = ()):
        self._factors: Dict[Tuple[int, Tuple[int, ...]], Factor] = {}
        self._index: Dict[int, List[Factor]] = {}
        self.add_factors(factors)

    def add_factor(self, f: Factor) -> None:
        if f.key in self._factors:
            return
        self._factors[f.key] = f
        for v in {id(v): v for v in f.variables()}.values():
            self._index.setdefault(id(v), []).append(f)

    def add_factors(self, factors: Iterable[Factor]) -> None:
        for f in factors:
            self.add_factor(f)

    def all_factors(self) -> List[Factor]:
        return list(self._factors.values())

    def _touching(self, variables: List[Any]) -> Iterable[Factor]:
        for v in variables:
            yield from self._index.get(id(v), ())

    def __len__(self) -> int:
        return len(self._factors)


class TemplateModel(Model):
    """Model whose factors are unrolled from templates on each query."""

    def __init__(self, templates: Iterable[Template] = ()):
        self.templates: List[Template] = list(templates)

    def add_template(self, template: Template) -> Template:
        self.templates.append(template)
        return template

    def families(self) -> List[Any]:
        return [t.family for t in self.templates]

    def _touching(self, variables: List[Any]) -> Iterable[Factor]:
        for t in self.templates:
            for v in variables:
                yield from t.unroll(v)


class CombinedModel(Model):
    """Union of several models."""

    def __init__(self, *models: Model):
        self.models: List[Model] = list(models)

    def add_model(self, model: Model) -> Model:
        self.models.append(model)
        return model

    def _touching(self, variables: List[Any]) -> Iterable[Factor]:
        for m in self.models:
            yield from m._touching(variables)
