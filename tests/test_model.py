"""
Tests for models: factor queries, modes, filters and score aggregation.
"""

import networkx as nx
import numpy as np
import pytest

from tfactor.factors.factor import Factor
from tfactor.factors.family import DotFamily, Family
from tfactor.factors.patterns import ChainPattern
from tfactor.factors.template import Template
from tfactor.model import CombinedModel, ItemizedModel, NeighborMode, TemplateModel, as_variables
from tfactor.params.weights import Parameters
from tfactor.values.domain import DiscreteDomain
from tfactor.variables.assignment import Assignment1, HashMapAssignment
from tfactor.variables.diff import DiffList
from tfactor.variables.relations import Chain
from tfactor.variables.variable import DiscreteVariable, IntegerVariable


class ChainModel(TemplateModel, Parameters):
    def __init__(self):
        super().__init__()
        self.transition = self.new_weights("transition", np.array([[1.0, 0.0], [0.0, 1.0]]))
        self.bias = self.new_weights("bias", np.array([0.0, 0.5]))
        self.add_template(Template(DotFamily("transition", 2, self.transition), ChainPattern().transition()))
        self.add_template(Template(DotFamily("bias", 1, self.bias), ChainPattern().local()))


@pytest.fixture
def chain():
    d = DiscreteDomain(2)
    vs = [DiscreteVariable(d, s) for s in (0, 1, 0)]
    Chain(vs)
    return vs


class TestAsVariables:
    def test_forms(self):
        a, b = IntegerVariable(0), IntegerVariable(1)
        assert as_variables(a) == [a]
        assert as_variables([a, b, a]) == [a, b]
        dl = DiffList()
        b.set_value(2, dl)
        assert as_variables(dl) == [b]
        assert as_variables(dl[0]) == [b]


class TestItemizedModel:
    def setup_method(self):
        self.x, self.y, self.z = (IntegerVariable(i) for i in (1, 2, 3))
        self.pair = Family("pair", 2, score=lambda a, b: float(a * b))
        self.unary = Family("unary", 1, score=lambda a: float(a))
        self.fxy = Factor(self.pair, (self.x, self.y))
        self.fyz = Factor(self.pair, (self.y, self.z))
        self.fx = Factor(self.unary, (self.x,))
        self.model = ItemizedModel([self.fxy, self.fyz, self.fx])

    def test_factors_of_variable(self):
        assert self.model.factors_of_variable(self.x) == [self.fxy, self.fx]
        assert self.model.factors(self.y) == [self.fxy, self.fyz]

    def test_duplicates_ignored(self):
        self.model.add_factor(Factor(self.pair, (self.x, self.y)))
        assert len(self.model) == 3
        assert self.model.all_factors() == [self.fxy, self.fyz, self.fx]

    def test_any_vs_all_mode(self):
        any_ = self.model.factors([self.x, self.y], NeighborMode.ANY)
        all_ = self.model.factors([self.x, self.y], NeighborMode.ALL)
        assert set(any_) == {self.fxy, self.fyz, self.fx}
        assert set(all_) == {self.fxy, self.fx}

    def test_filters(self):
        vs = [self.x, self.y, self.z]
        assert self.model.factors_of_family(vs, self.unary) == [self.fx]
        assert self.model.factors_of_class(vs, Factor) == self.model.factors(vs)
        assert self.model.factors_of_family_class(vs, DotFamily) == []

    def test_scores(self):
        assert self.model.current_score(self.x) == 1 * 2 + 1
        assert self.model.current_score([self.x, self.y, self.z]) == 2 + 6 + 1
        assert self.model.assignment_score(self.x, Assignment1(self.x, 10)) == 20 + 10

    def test_unknown_variable(self):
        assert self.model.factors(IntegerVariable(0)) == []
        assert self.model.current_score(IntegerVariable(0)) == 0

    def test_factor_graph(self):
        g = self.model.factor_graph([self.x, self.y, self.z])
        assert isinstance(g, nx.Graph)
        assert g.number_of_nodes() == 6
        assert g.number_of_edges() == 5
        assert g.nodes[self.fxy]["bipartite"] == 1
        assert g.nodes[self.x]["bipartite"] == 0
        assert g.edges[self.fxy, self.y]["position"] == 1


class TestTemplateModel:
    def test_factors_touching_middle(self, chain):
        model = ChainModel()
        factors = model.factors(chain[1])
        assert len(factors) == 3
        assert len(model.factors_of_family(chain[1], model.templates[0])) == 2
        assert len(model.factors_of_family(chain[1], model.templates[1].family)) == 1

    def test_factors_deduplicated_across_seeds(self, chain):
        model = ChainModel()
        assert len(model.factors(chain)) == 2 + 3

    def test_all_mode(self, chain):
        model = ChainModel()
        inner = model.factors([chain[0], chain[1]], NeighborMode.ALL)
        assert len(inner) == 3
        assert all(all(v is chain[0] or v is chain[1] for v in f.variables()) for f in inner)

    def test_current_score(self, chain):
        model = ChainModel()
        # transitions 0->1 and 1->0 score 0; bias favours state 1
        assert model.current_score(chain) == pytest.approx(0.5)
        chain[0].set_value(1)
        chain[2].set_value(1)
        assert model.current_score(chain) == pytest.approx(2.0 + 1.5)

    def test_assignment_score_does_not_mutate(self, chain):
        model = ChainModel()
        a = HashMapAssignment((v, 1) for v in chain)
        assert model.assignment_score(chain, a) == pytest.approx(3.5)
        assert [v.int_value for v in chain] == [0, 1, 0]

    def test_parameters_registered(self):
        model = ChainModel()
        assert [w.name for w in model.parameters.keys()] == ["transition", "bias"]
        assert model.families()[0].weights() is model.transition
        grad = model.parameters.blank_map()
        assert grad[model.transition].shape == (2, 2)

    def test_weight_update_visible_to_new_queries(self, chain):
        model = ChainModel()
        before = model.current_score(chain)
        step = model.parameters.blank_map()
        step[model.bias] = np.array([1.0, 0.0])
        model.parameters.add_scaled(step, 1.0)
        assert model.current_score(chain) == pytest.approx(before + 2.0)

    def test_factors_of_family_class(self, chain):
        model = ChainModel()
        assert len(model.factors_of_family_class(chain, DotFamily)) == 5


class TestCombinedModel:
    def test_union_without_duplicates(self, chain):
        templated = ChainModel()
        explicit_family = Family("prior", 1, score=lambda v: -1.0)
        explicit = ItemizedModel([Factor(explicit_family, (chain[0],))])
        shared = templated.factors(chain[0])
        explicit.add_factors(shared)
        combined = CombinedModel(templated, explicit)
        factors = combined.factors(chain[0])
        assert len(factors) == len(shared) + 1
        assert combined.current_score(chain[0]) == pytest.approx(templated.current_score(chain[0]) - 1.0)


class TestDiffListScoring:
    def test_score_and_undo(self, chain):
        model = ChainModel()
        dl = DiffList()
        chain[1].set_value(0, dl)
        # all-zero chain: two 0->0 transitions (+2), bias loses 0.5
        delta = dl.score_and_undo(model)
        assert delta == pytest.approx(2.0 - 0.5)
        assert chain[1].int_value == 1
        dl.redo_all()
        assert chain[1].int_value == 0

    def test_factors_of_diff_list(self, chain):
        model = ChainModel()
        dl = DiffList()
        chain[0].set_value(1, dl)
        assert len(model.factors(dl)) == 2
        assert dl.score(model) == model.current_score(chain[0])

    def test_empty_diff_list_scores_zero(self):
        assert DiffList().score_and_undo(ChainModel()) == 0.0
