"""
Tests for variables, relations and the mutation history.
"""

import numpy as np
import pytest

from tfactor.errors import NoTargetError
from tfactor.values.domain import CategoricalDomain, DiscreteDomain
from tfactor.variables.diff import Diff, DiffList
from tfactor.variables.relations import Aligned, Chain
from tfactor.variables.variable import (
    BooleanVariable,
    CategoricalVariable,
    DiscreteVariable,
    IntegerVariable,
    RealVariable,
    StringVariable,
    TensorVariable,
    Variable,
)


class TestVariable:
    def test_value_and_set(self):
        v = IntegerVariable(3)
        assert v.value() == 3
        v.set_value(5)
        assert v.value() == 5

    def test_identity_vs_value_equality(self):
        a, b = IntegerVariable(1), IntegerVariable(1)
        assert a != b
        assert a.same_value(b)
        b.set_value(2)
        assert a.different_value(b)
        assert len({a, b}) == 2

    def test_domain_type_checked(self):
        with pytest.raises(TypeError):
            StringVariable(3)
        v = StringVariable("a")
        with pytest.raises(TypeError):
            v.set_value(1.0)

    def test_target(self):
        v = IntegerVariable(1, target=2)
        assert v.has_target
        assert v.target_value() == 2
        assert not v.value_is_target()
        v.set_to_target()
        assert v.value_is_target()

    def test_target_unchanged_by_set_value(self):
        v = IntegerVariable(1, target=1)
        v.set_value(7)
        assert v.target_value() == 1

    def test_no_target(self):
        v = IntegerVariable(1)
        assert not v.has_target
        with pytest.raises(NoTargetError):
            v.target_value()

    def test_none_target_is_a_target(self):
        v = Variable("x", target=None)
        assert v.has_target
        assert v.target_value() is None

    def test_no_tensor_form(self):
        with pytest.raises(TypeError):
            StringVariable("a").tensor()


class TestDiscreteVariables:
    def test_discrete_accepts_int(self):
        d = DiscreteDomain(3)
        v = DiscreteVariable(d, 2)
        assert v.value() is d.value(2)
        assert v.int_value == 2
        assert np.allclose(v.tensor(), [0.0, 0.0, 1.0])

    def test_discrete_rejects_foreign_value(self):
        v = DiscreteVariable(DiscreteDomain(2), 0)
        with pytest.raises(ValueError):
            v.set_value(DiscreteDomain(2).value(1))

    def test_categorical_by_category(self):
        d = CategoricalDomain(["N", "V"])
        v = CategoricalVariable(d, "V")
        assert v.category_value == "V"
        assert v.int_value == 1
        v.set_index(0)
        assert v.category_value == "N"

    def test_categorical_int_is_index(self):
        d = CategoricalDomain(["a", "b"])
        v = CategoricalVariable(d, 1)
        assert v.category_value == "b"
        assert d.size() == 2
        v.set_value(0)
        assert v.category_value == "a"

    def test_categorical_int_index_on_frozen_domain(self):
        d = CategoricalDomain(["a", "b"], frozen=True)
        v = CategoricalVariable(d, 1)
        assert v.category_value == "b"
        with pytest.raises(IndexError):
            v.set_value(2)
        assert d.size() == 2

    def test_categorical_grows_domain(self):
        d = CategoricalDomain()
        CategoricalVariable(d, "new")
        assert d.size() == 1

    def test_boolean(self):
        b = BooleanVariable(True, target=False)
        assert b.boolean_value is True
        assert not b.value_is_target()

    def test_real_and_tensor(self):
        r = RealVariable(2.5)
        assert np.allclose(r.tensor(), [2.5])
        t = TensorVariable([1, 2, 3])
        assert t.value().dtype == np.float64
        other = TensorVariable([1, 2, 3])
        assert t.same_value(other)


class TestDiff:
    def test_set_value_records_before_applying(self):
        v = IntegerVariable(1)
        dl = DiffList()
        v.set_value(2, dl)
        assert len(dl) == 1
        d = dl[0]
        assert d.variable is v
        assert d.old == 1
        assert d.new == 2
        assert v.value() == 2

    def test_unrecorded_set(self):
        v = IntegerVariable(1)
        dl = DiffList()
        v.set_value(2)
        assert len(dl) == 0

    def test_undo_redo_single(self):
        v = IntegerVariable(1)
        d = Diff(v, 1, 2)
        d.redo()
        assert v.value() == 2
        d.undo()
        assert v.value() == 1

    @pytest.mark.parametrize("n", [1, 2, 5, 20])
    def test_undo_all_restores_initial(self, n):
        v = IntegerVariable(0)
        dl = DiffList()
        for i in range(1, n + 1):
            v.set_value(i, dl)
        dl.undo_all()
        assert v.value() == 0
        assert not dl.done
        dl.redo_all()
        assert v.value() == n
        assert dl.done

    def test_undo_all_multiple_variables(self):
        a, b = IntegerVariable(0), IntegerVariable(10)
        dl = DiffList()
        a.set_value(1, dl)
        b.set_value(11, dl)
        a.set_value(2, dl)
        assert dl.variables() == [a, b]
        dl.undo_all()
        assert (a.value(), b.value()) == (0, 10)

    def test_empty_diff_list(self):
        dl = DiffList()
        assert not dl
        dl.undo_all()
        assert dl.variables() == []


class TestChain:
    def test_links(self):
        vs = [IntegerVariable(i) for i in range(3)]
        c = Chain(vs)
        assert len(c) == 3
        assert c.position(vs[1]) == 1
        assert c.prev(vs[0]) is None
        assert c.prev(vs[1]) is vs[0]
        assert c.next(vs[1]) is vs[2]
        assert c.next(vs[2]) is None
        assert vs[0].chain is c
        assert c.adjacent_pairs() == [(vs[0], vs[1]), (vs[1], vs[2])]

    def test_membership_by_identity(self):
        a, b = IntegerVariable(1), IntegerVariable(1)
        c = Chain([a])
        assert a in c
        assert b not in c
        assert c.position(b) is None

    def test_variable_in_one_chain_only(self):
        a = IntegerVariable(1)
        Chain([a])
        with pytest.raises(ValueError):
            Chain([a])


class TestAligned:
    def test_partner(self):
        l, t = IntegerVariable(0), StringVariable("w")
        rel = Aligned([(l, t)])
        assert rel.right_of(l) is t
        assert rel.left_of(t) is l
        assert rel.partner(l) is t
        assert rel.partner(t) is l
        assert rel.partner(IntegerVariable(0)) is None

    def test_one_to_one(self):
        l, t = IntegerVariable(0), StringVariable("w")
        rel = Aligned([(l, t)])
        with pytest.raises(ValueError):
            rel.add(l, StringVariable("x"))
