"""
Tests for assignments and their lookup-on-miss behaviour.
"""

import pytest

from tfactor.errors import NoTargetError, VariableNotBoundError
from tfactor.values.domain import DiscreteDomain
from tfactor.variables.assignment import (
    Assignment1,
    Assignment2,
    Assignment4,
    FixedAssignment,
    GlobalAssignment,
    HashMapAssignment,
    global_assignment,
    target_assignment,
)
from tfactor.variables.diff import DiffList
from tfactor.variables.variable import DiscreteVariable, IntegerVariable


class TestGlobalAssignment:
    def test_reads_current_value(self):
        v = IntegerVariable(4)
        assert global_assignment(v) == 4
        v.set_value(5)
        assert global_assignment(v) == 5

    def test_stateless_instances_agree(self):
        v = IntegerVariable(4)
        assert GlobalAssignment()(v) == global_assignment(v)
        assert global_assignment.contains(v)
        assert global_assignment.variables() is None
        assert target_assignment.variables() is None


class TestTargetAssignment:
    def test_reads_target(self):
        v = IntegerVariable(1, target=9)
        assert target_assignment(v) == 9
        assert v in target_assignment

    def test_missing_target_raises(self):
        v = IntegerVariable(1)
        assert v not in target_assignment
        with pytest.raises(NoTargetError):
            target_assignment(v)


class TestFixedAssignment:
    def test_lookup(self):
        x, y = IntegerVariable(0), IntegerVariable(0)
        a = Assignment2(x, 1, y, 2)
        assert a(x) == 1
        assert a(y) == 2
        assert len(a) == 2

    def test_falls_back_to_global_value(self):
        x, y, z = IntegerVariable(0), IntegerVariable(0), IntegerVariable(7)
        a = Assignment2(x, 1, y, 2)
        assert not a.contains(z)
        assert a(z) == 7
        z.set_value(8)
        assert a(z) == 8

    def test_values_coerced(self):
        d = DiscreteDomain(3)
        v = DiscreteVariable(d, 0)
        a = Assignment1(v, 2)
        assert a(v) is d.value(2)

    def test_arity_limits(self):
        vs = [IntegerVariable(i) for i in range(5)]
        Assignment4(*[x for v in vs[:4] for x in (v, 0)])
        with pytest.raises(ValueError):
            FixedAssignment(*[(v, 0) for v in vs])
        with pytest.raises(ValueError):
            FixedAssignment()


class TestHashMapAssignment:
    def test_lookup_and_update(self):
        x = IntegerVariable(0)
        a = HashMapAssignment([(x, 3)])
        assert a(x) == 3
        a[x] = 4
        assert a[x] == 4
        assert x.value() == 0

    def test_unbound_raises(self):
        x, z = IntegerVariable(0), IntegerVariable(7)
        a = HashMapAssignment([(x, 3)])
        with pytest.raises(VariableNotBoundError):
            a(z)
        with pytest.raises(KeyError):
            a[z]
        assert a.get(z) is None

    def test_fallback_divergence(self):
        x, y, z = IntegerVariable(0), IntegerVariable(0), IntegerVariable(5)
        fixed = Assignment2(x, 1, y, 2)
        open_map = HashMapAssignment([(x, 1), (y, 2)])
        assert fixed(z) == z.value()
        with pytest.raises(VariableNotBoundError):
            open_map(z)

    def test_remove(self):
        x = IntegerVariable(0)
        a = HashMapAssignment([(x, 1)])
        a.remove(x)
        assert len(a) == 0
        with pytest.raises(VariableNotBoundError):
            a.remove(x)

    def test_snapshot_and_set_variables(self):
        x, y = IntegerVariable(1), IntegerVariable(2)
        snap = HashMapAssignment.snapshot([x, y])
        x.set_value(10)
        y.set_value(20)
        dl = DiffList()
        snap.set_variables(dl)
        assert (x.value(), y.value()) == (1, 2)
        assert len(dl) == 2
        dl.undo_all()
        assert (x.value(), y.value()) == (10, 20)

    def test_variables(self):
        x, y = IntegerVariable(1), IntegerVariable(2)
        a = HashMapAssignment([(x, 0), (y, 0)])
        assert a.variables() == [x, y]
