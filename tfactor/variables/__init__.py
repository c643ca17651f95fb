"""
Variables module: variables, relational structure, assignments and
mutation history.
"""

from tfactor.variables.diff import Diff, DiffList
from tfactor.variables.variable import (
    UNSET,
    Variable,
    DiscreteVariable,
    CategoricalVariable,
    BooleanVariable,
    IntegerVariable,
    StringVariable,
    RealVariable,
    TensorVariable,
    values_equal,
)
from tfactor.variables.relations import Chain, Aligned
from tfactor.variables.assignment import (
    Assignment,
    GlobalAssignment,
    TargetAssignment,
    FixedAssignment,
    Assignment1,
    Assignment2,
    Assignment3,
    Assignment4,
    HashMapAssignment,
    global_assignment,
    target_assignment,
)

__all__ = [
    "Diff",
    "DiffList",
    "UNSET",
    "Variable",
    "DiscreteVariable",
    "CategoricalVariable",
    "BooleanVariable",
    "IntegerVariable",
    "StringVariable",
    "RealVariable",
    "TensorVariable",
    "values_equal",
    "Chain",
    "Aligned",
    "Assignment",
    "GlobalAssignment",
    "TargetAssignment",
    "FixedAssignment",
    "Assignment1",
    "Assignment2",
    "Assignment3",
    "Assignment4",
    "HashMapAssignment",
    "global_assignment",
    "target_assignment",
]
