"""
tfactor: Templated factor graphs

A model substrate for factor graphs whose factors are listed explicitly or
unrolled on demand from relational patterns.

Key components:
- values: Domains and the values they enumerate
- variables: Variables, relations, assignments and undoable diffs
- params: Weights and the WeightsSet/WeightsMap parameter collections
- factors: Factors, families, templates and unroll patterns
- model: Factor sources with score aggregation
- config: Numeric defaults
- errors: Error taxonomy
"""

import logging

__version__ = "1.0.0"
__author__ = "tfactor Team"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from tfactor.config import Config, get_config, set_config, load_config, override
from tfactor.errors import (
    FactorGraphError,
    DomainFrozenError,
    VariableNotBoundError,
    NoTargetError,
    ShapeMismatchError,
)
from tfactor.values import (
    Domain,
    RealDomain,
    TensorDomain,
    DiscreteDomain,
    CategoricalDomain,
    BooleanDomain,
    DiscreteValue,
    CategoricalValue,
)
from tfactor.variables import (
    Variable,
    DiscreteVariable,
    CategoricalVariable,
    BooleanVariable,
    IntegerVariable,
    StringVariable,
    RealVariable,
    TensorVariable,
    Chain,
    Aligned,
    Diff,
    DiffList,
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
from tfactor.params import Weights, TensorSet, WeightsSet, WeightsMap, Parameters
from tfactor.factors import (
    Factor,
    Family,
    DotFamily,
    outer_statistics,
    values_as_index,
    Template,
    Unroller,
    ChainPattern,
    AlignedPattern,
    GraphPattern,
)
from tfactor.model import Model, ItemizedModel, TemplateModel, CombinedModel, NeighborMode

__all__ = [
    # Config and errors
    "Config",
    "get_config",
    "set_config",
    "load_config",
    "override",
    "FactorGraphError",
    "DomainFrozenError",
    "VariableNotBoundError",
    "NoTargetError",
    "ShapeMismatchError",
    # Domains
    "Domain",
    "RealDomain",
    "TensorDomain",
    "DiscreteDomain",
    "CategoricalDomain",
    "BooleanDomain",
    "DiscreteValue",
    "CategoricalValue",
    # Variables
    "Variable",
    "DiscreteVariable",
    "CategoricalVariable",
    "BooleanVariable",
    "IntegerVariable",
    "StringVariable",
    "RealVariable",
    "TensorVariable",
    "Chain",
    "Aligned",
    "Diff",
    "DiffList",
    # Assignments
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
    # Parameters
    "Weights",
    "TensorSet",
    "WeightsSet",
    "WeightsMap",
    "Parameters",
    # Factors
    "Factor",
    "Family",
    "DotFamily",
    "outer_statistics",
    "values_as_index",
    "Template",
    "Unroller",
    "ChainPattern",
    "AlignedPattern",
    "GraphPattern",
    # Models
    "Model",
    "ItemizedModel",
    "TemplateModel",
    "CombinedModel",
    "NeighborMode",
]
