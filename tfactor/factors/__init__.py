"""
Factors module: factors, families, templates and relational unroll patterns.
"""

from tfactor.factors.factor import Factor
from tfactor.factors.family import (
    Family,
    DotFamily,
    outer_statistics,
    values_as_index,
    value_tensor,
    MAX_ARITY,
)
from tfactor.factors.template import Template, Unroller
from tfactor.factors.patterns import ChainPattern, AlignedPattern, GraphPattern

__all__ = [
    "Factor",
    "Family",
    "DotFamily",
    "outer_statistics",
    "values_as_index",
    "value_tensor",
    "MAX_ARITY",
    "Template",
    "Unroller",
    "ChainPattern",
    "AlignedPattern",
    "GraphPattern",
]
