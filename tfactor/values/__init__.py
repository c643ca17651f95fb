"""
Values module: domains and the values they enumerate.
"""

from tfactor.values.domain import (
    Domain,
    RealDomain,
    TensorDomain,
    DiscreteDomain,
    CategoricalDomain,
    BooleanDomain,
    DiscreteValue,
    CategoricalValue,
    boolean_domain,
)

__all__ = [
    "Domain",
    "RealDomain",
    "TensorDomain",
    "DiscreteDomain",
    "CategoricalDomain",
    "BooleanDomain",
    "DiscreteValue",
    "CategoricalValue",
    "boolean_domain",
]
