"""
Params module: named parameter tensors and their aggregate collections.
"""

from tfactor.params.weights import (
    Weights,
    TensorSet,
    WeightsSet,
    WeightsMap,
    Parameters,
)

__all__ = [
    "Weights",
    "TensorSet",
    "WeightsSet",
    "WeightsMap",
    "Parameters",
]
