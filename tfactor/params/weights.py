"""
tfactor/params/weights.py

Tensor parameter store.

  - Weights: named parameter tensor with a unique id, itself a variable
  - TensorSet: collection of tensors keyed by Weights, with aggregate
    operations that treat all tensors as one concatenated vector
  - WeightsSet: owning TensorSet; tensors live inside the Weights
  - WeightsMap: non-owning TensorSet; tensors live in an internal map
    keyed by Weights identity (gradients, accumulators)

Aggregate operations never build the concatenated vector; they reduce
tensor by tensor. WeightsMap tensors may be scipy.sparse arrays (see
TensorSet.blank_sparse_map); WeightsSet tensors are always dense.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.sparse as sp

from tfactor.config import get_config
from tfactor.errors import ShapeMismatchError
from tfactor.values.domain import TensorDomain
from tfactor.variables.variable import UNSET, Variable

logger = logging.getLogger(__name__)

Tensor = Union[np.ndarray, "sp.sparray"]
ShapeLike = Union[int, Sequence[int]]

_weights_ids = itertools.count()


class Weights(Variable):
    """
    Parameter tensor of one family.

    Attributes:
        id: Unique integer identity, allocated at construction
        name: Human-readable name (unique within a WeightsSet)
        owner: Family owning these weights, or None until claimed

    The initial tensor is copied, so weights never share storage with the
    caller or with each other.
    """

    def __init__(self, name: str, tensor: Any, owner: Any = None):
        self.id = next(_weights_ids)
        self.owner = owner
        super().__init__(np.array(tensor, dtype=get_config().dtype), UNSET, domain=TensorDomain(), name=name)

    def coerce(self, value: Any) -> np.ndarray:
        return np.asarray(value, dtype=get_config().dtype)

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._value.shape

    def tensor(self, value: Any = None) -> np.ndarray:
        return self._value if value is None else self.coerce(value)

    def __repr__(self) -> str:
        return f"Weights({self.name!r}, id={self.id}, shape={self.shape})"


def _dense(t: Tensor) -> np.ndarray:
    return t.toarray() if sp.issparse(t) else np.asarray(t)


def _check_shape(key: Weights, a: Tensor, b: Tensor, op: str) -> None:
    if a.shape != b.shape:
        raise ShapeMismatchError(key.name, a.shape, b.shape, op)


def _dot(a: Tensor, b: Tensor) -> float:
    if sp.issparse(a):
        return float(a.multiply(b).sum())
    if sp.issparse(b):
        return float(b.multiply(a).sum())
    return float(np.vdot(a, b))


def _axpy(a: Tensor, b: Tensor, scale: float) -> Tensor:
    """Return a + scale * b, updating a in place when a is dense."""
    if sp.issparse(a):
        out = a + b * scale
        return out if sp.issparse(out) else np.asarray(out)
    if sp.issparse(b):
        coo = b.tocoo()
        np.add.at(a, coo.coords if hasattr(coo, "coords") else (coo.row, coo.col), coo.data * scale)
        return a
    a += scale * b
    return a


class TensorSet(ABC):
    """
    Collection of tensors keyed by Weights, usable like one long vector.
    """

    @abstractmethod
    def keys(self) -> List[Weights]:
        """Weights keys in insertion order."""

    @abstractmethod
    def tensor(self, key: Weights) -> Tensor:
        """Tensor stored for key."""

    @abstractmethod
    def contains(self, key: Weights) -> bool:
        ...

    @abstractmethod
    def _put(self, key: Weights, t: Tensor) -> None:
        """Store t for an existing key."""

    def _add_key(self, key: Weights, t: Tensor) -> None:
        """Store t for a key this set does not hold yet (ignored by default)."""

    def items(self) -> List[Tuple[Weights, Tensor]]:
        return [(k, self.tensor(k)) for k in self.keys()]

    def __contains__(self, key: Weights) -> bool:
        return self.contains(key)

    def __len__(self) -> int:
        return len(self.keys())

    def __iter__(self) -> Iterator[Weights]:
        return iter(self.keys())

    def size(self) -> int:
        """Total number of scalar entries across all tensors."""
        return sum(int(np.prod(self.tensor(k).shape)) for k in self.keys())

    def one_norm(self) -> float:
        total = 0.0
        for k in self.keys():
            t = self.tensor(k)
            total += float(abs(t).sum()) if sp.issparse(t) else float(np.abs(t).sum())
        return total

    def two_norm_squared(self) -> float:
        total = 0.0
        for k in self.keys():
            t = self.tensor(k)
            total += _dot(t, t)
        return total

    def two_norm(self) -> float:
        return float(np.sqrt(self.two_norm_squared()))

    def dot(self, other: "TensorSet") -> float:
        """Sum over shared keys of the per-tensor dot products."""
        check = get_config().check_shapes
        total = 0.0
        for k in self.keys():
            if not other.contains(k):
                continue
            a, b = self.tensor(k), other.tensor(k)
            if check:
                _check_shape(k, a, b, "dot")
            total += _dot(a, b)
        return total

    def add_scaled(self, other: "TensorSet", scale: float = 1.0) -> "TensorSet":
        """
        In place: self += scale * other, key by key.

        Raises:
            ShapeMismatchError: if a shared key has different shapes
        """
        for k in other.keys():
            b = other.tensor(k)
            if self.contains(k):
                a = self.tensor(k)
                _check_shape(k, a, b, "add_scaled")
                self._put(k, _axpy(a, b, scale))
            else:
                self._add_key(k, b * scale if sp.issparse(b) else np.asarray(b, dtype=get_config().dtype) * scale)
        return self

    def __iadd__(self, other: "TensorSet") -> "TensorSet":
        return self.add_scaled(other, 1.0)

    def scale(self, factor: float) -> "TensorSet":
        """In place: multiply every tensor by factor."""
        for k in self.keys():
            t = self.tensor(k)
            if sp.issparse(t):
                self._put(k, t * factor)
            else:
                t *= factor
                self._put(k, t)
        return self

    def different(self, other: "TensorSet", threshold: Optional[float] = None) -> bool:
        """
        True if any element differs from its counterpart by more than threshold.

        Keys held by only one of the sets are compared against zeros.
        """
        if threshold is None:
            threshold = get_config().difference_threshold
        check = get_config().check_shapes
        for k in self.keys():
            a = _dense(self.tensor(k))
            if other.contains(k):
                b = _dense(other.tensor(k))
                if check:
                    _check_shape(k, a, b, "different")
                delta = a - b
            else:
                delta = a
            if delta.size and float(np.max(np.abs(delta))) > threshold:
                return True
        for k in other.keys():
            if self.contains(k):
                continue
            b = _dense(other.tensor(k))
            if b.size and float(np.max(np.abs(b))) > threshold:
                return True
        return False

    def blank_map(self) -> "WeightsMap":
        """Zero-filled dense WeightsMap with the same keys and shapes."""
        dtype = get_config().dtype
        return WeightsMap((k, np.zeros(self.tensor(k).shape, dtype=dtype)) for k in self.keys())

    def blank_sparse_map(self) -> "WeightsMap":
        """Like blank_map, but 2-D tensors are empty scipy.sparse CSR arrays."""
        dtype = get_config().dtype
        out = WeightsMap()
        for k in self.keys():
            shape = self.tensor(k).shape
            if len(shape) == 2:
                out[k] = sp.csr_array(shape, dtype=dtype)
            else:
                out[k] = np.zeros(shape, dtype=dtype)
        return out

    def copy(self) -> "WeightsMap":
        """Snapshot of the tensors as a WeightsMap."""
        return WeightsMap((k, self.tensor(k).copy()) for k in self.keys())

    def to_vector(self) -> np.ndarray:
        """Flat concatenation of all tensors, in key order."""
        parts = [_dense(self.tensor(k)).ravel() for k in self.keys()]
        if not parts:
            return np.zeros(0, dtype=get_config().dtype)
        return np.concatenate(parts)


class WeightsSet(TensorSet):
    """
    The complete parameter vector of a model: an owning list of Weights.
    """

    def __init__(self):
        self._weights: List[Weights] = []
        self._ids: Dict[int, Weights] = {}
        self._by_name: Dict[str, Weights] = {}

    def add(self, weights: Weights) -> Weights:
        """Register weights; names and ids must be unique."""
        if weights.id in self._ids:
            raise ValueError(f"{weights!r} already registered")
        if weights.name in self._by_name:
            raise ValueError(f"Weights name {weights.name!r} already used")
        self._weights.append(weights)
        self._ids[weights.id] = weights
        self._by_name[weights.name] = weights
        logger.debug("Registered %r (%d weights)", weights, len(self._weights))
        return weights

    def new_weights(self, name: str, shape_or_tensor: Any, owner: Any = None) -> Weights:
        """
        Create and register weights.

        Args:
            name: Unique name
            shape_or_tensor: An int/tuple shape (zero-initialised) or initial array
            owner: Optional owning family
        """
        if isinstance(shape_or_tensor, (int, tuple)):
            init = np.zeros(shape_or_tensor, dtype=get_config().dtype)
        else:
            init = shape_or_tensor
        return self.add(Weights(name, init, owner=owner))

    def by_name(self, name: str) -> Weights:
        return self._by_name[name]

    def keys(self) -> List[Weights]:
        return list(self._weights)

    def tensor(self, key: Weights) -> np.ndarray:
        if key.id not in self._ids:
            raise KeyError(f"{key!r} not in this WeightsSet")
        return key.value()

    def contains(self, key: Weights) -> bool:
        return self._ids.get(key.id) is key

    def _put(self, key: Weights, t: Tensor) -> None:
        key.set_value(_dense(t))

    def zero(self) -> None:
        for w in self._weights:
            w.value()[...] = 0.0

    def __repr__(self) -> str:
        return f"WeightsSet({[w.name for w in self._weights]})"


class WeightsMap(TensorSet):
    """
    Tensors keyed by Weights identity, shape-consistent with their keys.

    Does not own or expose the parameter values themselves.
    """

    def __init__(self, items: Any = ()):
        self._map: Dict[int, Tuple[Weights, Tensor]] = {}
        for k, t in items:
            self[k] = t

    def __getitem__(self, key: Weights) -> Tensor:
        return self.tensor(key)

    def __setitem__(self, key: Weights, t: Tensor) -> None:
        t = t.copy() if sp.issparse(t) else np.array(t, dtype=get_config().dtype)
        if t.shape != key.shape:
            raise ShapeMismatchError(key.name, key.shape, t.shape, "WeightsMap.__setitem__")
        self._map[key.id] = (key, t)

    def keys(self) -> List[Weights]:
        return [k for k, _ in self._map.values()]

    def tensor(self, key: Weights) -> Tensor:
        entry = self._map.get(key.id)
        if entry is None or entry[0] is not key:
            raise KeyError(f"{key!r} not in this WeightsMap")
        return entry[1]

    def contains(self, key: Weights) -> bool:
        entry = self._map.get(key.id)
        return entry is not None and entry[0] is key

    def _put(self, key: Weights, t: Tensor) -> None:
        self._map[key.id] = (key, t)

    def _add_key(self, key: Weights, t: Tensor) -> None:
        self[key] = t

    def __repr__(self) -> str:
        return f"WeightsMap({[k.name for k in self.keys()]})"


class Parameters:
    """
    Mixin for objects holding a WeightsSet (typically a model).
    """

    _parameters: Optional[WeightsSet] = None

    @property
    def parameters(self) -> WeightsSet:
        if self._parameters is None:
            self._parameters = WeightsSet()
        return self._parameters

    def new_weights(self, name: str, shape_or_tensor: Any) -> Weights:
        """Create weights registered in this object's WeightsSet."""
        return self.parameters.new_weights(name, shape_or_tensor)
