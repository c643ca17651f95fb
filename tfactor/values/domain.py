"""
tfactor/values/domain.py

Domains and values.

A Domain describes the legal values of a variable. Enumerable domains
(DiscreteDomain and its subclasses) additionally maintain a bijection
between the index range [0, size) and their values:

  - DiscreteDomain: fixed size, values are bare indices
  - CategoricalDomain: growable index <-> category mapping, can be frozen
  - BooleanDomain: the two categories False (0) and True (1), always frozen

Non-enumerable domains (Domain, RealDomain, TensorDomain) report size() None.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from tfactor.config import get_config
from tfactor.errors import DomainFrozenError

logger = logging.getLogger(__name__)


class Domain:
    """
    Non-enumerable value set, optionally restricted to a Python type.

    Attributes:
        value_type: Accepted type (or tuple of types), None accepts anything
        name: Optional label used in repr
    """

    def __init__(self, value_type: Any = None, name: Optional[str] = None):
        self.value_type = value_type
        self.name = name

    def size(self) -> Optional[int]:
        """Number of values, or None when the domain is not enumerable."""
        return None

    @property
    def enumerable(self) -> bool:
        return self.size() is not None

    def contains(self, value: Any) -> bool:
        if self.value_type is None:
            return True
        return isinstance(value, self.value_type)

    def __repr__(self) -> str:
        label = self.name or type(self).__name__
        return f"{label}(type={getattr(self.value_type, '__name__', self.value_type)})"


class RealDomain(Domain):
    """Real scalars."""

    def __init__(self, name: Optional[str] = None):
        super().__init__((int, float, np.floating, np.integer), name=name)


class TensorDomain(Domain):
    """Numpy arrays, optionally of a fixed shape."""

    def __init__(self, shape: Optional[Tuple[int, ...]] = None, name: Optional[str] = None):
        super().__init__(np.ndarray, name=name)
        self.shape = None if shape is None else tuple(shape)

    def contains(self, value: Any) -> bool:
        if not isinstance(value, np.ndarray):
            return False
        return self.shape is None or value.shape == self.shape


class DiscreteValue:
    """
    Immutable member of a DiscreteDomain identified by its integer index.

    Two values are equal iff they belong to the same domain instance and
    have the same index.
    """

    __slots__ = ("index", "domain")

    def __init__(self, index: int, domain: "DiscreteDomain"):
        object.__setattr__(self, "index", int(index))
        object.__setattr__(self, "domain", domain)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def int_value(self) -> int:
        return self.index

    def tensor(self, dtype: Any = None) -> np.ndarray:
        """One-hot vector of length domain.size()."""
        out = np.zeros(self.domain.size(), dtype=dtype or get_config().dtype)
        out[self.index] = 1.0
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscreteValue):
            return NotImplemented
        return self.domain is other.domain and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.domain), self.index))

    def __int__(self) -> int:
        return self.index

    def __repr__(self) -> str:
        return f"DiscreteValue({self.index})"


class CategoricalValue(DiscreteValue):
    """DiscreteValue paired 1:1 with a category label within its domain."""

    __slots__ = ("category",)

    def __init__(self, index: int, domain: "CategoricalDomain", category: Hashable):
        super().__init__(index, domain)
        object.__setattr__(self, "category", category)

    @property
    def category_value(self) -> Hashable:
        return self.category

    def __repr__(self) -> str:
        return f"CategoricalValue({self.index}, {self.category!r})"


class DiscreteDomain(Domain):
    """
    Enumerable domain of `size` values indexed 0..size-1.

    Values are created once and cached, so value(i) always returns the
    same object.
    """

    def __init__(self, size: int, name: Optional[str] = None):
        super().__init__(DiscreteValue, name=name)
        if size < 0:
            raise ValueError(f"Domain size must be non-negative, got {size}")
        self._size = int(size)
        self._values: List[DiscreteValue] = [DiscreteValue(i, self) for i in range(self._size)]

    def size(self) -> int:
        return self._size

    def value(self, index: int) -> DiscreteValue:
        """Return the value at index."""
        index = int(index)
        if not 0 <= index < self.size():
            raise IndexError(f"Index {index} out of range for {self!r}")
        return self._values[index]

    def index(self, value: Any) -> int:
        """Return the index of a value of this domain (ints pass through range-checked)."""
        if isinstance(value, DiscreteValue):
            if value.domain is not self:
                raise ValueError(f"{value!r} belongs to a different domain")
            return value.index
        return self.value(value).index

    def values(self) -> List[DiscreteValue]:
        return list(self._values[: self.size()])

    def contains(self, value: Any) -> bool:
        return isinstance(value, DiscreteValue) and value.domain is self

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[DiscreteValue]:
        return iter(self.values())

    def __repr__(self) -> str:
        label = self.name or type(self).__name__
        return f"{label}(size={self.size()})"


class CategoricalDomain(DiscreteDomain):
    """
    Growable bijection between categories and indices.

    Unknown categories are interned on demand and receive the next free
    index, unless the domain is frozen, in which case DomainFrozenError is
    raised. Interning is serialized by a lock; reads of known categories
    are lock-free.
    """

    def __init__(self, categories: Iterable[Hashable] = (), frozen: bool = False, name: Optional[str] = None):
        super().__init__(0, name=name)
        self.value_type = CategoricalValue
        self._categories: List[Hashable] = []
        self._indices: Dict[Hashable, int] = {}
        self._values: List[CategoricalValue] = []
        self._lock = threading.Lock()
        self._frozen = False
        for c in categories:
            self.intern(c)
        if frozen:
            self.freeze()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "CategoricalDomain":
        """Disallow further growth."""
        self._frozen = True
        logger.info("Froze %r", self)
        return self

    def unfreeze(self) -> "CategoricalDomain":
        self._frozen = False
        return self

    def size(self) -> int:
        return len(self._categories)

    def intern(self, category: Hashable) -> int:
        """
        Return the index of category, allocating the next index if unseen.

        Raises:
            DomainFrozenError: if the category is unknown and the domain is frozen
        """
        idx = self._indices.get(category)
        if idx is not None:
            return idx
        with self._lock:
            idx = self._indices.get(category)
            if idx is not None:
                return idx
            if self._frozen:
                raise DomainFrozenError(category, self)
            idx = len(self._categories)
            self._categories.append(category)
            self._values.append(CategoricalValue(idx, self, category))
            self._indices[category] = idx
        logger.debug("Interned %r as %d in %r", category, idx, self)
        return idx

    def lookup(self, category: Hashable) -> Optional[int]:
        """Index of a known category, or None; never grows the domain."""
        return self._indices.get(category)

    def index(self, category: Any) -> int:
        """Index of a CategoricalValue of this domain or of a category (interned if new)."""
        if isinstance(category, DiscreteValue):
            return super().index(category)
        return self.intern(category)

    def value(self, index_or_category: Any) -> CategoricalValue:
        """
        Value at an index or for a category.

        An int that is not itself a known category is taken as an index;
        anything else is a category, interned if new.
        """
        if isinstance(index_or_category, DiscreteValue):
            self.index(index_or_category)
            return index_or_category
        if (
            isinstance(index_or_category, (int, np.integer))
            and not isinstance(index_or_category, bool)
            and index_or_category not in self._indices
        ):
            return self.value_at(index_or_category)
        return self.value_for(index_or_category)

    def value_at(self, index: int) -> CategoricalValue:
        """Value at index, never read as a category."""
        return super().value(index)

    def category(self, index: int) -> Hashable:
        return self.value_at(index).category

    def value_for(self, category: Hashable) -> CategoricalValue:
        """Value for a category, interning it if new."""
        return self._values[self.intern(category)]

    def categories(self) -> List[Hashable]:
        return list(self._categories)

    def items(self) -> List[Tuple[int, Hashable]]:
        """(index, category) pairs in index order."""
        return list(enumerate(self._categories))

    def __contains__(self, category: Hashable) -> bool:
        return category in self._indices

    def __repr__(self) -> str:
        label = self.name or type(self).__name__
        state = ", frozen" if self._frozen else ""
        return f"{label}(size={self.size()}{state})"


class BooleanDomain(CategoricalDomain):
    """False at index 0, True at index 1."""

    def __init__(self, name: Optional[str] = None):
        super().__init__((False, True), frozen=True, name=name)

    def intern(self, category: Hashable) -> int:
        return super().intern(bool(category))

    def value(self, index_or_category: Any) -> CategoricalValue:
        if isinstance(index_or_category, DiscreteValue):
            return super().value(index_or_category)
        return self.value_for(index_or_category)


boolean_domain = BooleanDomain(name="BooleanDomain")
