"""
tfactor/variables/relations.py

Relational structure among variables, traversed by template unrolling.

  - Chain: ordered sequence with prev/next links
  - Aligned: 1:1 pairing between two groups of variables

Membership is by variable identity.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple


class Chain:
    """
    Ordered sequence of variables.

    Appending a variable sets its `chain` attribute, so a seed variable
    alone is enough to find its neighbours in the sequence.
    """

    def __init__(self, variables: Iterable[Any] = (), name: Optional[str] = None):
        self.name = name
        self._items: List[Any] = []
        self._pos: Dict[int, int] = {}
        for v in variables:
            self.append(v)

    def append(self, v: Any) -> None:
        if v.chain is not None:
            raise ValueError(f"{v!r} already belongs to a chain")
        self._pos[id(v)] = len(self._items)
        self._items.append(v)
        v.chain = self

    def position(self, v: Any) -> Optional[int]:
        return self._pos.get(id(v))

    def prev(self, v: Any) -> Optional[Any]:
        """Variable before v, or None at the start."""
        i = self._pos[id(v)]
        return self._items[i - 1] if i > 0 else None

    def next(self, v: Any) -> Optional[Any]:
        """Variable after v, or None at the end."""
        i = self._pos[id(v)]
        return self._items[i + 1] if i + 1 < len(self._items) else None

    def adjacent_pairs(self) -> List[Tuple[Any, Any]]:
        return list(zip(self._items, self._items[1:]))

    def __contains__(self, v: Any) -> bool:
        return id(v) in self._pos

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __getitem__(self, i: int) -> Any:
        return self._items[i]

    def __repr__(self) -> str:
        return f"Chain({self.name or ''}, len={len(self._items)})"


class Aligned:
    """
    1:1 pairing of "left" and "right" variables, e.g. label <-> token.
    """

    def __init__(self, pairs: Iterable[Tuple[Any, Any]] = ()):
        self._left: Dict[int, Any] = {}
        self._right: Dict[int, Any] = {}
        for a, b in pairs:
            self.add(a, b)

    def add(self, left: Any, right: Any) -> None:
        if id(left) in self._left or id(right) in self._right:
            raise ValueError("Aligned relation is 1:1; variable already paired")
        self._left[id(left)] = right
        self._right[id(right)] = left

    def right_of(self, left: Any) -> Optional[Any]:
        return self._left.get(id(left))

    def left_of(self, right: Any) -> Optional[Any]:
        return self._right.get(id(right))

    def partner(self, v: Any) -> Optional[Any]:
        """The variable paired with v on either side, or None."""
        p = self._left.get(id(v))
        return p if p is not None else self._right.get(id(v))

    def __len__(self) -> int:
        return len(self._left)
