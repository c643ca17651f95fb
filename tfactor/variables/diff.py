"""
tfactor/variables/diff.py

Reversible mutation history.

A Diff records one variable's transition old -> new. A DiffList is an
ordered, append-only batch of Diffs forming one proposed change; undo_all
reverts the batch in reverse order, redo_all reapplies it in order.

Neither class guards against misuse: undoing twice, or mutating a recorded
variable through an unrecorded path in between, is a caller error.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List

logger = logging.getLogger(__name__)


class Diff:
    """A single recorded value change."""

    __slots__ = ("variable", "old", "new")

    def __init__(self, variable: Any, old: Any, new: Any):
        self.variable = variable
        self.old = old
        self.new = new

    def undo(self) -> None:
        """Restore the old value (unrecorded)."""
        self.variable.set_value(self.old)

    def redo(self) -> None:
        """Reapply the new value (unrecorded)."""
        self.variable.set_value(self.new)

    def __repr__(self) -> str:
        return f"Diff({self.variable!r}: {self.old!r} -> {self.new!r})"


class DiffList:
    """
    Ordered list of Diffs for one atomic change.

    Holds references to variables, never ownership.

    Attributes:
        done: False after undo_all, True after redo_all (and initially)
    """

    def __init__(self):
        self._diffs: List[Diff] = []
        self.done = True

    def append(self, diff: Diff) -> None:
        self._diffs.append(diff)

    def undo_all(self) -> None:
        """Undo every Diff, last first."""
        logger.debug("Undoing %d diffs", len(self._diffs))
        for d in reversed(self._diffs):
            d.undo()
        self.done = False

    def redo_all(self) -> None:
        """Redo every Diff, first first."""
        logger.debug("Redoing %d diffs", len(self._diffs))
        for d in self._diffs:
            d.redo()
        self.done = True

    def variables(self) -> List[Any]:
        """Changed variables, unique, in order of first change."""
        seen = set()
        out = []
        for d in self._diffs:
            if id(d.variable) not in seen:
                seen.add(id(d.variable))
                out.append(d.variable)
        return out

    def score(self, model: Any) -> float:
        """Current total score of the factors of model touching the changed variables."""
        return model.current_score(self)

    def score_and_undo(self, model: Any) -> float:
        """
        Undo the change and report its effect on the model score.

        The same factors are scored before and after undoing, so the
        result is score(changed) - score(original).

        Args:
            model: Factor source with a factors(variables) method

        Returns:
            Score difference attributable to this DiffList
        """
        if not self._diffs:
            return 0.0
        factors = model.factors(self)
        after = sum(f.current_score() for f in factors)
        self.undo_all()
        before = sum(f.current_score() for f in factors)
        return after - before

    def __len__(self) -> int:
        return len(self._diffs)

    def __iter__(self) -> Iterator[Diff]:
        return iter(self._diffs)

    def __getitem__(self, i: int) -> Diff:
        return self._diffs[i]

    def __bool__(self) -> bool:
        return bool(self._diffs)

    def __repr__(self) -> str:
        return f"DiffList({len(self._diffs)} diffs, done={self.done})"
