from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

__all__ = ["ContextStore", "StoreStats"]


@dataclass(frozen=True)
class StoreStats:
    contexts: int
    entries: int
    observations: int
    contexts_per_order: Dict[int, int] = field(default_factory=dict)

    def describe(self) -> str:
        orders = ",".join(f"{order}:{count}" for order, count in sorted(self.contexts_per_order.items()))
        return (
            f"contexts={self.contexts} entries={self.entries} "
            f"observations={self.observations} per_order=[{orders}]"
        )


class ContextStore:
    """
    Sparse frequency tables for every observed context up to the model order.

    Counts are grouped under their context key so sampling walks only the
    continuations seen after that context. A parallel totals table keeps the
    aggregate per context; both are bumped in the same `record` call.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, Dict[str, int]] = {}
        self._totals: Dict[str, int] = {}
        self._contexts_per_order: Counter[int] = Counter()

    def __len__(self) -> int:
        return len(self._totals)

    def __contains__(self, context: object) -> bool:
        return context in self._totals

    def record(self, order: int, context: str, next_char: str) -> None:
        continuations = self._counts.get(context)
        if continuations is None:
            continuations = {}
            self._counts[context] = continuations
            self._contexts_per_order[order] += 1
        continuations[next_char] = continuations.get(next_char, 0) + 1
        self._totals[context] = self._totals.get(context, 0) + 1

    def total_for(self, context: str) -> int | None:
        """Return the number of observations after `context`, or None when it was never seen."""
        return self._totals.get(context)

    def counts_for(self, context: str) -> Iterator[Tuple[str, int]]:
        """Yield (next_char, count) pairs in first-observed order."""
        continuations = self._counts.get(context)
        if not continuations:
            return iter(())
        return iter(continuations.items())

    def count(self, context: str, next_char: str) -> int:
        return self._counts.get(context, {}).get(next_char, 0)

    def contexts(self) -> Iterator[str]:
        return iter(self._totals)

    def stats(self) -> StoreStats:
        return StoreStats(
            contexts=len(self._totals),
            entries=sum(len(continuations) for continuations in self._counts.values()),
            observations=sum(self._totals.values()),
            contexts_per_order=dict(self._contexts_per_order),
        )

    def clear(self) -> None:
        self._counts.clear()
        self._totals.clear()
        self._contexts_per_order.clear()
