from __future__ import annotations

import random
from dataclasses import dataclass

from .alphabet import AlphabetConfig
from .store import ContextStore
from .trainer import History

__all__ = ["EscapePolicy", "Sampler"]


@dataclass(frozen=True)
class EscapePolicy:
    """Backoff odds: base + per_order * order / (total + 1)."""

    base: float = 0.1
    per_order: float = 0.2

    def __post_init__(self) -> None:
        if self.base < 0 or self.per_order < 0:
            raise ValueError(f"escape coefficients must be >= 0 (got {self.base}, {self.per_order})")

    def probability(self, order: int, total: int) -> float:
        return self.base + (self.per_order * order) / (total + 1)


class Sampler:
    """Draws the next character by walking contexts from the longest order down."""

    def __init__(
        self,
        store: ContextStore,
        history: History,
        *,
        escape: EscapePolicy | None = None,
        alphabet: AlphabetConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.history = history
        self.escape = escape or EscapePolicy()
        self.alphabet = alphabet or AlphabetConfig()
        self.rng = rng or random.Random()
        self.max_order = history.size

    def sample(self) -> str:
        for order in range(self.max_order, -1, -1):
            context = self.history.context(order)
            total = self.store.total_for(context)
            if not total:
                continue
            # Order 0 never escapes; it is the last table-backed draw.
            if order > 0 and self.rng.random() < self.escape.probability(order, total):
                continue
            choice = self._draw(context, total)
            if choice is not None:
                return choice
        return self.fallback()

    def fallback(self) -> str:
        return self.rng.choice(self.alphabet.fallback)

    def _draw(self, context: str, total: int) -> str | None:
        threshold = self.rng.randrange(total)
        cumulative = 0
        for char, count in self.store.counts_for(context):
            cumulative += count
            if threshold < cumulative:
                return char
        return None
