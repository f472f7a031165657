from __future__ import annotations

from typing import Callable, Iterable

from .alphabet import AlphabetConfig
from .store import ContextStore

__all__ = ["History", "Trainer"]


class History:
    """Sliding window over the last `size` accepted characters."""

    def __init__(self, size: int, fill_char: str = " ") -> None:
        if size < 0:
            raise ValueError(f"history size must be >= 0 (got {size})")
        self.size = size
        self.fill_char = fill_char
        self._chars = fill_char * size

    def __str__(self) -> str:
        return self._chars

    def __repr__(self) -> str:
        return f"History({self._chars!r})"

    def reset(self) -> None:
        self._chars = self.fill_char * self.size

    def context(self, order: int) -> str:
        """Return the trailing `order` characters (order 0 is the empty context)."""
        if order <= 0:
            return ""
        return self._chars[-order:]

    def push(self, char: str) -> None:
        if self.size:
            self._chars = self._chars[1:] + char


class Trainer:
    """Feeds normalized characters into the context tables and advances the history."""

    def __init__(
        self,
        store: ContextStore,
        history: History,
        alphabet: AlphabetConfig | None = None,
    ) -> None:
        self.store = store
        self.history = history
        self.alphabet = alphabet or AlphabetConfig()
        self.max_order = history.size

    def observe(self, raw_byte: int) -> str | None:
        """Normalize one raw byte and learn from it; returns None when the byte is rejected."""
        char = self.alphabet.normalize(raw_byte)
        if char is None:
            return None
        self.update(char)
        return char

    def update(self, char: str) -> None:
        # Every order sees the pre-update history before the window slides.
        for order in range(self.max_order + 1):
            self.store.record(order, self.history.context(order), char)
        self.history.push(char)

    def observe_bytes(
        self,
        data: Iterable[int],
        *,
        on_accept: Callable[[int], None] | None = None,
    ) -> int:
        accepted = 0
        for raw in data:
            if self.observe(raw) is None:
                continue
            accepted += 1
            if on_accept:
                on_accept(accepted)
        return accepted

    def observe_text(self, text: str) -> int:
        accepted = 0
        for char in self.alphabet.normalize_text(text):
            self.update(char)
            accepted += 1
        return accepted
