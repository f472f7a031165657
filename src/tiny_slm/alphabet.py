from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

ASCII_START = 32
ASCII_END = 126
FILL_CHAR = " "
FALLBACK_ALPHABET = "etaoinshrdlcumwfgypbvkjxqz ETAOINSHRDLCUMWFGYPBVKJXQZ.,!?;:"
_WHITESPACE_FOLD = {ord("\n"), ord("\t")}

__all__ = [
    "ASCII_START",
    "ASCII_END",
    "FILL_CHAR",
    "FALLBACK_ALPHABET",
    "AlphabetConfig",
    "normalize_byte",
]


@dataclass(frozen=True)
class AlphabetConfig:
    """Printable character range accepted by the model plus the fallback draw set."""

    start: int = ASCII_START
    end: int = ASCII_END
    fill_char: str = FILL_CHAR
    fallback: str = FALLBACK_ALPHABET

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= 255:
            raise ValueError(f"invalid ASCII range {self.start}..{self.end}")
        if not self.fallback:
            raise ValueError("fallback alphabet must not be empty")
        for char in self.fallback:
            if not self.contains(char):
                raise ValueError(
                    f"fallback character {char!r} is outside {self.start}..{self.end}; "
                    "override the fallback alphabet (TINYSLM_FALLBACK_ALPHABET) to match the range"
                )
        if len(self.fill_char) != 1 or not self.contains(self.fill_char):
            raise ValueError(
                f"fill character {self.fill_char!r} must be a single character inside "
                f"{self.start}..{self.end}; override it (TINYSLM_FILL_CHAR) to match the range"
            )

    @property
    def fold_char(self) -> str:
        """Replacement for newlines and tabs: a space when allowed, else the fill character."""
        return " " if self.contains(" ") else self.fill_char

    def contains(self, char: str) -> bool:
        return len(char) == 1 and self.start <= ord(char) <= self.end

    def normalize(self, value: int) -> str | None:
        return normalize_byte(value, self.start, self.end, fold=self.fold_char)

    def normalize_text(self, text: str) -> Iterator[str]:
        """Yield the accepted characters of `text`, folding newlines and tabs."""
        for char in text:
            normalized = self.normalize(ord(char))
            if normalized is not None:
                yield normalized


def normalize_byte(
    value: int,
    start: int = ASCII_START,
    end: int = ASCII_END,
    *,
    fold: str = " ",
) -> str | None:
    """
    Map a raw byte to a model character.

    Newline and tab fold to `fold` (a space by default), bytes inside the range
    pass through, anything else returns None and must be skipped by the caller.
    """
    if value in _WHITESPACE_FOLD:
        return fold
    if start <= value <= end:
        return chr(value)
    return None
