from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List

from .sampler import Sampler
from .trainer import Trainer

__all__ = ["GeneratorConfig", "Generator", "SENTENCE_TERMINATORS"]

SENTENCE_TERMINATORS = frozenset(".?!")


@dataclass(frozen=True)
class GeneratorConfig:
    max_chars: int = 300
    min_sentence: int = 20
    max_sentence: int = 200
    stop_odds: int = 3

    def __post_init__(self) -> None:
        if self.max_chars < 0:
            raise ValueError(f"max_chars must be >= 0 (got {self.max_chars})")
        if self.max_sentence < 0 or self.min_sentence < 0:
            raise ValueError("sentence length limits must be >= 0")
        if self.stop_odds < 1:
            raise ValueError(f"stop_odds must be >= 1 (got {self.stop_odds})")


class Generator:
    """Extends a prompt one sampled character at a time, learning from its own output."""

    def __init__(
        self,
        trainer: Trainer,
        sampler: Sampler,
        config: GeneratorConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.trainer = trainer
        self.sampler = sampler
        self.config = config or GeneratorConfig()
        self.rng = rng or sampler.rng

    def generate(self, prompt: str) -> str:
        """Seed the history with `prompt` and return the sampled continuation."""
        self.trainer.history.reset()
        self.trainer.observe_text(prompt)
        return self.continue_text()

    def continue_text(self) -> str:
        config = self.config
        pieces: List[str] = []
        length = 0
        for _ in range(config.max_chars):
            char = self.sampler.sample()
            pieces.append(char)
            self.trainer.update(char)
            if (
                char in SENTENCE_TERMINATORS
                and length > config.min_sentence
                and self.rng.randrange(config.stop_odds) == 0
            ):
                break
            length += 1
            if length > config.max_sentence:
                # Closing period is cosmetic and stays out of the model.
                pieces.append(".")
                break
        return "".join(pieces)
