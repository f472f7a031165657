from __future__ import annotations

import random
from dataclasses import replace
from pathlib import Path
from typing import Callable

from .generator import Generator
from .sampler import Sampler
from .settings import TinySLMSettings, load_settings
from .store import ContextStore, StoreStats
from .trainer import History, Trainer

ProgressCallback = Callable[[str, int, int], None]


class TinySLMEngine:
    """Facilitates training + generation on a single in-memory context model."""

    def __init__(
        self,
        max_order: int | None = None,
        settings: TinySLMSettings | None = None,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        settings = settings or load_settings()
        if max_order is not None and max_order != settings.max_order:
            settings = replace(settings, max_order=max_order)
        self.settings = settings
        self.rng = rng or random.Random(seed)
        self.alphabet = settings.alphabet()
        self.store = ContextStore()
        self.history = History(settings.max_order, self.alphabet.fill_char)
        self.trainer = Trainer(self.store, self.history, self.alphabet)
        self.sampler = Sampler(
            self.store,
            self.history,
            escape=settings.escape_policy(),
            alphabet=self.alphabet,
            rng=self.rng,
        )
        self.generator = Generator(self.trainer, self.sampler, settings.generator_config(), rng=self.rng)

    @property
    def max_order(self) -> int:
        return self.settings.max_order

    # ------------------------------------------------------------------ #
    # Training utilities
    # ------------------------------------------------------------------ #
    def train_from_bytes(
        self,
        data: bytes,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> int:
        total = len(data)
        interval = self.settings.progress_interval

        def _report(accepted: int) -> None:
            if progress_callback and accepted % interval == 0:
                progress_callback("train", accepted, total)

        accepted = self.trainer.observe_bytes(data, on_accept=_report)
        if progress_callback:
            progress_callback("complete", accepted, total)
        return accepted

    def train_from_text(self, corpus: str, *, progress_callback: ProgressCallback | None = None) -> int:
        # Characters above 255 would be rejected by normalization anyway.
        return self.train_from_bytes(corpus.encode("latin-1", "ignore"), progress_callback=progress_callback)

    def train_from_file(
        self,
        path: str | Path,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> int:
        """Stream a corpus from disk in fixed-size chunks; returns the accepted character count."""
        source = Path(path).expanduser()
        file_size = source.stat().st_size
        chunk_size = self.settings.read_chunk_size
        interval = self.settings.progress_interval
        accepted = 0

        def _report(chunk_accepted: int) -> None:
            seen = accepted + chunk_accepted
            if progress_callback and seen % interval == 0:
                progress_callback("train", seen, file_size)

        with source.open("rb") as handle:
            while True:
                chunk = handle.read(chunk_size)
                if not chunk:
                    break
                accepted += self.trainer.observe_bytes(chunk, on_accept=_report)
        if progress_callback:
            progress_callback("complete", accepted, file_size)
        return accepted

    # ------------------------------------------------------------------ #
    # Generation
    # ------------------------------------------------------------------ #
    def respond(self, prompt: str) -> str:
        """Return the continuation generated after `prompt` (the prompt itself is not echoed)."""
        return self.generator.generate(prompt)

    def sample(self) -> str:
        return self.sampler.sample()

    def stats(self) -> StoreStats:
        return self.store.stats()

    def close(self) -> None:
        self.store.clear()
        self.history.reset()

    def __enter__(self) -> "TinySLMEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
