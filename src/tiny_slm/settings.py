from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict

from .alphabet import ASCII_END, ASCII_START, FALLBACK_ALPHABET, FILL_CHAR, AlphabetConfig
from .generator import GeneratorConfig
from .sampler import EscapePolicy


def _parse_env_file(path: Path) -> Dict[str, str]:
    """Minimal .env parser (no external dependency required)."""
    data: dict[str, str] = {}
    if not path.exists():
        return data
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip('"').strip("'")
    return data


@dataclass(frozen=True)
class TinySLMSettings:
    max_order: int = 4
    ascii_start: int = ASCII_START
    ascii_end: int = ASCII_END
    fill_char: str = FILL_CHAR
    fallback_alphabet: str = FALLBACK_ALPHABET
    escape_base: float = 0.1
    escape_per_order: float = 0.2
    max_chars: int = 300
    min_sentence: int = 20
    max_sentence: int = 200
    stop_odds: int = 3
    progress_interval: int = 10000
    read_chunk_size: int = 8192
    env_file: Path | None = None

    def __post_init__(self) -> None:
        if self.max_order < 0:
            raise ValueError(f"max_order must be >= 0 (got {self.max_order})")
        if self.progress_interval < 1:
            raise ValueError(f"progress_interval must be >= 1 (got {self.progress_interval})")
        if self.read_chunk_size < 1:
            raise ValueError(f"read_chunk_size must be >= 1 (got {self.read_chunk_size})")
        # Surface range/alphabet/coefficient problems while loading, not at first use.
        self.alphabet()
        self.escape_policy()
        self.generator_config()

    def alphabet(self) -> AlphabetConfig:
        return AlphabetConfig(
            start=self.ascii_start,
            end=self.ascii_end,
            fill_char=self.fill_char,
            fallback=self.fallback_alphabet,
        )

    def escape_policy(self) -> EscapePolicy:
        return EscapePolicy(base=self.escape_base, per_order=self.escape_per_order)

    def generator_config(self) -> GeneratorConfig:
        return GeneratorConfig(
            max_chars=self.max_chars,
            min_sentence=self.min_sentence,
            max_sentence=self.max_sentence,
            stop_odds=self.stop_odds,
        )


def load_settings(env_path: str | Path = ".env") -> TinySLMSettings:
    """Load TinySLM settings from .env (if present) + real environment."""
    env_file = Path(env_path)
    file_values = _parse_env_file(env_file)

    def read(key: str, default: str) -> str:
        return os.environ.get(key, file_values.get(key, default))

    def read_int(key: str, default: int) -> int:
        raw = read(key, str(default)).strip()
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be an integer (got {raw!r})") from exc

    def read_float(key: str, default: float) -> float:
        raw = read(key, str(default)).strip()
        try:
            return float(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be a number (got {raw!r})") from exc

    env_file_used = env_file if env_file.exists() else None
    return TinySLMSettings(
        max_order=read_int("TINYSLM_MAX_ORDER", 4),
        ascii_start=read_int("TINYSLM_ASCII_START", ASCII_START),
        ascii_end=read_int("TINYSLM_ASCII_END", ASCII_END),
        fill_char=read("TINYSLM_FILL_CHAR", FILL_CHAR),
        fallback_alphabet=read("TINYSLM_FALLBACK_ALPHABET", FALLBACK_ALPHABET),
        escape_base=read_float("TINYSLM_ESCAPE_BASE", 0.1),
        escape_per_order=read_float("TINYSLM_ESCAPE_PER_ORDER", 0.2),
        max_chars=read_int("TINYSLM_MAX_CHARS", 300),
        min_sentence=read_int("TINYSLM_MIN_SENTENCE", 20),
        max_sentence=read_int("TINYSLM_MAX_SENTENCE", 200),
        stop_odds=read_int("TINYSLM_STOP_ODDS", 3),
        progress_interval=read_int("TINYSLM_PROGRESS_INTERVAL", 10000),
        read_chunk_size=read_int("TINYSLM_READ_CHUNK_SIZE", 8192),
        env_file=env_file_used,
    )
