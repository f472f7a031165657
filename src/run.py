from __future__ import annotations

import argparse
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable

from tiny_slm import TinySLMEngine
from tiny_slm.settings import TinySLMSettings, load_settings

from helpers.resource_monitor import ResourceMonitor
from log_helpers import log, log_verbose

_EXIT_COMMANDS = {"quit", ":exit", ":quit"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Train a character-level context model on a text file and continue prompts with it."
    )
    parser.add_argument("training_file", help="Text corpus used to train the model.")
    parser.add_argument(
        "prompt",
        nargs="?",
        help="Single prompt to continue. If omitted an interactive shell starts.",
    )
    parser.add_argument(
        "--max-order",
        type=int,
        default=None,
        help="Longest context length considered while training and sampling (default: TINYSLM_MAX_ORDER or 4).",
    )
    parser.add_argument(
        "--max-chars",
        type=int,
        default=None,
        help="Maximum characters generated per prompt (default: TINYSLM_MAX_CHARS or 300).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the model RNG for reproducible output (default: system entropy).",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Optional .env file with TINYSLM_* overrides (default: %(default)s).",
    )
    parser.add_argument(
        "--profile-ingest",
        action="store_true",
        help="Log training latency together with RSS/CPU usage.",
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help="Optional limit for prompts answered in interactive mode (default: unlimited).",
    )
    return parser


def resolve_training_file(raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"No such file: {path}")
    if path.stat().st_size == 0:
        raise ValueError(f"Training file is empty: {path}")
    return path


def apply_overrides(settings: TinySLMSettings, args: argparse.Namespace) -> TinySLMSettings:
    overrides: dict[str, int] = {}
    if args.max_order is not None:
        overrides["max_order"] = args.max_order
    if args.max_chars is not None:
        overrides["max_chars"] = args.max_chars
    if not overrides:
        return settings
    return replace(settings, **overrides)


class TrainingProgressPrinter:
    """Provides throttle-controlled training progress logs."""

    def __init__(self, label: str, min_interval: float = 0.75) -> None:
        self.label = label
        self.min_interval = min_interval
        self._last_emit: float | None = None

    def __call__(self, stage: str, completed: int, total: int) -> None:
        if total <= 0:
            return
        now = time.perf_counter()
        if stage != "complete" and self._last_emit is not None and (now - self._last_emit) < self.min_interval:
            return
        self._last_emit = now
        pct = min(100.0, (completed / total) * 100.0)
        log(f"[train] {self.label}: {stage} {pct:6.2f}% ({completed}/{total} bytes)")


class IngestProfiler:
    """Optional profiler that logs ingest latency together with resource telemetry."""

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled
        self.monitor = ResourceMonitor() if enabled else None

    def measure(self, label: str, fn: Callable[[], int]) -> int:
        if not self.monitor:
            return fn()
        before = self.monitor.snapshot()
        start = time.perf_counter()
        accepted = fn()
        duration = time.perf_counter() - start
        delta = self.monitor.delta(before, self.monitor.snapshot())
        log(f"[profile] {label}: {accepted} chars in {duration:.2f}s {self.monitor.describe(delta)}")
        return accepted


def respond_once(engine: TinySLMEngine, prompt: str) -> str:
    continuation = engine.respond(prompt)
    log(f"user> {prompt}")
    log(f"model> {prompt}{continuation}")
    return continuation


def interactive_loop(
    engine: TinySLMEngine,
    max_turns: int | None = None,
    read_line: Callable[[str], str] = input,
) -> int:
    log("[run] Type 'quit' or press Ctrl+D to leave.")
    turns = 0
    while max_turns is None or turns < max_turns:
        try:
            user_input = read_line("prompt> ").strip()
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            log("[run] Interrupted. Exiting.")
            print()
            break
        if not user_input:
            continue
        if user_input in _EXIT_COMMANDS:
            break
        respond_once(engine, user_input)
        turns += 1
    log(f"[run] Session closed after {turns} prompt(s).")
    return turns


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    log_verbose(3, f"[run:v3] Parsed CLI arguments: {vars(args)}")
    try:
        settings = apply_overrides(load_settings(args.env_file), args)
        training_file = resolve_training_file(args.training_file)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))
    if settings.env_file is not None:
        log_verbose(3, f"[run:v3] Loaded overrides from {settings.env_file}")

    engine = TinySLMEngine(settings=settings, seed=args.seed)
    if args.seed is not None:
        log(f"[seed] Model RNG initialized with seed={args.seed}")
    try:
        label = training_file.name
        log(f"[train] Processing {training_file} ({training_file.stat().st_size} bytes, order={engine.max_order})...")
        reporter = TrainingProgressPrinter(label)
        profiler = IngestProfiler(args.profile_ingest)
        accepted = profiler.measure(
            label,
            lambda: engine.train_from_file(training_file, progress_callback=reporter),
        )
        log(f"[train] Training complete: {accepted} characters accepted.")
        log(f"[train] Model stats -> {engine.stats().describe()}")

        if args.prompt:
            respond_once(engine, args.prompt)
        else:
            interactive_loop(engine, args.max_turns)
    finally:
        engine.close()
        log("[run] Goodbye!")


if __name__ == "__main__":
    main()
