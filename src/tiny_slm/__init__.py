"""
Character-level adaptive context model (PPM-style backoff sampling).

    * store    — sparse per-context frequency tables for orders 0..max_order.
    * trainer  — byte normalization, sliding history and per-character updates.
    * sampler  — longest-context-first draw with escape probabilities and a fallback alphabet.

See pipeline.TinySLMEngine for the façade used by run.py.
"""

from .pipeline import TinySLMEngine
from .settings import TinySLMSettings, load_settings

__all__ = ["TinySLMEngine", "TinySLMSettings", "load_settings"]
