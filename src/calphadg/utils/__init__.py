# src/calphadg/utils/__init__.py

"""Shared utilities: constants, logging, seeding, math helpers."""

from calphadg.utils.logging import ProgressBar, get_logger, set_log_level, setup_logger
from calphadg.utils.seed import make_rng, seed_all, spawn_rngs

__all__ = [
    "setup_logger",
    "get_logger",
    "set_log_level",
    "ProgressBar",
    "make_rng",
    "spawn_rngs",
    "seed_all",
]
