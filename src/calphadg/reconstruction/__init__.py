# src/calphadg/reconstruction/__init__.py

"""Ensemble reconstruction: repeated sampling and embedding."""

from calphadg.reconstruction.base import BaseReconstructer, Ensemble, ReconstructionResult
from calphadg.reconstruction.observers import BackboneObserver, EmbeddingObserver, Observer, ViolationObserver
from calphadg.reconstruction.reconstructer import Reconstructer

__all__ = [
    "BaseReconstructer",
    "Reconstructer",
    "Ensemble",
    "ReconstructionResult",
    "Observer",
    "ViolationObserver",
    "EmbeddingObserver",
    "BackboneObserver",
]
