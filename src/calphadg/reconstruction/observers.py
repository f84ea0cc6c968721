# src/calphadg/reconstruction/observers.py

"""Observers for collecting diagnostics during reconstruction."""

from abc import ABC, abstractmethod
from typing import Any, Dict

import numpy as np

from calphadg.evaluation.metrics.violations import bound_violations
from calphadg.geometry.internal import check_backbone
from calphadg.utils.constants import BOUNDS_MARGIN, DIST_CHAIN_BREAK


class Observer(ABC):
    """Base class for reconstruction observers."""

    @abstractmethod
    def update(self, model: int, R: np.ndarray, **kwargs):
        """Update observer with a newly embedded model."""

    @abstractmethod
    def get_results(self) -> Dict[str, Any]:
        """Return collected data."""

    def reset(self):
        """Reset observer state."""


class ViolationObserver(Observer):
    """Count realized distances outside the all-pairs bounds.

    Purely informational: models are never discarded.
    """

    def __init__(self, margin: float = BOUNDS_MARGIN):
        self.margin = margin
        self.models = []
        self.below = []
        self.above = []

    def update(self, model: int, R: np.ndarray, bounds=None, **kwargs):
        if bounds is None:
            return
        below, above = bound_violations(R, bounds, self.margin)
        self.models.append(model)
        self.below.append(below)
        self.above.append(above)

    def get_results(self) -> Dict[str, Any]:
        return {
            "violation_models": self.models,
            "violations_below": self.below,
            "violations_above": self.above,
            "violations": [b + a for b, a in zip(self.below, self.above)],
        }

    def reset(self):
        self.models = []
        self.below = []
        self.above = []


class EmbeddingObserver(Observer):
    """Track eigenvalues and metrization clamps of each draw."""

    def __init__(self):
        self.eigenvalues = []
        self.negative_eigenvalues = []
        self.metrization_violations = []
        self.mirrored = []

    def update(self, model: int, R: np.ndarray, embedder=None, metrization=None, mirrored: bool = False, **kwargs):
        if embedder is not None:
            self.eigenvalues.append(np.array(embedder.eigenvalues))
            self.negative_eigenvalues.append(embedder.has_negative_eigenvalues)
        self.metrization_violations.append(metrization.violations if metrization is not None else 0)
        self.mirrored.append(mirrored)

    def get_results(self) -> Dict[str, Any]:
        return {
            "eigenvalues": self.eigenvalues,
            "negative_eigenvalues": self.negative_eigenvalues,
            "metrization_violations": self.metrization_violations,
            "mirrored": self.mirrored,
        }

    def reset(self):
        self.eigenvalues = []
        self.negative_eigenvalues = []
        self.metrization_violations = []
        self.mirrored = []


class BackboneObserver(Observer):
    """Track Cα spacing and chain breaks of each embedding."""

    def __init__(self, max_jump: float = DIST_CHAIN_BREAK):
        self.max_jump = max_jump
        self.mean_bond = []
        self.chain_breaks = []

    def update(self, model: int, R: np.ndarray, **kwargs):
        check = check_backbone(R, max_jump=self.max_jump)
        bonds = check["bond_lengths"]
        self.mean_bond.append(bonds["mean"] if bonds else 0.0)
        self.chain_breaks.append(check["chain_breaks"])

    def get_results(self) -> Dict[str, Any]:
        return {
            "mean_bond_length": self.mean_bond,
            "chain_breaks": self.chain_breaks,
        }

    def reset(self):
        self.mean_bond = []
        self.chain_breaks = []
