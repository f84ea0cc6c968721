# src/calphadg/reconstruction/base.py

"""Base classes for ensemble reconstruction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

import numpy as np
import torch

from calphadg.bounds.matrix import AllPairsBoundsMatrix
from calphadg.evaluation.reporting import ReconstructionReport


@dataclass
class Ensemble:
    """Independently embedded models for one bounds matrix.

    Model rows are indexed like the bounds matrix; ``serials`` maps each
    row back to its residue serial.
    """

    serials: Sequence[int]
    models: List[np.ndarray] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.models)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.models)

    def __getitem__(self, idx: int) -> np.ndarray:
        return self.models[idx]

    def append(self, coords: np.ndarray) -> None:
        coords = np.asarray(coords, dtype=np.float64)
        if coords.shape != (len(self.serials), 3):
            raise ValueError(f"Expected ({len(self.serials)}, 3) coordinates, got {coords.shape}")
        self.models.append(coords)

    @property
    def n_atoms(self) -> int:
        return len(self.serials)

    def to_numpy(self) -> np.ndarray:
        """Stack models into an (n_models, N, 3) array."""
        return np.stack(self.models) if self.models else np.zeros((0, self.n_atoms, 3))

    def to_tensor(self, dtype: torch.dtype = torch.float32) -> torch.Tensor:
        """Stack models into an (n_models, N, 3) tensor."""
        return torch.as_tensor(self.to_numpy(), dtype=dtype)

    def coords_by_serial(self, idx: int) -> Dict[int, np.ndarray]:
        """Coordinates of one model keyed by residue serial."""
        return {s: self.models[idx][i] for i, s in enumerate(self.serials)}


@dataclass
class ReconstructionResult:
    """Result of a reconstruction run."""

    ensemble: Ensemble
    bounds: AllPairsBoundsMatrix
    cancelled: bool = False
    report: Optional[ReconstructionReport] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_models(self) -> int:
        return len(self.ensemble)

    @property
    def n_atoms(self) -> int:
        return self.ensemble.n_atoms


class BaseReconstructer(ABC):
    """Abstract base class for ensemble reconstruction."""

    def __init__(self):
        self.observers = []

    @abstractmethod
    def reconstruct(self, num_models: int, **kwargs) -> ReconstructionResult:
        """Produce ``num_models`` independent embeddings."""

    def add_observer(self, observer):
        """Add an observer to collect data for every model."""
        self.observers.append(observer)

    def clear_observers(self):
        """Remove all observers."""
        self.observers = []

    def _reset_observers(self):
        for obs in self.observers:
            obs.reset()

    def _notify_observers(self, model: int, R: np.ndarray, **kwargs):
        """Notify all observers of a new model."""
        for obs in self.observers:
            obs.update(model, R, **kwargs)

    def _gather_observer_data(self) -> Dict[str, Any]:
        """Gather data from all observers."""
        data = {}
        for obs in self.observers:
            data.update(obs.get_results())
        return data
