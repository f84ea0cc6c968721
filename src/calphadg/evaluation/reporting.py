# src/calphadg/evaluation/reporting.py

"""High-level reconstruction reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from calphadg.bounds.matrix import AllPairsBoundsMatrix
from calphadg.evaluation.metrics.rg import batch_rg, radius_of_gyration
from calphadg.evaluation.metrics.rmsd import rmsd_with_mirror
from calphadg.evaluation.metrics.violations import bound_violations
from calphadg.utils.constants import BOUNDS_MARGIN


@dataclass
class ReconstructionReport:
    """Evaluation results for an ensemble of embeddings."""

    # Basic info
    n_models: int
    n_atoms: int
    reference_label: Optional[str] = None

    # Bounds fidelity, per model
    violations_below: np.ndarray = field(default_factory=lambda: np.array([], dtype=int))
    violations_above: np.ndarray = field(default_factory=lambda: np.array([], dtype=int))
    negative_eigenvalues: np.ndarray = field(default_factory=lambda: np.array([], dtype=bool))

    # Geometry, per model
    rg_series: np.ndarray = field(default_factory=lambda: np.array([]))
    spacing_series: np.ndarray = field(default_factory=lambda: np.array([]))

    # Against reference, per model
    rg_ref: Optional[float] = None
    rmsd_series: np.ndarray = field(default_factory=lambda: np.array([]))
    rmsd_mirror_series: np.ndarray = field(default_factory=lambda: np.array([]))

    @property
    def violations(self) -> np.ndarray:
        return self.violations_below + self.violations_above

    @property
    def best_rmsd(self) -> np.ndarray:
        """Per-model RMSD to the closer enantiomer of the reference."""
        if self.rmsd_series.size == 0:
            return self.rmsd_series
        return np.minimum(self.rmsd_series, self.rmsd_mirror_series)

    def summary(self) -> str:
        """Return human-readable summary."""
        lines = []
        lines.append("=" * 60)
        lines.append("Reconstruction Summary")
        lines.append("=" * 60)
        lines.append(f"Models: {self.n_models}")
        lines.append(f"Atoms: {self.n_atoms}")
        if self.n_models == 0:
            lines.append("=" * 60)
            return "\n".join(lines)

        lines.append("")
        total = self.violations
        lines.append(
            f"Bound violations: {total.mean():.1f} +/- {total.std():.1f} "
            f"(below {self.violations_below.mean():.1f}, above {self.violations_above.mean():.1f})"
        )
        lines.append(f"Models with negative eigenvalues: {int(self.negative_eigenvalues.sum())}")
        lines.append("")
        lines.append(f"Rg_mean: {self.rg_series.mean():.3f} +/- {self.rg_series.std():.3f} A")
        lines.append(f"CA-CA spacing: {self.spacing_series.mean():.3f} +/- {self.spacing_series.std():.3f} A")
        if self.rmsd_series.size > 0:
            best = self.best_rmsd
            lines.append("")
            lines.append(f"Reference: {self.reference_label}")
            lines.append(f"Rg_ref: {self.rg_ref:.3f} A")
            lines.append(f"RMSD_mean: {best.mean():.3f} +/- {best.std():.3f} A")
            lines.append(f"RMSD_min: {best.min():.3f} A (model {int(best.argmin()) + 1})")
        lines.append("=" * 60)

        return "\n".join(lines)


def _mean_spacing(R: np.ndarray) -> float:
    if len(R) < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(R, axis=0), axis=1).mean())


class EnsembleEvaluator:
    """Evaluate embeddings against the bounds they came from."""

    def __init__(self, margin: float = BOUNDS_MARGIN):
        self.margin = margin

    def evaluate(
        self,
        models: Sequence[np.ndarray],
        bounds: AllPairsBoundsMatrix,
        reference: Optional[np.ndarray] = None,
        reference_label: str = "reference",
        negative_eigenvalues: Optional[Sequence[bool]] = None,
    ) -> ReconstructionReport:
        """Build a report for an ensemble.

        Args:
            models: Embeddings, each (N, 3), indexed like ``bounds``.
            bounds: All-pairs bounds the models were sampled from.
            reference: Optional (N, 3) reference structure.
            reference_label: Name shown in the summary.
            negative_eigenvalues: Per-model embedding diagnostic flags.
        """
        models = [np.asarray(m, dtype=np.float64) for m in models]
        n_models = len(models)

        counts = np.array([bound_violations(m, bounds, self.margin) for m in models], dtype=int).reshape(-1, 2)
        if negative_eigenvalues is None:
            negative_eigenvalues = [False] * n_models

        report = ReconstructionReport(
            n_models=n_models,
            n_atoms=bounds.size,
            violations_below=counts[:, 0],
            violations_above=counts[:, 1],
            negative_eigenvalues=np.asarray(negative_eigenvalues, dtype=bool),
            rg_series=batch_rg(models) if n_models else np.array([]),
            spacing_series=np.array([_mean_spacing(m) for m in models]),
        )

        if reference is not None:
            reference = np.asarray(reference, dtype=np.float64)
            pairs = np.array([rmsd_with_mirror(m, reference) for m in models]).reshape(-1, 2)
            report.reference_label = reference_label
            report.rg_ref = radius_of_gyration(reference)
            report.rmsd_series = pairs[:, 0]
            report.rmsd_mirror_series = pairs[:, 1]

        return report
