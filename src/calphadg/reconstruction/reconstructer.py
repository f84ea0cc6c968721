# src/calphadg/reconstruction/reconstructer.py

"""Ensemble reconstruction from sparse distance bounds.

Each model is an independent draw: a distance matrix is sampled (or
metrized) from the cached all-pairs bounds and embedded in 3D.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

from calphadg.bounds.construction import bounds_from_contact_graph
from calphadg.bounds.matrix import AllPairsBoundsMatrix, SparseBoundsMatrix
from calphadg.bounds.smoothing import BoundsSmoother, MetrizationResult
from calphadg.data.contact_types import DEFAULT_LOOKUP, DistanceLookup
from calphadg.data.contacts import ContactGraphLike
from calphadg.embedding.embedder import Embedder, ScalingMethod
from calphadg.evaluation.metrics.rmsd import mirror, rmsd_with_mirror
from calphadg.evaluation.reporting import EnsembleEvaluator
from calphadg.reconstruction.base import BaseReconstructer, Ensemble, ReconstructionResult
from calphadg.utils.constants import BOUNDS_MARGIN, NUM_METRIZATION_ROOTS
from calphadg.utils.logging import ProgressBar, get_logger
from calphadg.utils.seed import SeedLike

logger = get_logger()


class Reconstructer(BaseReconstructer):
    """EMBED driver producing ensembles of Cα models.

    The all-pairs bounds are computed once, from a private copy of
    ``bounds``, when the reconstructer is created; the caller's matrix is
    left untouched and can be reused.

    Args:
        bounds: Sparse input bounds.
        rng: Generator (or seed) shared by every draw.
        hard_sphere_bound: Lower bound for undefined pairs.
        num_roots: Roots for partial metrization (None: full metrization).
        margin: Tolerance when comparing lower and upper bounds.
        masses: Optional per-point masses for the embedding.
        weights: Optional per-point weights for the embedding.
    """

    def __init__(
        self,
        bounds: SparseBoundsMatrix,
        rng: SeedLike = None,
        hard_sphere_bound: Optional[float] = None,
        num_roots: Optional[int] = NUM_METRIZATION_ROOTS,
        margin: float = BOUNDS_MARGIN,
        masses: Optional[Sequence[float]] = None,
        weights: Optional[Sequence[float]] = None,
    ):
        super().__init__()
        self.smoother = BoundsSmoother(
            bounds,
            rng=rng,
            hard_sphere_bound=hard_sphere_bound,
            num_roots=num_roots,
            margin=margin,
        )
        self.masses = masses
        self.weights = weights
        self.bounds_all_pairs: AllPairsBoundsMatrix = self.smoother.smooth()

    @classmethod
    def from_contact_graph(
        cls,
        graph: ContactGraphLike,
        lookup: DistanceLookup = DEFAULT_LOOKUP,
        **kwargs,
    ) -> "Reconstructer":
        """Build a reconstructer from a contact graph."""
        return cls(bounds_from_contact_graph(graph, lookup), **kwargs)

    @property
    def rng(self) -> np.random.Generator:
        return self.smoother.rng

    @property
    def size(self) -> int:
        return self.smoother.size

    @property
    def serials(self) -> Tuple[int, ...]:
        return self.bounds_all_pairs.serials

    def sample_distances(self, metrize: bool = True) -> Tuple[np.ndarray, Optional[MetrizationResult]]:
        """One distance matrix from the cached bounds.

        Returns:
            (distances, metrization) where ``metrization`` is None when
            plain uniform sampling was used.
        """
        if metrize:
            result = self.smoother.metrize()
            return result.distances, result
        return self.smoother.sample_bounds(), None

    def reconstruct(
        self,
        num_models: int,
        metrize: bool = True,
        scaling: Union[ScalingMethod, str] = ScalingMethod.RADGYRATION,
        should_stop: Optional[Callable[[], bool]] = None,
        reference: Optional[np.ndarray] = None,
        diagnostics: bool = False,
        progress: bool = False,
    ) -> ReconstructionResult:
        """Produce an ensemble of independent embeddings.

        Args:
            num_models: Number of models to draw.
            metrize: Use partial metrization instead of uniform sampling.
            scaling: Rescaling applied to each embedding.
            should_stop: Checked between completed models; when it returns
                True the models produced so far are returned.
            reference: Optional (N, 3) structure. Each model is replaced by
                its mirror image when that is closer to the reference.
            diagnostics: Attach a ReconstructionReport (bound violations,
                eigenvalue warnings, Rg, spacing) to the result.
            progress: Show an ASCII progress bar.

        Returns:
            ReconstructionResult holding the ensemble.
        """
        if num_models < 0:
            raise ValueError(f"num_models must be non-negative, got {num_models}")
        scaling = ScalingMethod.coerce(scaling)
        if reference is not None:
            reference = np.asarray(reference, dtype=np.float64)
            if reference.shape != (self.size, 3):
                raise ValueError(f"Reference must have shape ({self.size}, 3), got {reference.shape}")

        self._reset_observers()
        ensemble = Ensemble(serials=self.serials)
        negative_eigs = []
        cancelled = False
        bar = ProgressBar(num_models, prefix="Embedding") if progress else None

        logger.info(
            f"Reconstructing {num_models} models of {self.size} points "
            f"({'metrization' if metrize else 'uniform sampling'}, scaling={scaling.name})"
        )

        for model in range(num_models):
            if should_stop is not None and should_stop():
                logger.info(f"Reconstruction stopped after {len(ensemble)} of {num_models} models")
                cancelled = True
                break

            distances, metrization = self.sample_distances(metrize)
            embedder = Embedder(distances**2, masses=self.masses, weights=self.weights)
            coords = embedder.embed(scaling)

            mirrored = False
            if reference is not None:
                rmsd, rmsd_mirror = rmsd_with_mirror(coords, reference)
                if rmsd_mirror < rmsd:
                    coords = mirror(coords)
                    mirrored = True
                logger.debug(f"model {model + 1}: rmsd={min(rmsd, rmsd_mirror):.3f}")

            ensemble.append(coords)
            negative_eigs.append(embedder.has_negative_eigenvalues)
            self._notify_observers(
                model,
                coords,
                bounds=self.bounds_all_pairs,
                embedder=embedder,
                metrization=metrization,
                mirrored=mirrored,
            )
            if bar is not None:
                bar.update()
        if bar is not None:
            bar.close()

        result = ReconstructionResult(
            ensemble=ensemble,
            bounds=self.bounds_all_pairs,
            cancelled=cancelled,
            metadata={
                "num_models": num_models,
                "metrize": metrize,
                "scaling": scaling.name,
                **self._gather_observer_data(),
            },
        )

        if diagnostics:
            result.report = EnsembleEvaluator(margin=self.smoother.margin).evaluate(
                ensemble.models,
                self.bounds_all_pairs,
                reference=reference,
                negative_eigenvalues=negative_eigs,
            )
            if len(ensemble):
                logger.info(
                    f"Mean bound violations per model: {result.report.violations.mean():.1f}"
                )

        logger.info(f"Reconstruction complete: {len(ensemble)} models")
        return result
