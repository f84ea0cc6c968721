# tests/test_integration.py

"""Integration tests for calphadg."""

import numpy as np
import pytest

from calphadg.bounds import bounds_from_contact_graph
from calphadg.data.contacts import contact_graph_from_coords
from calphadg.data.synthetic import make_hairpin, poly_ala
from calphadg.distill import Distiller, random_subset_errors
from calphadg.evaluation.metrics.rg import radius_of_gyration
from calphadg.evaluation.metrics.violations import count_violations
from calphadg.geometry.distances import pairwise_distances
from calphadg.reconstruction import BackboneObserver, EmbeddingObserver, Reconstructer, ViolationObserver


class TestReconstructionPipeline:
    """Test end-to-end reconstruction."""

    def test_exact_bounds_recover_structure(self, helix, exact_bounds):
        """Exact distances for every pair give back the structure."""
        reconstructer = Reconstructer(exact_bounds, rng=0)
        result = reconstructer.reconstruct(2, metrize=True, reference=helix, diagnostics=True)

        assert result.n_models == 2
        assert not result.cancelled
        assert np.all(result.report.best_rmsd < 1e-3)
        for model in result.ensemble:
            assert count_violations(model, result.bounds) == 0
            assert radius_of_gyration(model) == pytest.approx(radius_of_gyration(helix), rel=1e-4)

    def test_contact_graph_to_ensemble(self, helix, helix_graph):
        """Sparse contacts give a compact chain close to the original fold."""
        reconstructer = Reconstructer.from_contact_graph(helix_graph, rng=7)
        reconstructer.add_observer(ViolationObserver(margin=0.5))
        reconstructer.add_observer(EmbeddingObserver())
        reconstructer.add_observer(BackboneObserver())

        result = reconstructer.reconstruct(
            3, metrize=True, scaling="avrg_inter_ca_dist", reference=helix, diagnostics=True
        )

        coords = result.ensemble.to_numpy()
        assert coords.shape == (3, len(helix), 3)
        assert np.all(np.isfinite(coords))
        spacing = np.linalg.norm(np.diff(coords, axis=1), axis=-1).mean(axis=1)
        assert np.allclose(spacing, 3.8)
        assert result.metadata["scaling"] == "AVRG_INTER_CA_DIST"
        assert len(result.metadata["violations"]) == 3
        assert len(result.metadata["mean_bond_length"]) == 3
        assert "Reconstruction Summary" in result.report.summary()

    def test_stop_request(self, helix_bounds):
        calls = []

        def should_stop():
            calls.append(1)
            return len(calls) > 2

        result = Reconstructer(helix_bounds, rng=0).reconstruct(5, metrize=False, should_stop=should_stop)
        assert result.cancelled
        assert result.n_models == 2


class TestDistillationPipeline:
    """Test distillation followed by reconstruction from the consensus."""

    def test_distill_then_reconstruct(self, hairpin, hairpin_graph):
        distiller = Distiller(hairpin_graph, rng=11)
        distiller.distill_random_sampling(20, fraction=0.1)

        best = distiller.min_error_set_score()
        worst = distiller.max_error_set_score()
        assert best.score <= worst.score

        consensus = distiller.consensus(percentile=0.1)
        assert consensus.n_sets == 2
        assert all(0.0 < w <= 1.0 for w in consensus.weights.values())

        graph = consensus.to_contact_graph()
        result = Reconstructer.from_contact_graph(graph, rng=3).reconstruct(2, reference=hairpin)
        assert result.ensemble.to_numpy().shape == (2, len(hairpin), 3)
        assert list(result.ensemble.serials) == [hairpin_graph.serial_of(i) for i in range(len(hairpin))]

    def test_quickstart_pipeline(self):
        """Contacts of a 30-residue hairpin go through the whole workflow."""
        native = make_hairpin(30)
        graph = contact_graph_from_coords(native, poly_ala(len(native)), cutoff=8.0)

        result = Reconstructer.from_contact_graph(graph, rng=42).reconstruct(
            3, metrize=True, reference=native, diagnostics=True
        )
        assert result.n_models == 3

        distiller = Distiller(graph, rng=42)
        assert distiller.num_eligible() >= int(distiller.total_contacts * 0.1) > 0
        distiller.distill_random_sampling(20, fraction=0.1)

        consensus = distiller.consensus(percentile=0.05)
        assert len(consensus.top_contacts(5)) == 5

        rebuilt = Reconstructer.from_contact_graph(consensus.to_contact_graph(), rng=42).reconstruct(
            3, reference=native, diagnostics=True
        )
        assert rebuilt.report.best_rmsd.shape == (3,)
        assert np.all(np.isfinite(rebuilt.report.best_rmsd))

    def test_random_subset_baseline(self, hairpin, hairpin_graph):
        full = bounds_from_contact_graph(hairpin_graph)
        cm_mean, cm_se = random_subset_errors(full, 4, runs=5, rng=0)
        dm_mean, dm_se = random_subset_errors(full, 4, runs=5, rng=0, distances=pairwise_distances(hairpin))

        assert cm_mean > 0.0
        assert dm_mean > 0.0
        assert cm_se >= 0.0
        assert dm_se >= 0.0
