"""Unit tests for the analysis layer."""

import numpy as np

from hypewave.core import FieldSimulator, SimulationConfig
from hypewave.analysis import (
    neighborhood_hype,
    field_energy,
    region_mask,
    hype_divergence,
    summarize,
)


class TestNeighborhoodHype:
    """Tests for the 3x3 hype statistic."""

    def test_single_cell(self, sim):
        sim.add_hype((5, 5), (2.0, 0.0))
        mean_mag, mean_vec = neighborhood_hype(sim, (5, 5))
        assert np.isclose(mean_mag, 2.0 / 9.0)
        assert np.allclose(mean_vec, (2.0 / 9.0, 0.0))

    def test_opposing_hype_is_loud_but_incoherent(self, sim):
        sim.add_hype((4, 5), (3.0, 0.0))
        sim.add_hype((6, 5), (-3.0, 0.0))
        mean_mag, mean_vec = neighborhood_hype(sim, (5, 5))
        assert mean_mag > 0.5
        assert np.allclose(mean_vec, (0.0, 0.0))

    def test_edge_samples_outside_are_zero(self, sim):
        sim.hype.values[:] = (1.0, 0.0)
        mean_mag, _ = neighborhood_hype(sim, (0, 0))
        assert np.isclose(mean_mag, 4.0 / 9.0)


class TestFieldDiagnostics:
    """Tests for energy, masks, divergence, and summaries."""

    def test_field_energy(self):
        values = np.zeros((4, 4, 2))
        values[1, 1] = (3.0, 4.0)
        assert field_energy(values) == 25.0

    def test_region_mask(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, stages=[(2, 2, 5, 5)]))
        mask = region_mask(sim)
        assert mask.shape == (10, 10)
        assert mask.sum() == 4

    def test_divergence_of_uniform_field_is_zero_inside(self, sim):
        sim.hype.values[:] = (1.0, 1.0)
        div = hype_divergence(sim)
        assert np.allclose(div[1:-1, 1:-1], 0.0)

    def test_divergence_of_radial_field_is_positive(self, sim):
        yy, xx = np.mgrid[0:10, 0:10]
        sim.hype.values[..., 0] = xx - 4.5
        sim.hype.values[..., 1] = yy - 4.5
        div = hype_divergence(sim)
        assert np.allclose(div[2:-2, 2:-2], 2.0)

    def test_summarize(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, stages=[(2, 2, 5, 5)]))
        sim.move.values[:] = (1.0, 0.0)
        sim.tick(0.1)
        s = summarize(sim)
        assert s["anchored_cells"] == 4
        assert s["move_in_anchors"] == 0.0
        assert s["move_energy"] > 0.0
        assert s["tick"] == 1
