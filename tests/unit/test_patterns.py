"""Unit tests for FieldProbe."""

import numpy as np

from hypewave.patterns import FieldProbe, ProbeConfig, create_probe


class TestFieldProbe:
    """Tests for the stationary field probe."""

    def test_creation(self, sim):
        probe = create_probe("p1", 5, 5, sim)
        assert probe.position == (5, 5)
        assert probe.readings == []
        assert len(sim.tick_completed) == 1

    def test_records_after_each_tick(self, sim):
        probe = create_probe("p1", 5, 5, sim)
        sim.add_hype((5, 5), (2.0, 0.0))

        sim.tick(0.1)
        sim.tick(0.2)

        assert [r[0] for r in probe.readings] == [1, 2]
        assert np.allclose(probe.readings[0][1], (1.8, 0.0))
        assert np.allclose(probe.readings[1][1], (1.62, 0.0))

    def test_unattached_probe_records_nothing(self, sim):
        probe = FieldProbe(ProbeConfig(pattern_id="p1", x=5, y=5), sim)
        sim.tick(0.1)
        assert probe.readings == []

    def test_detach(self, sim):
        probe = create_probe("p1", 5, 5, sim)
        sim.tick(0.1)
        probe.detach()
        sim.tick(0.2)
        assert len(probe.readings) == 1
        assert len(sim.tick_completed) == 0
        assert len(sim.pit_started) == 0

    def test_counts_pits_over_probe(self, sim):
        probe = create_probe("p1", 5, 5, sim)
        sim.start_pit((5.5, 5), radius=1.0, duration=1.0)
        sim.start_pit((8, 8), radius=1.0, duration=1.0)
        assert probe.pits_seen == 1

    def test_measurements(self, sim):
        probe = create_probe("front", 5, 5, sim)
        sim.add_hype((5, 5), (3.0, 4.0))
        sim.tick(0.1)

        m = probe.get_measurements()
        assert m["pattern_id"] == "front"
        assert m["n_readings"] == 1
        assert np.isclose(m["peak_hype"], 4.5)  # |(3, 4)| * 0.9
        assert m["peak_move"] == 0.0

    def test_empty_measurements(self, sim):
        probe = create_probe("p1", 5, 5, sim)
        m = probe.get_measurements()
        assert m["peak_hype"] == 0.0
        assert m["readings"] == []
