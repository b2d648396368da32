"""Unit tests for SimulationClock."""

import pytest

from hypewave.core import FieldSimulator, SimulationClock, SimulationConfig


class TestClockGating:
    """Tests for tick rate limiting."""

    def test_default_interval_from_config(self, sim):
        clock = SimulationClock(sim, start_time=0.0)
        assert clock.interval == sim.config.tick_interval

    def test_no_tick_before_interval(self, sim):
        clock = SimulationClock(sim, interval=0.5, start_time=0.0)
        assert clock.poll(0.3) is False
        assert sim.tick_count == 0

    def test_interval_boundary_is_exclusive(self, sim):
        clock = SimulationClock(sim, interval=0.5, start_time=0.0)
        assert clock.poll(0.5) is False
        assert clock.poll(0.75) is True
        assert sim.tick_count == 1

    def test_tick_after_interval(self, sim):
        clock = SimulationClock(sim, interval=0.5, start_time=0.0)
        assert clock.poll(0.6) is True
        assert clock.last_tick_time == 0.6
        assert sim.tick_count == 1

    def test_no_catch_up(self, sim):
        clock = SimulationClock(sim, interval=0.1, start_time=0.0)
        assert clock.poll(10.0) is True
        assert sim.tick_count == 1
        assert clock.poll(10.05) is False
        assert sim.tick_count == 1

    def test_interval_measured_from_last_tick(self, sim):
        clock = SimulationClock(sim, interval=0.5, start_time=0.0)
        clock.poll(0.6)
        assert clock.poll(1.0) is False
        assert clock.poll(1.2) is True
        assert clock.ticks == 2

    def test_start_time(self, sim):
        clock = SimulationClock(sim, interval=0.5, start_time=10.0)
        assert clock.poll(10.4) is False
        assert clock.poll(10.6) is True

    def test_time_source_used_when_now_omitted(self, sim):
        times = iter([0.0, 0.05, 0.3])
        clock = SimulationClock(sim, interval=0.1, time_source=lambda: next(times))
        assert clock.start_time == 0.0
        assert clock.poll() is False
        assert clock.poll() is True

    def test_start_time_defaults_to_time_source(self, sim):
        times = iter([500.0, 500.05, 500.2])
        clock = SimulationClock(sim, interval=0.1, time_source=lambda: next(times))
        assert clock.last_tick_time == 500.0
        assert clock.poll() is False
        assert clock.poll() is True
        assert sim.tick_count == 1

    def test_tick_rate(self, sim):
        clock = SimulationClock(sim, interval=0.1, start_time=0.0)
        assert clock.get_tick_rate() == 0.0
        for i in range(1, 11):
            clock.poll(i * 0.06)
        assert 0.0 < clock.get_tick_rate() < 1.0

    def test_negative_interval_rejected(self, sim):
        with pytest.raises(ValueError):
            SimulationClock(sim, interval=-1.0, start_time=0.0)

    def test_tick_completed_fires_once_per_tick(self, sim):
        clock = SimulationClock(sim, interval=0.1, start_time=0.0)
        fired = []
        sim.tick_completed.subscribe(lambda: fired.append(sim.tick_count))
        for i in range(1, 21):
            clock.poll(i * 0.05)
        assert fired == list(range(1, clock.ticks + 1))


class TestPitExpiryThroughClock:
    """Pits disappear at the first poll at or past their expiry."""

    def test_pit_scenario(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, tick_interval=0.1))
        clock = SimulationClock(sim, start_time=0.0)
        sim.start_pit((5, 5), radius=2.0, duration=1.0)

        clock.poll(0.5)
        assert sim.is_in_pit((5, 5))

        clock.poll(1.0)
        assert not sim.is_in_pit((5, 5))

    def test_pit_expires_between_ticks(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, tick_interval=10.0))
        clock = SimulationClock(sim, start_time=0.0)
        sim.start_pit((5, 5), radius=2.0, duration=1.0)

        assert clock.poll(0.999) is False
        assert sim.is_in_pit((5, 5))
        assert clock.poll(1.0) is False  # No tick due, pit still expires
        assert not sim.is_in_pit((5, 5))

    def test_pit_expired_signal_releases_visual(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, tick_interval=0.1))
        clock = SimulationClock(sim, start_time=0.0)
        released = []
        sim.pit_expired.subscribe(lambda pit: released.append(pit.visual))
        sim.start_pit((5, 5), radius=2.0, duration=0.5, visual="pit-sprite")

        clock.poll(0.2)
        assert released == []
        clock.poll(0.6)
        assert released == ["pit-sprite"]

    def test_pit_started_before_first_poll_uses_clock_epoch(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, tick_interval=0.1))
        times = iter([1000.0, 1000.02, 1029.9, 1030.0])
        clock = SimulationClock(sim, time_source=lambda: next(times))
        sim.start_pit((5, 5), radius=2.0, duration=30.0)

        clock.poll()
        assert sim.is_in_pit((5, 5))
        clock.poll()
        assert sim.is_in_pit((5, 5))
        clock.poll()
        assert not sim.is_in_pit((5, 5))

    def test_pit_survives_first_poll_with_monotonic_clock(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, tick_interval=0.1))
        clock = SimulationClock(sim)
        sim.start_pit((5, 5), radius=2.0, duration=30.0)

        clock.poll()
        assert sim.is_in_pit((5, 5))

    def test_start_pit_with_explicit_time(self):
        sim = FieldSimulator(SimulationConfig(field_size=10, tick_interval=0.1))
        clock = SimulationClock(sim, start_time=0.0)
        sim.start_pit((5, 5), radius=2.0, duration=1.0, now=5.0)

        clock.poll(5.9)
        assert sim.is_in_pit((5, 5))
        clock.poll(6.0)
        assert not sim.is_in_pit((5, 5))
