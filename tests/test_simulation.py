"""Tests for the simulation controller and the command-line driver."""

import logging
import math
import threading

import pytest

import orrery_sim
from orrery.constants import J2000
from orrery.data_models import CelestialBody, OrbitalElements
from orrery.presets_loader import load_catalogue
from orrery.simulation import SimulationController
from orrery.trails import TrailSettings


@pytest.fixture
def sim():
    return SimulationController(load_catalogue(), julian_day=J2000)


class TestController:

    def test_bodies_propagated_on_load(self, sim):
        earth = sim.get_body("Earth")
        assert earth.r == pytest.approx(0.9833, abs=1e-3)
        assert sim.get_body("Sun").position == (0.0, 0.0, 0.0)
        assert sim.get_body("Pluto") is None

    def test_step_advances_clock_and_trails(self, sim):
        sim.set_time_scale(10.0)
        jd = sim.step(1.0)
        assert jd == pytest.approx(J2000 + 10.0)
        trails = sim.get_all_trails(time_span=100)
        assert len(trails) == 9
        assert "Sun" not in [t.name for t in trails]
        assert all(len(t) == 1 for t in trails)

    def test_paused_step_does_nothing(self, sim):
        assert sim.toggle_play() is False
        assert sim.step(5.0) == J2000
        assert sim.get_all_trails() == []

    def test_time_scale_clamped(self, sim):
        sim.set_time_scale(1e12)
        assert sim.time_scale == 36525.0
        sim.set_time_scale(-1e12)
        assert sim.time_scale == -36525.0

    def test_run_builds_windowed_trails(self, sim):
        end = sim.run(200.0, 1.0)
        assert end == pytest.approx(J2000 + 200.0)
        earth = sim.get_trail("Earth")
        assert all(p.julian_day >= end - 30.0 for p in earth.points)
        assert len(earth) == 31
        stored = sim.get_trail("Earth", time_span=10000)
        assert len(stored) == 91
        assert len(sim.get_trail("Moon", time_span=10000)) == 91

    def test_run_backwards(self, sim):
        end = sim.run(-20.0, 3.0)
        assert end == pytest.approx(J2000 - 20.0)
        days = [p.julian_day for p in sim.get_trail("Mars", time_span=100).points]
        assert days[-1] == pytest.approx(J2000 - 20.0)
        assert len(days) == 7

    def test_hidden_trails_are_not_recorded(self, sim):
        sim.set_show_trails(False)
        sim.run(10.0, 1.0)
        assert sim.get_all_trails() == []

    def test_set_julian_day_repropagates(self, sim):
        before = sim.get_body("Mars").position
        sim.set_julian_day(J2000 + 300.0)
        assert sim.get_body("Mars").position != before
        sim.set_julian_day(float("nan"))
        assert sim.julian_day == J2000 + 300.0

    def test_reset(self, sim):
        sim.run(30.0, 1.0)
        sim.reset()
        assert sim.julian_day == J2000
        assert sim.get_all_trails() == []
        sim.reset(J2000 + 1000.0)
        assert sim.julian_day == J2000 + 1000.0
        assert sim.start_julian_day == J2000 + 1000.0

    def test_custom_trail_settings(self):
        sim = SimulationController(load_catalogue(), julian_day=J2000,
                                   trail_settings=TrailSettings(max_points=5, time_span=3650))
        sim.run(50.0, 1.0)
        assert len(sim.get_trail("Earth", time_span=3650)) == 5

    def test_replace_bodies_clears_trails(self, sim, caplog):
        sim.run(5.0, 1.0)
        sim.replace_bodies([CelestialBody(name="Lost"), CelestialBody(name="Ok", elements=OrbitalElements(a=1.0))])
        assert sim.get_all_trails() == []
        assert "Lost" in caplog.text
        assert sim.get_body("Ok").r == pytest.approx(1.0)

    def test_non_finite_tick_is_ignored(self, sim, caplog):
        sim.run(30.0, 1.0)
        before = [p.julian_day for p in sim.get_trail("Earth", time_span=100).points]
        position = sim.get_body("Earth").position
        with caplog.at_level(logging.WARNING, logger="orrery.simulation"):
            sim.tick(float("nan"))
            sim.tick(float("inf"))
        assert sim.julian_day == pytest.approx(J2000 + 30.0)
        assert sim.get_body("Earth").position == position
        assert [p.julian_day for p in sim.get_trail("Earth", time_span=100).points] == before
        assert len(caplog.records) == 2

    def test_nan_time_scale_is_ignored(self, sim):
        sim.set_time_scale(3.0)
        sim.set_time_scale(float("nan"))
        assert sim.time_scale == 3.0

    def test_unbound_orbit_warns_once_on_load(self, sim, caplog):
        with caplog.at_level(logging.DEBUG, logger="orrery"):
            sim.replace_bodies([CelestialBody(name="Comet", elements=OrbitalElements(a=2.0, e=1.3))])
            sim.run(5.0, 1.0)
        warnings = [r for r in caplog.records if r.levelno >= logging.WARNING]
        assert len(warnings) == 1
        assert "Comet" in warnings[0].getMessage()
        assert math.isfinite(sim.get_body("Comet").r)

    def test_concurrent_steps_and_queries(self, sim):
        errors = []

        def stepper():
            try:
                for _ in range(200):
                    sim.step(0.1)
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        def reader():
            try:
                for _ in range(200):
                    for trail in sim.get_all_trails():
                        assert len(trail) <= sim.trails.settings.max_points
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=stepper), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert sim.julian_day == pytest.approx(J2000 + 200.0)


class TestCommandLine:

    def test_run_prints_table(self, capsys):
        assert orrery_sim.main(["--date", "2000-01-01 12:00", "--days", "30", "--step", "5"]) == 0
        out = capsys.readouterr().out
        assert "Earth" in out
        assert "Moon" in out

    def test_list_catalogues(self, capsys):
        assert orrery_sim.main(["--list"]) == 0
        assert "solar_system.json" in capsys.readouterr().out

    def test_bad_date_is_a_usage_error(self):
        with pytest.raises(SystemExit):
            orrery_sim.main(["--date", "someday"])

    def test_empty_catalogue_fails(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text('{"bodies": []}')
        assert orrery_sim.main(["--catalogue", str(path), "--days", "1"]) == 1
