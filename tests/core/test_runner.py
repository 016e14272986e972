"""End-to-end tests for the simulation driver."""

import pytest
from life3d.core.game import Rules
from life3d.core.runner import SimulationConfig, run_simulation


# Captured from a reference run: (size, density, generations, seed) -> lines
GOLDEN_REPORTS = [
    (
        (8, 0.5, 3, 1),
        ["1 65 3", "2 26 0", "3 39 1", "4 21 0", "5 55 3", "6 18 0", "7 32 0", "8 26 0", "9 21 0"],
    ),
    (
        (10, 0.3, 10, 42),
        ["1 254 9", "2 105 1", "3 56 1", "4 107 1", "5 41 1", "6 94 1", "7 73 1", "8 68 1", "9 48 1"],
    ),
    (
        (6, 0.4, 4, -5),
        ["1 29 1", "2 24 1", "3 21 1", "4 8 1", "5 7 1", "6 13 1", "7 14 1", "8 25 1", "9 13 1"],
    ),
    (
        (12, 0.25, 20, 7),
        ["1 548 19", "2 236 7", "3 249 7", "4 99 1", "5 64 1", "6 66 1", "7 58 1", "8 61 1", "9 85 1"],
    ),
    (
        (2, 1.0, 1, 3),
        ["1 2 0", "6 2 0", "7 2 0", "8 1 0", "9 1 0"],
    ),
]


class TestSimulationConfig:
    """Test configuration validation."""

    def test_valid(self):
        """Test a valid configuration has no errors."""
        assert SimulationConfig(size=4, density=0.5, generations=3, seed=-1).validate() == []

    def test_invalid(self):
        """Test every invalid field is reported."""
        config = SimulationConfig(size=0, density=1.5, generations=0, rules=Rules(birth=(10, 7)))
        errors = config.validate()

        assert len(errors) == 4
        assert "Grid size must be positive" in errors
        assert "Density must be between 0.0 and 1.0" in errors


class TestRunSimulation:
    """Test full simulation runs."""

    @pytest.mark.parametrize("params, lines", GOLDEN_REPORTS)
    def test_golden_reports(self, params, lines):
        """Test reports match the reference run exactly."""
        size, density, generations, seed = params
        config = SimulationConfig(size=size, density=density, generations=generations, seed=seed)

        assert run_simulation(config).lines() == lines

    def test_empty_lattice(self):
        """Test density 0 never produces any species."""
        report = run_simulation(SimulationConfig(size=4, density=0.0, generations=5, seed=123))

        assert report.lines() == []
        assert report.initial_population == 0
        assert report.population_history == [[0] * 9] * 6

    def test_full_small_lattice(self):
        """Test the maxima of a full 2x2x2 lattice are its generation 0 populations."""
        report = run_simulation(SimulationConfig(size=2, density=1.0, generations=1, seed=3))

        assert report.initial_population == 8
        assert report.final_population == 0
        generation_zero = report.population_history[0]
        for record in report.reported_records():
            assert record.max_population == generation_zero[record.species - 1]
            assert record.generation == 0

    def test_deterministic(self):
        """Test two runs with the same inputs agree."""
        config = SimulationConfig(size=7, density=0.35, generations=6, seed=2024)
        assert run_simulation(config).lines() == run_simulation(config).lines()

    def test_callback_sees_every_generation(self):
        """Test the callback runs for generation 0 and every step."""
        seen = []
        config = SimulationConfig(size=4, density=0.4, generations=3, seed=1)

        report = run_simulation(config, on_generation=lambda g, lattice: seen.append((g, lattice.population)))

        assert [g for g, _ in seen] == [0, 1, 2, 3]
        assert seen[0][1] == report.initial_population
        assert seen[-1][1] == report.final_population

    def test_report_fields(self):
        """Test report metadata."""
        config = SimulationConfig(size=5, density=0.3, generations=2, seed=4, rules=Rules(survival=(4, 13)))
        report = run_simulation(config)

        assert report.size == 5
        assert report.generations == 2
        assert report.survival == (4, 13)
        assert report.birth == (7, 10)
        assert len(report.records) == 9
        assert len(report.population_history) == 3
        assert report.duration >= 0
        assert report.final_population == sum(report.final_populations)
