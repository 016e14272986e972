"""Tests for population tracking and report export."""

import csv
import json

import numpy as np
from life3d.core.lattice import Lattice
from life3d.core.metrics import (
    NumpyEncoder,
    PopulationTracker,
    ReportExporter,
    SimulationReport,
    SpeciesRecord,
)


def _report():
    return SimulationReport(
        size=4,
        density=0.5,
        generations=3,
        seed=1,
        records=[
            SpeciesRecord(1, 5, 2),
            SpeciesRecord(2, 0, 0),
            SpeciesRecord(3, 7, 0),
        ],
        final_populations=[4, 0, 6],
    )


class TestPopulationTracker:
    """Test cases for the PopulationTracker class."""

    def test_initial_records(self):
        """Test records start at (0, 0) for all nine species."""
        tracker = PopulationTracker()
        records = tracker.records()

        assert [r.species for r in records] == list(range(1, 10))
        assert all(r.max_population == 0 and r.generation == 0 for r in records)
        assert tracker.reported_records() == []

    def test_record_lattice(self):
        """Test tallying a lattice."""
        lattice = Lattice(3)
        lattice.set_cell(0, 0, 0, 2)
        lattice.set_cell(1, 0, 0, 2)
        lattice.set_cell(2, 2, 2, 9)

        tracker = PopulationTracker()
        tracker.record(lattice, 0)

        assert tracker.reported_records() == [SpeciesRecord(2, 2, 0), SpeciesRecord(9, 1, 0)]
        assert tracker.history == [[0, 2, 0, 0, 0, 0, 0, 0, 1]]

    def test_first_generation_kept_on_tie(self):
        """Test a later generation equal to the maximum does not replace it."""
        tracker = PopulationTracker()
        tracker.record([3, 0, 0, 0, 0, 0, 0, 0, 0], 0)
        tracker.record([5, 0, 0, 0, 0, 0, 0, 0, 0], 1)
        tracker.record([5, 0, 0, 0, 0, 0, 0, 0, 0], 2)
        tracker.record([4, 0, 0, 0, 0, 0, 0, 0, 0], 3)

        assert tracker.records()[0] == SpeciesRecord(1, 5, 1)

    def test_maxima_never_decrease(self):
        """Test maxima are monotone over a random population history."""
        rng = np.random.default_rng(0)
        tracker = PopulationTracker()
        previous = [0] * 9

        for generation in range(50):
            tracker.record(rng.integers(0, 100, size=9), generation)
            current = [r.max_population for r in tracker.records()]
            assert all(c >= p for c, p in zip(current, previous))
            previous = current

        history = np.array(tracker.history)
        for s, record in enumerate(tracker.records()):
            assert record.max_population == history[:, s].max()
            assert record.generation == int(np.argmax(history[:, s]))

    def test_reset(self):
        """Test reset forgets everything."""
        tracker = PopulationTracker()
        tracker.record([1] * 9, 0)

        tracker.reset()
        assert tracker.history == []
        assert tracker.reported_records() == []


class TestSimulationReport:
    """Test cases for the SimulationReport class."""

    def test_lines_omit_absent_species(self):
        """Test report lines skip species that never appeared."""
        assert _report().lines() == ["1 5 2", "3 7 0"]

    def test_record_line(self):
        """Test single record formatting."""
        assert SpeciesRecord(4, 120, 17).to_line() == "4 120 17"

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = _report().to_dict()
        assert data["size"] == 4
        assert data["records"][0] == {"species": 1, "max_population": 5, "generation": 2}


class TestReportExporter:
    """Test cases for report export."""

    def test_to_json(self, tmp_path):
        """Test JSON export."""
        path = tmp_path / "report.json"
        ReportExporter.to_json(_report(), str(path))

        data = json.loads(path.read_text())
        assert data["seed"] == 1
        assert data["metadata"]["reported_species"] == 2
        assert len(data["records"]) == 3

    def test_to_json_without_history(self, tmp_path):
        """Test the population history can be left out."""
        path = tmp_path / "report.json"
        ReportExporter.to_json(_report(), str(path), include_history=False)

        assert "population_history" not in json.loads(path.read_text())

    def test_to_csv(self, tmp_path):
        """Test CSV export has one row per reported species."""
        path = tmp_path / "report.csv"
        ReportExporter.to_csv(_report(), str(path))

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))

        assert [row["species"] for row in rows] == ["1", "3"]
        assert rows[0]["max_population"] == "5"
        assert rows[1]["final_population"] == "6"

    def test_numpy_encoder(self):
        """Test numpy values serialize."""
        data = {"a": np.int64(3), "b": np.float32(0.5), "c": np.arange(3), "d": np.bool_(True)}
        assert json.loads(json.dumps(data, cls=NumpyEncoder)) == {
            "a": 3,
            "b": 0.5,
            "c": [0, 1, 2],
            "d": True,
        }
