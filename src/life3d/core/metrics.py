"""Per-species population tracking and report export."""

import json
import csv
import numpy as np
from typing import Dict, List, Any, Optional, Tuple, Union
from dataclasses import dataclass, field, asdict
from datetime import datetime

from .lattice import Lattice
from .sequence import SPECIES


@dataclass
class SpeciesRecord:
    """Largest population a species reached and when it first got there."""

    species: int
    max_population: int = 0
    generation: int = 0

    def to_line(self) -> str:
        """Format as '<species> <max_population> <generation>'."""
        return f"{self.species} {self.max_population} {self.generation}"


class PopulationTracker:
    """Keeps running per-species maxima across generations.

    A maximum only moves on a strictly larger population, so the stored
    generation is always the first one that reached the maximum.
    """

    def __init__(self) -> None:
        self._max_populations = np.zeros(SPECIES, dtype=np.int64)
        self._max_generations = np.zeros(SPECIES, dtype=np.int64)
        self.history: List[List[int]] = []

    def record(self, source: Union[Lattice, np.ndarray, List[int]], generation: int) -> None:
        """Tally one generation.

        Args:
            source: A lattice, or per-species totals indexed by species-1
            generation: Index of the generation being recorded
        """
        if isinstance(source, Lattice):
            populations = source.species_populations()
        else:
            populations = np.asarray(source, dtype=np.int64)

        improved = populations > self._max_populations
        self._max_populations[improved] = populations[improved]
        self._max_generations[improved] = generation

        self.history.append([int(p) for p in populations])

    def records(self) -> List[SpeciesRecord]:
        """Records for species 1..9 in order."""
        return [
            SpeciesRecord(
                species=s + 1,
                max_population=int(self._max_populations[s]),
                generation=int(self._max_generations[s]),
            )
            for s in range(SPECIES)
        ]

    def reported_records(self) -> List[SpeciesRecord]:
        """Records of species that were ever present."""
        return [r for r in self.records() if r.max_population > 0]

    def reset(self) -> None:
        """Forget all recorded generations."""
        self._max_populations.fill(0)
        self._max_generations.fill(0)
        self.history.clear()


@dataclass
class SimulationReport:
    """Outcome of a single simulation run."""

    # Inputs
    size: int
    density: float
    generations: int
    seed: int
    survival: Tuple[int, int] = (5, 13)
    birth: Tuple[int, int] = (7, 10)

    # Outcome
    records: List[SpeciesRecord] = field(default_factory=list)
    initial_population: int = 0
    final_population: int = 0
    final_populations: List[int] = field(default_factory=list)
    population_history: List[List[int]] = field(default_factory=list)

    # Performance
    start_time: float = 0.0
    end_time: float = 0.0
    duration: float = 0.0
    generations_per_second: float = 0.0

    def reported_records(self) -> List[SpeciesRecord]:
        """Records of species that were ever present."""
        return [r for r in self.records if r.max_population > 0]

    def lines(self) -> List[str]:
        """Report lines in species order, absent species omitted."""
        return [r.to_line() for r in self.reported_records()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary."""
        return asdict(self)


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.bool_):
            return bool(obj)
        return super().default(obj)


class ReportExporter:
    """Export reports to various formats."""

    @staticmethod
    def to_json(report: SimulationReport, filepath: str, include_history: bool = True) -> None:
        """Export a report to JSON format."""
        data = report.to_dict()
        if not include_history:
            data.pop("population_history")

        data["metadata"] = {
            "export_time": datetime.now().isoformat(),
            "reported_species": len(report.reported_records()),
        }

        with open(filepath, "w") as f:
            json.dump(data, f, indent=2, cls=NumpyEncoder)

    @staticmethod
    def to_csv(report: SimulationReport, filepath: str) -> None:
        """Export a report to CSV format, one row per reported species."""
        fieldnames = [
            "species",
            "max_population",
            "generation",
            "final_population",
            "size",
            "density",
            "generations",
            "seed",
        ]

        rows = []
        for r in report.reported_records():
            final: Optional[int] = None
            if len(report.final_populations) >= r.species:
                final = report.final_populations[r.species - 1]
            rows.append(
                {
                    "species": r.species,
                    "max_population": r.max_population,
                    "generation": r.generation,
                    "final_population": final,
                    "size": report.size,
                    "density": report.density,
                    "generations": report.generations,
                    "seed": report.seed,
                }
            )

        with open(filepath, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
