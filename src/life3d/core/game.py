"""Multi-species 3D Game of Life implementation."""

from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
import numpy as np

from .lattice import Lattice
from .metrics import PopulationTracker, SpeciesRecord

MAX_NEIGHBORS = 26


@dataclass(frozen=True)
class Rules:
    """Inclusive neighbor-count ranges driving the transition.

    - Occupied cell survives when its alive neighbors fall in `survival`
    - Empty cell is born when its alive neighbors fall in `birth`, taking
      the species most common among its neighbors (lowest id on ties)
    """

    survival: Tuple[int, int] = (5, 13)
    birth: Tuple[int, int] = (7, 10)

    def validate(self) -> List[str]:
        errors = []
        for name, (low, high) in (("survival", self.survival), ("birth", self.birth)):
            if not 0 <= low <= high <= MAX_NEIGHBORS:
                errors.append(
                    f"{name} range must satisfy 0 <= low <= high <= {MAX_NEIGHBORS}, got {low}:{high}"
                )
        return errors

    @staticmethod
    def parse_range(text: str) -> Tuple[int, int]:
        """Parse 'low:high' into a tuple.

        Raises:
            ValueError: If text is not two integers separated by ':'
        """
        parts = text.split(":")
        if len(parts) != 2:
            raise ValueError(f"Range must be formatted as 'low:high', got '{text}'")
        return (int(parts[0].strip()), int(parts[1].strip()))


DEFAULT_RULES = Rules()


def transition(
    cells: np.ndarray,
    neighbor_counts: np.ndarray,
    rules: Rules = DEFAULT_RULES,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Compute the next generation from a frozen snapshot.

    Args:
        cells: Current species array of shape (N, N, N)
        neighbor_counts: Per-species counts of shape (9, N, N, N)
        rules: Survival and birth ranges
        out: Optional array to write into; must not alias `cells`

    Returns:
        Next species array of shape (N, N, N)
    """
    totals = neighbor_counts.sum(axis=0)
    occupied = cells > 0

    survive_low, survive_high = rules.survival
    survive = occupied & (totals >= survive_low) & (totals <= survive_high)

    birth_low, birth_high = rules.birth
    born = ~occupied & (totals >= birth_low) & (totals <= birth_high)
    # A birth needs at least one neighbor to take the species from
    born &= totals > 0

    # argmax keeps the first maximum, i.e. the lowest species id
    majority = (np.argmax(neighbor_counts, axis=0) + 1).astype(cells.dtype)

    if out is None:
        out = np.zeros_like(cells)
    else:
        out.fill(0)

    out[survive] = cells[survive]
    out[born] = majority[born]
    return out


def step(current: Lattice, rules: Optional[Rules] = None) -> Lattice:
    """Return a new lattice one generation ahead of `current`."""
    following = Lattice(current.size)
    transition(current.cells, current.count_all_neighbors(), rules or DEFAULT_RULES, out=following.cells)
    return following


class Life3D:
    """Multi-species 3D Game of Life simulation engine.

    Every cell is updated from the same snapshot; the next generation is
    written into the lattice's back buffer and swapped in afterwards.
    """

    def __init__(self, lattice: Lattice, rules: Optional[Rules] = None) -> None:
        """Initialize the game with a lattice.

        Args:
            lattice: The lattice to simulate, already populated
            rules: Transition rules (defaults to survival 5:13, birth 7:10)
        """
        self.lattice = lattice
        self.rules = rules or DEFAULT_RULES
        self._generation = 0
        self.tracker = PopulationTracker()

        # Generation 0 is the initial lattice
        self.tracker.record(self.lattice, self._generation)

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of occupied cells."""
        return self.lattice.population

    def species_populations(self) -> np.ndarray:
        return self.lattice.species_populations()

    def records(self) -> List[SpeciesRecord]:
        return self.tracker.records()

    def step(self) -> None:
        """Advance the simulation by one generation."""
        self._apply_rules()
        self._generation += 1
        self.tracker.record(self.lattice, self._generation)

    def _apply_rules(self) -> None:
        neighbor_counts = self.lattice.count_all_neighbors()
        transition(self.lattice.cells, neighbor_counts, self.rules, out=self.lattice.back_buffer)
        self.lattice.swap_buffers()

    def run(self, generations: int) -> List[SpeciesRecord]:
        """Advance a number of generations and return the records."""
        for _ in range(generations):
            self.step()
        return self.records()

    def reset(self, clear_lattice: bool = False) -> None:
        """Reset counters, keeping the current lattice as generation 0.

        Args:
            clear_lattice: Whether to empty the lattice as well
        """
        if clear_lattice:
            self.lattice.clear()

        self._generation = 0
        self.tracker.reset()
        self.tracker.record(self.lattice, self._generation)

    def get_statistics(self) -> Dict:
        """Get a snapshot of the simulation state."""
        return {
            "generation": self._generation,
            "population": self.population,
            "species_populations": [int(p) for p in self.species_populations()],
            "population_density": self.lattice.density,
            "lattice_size": self.lattice.size,
            "survival": self.rules.survival,
            "birth": self.rules.birth,
        }
