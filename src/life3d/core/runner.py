"""Simulation driver: initialize, evolve and collect the report."""

import time
from typing import Callable, List, Optional
from dataclasses import dataclass, field

from .lattice import Lattice, generate
from .game import Life3D, Rules
from .metrics import SimulationReport

GenerationCallback = Callable[[int, Lattice], None]


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""
    size: int = 16
    density: float = 0.3
    generations: int = 10
    seed: int = 0
    rules: Rules = field(default_factory=Rules)

    def validate(self) -> List[str]:
        errors = []

        if self.size <= 0:
            errors.append("Grid size must be positive")

        if not 0.0 <= self.density <= 1.0:
            errors.append("Density must be between 0.0 and 1.0")

        if self.generations <= 0:
            errors.append("Number of generations must be positive")

        errors.extend(self.rules.validate())
        return errors


def run_simulation(
    config: SimulationConfig, on_generation: Optional[GenerationCallback] = None
) -> SimulationReport:
    """Run one simulation to completion.

    Inputs are assumed valid (see SimulationConfig.validate).

    Args:
        config: Simulation parameters
        on_generation: Called as (generation, lattice) for generation 0
            and after every step

    Returns:
        Report with the per-species records
    """
    lattice = generate(config.size, config.density, config.seed)
    game = Life3D(lattice, config.rules)
    initial_population = game.population

    if on_generation:
        on_generation(0, lattice)

    # Initialization is not part of the measured time
    start_time = time.time()

    while game.generation < config.generations:
        game.step()
        if on_generation:
            on_generation(game.generation, lattice)

    end_time = time.time()
    duration = end_time - start_time

    report = SimulationReport(
        size=config.size,
        density=config.density,
        generations=config.generations,
        seed=config.seed,
        survival=config.rules.survival,
        birth=config.rules.birth,
        records=game.records(),
        initial_population=initial_population,
        final_population=game.population,
        final_populations=[int(p) for p in game.species_populations()],
        population_history=game.tracker.history,
        start_time=start_time,
        end_time=end_time,
        duration=duration,
        generations_per_second=config.generations / duration if duration > 0 else 0.0,
    )
    return report
