"""Core 3D Life logic."""

from .sequence import SequenceGenerator, species_from_draw
from .lattice import Lattice, generate
from .game import Life3D, Rules, step, transition
from .metrics import PopulationTracker, SpeciesRecord, SimulationReport, ReportExporter
from .runner import SimulationConfig, run_simulation

__all__ = [
    "SequenceGenerator",
    "species_from_draw",
    "Lattice",
    "generate",
    "Life3D",
    "Rules",
    "step",
    "transition",
    "PopulationTracker",
    "SpeciesRecord",
    "SimulationReport",
    "ReportExporter",
    "SimulationConfig",
    "run_simulation",
]
