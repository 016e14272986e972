"""Multi-species 3D Game of Life on a toroidal lattice."""

__version__ = "0.1.0"

from .core.sequence import SequenceGenerator
from .core.lattice import Lattice, generate
from .core.game import Life3D, Rules, step
from .core.runner import SimulationConfig, run_simulation

__all__ = [
    "SequenceGenerator",
    "Lattice",
    "generate",
    "Life3D",
    "Rules",
    "step",
    "SimulationConfig",
    "run_simulation",
]
