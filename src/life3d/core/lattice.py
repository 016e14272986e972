"""Cubic toroidal lattice for the multi-species 3D Game of Life."""

from typing import Iterator, List, Tuple
import numpy as np
import torch
import torch.nn.functional as F

from .sequence import SPECIES, SequenceGenerator, species_from_draw

Coordinate = Tuple[int, int, int]


def neighbor_offsets() -> Iterator[Coordinate]:
    """Yield the 26 (dx, dy, dz) offsets of the Moore neighborhood."""
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            for dz in (-1, 0, 1):
                if dx == 0 and dy == 0 and dz == 0:
                    continue
                yield (dx, dy, dz)


class Lattice:
    """Represents an N x N x N lattice of species identifiers.

    Each cell holds 0 (empty) or a species in 1..9. Coordinates always
    wrap around, so every cell has exactly 26 neighbors. The cells are
    stored in a single C-ordered numpy buffer, which makes the flat index
    of (x, y, z) equal to x*N*N + y*N + z.
    """

    def __init__(self, size: int) -> None:
        """Initialize an empty lattice.

        Args:
            size: Side length N of the cube
        """
        self.size = size
        self._cells = np.zeros((size, size, size), dtype=np.int8)
        self._back_cells = np.zeros((size, size, size), dtype=np.int8)

        # Runs are single-threaded
        torch.set_num_threads(1)

        # Grouped 3x3x3 kernel with a zero centre, one group per species
        kernel = torch.ones(3, 3, 3, dtype=torch.float32)
        kernel[1, 1, 1] = 0
        self._torch_kernel = kernel.expand(SPECIES, 1, 3, 3, 3).contiguous()

    @property
    def cells(self) -> np.ndarray:
        """Get the current cell array."""
        return self._cells

    @property
    def back_buffer(self) -> np.ndarray:
        """Get the buffer the next generation is written into."""
        return self._back_cells

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Get lattice dimensions as (N, N, N)."""
        return (self.size, self.size, self.size)

    def swap_buffers(self) -> None:
        """Make the back buffer current."""
        self._cells, self._back_cells = self._back_cells, self._cells

    def _wrap(self, x: int, y: int, z: int) -> Coordinate:
        return (x % self.size, y % self.size, z % self.size)

    def get_cell(self, x: int, y: int, z: int) -> int:
        """Get the species at a cell (0 if empty)."""
        return int(self._cells[self._wrap(x, y, z)])

    def set_cell(self, x: int, y: int, z: int, species: int) -> None:
        """Set the species at a cell.

        Raises:
            ValueError: If species is outside 0..9
        """
        if not 0 <= species <= SPECIES:
            raise ValueError(f"Species must be between 0 and {SPECIES}, got {species}")

        self._cells[self._wrap(x, y, z)] = species

    def clear(self) -> None:
        """Empty every cell."""
        self._cells.fill(0)

    def populate(self, density: float, generator: SequenceGenerator) -> None:
        """Stochastically fill the lattice from a sequence generator.

        Cells are visited x-major, then y, then z. Each cell consumes one
        draw; occupied cells consume a second draw for their species.

        Args:
            density: Probability a cell is occupied (0.0 to 1.0)
            generator: Source of draws, already initialized
        """
        threshold = float(np.float32(density))
        values = bytearray(self.size ** 3)

        for index in range(len(values)):
            if generator.next() < threshold:
                values[index] = species_from_draw(generator.next())

        self._cells[:] = np.frombuffer(bytes(values), dtype=np.int8).reshape(self.shape)

    def copy(self) -> "Lattice":
        """Return an independent lattice with the same cells."""
        other = Lattice(self.size)
        other._cells[:] = self._cells
        return other

    def copy_from(self, other: "Lattice") -> None:
        """Copy cell states from another lattice.

        Raises:
            ValueError: If lattices have different sizes
        """
        if other.shape != self.shape:
            raise ValueError(f"Lattice dimensions don't match: {other.shape} vs {self.shape}")

        self._cells[:] = other._cells

    @property
    def population(self) -> int:
        """Get the number of occupied cells."""
        return int(np.count_nonzero(self._cells))

    @property
    def density(self) -> float:
        """Fraction of occupied cells."""
        return self.population / self._cells.size

    def species_populations(self) -> np.ndarray:
        """Count the cells of each species.

        Returns:
            Array of length 9 where index s-1 holds the population of species s
        """
        counts = np.bincount(self._cells.ravel(), minlength=SPECIES + 1)
        return counts[1 : SPECIES + 1].astype(np.int64)

    def neighbor_coordinates(self, x: int, y: int, z: int) -> List[Coordinate]:
        """Get the 26 wrapped neighbor coordinates of a cell.

        On lattices smaller than 3 the same cell can appear more than once.
        """
        return [self._wrap(x + dx, y + dy, z + dz) for dx, dy, dz in neighbor_offsets()]

    def count_neighbors(self, x: int, y: int, z: int) -> Tuple[np.ndarray, int]:
        """Count the neighbors of a cell per species.

        Returns:
            Tuple of (counts, total_alive) where counts[s-1] is the number of
            neighbors holding species s
        """
        counts = np.zeros(SPECIES, dtype=np.int64)
        for coordinate in self.neighbor_coordinates(x, y, z):
            species = self._cells[coordinate]
            if species:
                counts[species - 1] += 1

        return counts, int(counts.sum())

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors per species for all cells using a 3D convolution.

        Returns:
            Array of shape (9, N, N, N) where [s-1, x, y, z] is the number of
            neighbors of (x, y, z) holding species s
        """
        cells = torch.from_numpy(self._cells)
        species = torch.arange(1, SPECIES + 1).view(SPECIES, 1, 1, 1)

        # One float32 channel per species: (1, 9, N, N, N)
        channels = (cells.unsqueeze(0) == species).to(torch.float32).unsqueeze(0)

        padded = F.pad(channels, (1, 1, 1, 1, 1, 1), mode="circular")
        neighbors = F.conv3d(padded, self._torch_kernel, groups=SPECIES)

        return neighbors[0].round().to(torch.int32).numpy()

    def to_list(self) -> list:
        """Convert lattice to nested list for serialization."""
        return self._cells.tolist()

    def from_list(self, data: list) -> None:
        """Load lattice from nested list.

        Raises:
            ValueError: If data dimensions or values don't fit the lattice
        """
        arr = np.array(data, dtype=np.int64)
        if arr.shape != self.shape:
            raise ValueError(f"Data shape {arr.shape} doesn't match lattice {self.shape}")
        if arr.size and (arr.min() < 0 or arr.max() > SPECIES):
            raise ValueError(f"Species values must be between 0 and {SPECIES}")

        self._cells[:] = arr

    def format_layers(self) -> str:
        """Render every x layer, species digits for occupied cells."""
        lines = []
        for x in range(self.size):
            lines.append(f"Layer {x}:")
            for y in range(self.size):
                lines.append("".join(f"{s} " if s else "  " for s in self._cells[x, y]))
            lines.append("")
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        """Check if two lattices are equal."""
        if not isinstance(other, Lattice):
            return False
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __str__(self) -> str:
        return self.format_layers()


def generate(size: int, density: float, seed: int) -> Lattice:
    """Build the generation 0 lattice.

    Args:
        size: Side length N (positive)
        density: Occupation probability in [0, 1]
        seed: Seed for the sequence generator

    Returns:
        Fully initialized lattice
    """
    lattice = Lattice(size)
    lattice.populate(density, SequenceGenerator(seed))
    return lattice
