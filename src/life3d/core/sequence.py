"""Deterministic xorshift sequence used to seed the initial lattice."""

import numpy as np

SPECIES = 9

SEED_OFFSET = 987654321
SCALE = 0.2328306e-09

_MASK = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def _as_signed(value: int) -> int:
    """Reinterpret an unsigned 32-bit pattern as a signed 32-bit integer."""
    value &= _MASK
    return value - (1 << 32) if value & _SIGN_BIT else value


class SequenceGenerator:
    """Reproducible stream of pseudo-uniform values in [0, 1).

    The state is a single unsigned 32-bit integer advanced by three
    xorshift steps per draw. Every draw is rounded to single precision,
    so identical seeds reproduce identical simulations bit for bit.
    """

    def __init__(self, seed: int = 0) -> None:
        """Initialize the generator.

        Args:
            seed: Any integer; it is offset and wrapped to 32 bits
        """
        self._state = 0
        self._draws = 0
        self.init(seed)

    @property
    def state(self) -> int:
        """Current unsigned 32-bit state."""
        return self._state

    @property
    def draws(self) -> int:
        """Number of values drawn since the last init()."""
        return self._draws

    def init(self, seed: int) -> None:
        """Reset the state from a seed."""
        self._state = (seed + SEED_OFFSET) & _MASK
        self._draws = 0

    def next(self) -> float:
        """Advance the state and return the next value.

        Returns:
            Single-precision value (as a Python float) in [0, 1]
        """
        previous = self._state

        state = previous
        state ^= (state << 13) & _MASK
        state ^= state >> 17
        state ^= (state << 5) & _MASK

        self._state = state
        self._draws += 1

        # 32-bit signed sum, overflow wraps
        total = _as_signed(_as_signed(previous) + _as_signed(state))
        return float(np.float32(0.5 + SCALE * total))

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.next()


def species_from_draw(value: float) -> int:
    """Map a draw to a species identifier in 1..SPECIES.

    The product is taken in single precision. A draw that rounded up to
    exactly 1.0 is clamped to the last species.
    """
    scaled = np.float32(value) * np.float32(SPECIES)
    return min(int(scaled) + 1, SPECIES)
