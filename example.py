#!/usr/bin/env python3
"""
Example usage of the life3d package.
"""

from life3d import Life3D, generate


def main():
    """Demonstrate programmatic usage of the life3d package."""
    # Build a 6x6x6 lattice, 40% occupied
    lattice = generate(6, 0.4, seed=1)
    game = Life3D(lattice)

    print("Initial state:")
    print(lattice)
    print(f"Population: {game.population}")
    print()

    # Run simulation for 5 generations
    for _ in range(5):
        game.step()
        print(f"Generation {game.generation}: population {game.population}")

        if game.population == 0:
            print("Extinct")
            break

    print("\nSpecies records:")
    for record in game.records():
        if record.max_population > 0:
            print(f"  {record.to_line()}")

    # Show statistics
    stats = game.get_statistics()
    print("\nFinal statistics:")
    for key, value in stats.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
