"""Command-line interface for the multi-species 3D Game of Life."""

import argparse
import sys
from typing import Optional

from ..core.lattice import Lattice
from ..core.game import Rules
from ..core.metrics import ReportExporter, SimulationReport
from ..core.runner import SimulationConfig, run_simulation


class CLILife3D:
    """Command-line interface for running 3D Life simulations."""

    def __init__(self, max_display_size: int = 16):
        """Initialize CLI interface.

        Args:
            max_display_size: Largest lattice side printed by show_lattice
        """
        self.max_display_size = max_display_size

    def run_simulation(
        self,
        size: int,
        density: float,
        generations: int,
        seed: int,
        rules: Optional[Rules] = None,
        verbose: bool = False,
        show_lattice: bool = False,
    ) -> SimulationReport:
        """Run a 3D Life simulation.

        Args:
            size: Lattice side length
            density: Initial population density (0.0-1.0)
            generations: Number of generations to simulate
            seed: Seed for the initial population
            rules: Transition rules (defaults to survival 5:13, birth 7:10)
            verbose: Print progress updates
            show_lattice: Print every generation layer by layer

        Returns:
            Simulation report
        """
        config = SimulationConfig(
            size=size,
            density=density,
            generations=generations,
            seed=seed,
            rules=rules or Rules(),
        )

        if verbose:
            print(f"Initializing {size}x{size}x{size} lattice (density: {density:.2%}, seed: {seed})")
            print(
                f"Rules: survival {config.rules.survival[0]}:{config.rules.survival[1]}, "
                f"birth {config.rules.birth[0]}:{config.rules.birth[1]}"
            )

        def on_generation(generation: int, lattice: Lattice) -> None:
            if verbose:
                print(f"Generation {generation}: population {lattice.population}")
            if show_lattice:
                print(f"Generation {generation} ------------------------------")
                print(self._format_lattice(lattice))

        callback = on_generation if (verbose or show_lattice) else None
        return run_simulation(config, on_generation=callback)

    def _format_lattice(self, lattice: Lattice) -> str:
        """Format lattice for display."""
        if lattice.size > self.max_display_size:
            return f"Lattice too large to display ({lattice.size}x{lattice.size}x{lattice.size})"

        return lattice.format_layers()


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run multi-species 3D Game of Life simulations from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output:
  One line '<species> <max_population> <generation>' per species that was
  ever present, followed by the execution time on stderr.

Examples:
  # 64^3 lattice, 40% density, 100 generations, seed 0
  life3d-cli 64 0.4 100 0

  # Small lattice, printing every generation
  life3d-cli 6 0.3 5 1 --show-lattice --verbose

  # Alternative survival range, exporting the report
  life3d-cli 32 0.3 50 7 --survival 4:13 --json report.json
        """,
    )

    parser.add_argument("grid_size", type=int, help="Number of cells per side of the cube")

    parser.add_argument("density", type=float, help="Density of the initial population (0.0-1.0)")

    parser.add_argument("generations", type=int, help="Number of generations to simulate")

    parser.add_argument("seed", type=int, help="Seed for the random number generator")

    # Rule configuration
    parser.add_argument(
        "--survival",
        type=str,
        default="5:13",
        help="Alive-neighbor range an occupied cell survives in (default: 5:13)",
    )

    parser.add_argument(
        "--birth",
        type=str,
        default="7:10",
        help="Alive-neighbor range an empty cell is born in (default: 7:10)",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "-g",
        "--show-lattice",
        action="store_true",
        help="Display every generation layer by layer (small lattices only)",
    )

    parser.add_argument("--json", type=str, help="Export the report to a JSON file")

    parser.add_argument("--csv", type=str, help="Export the report to a CSV file")

    return parser


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Build a simulation config from parsed arguments.

    Raises:
        ValueError: If a rule range is malformed
    """
    rules = Rules(
        survival=Rules.parse_range(args.survival),
        birth=Rules.parse_range(args.birth),
    )
    return SimulationConfig(
        size=args.grid_size,
        density=args.density,
        generations=args.generations,
        seed=args.seed,
        rules=rules,
    )


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    try:
        errors = build_config(args).validate()
    except ValueError as e:
        errors = [str(e)]

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def print_results(report: SimulationReport, verbose: bool) -> None:
    """Print the report lines, then the execution time on stderr.

    Args:
        report: Simulation report
        verbose: Whether to show detailed statistics
    """
    for line in report.lines():
        print(line)

    if verbose:
        print("\nDetailed Statistics:", file=sys.stderr)
        print(f"  Lattice size: {report.size}x{report.size}x{report.size}", file=sys.stderr)
        print(f"  Initial population: {report.initial_population}", file=sys.stderr)
        print(f"  Final population: {report.final_population}", file=sys.stderr)
        print(f"  Species present: {len(report.reported_records())}", file=sys.stderr)
        print(f"  Speed: {report.generations_per_second:.0f} generations/second", file=sys.stderr)

    print(f"{report.duration:.1f}s", file=sys.stderr)


def main() -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args()

    if not validate_args(args):
        return 1

    config = build_config(args)
    cli = CLILife3D()

    try:
        report = cli.run_simulation(
            size=config.size,
            density=config.density,
            generations=config.generations,
            seed=config.seed,
            rules=config.rules,
            verbose=args.verbose,
            show_lattice=args.show_lattice,
        )

        print_results(report, args.verbose)

        if args.json:
            ReportExporter.to_json(report, args.json)
            if args.verbose:
                print(f"Report saved to: {args.json}")

        if args.csv:
            ReportExporter.to_csv(report, args.csv)
            if args.verbose:
                print(f"Report saved to: {args.csv}")

        return 0

    except MemoryError:
        print("Error: Failed to allocate lattice", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
