"""
CLI module for GA engine.

Loads a YAML configuration, runs one optimization and prints the outcome
to the console.
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from packing.config_loader import (
    genetic_config_from_config,
    get_logging_config,
    load_config,
    manifest_from_config,
    shape_from_config,
    validate_config,
)
from packing.exceptions import ConfigurationError, ConvergenceFailure, PackingError
from packing.packing_metrics import PackingMetrics, print_packing_report

from .data_models import Candidate, OptimizationResult
from .logging_utils import configure_logging
from .orchestration import run_optimization

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONVERGENCE_FAILURE = 2


def run_from_config(
    config_path: str,
    overrides: Optional[Dict[str, Any]] = None,
    raise_on_failure: bool = True
) -> OptimizationResult:
    """
    Run one optimization described by a YAML configuration file.

    Args:
        config_path: Path to the YAML configuration
        overrides: GAConfig fields replacing the configured values
            (e.g. {"random_seed": 7, "workers": 1})
        raise_on_failure: Passed through to run_optimization

    Returns:
        OptimizationResult of the run

    Raises:
        ConfigurationError: If the configuration is invalid
        ConvergenceFailure: If no feasible placement was found
    """
    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        raise ConfigurationError("Invalid configuration:\n  - " + "\n  - ".join(issues))

    shape = shape_from_config(config)
    manifest = manifest_from_config(config)
    ga_config = genetic_config_from_config(config, total_genes=manifest.total_quantity)
    if overrides:
        try:
            ga_config = replace(ga_config, **overrides)
        except TypeError as e:
            raise ConfigurationError(f"Invalid override: {e}")

    logger.info("Packing %d items into %s", manifest.total_quantity, shape.describe())
    return run_optimization(shape, manifest, ga_config, raise_on_failure=raise_on_failure)


def format_gene_table(candidate: Candidate) -> str:
    """Tabulate the genes of a candidate, one row per item"""
    lines = [f"{'#':>4}  {'category':<14}{'variety':<20}{'x':>10}{'y':>10}{'radius':>8}"]
    for idx, gene in enumerate(candidate.genes):
        lines.append(
            f"{idx:>4}  {gene.category:<14}{gene.variety_name:<20}"
            f"{gene.x:>10.3f}{gene.y:>10.3f}{gene.radius:>8.2f}"
        )
    return "\n".join(lines)


def _print_summary(result: OptimizationResult) -> None:
    print("\nResults Summary:")
    print(f"  Feasible: {'yes' if result.is_feasible else 'no'}")
    print(f"  Fitness: {result.candidate.fitness:.6f}")
    print(f"  Items placed: {len(result.candidate)}")
    print(f"  Attempts used: {result.attempts_used}")
    print(f"  Elapsed time: {result.elapsed_time:.3f} seconds")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Genetic circle packing: place items with clearance radii inside a 2D domain"
    )
    parser.add_argument("config", help="Path to the YAML configuration file")
    parser.add_argument("--seed", type=int, default=None, help="Override the random seed")
    parser.add_argument("--workers", type=int, default=None, help="Override the worker thread count")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--report", action="store_true", help="Print the quality report and gene table")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point; returns the process exit code"""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        logging_config = get_logging_config(config)
        configure_logging(args.log_level or logging_config["level"], logging_config["file"])

        overrides = {}
        if args.seed is not None:
            overrides["random_seed"] = args.seed
        if args.workers is not None:
            overrides["workers"] = args.workers

        print("=" * 60)
        print("GENETIC CIRCLE PACKING")
        print("=" * 60)
        result = run_from_config(args.config, overrides)

    except ConvergenceFailure as e:
        print(f"\n✗ {e}")
        return EXIT_CONVERGENCE_FAILURE
    except (PackingError, ValueError) as e:
        print(f"\n✗ Error: {e}")
        return EXIT_ERROR

    _print_summary(result)

    if args.report:
        shape = shape_from_config(config)
        manifest = manifest_from_config(config)
        metrics = PackingMetrics(shape, manifest).analyze_packing(result.candidate)
        print()
        print(print_packing_report(metrics))
        print()
        print(format_gene_table(result.candidate))

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
