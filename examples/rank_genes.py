#!/usr/bin/env python3
"""
Gene Prioritization Example.

Ranks genes from a differential-expression results table by combining
expression level, variability, p-value and fold change into one overall
desirability. With --mock-data a synthetic table is generated so the
example runs without any input files.

Outputs:
1. Top-ranked genes printed to the console
2. One overlay plot per criterion (curve over the observed distribution)

Usage:
    # Synthetic data
    python examples/rank_genes.py --mock-data

    # Results table saved with numpy.savez (arrays named after the criteria)
    python examples/rank_genes.py --input results.npz --output-dir ./outputs

    # Get help
    python examples/rank_genes.py --help
"""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.desirability.configs import (
    DEFAULT_GENE_PRIORITIZATION_COMBINER,
    gene_prioritization_compute_derived_inputs,
)
from src.desirability.overlay import plot_desirability_overlay
from src.utils.helpers import setup_logging

logger = setup_logging(__name__)


def make_mock_stats(n_genes: int = 2000, seed: int = 0) -> dict:
    """Synthetic per-gene statistics with a handful of real hits."""
    rng = np.random.default_rng(seed)
    mean_control = rng.normal(7.5, 1.5, n_genes)
    effect = np.where(rng.random(n_genes) < 0.05, rng.normal(0, 1.5, n_genes), 0.0)
    return {
        "mean_expression": mean_control + effect / 2,
        "expression_sd": np.abs(rng.normal(0.3, 0.15, n_genes)),
        "p_value": np.where(effect != 0, rng.uniform(0, 0.01, n_genes), rng.uniform(0, 1, n_genes)),
        "mean_control": mean_control,
        "mean_treatment": mean_control + effect,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Rank genes by overall desirability",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--input", type=Path, help="npz file with per-gene arrays")
    parser.add_argument("--mock-data", action="store_true", help="Use synthetic data")
    parser.add_argument("--output-dir", type=Path, default=Path("outputs"))
    parser.add_argument("--top", type=int, default=20, help="Number of genes to list")
    args = parser.parse_args()

    if args.mock_data:
        stats = make_mock_stats()
    elif args.input is not None:
        with np.load(args.input) as data:
            stats = {key: data[key] for key in data.files}
    else:
        parser.error("Pass --input or --mock-data")

    combiner = DEFAULT_GENE_PRIORITIZATION_COMBINER
    inputs = gene_prioritization_compute_derived_inputs(stats)

    overall = combiner.compute(inputs)
    order = combiner.rank(inputs)
    logger.info(
        f"Scored {overall.size} genes: {int(np.sum(overall > 0))} non-zero, "
        f"{int(np.sum(np.isnan(overall)))} missing"
    )

    for rank, idx in enumerate(order[: args.top], start=1):
        logger.info(
            f"{rank:3d}. gene {idx:5d}  D={overall[idx]:.3f}  "
            f"lfc={inputs['log_fold_change'][idx]:+.2f}  p={inputs['p_value'][idx]:.2e}"
        )

    for criterion in combiner.criteria:
        plot_desirability_overlay(
            inputs[criterion.name],
            criterion.function,
            args.output_dir / f"overlay_{criterion.name}.png",
            title=criterion.name,
        )


if __name__ == "__main__":
    main()
