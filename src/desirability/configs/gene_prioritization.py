"""
Default gene prioritization configuration.

This config ranks genes from a differential-expression results table. It
favours genes that are well expressed, variable across samples, strongly
changed in either direction, and statistically supported. Users can copy
this config and adjust cut points to their own platform and study.

Score formula:
    overall = weighted geometric mean of the criterion desirabilities

Criteria:
- mean_expression: log2 expression, high is good (too-low genes are noise)
- expression_sd: SD of log2 expression across samples, high is good
- p_value: differential-expression p-value, low is good
- log_fold_change: log2 fold change, both ends are good
"""

import numpy as np

from src.desirability.combiner import Criterion, DesirabilityCombiner
from src.desirability.functions import EndsIsGood, HighIsGood, LowIsGood


def create_gene_prioritization_combiner() -> DesirabilityCombiner:
    """
    Create the default gene prioritization combiner.

    Returns:
        DesirabilityCombiner configured for differential-expression ranking.

    Example:
        >>> combiner = create_gene_prioritization_combiner()
        >>> combiner.compute({
        ...     "mean_expression": 9.2,   # log2 units
        ...     "expression_sd": 0.6,     # log2 units
        ...     "p_value": 0.0004,
        ...     "log_fold_change": -1.3,  # log2 units
        ... })
    """
    return DesirabilityCombiner(
        name="gene_prioritization",
        criteria=[
            # Expression level: below ~6 log2 units is mostly background
            Criterion(
                name="mean_expression",
                function=HighIsGood(cut1=6.0, cut2=8.5),
                weight=0.5,
            ),

            # Variability: genes that barely move carry little information
            Criterion(
                name="expression_sd",
                function=HighIsGood(cut1=0.1, cut2=0.4, scale=0.5),
                weight=0.5,
            ),

            # Statistical support: steep near 0 so very small p-values stand out
            Criterion(
                name="p_value",
                function=LowIsGood(cut1=0.0001, cut2=0.1, scale=0.5),
                weight=1.0,
            ),

            # Effect size: up- and down-regulation are equally interesting
            Criterion(
                name="log_fold_change",
                function=EndsIsGood(cut1=-1.5, cut2=-0.25, cut3=0.25, cut4=1.5),
                weight=1.0,
            ),
        ],
    )


# Default combiner instance
DEFAULT_GENE_PRIORITIZATION_COMBINER = create_gene_prioritization_combiner()


# Export as dict for JSON serialization
DEFAULT_GENE_PRIORITIZATION_CONFIG = DEFAULT_GENE_PRIORITIZATION_COMBINER.to_dict()


def get_required_inputs() -> dict[str, str]:
    """
    Get documentation of required inputs for the gene prioritization combiner.

    Returns:
        Dictionary mapping input names to descriptions.
    """
    return {
        "mean_expression": "Mean log2 expression across all samples",
        "expression_sd": "Standard deviation of log2 expression across samples",
        "p_value": "Differential-expression p-value from an upstream model",
        "log_fold_change": "log2 fold change, treatment vs control",
    }


def compute_derived_inputs(gene_stats: dict) -> dict:
    """
    Compute derived inputs from per-gene summary statistics.

    If ``log_fold_change`` is absent it is derived from the group means
    ``mean_treatment`` and ``mean_control`` (both on the log2 scale).

    Args:
        gene_stats: Dictionary of per-gene arrays

    Returns:
        Dictionary ready to pass to combiner.compute()
    """
    if "log_fold_change" in gene_stats:
        log_fold_change = np.asarray(gene_stats["log_fold_change"], dtype=float)
    else:
        try:
            treatment = np.asarray(gene_stats["mean_treatment"], dtype=float)
            control = np.asarray(gene_stats["mean_control"], dtype=float)
        except KeyError as e:
            raise KeyError(
                f"Need 'log_fold_change' or both group means, missing {e}"
            ) from None
        log_fold_change = treatment - control

    return {
        "mean_expression": np.asarray(gene_stats["mean_expression"], dtype=float),
        "expression_sd": np.asarray(gene_stats["expression_sd"], dtype=float),
        "p_value": np.asarray(gene_stats["p_value"], dtype=float),
        "log_fold_change": log_fold_change,
    }
