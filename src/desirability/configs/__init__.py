"""
Desirability configurations for different use cases.

Available configs:
- gene_prioritization: Ranking genes from differential-expression results
"""

from src.desirability.configs.gene_prioritization import (
    DEFAULT_GENE_PRIORITIZATION_COMBINER,
    DEFAULT_GENE_PRIORITIZATION_CONFIG,
    create_gene_prioritization_combiner,
    compute_derived_inputs as gene_prioritization_compute_derived_inputs,
    get_required_inputs as gene_prioritization_get_required_inputs,
)

__all__ = [
    "DEFAULT_GENE_PRIORITIZATION_COMBINER",
    "DEFAULT_GENE_PRIORITIZATION_CONFIG",
    "create_gene_prioritization_combiner",
    "gene_prioritization_compute_derived_inputs",
    "gene_prioritization_get_required_inputs",
]
