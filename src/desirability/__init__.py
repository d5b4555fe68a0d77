"""
Desirability functions for ranking entities on several criteria.

Maps heterogeneous measurements (expression levels, p-values, fold changes,
categorical labels) onto a common [0, 1] scale and combines them into one
overall desirability per record.

Transformation types:
- d_high / d_low: one-sided ramps with power-law curvature
- d_central / d_ends: two-sided ramps with independent curvature per side
- d_4pl: four-parameter logistic sigmoid
- d_categorical: explicit label lookup

Combination:
- overall_desirability: weighted geometric mean (any zero vetoes a record)
- Criterion / DesirabilityCombiner: named criteria applied to input columns
"""

from src.desirability.transforms import (
    d_high,
    d_low,
    d_central,
    d_ends,
    d_4pl,
    d_categorical,
)
from src.desirability.functions import (
    Shape,
    HighIsGood,
    LowIsGood,
    CentralIsGood,
    EndsIsGood,
    FourParameterLogistic,
    CategoricalDesirability,
    evaluate,
    function_from_dict,
)
from src.desirability.combiner import Criterion, DesirabilityCombiner, overall_desirability
from src.desirability.overlay import desirability_curve, plot_desirability_overlay
from src.desirability.errors import (
    DesirabilityError,
    InvalidParameterError,
    UnknownCategoryError,
    LengthMismatchError,
    InvalidWeightError,
    InvalidInputError,
)

__all__ = [
    # Transforms
    "d_high",
    "d_low",
    "d_central",
    "d_ends",
    "d_4pl",
    "d_categorical",
    # Functions
    "Shape",
    "HighIsGood",
    "LowIsGood",
    "CentralIsGood",
    "EndsIsGood",
    "FourParameterLogistic",
    "CategoricalDesirability",
    "evaluate",
    "function_from_dict",
    # Combiner
    "Criterion",
    "DesirabilityCombiner",
    "overall_desirability",
    # Overlay
    "desirability_curve",
    "plot_desirability_overlay",
    # Errors
    "DesirabilityError",
    "InvalidParameterError",
    "UnknownCategoryError",
    "LengthMismatchError",
    "InvalidWeightError",
    "InvalidInputError",
]
