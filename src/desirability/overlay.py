"""
Diagnostic overlay of desirability curves on observed data.

Choosing cut points is easier when the curve is drawn on top of the
empirical distribution of the variable it scores. desirability_curve
samples the curve across the observed range; plot_desirability_overlay
draws it over a histogram and saves the figure.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Tuple

import numpy as np

from src.config import DEFAULT_CURVE_POINTS, DEFAULT_HISTOGRAM_BINS
from src.desirability.errors import InvalidInputError, InvalidParameterError
from src.desirability.functions import DesirabilityFunction, Shape, evaluate
from src.desirability.transforms import is_missing

logger = logging.getLogger(__name__)


def _observed_categories(values: Any, function: DesirabilityFunction) -> list:
    flat = np.asarray(values, dtype=object).ravel()
    present = [v for v in flat if not is_missing(v)]
    if not present:
        raise InvalidInputError("No non-missing labels to overlay")

    # Raises UnknownCategoryError for labels outside the mapping
    evaluate(function, present)
    seen = set(present)
    return [c for c in function.categories if c in seen]


def desirability_curve(
    values: Any,
    function: DesirabilityFunction,
    n_points: int = DEFAULT_CURVE_POINTS,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample a desirability function over the observed range of a variable.

    Args:
        values: Observed raw values (or labels for a categorical function)
        function: Desirability function to sample
        n_points: Number of evenly spaced points between the observed
            minimum and maximum. Ignored for categorical functions

    Returns:
        Tuple of (grid, desirability). For a categorical function the grid
        holds the observed labels in mapping order.
    """
    if function.kind is Shape.CATEGORICAL:
        labels = _observed_categories(values, function)
        return np.asarray(labels, dtype=object), np.atleast_1d(evaluate(function, labels))

    if n_points < 2:
        raise InvalidParameterError(f"n_points must be >= 2, got {n_points}")

    values = np.asarray(values, dtype=float)
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        raise InvalidInputError("No finite values to overlay")

    lo, hi = finite.min(), finite.max()
    if lo == hi:
        logger.warning(f"All observed values equal {lo}; curve collapses to a point")

    grid = np.linspace(lo, hi, n_points)
    return grid, np.atleast_1d(evaluate(function, grid))


def plot_desirability_overlay(
    values: Any,
    function: DesirabilityFunction,
    output_path: Path,
    bins: int = DEFAULT_HISTOGRAM_BINS,
    title: Optional[str] = None,
    n_points: int = DEFAULT_CURVE_POINTS,
) -> Path:
    """
    Plot the empirical distribution of a variable with its desirability curve.

    Continuous functions get a histogram with the curve on a secondary
    [0, 1] axis. Categorical functions get label counts with the mapped
    desirability marked per label.

    Args:
        values: Observed raw values (or labels)
        function: Desirability function to overlay
        output_path: Path to save the plot
        bins: Histogram bin count
        title: Figure title (default: the function's shape)
        n_points: Curve resolution

    Returns:
        Path to saved plot
    """
    import matplotlib.pyplot as plt

    output_path = Path(output_path)
    grid, desirability = desirability_curve(values, function, n_points=n_points)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax_des = ax.twinx()

    if function.kind is Shape.CATEGORICAL:
        flat = [v for v in np.asarray(values, dtype=object).ravel() if not is_missing(v)]
        counts = [sum(1 for v in flat if v == label) for label in grid]
        positions = np.arange(len(grid))
        ax.bar(positions, counts, color="lightgray", edgecolor="gray")
        ax.set_xticks(positions)
        ax.set_xticklabels([str(label) for label in grid])
        ax_des.plot(positions, desirability, "o", color="tab:blue", markersize=8)
        ax.set_xlabel("Category")
    else:
        finite = np.asarray(values, dtype=float)
        finite = finite[np.isfinite(finite)]
        ax.hist(finite, bins=bins, color="lightgray", edgecolor="gray")
        ax_des.plot(grid, desirability, color="tab:blue", linewidth=2)
        ax.set_xlabel("Value")

    ax.set_ylabel("Count")
    ax_des.set_ylabel("Desirability", color="tab:blue")
    ax_des.set_ylim(-0.05, 1.05)
    ax.set_title(title or f"Desirability ({function.kind.value})")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"Saved desirability overlay to {output_path}")
    return output_path
