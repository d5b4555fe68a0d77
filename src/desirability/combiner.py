"""
Overall desirability combination.

Provides:
- overall_desirability: weighted geometric mean of desirability series
- Criterion: a named input column paired with a desirability function
- DesirabilityCombiner: applies criteria to named inputs and combines them

Formula: D[r] = exp( sum_i w_i * ln(d_i[r]) / sum_i w_i )

The mean is multiplicative: a desirability of exactly 0 in any series
vetoes that record (composite 0) whatever the other series hold. A missing
(NaN) desirability makes the composite NaN unless a zero vetoes the record.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

import numpy as np

from src.config import DEFAULT_WEIGHT
from src.desirability.errors import (
    InvalidInputError,
    InvalidWeightError,
    LengthMismatchError,
)
from src.desirability.functions import DesirabilityFunction, evaluate, function_from_dict

logger = logging.getLogger(__name__)

# Type alias
NumericType = Union[float, np.ndarray]


def _check_weights(weights: Optional[Sequence[float]], n_series: int) -> np.ndarray:
    if weights is None:
        return np.full(n_series, DEFAULT_WEIGHT)

    weights = np.asarray(weights, dtype=float).ravel()
    if weights.size != n_series:
        raise InvalidWeightError(
            f"Got {weights.size} weights for {n_series} desirability series"
        )
    bad = ~np.isfinite(weights) | (weights <= 0)
    if np.any(bad):
        raise InvalidWeightError(
            f"Weights must be finite and > 0, got {weights[bad].tolist()}"
        )
    return weights


def overall_desirability(
    series: Sequence[NumericType],
    weights: Optional[Sequence[float]] = None,
) -> NumericType:
    """
    Combine desirability series into one composite by weighted geometric mean.

    Args:
        series: Desirability series, one per criterion, aligned by record
        weights: Relative importance of each series (default: all 1). Only
            ratios matter

    Returns:
        Composite desirability per record. Float if every series is scalar

    Raises:
        InvalidInputError: If series is empty, not 1-D, or holds negative values
        LengthMismatchError: If the series differ in length
        InvalidWeightError: If a weight is not > 0 or the count is wrong

    Example:
        >>> overall_desirability([[1, 0, 1], [1, 1, 0]])
        array([1., 0., 0.])
    """
    if series is None or len(series) == 0:
        raise InvalidInputError("At least one desirability series is required")

    arrays = [np.asarray(s, dtype=float) for s in series]
    if any(a.ndim > 1 for a in arrays):
        raise InvalidInputError(
            f"Each desirability series must be 1-D, got shapes {[a.shape for a in arrays]}"
        )
    scalar_input = all(a.ndim == 0 for a in arrays)
    arrays = [np.atleast_1d(a) for a in arrays]

    lengths = {a.size for a in arrays}
    if len(lengths) > 1:
        raise LengthMismatchError(
            f"Desirability series differ in length: {[a.size for a in arrays]}"
        )

    w = _check_weights(weights, len(arrays))

    d = np.vstack(arrays)
    if np.any(d < 0) or np.any(np.isinf(d)):
        raise InvalidInputError("Desirabilities must be finite and >= 0")

    missing = np.any(np.isnan(d), axis=0)
    vetoed = np.any(d == 0, axis=0)

    # Only positive finite entries reach the log; zeros and NaN are resolved below
    safe = np.where(d > 0, d, 1.0)
    log_mean = np.sum(w[:, np.newaxis] * np.log(safe), axis=0) / np.sum(w)
    result = np.exp(log_mean)

    result[missing] = np.nan
    result[vetoed] = 0.0

    logger.debug(
        f"Combined {d.shape[0]} series over {d.shape[1]} records "
        f"({int(vetoed.sum())} vetoed, {int((missing & ~vetoed).sum())} missing)"
    )

    if scalar_input:
        return float(result[0])
    return result


@dataclass(frozen=True)
class Criterion:
    """
    A single criterion: which input to read, how to score it, how much it counts.

    Attributes:
        name: Identifier for this criterion (used as key in input dict)
        function: Desirability function applied to the raw values
        weight: Relative importance in the composite (must be > 0)
    """

    name: str
    function: DesirabilityFunction
    weight: float = DEFAULT_WEIGHT

    def __post_init__(self):
        """Validate the criterion configuration."""
        if not np.isfinite(self.weight) or self.weight <= 0:
            raise InvalidWeightError(
                f"Criterion '{self.name}' has weight {self.weight}; weights must be > 0"
            )

    def apply(self, values: Any) -> NumericType:
        """
        Apply this criterion's desirability function to raw values.

        Args:
            values: Raw input value(s)

        Returns:
            Desirability in [des_min, des_max]
        """
        return evaluate(self.function, values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "function": self.function.to_dict(),
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Criterion":
        """Deserialize from dictionary."""
        return cls(
            name=data["name"],
            function=function_from_dict(data["function"]),
            weight=data.get("weight", DEFAULT_WEIGHT),
        )


@dataclass(frozen=True)
class DesirabilityCombiner:
    """
    Scores each criterion and combines them into an overall desirability.

    Attributes:
        name: Identifier for this combiner
        criteria: Criterion instances, stored as a tuple
    """

    name: str
    criteria: tuple[Criterion, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate the combiner configuration."""
        object.__setattr__(self, "criteria", tuple(self.criteria))
        if not self.criteria:
            raise InvalidInputError(f"Combiner '{self.name}' has no criteria")

        names = [c.name for c in self.criteria]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidInputError(f"Duplicate criterion names: {duplicates}")

    @property
    def weights(self) -> list[float]:
        return [c.weight for c in self.criteria]

    def get_component_scores(self, inputs: dict[str, Any]) -> dict[str, NumericType]:
        """
        Get individual desirabilities for each criterion.

        Useful for debugging and visualization.

        Args:
            inputs: Dictionary mapping criterion names to their raw values

        Returns:
            Dictionary mapping criterion names to their desirabilities
        """
        scores = {}
        for criterion in self.criteria:
            if criterion.name not in inputs:
                raise KeyError(
                    f"Missing input for criterion '{criterion.name}'. "
                    f"Available inputs: {list(inputs.keys())}"
                )
            scores[criterion.name] = criterion.apply(inputs[criterion.name])
        return scores

    def compute(self, inputs: dict[str, Any]) -> NumericType:
        """
        Compute the overall desirability from raw input values.

        Args:
            inputs: Dictionary mapping criterion names to their raw values

        Returns:
            Composite desirability per record
        """
        scores = self.get_component_scores(inputs)
        return overall_desirability(
            [scores[c.name] for c in self.criteria],
            weights=self.weights,
        )

    def rank(self, inputs: dict[str, Any]) -> np.ndarray:
        """
        Order records from most to least desirable.

        Ties keep their input order. Records with a missing composite are
        placed last.

        Args:
            inputs: Dictionary mapping criterion names to their raw values

        Returns:
            Record indices, best first
        """
        composite = np.atleast_1d(self.compute(inputs))
        # NaN sorts last under ascending order, so sort the negated values
        return np.argsort(-composite, kind="stable")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "criteria": [c.to_dict() for c in self.criteria],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DesirabilityCombiner":
        """Deserialize from dictionary."""
        criteria = [Criterion.from_dict(c) for c in data["criteria"]]
        return cls(name=data["name"], criteria=criteria)
