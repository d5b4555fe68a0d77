"""
Desirability transformation functions.

All transformations convert raw values into desirabilities in the range
[des_min, des_max] (by default [0, 1]).

Transformation types:
1. d_high - larger values are better (e.g., mean expression)
2. d_low - smaller values are better (e.g., p-value)
3. d_central - a target window is best (e.g., GC content)
4. d_ends - both extremes are best (e.g., log fold change)
5. d_4pl - smooth four-parameter logistic sigmoid
6. d_categorical - explicit label -> desirability lookup

NaN inputs propagate to NaN outputs. Parameters are validated before any
value is transformed.
"""

from typing import Any, Iterable, Mapping, Union

import numpy as np
from scipy.special import expit

from src.config import DEFAULT_DES_MAX, DEFAULT_DES_MIN, DEFAULT_SCALE
from src.desirability.errors import InvalidParameterError, UnknownCategoryError

# Type alias for values that can be scalar or array
NumericType = Union[float, np.ndarray]


# =============================================================================
# PARAMETER VALIDATION
# =============================================================================


def _check_finite(**params: float) -> None:
    for name, value in params.items():
        if not np.isfinite(value):
            raise InvalidParameterError(f"{name} must be finite, got {value}")


def check_bounds(des_min: float, des_max: float) -> None:
    """Require 0 <= des_min < des_max <= 1."""
    _check_finite(des_min=des_min, des_max=des_max)
    if not 0.0 <= des_min < des_max <= 1.0:
        raise InvalidParameterError(
            f"Need 0 <= des_min < des_max <= 1, got des_min={des_min}, des_max={des_max}"
        )


def check_scale(scale: float, name: str = "scale") -> None:
    """Require a finite, strictly positive scale exponent."""
    _check_finite(**{name: scale})
    if scale <= 0:
        raise InvalidParameterError(f"{name} must be > 0, got {scale}")


def check_two_cuts(cut1: float, cut2: float) -> None:
    """Require cut1 < cut2."""
    _check_finite(cut1=cut1, cut2=cut2)
    if not cut1 < cut2:
        raise InvalidParameterError(f"cut1 must be less than cut2, got {cut1} >= {cut2}")


def check_four_cuts(cut1: float, cut2: float, cut3: float, cut4: float) -> None:
    """Require cut1 <= cut2 <= cut3 <= cut4 with cut1 < cut4."""
    _check_finite(cut1=cut1, cut2=cut2, cut3=cut3, cut4=cut4)
    if not (cut1 <= cut2 <= cut3 <= cut4):
        raise InvalidParameterError(
            f"Cut points must be non-decreasing, got {(cut1, cut2, cut3, cut4)}"
        )
    if cut1 == cut4:
        raise InvalidParameterError(f"cut1 and cut4 must differ, got {cut1}")


def check_logistic(hill: float, inflec: float) -> None:
    """Require a non-zero hill slope and a positive inflection point."""
    _check_finite(hill=hill, inflec=inflec)
    if hill == 0:
        raise InvalidParameterError("hill must be non-zero")
    if inflec <= 0:
        raise InvalidParameterError(f"inflec must be > 0, got {inflec}")


def check_mapping(mapping: Union[Mapping[Any, float], Iterable]) -> dict:
    """
    Normalize a categorical mapping into an insertion-ordered dict.

    Accepts a dict or an ordered sequence of (category, value) pairs.
    """
    pairs = list(mapping.items()) if isinstance(mapping, Mapping) else list(mapping)
    if not pairs:
        raise InvalidParameterError("Categorical mapping must not be empty")

    table = {}
    for pair in pairs:
        try:
            category, value = pair
        except (TypeError, ValueError):
            raise InvalidParameterError(
                f"Mapping entries must be (category, value) pairs, got {pair!r}"
            ) from None
        if category in table:
            raise InvalidParameterError(f"Duplicate category in mapping: {category!r}")
        value = float(value)
        if not np.isfinite(value) or not 0.0 <= value <= 1.0:
            raise InvalidParameterError(
                f"Desirability for {category!r} must be in [0, 1], got {value}"
            )
        table[category] = value
    return table


# =============================================================================
# CURVE PIECES
# =============================================================================


def _rising(x: np.ndarray, lower: float, upper: float, scale: float) -> np.ndarray:
    """Power-law ramp: 0 at or below lower, 1 at or above upper."""
    y = np.full(x.shape, np.nan)
    y[x <= lower] = 0.0
    y[x >= upper] = 1.0

    in_ramp = (x > lower) & (x < upper)
    if np.any(in_ramp):
        y[in_ramp] = ((x[in_ramp] - lower) / (upper - lower)) ** scale
    return y


def _falling(x: np.ndarray, lower: float, upper: float, scale: float) -> np.ndarray:
    """Mirror of _rising: 1 at or below lower, 0 at or above upper."""
    y = np.full(x.shape, np.nan)
    y[x >= upper] = 0.0
    y[x <= lower] = 1.0

    in_ramp = (x > lower) & (x < upper)
    if np.any(in_ramp):
        y[in_ramp] = 1.0 - ((x[in_ramp] - lower) / (upper - lower)) ** scale
    return y


def _central_unit(
    x: np.ndarray,
    cut1: float,
    cut2: float,
    cut3: float,
    cut4: float,
    scale_left: float,
    scale_right: float,
) -> np.ndarray:
    """Unit central curve: rising on [cut1, cut2], 1 on [cut2, cut3], falling after."""
    rise = _rising(x, cut1, cut2, scale_left)
    fall = _falling(x, cut3, cut4, scale_right)

    # Left of cut2 the rising half decides, otherwise the falling half
    return np.where(x <= cut2, rise, fall)


def _rescale(y: np.ndarray, des_min: float, des_max: float) -> NumericType:
    """Map unit desirabilities onto [des_min, des_max], keeping ends exact."""
    result = np.where(y == 1.0, des_max, des_min + (des_max - des_min) * y)
    result = np.clip(result, des_min, des_max)

    # Return scalar if input was scalar
    if result.ndim == 0:
        return float(result)
    return result


# =============================================================================
# CONTINUOUS TRANSFORMS
# =============================================================================


def d_high(
    x: NumericType,
    cut1: float,
    cut2: float,
    scale: float = DEFAULT_SCALE,
    des_min: float = DEFAULT_DES_MIN,
    des_max: float = DEFAULT_DES_MAX,
) -> NumericType:
    """
    High-is-good transformation.

    Shape (scale=1):
                      ________ des_max
                     /
                    /
    des_min _______/
                 cut1    cut2

    Args:
        x: Input value(s) to transform
        cut1: At or below this value desirability is des_min
        cut2: At or above this value desirability is des_max
        scale: Exponent of the ramp. 1 = linear, >1 = gain concentrated near
            cut2, <1 = gain concentrated near cut1
        des_min: Lowest desirability
        des_max: Highest desirability

    Returns:
        Desirability in [des_min, des_max]

    Example:
        >>> d_high(0.5, cut1=0.2, cut2=0.8)
        0.5
    """
    check_two_cuts(cut1, cut2)
    check_scale(scale)
    check_bounds(des_min, des_max)

    x = np.asarray(x, dtype=float)
    return _rescale(_rising(x, cut1, cut2, scale), des_min, des_max)


def d_low(
    x: NumericType,
    cut1: float,
    cut2: float,
    scale: float = DEFAULT_SCALE,
    des_min: float = DEFAULT_DES_MIN,
    des_max: float = DEFAULT_DES_MAX,
) -> NumericType:
    """
    Low-is-good transformation, the mirror image of d_high.

    Shape (scale=1):
    des_max _______
                   \\
                    \\
                     \\________ des_min
                 cut1    cut2

    With the default bounds ``d_low(x, ...) == 1 - d_high(x, ...)`` for
    every scale.

    Args:
        x: Input value(s) to transform
        cut1: At or below this value desirability is des_max
        cut2: At or above this value desirability is des_min
        scale: Exponent of the ramp (see d_high)
        des_min: Lowest desirability
        des_max: Highest desirability

    Returns:
        Desirability in [des_min, des_max]

    Example:
        >>> d_low(0.01, cut1=0.001, cut2=0.1)
        0.90909...
    """
    check_two_cuts(cut1, cut2)
    check_scale(scale)
    check_bounds(des_min, des_max)

    x = np.asarray(x, dtype=float)
    return _rescale(_falling(x, cut1, cut2, scale), des_min, des_max)


def d_central(
    x: NumericType,
    cut1: float,
    cut2: float,
    cut3: float,
    cut4: float,
    scale_left: float = DEFAULT_SCALE,
    scale_right: float = DEFAULT_SCALE,
    des_min: float = DEFAULT_DES_MIN,
    des_max: float = DEFAULT_DES_MAX,
) -> NumericType:
    """
    Central-is-good transformation.

    Shape:
                 ___________ des_max
                /           \\
               /             \\
    des_min __/               \\__
            cut1 cut2     cut3 cut4

    The two ramps are independent: scale_left shapes [cut1, cut2] and
    scale_right shapes [cut3, cut4].

    Args:
        x: Input value(s) to transform
        cut1, cut2, cut3, cut4: Non-decreasing cut points
        scale_left: Exponent of the rising ramp
        scale_right: Exponent of the falling ramp
        des_min: Lowest desirability
        des_max: Highest desirability

    Returns:
        Desirability in [des_min, des_max]
    """
    check_four_cuts(cut1, cut2, cut3, cut4)
    check_scale(scale_left, "scale_left")
    check_scale(scale_right, "scale_right")
    check_bounds(des_min, des_max)

    x = np.asarray(x, dtype=float)
    y = _central_unit(x, cut1, cut2, cut3, cut4, scale_left, scale_right)
    return _rescale(y, des_min, des_max)


def d_ends(
    x: NumericType,
    cut1: float,
    cut2: float,
    cut3: float,
    cut4: float,
    scale_left: float = DEFAULT_SCALE,
    scale_right: float = DEFAULT_SCALE,
    des_min: float = DEFAULT_DES_MIN,
    des_max: float = DEFAULT_DES_MAX,
) -> NumericType:
    """
    Ends-is-good transformation, the complement of d_central.

    Shape:
    des_max __                 __
              \\               /
               \\             /
                \\___________/ des_min
            cut1 cut2     cut3 cut4

    Typical use is a log fold change where large changes in either
    direction are interesting.

    Args:
        x: Input value(s) to transform
        cut1, cut2, cut3, cut4: Non-decreasing cut points
        scale_left: Exponent of the falling ramp on [cut1, cut2]
        scale_right: Exponent of the rising ramp on [cut3, cut4]
        des_min: Lowest desirability
        des_max: Highest desirability

    Returns:
        Desirability in [des_min, des_max]
    """
    check_four_cuts(cut1, cut2, cut3, cut4)
    check_scale(scale_left, "scale_left")
    check_scale(scale_right, "scale_right")
    check_bounds(des_min, des_max)

    x = np.asarray(x, dtype=float)
    # Touching cut points resolve to the des_min plateau, mirroring d_central
    y = 1.0 - _central_unit(x, cut1, cut2, cut3, cut4, scale_left, scale_right)
    return _rescale(y, des_min, des_max)


def d_4pl(
    x: NumericType,
    hill: float,
    inflec: float,
    des_min: float = DEFAULT_DES_MIN,
    des_max: float = DEFAULT_DES_MAX,
) -> NumericType:
    """
    Four-parameter logistic transformation.

    Computes ``des_min + (des_max - des_min) / (1 + (x / inflec) ** -hill)``,
    evaluated as ``expit(hill * log(x / inflec))`` so that x = 0 saturates
    cleanly. The curve is only defined for x >= 0; negative inputs give NaN.

    Args:
        x: Input value(s) to transform
        hill: Steepness. Positive gives an increasing curve, negative a
            decreasing one
        inflec: Input value where desirability is halfway between the bounds
        des_min: Lower asymptote
        des_max: Upper asymptote

    Returns:
        Desirability in [des_min, des_max]

    Example:
        >>> d_4pl(10.0, hill=2, inflec=10.0)
        0.5
    """
    check_logistic(hill, inflec)
    check_bounds(des_min, des_max)

    x = np.asarray(x, dtype=float)
    ratio = np.where(x < 0, np.nan, x / inflec)
    with np.errstate(divide="ignore"):
        y = expit(hill * np.log(ratio))
    return _rescale(np.asarray(y), des_min, des_max)


# =============================================================================
# CATEGORICAL TRANSFORM
# =============================================================================


def is_missing(label: Any) -> bool:
    if label is None:
        return True
    return isinstance(label, (float, np.floating)) and np.isnan(label)


def d_categorical(
    labels: Any,
    mapping: Union[Mapping[Any, float], Iterable],
) -> NumericType:
    """
    Categorical transformation via an explicit lookup table.

    Args:
        labels: Label or sequence of labels
        mapping: Dict or ordered (category, desirability) pairs. Values need
            not be monotonic in any order

    Returns:
        Desirability for each label. Missing labels (None/NaN) give NaN

    Raises:
        UnknownCategoryError: If any label has no entry in mapping

    Example:
        >>> d_categorical(["A", "C"], {"A": 0.1, "B": 0.5, "C": 1.0})
        array([0.1, 1. ])
    """
    table = check_mapping(mapping)

    if isinstance(labels, (str, bytes)) or np.ndim(labels) == 0:
        flat = [labels]
        shape = ()
    else:
        arr = np.asarray(labels, dtype=object)
        flat = list(arr.ravel())
        shape = arr.shape

    unknown = []
    values = np.empty(len(flat), dtype=float)
    for i, label in enumerate(flat):
        if is_missing(label):
            values[i] = np.nan
        elif label in table:
            values[i] = table[label]
        elif label not in unknown:
            unknown.append(label)
    if unknown:
        raise UnknownCategoryError(unknown)

    result = values.reshape(shape)
    if result.ndim == 0:
        return float(result)
    return result
