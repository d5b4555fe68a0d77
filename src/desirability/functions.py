"""
Desirability function objects.

Each class is an immutable description of one curve shape and its
parameters. Parameters are validated when the object is built, so a
constructed function can be applied to any number of value series.

The shape is carried as a ``Shape`` tag and ``evaluate`` is the one place
that turns a tagged function into a transform call. ``to_dict`` and
``function_from_dict`` give a JSON-friendly form for saving configurations.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from src.config import DEFAULT_DES_MAX, DEFAULT_DES_MIN, DEFAULT_SCALE
from src.desirability import transforms
from src.desirability.errors import InvalidParameterError
from src.desirability.transforms import NumericType


class Shape(str, Enum):
    """Tag identifying which curve a desirability function evaluates."""

    HIGH = "high"
    LOW = "low"
    CENTRAL = "central"
    ENDS = "ends"
    LOGISTIC = "4pl"
    CATEGORICAL = "categorical"


class _TaggedFunction:
    """Shared behaviour for all desirability function classes."""

    kind: ClassVar[Shape]

    def __call__(self, values: Any) -> NumericType:
        return evaluate(self, values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"shape": self.kind.value, "params": asdict(self)}


@dataclass(frozen=True)
class HighIsGood(_TaggedFunction):
    """Larger values are more desirable (see ``transforms.d_high``)."""

    cut1: float
    cut2: float
    scale: float = DEFAULT_SCALE
    des_min: float = DEFAULT_DES_MIN
    des_max: float = DEFAULT_DES_MAX

    kind: ClassVar[Shape] = Shape.HIGH

    def __post_init__(self):
        transforms.check_two_cuts(self.cut1, self.cut2)
        transforms.check_scale(self.scale)
        transforms.check_bounds(self.des_min, self.des_max)


@dataclass(frozen=True)
class LowIsGood(_TaggedFunction):
    """Smaller values are more desirable (see ``transforms.d_low``)."""

    cut1: float
    cut2: float
    scale: float = DEFAULT_SCALE
    des_min: float = DEFAULT_DES_MIN
    des_max: float = DEFAULT_DES_MAX

    kind: ClassVar[Shape] = Shape.LOW

    def __post_init__(self):
        transforms.check_two_cuts(self.cut1, self.cut2)
        transforms.check_scale(self.scale)
        transforms.check_bounds(self.des_min, self.des_max)


@dataclass(frozen=True)
class CentralIsGood(_TaggedFunction):
    """Values inside [cut2, cut3] are most desirable."""

    cut1: float
    cut2: float
    cut3: float
    cut4: float
    scale_left: float = DEFAULT_SCALE
    scale_right: float = DEFAULT_SCALE
    des_min: float = DEFAULT_DES_MIN
    des_max: float = DEFAULT_DES_MAX

    kind: ClassVar[Shape] = Shape.CENTRAL

    def __post_init__(self):
        transforms.check_four_cuts(self.cut1, self.cut2, self.cut3, self.cut4)
        transforms.check_scale(self.scale_left, "scale_left")
        transforms.check_scale(self.scale_right, "scale_right")
        transforms.check_bounds(self.des_min, self.des_max)


@dataclass(frozen=True)
class EndsIsGood(_TaggedFunction):
    """Values outside [cut1, cut4] are most desirable."""

    cut1: float
    cut2: float
    cut3: float
    cut4: float
    scale_left: float = DEFAULT_SCALE
    scale_right: float = DEFAULT_SCALE
    des_min: float = DEFAULT_DES_MIN
    des_max: float = DEFAULT_DES_MAX

    kind: ClassVar[Shape] = Shape.ENDS

    def __post_init__(self):
        transforms.check_four_cuts(self.cut1, self.cut2, self.cut3, self.cut4)
        transforms.check_scale(self.scale_left, "scale_left")
        transforms.check_scale(self.scale_right, "scale_right")
        transforms.check_bounds(self.des_min, self.des_max)


@dataclass(frozen=True)
class FourParameterLogistic(_TaggedFunction):
    """Sigmoid between des_min and des_max centred on inflec."""

    hill: float
    inflec: float
    des_min: float = DEFAULT_DES_MIN
    des_max: float = DEFAULT_DES_MAX

    kind: ClassVar[Shape] = Shape.LOGISTIC

    def __post_init__(self):
        transforms.check_logistic(self.hill, self.inflec)
        transforms.check_bounds(self.des_min, self.des_max)


@dataclass(frozen=True)
class CategoricalDesirability(_TaggedFunction):
    """
    Lookup table from labels to desirabilities.

    Attributes:
        mapping: Ordered (category, desirability) pairs. A dict is accepted
            and stored as a tuple of pairs.
    """

    mapping: tuple

    kind: ClassVar[Shape] = Shape.CATEGORICAL

    def __post_init__(self):
        table = transforms.check_mapping(self.mapping)
        object.__setattr__(self, "mapping", tuple(table.items()))

    @property
    def categories(self) -> list:
        return [category for category, _ in self.mapping]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "shape": self.kind.value,
            "params": {"mapping": [list(pair) for pair in self.mapping]},
        }


DesirabilityFunction = Union[
    HighIsGood,
    LowIsGood,
    CentralIsGood,
    EndsIsGood,
    FourParameterLogistic,
    CategoricalDesirability,
]

SHAPE_TYPES = {
    Shape.HIGH: HighIsGood,
    Shape.LOW: LowIsGood,
    Shape.CENTRAL: CentralIsGood,
    Shape.ENDS: EndsIsGood,
    Shape.LOGISTIC: FourParameterLogistic,
    Shape.CATEGORICAL: CategoricalDesirability,
}


def evaluate(function: DesirabilityFunction, values: Any) -> NumericType:
    """
    Apply a desirability function to raw values.

    Args:
        function: Any of the desirability function classes
        values: Raw value(s), or labels for a categorical function

    Returns:
        Desirability for each value
    """
    kind = getattr(function, "kind", None)

    if kind is Shape.HIGH:
        return transforms.d_high(
            values, function.cut1, function.cut2, function.scale,
            function.des_min, function.des_max,
        )
    if kind is Shape.LOW:
        return transforms.d_low(
            values, function.cut1, function.cut2, function.scale,
            function.des_min, function.des_max,
        )
    if kind is Shape.CENTRAL:
        return transforms.d_central(
            values, function.cut1, function.cut2, function.cut3, function.cut4,
            function.scale_left, function.scale_right,
            function.des_min, function.des_max,
        )
    if kind is Shape.ENDS:
        return transforms.d_ends(
            values, function.cut1, function.cut2, function.cut3, function.cut4,
            function.scale_left, function.scale_right,
            function.des_min, function.des_max,
        )
    if kind is Shape.LOGISTIC:
        return transforms.d_4pl(
            values, function.hill, function.inflec,
            function.des_min, function.des_max,
        )
    if kind is Shape.CATEGORICAL:
        return transforms.d_categorical(values, function.mapping)

    raise TypeError(f"Not a desirability function: {function!r}")


def function_from_dict(data: dict[str, Any]) -> DesirabilityFunction:
    """Deserialize a function produced by ``to_dict``."""
    if "shape" not in data:
        raise InvalidParameterError(f"Serialized function has no 'shape': {data!r}")

    shape_name = data["shape"]
    try:
        shape = Shape(shape_name)
    except ValueError:
        raise InvalidParameterError(
            f"Unknown shape '{shape_name}'. "
            f"Available: {[s.value for s in Shape]}"
        ) from None

    params = dict(data.get("params", {}))
    if shape is Shape.CATEGORICAL:
        params["mapping"] = [tuple(pair) for pair in params.get("mapping", [])]
    return SHAPE_TYPES[shape](**params)
