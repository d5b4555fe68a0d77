"""
Error types raised by the desirability library.

All errors subclass ``DesirabilityError`` which itself is a ``ValueError``,
so callers that already guard against bad values keep working.
"""


class DesirabilityError(ValueError):
    """Base class for all desirability errors."""


class InvalidParameterError(DesirabilityError):
    """Cut points, scale, bounds or mapping values are not usable."""


class UnknownCategoryError(DesirabilityError):
    """A categorical label has no entry in the mapping."""

    def __init__(self, labels):
        self.labels = list(labels)
        super().__init__(
            f"No desirability mapped for label(s): {self.labels}"
        )


class LengthMismatchError(DesirabilityError):
    """Desirability series passed to the combiner differ in length."""


class InvalidWeightError(DesirabilityError):
    """A weight is not positive, or the weight count is wrong."""


class InvalidInputError(DesirabilityError):
    """Input series are empty or hold values that cannot be combined."""
