"""Error types for invalid clustering input."""


class InvalidInputError(ValueError):
    """A precondition on the input data or parameters was violated."""


class InsufficientDataError(InvalidInputError):
    """Fewer data points than requested centers."""


class DimensionalityError(InvalidInputError):
    """Data is not two-dimensional, or feature dimensions disagree."""
