# simplexfit/errors.py


class InvalidDimension(ValueError):
    """A problem size or trial count is below 1 (k, m or n)."""


class DimensionMismatch(ValueError):
    """Shapes of the matrix, target and candidate do not line up."""
