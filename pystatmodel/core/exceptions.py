"""
Exception hierarchy for pystatmodel.

All exceptions inherit from StatModelError to allow catching any
library-specific error.

Mapping onto the failure classes of the inference layer:
    - DimensionError: contract violation (mismatched vector, buffer or
      column-structure lengths). Programmer error, never recovered locally.
    - ConfigurationError: unsupported configuration detected at
      construction time (e.g. a predictor name absent from the dataset).
    - SingularMatrixError: the information matrix cannot be inverted.
      Recovered by the covariance estimator, which reports absence instead.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class StatModelError(Exception):
    """Base exception for all pystatmodel errors."""
    pass


class ValidationError(StatModelError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when a score/Hessian buffer, coefficient vector or prediction
    dataset does not have the size the model requires.
    """
    pass


class ConfigurationError(ValidationError):
    """
    A dataset or model was configured with names it cannot resolve.

    Raised at construction time, before any numeric work, when a declared
    response or predictor variable does not exist among the variables.

    Attributes:
        missing: Names that could not be resolved
        available: Names that were available
    """

    def __init__(
        self,
        message: str,
        missing: tuple[str, ...] = (),
        available: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.missing = missing
        self.available = available


class NumericalError(StatModelError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when the expected information matrix must be inverted but is
    singular or too ill-conditioned for the inverse to be trusted.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (the number of parameters)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class InferenceWarning(UserWarning):
    """
    Inferential statistics are unavailable for a fitted model.

    Issued when the covariance matrix cannot be estimated or yields
    unusable variances. Point estimates remain valid.
    """
    pass
