"""
pystatmodel: family-agnostic inference for likelihood-based regression models.

A model family implements the RegFitter contract (log-likelihood, score,
observed/expected Hessian) over a Dataset. This package turns a fitted
estimate into a covariance matrix, standard errors, z-scores, p-values
and a text summary, without knowing anything about the family.

Submodules:
    core: Dataset, Parameter/Params, RegFitter, exceptions, validation
    inference: covariance estimation, BaseResults, SummaryTable
"""

__version__ = "0.1.0"

from pystatmodel.core import (
    Dataset,
    HessianKind,
    Parameter,
    Params,
    RegFitter,
    StatModelError,
    ValidationError,
    DimensionError,
    ConfigurationError,
    NumericalError,
    SingularMatrixError,
    InferenceWarning,
)
from pystatmodel.inference import BaseResults, SummaryTable, estimate_covariance

__all__ = [
    "__version__",
    "Dataset",
    "HessianKind",
    "Parameter",
    "Params",
    "RegFitter",
    "BaseResults",
    "SummaryTable",
    "estimate_covariance",
    "StatModelError",
    "ValidationError",
    "DimensionError",
    "ConfigurationError",
    "NumericalError",
    "SingularMatrixError",
    "InferenceWarning",
]
