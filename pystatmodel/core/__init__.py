"""
Core infrastructure for pystatmodel.

This module provides the contracts every model family implements and the
shared utilities used by the inference layer.

Key components:
    dataset: Dataset (named columns with response/predictor roles)
    model: Parameter, Params, RegFitter, HessianKind
    protocols: ColumnSource, Resultser
    exceptions: Exception hierarchy
    validation: Input and buffer validators
    tolerances: Numerical thresholds and display constants
"""

from pystatmodel.core.dataset import Dataset
from pystatmodel.core.model import HessianKind, Parameter, Params, RegFitter
from pystatmodel.core.protocols import ColumnSource, Resultser
from pystatmodel.core.exceptions import (
    StatModelError,
    ValidationError,
    DimensionError,
    ConfigurationError,
    NumericalError,
    SingularMatrixError,
    InferenceWarning,
)

__all__ = [
    # Data and contracts
    "Dataset",
    "HessianKind",
    "Parameter",
    "Params",
    "RegFitter",
    # Protocols
    "ColumnSource",
    "Resultser",
    # Exceptions
    "StatModelError",
    "ValidationError",
    "DimensionError",
    "ConfigurationError",
    "NumericalError",
    "SingularMatrixError",
    "InferenceWarning",
]
