"""
Inference for fitted regression models.

Turns a fitted model (a RegFitter plus its maximum-likelihood estimate)
into standard errors, z-scores, p-values and a printable summary.

Public API:
    estimate_covariance(model, params) -> vcov or None
    BaseResults(model, loglike, params, xnames, vcov)
    BaseResults.from_model(model, params)
    SummaryTable(title, colnames, colfmt, cols, top, msg)

Example:
    >>> results = BaseResults.from_model(model, params)   # doctest: +SKIP
    >>> results.p_values()                                # doctest: +SKIP
    >>> print(results.summary())                          # doctest: +SKIP
"""

from pystatmodel.inference.covariance import estimate_covariance, invert_information
from pystatmodel.inference.results import BaseResults, normcdf
from pystatmodel.inference.summary import SummaryTable
from pystatmodel.inference.formatting import (
    Formatter,
    float_formatter,
    format_float,
    format_int,
    format_pvalue,
    format_strings,
)

__all__ = [
    "estimate_covariance",
    "invert_information",
    "BaseResults",
    "normcdf",
    "SummaryTable",
    "Formatter",
    "float_formatter",
    "format_float",
    "format_int",
    "format_pvalue",
    "format_strings",
]
