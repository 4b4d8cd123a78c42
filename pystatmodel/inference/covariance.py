"""
Sampling covariance of maximum-likelihood estimates.

The covariance is the inverse Fisher information. Models report the
expected Hessian H (the negated information), so

    vcov = -(H)^-1

computed from hessian(params, HessianKind.EXPECTED, buf).

A singular or numerically ill-conditioned information matrix is not an
error of the fit: point estimates stay valid. estimate_covariance
therefore reports failure as an explicit absence (None) unless asked to
raise.
"""

import logging
import warnings
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystatmodel.core.exceptions import (
    DimensionError,
    InferenceWarning,
    SingularMatrixError,
    ValidationError,
)
from pystatmodel.core.model import HessianKind, Parameter, RegFitter
from pystatmodel.core.tolerances import (
    FP64_ILL_CONDITIONED,
    INVERSION_CONDITION_THRESHOLD,
    select_tolerance,
)
from pystatmodel.core.validation import check_2d, check_array, check_finite

logger = logging.getLogger(__name__)


def _as_square(hess: ArrayLike) -> NDArray[np.floating[Any]]:
    """View a row-major vectorized or square matrix as (p, p)."""
    h = check_array(hess, 'hessian')
    if h.ndim != 1:
        check_2d(h, 'hessian')
        if h.shape[0] != h.shape[1]:
            raise DimensionError(f"hessian: expected a square matrix, got shape {h.shape}")
        return h
    p = int(round(np.sqrt(h.size)))
    if p * p != h.size:
        raise DimensionError(f"hessian: {h.size} elements do not form a square matrix")
    return h.reshape(p, p)


def invert_information(
    hess: ArrayLike,
    *,
    condition_threshold: float = INVERSION_CONDITION_THRESHOLD,
) -> NDArray[np.floating[Any]]:
    """
    Negated inverse of an expected Hessian.

    Args:
        hess: Expected Hessian, row-major vectorized (p*p,) or (p, p)
        condition_threshold: Largest acceptable 2-norm condition number

    Returns:
        Covariance matrix, vectorized row-major, length p*p

    Raises:
        SingularMatrixError: If the matrix is singular, too ill-conditioned
            or contains non-finite values
    """
    h = _as_square(hess)
    p = h.shape[0]

    try:
        check_finite(h, 'hessian')
    except ValidationError as e:
        raise SingularMatrixError(
            f"Can't invert Hessian: {e}",
            matrix_name='expected Hessian',
            expected_rank=p,
        ) from e

    if p == 0:
        return np.empty(0, dtype=np.float64)

    with np.errstate(divide='ignore', invalid='ignore'):
        cond = float(np.linalg.cond(h))
    rank = int(np.linalg.matrix_rank(h))
    logger.debug("expected Hessian condition number %.3g, rank %d of %d", cond, rank, p)
    if np.isfinite(cond) and select_tolerance(cond) is FP64_ILL_CONDITIONED:
        logger.info("expected Hessian is ill-conditioned (cond=%.3g); standard errors may be inaccurate", cond)

    if rank < p:
        raise SingularMatrixError(
            f"Can't invert Hessian: rank {rank} < {p}",
            matrix_name='expected Hessian',
            condition_number=cond,
            rank=rank,
            expected_rank=p,
        )

    if not np.isfinite(cond) or cond > condition_threshold:
        raise SingularMatrixError(
            f"Can't invert Hessian: condition number {cond:.3g} exceeds {condition_threshold:.3g}",
            matrix_name='expected Hessian',
            condition_number=cond,
            rank=rank,
            expected_rank=p,
        )

    try:
        hinv = np.linalg.inv(h)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            f"Can't invert Hessian: {e}",
            matrix_name='expected Hessian',
            condition_number=cond,
            rank=rank,
            expected_rank=p,
        ) from e

    if not np.all(np.isfinite(hinv)):
        raise SingularMatrixError(
            "Can't invert Hessian: inverse contains non-finite values",
            matrix_name='expected Hessian',
            condition_number=cond,
            expected_rank=p,
        )

    vcov = -hinv
    return np.ascontiguousarray(vcov).reshape(-1)


def estimate_covariance(
    model: RegFitter,
    params: Parameter,
    *,
    strict: bool = False,
    condition_threshold: float = INVERSION_CONDITION_THRESHOLD,
    stacklevel: int = 2,
) -> NDArray[np.floating[Any]] | None:
    """
    Sampling covariance matrix of the parameter estimates.

    Args:
        model: The fitted model
        params: Parameter estimate at which to evaluate the information
        strict: If True, raise instead of returning None on failure
        condition_threshold: Largest acceptable condition number
        stacklevel: Passed to warnings.warn; callers that wrap this
            function add one per wrapping frame

    Returns:
        Row-major vectorized covariance (length num_params()**2), or None
        when the expected information matrix is not invertible

    Raises:
        SingularMatrixError: Only when strict=True and inversion fails
    """
    p = model.num_params()
    hess = np.zeros(p * p, dtype=np.float64)
    model.hessian(params, HessianKind.EXPECTED, hess)

    try:
        return invert_information(hess, condition_threshold=condition_threshold)
    except SingularMatrixError as e:
        if strict:
            raise
        logger.debug("covariance unavailable: %s", e)
        warnings.warn(
            f"{e}; standard errors, z-scores and p-values are unavailable",
            InferenceWarning,
            stacklevel=stacklevel,
        )
        return None
