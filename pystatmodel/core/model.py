"""
Model contracts: parameters and regression fitters.

A model family (Poisson, binomial, negative binomial, ...) binds a
Dataset to a likelihood and implements RegFitter. Everything downstream
(covariance estimation, results, summaries) talks to the model only
through this contract, so it stays family-agnostic.

Buffer convention:
    score() and hessian() write into caller-owned float64 buffers instead
    of returning new arrays, because optimizers call them in their inner
    loop. score's buffer has num_params() elements, hessian's
    num_params()**2 (row-major). Existing contents are overwritten, never
    accumulated into.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Mapping, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystatmodel.core.dataset import Dataset
from pystatmodel.core.exceptions import DimensionError
from pystatmodel.core.validation import check_array, check_1d, check_length


class HessianKind(str, Enum):
    """Which second-derivative matrix of the log-likelihood to compute."""

    # Realized curvature at the data
    OBSERVED = "observed"
    # Fisher information (negated); required for covariance estimation
    EXPECTED = "expected"


# =====================================================================
# Parameters
# =====================================================================

class Parameter(ABC):
    """
    The parameter of a model.

    Holds the coefficients of the covariates in the linear predictor.
    Families may extend it with auxiliary scalars (scale, dispersion, ...)
    that their likelihood reads but that are not coefficients.
    """

    @property
    @abstractmethod
    def coefficients(self) -> NDArray[np.floating[Any]]:
        """
        The coefficient vector.

        Returned by reference: writing into it changes the parameter.
        """
        ...

    @abstractmethod
    def set_coefficients(self, values: ArrayLike) -> None:
        """Replace the coefficient values."""
        ...

    @abstractmethod
    def clone(self) -> Parameter:
        """Independent deep copy with identical values."""
        ...

    def __len__(self) -> int:
        return len(self.coefficients)


class Params(Parameter):
    """
    Coefficient vector plus named auxiliary scalars.

    Example:
        >>> p = Params([0.5, -1.0], scale=1.0)
        >>> q = p.clone()
        >>> q.coefficients[0] = 2.0
        >>> float(p.coefficients[0])
        0.5
    """

    def __init__(self, coefficients: ArrayLike, **aux: float):
        coef = check_array(coefficients, 'coefficients')
        check_1d(coef, 'coefficients')
        # Always own the storage so clones never alias the caller's array
        self._coef = np.array(coef, dtype=np.float64)
        self._aux = {name: float(value) for name, value in aux.items()}

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._coef

    def set_coefficients(self, values: ArrayLike) -> None:
        """
        Overwrite the coefficients in place.

        Raises:
            DimensionError: If values has a different length
        """
        arr = check_array(values, 'coefficients')
        check_1d(arr, 'coefficients')
        check_length(arr, len(self._coef), 'coefficients')
        self._coef[:] = arr

    @property
    def aux(self) -> Mapping[str, float]:
        """Auxiliary (non-coefficient) parameters, read-only view."""
        return dict(self._aux)

    def get_aux(self, name: str, default: float | None = None) -> float | None:
        return self._aux.get(name, default)

    def set_aux(self, name: str, value: float) -> None:
        self._aux[name] = float(value)

    def clone(self) -> Params:
        return Params(self._coef.copy(), **copy.deepcopy(self._aux))

    def __repr__(self) -> str:
        aux = ''.join(f", {k}={v!r}" for k, v in self._aux.items())
        return f"Params({self._coef.tolist()}{aux})"


# =====================================================================
# Regression fitter contract
# =====================================================================

class RegFitter(ABC):
    """
    A regression model that can be fit to data.

    Implementations are created once per (data, family, link, weights,
    offset) configuration and are immutable afterwards. Only the
    caller-owned output buffers of score() and hessian() are written.
    """

    @abstractmethod
    def num_params(self) -> int:
        """Number of coefficients in the model."""
        ...

    @abstractmethod
    def num_observations(self) -> int:
        """Number of observations in the data set."""
        ...

    @abstractmethod
    def predictor_positions(self) -> Sequence[int]:
        """Positions of the covariates in dataset().data, in coefficient order."""
        ...

    @abstractmethod
    def dataset(self) -> Dataset:
        """The training data."""
        ...

    @abstractmethod
    def log_likelihood(self, params: Parameter, exact: bool = True) -> float:
        """
        Log-likelihood at params.

        With exact=False, terms that do not depend on the parameter may be
        dropped (optimizer inner loops). Both variants must differ only by
        a constant independent of params.
        """
        ...

    @abstractmethod
    def score(self, params: Parameter, out: NDArray[np.floating[Any]]) -> None:
        """Write the gradient of the log-likelihood at params into out."""
        ...

    @abstractmethod
    def hessian(
        self,
        params: Parameter,
        kind: HessianKind,
        out: NDArray[np.floating[Any]],
    ) -> None:
        """
        Write the row-major Hessian of the log-likelihood into out.

        EXPECTED gives the negated Fisher information, OBSERVED the actual
        second derivative. Both are symmetric; they can differ for
        non-canonical links or auxiliary parameters.
        """
        ...

    # === Concrete helpers ===

    def check_params(self, params: Parameter) -> None:
        """
        Verify the coefficient vector matches num_params().

        Raises:
            DimensionError: On a length mismatch
        """
        p = self.num_params()
        if len(params.coefficients) != p:
            raise DimensionError(
                f"params: model has {p} coefficients, got {len(params.coefficients)}"
            )

    def score_vector(self, params: Parameter) -> NDArray[np.floating[Any]]:
        """Allocate a buffer and return the score at params."""
        out = np.empty(self.num_params(), dtype=np.float64)
        self.score(params, out)
        return out

    def hessian_matrix(
        self,
        params: Parameter,
        kind: HessianKind = HessianKind.EXPECTED,
    ) -> NDArray[np.floating[Any]]:
        """Allocate a buffer and return the Hessian at params as a (p, p) array."""
        p = self.num_params()
        out = np.empty(p * p, dtype=np.float64)
        self.hessian(params, kind, out)
        return out.reshape(p, p)

    def predictor_names(self) -> tuple[str, ...]:
        """Names of the covariates at predictor_positions()."""
        varnames = self.dataset().varnames
        return tuple(varnames[j] for j in self.predictor_positions())
