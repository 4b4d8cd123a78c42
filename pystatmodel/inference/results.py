"""
Results of a fitted regression model.

BaseResults holds the point estimates, the maximized log-likelihood and
(optionally) the sampling covariance matrix, and derives standard errors,
z-scores and p-values from them on first request.

Derived statistics are cached: each is computed at most once and the same
read-only array is returned on every later call. When no covariance is
available every derived statistic is None, never a zero-filled or NaN
vector.
"""

from __future__ import annotations

import logging
import threading
import warnings
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.special import erfc
from scipy.stats import norm

from pystatmodel.core.dataset import Dataset
from pystatmodel.core.exceptions import DimensionError, InferenceWarning, ValidationError
from pystatmodel.core.model import Parameter, RegFitter
from pystatmodel.core.validation import check_array, check_1d, check_length
from pystatmodel.inference.covariance import estimate_covariance
from pystatmodel.inference.formatting import (
    format_float,
    format_pvalue,
    format_strings,
)
from pystatmodel.inference.summary import SummaryTable

logger = logging.getLogger(__name__)

# Marks a cache slot that has not been computed yet (None is a valid value)
_UNSET: Any = object()

_CACHE_SLOTS = ('_std_err', '_z_scores', '_p_values')


def _readonly(arr: NDArray[Any]) -> NDArray[Any]:
    arr.flags.writeable = False
    return arr


def normcdf(x: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Standard normal CDF, Φ(x), via the complementary error function.

    Accurate far into the lower tail, where 1 - Φ(-x) would round to 0.
    """
    return 0.5 * erfc(-np.asarray(x, dtype=np.float64) / np.sqrt(2.0))


class BaseResults:
    """
    Parameter estimates and inferential statistics of a fitted model.

    Args:
        model: The model that was fit; shared, not owned
        loglike: Maximized log-likelihood
        params: Point estimate (a Parameter or its coefficient vector)
        xnames: Coefficient labels, in coefficient order
        vcov: Sampling covariance, row-major vectorized (p*p,) or (p, p);
            None if it could not be estimated

    Raises:
        DimensionError: If params, xnames or vcov do not match the model
    """

    def __init__(
        self,
        model: RegFitter,
        loglike: float,
        params: Parameter | ArrayLike,
        xnames: Sequence[str],
        vcov: ArrayLike | None = None,
    ):
        p = model.num_params()

        if isinstance(params, Parameter):
            params = params.coefficients
        coef = np.array(check_array(params, 'params'), dtype=np.float64)
        check_1d(coef, 'params')
        check_length(coef, p, 'params')

        names = tuple(str(x) for x in xnames)
        if len(names) != p:
            raise DimensionError(f"xnames: expected {p} names, got {len(names)}")

        if vcov is not None:
            cov = np.array(check_array(vcov, 'vcov'), dtype=np.float64).reshape(-1)
            if cov.size != p * p:
                raise DimensionError(
                    f"vcov: expected {p * p} elements for {p} parameters, got {cov.size}"
                )
            vcov = _readonly(cov)

        self._model = model
        self._loglike = float(loglike)
        self._params = _readonly(coef)
        self._xnames = names
        self._vcov = vcov

        self._lock = threading.RLock()
        self._std_err: NDArray[np.floating[Any]] | None = _UNSET
        self._z_scores: NDArray[np.floating[Any]] | None = _UNSET
        self._p_values: NDArray[np.floating[Any]] | None = _UNSET
        # Set when variances turn out unusable; issued by the next public accessor
        self._notice: str | None = None

    def __getstate__(self) -> dict[str, Any]:
        state = self.__dict__.copy()
        del state['_lock']
        # The sentinel does not survive pickling; unset slots are recomputed
        for key in _CACHE_SLOTS:
            if state[key] is _UNSET:
                del state[key]
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update({key: _UNSET for key in _CACHE_SLOTS})
        self.__dict__.update(state)
        self._lock = threading.RLock()
        for key in ('_params', '_vcov', *_CACHE_SLOTS):
            value = self.__dict__[key]
            if isinstance(value, np.ndarray):
                _readonly(value)

    @classmethod
    def from_model(
        cls,
        model: RegFitter,
        params: Parameter,
        *,
        loglike: float | None = None,
        xnames: Sequence[str] | None = None,
        strict: bool = False,
    ) -> BaseResults:
        """
        Wrap a completed fit.

        Evaluates the exact log-likelihood (unless given), labels the
        coefficients with the model's predictor names (unless given) and
        estimates the covariance from the expected Hessian at params.

        Args:
            model: The fitted model
            params: Maximum-likelihood estimate
            loglike: Maximized log-likelihood, if already known
            xnames: Coefficient labels; defaults to the predictor names
            strict: Raise SingularMatrixError instead of returning results
                without covariance when the information matrix is singular
        """
        model.check_params(params)
        if loglike is None:
            loglike = model.log_likelihood(params, True)
        if xnames is None:
            xnames = model.predictor_names()
        vcov = estimate_covariance(model, params, strict=strict, stacklevel=3)
        return cls(model, loglike, params, xnames, vcov)

    # === Direct accessors ===

    @property
    def model(self) -> RegFitter:
        """The model used to produce the results."""
        return self._model

    @property
    def names(self) -> tuple[str, ...]:
        """Coefficient labels, in the order of params and vcov rows."""
        return self._xnames

    @property
    def loglike(self) -> float:
        return self._loglike

    @property
    def log_likelihood(self) -> float:
        return self._loglike

    @property
    def params(self) -> NDArray[np.floating[Any]]:
        """Point estimates of the coefficients."""
        return self._params

    @property
    def vcov(self) -> NDArray[np.floating[Any]] | None:
        """Sampling covariance, vectorized row-major, or None."""
        return self._vcov

    @property
    def vcov_matrix(self) -> NDArray[np.floating[Any]] | None:
        """Sampling covariance as a (p, p) read-only view, or None."""
        if self._vcov is None:
            return None
        p = self.num_params
        return self._vcov.reshape(p, p)

    @property
    def has_vcov(self) -> bool:
        return self._vcov is not None

    @property
    def num_params(self) -> int:
        return len(self._params)

    @property
    def num_obs(self) -> int:
        return self._model.num_observations()

    # === Predictions ===

    def fitted_values(self, data: Dataset | None = None) -> NDArray[np.floating[Any]]:
        """
        Fitted linear predictor.

        Args:
            data: Data to predict for. Must have the same variables, in the
                same order, as the training data. None uses the training data.

        Raises:
            DimensionError: If data's column structure differs from the
                training data's
        """
        training = self._model.dataset()

        if data is None:
            data = training
        elif not isinstance(data, Dataset):
            raise ValidationError(
                f"data must be a Dataset or None, got {type(data).__name__}"
            )

        if data.n_variables != training.n_variables:
            raise DimensionError(
                f"Data has incorrect number of columns, {data.n_variables} != {training.n_variables}"
            )
        if not training.same_structure(data):
            raise DimensionError(
                f"Data columns {list(data.varnames)} do not match training "
                f"columns {list(training.varnames)}"
            )

        xpos = list(self._model.predictor_positions())
        if len(xpos) != self.num_params:
            raise DimensionError(
                f"model has {len(xpos)} predictor positions for {self.num_params} coefficients"
            )

        columns = data.data
        fv = np.zeros(data.n_observations, dtype=np.float64)
        for k, j in enumerate(xpos):
            fv += self._params[k] * columns[j]

        return fv

    # === Derived statistics (lazy, cached) ===

    # Public accessors only call the private getters below, then flush any
    # pending notice, so the warning points at the caller's line.

    def std_err(self) -> NDArray[np.floating[Any]] | None:
        """
        Standard errors: square roots of the covariance diagonal.

        None when no covariance is available, or when any variance is
        non-positive or non-finite (an InferenceWarning is issued).
        """
        se = self._get_std_err()
        self._flush_notice()
        return se

    def z_scores(self) -> NDArray[np.floating[Any]] | None:
        """Parameter estimates divided by their standard errors."""
        z = self._get_z_scores()
        self._flush_notice()
        return z

    def p_values(self) -> NDArray[np.floating[Any]] | None:
        """
        Two-sided p-values for the null hypothesis that each coefficient is
        zero: 2 * Φ(-|z|).
        """
        pv = self._get_p_values()
        self._flush_notice()
        return pv

    def _flush_notice(self) -> None:
        with self._lock:
            notice, self._notice = self._notice, None
        if notice is not None:
            # 1 is this frame, 2 the public accessor, 3 its caller
            warnings.warn(notice, InferenceWarning, stacklevel=3)

    def _get_std_err(self) -> NDArray[np.floating[Any]] | None:
        with self._lock:
            if self._std_err is _UNSET:
                self._std_err = self._compute_std_err()
            return self._std_err

    def _compute_std_err(self) -> NDArray[np.floating[Any]] | None:
        if self._vcov is None:
            return None

        p = self.num_params
        var = np.array([self._vcov[i * p + i] for i in range(p)], dtype=np.float64)

        bad = ~np.isfinite(var) | (var <= 0)
        if np.any(bad):
            labels = [self._xnames[i] for i in np.flatnonzero(bad)]
            self._notice = (
                f"Non-positive or non-finite variance estimate for {labels}; "
                f"standard errors, z-scores and p-values are unavailable"
            )
            return None

        logger.debug("computed standard errors for %d parameters", p)
        return _readonly(np.sqrt(var))

    def _get_z_scores(self) -> NDArray[np.floating[Any]] | None:
        with self._lock:
            if self._z_scores is _UNSET:
                se = self._get_std_err()
                self._z_scores = None if se is None else _readonly(self._params / se)
            return self._z_scores

    def _get_p_values(self) -> NDArray[np.floating[Any]] | None:
        with self._lock:
            if self._p_values is _UNSET:
                z = self._get_z_scores()
                if z is None:
                    self._p_values = None
                else:
                    self._p_values = _readonly(2.0 * normcdf(-np.abs(z)))
            return self._p_values

    def conf_int(self, alpha: float = 0.05) -> NDArray[np.floating[Any]] | None:
        """
        Normal-theory confidence intervals, shape (p, 2), or None.

        Args:
            alpha: 1 - coverage; intervals cover with probability 1 - alpha
        """
        if not 0 < alpha < 1:
            raise ValidationError(f"alpha must be in (0, 1), got {alpha}")

        se = self._get_std_err()
        self._flush_notice()
        if se is None:
            return None

        q = norm.ppf(1 - alpha / 2)
        return np.column_stack([self._params - q * se, self._params + q * se])

    # === Information criteria ===

    def aic(self) -> float:
        """Akaike information criterion, -2 loglike + 2 p."""
        return -2 * self._loglike + 2 * self.num_params

    def bic(self) -> float:
        """Bayesian information criterion, -2 loglike + log(n) p."""
        return -2 * self._loglike + np.log(self.num_obs) * self.num_params

    # === Reporting ===

    def summary(
        self,
        title: str = "Regression results",
        top: Sequence[str] | None = None,
        msg: Sequence[str] | None = None,
    ) -> SummaryTable:
        """
        Summary table of coefficient-level statistics.

        Inferential columns show NA when they are unavailable.

        Args:
            title: Title line
            top: Metadata strings; defaults to sample size, parameter
                count, log-likelihood and AIC
            msg: Extra lines shown below the table
        """
        p = self.num_params

        if top is None:
            top = [
                f"Num obs:        {self.num_obs}",
                f"Num params:     {p}",
                f"Log-likelihood: {self._loglike:.4f}",
                f"AIC:            {self.aic():.4f}",
            ]

        missing = [None] * p
        se = self._get_std_err()
        z = self._get_z_scores()
        pv = self._get_p_values()
        self._flush_notice()

        messages = list(msg or [])
        if self._vcov is None:
            messages.append("Covariance matrix is unavailable; inferential statistics not computed.")
        elif se is None:
            messages.append("Variance estimates are not positive; inferential statistics not computed.")

        return SummaryTable(
            title=title,
            colnames=["Variable", "Parameter", "SE", "Z", "P>|z|"],
            colfmt=[format_strings, format_float, format_float, format_float, format_pvalue],
            cols=[
                list(self._xnames),
                list(self._params),
                missing if se is None else list(se),
                missing if z is None else list(z),
                missing if pv is None else list(pv),
            ],
            top=list(top),
            msg=messages,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(n={self.num_obs}, p={self.num_params}, "
            f"loglike={self._loglike:.4f}, vcov={'yes' if self.has_vcov else 'no'})"
        )
