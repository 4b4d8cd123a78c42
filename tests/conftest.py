"""
pytest configuration and shared fixtures.

Provides small concrete RegFitter implementations so the family-agnostic
inference layer can be exercised end to end:

    PoissonModel: Poisson log-linear model (canonical link, observed and
        expected Hessians coincide)
    FixedHessianModel: returns a fixed expected Hessian; used to drive the
        covariance estimator into singular and ill-conditioned cases
"""

import numpy as np
import pytest
from scipy.special import gammaln

from pystatmodel.core.dataset import Dataset
from pystatmodel.core.model import HessianKind, Params, RegFitter
from pystatmodel.core.validation import check_buffer


class PoissonModel(RegFitter):
    """Poisson regression with log link over the dataset's predictors."""

    def __init__(self, data: Dataset, xnames=None):
        self._data = data
        self._xpos = data.positions(data.xnames if xnames is None else xnames)
        self._X = np.column_stack([data.data[j] for j in self._xpos])
        self._y = data.response

    def num_params(self):
        return len(self._xpos)

    def num_observations(self):
        return self._data.n_observations

    def predictor_positions(self):
        return self._xpos

    def dataset(self):
        return self._data

    def _linpred(self, params):
        self.check_params(params)
        return self._X @ params.coefficients

    def log_likelihood(self, params, exact=True):
        eta = self._linpred(params)
        ll = float(np.sum(self._y * eta - np.exp(eta)))
        if exact:
            ll -= float(np.sum(gammaln(self._y + 1)))
        return ll

    def score(self, params, out):
        check_buffer(out, self.num_params(), 'score')
        mu = np.exp(self._linpred(params))
        out[:] = self._X.T @ (self._y - mu)

    def hessian(self, params, kind, out):
        p = self.num_params()
        check_buffer(out, p * p, 'hessian')
        mu = np.exp(self._linpred(params))
        h = (self._X.T * mu) @ self._X
        out[:] = -h.ravel()


class FixedHessianModel(RegFitter):
    """Model whose expected Hessian is a constant matrix."""

    def __init__(self, data: Dataset, hess, observed=None, loglike=-1.0):
        self._data = data
        self._xpos = data.positions(data.xnames)
        self._hess = np.asarray(hess, dtype=np.float64).ravel()
        self._obs = self._hess if observed is None else np.asarray(observed, dtype=np.float64).ravel()
        self._loglike = loglike

    def num_params(self):
        return len(self._xpos)

    def num_observations(self):
        return self._data.n_observations

    def predictor_positions(self):
        return self._xpos

    def dataset(self):
        return self._data

    def log_likelihood(self, params, exact=True):
        self.check_params(params)
        return self._loglike

    def score(self, params, out):
        check_buffer(out, self.num_params(), 'score')
        out[:] = 0.0

    def hessian(self, params, kind, out):
        p = self.num_params()
        check_buffer(out, p * p, 'hessian')
        out[:] = self._hess if kind == HessianKind.EXPECTED else self._obs


def newton_fit(model, start, max_iter=50, tol=1e-10):
    """Newton-Raphson on the log-likelihood using the model's buffers."""
    params = start.clone()
    p = model.num_params()
    score = np.empty(p)
    hess = np.empty(p * p)
    for _ in range(max_iter):
        model.score(params, score)
        model.hessian(params, HessianKind.OBSERVED, hess)
        step = np.linalg.solve(hess.reshape(p, p), score)
        params.set_coefficients(params.coefficients - step)
        if np.max(np.abs(step)) < tol:
            break
    return params


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def data1():
    """Seven observations; the Poisson expected Hessian at 0 is [[-7, -10], [-10, -86]]."""
    return Dataset.build(
        [
            [0, 1, 3, 2, 1, 1, 0],
            [1, 1, 1, 1, 1, 1, 1],
            [4, 1, -1, 3, 5, -5, 3],
        ],
        ['y', 'x1', 'x2'],
        'y',
        ['x1', 'x2'],
    )


@pytest.fixture
def poisson_model(data1):
    return PoissonModel(data1)


@pytest.fixture
def poisson_data(rng):
    """Larger Poisson dataset with an intercept and two covariates."""
    n = 200
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    mu = np.exp(0.5 + 0.4 * x1 - 0.3 * x2)
    y = rng.poisson(mu)
    return Dataset.build(
        [y, np.ones(n), x1, x2],
        ['y', 'const', 'x1', 'x2'],
        'y',
        ['const', 'x1', 'x2'],
    )


@pytest.fixture
def poisson_fit(poisson_data):
    """A fitted Poisson model and its maximum-likelihood estimate."""
    model = PoissonModel(poisson_data)
    params = newton_fit(model, Params(np.zeros(3)))
    return model, params


@pytest.fixture
def singular_model(data1):
    return FixedHessianModel(data1, np.zeros(4))


@pytest.fixture
def fixed_hessian_cls():
    """FixedHessianModel class, for tests that choose their own Hessian."""
    return FixedHessianModel



@pytest.fixture
def poisson_cls():
    """PoissonModel class, for tests that build their own datasets."""
    return PoissonModel
