from jax import numpy as jnp, jit
from functools import partial
import numpy as np

from gmreval.utils.errors import InvalidArgumentError

########################################################################################################################
## internal routines for (multivariate) Gaussian densities
########################################################################################################################

@partial(jit, static_argnums=[3])
def _log_gaussian_pdf(X, mu, Sigma, use_chol_prec=True):
    """
    Calculates the multivariate Gaussian log density of each row of a design matrix/dataset `X`, under a given
    parameter mean `mu` and parameter covariance `Sigma`.

    Args:
        X: a design matrix (dataset) to compute the log densities of; shape is (N x D)

        mu: a parameter mean vector; shape is (1 x D)

        Sigma: a parameter covariance matrix; shape is (D x D)

        use_chol_prec: should this routine use Cholesky-factor computation of the precision (Default: True)

    Returns:
        (column) vector of log densities, one per row of X; shape is (N x 1)
    """
    D = mu.shape[1] * 1. ## get dimensionality
    if use_chol_prec: ## use Cholesky-factor calc of precision
        C = jnp.linalg.cholesky(Sigma)
        inv_C = jnp.linalg.pinv(C)
        precision = jnp.matmul(inv_C.T, inv_C)
    else: ## use Moore-Penrose pseudo-inverse calc of precision
        precision = jnp.linalg.pinv(Sigma)
    sign_ld, abs_ld = jnp.linalg.slogdet(Sigma)
    log_det_sigma = abs_ld * sign_ld ## log-determinant of covariance
    Z = X - mu ## calc deltas
    quad_term = jnp.sum((jnp.matmul(Z, precision) * Z), axis=1, keepdims=True) ## quadratic term
    return -(jnp.log(2. * np.pi) * D + log_det_sigma + quad_term) * 0.5

def as_design_matrix(X, dim):
    """
    Coerces an observation batch into an (N x D) design matrix.

    A 1-D input is read as N scalar observations when `dim` is 1, and as a
    single D-dimensional point otherwise.

    Args:
        X: a scalar, vector, or (N x D) matrix of observations

        dim: the dimensionality D of the density that will evaluate X

    Returns:
        (design matrix, flag that is True if X denoted a single point)
    """
    _X = jnp.asarray(X, dtype=jnp.float32)
    if _X.ndim == 0:
        return jnp.reshape(_X, (1, 1)), True
    if _X.ndim == 1:
        if dim == 1:
            return jnp.expand_dims(_X, axis=1), False
        return jnp.expand_dims(_X, axis=0), True
    if _X.ndim != 2:
        raise InvalidArgumentError(
            "Observations must be a vector or (N x D) matrix, got shape " + str(_X.shape), value=_X.shape
        )
    return _X, False

########################################################################################################################

class Gaussian: ## multivariate Gaussian density
    """
    Implements a (multivariate) Gaussian density that can be evaluated over a
    single point or a batch of row-vectors.

    Args:
        mu: mean vector (length D, or 1 x D); a scalar mean denotes a univariate Gaussian

        Sigma: covariance matrix (D x D); a scalar is read as a variance when D = 1

        use_chol_prec: should density evaluation use Cholesky-factor computation of the precision (Default: True)
    """

    def __init__(self, mu, Sigma, use_chol_prec=True):
        mu = jnp.atleast_1d(jnp.asarray(mu, dtype=jnp.float32))
        self.mu = jnp.reshape(mu, (1, -1))
        dim = self.mu.shape[1]
        Sigma = jnp.asarray(Sigma, dtype=jnp.float32)
        self.Sigma = jnp.reshape(Sigma, (dim, dim))
        self.use_chol_prec = use_chol_prec

    @property
    def dim(self):
        return self.mu.shape[1]

    def logpdf(self, X):
        """
        Calculates the Gaussian log density of X.

        Args:
            X: a single point, a vector of scalar observations (D = 1), or an (N x D) design matrix

        Returns:
            a scalar for a single point, otherwise a length-N vector of log densities
        """
        _X, is_point = as_design_matrix(X, self.dim)
        if _X.shape[1] != self.dim:
            raise InvalidArgumentError(
                "Observations of dimension " + str(_X.shape[1]) + " cannot be evaluated under a density of "
                "dimension " + str(self.dim), value=_X.shape
            )
        log_pdf = _log_gaussian_pdf(_X, self.mu, self.Sigma, self.use_chol_prec)[:, 0]
        if is_point:
            return log_pdf[0]
        return log_pdf

    def pdf(self, X):
        """
        Calculates the Gaussian density of X (see `logpdf` for accepted shapes).
        """
        return jnp.exp(self.logpdf(X))
