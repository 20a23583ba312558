from jax import numpy as jnp
from ngcsimlib.logger import warn

from gmreval.modules.regression.regression import Regression
from gmreval.utils.density import GaussianMixture, Mixture
from gmreval.utils.errors import InvalidArgumentError, RangeViolationError

def _join_observations(X, y=None):
    ## GMR models the joint density of inputs and targets, so (X, y) is evaluated as [X, y]
    if y is None:
        return X
    _X = jnp.asarray(X, dtype=jnp.float32)
    _y = jnp.asarray(y, dtype=jnp.float32)
    if _X.ndim == 1:
        _X = jnp.expand_dims(_X, axis=1)
    if _y.ndim == 1:
        _y = jnp.expand_dims(_y, axis=1)
    if _X.shape[0] != _y.shape[0]:
        raise InvalidArgumentError(
            "Got " + str(_X.shape[0]) + " rows of X but " + str(_y.shape[0]) + " rows of y",
            value=(_X.shape[0], _y.shape[0])
        )
    return jnp.concat([_X, _y], axis=1)

def _n_rows(X):
    _X = jnp.asarray(X)
    if _X.ndim == 0:
        return 1
    return _X.shape[0]


class AbstractGMR(Regression):
    """
    Parent class of Gaussian mixture regression (GMR) variants, i.e., models
    with K Gaussian components used for clustering as well as regression.

    Args:
        K: the number of components within this mixture

        name: string name for this model
    """

    def __init__(self, K, name="gmr", **kwargs):
        super().__init__(name=name, **kwargs)
        if K < 1:
            raise InvalidArgumentError("A GMR requires at least one component", value=K)
        self.K = K

    def check_component(self, k):
        if not (0 <= k < self.K):
            raise RangeViolationError(k, self.K)

    def membership(self, X, k=None, y=None): ## raw (unnormalized) component memberships
        raise NotImplementedError

    def log_membership(self, X, k=None, y=None): ## log of `membership`
        raise NotImplementedError

    def assign_clusters(self, X, y=None):
        """
        Hard-assigns each observation to the component with the largest membership.

        Args:
            X: (N x D) design matrix

            y: optional targets, joined to X as extra columns (Default: None)

        Returns:
            length-N vector of component indices in [0, K)
        """
        return jnp.argmax(self.log_membership(X, y=y), axis=-1)

    def n_coefficients(self):
        return self.K


class GMR(AbstractGMR): ## Gaussian mixture regression
    """
    A fitted Gaussian mixture regression model, wrapping the mixture density
    that was learned for it.

    Args:
        dist: the fitted mixture density (e.g., a GaussianMixture)

        name: string name for this model
    """

    def __init__(self, dist, name="gmr"):
        if not isinstance(dist, Mixture):
            raise InvalidArgumentError("`dist` must be a Mixture, got " + type(dist).__name__, value=dist)
        super().__init__(dist.K, name=name)
        self.dist = dist

    @classmethod
    def from_params(cls, mu, Sigma, pi=None, name="gmr"):
        """
        Builds a GMR directly from Gaussian component parameters.

        Args:
            mu: list of K component mean vectors

            Sigma: list of K component covariance matrices

            pi: the K mixing weights (Default: None, i.e., uniform)

            name: string name for this model
        """
        return cls(GaussianMixture(mu, Sigma, pi), name=name)

    @property
    def components(self):
        return self.dist.components

    def density(self, X, y=None):
        return self.dist.pdf(_join_observations(X, y))

    def log_density(self, X, y=None):
        return self.dist.logpdf(_join_observations(X, y))

    def membership(self, X, k=None, y=None):
        """
        Calculates the raw density of each observation under each component.

        Args:
            X: (N x D) design matrix

            k: if given, only the memberships of component k (0 <= k < K) are computed (Default: None)

            y: optional targets, joined to X as extra columns (Default: None)

        Returns:
            (N x K) membership matrix, or a length-N vector if `k` is given
        """
        _X = _join_observations(X, y)
        if k is None:
            return self.dist.component_pdfs(_X)
        self.check_component(k)
        return self.components[k].pdf(_X)

    def log_membership(self, X, k=None, y=None):
        _X = _join_observations(X, y)
        if k is None:
            return self.dist.component_logpdfs(_X)
        self.check_component(k)
        return self.components[k].logpdf(_X)


class FailedGMR(AbstractGMR): ## sentinel for a GMR that could not be fit
    """
    Stands in for a GMR whose fitting failed. Rather than raising, every density
    query returns a poison value (a density of 0, a log density of -inf) so that
    downstream metrics rank this model last.

    Args:
        K: the number of components the failed model was meant to have

        name: string name for this model
    """

    def __init__(self, K, name="failed_gmr"):
        super().__init__(K, name=name)

    def density(self, X, y=None):
        warn(f"Model `{self.name}` failed to fit; returning a zero likelihood")
        return jnp.zeros(_n_rows(X))

    def log_density(self, X, y=None):
        warn(f"Model `{self.name}` failed to fit; returning a -inf log likelihood")
        return jnp.full(_n_rows(X), -jnp.inf)

    def membership(self, X, k=None, y=None):
        n = _n_rows(X)
        if k is None:
            return jnp.zeros((n, self.K))
        self.check_component(k)
        return jnp.zeros(n)

    def log_membership(self, X, k=None, y=None):
        n = _n_rows(X)
        if k is None:
            return jnp.full((n, self.K), -jnp.inf)
        self.check_component(k)
        return jnp.full(n, -jnp.inf)
