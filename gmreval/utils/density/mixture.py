from jax import numpy as jnp, jit
from jax.scipy.special import logsumexp

from gmreval.utils.errors import InvalidArgumentError

@jit
def _calc_mixture_log_pdf(log_pdfs, pi):
    ## log p(x) = log Sum_j[ pi_j * pdf_j(x) ], evaluated along the last (component) axis
    return logsumexp(log_pdfs + jnp.log(pi), axis=-1)


class Mixture: ## General mixture structure
    """
    Implements a general finite mixture density. Effectively, this is the parent
    class/template for mixtures of distributions; any component that exposes
    `pdf(X)` and `logpdf(X)` may be mixed.

    Args:
        components: the K component densities of this mixture

        pi: the K prior (mixing) weights; uniform if not provided (Default: None)
    """

    def __init__(self, components, pi=None):
        self.components = list(components)
        self.K = len(self.components)
        if self.K < 1:
            raise InvalidArgumentError("A mixture requires at least one component!", value=self.K)
        if pi is None:
            pi = jnp.ones(self.K) / (self.K * 1.)
        self.pi = jnp.ravel(jnp.asarray(pi, dtype=jnp.float32))
        if self.pi.shape[0] != self.K:
            raise InvalidArgumentError(
                "Expected " + str(self.K) + " mixing weights, got " + str(self.pi.shape[0]), value=pi
            )
        if bool(jnp.any(self.pi < 0.)):
            raise InvalidArgumentError("Mixing weights must be non-negative!", value=pi)

    def component_logpdfs(self, X):
        """
        Calculates the log density of X under each component (alone) of this mixture.

        Args:
            X: a single point or a batch of observations

        Returns:
            a length-K vector for a single point, otherwise an (N x K) matrix
        """
        return jnp.stack([component.logpdf(X) for component in self.components], axis=-1)

    def component_pdfs(self, X):
        return jnp.exp(self.component_logpdfs(X))

    def logpdf(self, X): ## log-likelihood calculation routine
        return _calc_mixture_log_pdf(self.component_logpdfs(X), self.pi)

    def pdf(self, X):
        return jnp.exp(self.logpdf(X))
