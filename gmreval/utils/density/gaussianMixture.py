from gmreval.utils.density.mixture import Mixture
from gmreval.utils.density.gaussian import Gaussian
from gmreval.utils.errors import InvalidArgumentError


class GaussianMixture(Mixture): ## mixture-of-Gaussians density
    """
    Implements the density of a Gaussian mixture model (GMM) -- or mixture of
    Gaussians (MoG) -- with full covariance matrices in the component
    multivariate Gaussians. (A Categorical distribution is assumed over the
    latent variables). Parameters are taken as given; no fitting is done here.

    Args:
        mu: list of K component mean vectors (each of length D)

        Sigma: list of K component covariance matrices (each D x D)

        pi: the K prior weights; uniform if not provided (Default: None)

        use_chol_prec: should component evaluation use Cholesky-factor computation of the precision (Default: True)
    """

    def __init__(self, mu, Sigma, pi=None, use_chol_prec=True):
        if len(mu) != len(Sigma):
            raise InvalidArgumentError(
                "Got " + str(len(mu)) + " means but " + str(len(Sigma)) + " covariances", value=(len(mu), len(Sigma))
            )
        components = [Gaussian(mu_j, Sigma_j, use_chol_prec=use_chol_prec) for mu_j, Sigma_j in zip(mu, Sigma)]
        dims = {component.dim for component in components}
        if len(dims) > 1:
            raise InvalidArgumentError("All mixture components must share one dimensionality", value=dims)
        super().__init__(components, pi)

    @property
    def dim(self):
        return self.components[0].dim
