from jax import numpy as jnp
import numpy as np
np.random.seed(42)
import pytest
from numpy.testing import assert_allclose

from gmreval.utils.density import Gaussian, GaussianMixture, Mixture
from gmreval.utils.errors import InvalidArgumentError

RTOL = 1e-4

MEAN = np.array([1.0, -0.5])
COV = np.array([[2.0, 1.0], [1.0, 1.0]])

def gaussian_logpdf(X, mean, cov):
    X = np.atleast_2d(X)
    Z = X - mean
    quad = np.sum((Z @ np.linalg.inv(cov)) * Z, axis=1)
    return -0.5 * (X.shape[1] * np.log(2. * np.pi) + np.linalg.slogdet(cov)[1] + quad)


@pytest.mark.parametrize("use_chol_prec", [True, False])
def test_gaussian_batch_logpdf(use_chol_prec):
    X = np.random.normal(size=(15, 2))
    dist = Gaussian(MEAN, COV, use_chol_prec=use_chol_prec)

    assert dist.dim == 2
    assert_allclose(dist.logpdf(X), gaussian_logpdf(X, MEAN, COV), rtol=RTOL)
    assert_allclose(dist.pdf(X), np.exp(gaussian_logpdf(X, MEAN, COV)), rtol=RTOL)


def test_gaussian_single_point():
    dist = Gaussian(MEAN, COV)
    x = np.array([0.3, 0.2])

    ll = dist.logpdf(x)
    assert jnp.ndim(ll) == 0
    assert_allclose(ll, gaussian_logpdf(x, MEAN, COV)[0], rtol=RTOL)


def test_univariate_gaussian():
    dist = Gaussian(0.5, 4.)
    x = np.array([-1., 0.5, 2.])

    expected = -0.5 * (np.log(2. * np.pi * 4.) + (x - 0.5) ** 2 / 4.)
    assert_allclose(dist.logpdf(x), expected, rtol=RTOL)
    assert_allclose(dist.logpdf(2.), expected[2], rtol=RTOL)


def test_gaussian_dimension_mismatch():
    with pytest.raises(InvalidArgumentError):
        Gaussian(MEAN, COV).logpdf(np.ones((3, 3)))


def test_gaussian_mixture():
    mu = [MEAN, -MEAN]
    Sigma = [COV, np.eye(2)]
    pi = [0.25, 0.75]
    dist = GaussianMixture(mu, Sigma, pi)
    X = np.random.normal(size=(10, 2))

    comp = np.stack([gaussian_logpdf(X, mu[k], Sigma[k]) for k in range(2)], axis=1)
    assert dist.K == 2
    assert dist.dim == 2
    assert_allclose(dist.component_logpdfs(X), comp, rtol=RTOL)
    assert_allclose(dist.component_pdfs(X), np.exp(comp), rtol=RTOL)
    expected = np.log(np.exp(comp) @ np.asarray(pi))
    assert_allclose(dist.logpdf(X), expected, rtol=RTOL)
    assert_allclose(dist.pdf(X), np.exp(expected), rtol=RTOL)


def test_mixture_defaults_to_uniform_weights():
    dist = Mixture([Gaussian(0., 1.), Gaussian(1., 1.), Gaussian(2., 1.)])
    assert_allclose(dist.pi, np.ones(3) / 3., rtol=RTOL)


@pytest.mark.parametrize("args", [
    ([MEAN, MEAN], [COV]), ## mean/covariance count mismatch
    ([MEAN, np.zeros(3)], [COV, np.eye(3)]), ## mixed dimensionality
    ([MEAN, MEAN], [COV, COV], [0.5, 0.3, 0.2]), ## weight count mismatch
    ([MEAN, MEAN], [COV, COV], [1.5, -0.5]), ## negative weight
    ([], []), ## no components
])
def test_invalid_gaussian_mixture(args):
    with pytest.raises(InvalidArgumentError):
        GaussianMixture(*args)
