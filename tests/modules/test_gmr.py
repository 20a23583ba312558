from jax import numpy as jnp
import numpy as np
np.random.seed(42)
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from gmreval import GMR, FailedGMR, GaussianMixture, Gaussian, InvalidArgumentError, RangeViolationError


def test_gmr_wraps_mixture():
    dist = GaussianMixture([[0., 0.], [2., 2.], [-2., 1.]], [jnp.eye(2)] * 3)
    model = GMR(dist, name="gmr3")

    assert model.K == 3
    assert model.n_coefficients() == 3
    assert len(model.components) == 3
    assert repr(model) == "GMR(name=gmr3)"

    X = np.random.normal(size=(6, 2))
    assert_allclose(model.log_density(X), dist.logpdf(X), rtol=1e-6)


def test_gmr_joins_targets_to_inputs():
    model = GMR.from_params([[0., 1.], [1., -1.]], [jnp.eye(2), 2. * jnp.eye(2)])
    x = np.array([0.1, 0.4, -0.3])
    y = np.array([1.2, 0.7, -0.5])

    joint = np.stack([x, y], axis=1)
    assert_allclose(model.density(x, y), model.density(joint), rtol=1e-6)
    assert_allclose(model.membership(x, y=y), model.membership(joint), rtol=1e-6)

    with pytest.raises(InvalidArgumentError):
        model.density(x, y[:2])


def test_assign_clusters_picks_nearest_component():
    model = GMR.from_params([[-5., 0.], [5., 0.]], [jnp.eye(2), jnp.eye(2)])
    X = np.array([[-4., 0.2], [4.5, -0.1], [-5.5, 1.], [6., 0.]])

    assert_array_equal(model.assign_clusters(X), [0, 1, 0, 1])


def test_log_membership_matches_membership():
    model = GMR.from_params([[-5., 0.], [5., 0.]], [jnp.eye(2), jnp.eye(2)])
    X = np.array([[-4., 0.2], [4.5, -0.1], [0., 0.]])

    assert_allclose(jnp.exp(model.log_membership(X)), model.membership(X), rtol=1e-5)
    assert_allclose(model.log_membership(X, 1), model.components[1].logpdf(X), rtol=1e-6)
    with pytest.raises(RangeViolationError):
        model.log_membership(X, 2)


def test_gmr_requires_a_mixture():
    with pytest.raises(InvalidArgumentError):
        GMR(Gaussian([0.], [1.]))


def test_failed_gmr_sentinels():
    model = FailedGMR(K=2)
    X = np.ones((4, 3))

    assert_array_equal(model.density(X), np.zeros(4))
    assert np.all(np.isneginf(model.log_density(X)))
    assert model.membership(X).shape == (4, 2)
    assert_array_equal(model.membership(X, 1), np.zeros(4))
    with pytest.raises(RangeViolationError):
        model.membership(X, 2)
    assert np.all(np.isneginf(model.log_membership(X)))
    with pytest.raises(RangeViolationError):
        model.log_membership(X, -1)
    ## a 1-D batch counts its entries as rows
    assert model.density(np.ones(5)).shape == (5,)


def test_gmr_needs_components():
    with pytest.raises(InvalidArgumentError):
        FailedGMR(K=0)
