"""
Metric and measurement routines and co-routines. These functions evaluate fitted
probabilistic models -- (linear) regression models and Gaussian mixture
regression (GMR) models -- via likelihoods, log-likelihoods, and penalized
likelihood scores (the Akaike and Bayesian information criteria).
"""
from enum import Enum
from collections.abc import Mapping
from functools import partial
from numbers import Integral
from jax import numpy as jnp, jit
import numpy as np
from jax.scipy.special import logsumexp

from gmreval.modules.regression import Regression, AbstractGMR, FailedGMR
from gmreval.utils.density import Mixture
from gmreval.utils.errors import InvalidArgumentError

DEFAULT_LMBDA = 2e-2 ## default log-likelihood scaling of AIC/BIC scores


class CriterionKind(Enum):
    """
    Which quantity an information criterion penalizes: the model's
    log-likelihood or its mean squared error.
    """
    LIKELIHOOD = "likelihood"
    MSE = "mse"


def resolve_kind(kind):
    """
    Maps a criterion kind (a CriterionKind or its string value) onto a CriterionKind.

    Args:
        kind: CriterionKind, "likelihood", or "mse"

    Returns:
        the matching CriterionKind
    """
    if isinstance(kind, CriterionKind):
        return kind
    try:
        return CriterionKind(kind)
    except (ValueError, TypeError):
        raise InvalidArgumentError(
            "only `likelihood` and `mse` available for `kind`, got " + repr(kind), value=kind
        ) from None

########################################################################################################################
## mixture log-likelihood (soft weights, hard assignment)
########################################################################################################################

@partial(jit, static_argnums=[2])
def _calc_mixture_log_likelihood(log_ls, clusters, K):
    ## log_ls: (N x K) per-component log-likelihoods
    if K == 1:
        return jnp.sum(log_ls[:, 0])
    N = log_ls.shape[0]
    ## log(w_k) = log(Sum_n[ l_k(x_n) ]) - log(N)
    logws = logsumexp(log_ls, axis=0) - jnp.log(N * 1.)
    ## log P(x | theta_k), summed over the observations assigned to k only
    assigned = jnp.expand_dims(clusters, axis=1) == jnp.arange(K)
    logliks = jnp.sum(jnp.where(assigned, log_ls, 0.), axis=0)
    ## log Sum_k[ exp(log(w_k) + log P(x | theta_k)) ]
    return logsumexp(logws + logliks)

def _stack_component_likelihoods(ls, K):
    ## likelihoods stay in float64 on the host until their logs are taken
    if isinstance(ls, Mapping):
        if set(ls.keys()) != set(range(K)):
            raise InvalidArgumentError(
                "Component likelihoods must be keyed by 0..K-1 (K = " + str(K) + "), got keys "
                + str(sorted(ls.keys())), value=ls
            )
        columns = [np.ravel(np.asarray(ls[k], dtype=np.float64)) for k in range(K)]
    elif isinstance(ls, (list, tuple)):
        if len(ls) != K:
            raise InvalidArgumentError(
                "Expected likelihoods for " + str(K) + " components, got " + str(len(ls)), value=ls
            )
        columns = [np.ravel(np.asarray(l_k, dtype=np.float64)) for l_k in ls]
    else: ## an (N x K) matrix, e.g., as produced by `membership`
        L = np.asarray(ls, dtype=np.float64)
        if L.ndim != 2 or L.shape[1] != K:
            raise InvalidArgumentError(
                "Expected an (N x " + str(K) + ") likelihood matrix, got shape " + str(L.shape), value=L.shape
            )
        return L
    lengths = {column.shape[0] for column in columns}
    if len(lengths) > 1:
        raise InvalidArgumentError("Component likelihoods differ in length: " + str(sorted(lengths)), value=lengths)
    return np.stack(columns, axis=1)

def _check_clusters(clusters, N, K):
    c = np.ravel(np.asarray(clusters))
    if c.shape[0] != N:
        raise InvalidArgumentError(
            "Got " + str(c.shape[0]) + " cluster labels for " + str(N) + " observations", value=c.shape[0]
        )
    if not np.issubdtype(c.dtype, np.integer):
        raise InvalidArgumentError("Cluster labels must be integers, got dtype " + str(c.dtype), value=c.dtype)
    if np.any(c < 0) or np.any(c >= K):
        raise InvalidArgumentError("Cluster labels must lie in [0, " + str(K) + ")", value=c)
    return jnp.asarray(c, dtype=jnp.int32)

def calc_mixture_log_likelihood(ls, clusters, K):
    """
    Calculates the total log-likelihood of a K-component mixture given the
    likelihood of every observation under every component (alone) and a hard
    assignment of each observation to one component.

    | For K = 1: log L = Sum_n[ log l_1(x_n) ]
    | For K > 1: log L = log Sum_k[ exp(log w_k + Sum_{n : c_n = k}[ log l_k(x_n) ]) ]
    | where log w_k = log(Sum_n[ l_k(x_n) ]) - log(N), i.e., the average likelihood of
    | component k over the whole batch (not a normalized mixing weight)

    A component that no observation is assigned to has an (empty) assigned
    log-likelihood of 0, and so still contributes exp(log w_k) to the total.
    Logs are taken in double precision before the rest of the calculation runs
    in log space, so very small or very large (finite) likelihoods are honored.

    Args:
        ls: per-component likelihoods; a mapping {k: length-N sequence} over k = 0..K-1,
            a sequence of K length-N sequences, or an (N x K) matrix

        clusters: length-N sequence of integer component labels, each in [0, K)

        K: the number of mixture components

    Returns:
        scalar total log-likelihood (-inf if a required likelihood is exactly 0)
    """
    if isinstance(K, bool) or not isinstance(K, Integral) or K < 1:
        raise InvalidArgumentError("`K` must be a positive integer, got " + repr(K), value=K)
    K = int(K)
    L = _stack_component_likelihoods(ls, K)
    N = L.shape[0]
    if N < 1:
        raise InvalidArgumentError("Cannot evaluate a mixture over an empty batch", value=N)
    if np.any(L < 0.) or not np.all(np.isfinite(L)):
        raise InvalidArgumentError("Likelihoods must be finite and non-negative", value=L)
    c = _check_clusters(clusters, N, K)
    with np.errstate(divide="ignore"): ## log(0) = -inf is a valid outcome
        log_L = np.log(L)
    return _calc_mixture_log_likelihood(jnp.asarray(log_L, dtype=jnp.float32), c, K)

def mixture_loglikelihood(model, X, y=None):
    """
    Calculates the (hard-assignment) total log-likelihood of a mixture model on
    X: the likelihoods are the raw component memberships and each observation is
    assigned to its maximum-membership component. The memberships are carried
    as log densities throughout, so observations far from every component do not
    underflow to a zero likelihood.

    Args:
        model: a GMR (or FailedGMR) model

        X: (N x D) design matrix

        y: optional targets, joined to X as extra columns (Default: None)

    Returns:
        scalar total log-likelihood (-inf for a model that failed to fit)
    """
    _check_mixture(model)
    if isinstance(model, FailedGMR):
        return jnp.asarray(-jnp.inf)
    log_ls = jnp.atleast_2d(model.log_membership(X, y=y))
    clusters = jnp.argmax(log_ls, axis=1)
    return _calc_mixture_log_likelihood(log_ls, clusters, model.K)

def gen_logpdf(components, w, K=None):
    """
    Generates the log density function of a weighted mixture of components,
    evaluated on the coordinates of a single point.

    | f(x_1, ..., x_D) = log Sum_k[ exp(log w_k + log p_k([x_1, ..., x_D])) ]

    Args:
        components: sequence of component densities (each exposing `logpdf`)

        w: mixing weights of the components

        K: the number of (leading) components to mix (Default: len(w))

    Returns:
        a function of D coordinates returning the scalar mixture log density
    """
    K = len(w) if K is None else K
    mixture = Mixture(list(components)[:K], jnp.asarray(w, dtype=jnp.float32)[:K])
    def _logpdf(*x):
        return mixture.logpdf(jnp.asarray([x], dtype=jnp.float32))[0]
    return _logpdf

########################################################################################################################
## likelihood routines
########################################################################################################################

def _check_model(model):
    if not isinstance(model, Regression):
        raise InvalidArgumentError("Unsupported model type " + type(model).__name__, value=model)

def _check_mixture(model):
    if not isinstance(model, AbstractGMR):
        raise InvalidArgumentError("Expected a mixture (GMR) model, got " + type(model).__name__, value=model)

def _check_regression(model):
    _check_model(model)
    if isinstance(model, AbstractGMR):
        raise InvalidArgumentError("Expected a non-mixture regression model, got " + type(model).__name__, value=model)

def _regression_data(model, X, y):
    if X is None and y is None:
        return model.training_data()
    if X is None or y is None:
        raise InvalidArgumentError("A regression model is evaluated on both `X` and `y`")
    return X, y

def likelihood(model, X=None, y=None):
    """
    Calculates the likelihood (density) of each observation under a model. A
    model that failed to fit yields an all-zero vector.

    Args:
        model: a fitted model (LinearRegression, GMR, or FailedGMR)

        X: (N x D) design matrix; a vector is read as N scalar observations (D = 1)

        y: targets (required for regression models; optional extra columns for GMR)

    Returns:
        length-N vector of likelihoods
    """
    _check_model(model)
    if isinstance(model, AbstractGMR):
        if X is None:
            raise InvalidArgumentError("A mixture model is evaluated on an explicit `X`")
        return model.density(X, y)
    return model.density(*_regression_data(model, X, y))

def membership(model, X, k=None, y=None):
    """
    Calculates the raw (unnormalized) probability of membership of each
    observation in each mixture component. The component index `k` is optional
    and so follows `X`; pass it by keyword (`membership(model, X, k=k)`) or as
    the third positional argument.

    Args:
        model: a GMR (or FailedGMR) model

        X: (N x D) design matrix

        k: if given, a single component index in [0, K) (Default: None)

        y: optional targets, joined to X as extra columns (Default: None)

    Returns:
        (N x K) membership matrix, or a length-N vector if `k` is given
    """
    _check_mixture(model)
    return model.membership(X, k=k, y=y)

def loglikelihood(model, X=None, y=None):
    """
    Log likelihood of a model.

    For a mixture model, returns the log density of each row of X. For a
    regression model, returns the total log-likelihood of (X, y); if X, y are
    not given, it is evaluated on the model's training data.

    Args:
        model: a fitted model (LinearRegression, GMR, or FailedGMR)

        X: design matrix (Default: None)

        y: targets (Default: None)

    Returns:
        length-N vector (mixture models) or scalar (regression models)
    """
    _check_model(model)
    if isinstance(model, AbstractGMR):
        if X is None:
            raise InvalidArgumentError("A mixture model is evaluated on an explicit `X`")
        return model.log_density(X, y)
    return jnp.sum(model.log_density(*_regression_data(model, X, y)))

def nll(model, X, y):
    """
    Negative log likelihood of a (non-mixture) regression model evaluated on (X, y).
    """
    _check_regression(model)
    return -loglikelihood(model, X, y)

@partial(jit, static_argnums=[2])
def measure_MSE(mu, x, preserve_batch=False):
    """
    Measures mean squared error (MSE), or the negative Gaussian log likelihood with variance of 1.0. Note: If batch
    is preserved, this returns a column vector where each row is the MSE(mu, x) for that row's datapoint.

    Args:
        mu: predicted values (mean); (N x D matrix)

        x: target values (data); (N x D matrix)

        preserve_batch: if True, will return one score per sample in batch
            (Default: False), otherwise, returns scalar mean score

    Returns:
        an (N x 1) column vector (if preserve_batch=True) OR scalar otherwise
    """
    diff = mu - x
    se = jnp.square(diff) ## squared error
    mse = jnp.sum(se, axis=1, keepdims=True) ## technically squared-error per data-point
    if not preserve_batch:
        mse = jnp.mean(mse) # this is proper mse
    return mse

def mse(model, X=None, y=None):
    """
    Mean squared error of a regression model's predictions on (X, y), or on its
    training data if X, y are not given.
    """
    _check_regression(model)
    X, y = _regression_data(model, X, y)
    mu = jnp.reshape(model.predict(X), (-1, 1))
    x = jnp.reshape(jnp.asarray(y, dtype=jnp.float32), (-1, 1))
    if mu.shape[0] != x.shape[0]:
        raise InvalidArgumentError(
            "Got " + str(mu.shape[0]) + " predictions for " + str(x.shape[0]) + " targets",
            value=(mu.shape[0], x.shape[0])
        )
    return measure_MSE(mu, x)

########################################################################################################################
## information criteria
########################################################################################################################

def _check_mixture_kind(kind):
    if kind is not CriterionKind.LIKELIHOOD:
        raise InvalidArgumentError(
            "Mixture models are only scored by `likelihood`, got " + repr(kind.value), value=kind
        )

def aic(model, X=None, y=None, lmbda=DEFAULT_LMBDA, kind=CriterionKind.LIKELIHOOD):
    """
    Akaike information criterion of a model.

    | regression, kind = likelihood: AIC = 2 * (ncoef - lmbda * log L)
    | regression, kind = mse:        AIC = 2 * ncoef + N * log(MSE)
    | mixture (K components):        AIC = 2 * (K - lmbda * Sum_n[ log p(x_n) ])

    If X, y are not given, a regression model is scored on its training data.

    Args:
        model: a fitted model (LinearRegression, GMR, or FailedGMR)

        X: design matrix (Default: None)

        y: targets (Default: None)

        lmbda: scaling applied to the log-likelihood term (Default: 0.02)

        kind: CriterionKind (or "likelihood"/"mse") selecting the fit term (Default: likelihood)

    Returns:
        scalar AIC score
    """
    kind = resolve_kind(kind)
    _check_model(model)
    if isinstance(model, AbstractGMR):
        _check_mixture_kind(kind)
        return 2. * (model.K - lmbda * jnp.sum(loglikelihood(model, X, y)))
    X, y = _regression_data(model, X, y)
    k = model.n_coefficients()
    N = jnp.size(jnp.asarray(y))
    if kind is CriterionKind.LIKELIHOOD:
        return 2. * (k - lmbda * loglikelihood(model, X, y))
    return 2. * k + N * jnp.log(mse(model, X, y))

def bic(model, X=None, y=None, lmbda=DEFAULT_LMBDA, kind=CriterionKind.LIKELIHOOD):
    """
    Bayesian information criterion of a model.

    | regression, kind = likelihood: BIC = ncoef * log(N) - 2 * lmbda * log L
    | regression, kind = mse:        BIC = ncoef * log(N) + N * log(MSE)
    | mixture (K components):        BIC = K * log(N) - 2 * lmbda * Sum_n[ log p(x_n) ]

    If X, y are not given, a regression model is scored on its training data.

    Args:
        model: a fitted model (LinearRegression, GMR, or FailedGMR)

        X: design matrix (Default: None)

        y: targets (Default: None)

        lmbda: scaling applied to the log-likelihood term (Default: 0.02)

        kind: CriterionKind (or "likelihood"/"mse") selecting the fit term (Default: likelihood)

    Returns:
        scalar BIC score
    """
    kind = resolve_kind(kind)
    _check_model(model)
    if isinstance(model, AbstractGMR):
        _check_mixture_kind(kind)
        lls = loglikelihood(model, X, y)
        N = jnp.size(lls)
        return model.K * jnp.log(N * 1.) - 2. * lmbda * jnp.sum(lls)
    X, y = _regression_data(model, X, y)
    k = model.n_coefficients()
    N = jnp.size(jnp.asarray(y))
    if kind is CriterionKind.LIKELIHOOD:
        return k * jnp.log(N * 1.) - 2. * lmbda * loglikelihood(model, X, y)
    return k * jnp.log(N * 1.) + N * jnp.log(mse(model, X, y))
