from jax import numpy as jnp, jit
import numpy as np

from gmreval.modules.regression.regression import Regression
from gmreval.utils.density.gaussian import as_design_matrix
from gmreval.utils.errors import InvalidArgumentError

@jit
def _calc_residuals(X, y, coef, intercept):
    mu = jnp.matmul(X, coef) + intercept ## model predictions
    return y - mu

@jit
def _log_normal_residual_pdf(residuals, sigma_sqr):
    ## log N(r; 0, sigma^2) for each residual r
    return -(jnp.log(2. * np.pi * sigma_sqr) + jnp.square(residuals) / sigma_sqr) * 0.5


class LinearRegression(Regression): ## ordinary (Gaussian-noise) linear regression
    """
    A fitted linear regression model y = X * coef + intercept + eps, where eps is
    zero-mean Gaussian noise. Coefficients are taken as given (fitting is done
    elsewhere); this object only evaluates them.

    If no noise scale `sigma` is supplied, the maximum-likelihood variance of the
    residuals (RSS / N) on whatever data is being evaluated is used, so the total
    log-likelihood reduces to -N/2 * (log(2 * pi * RSS / N) + 1).

    Args:
        coef: the D regression coefficients (one per predictor)

        intercept: the intercept (bias) term; None for a model without an intercept (Default: None)

        sigma: the standard deviation of the Gaussian noise; None to use the residual MLE (Default: None)

        X: training design matrix the model was fit to, used by data-free metrics (Default: None)

        y: training targets the model was fit to, used by data-free metrics (Default: None)

        name: string name for this model
    """

    def __init__(self, coef, intercept=None, sigma=None, X=None, y=None, name="linear_regression"):
        super().__init__(name=name)
        self.coef_ = jnp.ravel(jnp.asarray(coef, dtype=jnp.float32))
        self.intercept_ = intercept
        if sigma is not None and sigma <= 0.:
            raise InvalidArgumentError("Noise scale `sigma` must be positive", value=sigma)
        self.sigma = sigma
        if (X is None) != (y is None):
            raise InvalidArgumentError("Training data requires both `X` and `y`")
        self.X = X
        self.y = y

    @property
    def n_features(self):
        return self.coef_.shape[0]

    def training_data(self):
        if self.X is None:
            raise InvalidArgumentError(
                "Model `" + self.name + "` stores no training data; supply `X` and `y` explicitly"
            )
        return self.X, self.y

    def _resolve_data(self, X, y):
        if X is None and y is None:
            X, y = self.training_data()
        elif X is None or y is None:
            raise InvalidArgumentError("A regression model is evaluated on both `X` and `y`")
        _X, _ = as_design_matrix(X, self.n_features)
        if _X.shape[1] != self.n_features:
            raise InvalidArgumentError(
                "Expected " + str(self.n_features) + " predictors, got " + str(_X.shape[1]), value=_X.shape
            )
        _y = jnp.ravel(jnp.asarray(y, dtype=jnp.float32))
        if _y.shape[0] != _X.shape[0]:
            raise InvalidArgumentError(
                "Got " + str(_X.shape[0]) + " rows of X but " + str(_y.shape[0]) + " targets",
                value=(_X.shape[0], _y.shape[0])
            )
        return _X, _y

    def predict(self, X):
        """
        Predicts targets for a design matrix.

        Args:
            X: (N x D) design matrix; a vector is read as N scalar predictors when D = 1

        Returns:
            length-N vector of predictions
        """
        _X, _ = as_design_matrix(X, self.n_features)
        intercept = 0. if self.intercept_ is None else self.intercept_
        return jnp.matmul(_X, self.coef_) + intercept

    def residuals(self, X=None, y=None):
        _X, _y = self._resolve_data(X, y)
        intercept = 0. if self.intercept_ is None else self.intercept_
        return _calc_residuals(_X, _y, self.coef_, intercept)

    def log_density(self, X=None, y=None):
        """
        Calculates the Gaussian log density of each target given its predictors.

        Args:
            X: (N x D) design matrix; None to use the stored training data

            y: length-N target vector; None to use the stored training data

        Returns:
            length-N vector of log densities

        Raises:
            InvalidArgumentError: if `sigma` is not set and the residuals are all zero
        """
        r = self.residuals(X, y)
        if self.sigma is not None:
            sigma_sqr = self.sigma * self.sigma
        else:
            sigma_sqr = jnp.mean(jnp.square(r)) ## MLE of the noise variance
            if not sigma_sqr > 0.:
                raise InvalidArgumentError(
                    "Residual noise variance of model `" + self.name + "` is zero (a perfect fit); "
                    "supply `sigma` to evaluate its likelihood", value=float(sigma_sqr)
                )
        return _log_normal_residual_pdf(r, sigma_sqr)

    def density(self, X=None, y=None):
        return jnp.exp(self.log_density(X, y))

    def n_coefficients(self):
        return self.n_features + (0 if self.intercept_ is None else 1)
