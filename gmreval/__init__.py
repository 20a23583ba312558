from importlib.metadata import version, distribution, PackageNotFoundError

__version__ = version('gmreval')

required = {'ngcsimlib', 'jax', 'numpy'} ## list of core gmreval dependencies
for key in sorted(required):
    try:
        distribution(key)
    except PackageNotFoundError:
        raise ImportError(str(key) + ", a core dependency of gmreval, is not " \
                          "currently installed!") from None

## utilities must be loaded before the model variants that depend on them
from gmreval.utils.errors import InvalidArgumentError, RangeViolationError
from gmreval.utils.density import Mixture, Gaussian, GaussianMixture
from gmreval.utils.metric_utils import (CriterionKind,
                                        DEFAULT_LMBDA,
                                        calc_mixture_log_likelihood,
                                        mixture_loglikelihood,
                                        gen_logpdf,
                                        likelihood,
                                        membership,
                                        loglikelihood,
                                        nll,
                                        mse,
                                        aic,
                                        bic)
from gmreval.utils.config import Config, criterion_defaults
from gmreval.modules import Regression, LinearRegression, AbstractGMR, GMR, FailedGMR
