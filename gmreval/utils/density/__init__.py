from .mixture import Mixture ## general mixture template parent class
## point to supported densities
from .gaussian import Gaussian ## (multivariate) Gaussian
from .gaussianMixture import GaussianMixture ## mixture-of-Gaussians
