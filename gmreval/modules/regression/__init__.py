from .regression import Regression ## general regression model template parent class
## point to supported model variants
from .linear import LinearRegression ## ordinary linear regression
from .gmr import AbstractGMR, GMR, FailedGMR ## Gaussian mixture regression (and its failed-fit sentinel)
