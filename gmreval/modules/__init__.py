from .regression import Regression, LinearRegression, AbstractGMR, GMR, FailedGMR
