class Regression: ## General regression model structure
    """
    Implements a general (fitted) regression model template/structure.
    Effectively, this is the parent class/template for the model variants that
    metric routines evaluate.

    Args:
        name: string name for this model
    """

    def __init__(self, name="regression", **kwargs):
        self.name = name

    def density(self, X, y=None): ## per-observation density routine
        raise NotImplementedError

    def log_density(self, X, y=None): ## per-observation log density routine
        raise NotImplementedError

    def predict(self, X): ## point predictions of the targets
        raise NotImplementedError

    def training_data(self): ## (X, y) this model was fit to
        raise NotImplementedError

    def n_coefficients(self): ## number of free coefficients
        raise NotImplementedError

    def __repr__(self):
        return "{}(name={})".format(self.__class__.__name__, self.name)
