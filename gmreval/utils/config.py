from ngcsimlib.logger import info

from gmreval.utils.errors import InvalidArgumentError
from gmreval.utils.metric_utils import DEFAULT_LMBDA, CriterionKind, resolve_kind

class Config:
    """
    Simple configuration object to house named settings for model evaluation
    (to be built from a .cfg file on disk).

    | File format is:
    | # Comments start with pound symbol
    | arg_name = arg_value
    | arg_name = arg_value # side comment that will be stripped off

    Args:
        fname: source file name to build configuration object from (suffix = .cfg)
    """
    def __init__(self, fname=None):
        self.fname = fname
        self.variables = {}

        if self.fname is not None:
            with open(fname, 'r') as fd:
                for line in fd:
                    line = line.replace(" ", "").replace("\n", "")
                    argmt = line.split("#")[0] ## strip comments
                    if len(argmt) > 0 and "=" in argmt:
                        var_name, var_val = argmt.split("=", 1)
                        self.variables[var_name] = var_val
                    # else, ignore empty and comment-only lines

    def getArg(self, arg_name):
        """
        Retrieve argument from current configuration

        Args:
            arg_name: the string name of the argument to retrieve from this config

        Returns:
            the value of the named argument queried
        """
        return self.variables.get(arg_name)

    def hasArg(self, arg_name):
        """
        Check if argument exists (or if it is known by this config object)

        Args:
            arg_name: the string name of the argument to check for the existence of

        Returns:
            True if this config contains this argument, False otherwise
        """
        return self.variables.get(arg_name) is not None

    def setArg(self, arg_name, arg_value):
        """
        Sets an argument directly

        Args:
            arg_name: the string name of the argument to set within this config

            arg_value: the value name of the argument to set within this config
        """
        self.variables[arg_name] = arg_value


def criterion_defaults(config):
    """
    Reads information criterion settings (`lmbda` and `kind`) from a
    configuration, falling back to the library defaults for missing entries.

    Args:
        config: a Config object, or the name of a .cfg file to build one from

    Returns:
        dictionary of keyword arguments for `aic`/`bic`
    """
    if not isinstance(config, Config):
        config = Config(config)
    lmbda = DEFAULT_LMBDA
    kind = CriterionKind.LIKELIHOOD
    if config.hasArg("lmbda"):
        try:
            lmbda = float(config.getArg("lmbda"))
        except (TypeError, ValueError):
            raise InvalidArgumentError(
                "`lmbda` must be a float, got " + repr(config.getArg("lmbda")), value=config.getArg("lmbda")
            ) from None
    if config.hasArg("kind"):
        kind = resolve_kind(config.getArg("kind"))
    info(f"Information criterion settings: lmbda = {lmbda}, kind = {kind.value}")
    return {"lmbda": lmbda, "kind": kind}
