"""
Error types raised by gmreval metric and model routines.
"""

class InvalidArgumentError(ValueError):
    """
    Raised when an argument (such as a criterion `kind`) takes a value that is
    not supported, or when the inputs to a metric routine do not satisfy its
    preconditions.

    Args:
        message: human-readable description of the problem

        value: the offending value (Default: None)
    """
    def __init__(self, message, value=None):
        super().__init__(message)
        self.value = value


class RangeViolationError(IndexError):
    """
    Raised when a requested mixture component index falls outside of [0, K).

    Args:
        index: the requested component index

        K: the number of components of the mixture queried
    """
    def __init__(self, index, K):
        super().__init__(
            "Component index (" + str(index) + ") is outside of the valid range [0, " + str(K) + ")!"
        )
        self.index = index
        self.K = K
