"""Error kinds raised by the from-scratch models."""


class ModelError(Exception):
    """Base class for every error raised by the algorithms package."""


class DimensionMismatchError(ModelError, ValueError):
    """X / y lengths differ, rows are ragged, or a query has the wrong width."""


class EmptyDatasetError(ModelError, ValueError):
    """fit() was given zero training rows."""


class NotFittedError(ModelError, RuntimeError):
    """predict / score called before a successful fit()."""


class InvalidParameterError(ModelError, ValueError):
    """A hyperparameter is out of range (k, n_iters, learning_rate, ...)."""


class TrainingFailedError(ModelError, RuntimeError):
    """
    A parallel gradient worker failed during fit().
    The underlying exception is chained as __cause__.
    """
