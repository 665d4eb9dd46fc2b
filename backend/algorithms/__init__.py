"""
From-scratch supervised learners with a uniform fit / predict / score API.

Algorithms included:
1) KNNClassifier                 (brute-force k-NN, majority vote, str/number labels)
2) LinearRegressionModel         (full-batch gradient descent on MSE, scored by R^2)
3) LogisticRegressionClassifier  (binary, gradient descent, optional fork-join parallel gradients)

Models are looked up by name through ALGORITHMS / build_model, which is how the
benchmark service instantiates them from request payloads.
"""

from typing import Any, Dict, Optional

from .base import BaseModel, accuracy, r2_score, sigmoid
from .errors import (
    DimensionMismatchError,
    EmptyDatasetError,
    InvalidParameterError,
    ModelError,
    NotFittedError,
    TrainingFailedError,
)
from .knn import KNNClassifier
from .linear_regression import LinearRegressionModel
from .logistic_regression import LogisticRegressionClassifier

# ------------ Registry & factory ------------

ALGORITHMS = {
    # classification
    "knn_clf": KNNClassifier,
    "logreg_clf": LogisticRegressionClassifier,
    # regression
    "linear_reg": LinearRegressionModel,
}


def build_model(algo: str, params: Optional[Dict[str, Any]] = None) -> BaseModel:
    if algo not in ALGORITHMS:
        raise InvalidParameterError(f"Unknown algo '{algo}'. Valid: {list(ALGORITHMS.keys())}")
    try:
        return ALGORITHMS[algo](**(params or {}))
    except TypeError as e:
        raise InvalidParameterError(f"Bad params for '{algo}': {e}") from e


__all__ = [
    "ALGORITHMS",
    "BaseModel",
    "DimensionMismatchError",
    "EmptyDatasetError",
    "InvalidParameterError",
    "KNNClassifier",
    "LinearRegressionModel",
    "LogisticRegressionClassifier",
    "ModelError",
    "NotFittedError",
    "TrainingFailedError",
    "accuracy",
    "build_model",
    "r2_score",
    "sigmoid",
]
