"""
Linear regression trained by full-batch gradient descent.

    y_hat = X @ w + b
    MSE(w, b) = 1/n * sum_i (y_hat_i - y_i)^2

Each iteration:
    error = X @ w + b - y
    w -= (lr / n) * X.T @ error
    b -= (lr / n) * sum(error)

No feature scaling is done here; scale features beforehand when columns
differ a lot in magnitude.
"""

from __future__ import annotations
from typing import Optional
import logging
import numpy as np

from .base import BaseModel, check_fit_inputs, check_positive, check_width, r2_score, to_numpy, to_numpy_1d
from .errors import NotFittedError

logger = logging.getLogger(__name__)


class LinearRegressionModel(BaseModel):
    task_type = "regression"
    name = "linear_reg"

    def __init__(self, learning_rate: float = 0.01, n_iters: int = 1000):
        check_positive("learning_rate", learning_rate)
        check_positive("n_iters", n_iters, integer=True)
        self.learning_rate = learning_rate
        self.n_iters = n_iters
        self.weights: Optional[np.ndarray] = None
        self.bias = 0.0

    def fit(self, X, y):
        X, n = check_fit_inputs(X, y)
        y = to_numpy_1d(y)
        weights = np.zeros(X.shape[1])
        bias = 0.0
        scale = self.learning_rate / n
        for _ in range(self.n_iters):
            error = X @ weights + bias - y
            weights -= scale * (X.T @ error)
            bias -= scale * float(error.sum())
        self.weights, self.bias = weights, bias
        logger.debug("linear_reg fit: n_samples=%d n_features=%d iters=%d", n, X.shape[1], self.n_iters)
        return self

    def predict(self, X) -> np.ndarray:
        if self.weights is None:
            raise NotFittedError("Model not fitted yet")
        X = to_numpy(X)
        if X.shape[0] == 0:
            return np.zeros(0)
        check_width(X, self.weights.shape[0])
        return X @ self.weights + self.bias

    def score(self, X, y) -> float:
        return r2_score(y, self.predict(X))

    def get_params(self):
        return {"learning_rate": self.learning_rate, "n_iters": self.n_iters}
