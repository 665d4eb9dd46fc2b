"""
Binary logistic regression trained by full-batch gradient descent.

Two training paths share the same per-row formula (see grad_worker):

- n_jobs <= 1: the whole matrix is one chunk, computed in the calling thread.
- n_jobs  > 1: rows are split into contiguous chunks and every iteration
  fans out one partial_gradient task per chunk to a pool, joins all of them,
  sums the partial gradients and applies a single update. The join is a
  barrier: iteration i+1 only starts from the fully aggregated weights of
  iteration i.

Workers only ever receive copies of the weights, so the coordinator is the
sole writer of the parameters.
"""

from __future__ import annotations
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import List, Optional, Tuple
import logging
import math
import numpy as np

from .base import BaseModel, accuracy, check_fit_inputs, check_positive, check_width, sigmoid, to_numpy, to_numpy_1d
from .errors import InvalidParameterError, NotFittedError, TrainingFailedError
from .grad_worker import partial_gradient, partition_rows

logger = logging.getLogger(__name__)

BACKENDS = ("thread", "process")


class LogisticRegressionClassifier(BaseModel):
    task_type = "classification"
    name = "logreg_clf"

    def __init__(self, learning_rate: float = 0.1, n_iters: int = 1000, n_jobs: int = 1,
                 backend: str = "thread"):
        check_positive("learning_rate", learning_rate)
        check_positive("n_iters", n_iters, integer=True)
        if backend not in BACKENDS:
            raise InvalidParameterError(f"backend must be one of {BACKENDS}, got {backend!r}")
        self.learning_rate = learning_rate
        self.n_iters = n_iters
        self.n_jobs = max(1, math.floor(n_jobs))
        self.backend = backend
        self.weights: Optional[np.ndarray] = None
        self.bias = 0.0

    def fit(self, X, y):
        X, n = check_fit_inputs(X, y)
        y = to_numpy_1d(y)
        weights = np.zeros(X.shape[1])
        bias = 0.0
        scale = self.learning_rate / n

        if self.n_jobs <= 1:
            for _ in range(self.n_iters):
                grad_w, grad_b = partial_gradient(X, y, weights, bias)
                weights -= scale * grad_w
                bias -= scale * grad_b
        else:
            bias = self._fit_parallel(X, y, weights, bias, scale)

        self.weights, self.bias = weights, bias
        logger.debug("logreg fit: n_samples=%d n_features=%d iters=%d n_jobs=%d",
                     n, X.shape[1], self.n_iters, self.n_jobs)
        return self

    def _make_pool(self, workers: int) -> Executor:
        if self.backend == "process":
            return ProcessPoolExecutor(max_workers=workers)
        return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="logreg-grad")

    def _fit_parallel(self, X: np.ndarray, y: np.ndarray, weights: np.ndarray,
                      bias: float, scale: float) -> float:
        """Fork-join gradient descent; updates ``weights`` in place and returns the bias."""
        chunks: List[Tuple[int, int]] = partition_rows(X.shape[0], self.n_jobs)
        logger.debug("logreg parallel fit: backend=%s chunks=%s", self.backend, chunks)

        with self._make_pool(len(chunks)) as pool:
            for it in range(self.n_iters):
                futures = [
                    pool.submit(partial_gradient, X[start:end], y[start:end], weights.copy(), bias)
                    for start, end in chunks
                ]
                grad_w = np.zeros_like(weights)
                grad_b = 0.0
                for fut in futures:
                    try:
                        part = fut.result()
                    except Exception as e:
                        for pending in futures:
                            pending.cancel()
                        raise TrainingFailedError(
                            f"gradient worker failed at iteration {it}: {type(e).__name__}: {e}") from e
                    grad_w += part.grad_w
                    grad_b += part.grad_b
                weights -= scale * grad_w
                bias -= scale * grad_b
        return bias

    def _check_fitted(self):
        if self.weights is None:
            raise NotFittedError("Model not fitted yet")

    def predict_proba(self, X) -> np.ndarray:
        self._check_fitted()
        X = to_numpy(X)
        if X.shape[0] == 0:
            return np.zeros(0)
        check_width(X, self.weights.shape[0])
        return sigmoid(X @ self.weights + self.bias)

    def predict(self, X) -> np.ndarray:
        return (self.predict_proba(X) >= 0.5).astype(int)

    def score(self, X, y_true) -> float:
        y_pred = self.predict(X).tolist()
        y_true = y_true.tolist() if isinstance(y_true, np.ndarray) else list(y_true)
        return accuracy(y_true, y_pred)

    def get_params(self):
        return {"learning_rate": self.learning_rate, "n_iters": self.n_iters,
                "n_jobs": self.n_jobs, "backend": self.backend}
