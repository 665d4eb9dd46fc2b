from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import logging
import numpy as np

from .base import BaseModel, accuracy, check_fit_inputs, check_positive, check_width, to_numpy
from .errors import DimensionMismatchError, NotFittedError

logger = logging.getLogger(__name__)

Label = Union[str, int, float]

# ------------ KNN Classifier ------------

class KNNClassifier(BaseModel):
    """
    Brute-force k-nearest-neighbour classifier with majority vote.

    Labels may be strings or numbers. Votes are tallied on ``label_key(label)``
    (``str`` by default); pass a custom key for labels whose string form is not
    a usable identity. Neighbours at equal distance keep their training order,
    and a tie in vote count goes to the label met first among the k nearest.
    """
    task_type = "classification"
    name = "knn_clf"

    def __init__(self, k: int = 3, label_key: Optional[Callable[[Any], str]] = None):
        check_positive("k", k, integer=True)
        self.k = k
        self.label_key = label_key or str
        self.X: Optional[np.ndarray] = None
        self.y: Optional[List[Label]] = None

    def fit(self, X, y):
        X, n = check_fit_inputs(X, y)
        labels = y.tolist() if isinstance(y, np.ndarray) else list(y)
        self.X, self.y = X, labels
        logger.debug("knn fit: n_samples=%d n_features=%d k=%d", n, X.shape[1], self.k)
        return self

    def _check_fitted(self):
        if self.X is None:
            raise NotFittedError("Model not fitted yet")

    def predict_one(self, x: Sequence[float]) -> Label:
        self._check_fitted()
        x = np.array(x, dtype=float)
        if x.ndim != 1 or x.shape[0] != self.X.shape[1]:
            raise DimensionMismatchError(
                f"Query has shape {x.shape}, expected ({self.X.shape[1]},)")
        dists = np.sqrt(np.sum((self.X - x) ** 2, axis=1))
        nearest = np.argsort(dists, kind="stable")[:self.k]

        votes: Dict[str, int] = {}
        first_label: Dict[str, Label] = {}
        for i in nearest:
            label = self.y[i]
            key = self.label_key(label)
            votes[key] = votes.get(key, 0) + 1
            first_label.setdefault(key, label)
        # max() keeps the first key on equal counts, i.e. insertion order
        winner = max(votes, key=votes.get)
        return first_label[winner]

    def predict(self, X) -> List[Label]:
        self._check_fitted()
        X = to_numpy(X)
        check_width(X, self.X.shape[1])
        return [self.predict_one(row) for row in X]

    def score(self, X, y_true) -> float:
        y_pred = self.predict(X)
        y_true = y_true.tolist() if isinstance(y_true, np.ndarray) else list(y_true)
        return accuracy(y_true, y_pred)

    def get_params(self):
        return {"k": self.k}
