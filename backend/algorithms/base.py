"""
Shared numeric helpers and the common model contract.

Every model in this package exposes the same surface:
- fit(X, y)       -> self
- predict(X)      -> predictions (labels / values)
- score(X, y)     -> float (accuracy for classifiers, R^2 for regressors)
- get_params()    -> dict of constructor hyperparameters

Only numpy is used for the maths.
"""

from __future__ import annotations
from typing import Any, Dict, Sequence
import numpy as np

from .errors import DimensionMismatchError, EmptyDatasetError, InvalidParameterError

# ------------ Conversion & validation ------------

def to_numpy(X) -> np.ndarray:
    """Float copy of a feature matrix; ragged rows are rejected."""
    if isinstance(X, np.ndarray) and X.dtype != object:
        X = np.array(X, dtype=float)
    else:
        rows = list(X)
        if rows and any(np.ndim(r) > 0 for r in rows):
            # a bare number among rows has no width
            widths = {len(r) if np.ndim(r) else None for r in rows}
            if len(widths) > 1:
                shown = sorted(widths, key=lambda w: -1 if w is None else w)
                raise DimensionMismatchError(
                    f"All rows in X must have the same number of features, got widths {shown}")
        X = np.array(rows, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise DimensionMismatchError(f"X must be 2-dimensional, got {X.ndim} dimensions")
    return X

def to_numpy_1d(y) -> np.ndarray:
    y = np.array(y, dtype=float)
    if y.ndim != 1:
        raise DimensionMismatchError(f"y must be 1-dimensional, got {y.ndim} dimensions")
    return y

def check_fit_inputs(X, y):
    """
    Validate a training set and return (X as float matrix, n_samples).

    Order of checks: X/y length, emptiness, row width.
    """
    if len(X) != len(y):
        raise DimensionMismatchError(f"X and y must have the same length ({len(X)} != {len(y)})")
    if len(X) == 0:
        raise EmptyDatasetError("Empty training set")
    X = to_numpy(X)
    return X, X.shape[0]

def check_width(X: np.ndarray, n_features: int):
    if X.shape[0] and X.shape[1] != n_features:
        raise DimensionMismatchError(
            f"X has {X.shape[1]} features, but the model was fitted with {n_features}")

def check_positive(name: str, value, integer: bool = False):
    if integer and (isinstance(value, bool) or not isinstance(value, (int, np.integer))):
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    if not value > 0:
        raise InvalidParameterError(f"{name} must be greater than 0, got {value!r}")

# ------------ Activations ------------

def sigmoid(z):
    """
    Overflow-safe logistic function.

    z >= 0: 1 / (1 + exp(-z))
    z <  0: exp(z) / (1 + exp(z))
    Neither branch ever exponentiates a large positive number.
    """
    scalar = np.ndim(z) == 0
    z = np.atleast_1d(np.asarray(z, dtype=float))
    out = np.empty_like(z)
    pos = z >= 0
    out[pos] = 1.0 / (1.0 + np.exp(-z[pos]))
    ez = np.exp(z[~pos])
    out[~pos] = ez / (1.0 + ez)
    return float(out[0]) if scalar else out

# ---- Metrics ----

def accuracy(y_true: Sequence, y_pred: Sequence) -> float:
    """Fraction of exact label matches; 0.0 for empty input."""
    if len(y_true) != len(y_pred):
        raise DimensionMismatchError(f"y_true and y_pred differ in length ({len(y_true)} != {len(y_pred)})")
    if len(y_true) == 0:
        return 0.0
    correct = sum(1 for t, p in zip(y_true, y_pred) if t == p)
    return correct / len(y_true)

def r2_score(y_true, y_pred) -> float:
    """Coefficient of determination; defined as 0.0 when every target is identical."""
    y_true = to_numpy_1d(y_true)
    y_pred = to_numpy_1d(y_pred)
    if len(y_true) != len(y_pred):
        raise DimensionMismatchError(f"y_true and y_pred differ in length ({len(y_true)} != {len(y_pred)})")
    if len(y_true) == 0:
        return 0.0
    ss_res = float(np.sum((y_true - y_pred) ** 2))
    ss_tot = float(np.sum((y_true - y_true.mean()) ** 2))
    return 0.0 if ss_tot == 0 else 1.0 - ss_res / ss_tot

# ------------ Base Class ------------

class BaseModel:
    task_type: str = "base"
    name: str = "base"
    def fit(self, X, y): raise NotImplementedError
    def predict(self, X): raise NotImplementedError
    def score(self, X, y) -> float: raise NotImplementedError
    def get_params(self) -> Dict[str, Any]: return {}
