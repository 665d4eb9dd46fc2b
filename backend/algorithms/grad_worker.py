"""
Partial-gradient task for parallel logistic regression.

Runs inside a pool worker (thread or process), so everything here is
module-level and picklable. A task sees one contiguous chunk of rows plus a
private snapshot of the weights; it shares no mutable state with the
coordinator and answers with a single PartialGradient.
"""

from __future__ import annotations
import math
from typing import List, NamedTuple, Tuple
import numpy as np

from .base import sigmoid


class PartialGradient(NamedTuple):
    grad_w: np.ndarray   # sum over the chunk of error_i * x_i
    grad_b: float        # sum over the chunk of error_i


def partial_gradient(X_chunk: np.ndarray, y_chunk: np.ndarray,
                     weights: np.ndarray, bias: float) -> PartialGradient:
    """Unnormalized logistic-loss gradient over one chunk of rows."""
    error = sigmoid(X_chunk @ weights + bias) - y_chunk
    return PartialGradient(X_chunk.T @ error, float(error.sum()))


def partition_rows(n_samples: int, n_jobs: int) -> List[Tuple[int, int]]:
    """
    Split range(n_samples) into contiguous [start, end) chunks.

    Uses min(n_jobs, n_samples) jobs of ceil(n_samples / jobs) rows each;
    the last chunk may be shorter and empty tail chunks are dropped.
    """
    if n_samples <= 0:
        return []
    jobs = max(1, min(n_jobs, n_samples))
    size = math.ceil(n_samples / jobs)
    chunks = []
    for j in range(jobs):
        start = j * size
        end = min(n_samples, start + size)
        if start >= end:
            continue
        chunks.append((start, end))
    return chunks
