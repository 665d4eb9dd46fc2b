import numpy as np
import pytest

from dataset_loader import generate_logistic_dataset, get_toy_dataset


@pytest.fixture
def toy_split():
    return get_toy_dataset()


@pytest.fixture
def logistic_data():
    """n=400, weights [2, -1.5], bias 0.3; first 75% train, rest test."""
    X, y = generate_logistic_dataset(400, weights=(2.0, -1.5), bias=0.3, noise=1.0, seed=123)
    n_train = int(len(X) * 0.75)
    return X[:n_train], y[:n_train], X[n_train:], y[n_train:]


@pytest.fixture
def rng():
    return np.random.default_rng(0)
