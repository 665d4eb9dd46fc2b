import threading

import numpy as np
import pytest

from algorithms import (
    DimensionMismatchError,
    EmptyDatasetError,
    InvalidParameterError,
    LogisticRegressionClassifier,
    NotFittedError,
    TrainingFailedError,
)
from algorithms import logistic_regression


def test_sequential_accuracy_on_noisy_separable_data(logistic_data):
    X_train, y_train, X_test, y_test = logistic_data
    clf = LogisticRegressionClassifier(learning_rate=0.1, n_iters=2000)
    clf.fit(X_train, y_train)
    assert clf.score(X_test, y_test) > 0.8


def test_parallel_matches_sequential(logistic_data):
    X_train, y_train, X_test, y_test = logistic_data
    seq = LogisticRegressionClassifier(learning_rate=0.1, n_iters=2000, n_jobs=1).fit(X_train, y_train)
    par = LogisticRegressionClassifier(learning_rate=0.1, n_iters=2000, n_jobs=4).fit(X_train, y_train)

    assert np.allclose(seq.weights, par.weights, atol=1e-8)
    assert par.bias == pytest.approx(seq.bias, abs=1e-8)
    assert seq.score(X_test, y_test) > 0.8
    assert par.score(X_test, y_test) > 0.8


def test_process_backend_matches_thread_backend(logistic_data):
    X_train, y_train, _, _ = logistic_data
    threads = LogisticRegressionClassifier(n_iters=50, n_jobs=2, backend="thread").fit(X_train, y_train)
    procs = LogisticRegressionClassifier(n_iters=50, n_jobs=2, backend="process").fit(X_train, y_train)
    assert np.allclose(threads.weights, procs.weights)
    assert procs.bias == pytest.approx(threads.bias)


def test_more_jobs_than_rows():
    X = [[0.0, 1.0], [1.0, 0.0], [2.0, 2.0]]
    y = [0, 1, 1]
    seq = LogisticRegressionClassifier(n_iters=20).fit(X, y)
    par = LogisticRegressionClassifier(n_iters=20, n_jobs=8).fit(X, y)
    assert np.allclose(seq.weights, par.weights)


def test_n_jobs_is_floored_to_at_least_one():
    assert LogisticRegressionClassifier(n_jobs=0).n_jobs == 1
    assert LogisticRegressionClassifier(n_jobs=-4).n_jobs == 1
    assert LogisticRegressionClassifier(n_jobs=3.7).n_jobs == 3


def test_workers_receive_weight_snapshots(monkeypatch, logistic_data):
    X_train, y_train, _, _ = logistic_data
    seen = []
    lock = threading.Lock()
    real = logistic_regression.partial_gradient

    def recording(X_chunk, y_chunk, weights, bias):
        with lock:
            seen.append(weights)
        return real(X_chunk, y_chunk, weights, bias)

    monkeypatch.setattr(logistic_regression, "partial_gradient", recording)
    clf = LogisticRegressionClassifier(n_iters=3, n_jobs=3).fit(X_train, y_train)

    assert len(seen) == 9
    # every task got its own array, never the model's live weights
    assert len({id(w) for w in seen}) == 9
    assert all(w is not clf.weights for w in seen)


def test_worker_failure_aborts_fit_and_keeps_prior_state(monkeypatch, logistic_data):
    X_train, y_train, _, _ = logistic_data
    clf = LogisticRegressionClassifier(n_iters=10, n_jobs=2).fit(X_train, y_train)
    weights, bias = clf.weights.copy(), clf.bias

    def boom(X_chunk, y_chunk, weights, bias):
        raise ArithmeticError("worker exploded")

    monkeypatch.setattr(logistic_regression, "partial_gradient", boom)
    with pytest.raises(TrainingFailedError) as exc_info:
        clf.fit(X_train, y_train)

    assert isinstance(exc_info.value.__cause__, ArithmeticError)
    assert "iteration 0" in str(exc_info.value)
    assert np.array_equal(clf.weights, weights)
    assert clf.bias == bias


def test_predict_proba_and_threshold():
    clf = LogisticRegressionClassifier(n_iters=500).fit([[-2.0], [-1.0], [1.0], [2.0]], [0, 0, 1, 1])
    proba = clf.predict_proba([[-3.0], [0.0], [3.0]])
    assert np.all((proba > 0) & (proba < 1))
    assert proba[0] < 0.5 < proba[2]
    assert clf.predict([[-3.0], [3.0]]).tolist() == [0, 1]

    # an exact 0.5 probability is classified as 1
    clf.weights = np.zeros(1)
    clf.bias = 0.0
    assert clf.predict([[5.0]]).tolist() == [1]


def test_extreme_scores_do_not_overflow():
    clf = LogisticRegressionClassifier(n_iters=1).fit([[0.0], [1.0]], [0, 1])
    clf.weights = np.array([1.0])
    clf.bias = 0.0
    proba = clf.predict_proba([[-1e4], [1e4]])
    assert proba.tolist() == [0.0, 1.0]


def test_fit_is_deterministic(logistic_data):
    X_train, y_train, _, _ = logistic_data
    clf = LogisticRegressionClassifier(n_iters=200, n_jobs=3)
    w1, b1 = clf.fit(X_train, y_train).weights.copy(), clf.bias
    w2, b2 = clf.fit(X_train, y_train).weights.copy(), clf.bias
    assert np.array_equal(w1, w2)
    assert b1 == b2


def test_invalid_parameters():
    with pytest.raises(InvalidParameterError):
        LogisticRegressionClassifier(learning_rate=-0.1)
    with pytest.raises(InvalidParameterError):
        LogisticRegressionClassifier(n_iters=0)
    with pytest.raises(InvalidParameterError):
        LogisticRegressionClassifier(backend="gpu")


def test_validation_errors():
    clf = LogisticRegressionClassifier(n_iters=5)
    with pytest.raises(NotFittedError):
        clf.predict_proba([[1.0]])
    with pytest.raises(NotFittedError):
        clf.score([[1.0]], [1])

    with pytest.raises(DimensionMismatchError):
        clf.fit([[1.0], [2.0]], [0])
    with pytest.raises(EmptyDatasetError):
        clf.fit([], [])
    with pytest.raises(DimensionMismatchError):
        clf.fit([[1.0, 2.0], [2.0]], [0, 1])
    # never fitted successfully, so still unfitted
    with pytest.raises(NotFittedError):
        clf.predict([[1.0]])


def test_failed_validation_keeps_fitted_state(logistic_data):
    X_train, y_train, _, _ = logistic_data
    clf = LogisticRegressionClassifier(n_iters=20, n_jobs=2).fit(X_train, y_train)
    weights, bias = clf.weights.copy(), clf.bias

    with pytest.raises(DimensionMismatchError):
        clf.fit(X_train, y_train[:-1])
    with pytest.raises(EmptyDatasetError):
        clf.fit([], [])
    with pytest.raises(DimensionMismatchError):
        clf.fit([[1.0, 2.0], [3.0]], [0, 1])
    with pytest.raises(DimensionMismatchError):
        clf.predict_proba([[1.0, 2.0, 3.0]])

    assert np.array_equal(clf.weights, weights)
    assert clf.bias == bias


def test_score_on_empty_input_is_zero(logistic_data):
    X_train, y_train, _, _ = logistic_data
    clf = LogisticRegressionClassifier(n_iters=5).fit(X_train, y_train)
    assert clf.score([], []) == 0.0
