from dataclasses import dataclass
from typing import Any, List, Sequence

import numpy as np
from sklearn.datasets import fetch_california_housing, load_breast_cancer, load_iris
from sklearn.model_selection import train_test_split as sk_train_test_split
from sklearn.preprocessing import StandardScaler
import logging

from algorithms.errors import DimensionMismatchError

logger = logging.getLogger(__name__)

CLASSIFICATION_DATASETS = ["toy", "iris", "breast_cancer", "housing_binary", "synthetic_logistic"]
REGRESSION_DATASETS = ["synthetic_linear"]
# 这些数据集在使用前做标准化（只用训练集统计量，避免信息泄露）
SCALED_DATASETS = ["breast_cancer", "housing_binary"]


@dataclass
class SupervisedSplit:
    X_train: np.ndarray
    y_train: List[Any]
    X_test: np.ndarray
    y_test: List[Any]


def get_toy_dataset():
    """玩具数据集：两个分离良好的簇 (A / B)，固定划分"""
    X_train = np.array([[1, 2], [2, 3], [3, 3], [6, 7], [7, 8], [8, 9]], dtype=float)
    y_train = ["A", "A", "A", "B", "B", "B"]
    X_test = np.array([[2, 2], [7, 7]], dtype=float)
    y_test = ["A", "B"]
    return SupervisedSplit(X_train, y_train, X_test, y_test)


def generate_linear_dataset(n_samples, n_features, noise=0.0, seed=42):
    """
    y = X @ true_weights + true_bias + N(0, noise^2)

    Features are standard normal. Each true weight has magnitude in [1, 3]
    with a random sign, so every column carries signal.
    """
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(n_samples, n_features))
    true_weights = rng.uniform(1.0, 3.0, size=n_features) * rng.choice([-1.0, 1.0], size=n_features)
    true_bias = float(rng.uniform(-2.0, 2.0))
    y = X @ true_weights + true_bias + rng.normal(scale=noise, size=n_samples)
    return X, y, true_weights, true_bias


def generate_logistic_dataset(n_samples=400, weights=(2.0, -1.5), bias=0.3, noise=1.0, seed=42):
    """二分类合成数据：标签 = sign(线性得分 + 噪声)，特征服从 [-2, 2] 均匀分布"""
    rng = np.random.default_rng(seed)
    weights = np.asarray(weights, dtype=float)
    X = rng.uniform(-2.0, 2.0, size=(n_samples, weights.shape[0]))
    z = X @ weights + bias + rng.normal(scale=noise, size=n_samples)
    y = (z > 0).astype(float)
    return X, y


def train_test_split(X, y, test_size=0.2, seed=42):
    """随机打乱后划分，返回 (X_train, X_test, y_train, y_test)"""
    if len(X) != len(y):
        raise DimensionMismatchError(f"X and y length mismatch ({len(X)} != {len(y)})")
    n_test = max(1, int(np.floor(len(X) * test_size)))
    return sk_train_test_split(X, y, test_size=n_test, random_state=seed, shuffle=True)


def fit_standard_scaler(X):
    """按列计算训练集均值/标准差；方差为 0 的列缩放系数保持为 1"""
    return StandardScaler().fit(np.asarray(X, dtype=float))


def transform_standard_scaler(X, scaler):
    return scaler.transform(np.asarray(X, dtype=float))


def _housing_binary():
    data = fetch_california_housing()
    y = (data.target > np.median(data.target)).astype(float)
    return data.data, y


def load_dataset(dataset_name):
    """
    加载数据集，返回 (X, y)
    iris 保留字符串类别名（KNN 支持字符串标签）
    """
    try:
        if dataset_name == "toy":
            split = get_toy_dataset()
            return (np.vstack([split.X_train, split.X_test]),
                    split.y_train + split.y_test)
        elif dataset_name == "iris":
            data = load_iris()
            X = data.data
            y = [str(data.target_names[t]) for t in data.target]
        elif dataset_name == "breast_cancer":
            data = load_breast_cancer()
            X, y = data.data, data.target.astype(float)
        elif dataset_name == "housing_binary":
            X, y = _housing_binary()
        elif dataset_name == "synthetic_linear":
            X, y, _, _ = generate_linear_dataset(2000, 5, 1.0, 1234)
        elif dataset_name == "synthetic_logistic":
            X, y = generate_logistic_dataset(400, seed=123)
        else:
            raise ValueError(f"未知数据集: {dataset_name}")

        logger.info(f"加载数据集: {dataset_name}, 形状: X={np.shape(X)}, y={np.shape(y)}")
        return X, y

    except Exception as e:
        logger.error(f"数据集加载失败 {dataset_name}: {str(e)}")
        raise


def load_split(dataset_name, test_size=0.25, seed=42):
    """加载并划分数据集；SCALED_DATASETS 仅用训练集拟合标准化"""
    if dataset_name == "toy":
        return get_toy_dataset()
    X, y = load_dataset(dataset_name)
    X_train, X_test, y_train, y_test = train_test_split(X, y, test_size, seed)
    if dataset_name in SCALED_DATASETS:
        scaler = fit_standard_scaler(X_train)
        X_train = transform_standard_scaler(X_train, scaler)
        X_test = transform_standard_scaler(X_test, scaler)
    return SupervisedSplit(np.asarray(X_train, dtype=float), _as_list(y_train),
                           np.asarray(X_test, dtype=float), _as_list(y_test))


def _as_list(y: Sequence) -> List[Any]:
    return y.tolist() if isinstance(y, np.ndarray) else list(y)
