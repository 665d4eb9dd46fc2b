import json
import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import logging
from sklearn.metrics import classification_report, confusion_matrix

from algorithms import BaseModel, ModelError, build_model
from dataset_loader import CLASSIFICATION_DATASETS, REGRESSION_DATASETS, SupervisedSplit, load_split
import config

try:
    import resource
except ImportError:  # Windows
    resource = None

logger = logging.getLogger(__name__)

CLASSIFICATION_ALGORITHMS = ["knn_clf", "logreg_clf"]
REGRESSION_ALGORITHMS = ["linear_reg"]
# logreg_clf 只支持 0/1 二分类
BINARY_DATASETS = ["breast_cancer", "housing_binary", "synthetic_logistic"]


@dataclass
class BenchmarkResult:
    algorithm: str
    dataset: str
    fit_time_ms: float
    predict_time_ms: float
    accuracy: float          # 分类为准确率，回归为 R^2
    memory_mb: Optional[float] = None
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SuiteRun:
    result: BenchmarkResult
    model: BaseModel
    split: SupervisedSplit


def _memory_mb():
    if resource is None:
        return None
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # macOS 上 ru_maxrss 单位为字节，Linux 上为 KB
    if sys.platform == "darwin":
        return peak / (1024.0 * 1024.0)
    return peak / 1024.0


def benchmark_algorithm(model, X_train, y_train, X_test, y_test, name, dataset) -> BenchmarkResult:
    """
    计时 fit 与 score（score 内部包含 predict）
    """
    start_fit = time.perf_counter()
    model.fit(X_train, y_train)
    end_fit = time.perf_counter()

    start_pred = time.perf_counter()
    acc = model.score(X_test, y_test)
    end_pred = time.perf_counter()

    return BenchmarkResult(
        algorithm=name,
        dataset=dataset,
        fit_time_ms=(end_fit - start_fit) * 1000.0,
        predict_time_ms=(end_pred - start_pred) * 1000.0,
        accuracy=float(acc),
        memory_mb=_memory_mb(),
        params=model.get_params(),
    )


def append_results_jsonl(result: BenchmarkResult, path: str):
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(asdict(result)) + "\n")


def validate_algorithm_dataset_compatibility(algorithm, dataset_name):
    """
    验证算法与数据集的兼容性
    """
    if algorithm not in CLASSIFICATION_ALGORITHMS + REGRESSION_ALGORITHMS:
        return False, f"未知算法 '{algorithm}'"

    if dataset_name not in CLASSIFICATION_DATASETS + REGRESSION_DATASETS:
        return False, f"未知数据集 '{dataset_name}'"

    if algorithm in CLASSIFICATION_ALGORITHMS and dataset_name not in CLASSIFICATION_DATASETS:
        return False, f"分类算法 '{algorithm}' 不能用于回归数据集 '{dataset_name}'"

    if algorithm in REGRESSION_ALGORITHMS and dataset_name not in REGRESSION_DATASETS:
        return False, f"回归算法 '{algorithm}' 不能用于分类数据集 '{dataset_name}'"

    if algorithm == "logreg_clf" and dataset_name not in BINARY_DATASETS:
        return False, f"逻辑回归只支持二分类数据集，'{dataset_name}' 不是二分类"

    return True, "验证通过"


def _label_str(v):
    # 0.0 / 0 在报表中视为同一类别
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _classification_details(y_true, y_pred):
    y_true_s = [_label_str(v) for v in y_true]
    y_pred_s = [_label_str(v) for v in y_pred]
    labels = sorted(set(y_true_s) | set(y_pred_s))

    cm = confusion_matrix(y_true_s, y_pred_s, labels=labels)
    class_report = classification_report(y_true_s, y_pred_s, labels=labels,
                                         output_dict=True, zero_division=0)
    # 转换数值类型以便JSON序列化
    for key in class_report:
        if isinstance(class_report[key], dict):
            for sub_key in class_report[key]:
                class_report[key][sub_key] = float(class_report[key][sub_key])
        else:
            class_report[key] = float(class_report[key])

    # 计算各类别的准确率
    y_true_np = np.array(y_true_s)
    y_pred_np = np.array(y_pred_s)
    class_accuracy = {}
    for cls in labels:
        mask = y_true_np == cls
        if np.sum(mask) > 0:
            class_accuracy[cls] = float(np.mean(y_pred_np[mask] == cls))

    return {"labels": labels, "confusion_matrix": cm.tolist(),
            "classification_report": class_report, "class_accuracy": class_accuracy}


def _regression_details(y_true, y_pred):
    residuals = np.asarray(y_true, dtype=float) - np.asarray(y_pred, dtype=float)
    # 限制数据量，确保前端性能
    max_pairs = min(100, len(y_true))
    return {
        "residuals": residuals.tolist(),
        "prediction_pairs": [
            {"true": float(t), "pred": float(p)}
            for t, p in zip(y_true[:max_pairs], y_pred[:max_pairs])
        ],
        "residual_stats": {
            "residual_mean": float(np.mean(residuals)),
            "residual_std": float(np.std(residuals)),
            "residual_min": float(np.min(residuals)),
            "residual_max": float(np.max(residuals)),
        },
    }


def handle_benchmark_request(request_data: dict) -> dict:
    """
    基准测试服务入口：加载数据集 -> 构建模型 -> 计时 fit / score -> 整理可视化数据
    """
    try:
        # 1. 解析请求参数
        algo_name = request_data["algorithm"]
        dataset_name = request_data["dataset"]
        params = request_data.get("params") or {}
        test_size = float(request_data.get("test_size", 0.25))
        seed = int(request_data.get("seed", 42))

        logger.info(f"处理基准请求 - 算法: {algo_name}, 数据集: {dataset_name}, 参数: {params}")

        # 2. 验证算法与数据集的兼容性
        is_valid, validation_msg = validate_algorithm_dataset_compatibility(algo_name, dataset_name)
        if not is_valid:
            return {"code": 400, "message": f"算法与数据集不兼容: {validation_msg}", "data": {}}

        # 3. 加载数据集并构建模型
        split = load_split(dataset_name, test_size=test_size, seed=seed)
        model = build_model(algo_name, params)

        # 4. 计时
        result = benchmark_algorithm(model, split.X_train, split.y_train, split.X_test, split.y_test,
                                     algo_name, dataset_name)
        y_pred = model.predict(split.X_test)
        y_pred = y_pred.tolist() if isinstance(y_pred, np.ndarray) else list(y_pred)

        metric_name = "accuracy" if model.task_type == "classification" else "r2"
        response_data = {
            "code": 200,
            "message": "success",
            "data": {
                "basic_info": {
                    "algorithm": algo_name,
                    "dataset": dataset_name,
                    "task_type": model.task_type,
                    "params": result.params,
                },
                "metrics": {
                    metric_name: result.accuracy,
                    "fit_time_ms": result.fit_time_ms,
                    "predict_time_ms": result.predict_time_ms,
                    "memory_mb": result.memory_mb,
                },
                "y_pred": y_pred,
                "y_true": split.y_test,
                "y_proba": model.predict_proba(split.X_test).tolist() if hasattr(model, "predict_proba") else [],
                "dataset_info": {
                    "n_train": int(split.X_train.shape[0]),
                    "n_test": int(split.X_test.shape[0]),
                    "n_features": int(split.X_train.shape[1]),
                },
                "confusion_matrix": None,
                "classification_report": None,
                "class_accuracy": None,
                "residuals": None,
                "prediction_pairs": None,
            }
        }

        # 5. 计算增强的可视化数据
        data = response_data["data"]
        if model.task_type == "classification":
            details = _classification_details(split.y_test, y_pred)
            data["confusion_matrix"] = details["confusion_matrix"]
            data["classification_report"] = details["classification_report"]
            data["class_accuracy"] = details["class_accuracy"]
            data["dataset_info"]["classes"] = details["labels"]
        else:
            details = _regression_details(split.y_test, y_pred)
            data["residuals"] = details["residuals"]
            data["prediction_pairs"] = details["prediction_pairs"]
            data["metrics"].update(details["residual_stats"])

        logger.info(f"基准测试成功: {algo_name}, 数据集: {dataset_name}, 指标: {data['metrics']}")
        return response_data

    except (ModelError, KeyError, ValueError) as e:
        logger.error(f"基准请求无效: {type(e).__name__}: {str(e)}")
        return {"code": 400, "message": f"请求无效：{type(e).__name__}: {str(e)}", "data": {}}
    except Exception as e:
        logger.exception(f"基准服务错误: {str(e)}")
        return {"code": 500, "message": f"服务端错误：{str(e)}", "data": {}}


# ------------ 默认基准套件 ------------

DEFAULT_SUITE = [
    {"algorithm": "knn_clf", "dataset": "toy", "params": {"k": 3}},
    {"algorithm": "knn_clf", "dataset": "iris", "params": {"k": 5}, "test_size": 0.2, "seed": 42},
    {"algorithm": "linear_reg", "dataset": "synthetic_linear",
     "params": {"learning_rate": 0.05, "n_iters": 1500}, "test_size": 0.25, "seed": 99},
    {"algorithm": "logreg_clf", "dataset": "housing_binary",
     "params": {"learning_rate": 0.1, "n_iters": 2000, "n_jobs": config.N_JOBS}, "test_size": 0.25, "seed": 123},
]


def run_suite(suite=None, results_path=None) -> List[SuiteRun]:
    """
    依次运行基准套件；单个条目失败只记录日志并跳过
    """
    runs = []
    for entry in suite if suite is not None else DEFAULT_SUITE:
        algo_name, dataset_name = entry["algorithm"], entry["dataset"]
        try:
            split = load_split(dataset_name, test_size=entry.get("test_size", 0.25), seed=entry.get("seed", 42))
            model = build_model(algo_name, entry.get("params"))
            result = benchmark_algorithm(model, split.X_train, split.y_train, split.X_test, split.y_test,
                                         algo_name, dataset_name)
        except Exception as e:
            logger.error(f"基准测试失败 {algo_name} / {dataset_name}: {type(e).__name__}: {str(e)}")
            continue
        if results_path:
            append_results_jsonl(result, results_path)
        runs.append(SuiteRun(result, model, split))
    return runs
