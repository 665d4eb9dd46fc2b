"""
Command-line benchmark runner: fits every suite entry, prints a timing table
and, unless disabled, the first predictions of each model.
"""

import argparse
import copy
import logging

import numpy as np

import config
from services.benchmark_service import DEFAULT_SUITE, run_suite

logger = logging.getLogger(__name__)

MAX_PRED_ROWS = 30


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Benchmark the from-scratch KNN / linear / logistic models.")
    preds = parser.add_mutually_exclusive_group()
    preds.add_argument("--preds", "--predictions", dest="print_predictions", action="store_true",
                       default=None, help="Print per-benchmark prediction tables.")
    preds.add_argument("--no-preds", "--no-predictions", dest="print_predictions", action="store_false",
                       help="Only print the results table.")
    parser.add_argument("--results", default=config.RESULTS_PATH,
                        help="JSONL file results are appended to ('' disables).")
    parser.add_argument("--n-jobs", type=int, default=config.N_JOBS,
                        help="Workers for the parallel logistic regression entry.")
    return parser


def _suite_with_jobs(n_jobs):
    suite = copy.deepcopy(DEFAULT_SUITE)
    for entry in suite:
        if entry["algorithm"] == "logreg_clf":
            entry["params"]["n_jobs"] = n_jobs
    return suite


def print_results(runs):
    header = f"{'algorithm':<12} {'dataset':<18} {'nTrain':>6} {'nTest':>6} {'nFeat':>5} " \
             f"{'fit ms':>10} {'predict ms':>10} {'score':>7} {'mem MB':>7}  params"
    print(header)
    print("-" * len(header))
    for run in runs:
        r, split = run.result, run.split
        mem = f"{r.memory_mb:.1f}" if r.memory_mb is not None else "-"
        params = ", ".join(f"{k}={v}" for k, v in r.params.items())
        print(f"{r.algorithm:<12} {r.dataset:<18} {len(split.X_train):>6} {len(split.X_test):>6} "
              f"{split.X_train.shape[1]:>5} {r.fit_time_ms:>10.2f} {r.predict_time_ms:>10.2f} "
              f"{r.accuracy:>7.3f} {mem:>7}  {params}")


def print_predictions(run):
    model, split = run.model, run.split
    print(f"\nPredictions ({run.result.algorithm} / {run.result.dataset}):")
    preds = model.predict(split.X_test[:MAX_PRED_ROWS])
    probs = model.predict_proba(split.X_test[:MAX_PRED_ROWS]) if hasattr(model, "predict_proba") else None
    for i, truth in enumerate(split.y_test[:MAX_PRED_ROWS]):
        pred = preds[i]
        if isinstance(pred, (float, np.floating)):
            pred = f"{pred:.3f}"
        line = f"  {i:>3}  truth={truth}  pred={pred}"
        if probs is not None:
            line += f"  prob1={probs[i]:.3f}"
        print(line)


def main(args=None):
    args = args or build_arg_parser().parse_args()
    logging.basicConfig(level=logging.INFO)
    print_predictions_enabled = config.PRINT_PREDICTIONS if args.print_predictions is None else args.print_predictions

    runs = run_suite(_suite_with_jobs(args.n_jobs), results_path=args.results or None)
    if not runs:
        logger.warning("no benchmark completed")
        return runs

    print_results(runs)
    if print_predictions_enabled:
        for run in runs:
            print_predictions(run)
    return runs


if __name__ == "__main__":
    main()
