import os


def _env_flag(name, default):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


SECRET_KEY = os.environ.get("ML_BENCH_SECRET_KEY", "ml-benchmark-secret-key")
HOST = os.environ.get("ML_BENCH_HOST", "0.0.0.0")
PORT = int(os.environ.get("ML_BENCH_PORT", "5000"))
DEBUG = _env_flag("ML_BENCH_DEBUG", "1")

# JSONL file the benchmark runner appends to; empty disables writing
RESULTS_PATH = os.environ.get("ML_BENCH_RESULTS_PATH", "results.jsonl")
PRINT_PREDICTIONS = _env_flag("BENCH_PRINT_PREDICTIONS", "1")
N_JOBS = int(os.environ.get("ML_BENCH_N_JOBS", str(os.cpu_count() or 4)))
