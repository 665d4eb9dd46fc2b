import pytest

import app as app_module
from app import app, socketio


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_index(client):
    body = client.get("/").get_json()
    assert body["code"] == 200
    assert body["data"]["algorithms"] == ["knn_clf", "linear_reg", "logreg_clf"]


def test_server_urls(monkeypatch):
    monkeypatch.setattr(app_module, "get_local_ip", lambda: "10.0.0.7")
    assert app_module.server_urls("0.0.0.0", 5000) == ["http://localhost:5000", "http://10.0.0.7:5000"]
    assert app_module.server_urls("127.0.0.1", 8080) == ["http://localhost:8080"]
    assert app_module.server_urls("192.168.1.2", 80) == ["http://localhost:80", "http://192.168.1.2:80"]


def test_list_algorithms(client):
    data = client.get("/api/benchmark/algorithms").get_json()["data"]
    names = {a["name"]: a["task_type"] for a in data["algorithms"]}
    assert names == {"knn_clf": "classification", "logreg_clf": "classification",
                     "linear_reg": "regression"}


def test_run_benchmark_over_http(client):
    resp = client.post("/api/benchmark/run", json={"algorithm": "knn_clf", "dataset": "toy",
                                                   "params": {"k": 3}})
    body = resp.get_json()
    assert body["code"] == 200
    assert body["data"]["metrics"]["accuracy"] == 1.0


def test_incompatible_request_over_http(client):
    body = client.post("/api/benchmark/run", json={"algorithm": "linear_reg", "dataset": "toy"}).get_json()
    assert body["code"] == 400


def test_socket_run_benchmark():
    sio = socketio.test_client(app)
    assert sio.is_connected()
    sio.get_received()

    sio.emit("run_benchmark", {"algorithm": "knn_clf", "dataset": "toy", "params": {"k": 3}})
    received = {msg["name"]: msg["args"][0] for msg in sio.get_received()}
    assert received["benchmark_status"]["status"] == "processing"
    assert received["benchmark_result"]["y_pred"] == ["A", "B"]

    sio.emit("run_benchmark", {"algorithm": "svm_clf", "dataset": "toy"})
    received = {msg["name"]: msg["args"][0] for msg in sio.get_received()}
    assert "benchmark_error" in received
    sio.disconnect()
