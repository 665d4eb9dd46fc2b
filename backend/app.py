from flask import Flask, jsonify
from flask_socketio import SocketIO
import logging
import socket

import config
from algorithms import ALGORITHMS

# 配置日志
logging.basicConfig(level=logging.DEBUG if config.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = config.SECRET_KEY

# 逻辑回归自带线程池，SocketIO 用 threading 模式即可
socketio = SocketIO(
    app,
    cors_allowed_origins="*",
    logger=config.DEBUG,
    engineio_logger=config.DEBUG,
    async_mode='threading'
)

# 注册蓝图
from routes.benchmark_route import benchmark_bp

app.register_blueprint(benchmark_bp)

# 注册 SocketIO 事件
from routes.benchmark_route import register_socket_events

register_socket_events(socketio)


# 对外访问地址：绑定到全部网卡时探测本机 IP
def server_urls(host, port):
    urls = [f"http://localhost:{port}"]
    if host in ("0.0.0.0", ""):
        urls.append(f"http://{get_local_ip()}:{port}")
    elif host not in ("localhost", "127.0.0.1"):
        urls.append(f"http://{host}:{port}")
    return urls


def get_local_ip():
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("8.8.8.8", 80))
            return s.getsockname()[0]
    except OSError:
        return "127.0.0.1"


@app.route('/')
def index():
    return jsonify({
        "code": 200,
        "message": "基准服务运行中",
        "data": {"algorithms": sorted(ALGORITHMS), "n_jobs": config.N_JOBS},
    })


if __name__ == '__main__':
    for url in server_urls(config.HOST, config.PORT):
        logger.info(f"基准服务地址: {url}")
    logger.info(f"可用算法: {', '.join(sorted(ALGORITHMS))}; 逻辑回归默认并行数: {config.N_JOBS}")

    socketio.run(
        app,
        debug=config.DEBUG,
        host=config.HOST,
        port=config.PORT,
        allow_unsafe_werkzeug=True
    )
