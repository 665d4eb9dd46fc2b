from flask import Blueprint, request, jsonify
from flask_socketio import emit
from algorithms import ALGORITHMS
from services.benchmark_service import handle_benchmark_request
import logging
import time

logger = logging.getLogger(__name__)

# 创建蓝图
benchmark_bp = Blueprint('benchmark', __name__, url_prefix='/api/benchmark')


# HTTP接口（同步运行一次基准测试）
@benchmark_bp.route('/run', methods=['POST'])
def run_benchmark():
    try:
        request_data = request.get_json(silent=True) or {}
        logger.info(f"收到HTTP基准请求: {request_data.get('algorithm')} - {request_data.get('dataset')}")

        response = handle_benchmark_request(request_data)
        return jsonify(response)

    except Exception as e:
        logger.exception(f"HTTP接口错误: {str(e)}")
        return jsonify({"code": 500, "message": f"接口错误：{str(e)}", "data": {}})


# 可用算法列表
@benchmark_bp.route('/algorithms', methods=['GET'])
def list_algorithms():
    algorithms = [
        {"name": name, "task_type": cls.task_type}
        for name, cls in ALGORITHMS.items()
    ]
    return jsonify({"code": 200, "message": "success", "data": {"algorithms": algorithms}})


# WebSocket事件处理
def register_socket_events(socketio):
    @socketio.on('connect')
    def handle_connect():
        logger.info('客户端已连接')
        emit('connection_response', {'message': '连接成功', 'status': 'connected'})

    @socketio.on('disconnect')
    def handle_disconnect():
        logger.info('客户端已断开连接')

    @socketio.on('run_benchmark')
    def handle_benchmark_socket(data):
        """WebSocket实时运行基准测试"""
        try:
            algorithm = data.get('algorithm')
            dataset = data.get('dataset')
            logger.info(f"收到WebSocket基准请求 - 算法: {algorithm}, 数据集: {dataset}")

            # 发送处理中状态
            emit('benchmark_status', {'status': 'processing', 'message': '基准测试执行中...'})

            response = handle_benchmark_request(data)

            if response["code"] == 200:
                emit('benchmark_result', response["data"])
                logger.info(f"基准测试完成: {algorithm}")
            else:
                emit('benchmark_error', {'error': response["message"]})

        except Exception as e:
            error_msg = f"基准测试错误: {str(e)}"
            logger.exception(error_msg)
            emit('benchmark_error', {'error': error_msg})

    @socketio.on('ping')
    def handle_ping():
        emit('pong', {'message': 'pong', 'timestamp': time.time()})
