"""SiteFlow - 健康检查路由."""

import time

from flask import Blueprint, current_app
from flask.typing import ResponseReturnValue

from siteflow.utils.response_utils import jsonify_unified_success

# 创建蓝图
health_bp = Blueprint("health", __name__)


@health_bp.route("/ping")
def ping() -> ResponseReturnValue:
    """基础健康检查.

    Returns:
        JSON 响应,包含服务状态和版本信息.

    """
    return jsonify_unified_success(
        data={
            "status": "healthy",
            "timestamp": time.time(),
            "version": current_app.config.get("APP_VERSION"),
        },
        message="服务运行正常",
    )
