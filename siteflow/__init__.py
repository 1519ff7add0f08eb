"""SiteFlow - Flask 应用初始化.

基于 Flask 的站点模式页面分发与多请求表单生命周期管理.
"""

import logging
from importlib import import_module
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Blueprint, Flask, jsonify, request
from flask.typing import ResponseReturnValue
from flask_wtf.csrf import CSRFProtect

from siteflow.infra.logging.request_middleware import register_request_logging
from siteflow.pages.registry import PageRegistry, page_registry
from siteflow.settings import Settings
from siteflow.utils.response_utils import unified_error_response
from siteflow.utils.structlog_config import (
    ErrorContext,
    configure_structlog,
)
from siteflow.views.site_mode_view import REGISTRY_EXTENSION_KEY

# 初始化扩展
csrf = CSRFProtect()

# 随应用一起加载的页面模块(通过 @site_page 登记到全局注册表)
PAGE_PACKAGES: tuple[str, ...] = ("siteflow.areas",)


def create_app(
    *,
    settings: Settings | None = None,
    registry: PageRegistry | None = None,
) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.
        registry: 可选的页面注册表,缺省使用全局注册表并加载内置页面模块.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    configure_app(app, resolved_settings)

    # 配置会话安全
    configure_security(app, resolved_settings)

    # 初始化扩展
    csrf.init_app(app)

    # 登记页面处理器
    configure_pages(app, registry)

    # 注册蓝图
    configure_blueprints(app)

    # 配置日志
    configure_logging(app)

    # 配置统一日志系统
    configure_structlog(app)
    register_request_logging(app)

    # 设置全局日志级别
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error, context=ErrorContext(error, request))
        return jsonify(payload), status_code

    return app


def configure_app(app: Flask, settings: Settings) -> None:
    """写入 Settings 提供的配置.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,包含环境变量解析、默认值与校验结果.

    """
    app.config.from_mapping(settings.to_flask_config())
    app.config.setdefault("APPLICATION_ROOT", "/")
    app.testing = settings.environment.strip().lower() == "testing"


def configure_security(app: Flask, settings: Settings) -> None:
    """配置会话安全参数与 Cookie 选项."""
    app.config["PERMANENT_SESSION_LIFETIME"] = settings.session_lifetime_seconds
    app.config["SESSION_COOKIE_SECURE"] = False
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_NAME"] = "siteflow_session"


def configure_pages(app: Flask, registry: PageRegistry | None) -> None:
    """把页面注册表挂到应用扩展上,供站点模式视图解析页面.

    未显式提供注册表时导入内置页面模块,使其 ``@site_page`` 登记生效.
    """
    if registry is None:
        for module_path in PAGE_PACKAGES:
            import_module(module_path)
        registry = page_registry
    app.extensions[REGISTRY_EXTENSION_KEY] = registry


def configure_blueprints(app: Flask) -> None:
    """注册所有蓝图以暴露路由."""
    blueprint_specs: list[tuple[str, str, str | None]] = [
        ("siteflow.routes.site", "site_bp", "/site"),
        ("siteflow.routes.health", "health_bp", "/health"),
    ]

    blueprints: list[tuple[Blueprint, str | None]] = []
    for module_path, attr_name, prefix in blueprint_specs:
        module = import_module(module_path)
        blueprint = getattr(module, attr_name)
        blueprints.append((blueprint, prefix))

    for blueprint, prefix in blueprints:
        if prefix:
            app.register_blueprint(blueprint, url_prefix=prefix)
        else:
            app.register_blueprint(blueprint)


def configure_logging(app: Flask) -> None:
    """配置日志系统与文件处理器."""
    if not app.debug and not app.testing:
        # 创建日志目录
        log_path = Path(app.config["LOG_FILE"])
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # 配置文件日志处理器
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=app.config["LOG_MAX_SIZE"],
            backupCount=app.config["LOG_BACKUP_COUNT"],
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"),
        )
        file_handler.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.addHandler(file_handler)

        app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.info("SiteFlow 应用启动")


__all__ = ["create_app", "csrf"]
