# tests/unit/routes/conftest.py
"""路由测试专用 fixtures.

提供 app 与 test_client 相关的 fixtures。
"""

import pytest

from siteflow import create_app
from siteflow.settings import Settings


@pytest.fixture(scope="function")
def app():
    """创建测试应用实例."""
    settings = Settings.load()
    app = create_app(settings=settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="function")
def client(app):
    """创建测试客户端."""
    return app.test_client()
