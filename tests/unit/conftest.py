# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供环境隔离与页面处理器构造相关的通用 fixtures。
"""

import pytest

from siteflow.core.site_request import SiteRequest


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch, tmp_path):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - 避免开发者本机环境变量影响测试稳定性
    - 调试响应文件只会写入临时目录
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("WTF_CSRF_ENABLED", "false")
    monkeypatch.setenv("SITE_DEBUG_RESPONSE_FILE", "false")
    monkeypatch.setenv("SITE_DEBUG_RESPONSE_DIR", str(tmp_path))
    monkeypatch.delenv("SITE_SESSION_INTO_RESPONSE", raising=False)
    monkeypatch.delenv("FLASK_DEBUG", raising=False)


@pytest.fixture
def make_request():
    """按 area/page/inputs 构造 SiteRequest."""

    def _make(area: str = "shop", page: str = "checkout", *inputs: str) -> SiteRequest:
        return SiteRequest(area=area, page=page, inputs=tuple(inputs))

    return _make
