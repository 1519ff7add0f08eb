"""页面访问检查."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siteflow.errors import AuthorizationError, ConfigurationError
from siteflow.infra.route_safety import log_with_context

if TYPE_CHECKING:
    from siteflow.pages.base import SitePage


class AccessGuard:
    """在读取任何提交数据之前调用页面的 authorize."""

    def authorize(self, page: SitePage) -> bool:
        granted = page.authorize()
        if not isinstance(granted, bool):
            msg = f"{page.__class__.__name__}.authorize() 必须返回布尔值"
            raise ConfigurationError(msg, extra={"page_class": page.__class__.__name__})
        return granted

    def ensure(self, page: SitePage) -> None:
        """访问被拒绝时记录日志并抛出 AuthorizationError."""
        if self.authorize(page):
            return
        context = {
            "area": page.request.area,
            "page": page.request.page,
            "page_class": page.__class__.__name__,
        }
        log_with_context(
            "info",
            "FORBIDDEN: 页面拒绝访问",
            module="site",
            action="authorize",
            context=context,
            logger_name="site",
        )
        raise AuthorizationError(extra=context)


__all__ = ["AccessGuard"]
