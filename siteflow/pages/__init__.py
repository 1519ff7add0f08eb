"""站点页面处理器: 基类、注册表与解析器."""

from siteflow.pages.base import FORM_ID_BINDING, Accepted, Outcome, Rejected, SitePage
from siteflow.pages.registry import PageRegistry, page_registry, site_page

__all__ = [
    "FORM_ID_BINDING",
    "Accepted",
    "Outcome",
    "PageRegistry",
    "Rejected",
    "SitePage",
    "page_registry",
    "site_page",
]
