"""站点模式的核心数据结构."""

from .document import Node, ResponseDocument
from .site_request import SiteRequest

__all__ = ["Node", "ResponseDocument", "SiteRequest"]
