"""页面解析: (area, page) -> 页面处理器类 + 模板.

检查顺序:
1. 页面类是否已登记(否则 NOT_FOUND);
2. 页面类是否为 SitePage 的具体子类(否则配置错误);
3. 模板是否存在(否则 NOT_FOUND);
4. 模板是否可读(否则配置错误).
"""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from jinja2 import TemplateNotFound

from siteflow.errors import AppErrorOptions, ConfigurationError, NotFoundError
from siteflow.pages.base import SitePage
from siteflow.settings import DEFAULT_SITE_TEMPLATE_FORMAT
from siteflow.utils.structlog_config import log_debug

if TYPE_CHECKING:
    from jinja2 import Environment

    from siteflow.pages.registry import PageRegistry

_TOKEN_RE: Final = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")


@dataclass(frozen=True, slots=True)
class PageDescriptor:
    """解析结果."""

    area: str
    page: str
    page_class: type[SitePage]
    template: str


class PageResolver:
    """根据注册表与模板加载器解析页面."""

    def __init__(
        self,
        registry: PageRegistry,
        jinja_env: Environment,
        template_format: str = DEFAULT_SITE_TEMPLATE_FORMAT,
    ) -> None:
        self._registry = registry
        self._jinja_env = jinja_env
        self._template_format = template_format

    def resolve(self, area: str, page: str) -> PageDescriptor:
        """解析页面.

        Raises:
            NotFoundError: 页面类或模板不存在.
            ConfigurationError: 页面类不是具体的 SitePage 子类,或模板不可读.

        """
        if not _TOKEN_RE.fullmatch(area) or not _TOKEN_RE.fullmatch(page):
            log_debug("NOT_FOUND: 非法的区域或页面标识", module="site", area=area, page=page)
            raise NotFoundError(extra={"area": area, "page": page})

        page_class = self._registry.lookup(area, page)
        if page_class is None:
            log_debug("NOT_FOUND: 页面处理器不存在", module="site", area=area, page=page)
            raise NotFoundError(extra={"area": area, "page": page})

        self._assert_page_class(page_class, area, page)

        template = self._template_format.format(area=area, page=page)
        self._assert_template(template, area, page)
        return PageDescriptor(area=area, page=page, page_class=page_class, template=template)

    @staticmethod
    def _assert_page_class(page_class: object, area: str, page: str) -> None:
        context = {"area": area, "page": page, "page_class": repr(page_class)}
        if not inspect.isclass(page_class):
            raise ConfigurationError(f"{area}/{page} 登记的不是类: {page_class!r}", extra=context)
        if getattr(page_class, "_is_protocol", False):
            raise ConfigurationError(f"{page_class.__name__} 是协议类型,无法实例化", extra=context)
        if not issubclass(page_class, SitePage):
            raise ConfigurationError(f"{page_class.__name__} 不是 SitePage 的子类", extra=context)
        if inspect.isabstract(page_class):
            raise ConfigurationError(f"{page_class.__name__} 是抽象类", extra=context)

    def _assert_template(self, template: str, area: str, page: str) -> None:
        loader = self._jinja_env.loader
        if loader is None:
            raise ConfigurationError("模板环境未配置加载器", extra={"template": template})
        try:
            loader.get_source(self._jinja_env, template)
        except TemplateNotFound:
            log_debug("NOT_FOUND: 页面模板不存在", module="site", area=area, page=page, template=template)
            raise NotFoundError(
                options=AppErrorOptions(message_key="TEMPLATE_NOT_FOUND"),
                extra={"area": area, "page": page, "template": template},
            ) from None
        except OSError as exc:
            msg = f"页面模板不可读: {template}"
            raise ConfigurationError(msg, extra={"template": template}) from exc


__all__ = ["PageDescriptor", "PageResolver"]
