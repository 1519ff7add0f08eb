"""页面处理器注册表.

以 ``@site_page(area, page)`` 静态登记页面类,替代按命名约定的动态类加载.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TypeVar

from siteflow.errors import ConfigurationError

PageClassT = TypeVar("PageClassT", bound=type)


class PageRegistry:
    """(area, page) -> 页面类 的映射."""

    def __init__(self) -> None:
        self._pages: dict[tuple[str, str], object] = {}

    def register(self, area: str, page: str, page_class: object, *, replace: bool = False) -> None:
        """登记页面类.

        类型约束在解析时检查,这里只防止同一路由被无意覆盖.

        Raises:
            ConfigurationError: 同一 (area, page) 已登记且未允许替换.

        """
        key = (area, page)
        existing = self._pages.get(key)
        if existing is not None and existing is not page_class and not replace:
            msg = f"页面 {area}/{page} 已登记为 {getattr(existing, '__name__', existing)!s}"
            raise ConfigurationError(msg, extra={"area": area, "page": page})
        self._pages[key] = page_class

    def unregister(self, area: str, page: str) -> None:
        self._pages.pop((area, page), None)

    def lookup(self, area: str, page: str) -> object | None:
        return self._pages.get((area, page))

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._pages

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(sorted(self._pages))

    def __len__(self) -> int:
        return len(self._pages)


page_registry = PageRegistry()


def site_page(area: str, page: str, *, registry: PageRegistry | None = None) -> Callable[[PageClassT], PageClassT]:
    """类装饰器: 把页面类登记到注册表.

    Example:
        >>> @site_page("shop", "checkout")
        ... class CheckoutPage(SitePage):
        ...     ...

    """

    def decorator(page_class: PageClassT) -> PageClassT:
        target = page_registry if registry is None else registry
        target.register(area, page, page_class)
        return page_class

    return decorator


__all__ = ["PageRegistry", "page_registry", "site_page"]
