from abc import abstractmethod

import pytest
from jinja2 import DictLoader, Environment, TemplateNotFound
from jinja2.loaders import BaseLoader

from siteflow.errors import ConfigurationError, NotFoundError
from siteflow.pages.base import SitePage
from siteflow.pages.registry import PageRegistry, site_page
from siteflow.pages.resolver import PageResolver


class _ConcretePage(SitePage):
    def authorize(self) -> bool:
        return True

    def view(self) -> None:
        return None

    def check(self) -> bool:
        return True


class _AbstractPage(SitePage):
    @abstractmethod
    def extra_hook(self) -> None: ...

    def authorize(self) -> bool:
        return True

    def view(self) -> None:
        return None

    def check(self) -> bool:
        return True


class _UnreadableLoader(BaseLoader):
    def get_source(self, environment, template):  # noqa: ANN001, ANN201
        raise PermissionError(template)


def _environment(*templates: str) -> Environment:
    return Environment(loader=DictLoader({name: "<html></html>" for name in templates}))


@pytest.fixture
def registry() -> PageRegistry:
    return PageRegistry()


@pytest.mark.unit
def test_resolve_returns_descriptor(registry: PageRegistry) -> None:
    registry.register("shop", "checkout", _ConcretePage)
    resolver = PageResolver(registry, _environment("site/shop/checkout.html"))

    descriptor = resolver.resolve("shop", "checkout")

    assert descriptor.page_class is _ConcretePage
    assert descriptor.template == "site/shop/checkout.html"
    assert (descriptor.area, descriptor.page) == ("shop", "checkout")


@pytest.mark.unit
def test_resolve_uses_configured_template_format(registry: PageRegistry) -> None:
    registry.register("shop", "checkout", _ConcretePage)
    resolver = PageResolver(registry, _environment("pages/shop-checkout.j2"), template_format="pages/{area}-{page}.j2")

    assert resolver.resolve("shop", "checkout").template == "pages/shop-checkout.j2"


@pytest.mark.unit
def test_unknown_page_is_not_found(registry: PageRegistry) -> None:
    resolver = PageResolver(registry, _environment("site/shop/checkout.html"))

    with pytest.raises(NotFoundError) as exc_info:
        resolver.resolve("shop", "checkout")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message_key == "PAGE_NOT_FOUND"


@pytest.mark.unit
@pytest.mark.parametrize(("area", "page"), [("..", "checkout"), ("shop", "check out"), ("1shop", "checkout")])
def test_malformed_identity_is_not_found(registry: PageRegistry, area: str, page: str) -> None:
    registry.register(area, page, _ConcretePage)
    resolver = PageResolver(registry, _environment(f"site/{area}/{page}.html"))

    with pytest.raises(NotFoundError):
        resolver.resolve(area, page)


@pytest.mark.unit
def test_missing_template_is_not_found(registry: PageRegistry) -> None:
    registry.register("shop", "checkout", _ConcretePage)
    resolver = PageResolver(registry, _environment())

    with pytest.raises(NotFoundError) as exc_info:
        resolver.resolve("shop", "checkout")

    assert exc_info.value.message_key == "TEMPLATE_NOT_FOUND"
    assert not isinstance(exc_info.value.__cause__, TemplateNotFound)


@pytest.mark.unit
def test_unreadable_template_is_configuration_error(registry: PageRegistry) -> None:
    registry.register("shop", "checkout", _ConcretePage)
    resolver = PageResolver(registry, Environment(loader=_UnreadableLoader()))

    with pytest.raises(ConfigurationError):
        resolver.resolve("shop", "checkout")


@pytest.mark.unit
@pytest.mark.parametrize("handler", [_AbstractPage, SitePage, object, "ShopCheckout", len])
def test_non_concrete_handler_is_configuration_error(registry: PageRegistry, handler: object) -> None:
    registry.register("shop", "checkout", handler)
    resolver = PageResolver(registry, _environment("site/shop/checkout.html"))

    with pytest.raises(ConfigurationError):
        resolver.resolve("shop", "checkout")


@pytest.mark.unit
def test_site_page_decorator_registers_class(registry: PageRegistry) -> None:
    @site_page("blog", "post", registry=registry)
    class _PostPage(_ConcretePage):
        pass

    assert registry.lookup("blog", "post") is _PostPage
    assert ("blog", "post") in registry
    assert len(registry) == 1


@pytest.mark.unit
def test_registry_refuses_silent_overwrite(registry: PageRegistry) -> None:
    registry.register("shop", "checkout", _ConcretePage)

    with pytest.raises(ConfigurationError):
        registry.register("shop", "checkout", _AbstractPage)

    registry.register("shop", "checkout", _AbstractPage, replace=True)
    assert registry.lookup("shop", "checkout") is _AbstractPage
