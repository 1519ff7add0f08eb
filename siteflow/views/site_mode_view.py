"""站点模式视图.

集成 GET/POST 逻辑: 页面解析 -> 访问检查 -> 表单生命周期 -> 响应组装与渲染.
表单状态存储在请求开始时从会话加载,在任何退出路径上写回会话.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import current_app, render_template, request, session
from flask.views import MethodView

from siteflow.core.document import stringify
from siteflow.core.site_request import SiteRequest
from siteflow.errors import AppError, AuthorizationError, NotFoundError
from siteflow.forms.state_store import SESSION_KEY, FormStateStore
from siteflow.pages.registry import PageRegistry, page_registry
from siteflow.pages.resolver import PageResolver
from siteflow.services.site import AccessGuard, FormLifecycle, ResponseAssembler
from siteflow.settings import DEFAULT_SITE_FAILURE_TEMPLATE, DEFAULT_SITE_TEMPLATE_FORMAT

if TYPE_CHECKING:
    from flask import Request
    from flask.typing import ResponseReturnValue

    from siteflow.types import FormData

REGISTRY_EXTENSION_KEY = "site_pages"


class SiteModeView(MethodView):
    """``/site/<area>/<page>`` 的 GET/POST 视图."""

    methods = ["GET", "POST"]

    def __init__(self, registry: PageRegistry | None = None) -> None:
        self._registry = registry

    # ------------------------------------------------------------------ #
    # HTTP Methods
    # ------------------------------------------------------------------ #
    def get(self, area: str, page: str, inputs: str | None = None) -> ResponseReturnValue:
        return self._dispatch(area, page, inputs)

    def post(self, area: str, page: str, inputs: str | None = None) -> ResponseReturnValue:
        return self._dispatch(area, page, inputs)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _dispatch(self, area: str, page: str, inputs: str | None) -> ResponseReturnValue:
        site_request = SiteRequest.from_path(area, page, inputs)
        config = current_app.config

        with FormStateStore.open(session) as store:
            resolver = PageResolver(
                self._resolve_registry(),
                current_app.jinja_env,
                template_format=str(config.get("SITE_TEMPLATE_FORMAT") or DEFAULT_SITE_TEMPLATE_FORMAT),
            )
            try:
                descriptor = resolver.resolve(area, page)
                handler = descriptor.page_class(site_request, config)
                AccessGuard().ensure(handler)
            except (NotFoundError, AuthorizationError) as exc:
                return self._render_failure(exc, site_request)

            body = self._extract_body(request)
            status = FormLifecycle(store).run(handler, body)

            assembler = ResponseAssembler.from_config(config)
            snapshot = {**dict(session), SESSION_KEY: store.to_dict()}
            document = assembler.assemble(handler, status, site_request, snapshot)
            html = assembler.render(document, descriptor.template)
            if assembler.debug_response_file:
                assembler.write_debug_file(document)
            return html

    def _resolve_registry(self) -> PageRegistry:
        if self._registry is not None:
            return self._registry
        registry = current_app.extensions.get(REGISTRY_EXTENSION_KEY)
        return registry if isinstance(registry, PageRegistry) else page_registry

    @staticmethod
    def _extract_body(req: Request) -> FormData:
        """提取提交体,只在 POST 时读取.

        表单提交取每个键的第一个值;JSON 对象的值统一转为字符串,``null`` 视为缺省.
        """
        if req.method != "POST":
            return {}
        if req.is_json:
            payload = req.get_json(silent=True)
            if not isinstance(payload, dict):
                return {}
            return {str(key): stringify(value) for key, value in payload.items() if value is not None}
        return {key: req.form.get(key, "") for key in req.form}

    @staticmethod
    def _render_failure(error: AppError, site_request: SiteRequest) -> ResponseReturnValue:
        template = str(current_app.config.get("SITE_FAILURE_TEMPLATE") or DEFAULT_SITE_FAILURE_TEMPLATE)
        html = render_template(
            template,
            status_code=error.status_code,
            message=error.message,
            message_code=error.message_key,
            site_request=site_request,
        )
        return html, error.status_code


__all__ = ["REGISTRY_EXTENSION_KEY", "SiteModeView"]
