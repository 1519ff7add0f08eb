"""响应文档组装与渲染.

在页面处理器返回的文档上补充:
- ``form@status`` 与缺省的 formId;
- ``request`` 回显节点(mode/area/page/inputs);
- 可选的 ``session`` 快照节点(按配置的会话分组).

组装完成后交给 Jinja 模板渲染;渲染成功且启用调试时,由视图调用
``write_debug_file`` 把文档序列化为 XML 写入临时目录,写入失败只记录日志,不影响响应.
"""

from __future__ import annotations

import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from flask import render_template

from siteflow.core.document import REQUEST_NODE, SESSION_NODE, Node
from siteflow.forms.form_id import generate_form_id
from siteflow.forms.state_store import FORM_ID_FIELD
from siteflow.infra.route_safety import log_fallback

if TYPE_CHECKING:
    from siteflow.constants import FormStatus
    from siteflow.core.document import ResponseDocument
    from siteflow.core.site_request import SiteRequest
    from siteflow.pages.base import SitePage
    from siteflow.types import TemplateContext

DEBUG_SUB_DIR: Final[str] = "siteflow"
DEBUG_RESPONSE_FILE: Final[str] = "lastSiteResponse.xml"


class ResponseAssembler:
    """构造最终响应文档并渲染页面模板."""

    def __init__(
        self,
        *,
        session_groups: Sequence[str] = (),
        debug_response_file: bool = False,
        debug_response_dir: str | Path | None = None,
    ) -> None:
        self.session_groups = tuple(session_groups)
        self.debug_response_file = debug_response_file
        self.debug_response_dir = Path(debug_response_dir) if debug_response_dir else None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ResponseAssembler:
        return cls(
            session_groups=config.get("SITE_SESSION_INTO_RESPONSE") or (),
            debug_response_file=bool(config.get("SITE_DEBUG_RESPONSE_FILE", False)),
            debug_response_dir=config.get("SITE_DEBUG_RESPONSE_DIR"),
        )

    def assemble(
        self,
        page: SitePage,
        status: FormStatus,
        request: SiteRequest,
        session: Mapping[str, Any] | None = None,
    ) -> ResponseDocument:
        """组装响应文档.

        Args:
            page: 已完成生命周期的页面处理器.
            status: 本次请求的表单状态.
            request: 当前请求.
            session: 会话快照来源,仅在配置了会话分组时使用.

        Returns:
            新的文档对象,与页面内部文档互不影响.

        """
        if page.get_form_data(FORM_ID_FIELD) is None:
            page.set_form_data(FORM_ID_FIELD, generate_form_id())

        document = page.get_response()
        document.form.set_attribute("status", status.value)

        request_node = document.root.add_child(Node(REQUEST_NODE))
        request_node.with_child(Node("mode", content=request.mode))
        request_node.with_child(Node("area", content=request.area))
        request_node.with_child(Node("page", content=request.page))
        inputs_node = request_node.add_child(Node("inputs"))
        for value in request.inputs:
            inputs_node.add_child(Node("input", content=value))

        if self.session_groups:
            snapshot = session or {}
            session_node = document.root.add_child(Node(SESSION_NODE))
            for group in self.session_groups:
                session_node.add_child(Node(group).from_value(snapshot.get(group, {})))

        return document

    def render(self, document: ResponseDocument, template: str) -> str:
        """用页面模板渲染文档."""
        context: TemplateContext = {
            "document": document,
            "form": document.form,
            "form_values": document.form_values(),
            "status": document.status,
        }
        return render_template(template, **context)

    def write_debug_file(self, document: ResponseDocument) -> Path | None:
        """把文档写入调试文件,失败时返回 None."""
        base_dir = self.debug_response_dir or Path(tempfile.gettempdir())
        target = base_dir / DEBUG_SUB_DIR / DEBUG_RESPONSE_FILE
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(document.to_xml(), encoding="utf-8")
        except OSError as exc:
            log_fallback(
                "warning",
                "调试响应文件写入失败",
                module="site",
                action="write_debug_response",
                fallback_reason="debug_file_unwritable",
                extra={"path": str(target), "error_message": str(exc)},
                logger_name="site",
            )
            return None
        return target


__all__ = ["DEBUG_RESPONSE_FILE", "DEBUG_SUB_DIR", "ResponseAssembler"]
