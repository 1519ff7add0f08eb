"""表单生命周期: 五种表单状态的判定与接受/拒绝编排.

判定顺序(先命中者生效):

1. INIT      - 无提交体,且不满足 RESTORED 条件;
2. REPEATED  - 提交体携带合法 formId,且该 formId 对应的记录已关闭;
3. RESTORED  - 无提交体,存在未关闭的待处理记录(回放记录数据后调用 view);
4. 提交处理  - 其余情况: 字段绑定 + 业务检查,得到 ACCEPTED 或 REJECTED.

INIT/RESTORED/REPEATED 调用页面的 view;只有字段绑定成功后才会调用 check,
因此重复提交永远不会再次执行业务检查.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from siteflow.constants import FormStatus
from siteflow.errors import ConfigurationError
from siteflow.forms.binder import FieldBinder
from siteflow.forms.form_id import is_form_id
from siteflow.forms.state_store import FORM_ID_FIELD
from siteflow.infra.route_safety import log_with_context
from siteflow.pages.base import Accepted, Rejected, normalize_outcome

if TYPE_CHECKING:
    from siteflow.forms.state_store import FormStateStore
    from siteflow.pages.base import SitePage
    from siteflow.types import SubmittedBody


class FormLifecycle:
    """基于 FormStateStore 的表单状态机."""

    def __init__(self, store: FormStateStore, binder: FieldBinder | None = None) -> None:
        self.store = store
        self.binder = binder or FieldBinder()

    # ------------------------------------------------------------------ #
    # 状态判定
    # ------------------------------------------------------------------ #
    def is_init(self, area: str, page: str, body: SubmittedBody) -> bool:
        return not body and not self.is_restored(area, page, body)

    def is_repeated(self, area: str, page: str, body: SubmittedBody) -> bool:
        form_id = body.get(FORM_ID_FIELD)
        return is_form_id(form_id) and self.store.is_closed(area, page, form_id)

    def is_restored(self, area: str, page: str, body: SubmittedBody) -> bool:
        return not body and self.store.has_pending(area, page)

    def determine_status(self, area: str, page: str, body: SubmittedBody) -> FormStatus | None:
        """返回 INIT/REPEATED/RESTORED 之一;需要走提交处理时返回 None."""
        if self.is_init(area, page, body):
            return FormStatus.INIT
        if self.is_repeated(area, page, body):
            return FormStatus.REPEATED
        if self.is_restored(area, page, body):
            return FormStatus.RESTORED
        return None

    # ------------------------------------------------------------------ #
    # 编排
    # ------------------------------------------------------------------ #
    def run(self, page: SitePage, body: SubmittedBody | None = None) -> FormStatus:
        """执行一次请求的生命周期并返回最终状态.

        Args:
            page: 已通过访问检查的页面处理器.
            body: 提交体,GET 请求为空.

        Returns:
            本次请求的表单状态.

        Raises:
            ConfigurationError: 页面字段声明或 check 返回值有误,或已接受的提交无法关闭记录.

        """
        submitted: Mapping[str, str] = body or {}
        area, page_name = page.request.area, page.request.page

        status = self.determine_status(area, page_name, submitted)
        if status is FormStatus.RESTORED:
            self.binder.restore(page, self.store.pending_data(area, page_name))

        if status is None:
            status = self._process_submission(page, submitted)
        else:
            page.view()

        log_with_context(
            "info",
            "表单状态已确定",
            module="site",
            action="form_lifecycle",
            context={"area": area, "page": page_name, "status": status.value},
            logger_name="site",
        )
        return status

    def _process_submission(self, page: SitePage, body: SubmittedBody) -> FormStatus:
        rejection = self.binder.bind(page, body)
        if rejection is not None:
            page.reject(rejection.code.value, rejection.field)
            self._persist_rejected(page)
            return FormStatus.REJECTED

        outcome = normalize_outcome(page.check())
        if isinstance(outcome, Accepted):
            if outcome.reason is not None:
                page.accept(outcome.reason)
            if not self.store.close(page.request.area, page.request.page, page.form_id):
                msg = f"{page.__class__.__name__} 接受了无法关闭的 formId: {page.form_id!r}"
                raise ConfigurationError(msg, extra={"area": page.request.area, "page": page.request.page})
            return FormStatus.ACCEPTED

        if isinstance(outcome, Rejected):
            page.reject(outcome.reason, outcome.reference)
        self._persist_rejected(page)
        return FormStatus.REJECTED

    def _persist_rejected(self, page: SitePage) -> None:
        """保存已绑定的字段作为新的未关闭记录,并回显到响应 form 节点."""
        data = self.binder.export(page)
        self.store.set(page.request.area, page.request.page, data)
        for name, value in data.items():
            page.set_form_data(name, value)


__all__ = ["FormLifecycle"]
