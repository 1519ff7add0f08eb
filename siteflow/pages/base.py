"""站点页面处理器基类.

每个页面(区域 + 页面名)对应一个 SitePage 子类:

- ``authorize``: 判断当前请求是否有权访问,返回 False 即 FORBIDDEN.
- ``view``: 首次展示、回放(RESTORED)或重复提交(REPEATED)时准备页面.
- ``check``: 字段绑定成功后处理提交,返回 ``Accepted``/``Rejected``(也接受布尔值).

可绑定字段通过类属性 ``fields`` 静态声明,基类自动在最前面加入 ``formId``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from siteflow.core.document import Node, ResponseDocument, stringify
from siteflow.errors import ConfigurationError
from siteflow.forms.definitions.base import FieldKind, FormField
from siteflow.forms.form_id import FORM_ID_PATTERN
from siteflow.forms.state_store import FORM_ID_FIELD

if TYPE_CHECKING:
    from siteflow.core.site_request import SiteRequest

FORM_ID_BINDING = FormField(
    name=FORM_ID_FIELD,
    kind=FieldKind.STRING,
    optional=False,
    pattern=FORM_ID_PATTERN,
    attr="form_id",
)


@dataclass(frozen=True, slots=True)
class Accepted:
    """业务检查通过."""

    reason: str | None = None


@dataclass(frozen=True, slots=True)
class Rejected:
    """业务检查拒绝,可附带原因与关联字段."""

    reason: str | None = None
    reference: str | None = None


Outcome = Accepted | Rejected


def normalize_outcome(result: Outcome | bool) -> Outcome:
    """把 check 的返回值统一为 Outcome.

    Raises:
        ConfigurationError: 返回值既不是 Outcome 也不是布尔值.

    """
    if isinstance(result, (Accepted, Rejected)):
        return result
    if isinstance(result, bool):
        return Accepted() if result else Rejected()
    msg = f"check() 返回了无法识别的结果: {type(result).__name__}"
    raise ConfigurationError(msg)


class SitePage(ABC):
    """页面处理器基类.

    Attributes:
        fields: 子类声明的可绑定字段,按声明顺序绑定.
        request: 当前请求.
        config: 应用配置(只读视图).
        form_id: 绑定后的 formId.

    """

    fields: ClassVar[tuple[FormField, ...]] = ()

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        seen: set[str] = set()
        for field in cls.form_fields():
            field.validate(owner=cls.__name__)
            if field.name in seen:
                msg = f"{cls.__name__} 重复声明了字段 {field.name}"
                raise ConfigurationError(msg, extra={"owner": cls.__name__, "field": field.name})
            seen.add(field.name)
            if field is not FORM_ID_BINDING and field.attribute in _RESERVED_ATTRIBUTES:
                msg = f"{cls.__name__} 的字段 {field.name} 与页面处理器的保留属性冲突"
                raise ConfigurationError(msg, extra={"owner": cls.__name__, "field": field.name})

    def __init__(self, request: SiteRequest, config: Mapping[str, object] | None = None) -> None:
        self.request = request
        self.config: Mapping[str, object] = config or {}
        self._response = ResponseDocument()
        for field in self.form_fields():
            setattr(self, field.attribute, None)

    @classmethod
    def form_fields(cls) -> tuple[FormField, ...]:
        """全部可绑定字段,formId 始终排在第一位."""
        return (FORM_ID_BINDING, *cls.fields)

    # ------------------------------------------------------------------ #
    # 子类实现
    # ------------------------------------------------------------------ #
    @abstractmethod
    def authorize(self) -> bool:
        """检查访问权限,返回 False 时整个请求以 FORBIDDEN 结束."""

    @abstractmethod
    def view(self) -> None:
        """准备展示用的响应数据."""

    @abstractmethod
    def check(self) -> Outcome | bool:
        """处理已通过字段校验的提交."""

    # ------------------------------------------------------------------ #
    # 响应辅助
    # ------------------------------------------------------------------ #
    @property
    def response_form(self) -> Node:
        return self._response.form

    def accept(self, reason: str | None = None) -> Accepted:
        """在 check 中返回,表示接受提交."""
        if reason is not None:
            self._response.form.set_attribute("reason", reason)
        return Accepted(reason=reason)

    def reject(self, reason: str | None = None, reference: str | None = None) -> Rejected:
        """在 check 中返回,表示拒绝提交;reason/reference 写入 form 节点属性."""
        if reason is not None:
            self._response.form.set_attribute("reason", reason)
        if reference is not None:
            self._response.form.set_attribute("reference", reference)
        return Rejected(reason=reason, reference=reference)

    def set_form_data(self, name: str, value: object) -> SitePage:
        """设置 form 节点下的字段值(同名节点被替换)."""
        node = self._response.form.child(name)
        if node is None:
            self._response.form.add_child(Node(name, content=stringify(value)))
        else:
            node.content = stringify(value)
        return self

    def get_form_data(self, name: str, default: str | None = None) -> str | None:
        return self._response.form.text(name, default)

    def add_response_node(self, node: Node) -> Node:
        """向文档根节点追加自定义节点(例如列表数据),返回该节点."""
        return self._response.root.add_child(node)

    def get_response(self) -> ResponseDocument:
        """返回响应文档的拷贝."""
        return self._response.copy()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} area={self.request.area!r} page={self.request.page!r}>"


_RESERVED_ATTRIBUTES: frozenset[str] = frozenset(
    name for name in dir(SitePage) if not name.startswith("__")
) | {"request", "config", "form_id", "_response"}


__all__ = [
    "FORM_ID_BINDING",
    "Accepted",
    "Outcome",
    "Rejected",
    "SitePage",
    "normalize_outcome",
]
