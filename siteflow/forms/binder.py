"""表单字段绑定.

按页面处理器声明的 FormField 顺序校验提交体,并把转换后的值写回处理器属性.
遇到第一个失败字段即停止;在此之前已写入的字段不会回滚(非事务,尽力而为).
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from siteflow.constants import RejectionCode
from siteflow.core.document import stringify
from siteflow.errors import ConfigurationError
from siteflow.forms.definitions.base import FieldKind, FormField
from siteflow.utils.structlog_config import log_debug

if TYPE_CHECKING:
    from siteflow.pages.base import SitePage
    from siteflow.types import FormData, SubmittedBody

_INTEGER_RE: Final = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE: Final = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FALSY_VALUES: Final[frozenset[str]] = frozenset({"", "0", "false", "off", "no"})

BoundValue = str | int | float | bool


@dataclass(frozen=True, slots=True)
class BindingRejection:
    """字段绑定失败: 原因码 + 出错字段名."""

    code: RejectionCode
    field: str


class FieldBinder:
    """声明式字段绑定器."""

    def bind(self, page: SitePage, body: SubmittedBody) -> BindingRejection | None:
        """把提交体绑定到页面处理器.

        Args:
            page: 目标页面处理器.
            body: 提交的原始字段.

        Returns:
            成功时返回 None,否则返回第一个失败字段的 BindingRejection.

        Raises:
            ConfigurationError: 字段声明了无法识别的类型.

        """
        return self.bind_fields(page.form_fields(), page, body)

    def bind_fields(
        self,
        fields: Iterable[FormField],
        target: object,
        body: SubmittedBody,
    ) -> BindingRejection | None:
        for field in fields:
            kind = FieldKind.resolve(field.kind)
            raw = body.get(field.name)

            # 可选字段的空串与缺省等价(未勾选、未填写的表单控件)
            if raw is None or (field.optional and raw == ""):
                if field.optional:
                    continue
                return self._reject(RejectionCode.PARAM_REQUIRED, field, raw)

            converted = self._convert(field, kind, raw)
            if isinstance(converted, RejectionCode):
                return self._reject(converted, field, raw)
            setattr(target, field.attribute, converted)
        return None

    def restore(self, page: SitePage, data: Mapping[str, str]) -> None:
        """把会话中暂存的表单数据回放到页面处理器与响应 form 节点.

        回放的值来自此前成功绑定的字段,因此只做类型转换,不再检查 pattern 与上下界.
        """
        declared = {field.name: field for field in page.form_fields()}
        for name, value in data.items():
            page.set_form_data(name, value)
            field = declared.get(name)
            if field is None:
                continue
            coerced = self._coerce(FieldKind.resolve(field.kind), value)
            if coerced is not None:
                setattr(page, field.attribute, coerced)

    def export(self, page: SitePage) -> FormData:
        """导出所有已赋值的声明字段(字符串形式),用于持久化与回显."""
        data: FormData = {}
        for field in page.form_fields():
            value = getattr(page, field.attribute, None)
            if value is None:
                continue
            data[field.name] = stringify(value)
        return data

    def _convert(self, field: FormField, kind: FieldKind, raw: str) -> BoundValue | RejectionCode:
        if kind is FieldKind.STRING:
            if re.search(field.effective_pattern, raw) is None:
                return RejectionCode.PARAM_PATTERN
            return raw

        if kind is FieldKind.BOOLEAN:
            return raw.strip().lower() not in _FALSY_VALUES

        if kind.is_numeric:
            number = self._coerce(kind, raw)
            if number is None:
                return RejectionCode.PARAM_TYPE
            if field.min is not None and number < field.min:
                return RejectionCode.PARAM_SIZE
            if field.max is not None and number > field.max:
                return RejectionCode.PARAM_SIZE
            return number

        msg = f"字段 {field.name} 的类型 {kind!r} 无法绑定"
        raise ConfigurationError(msg, extra={"field": field.name})

    @staticmethod
    def _coerce(kind: FieldKind, raw: str) -> BoundValue | None:
        text = raw.strip()
        if kind is FieldKind.STRING:
            return raw
        if kind is FieldKind.BOOLEAN:
            return text.lower() not in _FALSY_VALUES
        if kind is FieldKind.INTEGER:
            return int(text) if _INTEGER_RE.fullmatch(text) else None
        if kind is FieldKind.FLOAT:
            if not _FLOAT_RE.fullmatch(text):
                return None
            number = float(text)
            return number if math.isfinite(number) else None
        return None

    @staticmethod
    def _reject(code: RejectionCode, field: FormField, raw: str | None) -> BindingRejection:
        log_debug("REJECTED: 字段绑定失败", module="site", code=code.value, field=field.name, value=raw)
        return BindingRejection(code=code, field=field.name)


__all__ = ["BindingRejection", "FieldBinder"]
