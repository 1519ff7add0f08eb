"""字段绑定描述.

每个页面处理器以静态元组声明可绑定字段,FieldBinder 按声明顺序校验并写入.
描述本身在页面类定义时即完成校验,声明错误属于配置错误而非用户输入错误.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from siteflow.errors import ConfigurationError

DEFAULT_STRING_PATTERN: Final[str] = r"\A.+\Z"


class FieldKind(str, Enum):
    """字段类型."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"

    @property
    def is_numeric(self) -> bool:
        return self in (FieldKind.INTEGER, FieldKind.FLOAT)

    @classmethod
    def resolve(cls, tag: FieldKind | str) -> FieldKind:
        """把类型标签(含别名 int/double/bool)解析为 FieldKind.

        Raises:
            ConfigurationError: 标签无法识别时抛出.

        """
        if isinstance(tag, FieldKind):
            return tag
        if isinstance(tag, str):
            resolved = _KIND_ALIASES.get(tag.strip().lower())
            if resolved is not None:
                return resolved
        msg = f"未知的字段类型: {tag!r}"
        raise ConfigurationError(msg, extra={"kind": str(tag)})


_KIND_ALIASES: Final[dict[str, FieldKind]] = {
    "string": FieldKind.STRING,
    "integer": FieldKind.INTEGER,
    "int": FieldKind.INTEGER,
    "float": FieldKind.FLOAT,
    "double": FieldKind.FLOAT,
    "boolean": FieldKind.BOOLEAN,
    "bool": FieldKind.BOOLEAN,
}


@dataclass(frozen=True, slots=True)
class FormField:
    """单个可绑定字段的描述.

    Attributes:
        name: 提交体与会话中的字段名.
        kind: 字段类型,可为 FieldKind 或类型标签字符串.
        optional: 是否允许缺省,缺省时字段保持未赋值.
        pattern: 正则约束,仅字符串类型可用,默认要求非空.
        min: 数值下界(含),仅数值类型可用.
        max: 数值上界(含),仅数值类型可用.
        attr: 写入页面处理器的属性名,默认与 name 相同.

    """

    name: str
    kind: FieldKind | str = FieldKind.STRING
    optional: bool = False
    pattern: str | None = None
    min: int | float | None = None
    max: int | float | None = None
    attr: str | None = None

    @classmethod
    def from_tag(
        cls,
        name: str,
        tag: str,
        *,
        optional: bool,
        pattern: str | None = None,
        min: int | float | None = None,  # noqa: A002
        max: int | float | None = None,  # noqa: A002
        attr: str | None = None,
    ) -> FormField:
        """按外部描述(类型标签 + 参数)构造字段,并立即校验."""
        field = cls(
            name=name,
            kind=FieldKind.resolve(tag),
            optional=optional,
            pattern=pattern,
            min=min,
            max=max,
            attr=attr,
        )
        field.validate()
        return field

    @property
    def attribute(self) -> str:
        return self.attr or self.name

    @property
    def field_kind(self) -> FieldKind:
        return FieldKind.resolve(self.kind)

    @property
    def effective_pattern(self) -> str:
        return self.pattern if self.pattern is not None else DEFAULT_STRING_PATTERN

    def validate(self, owner: str | None = None) -> None:
        """校验描述自身的一致性.

        Args:
            owner: 声明该字段的页面类名,仅用于错误上下文.

        Raises:
            ConfigurationError: 类型未知、参数类型不符或约束互相矛盾时抛出.

        """
        context = {"field": self.name, "owner": owner}
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError(f"非法的字段名: {self.name!r}", extra=context)
        if not self.attribute.isidentifier():
            raise ConfigurationError(f"字段 {self.name} 无法映射到属性名 {self.attribute!r}", extra=context)
        if not isinstance(self.optional, bool):
            raise ConfigurationError(f"字段 {self.name} 的 optional 必须为布尔值", extra=context)

        kind = FieldKind.resolve(self.kind)
        if self.pattern is not None:
            if kind is not FieldKind.STRING:
                raise ConfigurationError(f"字段 {self.name} 的 pattern 仅适用于字符串类型", extra=context)
            if not isinstance(self.pattern, str):
                raise ConfigurationError(f"字段 {self.name} 的 pattern 必须为字符串", extra=context)
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise ConfigurationError(f"字段 {self.name} 的 pattern 无法编译: {exc}", extra=context) from exc

        for bound_name, bound in (("min", self.min), ("max", self.max)):
            if bound is None:
                continue
            if not kind.is_numeric:
                raise ConfigurationError(f"字段 {self.name} 的 {bound_name} 仅适用于数值类型", extra=context)
            if isinstance(bound, bool) or not isinstance(bound, (int, float)):
                raise ConfigurationError(f"字段 {self.name} 的 {bound_name} 必须为数值", extra=context)
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ConfigurationError(f"字段 {self.name} 的 min 大于 max", extra=context)


__all__ = ["DEFAULT_STRING_PATTERN", "FieldKind", "FormField"]
