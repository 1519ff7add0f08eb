"""字段绑定描述包."""

from .base import DEFAULT_STRING_PATTERN, FieldKind, FormField

__all__ = ["DEFAULT_STRING_PATTERN", "FieldKind", "FormField"]
