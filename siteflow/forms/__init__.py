"""
表单包

集中管理字段绑定描述、字段绑定器、formId 与会话级表单状态存储。
"""

from .binder import BindingRejection, FieldBinder
from .definitions.base import FieldKind, FormField
from .form_id import generate_form_id, is_form_id
from .state_store import FormStateStore

__all__ = [
    "BindingRejection",
    "FieldBinder",
    "FieldKind",
    "FormField",
    "FormStateStore",
    "generate_form_id",
    "is_form_id",
]
