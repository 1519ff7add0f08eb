"""类型别名包.

统一导出 JSON/Mapping 风格的结构化类型,供视图、服务与日志模块共享.
"""

from .structures import (
    ContextDict,
    ContextMapping,
    ContextValue,
    FormData,
    JsonDict,
    JsonValue,
    LoggerExtra,
    ScalarValue,
    StructlogEventDict,
    SubmittedBody,
    TemplateContext,
)

__all__ = [
    "ContextDict",
    "ContextMapping",
    "ContextValue",
    "FormData",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "ScalarValue",
    "StructlogEventDict",
    "SubmittedBody",
    "TemplateContext",
]
