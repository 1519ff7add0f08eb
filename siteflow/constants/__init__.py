"""常量模块。

集中管理系统常量，包括错误消息、表单状态、HTTP 相关常量等。

主要常量：
- ErrorMessages: 错误消息常量
- FormStatus: 表单状态枚举
- HttpStatus: HTTP 状态码常量
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

# 导入表单状态常量
from .form_status import FormStatus, RejectionCode

# 导入HTTP头常量
from .http_headers import HttpHeaders

# 导入所有系统常量
from .system_constants import (
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    LogLevel,
    SuccessMessages,
)

__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "FormStatus",
    "HttpHeaders",
    "HttpStatus",
    "LogLevel",
    "RejectionCode",
    "SuccessMessages",
]
