"""SiteFlow - 统一异常定义.

集中维护业务异常类型、严重度与 HTTP 状态码映射.

字段校验失败与业务拒绝不属于异常,它们以值的形式(``BindingRejection``/``Rejected``)
沿正常响应路径返回,保证 REJECTED 状态下的表单记录仍会被持久化.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from werkzeug.exceptions import HTTPException

from siteflow.constants import HttpStatus
from siteflow.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from siteflow.types import LoggerExtra


@dataclass(slots=True)
class ExceptionMetadata:
    """异常的元信息."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str

    @property
    def default_message(self) -> str:
        """根据 message key 获取默认文案.

        Returns:
            str: 对应 `ErrorMessages` 中的默认消息.

        """
        return getattr(ErrorMessages, self.default_message_key, ErrorMessages.INTERNAL_ERROR)


@dataclass(slots=True)
class AppErrorOptions:
    """AppError 初始化的可选配置."""

    message_key: str | None = None
    extra: LoggerExtra | None = None
    severity: ErrorSeverity | None = None
    category: ErrorCategory | None = None
    status_code: int | None = None


class AppError(Exception):
    """统一的基础业务异常.

    Args:
        message: 自定义错误文案,若为空则根据 ``message_key`` 推导.
        options: 额外配置对象,可覆盖 message_key、extra、severity、category、status_code。

    """

    metadata = ExceptionMetadata(
        status_code=500,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        options: AppErrorOptions | None = None,
        extra: LoggerExtra | None = None,
    ) -> None:
        """初始化基础业务异常.

        Args:
            message: 直接使用的错误提示,缺省时会根据 message_key 推导.
            options: 包含 message_key、extra、severity、category、status_code 的配置对象.
            extra: 附加到日志的上下文,与 ``options.extra`` 合并.

        """
        resolved = options or AppErrorOptions()
        self.message_key = resolved.message_key or self.metadata.default_message_key
        self.message = self._resolve_message(message, self.message_key)
        self.extra = {**(resolved.extra or {}), **(extra or {})}
        self._severity = resolved.severity or self.metadata.severity
        self._category = resolved.category or self.metadata.category
        self._status_code = resolved.status_code or self.metadata.status_code
        super().__init__(self.message)

    @property
    def severity(self) -> ErrorSeverity:
        """返回异常实例对应的严重度."""
        return self._severity

    @property
    def category(self) -> ErrorCategory:
        """返回异常所属的业务分类."""
        return self._category

    @property
    def status_code(self) -> int:
        """返回异常对应的 HTTP 状态码."""
        return self._status_code

    @property
    def recoverable(self) -> bool:
        """表示该异常是否可恢复.

        Returns:
            bool: 严重度为 LOW 或 MEDIUM 时为 True.

        """
        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)

    @staticmethod
    def _resolve_message(message: str | None, message_key: str) -> str:
        if message:
            return message
        return getattr(ErrorMessages, message_key, ErrorMessages.INTERNAL_ERROR)


class AuthorizationError(AppError):
    """表示页面处理器拒绝当前请求的访问.

    由 AccessGuard 在表单处理前抛出,默认返回 403.
    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.FORBIDDEN,
        category=ErrorCategory.AUTHORIZATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="PAGE_FORBIDDEN",
    )


class NotFoundError(AppError):
    """表示请求的页面处理器或页面模板不存在,默认返回 404."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.NOT_FOUND,
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.LOW,
        default_message_key="PAGE_NOT_FOUND",
    )


class ConfigurationError(AppError):
    """表示页面处理器声明有误(类型不符、未知字段类型、非法绑定参数).

    属于开发者错误,不会降级为面向用户的 REJECTED,直接终止请求处理.
    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.CRITICAL,
        default_message_key="PAGE_MISCONFIGURED",
    )


def map_exception_to_status(error: Exception, default: int = HttpStatus.INTERNAL_SERVER_ERROR) -> int:
    """根据异常类型推导 HTTP 状态码.

    Args:
        error: 捕获到的异常对象.
        default: 无法匹配时的默认状态码.

    Returns:
        int: 与异常对应的 HTTP 状态码.

    """
    if isinstance(error, AppError):
        return error.status_code

    if isinstance(error, HTTPException):
        code = getattr(error, "code", None)
        if code is not None:
            return int(code)

    return default


__all__ = [
    "AppError",
    "AppErrorOptions",
    "AuthorizationError",
    "ConfigurationError",
    "ExceptionMetadata",
    "NotFoundError",
    "map_exception_to_status",
]
