"""站点模式服务: 访问检查、表单生命周期与响应组装."""

from .access_guard import AccessGuard
from .form_lifecycle import FormLifecycle
from .response_assembler import ResponseAssembler

__all__ = ["AccessGuard", "FormLifecycle", "ResponseAssembler"]
