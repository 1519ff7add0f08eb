"""表单标识(formId)的生成与校验.

formId 用于把一次提交与会话中的待处理/已关闭表单记录关联起来,它不是秘密,
但使用强随机源生成,避免跨会话猜中相同标识.
"""

from __future__ import annotations

import re
import secrets

FORM_ID_LENGTH = 16
FORM_ID_PATTERN = r"\A[0-9a-fA-F]{16}\Z"

_FORM_ID_RE = re.compile(FORM_ID_PATTERN)


def generate_form_id() -> str:
    """生成 16 位小写十六进制的 formId."""
    return secrets.token_hex(FORM_ID_LENGTH // 2)


def is_form_id(value: object) -> bool:
    """判断给定值是否为语法合法的 formId."""
    return isinstance(value, str) and _FORM_ID_RE.fullmatch(value) is not None


__all__ = ["FORM_ID_LENGTH", "FORM_ID_PATTERN", "generate_form_id", "is_form_id"]
