"""表单状态常量."""

from enum import Enum


class FormStatus(str, Enum):
    """单次请求计算出的表单状态,每个响应恰好携带一个."""

    INIT = "INIT"
    RESTORED = "RESTORED"
    REPEATED = "REPEATED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class RejectionCode(str, Enum):
    """字段绑定失败的原因码,写入 form 节点的 reason 属性."""

    PARAM_REQUIRED = "PARAM_REQUIRED"
    PARAM_TYPE = "PARAM_TYPE"
    PARAM_PATTERN = "PARAM_PATTERN"
    PARAM_SIZE = "PARAM_SIZE"


__all__ = ["FormStatus", "RejectionCode"]
