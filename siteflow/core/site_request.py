"""站点模式请求描述."""

from __future__ import annotations

from dataclasses import dataclass

SITE_MODE = "site"


@dataclass(frozen=True, slots=True)
class SiteRequest:
    """路由解析后的请求: 模式、区域、页面与路径输入.

    提交体不在这里携带,它只会在访问检查通过后才被读取并交给表单生命周期.

    Attributes:
        area: 区域标识.
        page: 页面标识.
        mode: 请求模式,站点页面固定为 ``site``.
        inputs: 页面标识之后的路径片段.

    """

    area: str
    page: str
    mode: str = SITE_MODE
    inputs: tuple[str, ...] = ()

    @classmethod
    def from_path(cls, area: str, page: str, inputs: str | None = None) -> SiteRequest:
        """由路由参数构造,``inputs`` 为 ``a/b/c`` 形式的剩余路径."""
        parts = tuple(part for part in (inputs or "").split("/") if part)
        return cls(area=area, page=page, inputs=parts)


__all__ = ["SITE_MODE", "SiteRequest"]
