"""shop/checkout: 下单页面.

字段:
- ``qty``: 购买数量,整数,1..10;
- ``note``: 订单备注,可选;
- ``gift``: 是否礼品包装,可选布尔值.

礼品订单必须附带备注(用作贺卡内容),否则以 ``GIFT_NOTE_REQUIRED`` 拒绝并指向 ``note``.
"""

from __future__ import annotations

from typing import Final

from siteflow.core.document import Node
from siteflow.forms.definitions.base import FieldKind, FormField
from siteflow.pages.base import Outcome, SitePage
from siteflow.pages.registry import site_page

QTY_MIN: Final[int] = 1
QTY_MAX: Final[int] = 10


@site_page("shop", "checkout")
class CheckoutPage(SitePage):
    """下单页面."""

    fields = (
        FormField("qty", FieldKind.INTEGER, min=QTY_MIN, max=QTY_MAX),
        FormField("note", FieldKind.STRING, optional=True, pattern=r"\A.{1,200}\Z"),
        FormField("gift", FieldKind.BOOLEAN, optional=True),
    )

    qty: int | None
    note: str | None
    gift: bool | None

    def authorize(self) -> bool:
        return True

    def view(self) -> None:
        limits = self.add_response_node(Node("limits"))
        limits.set_attribute("min", str(QTY_MIN))
        limits.set_attribute("max", str(QTY_MAX))

    def check(self) -> Outcome:
        if self.gift and not self.note:
            return self.reject("GIFT_NOTE_REQUIRED", "note")
        return self.accept("ORDER_PLACED")
