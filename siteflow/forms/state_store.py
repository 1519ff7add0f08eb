"""会话级表单状态存储.

会话结构: ``session["form"][area][page] = {"data": {...}, "close": bool}``.
每个 (area, page) 同一时刻仅保留一条记录,新写入覆盖旧记录.
已接受的提交会被关闭并只保留 formId,用于识别重复提交.

存储在请求开始时从会话加载一次,在请求结束时写回一次(所有退出路径都会写回).
同一会话的并发请求之间不加锁,后写入者覆盖先写入者.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from typing import Any, Final

from siteflow.forms.form_id import is_form_id
from siteflow.types import FormData

SESSION_KEY: Final[str] = "form"
FORM_ID_FIELD: Final[str] = "formId"

FormRecord = dict[str, Any]


class FormStateStore:
    """(area, page) -> 待处理表单记录的映射."""

    def __init__(self, forms: Mapping[str, Any] | None = None) -> None:
        self._forms: dict[str, dict[str, FormRecord]] = self._normalize(forms or {})

    # ------------------------------------------------------------------ #
    # 会话生命周期
    # ------------------------------------------------------------------ #
    @classmethod
    def load(cls, session: Mapping[str, Any]) -> FormStateStore:
        """从会话读取表单记录(拷贝,不与会话共享引用)."""
        raw = session.get(SESSION_KEY)
        return cls(copy.deepcopy(raw) if isinstance(raw, Mapping) else None)

    def flush(self, session: MutableMapping[str, Any]) -> None:
        """把当前记录整体写回会话."""
        session[SESSION_KEY] = copy.deepcopy(self._forms)

    @classmethod
    @contextmanager
    def open(cls, session: MutableMapping[str, Any]) -> Iterator[FormStateStore]:
        """加载存储并保证在任意退出路径上写回会话.

        Example:
            >>> with FormStateStore.open(session) as store:
            ...     store.set("shop", "checkout", {"formId": form_id})

        """
        store = cls.load(session)
        try:
            yield store
        finally:
            store.flush(session)

    # ------------------------------------------------------------------ #
    # 记录操作
    # ------------------------------------------------------------------ #
    def get(self, area: str, page: str, expected_form_id: str | None = None) -> FormRecord:
        """读取 (area, page) 的记录.

        Args:
            area: 区域.
            page: 页面.
            expected_form_id: 若提供,仅当记录中的 formId 与之相等时返回记录.

        Returns:
            记录的拷贝;不存在或 formId 不匹配时返回空字典.

        """
        record = self._forms.get(area, {}).get(page)
        if not isinstance(record, dict):
            return {}
        if expected_form_id is not None:
            if not is_form_id(expected_form_id):
                return {}
            if record.get("data", {}).get(FORM_ID_FIELD) != expected_form_id:
                return {}
        return copy.deepcopy(record)

    def set(self, area: str, page: str, data: Mapping[str, str], *, closed: bool = False) -> None:
        """覆盖 (area, page) 的记录."""
        self._forms.setdefault(area, {})[page] = {"data": dict(data), "close": bool(closed)}

    def close(self, area: str, page: str, form_id: str | None) -> bool:
        """关闭记录,只保留 formId;formId 非法时不做任何写入.

        Returns:
            是否写入了关闭记录.

        """
        if not is_form_id(form_id):
            return False
        self.set(area, page, {FORM_ID_FIELD: str(form_id)}, closed=True)
        return True

    def is_closed(self, area: str, page: str, form_id: str | None = None) -> bool:
        """记录存在且已关闭时返回 True;提供 form_id 时还要求 formId 匹配."""
        record = self.get(area, page, form_id)
        return bool(record) and record.get("close") is True

    def has_pending(self, area: str, page: str) -> bool:
        """存在未关闭的记录."""
        record = self.get(area, page)
        return bool(record) and record.get("close") is not True

    def pending_data(self, area: str, page: str) -> FormData:
        return dict(self.get(area, page).get("data", {}))

    def to_dict(self) -> dict[str, dict[str, FormRecord]]:
        return copy.deepcopy(self._forms)

    @staticmethod
    def _normalize(forms: Mapping[str, Any]) -> dict[str, dict[str, FormRecord]]:
        """丢弃结构不合法的会话条目(例如被篡改或旧版本写入的数据)."""
        normalized: dict[str, dict[str, FormRecord]] = {}
        for area, pages in forms.items():
            if not isinstance(pages, Mapping):
                continue
            for page, record in pages.items():
                if not isinstance(record, Mapping) or not isinstance(record.get("data"), Mapping):
                    continue
                normalized.setdefault(str(area), {})[str(page)] = {
                    "data": {str(key): str(value) for key, value in record["data"].items()},
                    "close": record.get("close") is True,
                }
        return normalized


__all__ = ["FORM_ID_FIELD", "SESSION_KEY", "FormRecord", "FormStateStore"]
