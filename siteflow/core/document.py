"""响应文档树.

页面处理器与 ResponseAssembler 共同构造的结构化文档,最终交给模板渲染.
结构: ``document`` -> ``form`` (+ ``request``, 可选 ``session``).
"""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

ROOT_NODE = "document"
FORM_NODE = "form"
REQUEST_NODE = "request"
SESSION_NODE = "session"

# 会话快照中序列元素的节点名
_LIST_ITEM_NODE = "item"


@dataclass(slots=True)
class Node:
    """文档节点: 名称、属性、文本内容与有序子节点."""

    name: str
    content: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)

    def add_child(self, child: Node) -> Node:
        """追加子节点并返回该子节点."""
        self.children.append(child)
        return child

    def with_child(self, child: Node) -> Node:
        """追加子节点并返回自身,便于链式构造."""
        self.children.append(child)
        return self

    def set_attribute(self, name: str, value: str) -> Node:
        self.attributes[name] = value
        return self

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def child_list(self, name: str) -> list[Node]:
        return [child for child in self.children if child.name == name]

    def child(self, name: str) -> Node | None:
        """返回第一个同名子节点,不存在时返回 None."""
        for candidate in self.children:
            if candidate.name == name:
                return candidate
        return None

    def text(self, name: str, default: str | None = None) -> str | None:
        """读取第一个同名子节点的文本内容."""
        node = self.child(name)
        if node is None or node.content is None:
            return default
        return node.content

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def from_value(self, value: object) -> Node:
        """按值结构填充子节点(映射 -> 具名子节点,序列 -> item 子节点,标量 -> 文本)."""
        if isinstance(value, Mapping):
            for key, item in value.items():
                self.add_child(Node(str(key)).from_value(item))
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            for item in value:
                self.add_child(Node(_LIST_ITEM_NODE).from_value(item))
        elif value is not None:
            self.content = stringify(value)
        return self

    def to_element(self) -> ET.Element:
        element = ET.Element(self.name, dict(self.attributes))
        if self.content is not None:
            element.text = self.content
        for child in self.children:
            element.append(child.to_element())
        return element

    def to_dict(self) -> dict[str, object]:
        """序列化为 JSON 友好的字典,便于模板与测试断言."""
        payload: dict[str, object] = {"name": self.name}
        if self.attributes:
            payload["attributes"] = dict(self.attributes)
        if self.content is not None:
            payload["content"] = self.content
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


class ResponseDocument:
    """单次请求的响应文档,根节点固定为 ``document`` 并预置 ``form`` 节点."""

    def __init__(self) -> None:
        self.root = Node(ROOT_NODE)
        self.form = self.root.add_child(Node(FORM_NODE))

    def copy(self) -> ResponseDocument:
        """返回深拷贝,避免调用方与页面处理器共享可变状态."""
        return copy.deepcopy(self)

    @property
    def status(self) -> str | None:
        return self.form.get_attribute("status")

    @property
    def request(self) -> Node | None:
        return self.root.child(REQUEST_NODE)

    @property
    def session(self) -> Node | None:
        return self.root.child(SESSION_NODE)

    def form_values(self) -> dict[str, str]:
        """form 节点下的字段值,同名字段以第一个为准."""
        values: dict[str, str] = {}
        for node in self.form:
            if node.content is not None:
                values.setdefault(node.name, node.content)
        return values

    def to_xml(self) -> str:
        element = self.root.to_element()
        ET.indent(element)
        return ET.tostring(element, encoding="unicode", xml_declaration=True)


def stringify(value: object) -> str:
    """把标量值转换为文档/会话中使用的字符串形式(布尔值写作 1/0)."""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


__all__ = [
    "FORM_NODE",
    "REQUEST_NODE",
    "ROOT_NODE",
    "SESSION_NODE",
    "Node",
    "ResponseDocument",
    "stringify",
]
