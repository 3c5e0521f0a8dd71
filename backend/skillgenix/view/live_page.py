"""
在线页面 - 截图目标（已渲染的报告视图）

页面由 lxml HTML 树 + 已绘制canvas的位图登记表组成。
章节通过元素 id 查找；截图时在 body 末尾挂载离屏暂存容器，用后立即移除。
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from lxml import html as lxml_html
from lxml.html import HtmlElement
from PIL import Image

SCRATCH_ID = "capture-scratch"
CAPTURE_ROOT_ID = "capture-root"


class LivePage:
    """已渲染的报告页面"""

    def __init__(
        self,
        root: HtmlElement,
        canvases: dict[str, Image.Image] | None = None,
        default_width: int = 1200,
    ):
        self.root = root
        self.canvases = dict(canvases or {})
        self.default_width = default_width

    @classmethod
    def from_html(
        cls,
        markup: str,
        canvases: dict[str, Image.Image] | None = None,
        default_width: int = 1200,
    ) -> LivePage:
        return cls(lxml_html.document_fromstring(markup), canvases, default_width)

    def find_section(self, key: str) -> HtmlElement | None:
        """按id查找章节元素（暂存容器内的克隆不参与查找）"""
        for element in self.root.xpath("//*[@id=$key]", key=key):
            if not self._in_scratch(element):
                return element
        return None

    def rendered_width(self, element: HtmlElement) -> int:
        """元素渲染宽度：取自身或最近祖先的 data-rendered-width"""
        node = element
        while node is not None:
            value = node.get("data-rendered-width")
            if value and value.isdigit():
                return int(value)
            node = node.getparent()
        return self.default_width

    def canvas_bitmap(self, canvas: HtmlElement) -> Image.Image | None:
        """在线canvas上已绘制的位图"""
        canvas_id = canvas.get("id")
        return self.canvases.get(canvas_id) if canvas_id else None

    @contextmanager
    def scratch_container(self, width: int) -> Iterator[HtmlElement]:
        """离屏暂存容器（固定宽度、白底、视口外），退出时无条件移除"""
        body = self.root.body
        container = body.makeelement(
            "div",
            {
                "id": SCRATCH_ID,
                "style": f"position:fixed;left:-{width + 10000}px;top:0;"
                         f"width:{width}px;background:#ffffff",
            },
        )
        body.append(container)
        try:
            yield container
        finally:
            container.getparent().remove(container)

    def head_markup(self) -> str:
        """页面样式（<style> 与样式表 <link>）"""
        head = self.root.find("head")
        if head is None:
            return ""
        parts = []
        for node in head:
            if node.tag == "style" or (node.tag == "link" and node.get("rel") == "stylesheet"):
                parts.append(lxml_html.tostring(node, encoding="unicode"))
        return "".join(parts)

    def capture_markup(self, container: HtmlElement, width: int) -> str:
        """把暂存容器内容包装为独立文档，供截图引擎渲染"""
        inner = "".join(lxml_html.tostring(child, encoding="unicode") for child in container)
        return (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
            f"{self.head_markup()}</head>"
            "<body style=\"margin:0;background:#ffffff\">"
            f"<div id=\"{CAPTURE_ROOT_ID}\" style=\"width:{width}px;background:#ffffff\">"
            f"{inner}</div></body></html>"
        )

    def to_html(self) -> str:
        return lxml_html.tostring(self.root, encoding="unicode")

    def _in_scratch(self, element: HtmlElement) -> bool:
        for ancestor in element.iterancestors():
            if ancestor.get("id") == SCRATCH_ID:
                return True
        return False
