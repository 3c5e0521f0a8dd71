"""
矢量栅格化预处理 - 截图前把克隆中的canvas/SVG统一替换为位图

职责：
1. canvas重绘：克隆的canvas是空白的，按文档顺序取对应在线canvas的位图替换
2. SVG栅格化：序列化 → 按包围盒渲染临时位图 → 铺白底 → 原位替换为<img>
3. 包围盒小于阈值的SVG视为装饰噪声，跳过

测试要点：
- test_svg_replaced_by_img: SVG被原位替换
- test_small_svg_skipped: 小尺寸SVG跳过
- test_canvas_repainted_from_live: canvas从在线页面重绘
- test_flatten_on_white: 透明位图铺白底
"""

from __future__ import annotations

import base64
import io
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lxml import html as lxml_html
from PIL import Image

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from ..interfaces import ISvgRenderer
    from ..view.live_page import LivePage

logger = logging.getLogger(__name__)

_PX_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px)?\s*$")


@dataclass
class RasterStats:
    """单次预处理统计"""
    svg_converted: int = 0
    svg_skipped: int = 0
    canvas_repainted: int = 0
    canvas_blank: int = 0


def flatten_on_white(image: Image.Image) -> Image.Image:
    """透明位图合成到不透明白底"""
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def image_to_data_uri(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def _parse_px(value: str | None) -> float | None:
    if not value:
        return None
    m = _PX_RE.match(value)
    return float(m.group(1)) if m else None


def svg_rendered_size(svg: HtmlElement) -> tuple[int, int] | None:
    """
    SVG渲染包围盒（CSS像素）

    优先 data-rendered-width/height，其次 width/height 属性，最后 viewBox
    """
    width = _parse_px(svg.get("data-rendered-width")) or _parse_px(svg.get("width"))
    height = _parse_px(svg.get("data-rendered-height")) or _parse_px(svg.get("height"))
    if width is None or height is None:
        # HTML解析器会把 viewBox 小写
        view_box = svg.get("viewBox") or svg.get("viewbox")
        if view_box:
            parts = view_box.replace(",", " ").split()
            if len(parts) == 4:
                try:
                    vb_w, vb_h = float(parts[2]), float(parts[3])
                except ValueError:
                    vb_w = vb_h = 0.0
                if width is None and height is None:
                    width, height = vb_w, vb_h
                elif width is None and vb_h:
                    width = height * vb_w / vb_h
                elif height is None and vb_w:
                    height = width * vb_h / vb_w
    if width is None or height is None:
        return None
    return round(width), round(height)


def _bitmap_img(svg_or_canvas: HtmlElement, image: Image.Image, width: int, height: int) -> HtmlElement:
    attrs = {
        "src": image_to_data_uri(image),
        "width": str(width),
        "height": str(height),
        "style": f"display:block;width:{width}px;height:{height}px",
    }
    if svg_or_canvas.get("class"):
        attrs["class"] = svg_or_canvas.get("class")
    return svg_or_canvas.makeelement("img", attrs)


def _replace(old: HtmlElement, new: HtmlElement) -> None:
    new.tail = old.tail
    old.getparent().replace(old, new)


class VectorRasterizer:
    """canvas重绘 + SVG栅格化"""

    def __init__(self, svg_renderer: ISvgRenderer, scale: int = 3, min_vector_px: int = 8):
        self.svg_renderer = svg_renderer
        self.scale = scale
        self.min_vector_px = min_vector_px

    def repaint_canvases(self, page: LivePage, live: HtmlElement, clone: HtmlElement) -> RasterStats:
        """按文档顺序把在线canvas的位图绘制到克隆canvas上"""
        stats = RasterStats()
        pairs = list(zip(live.iter("canvas"), clone.iter("canvas")))
        for live_canvas, clone_canvas in pairs:
            bitmap = page.canvas_bitmap(live_canvas)
            if bitmap is None:
                stats.canvas_blank += 1
                continue
            width = int(_parse_px(live_canvas.get("width")) or bitmap.width)
            height = int(_parse_px(live_canvas.get("height")) or bitmap.height)
            _replace(clone_canvas, _bitmap_img(clone_canvas, flatten_on_white(bitmap), width, height))
            stats.canvas_repainted += 1
        return stats

    async def rasterize_svgs(self, clone: HtmlElement, stats: RasterStats | None = None) -> RasterStats:
        """把克隆内的顶层SVG替换为白底位图"""
        stats = stats or RasterStats()
        # 嵌套SVG随外层一起渲染
        svgs = [s for s in clone.iter("svg") if not any(a.tag == "svg" for a in s.iterancestors())]
        for svg in svgs:
            size = svg_rendered_size(svg)
            if size is None or min(size) < self.min_vector_px:
                stats.svg_skipped += 1
                continue
            width, height = size
            markup = lxml_html.tostring(svg, encoding="unicode")
            bitmap = await self.svg_renderer.render_svg(markup, width, height, self.scale)
            _replace(svg, _bitmap_img(svg, flatten_on_white(bitmap), width, height))
            stats.svg_converted += 1
        return stats

    async def normalize(self, page: LivePage, live: HtmlElement, clone: HtmlElement) -> RasterStats:
        """完整预处理（先canvas后SVG）"""
        stats = self.repaint_canvases(page, live, clone)
        await self.rasterize_svgs(clone, stats)
        logger.debug(
            f"矢量预处理: svg转换={stats.svg_converted} svg跳过={stats.svg_skipped} "
            f"canvas重绘={stats.canvas_repainted} canvas空白={stats.canvas_blank}"
        )
        return stats
