"""
章节截图模块 - 离屏克隆/矢量栅格化/浏览器截图

子模块：
- section_capture: 章节截图器
- vector_raster: canvas重绘与SVG栅格化预处理
- browser: Playwright截图引擎（from .browser import PlaywrightRasterizer）
"""

from .section_capture import CAPTURE_SOURCE_ATTR, SectionCapturer
from .vector_raster import RasterStats, VectorRasterizer, flatten_on_white, svg_rendered_size

__all__ = [
    "SectionCapturer",
    "CAPTURE_SOURCE_ATTR",
    "VectorRasterizer",
    "RasterStats",
    "flatten_on_white",
    "svg_rendered_size",
]
