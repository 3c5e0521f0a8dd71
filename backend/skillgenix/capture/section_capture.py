"""
章节截图器 - 把页面上的一个章节转为印刷级位图

职责：
1. 深拷贝章节到离屏暂存容器（固定宽度、白底），不改动在线页面
2. 等待固定稳定延迟（动画/异步图片加载）
3. canvas重绘 + SVG栅格化
4. 按固定过采样倍数截图
5. 成功/失败都立即移除暂存容器

依赖：
- IElementRasterizer: HTML截图引擎（Playwright/测试假实现）
- VectorRasterizer: 矢量预处理

测试要点：
- test_capture_returns_bitmap: 返回位图及像素尺寸
- test_scratch_removed_on_failure: 失败时暂存容器已移除
- test_live_page_untouched: 在线页面不被修改
- test_capture_error_wraps_exception: 异常包装为CaptureError
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import TYPE_CHECKING

from ..config import get_config
from ..interfaces import CaptureError, IElementRasterizer, ISectionCapturer, ISvgRenderer
from ..models import CapturedSection
from .vector_raster import VectorRasterizer

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from ..config import RuntimeConfig
    from ..view.live_page import LivePage

logger = logging.getLogger(__name__)

CAPTURE_SOURCE_ATTR = "data-capture-source"


class SectionCapturer(ISectionCapturer):
    """章节截图器实现"""

    def __init__(
        self,
        rasterizer: IElementRasterizer,
        svg_renderer: ISvgRenderer,
        config: RuntimeConfig | None = None,
    ):
        self.config = config or get_config()
        capture_cfg = self.config.capture
        self.rasterizer = rasterizer
        self.settle_delay = capture_cfg.settle_delay_ms / 1000
        self.vectors = VectorRasterizer(
            svg_renderer,
            scale=capture_cfg.scale,
            min_vector_px=capture_cfg.min_vector_px,
        )

    async def capture(self, page: LivePage, element: HtmlElement) -> CapturedSection:
        """截取单个章节"""
        key = element.get("id") or "?"
        width = page.rendered_width(element)

        with page.scratch_container(width) as scratch:
            try:
                clone = copy.deepcopy(element)
                # 克隆不保留id，避免与在线元素重名
                clone.attrib.pop("id", None)
                clone.set(CAPTURE_SOURCE_ATTR, key)
                clone.tail = None
                scratch.append(clone)

                await asyncio.sleep(self.settle_delay)

                await self.vectors.normalize(page, element, clone)
                bitmap = await self.rasterizer.rasterize(page.capture_markup(scratch, width), width)
                if bitmap.width == 0 or bitmap.height == 0:
                    raise CaptureError(key, "截图为空")
            except CaptureError:
                raise
            except Exception as e:
                raise CaptureError(key, str(e) or type(e).__name__) from e

        logger.debug(f"章节截图完成: {key} {bitmap.width}x{bitmap.height}")
        return CapturedSection(key=key, image=bitmap, width=bitmap.width, height=bitmap.height)
